"""capcheck CLI.

Provides command-line access to the probe harness:
- Running a probe catalog against a module
- Listing a catalog
- Resolving a single capability path
"""

import argparse
import logging
import sys

from .. import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="capcheck",
        description="capcheck - concurrent capability probes against a host environment",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from settings)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run a probe catalog",
        description="Run every probe in a catalog concurrently and print a summary",
    )
    run_parser.add_argument(
        "catalog",
        help="Path to the YAML probe catalog",
    )
    run_parser.add_argument(
        "--target",
        "-t",
        default=None,
        help="Module to probe (default: the catalog's target)",
    )
    run_parser.add_argument(
        "--env-name",
        default=None,
        help="Environment name shown in the report header",
    )
    run_parser.add_argument(
        "--ascii",
        action="store_true",
        dest="ascii_markers",
        help="Use ASCII status markers",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="List probes in a catalog",
    )
    list_parser.add_argument(
        "catalog",
        help="Path to the YAML probe catalog",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Check whether a capability path resolves",
    )
    resolve_parser.add_argument(
        "path",
        help="Dotted capability path",
    )
    resolve_parser.add_argument(
        "--target",
        "-t",
        required=True,
        help="Module to resolve against",
    )

    return parser


def configure_logging(level: str | None) -> None:
    """Configure root logging from the CLI flag or settings."""
    from ..config.settings import get_settings

    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        configure_logging(args.log_level)

        if args.command == "run":
            from .run import cmd_run

            return cmd_run(
                args.catalog,
                target=args.target,
                env_name=args.env_name,
                ascii_markers=args.ascii_markers,
                json_output=args.json_output,
            )
        elif args.command == "list":
            from .run import cmd_list

            return cmd_list(args.catalog, json_output=args.json_output)
        elif args.command == "resolve":
            from .run import cmd_resolve

            return cmd_resolve(args.path, target=args.target)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
