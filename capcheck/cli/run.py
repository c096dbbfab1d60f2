"""capcheck run/list/resolve commands."""

import json
from pathlib import Path

from ..config.settings import get_settings
from ..probes import (
    NamespaceEnvironment,
    ProbeError,
    ProbeHarness,
    ReportStyle,
    build_registry,
    load_catalog,
)
from ..probes.resolver import MISSING


def _resolve_target(target: str | None, catalog_target: str | None, catalog_path: Path) -> str:
    chosen = target or catalog_target
    if not chosen:
        raise ProbeError(f"No target module given and {catalog_path} does not declare one")
    return chosen


def cmd_run(
    catalog_path: str,
    target: str | None = None,
    env_name: str | None = None,
    ascii_markers: bool = False,
    json_output: bool = False,
) -> int:
    """Run every probe in a catalog against a module.

    Args:
        catalog_path: Path to the YAML catalog
        target: Module to probe (overrides the catalog's target)
        env_name: Name shown in the report header
        ascii_markers: Use ASCII markers instead of emoji
        json_output: Print the summary as JSON instead of the line report

    Returns:
        Exit code (0 if no probe failed, 1 otherwise)
    """
    settings = get_settings()
    path = Path(catalog_path)

    catalog = load_catalog(path)
    module_name = _resolve_target(target, catalog.target, path)
    env = NamespaceEnvironment.from_module(module_name)
    registry = build_registry(catalog, search_path=path.resolve().parent)

    overrides = {"quiet": json_output}
    if catalog.title:
        overrides["title"] = catalog.title
    if env_name:
        overrides["environment_name"] = env_name
    if ascii_markers:
        overrides["style"] = ReportStyle.ASCII

    harness = ProbeHarness.from_settings(registry, env, settings, **overrides)
    summary = harness.run_sync()

    if json_output:
        print(json.dumps(summary.to_dict(), indent=2))

    return 0 if summary.all_passed else 1


def cmd_list(catalog_path: str, json_output: bool = False) -> int:
    """Print the probes declared in a catalog."""
    catalog = load_catalog(catalog_path)

    if json_output:
        print(json.dumps(catalog.model_dump(), indent=2))
        return 0

    if catalog.title:
        print(catalog.title)
        print("=" * len(catalog.title))

    for spec in catalog.probes:
        marker = "test" if spec.callback else "no test"
        print(f"{spec.name} ({marker})")
        if spec.aliases:
            print(f"    aliases: {', '.join(spec.aliases)}")
        if spec.dependencies:
            print(f"    dependencies: {', '.join(spec.dependencies)}")

    print(f"\n{len(catalog.probes)} probes")
    return 0


def cmd_resolve(path: str, target: str) -> int:
    """Check whether a dotted path resolves in a module.

    Returns:
        Exit code (0 if present, 1 if absent)
    """
    env = NamespaceEnvironment.from_module(target)
    value = env.resolve(path)

    if value is MISSING:
        print(f"{path}: absent")
        return 1

    print(f"{path}: present ({type(value).__name__})")
    return 0
