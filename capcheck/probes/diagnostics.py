"""Dependency and alias diagnostics for capcheck."""

from __future__ import annotations

from collections.abc import Iterable

from .resolver import CapabilityEnvironment


def find_missing(names: Iterable[str], env: CapabilityEnvironment) -> list[str]:
    """Return the names that do not resolve, in the order given."""
    return [name for name in names if not env.is_present(name)]


def check_dependencies(dependencies: Iterable[str], env: CapabilityEnvironment) -> list[str]:
    """Find declared dependencies that are absent.

    Only meaningful after a callback error: a missing dependency is the
    likely explanation for the failure. Never changes the outcome.
    """
    return find_missing(dependencies, env)


def check_aliases(aliases: Iterable[str], env: CapabilityEnvironment) -> list[str]:
    """Find declared aliases that are absent."""
    return find_missing(aliases, env)


def format_missing_dependencies(probe_name: str, missing: list[str]) -> str:
    return f"{probe_name} missing dependencies: {', '.join(missing)}"


def format_missing_aliases(missing: list[str]) -> str:
    return ", ".join(missing)
