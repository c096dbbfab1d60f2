"""Capability resolution for capcheck.

A capability environment exposes named functionality addressed by dotted
paths such as ``cache.invalidate``. The harness only ever asks one question
of it: does this path resolve to something, and if so, what?
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from .exceptions import EnvironmentLoadError, InvalidPathError

logger = logging.getLogger("capcheck.probes.resolver")


class _Missing:
    """Sentinel type for an unresolved capability."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    """Split a dotted capability path into its segments.

    Args:
        path: Dotted path like "crypt.base64encode"

    Returns:
        List of path segments

    Raises:
        InvalidPathError: If the path is empty or has an empty segment
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(str(path), "path must be a non-empty string")

    segments = path.split(".")
    if any(not segment for segment in segments):
        raise InvalidPathError(path, "path contains an empty segment")

    return segments


def lookup_segment(container: Any, segment: str) -> Any:
    """Look up one path segment on a container.

    Mappings are indexed by key, everything else by attribute. A lookup
    that raises (a failing property, a broken __getattr__) counts as
    absent.
    """
    try:
        if isinstance(container, Mapping):
            return container.get(segment, MISSING)
        return getattr(container, segment, MISSING)
    except Exception as e:
        logger.debug(f"Lookup of '{segment}' raised {type(e).__name__}: {e}")
        return MISSING


@runtime_checkable
class CapabilityEnvironment(Protocol):
    """The host environment whose capabilities are being probed."""

    name: str

    def resolve(self, path: str) -> Any:
        """Resolve a dotted path, returning MISSING when absent."""
        ...

    def is_present(self, path: str) -> bool:
        """Check whether a dotted path resolves."""
        ...


class NamespaceEnvironment:
    """Capability environment backed by a nested namespace.

    The root may be a mapping, a module, or any object; each segment of a
    path is resolved against the value produced by the previous segment.
    A value of None counts as absent.

    Example:
        env = NamespaceEnvironment({"cache": {"invalidate": fn}}, name="test")
        env.resolve("cache.invalidate")  # -> fn
        env.resolve("cache.replace")     # -> MISSING
    """

    def __init__(self, root: Any, name: str = "namespace"):
        self._root = root
        self.name = name

    @classmethod
    def from_module(cls, module_name: str, name: str | None = None) -> NamespaceEnvironment:
        """Create an environment rooted at an importable Python module.

        Args:
            module_name: Dotted module name to import
            name: Display name (defaults to the module name)

        Raises:
            EnvironmentLoadError: If the module cannot be imported
        """
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise EnvironmentLoadError(module_name, str(e), cause=e)

        logger.debug(f"Loaded module environment: {module_name}")
        return cls(module, name=name or module_name)

    def resolve(self, path: str) -> Any:
        """Resolve a dotted path against the namespace.

        Args:
            path: Dotted capability path

        Returns:
            The resolved value, or MISSING if any segment is absent

        Raises:
            InvalidPathError: If the path is malformed
        """
        value = self._root
        for segment in split_path(path):
            value = lookup_segment(value, segment)
            if value is MISSING or value is None:
                return MISSING
        return value

    def is_present(self, path: str) -> bool:
        """Check whether a dotted path resolves to a value."""
        return self.resolve(path) is not MISSING

    def __repr__(self) -> str:
        return f"NamespaceEnvironment(name={self.name!r})"
