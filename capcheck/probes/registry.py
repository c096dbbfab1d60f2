"""Probe registry for capcheck.

Holds the ordered catalog of probe descriptors for a run. Registration
order is preserved and is the order in which probes are dispatched.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass, field

from .exceptions import InvalidPathError, RegistrationError
from .resolver import split_path

logger = logging.getLogger("capcheck.probes.registry")

ProbeCallback = Callable[[], "str | None | Awaitable[str | None]"]


def _as_paths(paths: Iterable[str] | str) -> tuple[str, ...]:
    # A bare string is a single path, not a sequence of one-character paths
    if isinstance(paths, str):
        return (paths,)
    return tuple(paths)


@dataclass(frozen=True)
class ProbeDescriptor:
    """A single named probe.

    Attributes:
        name: Dotted capability path, also the probe's identifier
        aliases: Alternate names the capability may be exposed under
        callback: Zero-argument check, or None when no test exists
        dependencies: Capabilities the callback presumes are present
    """

    name: str
    aliases: tuple[str, ...] = field(default_factory=tuple)
    callback: ProbeCallback | None = None
    dependencies: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_test(self) -> bool:
        """Whether this probe carries an executable check."""
        return self.callback is not None


class ProbeRegistry:
    """Ordered catalog of probe descriptors.

    Duplicate names are kept: every registration is dispatched once, so a
    name registered twice runs twice and counts twice.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._descriptors: list[ProbeDescriptor] = []
        self._names: set[str] = set()

    def add(self, descriptor: ProbeDescriptor) -> ProbeDescriptor:
        """Add an already-built descriptor.

        Raises:
            RegistrationError: If the name, an alias or a dependency is not
                a valid dotted path, or the callback is not callable
        """
        if not descriptor.name:
            raise RegistrationError("probe name must be non-empty")

        self._check_path(descriptor.name, "name", descriptor.name)
        for alias in descriptor.aliases:
            self._check_path(alias, "alias", descriptor.name)
        for dependency in descriptor.dependencies:
            self._check_path(dependency, "dependency", descriptor.name)

        if descriptor.callback is not None and not callable(descriptor.callback):
            raise RegistrationError("callback must be callable", descriptor.name)

        if descriptor.name in self._names:
            logger.debug(f"Probe '{descriptor.name}' registered more than once")

        self._descriptors.append(descriptor)
        self._names.add(descriptor.name)
        logger.debug(f"Registered probe: {descriptor.name}")
        return descriptor

    def register(
        self,
        name: str,
        aliases: Iterable[str] = (),
        callback: ProbeCallback | None = None,
        dependencies: Iterable[str] = (),
    ) -> ProbeDescriptor:
        """Register a probe.

        Args:
            name: Dotted capability path being probed
            aliases: Alternate names to check for presence
            callback: Zero-argument check (sync or async), or None
            dependencies: Capabilities the callback relies on

        Returns:
            The registered descriptor
        """
        descriptor = ProbeDescriptor(
            name=name,
            aliases=_as_paths(aliases),
            callback=callback,
            dependencies=_as_paths(dependencies),
        )
        return self.add(descriptor)

    @staticmethod
    def _check_path(path: str, role: str, probe_name: str) -> None:
        try:
            split_path(path)
        except InvalidPathError as e:
            raise RegistrationError(f"invalid {role} '{path}': {e.reason}", probe_name)

    def probe(
        self,
        name: str,
        aliases: Iterable[str] = (),
        dependencies: Iterable[str] = (),
    ) -> Callable[[ProbeCallback], ProbeCallback]:
        """Decorator form of register().

        Example:
            @registry.probe("cache.iscached", dependencies=["cache.invalidate"])
            def check_iscached():
                ...
        """

        def decorator(func: ProbeCallback) -> ProbeCallback:
            self.register(name, aliases=aliases, callback=func, dependencies=dependencies)
            return func

        return decorator

    def catalog(self) -> list[ProbeDescriptor]:
        """Get the descriptors in registration order."""
        return list(self._descriptors)

    def names(self) -> list[str]:
        """Get registered probe names in registration order."""
        return [d.name for d in self._descriptors]

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[ProbeDescriptor]:
        return iter(list(self._descriptors))

    def __contains__(self, name: str) -> bool:
        return name in self._names
