"""Tests for ProbeRegistry and ProbeDescriptor."""

import dataclasses
import logging

import pytest

from capcheck.probes.exceptions import RegistrationError
from capcheck.probes.registry import ProbeDescriptor, ProbeRegistry


class TestProbeDescriptor:
    """Tests for ProbeDescriptor."""

    def test_defaults(self) -> None:
        descriptor = ProbeDescriptor(name="gethui")
        assert descriptor.aliases == ()
        assert descriptor.dependencies == ()
        assert descriptor.callback is None
        assert descriptor.has_test is False

    def test_is_immutable(self) -> None:
        descriptor = ProbeDescriptor(name="gethui")
        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.name = "other"


class TestProbeRegistry:
    """Tests for ProbeRegistry."""

    def test_empty_registry(self) -> None:
        registry = ProbeRegistry()
        assert len(registry) == 0
        assert registry.catalog() == []

    def test_register_converts_sequences(self) -> None:
        registry = ProbeRegistry()
        descriptor = registry.register(
            "hookfunction",
            aliases=["replaceclosure"],
            callback=lambda: None,
            dependencies=["clonefunction"],
        )
        assert descriptor.aliases == ("replaceclosure",)
        assert descriptor.dependencies == ("clonefunction",)
        assert descriptor.has_test is True
        assert "hookfunction" in registry

    def test_catalog_preserves_order(self) -> None:
        registry = ProbeRegistry()
        for name in ["c", "a", "b"]:
            registry.register(name)
        assert registry.names() == ["c", "a", "b"]
        assert [d.name for d in registry] == ["c", "a", "b"]

    def test_catalog_is_a_copy(self) -> None:
        registry = ProbeRegistry()
        registry.register("a")
        catalog = registry.catalog()
        catalog.clear()
        assert len(registry) == 1

    def test_empty_name_rejected(self) -> None:
        registry = ProbeRegistry()
        with pytest.raises(RegistrationError):
            registry.register("")

    @pytest.mark.parametrize("name", ["a.", ".a", "a..b"])
    def test_malformed_name_rejected(self, name: str) -> None:
        registry = ProbeRegistry()
        with pytest.raises(RegistrationError):
            registry.register(name, callback=lambda: None)
        assert len(registry) == 0

    @pytest.mark.parametrize("alias", ["x.alt.", "y..alt", ""])
    def test_malformed_alias_rejected(self, alias: str) -> None:
        registry = ProbeRegistry()
        with pytest.raises(RegistrationError) as exc_info:
            registry.register("x", aliases=[alias], callback=lambda: None)
        assert exc_info.value.probe_name == "x"
        assert "alias" in str(exc_info.value)
        assert len(registry) == 0

    @pytest.mark.parametrize("dependency", ["cache.", "cache..invalidate"])
    def test_malformed_dependency_rejected(self, dependency: str) -> None:
        registry = ProbeRegistry()
        with pytest.raises(RegistrationError) as exc_info:
            registry.register("cache.iscached", callback=lambda: None, dependencies=[dependency])
        assert "dependency" in str(exc_info.value)
        assert len(registry) == 0

    def test_add_validates_descriptor_paths(self) -> None:
        """Descriptors built by hand get the same path checks."""
        registry = ProbeRegistry()
        with pytest.raises(RegistrationError):
            registry.add(ProbeDescriptor(name="y", aliases=("y..alt",)))

    def test_bare_string_paths_are_single_entries(self) -> None:
        registry = ProbeRegistry()
        descriptor = registry.register(
            "json.dumps",
            aliases="json.encode",
            callback=lambda: None,
            dependencies="json.loads",
        )
        assert descriptor.aliases == ("json.encode",)
        assert descriptor.dependencies == ("json.loads",)

    def test_non_callable_callback_rejected(self) -> None:
        registry = ProbeRegistry()
        with pytest.raises(RegistrationError):
            registry.add(ProbeDescriptor(name="x", callback="not callable"))

    def test_duplicates_are_kept(self, caplog) -> None:
        """A name registered twice is dispatched twice."""
        registry = ProbeRegistry()
        with caplog.at_level(logging.DEBUG, logger="capcheck.probes.registry"):
            registry.register("dup")
            registry.register("dup")
        assert len(registry) == 2
        assert registry.names() == ["dup", "dup"]
        assert "more than once" in caplog.text

    def test_probe_decorator(self) -> None:
        registry = ProbeRegistry()

        @registry.probe("cache.iscached", dependencies=["cache.invalidate"])
        def check_iscached():
            return "ok"

        descriptor = registry.catalog()[0]
        assert descriptor.name == "cache.iscached"
        assert descriptor.callback is check_iscached
        assert descriptor.dependencies == ("cache.invalidate",)
        assert check_iscached() == "ok"
