"""capcheck probe harness.

Combines capability resolution, the probe registry, concurrent dispatch
and reporting into a single run.

Example usage:
    from capcheck.probes import NamespaceEnvironment, ProbeHarness, ProbeRegistry

    registry = ProbeRegistry()

    @registry.probe("cache.iscached", dependencies=["cache.invalidate"])
    def check_iscached():
        assert host.cache.iscached(obj), "Object should be cached"

    env = NamespaceEnvironment(host, name="host-1.2")
    summary = await ProbeHarness(registry, env).run()
"""

from .catalog import CatalogFile, ProbeSpec, build_registry, import_callback, load_catalog
from .diagnostics import check_aliases, check_dependencies
from .exceptions import (
    CallbackImportError,
    CatalogError,
    CatalogNotFoundError,
    EnvironmentLoadError,
    InvalidPathError,
    ProbeError,
    RegistrationError,
    RunStateError,
)
from .executor import ProbeExecutor
from .harness import ProbeHarness
from .registry import ProbeCallback, ProbeDescriptor, ProbeRegistry
from .reporter import DEFAULT_TITLE, Markers, Reporter, ReportStyle
from .resolver import MISSING, CapabilityEnvironment, NamespaceEnvironment
from .result import FailureKind, ProbeOutcome, ProbeResult, RunSummary
from .scheduler import ProbeScheduler
from .state import RunState

__all__ = [
    # Environment
    "MISSING",
    "CapabilityEnvironment",
    "NamespaceEnvironment",
    # Registry
    "ProbeCallback",
    "ProbeDescriptor",
    "ProbeRegistry",
    # Catalog
    "CatalogFile",
    "ProbeSpec",
    "build_registry",
    "import_callback",
    "load_catalog",
    # Execution
    "ProbeExecutor",
    "ProbeScheduler",
    "RunState",
    "ProbeHarness",
    "check_aliases",
    "check_dependencies",
    # Results & reporting
    "FailureKind",
    "ProbeOutcome",
    "ProbeResult",
    "RunSummary",
    "DEFAULT_TITLE",
    "Markers",
    "Reporter",
    "ReportStyle",
    # Exceptions
    "ProbeError",
    "InvalidPathError",
    "RegistrationError",
    "CatalogError",
    "CatalogNotFoundError",
    "CallbackImportError",
    "EnvironmentLoadError",
    "RunStateError",
]
