"""Probe harness exceptions for capcheck."""


class ProbeError(Exception):
    """Base exception for all harness-level errors."""

    def __init__(self, message: str, probe_name: str | None = None):
        self.probe_name = probe_name
        self.message = message
        super().__init__(f"[{probe_name}] {message}" if probe_name else message)


class InvalidPathError(ProbeError):
    """Raised when a capability path is not a valid dotted identifier."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid capability path '{path}': {reason}")


class RegistrationError(ProbeError):
    """Raised when a probe descriptor cannot be registered."""

    def __init__(self, reason: str, probe_name: str | None = None):
        self.reason = reason
        super().__init__(f"Cannot register probe: {reason}", probe_name)


class CatalogError(ProbeError):
    """Raised when a probe catalog file is invalid."""

    def __init__(self, catalog_path: str, errors: list[str] | str):
        self.catalog_path = catalog_path
        self.errors = [errors] if isinstance(errors, str) else errors
        errors_str = "; ".join(self.errors)
        super().__init__(f"Invalid catalog {catalog_path}: {errors_str}")


class CatalogNotFoundError(CatalogError):
    """Raised when a probe catalog file cannot be found."""

    def __init__(self, catalog_path: str):
        super().__init__(catalog_path, "file not found")


class CallbackImportError(ProbeError):
    """Raised when a probe callback reference cannot be imported."""

    def __init__(self, probe_name: str, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot import callback '{reference}': {reason}", probe_name)


class EnvironmentLoadError(ProbeError):
    """Raised when a capability environment cannot be constructed."""

    def __init__(self, target: str, reason: str, cause: Exception | None = None):
        self.target = target
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot load environment '{target}': {reason}")


class RunStateError(ProbeError):
    """Raised when run bookkeeping would violate its counting invariant."""

    def __init__(self, reason: str, probe_name: str | None = None):
        self.reason = reason
        super().__init__(f"Run state violation: {reason}", probe_name)
