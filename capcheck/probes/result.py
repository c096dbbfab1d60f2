"""Probe outcome types for capcheck.

Every dispatched probe ends in exactly one ProbeResult. A missing alias is
recorded alongside the outcome and never changes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ProbeOutcome(str, Enum):
    """Terminal state of a probe."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class FailureKind(str, Enum):
    """Why a probe failed."""

    MISSING_CAPABILITY = "missing_capability"
    CALLBACK_ERROR = "callback_error"


@dataclass
class ProbeResult:
    """Result of running a single probe.

    Attributes:
        name: Probe name
        outcome: Terminal outcome
        failure: Failure kind when outcome is FAILED
        message: Error message from a failing callback
        note: Optional note returned by a passing callback
        missing_dependencies: Dependencies found absent after a callback error
        missing_aliases: Declared aliases that did not resolve
        execution_time: Seconds spent in the callback
        timestamp: When the probe finished
    """

    name: str
    outcome: ProbeOutcome
    failure: FailureKind | None = None
    message: str | None = None
    note: str | None = None
    missing_dependencies: list[str] = field(default_factory=list)
    missing_aliases: list[str] = field(default_factory=list)
    execution_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def passed(cls, name: str, note: str | None = None, execution_time: float = 0.0) -> ProbeResult:
        """Create a passing result."""
        return cls(name=name, outcome=ProbeOutcome.PASSED, note=note, execution_time=execution_time)

    @classmethod
    def skipped(cls, name: str) -> ProbeResult:
        """Create a result for a probe with no test."""
        return cls(name=name, outcome=ProbeOutcome.SKIPPED)

    @classmethod
    def missing_capability(cls, name: str) -> ProbeResult:
        """Create a failure for a capability that does not resolve."""
        return cls(
            name=name,
            outcome=ProbeOutcome.FAILED,
            failure=FailureKind.MISSING_CAPABILITY,
        )

    @classmethod
    def callback_error(cls, name: str, message: str, execution_time: float = 0.0) -> ProbeResult:
        """Create a failure for a callback that raised."""
        return cls(
            name=name,
            outcome=ProbeOutcome.FAILED,
            failure=FailureKind.CALLBACK_ERROR,
            message=message,
            execution_time=execution_time,
        )

    @property
    def is_pass(self) -> bool:
        return self.outcome == ProbeOutcome.PASSED

    @property
    def is_fail(self) -> bool:
        return self.outcome == ProbeOutcome.FAILED

    @property
    def is_skip(self) -> bool:
        return self.outcome == ProbeOutcome.SKIPPED

    @property
    def has_missing_aliases(self) -> bool:
        return bool(self.missing_aliases)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "name": self.name,
            "outcome": self.outcome.value,
            "failure": self.failure.value if self.failure else None,
            "message": self.message,
            "note": self.note,
            "missing_dependencies": self.missing_dependencies,
            "missing_aliases": self.missing_aliases,
            "execution_time": self.execution_time,
            "timestamp": self.timestamp.isoformat(),
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


@dataclass(frozen=True)
class RunSummary:
    """Final counters of a completed run."""

    environment: str
    total_passes: int
    total_fails: int
    total_skipped: int
    total_undefined_alias_groups: int
    results: tuple[ProbeResult, ...] = ()

    @property
    def executed(self) -> int:
        """Probes that ran a test (skipped probes excluded)."""
        return self.total_passes + self.total_fails

    @property
    def success_rate(self) -> int:
        """Pass percentage of executed probes, 0 when nothing executed."""
        if self.executed == 0:
            return 0
        return round_half_up(self.total_passes / self.executed * 100)

    @property
    def out_of(self) -> str:
        return f"{self.total_passes} out of {self.executed}"

    @property
    def all_passed(self) -> bool:
        return self.total_fails == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert summary to dictionary for serialization."""
        return {
            "environment": self.environment,
            "results": [r.to_dict() for r in self.results],
            "summary": {
                "passed": self.total_passes,
                "failed": self.total_fails,
                "skipped": self.total_skipped,
                "executed": self.executed,
                "missing_alias_groups": self.total_undefined_alias_groups,
                "success_rate": self.success_rate,
            },
        }
