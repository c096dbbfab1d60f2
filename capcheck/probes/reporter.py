"""Line-oriented report output for capcheck.

The header is printed as soon as a run starts; per-probe lines are printed
as probes finish; the footer is printed only after the run state reports
no active probes.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from .diagnostics import format_missing_aliases, format_missing_dependencies
from .result import FailureKind, ProbeResult, RunSummary
from .state import RunState

DEFAULT_TITLE = "BNC Environment Check"


class ReportStyle(str, Enum):
    """Marker set used in the report."""

    EMOJI = "emoji"
    ASCII = "ascii"


@dataclass(frozen=True)
class Markers:
    """The four status markers."""

    passed: str
    failed: str
    no_test: str
    warning: str

    @classmethod
    def for_style(cls, style: ReportStyle) -> Markers:
        if style == ReportStyle.ASCII:
            return cls(passed="[PASS]", failed="[FAIL]", no_test="[SKIP]", warning="[WARN]")
        return cls(passed="✅", failed="❌", no_test="🚫", warning="⚠️")


class Reporter:
    """Writes the textual report for one run."""

    def __init__(
        self,
        environment: str,
        title: str = DEFAULT_TITLE,
        style: ReportStyle = ReportStyle.EMOJI,
        stream: TextIO | None = None,
        quiet: bool = False,
    ):
        """Initialize the reporter.

        Args:
            environment: Name of the environment under test
            title: Report title used in header and footer
            style: Marker style
            stream: Output stream (defaults to stdout at write time)
            quiet: Suppress all line output (used for JSON mode)
        """
        self.environment = environment
        self.title = title
        self.markers = Markers.for_style(ReportStyle(style))
        self._stream = stream
        self.quiet = quiet

    def _write(self, line: str = "") -> None:
        if self.quiet:
            return
        print(line, file=self._stream or sys.stdout)

    def header(self) -> None:
        """Print the environment header and the marker legend."""
        m = self.markers
        self._write()
        self._write(f"{self.title} - {self.environment}")
        self._write(
            f"{m.passed} - Pass, {m.failed} - Fail, {m.no_test} - No test, {m.warning} - Missing aliases"
        )
        self._write()

    def report_result(self, result: ProbeResult) -> None:
        """Print the lines for one finished probe."""
        m = self.markers

        if result.is_skip:
            self._write(f"{m.no_test} {result.name}")
        elif result.is_pass:
            note = f" • {result.note}" if result.note else ""
            self._write(f"{m.passed} {result.name}{note}")
        elif result.failure == FailureKind.MISSING_CAPABILITY:
            self._write(f"{m.failed} {result.name}")
        else:
            if result.missing_dependencies:
                self._write(
                    f"{m.warning} {format_missing_dependencies(result.name, result.missing_dependencies)}"
                )
            self._write(f"{m.failed} {result.name} failed: {result.message}")

        if result.missing_aliases:
            self._write(f"{m.warning} {format_missing_aliases(result.missing_aliases)}")

    def footer(self, summary: RunSummary) -> None:
        """Print the final counts."""
        m = self.markers
        self._write()
        self._write(f"{self.title} Summary")
        if summary.executed == 0:
            self._write(f"{m.passed} Pass with a 0% success rate (no tests executed)")
        else:
            self._write(
                f"{m.passed} Pass with a {summary.success_rate}% success rate ({summary.out_of})"
            )
        self._write(f"{m.failed} {summary.total_fails} tests failed")
        self._write(f"{m.warning} {summary.total_undefined_alias_groups} missing aliases")

    async def await_completion_and_report(self, state: RunState) -> RunSummary:
        """Wait for every dispatched probe to finish, then print the footer.

        Args:
            state: Run state shared with the scheduler

        Returns:
            Snapshot of the final counters
        """
        await state.wait_idle()
        summary = state.snapshot(self.environment)
        self.footer(summary)
        return summary
