"""Shared run state for capcheck.

RunState holds the counters every probe task updates on completion. All
mutations that must wake the reporter go through one asyncio.Condition,
which also serves as the run's wait-group.
"""

from __future__ import annotations

import asyncio
import logging

from .exceptions import RunStateError
from .result import ProbeResult, RunSummary

logger = logging.getLogger("capcheck.probes.state")


class RunState:
    """Counters and completion barrier for a single harness run."""

    def __init__(self):
        self.total_passes = 0
        self.total_fails = 0
        self.total_skipped = 0
        self.total_undefined_alias_groups = 0
        self.active_count = 0
        self._results: list[ProbeResult] = []
        self._condition = asyncio.Condition()

    def begin(self, name: str) -> None:
        """Mark one probe as dispatched.

        Runs synchronously on the event loop thread, so it cannot interleave
        with another begin() or with a completion.
        """
        self.active_count += 1
        logger.debug(f"Dispatched {name} (active={self.active_count})")

    async def complete(self, name: str, result: ProbeResult | None) -> None:
        """Record a finished probe and mark it inactive.

        Args:
            name: Probe name
            result: Final result, or None when the unit produced nothing

        Raises:
            RunStateError: If more probes complete than were dispatched
        """
        async with self._condition:
            if self.active_count <= 0:
                raise RunStateError("completion without a matching dispatch", name)

            if result is not None:
                self._apply(result)
            self.active_count -= 1
            logger.debug(f"Completed {name} (active={self.active_count})")
            self._condition.notify_all()

    def _apply(self, result: ProbeResult) -> None:
        if result.is_pass:
            self.total_passes += 1
        elif result.is_fail:
            self.total_fails += 1
        else:
            self.total_skipped += 1

        if result.has_missing_aliases:
            self.total_undefined_alias_groups += 1

        self._results.append(result)

    async def wait_idle(self) -> None:
        """Suspend until every dispatched probe has completed."""
        async with self._condition:
            await self._condition.wait_for(lambda: self.active_count == 0)

    @property
    def results(self) -> list[ProbeResult]:
        """Results in completion order."""
        return list(self._results)

    def snapshot(self, environment: str) -> RunSummary:
        """Freeze the current counters into a RunSummary."""
        return RunSummary(
            environment=environment,
            total_passes=self.total_passes,
            total_fails=self.total_fails,
            total_skipped=self.total_skipped,
            total_undefined_alias_groups=self.total_undefined_alias_groups,
            results=tuple(self._results),
        )
