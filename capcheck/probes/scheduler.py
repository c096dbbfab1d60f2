"""Concurrent probe dispatch for capcheck.

Each descriptor becomes its own asyncio task. Dispatch returns immediately;
completion order between probes is unspecified.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from .executor import ProbeExecutor, error_message
from .registry import ProbeDescriptor
from .reporter import Reporter
from .result import ProbeResult
from .state import RunState

logger = logging.getLogger("capcheck.probes.scheduler")


class ProbeScheduler:
    """Fans probes out as independent tasks and records their outcomes."""

    def __init__(
        self,
        executor: ProbeExecutor,
        state: RunState,
        reporter: Reporter | None = None,
    ):
        self.executor = executor
        self.state = state
        self.reporter = reporter
        self._tasks: set[asyncio.Task[None]] = set()

    def dispatch(self, descriptor: ProbeDescriptor) -> asyncio.Task[None]:
        """Launch one probe without waiting for it.

        Must be called from within a running event loop.
        """
        self.state.begin(descriptor.name)
        task = asyncio.create_task(self._run_unit(descriptor), name=f"probe:{descriptor.name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def dispatch_all(self, catalog: Iterable[ProbeDescriptor]) -> list[asyncio.Task[None]]:
        """Dispatch every descriptor in catalog order."""
        return [self.dispatch(descriptor) for descriptor in catalog]

    @property
    def pending(self) -> int:
        """Number of unit tasks that have not finished."""
        return len(self._tasks)

    async def _run_unit(self, descriptor: ProbeDescriptor) -> None:
        result: ProbeResult | None = None
        try:
            try:
                result = await self.executor.run(descriptor)
            except Exception as e:
                logger.exception(f"Unexpected error running probe {descriptor.name}")
                result = ProbeResult.callback_error(descriptor.name, error_message(e))

            if self.reporter:
                try:
                    self.reporter.report_result(result)
                except Exception:
                    logger.exception(f"Failed to report result for {descriptor.name}")
        finally:
            await self.state.complete(descriptor.name, result)
