"""Fault-isolating probe execution for capcheck.

ProbeExecutor turns one descriptor into one ProbeResult. Whatever the
callback does, the executor returns a result instead of raising.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any

from .diagnostics import check_aliases, check_dependencies
from .registry import ProbeCallback, ProbeDescriptor
from .resolver import CapabilityEnvironment
from .result import ProbeResult

logger = logging.getLogger("capcheck.probes.executor")


def error_message(error: BaseException) -> str:
    """Human-readable message for a callback error."""
    return str(error) or type(error).__name__


def as_note(value: Any) -> str | None:
    """Convert a callback's return value into an optional note."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


class ProbeExecutor:
    """Runs single probes against a capability environment."""

    def __init__(self, env: CapabilityEnvironment, sync_in_thread: bool = False):
        """Initialize the executor.

        Args:
            env: Environment the probes are checked against
            sync_in_thread: Run plain (non-async) callbacks in a worker thread
        """
        self.env = env
        self.sync_in_thread = sync_in_thread

    async def invoke(self, callback: ProbeCallback) -> Any:
        """Call a probe callback, awaiting it if it is asynchronous."""
        if self.sync_in_thread and not inspect.iscoroutinefunction(callback):
            value = await asyncio.to_thread(callback)
        else:
            value = callback()

        if inspect.isawaitable(value):
            value = await value
        return value

    async def run(self, descriptor: ProbeDescriptor) -> ProbeResult:
        """Run one probe.

        Args:
            descriptor: The probe to run

        Returns:
            ProbeResult with outcome and diagnostics filled in
        """
        name = descriptor.name

        if descriptor.callback is None:
            result = ProbeResult.skipped(name)
        elif not self.env.is_present(name):
            result = ProbeResult.missing_capability(name)
        else:
            start_time = time.time()
            try:
                value = await self.invoke(descriptor.callback)
            except Exception as e:
                logger.debug(f"Probe {name} raised {type(e).__name__}: {e}")
                result = ProbeResult.callback_error(
                    name,
                    error_message(e),
                    execution_time=time.time() - start_time,
                )
                result.missing_dependencies = check_dependencies(descriptor.dependencies, self.env)
            else:
                result = ProbeResult.passed(
                    name,
                    note=as_note(value),
                    execution_time=time.time() - start_time,
                )

        result.missing_aliases = check_aliases(descriptor.aliases, self.env)
        return result
