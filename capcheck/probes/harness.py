"""Harness entry point for capcheck.

Wires registry, environment, scheduler and reporter together for one run.

Example usage:
    from capcheck.probes import NamespaceEnvironment, ProbeHarness, ProbeRegistry

    registry = ProbeRegistry()
    registry.register("json.dumps", aliases=["json.encode"], callback=lambda: None)

    env = NamespaceEnvironment.from_module("json")
    summary = ProbeHarness(registry, env).run_sync()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TextIO

from .executor import ProbeExecutor
from .registry import ProbeRegistry
from .reporter import DEFAULT_TITLE, Reporter, ReportStyle
from .resolver import CapabilityEnvironment
from .result import RunSummary
from .scheduler import ProbeScheduler
from .state import RunState

if TYPE_CHECKING:
    from ..config.settings import Settings

logger = logging.getLogger("capcheck.probes.harness")


class ProbeHarness:
    """Runs every registered probe concurrently and reports the totals."""

    def __init__(
        self,
        registry: ProbeRegistry,
        env: CapabilityEnvironment,
        title: str = DEFAULT_TITLE,
        environment_name: str | None = None,
        style: ReportStyle = ReportStyle.EMOJI,
        stream: TextIO | None = None,
        quiet: bool = False,
        sync_in_thread: bool = False,
    ):
        """Initialize the harness.

        Args:
            registry: Probes to run
            env: Environment under test
            title: Report title
            environment_name: Name shown in the header (defaults to env.name)
            style: Report marker style
            stream: Report output stream (defaults to stdout)
            quiet: Suppress line output
            sync_in_thread: Run plain callbacks in worker threads
        """
        self.registry = registry
        self.env = env
        self.title = title
        self.environment_name = environment_name or getattr(env, "name", None) or "unknown"
        self.style = style
        self.stream = stream
        self.quiet = quiet
        self.sync_in_thread = sync_in_thread

    @classmethod
    def from_settings(
        cls,
        registry: ProbeRegistry,
        env: CapabilityEnvironment,
        settings: Settings,
        **overrides,
    ) -> ProbeHarness:
        """Create a harness configured from application settings."""
        options = {
            "title": settings.report_title,
            "environment_name": settings.environment_name,
            "style": settings.report_style,
            "sync_in_thread": settings.sync_in_thread,
        }
        options.update(overrides)
        return cls(registry, env, **options)

    async def run(self) -> RunSummary:
        """Run all probes and return the final summary."""
        state = RunState()
        reporter = Reporter(
            self.environment_name,
            title=self.title,
            style=self.style,
            stream=self.stream,
            quiet=self.quiet,
        )
        scheduler = ProbeScheduler(
            ProbeExecutor(self.env, sync_in_thread=self.sync_in_thread),
            state,
            reporter,
        )

        catalog = self.registry.catalog()
        logger.info(f"Running {len(catalog)} probes against {self.environment_name}")

        reporter.header()
        scheduler.dispatch_all(catalog)
        summary = await reporter.await_completion_and_report(state)

        logger.info(
            f"Run finished: {summary.total_passes} passed, {summary.total_fails} failed, "
            f"{summary.total_skipped} skipped"
        )
        return summary

    def run_sync(self) -> RunSummary:
        """Run all probes in a fresh event loop."""
        return asyncio.run(self.run())
