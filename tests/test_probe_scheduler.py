"""Tests for concurrent probe dispatch."""

import asyncio
import io
import random
from unittest.mock import MagicMock

import pytest

from capcheck.probes.executor import ProbeExecutor
from capcheck.probes.registry import ProbeDescriptor, ProbeRegistry
from capcheck.probes.reporter import Reporter
from capcheck.probes.resolver import NamespaceEnvironment
from capcheck.probes.scheduler import ProbeScheduler
from capcheck.probes.state import RunState


def make_env(*names: str) -> NamespaceEnvironment:
    return NamespaceEnvironment({name: (lambda: None) for name in names}, name="test-host")


def make_scheduler(env, reporter=None) -> tuple[ProbeScheduler, RunState]:
    state = RunState()
    return ProbeScheduler(ProbeExecutor(env), state, reporter), state


def failing():
    raise AssertionError("boom")


class TestDispatch:
    """Tests for ProbeScheduler.dispatch."""

    @pytest.mark.asyncio
    async def test_dispatch_increments_before_running(self) -> None:
        scheduler, state = make_scheduler(make_env("x"))

        task = scheduler.dispatch(ProbeDescriptor(name="x", callback=lambda: None))

        assert state.active_count == 1
        assert scheduler.pending == 1
        await task
        assert state.active_count == 0
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_scenario_pass(self) -> None:
        scheduler, state = make_scheduler(make_env("x"))
        scheduler.dispatch(ProbeDescriptor(name="x", callback=lambda: None))
        await state.wait_idle()
        assert state.total_passes == 1
        assert state.total_fails == 0

    @pytest.mark.asyncio
    async def test_scenario_no_test(self) -> None:
        scheduler, state = make_scheduler(make_env())
        scheduler.dispatch(ProbeDescriptor(name="y"))
        await state.wait_idle()
        assert state.total_passes == 0
        assert state.total_fails == 0
        assert state.total_skipped == 1

    @pytest.mark.asyncio
    async def test_scenario_callback_error_with_missing_dependency(self) -> None:
        scheduler, state = make_scheduler(make_env("z"))
        scheduler.dispatch(ProbeDescriptor(name="z", callback=failing, dependencies=("w",)))
        await state.wait_idle()

        assert state.total_fails == 1
        (result,) = state.results
        assert result.missing_dependencies == ["w"]

    @pytest.mark.asyncio
    async def test_scenario_missing_alias(self) -> None:
        scheduler, state = make_scheduler(make_env("a", "a1"))
        scheduler.dispatch(ProbeDescriptor(name="a", aliases=("a1", "a2"), callback=lambda: None))
        await state.wait_idle()

        assert state.total_passes == 1
        assert state.total_undefined_alias_groups == 1

    @pytest.mark.asyncio
    async def test_raising_alias_lookup_leaves_outcome_alone(self) -> None:
        """An alias whose lookup raises is reported missing, nothing more."""

        class Host:
            @property
            def alt(self):
                raise RuntimeError("getter exploded")

        env = NamespaceEnvironment({"x": 1, "y": 2, "host": Host()}, name="test-host")
        scheduler, state = make_scheduler(env)

        scheduler.dispatch(ProbeDescriptor(name="x", aliases=("host.alt",), callback=lambda: None))
        scheduler.dispatch(ProbeDescriptor(name="y", aliases=("host.alt",)))
        await asyncio.wait_for(state.wait_idle(), timeout=1)

        assert state.total_passes == 1
        assert state.total_fails == 0
        assert state.total_skipped == 1
        assert state.total_undefined_alias_groups == 2
        assert all(r.missing_aliases == ["host.alt"] for r in state.results)

    @pytest.mark.asyncio
    async def test_unexpected_error_is_isolated(self) -> None:
        """An error outside the callback still completes the unit."""
        env = MagicMock()
        env.is_present.side_effect = RuntimeError("resolver exploded")
        scheduler, state = make_scheduler(env)

        scheduler.dispatch(ProbeDescriptor(name="x", callback=lambda: None))
        scheduler.dispatch(ProbeDescriptor(name="y", callback=lambda: None))
        await asyncio.wait_for(state.wait_idle(), timeout=1)

        assert state.active_count == 0
        assert state.total_fails == 2
        assert all(r.message == "resolver exploded" for r in state.results)

    @pytest.mark.asyncio
    async def test_reporter_failure_does_not_leak_active_count(self) -> None:
        reporter = MagicMock()
        reporter.report_result.side_effect = OSError("stdout closed")
        scheduler, state = make_scheduler(make_env("x"), reporter)

        scheduler.dispatch(ProbeDescriptor(name="x", callback=lambda: None))
        await asyncio.wait_for(state.wait_idle(), timeout=1)

        assert state.total_passes == 1


class TestConcurrency:
    """Tests for the fan-out behaviour."""

    @pytest.mark.asyncio
    async def test_units_run_concurrently(self) -> None:
        """Every unit is started before any of them finishes."""
        started = 0
        release = asyncio.Event()
        names = [f"p{i}" for i in range(5)]

        async def check():
            nonlocal started
            started += 1
            if started == len(names):
                release.set()
            await release.wait()

        scheduler, state = make_scheduler(make_env(*names))
        scheduler.dispatch_all(ProbeDescriptor(name=n, callback=check) for n in names)
        await asyncio.wait_for(state.wait_idle(), timeout=1)

        assert state.total_passes == len(names)

    @pytest.mark.asyncio
    async def test_ten_probes_half_fail(self) -> None:
        registry = ProbeRegistry()
        names = [f"cap{i}" for i in range(10)]

        def make_check(i: int):
            async def check():
                await asyncio.sleep(random.random() / 100)
                if i % 2:
                    raise AssertionError(f"probe {i} failed")

            return check

        for i, name in enumerate(names):
            registry.register(name, callback=make_check(i))

        stream = io.StringIO()
        reporter = Reporter("test-host", stream=stream)
        scheduler, state = make_scheduler(make_env(*names), reporter)
        scheduler.dispatch_all(registry.catalog())
        summary = await reporter.await_completion_and_report(state)

        assert summary.total_passes == 5
        assert summary.total_fails == 5
        assert summary.success_rate == 50
        assert "(5 out of 10)" in stream.getvalue()

    @pytest.mark.asyncio
    async def test_pass_plus_fail_equals_probes_with_callbacks(self) -> None:
        present = [f"c{i}" for i in range(0, 30, 2)]
        env = make_env(*present)
        descriptors = []
        for i in range(30):
            name = f"c{i}"
            if i % 3 == 0:
                descriptors.append(ProbeDescriptor(name=name))
            elif i % 5 == 0:
                descriptors.append(ProbeDescriptor(name=name, callback=failing))
            else:
                descriptors.append(ProbeDescriptor(name=name, callback=lambda: None))

        scheduler, state = make_scheduler(env)
        scheduler.dispatch_all(descriptors)
        await state.wait_idle()

        with_callback = sum(1 for d in descriptors if d.has_test)
        without_callback = len(descriptors) - with_callback
        assert state.total_passes + state.total_fails == with_callback
        assert state.total_skipped == without_callback
        assert state.active_count == 0

    @pytest.mark.asyncio
    async def test_duplicate_names_each_run(self) -> None:
        calls = []
        scheduler, state = make_scheduler(make_env("x"))
        scheduler.dispatch(ProbeDescriptor(name="x", callback=lambda: calls.append(1)))
        scheduler.dispatch(ProbeDescriptor(name="x", callback=lambda: calls.append(2)))
        await state.wait_idle()
        assert sorted(calls) == [1, 2]
        assert state.total_passes == 2
