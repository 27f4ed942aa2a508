"""
Tests for the Shutdown Coordinator.

These tests verify:
1. RUNNING -> SHUTTING_DOWN -> TERMINATED transitions
2. Repeated signals/requests produce a single shutdown sequence
3. Tracked handlers are sent SIGTERM, best-effort
4. The instance lock is released and cleanups run
"""

import os
import signal
from pathlib import Path

from fakes import FakeProcess

from jellydrop.jobs.models import HandlerKind, JobRecord
from jellydrop.jobs.registry import JobRegistry
from jellydrop.runtime.instance import InstanceGuard
from jellydrop.runtime.shutdown import ShutdownCoordinator, ShutdownState


def _registry_with(*processes: FakeProcess) -> JobRegistry:
    registry = JobRegistry()
    for index, process in enumerate(processes):
        registry.add(JobRecord(item_id=f"/drop/{index}.mkv", handler=HandlerKind.MEDIA_ITEM, process=process))
    return registry


class TestShutdownRequest:
    def test_initial_state(self):
        coordinator = ShutdownCoordinator(JobRegistry())

        assert coordinator.state is ShutdownState.RUNNING
        assert coordinator.accepting_dispatch is True
        assert not coordinator.stop_event.is_set()

    def test_first_request_wins(self):
        coordinator = ShutdownCoordinator(JobRegistry())

        assert coordinator.request("SIGINT") is True
        assert coordinator.request("SIGTERM") is False
        assert coordinator.reason == "SIGINT"
        assert coordinator.state is ShutdownState.SHUTTING_DOWN
        assert coordinator.accepting_dispatch is False
        assert coordinator.stop_event.is_set()

    def test_signal_handler_routes_to_request(self):
        coordinator = ShutdownCoordinator(JobRegistry())

        coordinator._handle_signal(signal.SIGTERM, None)
        coordinator._handle_signal(signal.SIGINT, None)

        assert coordinator.reason == "received SIGTERM"

    def test_real_signal_delivery(self):
        coordinator = ShutdownCoordinator(JobRegistry())
        coordinator.install_signal_handlers()
        try:
            os.kill(os.getpid(), signal.SIGTERM)
            assert coordinator.stop_event.wait(5)
        finally:
            coordinator.restore_signal_handlers()

        assert coordinator.state is ShutdownState.SHUTTING_DOWN
        assert signal.getsignal(signal.SIGTERM) is not coordinator._handle_signal


class TestShutdownComplete:
    def test_terminates_live_handlers(self):
        running = FakeProcess()
        finished = FakeProcess(returncode=0)
        coordinator = ShutdownCoordinator(_registry_with(running, finished))

        assert coordinator.complete() == 0
        assert running.terminate_calls == 1
        assert finished.terminate_calls == 0
        assert coordinator.state is ShutdownState.TERMINATED

    def test_double_signal_single_sequence(self):
        running = FakeProcess()
        cleanups = []
        coordinator = ShutdownCoordinator(_registry_with(running))
        coordinator.add_cleanup("count", lambda: cleanups.append(1))

        coordinator._handle_signal(signal.SIGINT, None)
        coordinator._handle_signal(signal.SIGINT, None)
        coordinator.complete()
        coordinator.complete()

        assert running.terminate_calls == 1
        assert cleanups == [1]

    def test_vanished_process_tolerated(self):
        gone = FakeProcess()
        gone.terminate_error = ProcessLookupError()
        other = FakeProcess()
        coordinator = ShutdownCoordinator(_registry_with(gone, other))

        assert coordinator.complete() == 0
        assert other.terminate_calls == 1

    def test_unpollable_process_tolerated(self):
        broken = FakeProcess()
        broken.poll_error = ChildProcessError()
        coordinator = ShutdownCoordinator(_registry_with(broken))

        assert coordinator.complete() == 0

    def test_failing_cleanup_does_not_stop_sequence(self, tmp_path: Path):
        guard = InstanceGuard(tmp_path)
        guard.acquire()
        ran = []
        coordinator = ShutdownCoordinator(JobRegistry(), guard)
        coordinator.add_cleanup("broken", lambda: 1 / 0)
        coordinator.add_cleanup("after", lambda: ran.append("after"))

        coordinator.complete()

        assert ran == ["after"]
        assert not guard.held

    def test_releases_lock_for_next_instance(self, tmp_path: Path):
        guard = InstanceGuard(tmp_path)
        guard.acquire()

        ShutdownCoordinator(JobRegistry(), guard).complete()

        successor = InstanceGuard(tmp_path)
        successor.acquire()
        successor.release()

    def test_records_left_for_reaper(self):
        """The coordinator signals handlers but never removes registry entries."""
        registry = _registry_with(FakeProcess())

        ShutdownCoordinator(registry).complete()

        assert registry.count() == 1
