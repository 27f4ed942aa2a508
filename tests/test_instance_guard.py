"""
Tests for the single-instance lock.
"""

import os
import subprocess
import sys
import threading
from pathlib import Path

import pytest

from jellydrop.runtime.errors import AlreadyRunningError, LockUnavailableError
from jellydrop.runtime.instance import LOCK_FILENAME, InstanceGuard


class TestInstanceGuard:
    """Tests for acquire/release semantics."""

    def test_acquire_creates_state_dir_and_writes_pid(self, tmp_path: Path):
        state_dir = tmp_path / "state" / "nested"
        guard = InstanceGuard(state_dir)

        handle = guard.acquire()
        try:
            assert handle.held
            assert (state_dir / LOCK_FILENAME).read_text() == str(os.getpid())
        finally:
            guard.release()

    def test_second_guard_refused(self, tmp_path: Path):
        first = InstanceGuard(tmp_path)
        first.acquire()
        try:
            with pytest.raises(AlreadyRunningError) as exc_info:
                InstanceGuard(tmp_path).acquire()
            assert exc_info.value.holder_pid == str(os.getpid())
        finally:
            first.release()

    def test_release_is_idempotent(self, tmp_path: Path):
        guard = InstanceGuard(tmp_path)
        handle = guard.acquire()

        guard.release()
        guard.release()
        handle.release()

        assert not guard.held

    def test_lock_reusable_after_release(self, tmp_path: Path):
        first = InstanceGuard(tmp_path)
        first.acquire()
        first.release()

        second = InstanceGuard(tmp_path)
        second.acquire()
        try:
            assert second.held
        finally:
            second.release()

    def test_acquire_twice_on_same_guard_returns_same_handle(self, tmp_path: Path):
        guard = InstanceGuard(tmp_path)
        try:
            assert guard.acquire() is guard.acquire()
        finally:
            guard.release()

    def test_context_manager(self, tmp_path: Path):
        with InstanceGuard(tmp_path) as guard:
            assert guard.held
        assert not guard.held

    def test_unusable_state_dir(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(LockUnavailableError):
            InstanceGuard(blocker / "state").acquire()

    def test_concurrent_acquisitions_single_winner(self, tmp_path: Path):
        attempts = 8
        barrier = threading.Barrier(attempts)
        guards = [InstanceGuard(tmp_path) for _ in range(attempts)]
        winners = []
        refused = []

        def attempt(guard: InstanceGuard):
            barrier.wait()
            try:
                guard.acquire()
                winners.append(guard)
            except AlreadyRunningError:
                refused.append(guard)

        threads = [threading.Thread(target=attempt, args=(g,)) for g in guards]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        try:
            assert len(winners) == 1
            assert len(refused) == attempts - 1
        finally:
            for guard in winners:
                guard.release()

    @pytest.mark.subprocess
    def test_lock_held_by_other_process(self, tmp_path: Path):
        lock_path = tmp_path / LOCK_FILENAME
        holder_script = (
            "import fcntl, os, sys, time\n"
            f"fd = os.open({str(lock_path)!r}, os.O_CREAT | os.O_RDWR, 0o644)\n"
            "fcntl.flock(fd, fcntl.LOCK_EX)\n"
            "os.write(fd, str(os.getpid()).encode())\n"
            "print('locked', flush=True)\n"
            "time.sleep(30)\n"
        )
        holder = subprocess.Popen([sys.executable, "-c", holder_script], stdout=subprocess.PIPE, text=True)
        try:
            assert holder.stdout.readline().strip() == "locked"

            with pytest.raises(AlreadyRunningError) as exc_info:
                InstanceGuard(tmp_path).acquire()
            assert exc_info.value.holder_pid == str(holder.pid)
        finally:
            holder.kill()
            holder.wait()
            holder.stdout.close()

        # The kernel drops the lock with the dead holder
        guard = InstanceGuard(tmp_path)
        guard.acquire()
        guard.release()
