"""
Tests for drop folder stability probing.

These tests verify:
1. (size, mtime) sampling of files and directories
2. A path is stable only after N consecutive unchanged samples
3. Any change resets the count
4. Vanished or missing paths are unstable, never errors
5. Shutdown interrupts a probe
"""

import threading
from pathlib import Path

import pytest

from fakes import RecordedWaits, sample, scripted_sampler

from jellydrop.watchfolders.stability import StabilityProber, sample_path


# -----------------------------------------------------------------------------
# Sampling
# -----------------------------------------------------------------------------

class TestSamplePath:
    """Tests for single (size, mtime) samples."""

    def test_file_sample_uses_size_and_mtime(self, tmp_path: Path):
        target = tmp_path / "movie.mkv"
        target.write_bytes(b"x" * 128)

        result = sample_path(target)

        assert result.size_bytes == 128
        assert result.mtime_ns == target.stat().st_mtime_ns

    def test_directory_size_is_sum_of_nested_files(self, tmp_path: Path):
        show = tmp_path / "Show.S01"
        (show / "extras").mkdir(parents=True)
        (show / "e01.mkv").write_bytes(b"a" * 100)
        (show / "e02.mkv").write_bytes(b"b" * 50)
        (show / "extras" / "sample.mkv").write_bytes(b"c" * 7)

        result = sample_path(show)

        assert result.size_bytes == 157
        assert result.mtime_ns == show.stat().st_mtime_ns

    def test_empty_directory_has_zero_size(self, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()

        assert sample_path(empty).size_bytes == 0

    def test_missing_path_returns_none(self, tmp_path: Path):
        assert sample_path(tmp_path / "gone.mkv") is None

    def test_dangling_symlink_returns_none(self, tmp_path: Path):
        link = tmp_path / "link.mkv"
        link.symlink_to(tmp_path / "nowhere.mkv")

        assert sample_path(link) is None


# -----------------------------------------------------------------------------
# Probing
# -----------------------------------------------------------------------------

class TestStabilityProber:
    """Tests for the blocking stability probe."""

    def test_zero_byte_file_is_stable_after_three_intervals(self, tmp_path: Path):
        """Checks=3, interval=1s: stable after 3 seconds of sampling."""
        target = tmp_path / "empty.mkv"
        target.touch()
        waits = RecordedWaits()
        prober = StabilityProber(required_checks=3, interval_seconds=1.0, wait=waits)

        result = prober.probe(target)

        assert result.is_stable is True
        assert result.size_bytes == 0
        assert result.check_count == 3
        assert waits.calls == [1.0, 1.0, 1.0]
        assert waits.total >= 3.0

    def test_stable_only_after_exactly_required_checks(self):
        waits = RecordedWaits()
        prober = StabilityProber(
            required_checks=3,
            interval_seconds=2.0,
            sampler=scripted_sampler(sample(10), sample(10), sample(10), sample(10)),
            wait=waits,
        )

        result = prober.probe("/drop/movie.mkv")

        assert result.is_stable is True
        assert result.samples_taken == 4
        assert len(waits.calls) == 3

    def test_change_resets_count_and_gives_up(self):
        """A change mid-probe means the count can no longer reach N in this window."""
        waits = RecordedWaits()
        prober = StabilityProber(
            required_checks=3,
            interval_seconds=1.0,
            sampler=scripted_sampler(sample(10), sample(10), sample(20), sample(20), sample(20)),
            wait=waits,
        )

        result = prober.probe("/drop/movie.mkv")

        assert result.is_stable is False
        assert result.check_count == 0
        assert result.samples_taken == 3
        assert len(waits.calls) == 2

    def test_mtime_change_alone_resets(self):
        prober = StabilityProber(
            required_checks=2,
            interval_seconds=1.0,
            sampler=scripted_sampler(sample(10, 1), sample(10, 2), sample(10, 2)),
            wait=RecordedWaits(),
        )

        assert prober.is_stable("/drop/movie.mkv") is False

    @pytest.mark.parametrize(
        "sizes, expected",
        [
            ([5, 5, 5, 5], True),
            ([5, 5, 5, 6], False),
            ([5, 6, 6, 6], False),
            ([5, 5, 6, 6], False),
            ([0, 0, 0, 0], True),
        ],
    )
    def test_stable_iff_every_sample_matches_baseline(self, sizes, expected):
        prober = StabilityProber(
            required_checks=3,
            interval_seconds=1.0,
            sampler=scripted_sampler(*[sample(s) for s in sizes]),
            wait=RecordedWaits(),
        )

        assert prober.is_stable("/drop/item") is expected

    def test_missing_path_is_unstable(self, tmp_path: Path):
        waits = RecordedWaits()
        prober = StabilityProber(required_checks=3, interval_seconds=1.0, wait=waits)

        result = prober.probe(tmp_path / "missing.mkv")

        assert result.is_stable is False
        assert waits.calls == []

    def test_path_vanishing_mid_probe_is_unstable(self):
        prober = StabilityProber(
            required_checks=3,
            interval_seconds=1.0,
            sampler=scripted_sampler(sample(10), sample(10), None),
            wait=RecordedWaits(),
        )

        result = prober.probe("/drop/movie.mkv")

        assert result.is_stable is False
        assert "vanished" in result.reason

    def test_growing_file_is_not_stable(self, tmp_path: Path):
        target = tmp_path / "download.mkv"
        target.write_bytes(b"x")

        def append_while_waiting(seconds: float) -> bool:
            with open(target, "ab") as fh:
                fh.write(b"more")
            return False

        prober = StabilityProber(required_checks=3, interval_seconds=1.0, wait=append_while_waiting)

        assert prober.is_stable(target) is False

    def test_directory_becomes_stable(self, tmp_path: Path):
        folder = tmp_path / "Movie (2020)"
        folder.mkdir()
        (folder / "movie.mkv").write_bytes(b"x" * 64)
        prober = StabilityProber(required_checks=2, interval_seconds=1.0, wait=RecordedWaits())

        assert prober.is_stable(folder) is True

    def test_per_call_overrides(self, tmp_path: Path):
        target = tmp_path / "a.mkv"
        target.touch()
        waits = RecordedWaits()
        prober = StabilityProber(required_checks=3, interval_seconds=10.0, wait=waits)

        assert prober.is_stable(target, required_checks=1, interval_seconds=0.5) is True
        assert waits.calls == [0.5]

    def test_interrupted_wait_returns_unstable(self, tmp_path: Path):
        target = tmp_path / "a.mkv"
        target.touch()
        prober = StabilityProber(required_checks=3, interval_seconds=1.0, wait=RecordedWaits(interrupt_after=0))

        result = prober.probe(target)

        assert result.is_stable is False
        assert "shutdown" in result.reason

    def test_set_stop_event_cuts_probe_short(self, tmp_path: Path):
        """With a stop event and no injected wait, a set event returns at once."""
        target = tmp_path / "a.mkv"
        target.touch()
        stop_event = threading.Event()
        stop_event.set()
        prober = StabilityProber(required_checks=3, interval_seconds=60.0, stop_event=stop_event)

        assert prober.is_stable(target) is False

    @pytest.mark.parametrize("checks, interval", [(0, 1.0), (3, 0.0), (3, -1.0)])
    def test_invalid_configuration_rejected(self, checks, interval):
        with pytest.raises(ValueError):
            StabilityProber(required_checks=checks, interval_seconds=interval)
