"""
Tests for the Dispatcher: ceiling, duplicates, classification and launch.
"""

from pathlib import Path

import pytest

from fakes import MEDIA_HANDLER, FakeProcess

from jellydrop.jobs.dispatcher import Dispatcher
from jellydrop.jobs.models import DispatchResult, HandlerKind, JobRecord
from jellydrop.jobs.reaper import Reaper
from jellydrop.watchfolders.models import WatchedItem


def _item(drop_folder: Path, name: str, is_dir: bool = False) -> WatchedItem:
    return WatchedItem(path=str(drop_folder / name), name=name, is_dir=is_dir)


def _occupy(ctx, item_id: str, process: FakeProcess = None) -> FakeProcess:
    process = process or FakeProcess()
    ctx.registry.add(JobRecord(item_id=item_id, handler=HandlerKind.MEDIA_ITEM, process=process))
    return process


class TestDispatcher:
    """Tests for a single dispatch decision."""

    def test_launches_file_with_movie_hint(self, make_context, launcher, drop_folder):
        ctx = make_context()
        item = _item(drop_folder, "Inception.2010.mkv")

        result = Dispatcher().dispatch(item, ctx)

        assert result is DispatchResult.LAUNCHED
        assert launcher.spawned[0].argv == [MEDIA_HANDLER, "generic_file", item.path, "Movies"]
        record = ctx.registry.get(item.item_id)
        assert record.handler is HandlerKind.MEDIA_ITEM
        assert record.pid == launcher.spawned[0].pid

    def test_directory_with_show_hint(self, make_context, launcher, drop_folder):
        ctx = make_context()
        item = _item(drop_folder, "Show.Name.S02", is_dir=True)

        Dispatcher().dispatch(item, ctx)

        assert launcher.spawned[0].argv[1:] == ["media_folder", item.path, "Shows"]

    def test_hints_disabled_passes_empty_hint(self, make_context, launcher, drop_folder):
        ctx = make_context(category_hints=False)

        Dispatcher().dispatch(_item(drop_folder, "movie.mkv"), ctx)

        assert launcher.spawned[0].argv[-1] == ""

    def test_handler_prefix_arguments_kept(self, make_context, launcher, drop_folder):
        ctx = make_context(
            handlers={"media_item": ["/bin/bash", "/opt/process.sh"]},
            enable_clipboard_youtube=False,
            enable_clipboard_magnet=False,
        )

        Dispatcher().dispatch(_item(drop_folder, "movie.mkv"), ctx)

        assert launcher.spawned[0].argv[:2] == ["/bin/bash", "/opt/process.sh"]

    def test_deferred_at_ceiling(self, make_context, launcher, drop_folder):
        ctx = make_context(max_concurrent_processors=2)
        _occupy(ctx, "/elsewhere/1.mkv")
        _occupy(ctx, "/elsewhere/2.mkv")

        result = Dispatcher().dispatch(_item(drop_folder, "movie.mkv"), ctx)

        assert result is DispatchResult.DEFERRED
        assert launcher.spawned == []
        assert ctx.registry.count() == 2

    def test_duplicate_refused(self, make_context, launcher, drop_folder):
        ctx = make_context()
        item = _item(drop_folder, "movie.mkv")
        _occupy(ctx, item.item_id)

        assert Dispatcher().dispatch(item, ctx) is DispatchResult.DUPLICATE
        assert launcher.spawned == []

    def test_refused_during_shutdown(self, make_context, launcher, drop_folder):
        ctx = make_context()
        ctx.coordinator.request("test")

        assert Dispatcher().dispatch(_item(drop_folder, "movie.mkv"), ctx) is DispatchResult.REFUSED
        assert launcher.spawned == []

    def test_launch_failure_leaves_registry_untouched(self, make_context, launcher, drop_folder):
        ctx = make_context()
        launcher.fail_spawn = True

        result = Dispatcher().dispatch(_item(drop_folder, "movie.mkv"), ctx)

        assert result is DispatchResult.FAILED
        assert ctx.registry.count() == 0

    def test_reaps_before_ceiling_check(self, make_context, launcher, drop_folder):
        """A slot freed since the start of the tick is usable immediately."""
        ctx = make_context(max_concurrent_processors=1)
        finished = _occupy(ctx, "/elsewhere/done.mkv")
        finished.finish(0)

        result = Dispatcher(reaper=Reaper()).dispatch(_item(drop_folder, "movie.mkv"), ctx)

        assert result is DispatchResult.LAUNCHED
        assert not ctx.registry.contains("/elsewhere/done.mkv")

    def test_without_reaper_finished_job_still_counts(self, make_context, drop_folder):
        ctx = make_context(max_concurrent_processors=1)
        _occupy(ctx, "/elsewhere/done.mkv").finish(0)

        assert Dispatcher().dispatch(_item(drop_folder, "movie.mkv"), ctx) is DispatchResult.DEFERRED

    @pytest.mark.parametrize("ceiling", [1, 2, 3])
    def test_ceiling_never_exceeded(self, make_context, launcher, drop_folder, ceiling):
        ctx = make_context(max_concurrent_processors=ceiling)
        dispatcher = Dispatcher(reaper=Reaper())

        results = [
            dispatcher.dispatch(_item(drop_folder, f"movie{i}.mkv"), ctx)
            for i in range(5)
        ]

        assert results.count(DispatchResult.LAUNCHED) == ceiling
        assert ctx.registry.count() == ceiling
