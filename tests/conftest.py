"""
Shared fixtures for jellydrop tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fakes import (  # noqa: E402
    MAGNET_HANDLER,
    MEDIA_HANDLER,
    YOUTUBE_HANDLER,
    FakeClipboard,
    FakeLauncher,
    RecordedWaits,
)

from jellydrop.config.settings import WatcherSettings  # noqa: E402
from jellydrop.jobs.history import HistoryLog  # noqa: E402
from jellydrop.jobs.registry import JobRegistry  # noqa: E402
from jellydrop.runtime.context import OrchestratorContext  # noqa: E402
from jellydrop.runtime.shutdown import ShutdownCoordinator  # noqa: E402
from jellydrop.watchfolders.stability import StabilityProber  # noqa: E402


@pytest.fixture
def drop_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "drop"
    folder.mkdir()
    return folder


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "history.log"


@pytest.fixture
def make_settings(tmp_path: Path, drop_folder: Path, history_path: Path):
    """Factory for valid settings; keyword arguments override top-level keys."""

    def _make(**overrides) -> WatcherSettings:
        data = {
            "drop_folder": str(drop_folder),
            "state_dir": str(tmp_path / "state"),
            "history_file": str(history_path),
            "max_concurrent_processors": 2,
            "main_loop_interval_seconds": 0.01,
            "stability": {"checks": 1, "interval_seconds": 0.01},
            "enable_clipboard_youtube": True,
            "enable_clipboard_magnet": True,
            "handlers": {
                "media_item": [MEDIA_HANDLER],
                "youtube": [YOUTUBE_HANDLER],
                "magnet": [MAGNET_HANDLER],
            },
        }
        data.update(overrides)
        return WatcherSettings.model_validate(data)

    return _make


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def make_context(make_settings, launcher):
    """Factory for an OrchestratorContext wired to the fake launcher."""

    def _make(**overrides) -> OrchestratorContext:
        settings = make_settings(**overrides)
        registry = JobRegistry()
        return OrchestratorContext(
            settings=settings,
            registry=registry,
            coordinator=ShutdownCoordinator(registry),
            launcher=launcher,
            history=HistoryLog(settings.history_path),
        )

    return _make


@pytest.fixture
def instant_prober() -> StabilityProber:
    """Real sampler, no sleeping."""
    return StabilityProber(required_checks=1, interval_seconds=0.01, wait=RecordedWaits())
