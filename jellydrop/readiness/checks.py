"""
Startup readiness checks.

Each check follows the same pattern:
1. Run a specific verification against the loaded settings
2. Return CheckResult with:
   - id: unique identifier
   - status: pass | fail
   - message: factual explanation
   - hint: optional remediation text (not an action)

Failures of checks in BLOCKING_CHECKS abort startup. Any other failure
disables the feature it covers and the watcher runs degraded.
"""

import importlib.util
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..clipboard.reader import clipboard_available
from ..config.settings import WatcherSettings
from ..runtime.keepawake import keep_awake_available


class CheckStatus(str, Enum):
    """Check result status."""
    PASS = "pass"
    FAIL = "fail"


@dataclass
class CheckResult:
    """
    Result of a single readiness check.

    Attributes:
        id: Unique identifier for this check (e.g., "drop_folder")
        status: pass | fail
        message: Factual explanation of the result
        hint: Optional remediation hint (text only)
    """
    id: str
    status: CheckStatus
    message: str
    hint: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        result = {
            "id": self.id,
            "status": self.status.value,
            "message": self.message,
        }
        if self.hint:
            result["hint"] = self.hint
        return result

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.PASS

    @property
    def blocking(self) -> bool:
        return self.id in BLOCKING_CHECKS


ReadinessCheck = Callable[[WatcherSettings], CheckResult]


def _pass(check_id: str, message: str) -> CheckResult:
    return CheckResult(id=check_id, status=CheckStatus.PASS, message=message)


def _fail(check_id: str, message: str, hint: Optional[str] = None) -> CheckResult:
    return CheckResult(id=check_id, status=CheckStatus.FAIL, message=message, hint=hint)


def _writable_dir(path: Path, create: bool) -> Optional[str]:
    """Return an error message, or None if the directory is usable."""
    if not path.exists():
        if not create:
            return f"{path} does not exist"
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return f"cannot create {path}: {e}"
    if not path.is_dir():
        return f"{path} is not a directory"
    if not os.access(path, os.W_OK | os.X_OK):
        return f"{path} is not writable"
    return None


def resolve_executable(program: str) -> Optional[str]:
    """Resolve argv[0] the way subprocess will: a path, or a PATH lookup."""
    if os.sep in program:
        if os.path.isfile(program) and os.access(program, os.X_OK):
            return program
        return None
    return shutil.which(program)


# =============================================================================
# Directory Checks
# =============================================================================

def check_drop_folder(settings: WatcherSettings) -> CheckResult:
    """Drop folder must exist; it is created when auto_create_missing_dirs is on."""
    if not settings.enable_drop_folder:
        return _pass("drop_folder", "Drop folder watching disabled")

    path = settings.drop_folder_path
    existed = path.exists()
    error = _writable_dir(path, create=settings.auto_create_missing_dirs)
    if error:
        return _fail(
            "drop_folder",
            f"Drop folder unusable: {error}",
            hint="Create the folder or fix drop_folder in the config",
        )
    if not existed:
        return _pass("drop_folder", f"Created drop folder {path}")
    return _pass("drop_folder", f"Drop folder {path}")


def check_state_dir(settings: WatcherSettings) -> CheckResult:
    """The instance lock lives in state_dir."""
    error = _writable_dir(settings.state_dir_path, create=True)
    if error:
        return _fail("state_dir", f"State directory unusable: {error}", hint="Fix state_dir in the config")
    return _pass("state_dir", f"State directory {settings.state_dir}")


def check_history_file(settings: WatcherSettings) -> CheckResult:
    path = settings.history_path
    if path is None:
        return _pass("history_file", "History log disabled")
    error = _writable_dir(path.parent, create=True)
    if error:
        return _fail("history_file", f"History log unusable: {error}", hint="History will not be recorded")
    return _pass("history_file", f"History log {path}")


# =============================================================================
# Handler Checks
# =============================================================================

def _check_handler(check_id: str, enabled: bool, command: List[str], feature: str) -> CheckResult:
    if not enabled:
        return _pass(check_id, f"{feature} disabled")
    executable = resolve_executable(command[0])
    if executable is None:
        return _fail(
            check_id,
            f"{feature} handler not found or not executable: {command[0]}",
            hint="Install the handler or fix the handlers section of the config",
        )
    return _pass(check_id, f"{feature} handler {executable}")


def check_media_handler(settings: WatcherSettings) -> CheckResult:
    return _check_handler(
        "handler_media_item", settings.enable_drop_folder, settings.handlers.media_item, "Drop folder"
    )


def check_youtube_handler(settings: WatcherSettings) -> CheckResult:
    return _check_handler(
        "handler_youtube", settings.enable_clipboard_youtube, settings.handlers.youtube, "Clipboard YouTube"
    )


def check_magnet_handler(settings: WatcherSettings) -> CheckResult:
    return _check_handler(
        "handler_magnet", settings.enable_clipboard_magnet, settings.handlers.magnet, "Clipboard magnet"
    )


# =============================================================================
# Optional Dependency Checks
# =============================================================================

def check_clipboard_backend(settings: WatcherSettings) -> CheckResult:
    if not settings.clipboard_enabled:
        return _pass("clipboard_backend", "Clipboard watching disabled")
    available, detail = clipboard_available()
    if not available:
        return _fail(
            "clipboard_backend",
            f"Clipboard not readable: {detail}",
            hint="Install xclip, xsel or wl-clipboard (Linux); clipboard watching will be off",
        )
    return _pass("clipboard_backend", detail)


def check_keep_awake(settings: WatcherSettings) -> CheckResult:
    if not settings.keep_awake:
        return _pass("keep_awake", "Keep-awake disabled")
    if not keep_awake_available():
        return _fail("keep_awake", "caffeinate not found", hint="Keep-awake is macOS only")
    return _pass("keep_awake", "caffeinate available")


def check_monitor_server(settings: WatcherSettings) -> CheckResult:
    if not settings.monitor.enabled:
        return _pass("monitor_server", "Status API disabled")
    if importlib.util.find_spec("uvicorn") is None:
        return _fail("monitor_server", "uvicorn is not installed", hint="pip install uvicorn")
    return _pass("monitor_server", f"Status API on {settings.monitor.host}:{settings.monitor.port}")


# =============================================================================
# Aggregate Functions
# =============================================================================

# (id, check) pairs; the id is also used when a check raises
ALL_CHECKS: List[Tuple[str, ReadinessCheck]] = [
    ("drop_folder", check_drop_folder),
    ("state_dir", check_state_dir),
    ("handler_media_item", check_media_handler),
    ("handler_youtube", check_youtube_handler),
    ("handler_magnet", check_magnet_handler),
    ("clipboard_backend", check_clipboard_backend),
    ("history_file", check_history_file),
    ("keep_awake", check_keep_awake),
    ("monitor_server", check_monitor_server),
]

BLOCKING_CHECKS = {
    "drop_folder",
    "state_dir",
    "handler_media_item",
    "handler_youtube",
    "handler_magnet",
}


def run_all_checks(settings: WatcherSettings) -> List[CheckResult]:
    """
    Run all readiness checks and return results.

    Returns:
        List of CheckResult instances, one per check.
    """
    results = []
    for check_id, check in ALL_CHECKS:
        try:
            results.append(check(settings))
        except Exception as e:
            results.append(_fail(
                check_id,
                f"Check failed with error: {e}",
            ))
    return results


def is_ready(results: List[CheckResult]) -> bool:
    """
    True if every blocking check passed.

    Non-blocking failures only disable the feature they cover.
    """
    return not any(result.blocking and not result.passed for result in results)
