"""
Readiness — startup checks for the watcher.

Public API:
    run_all_checks — Run every check against the loaded settings
    is_ready — True when no blocking check failed
    generate_readiness_report — Checks wrapped in a ReadinessReport
    format_readiness_terminal — Human-readable rendering
"""

from .checks import (
    CheckStatus,
    CheckResult,
    BLOCKING_CHECKS,
    run_all_checks,
    is_ready,
)
from .readiness_report import (
    ReadinessReport,
    generate_readiness_report,
    format_readiness_terminal,
)

__all__ = [
    # Models
    "CheckStatus",
    "CheckResult",
    "ReadinessReport",
    # Core
    "BLOCKING_CHECKS",
    "run_all_checks",
    "is_ready",
    "generate_readiness_report",
    "format_readiness_terminal",
]
