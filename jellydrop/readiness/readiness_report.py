"""
Readiness report — terminal and JSON rendering of the startup checks.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from .. import __version__
from ..config.settings import WatcherSettings
from .checks import CheckResult, run_all_checks, is_ready


@dataclass
class ReadinessReport:
    """
    Structured readiness report.

    Attributes:
        version: jellydrop version string
        ready: True when no blocking check failed
        checks: Individual check results
        timestamp: Report generation time (ISO format)
    """
    version: str
    ready: bool
    checks: List[CheckResult]
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def failed_checks(self) -> List[CheckResult]:
        return [c for c in self.checks if not c.passed]

    @property
    def blocking_failed_checks(self) -> List[CheckResult]:
        return [c for c in self.checks if c.blocking and not c.passed]

    @property
    def degraded_checks(self) -> List[CheckResult]:
        """Failed checks that only disable a feature."""
        return [c for c in self.checks if not c.blocking and not c.passed]

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "ready": self.ready,
            "timestamp": self.timestamp,
            "summary": {
                "total_checks": len(self.checks),
                "passed": len(self.checks) - len(self.failed_checks),
                "failed": len(self.failed_checks),
                "blocking_failures": len(self.blocking_failed_checks),
            },
            "checks": [c.to_dict() for c in self.checks],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def generate_readiness_report(settings: WatcherSettings) -> ReadinessReport:
    checks = run_all_checks(settings)
    return ReadinessReport(version=__version__, ready=is_ready(checks), checks=checks)


def format_readiness_terminal(report: ReadinessReport) -> str:
    """
    Format a readiness report for terminal output.

    Args:
        report: ReadinessReport to format

    Returns:
        Formatted string for terminal display
    """
    lines = []

    lines.append("")
    lines.append("=" * 60)
    lines.append(f"  JELLYDROP READINESS CHECK  v{report.version}")
    lines.append("=" * 60)
    lines.append("")

    for check in report.checks:
        symbol = "✔" if check.passed else "✘"
        blocking_marker = " [BLOCKING]" if check.blocking and not check.passed else ""
        lines.append(f"  {symbol} {check.id}: {check.message}{blocking_marker}")
        if not check.passed and check.hint:
            lines.append(f"      ↳ {check.hint}")

    lines.append("")
    lines.append("-" * 60)
    lines.append("")

    if report.ready:
        lines.append("  ✔ READY")
        if report.degraded_checks:
            lines.append("")
            lines.append(f"  Note: {len(report.degraded_checks)} optional feature(s) will be disabled.")
    else:
        lines.append("  ✘ NOT READY")
        lines.append("")
        lines.append(f"  {len(report.blocking_failed_checks)} blocking issue(s) must be resolved:")
        for check in report.blocking_failed_checks:
            lines.append(f"    • {check.id}: {check.message}")

    lines.append("")
    lines.append("-" * 60)
    lines.append("")

    return "\n".join(lines)
