"""
jellydrop CLI — thin entrypoint for operator commands.

Commands:
- run:   start the watcher (clipboard + drop folder) until SIGINT/SIGTERM
- check: run the readiness checks and print a report

Exit Codes:
===========
- 0: Success (including a clean shutdown after a signal)
- 1: Readiness check failed (blocking issue)
- 2: Another instance is already running
- 4: Configuration or system error (missing/invalid config, lock unusable)
"""

import argparse
import logging
import sys
from typing import List, Optional, Set

from . import __version__
from .config import ConfigError, apply_overrides, load_settings
from .logging_setup import configure_logging
from .monitoring.board import StatusBoard
from .readiness.readiness_report import (
    ReadinessReport,
    format_readiness_terminal,
    generate_readiness_report,
)
from .runtime.errors import AlreadyRunningError, LockUnavailableError
from .runtime.instance import InstanceGuard
from .runtime.keepawake import KeepAwake
from .runtime.orchestrator import Orchestrator, build_orchestrator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_READY = 1
EXIT_ALREADY_RUNNING = 2
EXIT_SYSTEM_ERROR = 4


def _apply_degraded_checks(orchestrator: Orchestrator, report: ReadinessReport) -> Set[str]:
    """Disable the features whose non-blocking checks failed."""
    degraded = set()
    for check in report.degraded_checks:
        degraded.add(check.id)
        logger.warning(f"[Startup] {check.id}: {check.message}")

    if "clipboard_backend" in degraded and orchestrator.clipboard_detector is not None:
        orchestrator.clipboard_detector.disable("no clipboard backend")
    if "history_file" in degraded:
        orchestrator.ctx.history.disable("history directory not writable")
    return degraded


def cmd_run(args: argparse.Namespace) -> int:
    try:
        settings = load_settings(args.config)
        settings = apply_overrides(
            settings,
            main_loop_interval_seconds=args.poll_seconds,
            max_concurrent_processors=args.max_concurrent,
        )
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_SYSTEM_ERROR

    configure_logging(settings.logging)

    guard = InstanceGuard(settings.state_dir_path)
    try:
        guard.acquire()
    except AlreadyRunningError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ALREADY_RUNNING
    except LockUnavailableError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_SYSTEM_ERROR

    report = generate_readiness_report(settings)
    if not report.ready:
        print(format_readiness_terminal(report), file=sys.stderr)
        guard.release()
        return EXIT_NOT_READY

    board = StatusBoard() if settings.monitor.enabled else None
    orchestrator = build_orchestrator(settings, guard=guard, board=board)
    coordinator = orchestrator.ctx.coordinator
    degraded = _apply_degraded_checks(orchestrator, report)

    if settings.keep_awake and "keep_awake" not in degraded:
        keep_awake = KeepAwake()
        if keep_awake.start():
            coordinator.add_cleanup("keep-awake", keep_awake.stop)

    if board is not None and "monitor_server" not in degraded:
        from .monitoring.server import MonitorServer

        server = MonitorServer(board, settings.monitor.host, settings.monitor.port)
        server.start()
        coordinator.add_cleanup("status API", server.stop)

    coordinator.install_signal_handlers()
    try:
        return orchestrator.run(once=args.once)
    finally:
        coordinator.restore_signal_handlers()


def cmd_check(args: argparse.Namespace) -> int:
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_SYSTEM_ERROR

    report = generate_readiness_report(settings)
    if args.json:
        print(report.to_json())
    else:
        print(format_readiness_terminal(report))
    return EXIT_OK if report.ready else EXIT_NOT_READY


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jellydrop",
        description="Watch the clipboard and a drop folder and hand media to handler scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run                           # Use $JELLYDROP_CONFIG or ~/.config/jellydrop/config.json
  %(prog)s run --config ./config.json    # Explicit config file
  %(prog)s run --once                    # One pass, wait for handlers, exit
  %(prog)s check --json                  # Readiness report as JSON
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_run = subparsers.add_parser("run", help="Start the watcher")
    parser_run.add_argument("--config", metavar="PATH", help="Settings JSON file")
    parser_run.add_argument(
        "--once",
        action="store_true",
        help="Run a single pass, wait for dispatched handlers, then exit",
    )
    parser_run.add_argument(
        "--poll-seconds",
        type=float,
        default=None,
        metavar="N",
        help="Override main_loop_interval_seconds",
    )
    parser_run.add_argument(
        "--max-concurrent",
        type=int,
        default=None,
        metavar="N",
        help="Override max_concurrent_processors",
    )
    parser_run.set_defaults(func=cmd_run)

    parser_check = subparsers.add_parser("check", help="Run readiness checks")
    parser_check.add_argument("--config", metavar="PATH", help="Settings JSON file")
    parser_check.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser_check.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
