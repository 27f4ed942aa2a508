"""
Path stability probing.

A path is stable when its (size, mtime) has stayed the same for N
consecutive samples taken a fixed interval apart. Directories are sampled
as the total size of every regular file beneath them plus the directory's
own mtime.

The probe blocks the caller. Every wait between samples goes through the
shutdown event, so a termination signal cuts a probe short.
"""

import logging
import os
import stat
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Union

from .models import StabilityCheck, StabilitySample

logger = logging.getLogger(__name__)

# Returns True when the wait was interrupted
WaitFn = Callable[[float], bool]
SamplerFn = Callable[[Path], Optional[StabilitySample]]


def _tree_size(root: Path) -> int:
    total = 0
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            try:
                st = os.stat(os.path.join(dirpath, filename), follow_symlinks=False)
            except OSError:
                # Vanished mid-walk; the next sample will differ anyway
                continue
            if stat.S_ISREG(st.st_mode):
                total += st.st_size
    return total


def sample_path(path: Path) -> Optional[StabilitySample]:
    """
    Take one (size, mtime) sample of a file or directory.

    Returns None when the path is gone, cannot be stat'ed, or is neither a
    regular file nor a directory.
    """
    try:
        st = path.stat()
    except OSError:
        return None

    if stat.S_ISREG(st.st_mode):
        return StabilitySample(size_bytes=st.st_size, mtime_ns=st.st_mtime_ns)
    if stat.S_ISDIR(st.st_mode):
        return StabilitySample(size_bytes=_tree_size(path), mtime_ns=st.st_mtime_ns)
    return None


class StabilityProber:
    """
    Blocking stability probe for drop folder items.

    Configuration:
        required_checks: Consecutive unchanged samples needed (default: 3)
        interval_seconds: Wait between samples (default: 10)

    Example:
        With defaults a probe takes a baseline sample, then three more at
        10 second intervals. The path is stable only if all three match, so
        a probe blocks for at most 30 seconds. Any change resets the count;
        once the count can no longer reach 3 inside that window the probe
        gives up early and the item is re-probed on a later tick.
    """

    def __init__(
        self,
        required_checks: int = 3,
        interval_seconds: float = 10.0,
        stop_event: Optional[threading.Event] = None,
        sampler: SamplerFn = sample_path,
        wait: Optional[WaitFn] = None,
    ):
        if required_checks < 1:
            raise ValueError("required_checks must be at least 1")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.required_checks = required_checks
        self.interval_seconds = interval_seconds
        self._stop_event = stop_event
        self._sampler = sampler
        self._wait = wait or self._default_wait

    def _default_wait(self, seconds: float) -> bool:
        if self._stop_event is not None:
            return self._stop_event.wait(seconds)
        time.sleep(seconds)
        return False

    def is_stable(
        self,
        path: Union[str, Path],
        required_checks: Optional[int] = None,
        interval_seconds: Optional[float] = None,
    ) -> bool:
        return self.probe(path, required_checks, interval_seconds).is_stable

    def probe(
        self,
        path: Union[str, Path],
        required_checks: Optional[int] = None,
        interval_seconds: Optional[float] = None,
    ) -> StabilityCheck:
        """
        Probe a path until it is stable or cannot become stable in this window.

        Never raises for filesystem problems: a vanished or unreadable path
        is reported as not stable.
        """
        path = Path(path)
        required = required_checks if required_checks is not None else self.required_checks
        interval = interval_seconds if interval_seconds is not None else self.interval_seconds
        path_str = str(path)

        previous = self._sampler(path)
        if previous is None:
            return StabilityCheck(
                path=path_str,
                is_stable=False,
                samples_taken=1,
                reason="Path missing or not a regular file/directory",
            )

        count = 0
        samples = 1
        for comparison in range(required):
            remaining = required - comparison
            if count + remaining < required:
                return StabilityCheck(
                    path=path_str,
                    is_stable=False,
                    size_bytes=previous.size_bytes,
                    check_count=count,
                    samples_taken=samples,
                    reason=f"Changed during probe (stable for {count}/{required} checks)",
                )

            if self._wait(interval):
                return StabilityCheck(
                    path=path_str,
                    is_stable=False,
                    size_bytes=previous.size_bytes,
                    check_count=count,
                    samples_taken=samples,
                    reason="Probe interrupted by shutdown",
                )

            current = self._sampler(path)
            samples += 1
            if current is None:
                return StabilityCheck(
                    path=path_str,
                    is_stable=False,
                    check_count=0,
                    samples_taken=samples,
                    reason="Path vanished during probe",
                )

            if current == previous:
                count += 1
            else:
                logger.debug(
                    f"[Stability] {path.name} changed "
                    f"(size {previous.size_bytes} -> {current.size_bytes})"
                )
                count = 0
                previous = current

            if count >= required:
                return StabilityCheck(
                    path=path_str,
                    is_stable=True,
                    size_bytes=current.size_bytes,
                    check_count=count,
                    samples_taken=samples,
                )

        return StabilityCheck(
            path=path_str,
            is_stable=False,
            size_bytes=previous.size_bytes,
            check_count=count,
            samples_taken=samples,
            reason=f"Stable for {count}/{required} checks",
        )
