"""System sampling engine for proctop.

Reads process and memory state straight from the ``/proc`` filesystem and
decides when the next sample is due. Everything here runs synchronously on
the caller's thread.
"""

import logging
import os
import re
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path

from proctop.models import (
    NAME_PLACEHOLDER,
    STATE_PLACEHOLDER,
    MemorySample,
    ProcessRecord,
    RefreshSchedule,
    Snapshot,
)

logger = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = Path("/proc")
DEFAULT_MEMINFO_PATH = DEFAULT_PROC_ROOT / "meminfo"
DEFAULT_REFRESH_INTERVAL = 3.0
MIN_REFRESH_INTERVAL = 0.1
NAME_MAX_LENGTH = 127

_LEADING_UINT = re.compile(r"\s*(\d+)")

# meminfo label -> MemorySample field
_MEMINFO_FIELDS = {
    "MemTotal": "mem_total_kb",
    "MemFree": "mem_free_kb",
    "MemAvailable": "mem_available_kb",
    "Cached": "cached_kb",
    "Buffers": "buffers_kb",
    "SwapTotal": "swap_total_kb",
    "SwapFree": "swap_free_kb",
}


class MonitorError(Exception):
    """Base class for sampling failures."""


class CollectionError(MonitorError):
    """The process enumeration root could not be listed."""


class SampleError(MonitorError):
    """The memory info file could not be read."""


def _leading_uint(value: str) -> int | None:
    match = _LEADING_UINT.match(value)
    return int(match.group(1)) if match else None


def is_candidate_pid(name: str) -> int | None:
    """Return the pid encoded by a directory entry name, or None."""
    if not name or not name.isascii() or not name.isdigit():
        return None
    pid = int(name)
    return pid if pid > 0 else None


def parse_status(pid: int, lines: Iterable[str]) -> ProcessRecord:
    """
    Build a ProcessRecord from the lines of a status file.

    Missing or malformed fields fall back to placeholders; the record
    itself is always produced. A read error part way through keeps the
    fields seen so far.
    """
    name: str | None = None
    state: str | None = None
    rss: int | None = None

    try:
        for line in lines:
            key, sep, value = line.lstrip().partition(":")
            if not sep:
                continue

            if key == "Name" and name is None:
                name = value.strip()[:NAME_MAX_LENGTH]
            elif key == "State" and state is None:
                stripped = value.strip()
                if stripped:
                    state = stripped[0]
            elif key == "VmRSS" and rss is None:
                rss = _leading_uint(value)

            if name is not None and state is not None and rss is not None:
                break
    except OSError as exc:
        logger.debug("Partial status read for pid %d: %s", pid, exc)

    return ProcessRecord(
        pid=pid,
        name=name or NAME_PLACEHOLDER,
        state=state or STATE_PLACEHOLDER,
        resident_memory_kb=rss or 0,
    )


def parse_meminfo(lines: Iterable[str]) -> MemorySample:
    """Build a MemorySample from meminfo lines, ignoring unknown labels."""
    values: dict[str, int] = {}
    for line in lines:
        label, sep, value = line.partition(":")
        field = _MEMINFO_FIELDS.get(label.strip()) if sep else None
        if field is None:
            continue
        amount = _leading_uint(value)
        if amount is not None:
            values[field] = amount
    return MemorySample(**values)


class ProcessSnapshotCollector:
    """
    Enumerates processes under a proc root and reads their status files.

    A process whose status file cannot be opened is left out of the snapshot;
    one whose fields are merely missing is kept with placeholders.
    """

    def __init__(
        self,
        proc_root: Path = DEFAULT_PROC_ROOT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._proc_root = Path(proc_root)
        self._clock = clock

    @property
    def proc_root(self) -> Path:
        """Get the directory being enumerated."""
        return self._proc_root

    def collect(self) -> Snapshot:
        """
        Take a new snapshot of every readable process.

        Raises:
            CollectionError: if the proc root itself cannot be listed.
        """
        taken_at = self._clock()
        try:
            with os.scandir(self._proc_root) as entries:
                names = [entry.name for entry in entries]
        except OSError as exc:
            logger.warning("Cannot enumerate %s: %s", self._proc_root, exc)
            raise CollectionError(f"cannot read {self._proc_root}: {exc.strerror or exc}") from exc

        records: list[ProcessRecord] = []
        for entry_name in names:
            pid = is_candidate_pid(entry_name)
            if pid is None:
                continue
            record = self._read_process(pid)
            if record is not None:
                records.append(record)

        return Snapshot(records=tuple(records), taken_at=taken_at)

    def _read_process(self, pid: int) -> ProcessRecord | None:
        path = self._proc_root / str(pid) / "status"
        try:
            status = open(path, encoding="utf-8", errors="replace")
        except OSError as exc:
            # Exited between listing and open, or restricted
            logger.debug("Dropping pid %d: %s", pid, exc)
            return None
        with status:
            return parse_status(pid, status)


class SystemMemorySampler:
    """Reads aggregate memory and swap counters from a meminfo file."""

    def __init__(self, meminfo_path: Path = DEFAULT_MEMINFO_PATH) -> None:
        self._meminfo_path = Path(meminfo_path)

    def sample(self) -> MemorySample:
        """
        Read the current memory counters.

        Raises:
            SampleError: if the meminfo file cannot be read.
        """
        try:
            with open(self._meminfo_path, encoding="utf-8", errors="replace") as meminfo:
                return parse_meminfo(meminfo)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", self._meminfo_path, exc)
            raise SampleError(f"cannot read {self._meminfo_path}: {exc.strerror or exc}") from exc


class RefreshScheduler:
    """Decides when a new snapshot should replace the current one."""

    def __init__(self, interval: float = DEFAULT_REFRESH_INTERVAL) -> None:
        """
        Initialize the RefreshScheduler.

        Args:
            interval: Seconds between resamples. Default 3.0s.
        """
        self._interval = max(MIN_REFRESH_INTERVAL, interval)

    @property
    def interval(self) -> float:
        """Get the refresh interval."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        """Set the refresh interval."""
        self._interval = max(MIN_REFRESH_INTERVAL, value)

    def should_refresh(self, now: float, schedule: RefreshSchedule) -> bool:
        """Check whether a resample is due at ``now``."""
        return schedule.forced or now - schedule.last_update >= self._interval

    def mark_refreshed(self, now: float) -> RefreshSchedule:
        """Return the schedule after a resample at ``now``."""
        return RefreshSchedule(last_update=now, forced=False)

    def request_refresh(self, schedule: RefreshSchedule) -> RefreshSchedule:
        """Return ``schedule`` with an immediate resample requested."""
        return replace(schedule, forced=True)
