"""Data models for proctop."""

from collections.abc import Iterator
from dataclasses import dataclass, fields

NAME_PLACEHOLDER = "?"
STATE_PLACEHOLDER = "?"


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable record of one process read from its status file."""

    pid: int
    name: str = NAME_PLACEHOLDER
    state: str = STATE_PLACEHOLDER  # 'R', 'S', 'Z', 'D', etc.
    resident_memory_kb: int = 0


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    Immutable, fully-built set of process records.

    Records keep the enumeration order of the source; the view indexes
    into them positionally.
    """

    records: tuple[ProcessRecord, ...]
    taken_at: float

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> ProcessRecord:
        return self.records[index]

    def __iter__(self) -> Iterator[ProcessRecord]:
        return iter(self.records)


def _kb_to_mb(value: int) -> int:
    return value // 1024


@dataclass(slots=True, frozen=True)
class MemorySample:
    """System-wide memory counters in kibibytes."""

    mem_total_kb: int = 0
    mem_free_kb: int = 0
    mem_available_kb: int = 0
    cached_kb: int = 0
    buffers_kb: int = 0
    swap_total_kb: int = 0
    swap_free_kb: int = 0

    @property
    def total_mb(self) -> int:
        return _kb_to_mb(self.mem_total_kb)

    @property
    def free_mb(self) -> int:
        return _kb_to_mb(self.mem_free_kb)

    @property
    def available_mb(self) -> int:
        return _kb_to_mb(self.mem_available_kb)

    @property
    def cached_mb(self) -> int:
        return _kb_to_mb(self.cached_kb)

    @property
    def buffers_mb(self) -> int:
        return _kb_to_mb(self.buffers_kb)

    @property
    def swap_total_mb(self) -> int:
        return _kb_to_mb(self.swap_total_kb)

    @property
    def swap_free_mb(self) -> int:
        return _kb_to_mb(self.swap_free_kb)

    @property
    def used_mb(self) -> int:
        """Memory in use, excluding free and page cache."""
        return max(0, self.total_mb - self.free_mb - self.cached_mb)

    @property
    def swap_used_mb(self) -> int:
        return max(0, self.swap_total_mb - self.swap_free_mb)

    @property
    def is_empty(self) -> bool:
        """True when no counter was read (memory data unavailable)."""
        return all(getattr(self, f.name) == 0 for f in fields(self))


@dataclass(slots=True)
class ViewState:
    """Selection and viewport position over the current snapshot."""

    selected_index: int = 0
    scroll_offset: int = 0


@dataclass(slots=True, frozen=True)
class RefreshSchedule:
    """When the last resample happened and whether one is requested."""

    last_update: float = 0.0
    forced: bool = True
