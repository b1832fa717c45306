"""Application state threaded through the sampling / render / input loop."""

import logging
import time
from collections.abc import Callable

from proctop.config import Settings
from proctop.controller import Command, InteractionController, Mode, terminate_process
from proctop.models import MemorySample, RefreshSchedule, Snapshot, ViewState
from proctop.monitor import (
    CollectionError,
    ProcessSnapshotCollector,
    RefreshScheduler,
    SampleError,
    SystemMemorySampler,
)
from proctop.render import Frame, render_frame
from proctop.view import reconcile, visible_rows

logger = logging.getLogger(__name__)


class Dashboard:
    """
    Owns the live snapshot, memory sample, view and schedule.

    Exactly one snapshot and one memory sample are live at a time. A new
    pair is fully built before it replaces the old one, and a failed
    enumeration leaves the previous snapshot on screen.
    """

    def __init__(
        self,
        collector: ProcessSnapshotCollector,
        sampler: SystemMemorySampler,
        scheduler: RefreshScheduler,
        controller: InteractionController | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.collector = collector
        self.sampler = sampler
        self.scheduler = scheduler
        self.controller = controller or InteractionController()
        self.clock = clock
        self.schedule = RefreshSchedule()
        self.snapshot: Snapshot | None = None
        self.memory = MemorySample()
        self.view = ViewState()
        self.status: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dashboard":
        """Build a dashboard wired to the paths and timings in ``settings``."""
        return cls(
            collector=ProcessSnapshotCollector(settings.proc_root),
            sampler=SystemMemorySampler(settings.meminfo_path),
            scheduler=RefreshScheduler(settings.refresh_interval_ms / 1000),
            controller=InteractionController(terminate_process, enable_kill=settings.enable_kill),
        )

    @property
    def mode(self) -> Mode:
        """Get the controller's interaction state."""
        return self.controller.mode

    @property
    def should_quit(self) -> bool:
        """True once the user has asked to quit."""
        return self.controller.mode is Mode.QUITTING

    def tick(self, now: float | None = None) -> bool:
        """
        Resample if a refresh is due.

        Nothing is sampled while the termination dialog is open.
        Returns True whenever a resample was attempted, including one whose
        enumeration failed and left the snapshot in place, so the caller
        redraws the status line either way.
        """
        if self.controller.mode is not Mode.BROWSING:
            return False
        now = self.clock() if now is None else now
        if not self.scheduler.should_refresh(now, self.schedule):
            return False
        self.resample(now)
        return True

    def resample(self, now: float) -> None:
        """
        Replace the snapshot and memory sample, then reconcile the view.

        An enumeration failure skips the whole cycle and is retried on the
        next one. A memory read failure substitutes an all-zero sample so
        stale figures are never shown as current.
        """
        self.schedule = self.scheduler.mark_refreshed(now)
        try:
            snapshot = self.collector.collect()
        except CollectionError as exc:
            self.status = f"stale: {exc}" if self.snapshot is not None else str(exc)
            return

        try:
            memory = self.sampler.sample()
        except SampleError:
            logger.debug("Memory sample unavailable, substituting zeros")
            memory = MemorySample()

        self.snapshot = snapshot
        self.memory = memory
        self.status = None
        reconcile(self.view, len(snapshot))

    def request_refresh(self) -> None:
        """Force a resample on the next tick."""
        self.schedule = self.scheduler.request_refresh(self.schedule)

    def handle_key(self, key: str, terminal_rows: int = 0) -> Command:
        """Feed one key to the controller and apply its side effects."""
        command = self.controller.handle_key(
            key, self.view, self.snapshot, page_rows=visible_rows(terminal_rows)
        )
        if command is Command.REFRESH:
            self.request_refresh()
        return command

    def frame(self, rows: int, cols: int) -> Frame:
        """Render the current state for a terminal of the given size."""
        return render_frame(rows, cols, self.snapshot, self.memory, self.view, self.status)
