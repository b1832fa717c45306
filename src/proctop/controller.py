"""Key handling and the process termination flow."""

import errno
import logging
import os
import signal
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import psutil

from proctop.models import NAME_PLACEHOLDER, Snapshot, ViewState
from proctop.view import jump_selection, move_selection

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Top-level interaction states."""

    BROWSING = "browsing"
    CONFIRMING = "confirming"
    REPORTING = "reporting"
    QUITTING = "quitting"


class Command(Enum):
    """What a consumed key turned into."""

    NONE = "none"
    QUIT = "quit"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    KILL = "kill"
    REFRESH = "refresh"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    ACKNOWLEDGE = "acknowledge"


BROWSING_KEYS = {
    "q": Command.QUIT,
    "Q": Command.QUIT,
    "up": Command.UP,
    "down": Command.DOWN,
    "pageup": Command.PAGE_UP,
    "pagedown": Command.PAGE_DOWN,
    "home": Command.HOME,
    "end": Command.END,
    "k": Command.KILL,
    "K": Command.KILL,
    "r": Command.REFRESH,
    "R": Command.REFRESH,
}
CONFIRM_KEY = "1"
# Linux truncates the comm name shown in status files to this length
COMM_LENGTH = 15


@dataclass(slots=True, frozen=True)
class TerminationTarget:
    """Process chosen for termination."""

    pid: int
    name: str


@dataclass(slots=True, frozen=True)
class TerminationOutcome:
    """Result of a termination request, shown until acknowledged."""

    target: TerminationTarget
    success: bool
    message: str


def _describe(exc: Exception) -> str:
    if isinstance(exc, psutil.ZombieProcess):
        return exc.msg or "process is a zombie"
    if isinstance(exc, psutil.NoSuchProcess):
        return os.strerror(errno.ESRCH)
    if isinstance(exc, psutil.AccessDenied):
        return os.strerror(errno.EPERM)
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or type(exc).__name__


def _same_process_name(live: str, shown: str) -> bool:
    if live == shown:
        return True
    # psutil may expand a truncated comm name from the command line
    return len(shown) >= COMM_LENGTH and live.startswith(shown)


def terminate_process(target: TerminationTarget) -> TerminationOutcome:
    """
    Send SIGTERM to ``target.pid``; failures are returned, never raised.

    The live process name must still match ``target.name``, so a pid reused
    since the snapshot was taken is left alone.
    """
    if target.pid <= 0:
        return TerminationOutcome(target, False, f"invalid pid {target.pid}")

    try:
        proc = psutil.Process(target.pid)
        live_name = proc.name()
        if target.name != NAME_PLACEHOLDER and not _same_process_name(live_name, target.name):
            logger.warning(
                "Not signalling pid %d: now %r, expected %r", target.pid, live_name, target.name
            )
            return TerminationOutcome(target, False, "process identity changed (PID reused?)")
        proc.send_signal(signal.SIGTERM)
    except (psutil.Error, OSError) as exc:
        message = _describe(exc)
        logger.warning("SIGTERM to pid %d (%s) failed: %s", target.pid, target.name, message)
        return TerminationOutcome(target, False, message)

    logger.info("Sent SIGTERM to pid %d (%s)", target.pid, target.name)
    return TerminationOutcome(target, True, f"SIGTERM sent to PID {target.pid}")


class InteractionController:
    """
    Maps key presses to commands.

    The termination modal is part of the same state machine: CONFIRMING
    waits for one key to send or cancel, REPORTING waits for one key to
    acknowledge the result. Both return to BROWSING.
    """

    def __init__(
        self,
        terminate: Callable[[TerminationTarget], TerminationOutcome] = terminate_process,
        enable_kill: bool = True,
    ) -> None:
        self._terminate = terminate
        self._enable_kill = enable_kill
        self._mode = Mode.BROWSING
        self._target: TerminationTarget | None = None
        self._outcome: TerminationOutcome | None = None

    @property
    def mode(self) -> Mode:
        """Get the current interaction state."""
        return self._mode

    @property
    def target(self) -> TerminationTarget | None:
        """Get the process awaiting confirmation or reported on, if any."""
        return self._target

    @property
    def outcome(self) -> TerminationOutcome | None:
        """Get the result being reported, if any."""
        return self._outcome

    @property
    def is_modal(self) -> bool:
        """True while the termination dialog owns the keyboard."""
        return self._mode in (Mode.CONFIRMING, Mode.REPORTING)

    def handle_key(
        self,
        key: str,
        view: ViewState,
        snapshot: Snapshot | None,
        page_rows: int = 1,
    ) -> Command:
        """Consume one key press in the current mode."""
        if self._mode is Mode.CONFIRMING:
            return self._handle_confirming(key)
        if self._mode is Mode.REPORTING:
            self._return_to_browsing()
            return Command.ACKNOWLEDGE
        if self._mode is Mode.QUITTING:
            return Command.NONE
        return self._handle_browsing(key, view, snapshot, page_rows)

    def _handle_browsing(
        self,
        key: str,
        view: ViewState,
        snapshot: Snapshot | None,
        page_rows: int,
    ) -> Command:
        command = BROWSING_KEYS.get(key, Command.NONE)
        count = len(snapshot) if snapshot is not None else 0
        page = max(1, page_rows)

        if command is Command.QUIT:
            self._mode = Mode.QUITTING
        elif command is Command.UP:
            move_selection(view, -1, count)
        elif command is Command.DOWN:
            move_selection(view, 1, count)
        elif command is Command.PAGE_UP:
            move_selection(view, -page, count)
        elif command is Command.PAGE_DOWN:
            move_selection(view, page, count)
        elif command is Command.HOME:
            jump_selection(view, 0, count)
        elif command is Command.END:
            jump_selection(view, count - 1, count)
        elif command is Command.KILL:
            if count == 0:
                return Command.NONE
            record = snapshot[view.selected_index]
            self._begin_termination(TerminationTarget(record.pid, record.name))
        return command

    def _begin_termination(self, target: TerminationTarget) -> None:
        self._target = target
        if self._enable_kill:
            self._mode = Mode.CONFIRMING
            return
        self._outcome = TerminationOutcome(target, False, "process termination is disabled")
        self._mode = Mode.REPORTING

    def _handle_confirming(self, key: str) -> Command:
        if key != CONFIRM_KEY:
            logger.debug("Termination of pid %d cancelled", self._target.pid)
            self._return_to_browsing()
            return Command.CANCEL
        self._outcome = self._terminate(self._target)
        self._mode = Mode.REPORTING
        return Command.CONFIRM

    def _return_to_browsing(self) -> None:
        self._target = None
        self._outcome = None
        self._mode = Mode.BROWSING
