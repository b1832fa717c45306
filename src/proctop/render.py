"""Projection of the dashboard state onto a fixed-width character grid."""

from dataclasses import dataclass

from proctop.controller import InteractionController, Mode
from proctop.models import MemorySample, ProcessRecord, Snapshot, ViewState
from proctop.view import scroll_offset_for, visible_rows

PID_WIDTH = 8
NAME_WIDTH = 22
STATE_WIDTH = 6
MEM_WIDTH = 12

COLUMN_HEADER = (
    f"{'PID':<{PID_WIDTH}} {'NAME':<{NAME_WIDTH}} "
    f"{'STATE':<{STATE_WIDTH}} {'MEM(KB)':<{MEM_WIDTH}}"
)
KEY_HELP = "Q:Quit  ↑↓:Navigate  PgUp/PgDn:Page  Home/End:Jump  K:Kill  R:Refresh"


@dataclass(slots=True, frozen=True)
class FrameLine:
    """One screen row."""

    text: str
    highlight: bool = False
    emphasis: bool = False


@dataclass(slots=True, frozen=True)
class Frame:
    """A full screen worth of rows, already clipped to the terminal size."""

    lines: tuple[FrameLine, ...]

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


def format_memory(memory: MemorySample) -> tuple[str, str]:
    """The two memory summary lines."""
    if memory.is_empty:
        return ("Memory: data unavailable", "")
    return (
        f"Mem: {memory.used_mb} MB used / {memory.total_mb} MB total"
        f" | free {memory.free_mb} MB | cached {memory.cached_mb} MB"
        f" | buffers {memory.buffers_mb} MB | avail {memory.available_mb} MB",
        f"Swap: {memory.swap_used_mb} MB used / {memory.swap_total_mb} MB total",
    )


def format_record(record: ProcessRecord) -> str:
    return (
        f"{record.pid:<{PID_WIDTH}d} {record.name[:NAME_WIDTH]:<{NAME_WIDTH}} "
        f"{record.state:<{STATE_WIDTH}} {record.resident_memory_kb:<{MEM_WIDTH}d}"
    )


def _clip(lines: list[FrameLine], rows: int, cols: int) -> Frame:
    return Frame(
        tuple(
            FrameLine(line.text[:cols], line.highlight, line.emphasis)
            for line in lines[:rows]
        )
    )


def render_frame(
    rows: int,
    cols: int,
    snapshot: Snapshot | None,
    memory: MemorySample,
    view: ViewState,
    status: str | None = None,
) -> Frame:
    """
    Lay out the dashboard for a ``rows`` x ``cols`` terminal.

    The windowed scroll offset is written back to ``view``; nothing else is
    modified. Without a snapshot only a single degraded line is produced.
    """
    if rows <= 0 or cols <= 0:
        return Frame(())

    if snapshot is None:
        reason = status or "waiting for first sample"
        return _clip([FrameLine(f"Process list unavailable: {reason}")], rows, cols)

    body_rows = visible_rows(rows)
    view.scroll_offset = scroll_offset_for(view.selected_index, body_rows)

    mem_line, swap_line = format_memory(memory)
    lines = [
        FrameLine(mem_line),
        FrameLine(swap_line),
        FrameLine(COLUMN_HEADER, emphasis=True),
        FrameLine("-" * cols),
    ]

    window = snapshot.records[view.scroll_offset:view.scroll_offset + body_rows]
    for offset, record in enumerate(window):
        index = view.scroll_offset + offset
        lines.append(FrameLine(format_record(record), highlight=index == view.selected_index))
    # Keep the footer pinned to the bottom rows
    lines.extend(FrameLine("") for _ in range(body_rows - len(window)))

    summary = f"Processes: {len(snapshot)} | Selected {view.selected_index + 1}"
    if status:
        summary = f"{summary} | {status}"
    lines.append(FrameLine(summary))
    lines.append(FrameLine(KEY_HELP))

    # A terminal shorter than header + footer keeps only the top rows
    return _clip(lines, rows, cols)


def render_modal(controller: InteractionController) -> tuple[str, ...]:
    """Text of the termination dialog for the controller's current mode."""
    target = controller.target
    if target is None:
        return ()

    if controller.mode is Mode.CONFIRMING:
        return (
            f"Terminate process: PID {target.pid} ({target.name})",
            "-" * 30,
            "  1. SIGTERM",
            "  2. Cancel",
            "  Select option [1-2]: ",
        )

    outcome = controller.outcome
    if controller.mode is Mode.REPORTING and outcome is not None:
        if outcome.success:
            lines = (f"Successfully sent SIGTERM to PID {target.pid}", "")
        else:
            lines = (
                f"Failed to send SIGTERM to PID {target.pid}",
                f"  Error: {outcome.message}",
            )
        return lines + ("", "  Press any key to continue...")

    return ()
