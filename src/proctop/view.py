"""Selection and viewport rules for the process list."""

from proctop.models import ViewState

# Two memory lines, the column header and the rule under it
HEADER_ROWS = 4
# Status line and key help
FOOTER_ROWS = 2


def visible_rows(terminal_rows: int) -> int:
    """Number of process rows that fit between header and footer."""
    return max(0, terminal_rows - HEADER_ROWS - FOOTER_ROWS)


def reconcile(view: ViewState, count: int) -> None:
    """Pull the selection back inside a snapshot of ``count`` records."""
    if count <= 0:
        view.selected_index = 0
        view.scroll_offset = 0
        return
    view.selected_index = min(max(view.selected_index, 0), count - 1)
    view.scroll_offset = min(view.scroll_offset, view.selected_index)


def scroll_offset_for(selected_index: int, rows: int) -> int:
    """First visible index such that the selected row stays on screen."""
    if rows > 0 and selected_index >= rows:
        return selected_index - rows + 1
    return 0


def move_selection(view: ViewState, delta: int, count: int) -> bool:
    """
    Move the selection by ``delta`` rows, stopping at either end.

    Returns True if the selection changed.
    """
    if count <= 0:
        return False
    target = min(max(view.selected_index + delta, 0), count - 1)
    if target == view.selected_index:
        return False
    view.selected_index = target
    return True


def jump_selection(view: ViewState, index: int, count: int) -> bool:
    """Select ``index`` (clamped); returns True if the selection changed."""
    return move_selection(view, index - view.selected_index, count)
