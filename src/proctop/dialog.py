"""Modal dialog for confirming and reporting a process termination."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import Static


class TerminateDialog(ModalScreen[None]):
    """
    Overlay shown while a termination is pending or being reported.

    The dialog only displays text; the keys it waits for are interpreted
    by the interaction controller, which decides when it goes away.
    """

    DEFAULT_CSS = """
    TerminateDialog {
        align: center middle;
    }
    TerminateDialog #terminate-container {
        width: 50;
        height: auto;
        border: thick $error;
        padding: 0 1;
        background: $surface;
    }
    TerminateDialog #terminate-title {
        text-style: bold;
        color: $error;
    }
    """

    def __init__(self, lines: tuple[str, ...]) -> None:
        super().__init__()
        self._lines = lines

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    def compose(self) -> ComposeResult:
        with Vertical(id="terminate-container"):
            yield Static("Terminate Process", id="terminate-title")
            yield Static(self._body(), id="terminate-body")

    def show(self, lines: tuple[str, ...]) -> None:
        """Replace the dialog body, e.g. with the outcome of the request."""
        self._lines = lines
        try:
            body = self.query_one("#terminate-body", Static)
        except NoMatches:
            return  # Not composed yet; compose picks up the new lines
        body.update(self._body())

    def _body(self) -> Text:
        # Plain Text so process names are never parsed as markup
        return Text("\n".join(self._lines))
