"""proctop - Main Textual application."""

from rich.console import RenderableType
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.widget import Widget

from proctop.config import Settings
from proctop.controller import Command
from proctop.dashboard import Dashboard
from proctop.dialog import TerminateDialog
from proctop.render import Frame, render_modal


def frame_to_text(frame: Frame) -> Text:
    """Convert a rendered frame into styled Rich text."""
    text = Text(no_wrap=True, overflow="crop")
    for number, line in enumerate(frame.lines):
        if number:
            text.append("\n")
        if line.highlight:
            style = "reverse"
        elif line.emphasis:
            style = "bold"
        else:
            style = ""
        text.append(line.text, style=style)
    return text


class ProcessView(Widget):
    """Full-screen view of the memory summary and the process list."""

    DEFAULT_CSS = """
    ProcessView {
        height: 1fr;
        width: 1fr;
    }
    """

    def __init__(self, dashboard: Dashboard, *args, **kwargs) -> None:
        """Initialize ProcessView."""
        super().__init__(*args, **kwargs)
        self._dashboard = dashboard

    def render(self) -> RenderableType:
        """Render the frame for the widget's current size."""
        frame = self._dashboard.frame(self.size.height, self.size.width)
        return frame_to_text(frame)


class ProctopApp(App):
    """Main proctop application."""

    TITLE = "proctop"
    SUB_TITLE = "Process Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    def __init__(
        self,
        settings: Settings | None = None,
        dashboard: Dashboard | None = None,
    ) -> None:
        """Initialize the ProctopApp."""
        super().__init__()
        self._settings = settings or Settings()
        self._dashboard = dashboard or Dashboard.from_settings(self._settings)
        self._view = ProcessView(self._dashboard, id="process-view")
        self._dialog: TerminateDialog | None = None

    @property
    def dashboard(self) -> Dashboard:
        """Get the application state."""
        return self._dashboard

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield self._view

    def on_mount(self) -> None:
        """Take the first sample and start the refresh timer."""
        self._tick()
        self.set_interval(self._settings.input_poll_ms / 1000, self._tick)

    def _tick(self) -> None:
        """Resample when the scheduler says so and redraw."""
        if self._dashboard.tick():
            self._view.refresh()

    def on_key(self, event: events.Key) -> None:
        """Route every key press through the interaction controller."""
        event.stop()
        command = self._dashboard.handle_key(event.key, self.size.height)
        if self._dashboard.should_quit:
            self.exit()
            return

        self._sync_dialog()
        if command is Command.REFRESH:
            self._tick()
        self._view.refresh()

    def _sync_dialog(self) -> None:
        """Show, update or remove the termination dialog to match the controller."""
        controller = self._dashboard.controller
        if controller.is_modal:
            lines = render_modal(controller)
            if self._dialog is None:
                self._dialog = TerminateDialog(lines)
                self.push_screen(self._dialog)
            else:
                self._dialog.show(lines)
        elif self._dialog is not None:
            self._dialog = None
            self.pop_screen()


def main() -> None:
    """Entry point for proctop application."""
    from proctop.cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
