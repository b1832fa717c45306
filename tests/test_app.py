"""Tests for proctop application."""

from pathlib import Path

import pytest
from rich.text import Text

from proctop.app import ProcessView, ProctopApp, frame_to_text
from proctop.config import Settings
from proctop.controller import Mode, TerminationOutcome
from proctop.dialog import TerminateDialog
from proctop.render import Frame, FrameLine


def _settings(proc_root: Path, **overrides) -> Settings:
    return Settings(proc_root=proc_root, meminfo_path=proc_root / "meminfo", **overrides)


def test_frame_to_text_styles():
    """Test highlighted rows render in reverse video."""
    frame = Frame((FrameLine("header", emphasis=True), FrameLine("row", highlight=True)))
    text = frame_to_text(frame)

    assert isinstance(text, Text)
    assert text.plain == "header\nrow"
    styles = {str(span.style) for span in text.spans}
    assert "reverse" in styles
    assert "bold" in styles


@pytest.mark.asyncio
async def test_app_creation(proc_root: Path):
    """Test ProctopApp can be instantiated."""
    app = ProctopApp(_settings(proc_root))
    assert app.title == "proctop"
    assert app.sub_title == "Process Monitor"
    assert app.dashboard.snapshot is None


@pytest.mark.asyncio
async def test_app_compose_and_first_sample(proc_root: Path):
    """Test the first sample is taken on mount."""
    app = ProctopApp(_settings(proc_root))
    async with app.run_test(size=(80, 24)) as pilot:
        assert pilot.app.query_one("#process-view", ProcessView) is not None
        assert len(app.dashboard.snapshot) == 3
        assert app.dashboard.memory.mem_total_kb == 16384000


@pytest.mark.asyncio
async def test_app_quit_binding(proc_root: Path):
    """Test that 'q' quits."""
    app = ProctopApp(_settings(proc_root))
    async with app.run_test(size=(80, 24)) as pilot:
        await pilot.press("q")
        assert app.dashboard.should_quit
        assert pilot.app._exit


@pytest.mark.asyncio
async def test_app_navigation(proc_root: Path):
    """Test arrow keys move the selection within bounds."""
    app = ProctopApp(_settings(proc_root))
    async with app.run_test(size=(80, 24)) as pilot:
        await pilot.press("down", "down", "down", "down")
        assert app.dashboard.view.selected_index == 2

        await pilot.press("up", "up", "up")
        assert app.dashboard.view.selected_index == 0


@pytest.mark.asyncio
async def test_app_refresh_key(proc_root: Path):
    """Test 'r' resamples immediately."""
    app = ProctopApp(_settings(proc_root))
    async with app.run_test(size=(80, 24)) as pilot:
        first = app.dashboard.snapshot
        await pilot.press("r")
        assert app.dashboard.snapshot is not first
        assert not app.dashboard.schedule.forced


@pytest.mark.asyncio
async def test_app_terminate_dialog_cancel(proc_root: Path):
    """Test the kill key opens the modal and any other key cancels it."""
    app = ProctopApp(_settings(proc_root))
    async with app.run_test(size=(80, 24)) as pilot:
        await pilot.press("k")
        await pilot.pause()
        assert isinstance(pilot.app.screen, TerminateDialog)
        assert app.dashboard.mode is Mode.CONFIRMING
        assert "Terminate process: PID" in pilot.app.screen.lines[0]

        await pilot.press("2")
        await pilot.pause()
        assert not isinstance(pilot.app.screen, TerminateDialog)
        assert app.dashboard.mode is Mode.BROWSING


@pytest.mark.asyncio
async def test_app_terminate_dialog_reports_outcome(proc_root: Path):
    """Test confirming shows the outcome and a further key closes the modal."""
    sent = []

    def fake_terminate(target):
        sent.append(target.pid)
        return TerminationOutcome(target, False, "No such process")

    app = ProctopApp(_settings(proc_root))
    app.dashboard.controller._terminate = fake_terminate
    async with app.run_test(size=(80, 24)) as pilot:
        selected = app.dashboard.snapshot[0].pid
        await pilot.press("k")
        await pilot.pause()
        await pilot.press("1")
        await pilot.pause()

        assert sent == [selected]
        assert isinstance(pilot.app.screen, TerminateDialog)
        assert pilot.app.screen.lines[0] == f"Failed to send SIGTERM to PID {selected}"

        await pilot.press("space")
        await pilot.pause()
        assert not isinstance(pilot.app.screen, TerminateDialog)
        assert app.dashboard.view.selected_index == 0


@pytest.mark.asyncio
async def test_app_no_kill(proc_root: Path):
    """Test --no-kill reports instead of confirming."""
    app = ProctopApp(_settings(proc_root, enable_kill=False))
    async with app.run_test(size=(80, 24)) as pilot:
        await pilot.press("k")
        await pilot.pause()
        assert app.dashboard.mode is Mode.REPORTING
        assert isinstance(pilot.app.screen, TerminateDialog)
        assert "disabled" in pilot.app.screen.lines[1]


@pytest.mark.asyncio
async def test_app_degraded_without_proc(tmp_path: Path):
    """Test an unreadable proc root degrades instead of crashing."""
    app = ProctopApp(_settings(tmp_path / "missing"))
    async with app.run_test(size=(80, 24)) as pilot:
        await pilot.pause()
        assert app.dashboard.snapshot is None
        frame = app.dashboard.frame(24, 80)
        assert frame.lines[0].text.startswith("Process list unavailable")

        await pilot.press("k", "down")
        assert app.dashboard.mode is Mode.BROWSING
