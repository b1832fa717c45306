"""Shared test fixtures for proctop tests."""

from pathlib import Path

import pytest

MEMINFO = """\
MemTotal:       16384000 kB
MemFree:         4096000 kB
MemAvailable:    8192000 kB
Buffers:          512000 kB
Cached:          2048000 kB
SwapCached:         1024 kB
SwapTotal:       2048000 kB
SwapFree:        1024000 kB
"""


def status_text(name: str = "bash", state: str = "S (sleeping)", rss_kb: int = 2048) -> str:
    """A minimal /proc/<pid>/status body."""
    return (
        f"Name:\t{name}\n"
        "Umask:\t0022\n"
        f"State:\t{state}\n"
        "Tgid:\t1\n"
        f"VmRSS:\t    {rss_kb} kB\n"
        "Threads:\t1\n"
    )


def populate_proc(root: Path, entries: dict[str, str | None]) -> Path:
    """
    Build a fake proc tree.

    Each key becomes a directory; a string value is written to its
    ``status`` file, ``None`` leaves the directory without one.
    """
    root.mkdir(parents=True, exist_ok=True)
    for entry, status in entries.items():
        directory = root / entry
        directory.mkdir(exist_ok=True)
        if status is not None:
            (directory / "status").write_text(status)
    return root


@pytest.fixture()
def proc_root(tmp_path: Path) -> Path:
    """A fake proc tree with three readable processes and a meminfo file."""
    root = populate_proc(
        tmp_path / "proc",
        {
            "1": status_text("init", "S (sleeping)", 1024),
            "42": status_text("bash", "R (running)", 2048),
            "100": status_text("python3", "S (sleeping)", 40960),
            "self": None,
        },
    )
    (root / "meminfo").write_text(MEMINFO)
    return root
