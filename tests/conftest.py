"""Shared fixtures: synthetic /proc trees."""

from pathlib import Path

import pytest


def status_text(pid=None, name=None, swap=None, extra=()) -> str:
    """Build the text of a status record in the kernel's layout."""
    lines = []
    if name is not None:
        lines.append(f"Name:\t{name}")
    lines.append("Umask:\t0022")
    lines.append("State:\tS (sleeping)")
    if pid is not None:
        lines.append(f"Pid:\t{pid}")
    lines.append("PPid:\t0")
    lines.append("VmRSS:\t    1024 kB")
    if swap is not None:
        lines.append(f"VmSwap:\t{swap}")
    lines.extend(extra)
    return "\n".join(lines) + "\n"


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    root = tmp_path / "proc"
    root.mkdir()
    return root


@pytest.fixture
def add_process(proc_root: Path):
    """Create <proc_root>/<dirname>/status with the given record text."""

    def _add(dirname: str, text: str | None) -> Path:
        directory = proc_root / dirname
        directory.mkdir()
        if text is not None:
            (directory / "status").write_text(text)
        return directory

    return _add


@pytest.fixture
def make_status():
    """Factory fixture for status record text."""
    return status_text
