"""Shared test fixtures for Weeknote tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from weeknote.config import load_config
from weeknote.vault import FileVault

REPORT_PATH = "01.Weeknote/2026/02/2026-02-08.md"

# Week of Sunday 2026-02-08. Line numbers are referenced by the tests.
WEEK_LINES = [
    "# Reports",                                  # 0
    "",                                           # 1
    "## 02-08 (Sun)",                             # 2
    "",                                           # 3
    "### schedule",                               # 4
    "",                                           # 5
    "### tasks",                                  # 6
    "",                                           # 7
    "### memo",                                   # 8
    "",                                           # 9
    "---",                                        # 10
    "",                                           # 11
    "## 02-09 (Mon)",                             # 12
    "",                                           # 13
    "### schedule",                               # 14
    "- [x] 10:00-11:00 Standup ＠Room1",          # 15
    "- [ ] 13:00-14:00 Review",                   # 16
    "",                                           # 17
    "### tasks",                                  # 18
    "- [ ] A",                                    # 19
    "  - [ ] A1",                                 # 20
    "- [ ] B",                                    # 21
    "",                                           # 22
    "### memo",                                   # 23
    "- 2026-02-09 09:00:00 Kickoff",              # 24
    "  - 2026-02-09 09:30:00 Follow-up",          # 25
    "- 2026-02-09 12:00:00 Lunch",                # 26
    "",                                           # 27
    "---",                                        # 28
    "",                                           # 29
    "## 02-10 (Tue)",                             # 30
    "",                                           # 31
    "### schedule",                               # 32
    "",                                           # 33
    "### tasks",                                  # 34
    "",                                           # 35
    "### memo",                                   # 36
    "",                                           # 37
    "---",                                        # 38
    "",                                           # 39
    "# Summary",                                  # 40
    "- ",                                         # 41
    "",                                           # 42
]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a config file and one weekly report."""
    root = tmp_path / "workspace"
    root.mkdir()

    settings = {
        "language": "en",
        "indentStyle": "2-spaces",
        "weekStartDay": 0,
        "fileFormat": "01.Weeknote/[YYYY]/[MM]/[YYYY]-[MM]-[DD]",
    }
    (root / "weeknote.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    report = root / REPORT_PATH
    report.parent.mkdir(parents=True)
    report.write_text("\n".join(WEEK_LINES), encoding="utf-8")

    # Set env var
    os.environ["WEEKNOTE_ROOT"] = str(root)
    yield root
    # Cleanup
    if "WEEKNOTE_ROOT" in os.environ:
        del os.environ["WEEKNOTE_ROOT"]


@pytest.fixture
def vault(workspace: Path) -> FileVault:
    return FileVault(workspace)


@pytest.fixture
def config(workspace: Path):
    return load_config(workspace)


@pytest.fixture
def report_lines(workspace: Path):
    """Callable returning the current lines of a report in the workspace."""

    def read(path: str = REPORT_PATH) -> list[str]:
        return (workspace / path).read_text(encoding="utf-8").split("\n")

    return read
