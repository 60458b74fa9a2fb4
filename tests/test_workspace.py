"""Tests for weeknote/workspace.py: week arithmetic and report paths."""

from datetime import date
from pathlib import Path

import pytest

from weeknote.config import WeeknoteConfig
from weeknote.workspace import (
    INVALID_FORMAT,
    InvalidPathFormat,
    config_path,
    convert_path_format,
    file_path_for_week,
    preview_path,
    report_path,
    validate_path_format,
    week_days,
    week_start_date,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert config_path(workspace) == workspace / "weeknote.yaml"


def test_week_start_date():
    wed = date(2026, 2, 11)
    assert week_start_date(wed, 0) == date(2026, 2, 8)
    assert week_start_date(wed, 1) == date(2026, 2, 9)
    assert week_start_date(wed, 3) == wed
    assert week_start_date(date(2026, 2, 8), 1) == date(2026, 2, 2)


def test_week_days():
    days = week_days(date(2026, 2, 8))
    assert len(days) == 7
    assert days[-1] == date(2026, 2, 14)


def test_convert_path_format():
    assert convert_path_format("01.Weeknote/[YYYY]/[MM]") == "[01.Weeknote/]YYYY[/]MM"
    assert convert_path_format("[YYYY]-[MM]-[DD]") == "YYYY[-]MM[-]DD"


def test_validate_path_format_ok():
    assert validate_path_format("01.Weeknote/[YYYY]/[MM]/[YYYY]-[MM]-[DD]") == []


@pytest.mark.parametrize(
    "fmt, fragment",
    [
        ("", "empty"),
        ("notes/[YYYY", "Unbalanced"),
        ("notes/[[YYYY]]", "Unbalanced"),
        ("notes/week", "no date token"),
        ("notes/[YYYY]-[QQ]", "Unknown date token"),
        ("/abs/[YYYY]", "relative"),
        ("../[YYYY]", ".."),
    ],
)
def test_validate_path_format_errors(fmt, fragment):
    errors = validate_path_format(fmt)
    assert any(fragment in e for e in errors)


def test_file_path_for_week():
    config = WeeknoteConfig()
    assert file_path_for_week(config, date(2026, 2, 8)) == "01.Weeknote/2026/02/2026-02-08.md"
    assert report_path(config, date(2026, 2, 11)) == "01.Weeknote/2026/02/2026-02-08.md"


def test_report_path_across_month_boundary():
    config = WeeknoteConfig(week_start_day=1)
    assert report_path(config, date(2026, 3, 1)) == "01.Weeknote/2026/02/2026-02-23.md"


def test_invalid_file_format():
    config = WeeknoteConfig(file_format="weekly")
    with pytest.raises(InvalidPathFormat):
        report_path(config, date(2026, 2, 9))
    assert preview_path(config, date(2026, 2, 9)) == INVALID_FORMAT
    assert preview_path(WeeknoteConfig(), date(2026, 2, 9)).endswith("2026-02-08.md")
    assert isinstance(InvalidPathFormat("x"), ValueError)


def test_workspace_root_default(monkeypatch):
    monkeypatch.delenv("WEEKNOTE_ROOT", raising=False)
    assert workspace_root() == (Path.home() / "weeknote").resolve()
