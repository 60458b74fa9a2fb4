"""Tests for weeknote/tasks.py: tree parsing and line-level mutations."""

from datetime import date

from weeknote.checkbox import split_task_content
from weeknote.tasks import (
    add_task,
    copy_tasks_from_date,
    delete_task,
    get_day_tasks,
    insert_task_at_line,
    move_task_subtree,
    parse_task_lines,
    past_days_with_tasks,
    reorder_task,
    set_task_checked,
    toggle_task,
    update_task_content,
)

REPORT_PATH = "01.Weeknote/2026/02/2026-02-08.md"
MON = date(2026, 2, 9)
TUE = date(2026, 2, 10)


def _numbered(lines):
    return list(enumerate(lines))


# ── Parsing ───────────────────────────────────────────────────


def test_parse_task_lines_levels_0_1_2_1_0():
    lines = ["- [ ] a", "  - [ ] b", "    - [ ] c", "  - [ ] d", "- [ ] e"]
    roots = parse_task_lines(_numbered(lines), "2-spaces")
    assert [r.title for r in roots] == ["a", "e"]
    a = roots[0]
    assert [c.title for c in a.children] == ["b", "d"]
    assert [c.title for c in a.children[0].children] == ["c"]
    assert a.children[1].children == []
    assert roots[1].children == []


def test_parse_task_lines_level_jump_nests_under_nearest_shallower():
    lines = ["- [ ] top", "\t\t\t- [ ] deep", "\t- [ ] mid"]
    roots = parse_task_lines(_numbered(lines), "tab")
    assert len(roots) == 1
    assert [c.title for c in roots[0].children] == ["deep", "mid"]
    assert roots[0].children[0].level == 3


def test_parse_task_lines_skips_non_task_lines():
    lines = ["- [ ] a", "some text", "- [x] b", "- [ ]"]
    roots = parse_task_lines(_numbered(lines), "tab")
    assert [(r.title, r.checked, r.line_index) for r in roots] == [("a", False, 0), ("b", True, 2)]


def test_parse_task_lines_links():
    lines = [
        "- [ ] [Fix login #12](https://github.com/o/r/issues/12) today",
        "- [x] https://github.com/o/r/pull/7",
    ]
    roots = parse_task_lines(_numbered(lines), "tab")
    assert roots[0].title == "Fix login #12"
    assert roots[0].url == "https://github.com/o/r/issues/12"
    assert roots[0].suffix == "today"
    assert roots[0].link_type == "issue"
    assert roots[1].link_type == "pull-request"
    assert roots[1].title == roots[1].url


def test_split_task_content_plain():
    assert split_task_content("Write report") == ("Write report", None, None, "none")
    assert split_task_content("[Doc](https://example.com/doc)")[3] == "other"


def test_get_day_tasks(vault, config):
    roots = get_day_tasks(vault, config, MON)
    assert [r.title for r in roots] == ["A", "B"]
    assert roots[0].children[0].title == "A1"
    assert [n.line_index for n in roots[0].walk()] == [19, 20]


def test_get_day_tasks_missing_day_or_file(vault, config):
    assert get_day_tasks(vault, config, date(2026, 2, 11)) == []
    assert get_day_tasks(vault, config, date(2026, 3, 2)) == []


# ── Mutations ─────────────────────────────────────────────────


def test_add_task_appends_after_last_task(vault, config, report_lines):
    assert add_task(vault, config, MON, "C")
    lines = report_lines()
    assert lines[19:24] == ["- [ ] A", "  - [ ] A1", "- [ ] B", "- [ ] C", ""]


def test_add_task_to_empty_section(vault, config, report_lines):
    assert add_task(vault, config, TUE, "first\nline")
    lines = report_lines()
    assert lines[34:37] == ["### tasks", "- [ ] first line", ""]


def test_add_task_without_section_is_noop(vault, config, report_lines):
    before = report_lines()
    assert add_task(vault, config, date(2026, 2, 11), "nowhere") is False
    assert report_lines() == before


def test_add_task_without_file_creates_nothing(vault, config, workspace):
    assert add_task(vault, config, date(2026, 3, 2), "nowhere") is False
    assert not (workspace / "01.Weeknote/2026/03").exists()


def test_insert_task_copies_indent_from_line_above(vault, config, report_lines):
    assert insert_task_at_line(vault, config, MON, "X", 21)
    assert report_lines()[21] == "  - [ ] X"


def test_insert_task_uses_following_indent(vault, config, report_lines):
    assert insert_task_at_line(vault, config, MON, "X", 20, use_following_indent=True)
    assert report_lines()[20:22] == ["  - [ ] X", "  - [ ] A1"]


def test_insert_task_out_of_range(vault, config, report_lines):
    before = report_lines()
    assert insert_task_at_line(vault, config, MON, "X", len(before) + 1) is False
    assert insert_task_at_line(vault, config, MON, "X", -1) is False
    assert report_lines() == before


def test_set_task_checked_is_idempotent(vault, config, report_lines):
    assert set_task_checked(vault, config, MON, 20, True)
    once = report_lines()
    assert once[20] == "  - [x] A1"
    assert set_task_checked(vault, config, MON, 20, True) is False
    assert report_lines() == once


def test_set_task_checked_uncheck(vault, config, report_lines):
    set_task_checked(vault, config, MON, 19, True)
    assert set_task_checked(vault, config, MON, 19, False)
    assert report_lines()[19] == "- [ ] A"


def test_set_task_checked_ignores_non_task_line(vault, config, report_lines):
    before = report_lines()
    assert set_task_checked(vault, config, MON, 18, True) is False
    assert set_task_checked(vault, config, MON, 999, True) is False
    assert report_lines() == before


def test_toggle_task(vault, config, report_lines):
    assert toggle_task(vault, config, MON, 21)
    assert report_lines()[21] == "- [x] B"
    assert toggle_task(vault, config, MON, 21)
    assert report_lines()[21] == "- [ ] B"


def test_update_task_content_keeps_indent(vault, config, report_lines):
    assert update_task_content(vault, config, MON, 20, True, "Renamed")
    assert report_lines()[20] == "  - [x] Renamed"


def test_update_task_content_keeps_checkbox_when_unspecified(vault, config, report_lines):
    assert set_task_checked(vault, config, MON, 19, True)
    assert update_task_content(vault, config, MON, 19, None, "Renamed")
    assert report_lines()[19] == "- [x] Renamed"
    assert update_task_content(vault, config, MON, 21, None, "B2")
    assert report_lines()[21] == "- [ ] B2"


def test_delete_task_leaves_children(vault, config, report_lines):
    assert delete_task(vault, config, MON, 19)
    lines = report_lines()
    assert lines[19:21] == ["  - [ ] A1", "- [ ] B"]
    roots = get_day_tasks(vault, config, MON)
    assert [r.title for r in roots] == ["A1", "B"]


# ── Reordering ────────────────────────────────────────────────


def test_reorder_forward_compensates_for_removal(vault, config, report_lines):
    # A, A1, B at 19, 20, 21: moving A toward B's index lands it before B.
    assert reorder_task(vault, config, MON, 19, 21)
    assert report_lines()[19:22] == ["  - [ ] A1", "- [ ] A", "- [ ] B"]


def test_reorder_flat_list(vault, config, report_lines):
    text = vault.read(REPORT_PATH).replace("- [ ] A\n  - [ ] A1\n- [ ] B\n", "- [ ] A\n- [ ] B\n- [ ] C\n")
    vault.write(REPORT_PATH, text)

    assert reorder_task(vault, config, MON, 19, 21)
    assert report_lines()[19:22] == ["- [ ] B", "- [ ] A", "- [ ] C"]


def test_reorder_single_line_with_target_level(vault, config, report_lines):
    # Move A1 to the blank line after B and outdent it to the root level.
    assert reorder_task(vault, config, MON, 20, 22, 0)
    assert report_lines()[18:23] == ["### tasks", "- [ ] A", "- [ ] B", "- [ ] A1", ""]


def test_reorder_backward_with_indent(vault, config, report_lines):
    assert reorder_task(vault, config, MON, 21, 20, 1)
    assert report_lines()[19:22] == ["- [ ] A", "  - [ ] B", "  - [ ] A1"]


def test_reorder_out_of_range(vault, config, report_lines):
    before = report_lines()
    assert reorder_task(vault, config, MON, 19, len(before)) is False
    assert report_lines() == before


def test_move_task_subtree(vault, config, report_lines):
    assert move_task_subtree(vault, config, MON, 19, 22)
    assert report_lines()[19:23] == ["- [ ] B", "- [ ] A", "  - [ ] A1", ""]


def test_move_task_subtree_with_target_level(vault, config, report_lines):
    add_task(vault, config, MON, "C")
    # Nest A and its child under C.
    assert move_task_subtree(vault, config, MON, 19, 23, 1)
    assert report_lines()[19:23] == ["- [ ] B", "- [ ] C", "  - [ ] A", "    - [ ] A1"]


def test_move_task_subtree_into_itself_is_noop(vault, config, report_lines):
    before = report_lines()
    assert move_task_subtree(vault, config, MON, 19, 20) is False
    assert report_lines() == before


# ── Cross-day helpers ─────────────────────────────────────────


def test_copy_tasks_from_date(vault, config, report_lines):
    set_task_checked(vault, config, MON, 19, True)
    assert copy_tasks_from_date(vault, config, MON, TUE) == 3
    lines = report_lines()
    assert lines[34:39] == ["### tasks", "- [ ] A", "  - [ ] A1", "- [ ] B", ""]


def test_copy_tasks_creates_target_week(vault, config, workspace):
    target = date(2026, 2, 16)
    assert copy_tasks_from_date(vault, config, MON, target) == 3
    text = (workspace / "01.Weeknote/2026/02/2026-02-15.md").read_text(encoding="utf-8")
    assert "## 02-16 (Mon)\n\n### schedule\n\n### tasks\n- [ ] A\n  - [ ] A1\n- [ ] B\n" in text


def test_copy_tasks_from_empty_day(vault, config, report_lines):
    before = report_lines()
    assert copy_tasks_from_date(vault, config, TUE, MON) == 0
    assert report_lines() == before


def test_past_days_with_tasks(vault, config):
    assert past_days_with_tasks(vault, config, date(2026, 2, 11)) == [(MON, 2)]
