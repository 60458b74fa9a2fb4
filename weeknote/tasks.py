"""Task tree parsing and line-level task mutations for Weeknote.

The tasks subsection of a day is a run of checklist lines whose indentation
encodes nesting. Reads rebuild the tree from text every time; writes splice
single lines by index. Line indices come from the most recent parse and are
stale as soon as any write happens.

All mutations are silent no-ops (returning False) when the week file does
not exist, the day has no tasks subsection, or an index is out of range.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable

from weeknote.addressing import locate_subsection
from weeknote.checkbox import (
    BULLET_RE,
    CHECKED_RE,
    CHECKLIST_PREFIX_RE,
    MARKER_RE,
    TASK_LINE_RE,
    UNCHECKED_RE,
    checkbox_line,
    is_checklist_line,
    split_task_content,
)
from weeknote.config import WeeknoteConfig
from weeknote.document import modify_lines, read_lines
from weeknote.indent import (
    GENERATED_INDENT_STYLE,
    indent_string_from_level,
    leading_whitespace,
    level_from_indent,
    line_level,
)
from weeknote.models import SectionRange, TaskNode
from weeknote.report import ensure_report_exists
from weeknote.vault import Vault
from weeknote.workspace import report_path

logger = logging.getLogger(__name__)

TASKS_SECTION = "tasks"

SectionEdit = Callable[[list[str], SectionRange], bool]


# ── Parsing ───────────────────────────────────────────────────


def parse_task_lines(task_lines: list[tuple[int, str]], style: str) -> list[TaskNode]:
    """Build a task forest from (line_index, line) pairs.

    A node's parent is the nearest preceding node with a strictly smaller
    level, so a jump from level 0 to level 3 still nests directly under the
    level-0 node.
    """
    roots: list[TaskNode] = []
    stack: list[tuple[int, TaskNode]] = []

    for index, line in task_lines:
        m = TASK_LINE_RE.match(line)
        if not m:
            continue
        level = level_from_indent(m.group(1), style)
        content = m.group(3)
        title, url, suffix, link_type = split_task_content(content)
        node = TaskNode(
            level=level,
            checked=m.group(2) == "x",
            title=title,
            raw_content=content,
            url=url,
            suffix=suffix,
            link_type=link_type,
            line_index=index,
        )

        while stack and stack[-1][0] >= level:
            stack.pop()
        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)
        stack.append((level, node))

    return roots


def get_day_tasks(vault: Vault, config: WeeknoteConfig, day: date) -> list[TaskNode]:
    """Parse the tasks subsection of *day* into a forest."""
    lines = read_lines(vault, report_path(config, day))
    if lines is None:
        return []
    section = locate_subsection(lines, config, day, TASKS_SECTION)
    if section is None:
        return []
    task_lines = [(i, lines[i]) for i in range(section.start, section.end) if is_checklist_line(lines[i])]
    return parse_task_lines(task_lines, config.indent_style)


# ── Mutation plumbing ─────────────────────────────────────────


def _edit_tasks(vault: Vault, config: WeeknoteConfig, day: date, edit: SectionEdit) -> bool:
    def apply(lines: list[str]) -> bool:
        section = locate_subsection(lines, config, day, TASKS_SECTION)
        if section is None:
            logger.debug("no tasks section for %s", day)
            return False
        return edit(lines, section)

    return modify_lines(vault, report_path(config, day), apply)


def _in_bounds(lines: list[str], *indices: int) -> bool:
    return all(0 <= i < len(lines) for i in indices)


def _append_index(lines: list[str], section: SectionRange) -> int:
    """Line index just after the last checklist line of the section."""
    insert_at = section.start
    for i in range(section.start, section.end):
        if is_checklist_line(lines[i]):
            insert_at = i + 1
    return insert_at


def _single_line(text: str) -> str:
    return text.replace("\n", " ")


# ── Operations ────────────────────────────────────────────────


def add_task(vault: Vault, config: WeeknoteConfig, day: date, text: str) -> bool:
    """Append an unchecked task after the existing task list of *day*."""

    def edit(lines: list[str], section: SectionRange) -> bool:
        lines.insert(_append_index(lines, section), checkbox_line(_single_line(text)))
        return True

    return _edit_tasks(vault, config, day, edit)


def insert_task_at_line(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    text: str,
    before_line_index: int,
    use_following_indent: bool = False,
) -> bool:
    """Insert an unchecked task before *before_line_index*.

    The indentation is copied from the checklist line just above the
    insertion point, or from the line currently at it when
    *use_following_indent* is set.
    """

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not 0 <= before_line_index <= len(lines):
            return False
        ref = before_line_index if use_following_indent else before_line_index - 1
        indent = ""
        if 0 <= ref < len(lines):
            m = CHECKLIST_PREFIX_RE.match(lines[ref])
            if m:
                indent = m.group(1)
        lines.insert(before_line_index, checkbox_line(_single_line(text), indent=indent))
        return True

    return _edit_tasks(vault, config, day, edit)


def set_task_checked(
    vault: Vault, config: WeeknoteConfig, day: date, line_index: int, checked: bool
) -> bool:
    """Set the checkbox of one line, touching only the bracket marker."""

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not _in_bounds(lines, line_index):
            return False
        line = lines[line_index]
        if checked:
            new_line = UNCHECKED_RE.sub(r"\1- [x] ", line, count=1)
        else:
            new_line = CHECKED_RE.sub(r"\1- [ ] ", line, count=1)
        if new_line == line:
            return False
        lines[line_index] = new_line
        return True

    return _edit_tasks(vault, config, day, edit)


def toggle_task(vault: Vault, config: WeeknoteConfig, day: date, line_index: int) -> bool:
    """Flip the checkbox of one line."""

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not _in_bounds(lines, line_index):
            return False
        line = lines[line_index]
        if UNCHECKED_RE.match(line):
            lines[line_index] = UNCHECKED_RE.sub(r"\1- [x] ", line, count=1)
        elif CHECKED_RE.match(line):
            lines[line_index] = CHECKED_RE.sub(r"\1- [ ] ", line, count=1)
        else:
            return False
        return True

    return _edit_tasks(vault, config, day, edit)


def update_task_content(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    line_index: int,
    checked: bool | None,
    new_title: str,
) -> bool:
    """Rewrite a task line, keeping only its original indentation.

    *new_title* is written verbatim; any link rendering is the caller's job.
    With *checked* None the line keeps its current checkbox state.
    """

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not _in_bounds(lines, line_index):
            return False
        line = lines[line_index]
        mark = CHECKED_RE.match(line) is not None if checked is None else checked
        lines[line_index] = checkbox_line(_single_line(new_title), mark, leading_whitespace(line))
        return True

    return _edit_tasks(vault, config, day, edit)


def delete_task(vault: Vault, config: WeeknoteConfig, day: date, line_index: int) -> bool:
    """Remove exactly one line. Children of the removed task are left in place."""

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not _in_bounds(lines, line_index):
            return False
        del lines[line_index]
        return True

    return _edit_tasks(vault, config, day, edit)


def _reindent(line: str, level: int) -> str:
    m = MARKER_RE.search(line) or BULLET_RE.search(line)
    if not m:
        return line
    return indent_string_from_level(level, GENERATED_INDENT_STYLE) + line[m.start():]


def reorder_task(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    from_line_index: int,
    to_line_index: int,
    target_level: int = -1,
) -> bool:
    """Move a single line so it lands before the line now at *to_line_index*.

    With ``target_level >= 0`` the moved line is re-indented to that level.
    Only the one line moves; its former children stay where they are.
    """

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not _in_bounds(lines, from_line_index, to_line_index):
            return False
        line = lines[from_line_index]
        if target_level >= 0:
            line = _reindent(line, target_level)
        del lines[from_line_index]
        target = to_line_index - 1 if from_line_index < to_line_index else to_line_index
        lines.insert(target, line)
        return True

    return _edit_tasks(vault, config, day, edit)


def move_task_subtree(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    from_line_index: int,
    to_line_index: int,
    target_level: int = -1,
) -> bool:
    """Move a task together with its descendant lines.

    Descendants are the checklist lines directly following the task with a
    deeper level. With ``target_level >= 0`` the whole block is shifted so
    the task lands on that level and children keep their relative depth.
    Moving a block into itself is a no-op.
    """
    style = config.indent_style

    def edit(lines: list[str], section: SectionRange) -> bool:
        if not _in_bounds(lines, from_line_index, to_line_index):
            return False
        if not is_checklist_line(lines[from_line_index]):
            return False
        src_level = line_level(lines[from_line_index], style)
        end = from_line_index + 1
        while end < len(lines) and is_checklist_line(lines[end]) and line_level(lines[end], style) > src_level:
            end += 1
        if from_line_index < to_line_index < end:
            return False

        block = lines[from_line_index:end]
        if target_level >= 0:
            delta = target_level - src_level
            block = [_reindent(b, max(0, line_level(b, style) + delta)) for b in block]

        del lines[from_line_index:end]
        target = to_line_index - len(block) if to_line_index > from_line_index else to_line_index
        lines[target:target] = block
        return True

    return _edit_tasks(vault, config, day, edit)


# ── Cross-day helpers ─────────────────────────────────────────


def copy_tasks_from_date(
    vault: Vault, config: WeeknoteConfig, source_day: date, target_day: date
) -> int:
    """Copy the task tree of *source_day* into *target_day* as unchecked tasks.

    The target week's report is created when missing. Returns the number of
    lines copied (0 when there was nothing to copy or no tasks section).
    """
    nodes = [n for root in get_day_tasks(vault, config, source_day) for n in root.walk()]
    if not nodes:
        return 0

    new_lines = [
        checkbox_line(n.raw_content, indent=indent_string_from_level(n.level, GENERATED_INDENT_STYLE))
        for n in nodes
    ]

    ensure_report_exists(vault, config, target_day)

    def edit(lines: list[str], section: SectionRange) -> bool:
        at = _append_index(lines, section)
        lines[at:at] = new_lines
        return True

    if not _edit_tasks(vault, config, target_day, edit):
        return 0
    logger.info("copied %d tasks from %s to %s", len(new_lines), source_day, target_day)
    return len(new_lines)


def past_days_with_tasks(
    vault: Vault,
    config: WeeknoteConfig,
    current_day: date,
    limit: int = 3,
    max_lookback: int = 14,
) -> list[tuple[date, int]]:
    """Most recent days before *current_day* that have tasks, with root task counts."""
    results = []
    for i in range(1, max_lookback + 1):
        if len(results) >= limit:
            break
        d = current_day - timedelta(days=i)
        tasks = get_day_tasks(vault, config, d)
        if tasks:
            results.append((d, len(tasks)))
    return results
