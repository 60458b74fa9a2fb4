"""Memo thread parsing and editing for Weeknote.

The memo subsection is a bullet log. Unindented bullets are memos; indented
bullets right after a memo are its replies. Deeper nesting is flattened to a
single reply level.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime

from weeknote.addressing import is_section_boundary, locate_subsection
from weeknote.config import WeeknoteConfig
from weeknote.dateformat import format_date
from weeknote.document import modify_lines, read_lines
from weeknote.indent import indent_unit, leading_whitespace, level_from_indent
from weeknote.models import MemoNode, SectionRange
from weeknote.vault import Vault
from weeknote.workspace import report_path

logger = logging.getLogger(__name__)

MEMO_SECTION = "memo"

_TIMESTAMP_PATTERNS = (
    re.compile(r"^(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}(?::\d{2})?)\s+(.*)$"),
    re.compile(r"^(\d{2}:\d{2}(?::\d{2})?)\s+(.*)$"),
    re.compile(r"^\(([^)]+)\)\s*(.*)$"),
)


def parse_memo_timestamp(raw: str) -> tuple[str, str]:
    """Split a memo's raw text into (timestamp, content).

    '2026-02-09 10:15:00 Shipped it' -> ('2026-02-09 10:15:00', 'Shipped it')
    '(late) note'                    -> ('late', 'note')
    'no stamp'                       -> ('', 'no stamp')
    """
    for pattern in _TIMESTAMP_PATTERNS:
        m = pattern.match(raw)
        if m:
            return m.group(1), m.group(2)
    return "", raw


def memo_timestamp(config: WeeknoteConfig, now: datetime | None = None) -> str:
    if now is None:
        now = datetime.now()
    return format_date(now, config.timestamp_format, config.language)


def _memo_line(content: str, timestamp: str, indent: str = "") -> str:
    text = content.replace("\n", " ")
    return f"{indent}- {timestamp} {text}" if timestamp else f"{indent}- {text}"


def _is_memo(line: str) -> bool:
    trimmed = line.strip()
    return trimmed.startswith("- ") and len(trimmed) > 2


def _is_reply(line: str, style: str) -> bool:
    """Indented at least one level; shallower indentation is a top-level memo."""
    return level_from_indent(leading_whitespace(line), style) > 0


def _reply_run_end(lines: list[str], memo_index: int, stop: int, style: str) -> int:
    """Index just after the replies that directly follow a top-level memo."""
    insert_at = memo_index + 1
    for i in range(memo_index + 1, stop):
        line = lines[i]
        trimmed = line.strip()
        if trimmed == "" or is_section_boundary(line):
            break
        if trimmed.startswith("- "):
            if not _is_reply(line, style):
                break
            insert_at = i + 1
    return insert_at


# ── Reading ───────────────────────────────────────────────────


def parse_memo_lines(lines: list[str], section: SectionRange, style: str) -> list[MemoNode]:
    memos: list[MemoNode] = []
    parent: MemoNode | None = None
    for i in range(section.start, section.end):
        line = lines[i]
        if not _is_memo(line):
            continue
        raw = line.strip()[2:]
        level = 1 if _is_reply(line, style) else 0
        timestamp, content = parse_memo_timestamp(raw)
        node = MemoNode(timestamp=timestamp, content=content, raw_line=raw, line_index=i, level=level)
        if level == 0:
            parent = node
            memos.append(node)
        elif parent is not None:
            parent.replies.append(node)
    return memos


def _read_memo_section(
    vault: Vault, config: WeeknoteConfig, day: date
) -> tuple[list[str], SectionRange] | None:
    lines = read_lines(vault, report_path(config, day))
    if lines is None:
        return None
    section = locate_subsection(lines, config, day, MEMO_SECTION)
    if section is None:
        return None
    return lines, section


def get_day_memos_structured(vault: Vault, config: WeeknoteConfig, day: date) -> list[MemoNode]:
    found = _read_memo_section(vault, config, day)
    if found is None:
        return []
    lines, section = found
    return parse_memo_lines(lines, section, config.indent_style)


def get_day_memos(vault: Vault, config: WeeknoteConfig, day: date) -> list[str]:
    """Raw text of the top-level memos of *day*, without replies."""
    found = _read_memo_section(vault, config, day)
    if found is None:
        return []
    lines, section = found
    return [
        lines[i].strip()[2:]
        for i in range(section.start, section.end)
        if _is_memo(lines[i]) and not _is_reply(lines[i], config.indent_style)
    ]


# ── Writing ───────────────────────────────────────────────────


def _edit_memos(vault: Vault, config: WeeknoteConfig, day: date, edit) -> bool:
    def apply(lines: list[str]) -> bool:
        section = locate_subsection(lines, config, day, MEMO_SECTION)
        if section is None:
            logger.debug("no memo section for %s", day)
            return False
        return edit(lines, section)

    return modify_lines(vault, report_path(config, day), apply)


def append_memo(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    content: str,
    timestamp: str | None = None,
) -> bool:
    """Add a memo after the last top-level memo and its replies."""
    if timestamp is None:
        timestamp = memo_timestamp(config)

    def edit(lines: list[str], section: SectionRange) -> bool:
        insert_at = section.start
        for i in range(section.start, section.end):
            if _is_memo(lines[i]) and not _is_reply(lines[i], config.indent_style):
                insert_at = _reply_run_end(lines, i, section.end, config.indent_style)
        lines.insert(insert_at, _memo_line(content, timestamp))
        return True

    return _edit_memos(vault, config, day, edit)


def append_reply(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    parent_line_index: int,
    content: str,
    timestamp: str | None = None,
) -> bool:
    """Add a reply after the existing replies of the memo at *parent_line_index*."""
    if timestamp is None:
        timestamp = memo_timestamp(config)

    def edit(lines: list[str], section: SectionRange) -> bool:
        if parent_line_index not in section or not _is_memo(lines[parent_line_index]):
            return False
        insert_at = _reply_run_end(lines, parent_line_index, len(lines), config.indent_style)
        lines.insert(insert_at, _memo_line(content, timestamp, indent_unit(config.indent_style)))
        return True

    return _edit_memos(vault, config, day, edit)


def _find_raw(lines: list[str], section: SectionRange, original_raw: str) -> int:
    target = f"- {original_raw}".strip()
    for i in range(section.start, section.end):
        if lines[i].strip() == target:
            return i
    return -1


def update_memo(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    original_raw: str,
    timestamp: str,
    new_content: str,
) -> bool:
    """Rewrite the first memo line whose text equals *original_raw*.

    Duplicate memo lines are not disambiguated; the first one wins.
    """

    def edit(lines: list[str], section: SectionRange) -> bool:
        i = _find_raw(lines, section, original_raw)
        if i < 0:
            return False
        lines[i] = _memo_line(new_content, timestamp, leading_whitespace(lines[i]))
        return True

    return _edit_memos(vault, config, day, edit)


def delete_memo_by_line(vault: Vault, config: WeeknoteConfig, day: date, original_raw: str) -> bool:
    """Remove the first memo line whose text equals *original_raw*."""

    def edit(lines: list[str], section: SectionRange) -> bool:
        i = _find_raw(lines, section, original_raw)
        if i < 0:
            return False
        del lines[i]
        return True

    return _edit_memos(vault, config, day, edit)


def delete_memo(
    vault: Vault,
    config: WeeknoteConfig,
    day: date,
    memo: MemoNode,
    delete_replies: bool = True,
) -> bool:
    """Remove a memo (and by default its replies) by line index.

    Lines whose text no longer matches the node are left alone.
    """
    targets = [memo]
    if delete_replies and memo.level == 0:
        targets += memo.replies

    def edit(lines: list[str], section: SectionRange) -> bool:
        doomed = {
            n.line_index
            for n in targets
            if n.line_index in section and lines[n.line_index].strip() == f"- {n.raw_line}".strip()
        }
        if not doomed:
            return False
        lines[:] = [line for i, line in enumerate(lines) if i not in doomed]
        return True

    return _edit_memos(vault, config, day, edit)
