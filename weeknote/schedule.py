"""Schedule subsection regeneration from calendar events.

Every sync replaces the whole schedule body of a day with freshly formatted
event lines. Calendar events carry no durable identifier, so checkbox state
is carried over by matching a normalized form of the visible text: a
fetched event is checked when its normalized name equals the normalized text
of a previously checked line. Declined events are always checked and struck
through.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import date
from typing import Iterable

from weeknote.addressing import locate_subsection
from weeknote.config import ALL_DAY_LABELS, WeeknoteConfig
from weeknote.document import modify_lines, read_lines
from weeknote.indent import leading_whitespace
from weeknote.models import ScheduleEvent, ScheduleLineParts
from weeknote.vault import Vault
from weeknote.workspace import report_path

logger = logging.getLogger(__name__)

SCHEDULE_SECTION = "schedule"
LOCATION_MARKER = "＠"
UNKNOWN_TIME = "??:??"

_SCHEDULE_LINE_RE = re.compile(r"^\s*- \[(x| )\] (.*)$")
_CHECKBOX_PREFIX_RE = re.compile(r"^- \[[ x]\] ")

_CLOCK = r"(?:\d{1,2}|\?\?):(?:\d{2}|\?\?)(?::\d{2})?"
_TIME_TOKEN_RE = re.compile(rf"^{_CLOCK}(?:\s*[-–~]\s*{_CLOCK})?(?=\s|$)\s*")
_DISPLAY_TIME_RE = re.compile(r"^(\d{1,2}:\d{2}(?:-\d{1,2}:\d{2})?)\s*")
_MEET_LINK_RE = re.compile(r"\s*\[meet\]\([^)]*\)")
_MEET_URL_RE = re.compile(r"\[meet\]\((https?://[^)]+)\)")
_MD_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_TRAILING_LOCATION_RE = re.compile(r"\s*[@＠][^@＠]*$")
_LOCATION_RE = re.compile(r"[＠@](.+)$")
_EMPHASIS_RE = re.compile(r"[*_~]")


# ── Normalization ─────────────────────────────────────────────


def _plain_spaces(text: str) -> str:
    return "".join(" " if ch == "\t" or unicodedata.category(ch) == "Zs" else ch for ch in text)


def _strip_all_day_label(text: str, labels: Iterable[str]) -> str:
    for label in sorted(labels, key=len, reverse=True):
        if label and text.startswith(label):
            return text[len(label):].lstrip()
    return text


def normalize_schedule_text(text: str, all_day_labels: Iterable[str] | None = None) -> str:
    """Reduce a schedule line's visible text to a matching key.

    '10:00-11:00 ~~Standup~~ [meet](https://...) ＠Room 1' -> 'standup'
    """
    labels = ALL_DAY_LABELS.values() if all_day_labels is None else all_day_labels
    s = _plain_spaces(text).strip()
    if len(s) >= 4 and s.startswith("~~") and s.endswith("~~"):
        s = s[2:-2].strip()
    s = _strip_all_day_label(s, labels)
    s = _TIME_TOKEN_RE.sub("", s, count=1)
    s = _MEET_LINK_RE.sub("", s)
    s = _MD_LINK_RE.sub(r"\1", s)
    s = _TRAILING_LOCATION_RE.sub("", s, count=1)
    s = _EMPHASIS_RE.sub("", s)
    return s.strip().lower()


def checked_keys(lines: Iterable[str], all_day_labels: Iterable[str] | None = None) -> set[str]:
    """Normalized keys of every checked schedule line."""
    labels = list(ALL_DAY_LABELS.values() if all_day_labels is None else all_day_labels)
    keys = set()
    for line in lines:
        m = _SCHEDULE_LINE_RE.match(line)
        if m and m.group(1) == "x":
            key = normalize_schedule_text(m.group(2), labels)
            if key:
                keys.add(key)
    return keys


# ── Formatting ────────────────────────────────────────────────


def format_schedule_event(event: ScheduleEvent, checked: bool = False, all_day_label: str = "[All day]") -> str:
    if event.is_all_day:
        when = all_day_label
    else:
        when = event.start_time or UNKNOWN_TIME
        if event.end_time:
            when += f"-{event.end_time}"

    name = event.event_name.strip()
    if event.declined and name:
        name = f"~~{name}~~"

    line = f"- [{'x' if checked else ' '}] {when} {name}"
    if event.meet_url:
        line += f" [meet]({event.meet_url})"
    if event.location:
        line += f" {LOCATION_MARKER}{event.location}"
    return line


def regenerate_schedule_lines(
    existing_lines: list[str], events: list[ScheduleEvent], config: WeeknoteConfig
) -> list[str]:
    """Replacement body for a schedule subsection.

    Lines follow the fetched order. Checked state survives when the
    normalized event name matches a previously checked line; declined events
    are always checked. A trailing blank line is added when there is at
    least one event.
    """
    labels = config.all_day_labels()
    keys = checked_keys(existing_lines, labels)
    label = config.all_day_label_text()

    out = []
    for event in events:
        key = normalize_schedule_text(event.event_name, labels)
        checked = event.declined or (bool(key) and key in keys)
        out.append(format_schedule_event(event, checked, label))
    if out:
        out.append("")
    return out


def update_day_schedule(
    vault: Vault, config: WeeknoteConfig, day: date, events: list[ScheduleEvent]
) -> bool:
    """Replace the schedule subsection of *day* with lines for *events*."""

    def edit(lines: list[str]) -> bool:
        section = locate_subsection(lines, config, day, SCHEDULE_SECTION)
        if section is None:
            logger.debug("no schedule section for %s", day)
            return False
        existing = lines[section.start:section.end]
        lines[section.start:section.end] = regenerate_schedule_lines(existing, events, config)
        return True

    return modify_lines(vault, report_path(config, day), edit)


# ── Reading / toggling ────────────────────────────────────────


def get_day_schedule(vault: Vault, config: WeeknoteConfig, day: date) -> list[str]:
    """Stripped schedule lines of *day* (``- [ ] ...`` / ``- [x] ...``)."""
    lines = read_lines(vault, report_path(config, day))
    if lines is None:
        return []
    section = locate_subsection(lines, config, day, SCHEDULE_SECTION)
    if section is None:
        return []
    items = []
    for line in lines[section.start:section.end]:
        trimmed = line.strip()
        if trimmed.startswith("- ["):
            items.append(trimmed)
    return items


def parse_schedule_content(content: str, all_day_labels: Iterable[str] | None = None) -> ScheduleLineParts:
    """Split rendered schedule content into time, name, meet link and location.

    '10:00-11:00 Meeting [meet](https://meet.google.com/x) ＠Room'
        -> time='10:00-11:00', event_name='Meeting', meet_url=..., location='Room'
    """
    labels = list(ALL_DAY_LABELS.values() if all_day_labels is None else all_day_labels)
    remaining = _CHECKBOX_PREFIX_RE.sub("", content.strip(), count=1)
    parts = ScheduleLineParts()

    for label in sorted(labels, key=len, reverse=True):
        if label and remaining.startswith(label):
            parts.time = label
            remaining = remaining[len(label):].lstrip()
            break
    else:
        m = _DISPLAY_TIME_RE.match(remaining)
        if m:
            parts.time = m.group(1)
            remaining = remaining[m.end():]

    m = _MEET_URL_RE.search(remaining)
    if m:
        parts.meet_url = m.group(1)
        remaining = remaining.replace(m.group(0), "").strip()

    m = _LOCATION_RE.search(remaining)
    if m:
        parts.location = m.group(1).strip()
        remaining = remaining[: m.start()].strip()

    name = remaining.strip()
    if len(name) >= 4 and name.startswith("~~") and name.endswith("~~"):
        parts.declined = True
        name = name[2:-2].strip()
    parts.event_name = name or None
    return parts


def toggle_schedule_item(
    vault: Vault, config: WeeknoteConfig, day: date, original_line: str, checked: bool
) -> bool:
    """Set the checkbox of the first schedule line of *day* matching *original_line*."""
    content = _CHECKBOX_PREFIX_RE.sub("", original_line.strip(), count=1)
    old = f"- [{' ' if checked else 'x'}] {content}"
    new = f"- [{'x' if checked else ' '}] {content}"

    def edit(lines: list[str]) -> bool:
        section = locate_subsection(lines, config, day, SCHEDULE_SECTION)
        if section is None:
            return False
        for i in range(section.start, section.end):
            if lines[i].strip() == old:
                lines[i] = leading_whitespace(lines[i]) + new
                return True
        return False

    return modify_lines(vault, report_path(config, day), edit)
