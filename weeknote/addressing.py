"""Locating day sections and their subsections inside a weekly report.

A day heading is matched against a small set of acceptable renderings (the
configured language plus English and Japanese) so that reports written
under a different display language still resolve to the same day.
"""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

from weeknote.dateformat import SUPPORTED_LOCALES, format_date
from weeknote.models import SectionRange

if TYPE_CHECKING:
    from weeknote.config import WeeknoteConfig

DIVIDER = "---"

_HEADING_RE = re.compile(r"^(#+)(?:\s|$)")


def day_heading(config: WeeknoteConfig, day: date) -> str:
    """Heading for *day* in the configured language."""
    return format_date(day, config.day_date_format, config.language).strip()


def locale_headings(config: WeeknoteConfig, day: date) -> frozenset[str]:
    """All heading strings accepted as aliases for *day*."""
    headings = {format_date(day, config.day_date_format, loc).strip() for loc in SUPPORTED_LOCALES}
    headings.add(day_heading(config, day))
    return frozenset(headings)


def heading_level(line: str) -> int:
    """Markdown heading level of a stripped line, 0 if it is not a heading."""
    m = _HEADING_RE.match(line)
    return len(m.group(1)) if m else 0


def is_section_boundary(line: str) -> bool:
    """True for lines that end a subsection body: any ``##``+ heading or a divider."""
    trimmed = line.strip()
    return trimmed.startswith("##") or trimmed == DIVIDER


def find_day_section(lines: list[str], headings: frozenset[str] | set[str]) -> SectionRange | None:
    """Find the first day heading in *headings* and the span of its body.

    The body ends at the next ``---`` divider, the next heading of the same
    or higher rank, or end of file.
    """
    for i, line in enumerate(lines):
        trimmed = line.strip()
        if trimmed not in headings:
            continue
        level = heading_level(trimmed)
        end = len(lines)
        for j in range(i + 1, len(lines)):
            candidate = lines[j].strip()
            if candidate == DIVIDER:
                end = j
                break
            cand_level = heading_level(candidate)
            if cand_level and level and cand_level <= level:
                end = j
                break
        return SectionRange(heading_index=i, start=i + 1, end=end)
    return None


def find_subsection(
    lines: list[str],
    headings: frozenset[str] | set[str],
    subsection_heading: str,
) -> SectionRange | None:
    """Find *subsection_heading* inside the day section and the span of its body."""
    day = find_day_section(lines, headings)
    if day is None:
        return None
    target = subsection_heading.strip()
    for i in range(day.start, day.end):
        if lines[i].strip() != target:
            continue
        end = len(lines)
        for j in range(i + 1, len(lines)):
            if is_section_boundary(lines[j]):
                end = j
                break
        return SectionRange(heading_index=i, start=i + 1, end=end)
    return None


def locate_subsection(
    lines: list[str], config: WeeknoteConfig, day: date, section_id: str
) -> SectionRange | None:
    """Convenience wrapper resolving headings from *config*."""
    return find_subsection(lines, locale_headings(config, day), config.section_heading(section_id))
