"""Typed dataclasses for the Weeknote data model.

Task and memo nodes are views derived from the document text on every
read; their ``line_index`` refers to the parse they came from and expires
as soon as the document is written again.

Models that cross the calendar boundary use from_dict/to_dict.
camelCase input keys are mapped to snake_case in Python.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

LINK_TYPES = {"issue", "pull-request", "other", "none"}
EVENT_STATUSES = {"accepted", "tentative", "declined"}


def _pick(d: dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in d:
        return d[snake]
    return d.get(camel, default)


# ── Document addressing ───────────────────────────────────────


@dataclass
class SectionRange:
    """A heading line plus the half-open range of its body lines."""

    heading_index: int
    start: int
    end: int

    def __contains__(self, line_index: int) -> bool:
        return self.start <= line_index < self.end


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class TaskNode:
    level: int = 0
    checked: bool = False
    title: str = ""
    raw_content: str = ""
    url: str | None = None
    suffix: str | None = None
    link_type: str = "none"
    children: list[TaskNode] = field(default_factory=list)
    line_index: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "checked": self.checked,
            "title": self.title,
            "rawContent": self.raw_content,
            "url": self.url,
            "suffix": self.suffix,
            "linkType": self.link_type,
            "children": [c.to_dict() for c in self.children],
            "lineIndex": self.line_index,
        }

    def walk(self):
        """Yield this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


# ── Memos ─────────────────────────────────────────────────────


@dataclass
class MemoNode:
    timestamp: str = ""
    content: str = ""
    raw_line: str = ""
    line_index: int = -1
    level: int = 0
    replies: list[MemoNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "content": self.content,
            "rawLine": self.raw_line,
            "lineIndex": self.line_index,
            "level": self.level,
            "replies": [r.to_dict() for r in self.replies],
        }


# ── Schedule ──────────────────────────────────────────────────


@dataclass
class ScheduleEvent:
    """One calendar occurrence as returned by the calendar collaborator."""

    event_name: str = ""
    is_all_day: bool = False
    start_time: str | None = None  # HH:mm
    end_time: str | None = None
    location: str | None = None
    meet_url: str | None = None
    status: str | None = None  # accepted, tentative, declined
    date: str | None = None  # YYYY-MM-DD

    @property
    def declined(self) -> bool:
        return self.status == "declined"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScheduleEvent:
        status = _pick(d, "status", "status")
        if status not in EVENT_STATUSES:
            status = None
        return cls(
            event_name=str(_pick(d, "event_name", "eventName", "") or ""),
            is_all_day=bool(_pick(d, "is_all_day", "isAllDay", False)),
            start_time=_pick(d, "start_time", "startTime"),
            end_time=_pick(d, "end_time", "endTime"),
            location=_pick(d, "location", "location"),
            meet_url=_pick(d, "meet_url", "meetUrl"),
            status=status,
            date=_pick(d, "date", "date"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "eventName": self.event_name,
            "isAllDay": self.is_all_day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location,
            "meetUrl": self.meet_url,
        }
        if self.status is not None:
            d["status"] = self.status
        if self.date is not None:
            d["date"] = self.date
        return d


@dataclass
class ScheduleLineParts:
    """Display decomposition of a rendered schedule line."""

    time: str | None = None
    event_name: str | None = None
    meet_url: str | None = None
    location: str | None = None
    declined: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "eventName": self.event_name,
            "meetUrl": self.meet_url,
            "location": self.location,
            "declined": self.declined,
        }
