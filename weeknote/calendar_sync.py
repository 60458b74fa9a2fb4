"""Calendar collaborator contract and the weekly schedule sync.

Fetching and expanding ICS data is done by a ``CalendarSource``; this module
only filters its output and writes it into the week file. A fetch is always
completed before the first write, and any fetch failure is reported as "no
schedule" instead of a partial update.
"""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Any, Iterable, Protocol

from weeknote.config import WeeknoteConfig
from weeknote.models import ScheduleEvent
from weeknote.schedule import update_day_schedule
from weeknote.vault import Vault
from weeknote.workspace import file_path_for_week, week_days, week_start_date

logger = logging.getLogger(__name__)


class CalendarSource(Protocol):
    def fetch_events(
        self,
        ics_url: str,
        start: date,
        end: date,
        exclude_patterns: list[str],
    ) -> dict[str, list[ScheduleEvent]]:
        """Events keyed by ``YYYY-MM-DD`` for every day in [start, end]."""
        ...


def is_excluded(name: str | None, patterns: Iterable[str]) -> bool:
    """True if *name* matches any exclude pattern.

    Patterns are regular expressions; a pattern that does not compile is
    matched as a literal substring instead.
    """
    if not name:
        return False
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue
        try:
            if re.search(pattern, name):
                return True
        except re.error:
            logger.warning("invalid exclude pattern %r, matching literally", pattern)
            if pattern in name:
                return True
    return False


def filter_excluded(
    events_by_date: dict[str, list[ScheduleEvent]], patterns: Iterable[str]
) -> dict[str, list[ScheduleEvent]]:
    patterns = list(patterns)
    return {
        day: [e for e in events if not is_excluded(e.event_name, patterns)]
        for day, events in events_by_date.items()
    }


def fetch_week_schedule(
    source: CalendarSource, config: WeeknoteConfig, week_start: date
) -> dict[date, list[ScheduleEvent]] | None:
    """Fetch the events of one week, or None when no schedule is available."""
    if not config.ics_url:
        return None
    end = week_start + timedelta(days=6)
    patterns = list(config.exclude_event_patterns)
    try:
        raw = source.fetch_events(config.ics_url, week_start, end, patterns)
    except Exception as e:
        logger.warning("calendar fetch failed: %s", e)
        return None

    events_by_date = filter_excluded(raw or {}, patterns)
    return {day: list(events_by_date.get(day.isoformat(), [])) for day in week_days(week_start)}


def sync_week_schedule(
    vault: Vault, config: WeeknoteConfig, source: CalendarSource, day: date
) -> dict[str, Any]:
    """Regenerate the schedule of every day in the week containing *day*."""
    week_start = week_start_date(day, config.week_start_day)
    if not config.ics_url:
        return {"ok": False, "reason": "no-calendar-url"}
    if not vault.exists(file_path_for_week(config, week_start)):
        return {"ok": False, "reason": "no-report"}

    schedule = fetch_week_schedule(source, config, week_start)
    if schedule is None:
        return {"ok": False, "reason": "fetch-failed"}

    updated = 0
    for d, events in schedule.items():
        if update_day_schedule(vault, config, d, events):
            updated += 1
    logger.info("synced schedule for week of %s (%d days)", week_start, updated)
    return {"ok": True, "week_start": week_start.isoformat(), "days_updated": updated}
