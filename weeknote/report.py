"""Weekly report template: building and creating the week file."""

from __future__ import annotations

import logging
from datetime import date

from weeknote.addressing import DIVIDER, day_heading
from weeknote.config import WeeknoteConfig
from weeknote.schedule import format_schedule_event
from weeknote.models import ScheduleEvent
from weeknote.vault import Vault
from weeknote.workspace import file_path_for_week, week_days, week_start_date

logger = logging.getLogger(__name__)


def generate_report(
    config: WeeknoteConfig,
    week_start: date,
    schedule: dict[date, list[ScheduleEvent]] | None = None,
) -> str:
    """Build the markdown text of a new weekly report.

    Layout: title, then per day a heading, each enabled subsection heading
    followed by a blank line, and a ``---`` divider; finally the summary.
    """
    label = config.all_day_label_text()
    lines = [config.reports_title, ""]

    for day in week_days(week_start):
        lines += [day_heading(config, day), ""]
        for section in config.day_sections:
            if not section.enabled:
                continue
            lines.append(section.heading)
            if section.id == "schedule" and schedule and schedule.get(day):
                for event in schedule[day]:
                    lines.append(format_schedule_event(event, event.declined, label))
            lines.append("")
        lines += [DIVIDER, ""]

    lines += [config.summary_title, config.summary_content, ""]
    return "\n".join(lines)


def _ensure_folders(vault: Vault, path: str) -> None:
    parts = path.split("/")[:-1]
    current = ""
    for part in parts:
        current = f"{current}/{part}" if current else part
        vault.ensure_folder(current)


def create_report(
    vault: Vault,
    config: WeeknoteConfig,
    week_start: date,
    schedule: dict[date, list[ScheduleEvent]] | None = None,
) -> str:
    """Create the week file if it does not exist yet. Returns its path."""
    path = file_path_for_week(config, week_start)
    if vault.exists(path):
        return path
    _ensure_folders(vault, path)
    vault.create(path, generate_report(config, week_start, schedule))
    logger.info("created weekly report %s", path)
    return path


def ensure_report_exists(vault: Vault, config: WeeknoteConfig, day: date) -> str:
    """Path of the report containing *day*, creating it when missing."""
    return create_report(vault, config, week_start_date(day, config.week_start_day))
