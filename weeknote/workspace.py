"""Workspace root, week arithmetic and report path helpers for Weeknote."""

from __future__ import annotations

import os
import re
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from weeknote.dateformat import format_date, invalid_tokens, js_weekday

if TYPE_CHECKING:
    from weeknote.config import WeeknoteConfig

INVALID_FORMAT = "Invalid format"


class InvalidPathFormat(ValueError):
    """The configured file path template cannot produce a usable path."""


def workspace_root() -> Path:
    """Get the workspace root directory (contains weeknote.yaml and the vault)."""
    return Path(
        os.environ.get("WEEKNOTE_ROOT", str(Path.home() / "weeknote"))
    ).expanduser().resolve()


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "weeknote.yaml"


# ── Week arithmetic ───────────────────────────────────────────


def week_start_date(day: date, week_start_day: int = 0) -> date:
    """Return the first day of the week containing *day* (0=Sunday ... 6=Saturday)."""
    diff = (js_weekday(day) - week_start_day) % 7
    return day - timedelta(days=diff)


def week_days(week_start: date) -> list[date]:
    return [week_start + timedelta(days=i) for i in range(7)]


# ── Path templates ────────────────────────────────────────────

_BRACKET_GROUP_RE = re.compile(r"(\[[^\]]+\])")


def convert_path_format(user_format: str) -> str:
    """Turn a user path template into a date format string.

    Bracketed groups are date tokens, everything else is literal:
    ``01.Weeknote/[YYYY]/[MM]`` -> ``[01.Weeknote/]YYYY[/]MM``
    """
    parts = _BRACKET_GROUP_RE.split(user_format)
    out = []
    for part in parts:
        if not part:
            continue
        if _BRACKET_GROUP_RE.fullmatch(part):
            out.append(part[1:-1])
        else:
            out.append(f"[{part}]")
    return "".join(out)


def validate_path_format(user_format: str) -> list[str]:
    """Validate a user path template and return list of errors (empty if valid)."""
    errors = []
    if not user_format or not user_format.strip():
        return ["File format is empty"]

    depth = 0
    for ch in user_format:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        if depth < 0 or depth > 1:
            errors.append("Unbalanced brackets in file format")
            break
    else:
        if depth != 0:
            errors.append("Unbalanced brackets in file format")

    if not errors:
        for group in _BRACKET_GROUP_RE.findall(user_format):
            bad = invalid_tokens(group[1:-1])
            if bad:
                errors.append(f"Unknown date token in {group}: {', '.join(bad)}")
        if not _BRACKET_GROUP_RE.search(user_format):
            errors.append("File format has no date token; every week would share one file")

    if user_format.startswith("/"):
        errors.append("File format must be relative to the vault")
    if ".." in user_format.split("/"):
        errors.append("File format must not contain '..' segments")
    return errors


def file_path_for_week(config: WeeknoteConfig, week_start: date) -> str:
    """Vault-relative path of the report for the week starting at *week_start*."""
    errors = validate_path_format(config.file_format)
    if errors:
        raise InvalidPathFormat("; ".join(errors))
    return format_date(week_start, convert_path_format(config.file_format), config.language) + ".md"


def report_path(config: WeeknoteConfig, day: date) -> str:
    """Vault-relative path of the report containing *day*."""
    return file_path_for_week(config, week_start_date(day, config.week_start_day))


def preview_path(config: WeeknoteConfig, day: date) -> str:
    """Like report_path, but returns an indicator instead of raising."""
    try:
        return report_path(config, day)
    except InvalidPathFormat:
        return INVALID_FORMAT
