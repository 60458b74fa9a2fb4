"""Moment-style date formatting for headings, file paths and timestamps.

Supports the token subset used by weeknote templates:

    YYYY YY  MMMM MMM MM M  DD D  dddd ddd dd d  HH H hh h  mm m  ss s  A a

Text inside square brackets is emitted literally, anything that is not a
token is copied through unchanged.
"""

from __future__ import annotations

import re
from datetime import date, datetime

SUPPORTED_LOCALES = ("en", "ja")

_TOKEN_RE = re.compile(
    r"\[([^\]]*)\]|YYYY|YY|MMMM|MMM|MM|M|DD|D|dddd|ddd|dd|d|HH|H|hh|h|mm|m|ss|s|A|a"
)

# Sunday-first, matching the 0=Sunday numbering used by week_start_day.
_WEEKDAYS = {
    "en": ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
    "ja": ("日曜日", "月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日"),
}
_WEEKDAYS_SHORT = {
    "en": ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    "ja": ("日", "月", "火", "水", "木", "金", "土"),
}
_WEEKDAYS_MIN = {
    "en": ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"),
    "ja": ("日", "月", "火", "水", "木", "金", "土"),
}
_MONTHS = {
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    "ja": tuple(f"{i}月" for i in range(1, 13)),
}
_MONTHS_SHORT = {
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    "ja": tuple(f"{i}月" for i in range(1, 13)),
}
_MERIDIEM = {
    "en": ("AM", "PM"),
    "ja": ("午前", "午後"),
}


def js_weekday(value: date) -> int:
    """Weekday number with Sunday as 0."""
    return (value.weekday() + 1) % 7


def _render_token(token: str, value: date, locale: str) -> str:
    if isinstance(value, datetime):
        hour, minute, second = value.hour, value.minute, value.second
    else:
        hour = minute = second = 0
    wd = js_weekday(value)

    if token == "YYYY":
        return f"{value.year:04d}"
    if token == "YY":
        return f"{value.year % 100:02d}"
    if token == "MMMM":
        return _MONTHS[locale][value.month - 1]
    if token == "MMM":
        return _MONTHS_SHORT[locale][value.month - 1]
    if token == "MM":
        return f"{value.month:02d}"
    if token == "M":
        return str(value.month)
    if token == "DD":
        return f"{value.day:02d}"
    if token == "D":
        return str(value.day)
    if token == "dddd":
        return _WEEKDAYS[locale][wd]
    if token == "ddd":
        return _WEEKDAYS_SHORT[locale][wd]
    if token == "dd":
        return _WEEKDAYS_MIN[locale][wd]
    if token == "d":
        return str(wd)
    if token == "HH":
        return f"{hour:02d}"
    if token == "H":
        return str(hour)
    if token in ("hh", "h"):
        h12 = hour % 12 or 12
        return f"{h12:02d}" if token == "hh" else str(h12)
    if token == "mm":
        return f"{minute:02d}"
    if token == "m":
        return str(minute)
    if token == "ss":
        return f"{second:02d}"
    if token == "s":
        return str(second)
    meridiem = _MERIDIEM[locale][0 if hour < 12 else 1]
    if token == "a" and locale == "en":
        return meridiem.lower()
    return meridiem


def format_date(value: date, fmt: str, locale: str = "en") -> str:
    """Render *value* with a moment-style format string."""
    if locale not in SUPPORTED_LOCALES:
        locale = "en"

    def repl(m: re.Match) -> str:
        if m.group(1) is not None:
            return m.group(1)
        return _render_token(m.group(0), value, locale)

    return _TOKEN_RE.sub(repl, fmt)


def invalid_tokens(fmt: str) -> list[str]:
    """Return letter runs in *fmt* that are neither tokens nor escaped."""
    leftover = _TOKEN_RE.sub(" ", fmt)
    return re.findall(r"[A-Za-z]+", leftover)
