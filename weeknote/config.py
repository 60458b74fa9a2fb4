"""Weeknote configuration, loaded from weeknote.yaml in the workspace root.

The configuration is an immutable value passed into every parse/mutate call;
nothing in the library reads settings from global state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from weeknote.dateformat import SUPPORTED_LOCALES
from weeknote.fileio import read_yaml, write_yaml_atomic
from weeknote.indent import DEFAULT_INDENT_STYLE, INDENT_STYLES
from weeknote.workspace import config_path, validate_path_format, workspace_root

ALL_DAY_LABELS = {"en": "[All day]", "ja": "[終日]"}

DEFAULT_FILE_FORMAT = "01.Weeknote/[YYYY]/[MM]/[YYYY]-[MM]-[DD]"


@dataclass(frozen=True)
class DaySectionDef:
    id: str
    label: str
    heading: str
    enabled: bool = True

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DaySectionDef:
        section_id = str(d.get("id", "")).strip()
        return cls(
            id=section_id,
            label=str(d.get("label", section_id.title())),
            heading=str(d.get("heading", f"### {section_id}")).strip(),
            enabled=d.get("enabled", True) is not False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "heading": self.heading, "enabled": self.enabled}


DEFAULT_DAY_SECTIONS = (
    DaySectionDef("schedule", "Schedule", "### schedule"),
    DaySectionDef("tasks", "Tasks", "### tasks"),
    DaySectionDef("memo", "Memo", "### memo"),
)

_KEYS = {
    # snake_case attribute -> camelCase alias
    "language": "language",
    "indent_style": "indentStyle",
    "ics_url": "icsUrl",
    "exclude_event_patterns": "excludeEventPatterns",
    "week_start_day": "weekStartDay",
    "file_format": "fileFormat",
    "reports_title": "reportsTitle",
    "day_date_format": "dayDateFormat",
    "day_sections": "daySections",
    "summary_title": "summaryTitle",
    "summary_content": "summaryContent",
    "timestamp_format": "timestampFormat",
    "all_day_label": "allDayLabel",
    "save_links_to_markdown": "saveLinksToMarkdown",
    "github_token": "githubToken",
}


@dataclass(frozen=True)
class WeeknoteConfig:
    language: str = "en"
    indent_style: str = DEFAULT_INDENT_STYLE
    ics_url: str = ""
    exclude_event_patterns: tuple[str, ...] = ()
    week_start_day: int = 0  # 0=Sunday ... 6=Saturday
    file_format: str = DEFAULT_FILE_FORMAT
    reports_title: str = "# Reports"
    day_date_format: str = "## MM-DD (ddd)"
    day_sections: tuple[DaySectionDef, ...] = field(default=DEFAULT_DAY_SECTIONS)
    summary_title: str = "# Summary"
    summary_content: str = "- "
    timestamp_format: str = "YYYY-MM-DD HH:mm:ss"
    all_day_label: str = ""
    save_links_to_markdown: bool = True
    github_token: str = ""

    def section_heading(self, section_id: str) -> str:
        for section in self.day_sections:
            if section.id == section_id:
                return section.heading
        return f"### {section_id}"

    def all_day_label_text(self) -> str:
        if self.all_day_label:
            return self.all_day_label
        return ALL_DAY_LABELS.get(self.language, ALL_DAY_LABELS["en"])

    def all_day_labels(self) -> set[str]:
        return set(ALL_DAY_LABELS.values()) | {self.all_day_label_text()}

    def with_updates(self, **changes: Any) -> WeeknoteConfig:
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> WeeknoteConfig:
        if not d or not isinstance(d, dict):
            return cls()
        raw = {}
        for snake, camel in _KEYS.items():
            if snake in d:
                raw[snake] = d[snake]
            elif camel in d:
                raw[snake] = d[camel]

        default = cls()
        language = raw.get("language", default.language)
        if language not in SUPPORTED_LOCALES:
            language = default.language

        indent_style = raw.get("indent_style", default.indent_style)
        if indent_style not in INDENT_STYLES:
            indent_style = default.indent_style

        try:
            week_start_day = int(raw.get("week_start_day", default.week_start_day)) % 7
        except (TypeError, ValueError):
            week_start_day = default.week_start_day

        patterns = raw.get("exclude_event_patterns", ())
        if isinstance(patterns, str):
            patterns = patterns.split("\n")
        patterns = tuple(str(p) for p in (patterns or ()) if str(p).strip())

        sections = raw.get("day_sections")
        if isinstance(sections, list) and sections:
            day_sections = tuple(
                DaySectionDef.from_dict(s) for s in sections if isinstance(s, dict) and s.get("id")
            )
        else:
            day_sections = default.day_sections

        save_links = raw.get("save_links_to_markdown", default.save_links_to_markdown)
        if not isinstance(save_links, bool):
            save_links = default.save_links_to_markdown

        def text(key: str) -> str:
            value = raw.get(key, getattr(default, key))
            return str(value) if value is not None else getattr(default, key)

        return cls(
            language=language,
            indent_style=indent_style,
            ics_url=text("ics_url"),
            exclude_event_patterns=patterns,
            week_start_day=week_start_day,
            file_format=text("file_format"),
            reports_title=text("reports_title"),
            day_date_format=text("day_date_format"),
            day_sections=day_sections or default.day_sections,
            summary_title=text("summary_title"),
            summary_content=text("summary_content"),
            timestamp_format=text("timestamp_format"),
            all_day_label=text("all_day_label"),
            save_links_to_markdown=save_links,
            github_token=text("github_token"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "indentStyle": self.indent_style,
            "icsUrl": self.ics_url,
            "excludeEventPatterns": list(self.exclude_event_patterns),
            "weekStartDay": self.week_start_day,
            "fileFormat": self.file_format,
            "reportsTitle": self.reports_title,
            "dayDateFormat": self.day_date_format,
            "daySections": [s.to_dict() for s in self.day_sections],
            "summaryTitle": self.summary_title,
            "summaryContent": self.summary_content,
            "timestampFormat": self.timestamp_format,
            "allDayLabel": self.all_day_label,
            "saveLinksToMarkdown": self.save_links_to_markdown,
            "githubToken": self.github_token,
        }


# ── Validation ────────────────────────────────────────────────


def validate_config(data: dict[str, Any]) -> list[str]:
    """Validate raw configuration data and return list of errors (empty if valid)."""
    errors = []
    if not isinstance(data, dict):
        return ["Configuration must be a mapping"]

    def get(snake: str) -> Any:
        return data.get(snake, data.get(_KEYS[snake]))

    language = get("language")
    if language is not None and language not in SUPPORTED_LOCALES:
        errors.append(f"Invalid language: {language}")

    indent_style = get("indent_style")
    if indent_style is not None and indent_style not in INDENT_STYLES:
        errors.append(f"Invalid indent style: {indent_style}")

    week_start_day = get("week_start_day")
    if week_start_day is not None:
        if not isinstance(week_start_day, int) or not 0 <= week_start_day <= 6:
            errors.append("weekStartDay must be integer 0-6")

    save_links = get("save_links_to_markdown")
    if save_links is not None and not isinstance(save_links, bool):
        errors.append("saveLinksToMarkdown must be true or false")

    file_format = get("file_format")
    if file_format is not None:
        errors.extend(validate_path_format(str(file_format)))

    sections = get("day_sections")
    if sections is not None:
        if not isinstance(sections, list):
            errors.append("daySections must be a list")
        else:
            seen = set()
            for s in sections:
                if not isinstance(s, dict) or not s.get("id"):
                    errors.append("Each day section needs an id")
                    continue
                if s["id"] in seen:
                    errors.append(f"Duplicate day section id: {s['id']}")
                seen.add(s["id"])

    return errors


# ── Load / save ───────────────────────────────────────────────


def load_config(root: Path | None = None) -> WeeknoteConfig:
    """Load weeknote.yaml into a WeeknoteConfig, falling back to defaults."""
    if root is None:
        root = workspace_root()
    return WeeknoteConfig.from_dict(read_yaml(config_path(root)))


def save_config(config: WeeknoteConfig, root: Path | None = None) -> None:
    if root is None:
        root = workspace_root()
    write_yaml_atomic(config_path(root), config.to_dict())
