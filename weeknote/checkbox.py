"""Checklist line grammar for Weeknote.

Recognizes (optionally indented):
    - [ ] Task label
    - [x] Task label
"""

from __future__ import annotations

import re

CHECKLIST_PREFIX_RE = re.compile(r"^(\s*)- \[([ x])\]")
TASK_LINE_RE = re.compile(r"^(\s*)- \[([ x])\] (.+)$")

UNCHECKED_RE = re.compile(r"^(\s*)-\s\[ \]\s")
CHECKED_RE = re.compile(r"^(\s*)-\s\[x\]\s")

# Where the marker starts in a line that may carry stray prefix characters.
MARKER_RE = re.compile(r"- \[[ x]\]")
BULLET_RE = re.compile(r"- ")

_MD_LINK_RE = re.compile(r"^\[(.+?)\]\((.+?)\)(.*)$")
_BARE_URL_RE = re.compile(r"^(https?://\S+)(\s+.*)?$")


def is_checklist_line(line: str) -> bool:
    return CHECKLIST_PREFIX_RE.match(line) is not None


def checkbox_line(text: str, checked: bool = False, indent: str = "") -> str:
    return f"{indent}- [{'x' if checked else ' '}] {text}"


def link_type_for_url(url: str | None) -> str:
    if not url:
        return "none"
    if "/issues/" in url:
        return "issue"
    if "/pull/" in url:
        return "pull-request"
    return "other"


def split_task_content(content: str) -> tuple[str, str | None, str | None, str]:
    """Decompose checklist content into (title, url, suffix, link_type).

    '[Fix login #12](https://github.com/o/r/issues/12) done'
        -> ('Fix login #12', 'https://github.com/o/r/issues/12', 'done', 'issue')
    'https://example.com/page later'
        -> ('https://example.com/page', 'https://example.com/page', 'later', 'other')
    'Plain text' -> ('Plain text', None, None, 'none')
    """
    m = _MD_LINK_RE.match(content)
    if m:
        url = m.group(2)
        suffix = m.group(3).strip() or None
        return m.group(1).strip(), url, suffix, link_type_for_url(url)

    m = _BARE_URL_RE.match(content)
    if m:
        url = m.group(1)
        suffix = (m.group(2) or "").strip() or None
        return url, url, suffix, link_type_for_url(url)

    return content.strip(), None, None, "none"
