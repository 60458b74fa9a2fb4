"""Bare URL to markdown link conversion for task text.

    'Review https://github.com/o/r/pull/7'
        -> 'Review [Add parser #7](https://github.com/o/r/pull/7)'

GitHub issue and pull request URLs take their title from the GitHub API;
any other URL (or a failed API call) falls back to the page's <title>.
A URL whose title cannot be fetched is left as it is.
"""

from __future__ import annotations

import html
import logging
import re

import httpx

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
FALLBACK_TITLE = "Link"

# Not already the target of a markdown link.
URL_RE = re.compile(r"(?<!\]\()https?://[^\s)]+")
GITHUB_ITEM_RE = re.compile(r"^https?://(?:www\.)?github\.com/([^/]+)/([^/]+)/(issues|pull)/(\d+)")
_TITLE_TAG_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def sanitize_title(title: str) -> str:
    """Collapse whitespace and swap brackets for full-width ones."""
    return " ".join(title.split()).replace("[", "［").replace("]", "］")


def _github_title(client: httpx.Client, url: str, token: str = "") -> tuple[str, str] | None:
    m = GITHUB_ITEM_RE.match(url)
    if not m:
        return None
    org, repo, kind, number = m.groups()
    endpoint = "issues" if kind == "issues" else "pulls"
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    try:
        resp = client.get(f"{GITHUB_API}/repos/{org}/{repo}/{endpoint}/{number}", headers=headers)
        if resp.status_code != 200:
            logger.debug("GitHub API returned %s for %s", resp.status_code, url)
            return None
        data = resp.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.debug("GitHub API lookup failed for %s: %s", url, e)
        return None
    if not isinstance(data, dict):
        return None
    title = str(data.get("title") or "")
    if not title:
        return None
    return f"{title} #{number}", str(data.get("html_url") or url)


def _page_title(client: httpx.Client, url: str) -> str | None:
    try:
        resp = client.get(url, follow_redirects=True)
        if resp.status_code != 200:
            return None
        text = resp.text
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug("title fetch failed for %s: %s", url, e)
        return None
    m = _TITLE_TAG_RE.search(text)
    title = html.unescape(m.group(1)).strip() if m else ""
    return title or FALLBACK_TITLE


def fetch_link(client: httpx.Client, url: str, github_token: str = "") -> tuple[str, str] | None:
    """Return (title, url) for *url*, or None when no title could be fetched."""
    found = _github_title(client, url, github_token)
    if found:
        return found
    title = _page_title(client, url)
    if title is None:
        return None
    return title, url


def process_task_content(
    text: str,
    enabled: bool = True,
    client: httpx.Client | None = None,
    github_token: str = "",
) -> str:
    """Replace bare URLs in *text* with ``[Title](url)`` links."""
    if not enabled:
        return text
    matches = list(URL_RE.finditer(text))
    if not matches:
        return text

    own_client = client is None
    if own_client:
        client = httpx.Client(timeout=10)
    try:
        # Right to left so earlier match offsets stay valid.
        for m in reversed(matches):
            if text[: m.start()].rstrip().endswith(("](", "] (")):
                continue
            found = fetch_link(client, m.group(0), github_token)
            if found is None:
                continue
            title, url = found
            text = f"{text[: m.start()]}[{sanitize_title(title)}]({url}){text[m.end():]}"
    finally:
        if own_client:
            client.close()
    return text
