"""Tests for weeknote/links.py: bare URLs become markdown links."""

import httpx
import pytest

from weeknote.links import fetch_link, process_task_content, sanitize_title


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def _pages(routes):
    """Handler serving *routes* (url -> (status, body)); anything else is 404."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        seen.append(url)
        if url not in routes:
            return httpx.Response(404)
        code, body = routes[url]
        if isinstance(body, dict):
            return httpx.Response(code, json=body)
        return httpx.Response(code, text=body, headers={"Content-Type": "text/html"})

    handler.seen = seen
    return handler


def test_sanitize_title():
    assert sanitize_title("  Fix [parser]\n bug ") == "Fix ［parser］ bug"


def test_github_issue_title():
    handler = _pages({
        "https://api.github.com/repos/o/r/issues/12": (
            200, {"title": "Crash on start", "html_url": "https://github.com/o/r/issues/12"},
        ),
    })
    with _client(handler) as client:
        text = process_task_content("Look at https://github.com/o/r/issues/12 today", client=client)
    assert text == "Look at [Crash on start #12](https://github.com/o/r/issues/12) today"


def test_github_pull_request_uses_pulls_endpoint():
    handler = _pages({
        "https://api.github.com/repos/o/r/pulls/7": (
            200, {"title": "Add parser", "html_url": "https://github.com/o/r/pull/7"},
        ),
    })
    with _client(handler) as client:
        text = process_task_content("Review https://github.com/o/r/pull/7", client=client)
    assert text == "Review [Add parser #7](https://github.com/o/r/pull/7)"
    assert handler.seen == ["https://api.github.com/repos/o/r/pulls/7"]


def test_github_token_sent():
    headers = []

    def handler(request):
        headers.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"title": "T"})

    with _client(handler) as client:
        assert fetch_link(client, "https://github.com/o/r/issues/3", "tok") == (
            "T #3", "https://github.com/o/r/issues/3",
        )
    assert headers == ["Bearer tok"]


def test_github_failure_falls_back_to_page_title():
    handler = _pages({
        "https://github.com/o/r/issues/5": (200, "<html><title>Issue page</title></html>"),
    })
    with _client(handler) as client:
        text = process_task_content("https://github.com/o/r/issues/5", client=client)
    assert text == "[Issue page](https://github.com/o/r/issues/5)"


def test_page_title_is_unescaped_and_sanitized():
    handler = _pages({
        "https://example.com/a": (200, "<head><TITLE>\n  Tom &amp; [Jerry]\n</TITLE></head>"),
    })
    with _client(handler) as client:
        text = process_task_content("Read https://example.com/a", client=client)
    assert text == "Read [Tom & ［Jerry］](https://example.com/a)"


def test_page_without_title():
    handler = _pages({"https://example.com/": (200, "<p>hi</p>")})
    with _client(handler) as client:
        assert process_task_content("https://example.com/", client=client) == "[Link](https://example.com/)"


def test_several_urls():
    handler = _pages({
        "https://a.example/": (200, "<title>A</title>"),
        "https://b.example/": (200, "<title>B</title>"),
    })
    with _client(handler) as client:
        text = process_task_content("https://a.example/ and https://b.example/", client=client)
    assert text == "[A](https://a.example/) and [B](https://b.example/)"


@pytest.mark.parametrize("code", [404, 500])
def test_error_status_leaves_url(code):
    handler = _pages({"https://example.com/x": (code, "nope")})
    with _client(handler) as client:
        assert process_task_content("See https://example.com/x", client=client) == "See https://example.com/x"


def test_network_error_leaves_url():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with _client(handler) as client:
        text = process_task_content("See https://github.com/o/r/issues/1", client=client)
    assert text == "See https://github.com/o/r/issues/1"


def test_existing_markdown_link_untouched():
    def handler(request):
        raise AssertionError("no request expected")

    with _client(handler) as client:
        text = "Read [docs](https://example.com/docs)"
        assert process_task_content(text, client=client) == text


def test_disabled_or_no_url_makes_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    with _client(handler) as client:
        assert process_task_content("https://example.com/", False, client) == "https://example.com/"
        assert process_task_content("plain task", client=client) == "plain task"
