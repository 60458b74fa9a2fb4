from __future__ import annotations

import os
import secrets
from datetime import date
from typing import Any, Callable

import httpx
from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from weeknote import (
    FileVault,
    InvalidPathFormat,
    WeeknoteConfig,
    add_task as _add_task,
    append_memo as _append_memo,
    append_reply as _append_reply,
    copy_tasks_from_date as _copy_tasks_from_date,
    delete_memo_by_line as _delete_memo_by_line,
    delete_task as _delete_task,
    ensure_report_exists as _ensure_report_exists,
    get_day_memos_structured as _get_day_memos_structured,
    get_day_schedule as _get_day_schedule,
    get_day_tasks as _get_day_tasks,
    insert_task_at_line as _insert_task_at_line,
    load_config,
    parse_schedule_content as _parse_schedule_content,
    process_task_content as _process_task_content,
    preview_path as _preview_path,
    reorder_task as _reorder_task,
    report_path as _report_path,
    set_task_checked as _set_task_checked,
    toggle_schedule_item as _toggle_schedule_item,
    update_memo as _update_memo,
    update_task_content as _update_task_content,
    workspace_root as _workspace_root,
)
from weeknote.document import read_lines

app = FastAPI(title="Weeknote API", version="0.1.0")

security = HTTPBasic(auto_error=False)


# ── Auth ──────────────────────────────────────────────────────


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("WEEKNOTE_USERNAME", "")
    expected_password = os.environ.get("WEEKNOTE_PASSWORD", "")

    if credentials is None:
        if not expected_username or not expected_password:
            return "guest"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not expected_username or not expected_password:
        return "guest"

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Helpers ───────────────────────────────────────────────────


def _context() -> tuple[FileVault, WeeknoteConfig]:
    root = _workspace_root()
    return FileVault(root), load_config(root)


def _parse_day(day: str) -> date:
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {day}")


def _int_field(payload: dict[str, Any], key: str, default: int | None = None) -> int:
    value = payload.get(key, default)
    if value is None:
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{key} must be an integer")


def get_link_client() -> httpx.Client | None:
    """Client used to fetch link titles; None opens one per request."""
    return None


def _task_text(config: WeeknoteConfig, text: str, client: httpx.Client | None) -> str:
    return _process_task_content(text, config.save_links_to_markdown, client, config.github_token)


def _run(op: Callable[..., Any], *args: Any) -> Any:
    try:
        return op(*args)
    except InvalidPathFormat as e:
        raise HTTPException(status_code=409, detail=f"Invalid file format: {e}")


# ── Endpoints ─────────────────────────────────────────────────


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/days/{day}")
def api_day(day: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Everything shown for one day: schedule, task tree and memo threads."""
    d = _parse_day(day)
    vault, config = _context()
    schedule = _run(_get_day_schedule, vault, config, d)
    labels = config.all_day_labels()
    return {
        "day": d.isoformat(),
        "path": _preview_path(config, d),
        "schedule": [
            {"line": line, "checked": line.startswith("- [x]"), **_parse_schedule_content(line, labels).to_dict()}
            for line in schedule
        ],
        "tasks": [t.to_dict() for t in _run(_get_day_tasks, vault, config, d)],
        "memos": [m.to_dict() for m in _run(_get_day_memos_structured, vault, config, d)],
    }


@app.get("/raw/days/{day}")
def raw_week(day: str, username: str = Depends(get_current_user)) -> PlainTextResponse:
    d = _parse_day(day)
    vault, config = _context()
    lines = read_lines(vault, _run(_report_path, config, d))
    if lines is None:
        raise HTTPException(status_code=404, detail="No report for this week")
    return PlainTextResponse("\n".join(lines))


@app.post("/api/days/{day}/report")
def api_create_report(day: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Create the week's report if it does not exist yet."""
    d = _parse_day(day)
    vault, config = _context()
    return {"ok": True, "path": _run(_ensure_report_exists, vault, config, d)}


# ── Tasks ─────────────────────────────────────────────────────


@app.post("/api/days/{day}/tasks")
def api_add_task(
    day: str,
    payload: dict[str, Any] = Body(...),
    client: httpx.Client | None = Depends(get_link_client),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    d = _parse_day(day)
    text = str(payload.get("text", "")).strip()
    if not text:
        raise HTTPException(status_code=400, detail="Missing text")
    vault, config = _context()
    text = _task_text(config, text, client)
    if "before" in payload:
        changed = _run(
            _insert_task_at_line, vault, config, d, text,
            _int_field(payload, "before"), bool(payload.get("use_following_indent", False)),
        )
    else:
        changed = _run(_add_task, vault, config, d, text)
    return {"ok": changed}


@app.put("/api/days/{day}/tasks/{line_index}")
def api_update_task(
    day: str,
    line_index: int,
    payload: dict[str, Any] = Body(...),
    client: httpx.Client | None = Depends(get_link_client),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Set the checkbox, or rewrite the title (keeping the checkbox unless given)."""
    d = _parse_day(day)
    vault, config = _context()
    if "title" in payload:
        checked = payload.get("checked")
        title = _task_text(config, str(payload["title"]), client)
        changed = _run(
            _update_task_content, vault, config, d, line_index,
            None if checked is None else bool(checked), title,
        )
    else:
        changed = _run(_set_task_checked, vault, config, d, line_index, bool(payload.get("checked", False)))
    return {"ok": changed}


@app.delete("/api/days/{day}/tasks/{line_index}")
def api_delete_task(day: str, line_index: int, username: str = Depends(get_current_user)) -> dict[str, Any]:
    d = _parse_day(day)
    vault, config = _context()
    return {"ok": _run(_delete_task, vault, config, d, line_index)}


@app.post("/api/days/{day}/tasks/reorder")
def api_reorder_task(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    d = _parse_day(day)
    vault, config = _context()
    changed = _run(
        _reorder_task, vault, config, d,
        _int_field(payload, "from"), _int_field(payload, "to"), _int_field(payload, "level", -1),
    )
    return {"ok": changed}


@app.post("/api/days/{day}/tasks/copy")
def api_copy_tasks(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Copy the task tree of another day into this one."""
    d = _parse_day(day)
    source = _parse_day(str(payload.get("from", "")))
    vault, config = _context()
    return {"ok": True, "copied": _run(_copy_tasks_from_date, vault, config, source, d)}


# ── Schedule ──────────────────────────────────────────────────


@app.post("/api/days/{day}/schedule/toggle")
def api_toggle_schedule(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    d = _parse_day(day)
    line = str(payload.get("line", ""))
    if not line:
        raise HTTPException(status_code=400, detail="Missing line")
    vault, config = _context()
    return {"ok": _run(_toggle_schedule_item, vault, config, d, line, bool(payload.get("checked", False)))}


# ── Memos ─────────────────────────────────────────────────────


@app.post("/api/days/{day}/memos")
def api_add_memo(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    d = _parse_day(day)
    content = str(payload.get("content", "")).strip()
    if not content:
        raise HTTPException(status_code=400, detail="Missing content")
    vault, config = _context()
    timestamp = payload.get("timestamp")
    if "parent" in payload:
        changed = _run(_append_reply, vault, config, d, _int_field(payload, "parent"), content, timestamp)
    else:
        changed = _run(_append_memo, vault, config, d, content, timestamp)
    return {"ok": changed}


@app.put("/api/days/{day}/memos")
def api_update_memo(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    d = _parse_day(day)
    original = str(payload.get("original", ""))
    if not original:
        raise HTTPException(status_code=400, detail="Missing original")
    vault, config = _context()
    changed = _run(
        _update_memo, vault, config, d, original,
        str(payload.get("timestamp", "")), str(payload.get("content", "")),
    )
    return {"ok": changed}


@app.delete("/api/days/{day}/memos")
def api_delete_memo(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    d = _parse_day(day)
    original = str(payload.get("original", ""))
    if not original:
        raise HTTPException(status_code=400, detail="Missing original")
    vault, config = _context()
    return {"ok": _run(_delete_memo_by_line, vault, config, d, original)}
