"""Weeknote core library: a weekly report kept as one markdown file per week.

Public API re-exports for convenient imports:
    from weeknote import load_config, FileVault, get_day_tasks, add_task, ...
"""

# Configuration & workspace
from weeknote.config import (
    DaySectionDef,
    WeeknoteConfig,
    load_config,
    save_config,
    validate_config,
)
from weeknote.workspace import (
    InvalidPathFormat,
    workspace_root,
    config_path,
    week_start_date,
    convert_path_format,
    validate_path_format,
    file_path_for_week,
    report_path,
    preview_path,
)

# Storage
from weeknote.vault import FileVault, Vault
from weeknote.document import modify_lines, read_lines

# Addressing
from weeknote.addressing import (
    day_heading,
    locale_headings,
    find_day_section,
    find_subsection,
)
from weeknote.indent import indent_string_from_level, level_from_indent

# Report
from weeknote.report import create_report, ensure_report_exists, generate_report

# Tasks
from weeknote.tasks import (
    parse_task_lines,
    get_day_tasks,
    add_task,
    insert_task_at_line,
    set_task_checked,
    toggle_task,
    update_task_content,
    delete_task,
    reorder_task,
    move_task_subtree,
    copy_tasks_from_date,
    past_days_with_tasks,
)
from weeknote.links import fetch_link, process_task_content

# Schedule
from weeknote.schedule import (
    normalize_schedule_text,
    format_schedule_event,
    regenerate_schedule_lines,
    update_day_schedule,
    get_day_schedule,
    parse_schedule_content,
    toggle_schedule_item,
)
from weeknote.calendar_sync import (
    CalendarSource,
    is_excluded,
    fetch_week_schedule,
    sync_week_schedule,
)

# Memos
from weeknote.memos import (
    parse_memo_timestamp,
    memo_timestamp,
    get_day_memos,
    get_day_memos_structured,
    append_memo,
    append_reply,
    update_memo,
    delete_memo,
    delete_memo_by_line,
)

# Models
from weeknote.models import (
    MemoNode,
    ScheduleEvent,
    ScheduleLineParts,
    SectionRange,
    TaskNode,
)
