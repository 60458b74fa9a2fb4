"""Whole-file read/modify/write over a vault.

Every mutation reads the current text, splits it into lines, edits the line
list in place and writes the joined text back. There is no cache between
calls and no locking; concurrent writers race and the last one wins.

A document keeps the line ending of its first line break (``\\r\\n`` or
``\\n``); inserted lines are written with that same ending.
"""

from __future__ import annotations

import logging
from typing import Callable

from weeknote.vault import Vault

logger = logging.getLogger(__name__)

LineEdit = Callable[[list[str]], bool]


def detect_newline(text: str) -> str:
    i = text.find("\n")
    return "\r\n" if i > 0 and text[i - 1] == "\r" else "\n"


def split_lines(text: str, newline: str = "\n") -> list[str]:
    """Split on *newline*, keeping a trailing newline as a final empty line."""
    return text.split(newline)


def join_lines(lines: list[str], newline: str = "\n") -> str:
    return newline.join(lines)


def _read(vault: Vault, path: str) -> str | None:
    if not vault.exists(path):
        logger.debug("no document at %s", path)
        return None
    return vault.read(path)


def read_lines(vault: Vault, path: str) -> list[str] | None:
    """Return the document's lines, or None if the file does not exist."""
    text = _read(vault, path)
    if text is None:
        return None
    return split_lines(text, detect_newline(text))


def modify_lines(vault: Vault, path: str, edit: LineEdit) -> bool:
    """Apply *edit* to the document's lines and write back if it changed them.

    *edit* mutates the list in place and returns True when something changed.
    Returns False without writing when the file is missing or *edit* declined.
    """
    text = _read(vault, path)
    if text is None:
        return False
    newline = detect_newline(text)
    lines = split_lines(text, newline)
    if not edit(lines):
        return False
    vault.write(path, join_lines(lines, newline))
    return True
