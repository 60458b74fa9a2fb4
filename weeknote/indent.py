"""Indentation <-> nesting level conversion.

Parsing is tolerant of mixed tabs and spaces; generating always emits a
uniform string for the requested style.
"""

from __future__ import annotations

import re

INDENT_STYLES = {"tab", "2-spaces", "4-spaces"}
DEFAULT_INDENT_STYLE = "tab"

# Lines produced by reorder/copy are re-indented with this style regardless
# of the configured one.
GENERATED_INDENT_STYLE = "2-spaces"

_UNIT = {"tab": "\t", "2-spaces": "  ", "4-spaces": "    "}
_SPACE_WIDTH = {"tab": 2, "2-spaces": 2, "4-spaces": 4}

_LEADING_WS_RE = re.compile(r"^\s*")


def leading_whitespace(line: str) -> str:
    return _LEADING_WS_RE.match(line).group(0)


def level_from_indent(indent: str, style: str = DEFAULT_INDENT_STYLE) -> int:
    """Compute the nesting level of an indentation string.

    Each tab is one level. Any other whitespace counts as a space and spaces
    are divided by the style's width (2 for ``tab``/``2-spaces``, 4 for
    ``4-spaces``), truncating.
    """
    tabs = indent.count("\t")
    spaces = len(indent) - tabs
    width = _SPACE_WIDTH.get(style, 2)
    return tabs + spaces // width


def indent_string_from_level(level: int, style: str = DEFAULT_INDENT_STYLE) -> str:
    if level <= 0:
        return ""
    return _UNIT.get(style, "\t") * level


def indent_unit(style: str = DEFAULT_INDENT_STYLE) -> str:
    return _UNIT.get(style, "\t")


def line_level(line: str, style: str = DEFAULT_INDENT_STYLE) -> int:
    return level_from_indent(leading_whitespace(line), style)
