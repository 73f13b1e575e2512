# textdiag:header:start
#
#   project      : TextDiag
#   file         : text.py
#   file_relpath : src/textdiag/rendering/text.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Column arithmetic for source snippets.

Source columns are counted in characters, but terminals lay text out in
*display columns*: a tab advances to the next tab stop and East Asian wide
glyphs take two cells. The helpers here convert between the two so that a
source line and its annotation lines stay vertically aligned.

All functions are pure.
"""

from __future__ import annotations

import unicodedata

from textdiag.constants import UNDERLINE_CHAR


def char_width(ch: str) -> int:
    """Return the number of display cells a single non-tab character occupies."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def next_tab_stop(column: int, tab_stop: int) -> int:
    """Return the 0-based display column reached by a tab typed at ``column``."""
    return (column // tab_stop + 1) * tab_stop


def display_columns(line: str, tab_stop: int, start_column: int = 0) -> list[int]:
    """Map each character index of ``line`` to its 0-based display column.

    Args:
        line: Raw source text (no line terminator).
        tab_stop: Tab stop width (>= 1).
        start_column: Display column of the first character.

    Returns:
        A list of ``len(line) + 1`` columns; the last entry is the display
        column just past the line.
    """
    columns: list[int] = []
    col = start_column
    for ch in line:
        columns.append(col)
        col = next_tab_stop(col, tab_stop) if ch == "\t" else col + char_width(ch)
    columns.append(col)
    return columns


def column_width(text: str, tab_stop: int = 8, start_column: int = 0) -> int:
    """Return the display width of ``text`` when printed at ``start_column``."""
    return display_columns(text, tab_stop, start_column)[-1] - start_column


def expand_tabs(text: str, tab_stop: int, start_column: int = 0) -> str:
    """Replace each tab with enough spaces to reach the next tab stop.

    Args:
        text: Text to expand.
        tab_stop: Tab stop width (>= 1).
        start_column: Display column at which ``text`` starts.

    Returns:
        The expanded text.
    """
    if "\t" not in text:
        return text
    parts: list[str] = []
    col = start_column
    for ch in text:
        if ch == "\t":
            stop = next_tab_stop(col, tab_stop)
            parts.append(" " * (stop - col))
            col = stop
        else:
            parts.append(ch)
            col += char_width(ch)
    return "".join(parts)


def expand_annotated_line(source_line: str, annotation: str, tab_stop: int) -> tuple[str, str]:
    """Expand tabs in a source line and keep its annotation line aligned.

    ``annotation`` holds one mark per source character (index ``i`` annotates
    ``source_line[i]``), optionally followed by marks past the end of the line.
    Each mark is widened to the display width of its character: underlines are
    repeated, any other mark is padded with blanks. Marks on zero-width
    characters are dropped.

    Args:
        source_line: Raw source text.
        annotation: Per-character marks; missing marks are blanks.
        tab_stop: Tab stop width (>= 1).

    Returns:
        ``(expanded_source, expanded_annotation)`` where the display width of
        the first equals the length of the second up to the end of the source.
    """
    src_parts: list[str] = []
    ann_parts: list[str] = []
    col = 0
    for idx, ch in enumerate(source_line):
        mark = annotation[idx] if idx < len(annotation) else " "
        if ch == "\t":
            stop = next_tab_stop(col, tab_stop)
            width = stop - col
            src_parts.append(" " * width)
        else:
            width = char_width(ch)
            src_parts.append(ch)
        col += width
        if width:
            fill = UNDERLINE_CHAR if mark == UNDERLINE_CHAR else " "
            ann_parts.append(mark + fill * (width - 1))
    ann_parts.append(annotation[len(source_line) :])
    return "".join(src_parts), "".join(ann_parts)

