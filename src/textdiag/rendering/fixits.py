# textdiag:header:start
#
#   project      : TextDiag
#   file         : fixits.py
#   file_relpath : src/textdiag/rendering/fixits.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Fix-it rendering: the human insertion line and the machine-readable form.

Human form:
    Insertion hints on the snippet line are written under the source at the
    display column where their text would be inserted::

          5 |   foo(a b);
            |        ^
            |        ,

Machine form (one line per hint, stable for tools)::

    fix-it:"a.c":{5:8-5:8}:","
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textdiag.config.logging import get_logger
from textdiag.rendering.text import column_width, display_columns, expand_tabs

if TYPE_CHECKING:
    from collections.abc import Sequence

    from textdiag.config.logging import TextdiagLogger
    from textdiag.diagnostic.model import FixItHint
    from textdiag.source.manager import SourceManagerLike

logger: TextdiagLogger = get_logger(__name__)

_ESCAPES: dict[int, str] = {
    ord("\\"): "\\\\",
    ord('"'): '\\"',
    ord("\n"): "\\n",
    ord("\t"): "\\t",
}


def collect_insertions(
    line_no: int,
    file_id: int,
    hints: Sequence[FixItHint],
    sm: SourceManagerLike,
) -> list[tuple[int, str]] | None:
    """Return ``(column, text)`` for each insertion hint, or None if one is off-line.

    Insertions at the same column are concatenated in input order; the result
    is sorted by column.

    Args:
        line_no: Physical 1-based snippet line.
        file_id: File of the snippet.
        hints: All fix-it hints of the diagnostic.
        sm: Location service.

    Returns:
        The insertions on this line, or None when any insertion targets another
        line or file, or inserts multi-line text.
    """
    by_column: dict[int, str] = {}
    for hint in hints:
        if not hint.is_insertion:
            continue
        hint_file, hint_offset = sm.get_decomposed_loc(hint.remove_range.begin)
        if (
            hint_file != file_id
            or sm.get_line_number(hint_file, hint_offset) != line_no
            or "\n" in hint.code_to_insert
            or "\r" in hint.code_to_insert
        ):
            logger.debug("Insertion %r does not fit on line %d; no insertion line", hint, line_no)
            return None
        column = sm.get_column_number(hint_file, hint_offset)
        by_column[column] = by_column.get(column, "") + hint.code_to_insert
    return sorted(by_column.items())


def layout_insertions(
    source_line: str,
    insertions: Sequence[tuple[int, str]],
    tab_stop: int,
) -> str:
    """Lay out insertion texts on display columns under ``source_line``.

    Each text starts at the display column of the source character it is
    inserted before. A text that would overlap the previous one is pushed
    right, one blank after it.

    Args:
        source_line: Raw text of the snippet line.
        insertions: ``(column, text)`` pairs sorted by 1-based column.
        tab_stop: Tab stop width used for the source line.

    Returns:
        The insertion line (no trailing newline).
    """
    columns = display_columns(source_line, tab_stop)
    out: list[str] = []
    width = 0
    prev_end = 0
    for column, text in insertions:
        idx = max(column - 1, 0)
        if idx < len(columns):
            target = columns[idx]
        else:
            target = columns[-1] + (idx - len(source_line))
        if out and target < prev_end:
            target = prev_end + 1
        out.append(" " * (target - width))
        text = expand_tabs(text, tab_stop, target)
        out.append(text)
        width = target + column_width(text, tab_stop, target)
        prev_end = width
    return "".join(out)


def build_fixit_insertion_line(
    line_no: int,
    file_id: int,
    source_line: str,
    hints: Sequence[FixItHint],
    sm: SourceManagerLike,
    tab_stop: int,
) -> str | None:
    """Return the insertion line for ``line_no``, or None when there is none to show."""
    insertions = collect_insertions(line_no, file_id, hints, sm)
    if not insertions:
        return None
    return layout_insertions(source_line, insertions, tab_stop)


def escape_fixit_text(text: str) -> str:
    """Escape ``text`` for a double-quoted ``fix-it:`` field.

    Backslash, double quote, newline and tab get C escapes; every other
    non-printable byte of the UTF-8 encoding is written as a three-digit octal
    escape.
    """
    parts: list[str] = []
    for byte in text.encode("utf-8"):
        if byte in _ESCAPES:
            parts.append(_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            parts.append(chr(byte))
        else:
            parts.append(f"\\{byte:03o}")
    return "".join(parts)


def format_parseable_fixits(hints: Sequence[FixItHint], sm: SourceManagerLike) -> list[str]:
    """Return one machine-readable ``fix-it:`` line per hint.

    Hints located inside macro expansions are not supported: if any hint has
    an invalid or macro range, no line is produced at all.

    Args:
        hints: Fix-it hints of one diagnostic.
        sm: Location service.

    Returns:
        Lines of the form ``fix-it:"FILE":{L1:C1-L2:C2}:"TEXT"`` (no newline).
    """
    for hint in hints:
        rng = hint.remove_range
        if not rng.is_valid or rng.begin.is_macro_id or rng.end.is_macro_id:
            logger.debug("Skipping parseable fix-its: hint %r is invalid or in a macro", hint)
            return []

    lines: list[str] = []
    for hint in hints:
        rng = hint.remove_range
        b_file, b_offset = sm.get_decomposed_loc(rng.begin)
        e_file, e_offset = sm.get_decomposed_loc(rng.end)
        if rng.is_token_range:
            e_offset += sm.measure_token_length(rng.end)
        presumed = sm.get_presumed_loc(rng.begin)
        if presumed is None:
            break
        lines.append(
            f'fix-it:"{escape_fixit_text(presumed.filename)}":'
            f"{{{sm.get_line_number(b_file, b_offset)}:{sm.get_column_number(b_file, b_offset)}"
            f"-{sm.get_line_number(e_file, e_offset)}:{sm.get_column_number(e_file, e_offset)}}}:"
            f'"{escape_fixit_text(hint.code_to_insert)}"'
        )
    return lines
