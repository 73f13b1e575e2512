# textdiag:header:start
#
#   project      : TextDiag
#   file         : highlight.py
#   file_relpath : src/textdiag/rendering/highlight.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Range highlighting for the caret line under a source snippet.

Two steps:

1. `project_range` maps a `SourceRange` onto the columns of one physical line
   (the snippet line), dropping ranges that do not intersect it.
2. `build_caret_line` lays the projected ranges out as ``~`` runs and marks
   the caret column (and any zero-width range) with ``^``.

Overlap policy: all ``~`` runs are applied first (their union is
highlighted), then every ``^``; a caret always wins over an underline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textdiag.config.logging import get_logger
from textdiag.constants import CARET_CHAR, UNDERLINE_CHAR
from textdiag.source.model import ColumnRange

if TYPE_CHECKING:
    from collections.abc import Sequence

    from textdiag.config.logging import TextdiagLogger
    from textdiag.source.manager import SourceManagerLike
    from textdiag.source.model import SourceRange

logger: TextdiagLogger = get_logger(__name__)

_BLANKS = " \t"


def project_range(
    rng: SourceRange,
    line_no: int,
    file_id: int,
    source_line: str,
    sm: SourceManagerLike,
) -> ColumnRange | None:
    """Project a source range onto one line of a file.

    Both endpoints are first mapped to their expansion sites. A range whose
    endpoints coincide inside a macro is widened to the whole macro use. Token
    ranges are widened by the length of their last token and trimmed so they
    never start or end on blanks. A range that starts before ``line_no``
    covers the line from its first column; one that ends after it covers the
    line to its end.

    Args:
        rng: The range to project.
        line_no: Physical 1-based line of the snippet.
        file_id: File of the snippet.
        source_line: Text of the snippet line.
        sm: Location service.

    Returns:
        The 1-based half-open column range on the line, or None when the range
        is invalid, lies in another file, misses the line, or is inverted.
    """
    if not rng.is_valid:
        logger.trace("Dropping invalid range %r", rng)
        return None

    begin = sm.get_expansion_loc(rng.begin)
    end = sm.get_expansion_loc(rng.end)
    if begin == end and rng.end.is_macro_id:
        end = sm.get_expansion_range(rng.end)[1]

    b_file, b_offset = sm.get_decomposed_loc(begin)
    e_file, e_offset = sm.get_decomposed_loc(end)
    if b_file != file_id or e_file != file_id:
        logger.trace("Dropping range %r outside file %d", rng, file_id)
        return None

    start_line = sm.get_line_number(b_file, b_offset)
    end_line = sm.get_line_number(e_file, e_offset)
    if start_line > line_no or end_line < line_no:
        return None

    width = len(source_line)
    start_col = 0
    if start_line == line_no:
        start_col = max(sm.get_column_number(b_file, b_offset) - 1, 0)

    end_col = width
    if end_line == line_no:
        end_col = sm.get_column_number(e_file, e_offset)
        if end_col:
            end_col -= 1
            if rng.is_token_range:
                end_col += sm.measure_token_length(end)
        else:
            end_col = width

    if rng.is_token_range:
        while start_col < width and source_line[start_col] in _BLANKS:
            start_col += 1
        end_col = min(end_col, width)
        while end_col > 0 and source_line[end_col - 1] in _BLANKS:
            end_col -= 1

    if end_col < start_col:
        logger.debug("Dropping inverted range %r (columns %d..%d)", rng, start_col, end_col)
        return None
    return ColumnRange(start_col + 1, end_col + 1)


def build_caret_line(
    source_line: str,
    caret_column: int,
    ranges: Sequence[ColumnRange] = (),
) -> str:
    """Build the annotation line marking ``ranges`` and the caret.

    The result has one mark per character of ``source_line`` (blank, ``~`` or
    ``^``) and may extend one position past it when the caret or a zero-width
    range points just past the end of the line.

    Args:
        source_line: Raw text of the snippet line.
        caret_column: 1-based column of the diagnostic location.
        ranges: Column ranges on this line; out-of-line parts are clipped and
            inverted ranges are ignored.

    Returns:
        The annotation line, before tab expansion and trailing-blank stripping.

    Example:
        >>> build_caret_line("foo(a, b);", 5, [ColumnRange(8, 9)])
        '    ^  ~  '
    """
    width = len(source_line)
    marks: list[str] = [" "] * width
    points: list[int] = []
    for column_range in ranges:
        clipped = column_range.clip(width)
        if clipped is None:
            continue
        if clipped.is_empty:
            points.append(clipped.begin)
            continue
        for idx in range(clipped.begin - 1, min(clipped.end - 1, width)):
            marks[idx] = UNDERLINE_CHAR

    points.append(max(caret_column, 1))
    for column in points:
        idx = column - 1
        if idx < len(marks):
            marks[idx] = CARET_CHAR
        else:
            marks.append(CARET_CHAR)
    return "".join(marks)
