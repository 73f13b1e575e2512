# textdiag:header:start
#
#   project      : TextDiag
#   file         : snippet.py
#   file_relpath : src/textdiag/rendering/snippet.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Source snippet, caret line and fix-it line under a diagnostic.

A snippet block looks like::

       12 |     foo(a b);
          |         ^~~~
          |          ,

The three lines are built on raw character columns, then expanded together
(tabs and wide glyphs) so they stay aligned on the terminal. When a wrap
width is configured and the source line is wider, only the region around the
caret and the insertions is kept, with ``...`` marking what was cut.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from textdiag.config.logging import get_logger
from textdiag.constants import ELLIPSIS_RESERVE, MIN_LINE_NUMBER_WIDTH
from textdiag.diagnostic.model import FixItKind, Severity
from textdiag.rendering.fixits import build_fixit_insertion_line
from textdiag.rendering.highlight import build_caret_line, project_range
from textdiag.rendering.message import format_diagnostic_level, format_diagnostic_message, styled
from textdiag.rendering.text import char_width, column_width, expand_annotated_line

if TYPE_CHECKING:
    from collections.abc import Sequence

    from textdiag.config.logging import TextdiagLogger
    from textdiag.config.model import DiagnosticOptions
    from textdiag.diagnostic.model import FixItHint
    from textdiag.source.manager import SourceManagerLike
    from textdiag.source.model import ColumnRange, Location, SourceRange

logger: TextdiagLogger = get_logger(__name__)

FRONT_ELLIPSIS: Final[str] = "  ..."
FRONT_SPACE: Final[str] = " " * len(FRONT_ELLIPSIS)
BACK_ELLIPSIS: Final[str] = "..."


@dataclass(frozen=True, slots=True)
class SnippetLines:
    """The unstyled lines of one snippet block, on display columns.

    Attributes:
        line_no (int): Physical 1-based line number of the source line.
        source (str): Expanded source line.
        caret (str): Expanded caret line, trailing blanks stripped.
        fixit (str | None): Expanded insertion line, if any.
    """

    line_no: int
    source: str
    caret: str
    fixit: str | None = None


def build_snippet(
    loc: Location,
    ranges: Sequence[SourceRange],
    hints: Sequence[FixItHint],
    sm: SourceManagerLike,
    options: DiagnosticOptions,
) -> SnippetLines | None:
    """Build the snippet block for a file location.

    Args:
        loc: File location of the caret.
        ranges: Ranges to underline (projected onto the caret line).
        hints: Fix-it hints; insertions on the caret line are shown.
        sm: Location service.
        options: Rendering options (tab stop, wrap width, fix-it display).

    Returns:
        The snippet lines, or None when the line text is unavailable.
    """
    file_id, offset = sm.get_decomposed_loc(loc)
    line_no = sm.get_line_number(file_id, offset)
    line = sm.get_line_text(file_id, line_no) if line_no else None
    if line is None:
        logger.debug("No source text for %r; snippet omitted", loc)
        return None
    column = sm.get_column_number(file_id, offset)

    projected: list[ColumnRange] = []
    for rng in ranges:
        column_range = project_range(rng, line_no, file_id, line, sm)
        if column_range is not None:
            projected.append(column_range)

    caret = build_caret_line(line, column, projected)
    source, caret = expand_annotated_line(line, caret, options.tab_stop)

    fixit: str | None = None
    if options.show_fixits:
        fixit = build_fixit_insertion_line(line_no, file_id, line, hints, sm, options.tab_stop)

    columns = options.message_length
    if columns and column_width(source) > columns:
        source, caret, fixit = select_interesting_region(source, caret, fixit, columns)

    return SnippetLines(line_no=line_no, source=source, caret=caret.rstrip(" "), fixit=fixit)


def format_snippet(snippet: SnippetLines, options: DiagnosticOptions) -> list[str]:
    """Return the printable lines of a snippet block, with margin and colors."""
    if options.show_line_numbers:
        width = max(MIN_LINE_NUMBER_WIDTH, len(str(snippet.line_no)))
        source_margin = f" {snippet.line_no:>{width}} | "
        annotation_margin = " " * (width + 2) + "| "
    elif options.show_source_ranges:
        # Keeps snippet lines distinguishable from "file:line:col:" lines.
        source_margin = annotation_margin = " "
    else:
        source_margin = annotation_margin = ""

    colors = options.show_colors
    lines = [
        source_margin + snippet.source,
        annotation_margin + styled(snippet.caret, colors, fg="green", bold=True),
    ]
    if snippet.fixit:
        lines.append(annotation_margin + styled(snippet.fixit, colors, fg="green"))
    return lines


def format_fixit_notes(
    loc: Location,
    hints: Sequence[FixItHint],
    sm: SourceManagerLike,
    show_colors: bool,
) -> list[str]:
    """Describe removal and replacement hints on the caret line in words.

    Only hints whose whole range lies on the caret line are described, e.g.
    ``note: replace 'x' with 'y'``.
    """
    file_id, offset = sm.get_decomposed_loc(loc)
    line_no = sm.get_line_number(file_id, offset)
    line = sm.get_line_text(file_id, line_no) if line_no else None
    if line is None:
        return []

    notes: list[str] = []
    for hint in hints:
        kind = hint.kind
        if kind is FixItKind.INSERTION:
            continue
        rng = hint.remove_range
        if not rng.is_valid:
            continue
        begin_line = sm.get_line_number(*sm.get_decomposed_loc(rng.begin))
        end_line = sm.get_line_number(*sm.get_decomposed_loc(rng.end))
        if begin_line != line_no or end_line != line_no:
            continue
        column_range = project_range(rng, line_no, file_id, line, sm)
        if column_range is None or column_range.is_empty:
            continue
        removed = line[column_range.begin - 1 : column_range.end - 1]
        if kind is FixItKind.REMOVAL:
            text = f"remove '{removed}'"
        else:
            text = f"replace '{removed}' with '{hint.code_to_insert}'"
        notes.append(
            format_diagnostic_level(Severity.NOTE, show_colors)
            + format_diagnostic_message(Severity.NOTE, text, 0, 0, show_colors)
        )
    return notes


def render_snippet(
    loc: Location,
    ranges: Sequence[SourceRange],
    hints: Sequence[FixItHint],
    sm: SourceManagerLike,
    options: DiagnosticOptions,
) -> list[str]:
    """Return all printable lines shown under a diagnostic at file location ``loc``."""
    snippet = build_snippet(loc, ranges, hints, sm, options)
    if snippet is None:
        return []
    lines = format_snippet(snippet, options)
    if options.show_fixits and hints:
        lines.extend(format_fixit_notes(loc, hints, sm, options.show_colors))
    return lines


# ----------------------- Region selection -----------------------


def _cells(text: str) -> list[str]:
    """Split ``text`` into display cells; a wide glyph's second cell is empty."""
    cells: list[str] = []
    for ch in text:
        width = char_width(ch)
        if width == 0 and cells:
            cells[-1] += ch
            continue
        cells.append(ch)
        cells.extend([""] * (width - 1))
    return cells


def _blank_span(cells: Sequence[str]) -> tuple[int, int]:
    """Return the ``[start, end)`` span of ``cells`` between leading and trailing blanks."""
    start, end = 0, len(cells)
    while start < end and cells[start] in (" ", ""):
        start += 1
    while end > start and cells[end - 1] in (" ", ""):
        end -= 1
    return start, end


def _prev_cell(cells: Sequence[str], idx: int) -> int:
    idx -= 1
    while idx > 0 and cells[idx] == "":
        idx -= 1
    return idx


def _next_cell(cells: Sequence[str], idx: int) -> int:
    idx += 1
    while idx < len(cells) and cells[idx] == "":
        idx += 1
    return idx


def select_interesting_region(
    source: str,
    caret: str,
    fixit: str | None,
    columns: int,
) -> tuple[str, str, str | None]:
    """Trim expanded snippet lines to the region around the caret and insertions.

    The kept region always covers every mark of the caret line and all
    insertion text. It then grows word by word on both sides while it fits in
    ``columns`` minus the room reserved for ellipses. Cut text is replaced by
    ``"  ..."`` in front and ``"..."`` at the end; annotation lines are
    shifted by the same amount.

    Args:
        source: Expanded source line.
        caret: Expanded caret line.
        fixit: Expanded insertion line, if any.
        columns: Target width.

    Returns:
        The trimmed ``(source, caret, fixit)``.
    """
    src = _cells(source)
    fix = _cells(fixit) if fixit else []
    if max(len(src), len(caret), len(fix)) <= columns:
        return source, caret, fixit

    caret_start, caret_end = _blank_span(caret)
    if fix:
        fix_start, fix_end = _blank_span(fix)
        if fix_start < fix_end:
            caret_start = min(caret_start, fix_start)
            caret_end = max(caret_end, fix_end)

    # Never cut a wide glyph in half.
    while caret_end < len(src) and src[caret_end] == "":
        caret_end += 1
    while 0 < caret_start < len(src) and src[caret_start] == "":
        caret_start -= 1

    source_start = min(caret_start, len(src))
    source_end = min(caret_end, len(src))
    outside = (caret_end - caret_start) - (source_end - source_start)

    target = columns
    if target > ELLIPSIS_RESERVE + outside:
        target -= ELLIPSIS_RESERVE + outside

    while source_start > 0 or source_end < len(src):
        expanded = False
        if source_start > 0:
            new_start = _prev_cell(src, source_start)
            while new_start and src[new_start] == " ":
                new_start = _prev_cell(src, new_start)
            while new_start:
                prev = _prev_cell(src, new_start)
                if src[prev] == " ":
                    break
                new_start = prev
            if source_end - new_start <= target:
                source_start = new_start
                expanded = True
        if source_end < len(src):
            new_end = _next_cell(src, source_end)
            while new_end < len(src) and src[new_end] == " ":
                new_end = _next_cell(src, new_end)
            while new_end < len(src) and src[new_end] != " ":
                new_end = _next_cell(src, new_end)
            if new_end - source_start <= target:
                source_end = new_end
                expanded = True
        if not expanded:
            break

    caret_start = source_start
    caret_end = source_end + outside
    logger.trace("Trimmed snippet to cells %d..%d of %d", source_start, source_end, len(src))

    new_source = "".join(src[source_start:source_end])
    if source_end < len(src):
        new_source += BACK_ELLIPSIS
    if source_start > 0:
        new_source = FRONT_ELLIPSIS + new_source

    new_caret = caret[caret_start:caret_end]
    new_fixit: str | None = None
    if fixit:
        new_fixit = "".join(fix[caret_start:caret_end])
    if caret_start > 0:
        new_caret = FRONT_SPACE + new_caret
        if new_fixit is not None:
            new_fixit = FRONT_SPACE + new_fixit
    return new_source, new_caret, new_fixit
