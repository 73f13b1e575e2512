# textdiag:header:start
#
#   project      : TextDiag
#   file         : backtrace.py
#   file_relpath : src/textdiag/rendering/backtrace.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Macro expansion backtraces.

For a diagnostic located inside a macro expansion, the code context of the
macro use in the file is printed first, followed by one ``expanded from macro
'NAME'`` note per expansion level, from the outermost macro use down to the
innermost spelling::

    a.c:9:3: error: use of undeclared identifier 'y'
        9 |   OUTER(1);
          |   ^
    a.c:2:18: note: expanded from macro 'OUTER'
        2 | #define OUTER(x) INNER(x)
          |                  ^
    a.c:1:18: note: expanded from macro 'INNER'
        1 | #define INNER(x) y + x
          |                  ^

The expansion chain is collected into an explicit list and walked
iteratively, so arbitrarily deep chains cannot exhaust the interpreter stack.
Long chains are shortened by eliding the middle levels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from textdiag.config.logging import get_logger
from textdiag.diagnostic.model import Severity

if TYPE_CHECKING:
    from collections.abc import Sequence

    from textdiag.config.logging import TextdiagLogger
    from textdiag.diagnostic.model import FixItHint
    from textdiag.source.manager import SourceManagerLike
    from textdiag.source.model import Location, SourceRange

logger: TextdiagLogger = get_logger(__name__)


class BacktraceSink(Protocol):
    """Output operations the backtrace walker drives (implemented by the renderer)."""

    def emit_code_context(
        self,
        loc: Location,
        severity: Severity,
        ranges: Sequence[SourceRange],
        hints: Sequence[FixItHint],
        *,
        suppress_caret_like_previous: bool = False,
    ) -> None:
        """Print the snippet block for a file location."""
        ...

    def emit_basic_note(self, message: str) -> None:
        """Print a location-less note."""
        ...

    def emit(
        self,
        location: Location,
        severity: Severity,
        message: str,
        ranges: Sequence[SourceRange] = (),
    ) -> None:
        """Print a complete diagnostic."""
        ...


def skip_to_macro_arg_expansion(loc: Location, sm: SourceManagerLike) -> Location:
    """Return the first macro-argument expansion on the spelling chain of ``loc``.

    Returns ``loc`` unchanged when the chain contains no argument expansion.
    """
    current = loc
    seen: set[Location] = set()
    while current.is_macro_id and current not in seen:
        if sm.is_macro_arg_expansion(current):
            return current
        seen.add(current)
        current = sm.get_immediate_spelling_loc(current)
    return loc


def immediate_macro_caller_loc(loc: Location, sm: SourceManagerLike) -> Location:
    """Step one level out of a macro expansion, toward the file."""
    if sm.is_macro_arg_expansion(loc):
        return sm.get_immediate_spelling_loc(loc)
    return sm.get_immediate_expansion_range(loc)[0]


def immediate_macro_callee_loc(loc: Location, sm: SourceManagerLike) -> Location:
    """Step one level into a macro expansion, toward the spelling."""
    if sm.is_macro_arg_expansion(loc):
        return sm.get_immediate_expansion_range(loc)[0]
    return sm.get_immediate_spelling_loc(loc)


def immediate_macro_name(loc: Location, sm: SourceManagerLike) -> str:
    """Return the name of the macro whose expansion contains ``loc``.

    Argument expansions are skipped; the name is the token spelled at the
    start of the macro use.
    """
    seen: set[Location] = set()
    while loc.is_macro_id and sm.is_macro_arg_expansion(loc) and loc not in seen:
        seen.add(loc)
        loc = sm.get_immediate_expansion_range(loc)[0]
    start = sm.get_spelling_loc(sm.get_immediate_expansion_range(loc)[0])
    file_id, offset = sm.get_decomposed_loc(start)
    text = sm.get_buffer_data(file_id)
    if text is None:
        return ""
    return text[offset : offset + sm.measure_token_length(start)]


def collect_macro_levels(loc: Location, sm: SourceManagerLike) -> tuple[list[Location], Location]:
    """Collect the expansion levels of ``loc``.

    Args:
        loc: The diagnostic location.
        sm: Location service.

    Returns:
        ``(levels, leaf)``: the macro location of each level, innermost first,
        and the file location the outermost macro was used at.
    """
    levels: list[Location] = []
    seen: set[Location] = set()
    while loc.is_macro_id:
        if loc in seen:
            logger.warning("Macro expansion cycle at %r; backtrace truncated", loc)
            break
        seen.add(loc)
        loc = skip_to_macro_arg_expansion(loc, sm)
        levels.append(loc)
        loc = immediate_macro_caller_loc(loc, sm)
    if loc.is_macro_id:
        loc = sm.get_expansion_loc(loc)
    return levels, loc


def elided_levels(depth: int, limit: int) -> tuple[int, int]:
    """Return the half-open range ``[start, end)`` of level indices to elide.

    Index 0 is the innermost level. With a limit of ``L`` the ``ceil(L/2)``
    innermost and ``floor(L/2)`` outermost levels are kept.

    Example:
        >>> elided_levels(10, 4)
        (2, 8)
        >>> elided_levels(3, 6)
        (0, 0)
    """
    if limit == 0 or depth <= limit:
        return 0, 0
    return limit // 2 + limit % 2, depth - limit // 2


def _map_range_to_callee(rng: SourceRange, sm: SourceManagerLike) -> SourceRange:
    begin, end = rng.begin, rng.end
    if begin.is_macro_id:
        begin = immediate_macro_callee_loc(begin, sm)
    if end.is_macro_id:
        end = immediate_macro_callee_loc(end, sm)
    return rng.with_endpoints(begin, end)


def emit_macro_backtrace(
    sink: BacktraceSink,
    loc: Location,
    severity: Severity,
    ranges: Sequence[SourceRange],
    hints: Sequence[FixItHint],
    sm: SourceManagerLike,
    limit: int,
    *,
    suppress_caret_like_previous: bool = False,
) -> None:
    """Print the code context of ``loc`` and, for macro locations, its expansion notes.

    Args:
        sink: Renderer receiving snippet blocks and notes.
        loc: The diagnostic location (file or macro).
        severity: Severity of the diagnostic (used for caret de-duplication).
        ranges: Highlighted ranges in the coordinates of ``loc``.
        hints: Fix-it hints; only shown with the leaf context.
        sm: Location service.
        limit: Maximum number of expansion notes (0 = unlimited).
        suppress_caret_like_previous: Allow the leaf snippet to be skipped when it
            repeats the previous one, whatever the severity.
    """
    levels, leaf = collect_macro_levels(loc, sm)
    depth = len(levels)
    sink.emit_code_context(
        leaf, severity, ranges, hints, suppress_caret_like_previous=suppress_caret_like_previous
    )
    if not depth:
        return

    skip_start, skip_end = elided_levels(depth, limit)
    logger.debug("Macro backtrace depth %d, eliding levels [%d, %d)", depth, skip_start, skip_end)

    mapped: list[SourceRange] = list(ranges)
    for index in range(depth - 1, -1, -1):
        macro_loc = levels[index]
        callee = immediate_macro_callee_loc(macro_loc, sm)
        mapped = [_map_range_to_callee(rng, sm) for rng in mapped]

        if skip_start <= index < skip_end:
            if index == skip_start:
                sink.emit_basic_note(
                    f"({skip_end - skip_start} expansions elided in backtrace; "
                    "use --macro-backtrace-limit=0 to see all)"
                )
            continue

        name = immediate_macro_name(macro_loc, sm)
        sink.emit(
            sm.get_spelling_loc(callee), Severity.NOTE, f"expanded from macro '{name}'", mapped
        )
