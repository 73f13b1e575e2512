# textdiag:header:start
#
#   project      : TextDiag
#   file         : emitter.py
#   file_relpath : src/textdiag/rendering/emitter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Text diagnostic renderer.

`TextDiagnostic` turns one diagnostic at a time into human-readable text on a
text stream:

    In file included from main.c:3:
    util.h:7:12: error: expected ';' after expression
        7 |   return x
          |           ^
          |           ;

It coordinates the include-stack lines, the location prefix, the severity
label and message, the macro backtrace and the source snippets. Session
memory (the previous location, include root and severity) is kept on the
instance so that consecutive diagnostics do not repeat an unchanged include
stack or an identical caret snippet.

A renderer is single-threaded; use one instance per output stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from textdiag.config.logging import get_logger
from textdiag.config.model import DiagnosticFormat, DiagnosticOptions
from textdiag.diagnostic.model import FixItKind, Severity
from textdiag.rendering.backtrace import emit_macro_backtrace
from textdiag.rendering.fixits import format_parseable_fixits
from textdiag.rendering.message import (
    format_diagnostic_level,
    format_diagnostic_message,
    styled,
)
from textdiag.rendering.snippet import render_snippet
from textdiag.rendering.text import column_width
from textdiag.source.model import INVALID_LOCATION

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from typing import TextIO

    from textdiag.config.logging import TextdiagLogger
    from textdiag.diagnostic.model import Diagnostic, FixItHint
    from textdiag.source.manager import SourceManagerLike
    from textdiag.source.model import Location, PresumedPosition, SourceRange

logger: TextdiagLogger = get_logger(__name__)


class RenderSinkError(RuntimeError):
    """Raised when the output stream of a renderer fails to accept text."""


@dataclass(frozen=True, slots=True)
class SessionMemory:
    """What a renderer remembers about the diagnostic it printed last.

    Attributes:
        last_loc (Location): Location of the previous diagnostic.
        last_include_loc (Location): Include-stack root printed last.
        last_level (Severity | None): Severity of the previous diagnostic.
    """

    last_loc: Location = INVALID_LOCATION
    last_include_loc: Location = INVALID_LOCATION
    last_level: Severity | None = None


class TextDiagnostic:
    """Render diagnostics as text on a stream.

    Args:
        out (TextIO): Destination stream.
        source_manager (SourceManagerLike): Location service resolving locations.
        options (DiagnosticOptions | None): Rendering options (defaults if None).
        memory (SessionMemory | None): Initial session memory, e.g. carried over
            from a renderer that printed the preceding diagnostic.
    """

    def __init__(
        self,
        out: TextIO,
        source_manager: SourceManagerLike,
        options: DiagnosticOptions | None = None,
        *,
        memory: SessionMemory | None = None,
    ) -> None:
        self._out = out
        self._sm = source_manager
        self._options = options or DiagnosticOptions()
        initial = memory or SessionMemory()
        self._last_loc: Location = initial.last_loc
        self._last_include_loc: Location = initial.last_include_loc
        self._last_level: Severity | None = initial.last_level

    # --- Session memory ---------------------------------------------------

    @property
    def options(self) -> DiagnosticOptions:
        """Rendering options of this renderer."""
        return self._options

    @property
    def last_loc(self) -> Location:
        """Location of the most recently emitted diagnostic."""
        return self._last_loc

    @property
    def last_include_loc(self) -> Location:
        """Include-stack root of the most recently printed include stack."""
        return self._last_include_loc

    @property
    def last_level(self) -> Severity | None:
        """Severity of the most recently emitted diagnostic."""
        return self._last_level

    @property
    def memory(self) -> SessionMemory:
        """Return a snapshot of the session memory."""
        return SessionMemory(self._last_loc, self._last_include_loc, self._last_level)

    # --- Public API ---------------------------------------------------------

    def emit(
        self,
        location: Location,
        severity: Severity,
        message: str,
        ranges: Sequence[SourceRange] = (),
        fixits: Sequence[FixItHint] = (),
        *,
        suppress_caret_like_previous: bool = False,
    ) -> None:
        """Render one diagnostic.

        Invalid locations produce a message-only diagnostic.

        Args:
            location: Primary location (the caret); may be invalid.
            severity: Severity of the diagnostic.
            message: Message text.
            ranges: Additional ranges to underline.
            fixits: Proposed edits.
            suppress_caret_like_previous: The previous diagnostic already showed
                this context; skip a snippet identical to the previous one even
                if the severity changed.

        Raises:
            RenderSinkError: If writing to the output stream fails.
        """
        logger.trace("emit %s at %r: %s", severity.value, location, message)
        presumed: PresumedPosition | None = None
        if location.is_valid:
            presumed = self._sm.get_presumed_loc(location)
            if presumed is not None:
                self._emit_include_stack(presumed.include_loc, severity)

        self._emit_message(location, presumed, severity, message, ranges)

        if location.is_valid:
            highlight_ranges: list[SourceRange] = list(ranges)
            for hint in fixits:
                if hint.kind is not FixItKind.INSERTION and hint.remove_range.is_valid:
                    highlight_ranges.append(hint.remove_range)
            emit_macro_backtrace(
                self,
                location,
                severity,
                highlight_ranges,
                fixits,
                self._sm,
                self._options.macro_backtrace_limit,
                suppress_caret_like_previous=suppress_caret_like_previous,
            )
            if self._options.parseable_fixits:
                self._write_lines(format_parseable_fixits(fixits, self._sm))

        self._last_loc = location
        self._last_level = severity

    def emit_diagnostic(
        self,
        diagnostic: Diagnostic,
        *,
        suppress_caret_like_previous: bool = False,
    ) -> None:
        """Render a `Diagnostic` bundle (see `emit`)."""
        self.emit(
            diagnostic.location,
            diagnostic.severity,
            diagnostic.message,
            diagnostic.ranges,
            diagnostic.fixits,
            suppress_caret_like_previous=suppress_caret_like_previous,
        )

    def emit_all(self, diagnostics: Iterable[Diagnostic]) -> int:
        """Render diagnostics in order and return how many were rendered."""
        count = 0
        for diagnostic in diagnostics:
            self.emit_diagnostic(diagnostic)
            count += 1
        return count

    # --- Backtrace callbacks -------------------------------------------------

    def emit_code_context(
        self,
        loc: Location,
        severity: Severity,
        ranges: Sequence[SourceRange],
        hints: Sequence[FixItHint],
        *,
        suppress_caret_like_previous: bool = False,
    ) -> None:
        """Print the snippet block for file location ``loc`` unless it repeats the last one.

        A snippet repeats the last one when the location is unchanged and
        there is nothing to underline or fix. It is still printed when the
        previous diagnostic was a note and this one is not (the note belonged to
        another diagnostic), unless ``suppress_caret_like_previous`` is set.
        """
        if not self._options.show_carets:
            return
        if (
            loc == self._sm.get_expansion_loc(self._last_loc)
            and not ranges
            and not hints
            and (
                suppress_caret_like_previous
                or self._last_level is not Severity.NOTE
                or severity is self._last_level
            )
        ):
            logger.trace("Snippet at %r repeats the previous one; skipped", loc)
            return
        self._write_lines(render_snippet(loc, ranges, hints, self._sm, self._options))

    def emit_basic_note(self, message: str) -> None:
        """Print a note without location or snippet."""
        colors = self._options.show_colors
        label = format_diagnostic_level(Severity.NOTE, colors)
        start = len(Severity.NOTE.label) + 2
        self._write_line(
            label
            + format_diagnostic_message(
                Severity.NOTE, message, start, self._options.message_length, colors
            )
        )

    # --- Helpers -------------------------------------------------------------

    def _emit_include_stack(self, include_loc: Location, severity: Severity) -> None:
        if include_loc == self._last_include_loc:
            return
        self._last_include_loc = include_loc
        if not self._options.show_note_include_stack and severity is Severity.NOTE:
            return

        frames: list[PresumedPosition] = []
        seen: set[Location] = set()
        loc = include_loc
        while loc.is_valid and loc not in seen:
            seen.add(loc)
            presumed = self._sm.get_presumed_loc(loc)
            if presumed is None:
                break
            frames.append(presumed)
            loc = presumed.include_loc
        if loc.is_valid and loc in seen:
            logger.warning("Include cycle at %r; include stack truncated", loc)

        for frame in reversed(frames):
            if self._options.show_location:
                self._write_line(f"In file included from {frame.filename}:{frame.line}:")
            else:
                self._write_line("In included file:")

    def _emit_message(
        self,
        location: Location,
        presumed: PresumedPosition | None,
        severity: Severity,
        message: str,
        ranges: Sequence[SourceRange],
    ) -> None:
        colors = self._options.show_colors
        prefix = self.format_location(location, presumed, ranges) if location.is_valid else ""
        current_column = column_width(prefix) + len(severity.label) + 2
        text = (
            styled(prefix, colors and bool(prefix), bold=True)
            + format_diagnostic_level(severity, colors)
            + format_diagnostic_message(
                severity, message, current_column, self._options.message_length, colors
            )
        )
        self._write_line(text)

    def format_location(
        self,
        location: Location,
        presumed: PresumedPosition | None,
        ranges: Sequence[SourceRange] = (),
    ) -> str:
        """Return the unstyled location prefix, including its trailing blank.

        Args:
            location: Valid diagnostic location.
            presumed: Its presumed position (None if unresolvable).
            ranges: Ranges reported when source range info is enabled.

        Returns:
            e.g. ``"a.c:3:5: "`` (clang), ``"a.c(3,4) : "`` (msvc) or
            ``"a.c +3:5: "`` (vi); only the file name when the position is
            unknown; empty when locations are disabled.
        """
        opts = self._options
        if presumed is None:
            file_id, _ = self._sm.get_decomposed_loc(location)
            name = self._sm.get_file_name(file_id)
            return f"{name}: " if name else ""
        if not opts.show_location:
            return ""

        parts: list[str] = [presumed.filename]
        if opts.format is DiagnosticFormat.MSVC:
            parts.append(f"({presumed.line}")
        elif opts.format is DiagnosticFormat.VI:
            parts.append(f" +{presumed.line}")
        else:
            parts.append(f":{presumed.line}")

        if opts.show_column and presumed.column:
            if opts.format is DiagnosticFormat.MSVC:
                parts.append(f",{presumed.column - 1}")
            else:
                parts.append(f":{presumed.column}")

        parts.append(") :" if opts.format is DiagnosticFormat.MSVC else ":")

        if opts.show_source_ranges and ranges:
            info = self._format_range_info(location, ranges)
            if info:
                parts.append(info + ":")
        parts.append(" ")
        return "".join(parts)

    def _format_range_info(self, location: Location, ranges: Sequence[SourceRange]) -> str:
        """Return ``{l:c-l:c}`` for each range lying in the file of the caret."""
        sm = self._sm
        caret_file, _ = sm.get_decomposed_loc(location)
        parts: list[str] = []
        for rng in ranges:
            if not rng.is_valid:
                continue
            begin = sm.get_expansion_loc(rng.begin)
            end = sm.get_expansion_loc(rng.end)
            if begin == end and rng.end.is_macro_id:
                end = sm.get_expansion_range(rng.end)[1]
            b_file, b_offset = sm.get_decomposed_loc(begin)
            e_file, e_offset = sm.get_decomposed_loc(end)
            if b_file != caret_file or e_file != caret_file:
                continue
            token_size = sm.measure_token_length(end) if rng.is_token_range else 0
            parts.append(
                f"{{{sm.get_line_number(b_file, b_offset)}:{sm.get_column_number(b_file, b_offset)}"
                f"-{sm.get_line_number(e_file, e_offset)}:"
                f"{sm.get_column_number(e_file, e_offset) + token_size}}}"
            )
        return "".join(parts)

    def _write_line(self, text: str) -> None:
        try:
            self._out.write(text + "\n")
        except OSError as exc:
            raise RenderSinkError(f"Cannot write diagnostic output: {exc}") from exc

    def _write_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self._write_line(line)
