# textdiag:header:start
#
#   project      : TextDiag
#   file         : manager.py
#   file_relpath : src/textdiag/source/manager.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Source-text and location-resolution services.

The renderer never owns source text: it borrows a `SourceManagerLike`
implementation that resolves opaque `Location` handles to files, lines and
columns, walks macro expansion chains, and reports include relationships.

`InMemorySourceManager` is a complete, dictionary-backed implementation used by
the command-line front end and by tests. It supports:

- file buffers with an optional including location,
- ``#line``-style overrides of presented line numbers and file names,
- macro expansions (object/function-like macro bodies) and macro argument
  expansions, arbitrarily nested.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from textdiag.config.logging import get_logger
from textdiag.source.lexer import measure_token_length
from textdiag.source.model import INVALID_LOCATION, Location, PresumedPosition

if TYPE_CHECKING:
    from textdiag.config.logging import TextdiagLogger


logger: TextdiagLogger = get_logger(__name__)


class SourceManagerLike(Protocol):
    """Structural interface of the location service consumed by the renderer.

    Implementations must be safe for concurrent reads; the renderer never
    mutates them.
    """

    def get_file_name(self, file_id: int) -> str | None:
        """Return the physical name of a file buffer, or None if unknown."""
        ...

    def get_buffer_data(self, file_id: int) -> str | None:
        """Return the full text of a file buffer, or None if unavailable."""
        ...

    def get_line_text(self, file_id: int, line: int) -> str | None:
        """Return the text of a physical 1-based line without its terminator."""
        ...

    def get_decomposed_loc(self, loc: Location) -> tuple[int, int]:
        """Return ``(file_id, offset)`` for the expansion site of ``loc``."""
        ...

    def get_line_number(self, file_id: int, offset: int) -> int:
        """Return the physical 1-based line of ``offset`` (0 if unknown)."""
        ...

    def get_column_number(self, file_id: int, offset: int) -> int:
        """Return the 1-based column of ``offset`` (0 if unknown)."""
        ...

    def get_presumed_loc(self, loc: Location) -> PresumedPosition | None:
        """Resolve ``loc`` (via its expansion site) for presentation."""
        ...

    def get_include_loc(self, file_id: int) -> Location:
        """Return the location that included ``file_id`` (invalid for top-level files)."""
        ...

    def get_immediate_spelling_loc(self, loc: Location) -> Location:
        """Step once from a macro location toward where its characters were spelled."""
        ...

    def get_spelling_loc(self, loc: Location) -> Location:
        """Return the file location where the characters of ``loc`` were spelled."""
        ...

    def get_immediate_expansion_range(self, loc: Location) -> tuple[Location, Location]:
        """Return the immediate expansion-parent range of a macro location."""
        ...

    def get_expansion_range(self, loc: Location) -> tuple[Location, Location]:
        """Return the top-level file range that the expansion of ``loc`` replaced."""
        ...

    def get_expansion_loc(self, loc: Location) -> Location:
        """Return the top-level file location of the expansion containing ``loc``."""
        ...

    def is_macro_arg_expansion(self, loc: Location) -> bool:
        """Return True if ``loc`` lies in the expansion of a macro argument."""
        ...

    def measure_token_length(self, loc: Location) -> int:
        """Return the length of the token spelled at ``loc`` (0 if unknown)."""
        ...


@dataclass(frozen=True, slots=True)
class LineDirective:
    """A ``#line`` override: physical lines after ``physical_line`` are renumbered.

    Attributes:
        physical_line (int): Physical line holding the directive.
        presented_line (int): Presented number of the line following the directive.
        filename (str | None): Presented file name from the directive, if any.
    """

    physical_line: int
    presented_line: int
    filename: str | None = None


@dataclass(slots=True)
class FileEntry:
    """A file buffer registered with `InMemorySourceManager`."""

    name: str
    text: str
    include_loc: Location = INVALID_LOCATION
    line_starts: list[int] = field(default_factory=lambda: [0])
    directives: list[LineDirective] = field(default_factory=lambda: [])

    def __post_init__(self) -> None:
        starts: list[int] = [0]
        text = self.text
        for idx, ch in enumerate(text):
            # "\r\n" is one break, started after the "\n".
            if ch == "\n" or (ch == "\r" and text[idx + 1 : idx + 2] != "\n"):
                starts.append(idx + 1)
        self.line_starts = starts


@dataclass(frozen=True, slots=True)
class ExpansionInfo:
    """One macro expansion (or macro argument expansion) record.

    Attributes:
        spelling (Location): Where the expanded characters were spelled.
        expansion_start (Location): Start of the text the expansion replaced.
        expansion_end (Location): Start of the last token the expansion replaced.
        length (int): Number of characters spanned by the expansion.
        is_macro_arg (bool): True for the expansion of a macro argument.
    """

    spelling: Location
    expansion_start: Location
    expansion_end: Location
    length: int
    is_macro_arg: bool = False


class InMemorySourceManager(SourceManagerLike):
    """Dictionary-backed `SourceManagerLike` implementation.

    Example:
        >>> sm = InMemorySourceManager()
        >>> fid = sm.add_file("a.c", "int x = 1\\n")
        >>> sm.get_presumed_loc(sm.get_location(fid, 1, 5)).column
        5
    """

    def __init__(self) -> None:
        self._files: dict[int, FileEntry] = {}
        self._expansions: dict[int, ExpansionInfo] = {}
        self._names: dict[str, int] = {}

    # --- Registration -----------------------------------------------------

    def add_file(self, name: str, text: str, *, include_loc: Location = INVALID_LOCATION) -> int:
        """Register a file buffer.

        Args:
            name: File name as presented to users.
            text: Full text of the buffer.
            include_loc: Location of the directive that included this file.

        Returns:
            The new file id (always > 0).
        """
        file_id = len(self._files) + 1
        self._files[file_id] = FileEntry(name=name, text=text, include_loc=include_loc)
        self._names.setdefault(name, file_id)
        logger.trace("Registered file %d: %s (%d chars)", file_id, name, len(text))
        return file_id

    def find_file(self, name: str) -> int | None:
        """Return the id of the first file registered under ``name``."""
        return self._names.get(name)

    def add_line_directive(
        self,
        file_id: int,
        physical_line: int,
        presented_line: int,
        filename: str | None = None,
    ) -> None:
        """Record a ``#line presented_line "filename"`` directive on ``physical_line``."""
        entry = self._files[file_id]
        directive = LineDirective(physical_line, presented_line, filename)
        keys = [d.physical_line for d in entry.directives]
        entry.directives.insert(bisect.bisect_right(keys, physical_line), directive)

    def create_expansion(
        self,
        spelling: Location,
        expansion_start: Location,
        expansion_end: Location | None = None,
        *,
        length: int = 0,
    ) -> Location:
        """Register a macro body expansion and return the location of its first character.

        Args:
            spelling: Location of the macro body characters (in the definition).
            expansion_start: Location of the macro name at the use site.
            expansion_end: Start of the last token of the macro use (e.g. the
                closing parenthesis); defaults to ``expansion_start``.
            length: Number of characters in the expanded text.

        Returns:
            The macro location at offset 0 of the new expansion.
        """
        return self._register(
            ExpansionInfo(
                spelling=spelling,
                expansion_start=expansion_start,
                expansion_end=expansion_start if expansion_end is None else expansion_end,
                length=length,
            )
        )

    def create_macro_arg_expansion(
        self,
        spelling: Location,
        expansion_loc: Location,
        *,
        length: int = 0,
    ) -> Location:
        """Register the expansion of a macro argument.

        Args:
            spelling: Location where the argument was written at the macro call.
            expansion_loc: Location of the parameter use inside the macro body
                expansion.
            length: Number of characters in the argument.

        Returns:
            The macro location at offset 0 of the new expansion.
        """
        return self._register(
            ExpansionInfo(
                spelling=spelling,
                expansion_start=expansion_loc,
                expansion_end=expansion_loc,
                length=length,
                is_macro_arg=True,
            )
        )

    def _register(self, info: ExpansionInfo) -> Location:
        expansion_id = len(self._expansions) + 1
        self._expansions[expansion_id] = info
        logger.trace("Registered expansion %d: %r", expansion_id, info)
        return Location(expansion_id=expansion_id)

    def get_location(self, file_id: int, line: int, column: int) -> Location:
        """Translate a physical 1-based line/column pair into a file location.

        Columns past the end of the line clamp to the line end; unknown files or
        lines yield the invalid location.
        """
        entry = self._files.get(file_id)
        if entry is None or line < 1 or line > len(entry.line_starts):
            return INVALID_LOCATION
        start = entry.line_starts[line - 1]
        end = self._line_end(entry, start)
        return Location(file_id=file_id, offset=min(start + max(column, 1) - 1, end))

    # --- SourceManagerLike --------------------------------------------------

    def get_file_name(self, file_id: int) -> str | None:
        """Return the physical name of a file buffer, or None if unknown."""
        entry = self._files.get(file_id)
        return None if entry is None else entry.name

    def get_buffer_data(self, file_id: int) -> str | None:
        """Return the full text of a file buffer, or None if unavailable."""
        entry = self._files.get(file_id)
        return None if entry is None else entry.text

    def get_line_text(self, file_id: int, line: int) -> str | None:
        """Return the text of a physical 1-based line without its terminator."""
        entry = self._files.get(file_id)
        if entry is None or line < 1 or line > len(entry.line_starts):
            return None
        start = entry.line_starts[line - 1]
        return entry.text[start : self._line_end(entry, start)]

    def get_decomposed_loc(self, loc: Location) -> tuple[int, int]:
        """Return ``(file_id, offset)`` for the expansion site of ``loc``."""
        file_loc = self.get_expansion_loc(loc)
        return file_loc.file_id, file_loc.offset

    def get_line_number(self, file_id: int, offset: int) -> int:
        """Return the physical 1-based line of ``offset`` (0 if unknown)."""
        entry = self._files.get(file_id)
        if entry is None or offset < 0 or offset > len(entry.text):
            return 0
        return bisect.bisect_right(entry.line_starts, offset)

    def get_column_number(self, file_id: int, offset: int) -> int:
        """Return the 1-based column of ``offset`` (0 if unknown)."""
        line = self.get_line_number(file_id, offset)
        if line == 0:
            return 0
        return offset - self._files[file_id].line_starts[line - 1] + 1

    def get_presumed_loc(self, loc: Location) -> PresumedPosition | None:
        """Resolve ``loc`` (via its expansion site) for presentation.

        Returns:
            The presumed position, or None when ``loc`` cannot be resolved.
        """
        file_id, offset = self.get_decomposed_loc(loc)
        entry = self._files.get(file_id)
        line = self.get_line_number(file_id, offset)
        if entry is None or line == 0:
            return None
        filename = entry.name
        presented = line
        keys = [d.physical_line for d in entry.directives]
        idx = bisect.bisect_left(keys, line) - 1
        if idx >= 0:
            directive = entry.directives[idx]
            presented = directive.presented_line + (line - directive.physical_line - 1)
            # The most recent directive naming a file wins.
            for prior in reversed(entry.directives[: idx + 1]):
                if prior.filename is not None:
                    filename = prior.filename
                    break
        return PresumedPosition(
            file_id=file_id,
            filename=filename,
            line=presented,
            column=self.get_column_number(file_id, offset),
            include_loc=entry.include_loc,
        )

    def get_include_loc(self, file_id: int) -> Location:
        """Return the location that included ``file_id`` (invalid for top-level files)."""
        entry = self._files.get(file_id)
        return INVALID_LOCATION if entry is None else entry.include_loc

    def get_immediate_spelling_loc(self, loc: Location) -> Location:
        """Step once from a macro location toward where its characters were spelled."""
        info = self._info(loc)
        if info is None:
            return loc
        return info.spelling.with_offset(loc.offset)

    def get_spelling_loc(self, loc: Location) -> Location:
        """Return the file location where the characters of ``loc`` were spelled."""
        seen: set[Location] = set()
        while loc.is_macro_id and loc not in seen:
            seen.add(loc)
            loc = self.get_immediate_spelling_loc(loc)
        return loc

    def get_immediate_expansion_range(self, loc: Location) -> tuple[Location, Location]:
        """Return the immediate expansion-parent range of a macro location."""
        info = self._info(loc)
        if info is None:
            return loc, loc
        return info.expansion_start, info.expansion_end

    def get_expansion_range(self, loc: Location) -> tuple[Location, Location]:
        """Return the top-level file range that the expansion of ``loc`` replaced."""
        begin = loc
        seen: set[Location] = set()
        while begin.is_macro_id and begin not in seen:
            seen.add(begin)
            begin = self.get_immediate_expansion_range(begin)[0]
        end = loc
        seen.clear()
        while end.is_macro_id and end not in seen:
            seen.add(end)
            end = self.get_immediate_expansion_range(end)[1]
        return begin, end

    def get_expansion_loc(self, loc: Location) -> Location:
        """Return the top-level file location of the expansion containing ``loc``."""
        seen: set[Location] = set()
        while loc.is_macro_id and loc not in seen:
            seen.add(loc)
            loc = self.get_immediate_expansion_range(loc)[0]
        return loc

    def is_macro_arg_expansion(self, loc: Location) -> bool:
        """Return True if ``loc`` lies in the expansion of a macro argument."""
        info = self._info(loc)
        return info is not None and info.is_macro_arg

    def measure_token_length(self, loc: Location) -> int:
        """Return the length of the token spelled at ``loc`` (0 if unknown)."""
        spelling = self.get_spelling_loc(loc)
        text = self.get_buffer_data(spelling.file_id)
        if text is None:
            return 0
        return measure_token_length(text, spelling.offset)

    # --- Helpers -------------------------------------------------------------

    def _info(self, loc: Location) -> ExpansionInfo | None:
        if loc.expansion_id is None:
            return None
        return self._expansions.get(loc.expansion_id)

    @staticmethod
    def _line_end(entry: FileEntry, start: int) -> int:
        end = start
        text = entry.text
        while end < len(text) and text[end] not in "\r\n":
            end += 1
        return end
