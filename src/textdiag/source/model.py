# textdiag:header:start
#
#   project      : TextDiag
#   file         : model.py
#   file_relpath : src/textdiag/source/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Source location primitives consumed by the diagnostic renderer.

Sections:
    * Location: opaque, immutable handle into a source manager.
    * PresumedPosition: a location resolved to presented file, line and column.
    * SourceRange: a pair of locations with token/char semantics.
    * ColumnRange: a half-open range of 1-based columns on a single line.

These types carry no behavior that requires access to source text; every
resolution step goes through a `SourceManagerLike` implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final


@dataclass(frozen=True, slots=True)
class Location:
    """Opaque position in some source buffer, possibly inside a macro expansion.

    A location is either a *file location* (``file_id`` > 0, ``offset`` is a
    character offset into that file's buffer) or a *macro location*
    (``expansion_id`` is set, ``offset`` is relative to the start of the expanded
    text). The default instance is the invalid location.

    Attributes:
        file_id (int): Identifier of the file buffer (0 for macro or invalid locations).
        offset (int): Character offset into the buffer or expansion.
        expansion_id (int | None): Identifier of the macro expansion, if any.
    """

    file_id: int = 0
    offset: int = 0
    expansion_id: int | None = None

    @property
    def is_valid(self) -> bool:
        """Return True if the location refers to some buffer or expansion."""
        return self.file_id > 0 or self.expansion_id is not None

    @property
    def is_file_id(self) -> bool:
        """Return True if this is a valid location directly in a file buffer."""
        return self.file_id > 0 and self.expansion_id is None

    @property
    def is_macro_id(self) -> bool:
        """Return True if this location lies inside a macro expansion."""
        return self.expansion_id is not None

    def with_offset(self, delta: int) -> Location:
        """Return a location ``delta`` characters further in the same buffer or expansion."""
        if not self.is_valid:
            return self
        return replace(self, offset=self.offset + delta)


INVALID_LOCATION: Final[Location] = Location()
"""The canonical invalid (unknown) location."""


@dataclass(frozen=True, slots=True)
class PresumedPosition:
    """A location resolved for presentation.

    The presented file name and line reflect ``#line``-style overrides; the
    column is always the physical 1-based column.

    Attributes:
        file_id (int): Identifier of the physical file buffer.
        filename (str): File name as presented to the user.
        line (int): 1-based presented line number.
        column (int): 1-based column number.
        include_loc (Location): Location of the directive that included this file,
            or the invalid location for a top-level file.
    """

    file_id: int
    filename: str
    line: int
    column: int
    include_loc: Location = INVALID_LOCATION


@dataclass(frozen=True, slots=True)
class SourceRange:
    """A pair of locations delimiting highlighted source text.

    For a *token range* ``end`` is the start of the last token, so the range must
    be widened by that token's length. For a *char range* ``end`` is the first
    character past the range.

    Attributes:
        begin (Location): First location in the range.
        end (Location): Last token start (token range) or exclusive end (char range).
        is_token_range (bool): Whether ``end`` denotes the start of the last token.
    """

    begin: Location
    end: Location
    is_token_range: bool = True

    @classmethod
    def token_range(cls, begin: Location, end: Location | None = None) -> SourceRange:
        """Create a token range; ``end`` defaults to ``begin`` (a single token)."""
        return cls(begin, begin if end is None else end, True)

    @classmethod
    def char_range(cls, begin: Location, end: Location) -> SourceRange:
        """Create a char range with an exclusive ``end``."""
        return cls(begin, end, False)

    @property
    def is_valid(self) -> bool:
        """Return True if both endpoints are valid."""
        return self.begin.is_valid and self.end.is_valid

    def with_endpoints(self, begin: Location, end: Location) -> SourceRange:
        """Return a copy with new endpoints and the same token/char semantics."""
        return replace(self, begin=begin, end=end)


@dataclass(frozen=True, slots=True)
class ColumnRange:
    """Half-open range ``[begin, end)`` of 1-based character columns on one line.

    A zero-width range (``begin == end``) denotes a single point.
    """

    begin: int
    end: int

    @property
    def is_empty(self) -> bool:
        """Return True if the range covers no column."""
        return self.begin == self.end

    def clip(self, width: int) -> ColumnRange | None:
        """Clip the range to columns ``1..width + 1``.

        Columns are allowed to reach one past the last character so that a
        point at the end of the line stays visible.

        Args:
            width: Number of characters on the line.

        Returns:
            The clipped range, or None if the range is inverted or lies past the line.
        """
        if self.end < self.begin:
            return None
        begin = max(self.begin, 1)
        end = min(self.end, width + 1)
        if begin > width + 1 or end < begin:
            return None
        return ColumnRange(begin, end)
