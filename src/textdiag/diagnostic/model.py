# textdiag:header:start
#
#   project      : TextDiag
#   file         : model.py
#   file_relpath : src/textdiag/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Core diagnostic types for TextDiag.

Sections:
    * Severity: ordered severity levels with label text and terminal style.
    * FixItKind / FixItHint: proposed insertions, removals and replacements.
    * Diagnostic: immutable bundle of everything needed to render one diagnostic.

The renderer borrows these values for the duration of one emit call and never
mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING, Any

from textdiag.source.model import INVALID_LOCATION, Location, SourceRange

if TYPE_CHECKING:
    from collections.abc import Sequence


@total_ordering
class Severity(Enum):
    """Severity levels of a rendered diagnostic.

    Levels are ordered by importance: FATAL > ERROR > WARNING > REMARK > NOTE.
    Ordering only drives presentation (label text and color); suppression
    policy lives upstream.
    """

    NOTE = "note"
    REMARK = "remark"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        """Return the position of this level in the severity order."""
        return _SEVERITY_ORDER.index(self)

    @property
    def label(self) -> str:
        """Return the label text printed before the message (without the colon)."""
        return "fatal error" if self is Severity.FATAL else self.value

    @property
    def style(self) -> dict[str, Any]:
        """Return the `click.style` keyword arguments used for the label.

        Intended for human-readable output only; machine formats never use colors.
        """
        return {
            Severity.NOTE: {"fg": "cyan", "bold": True},
            Severity.REMARK: {"fg": "cyan", "bold": True},
            Severity.WARNING: {"fg": "magenta", "bold": True},
            Severity.ERROR: {"fg": "red", "bold": True},
            Severity.FATAL: {"fg": "red", "bold": True},
        }[self]

    @property
    def bold_message(self) -> bool:
        """Return True if the message text of this level is printed in bold."""
        return self in (Severity.WARNING, Severity.ERROR, Severity.FATAL)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value: str) -> Severity:
        """Parse a severity name (case-insensitive; ``fatal error`` accepted).

        Raises:
            ValueError: If ``value`` names no severity.
        """
        key = value.strip().lower()
        if key == "fatal error":
            key = "fatal"
        try:
            return cls(key)
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown severity {value!r} (expected one of: {names})") from None


_SEVERITY_ORDER: tuple[Severity, ...] = tuple(Severity)


class FixItKind(str, Enum):
    """The kind of edit a `FixItHint` proposes."""

    INSERTION = "insertion"
    REMOVAL = "removal"
    REPLACEMENT = "replacement"


@dataclass(frozen=True, slots=True)
class FixItHint:
    """A proposed edit attached to a diagnostic.

    Every hint is represented as a range to remove plus code to insert in its
    place: an insertion removes an empty char range, a removal inserts nothing.

    Note:
        Ranges of hints attached to the same diagnostic must not overlap; this is
        the caller's responsibility and is not validated.

    Attributes:
        remove_range (SourceRange): Text replaced by the hint.
        code_to_insert (str): Replacement text.
    """

    remove_range: SourceRange
    code_to_insert: str = ""

    @classmethod
    def insertion(cls, at: Location, text: str) -> FixItHint:
        """Create a hint inserting ``text`` before ``at``."""
        return cls(SourceRange.char_range(at, at), text)

    @classmethod
    def removal(cls, source_range: SourceRange) -> FixItHint:
        """Create a hint removing ``source_range``."""
        return cls(source_range, "")

    @classmethod
    def replacement(cls, source_range: SourceRange, text: str) -> FixItHint:
        """Create a hint replacing ``source_range`` with ``text``."""
        return cls(source_range, text)

    @property
    def is_insertion(self) -> bool:
        """Return True if the hint inserts text without removing any."""
        rng = self.remove_range
        return not rng.is_token_range and rng.begin == rng.end and bool(self.code_to_insert)

    @property
    def kind(self) -> FixItKind:
        """Return the kind of edit this hint proposes."""
        if self.is_insertion:
            return FixItKind.INSERTION
        if not self.code_to_insert:
            return FixItKind.REMOVAL
        return FixItKind.REPLACEMENT


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Everything needed to render one diagnostic.

    Attributes:
        severity (Severity): Severity of the diagnostic.
        message (str): Message text (may be empty).
        location (Location): Primary location (the caret), possibly invalid.
        ranges (tuple[SourceRange, ...]): Additional highlighted ranges.
        fixits (tuple[FixItHint, ...]): Proposed edits.
    """

    severity: Severity
    message: str
    location: Location = INVALID_LOCATION
    ranges: tuple[SourceRange, ...] = ()
    fixits: tuple[FixItHint, ...] = ()

    @classmethod
    def create(
        cls,
        severity: Severity,
        message: str,
        location: Location = INVALID_LOCATION,
        ranges: Sequence[SourceRange] = (),
        fixits: Sequence[FixItHint] = (),
    ) -> Diagnostic:
        """Create a diagnostic from arbitrary sequences of ranges and hints."""
        return cls(severity, message, location, tuple(ranges), tuple(fixits))
