# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/source/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Source locations and the location-resolution service interface."""

from __future__ import annotations

from textdiag.source.manager import InMemorySourceManager, SourceManagerLike
from textdiag.source.model import (
    INVALID_LOCATION,
    ColumnRange,
    Location,
    PresumedPosition,
    SourceRange,
)

__all__ = [
    "INVALID_LOCATION",
    "ColumnRange",
    "InMemorySourceManager",
    "Location",
    "PresumedPosition",
    "SourceManagerLike",
    "SourceRange",
]
