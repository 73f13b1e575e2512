# textdiag:header:start
#
#   project      : TextDiag
#   file         : test_source_model.py
#   file_relpath : tests/source/test_source_model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Tests for source range primitives."""

from __future__ import annotations

from textdiag.source.model import INVALID_LOCATION, ColumnRange, Location, SourceRange


def test_token_range_defaults_to_single_token() -> None:
    loc = Location(file_id=1, offset=4)
    rng = SourceRange.token_range(loc)
    assert rng.begin == rng.end == loc
    assert rng.is_token_range
    assert rng.is_valid


def test_char_range_and_validity() -> None:
    rng = SourceRange.char_range(Location(file_id=1), INVALID_LOCATION)
    assert not rng.is_token_range
    assert not rng.is_valid


def test_with_endpoints_keeps_range_kind() -> None:
    rng = SourceRange.char_range(Location(file_id=1), Location(file_id=1, offset=2))
    moved = rng.with_endpoints(Location(file_id=2), Location(file_id=2, offset=3))
    assert not moved.is_token_range
    assert moved.begin.file_id == 2


def test_column_range_clip() -> None:
    """Clipping keeps one column past the end and rejects inverted ranges."""
    assert ColumnRange(0, 3).clip(5) == ColumnRange(1, 3)
    assert ColumnRange(2, 99).clip(5) == ColumnRange(2, 6)
    assert ColumnRange(6, 6).clip(5) == ColumnRange(6, 6)
    assert ColumnRange(8, 9).clip(5) is None
    assert ColumnRange(4, 2).clip(5) is None
    assert ColumnRange(3, 3).is_empty
