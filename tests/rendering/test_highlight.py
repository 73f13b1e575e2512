# textdiag:header:start
#
#   project      : TextDiag
#   file         : test_highlight.py
#   file_relpath : tests/rendering/test_highlight.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Tests for range projection and the caret line."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from tests.strategies_textdiag import column_ranges, line_with_caret
from textdiag.rendering.highlight import build_caret_line, project_range
from textdiag.source.manager import InMemorySourceManager
from textdiag.source.model import INVALID_LOCATION, ColumnRange, SourceRange


def test_token_range_is_widened_by_last_token() -> None:
    sm = InMemorySourceManager()
    fid = sm.add_file("a.c", "int x = foo(a, b);\n")
    line = sm.get_line_text(fid, 1) or ""
    rng = SourceRange.token_range(sm.get_location(fid, 1, 9))

    assert project_range(rng, 1, fid, line, sm) == ColumnRange(9, 12)


def test_char_range_end_is_exclusive() -> None:
    sm = InMemorySourceManager()
    fid = sm.add_file("a.c", "int x = foo(a, b);\n")
    line = sm.get_line_text(fid, 1) or ""
    rng = SourceRange.char_range(sm.get_location(fid, 1, 9), sm.get_location(fid, 1, 12))

    assert project_range(rng, 1, fid, line, sm) == ColumnRange(9, 12)


def test_multiline_range_covers_middle_line_without_blanks() -> None:
    """A range spanning the line covers it from its first to its last non-blank."""
    sm = InMemorySourceManager()
    fid = sm.add_file("a.c", "a(\n  b,  \n  c);\n")
    rng = SourceRange.token_range(sm.get_location(fid, 1, 1), sm.get_location(fid, 3, 3))

    assert project_range(rng, 2, fid, "  b,  ", sm) == ColumnRange(3, 5)


def test_range_missing_the_line_or_file_is_dropped() -> None:
    sm = InMemorySourceManager()
    fid = sm.add_file("a.c", "x;\ny;\n")
    other = sm.add_file("b.c", "z;\n")

    on_line_two = SourceRange.token_range(sm.get_location(fid, 2, 1))
    in_other = SourceRange.token_range(sm.get_location(other, 1, 1))
    invalid = SourceRange.token_range(INVALID_LOCATION)

    assert project_range(on_line_two, 1, fid, "x;", sm) is None
    assert project_range(in_other, 1, fid, "x;", sm) is None
    assert project_range(invalid, 1, fid, "x;", sm) is None


def test_inverted_range_is_dropped() -> None:
    sm = InMemorySourceManager()
    fid = sm.add_file("a.c", "abcdef\n")
    rng = SourceRange.char_range(sm.get_location(fid, 1, 5), sm.get_location(fid, 1, 2))

    assert project_range(rng, 1, fid, "abcdef", sm) is None


def test_macro_range_projects_to_the_macro_use() -> None:
    """A token range inside one macro expansion highlights the whole macro use."""
    sm = InMemorySourceManager()
    fid = sm.add_file("m.c", "#define ZERO y\nint x = ZERO + 1;\n")
    macro = sm.create_expansion(
        sm.get_location(fid, 1, 14), sm.get_location(fid, 2, 9), length=1
    )
    rng = SourceRange.token_range(macro)

    assert project_range(rng, 2, fid, "int x = ZERO + 1;", sm) == ColumnRange(9, 13)


def test_caret_line_basic() -> None:
    assert build_caret_line("foo(a, b);", 5, [ColumnRange(8, 9)]) == "    ^  ~  "


def test_caret_past_line_end() -> None:
    assert build_caret_line("ab", 3) == "  ^"


def test_zero_width_range_marks_a_point() -> None:
    assert build_caret_line("abcd", 1, [ColumnRange(3, 3)]) == "^ ^ "


def test_caret_wins_over_underline() -> None:
    assert build_caret_line("abcdef", 3, [ColumnRange(1, 6)]) == "~~^~~ "


def test_overlapping_ranges_are_united() -> None:
    assert build_caret_line("abcdefgh", 8, [ColumnRange(1, 3), ColumnRange(2, 5)]) == "~~~~   ^"


@given(data=st.data(), line_caret=line_with_caret())
def test_caret_dominates_and_ranges_are_covered(
    data: st.DataObject, line_caret: tuple[str, int]
) -> None:
    """The caret column shows ``^``; every column inside a range is marked."""
    line, caret = line_caret
    ranges: list[ColumnRange] = data.draw(column_ranges(len(line)))

    marks = build_caret_line(line, caret, ranges)

    assert marks[caret - 1] == "^"
    assert len(marks) in (len(line), len(line) + 1)
    for rng in ranges:
        if rng.is_empty:
            assert marks[rng.begin - 1] == "^"
            continue
        for column in range(rng.begin, min(rng.end, len(line) + 1)):
            assert marks[column - 1] in "~^"
    assert set(marks) <= {" ", "~", "^"}
