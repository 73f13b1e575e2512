# textdiag:header:start
#
#   project      : TextDiag
#   file         : test_diagnostic_model.py
#   file_relpath : tests/diagnostic/test_diagnostic_model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Tests for severities, fix-it hints and the diagnostic bundle."""

from __future__ import annotations

import pytest

from tests.conftest import parametrize
from textdiag.diagnostic.model import Diagnostic, FixItHint, FixItKind, Severity
from textdiag.source.model import INVALID_LOCATION, Location, SourceRange


def test_severity_order() -> None:
    """Severities are ordered note < remark < warning < error < fatal."""
    assert sorted(Severity, reverse=True) == [
        Severity.FATAL,
        Severity.ERROR,
        Severity.WARNING,
        Severity.REMARK,
        Severity.NOTE,
    ]
    assert Severity.WARNING > Severity.NOTE


def test_severity_labels_and_bold_messages() -> None:
    assert Severity.FATAL.label == "fatal error"
    assert Severity.REMARK.label == "remark"
    assert Severity.ERROR.bold_message
    assert not Severity.NOTE.bold_message
    assert not Severity.REMARK.bold_message


@parametrize(
    "text, expected",
    [
        ("error", Severity.ERROR),
        (" Warning ", Severity.WARNING),
        ("fatal error", Severity.FATAL),
        ("FATAL", Severity.FATAL),
        ("note", Severity.NOTE),
    ],
)
def test_severity_parse(text: str, expected: Severity) -> None:
    assert Severity.parse(text) is expected


def test_severity_parse_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown severity"):
        Severity.parse("panic")


def test_fixit_kinds() -> None:
    """Hints are classified by what they remove and insert."""
    a = Location(file_id=1, offset=0)
    b = Location(file_id=1, offset=3)

    insertion = FixItHint.insertion(a, ";")
    removal = FixItHint.removal(SourceRange.token_range(a))
    replacement = FixItHint.replacement(SourceRange.char_range(a, b), "bar")

    assert insertion.is_insertion and insertion.kind is FixItKind.INSERTION
    assert removal.kind is FixItKind.REMOVAL
    assert replacement.kind is FixItKind.REPLACEMENT
    assert not replacement.is_insertion


def test_empty_insertion_counts_as_removal_of_nothing() -> None:
    """An insertion of no text removes an empty range and inserts nothing."""
    hint = FixItHint.insertion(Location(file_id=1), "")
    assert hint.kind is FixItKind.REMOVAL


def test_diagnostic_create_copies_sequences() -> None:
    ranges = [SourceRange.token_range(Location(file_id=1))]
    diag = Diagnostic.create(Severity.ERROR, "boom", ranges=ranges)
    ranges.clear()
    assert len(diag.ranges) == 1
    assert diag.location == INVALID_LOCATION
    assert diag.fixits == ()
