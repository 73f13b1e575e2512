# textdiag:header:start
#
#   project      : TextDiag
#   file         : test_batch_loader.py
#   file_relpath : tests/cli/test_batch_loader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Tests for loading JSON diagnostic batches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tests.cli.conftest import MISSING_SEMI_BATCH, write_batch
from tests.conftest import parametrize
from textdiag.cli.batch import BatchError, load_batch, load_batch_file, load_batch_text
from textdiag.diagnostic.model import FixItKind, Severity

if TYPE_CHECKING:
    from pathlib import Path


def _loc(file: str, line: int, column: int) -> dict[str, Any]:
    return {"file": file, "line": line, "column": column}


def test_load_files_and_diagnostics() -> None:
    batch = load_batch(MISSING_SEMI_BATCH)
    sm = batch.source_manager

    fid = sm.find_file("a.c")
    assert fid is not None
    assert sm.get_line_text(fid, 2) == "  return 0"

    [diag] = batch.diagnostics
    assert diag.severity is Severity.ERROR
    assert diag.location == sm.get_location(fid, 2, 11)
    assert [hint.kind for hint in diag.fixits] == [FixItKind.INSERTION]
    assert diag.fixits[0].code_to_insert == ";"


def test_load_include_and_line_directive() -> None:
    batch = load_batch(
        {
            "files": [
                {"name": "main.c", "text": '#include "a.h"\n'},
                {
                    "name": "a.h",
                    "text": "#line 40 \"gen.h\"\nint f;\n",
                    "included_from": _loc("main.c", 1, 1),
                    "line_directives": [{"line": 1, "presented_line": 40, "filename": "gen.h"}],
                },
            ],
        }
    )
    sm = batch.source_manager
    header = sm.find_file("a.h")
    assert header is not None

    presumed = sm.get_presumed_loc(sm.get_location(header, 2, 5))

    assert presumed is not None
    assert (presumed.filename, presumed.line, presumed.column) == ("gen.h", 40, 5)
    assert presumed.include_loc == sm.get_location(sm.find_file("main.c") or 0, 1, 1)


def test_load_macros_ranges_and_fixits() -> None:
    batch = load_batch(
        {
            "files": [{"name": "m.c", "text": "#define Z y\nint x = Z;\nint w = v;\n"}],
            "macros": [
                {
                    "id": "Z",
                    "spelling": _loc("m.c", 1, 11),
                    "expansion": _loc("m.c", 2, 9),
                    "length": 1,
                }
            ],
            "diagnostics": [
                {
                    "severity": "Warning",
                    "message": "in macro",
                    "location": {"macro": "Z", "offset": 0},
                    "ranges": [{"begin": _loc("m.c", 2, 5)}],
                },
                {
                    "severity": "fatal error",
                    "message": "fix me",
                    "location": _loc("m.c", 3, 9),
                    "fixits": [
                        {"kind": "replace", "range": {"begin": _loc("m.c", 3, 9)}, "text": "u"},
                        {"kind": "remove", "range": {"begin": _loc("m.c", 3, 10)}},
                    ],
                },
                {"message": "no location"},
            ],
        }
    )
    first, second, third = batch.diagnostics

    assert first.severity is Severity.WARNING
    assert first.location.is_macro_id
    assert first.ranges[0].is_token_range
    assert second.severity is Severity.FATAL
    assert [hint.kind for hint in second.fixits] == [FixItKind.REPLACEMENT, FixItKind.REMOVAL]
    assert third.severity is Severity.ERROR
    assert not third.location.is_valid


def test_location_outside_the_file_becomes_invalid() -> None:
    batch = load_batch(
        {
            "files": [{"name": "a.c", "text": "x\n"}],
            "diagnostics": [{"message": "m", "location": _loc("a.c", 99, 1)}],
        }
    )
    assert not batch.diagnostics[0].location.is_valid


@parametrize(
    "data, fragment",
    [
        ([], "expected an object"),
        ({"files": {}}, "'files' must be a list"),
        ({"files": [{"text": "x"}]}, "missing 'name'"),
        ({"files": [{"name": "a.c", "text": 3}]}, "'text' must be str"),
        ({"diagnostics": [{"location": _loc("nope.c", 1, 1)}]}, "unknown file 'nope.c'"),
        ({"diagnostics": [{"location": {"macro": "M"}}]}, "unknown macro 'M'"),
        ({"diagnostics": [{"severity": "panic"}]}, "Unknown severity"),
        ({"diagnostics": [{"message": 1}]}, "'message' must be a string"),
        ({"diagnostics": [{"fixits": [{"kind": "swap"}]}]}, "'kind' must be one of"),
    ],
)
def test_malformed_batches(data: Any, fragment: str) -> None:
    with pytest.raises(BatchError, match=fragment):
        load_batch(data)


def test_boolean_is_not_a_line_number() -> None:
    data = {
        "files": [{"name": "a.c", "text": "x\n"}],
        "diagnostics": [{"location": {"file": "a.c", "line": True, "column": 1}}],
    }
    with pytest.raises(BatchError, match="'line' must be int"):
        load_batch(data)


def test_duplicate_macro_id() -> None:
    macro = {"id": "M", "spelling": None, "expansion": None}
    with pytest.raises(BatchError, match="duplicate macro id 'M'"):
        load_batch({"macros": [macro, macro]})


def test_invalid_json_text() -> None:
    with pytest.raises(BatchError, match="Invalid JSON"):
        load_batch_text("{")


def test_load_batch_file(tmp_path: Path) -> None:
    batch = load_batch_file(write_batch(tmp_path, MISSING_SEMI_BATCH))
    assert len(batch.diagnostics) == 1
