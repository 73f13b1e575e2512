# textdiag:header:start
#
#   project      : TextDiag
#   file         : test_render_cmd.py
#   file_relpath : tests/cli/test_render_cmd.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Tests for the `textdiag render` command."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from tests.cli.conftest import (
    MISSING_SEMI_BATCH,
    assert_SUCCESS,
    run_cli,
    run_cli_in,
    write_batch,
)
from tests.conftest import mark_cli, parametrize
from textdiag.cli.commands.render import summarize
from textdiag.diagnostic.model import Diagnostic, Severity

if TYPE_CHECKING:
    from pathlib import Path

EXPECTED_MISSING_SEMI = (
    "a.c:2:11: error: expected ';' after return statement\n"
    "    2 |   return 0\n"
    "      |           ^\n"
    "      |           ;\n"
)


@mark_cli
def test_render_batch_file(tmp_path: Path) -> None:
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    result = run_cli_in(tmp_path, ["--no-color", "render", "batch.json", "--no-config"])

    assert_SUCCESS(result)
    assert result.stdout == EXPECTED_MISSING_SEMI


@mark_cli
def test_render_from_stdin(tmp_path: Path) -> None:
    result = run_cli_in(
        tmp_path,
        ["--no-color", "render", "-", "--no-config"],
        input_text=json.dumps(MISSING_SEMI_BATCH),
    )

    assert_SUCCESS(result)
    assert result.stdout == EXPECTED_MISSING_SEMI


@mark_cli
@parametrize(
    "args, first_line",
    [
        (
            ["--diagnostics-format", "msvc"],
            "a.c(2,10) : error: expected ';' after return statement",
        ),
        (["--diagnostics-format", "VI"], "a.c +2:11: error: expected ';' after return statement"),
        (["--no-column"], "a.c:2: error: expected ';' after return statement"),
    ],
)
def test_render_location_formats(tmp_path: Path, args: list[str], first_line: str) -> None:
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    result = run_cli_in(tmp_path, ["render", "batch.json", "--no-config", *args])

    assert_SUCCESS(result)
    assert result.stdout.splitlines()[0] == first_line


@mark_cli
def test_render_without_carets(tmp_path: Path) -> None:
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    result = run_cli_in(tmp_path, ["render", "batch.json", "--no-config", "--no-carets"])

    assert_SUCCESS(result)
    assert result.stdout == "a.c:2:11: error: expected ';' after return statement\n"


@mark_cli
def test_render_parseable_fixits(tmp_path: Path) -> None:
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    result = run_cli_in(tmp_path, ["render", "batch.json", "--no-config", "--parseable-fixits"])

    assert_SUCCESS(result)
    assert result.stdout.splitlines()[-1] == 'fix-it:"a.c":{2:11-2:11}:";"'


@mark_cli
def test_render_with_color(tmp_path: Path) -> None:
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    result = run_cli_in(tmp_path, ["--color", "always", "render", "batch.json", "--no-config"])

    assert_SUCCESS(result)
    assert result.stdout.startswith("\x1b[1ma.c:2:11: \x1b[0m")


@mark_cli
def test_summary_is_printed_when_verbose(tmp_path: Path) -> None:
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    quiet = run_cli_in(tmp_path, ["render", "batch.json", "--no-config"])
    verbose = run_cli_in(tmp_path, ["-v", "render", "batch.json", "--no-config"])

    assert "generated." not in quiet.stderr
    assert "1 error generated." in verbose.stderr
    assert verbose.stdout == EXPECTED_MISSING_SEMI


@mark_cli
def test_discovered_config_is_applied(isolation: Path) -> None:
    (isolation / "textdiag.toml").write_text(
        "root = true\n\n[diagnostics]\nshow_column = false\nshow_line_numbers = false\n",
        encoding="utf-8",
    )
    write_batch(isolation, MISSING_SEMI_BATCH)

    result = run_cli(["render", "batch.json"])

    assert_SUCCESS(result)
    assert result.stdout.splitlines() == [
        "a.c:2: error: expected ';' after return statement",
        "  return 0",
        "          ^",
        "          ;",
    ]


@mark_cli
def test_command_line_overrides_config(isolation: Path) -> None:
    (isolation / "textdiag.toml").write_text(
        "root = true\n\n[diagnostics]\nshow_carets = false\n",
        encoding="utf-8",
    )
    write_batch(isolation, MISSING_SEMI_BATCH)

    from_config = run_cli(["render", "batch.json"])
    overridden = run_cli(["render", "batch.json", "--carets"])
    ignored = run_cli(["render", "batch.json", "--no-config"])

    assert len(from_config.stdout.splitlines()) == 1
    assert overridden.stdout == EXPECTED_MISSING_SEMI
    assert ignored.stdout == EXPECTED_MISSING_SEMI


@mark_cli
def test_explicit_config_file(tmp_path: Path) -> None:
    (tmp_path / "extra.toml").write_text(
        '[diagnostics]\nformat = "msvc"\n',
        encoding="utf-8",
    )
    write_batch(tmp_path, MISSING_SEMI_BATCH)

    result = run_cli_in(
        tmp_path, ["render", "batch.json", "--no-config", "--config", "extra.toml"]
    )

    assert_SUCCESS(result)
    assert result.stdout.startswith("a.c(2,10) : error:")


@mark_cli
def test_render_empty_batch(tmp_path: Path) -> None:
    write_batch(tmp_path, {})

    result = run_cli_in(tmp_path, ["-v", "render", "batch.json", "--no-config"])

    assert_SUCCESS(result)
    assert result.stdout == ""
    assert "generated." not in result.stderr


def test_summarize() -> None:
    diags = [
        Diagnostic.create(Severity.WARNING, "w"),
        Diagnostic.create(Severity.ERROR, "e"),
        Diagnostic.create(Severity.FATAL, "f"),
        Diagnostic.create(Severity.NOTE, "n"),
    ]
    assert summarize(diags) == "1 warning and 2 errors generated."
    assert summarize(diags[:1]) == "1 warning generated."
    assert summarize(diags[3:]) is None
