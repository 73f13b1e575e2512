# textdiag:header:start
#
#   project      : TextDiag
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""CLI test helpers for running TextDiag in a controlled working directory.

`run_cli_in()` changes the process working directory to the given directory
before invoking the Click CLI, so that relative batch paths and config
discovery resolve against the temporary test directory.
"""

from __future__ import annotations

import json
import os
from typing import IO, TYPE_CHECKING, Any

from click.testing import CliRunner, Result

from textdiag.cli.exit_codes import ExitCode
from textdiag.cli.main import cli

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

MISSING_SEMI_SOURCE = "int main() {\n  return 0\n}\n"

MISSING_SEMI_BATCH: dict[str, Any] = {
    "files": [{"name": "a.c", "text": MISSING_SEMI_SOURCE}],
    "diagnostics": [
        {
            "severity": "error",
            "message": "expected ';' after return statement",
            "location": {"file": "a.c", "line": 2, "column": 11},
            "fixits": [
                {"kind": "insert", "at": {"file": "a.c", "line": 2, "column": 11}, "text": ";"}
            ],
        }
    ],
}


def write_batch(directory: Path, data: dict[str, Any], name: str = "batch.json") -> Path:
    """Write a JSON batch document and return its path.

    Args:
        directory (Path): Target directory.
        data (dict[str, Any]): The batch document.
        name (str): File name.

    Returns:
        Path: The written file.
    """
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def run_cli_in(
    tmp_path: Path,
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with `tmp_path` as the working directory.

    Args:
        tmp_path (Path): Directory used as the CWD for the command invocation.
        argv (str | Sequence[str] | None): CLI argument vector, e.g.
            ``["render", "batch.json"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input, used
            by ``render -``.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.

    Example:
        ```python
        res = run_cli_in(tmp_path, ["render", "batch.json"])
        assert res.exit_code == ExitCode.SUCCESS
        ```
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(cli, argv, input=input_text)
    finally:
        os.chdir(cwd)


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does **not** depend on files in the working
    directory (e.g. ``version`` or ``--help``) or when all paths are absolute.

    Args:
        argv (str | Sequence[str] | None): CLI argument vector.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_USAGE_ERROR(result: Result) -> None:
    """Assert that the command exited with USAGE_ERROR (code 64)."""
    assert result.exit_code == ExitCode.USAGE_ERROR, result.output


def assert_INPUT_ERROR(result: Result) -> None:
    """Assert that the command exited with INPUT_ERROR (code 65)."""
    assert result.exit_code == ExitCode.INPUT_ERROR, result.output


def assert_FILE_NOT_FOUND(result: Result) -> None:
    """Assert that the command exited with FILE_NOT_FOUND (code 66)."""
    assert result.exit_code == ExitCode.FILE_NOT_FOUND, result.output


def assert_CONFIG_ERROR(result: Result) -> None:
    """Assert that the command exited with CONFIG_ERROR (code 78)."""
    assert result.exit_code == ExitCode.CONFIG_ERROR, result.output
