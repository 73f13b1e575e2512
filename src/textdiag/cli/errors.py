# textdiag:header:start
#
#   project      : TextDiag
#   file         : errors.py
#   file_relpath : src/textdiag/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Exceptions for the TextDiag CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from textdiag.cli.exit_codes import ExitCode


class TextdiagError(click.ClickException):
    """Base class for all TextDiag CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colors are applied in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
                return
        super().show(file)


class TextdiagUsageError(TextdiagError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class TextdiagConfigError(TextdiagError):
    """Error for configuration errors (unreadable or malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class TextdiagFileNotFoundError(TextdiagError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class TextdiagIOError(TextdiagError):
    """Error for I/O errors reading input or writing rendered output."""

    exit_code = ExitCode.IO_ERROR


class TextdiagInputError(TextdiagError):
    """Error for malformed diagnostics batches."""

    exit_code = ExitCode.INPUT_ERROR
