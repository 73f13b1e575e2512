# textdiag:header:start
#
#   project      : TextDiag
#   file         : render.py
#   file_relpath : src/textdiag/cli/commands/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TextDiag `render` command.

Loads a JSON batch (source files, macro expansions and diagnostics; see
`textdiag.cli.batch`) into an in-memory source manager and renders every
diagnostic to stdout, in order, through one `TextDiagnostic` renderer.

Input modes:
  * ``textdiag render batch.json`` reads the batch from a file.
  * ``textdiag render -`` reads the batch from STDIN.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING

import click

from textdiag.cli.batch import BatchError, load_batch_text
from textdiag.cli.cmd_common import build_options, get_effective_verbosity
from textdiag.cli.errors import TextdiagFileNotFoundError, TextdiagInputError, TextdiagIOError
from textdiag.cli.options import (
    CONTEXT_SETTINGS,
    build_option_overrides,
    common_config_options,
    common_rendering_options,
)
from textdiag.config.logging import get_logger
from textdiag.diagnostic.model import Severity
from textdiag.rendering.emitter import RenderSinkError, TextDiagnostic

if TYPE_CHECKING:
    from collections.abc import Iterable

    from textdiag.cli.console import ConsoleLike
    from textdiag.config.logging import TextdiagLogger
    from textdiag.config.model import DiagnosticFormat
    from textdiag.diagnostic.model import Diagnostic

logger: TextdiagLogger = get_logger(__name__)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def summarize(diagnostics: Iterable[Diagnostic]) -> str | None:
    """Return a summary such as ``"1 warning and 2 errors generated."`` (None if empty)."""
    counts = Counter(d.severity for d in diagnostics)
    warnings = counts[Severity.WARNING]
    errors = counts[Severity.ERROR] + counts[Severity.FATAL]
    parts: list[str] = []
    if warnings:
        parts.append(_plural(warnings, "warning"))
    if errors:
        parts.append(_plural(errors, "error"))
    if not parts:
        return None
    return " and ".join(parts) + " generated."


def read_batch_text(batch_file: str) -> str:
    """Read the batch document from a path, or from STDIN for ``-``.

    Raises:
        TextdiagFileNotFoundError: If the path does not exist.
        TextdiagIOError: If the input cannot be read.
    """
    if batch_file == "-":
        return click.get_text_stream("stdin").read()
    path = Path(batch_file)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise TextdiagFileNotFoundError(f"No such file: {batch_file}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise TextdiagIOError(f"Cannot read {batch_file}: {exc}") from exc


@click.command(
    name="render",
    help="Render the diagnostics of a JSON batch file ('-' reads STDIN).",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("batch_file", metavar="BATCH", type=str)
@common_config_options
@common_rendering_options
def render_command(
    *,
    batch_file: str,
    config_paths: tuple[str, ...],
    no_config: bool,
    wrap_column: int | None,
    tab_stop: int | None,
    macro_backtrace_limit: int | None,
    parseable_fixits: bool | None,
    diagnostics_format: DiagnosticFormat | None,
    show_carets: bool | None,
    show_fixits: bool | None,
    show_source_ranges: bool | None,
    show_line_numbers: bool | None,
    show_column: bool | None,
) -> None:
    """Render a batch of diagnostics.

    Args:
        batch_file: Path of the JSON batch, or ``-`` for STDIN.
        config_paths: Additional TOML config files merged after discovered config.
        no_config: If True, skip config file discovery.
        wrap_column: ``--wrap`` override.
        tab_stop: ``--tabstop`` override.
        macro_backtrace_limit: ``--macro-backtrace-limit`` override.
        parseable_fixits: ``--parseable-fixits`` override.
        diagnostics_format: ``--diagnostics-format`` override.
        show_carets: ``--carets/--no-carets`` override.
        show_fixits: ``--fixits/--no-fixits`` override.
        show_source_ranges: ``--show-source-ranges`` override.
        show_line_numbers: ``--line-numbers/--no-line-numbers`` override.
        show_column: ``--column/--no-column`` override.

    Raises:
        TextdiagInputError: If the batch is malformed.
        TextdiagIOError: If the output cannot be written.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    overrides = build_option_overrides(
        show_colors=None,
        wrap_column=wrap_column,
        tab_stop=tab_stop,
        macro_backtrace_limit=macro_backtrace_limit,
        parseable_fixits=parseable_fixits,
        diagnostics_format=diagnostics_format,
        show_carets=show_carets,
        show_fixits=show_fixits,
        show_source_ranges=show_source_ranges,
        show_line_numbers=show_line_numbers,
        show_column=show_column,
    )
    options = build_options(
        ctx, config_paths=config_paths, no_config=no_config, overrides=overrides
    )

    text = read_batch_text(batch_file)
    try:
        batch = load_batch_text(text)
    except BatchError as exc:
        raise TextdiagInputError(f"{batch_file}: {exc}") from exc

    renderer = TextDiagnostic(console.out, batch.source_manager, options)
    try:
        count = renderer.emit_all(batch.diagnostics)
    except RenderSinkError as exc:
        raise TextdiagIOError(str(exc)) from exc
    logger.info("Rendered %d diagnostic(s) from %s", count, batch_file)

    summary = summarize(batch.diagnostics)
    if summary and get_effective_verbosity(ctx) <= logging.INFO:
        console.warn(summary)
