# textdiag:header:start
#
#   project      : TextDiag
#   file         : dump_config.py
#   file_relpath : src/textdiag/cli/commands/dump_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TextDiag `dump-config` command.

Emits the effective rendering options as TOML after applying defaults,
discovered and explicit config files, and command-line overrides. The output
is wrapped between ``# === BEGIN ===`` and ``# === END ===`` markers for easy
parsing in tests or tooling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from textdiag.cli.cmd_common import build_options
from textdiag.cli.options import (
    CONTEXT_SETTINGS,
    build_option_overrides,
    common_config_options,
    common_rendering_options,
)
from textdiag.config.io import render_options_toml
from textdiag.config.logging import get_logger

if TYPE_CHECKING:
    from textdiag.cli.console import ConsoleLike
    from textdiag.config.logging import TextdiagLogger
    from textdiag.config.model import DiagnosticFormat

logger: TextdiagLogger = get_logger(__name__)


@click.command(
    name="dump-config",
    help="Dump the effective TextDiag rendering options as TOML.",
    epilog="Output is wrapped between '# === BEGIN ===' and '# === END ===' markers.",
    context_settings=CONTEXT_SETTINGS,
)
@common_config_options
@common_rendering_options
def dump_config_command(
    *,
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
    """Dump the effective options as TOML.

    Args:
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

    console.print("# === BEGIN ===")
    console.print(render_options_toml(options).rstrip("\n"))
    console.print("# === END ===")
