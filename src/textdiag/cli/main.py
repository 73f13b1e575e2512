# textdiag:header:start
#
#   project      : TextDiag
#   file         : main.py
#   file_relpath : src/textdiag/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Click entry point for the TextDiag CLI.

Key ideas:
- Group-level options (verbosity, color) are initialized once and placed into
  ``ctx.obj``.
- Subcommands read the shared console and settings from the context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from textdiag.cli.commands.dump_config import dump_config_command
from textdiag.cli.commands.render import render_command
from textdiag.cli.commands.version import version_command
from textdiag.cli.console import ClickConsole
from textdiag.cli.options import (
    CONTEXT_SETTINGS,
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from textdiag.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from textdiag.cli.console import ConsoleLike
    from textdiag.config.logging import TextdiagLogger

logger: TextdiagLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (str | None): Explicit color mode from ``--color`` (or None).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.ensure_object(dict)

    verbosity = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = verbosity

    # Internal logging: TEXTDIAG_LOG_LEVEL wins, else follow -v/-q.
    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env if level_env is not None else verbosity
    setup_logging(level=ctx.obj["log_level"])

    mode = ColorMode.NEVER if no_color else (ColorMode(color_mode) if color_mode else None)
    enable_color = resolve_color_mode(color_mode_override=mode)
    ctx.obj["color_explicit"] = mode is not None
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="TextDiag: render compiler-style diagnostics as text.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the TextDiag CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'textdiag render BATCH.json' to render diagnostics.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(dump_config_command)

cli.add_command(render_command)

if __name__ == "__main__":
    cli()
