# textdiag:header:start
#
#   project      : TextDiag
#   file         : cmd_common.py
#   file_relpath : src/textdiag/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Helpers shared by TextDiag CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from textdiag.cli.errors import TextdiagConfigError
from textdiag.config.io import load_merged_options
from textdiag.config.logging import get_logger
from textdiag.config.model import ConfigError

if TYPE_CHECKING:
    import click

    from textdiag.config.logging import TextdiagLogger
    from textdiag.config.model import DiagnosticOptions, MutableDiagnosticOptions

logger: TextdiagLogger = get_logger(__name__)


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output level stored on the context by the group."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return int(obj.get("verbosity_level", logging.WARNING))


def build_options(
    ctx: click.Context,
    *,
    config_paths: tuple[str, ...] | list[str],
    no_config: bool,
    overrides: MutableDiagnosticOptions,
) -> DiagnosticOptions:
    """Resolve the effective rendering options for a command.

    Layers discovered config (unless ``no_config``), explicit ``--config``
    files and command-line overrides. Color comes from the command line when
    ``--color``/``--no-color`` was given, else from config, else from TTY
    detection.

    Args:
        ctx: Current Click context (holds the group's color decision).
        config_paths: Explicit config files, merged in order.
        no_config: Skip discovery of config files from the working directory.
        overrides: Options set on the command line.

    Returns:
        Frozen options.

    Raises:
        TextdiagConfigError: If a config file is unreadable or malformed.
    """
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    if obj.get("color_explicit"):
        overrides.show_colors = bool(obj.get("color_enabled"))
    try:
        merged = load_merged_options(
            start=None if no_config else Path.cwd(),
            extra_files=[Path(p) for p in config_paths],
            overrides=overrides,
        )
    except ConfigError as exc:
        raise TextdiagConfigError(str(exc)) from exc
    if merged.show_colors is None:
        merged.show_colors = bool(obj.get("color_enabled", False))
    options = merged.freeze()
    logger.debug("Effective options: %s", options)
    return options
