# textdiag:header:start
#
#   project      : TextDiag
#   file         : options.py
#   file_relpath : src/textdiag/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Common CLI option utilities.

This module centralizes reusable options (verbosity, color, configuration and
rendering flags) and their resolution logic, so commands and groups can stay
thin. The helpers here are Click-aware.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Generic, NoReturn, ParamSpec, TypeVar, cast

import click

from textdiag.cli.errors import TextdiagUsageError
from textdiag.config.logging import TRACE_LEVEL
from textdiag.config.model import DiagnosticFormat, MutableDiagnosticOptions

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

P = ParamSpec("P")
R = TypeVar("R")
E = TypeVar("E", bound=Enum)

#: Click context settings shared by the group and its commands.
CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


# --- Verbosity ---------------------------------------------------------------


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output level from ``-v``/``-q`` counts.

    Args:
        verbose_count: Number of times the verbose flag (-v) is passed.
        quiet_count: Number of times the quiet flag (-q) is passed.

    Returns:
        The level as a `logging` level number.

    Raises:
        TextdiagUsageError: If both verbose and quiet flags are used.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise TextdiagUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    if verbose_count >= 3:  # -vvv
        return TRACE_LEVEL
    if verbose_count == 2:  # -vv
        return logging.DEBUG
    if verbose_count == 1:  # -v
        return logging.INFO
    if quiet_count >= 1:  # -q
        return logging.ERROR
    return logging.WARNING


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options to a command."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress informational output.",
    )(f)
    return f


# --- Color -------------------------------------------------------------------


class ColorMode(str, Enum):
    """User intent for color output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    color_mode_override: ColorMode | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. **CLI override**: ``ALWAYS`` → True; ``NEVER`` → False.
        2. **Environment**: ``FORCE_COLOR`` (set and not ``"0"``) → True;
           ``NO_COLOR`` (set to any value) → False.
        3. **Auto**: ``stdout.isatty()``.

    Args:
        color_mode_override: Parsed `ColorMode` from ``--color``; None means
            "not provided".
        stdout_isatty: Optional override for TTY detection.

    Returns:
        True if ANSI color should be enabled.

    Examples:
        >>> resolve_color_mode(color_mode_override=ColorMode.NEVER)
        False
        >>> resolve_color_mode(color_mode_override=None, stdout_isatty=True)  # doctest: +SKIP
        True
    """
    if color_mode_override == ColorMode.ALWAYS:
        return True
    if color_mode_override == ColorMode.NEVER:
        return False

    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False

    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (OSError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` and ``--no-color`` options to a command."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


# --- Custom parameter types ----------------------------------------------------


class EnumChoiceParam(click.ParamType, Generic[E]):
    """A Click parameter type that converts a string to a member of a given Enum."""

    enum_cls: type[E]
    name: str
    choices: list[str]

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self.name = self.enum_cls.__name__.lower()
        self.choices = [cast("str", getattr(e, "value", str(e))) for e in self.enum_cls]

    def _fail_noreturn(
        self,
        message: str,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> NoReturn:
        raise click.BadParameter(message, param=param, ctx=ctx)

    def convert(
        self,
        value: object,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E | None:
        """Convert a string (case-insensitively) to a member of the Enum."""
        if value is None or isinstance(value, self.enum_cls):
            return cast("E | None", value)
        lookup: dict[str, E] = {
            cast("str", getattr(choice, "value", str(choice))).lower(): choice
            for choice in cast("Iterable[E]", self.enum_cls)
        }
        key = str(value).lower()
        if key in lookup:
            return lookup[key]
        self._fail_noreturn(
            f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
            param,
            ctx,
        )

    def __repr__(self) -> str:
        """Return a string representation."""
        return f"EnumParam({self.enum_cls.__name__})"


# --- Configuration and rendering options ------------------------------------------


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--config`` and ``--no-config`` options to a command."""
    f = click.option(
        "--config",
        "-c",
        "config_paths",
        multiple=True,
        type=click.Path(dir_okay=False, path_type=str),
        help="Additional TOML config file(s) merged after discovered config.",
    )(f)
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Do not discover textdiag.toml / pyproject.toml config files.",
    )(f)
    return f


def common_rendering_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the options that override `DiagnosticOptions` fields."""
    f = click.option(
        "--wrap",
        "wrap_column",
        type=int,
        default=None,
        help="Wrap messages and trim snippets to this many columns (0 disables).",
    )(f)
    f = click.option(
        "--tabstop",
        "tab_stop",
        type=int,
        default=None,
        help="Tab stop width used to expand tabs in snippets (1..100).",
    )(f)
    f = click.option(
        "--macro-backtrace-limit",
        "macro_backtrace_limit",
        type=int,
        default=None,
        help="Maximum number of macro expansion notes (0 = unlimited).",
    )(f)
    f = click.option(
        "--parseable-fixits/--no-parseable-fixits",
        "parseable_fixits",
        default=None,
        help="Also print machine-readable fix-it lines.",
    )(f)
    f = click.option(
        "--diagnostics-format",
        "diagnostics_format",
        type=EnumChoiceParam(DiagnosticFormat),
        default=None,
        help=f"Location prefix style ({', '.join(v.value for v in DiagnosticFormat)}).",
    )(f)
    f = click.option(
        "--carets/--no-carets",
        "show_carets",
        default=None,
        help="Show source snippets with caret lines.",
    )(f)
    f = click.option(
        "--fixits/--no-fixits",
        "show_fixits",
        default=None,
        help="Show fix-it insertion lines and removal/replacement notes.",
    )(f)
    f = click.option(
        "--show-source-ranges/--no-show-source-ranges",
        "show_source_ranges",
        default=None,
        help="Append {line:col-line:col} range info to the location prefix.",
    )(f)
    f = click.option(
        "--line-numbers/--no-line-numbers",
        "show_line_numbers",
        default=None,
        help="Show the line-number gutter in front of snippets.",
    )(f)
    f = click.option(
        "--column/--no-column",
        "show_column",
        default=None,
        help="Include the column in the location prefix.",
    )(f)
    return f


def build_option_overrides(
    *,
    show_colors: bool | None,
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
) -> MutableDiagnosticOptions:
    """Collect command-line overrides into an options layer (unset stays None)."""
    return MutableDiagnosticOptions(
        show_colors=show_colors,
        wrap_column=wrap_column,
        tab_stop=tab_stop,
        macro_backtrace_limit=macro_backtrace_limit,
        parseable_fixits=parseable_fixits,
        format=diagnostics_format,
        show_carets=show_carets,
        show_fixits=show_fixits,
        show_source_ranges=show_source_ranges,
        show_line_numbers=show_line_numbers,
        show_column=show_column,
    )
