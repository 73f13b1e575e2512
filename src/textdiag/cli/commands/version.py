# textdiag:header:start
#
#   project      : TextDiag
#   file         : version.py
#   file_relpath : src/textdiag/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TextDiag `version` command.

Prints the TextDiag version as installed in the active Python environment.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import click

from textdiag.cli.cmd_common import get_effective_verbosity
from textdiag.constants import TEXTDIAG_VERSION

if TYPE_CHECKING:
    from textdiag.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of TextDiag.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the version as a JSON object.",
)
def version_command(*, as_json: bool = False) -> None:
    """Show the current version of TextDiag.

    Args:
        as_json (bool): Print ``{"version": ...}`` instead of plain text.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if as_json:
        console.print(json.dumps({"version": TEXTDIAG_VERSION}))
    elif get_effective_verbosity(ctx) <= logging.INFO:
        console.print(console.styled("TextDiag version:", bold=True, underline=True))
        console.print(f"    {console.styled(TEXTDIAG_VERSION, bold=True)}")
    else:
        console.print(console.styled(TEXTDIAG_VERSION, bold=True))
