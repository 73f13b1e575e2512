# textdiag:header:start
#
#   project      : TextDiag
#   file         : __main__.py
#   file_relpath : src/textdiag/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Module entry point for running TextDiag via ``python -m textdiag``.

Delegates to :func:`textdiag.cli.main.cli`, the same entry point as the
``textdiag`` console script.

Examples:
    Render a batch of diagnostics::

        python -m textdiag render diagnostics.json
"""

from __future__ import annotations

from textdiag.cli.main import cli

if __name__ == "__main__":
    cli()
