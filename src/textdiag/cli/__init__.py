# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Command-line interface for TextDiag (Click based)."""

from __future__ import annotations
