# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TextDiag CLI commands."""

from __future__ import annotations
