# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Diagnostic primitives: severities, fix-it hints and the diagnostic bundle."""

from __future__ import annotations

from textdiag.diagnostic.model import Diagnostic, FixItHint, FixItKind, Severity

__all__ = [
    "Diagnostic",
    "FixItHint",
    "FixItKind",
    "Severity",
]
