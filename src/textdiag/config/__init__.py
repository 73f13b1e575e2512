# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Configuration for TextDiag rendering.

Design:
    - Runtime options are an immutable `DiagnosticOptions` snapshot.
    - Sources (defaults, discovered TOML files, explicit files, CLI flags) are
      layered with `MutableDiagnosticOptions.merge_with` and frozen once.
    - TOML I/O lives in `textdiag.config.io`; logging setup in
      `textdiag.config.logging`.
"""

from __future__ import annotations

from textdiag.config.model import (
    ConfigError,
    DiagnosticFormat,
    DiagnosticOptions,
    MutableDiagnosticOptions,
)

__all__ = [
    "ConfigError",
    "DiagnosticFormat",
    "DiagnosticOptions",
    "MutableDiagnosticOptions",
]
