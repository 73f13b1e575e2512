# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Text rendering of diagnostics.

Modules:
    * text: tab and wide-glyph column arithmetic.
    * message: severity labels and word-wrapped messages.
    * highlight: range projection and the caret line.
    * fixits: fix-it insertion lines and the machine-readable fix-it form.
    * snippet: source snippet blocks.
    * backtrace: macro expansion backtraces.
    * emitter: the `TextDiagnostic` renderer tying everything together.
"""

from __future__ import annotations

from textdiag.rendering.emitter import RenderSinkError, SessionMemory, TextDiagnostic
from textdiag.rendering.fixits import format_parseable_fixits
from textdiag.rendering.message import format_diagnostic_level, format_diagnostic_message

__all__ = [
    "RenderSinkError",
    "SessionMemory",
    "TextDiagnostic",
    "format_diagnostic_level",
    "format_diagnostic_message",
    "format_parseable_fixits",
]
