# textdiag:header:start
#
#   project      : TextDiag
#   file         : __init__.py
#   file_relpath : src/textdiag/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TextDiag package.

TextDiag renders compiler-style diagnostics as text: a ``file:line:col:``
prefix, a colored severity label, a word-wrapped message, the offending source
line with a caret and underlines, fix-it suggestions, and macro expansion and
include backtraces. It exposes a small typed API and a CLI that renders
diagnostics described in a JSON batch file.

Example:
    >>> import io
    >>> from textdiag import InMemorySourceManager, Severity, TextDiagnostic
    >>> sm = InMemorySourceManager()
    >>> fid = sm.add_file("a.c", "int x = y;\\n")
    >>> out = io.StringIO()
    >>> TextDiagnostic(out, sm).emit(sm.get_location(fid, 1, 9), Severity.ERROR, "oops")
    >>> print(out.getvalue(), end="")
    a.c:1:9: error: oops
        1 | int x = y;
          |         ^
"""

from __future__ import annotations

from textdiag.config.model import DiagnosticFormat, DiagnosticOptions, MutableDiagnosticOptions
from textdiag.diagnostic.model import Diagnostic, FixItHint, FixItKind, Severity
from textdiag.rendering.emitter import RenderSinkError, SessionMemory, TextDiagnostic
from textdiag.source.manager import InMemorySourceManager, SourceManagerLike
from textdiag.source.model import INVALID_LOCATION, Location, SourceRange

__all__ = [
    "INVALID_LOCATION",
    "Diagnostic",
    "DiagnosticFormat",
    "DiagnosticOptions",
    "FixItHint",
    "FixItKind",
    "InMemorySourceManager",
    "Location",
    "MutableDiagnosticOptions",
    "RenderSinkError",
    "SessionMemory",
    "Severity",
    "SourceManagerLike",
    "SourceRange",
    "TextDiagnostic",
]
