# textdiag:header:start
#
#   project      : TextDiag
#   file         : batch.py
#   file_relpath : src/textdiag/cli/batch.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""JSON batch input for the ``render`` command.

A batch describes source files, macro expansions and the diagnostics to
render. Locations refer to files by name and to macros by id::

    {
      "files": [
        {"name": "main.c", "text": "#include \"util.h\"\nint main() { return f() }\n"},
        {"name": "util.h", "text": "int f(void);\n",
         "included_from": {"file": "main.c", "line": 1, "column": 1},
         "line_directives": [{"line": 1, "presented_line": 10, "filename": "gen.h"}]}
      ],
      "macros": [
        {"id": "M", "spelling": {"file": "main.c", "line": 2, "column": 5},
         "expansion": {"file": "main.c", "line": 2, "column": 14},
         "expansion_end": {"file": "main.c", "line": 2, "column": 16},
         "length": 3, "macro_arg": false}
      ],
      "diagnostics": [
        {"severity": "error", "message": "expected ';' after return statement",
         "location": {"file": "main.c", "line": 2, "column": 25},
         "ranges": [{"begin": {"file": "main.c", "line": 2, "column": 21},
                     "end": {"file": "main.c", "line": 2, "column": 22},
                     "token": true}],
         "fixits": [{"kind": "insert", "at": {"file": "main.c", "line": 2, "column": 25},
                     "text": ";"}]}
      ]
    }

Locations are ``{"file": NAME, "line": N, "column": N}`` or
``{"macro": ID, "offset": N}``; a missing or null location is the invalid
location. Files and macros may only refer to entries declared before them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from textdiag.config.logging import get_logger
from textdiag.diagnostic.model import Diagnostic, FixItHint, Severity
from textdiag.source.manager import InMemorySourceManager
from textdiag.source.model import INVALID_LOCATION, Location, SourceRange

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from textdiag.config.logging import TextdiagLogger

logger: TextdiagLogger = get_logger(__name__)


class BatchError(ValueError):
    """Raised when a batch document is malformed."""


@dataclass
class Batch:
    """A loaded batch: the populated source manager and the diagnostics to render."""

    source_manager: InMemorySourceManager
    diagnostics: list[Diagnostic] = field(default_factory=lambda: [])


class _BatchLoader:
    """Builds a `Batch` from a decoded JSON document, tracking names and ids."""

    def __init__(self) -> None:
        self.sm = InMemorySourceManager()
        self.files: dict[str, int] = {}
        self.macros: dict[str, Location] = {}

    # --- Field helpers ---------------------------------------------------------

    @staticmethod
    def require(obj: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
        if key not in obj:
            raise BatchError(f"{where}: missing '{key}'")
        value = obj[key]
        if kind is int and isinstance(value, bool):
            raise BatchError(f"{where}: '{key}' must be {kind.__name__}, got {value!r}")
        if not isinstance(value, kind):
            raise BatchError(f"{where}: '{key}' must be {kind.__name__}, got {value!r}")
        return value

    @staticmethod
    def as_table(value: Any, where: str) -> Mapping[str, Any]:
        if not isinstance(value, dict):
            raise BatchError(f"{where}: expected an object, got {value!r}")
        return cast("Mapping[str, Any]", value)

    @staticmethod
    def list_field(obj: Mapping[str, Any], key: str, where: str) -> list[Any]:
        value = obj.get(key, [])
        if not isinstance(value, list):
            raise BatchError(f"{where}: '{key}' must be a list")
        return cast("list[Any]", value)

    # --- Locations and ranges ----------------------------------------------------

    def location(self, value: Any, where: str) -> Location:
        """Resolve a location object (None → invalid location)."""
        if value is None:
            return INVALID_LOCATION
        obj = self.as_table(value, where)
        if "macro" in obj:
            macro_id = str(obj["macro"])
            if macro_id not in self.macros:
                raise BatchError(f"{where}: unknown macro '{macro_id}'")
            offset = obj.get("offset", 0)
            if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
                raise BatchError(f"{where}: 'offset' must be a non-negative integer")
            return self.macros[macro_id].with_offset(offset)

        name = self.require(obj, "file", str, where)
        if name not in self.files:
            raise BatchError(f"{where}: unknown file '{name}'")
        line = self.require(obj, "line", int, where)
        column = self.require(obj, "column", int, where)
        loc = self.sm.get_location(self.files[name], line, column)
        if not loc.is_valid:
            logger.warning(
                "%s: %s:%d:%d does not exist; using an invalid location", where, name, line, column
            )
        return loc

    def source_range(self, value: Any, where: str) -> SourceRange:
        """Resolve a ``{"begin", "end", "token"}`` range object."""
        obj = self.as_table(value, where)
        begin = self.location(obj.get("begin"), f"{where}.begin")
        end = self.location(obj.get("end", obj.get("begin")), f"{where}.end")
        token = obj.get("token", True)
        if not isinstance(token, bool):
            raise BatchError(f"{where}: 'token' must be a boolean")
        return SourceRange(begin, end, token)

    def fixit(self, value: Any, where: str) -> FixItHint:
        """Resolve an ``insert``/``remove``/``replace`` fix-it object."""
        obj = self.as_table(value, where)
        kind = str(obj.get("kind", "")).lower()
        text = obj.get("text", "")
        if not isinstance(text, str):
            raise BatchError(f"{where}: 'text' must be a string")
        if kind in ("insert", "insertion"):
            return FixItHint.insertion(self.location(obj.get("at"), f"{where}.at"), text)
        if kind in ("remove", "removal"):
            return FixItHint.removal(self.source_range(obj.get("range"), f"{where}.range"))
        if kind in ("replace", "replacement"):
            rng = self.source_range(obj.get("range"), f"{where}.range")
            return FixItHint.replacement(rng, text)
        raise BatchError(f"{where}: 'kind' must be one of insert, remove, replace; got {kind!r}")

    # --- Sections ------------------------------------------------------------------

    def add_files(self, entries: list[Any]) -> None:
        """Register file entries in order."""
        for idx, entry in enumerate(entries):
            where = f"files[{idx}]"
            obj = self.as_table(entry, where)
            name = self.require(obj, "name", str, where)
            text = self.require(obj, "text", str, where)
            include_loc = self.location(obj.get("included_from"), f"{where}.included_from")
            file_id = self.sm.add_file(name, text, include_loc=include_loc)
            self.files.setdefault(name, file_id)
            for d_idx, directive in enumerate(self.list_field(obj, "line_directives", where)):
                d_where = f"{where}.line_directives[{d_idx}]"
                d_obj = self.as_table(directive, d_where)
                filename = d_obj.get("filename")
                if filename is not None and not isinstance(filename, str):
                    raise BatchError(f"{d_where}: 'filename' must be a string")
                self.sm.add_line_directive(
                    file_id,
                    self.require(d_obj, "line", int, d_where),
                    self.require(d_obj, "presented_line", int, d_where),
                    filename,
                )

    def add_macros(self, entries: list[Any]) -> None:
        """Register macro expansions in order."""
        for idx, entry in enumerate(entries):
            where = f"macros[{idx}]"
            obj = self.as_table(entry, where)
            macro_id = str(self.require(obj, "id", str, where))
            if macro_id in self.macros:
                raise BatchError(f"{where}: duplicate macro id '{macro_id}'")
            spelling = self.location(obj.get("spelling"), f"{where}.spelling")
            expansion = self.location(obj.get("expansion"), f"{where}.expansion")
            length = obj.get("length", 0)
            if isinstance(length, bool) or not isinstance(length, int) or length < 0:
                raise BatchError(f"{where}: 'length' must be a non-negative integer")
            if obj.get("macro_arg", False):
                loc = self.sm.create_macro_arg_expansion(spelling, expansion, length=length)
            else:
                end = obj.get("expansion_end")
                expansion_end = self.location(end, f"{where}.expansion_end") if end else None
                loc = self.sm.create_expansion(spelling, expansion, expansion_end, length=length)
            self.macros[macro_id] = loc

    def diagnostic(self, value: Any, where: str) -> Diagnostic:
        """Resolve one diagnostic object."""
        obj = self.as_table(value, where)
        try:
            severity = Severity.parse(str(obj.get("severity", "error")))
        except ValueError as exc:
            raise BatchError(f"{where}: {exc}") from exc
        message = obj.get("message", "")
        if not isinstance(message, str):
            raise BatchError(f"{where}: 'message' must be a string")
        return Diagnostic.create(
            severity,
            message,
            self.location(obj.get("location"), f"{where}.location"),
            [
                self.source_range(rng, f"{where}.ranges[{i}]")
                for i, rng in enumerate(self.list_field(obj, "ranges", where))
            ],
            [
                self.fixit(hint, f"{where}.fixits[{i}]")
                for i, hint in enumerate(self.list_field(obj, "fixits", where))
            ],
        )


def load_batch(data: Any) -> Batch:
    """Build a `Batch` from a decoded JSON document.

    Args:
        data: The decoded document (a JSON object).

    Returns:
        The batch.

    Raises:
        BatchError: If the document is malformed.
    """
    loader = _BatchLoader()
    doc = loader.as_table(data, "batch")
    loader.add_files(loader.list_field(doc, "files", "batch"))
    loader.add_macros(loader.list_field(doc, "macros", "batch"))
    diagnostics = [
        loader.diagnostic(entry, f"diagnostics[{idx}]")
        for idx, entry in enumerate(loader.list_field(doc, "diagnostics", "batch"))
    ]
    logger.debug(
        "Loaded batch: %d file(s), %d macro(s), %d diagnostic(s)",
        len(loader.files),
        len(loader.macros),
        len(diagnostics),
    )
    return Batch(source_manager=loader.sm, diagnostics=diagnostics)


def load_batch_text(text: str) -> Batch:
    """Decode a JSON batch document and build a `Batch`.

    Raises:
        BatchError: If the text is not valid JSON or the document is malformed.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BatchError(f"Invalid JSON: {exc}") from exc
    return load_batch(data)


def load_batch_file(path: Path) -> Batch:
    """Read and decode a JSON batch file.

    Raises:
        OSError: If the file cannot be read.
        BatchError: If the file content is malformed.
    """
    return load_batch_text(path.read_text(encoding="utf-8"))
