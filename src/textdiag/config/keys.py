# textdiag:header:start
#
#   project      : TextDiag
#   file         : keys.py
#   file_relpath : src/textdiag/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TOML keys for the TextDiag configuration schema.

Design notes:
    - Keys defined here represent *external configuration API*.
    - Renaming or removing keys is a breaking change.
    - CLI option names are defined next to the Click commands.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by TextDiag configuration.

    The constants define the schema as it appears in `textdiag.toml` and in
    `[tool.textdiag]` inside `pyproject.toml`.
    """

    # Root / discovery
    KEY_ROOT: Final[str] = "root"

    # pyproject.toml nesting
    SECTION_TOOL: Final[str] = "tool"
    SECTION_TEXTDIAG: Final[str] = "textdiag"

    # [diagnostics]
    SECTION_DIAGNOSTICS: Final[str] = "diagnostics"

    KEY_SHOW_COLORS: Final[str] = "show_colors"
    KEY_WRAP_COLUMN: Final[str] = "wrap_column"
    KEY_TAB_STOP: Final[str] = "tab_stop"
    KEY_MACRO_BACKTRACE_LIMIT: Final[str] = "macro_backtrace_limit"
    KEY_PARSEABLE_FIXITS: Final[str] = "parseable_fixits"
    KEY_FORMAT: Final[str] = "format"
    KEY_SHOW_LOCATION: Final[str] = "show_location"
    KEY_SHOW_COLUMN: Final[str] = "show_column"
    KEY_SHOW_CARETS: Final[str] = "show_carets"
    KEY_SHOW_FIXITS: Final[str] = "show_fixits"
    KEY_SHOW_SOURCE_RANGES: Final[str] = "show_source_ranges"
    KEY_SHOW_LINE_NUMBERS: Final[str] = "show_line_numbers"
    KEY_SHOW_NOTE_INCLUDE_STACK: Final[str] = "show_note_include_stack"

    BOOL_KEYS: Final[tuple[str, ...]] = (
        KEY_SHOW_COLORS,
        KEY_PARSEABLE_FIXITS,
        KEY_SHOW_LOCATION,
        KEY_SHOW_COLUMN,
        KEY_SHOW_CARETS,
        KEY_SHOW_FIXITS,
        KEY_SHOW_SOURCE_RANGES,
        KEY_SHOW_LINE_NUMBERS,
        KEY_SHOW_NOTE_INCLUDE_STACK,
    )
    INT_KEYS: Final[tuple[str, ...]] = (
        KEY_WRAP_COLUMN,
        KEY_TAB_STOP,
        KEY_MACRO_BACKTRACE_LIMIT,
    )
    STR_KEYS: Final[tuple[str, ...]] = (KEY_FORMAT,)
