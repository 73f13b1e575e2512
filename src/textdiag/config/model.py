# textdiag:header:start
#
#   project      : TextDiag
#   file         : model.py
#   file_relpath : src/textdiag/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Rendering options for TextDiag.

This module defines the immutable `DiagnosticOptions` snapshot consumed by the
renderer and the `MutableDiagnosticOptions` builder used while layering
defaults, configuration files and CLI overrides.

Sections:
    * DiagnosticFormat: location prefix styles (clang, msvc, vi).
    * ConfigError: raised for malformed configuration values.
    * DiagnosticOptions: frozen runtime options.
    * MutableDiagnosticOptions: builder with TOML (de)serialization and merge.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any

from textdiag.config.keys import Toml
from textdiag.config.logging import get_logger
from textdiag.constants import DEFAULT_MACRO_BACKTRACE_LIMIT, DEFAULT_TAB_STOP, MAX_TAB_STOP

if TYPE_CHECKING:
    from pathlib import Path

    from textdiag.config.logging import TextdiagLogger

logger: TextdiagLogger = get_logger(__name__)

TomlTable = dict[str, Any]


class DiagnosticFormat(str, Enum):
    """Style of the ``file:line:col`` prefix in front of each diagnostic.

    Attributes:
        CLANG: ``file:line:col:``
        MSVC: ``file(line,col) :`` with a zero-based column.
        VI: ``file +line:col:``
    """

    CLANG = "clang"
    MSVC = "msvc"
    VI = "vi"


class ConfigError(ValueError):
    """Raised when a configuration source holds a value of the wrong type or range."""


# ------------------ Immutable runtime options ------------------


@dataclass(frozen=True, slots=True)
class DiagnosticOptions:
    """Immutable options consumed by the diagnostic renderer.

    Produced by `MutableDiagnosticOptions.freeze` after merging defaults, config
    files and CLI overrides. Use `thaw` to obtain a builder for edits.

    Attributes:
        show_colors (bool): Emit ANSI styles in the human format.
        wrap_column (int): Wrap messages and trim snippets to this width (0 disables).
        tab_stop (int): Tab stop width used for tab expansion (1..100).
        macro_backtrace_limit (int): Maximum number of macro expansion notes
            before the middle of the backtrace is elided (0 = unlimited).
        parseable_fixits (bool): Additionally emit machine-readable ``fix-it:`` lines.
        format (DiagnosticFormat): Style of the location prefix.
        show_location (bool): Print the ``file:line:col:`` prefix.
        show_column (bool): Include the column in the location prefix.
        show_carets (bool): Print source snippets with caret lines.
        show_fixits (bool): Print fix-it insertion lines and removal/replacement notes.
        show_source_ranges (bool): Append ``{l:c-l:c}`` range info to the location prefix.
        show_line_numbers (bool): Print the line-number gutter in front of snippets.
        show_note_include_stack (bool): Print the include stack for notes as well.
    """

    show_colors: bool = False
    wrap_column: int = 0
    tab_stop: int = DEFAULT_TAB_STOP
    macro_backtrace_limit: int = DEFAULT_MACRO_BACKTRACE_LIMIT
    parseable_fixits: bool = False
    format: DiagnosticFormat = DiagnosticFormat.CLANG
    show_location: bool = True
    show_column: bool = True
    show_carets: bool = True
    show_fixits: bool = True
    show_source_ranges: bool = False
    show_line_numbers: bool = True
    show_note_include_stack: bool = True

    @property
    def message_length(self) -> int:
        """Alias of `wrap_column` (terminal width used for wrapping and trimming)."""
        return self.wrap_column

    def thaw(self) -> MutableDiagnosticOptions:
        """Return a mutable copy of these options."""
        return MutableDiagnosticOptions(**{f.name: getattr(self, f.name) for f in fields(self)})

    def to_toml_dict(self) -> TomlTable:
        """Return the options as a ``[diagnostics]`` TOML table."""
        table: TomlTable = {}
        for f in fields(self):
            value = getattr(self, f.name)
            table[f.name] = value.value if isinstance(value, Enum) else value
        return {Toml.SECTION_DIAGNOSTICS: table}


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableDiagnosticOptions:
    """Mutable options used while layering configuration sources.

    Every field is optional: ``None`` means "not set by this layer" so that
    `merge_with` can apply nearest-last-wins precedence.
    """

    show_colors: bool | None = None
    wrap_column: int | None = None
    tab_stop: int | None = None
    macro_backtrace_limit: int | None = None
    parseable_fixits: bool | None = None
    format: DiagnosticFormat | None = None
    show_location: bool | None = None
    show_column: bool | None = None
    show_carets: bool | None = None
    show_fixits: bool | None = None
    show_source_ranges: bool | None = None
    show_line_numbers: bool | None = None
    show_note_include_stack: bool | None = None

    # Sources this builder was loaded from (for reporting only).
    config_files: list[Path | str] = field(default_factory=lambda: [])

    def sanitize(self) -> None:
        """Clamp out-of-range numeric values to their defaults, logging a warning."""
        if self.tab_stop is not None and not 0 < self.tab_stop <= MAX_TAB_STOP:
            logger.warning(
                "Ignoring invalid tab stop %d (expected 1..%d); using %d",
                self.tab_stop,
                MAX_TAB_STOP,
                DEFAULT_TAB_STOP,
            )
            self.tab_stop = DEFAULT_TAB_STOP
        if self.wrap_column is not None and self.wrap_column < 0:
            logger.warning("Ignoring negative wrap column %d; wrapping disabled", self.wrap_column)
            self.wrap_column = 0
        if self.macro_backtrace_limit is not None and self.macro_backtrace_limit < 0:
            logger.warning(
                "Ignoring negative macro backtrace limit %d; using %d",
                self.macro_backtrace_limit,
                DEFAULT_MACRO_BACKTRACE_LIMIT,
            )
            self.macro_backtrace_limit = DEFAULT_MACRO_BACKTRACE_LIMIT

    def freeze(self) -> DiagnosticOptions:
        """Freeze this builder into immutable `DiagnosticOptions`.

        Unset fields take their defaults.
        """
        self.sanitize()
        values: dict[str, Any] = {}
        for f in fields(DiagnosticOptions):
            value = getattr(self, f.name)
            if value is not None:
                values[f.name] = value
        return DiagnosticOptions(**values)

    def merge_with(self, other: MutableDiagnosticOptions) -> MutableDiagnosticOptions:
        """Return a new builder where fields set in ``other`` override this one."""
        merged = MutableDiagnosticOptions(config_files=[*self.config_files, *other.config_files])
        for f in fields(DiagnosticOptions):
            theirs = getattr(other, f.name)
            setattr(merged, f.name, theirs if theirs is not None else getattr(self, f.name))
        return merged

    @classmethod
    def from_toml_dict(
        cls,
        data: TomlTable,
        *,
        config_file: Path | str | None = None,
    ) -> MutableDiagnosticOptions:
        """Build options from the ``[diagnostics]`` table of a parsed TOML document.

        Args:
            data: Parsed TOML document (already unwrapped from ``[tool.textdiag]``).
            config_file: Source of the document, for messages.

        Returns:
            The options set by this document.

        Raises:
            ConfigError: If a known key holds a value of the wrong type.
        """
        source = str(config_file) if config_file is not None else "<config>"
        section: Any = data.get(Toml.SECTION_DIAGNOSTICS, {})
        if not isinstance(section, dict):
            raise ConfigError(f"{source}: [{Toml.SECTION_DIAGNOSTICS}] must be a table")

        draft = cls()
        for key, value in section.items():
            if key in Toml.BOOL_KEYS:
                if not isinstance(value, bool):
                    raise ConfigError(f"{source}: '{key}' must be a boolean, got {value!r}")
                setattr(draft, key, value)
            elif key in Toml.INT_KEYS:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"{source}: '{key}' must be an integer, got {value!r}")
                setattr(draft, key, value)
            elif key == Toml.KEY_FORMAT:
                try:
                    draft.format = DiagnosticFormat(str(value).lower())
                except ValueError:
                    choices = ", ".join(f.value for f in DiagnosticFormat)
                    raise ConfigError(
                        f"{source}: '{key}' must be one of {choices}, got {value!r}"
                    ) from None
            else:
                logger.warning(
                    "%s: ignoring unknown key '%s' in [%s]", source, key, Toml.SECTION_DIAGNOSTICS
                )

        if config_file is not None:
            draft.config_files = [config_file]
        logger.debug("Loaded options from %s: %s", source, draft)
        return draft
