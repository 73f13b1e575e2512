# textdiag:header:start
#
#   project      : TextDiag
#   file         : io.py
#   file_relpath : src/textdiag/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Load, discover and render TOML configuration.

Configuration lives either in a ``textdiag.toml`` file (top-level
``[diagnostics]`` table) or in ``pyproject.toml`` under
``[tool.textdiag.diagnostics]``. Parsing is done with `tomlkit` and returned as
plain `dict` structures.

Layered discovery walks from a start directory up to the filesystem root and
collects files **root-most → nearest**, so that a later merge gives the nearest
file precedence. A file setting ``root = true`` stops the upward walk.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from textdiag.config.keys import Toml
from textdiag.config.logging import get_logger
from textdiag.config.model import ConfigError, MutableDiagnosticOptions, TomlTable
from textdiag.constants import DEFAULT_TOML_CONFIG_NAME, PYPROJECT_TOML_NAME

if TYPE_CHECKING:
    from pathlib import Path

    from textdiag.config.logging import TextdiagLogger
    from textdiag.config.model import DiagnosticOptions

logger: TextdiagLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (``textdiag.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as exc:
        logger.error("Error loading TOML from %s: %s", path, exc)
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except TomlkitParseError as exc:
        logger.error("Error decoding TOML from %s: %s", path, exc)
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def extract_textdiag_table(path: Path, data: TomlTable) -> TomlTable | None:
    """Return the TextDiag part of a parsed document.

    For ``pyproject.toml`` this is the ``[tool.textdiag]`` table (None when
    absent); any other file is returned unchanged.
    """
    if path.name != PYPROJECT_TOML_NAME:
        return data
    tool: Any = data.get(Toml.SECTION_TOOL, {})
    section: Any = tool.get(Toml.SECTION_TEXTDIAG) if isinstance(tool, dict) else None
    return cast("TomlTable", section) if isinstance(section, dict) else None


def load_options_file(path: Path) -> MutableDiagnosticOptions:
    """Load rendering options from a single TOML file.

    Args:
        path: ``textdiag.toml``, ``pyproject.toml`` or any TOML file using the
            ``textdiag.toml`` layout.

    Returns:
        The options set by the file (empty when a ``pyproject.toml`` has no
        ``[tool.textdiag]`` table).

    Raises:
        ConfigError: If the file is unreadable or holds malformed values.
    """
    logger.debug("Loading options from TOML config: %s", path)
    table = extract_textdiag_table(path, load_toml_dict(path))
    if table is None:
        logger.debug("No [tool.textdiag] table in %s", path)
        return MutableDiagnosticOptions()
    return MutableDiagnosticOptions.from_toml_dict(table, config_file=path)


def discover_config_files(start: Path) -> list[Path]:
    """Return config files discovered by walking upward from ``start``.

    In a given directory both ``pyproject.toml`` (with ``[tool.textdiag]``) and
    ``textdiag.toml`` are considered; ``pyproject.toml`` is listed first so that
    ``textdiag.toml`` wins a same-directory merge.

    Args:
        start: Directory (or file) to start from.

    Returns:
        Config files ordered root-most → nearest.
    """
    anchor = start if start.is_dir() else start.parent
    per_dir: list[list[Path]] = []
    for directory in (anchor, *anchor.parents):
        found: list[Path] = []
        stop = False
        for name in (PYPROJECT_TOML_NAME, DEFAULT_TOML_CONFIG_NAME):
            candidate = directory / name
            if not candidate.is_file():
                continue
            try:
                table = extract_textdiag_table(candidate, load_toml_dict(candidate))
            except ConfigError:
                logger.warning("Skipping unreadable config candidate %s", candidate)
                continue
            if table is None:
                continue
            found.append(candidate)
            stop = stop or table.get(Toml.KEY_ROOT) is True
        if found:
            per_dir.append(found)
        if stop:
            break
    ordered = [path for group in reversed(per_dir) for path in group]
    logger.debug("Discovered config files: %s", ordered)
    return ordered


def load_merged_options(
    *,
    start: Path | None = None,
    extra_files: list[Path] | None = None,
    overrides: MutableDiagnosticOptions | None = None,
) -> MutableDiagnosticOptions:
    """Layer defaults, discovered files, explicit files and overrides.

    Precedence (lowest → highest): built-in defaults, discovered files
    (root-most → nearest), ``extra_files`` in the given order, ``overrides``.

    Args:
        start: Directory to discover config files from (None disables discovery).
        extra_files: Explicit config files (e.g. from ``--config``).
        overrides: Options set on the command line.

    Returns:
        The merged builder; call `freeze` to obtain runtime options.
    """
    merged = MutableDiagnosticOptions()
    paths: list[Path] = discover_config_files(start) if start is not None else []
    paths.extend(extra_files or [])
    for path in paths:
        merged = merged.merge_with(load_options_file(path))
    if overrides is not None:
        merged = merged.merge_with(overrides)
    return merged


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible `None` from mappings (TOML has no ``null``)."""
    if isinstance(value, Mapping):
        m: Mapping[object, object] = cast("Mapping[object, object]", value)
        return {str(k): _strip_none_for_toml(v) for k, v in m.items() if v is not None}
    return value


def to_toml(toml_dict: TomlTable) -> str:
    """Serialize a TOML mapping to a string.

    Args:
        toml_dict (TomlTable): TOML mapping to render.

    Returns:
        str: The rendered TOML document as a string.
    """
    cleaned: Any = _strip_none_for_toml(toml_dict)
    return cast("str", cast("Any", tomlkit).dumps(cast("Mapping[str, Any]", cleaned)))


def render_options_toml(options: DiagnosticOptions) -> str:
    """Render effective options as a ``textdiag.toml`` document."""
    return to_toml(options.to_toml_dict())
