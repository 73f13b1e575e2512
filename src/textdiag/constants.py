# textdiag:header:start
#
#   project      : TextDiag
#   file         : constants.py
#   file_relpath : src/textdiag/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""TextDiag Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    TEXTDIAG_VERSION: str = get_version("textdiag")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    TEXTDIAG_VERSION = "0.0.0"

# Configuration file names, looked up from the working directory upwards:
DEFAULT_TOML_CONFIG_NAME: str = "textdiag.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"

# Rendering defaults
DEFAULT_TAB_STOP: int = 8
MAX_TAB_STOP: int = 100
DEFAULT_MACRO_BACKTRACE_LIMIT: int = 6

# Continuation lines of a wrapped message are indented at least this far when the
# message start column leaves no room for a word.
WORD_WRAP_INDENTATION: int = 6

# Minimum display width of the line-number gutter in front of snippets.
MIN_LINE_NUMBER_WIDTH: int = 4

# Columns reserved for ellipses when a snippet is trimmed to the terminal width.
ELLIPSIS_RESERVE: int = 8

CARET_CHAR: str = "^"
UNDERLINE_CHAR: str = "~"
