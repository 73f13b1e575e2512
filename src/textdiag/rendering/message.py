# textdiag:header:start
#
#   project      : TextDiag
#   file         : message.py
#   file_relpath : src/textdiag/rendering/message.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Severity labels and word-wrapped diagnostic messages.

These helpers are free functions with no dependency on renderer state so that
callers without a source manager (e.g. a driver printing ``error: no input
files``) still get consistent formatting.

Styling uses `click.style`, which always appends a reset sequence; that keeps
the terminal state clean after every label and message, including empty ones.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import click

from textdiag.constants import WORD_WRAP_INDENTATION
from textdiag.rendering.text import column_width

if TYPE_CHECKING:
    from textdiag.diagnostic.model import Severity

# Opening punctuation mapped to the character that closes it.
_MATCHING_PUNCTUATION: Final[dict[str, str]] = {
    "'": "'",
    "`": "'",
    '"': '"',
    "(": ")",
    "[": "]",
    "{": "}",
}

def styled(text: str, show_colors: bool, **style_kwargs: Any) -> str:
    """Return ``text`` styled with `click.style`, or unchanged when colors are off."""
    if not show_colors:
        return text
    return click.style(text, **style_kwargs)


def format_diagnostic_level(severity: Severity, show_colors: bool) -> str:
    """Return the severity label followed by ``": "``.

    Args:
        severity: The diagnostic severity.
        show_colors: Colorize the label (note/remark cyan, warning magenta,
            error/fatal red; all bold).

    Returns:
        The label text, e.g. ``"fatal error: "``.
    """
    return styled(f"{severity.label}: ", show_colors, **severity.style)


def format_diagnostic_message(
    severity: Severity,
    message: str,
    current_column: int,
    columns: int,
    show_colors: bool,
) -> str:
    """Return the message text, word-wrapped and optionally styled.

    Args:
        severity: Used to decide whether the text is printed in bold.
        message: Raw message text.
        current_column: Display column at which the message starts (after the
            location prefix and the severity label).
        columns: Wrap width; 0 disables wrapping.
        show_colors: Apply terminal styles.

    Returns:
        The (possibly multi-line) message without a trailing newline. When
        colors are enabled the text always ends with a reset sequence.
    """
    body = message
    if columns:
        body, _ = wrap_message(message, columns, current_column)
    if not show_colors:
        return body
    if severity.bold_message:
        return click.style(body, bold=True)
    return click.style(body)


def wrap_message(
    message: str,
    columns: int,
    current_column: int = 0,
    indentation: int | None = None,
) -> tuple[str, bool]:
    """Greedily wrap ``message`` on whitespace so lines fit in ``columns``.

    Continuation lines are indented to ``indentation`` (by default the message
    start column). A word too wide to fit behind the indentation is pulled
    left just enough to fit; a word wider than ``columns`` is emitted unbroken
    on its own line. Balanced quoted or bracketed segments are kept together
    when they fit. Explicit newlines in ``message`` start new lines at the
    indentation column.

    Args:
        message: Raw message text.
        columns: Maximum line width (> 0).
        current_column: Display column of the first character.
        indentation: Column of continuation lines.

    Returns:
        ``(text, wrapped)`` where ``wrapped`` is True if a line break was added.
    """
    if indentation is None:
        indentation = current_column if current_column < columns else WORD_WRAP_INDENTATION
    paragraphs = message.split("\n")
    out: list[str] = []
    wrapped = False
    column = current_column
    for idx, paragraph in enumerate(paragraphs):
        if idx:
            out.append("\n" + " " * indentation)
            column = indentation
        text, did_wrap = _wrap_paragraph(paragraph, columns, column, indentation)
        out.append(text)
        wrapped = wrapped or did_wrap
    return "".join(out), wrapped


def _wrap_paragraph(text: str, columns: int, column: int, indentation: int) -> tuple[str, bool]:
    out: list[str] = []
    wrapped = False
    at_line_start = True
    pos = 0
    length = len(text)
    while True:
        start = _skip_whitespace(text, pos)
        if start >= length:
            break
        end = _find_end_of_word(text, start, column, columns)
        word = text[start:end]
        word_len = column_width(word)
        sep = 0 if at_line_start else 1
        pad = indentation if indentation + word_len <= columns else max(0, columns - word_len)
        if column + sep + word_len <= columns or (at_line_start and column <= pad):
            # Fits here, or breaking the line would gain nothing.
            out.append(" " * sep + word)
            column += sep + word_len
        else:
            out.append("\n" + " " * pad + word)
            column = pad + word_len
            wrapped = True
        at_line_start = False
        pos = end
    return "".join(out), wrapped


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _find_end_of_word(text: str, start: int, column: int, columns: int) -> int:
    """Return the end of the word starting at ``start``.

    A word opening with quote or bracket punctuation extends to the matching
    closer (and any trailing non-blank text) if that whole segment fits on the
    current line or is shorter than a third of the width; otherwise the
    segment is broken down starting one character later.
    """
    length = len(text)
    while True:
        end = start + 1
        if end >= length:
            return length
        closer = _MATCHING_PUNCTUATION.get(text[start])
        if closer is None:
            while end < length and not text[end].isspace():
                end += 1
            return end

        pending: list[str] = [closer]
        while end < length and pending:
            ch = text[end]
            if ch == pending[-1]:
                pending.pop()
            elif ch in _MATCHING_PUNCTUATION:
                pending.append(_MATCHING_PUNCTUATION[ch])
            end += 1
        while end < length and not text[end].isspace():
            end += 1

        segment_len = end - start
        if column + segment_len <= columns or segment_len < columns // 3:
            return end
        start += 1
        column += 1
