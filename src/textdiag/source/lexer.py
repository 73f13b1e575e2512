# textdiag:header:start
#
#   project      : TextDiag
#   file         : lexer.py
#   file_relpath : src/textdiag/source/lexer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# textdiag:header:end

"""Raw token measurement for C-family source text.

The renderer only needs to know how many characters the token starting at a
given offset spans (to widen token ranges and to slice macro names out of a
buffer). This is a raw, preprocessing-token level scan: no keywords, no
literal validation.
"""

from __future__ import annotations

import re
from typing import Final

_IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(
    r"[A-Za-z_$\u0080-\U0010ffff][\w$\u0080-\U0010ffff]*"
)

# pp-number: digits, letters, dots, and exponent signs
_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"\.?\d(?:[eEpP][+-]|[\w.'])*")

# Longest punctuators first so the scan is greedy.
_PUNCTUATORS: Final[tuple[str, ...]] = (
    "%:%:",
    "<<=",
    ">>=",
    "...",
    "->*",
    "<=>",
    "->",
    "++",
    "--",
    "<<",
    ">>",
    "<=",
    ">=",
    "==",
    "!=",
    "&&",
    "||",
    "*=",
    "/=",
    "%=",
    "+=",
    "-=",
    "&=",
    "^=",
    "|=",
    "##",
    "::",
    ".*",
    "<:",
    ":>",
    "<%",
    "%>",
    "%:",
)

_QUOTE_PREFIX_RE: Final[re.Pattern[str]] = re.compile(r"(?:u8|u|U|L)?(?=[\"'])")


def _measure_quoted(text: str, start: int, quote: str) -> int:
    """Return the length of a quoted literal starting at ``start``.

    Unterminated literals extend to the end of the line.
    """
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos + 1 - start
        if ch in "\r\n":
            break
        pos += 1
    return min(pos, len(text)) - start


def measure_token_length(text: str, offset: int) -> int:
    """Return the length of the raw token starting at ``offset`` in ``text``.

    Args:
        text: The whole buffer.
        offset: Character offset of the token start.

    Returns:
        The number of characters in the token, or 0 if ``offset`` is out of range
        or points at whitespace.
    """
    if offset < 0 or offset >= len(text):
        return 0
    ch = text[offset]
    if ch.isspace():
        return 0

    prefix = _QUOTE_PREFIX_RE.match(text, offset)
    if prefix is not None:
        quote_at = prefix.end()
        return quote_at - offset + _measure_quoted(text, quote_at, text[quote_at])

    if ch.isdigit() or (ch == "." and offset + 1 < len(text) and text[offset + 1].isdigit()):
        match = _NUMBER_RE.match(text, offset)
        if match is not None:
            return match.end() - offset

    match = _IDENTIFIER_RE.match(text, offset)
    if match is not None:
        return match.end() - offset

    for punct in _PUNCTUATORS:
        if text.startswith(punct, offset):
            return len(punct)
    return 1
