# -*- coding: utf-8 -*-
"""Location: ./toon_codec/constants.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON grammar constants and patterns.

Every character and regular expression the encoder and decoder agree on lives
here, so that the two directions cannot drift apart.
"""

# Standard
import re
from typing import Final

# =============================================================================
# Structural characters
# =============================================================================

COLON: Final[str] = ":"
SPACE: Final[str] = " "
DOT: Final[str] = "."

LIST_ITEM_MARKER: Final[str] = "-"
LIST_ITEM_PREFIX: Final[str] = "- "

OPEN_BRACKET: Final[str] = "["
CLOSE_BRACKET: Final[str] = "]"
OPEN_BRACE: Final[str] = "{"
CLOSE_BRACE: Final[str] = "}"

DOUBLE_QUOTE: Final[str] = '"'
BACKSLASH: Final[str] = "\\"

# =============================================================================
# Delimiters
# =============================================================================

COMMA: Final[str] = ","
TAB: Final[str] = "\t"
PIPE: Final[str] = "|"

DEFAULT_DELIMITER: Final[str] = COMMA

# Accepted spellings of each delimiter (option values and CLI flags)
DELIMITER_NAMES: Final[dict] = {
    "comma": COMMA,
    "tab": TAB,
    "pipe": PIPE,
}

# =============================================================================
# Literals
# =============================================================================

NULL_LITERAL: Final[str] = "null"
TRUE_LITERAL: Final[str] = "true"
FALSE_LITERAL: Final[str] = "false"

# Reserved words that must be quoted if used as string values
RESERVED_WORDS: Final[frozenset] = frozenset({NULL_LITERAL, TRUE_LITERAL, FALSE_LITERAL})

# =============================================================================
# Escapes
# =============================================================================

# Character -> escape sequence body (after the backslash)
ESCAPES: Final[dict] = {
    "\\": "\\",
    '"': '"',
    "\n": "n",
    "\r": "r",
    "\t": "t",
}

# Escape sequence body -> character
UNESCAPES: Final[dict] = {body: char for char, body in ESCAPES.items()}

# Remaining control characters are written as \uXXXX
UNICODE_ESCAPE: Final[str] = "u"

# =============================================================================
# Patterns
# =============================================================================

# Structural characters that force quoting of a string value
STRUCTURAL_CHARS_RE: Final[re.Pattern] = re.compile(r'[:"\\\[\]{}]')

# Any C0 control character or DEL
CONTROL_CHARS_RE: Final[re.Pattern] = re.compile(r"[\x00-\x1f\x7f]")

# Strings that would read back as numbers (leading zeros included)
NUMBER_LIKE_RE: Final[re.Pattern] = re.compile(r"^-?\d+(?:\.\d+)?(?:e[+-]?\d+)?$", re.IGNORECASE)

# Numeric literal accepted by the decoder
NUMBER_LITERAL_RE: Final[re.Pattern] = re.compile(r"^-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?$")

# Valid unquoted keys: ^[A-Za-z_][A-Za-z0-9_.]*$
VALID_KEY_RE: Final[re.Pattern] = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")

# Valid segment of a folded key path (no dots)
IDENTIFIER_SEGMENT_RE: Final[re.Pattern] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Bracket segment of an array header: [N] or [N|] or [N<tab>]
BRACKET_RE: Final[re.Pattern] = re.compile(r"^\[(\d+)([|\t]?)\]")

# Default indent size (2 spaces per level)
DEFAULT_INDENT: Final[int] = 2
