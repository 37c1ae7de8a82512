# -*- coding: utf-8 -*-
"""Location: ./toon_codec/primitives.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Scalar grammar: number formatting, string quoting and escaping on the encode
side; quoted-string scanning, delimiter splitting and literal coercion on the
decode side.

Examples:
    >>> encode_primitive("hello world")
    'hello world'
    >>> encode_primitive("a,b")
    '"a,b"'
    >>> encode_primitive("a,b", "|")
    'a,b'
    >>> parse_primitive_token('"line\\\\nbreak"')
    'line\\nbreak'
    >>> parse_primitive_token("05")
    '05'
"""

# Standard
from decimal import Decimal
from typing import Any, List, Optional, Tuple

# First-Party
from toon_codec.constants import (
    BACKSLASH,
    CONTROL_CHARS_RE,
    DEFAULT_DELIMITER,
    DOUBLE_QUOTE,
    ESCAPES,
    FALSE_LITERAL,
    LIST_ITEM_MARKER,
    NULL_LITERAL,
    NUMBER_LIKE_RE,
    NUMBER_LITERAL_RE,
    RESERVED_WORDS,
    STRUCTURAL_CHARS_RE,
    TRUE_LITERAL,
    UNESCAPES,
    UNICODE_ESCAPE,
    VALID_KEY_RE,
)
from toon_codec.errors import UnexpectedTokenError, UnterminatedStringError
from toon_codec.models import JsonPrimitive

# =============================================================================
# Encoding
# =============================================================================


def encode_primitive(value: JsonPrimitive, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Encode a scalar value.

    Args:
        value: Normalized scalar.
        delimiter: Active delimiter; strings containing it are quoted.

    Returns:
        TOON scalar token.

    Examples:
        >>> encode_primitive(None), encode_primitive(True), encode_primitive(False)
        ('null', 'true', 'false')
        >>> encode_primitive(42), encode_primitive(-2.5)
        ('42', '-2.5')
        >>> encode_primitive("true")
        '"true"'
    """
    if value is None:
        return NULL_LITERAL
    if isinstance(value, bool):
        return TRUE_LITERAL if value else FALSE_LITERAL
    if isinstance(value, (int, float)):
        return encode_number(value)
    return encode_string(value, delimiter)


def encode_number(value: Any) -> str:
    """Format a number in canonical decimal form.

    Integers are written as-is. Floats use the shortest digits that round-trip
    (``repr``), expanded out of exponent notation, without a trailing ``.0``.
    A float whose expanded digits would read back as a different integer
    keeps its exponent form. Negative zero is written ``0``: the sign of zero
    is deliberately not preserved. NaN and infinities are written ``null``.

    Args:
        value: int or float.

    Returns:
        Decimal representation.

    Examples:
        >>> encode_number(1.0), encode_number(-0.0), encode_number(3.14)
        ('1', '0', '3.14')
        >>> encode_number(1e16), encode_number(1.5e-07)
        ('10000000000000000', '0.00000015')
        >>> encode_number(10**20), encode_number(1e23)
        ('100000000000000000000', '1e+23')
        >>> encode_number(float("nan"))
        'null'
    """
    if isinstance(value, int):
        return str(value)
    if value != value or value in (float("inf"), float("-inf")):
        return NULL_LITERAL
    if value == 0.0:
        return "0"
    text = repr(value)
    if "e" in text or "E" in text:
        expanded = format(Decimal(text), "f")
        # Bare digits decode as int, which must equal the float exactly
        if "." in expanded or int(expanded) == value:
            return expanded
        return text
    if text.endswith(".0"):
        text = text[:-2]
    return text


def needs_quotes(s: str, delimiter: str = DEFAULT_DELIMITER) -> bool:
    """Determine if a string value needs to be quoted.

    Strings need quotes if they are empty, have leading or trailing
    whitespace, match a literal (null, true, false), look like a number,
    start with a hyphen, or contain a structural character, a control
    character or the active delimiter.

    Args:
        s: String to check.
        delimiter: Active delimiter.

    Returns:
        True if string needs quoting.

    Examples:
        >>> needs_quotes(""), needs_quotes("null"), needs_quotes("123"), needs_quotes("05")
        (True, True, True, True)
        >>> needs_quotes("hello world"), needs_quotes("has:colon"), needs_quotes("-a")
        (False, True, True)
        >>> needs_quotes("a|b"), needs_quotes("a|b", "|")
        (False, True)
    """
    if not s:
        return True
    if s != s.strip():
        return True
    if s in RESERVED_WORDS:
        return True
    if NUMBER_LIKE_RE.match(s):
        return True
    if s.startswith(LIST_ITEM_MARKER):
        return True
    if STRUCTURAL_CHARS_RE.search(s) or CONTROL_CHARS_RE.search(s):
        return True
    return delimiter in s


def encode_string(s: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Encode a string value, quoting only when necessary.

    Args:
        s: String to encode.
        delimiter: Active delimiter.

    Returns:
        Bare or quoted token.

    Examples:
        >>> encode_string("simple")
        'simple'
        >>> encode_string("")
        '""'
    """
    if needs_quotes(s, delimiter):
        return quote_string(s)
    return s


def quote_string(s: str) -> str:
    """Quote and escape a string unconditionally.

    Backslash, double quote, newline, carriage return and tab use their short
    escapes; every other control character is written as ``\\uXXXX``.

    Args:
        s: String to quote.

    Returns:
        Quoted string with escapes applied.

    Examples:
        >>> print(quote_string('say "hi"\\n'))
        "say \\"hi\\"\\n"
        >>> print(quote_string("bell\\x07"))
        "bell\\u0007"
    """
    result = [DOUBLE_QUOTE]
    for char in s:
        body = ESCAPES.get(char)
        if body is not None:
            result.append(BACKSLASH + body)
        elif CONTROL_CHARS_RE.match(char):
            result.append(f"{BACKSLASH}{UNICODE_ESCAPE}{ord(char):04x}")
        else:
            result.append(char)
    result.append(DOUBLE_QUOTE)
    return "".join(result)


def encode_key(key: str, quote_dotted: bool = False) -> str:
    """Encode an object key.

    Unquoted keys must match ``^[A-Za-z_][A-Za-z0-9_.]*$`` and must not be a
    literal token. With ``quote_dotted`` (key folding on) a literal key that
    contains a dot is quoted so that path expansion leaves it alone.

    Args:
        key: Object key to encode.
        quote_dotted: Quote keys containing ``.``.

    Returns:
        TOON key representation.

    Examples:
        >>> encode_key("simple"), encode_key("has space"), encode_key("a.b")
        ('simple', '"has space"', 'a.b')
        >>> encode_key("a.b", quote_dotted=True)
        '"a.b"'
    """
    if VALID_KEY_RE.match(key) and key not in RESERVED_WORDS and not (quote_dotted and "." in key):
        return key
    return quote_string(key)


def join_encoded_values(values: List[str], delimiter: str) -> str:
    """Join encoded scalars with the active delimiter.

    Args:
        values: Encoded tokens.
        delimiter: Active delimiter.

    Returns:
        Joined row.
    """
    return delimiter.join(values)


# =============================================================================
# Decoding
# =============================================================================


def parse_quoted(text: str, start: int, line: Optional[int] = None, column_offset: int = 0) -> Tuple[str, int]:
    """Read a quoted string beginning at ``text[start]``.

    Only the escapes written by the encoder are accepted: ``\\\\ \\" \\n \\r \\t``
    and ``\\uXXXX``.

    Args:
        text: Text containing the quoted string.
        start: Index of the opening quote.
        line: Line number for error reporting.
        column_offset: Offset of ``text`` within the source line.

    Returns:
        Tuple of (decoded_string, index just past the closing quote).

    Raises:
        UnterminatedStringError: If no closing quote is found.
        UnexpectedTokenError: On an invalid escape sequence.

    Examples:
        >>> parse_quoted('"ab\\\\"c" rest', 0)
        ('ab"c', 7)
    """
    result = []
    i = start + 1
    length = len(text)
    while i < length:
        char = text[i]
        if char == DOUBLE_QUOTE:
            return "".join(result), i + 1
        if char == BACKSLASH:
            if i + 1 >= length:
                break
            body = text[i + 1]
            if body in UNESCAPES:
                result.append(UNESCAPES[body])
                i += 2
                continue
            if body == UNICODE_ESCAPE:
                digits = text[i + 2 : i + 6]
                if len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits):
                    result.append(chr(int(digits, 16)))
                    i += 6
                    continue
            raise UnexpectedTokenError(f"Invalid escape sequence: \\{body}", line, column_offset + i + 1)
        result.append(char)
        i += 1
    raise UnterminatedStringError("Unterminated string", line, column_offset + start + 1)


def find_unquoted(text: str, char: str, start: int = 0) -> int:
    """Find the first occurrence of ``char`` outside quoted strings.

    Args:
        text: Text to scan.
        char: Single character to find.
        start: Index to start scanning from.

    Returns:
        Index of the character, or -1 if absent (or only inside quotes).

    Examples:
        >>> find_unquoted('"a:b": c', ":")
        5
        >>> find_unquoted('"a:b', ":")
        -1
    """
    in_quotes = False
    i = start
    while i < len(text):
        c = text[i]
        if in_quotes and c == BACKSLASH:
            i += 2
            continue
        if c == DOUBLE_QUOTE:
            in_quotes = not in_quotes
        elif c == char and not in_quotes:
            return i
        i += 1
    return -1


def split_delimited(text: str, delimiter: str) -> List[Tuple[str, int]]:
    """Split a row into raw tokens, respecting quotes.

    Args:
        text: Row or inline-array content.
        delimiter: Active delimiter.

    Returns:
        List of (token, start index) pairs; tokens are not stripped.

    Examples:
        >>> [t for t, _ in split_delimited('a,"b,c",d', ",")]
        ['a', '"b,c"', 'd']
        >>> [t for t, _ in split_delimited("1|2", "|")]
        ['1', '2']
    """
    tokens = []
    token_start = 0
    in_quotes = False
    i = 0
    while i < len(text):
        c = text[i]
        if in_quotes and c == BACKSLASH:
            i += 2
            continue
        if c == DOUBLE_QUOTE:
            in_quotes = not in_quotes
        elif c == delimiter and not in_quotes:
            tokens.append((text[token_start:i], token_start))
            token_start = i + 1
        i += 1
    tokens.append((text[token_start:], token_start))
    return tokens


def parse_primitive_token(token: str, line: Optional[int] = None, column: int = 1) -> JsonPrimitive:
    """Decode one scalar token.

    Quoted tokens are unescaped and never coerced. Bare ``null``, ``true``,
    ``false`` and numeric literals coerce; a number with a forbidden leading
    zero stays a string; anything else is a string.

    Args:
        token: Raw token (surrounding whitespace is ignored).
        line: Line number for error reporting.
        column: 1-based column where the raw token starts.

    Returns:
        Decoded scalar.

    Raises:
        UnterminatedStringError: If a quoted token is not closed.
        UnexpectedTokenError: If characters follow the closing quote.

    Examples:
        >>> parse_primitive_token("null") is None
        True
        >>> parse_primitive_token("42"), parse_primitive_token("-2.5"), parse_primitive_token("1e3")
        (42, -2.5, 1000.0)
        >>> parse_primitive_token('"42"')
        '42'
    """
    leading = len(token) - len(token.lstrip())
    token = token.strip()
    if token.startswith(DOUBLE_QUOTE):
        value, end = parse_quoted(token, 0, line, column - 1 + leading)
        if token[end:].strip():
            raise UnexpectedTokenError("Unexpected characters after closing quote", line, column + leading + end)
        return value
    if token == NULL_LITERAL:
        return None
    if token == TRUE_LITERAL:
        return True
    if token == FALSE_LITERAL:
        return False
    if NUMBER_LITERAL_RE.match(token):
        if "." in token or "e" in token or "E" in token:
            return float(token)
        return int(token)
    return token
