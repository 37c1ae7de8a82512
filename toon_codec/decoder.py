# -*- coding: utf-8 -*-
"""Location: ./toon_codec/decoder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON decoder.

Lines are pre-scanned once (blank lines dropped, depth computed from the
leading spaces) and then parsed by recursive descent: each container parser
owns exactly one depth and returns as soon as the next line is shallower, so
the Python call stack doubles as the indentation stack.

Strict mode (the default) treats every structural inconsistency as fatal:
indentation that is not a multiple of the indent width, tabs in indentation,
unexpected over-indentation, declared lengths that do not match the data,
row widths that do not match the header and duplicate keys. Non-strict mode
recovers from all of those; unterminated strings are fatal in both modes.

Examples:
    >>> decode("title: TOON test\\ncount: 3\\nnested:\\n  ok: true")
    {'title': 'TOON test', 'count': 3, 'nested': {'ok': True}}
    >>> decode("users[2]{id,name}:\\n  1,a\\n  2,b")
    {'users': [{'id': 1, 'name': 'a'}, {'id': 2, 'name': 'b'}]}
    >>> decode("[3|]: a|b|c")
    ['a', 'b', 'c']
    >>> decode("a.b.c: 1", {"expand_paths": True})
    {'a': {'b': {'c': 1}}}
"""

# Standard
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

# First-Party
from toon_codec.constants import (
    BRACKET_RE,
    CLOSE_BRACE,
    COLON,
    COMMA,
    DOUBLE_QUOTE,
    LIST_ITEM_MARKER,
    LIST_ITEM_PREFIX,
    OPEN_BRACE,
    OPEN_BRACKET,
    SPACE,
    TAB,
)
from toon_codec.errors import DuplicateKeyError, IndentMismatchError, LengthMismatchError, UnexpectedTokenError
from toon_codec.folding import DottedKey, expand_paths, is_expandable_key
from toon_codec.models import DecodeOptions, Depth, JsonArray, JsonObject, JsonValue, resolve_decode_options
from toon_codec.primitives import find_unquoted, parse_primitive_token, parse_quoted, split_delimited

logger = logging.getLogger(__name__)


def decode(text: str, options: Union[DecodeOptions, Dict[str, Any], None] = None) -> JsonValue:
    """Decode TOON text into a Python value.

    Args:
        text: TOON text (``\\n`` or ``\\r\\n`` line endings).
        options: Decoding options (model, dict or None for defaults).

    Returns:
        Decoded value built from dict, list, str, int, float, bool and None.

    Raises:
        InvalidIndentError: If indent is not a positive integer.
        UnterminatedStringError: If a quoted string is not closed.
        IndentMismatchError: On invalid indentation (strict mode).
        LengthMismatchError: On count or row width mismatches (strict mode).
        DuplicateKeyError: On repeated keys (strict mode).
        UnexpectedTokenError: On a line that does not fit the grammar.
        PathConflictError: On conflicting dotted paths (strict mode, expand_paths).

    Examples:
        >>> decode("")
        {}
        >>> decode("42"), decode("hello world"), decode('"true"')
        (42, 'hello world', 'true')
        >>> decode("items[3]{id}:\\n  1\\n  2", {"strict": False})
        {'items': [{'id': 1}, {'id': 2}]}
    """
    resolved = resolve_decode_options(options)
    lines = scan_lines(text, resolved.indent, resolved.strict)
    logger.debug(f"Decoding {len(lines)} lines with indent={resolved.indent}, strict={resolved.strict}, expand_paths={resolved.expand_paths}")

    value = _Parser(lines, resolved).parse()
    if resolved.expand_paths:
        value = expand_paths(value, resolved.strict)
    return value


# =============================================================================
# Line scanning
# =============================================================================


class ScannedLine(NamedTuple):
    """One non-blank source line.

    Attributes:
        number: 1-based line number in the source text.
        depth: Nesting level derived from the leading spaces.
        indent: Count of leading spaces (for column numbers).
        content: Line text after the indentation.
    """

    number: int
    depth: Depth
    indent: int
    content: str


def scan_lines(text: str, indent: int, strict: bool = True) -> List[ScannedLine]:
    """Split TOON text into depth-annotated lines.

    Args:
        text: TOON text.
        indent: Spaces per nesting level.
        strict: Reject tabs in indentation and non-multiple indentation.

    Returns:
        Non-blank lines in source order.

    Raises:
        IndentMismatchError: On invalid indentation (strict mode).

    Examples:
        >>> [(l.number, l.depth, l.content) for l in scan_lines("a:\\n\\n  b: 1\\r\\n", 2)]
        [(1, 0, 'a:'), (3, 1, 'b: 1')]
        >>> scan_lines("a:\\n   b: 1", 2, strict=False)[1].depth
        2
    """
    lines = []
    for number, raw in enumerate(text.split("\n"), start=1):
        if raw.endswith("\r"):
            raw = raw[:-1]
        if not raw.strip():
            continue

        content = raw.lstrip(SPACE)
        spaces = len(raw) - len(content)
        if content.startswith(TAB):
            if strict:
                raise IndentMismatchError("Tab character in indentation", number, spaces + 1)
            content = content.lstrip(SPACE + TAB)

        if spaces % indent:
            if strict:
                raise IndentMismatchError(f"Indentation of {spaces} spaces is not a multiple of {indent}", number, 1)
            depth = (spaces + indent // 2) // indent
        else:
            depth = spaces // indent
        lines.append(ScannedLine(number, depth, spaces, content))
    return lines


# =============================================================================
# Parsing
# =============================================================================


class _Parser:
    """Recursive-descent parser over scanned lines."""

    def __init__(self, lines: List[ScannedLine], options: DecodeOptions) -> None:
        """Initialize the parser.

        Args:
            lines: Output of ``scan_lines``.
            options: Validated decoding options.
        """
        self._lines = lines
        self._pos = 0
        self._strict = options.strict
        self._expand = options.expand_paths

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def _next_at(self, depth: Depth) -> Optional[ScannedLine]:
        """Peek at the next line if it belongs to a container at ``depth``.

        Args:
            depth: Depth owned by the calling container.

        Returns:
            The line, or None at end of input or on dedent.

        Raises:
            IndentMismatchError: If the line is deeper than ``depth`` (strict mode).
        """
        if self._pos >= len(self._lines):
            return None
        line = self._lines[self._pos]
        if line.depth < depth:
            return None
        if line.depth > depth and self._strict:
            raise IndentMismatchError(f"Unexpected indentation: expected depth {depth}, found {line.depth}", line.number, line.indent + 1)
        return line

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------

    def parse(self) -> JsonValue:
        """Parse the whole document.

        Returns:
            Root value.

        Raises:
            UnexpectedTokenError: On content after a root array (strict mode).
        """
        if not self._lines:
            return {}

        first = self._lines[0]
        if first.content.startswith(OPEN_BRACKET) and BRACKET_RE.match(first.content):
            self._pos = 1
            value = self._parse_header(None, first.content, first, first.indent + 1, 0)
            if self._pos < len(self._lines):
                extra = self._lines[self._pos]
                if self._strict:
                    raise UnexpectedTokenError("Unexpected content after root array", extra.number, extra.indent + 1)
                logger.debug(f"Ignoring {len(self._lines) - self._pos} lines after root array")
            return value

        if len(self._lines) == 1 and self._split_key(first.content, first, first.indent + 1) is None:
            self._pos = 1
            return parse_primitive_token(first.content, first.number, first.indent + 1)

        return self._parse_object(0)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _parse_object(self, depth: Depth) -> JsonObject:
        """Parse the fields of an object owned by ``depth``.

        Args:
            depth: Depth of the object's fields.

        Returns:
            Decoded object (empty when no line is that deep).
        """
        obj: JsonObject = {}
        while True:
            line = self._next_at(depth)
            if line is None:
                break
            self._pos += 1
            key, value = self._parse_field(line.content, line, line.indent + 1, depth)
            self._set_key(obj, key, value, line)
        return obj

    def _set_key(self, obj: JsonObject, key: str, value: Any, line: ScannedLine) -> None:
        """Store a field, enforcing key uniqueness in strict mode.

        Args:
            obj: Object being built.
            key: Field key.
            value: Field value.
            line: Source line of the field.

        Raises:
            DuplicateKeyError: If the key is already present (strict mode).
        """
        if key in obj:
            if self._strict:
                raise DuplicateKeyError(f"Duplicate key {str(key)!r}", line.number, line.indent + 1)
            logger.debug(f"Duplicate key {str(key)!r} on line {line.number}: keeping the last value")
        obj[key] = value

    def _split_key(self, text: str, line: ScannedLine, column: int) -> Optional[Tuple[Optional[str], bool, str]]:
        """Separate a field's key from the rest of its text.

        Args:
            text: Text starting at the key.
            line: Source line.
            column: 1-based column of ``text[0]``.

        Returns:
            Tuple of (key, was_quoted, rest starting at ``:`` or ``[``), with a
            None key for a keyless array header; None if the text has no field
            syntax.

        Raises:
            UnterminatedStringError: If a quoted key is not closed.
        """
        if text.startswith(DOUBLE_QUOTE):
            key, end = parse_quoted(text, 0, line.number, column - 1)
            rest = text[end:].lstrip(SPACE)
            if rest.startswith(COLON) or (rest.startswith(OPEN_BRACKET) and BRACKET_RE.match(rest)):
                return key, True, rest
            return None

        colon = text.find(COLON)
        bracket = text.find(OPEN_BRACKET)
        if bracket != -1 and (colon == -1 or bracket < colon) and BRACKET_RE.match(text[bracket:]):
            key = text[:bracket].strip()
            return (key or None), False, text[bracket:]
        if colon == -1:
            return None
        return text[:colon].strip(), False, text[colon:]

    def _parse_field(self, text: str, line: ScannedLine, column: int, depth: Depth) -> Tuple[str, JsonValue]:
        """Parse one ``key...`` field whose children sit at ``depth + 1``.

        Args:
            text: Text starting at the key.
            line: Source line.
            column: 1-based column of ``text[0]``.
            depth: Logical depth of the field.

        Returns:
            Tuple of (key, value).

        Raises:
            UnexpectedTokenError: If the text is not a field.
        """
        split = self._split_key(text, line, column)
        if split is None or split[0] is None or not (split[0] or split[1]):
            raise UnexpectedTokenError("Expected 'key: value'", line.number, column)
        key, quoted, rest = split
        if self._expand and not quoted and is_expandable_key(key):
            key = DottedKey(key)
            key.line = line.number

        rest_column = column + len(text) - len(rest)
        if rest.startswith(OPEN_BRACKET):
            return key, self._parse_header(key, rest, line, rest_column, depth)

        value_text = rest[1:]
        if not value_text.strip():
            return key, self._parse_object(depth + 1)
        return key, parse_primitive_token(value_text, line.number, rest_column + 1)

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _parse_header(self, key: Optional[str], rest: str, line: ScannedLine, column: int, depth: Depth) -> JsonArray:
        """Parse an array from its header and the lines it owns.

        Args:
            key: Array key (None for keyless headers), for messages.
            rest: Header text starting at ``[``.
            line: Source line.
            column: 1-based column of ``rest[0]``.
            depth: Logical depth of the header; elements sit at ``depth + 1``.

        Returns:
            Decoded array.

        Raises:
            UnexpectedTokenError: On a malformed header.
            LengthMismatchError: On count mismatches (strict mode).
        """
        match = BRACKET_RE.match(rest)
        if match is None:
            raise UnexpectedTokenError("Invalid array header", line.number, column)
        length = int(match.group(1))
        delimiter = match.group(2) or COMMA
        after = rest[match.end() :]
        offset = match.end()

        fields = None
        if after.startswith(OPEN_BRACE):
            close = find_unquoted(after, CLOSE_BRACE)
            if close == -1:
                raise UnexpectedTokenError("Unterminated field list in array header", line.number, column + offset)
            fields = self._parse_fields(after[1:close], delimiter, line, column + offset + 1)
            after = after[close + 1 :]
            offset += close + 1

        if not after.startswith(COLON):
            raise UnexpectedTokenError("Expected ':' after array header", line.number, column + offset)
        inline = after[1:]
        inline_column = column + offset + 1

        if fields is not None:
            if inline.strip():
                raise UnexpectedTokenError("Tabular array header cannot carry inline values", line.number, inline_column)
            return self._parse_rows(length, fields, delimiter, depth + 1, line)
        if inline.strip():
            return self._parse_inline(inline, length, delimiter, line, inline_column)
        return self._parse_list(length, depth + 1, line)

    def _parse_fields(self, text: str, delimiter: str, line: ScannedLine, column: int) -> List[str]:
        """Parse the ``{...}`` column list of a tabular header.

        Args:
            text: Text between the braces.
            delimiter: Active delimiter.
            line: Source line.
            column: 1-based column of ``text[0]``.

        Returns:
            Column names.

        Raises:
            UnexpectedTokenError: On an empty column name.
            DuplicateKeyError: On a repeated column name (strict mode).
        """
        fields: List[str] = []
        for token, start in split_delimited(text, delimiter):
            stripped = token.strip()
            if stripped.startswith(DOUBLE_QUOTE):
                name, _ = parse_quoted(stripped, 0, line.number, column - 1 + start + len(token) - len(token.lstrip()))
            else:
                name = stripped
            if not name and not stripped:
                raise UnexpectedTokenError("Empty column name in array header", line.number, column + start)
            if name in fields and self._strict:
                raise DuplicateKeyError(f"Duplicate column {name!r}", line.number, column + start)
            fields.append(name)
        return fields

    def _check_length(self, expected: int, actual: int, what: str, line: ScannedLine) -> None:
        """Enforce a declared count in strict mode.

        Args:
            expected: Declared count.
            actual: Count found.
            what: Noun for the message.
            line: Header line.

        Raises:
            LengthMismatchError: On a mismatch (strict mode).
        """
        if expected == actual:
            return
        if self._strict:
            raise LengthMismatchError(f"Expected {expected} {what}, got {actual}", line.number, line.indent + 1)
        logger.debug(f"Line {line.number}: declared {expected} {what}, found {actual}")

    def _parse_inline(self, text: str, length: int, delimiter: str, line: ScannedLine, column: int) -> JsonArray:
        """Parse the values of an inline scalar array.

        Args:
            text: Text after the header colon.
            length: Declared count.
            delimiter: Active delimiter.
            line: Source line.
            column: 1-based column of ``text[0]``.

        Returns:
            Decoded scalars.
        """
        values = [parse_primitive_token(token, line.number, column + start) for token, start in split_delimited(text, delimiter)]
        self._check_length(length, len(values), "values", line)
        return values

    def _parse_rows(self, length: int, fields: List[str], delimiter: str, depth: Depth, header: ScannedLine) -> JsonArray:
        """Parse the rows of a tabular array.

        Rows are every line at ``depth`` until the indentation decreases.

        Args:
            length: Declared row count.
            fields: Column names.
            delimiter: Active delimiter.
            depth: Depth of the rows.
            header: Header line.

        Returns:
            One object per row.

        Raises:
            LengthMismatchError: On a row width or row count mismatch (strict mode).
        """
        rows: JsonArray = []
        while True:
            line = self._next_at(depth)
            if line is None:
                break
            self._pos += 1
            tokens = split_delimited(line.content, delimiter)
            if len(tokens) != len(fields):
                if self._strict:
                    raise LengthMismatchError(f"Expected {len(fields)} values in row, got {len(tokens)}", line.number, line.indent + 1)
                logger.debug(f"Line {line.number}: row has {len(tokens)} values for {len(fields)} columns")

            row: JsonObject = {}
            for index, field in enumerate(fields):
                if index < len(tokens):
                    token, start = tokens[index]
                    row[field] = parse_primitive_token(token, line.number, line.indent + start + 1)
                else:
                    row[field] = None
            rows.append(row)

        self._check_length(length, len(rows), "rows", header)
        return rows

    def _parse_list(self, length: int, depth: Depth, header: ScannedLine) -> JsonArray:
        """Parse the ``- `` items of a list array.

        Args:
            length: Declared item count.
            depth: Depth of the hyphens.
            header: Header line.

        Returns:
            Decoded items.

        Raises:
            UnexpectedTokenError: On a non-item line among the items (strict mode).
            LengthMismatchError: On a count mismatch (strict mode).
        """
        items: JsonArray = []
        while True:
            line = self._next_at(depth)
            if line is None:
                break
            if not _is_list_item(line.content):
                if self._strict:
                    raise UnexpectedTokenError("Expected list item", line.number, line.indent + 1)
                break
            self._pos += 1
            items.append(self._parse_list_item(line, depth))

        self._check_length(length, len(items), "items", header)
        return items

    def _parse_list_item(self, line: ScannedLine, depth: Depth) -> JsonValue:
        """Parse one list item whose hyphen sits at ``depth``.

        Args:
            line: Item line.
            depth: Depth of the hyphen.

        Returns:
            Decoded element.
        """
        if line.content == LIST_ITEM_MARKER:
            return {}

        body = line.content[len(LIST_ITEM_PREFIX) :]
        column = line.indent + len(LIST_ITEM_PREFIX) + 1 + len(body) - len(body.lstrip(SPACE))
        body = body.lstrip(SPACE)

        if body.startswith(OPEN_BRACKET) and BRACKET_RE.match(body):
            return self._parse_header(None, body, line, column, depth + 1)
        if self._split_key(body, line, column) is None:
            return parse_primitive_token(body, line.number, column)

        obj: JsonObject = {}
        key, value = self._parse_field(body, line, column, depth + 1)
        self._set_key(obj, key, value, line)
        while True:
            field_line = self._next_at(depth + 1)
            if field_line is None or _is_list_item(field_line.content):
                break
            self._pos += 1
            key, value = self._parse_field(field_line.content, field_line, field_line.indent + 1, depth + 1)
            self._set_key(obj, key, value, field_line)
        return obj


def _is_list_item(content: str) -> bool:
    """Check if line content is a ``- `` list item.

    Args:
        content: Line text after the indentation.

    Returns:
        True for ``-`` alone or anything starting with ``- ``.
    """
    return content == LIST_ITEM_MARKER or content.startswith(LIST_ITEM_PREFIX)
