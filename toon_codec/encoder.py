# -*- coding: utf-8 -*-
"""Location: ./toon_codec/encoder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON encoder and streaming line producer.

``encode_lines`` is the single source of formatting: it yields one line at a
time (no line terminators) from a generator, and ``encode`` simply joins those
lines with ``\\n``. Options are validated and the input normalized before the
generator is handed back, so invalid options fail before any line exists and
the produced stream cannot fail half way.

Array forms:
- Empty arrays: ``key[0]:``
- Scalar arrays: ``key[N]: v1,v2,v3``
- Uniform object arrays: ``key[N]{f1,f2}:`` followed by one row per element
- Anything else: ``key[N]:`` followed by ``- `` list items

Non-comma delimiters are announced inside the brackets (``key[N|]``).

Examples:
    >>> print(encode({"title": "TOON test", "count": 3, "nested": {"ok": True}}))
    title: TOON test
    count: 3
    nested:
      ok: true
    >>> print(encode({"users": [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]}))
    users[2]{id,name}:
      1,a
      2,b
    >>> print(encode({"tags": ["x", "y"]}, {"delimiter": "pipe"}))
    tags[2|]: x|y
"""

# Standard
import logging
from typing import Any, Dict, Iterator, List, Optional, Union

# First-Party
from toon_codec.constants import CLOSE_BRACE, CLOSE_BRACKET, COLON, COMMA, LIST_ITEM_MARKER, LIST_ITEM_PREFIX, OPEN_BRACE, OPEN_BRACKET, SPACE
from toon_codec.folding import fold_entries, FoldedEntry
from toon_codec.models import Depth, EncodeOptions, JsonArray, JsonObject, JsonValue, resolve_encode_options
from toon_codec.normalize import is_array_of_primitives, is_primitive, normalize_value
from toon_codec.primitives import encode_key, encode_primitive, join_encoded_values
from toon_codec.tabular import detect_tabular_header, tabular_rows

logger = logging.getLogger(__name__)


def encode(value: Any, options: Union[EncodeOptions, Dict[str, Any], None] = None) -> str:
    """Encode a Python value to TOON text.

    Args:
        value: Value to encode (JSON-compatible after normalization).
        options: Encoding options (model, dict or None for defaults).

    Returns:
        TOON text; lines joined with ``\\n``, no trailing newline.

    Raises:
        InvalidDelimiterError: If the delimiter is not comma, tab or pipe.
        InvalidIndentError: If indent is not a positive integer.
        TypeError: If the value contains a non-serializable object.

    Examples:
        >>> encode(None), encode(True), encode(42), encode("hello")
        ('null', 'true', '42', 'hello')
        >>> encode([1, 2, 3])
        '[3]: 1,2,3'
        >>> encode({})
        ''
        >>> encode({"a": {"b": {"c": 1}}}, {"keyFolding": "safe"})
        'a.b.c: 1'
    """
    return "\n".join(encode_lines(value, options))


def encode_lines(value: Any, options: Union[EncodeOptions, Dict[str, Any], None] = None) -> Iterator[str]:
    """Produce TOON lines lazily.

    Joining the yielded lines with ``\\n`` gives exactly ``encode(value, options)``.
    The iterator is single-use.

    Args:
        value: Value to encode.
        options: Encoding options (model, dict or None for defaults).

    Returns:
        Iterator over lines without line terminators.

    Raises:
        InvalidDelimiterError: If the delimiter is not comma, tab or pipe.
        InvalidIndentError: If indent is not a positive integer.
        TypeError: If the value contains a non-serializable object.

    Examples:
        >>> lines = encode_lines({"a": 1, "b": [True, None]})
        >>> next(lines)
        'a: 1'
        >>> list(lines)
        ['b[2]: true,null']
    """
    resolved = resolve_encode_options(options)
    normalized = normalize_value(value)
    logger.debug(
        f"Encoding {type(normalized).__name__} with indent={resolved.indent}, "
        f"delimiter={resolved.delimiter.value!r}, key_folding={resolved.key_folding.value}, "
        f"flatten_depth={resolved.flatten_depth}"
    )
    return LineEncoder(resolved).lines(normalized)


class LineEncoder:
    """Formats one normalized value into TOON lines.

    Holds only the resolved options; every call to ``lines`` starts a fresh
    generator.

    Examples:
        >>> list(LineEncoder(EncodeOptions(indent=4)).lines({"a": {"b": 1}}))
        ['a:', '    b: 1']
    """

    def __init__(self, options: EncodeOptions) -> None:
        """Initialize the encoder.

        Args:
            options: Validated encoding options.
        """
        self._indent = options.indent
        self._delimiter = options.delimiter.value
        self._fold = options.folding_enabled
        self._flatten_depth = options.flatten_depth

    def lines(self, value: JsonValue) -> Iterator[str]:
        """Yield the lines of a root value.

        Args:
            value: Normalized root value.

        Yields:
            TOON lines.
        """
        if is_primitive(value):
            yield encode_primitive(value, self._delimiter)
        elif isinstance(value, list):
            yield from self._encode_array(None, value, 0)
        else:
            yield from self._encode_fields(value, 0)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _pad(self, depth: Depth) -> str:
        """Leading spaces for a nesting level.

        Args:
            depth: Nesting level.

        Returns:
            Indentation string.
        """
        return SPACE * (self._indent * depth)

    def _entries(self, obj: JsonObject) -> List[FoldedEntry]:
        """Fields of an object as written, folded when enabled.

        Args:
            obj: Normalized object.

        Returns:
            Entries in key order.
        """
        if self._fold:
            return fold_entries(obj, self._flatten_depth)
        return [FoldedEntry(key, value, False) for key, value in obj.items()]

    def _key_text(self, entry: FoldedEntry) -> str:
        """Encoded key of an entry.

        Args:
            entry: Object field.

        Returns:
            Bare or quoted key.
        """
        if entry.folded:
            return entry.key
        return encode_key(entry.key, quote_dotted=self._fold)

    def _encode_fields(self, obj: JsonObject, depth: Depth) -> Iterator[str]:
        """Yield every field of an object at ``depth``.

        Args:
            obj: Normalized object.
            depth: Nesting level of the fields.

        Yields:
            TOON lines.
        """
        for entry in self._entries(obj):
            yield from self._encode_field(self._key_text(entry), entry.value, depth)

    def _encode_field(self, key: str, value: JsonValue, depth: Depth, prefix: Optional[str] = None) -> Iterator[str]:
        """Yield one ``key: value`` field.

        Args:
            key: Encoded key.
            value: Field value.
            depth: Logical nesting level of the field; children go one deeper.
            prefix: Text before the key on the first line (defaults to indentation).

        Yields:
            TOON lines.
        """
        if prefix is None:
            prefix = self._pad(depth)
        if is_primitive(value):
            yield f"{prefix}{key}{COLON} {encode_primitive(value, self._delimiter)}"
        elif isinstance(value, list):
            yield from self._encode_array(key, value, depth, prefix)
        else:
            yield f"{prefix}{key}{COLON}"
            yield from self._encode_fields(value, depth + 1)

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _header(self, key: Optional[str], length: int, fields: Optional[List[str]] = None) -> str:
        """Format an array header.

        Args:
            key: Encoded key, or None for a keyless header.
            length: Element count.
            fields: Tabular column names.

        Returns:
            Header text ending with a colon.
        """
        marker = "" if self._delimiter == COMMA else self._delimiter
        header = f"{key or ''}{OPEN_BRACKET}{length}{marker}{CLOSE_BRACKET}"
        if fields:
            columns = join_encoded_values([encode_key(field, quote_dotted=self._fold) for field in fields], self._delimiter)
            header += f"{OPEN_BRACE}{columns}{CLOSE_BRACE}"
        return header + COLON

    def _encode_array(self, key: Optional[str], arr: JsonArray, depth: Depth, prefix: Optional[str] = None) -> Iterator[str]:
        """Yield an array in the most compact form it qualifies for.

        Args:
            key: Encoded key, or None at the root and in list items.
            arr: Normalized array.
            depth: Logical nesting level of the header; elements go one deeper.
            prefix: Text before the header on the first line (defaults to indentation).

        Yields:
            TOON lines.
        """
        if prefix is None:
            prefix = self._pad(depth)

        if not arr:
            yield f"{prefix}{self._header(key, 0)}"
            return

        if is_array_of_primitives(arr):
            values = join_encoded_values([encode_primitive(item, self._delimiter) for item in arr], self._delimiter)
            yield f"{prefix}{self._header(key, len(arr))} {values}"
            return

        fields = detect_tabular_header(arr)
        if fields is not None:
            yield f"{prefix}{self._header(key, len(arr), fields)}"
            row_pad = self._pad(depth + 1)
            for row in tabular_rows(arr, fields):
                yield row_pad + join_encoded_values([encode_primitive(item, self._delimiter) for item in row], self._delimiter)
            return

        yield f"{prefix}{self._header(key, len(arr))}"
        for item in arr:
            yield from self._encode_list_item(item, depth + 1)

    def _encode_list_item(self, item: JsonValue, depth: Depth) -> Iterator[str]:
        """Yield one ``- `` element of a list array.

        The hyphen sits at ``depth``; whatever follows it on the same line is
        treated as one level deeper, so an object's first field shares the
        hyphen line and its remaining fields align one level below the hyphen.

        Args:
            item: Element value.
            depth: Nesting level of the hyphen.

        Yields:
            TOON lines.
        """
        pad = self._pad(depth)
        if is_primitive(item):
            yield f"{pad}{LIST_ITEM_PREFIX}{encode_primitive(item, self._delimiter)}"
        elif isinstance(item, list):
            yield from self._encode_array(None, item, depth + 1, prefix=pad + LIST_ITEM_PREFIX)
        elif not item:
            yield f"{pad}{LIST_ITEM_MARKER}"
        else:
            entries = self._entries(item)
            first, rest = entries[0], entries[1:]
            yield from self._encode_field(self._key_text(first), first.value, depth + 1, prefix=pad + LIST_ITEM_PREFIX)
            for entry in rest:
                yield from self._encode_field(self._key_text(entry), entry.value, depth + 1)
