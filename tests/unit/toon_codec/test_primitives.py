# -*- coding: utf-8 -*-
"""Unit tests for the TOON scalar grammar."""

import pytest

from toon_codec.errors import UnexpectedTokenError, UnterminatedStringError
from toon_codec.primitives import (
    encode_key,
    encode_number,
    encode_primitive,
    encode_string,
    find_unquoted,
    needs_quotes,
    parse_primitive_token,
    parse_quoted,
    quote_string,
    split_delimited,
)


class TestEncodeNumber:
    """Test canonical number formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0"),
            (-17, "-17"),
            (10**20, "100000000000000000000"),
            (1.0, "1"),
            (-0.0, "0"),
            (3.14, "3.14"),
            (-2.5, "-2.5"),
            (0.1, "0.1"),
            (1e16, "10000000000000000"),
            (1.5e-07, "0.00000015"),
            (1e21, "1000000000000000000000"),
            (123456.789, "123456.789"),
            (1e23, "1e+23"),
            (-1e300, "-1e+300"),
            (1.7976931348623157e308, "1.7976931348623157e+308"),
        ],
    )
    def test_canonical_forms(self, value, expected):
        """Plain decimal without trailing .0; exponents only where digits would decode as another integer."""
        assert encode_number(value) == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_is_null(self, value):
        """NaN and infinities have no decimal form."""
        assert encode_number(value) == "null"

    def test_shortest_round_trip_digits(self):
        """The written digits read back as the same float."""
        for value in (0.1 + 0.2, 1 / 3, 2.2250738585072014e-308, 1.7976931348623157e308):
            assert float(encode_number(value)) == value


class TestNeedsQuotes:
    """Test the quoting rules for string values."""

    @pytest.mark.parametrize(
        "value",
        [
            "",
            " leading",
            "trailing ",
            "true",
            "false",
            "null",
            "42",
            "-3.5",
            "1e10",
            "1E-3",
            "05",
            "-x",
            "-",
            "a:b",
            'say "hi"',
            "back\\slash",
            "[x]",
            "{x}",
            "a,b",
            "line\nbreak",
            "bell\x07",
            "del\x7f",
        ],
    )
    def test_quoted(self, value):
        """Strings that would be ambiguous bare are quoted."""
        assert needs_quotes(value) is True

    @pytest.mark.parametrize("value", ["hello", "hello world", "True", "NULL", "a-b", "a.b", "café", "x|y", "1.2.3", "v1"])
    def test_bare(self, value):
        """Plain strings stay bare."""
        assert needs_quotes(value) is False

    def test_active_delimiter_only(self):
        """Only the active delimiter forces quotes."""
        assert needs_quotes("a|b", "|") is True
        assert needs_quotes("a,b", "|") is False
        assert needs_quotes("a\tb", "\t") is True


class TestQuoteString:
    """Test escaping inside quoted strings."""

    def test_short_escapes(self):
        """Backslash, quote, newline, carriage return and tab use short escapes."""
        assert quote_string('\\"\n\r\t') == '"\\\\\\"\\n\\r\\t"'

    def test_other_controls_use_unicode_escape(self):
        """Remaining control characters are written as \\uXXXX."""
        assert quote_string("\x00\x1b\x7f") == '"\\u0000\\u001b\\u007f"'

    def test_non_ascii_is_literal(self):
        """Printable non-ASCII text is not escaped."""
        assert quote_string("héllo ✓") == '"héllo ✓"'

    def test_encode_string_quotes_only_when_needed(self):
        """encode_string applies needs_quotes."""
        assert encode_string("plain") == "plain"
        assert encode_string("a:b") == '"a:b"'


class TestEncodeKey:
    """Test object key encoding."""

    @pytest.mark.parametrize("key", ["id", "_private", "user_name", "a.b.c", "A1"])
    def test_bare_keys(self, key):
        """Identifier-like keys are bare."""
        assert encode_key(key) == key

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("", '""'),
            ("my key", '"my key"'),
            ("1abc", '"1abc"'),
            ("a-b", '"a-b"'),
            ("null", '"null"'),
            ("a:b", '"a:b"'),
        ],
    )
    def test_quoted_keys(self, key, expected):
        """Other keys are quoted."""
        assert encode_key(key) == expected

    def test_dotted_keys_quoted_when_folding(self):
        """Literal dotted keys are protected from path expansion."""
        assert encode_key("a.b", quote_dotted=True) == '"a.b"'
        assert encode_key("ab", quote_dotted=True) == "ab"


class TestEncodePrimitive:
    """Test the scalar dispatcher."""

    def test_literals(self):
        """None and booleans use literal tokens."""
        assert [encode_primitive(v) for v in (None, True, False)] == ["null", "true", "false"]

    def test_bool_is_not_a_number(self):
        """Booleans are not formatted as 1/0."""
        assert encode_primitive(True) != "1"

    def test_reserved_strings_quoted(self):
        """Strings spelling literals are quoted."""
        assert encode_primitive("false") == '"false"'


class TestParseQuoted:
    """Test quoted-string scanning."""

    def test_returns_end_index(self):
        """The end index points past the closing quote."""
        assert parse_quoted('"abc": 1', 0) == ("abc", 5)

    def test_unescapes(self):
        """All escapes written by the encoder are understood."""
        text = quote_string('\\"\n\r\t\x01')
        assert parse_quoted(text, 0) == ('\\"\n\r\t\x01', len(text))

    def test_unterminated(self):
        """A missing closing quote is reported with its position."""
        with pytest.raises(UnterminatedStringError) as exc_info:
            parse_quoted('"abc', 0, line=3, column_offset=4)
        assert exc_info.value.line == 3
        assert exc_info.value.column == 5

    def test_trailing_backslash_is_unterminated(self):
        """A backslash at the end cannot close the string."""
        with pytest.raises(UnterminatedStringError):
            parse_quoted('"abc\\', 0)

    @pytest.mark.parametrize("text", ['"\\x"', '"\\u12"', '"\\uzzzz"'])
    def test_invalid_escape(self, text):
        """Unknown or truncated escapes are rejected."""
        with pytest.raises(UnexpectedTokenError):
            parse_quoted(text, 0)


class TestSplitting:
    """Test quote-aware scanning helpers."""

    def test_find_unquoted_skips_quotes(self):
        """Characters inside quotes are ignored."""
        assert find_unquoted('"a:b": c', ":") == 5
        assert find_unquoted('"a\\":b": c', ":") == 7
        assert find_unquoted("abc", ":") == -1

    def test_split_keeps_quoted_delimiters(self):
        """Delimiters inside quotes do not split."""
        assert split_delimited('1,"a,b",c', ",") == [("1", 0), ('"a,b"', 2), ("c", 8)]

    def test_split_with_tab(self):
        """Tabs split like any other delimiter."""
        assert [token for token, _ in split_delimited("a\tb c\td", "\t")] == ["a", "b c", "d"]

    def test_split_empty_tokens(self):
        """Empty tokens are preserved."""
        assert [token for token, _ in split_delimited("a,,b", ",")] == ["a", "", "b"]


class TestParsePrimitiveToken:
    """Test scalar coercion on decode."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("null", None),
            ("true", True),
            ("false", False),
            ("0", 0),
            ("-0", 0),
            ("42", 42),
            ("-17", -17),
            ("3.14", 3.14),
            ("1e3", 1000.0),
            ("1E-2", 0.01),
            ("05", "05"),
            ("-007", "-007"),
            ("1.", "1."),
            ("hello world", "hello world"),
            ("True", "True"),
            ('"42"', "42"),
            ('"null"', "null"),
            ('""', ""),
            ("  padded  ", "padded"),
        ],
    )
    def test_coercion(self, token, expected):
        """Bare literals coerce, quoted tokens never do."""
        result = parse_primitive_token(token)
        assert result == expected
        assert type(result) is type(expected)

    def test_float_type(self):
        """Tokens with a fraction or exponent decode as floats."""
        assert isinstance(parse_primitive_token("2.0"), float)
        assert isinstance(parse_primitive_token("2"), int)

    def test_characters_after_closing_quote(self):
        """Garbage after a quoted token is an error."""
        with pytest.raises(UnexpectedTokenError):
            parse_primitive_token('"abc" def', line=1, column=1)

    def test_unterminated(self):
        """Unclosed quoted tokens are always fatal."""
        with pytest.raises(UnterminatedStringError):
            parse_primitive_token('"abc')
