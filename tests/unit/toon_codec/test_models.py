# -*- coding: utf-8 -*-
"""Unit tests for option models and the error taxonomy."""

from pydantic import ValidationError
import pytest

from toon_codec.errors import (
    InvalidDelimiterError,
    InvalidIndentError,
    LengthMismatchError,
    ToonDecodeError,
    ToonError,
    ToonOptionsError,
)
from toon_codec.models import DecodeOptions, Delimiter, EncodeOptions, KeyFolding, resolve_decode_options, resolve_encode_options


class TestEncodeOptions:
    """Test encoding option resolution."""

    def test_defaults(self):
        """None gives the documented defaults."""
        opts = resolve_encode_options(None)
        assert opts.indent == 2
        assert opts.delimiter is Delimiter.COMMA
        assert opts.key_folding is KeyFolding.OFF
        assert opts.flatten_depth is None
        assert opts.folding_enabled is False

    @pytest.mark.parametrize("value,expected", [(",", Delimiter.COMMA), ("\t", Delimiter.TAB), ("|", Delimiter.PIPE), ("pipe", Delimiter.PIPE), ("TAB", Delimiter.TAB), (Delimiter.PIPE, Delimiter.PIPE)])
    def test_delimiter_spellings(self, value, expected):
        """Delimiters are accepted as characters, names or members."""
        assert resolve_encode_options({"delimiter": value}).delimiter is expected

    def test_camel_case_aliases(self):
        """camelCase option names are accepted."""
        opts = resolve_encode_options({"keyFolding": "safe", "flattenDepth": 3})
        assert opts.key_folding is KeyFolding.SAFE
        assert opts.flatten_depth == 3

    @pytest.mark.parametrize("value,expected", [(True, KeyFolding.SAFE), (False, KeyFolding.OFF), (None, KeyFolding.OFF), ("safe", KeyFolding.SAFE)])
    def test_key_folding_flags(self, value, expected):
        """Booleans are shorthand for folding modes."""
        assert resolve_encode_options({"key_folding": value}).key_folding is expected

    @pytest.mark.parametrize("depth,enabled", [(None, True), (0, False), (1, False), (2, True), (5, True)])
    def test_folding_enabled(self, depth, enabled):
        """Folding needs room for two segments."""
        assert resolve_encode_options({"key_folding": "safe", "flatten_depth": depth}).folding_enabled is enabled

    def test_model_passthrough(self):
        """A model instance is used as-is."""
        opts = EncodeOptions(indent=4)
        assert resolve_encode_options(opts) is opts

    def test_frozen(self):
        """Options cannot change after validation."""
        opts = EncodeOptions()
        with pytest.raises(ValidationError):
            opts.indent = 4

    def test_invalid_delimiter_message(self):
        """Delimiter errors name the bad value."""
        with pytest.raises(InvalidDelimiterError, match="Invalid delimiter ';'"):
            resolve_encode_options({"delimiter": ";"})

    def test_invalid_indent_message(self):
        """Indent errors name the bad value."""
        with pytest.raises(InvalidIndentError, match="Invalid indent value 0"):
            resolve_encode_options({"indent": 0})

    def test_invalid_key_folding(self):
        """Unknown folding modes are option errors."""
        with pytest.raises(ToonOptionsError):
            resolve_encode_options({"key_folding": "aggressive"})

    def test_negative_flatten_depth(self):
        """flatten_depth cannot be negative."""
        with pytest.raises(ToonOptionsError):
            resolve_encode_options({"flatten_depth": -1})


class TestDecodeOptions:
    """Test decoding option resolution."""

    def test_defaults(self):
        """Strict mode is on and expansion off by default."""
        opts = resolve_decode_options(None)
        assert (opts.indent, opts.strict, opts.expand_paths) == (2, True, False)

    @pytest.mark.parametrize("value,expected", [("safe", True), ("off", False), ("SAFE", True), (True, True), (None, False)])
    def test_expand_paths_spellings(self, value, expected):
        """Expansion accepts safe/off as well as booleans."""
        assert resolve_decode_options({"expandPaths": value}).expand_paths is expected

    def test_model_passthrough(self):
        """A model instance is used as-is."""
        opts = DecodeOptions(strict=False)
        assert resolve_decode_options(opts) is opts

    def test_invalid_indent(self):
        """Indent must be positive."""
        with pytest.raises(InvalidIndentError):
            resolve_decode_options({"indent": -1})

    def test_unknown_option(self):
        """Encode-only options are not decode options."""
        with pytest.raises(ToonOptionsError):
            resolve_decode_options({"delimiter": ","})


class TestErrors:
    """Test the error taxonomy."""

    def test_hierarchy(self):
        """Every codec error is a ToonError and a ValueError."""
        assert issubclass(InvalidDelimiterError, ToonOptionsError)
        assert issubclass(ToonOptionsError, ToonError)
        assert issubclass(LengthMismatchError, ToonDecodeError)
        assert issubclass(ToonDecodeError, ValueError)

    def test_location_suffix(self):
        """Line and column are appended to the message."""
        err = LengthMismatchError("Expected 3 rows, got 2", line=4, column=1)
        assert (err.message, err.line, err.column) == ("Expected 3 rows, got 2", 4, 1)
        assert str(err) == "Expected 3 rows, got 2 (line 4, column 1)"
        assert str(ToonDecodeError("bad", line=2)) == "bad (line 2)"
        assert str(ToonDecodeError("bad")) == "bad"
