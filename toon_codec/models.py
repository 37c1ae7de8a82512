# -*- coding: utf-8 -*-
"""Location: ./toon_codec/models.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Pydantic models and type aliases shared by the encoder and decoder.

Options arrive as ``None``, a plain dict (snake_case or camelCase keys) or a
model instance; ``resolve_encode_options`` / ``resolve_decode_options`` turn any
of those into a validated, frozen model once per call and translate pydantic
validation failures into the codec's own error taxonomy.

Examples:
    >>> opts = resolve_encode_options({"delimiter": "pipe", "keyFolding": True})
    >>> opts.delimiter.value, opts.key_folding.value
    ('|', 'safe')
    >>> resolve_decode_options(None).strict
    True
    >>> try:
    ...     resolve_encode_options({"delimiter": ";"})
    ... except InvalidDelimiterError as e:
    ...     print("invalid")
    invalid
"""

# Standard
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Third-Party
from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError

# First-Party
from toon_codec.constants import DEFAULT_INDENT, DELIMITER_NAMES
from toon_codec.errors import InvalidDelimiterError, InvalidIndentError, ToonOptionsError

# ---------------------------------------------------------------------------
# Value model (JSON data model on Python built-ins)
# ---------------------------------------------------------------------------

JsonPrimitive = Union[str, int, float, bool, None]
JsonObject = Dict[str, Any]
JsonArray = List[Any]
JsonValue = Union[JsonPrimitive, JsonArray, JsonObject]

# Nesting level; multiplied by the indent width to get leading spaces
Depth = int


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Delimiter(str, Enum):
    """Separator between values of inline arrays and tabular rows."""

    COMMA = ","
    TAB = "\t"
    PIPE = "|"


class KeyFolding(str, Enum):
    """Encode-time key folding mode."""

    OFF = "off"
    SAFE = "safe"


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


def _reject_bool(value: Any) -> Any:
    """Refuse booleans where pydantic would silently coerce them to 0/1.

    Args:
        value: Raw option value.

    Returns:
        The value unchanged.

    Raises:
        ValueError: If the value is a bool.
    """
    if isinstance(value, bool):
        raise ValueError("must be an integer, not a boolean")
    return value


class EncodeOptions(BaseModel):
    """Options for TOON encoding.

    Attributes:
        indent: Spaces per nesting level (default: 2).
        delimiter: Inline array / tabular row delimiter (default: comma).
        key_folding: Fold single-key object chains into dotted keys.
        flatten_depth: Maximum segments in one folded key (None: unbounded).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    indent: int = Field(default=DEFAULT_INDENT, gt=0)
    delimiter: Delimiter = Delimiter.COMMA
    key_folding: KeyFolding = Field(default=KeyFolding.OFF, alias="keyFolding")
    flatten_depth: Optional[int] = Field(default=None, ge=0, alias="flattenDepth")

    @field_validator("indent", "flatten_depth", mode="before")
    @classmethod
    def _check_integer(cls, value: Any) -> Any:
        """Reject booleans for integer options.

        Args:
            value: Raw option value.

        Returns:
            The value unchanged.
        """
        return _reject_bool(value)

    @field_validator("delimiter", mode="before")
    @classmethod
    def _resolve_delimiter_name(cls, value: Any) -> Any:
        """Accept ``comma``/``tab``/``pipe`` as well as the characters.

        Args:
            value: Raw delimiter option.

        Returns:
            Delimiter character or the value unchanged.
        """
        if isinstance(value, str) and not isinstance(value, Delimiter) and value.lower() in DELIMITER_NAMES:
            return DELIMITER_NAMES[value.lower()]
        return value

    @field_validator("key_folding", mode="before")
    @classmethod
    def _resolve_key_folding_flag(cls, value: Any) -> Any:
        """Accept booleans as shorthand for ``safe``/``off``.

        Args:
            value: Raw key folding option.

        Returns:
            Folding mode value.
        """
        if value is None or value is False:
            return KeyFolding.OFF
        if value is True:
            return KeyFolding.SAFE
        return value

    @property
    def folding_enabled(self) -> bool:
        """Whether key folding can produce dotted keys at all.

        Returns:
            True when folding is on and the depth allows at least two segments.
        """
        return self.key_folding is KeyFolding.SAFE and (self.flatten_depth is None or self.flatten_depth >= 2)


class DecodeOptions(BaseModel):
    """Options for TOON decoding.

    Attributes:
        indent: Expected spaces per nesting level (default: 2).
        strict: Treat structural mismatches as fatal (default: True).
        expand_paths: Split dotted keys back into nested objects.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    indent: int = Field(default=DEFAULT_INDENT, gt=0)
    strict: bool = True
    expand_paths: bool = Field(default=False, alias="expandPaths")

    @field_validator("indent", mode="before")
    @classmethod
    def _check_integer(cls, value: Any) -> Any:
        """Reject booleans for the indent option.

        Args:
            value: Raw option value.

        Returns:
            The value unchanged.
        """
        return _reject_bool(value)

    @field_validator("expand_paths", mode="before")
    @classmethod
    def _resolve_expand_mode(cls, value: Any) -> Any:
        """Accept ``safe``/``off`` as well as booleans.

        Args:
            value: Raw expand option.

        Returns:
            Boolean flag or the value unchanged.
        """
        if value is None:
            return False
        if isinstance(value, str) and value.lower() in ("safe", "off"):
            return value.lower() == "safe"
        return value


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _options_error(exc: ValidationError) -> ToonOptionsError:
    """Map a pydantic validation failure to a codec error.

    Args:
        exc: Validation error raised by an options model.

    Returns:
        The matching ToonOptionsError subclass instance.
    """
    errors = exc.errors()
    for error in errors:
        field = error["loc"][0] if error["loc"] else None
        if field == "delimiter":
            return InvalidDelimiterError(f"Invalid delimiter {error['input']!r}: expected one of comma, tab, pipe")
        if field == "indent":
            return InvalidIndentError(f"Invalid indent value {error['input']!r}: must be a positive integer")
    first = errors[0] if errors else {"loc": (), "msg": str(exc)}
    location = ".".join(str(part) for part in first["loc"]) or "options"
    return ToonOptionsError(f"Invalid option {location}: {first['msg']}")


def resolve_encode_options(options: Union[EncodeOptions, Dict[str, Any], None]) -> EncodeOptions:
    """Validate encoding options and apply defaults.

    Args:
        options: Model instance, dict, or None for defaults.

    Returns:
        Validated EncodeOptions.

    Raises:
        InvalidDelimiterError: If the delimiter is not comma, tab or pipe.
        InvalidIndentError: If indent is not a positive integer.
        ToonOptionsError: For any other invalid option.

    Examples:
        >>> resolve_encode_options({"indent": 4}).indent
        4
        >>> resolve_encode_options({"delimiter": "\\t"}).delimiter is Delimiter.TAB
        True
    """
    if options is None:
        return EncodeOptions()
    if isinstance(options, EncodeOptions):
        return options
    try:
        return EncodeOptions.model_validate(options)
    except ValidationError as exc:
        raise _options_error(exc) from exc


def resolve_decode_options(options: Union[DecodeOptions, Dict[str, Any], None]) -> DecodeOptions:
    """Validate decoding options and apply defaults.

    Args:
        options: Model instance, dict, or None for defaults.

    Returns:
        Validated DecodeOptions.

    Raises:
        InvalidIndentError: If indent is not a positive integer.
        ToonOptionsError: For any other invalid option.

    Examples:
        >>> resolve_decode_options({"strict": False, "expandPaths": "safe"}).expand_paths
        True
    """
    if options is None:
        return DecodeOptions()
    if isinstance(options, DecodeOptions):
        return options
    try:
        return DecodeOptions.model_validate(options)
    except ValidationError as exc:
        raise _options_error(exc) from exc
