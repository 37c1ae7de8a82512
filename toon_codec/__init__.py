# -*- coding: utf-8 -*-
"""TOON codec.

Converts JSON-compatible Python values to TOON (Token-Oriented Object
Notation) and back. TOON is a compact, indentation-based notation that keeps
the JSON data model while spending far fewer tokens in LLM prompts.

SPDX-License-Identifier: Apache-2.0
"""

__version__ = "1.0.0"

from toon_codec.decoder import decode
from toon_codec.encoder import encode, encode_lines
from toon_codec.errors import (
    DuplicateKeyError,
    IndentMismatchError,
    InvalidDelimiterError,
    InvalidIndentError,
    LengthMismatchError,
    PathConflictError,
    ToonDecodeError,
    ToonError,
    ToonOptionsError,
    UnexpectedTokenError,
    UnterminatedStringError,
)
from toon_codec.models import DecodeOptions, Delimiter, EncodeOptions, KeyFolding
from toon_codec.stats import estimate_token_count

__all__ = [
    "__version__",
    "decode",
    "encode",
    "encode_lines",
    "DecodeOptions",
    "Delimiter",
    "EncodeOptions",
    "KeyFolding",
    "estimate_token_count",
    "ToonError",
    "ToonOptionsError",
    "InvalidDelimiterError",
    "InvalidIndentError",
    "ToonDecodeError",
    "UnterminatedStringError",
    "IndentMismatchError",
    "LengthMismatchError",
    "DuplicateKeyError",
    "UnexpectedTokenError",
    "PathConflictError",
]
