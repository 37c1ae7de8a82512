# -*- coding: utf-8 -*-
"""Location: ./toon_codec/errors.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON error taxonomy.

All codec errors derive from ``ToonError`` (itself a ``ValueError``) so callers
can catch the whole family at once. Decode errors carry the 1-based line and
column of the offending input; option errors are raised before any output
exists.

Examples:
    >>> err = LengthMismatchError("Expected 3 rows, got 2", line=1, column=1)
    >>> str(err)
    'Expected 3 rows, got 2 (line 1, column 1)'
    >>> isinstance(err, ToonDecodeError), isinstance(err, ValueError)
    (True, True)
    >>> str(InvalidDelimiterError("Invalid delimiter ';'"))
    "Invalid delimiter ';'"
"""

# Standard
from typing import Optional


class ToonError(ValueError):
    """Base class for all TOON codec errors."""


# ---------------------------------------------------------------------------
# Option validation (raised before any encoding or decoding work)
# ---------------------------------------------------------------------------


class ToonOptionsError(ToonError):
    """Raised when encode or decode options fail validation."""


class InvalidDelimiterError(ToonOptionsError):
    """The requested delimiter is not one of comma, tab or pipe."""


class InvalidIndentError(ToonOptionsError):
    """The requested indent is not a positive integer."""


# ---------------------------------------------------------------------------
# Decode-side
# ---------------------------------------------------------------------------


class ToonDecodeError(ToonError):
    """Raised when TOON text cannot be decoded.

    Attributes:
        message: Error description without the location suffix.
        line: 1-based line number of the offending line, if known.
        column: 1-based column of the offending character, if known.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """Initialize the error.

        Args:
            message: Error description.
            line: 1-based line number.
            column: 1-based column number.
        """
        self.message = message
        self.line = line
        self.column = column
        if line is not None:
            location = f"line {line}" if column is None else f"line {line}, column {column}"
            message = f"{message} ({location})"
        super().__init__(message)


class UnterminatedStringError(ToonDecodeError):
    """A quoted string has no closing quote. Fatal in every mode."""


class IndentMismatchError(ToonDecodeError):
    """Indentation is not a multiple of the indent width, or jumps a level."""


class LengthMismatchError(ToonDecodeError):
    """A declared array length or tabular row width does not match the data."""


class DuplicateKeyError(ToonDecodeError):
    """The same key appears twice in one object."""


class UnexpectedTokenError(ToonDecodeError):
    """A line or token does not fit the grammar at its position."""


class PathConflictError(ToonDecodeError):
    """Two dotted paths disagree on the type at a shared prefix."""
