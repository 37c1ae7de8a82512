# -*- coding: utf-8 -*-
"""Location: ./toon_codec/stats.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Token count estimates for ``toon --stats``.

These are rough estimates based on character count (about four characters per
token), not actual tokenization. Actual savings depend on the tokenizer used.
"""

# Standard
import math
from typing import NamedTuple

# Average characters per token for English text and JSON-like syntax
CHARS_PER_TOKEN = 4


class TokenSavings(NamedTuple):
    """JSON vs TOON token estimates."""

    json_tokens: int
    toon_tokens: int
    saved_tokens: int
    saved_percent: float


def estimate_token_count(text: str) -> int:
    """Estimate how many tokens a text costs.

    Args:
        text: Text to measure.

    Returns:
        Estimated token count (0 for empty text).

    Examples:
        >>> estimate_token_count(""), estimate_token_count("abcd"), estimate_token_count("abcde")
        (0, 1, 2)
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_token_savings(json_text: str, toon_text: str) -> TokenSavings:
    """Compare the estimated token cost of the same data as JSON and TOON.

    Args:
        json_text: JSON text.
        toon_text: TOON text for the same data.

    Returns:
        TokenSavings; the percentage is relative to the JSON estimate.

    Examples:
        >>> estimate_token_savings('{"a": [1, 2, 3]}', "a[3]: 1,2,3")
        TokenSavings(json_tokens=4, toon_tokens=3, saved_tokens=1, saved_percent=25.0)
        >>> estimate_token_savings("", "").saved_percent
        0.0
    """
    json_tokens = estimate_token_count(json_text)
    toon_tokens = estimate_token_count(toon_text)
    saved = json_tokens - toon_tokens
    percent = (saved / json_tokens) * 100 if json_tokens > 0 else 0.0
    return TokenSavings(json_tokens, toon_tokens, saved, percent)
