# -*- coding: utf-8 -*-
"""Location: ./toon_codec/normalize.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Normalization of arbitrary Python input into the JSON value model.

The encoder only ever sees ``None``, ``bool``, ``int``, ``float``, ``str``,
``list`` and ``dict``. Everything else is mapped here, eagerly and once, so a
streaming encode can never fail half way through its output.

Examples:
    >>> normalize_value((1, 2.0, float("nan")))
    [1, 2.0, None]
    >>> normalize_value({1: -0.0})
    {'1': 0}
"""

# Standard
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
import math
from typing import Any

# Third-Party
from pydantic import BaseModel

# First-Party
from toon_codec.models import JsonValue


def normalize_value(value: Any) -> JsonValue:
    """Convert a Python object into the JSON value model.

    Args:
        value: Any Python object.

    Returns:
        Equivalent value built only from JSON-model types.

    Raises:
        TypeError: If the object has no JSON representation.

    Examples:
        >>> normalize_value(None) is None
        True
        >>> normalize_value(float("inf")) is None
        True
        >>> normalize_value({"a", "b"}) == ["a", "b"]
        True
        >>> normalize_value(datetime(2025, 1, 2, 3, 4, 5))
        '2025-01-02T03:04:05'
    """
    if isinstance(value, Enum):
        return normalize_value(value.value)
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        return str(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return _normalize_float(value)
    if isinstance(value, Decimal):
        return _normalize_float(float(value)) if value.is_finite() else None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return normalize_value(value.model_dump(mode="json"))
    if is_dataclass(value) and not isinstance(value, type):
        return normalize_value(asdict(value))
    if isinstance(value, Mapping):
        return {str(key): normalize_value(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        try:
            items = sorted(value)
        except TypeError:
            items = list(value)
        return [normalize_value(item) for item in items]
    if isinstance(value, (list, tuple)):
        return [normalize_value(item) for item in value]

    raise TypeError(f"Object of type {type(value).__name__} is not TOON serializable")


def _normalize_float(value: float) -> JsonValue:
    """Map non-finite floats to None and negative zero to zero.

    Args:
        value: Float to normalize.

    Returns:
        The float, 0, or None.
    """
    if not math.isfinite(value):
        return None
    if value == 0.0:
        return 0
    return value


def is_primitive(value: Any) -> bool:
    """Check if a normalized value is a scalar (not an array or object).

    Args:
        value: Normalized value.

    Returns:
        True for None, bool, int, float and str.

    Examples:
        >>> is_primitive("x"), is_primitive([1]), is_primitive({})
        (True, False, False)
    """
    return value is None or isinstance(value, (bool, int, float, str))


def is_array_of_primitives(value: list) -> bool:
    """Check if every element of an array is a scalar.

    Args:
        value: Normalized array.

    Returns:
        True when all elements are scalars (vacuously true when empty).
    """
    return all(is_primitive(item) for item in value)

