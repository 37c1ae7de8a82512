# -*- coding: utf-8 -*-
"""Location: ./toon_codec/tabular.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Tabular array detection.

An array of objects is written as one header plus one delimited row per
element when every element is an object with the same keys in the same order
and every value is a scalar. The header amortizes the per-row key overhead,
which is where most of the savings over JSON come from for record lists.

Examples:
    >>> detect_tabular_header([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])
    ['id', 'name']
    >>> detect_tabular_header([{"a": 1}, {"b": 2}]) is None
    True
"""

# Standard
from typing import Any, List, Optional

# First-Party
from toon_codec.models import JsonObject
from toon_codec.normalize import is_primitive


def detect_tabular_header(arr: List[Any]) -> Optional[List[str]]:
    """Return the shared column order if the array qualifies for tabular form.

    Per the tabular rules:
    - The array is non-empty and every element is an object
    - The first object has at least one key
    - Every object has exactly the first object's keys, in the same order
    - Every value is a scalar

    Args:
        arr: Normalized array.

    Returns:
        List of column names, or None if the array is not tabular.

    Examples:
        >>> detect_tabular_header([]) is None
        True
        >>> detect_tabular_header([{}]) is None
        True
        >>> detect_tabular_header([{"a": 1, "b": 2}, {"b": 3, "a": 4}]) is None
        True
        >>> detect_tabular_header([{"a": {"nested": 1}}]) is None
        True
    """
    if not arr or not isinstance(arr[0], dict):
        return None

    # Field order follows the first object's key order
    first_keys = list(arr[0].keys())
    if not first_keys:
        return None

    for obj in arr:
        if not isinstance(obj, dict) or list(obj.keys()) != first_keys:
            return None
        if not all(is_primitive(value) for value in obj.values()):
            return None

    return first_keys


def tabular_rows(arr: List[JsonObject], fields: List[str]) -> List[List[Any]]:
    """Project each object onto the column order.

    Args:
        arr: Tabular array.
        fields: Column names from ``detect_tabular_header``.

    Returns:
        One list of scalars per element.

    Examples:
        >>> tabular_rows([{"x": 1, "y": 2}], ["x", "y"])
        [[1, 2]]
    """
    return [[obj[field] for field in fields] for obj in arr]
