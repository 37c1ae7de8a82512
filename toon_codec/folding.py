# -*- coding: utf-8 -*-
"""Location: ./toon_codec/folding.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Key folding (encode side) and path expansion (decode side).

Folding collapses a chain of single-key objects into one dotted key::

    {"a": {"b": {"c": 1}}}   ->   a.b.c: 1

Expansion reverses it when decoding with ``expand_paths``. Only unquoted keys
whose segments are all identifiers are expanded, and the encoder quotes
literal dotted keys whenever folding is on, so the two are exact inverses for
chains within ``flatten_depth``.

Examples:
    >>> fold_entries({"a": {"b": {"c": 1}}, "d": 2})
    [FoldedEntry(key='a.b.c', value=1, folded=True), FoldedEntry(key='d', value=2, folded=False)]
    >>> expand_paths({DottedKey("a.b.c"): 1, "d": 2})
    {'a': {'b': {'c': 1}}, 'd': 2}
"""

# Standard
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

# First-Party
from toon_codec.constants import DOT, IDENTIFIER_SEGMENT_RE
from toon_codec.errors import PathConflictError
from toon_codec.models import JsonObject, JsonValue

logger = logging.getLogger(__name__)


# =============================================================================
# Folding
# =============================================================================


class FoldedEntry(NamedTuple):
    """One field of an object as the encoder writes it."""

    key: str
    value: Any
    folded: bool


def fold_entries(obj: JsonObject, flatten_depth: Optional[int] = None) -> List[FoldedEntry]:
    """Fold single-key object chains into dotted keys.

    A chain grows while the current value is an object with exactly one key
    whose name is an identifier, and stops at ``flatten_depth`` segments. An
    array, a scalar, an empty object or a multi-key object ends the chain and
    becomes the value of the folded key. A fold is skipped when the dotted key
    equals a literal sibling key.

    Args:
        obj: Normalized object.
        flatten_depth: Maximum segments per folded key; None for unbounded.

    Returns:
        Entries in the object's key order.

    Examples:
        >>> fold_entries({"a": {"b": {"c": {"d": 1}}}}, flatten_depth=2)
        [FoldedEntry(key='a.b', value={'c': {'d': 1}}, folded=True)]
        >>> fold_entries({"a": {"b": [1, 2]}})
        [FoldedEntry(key='a.b', value=[1, 2], folded=True)]
        >>> fold_entries({"a": {"b": 1}, "a.b": 2})[0].folded
        False
    """
    entries = []
    for key, value in obj.items():
        segments, leaf = _fold_chain(key, value, flatten_depth)
        if len(segments) >= 2:
            folded_key = DOT.join(segments)
            if folded_key not in obj:
                entries.append(FoldedEntry(folded_key, leaf, True))
                continue
            logger.debug(f"Skipping fold of {key!r}: {folded_key!r} collides with a sibling key")
        entries.append(FoldedEntry(key, value, False))
    return entries


def _fold_chain(key: str, value: Any, flatten_depth: Optional[int]) -> Tuple[List[str], Any]:
    """Walk a single-key chain starting at ``key``.

    Args:
        key: Field name.
        value: Field value.
        flatten_depth: Maximum segments; None for unbounded.

    Returns:
        Tuple of (segments, leaf value).
    """
    segments = [key]
    if not IDENTIFIER_SEGMENT_RE.match(key):
        return segments, value

    current = value
    while isinstance(current, dict) and len(current) == 1:
        if flatten_depth is not None and len(segments) >= flatten_depth:
            break
        next_key, next_value = next(iter(current.items()))
        if not IDENTIFIER_SEGMENT_RE.match(next_key):
            break
        segments.append(next_key)
        current = next_value
    return segments, current


# =============================================================================
# Expansion
# =============================================================================


class DottedKey(str):
    """An unquoted dotted key read by the decoder, eligible for expansion.

    Attributes:
        line: 1-based source line of the key, for error reporting.
    """

    line: Optional[int] = None


def is_expandable_key(key: str) -> bool:
    """Check if an unquoted key can be split into a nested path.

    Args:
        key: Unquoted key text.

    Returns:
        True when the key has a dot and every segment is an identifier.

    Examples:
        >>> is_expandable_key("a.b"), is_expandable_key("ab"), is_expandable_key("a..b")
        (True, False, False)
    """
    if DOT not in key:
        return False
    return all(IDENTIFIER_SEGMENT_RE.match(segment) for segment in key.split(DOT))


def expand_paths(value: JsonValue, strict: bool = True) -> JsonValue:
    """Split dotted keys into nested objects, merging shared prefixes.

    Args:
        value: Decoded value whose expandable keys are ``DottedKey`` instances.
        strict: Raise on type conflicts instead of letting the last write win.

    Returns:
        Value with every ``DottedKey`` expanded.

    Raises:
        PathConflictError: In strict mode, when two paths disagree at a prefix.

    Examples:
        >>> expand_paths({DottedKey("a.b"): 1, DottedKey("a.c"): 2})
        {'a': {'b': 1, 'c': 2}}
        >>> expand_paths({DottedKey("a.b"): 1, "a": 2}, strict=False)
        {'a': 2}
    """
    if isinstance(value, list):
        return [expand_paths(item, strict) for item in value]
    if not isinstance(value, dict):
        return value

    result: Dict[str, Any] = {}
    for key, item in value.items():
        item = expand_paths(item, strict)
        if isinstance(key, DottedKey):
            _insert_path(result, key.split(DOT), item, strict, key)
        else:
            _merge_into(result, key, item, strict, key)
    return result


def _insert_path(target: Dict[str, Any], segments: List[str], value: Any, strict: bool, path: str) -> None:
    """Insert ``value`` at ``segments`` below ``target``.

    Args:
        target: Object being built.
        segments: Path segments.
        value: Leaf value.
        strict: Raise on conflicts.
        path: Original dotted key, for error messages.

    Raises:
        PathConflictError: In strict mode, when a prefix holds a non-object.
    """
    for segment in segments[:-1]:
        if segment not in target:
            target[segment] = {}
        elif not isinstance(target[segment], dict):
            if strict:
                raise PathConflictError(
                    f"Path conflict at {segment!r} while expanding {str(path)!r}: existing value is not an object",
                    getattr(path, "line", None),
                )
            target[segment] = {}
        target = target[segment]
    _merge_into(target, segments[-1], value, strict, path)


def _merge_into(target: Dict[str, Any], key: str, value: Any, strict: bool, path: str) -> None:
    """Set ``target[key]``, deep-merging when both sides are objects.

    Args:
        target: Object being built.
        key: Key to set.
        value: Value to set or merge.
        strict: Raise on conflicts.
        path: Original key, for error messages.

    Raises:
        PathConflictError: In strict mode, when an object meets a non-object.
    """
    key = str(key)
    if key not in target:
        target[key] = value
        return

    existing = target[key]
    if isinstance(existing, dict) and isinstance(value, dict):
        for child_key, child_value in value.items():
            _merge_into(existing, child_key, child_value, strict, path)
        return

    if strict:
        raise PathConflictError(
            f"Path conflict at {key!r} while expanding {str(path)!r}: cannot merge {type(value).__name__} into {type(existing).__name__}",
            getattr(path, "line", None),
        )
    target[key] = value
