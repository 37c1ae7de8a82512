# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
"""

# Standard
import os

# Third-Party
import pytest

# First-Party
from toon_codec.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test without TOON_* environment overrides or cached settings."""
    for name in list(os.environ):
        if name.upper().startswith("TOON_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def users():
    """Uniform records that qualify for the tabular form."""
    return [
        {"id": 1, "name": "Alice", "role": "admin"},
        {"id": 2, "name": "Bob", "role": "user"},
    ]


@pytest.fixture
def nested_document(users):
    """A document exercising every array form."""
    return {
        "title": "TOON test",
        "count": 3,
        "nested": {"ok": True, "ratio": 0.25},
        "tags": ["a", "b", "c"],
        "users": users,
        "matrix": [[1, 2], [3, 4]],
        "mixed": [1, {"a": 1, "b": [True, None]}, "text", []],
        "empty": {},
    }
