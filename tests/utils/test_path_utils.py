#!/usr/bin/env python3
"""
Unit тесты для utils/path_utils.py
"""

import pytest

from uigen_mcp.tools.base import InvalidPathError
from uigen_mcp.utils.path_utils import base_name, is_within, normalize_path, parent_of


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("/App.jsx", "/App.jsx"),
        ("/components/", "/components"),
        ("//components//Button.jsx", "/components/Button.jsx"),
        ("/./App.jsx", "/App.jsx"),
        ("  /App.jsx  ", "/App.jsx"),
        ("/", "/"),
    ],
)
def test_normalize_path(raw, expected):
    """Тест нормализации путей"""
    assert normalize_path(raw) == expected


@pytest.mark.parametrize("raw", ["App.jsx", "./App.jsx", "/a/../b", "/..", "", None, 42])
def test_normalize_path_rejects(raw):
    """Тест отклонения недопустимых путей"""
    with pytest.raises(InvalidPathError):
        normalize_path(raw)


def test_helpers():
    """Тест вспомогательных функций"""
    assert parent_of("/components/Button.jsx") == "/components"
    assert parent_of("/App.jsx") == "/"
    assert is_within("/components/Button.jsx", "/components")
    assert not is_within("/componentsX/Button.jsx", "/components")
    assert is_within("/App.jsx", "/")
    assert base_name("/components/Button.jsx") == "Button.jsx"
    assert base_name(None) == "file"
