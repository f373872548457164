"""
内置过滤器测试
"""

import pytest

import uxexpr  # noqa: F401
from uxexpr.core.registry import FilterRegistry
from uxexpr.filters.string_filters import (
    capitalize_filter,
    default_filter,
    join_filter,
    json_filter,
    length_filter,
    truncate_filter,
)


def test_builtin_filters_are_registered():
    names = FilterRegistry.list_filters()
    for name in ["upper", "lower", "capitalize", "trim", "truncate", "default", "json", "join", "length"]:
        assert name in names
    assert FilterRegistry.get_filter("nope") is None


def test_register_filter_requires_identifier():
    with pytest.raises(ValueError):
        FilterRegistry.register_filter("not valid", str)


def test_truncate():
    assert truncate_filter("abcdef", 3) == "abc..."
    assert truncate_filter("abc", 3) == "abc"
    assert truncate_filter("abcdef", 2, "~") == "ab~"
    with pytest.raises(ValueError):
        truncate_filter("abc", -1)


def test_string_filters():
    assert capitalize_filter("hello World") == "Hello World"
    assert default_filter(None, "n/a") == "n/a"
    assert default_filter("", "n/a") == "n/a"
    assert default_filter(0, "n/a") == 0
    assert join_filter([1, 2, 3], "-") == "1-2-3"
    assert json_filter({"名": 1}) == '{"名": 1}'
    assert length_filter([1, 2]) == 2


def test_filters_through_templates():
    render = uxexpr.compile_expression("{{ tags | join(', ') }} ({{ tags | length }})")
    assert render({"tags": ["a", "b"]}) == "a, b (2)"
    assert uxexpr.compile_expression("{{ name | default('guest') | capitalize }}")({"name": ""}) == "Guest"
