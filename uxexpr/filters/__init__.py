"""
内置过滤器库

包含可以在模板表达式中通过管道直接调用的过滤器，例如：
- upper, lower, capitalize, trim, truncate
- default, json, join, length

所有过滤器通过 FilterRegistry 注册；数据上下文中的同名字段优先于内置过滤器。
"""

from uxexpr.core.registry import FilterRegistry

from .string_filters import (
    capitalize_filter,
    default_filter,
    join_filter,
    json_filter,
    length_filter,
    lower_filter,
    trim_filter,
    truncate_filter,
    upper_filter,
)

FilterRegistry.register_filter("upper", upper_filter)
FilterRegistry.register_filter("lower", lower_filter)
FilterRegistry.register_filter("capitalize", capitalize_filter)
FilterRegistry.register_filter("trim", trim_filter)
FilterRegistry.register_filter("truncate", truncate_filter)
FilterRegistry.register_filter("default", default_filter)
FilterRegistry.register_filter("json", json_filter)
FilterRegistry.register_filter("join", join_filter)
FilterRegistry.register_filter("length", length_filter)

__all__ = []
