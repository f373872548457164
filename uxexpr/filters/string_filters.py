"""
字符串过滤器

提供可以在模板表达式中通过管道调用的过滤器，例如：

    {{ title | upper }}
    {{ summary | truncate(20) }}

所有过滤器都是无状态的：第一个参数是管道输入值，其余参数来自调用处。
"""

import json
from typing import Any, Iterable


def upper_filter(value: Any) -> str:
    """转为大写。"""
    return str(value).upper()


def lower_filter(value: Any) -> str:
    """转为小写。"""
    return str(value).lower()


def capitalize_filter(value: Any) -> str:
    """
    首字母大写，其余字符保持不变。

    Examples:
        capitalize_filter("hello World") -> "Hello World"
    """
    text = str(value)
    return text[:1].upper() + text[1:]


def trim_filter(value: Any) -> str:
    """去除首尾空白。"""
    return str(value).strip()


def truncate_filter(value: Any, length: int, suffix: str = "...") -> str:
    """
    截断字符串。

    Args:
        value: 输入值
        length: 保留的最大字符数（不含后缀），必须 >= 0
        suffix: 截断后追加的后缀

    Raises:
        ValueError: 如果 length < 0

    Examples:
        truncate_filter("abcdef", 3) -> "abc..."
        truncate_filter("abc", 3) -> "abc"
    """
    length = int(length)
    if length < 0:
        raise ValueError(f"truncate 长度不能为负数: {length}")
    text = str(value)
    if len(text) <= length:
        return text
    return text[:length] + suffix


def default_filter(value: Any, fallback: Any = "") -> Any:
    """值为 None 或空字符串时返回 fallback。"""
    if value is None or value == "":
        return fallback
    return value


def json_filter(value: Any) -> str:
    """序列化为 JSON 字符串（保留非 ASCII 字符）。"""
    return json.dumps(value, ensure_ascii=False)


def join_filter(value: Iterable[Any], separator: str = ",") -> str:
    """用分隔符连接序列元素。"""
    return separator.join(str(item) for item in value)


def length_filter(value: Any) -> int:
    """返回长度。"""
    return len(value)
