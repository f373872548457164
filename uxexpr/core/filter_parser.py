"""
过滤器管道解析

把带管道语法的表达式改写为普通函数调用：

    "name | upper"               -> "upper(name)"
    "msg | truncate(10) | upper" -> "upper(truncate(msg, 10))"

规则：
- 引号内、括号内的分隔符不参与切分
- 连续两个分隔符（如 "||"）不是管道
- 不含管道的表达式只去除首尾空白，原样返回
"""

from __future__ import annotations

from typing import List

from .config import CompilerConfig


_OPENERS = "([{"
_CLOSERS = ")]}"
_QUOTES = "'\""


class FilterParser:
    """过滤器管道改写器。"""

    def __init__(self, config: CompilerConfig | None = None) -> None:
        self.config = config or CompilerConfig()

    def parse_filters(self, text: str) -> str:
        """改写管道语法，返回普通表达式文本。"""
        segments = self._split(text)
        expression = segments[0].strip()
        for segment in segments[1:]:
            filter_text = segment.strip()
            if filter_text:
                expression = self._wrap(expression, filter_text)
        return expression

    def _split(self, text: str) -> List[str]:
        """按顶层管道分隔符切分。"""
        sep = self.config.filter_separator
        segments: List[str] = []
        depth = 0
        quote = ""
        start = 0
        index = 0
        while index < len(text):
            char = text[index]
            if quote:
                if char == "\\":
                    index += 2
                    continue
                if char == quote:
                    quote = ""
            elif char in _QUOTES:
                quote = char
            elif char in _OPENERS:
                depth += 1
            elif char in _CLOSERS:
                depth -= 1
            elif (
                char == sep
                and depth == 0
                and text[index + 1:index + 2] != sep
                and text[index - 1:index] != sep
            ):
                segments.append(text[start:index])
                start = index + 1
            index += 1
        segments.append(text[start:])
        return segments

    @staticmethod
    def _wrap(expression: str, filter_text: str) -> str:
        """
        把一个过滤器应用到表达式上。

        "upper"        -> "upper(expr)"
        "truncate(10)" -> "truncate(expr, 10)"
        """
        paren = filter_text.find("(")
        if paren < 0:
            return f"{filter_text}({expression})"
        name = filter_text[:paren].strip()
        args = filter_text[paren + 1:]
        if args.strip() == ")":
            return f"{name}({expression})"
        return f"{name}({expression}, {args}"
