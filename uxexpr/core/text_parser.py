"""
模板文本分词器

负责把一段模板文本切分为有序的「字面量 / 插值表达式」Token 序列：

    "x={{ a }}!"  ->  [Token("x="), Token("a", is_expression=True), Token("!")]

插值标记默认为 {{ }}，可通过 CompilerConfig 修改。表达式可以跨行，
匹配采用最短匹配（"{{a}}{{b}}" 是两个表达式）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import re

from .config import CompilerConfig


@dataclass(frozen=True)
class Token:
    """
    分词结果。

    Attributes:
        value: 字面量文本，或插值表达式的原始文本（已去除首尾空白）。
        is_expression: 是否为插值表达式。
    """

    value: str
    is_expression: bool = False


class TextParser:
    """插值标记识别与分词。"""

    def __init__(self, config: CompilerConfig | None = None) -> None:
        self.config = config or CompilerConfig()
        self._pattern = re.compile(
            re.escape(self.config.open_delimiter)
            + r"(.+?)"
            + re.escape(self.config.close_delimiter),
            re.DOTALL,
        )

    def is_expr(self, text: str) -> bool:
        """文本中是否至少包含一个插值表达式。"""
        return self._pattern.search(text) is not None

    def parse_text(self, text: str) -> List[Token]:
        """
        切分文本。

        空的字面量片段不会输出；不含插值的非空文本返回单个字面量 Token。
        """
        tokens: List[Token] = []
        last_index = 0
        for match in self._pattern.finditer(text):
            if match.start() > last_index:
                tokens.append(Token(text[last_index:match.start()]))
            tokens.append(Token(match.group(1).strip(), is_expression=True))
            last_index = match.end()
        if last_index < len(text):
            tokens.append(Token(text[last_index:]))
        return tokens

    def single_expr(self, text: str) -> bool:
        """去除首尾空白后，文本是否恰好是一个插值表达式。"""
        tokens = self.parse_text(text.strip())
        return len(tokens) == 1 and tokens[0].is_expression

    def remove_expr_affix(self, text: str) -> str:
        """
        去掉单个插值表达式的分隔符：" {{ a.b }} " -> "a.b"。

        不是单个插值表达式时原样返回。
        """
        tokens = self.parse_text(text.strip())
        if len(tokens) == 1 and tokens[0].is_expression:
            return tokens[0].value
        return text

    def add_expr_affix(self, text: str) -> str:
        """
        为表达式加上分隔符："a.b" -> "{{a.b}}"。

        已包含插值表达式时原样返回。
        """
        if self.is_expr(text):
            return text
        return f"{self.config.open_delimiter}{text}{self.config.close_delimiter}"
