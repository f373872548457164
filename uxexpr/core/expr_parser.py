"""
表达式解析（改写为可执行代码）

模板表达式使用 Python 表达式语法。所有自由标识符在运行时从数据上下文中取值，
因此解析阶段把它们改写为作用域对象的成员访问：

    "a.b + c"          -> "scope.a.b + scope.c"
    "upper(name)"      -> "scope.upper(scope.name)"
    "x if ok else 'n'" -> "scope.x if scope.ok else 'n'"

不改写：
- 字符串字面量中的内容
- 关键字（True、None、and、if 等）
- "." 之后的属性名
- 关键字参数名（f(x=1) 中的 x）
- 数字字面量中的字母（1e5、0x1f）

本模块只做文本改写，不做语法校验：语法错误留给编译阶段统一报告。
"""

from __future__ import annotations

from typing import List

import keyword
import re


SCOPE_NAME = "scope"

# 字符串字面量（可带 r/b/u 前缀，支持三引号）
_STRING_RE = re.compile(
    r"(?<![\w.])[rRbBuU]{0,2}"
    r"(?:'''[\s\S]*?'''|\"\"\"[\s\S]*?\"\"\"|'(?:[^'\\\n]|\\.)*'|\"(?:[^\"\\\n]|\\.)*\")"
)
_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")
_IDENT_RE = re.compile(r"(?<!\w)[^\W\d]\w*")
_KWARG_RE = re.compile(r"\s*=(?!=)")


class ExpressionParser:
    """自由标识符改写器。"""

    def __init__(self, scope_name: str = SCOPE_NAME) -> None:
        self.scope_name = scope_name

    def parse_expression(self, text: str) -> str:
        """返回改写后的表达式代码。"""
        strings: List[str] = []

        def save(match: re.Match) -> str:
            strings.append(match.group(0))
            return f"\x00{len(strings) - 1}\x00"

        masked = _STRING_RE.sub(save, text.strip())
        code = _IDENT_RE.sub(lambda m: self._rewrite(m, masked), masked)
        return _PLACEHOLDER_RE.sub(lambda m: strings[int(m.group(1))], code)

    def _rewrite(self, match: re.Match, code: str) -> str:
        name = match.group(0)
        if keyword.iskeyword(name):
            return name
        index = match.start() - 1
        while index >= 0 and code[index].isspace():
            index -= 1
        if index >= 0 and code[index] == ".":
            return name
        if _KWARG_RE.match(code, match.end()):
            return name
        return f"{self.scope_name}.{name}"
