"""
模板插值表达式编译

把包含插值表达式的模板文本（例如 "text {{expr}} more text"）编译为：
- 不含插值时：折叠空白后的字面量字符串
- 含插值时：可调用对象（传入数据上下文求值，返回拼接结果），
  或重组表达式代码字符串（to_func=False）

处理顺序：
1. 空白折叠 / 插值检测（两条互斥路径）
2. 分词 -> 重组 -> 编译
"""

from __future__ import annotations

from typing import List, Union

import pathlib
import re

from .config import CompilerConfig, load_config
from .errors import ExpressionCompileError, ExpressionError
from .evaluator import CompiledExpression, compile_to_function
from .expr_parser import ExpressionParser
from .filter_parser import FilterParser
from .text_parser import TextParser, Token
from uxexpr.utils.logger import get_logger


logger = get_logger()

_LEADING_SPACES_RE = re.compile(r"^\s\s+")


def trim_html(text: str) -> str:
    """
    按标记语言的规则折叠首尾空白。

    - 开头 2 个以上的空白字符折叠为 1 个空格
    - 长度 <= 1 时原样返回
    - 否则去除首尾空白，原先有首部空格时补回 1 个空格，
      尾部有多余空白时补回 1 个空格

    Examples:
        trim_html("  hello") -> " hello"
        trim_html("hello   ") -> "hello "
        trim_html("   ") -> " "
    """
    text = _LEADING_SPACES_RE.sub(" ", text, count=1)

    if len(text) <= 1:
        return text

    start_space = 1 if text[0] == " " else 0
    old_length = len(text)
    text = text.strip()

    # 尾部多余 1 个空格
    if old_length - len(text) - start_space >= 1:
        text = text + " "

    return (" " if start_space else "") + text


class ExpressionCompiler:
    """
    模板表达式编译器。

    不持有可变状态，可在多个线程中并发使用；编译结果的缓存由调用方负责。
    """

    def __init__(self, config: CompilerConfig | None = None) -> None:
        """
        初始化编译器。

        Args:
            config: 语法配置（分隔符、过滤器分隔符），默认使用 CompilerConfig()
        """
        self.config = config or CompilerConfig()
        self.text_parser = TextParser(self.config)
        self.filter_parser = FilterParser(self.config)
        self.expr_parser = ExpressionParser()

    @classmethod
    def from_config_file(cls, path: str | pathlib.Path) -> "ExpressionCompiler":
        """从 YAML 配置文件创建编译器。"""
        return cls(load_config(path))

    def compile(self, text: str, to_func: bool = True) -> Union[str, CompiledExpression]:
        """
        编译模板文本。

        Args:
            text: 模板文本
            to_func: 为 False 时返回重组表达式代码字符串，不做编译

        Returns:
            - 不含插值：折叠空白后的字符串
            - 含插值且 to_func=False：重组表达式代码
            - 含插值且 to_func=True：CompiledExpression

        Raises:
            ExpressionCompileError: 生成的表达式代码无法编译
        """
        trimmed = text.strip()
        if not self.text_parser.is_expr(trimmed):
            return trim_html(text)

        tokens = self._tokenize(trimmed)
        source = self.build(tokens)
        if not to_func:
            return source
        # 空插值在多个 Token 时会生成 "()"（空元组）
        if any(token.is_expression and not token.value for token in tokens):
            logger.warning("表达式编译失败: %s, 错误: 空表达式", trimmed)
            raise ExpressionCompileError(trimmed, "空表达式")
        return compile_to_function(source, trimmed)

    def _tokenize(self, trimmed: str) -> List[Token]:
        tokens = self.text_parser.parse_text(trimmed)
        if not tokens:
            logger.error("分词结果为空: %r", trimmed)
            raise ExpressionError(f"分词结果为空: {trimmed!r}")
        return tokens

    def build(self, tokens: List[Token]) -> str:
        """
        把 Token 序列重组为单个表达式代码。

        - 表达式 Token：过滤器改写 -> 表达式解析；多个 Token 时加括号
        - 字面量 Token：输出为带转义的字符串字面量
        - 多个 Token 时以 '' 开头，保证 "+" 是字符串拼接，
          例如 {{number1}}{{number2}} 得到 "12" 而不是 3
        """
        is_single = len(tokens) == 1
        fragments: List[str] = []
        for token in tokens:
            if token.is_expression:
                code = self.expr_parser.parse_expression(
                    self.filter_parser.parse_filters(token.value)
                )
                fragments.append(code if is_single else f"({code})")
            else:
                fragments.append(repr(token.value))

        if not is_single:
            fragments.insert(0, "''")
        return " + ".join(fragments)


_default_compiler = ExpressionCompiler()


def compile_expression(text: str, to_func: bool = True) -> Union[str, CompiledExpression]:
    """使用默认配置编译模板文本，见 ExpressionCompiler.compile。"""
    return _default_compiler.compile(text, to_func)


def is_expr(text: str) -> bool:
    return _default_compiler.text_parser.is_expr(text)


def single_expr(text: str) -> bool:
    return _default_compiler.text_parser.single_expr(text)


def remove_expr_affix(text: str) -> str:
    return _default_compiler.text_parser.remove_expr_affix(text)


def add_expr_affix(text: str) -> str:
    return _default_compiler.text_parser.add_expr_affix(text)
