"""
uxexpr

把模板文本中的插值表达式（{{ expr }}）编译为字面量字符串或可调用对象。

    >>> from uxexpr import compile_expression
    >>> render = compile_expression("x={{ a }}!")
    >>> render({"a": 5})
    'x=5!'
"""

from .core.config import CompilerConfig, ConfigParser, load_config
from .core.errors import ConfigError, ExpressionCompileError, ExpressionError
from .core.evaluator import CompiledExpression
from .core.expression import (
    ExpressionCompiler,
    add_expr_affix,
    compile_expression,
    is_expr,
    remove_expr_affix,
    single_expr,
    trim_html,
)

# 导入内置过滤器（触发注册）
from . import filters  # noqa: F401

__all__ = [
    "CompiledExpression",
    "CompilerConfig",
    "ConfigError",
    "ConfigParser",
    "ExpressionCompileError",
    "ExpressionCompiler",
    "ExpressionError",
    "add_expr_affix",
    "compile_expression",
    "is_expr",
    "load_config",
    "remove_expr_affix",
    "single_expr",
    "trim_html",
]
