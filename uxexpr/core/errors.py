"""
异常类型定义。
"""

from __future__ import annotations


class ExpressionError(Exception):
    """表达式处理相关错误（基类）。"""


class ExpressionCompileError(ExpressionError):
    """
    表达式编译错误。

    生成的表达式代码无法构造为可调用对象时抛出（例如上游解析出的表达式语法错误）。

    Attributes:
        expression: 编译失败的模板文本（已去除首尾空白），供上层输出定位信息。
        reason: 底层失败原因。
    """

    is_expression_error = True

    def __init__(self, expression: str, reason: str = "") -> None:
        self.expression = expression
        self.reason = reason
        message = f"表达式编译失败: {expression}"
        if reason:
            message = f"{message}, 错误: {reason}"
        super().__init__(message)


class ConfigError(ExpressionError):
    """配置文件或配置项无效。"""
