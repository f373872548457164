"""
表达式编译（构造可调用对象）

把重组表达式代码编译为可调用对象，流程：

1. ast.parse 解析重组表达式，归类为带类型的节点：
   - LiteralNode：字符串字面量
   - SubExpressionNode：单个子表达式
   - ConcatNode：以 '' 开头的 "+" 链（字符串拼接）
2. 校验每个子表达式只使用允许的语法节点
3. 成员访问 a.b 改写为 _member(a, "b")，支持字典取值
4. ConcatNode 生成 f-string 节点，保证结果始终是字符串（不是数值相加）
5. 包装为 lambda scope: ...，compile() 后用 types.FunctionType 构造函数，
   全局环境中不含 builtins

不使用文本 eval；语法错误和不允许的节点统一抛出 ExpressionCompileError。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Union

import ast
import copy
import types

from .errors import ExpressionCompileError
from .expr_parser import SCOPE_NAME
from .registry import FilterRegistry
from uxexpr.utils.logger import get_logger


logger = get_logger()

MEMBER_HELPER = "_member"
FUNCTION_NAME = "render"


# ----------------------------------------------------------------------#
# 带类型的表达式节点
# ----------------------------------------------------------------------#
@dataclass
class LiteralNode:
    """字符串字面量。"""

    value: str


@dataclass
class SubExpressionNode:
    """表达式解析器产出的单个子表达式。"""

    node: ast.expr


@dataclass
class ConcatNode:
    """字符串拼接，parts 按源文本顺序排列。"""

    parts: List[Union[LiteralNode, SubExpressionNode]]


ExprNode = Union[LiteralNode, SubExpressionNode, ConcatNode]


def build_tree(source: str) -> ExprNode:
    """
    解析重组表达式代码，返回带类型的节点。

    代码包裹在方括号中解析，表达式可以跨行；包裹后的结果必须仍是单个列表，
    "a)(b"、"a] + [b" 之类与包裹括号配对的代码视为语法错误。

    Raises:
        SyntaxError: 代码语法错误或为空
    """
    body = ast.parse(f"[{source}\n]", mode="eval").body
    if not isinstance(body, ast.List):
        raise SyntaxError(f"invalid syntax: {source!r}")
    if not body.elts:
        raise SyntaxError("empty expression")
    if len(body.elts) == 1 and not isinstance(body.elts[0], ast.Starred):
        return _classify(body.elts[0])
    return _classify(ast.Tuple(elts=body.elts, ctx=ast.Load()))


def _classify(node: ast.expr) -> ExprNode:
    # 左结合的 "+" 链：(('' + a) + b) + c
    operands: List[ast.expr] = []
    current = node
    while isinstance(current, ast.BinOp) and isinstance(current.op, ast.Add):
        operands.append(current.right)
        current = current.left
    if operands and isinstance(current, ast.Constant) and current.value == "":
        operands.reverse()
        return ConcatNode([_leaf(operand) for operand in operands])
    return _leaf(node)


def _leaf(node: ast.expr) -> Union[LiteralNode, SubExpressionNode]:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return LiteralNode(node.value)
    return SubExpressionNode(node)


# ----------------------------------------------------------------------#
# 校验与改写
# ----------------------------------------------------------------------#
_ALLOWED_NODES = (
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.keyword,
    ast.Starred,
    ast.Attribute,
    ast.Subscript,
    ast.Slice,
    ast.Name,
    ast.Constant,
    ast.List,
    ast.Tuple,
    ast.Dict,
    ast.Set,
    ast.operator,
    ast.unaryop,
    ast.boolop,
    ast.cmpop,
    ast.Load,
)

# 格式化字段可以访问任意属性（"{0.__class__}".format(x)）
_BLOCKED_ATTRIBUTES = frozenset({"format", "format_map"})


class _SafetyValidator(ast.NodeVisitor):
    """
    语法节点白名单校验。

    - 只允许运算、比较、条件、调用、成员/下标访问、字面量与容器
    - 名称只能是作用域对象（其余标识符已被表达式解析器改写）
    - 禁止访问双下划线属性和字符串格式化方法
    """

    def generic_visit(self, node: ast.AST) -> None:
        if not isinstance(node, _ALLOWED_NODES):
            raise ValueError(f"不允许的语法: {type(node).__name__}")
        super().generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id != SCOPE_NAME or not isinstance(node.ctx, ast.Load):
            raise ValueError(f"不允许的名称: {node.id}")

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr.startswith("__") or node.attr in _BLOCKED_ATTRIBUTES:
            raise ValueError(f"不允许访问属性: {node.attr}")
        self.generic_visit(node)


class _MemberAccessTransformer(ast.NodeTransformer):
    """成员访问 a.b 改写为 _member(a, "b")。"""

    def visit_Attribute(self, node: ast.Attribute) -> ast.AST:
        self.generic_visit(node)
        call = ast.Call(
            func=ast.Name(id=MEMBER_HELPER, ctx=ast.Load()),
            args=[node.value, ast.Constant(value=node.attr)],
            keywords=[],
        )
        return ast.copy_location(call, node)


def _prepare(node: ast.expr) -> ast.expr:
    _SafetyValidator().visit(node)
    return _MemberAccessTransformer().visit(copy.deepcopy(node))


def _emit(tree: ExprNode) -> ast.expr:
    """把带类型的节点转换为可编译的 AST 表达式。"""
    if isinstance(tree, LiteralNode):
        return ast.Constant(value=tree.value)
    if isinstance(tree, SubExpressionNode):
        return _prepare(tree.node)

    values: List[ast.expr] = []
    for part in tree.parts:
        if isinstance(part, LiteralNode):
            if part.value:
                values.append(ast.Constant(value=part.value))
        else:
            # !s 转换，等价于 str(value)
            values.append(
                ast.FormattedValue(value=_prepare(part.node), conversion=ord("s"), format_spec=None)
            )
    return ast.JoinedStr(values=values)


def _make_function(body: ast.expr) -> types.FunctionType:
    """构造 lambda scope: <body> 对应的函数对象。"""
    lambda_node = ast.Lambda(
        args=ast.arguments(
            posonlyargs=[],
            args=[ast.arg(arg=SCOPE_NAME)],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=body,
    )
    module = ast.fix_missing_locations(ast.Expression(body=lambda_node))
    code = compile(module, filename="<template>", mode="eval")
    func_code = next(const for const in code.co_consts if isinstance(const, types.CodeType))
    env = {"__builtins__": {}, MEMBER_HELPER: member}
    return types.FunctionType(func_code, env, FUNCTION_NAME)


# ----------------------------------------------------------------------#
# 运行时
# ----------------------------------------------------------------------#
def member(obj: Any, name: str) -> Any:
    """成员访问：映射优先按键取值，否则取属性。"""
    if isinstance(obj, Mapping) and name in obj:
        return obj[name]
    return getattr(obj, name)


class Scope:
    """
    作用域对象（表达式中的自由标识符都从这里取值）。

    查找顺序：
    1. 数据为映射时按键取值，否则取数据对象的属性
    2. 已注册的过滤器
    找不到时抛出 NameError。
    """

    __slots__ = ("__data",)

    def __init__(self, data: Any = None) -> None:
        self.__data = {} if data is None else data

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        data = self.__data
        if isinstance(data, Mapping):
            if name in data:
                return data[name]
        elif hasattr(data, name):
            return getattr(data, name)

        func = FilterRegistry.get_filter(name)
        if func is not None:
            return func
        raise NameError(f"name '{name}' is not defined")

    def __repr__(self) -> str:
        return f"<Scope {self.__data!r}>"


class CompiledExpression:
    """
    编译后的模板表达式。

    调用时传入数据上下文（映射或任意对象），返回求值结果：
    多个 Token 时结果始终是字符串，单个表达式时返回表达式本身的值。

    Attributes:
        expression: 模板文本（已去除首尾空白）
        source: 重组表达式代码
        tree: 带类型的表达式节点
    """

    def __init__(self, expression: str, source: str, tree: ExprNode, func: types.FunctionType) -> None:
        self.expression = expression
        self.source = source
        self.tree = tree
        self._func = func

    def __call__(self, data: Any = None) -> Any:
        return self._func(Scope(data))

    def __repr__(self) -> str:
        return f"<CompiledExpression {self.expression!r}>"


def compile_to_function(source: str, expression: str) -> CompiledExpression:
    """
    把重组表达式代码编译为可调用对象。

    Args:
        source: 重组表达式代码
        expression: 模板文本（已去除首尾空白），用于错误定位

    Raises:
        ExpressionCompileError: 语法错误、使用了不允许的语法节点
    """
    try:
        tree = build_tree(source)
        func = _make_function(_emit(tree))
    except (SyntaxError, ValueError, TypeError) as exc:
        logger.warning("表达式编译失败: %s, 代码: %s, 错误: %s", expression, source, exc)
        raise ExpressionCompileError(expression, str(exc)) from exc

    logger.debug("表达式编译成功: %s -> %s", expression, source)
    return CompiledExpression(expression, source, tree, func)
