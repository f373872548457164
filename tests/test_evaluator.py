"""
可调用对象构造测试

覆盖重组表达式的类型化节点、语法白名单、作用域取值与成员访问。
"""

import ast

import pytest

import uxexpr  # noqa: F401
from uxexpr.core.errors import ExpressionCompileError
from uxexpr.core.evaluator import (
    ConcatNode,
    LiteralNode,
    Scope,
    SubExpressionNode,
    build_tree,
    compile_to_function,
    member,
)


def test_build_tree_concatenation():
    tree = build_tree("'' + (scope.a) + 'x' + (scope.b + 1)")
    assert isinstance(tree, ConcatNode)
    kinds = [type(part) for part in tree.parts]
    assert kinds == [SubExpressionNode, LiteralNode, SubExpressionNode]
    assert tree.parts[1].value == "x"
    assert isinstance(tree.parts[2].node, ast.BinOp)


def test_build_tree_single_expression_is_not_concatenation():
    tree = build_tree("scope.a + scope.b")
    assert isinstance(tree, SubExpressionNode)


def test_build_tree_literal():
    assert build_tree("'hi'") == LiteralNode("hi")


def test_compile_concatenation_returns_string():
    render = compile_to_function("'' + (scope.a) + (scope.b)", "{{a}}{{b}}")
    assert render({"a": 1.5, "b": None}) == "1.5None"


def test_compile_literal():
    assert compile_to_function("'hi'", "hi")() == "hi"


def test_compiled_tree_is_kept_untransformed():
    render = compile_to_function("scope.a.b", "{{a.b}}")
    assert isinstance(render.tree, SubExpressionNode)
    assert isinstance(render.tree.node, ast.Attribute)
    assert render({"a": {"b": 7}}) == 7


def test_unrewritten_name_is_rejected():
    with pytest.raises(ExpressionCompileError) as excinfo:
        compile_to_function("__import__('os')", "{{x}}")
    assert excinfo.value.expression == "{{x}}"
    assert "__import__" in str(excinfo.value)


def test_builtins_are_not_available():
    render = compile_to_function("scope.len(scope.items)", "{{len(items)}}")
    with pytest.raises(NameError):
        render({"items": [1, 2]})


def test_member_prefers_mapping_keys():
    assert member({"keys": 1}, "keys") == 1
    assert callable(member({}, "keys"))
    with pytest.raises(AttributeError):
        member(object(), "missing")


def test_scope_lookup_order():
    assert Scope({"x": 1}).x == 1
    assert Scope({"upper": "shadowed"}).upper == "shadowed"
    assert Scope({}).upper("a") == "A"

    class Data:
        y = 2

    assert Scope(Data()).y == 2
    assert Scope().upper("b") == "B"
    with pytest.raises(NameError):
        Scope({}).nothing


def test_scope_does_not_expose_dunder_names():
    with pytest.raises(AttributeError):
        Scope({"__len__": 1}).__len__
