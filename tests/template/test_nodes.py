"""
Tests for the common element protocol and the basic elements.
"""

from unittest.mock import Mock

import pytest

from ftl.errors import NonBooleanError
from ftl.expressions import BooleanLiteral, Identifier, StringLiteral, parse_expression
from ftl.model import SimpleScalar
from ftl.template.nodes import (
    AssignNode,
    DefaultAttr,
    DeferredAttr,
    FoldedAttr,
    IfNode,
    InterpolationNode,
    ParameterRole,
    TextNode,
    VariableScope,
    attr_expression,
)

from tests.infrastructure.engine_utils import make_environment


class TestParameterRole:

    def test_labels(self):
        assert ParameterRole.TEMPLATE_NAME.label == "template name"
        assert str(ParameterRole.IGNORE_MISSING_PARAMETER) == '"ignore_missing" parameter'

    def test_all_roles_present(self):
        names = {role.name for role in ParameterRole}
        assert {
            "TEMPLATE_NAME", "PARSE_PARAMETER", "ENCODING_PARAMETER", "IGNORE_MISSING_PARAMETER",
            "CONTENT", "CONDITION", "ASSIGNMENT_TARGET", "ASSIGNMENT_SOURCE", "VARIABLE_SCOPE",
        } <= names


class TestAttributeStates:

    def test_attr_expression(self):
        exp = BooleanLiteral(True)
        assert attr_expression(DefaultAttr(True)) is None
        assert attr_expression(FoldedAttr(True, exp)) is exp
        assert attr_expression(DeferredAttr(exp)) is exp


class TestTextNode:

    def test_accept_writes_text(self):
        env = Mock()
        assert TextNode("abc").accept(env) is None
        env.out.write.assert_called_once_with("abc")

    def test_dump(self):
        node = TextNode("a\nb")
        assert node.dump(True) == "a\nb"
        assert node.dump(False) == 'text "a\\nb"'

    def test_long_text_abbreviated_in_trace_form(self):
        node = TextNode("x" * 100)
        assert node.dump(False).endswith('..."')

    def test_parameters(self):
        node = TextNode("abc")
        assert node.parameter_count() == 1
        assert node.parameter_value(0) == "abc"
        assert node.parameter_role(0) is ParameterRole.CONTENT
        with pytest.raises(IndexError):
            node.parameter_value(1)

    def test_not_shown_in_stack_trace(self):
        assert TextNode("abc").is_shown_in_stack_trace() is False


class TestInterpolationNode:

    def test_accept(self):
        env = Mock()
        env.get_variable.return_value = SimpleScalar("Ann")
        node = InterpolationNode(Identifier("name"))
        assert node.accept(env) is None
        env.out.write.assert_called_once_with("Ann")

    def test_dump(self):
        node = InterpolationNode(parse_expression('a + "b"'))
        assert node.dump(True) == '${a + "b"}'
        assert node.node_type_symbol == "${...}"

    def test_negative_index(self):
        with pytest.raises(IndexError):
            InterpolationNode(Identifier("x")).parameter_role(-1)


class TestIfNode:

    def test_selects_then_branch(self):
        then = (TextNode("yes"),)
        node = IfNode(BooleanLiteral(True), then, (TextNode("no"),))
        assert node.accept(Mock()) == list(then)

    def test_selects_else_branch(self):
        otherwise = (TextNode("no"),)
        node = IfNode(BooleanLiteral(False), (TextNode("yes"),), otherwise)
        assert node.accept(Mock()) == list(otherwise)

    def test_no_else_returns_none(self):
        node = IfNode(BooleanLiteral(False), (TextNode("yes"),))
        assert node.accept(Mock()) is None

    def test_condition_must_be_boolean(self):
        node = IfNode(StringLiteral("true"), ())
        with pytest.raises(NonBooleanError):
            node.accept(Mock())

    def test_dump(self):
        node = IfNode(Identifier("x"), (TextNode("a"),), (TextNode("b"),))
        assert node.dump(True) == "<#if x>a<#else>b</#if>"
        assert node.dump(False) == "#if x"
        assert node.parameter_role(0) is ParameterRole.CONDITION

    def test_not_a_repeater(self):
        assert IfNode(Identifier("x")).is_nested_block_repeater() is False


class TestAssignNode:

    def test_local_and_global(self):
        env = make_environment()
        AssignNode("a", StringLiteral("1")).accept(env)
        AssignNode("b", StringLiteral("2"), VariableScope.GLOBAL).accept(env)
        assert env.get_variable("a").get_as_string() == "1"
        assert "b" in env.globals

    def test_dump_and_parameters(self):
        node = AssignNode("x", parse_expression("1 + 2"), VariableScope.GLOBAL)
        assert node.dump(True) == "<#global x = 1 + 2/>"
        assert node.dump(False) == "#global x = 1 + 2"
        assert node.parameter_count() == 3
        assert [node.parameter_role(i) for i in range(3)] == [
            ParameterRole.ASSIGNMENT_TARGET,
            ParameterRole.ASSIGNMENT_SOURCE,
            ParameterRole.VARIABLE_SCOPE,
        ]
        assert node.parameter_value(0) == "x"
        assert node.parameter_value(2) == "global"
