"""
Template parser.

Turns the token stream of TemplateLexer into a tuple of root elements,
handling nested block directives (#if / #else).
"""

from __future__ import annotations

from typing import Collection, List, Optional, Tuple

from .include import IncludeNode
from .lexer import TemplateLexer, TemplateToken, TokenType
from .nodes import (
    AssignNode,
    IfNode,
    InterpolationNode,
    TemplateElement,
    TextNode,
    VariableScope,
)
from ..errors import ParseError
from ..expressions import Expression, ExpressionParser
from ..expressions.lexer import Token

INCLUDE_ATTRIBUTES = ("encoding", "parse", "ignore_missing")


class TemplateParser:
    """
    Recursive parser for templates.

    Block directives collect their children until the matching end tag;
    all other directives are leaves.
    """

    def __init__(self, tokens: List[TemplateToken], template_name: str = ""):
        self.tokens = tokens
        self.position = 0
        self.template_name = template_name
        self.expression_parser = ExpressionParser()

    def parse(self) -> Tuple[TemplateElement, ...]:
        """
        Parses all tokens.

        Raises:
            ParseError: On syntax errors, with line and column
        """
        try:
            elements, terminator = self._parse_elements(stop=())
            if terminator is not None:
                raise self._error(f"Unexpected {self._describe(terminator)}", terminator)
            return tuple(elements)
        except ParseError as e:
            if not e.template_name:
                e.template_name = self.template_name
            raise

    def _parse_elements(self, stop: Collection[str]) -> Tuple[List[TemplateElement], Optional[TemplateToken]]:
        """
        Parses elements until EOF or a token named in `stop`.

        `stop` holds directive names ("else") and end tag names ("/if").

        Returns:
            (elements, the stopping token or None at EOF)
        """
        elements: List[TemplateElement] = []

        while True:
            token = self._current_token()
            if token.type == TokenType.EOF:
                return elements, None

            if token.type == TokenType.END_DIRECTIVE:
                if f"/{token.value}" in stop:
                    self._advance()
                    return elements, token
                raise self._error(f"Unexpected end tag </#{token.value}>", token)

            if token.type == TokenType.DIRECTIVE and token.value in stop:
                self._advance()
                return elements, token

            elements.append(self._parse_element())

    def _parse_element(self) -> TemplateElement:
        token = self._advance()

        if token.type == TokenType.TEXT:
            return TextNode(text=token.value, line=token.line, column=token.column)

        if token.type == TokenType.INTERPOLATION:
            expression = self._parse_whole_expression(token)
            return InterpolationNode(expression=expression, line=token.line, column=token.column)

        name = token.value
        if name == "include":
            return self._parse_include(token)
        if name == "if":
            return self._parse_if(token)
        if name == "assign":
            return self._parse_assign(token, VariableScope.LOCAL)
        if name == "global":
            return self._parse_assign(token, VariableScope.GLOBAL)
        if name == "else":
            raise self._error("#else without a matching #if", token)
        raise self._error(f"Unknown directive: #{name}", token)

    # Directives

    def _parse_include(self, token: TemplateToken) -> IncludeNode:
        """
        Parses `<#include target [encoding=e] [parse=e] [ignore_missing=e]/>`.

        Attributes may come in any order, each at most once.
        """
        tokens = list(token.expression_tokens)
        if tokens[0].type == 'EOF':
            raise self._error("#include requires a template name", token)

        target, pos = self._parse_expression_at(tokens, 0, token)
        attributes = {}

        while tokens[pos].type != 'EOF':
            name_token = tokens[pos]
            if name_token.type != 'IDENTIFIER' or not self._is_assignment(tokens, pos + 1):
                raise self._error(f"Unexpected token '{name_token.value}' in #include", token)
            if name_token.value not in INCLUDE_ATTRIBUTES:
                raise self._error(
                    f"Unsupported #include parameter {name_token.value!r}. "
                    f"Supported parameters are: {', '.join(INCLUDE_ATTRIBUTES)}",
                    token,
                )
            if name_token.value in attributes:
                raise self._error(f"Duplicate #include parameter {name_token.value!r}", token)

            value, pos = self._parse_expression_at(tokens, pos + 2, token)
            attributes[name_token.value] = value

        return IncludeNode(
            template_name=target,
            encoding=attributes.get("encoding"),
            parse=attributes.get("parse"),
            ignore_missing=attributes.get("ignore_missing"),
            line=token.line,
            column=token.column,
        )

    def _parse_if(self, token: TemplateToken) -> IfNode:
        if token.self_closing:
            raise self._error("#if must not be self-closing", token)
        condition = self._parse_whole_expression(token)

        then_elements, terminator = self._parse_elements(stop=("else", "/if"))
        if terminator is None:
            raise self._error("Unclosed #if, expected </#if>", token)

        else_elements = None
        if terminator.type == TokenType.DIRECTIVE:
            if len(terminator.expression_tokens) > 1:
                raise self._error("#else takes no parameters", terminator)
            else_elements, end = self._parse_elements(stop=("/if",))
            if end is None:
                raise self._error("Unclosed #if, expected </#if>", token)

        return IfNode(
            condition=condition,
            then_elements=tuple(then_elements),
            else_elements=tuple(else_elements) if else_elements is not None else None,
            line=token.line,
            column=token.column,
        )

    def _parse_assign(self, token: TemplateToken, scope: VariableScope) -> AssignNode:
        tokens = list(token.expression_tokens)
        if tokens[0].type != 'IDENTIFIER' or not self._is_assignment(tokens, 1):
            raise self._error(f"Expected 'name = value' in #{token.value}", token)

        expression, pos = self._parse_expression_at(tokens, 2, token)
        if tokens[pos].type != 'EOF':
            raise self._error(f"Unexpected token '{tokens[pos].value}' in #{token.value}", token)

        return AssignNode(
            name=tokens[0].value,
            expression=expression,
            scope=scope,
            line=token.line,
            column=token.column,
        )

    # Expressions

    def _parse_whole_expression(self, token: TemplateToken) -> Expression:
        tokens = list(token.expression_tokens)
        if tokens[0].type == 'EOF':
            raise self._error("Expected an expression", token)
        expression, pos = self._parse_expression_at(tokens, 0, token)
        if tokens[pos].type != 'EOF':
            raise self._error(f"Unexpected token '{tokens[pos].value}'", token)
        return expression

    def _parse_expression_at(self, tokens: List[Token], pos: int, token: TemplateToken) -> Tuple[Expression, int]:
        try:
            return self.expression_parser.parse_at(tokens, pos)
        except ParseError as e:
            if not e.line:
                e.line, e.column = token.line, token.column
            raise

    @staticmethod
    def _is_assignment(tokens: List[Token], pos: int) -> bool:
        return pos < len(tokens) and tokens[pos].type == 'OPERATOR' and tokens[pos].value == "="

    # Token helpers

    def _current_token(self) -> TemplateToken:
        return self.tokens[self.position]

    def _advance(self) -> TemplateToken:
        token = self.tokens[self.position]
        if token.type != TokenType.EOF:
            self.position += 1
        return token

    def _error(self, message: str, token: TemplateToken) -> ParseError:
        return ParseError(message, line=token.line, column=token.column, template_name=self.template_name)

    @staticmethod
    def _describe(token: TemplateToken) -> str:
        if token.type == TokenType.END_DIRECTIVE:
            return f"end tag </#{token.value}>"
        return f"#{token.value}"


def parse_template(text: str, template_name: str = "") -> Tuple[TemplateElement, ...]:
    """
    Parses template source text into root elements.

    Raises:
        ParseError: On syntax errors (StaticSemanticError for literal
                    attributes of the wrong shape)
    """
    try:
        tokens = TemplateLexer(text).tokenize()
    except ParseError as e:
        if not e.template_name:
            e.template_name = template_name
        raise
    return TemplateParser(tokens, template_name).parse()


__all__ = ["TemplateParser", "parse_template", "INCLUDE_ATTRIBUTES"]
