"""
Template lexer.

Splits template source into text runs, interpolations, directive tags and
end tags. The contents of interpolations and tags are tokenized by the
expression lexer; comments are dropped here.
"""

from __future__ import annotations

import bisect
import enum
import re
from dataclasses import dataclass
from typing import List, Tuple

from ..errors import ParseError
from ..expressions.lexer import ExpressionLexer, Token


class TokenType(enum.Enum):
    """Types of template-level tokens."""
    TEXT = "TEXT"
    INTERPOLATION = "INTERPOLATION"     # ${ ... }
    DIRECTIVE = "DIRECTIVE"             # <#name ...> or <#name .../>
    END_DIRECTIVE = "END_DIRECTIVE"     # </#name>
    EOF = "EOF"


@dataclass(frozen=True)
class TemplateToken:
    """
    Template-level token with position information.

    For INTERPOLATION and DIRECTIVE tokens `expression_tokens` holds the
    tokens of the content (terminator excluded, EOF appended). For
    directives `value` is the directive name.
    """
    type: TokenType
    value: str
    line: int
    column: int
    expression_tokens: Tuple[Token, ...] = ()
    self_closing: bool = False

    def __repr__(self) -> str:
        return f"TemplateToken({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class TemplateLexer:
    """
    Lexer for template source text.

    Special sequences: `${` starts an interpolation, `<#--` a comment,
    `<#name` a directive tag and `</#name>` an end tag. Everything else is
    text.
    """

    _SPECIAL = re.compile(r'\$\{|<#--|</?#')
    _NAME = re.compile(r'[A-Za-z_][\w]*')
    _END_TAG_REST = re.compile(r'\s*>')

    def __init__(self, text: str):
        self.text = text
        self.expression_lexer = ExpressionLexer()
        self._line_starts = [0] + [m.end() for m in re.finditer(r'\n', text)]

    def tokenize(self) -> List[TemplateToken]:
        """
        Tokenizes the whole template.

        Raises:
            ParseError: On unterminated constructs or invalid expressions
        """
        tokens: List[TemplateToken] = []
        position = 0
        length = len(self.text)

        while position < length:
            match = self._SPECIAL.search(self.text, position)
            if not match:
                tokens.append(self._text_token(position, length))
                break

            if match.start() > position:
                tokens.append(self._text_token(position, match.start()))

            marker = match.group(0)
            start = match.start()
            if marker == "<#--":
                position = self._skip_comment(start)
            elif marker == "${":
                token, position = self._lex_interpolation(start)
                tokens.append(token)
            elif marker == "<#":
                token, position = self._lex_directive(start)
                tokens.append(token)
            else:
                token, position = self._lex_end_directive(start)
                tokens.append(token)

        line, column = self.location(length)
        tokens.append(TemplateToken(TokenType.EOF, "", line, column))
        return tokens

    def location(self, position: int) -> Tuple[int, int]:
        """1-based (line, column) of an offset in the source text."""
        index = bisect.bisect_right(self._line_starts, position) - 1
        return index + 1, position - self._line_starts[index] + 1

    def _error(self, message: str, position: int) -> ParseError:
        line, column = self.location(position)
        return ParseError(message, line=line, column=column)

    def _text_token(self, start: int, end: int) -> TemplateToken:
        line, column = self.location(start)
        return TemplateToken(TokenType.TEXT, self.text[start:end], line, column)

    def _skip_comment(self, start: int) -> int:
        end = self.text.find("-->", start + 4)
        if end < 0:
            raise self._error("Unclosed comment", start)
        return end + 3

    def _lex_interpolation(self, start: int) -> Tuple[TemplateToken, int]:
        tokens, end = self._tokenize_content(start + 2, {"}"}, start)
        if len(tokens) < 2 or tokens[-2].value != "}":
            raise self._error("Unclosed interpolation, expected '}'", start)
        line, column = self.location(start)
        content = tuple(tokens[:-2]) + (tokens[-1],)
        return TemplateToken(TokenType.INTERPOLATION, "${", line, column, content), end

    def _lex_directive(self, start: int) -> Tuple[TemplateToken, int]:
        name_match = self._NAME.match(self.text, start + 2)
        if not name_match:
            raise self._error("Expected a directive name after '<#'", start)
        name = name_match.group(0)

        tokens, end = self._tokenize_content(name_match.end(), {">", "/>"}, start)
        if len(tokens) < 2 or tokens[-2].type != 'TAG_END':
            raise self._error(f"Unclosed #{name} tag, expected '>' or '/>'", start)

        line, column = self.location(start)
        content = tuple(tokens[:-2]) + (tokens[-1],)
        return TemplateToken(
            TokenType.DIRECTIVE,
            name,
            line,
            column,
            content,
            self_closing=tokens[-2].value == "/>",
        ), end

    def _lex_end_directive(self, start: int) -> Tuple[TemplateToken, int]:
        name_match = self._NAME.match(self.text, start + 3)
        if not name_match:
            raise self._error("Expected a directive name after '</#'", start)
        rest = self._END_TAG_REST.match(self.text, name_match.end())
        if not rest:
            raise self._error(f"Unclosed end tag </#{name_match.group(0)}", start)
        line, column = self.location(start)
        return TemplateToken(TokenType.END_DIRECTIVE, name_match.group(0), line, column), rest.end()

    def _tokenize_content(self, position: int, stop_values, tag_start: int) -> Tuple[List[Token], int]:
        try:
            return self.expression_lexer.tokenize_until(self.text, position, stop_values)
        except ParseError as e:
            if not e.line:
                e.line, e.column = self.location(tag_start)
            raise


__all__ = ["TokenType", "TemplateToken", "TemplateLexer"]
