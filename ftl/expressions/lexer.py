"""
Lexer for template expressions.

Splits the text of an expression (an interpolation body or the attributes
of a directive tag) into tokens:
- String, number and boolean literals
- Identifiers (variable names, attribute names)
- Operators (==, !=, &&, ||, !, +, =) and parentheses
- Tag terminators (/> and >) and the interpolation terminator (})
- Whitespace (ignored)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Collection, List, Optional, Tuple

from ..errors import ParseError


@dataclass(frozen=True)
class Token:
    """
    Expression token.

    Attributes:
        type: STRING, NUMBER, KEYWORD, IDENTIFIER, OPERATOR, SYMBOL, TAG_END or EOF
        value: Token text exactly as in the source
        position: Offset in the source text
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ExpressionLexer:
    """
    Regex-table lexer for expressions.

    The lexer can stop right after a terminator token, which lets the
    template lexer hand it the rest of the template text and learn where
    the tag or interpolation ends.
    """

    # (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        (r'\s+', 'WHITESPACE', True),

        (r'"(?:[^"\\]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\]|\\.)*'", 'STRING', False),
        (r'\d+(?:\.\d+)?', 'NUMBER', False),

        # Longer operators must come before their prefixes
        (r'/>', 'TAG_END', False),
        (r'==|!=|&&|\|\|', 'OPERATOR', False),
        (r'[!+=]', 'OPERATOR', False),
        (r'>', 'TAG_END', False),
        (r'[()}]', 'SYMBOL', False),

        (r'[A-Za-z_][\w]*', 'IDENTIFIER', False),

        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {'true', 'false'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Tokenizes a complete expression.

        Returns:
            Tokens, with an EOF token at the end

        Raises:
            ParseError: On a character that cannot start any token
        """
        tokens, _ = self.tokenize_until(text, 0, stop_values=())
        return tokens

    def tokenize_until(
        self,
        text: str,
        start: int,
        stop_values: Collection[str],
    ) -> Tuple[List[Token], int]:
        """
        Tokenizes from `start` until a token whose value is in `stop_values`.

        The terminating token is included in the result, followed by EOF.
        If the text ends first, the token list simply ends with EOF and the
        caller reports the missing terminator.

        Returns:
            (tokens, position right after the last consumed character)
        """
        tokens: List[Token] = []
        position = start
        depth = 0

        while position < len(text):
            token, position = self._next_token(text, position)
            if token is None:
                continue
            tokens.append(token)

            # A terminator inside parentheses does not end the expression
            if token.value == "(":
                depth += 1
            elif token.value == ")":
                depth = max(0, depth - 1)
            elif depth == 0 and token.value in stop_values:
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens, position

    def _next_token(self, text: str, position: int) -> Tuple[Optional[Token], int]:
        for pattern, token_type, ignore in self._compiled_patterns:
            match = pattern.match(text, position)
            if not match:
                continue
            value = match.group(0)
            end = match.end()
            if ignore:
                return None, end
            if token_type == 'UNKNOWN':
                if value in ('"', "'"):
                    raise ParseError(f"Unterminated string literal starting at position {position}")
                raise ParseError(f"Unexpected character '{value}' at position {position}")
            if token_type == 'IDENTIFIER' and value in self.KEYWORDS:
                token_type = 'KEYWORD'
            return Token(type=token_type, value=value, position=position), end

        # The UNKNOWN pattern matches any character, so this is unreachable
        raise ParseError(f"Failed to tokenize at position {position}")


__all__ = ["Token", "ExpressionLexer"]
