"""
Cursor over a token buffer.

Grammar functions receive the cursor explicitly instead of sharing scanner
state; backtracking goes through an explicit position stack.
"""

from __future__ import annotations

from typing import List

from .errors import AnnotationSyntaxError
from .tokens import Token, TokenType


class TokenCursor:
    """
    Navigation over tokens with a position stack.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.position = 0
        self.length = len(tokens)

        # saved positions for save()/restore()
        self._position_stack: List[int] = []

    def current(self) -> Token:
        """Returns the current token without advancing."""
        if self.position >= self.length:
            return self._eof()
        return self.tokens[self.position]

    def peek(self, offset: int = 1) -> Token:
        """Returns the token at the given offset from the current position."""
        pos = self.position + offset
        if pos >= self.length:
            return self._eof()
        return self.tokens[pos]

    def advance(self) -> Token:
        """Moves to the next token and returns the previous one."""
        current = self.current()
        if self.position < self.length:
            self.position += 1
        return current

    def is_at_end(self) -> bool:
        return self.position >= self.length or self.current().type is TokenType.EOF

    def match(self, *token_types: TokenType) -> bool:
        """Checks whether the current token is one of the given types."""
        return self.current().type in token_types

    def consume(self, expected_type: TokenType, message: str = "") -> Token:
        """
        Consumes a token of the expected type.

        Raises:
            AnnotationSyntaxError: If the current token has another type
        """
        current = self.current()
        if current.type is not expected_type:
            raise AnnotationSyntaxError(
                message or f"Expected {expected_type.name}, got {current.type.name}",
                current,
            )
        return self.advance()

    def skip_whitespace(self) -> None:
        while self.current().type is TokenType.WHITESPACE:
            self.advance()

    def save(self) -> None:
        self._position_stack.append(self.position)

    def restore(self) -> None:
        self.position = self._position_stack.pop()

    def discard(self) -> None:
        self._position_stack.pop()

    def _eof(self) -> Token:
        end = self.tokens[-1].position if self.tokens else 0
        return Token(TokenType.EOF, "", end)


__all__ = ["TokenCursor"]
