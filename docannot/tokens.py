"""
Lexical types for tag blocks.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Token kinds produced by TagLexer."""

    AT = "AT"                # @
    LPAREN = "LPAREN"        # (
    RPAREN = "RPAREN"        # )
    COMMA = "COMMA"          # ,
    EQUALS = "EQUALS"        # =
    LBRACE = "LBRACE"        # {
    RBRACE = "RBRACE"        # }
    COLON = "COLON"          # : (never part of ::)

    STRING = "STRING"        # quoted literal, quotes included
    WHITESPACE = "WHITESPACE"
    WORD = "WORD"            # raw text between structural tokens
    EOF = "EOF"


SYMBOLS = {
    "@": TokenType.AT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ":": TokenType.COLON,
}

# Numeric literals; only unsigned digit runs are integers
INTEGER_LITERAL = re.compile(r"[0-9]+")
NUMERIC_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class Token:
    """
    Token with its offset in the tag section.

    Attributes:
        type: Token kind
        value: Raw text of the token
        position: Character offset in the tokenized text
    """
    type: TokenType
    value: str
    position: int

    @property
    def has_newline(self) -> bool:
        return self.type is TokenType.WHITESPACE and "\n" in self.value

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


__all__ = ["TokenType", "Token", "SYMBOLS", "INTEGER_LITERAL", "NUMERIC_LITERAL"]
