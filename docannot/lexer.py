"""
Lexer for the tag section of a documentation block.

Splits text into the meaningful pieces of the tag language:
- Quoted strings (opaque, escapes kept verbatim)
- Structural symbols @ ( ) , = { } and a single colon
- Whitespace runs (kept, newlines terminate plain tags)
- Everything in between as raw words
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .tokens import SYMBOLS, Token, TokenType

logger = logging.getLogger(__name__)


class TagLexer:
    """
    Splits a tag section into tokens.

    Text that matches none of TOKEN_SPECS is collected into WORD tokens, so
    the lexer never fails: malformed input is reported by the parser.
    """

    # (regex_pattern, token_type); None means "look up in SYMBOLS"
    TOKEN_SPECS = [
        (r"'(?:\\.|[^'\\])*'", TokenType.STRING),
        (r'"(?:\\.|[^"\\])*"', TokenType.STRING),
        (r"\s+", TokenType.WHITESPACE),
        # a lone colon; "::" stays inside words (Class::CONST)
        (r"(?<!:):(?!:)", None),
        (r"[@(),={}]", None),
    ]

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern), token_type)
            for pattern, token_type in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Splits text into tokens.

        Args:
            text: Tag section to tokenize

        Returns:
            List of tokens ending with EOF
        """
        tokens: List[Token] = []
        position = 0
        word_start = -1

        while position < len(text):
            token = self._match_at(text, position)
            if token is None:
                if word_start < 0:
                    word_start = position
                position += 1
                continue

            if word_start >= 0:
                tokens.append(Token(TokenType.WORD, text[word_start:position], word_start))
                word_start = -1
            tokens.append(token)
            position += len(token.value)

        if word_start >= 0:
            tokens.append(Token(TokenType.WORD, text[word_start:], word_start))

        tokens.append(Token(TokenType.EOF, "", position))
        logger.debug("Tokenized tag section into %d tokens", len(tokens))
        return tokens

    def _match_at(self, text: str, position: int) -> Optional[Token]:
        for pattern, token_type in self._compiled_patterns:
            match = pattern.match(text, position)
            if match and match.group(0):
                value = match.group(0)
                return Token(token_type or SYMBOLS[value], value, position)
        return None


__all__ = ["TagLexer"]
