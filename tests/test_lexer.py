"""
Tests for the tag lexer and the token cursor.
"""

import pytest

from docannot.cursor import TokenCursor
from docannot.errors import AnnotationSyntaxError
from docannot.lexer import TagLexer
from docannot.tokens import Token, TokenType


class TestTagLexer:

    def setup_method(self):
        self.lexer = TagLexer()

    def _types(self, text):
        return [t.type for t in self.lexer.tokenize(text)]

    def test_empty_string(self):
        """Test tokenization of empty string"""
        tokens = self.lexer.tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.EOF

    def test_annotation_with_arguments(self):
        """Test a type-tag with positional and keyed arguments"""
        tokens = self.lexer.tokenize("@Foo('x', n: 3)")

        expected = [
            Token(TokenType.AT, "@", 0),
            Token(TokenType.WORD, "Foo", 1),
            Token(TokenType.LPAREN, "(", 4),
            Token(TokenType.STRING, "'x'", 5),
            Token(TokenType.COMMA, ",", 8),
            Token(TokenType.WHITESPACE, " ", 9),
            Token(TokenType.WORD, "n", 10),
            Token(TokenType.COLON, ":", 11),
            Token(TokenType.WHITESPACE, " ", 12),
            Token(TokenType.WORD, "3", 13),
            Token(TokenType.RPAREN, ")", 14),
            Token(TokenType.EOF, "", 15),
        ]
        assert tokens == expected

    def test_symbols(self):
        """Test recognition of every structural symbol"""
        cases = {
            "@": TokenType.AT,
            "(": TokenType.LPAREN,
            ")": TokenType.RPAREN,
            ",": TokenType.COMMA,
            "=": TokenType.EQUALS,
            "{": TokenType.LBRACE,
            "}": TokenType.RBRACE,
            ":": TokenType.COLON,
        }
        for symbol, token_type in cases.items():
            assert self._types(symbol) == [token_type, TokenType.EOF]

    def test_double_colon_stays_in_word(self):
        """Test that Class::CONST is a single word"""
        tokens = self.lexer.tokenize("value: Foo::BAR")
        words = [t.value for t in tokens if t.type is TokenType.WORD]
        assert words == ["value", "Foo::BAR"]
        assert sum(1 for t in tokens if t.type is TokenType.COLON) == 1

    def test_quoted_strings_are_opaque(self):
        """Test that symbols inside quotes are not tokenized"""
        tokens = self.lexer.tokenize("""'a, (b)' "c: {d}" """)
        strings = [t.value for t in tokens if t.type is TokenType.STRING]
        assert strings == ["'a, (b)'", '"c: {d}"']

    def test_escaped_quote_inside_string(self):
        """Test that backslash escapes are kept verbatim"""
        tokens = self.lexer.tokenize(r"'it\'s'")
        assert tokens[0].type is TokenType.STRING
        assert tokens[0].value == r"'it\'s'"

    def test_unterminated_quote_becomes_word(self):
        """Test that an unterminated quote does not fail tokenization"""
        tokens = self.lexer.tokenize('(invalid")')
        assert tokens[1] == Token(TokenType.WORD, 'invalid"', 1)
        assert tokens[2].type is TokenType.RPAREN

    def test_whitespace_with_newline(self):
        """Test that newline runs are flagged"""
        tokens = self.lexer.tokenize("@a x\n  @b")
        whitespace = [t for t in tokens if t.type is TokenType.WHITESPACE]
        assert [t.has_newline for t in whitespace] == [False, True]

    def test_words_between_symbols(self):
        """Test raw text accumulation between structural tokens"""
        assert self._types("@see foo.bar") == [
            TokenType.AT,
            TokenType.WORD,
            TokenType.WHITESPACE,
            TokenType.WORD,
            TokenType.EOF,
        ]


class TestTokenCursor:

    def setup_method(self):
        self.cursor = TokenCursor(TagLexer().tokenize("@a (b)"))

    def test_navigation(self):
        """Test current/peek/advance"""
        assert self.cursor.current().type is TokenType.AT
        assert self.cursor.peek().value == "a"
        assert self.cursor.advance().type is TokenType.AT
        assert self.cursor.current().value == "a"

    def test_match_and_consume(self):
        """Test matching and consuming tokens"""
        assert self.cursor.match(TokenType.WORD, TokenType.AT)
        self.cursor.consume(TokenType.AT)
        with pytest.raises(AnnotationSyntaxError, match="Expected tag name at position 1"):
            self.cursor.consume(TokenType.LPAREN, "Expected tag name")

    def test_skip_whitespace(self):
        """Test skipping whitespace runs"""
        self.cursor.advance()
        self.cursor.advance()
        self.cursor.skip_whitespace()
        assert self.cursor.current().type is TokenType.LPAREN

    def test_save_restore(self):
        """Test backtracking through the position stack"""
        self.cursor.save()
        self.cursor.advance()
        self.cursor.advance()
        self.cursor.restore()
        assert self.cursor.current().type is TokenType.AT

        self.cursor.save()
        self.cursor.advance()
        self.cursor.discard()
        assert self.cursor.current().value == "a"

    def test_end_of_input(self):
        """Test that reading past the end keeps returning EOF"""
        for _ in range(10):
            self.cursor.advance()
        assert self.cursor.is_at_end()
        assert self.cursor.current().type is TokenType.EOF
        assert self.cursor.peek(5).type is TokenType.EOF
