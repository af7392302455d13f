"""
Recursive descent parser for tag blocks.

Turns a documentation block into a Comment: the description text, plain
tags (`@name value`, `@name {list}`, `@flag`) and annotation instances
(`@Type(args)`) built through the InstanceBuilder.
"""

from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from .builder import InstanceBuilder
from .comment import Comment
from .cursor import TokenCursor
from .errors import AnnotationSyntaxError
from .lexer import TagLexer
from .names import NO_MATCH, NameResolver
from .targets import Placement
from .tokens import INTEGER_LITERAL, NUMERIC_LITERAL, Token, TokenType
from .values import TagList

logger = logging.getLogger(__name__)

# First line that starts a tag section
_TAG_SECTION = re.compile(r"^[ \t]*(?=@[A-Za-z])", re.MULTILINE)
_LINE_DECORATION = re.compile(r"^[ \t]*\*[ \t]?", re.MULTILINE)
_OPEN_FENCE = re.compile(r"^\s*/\*+")
_CLOSE_FENCE = re.compile(r"\s*\*+/\s*$")

_BAREWORD = re.compile(r"^[A-Za-z0-9_]+$")

_KEYWORDS = {"true": True, "false": False, "null": None}


def strip_decoration(raw: str) -> str:
    """
    Normalizes a documentation block before tag scanning.

    `/** ... */` blocks lose their fences and the leading `*` of each line;
    plain docstrings are only dedented, so `*args` lines survive.
    """
    if not _OPEN_FENCE.match(raw):
        return inspect.cleandoc(raw)
    text = _OPEN_FENCE.sub("", raw)
    text = _CLOSE_FENCE.sub("", text)
    text = _LINE_DECORATION.sub("", text)
    return inspect.cleandoc(text)


@dataclass
class _Resolved:
    """Pending list item that is already a value (nested list or instance)."""
    value: Any
    token: Token


@dataclass
class _Context:
    scope: Mapping[str, Any]
    placement: Placement


class AnnotationParser:
    """
    Parser of documentation blocks.

    Two list grammars are used:
    - annotation arguments `(...)` and the lists nested in them resolve bare
      words as constants (`Type::CONST`, module constants) or class names;
    - plain tag lists `@tag {...}` keep bare `[A-Za-z0-9_]+` words as strings.
    """

    def __init__(self, resolver: NameResolver, builder: InstanceBuilder, lexer: Optional[TagLexer] = None):
        self._resolver = resolver
        self._builder = builder
        self._lexer = lexer or TagLexer()

    def parse(
        self,
        raw: str,
        placement: Placement = Placement.CLASS,
        scope: Optional[Mapping[str, Any]] = None,
    ) -> Comment:
        """
        Parses one documentation block.

        Args:
            raw: Docstring or `/** ... */` comment text
            placement: Where the documented element sits; checked against
                the targets of every top-level annotation
            scope: Names visible to the documented element (module globals)

        Returns:
            New Comment with description, tags and annotations

        Raises:
            AnnotationSyntaxError: On malformed tag syntax
            AnnotationError: On unknown types or schema violations
        """
        text = strip_decoration(raw or "")
        match = _TAG_SECTION.search(text)
        if match is None:
            return Comment(text.strip())

        comment = Comment(text[:match.start()].strip())
        cursor = TokenCursor(self._lexer.tokenize(text[match.start():]))
        ctx = _Context(scope=scope or {}, placement=Placement(placement))

        while not cursor.is_at_end():
            if cursor.match(TokenType.AT):
                self._parse_tag(cursor, ctx, comment)
            else:
                # free text between tags
                cursor.advance()

        logger.debug(
            "Parsed block: tags=%s, annotations=%s",
            list(comment.tags), list(comment.get_annotations()),
        )
        return comment

    # -------------------- Tags --------------------

    def _parse_tag(self, cursor: TokenCursor, ctx: _Context, comment: Comment) -> None:
        cursor.save()
        cursor.consume(TokenType.AT)
        if not cursor.match(TokenType.WORD):
            # a lone "@" inside free text
            cursor.restore()
            cursor.advance()
            return
        cursor.discard()
        name = cursor.advance()

        if cursor.match(TokenType.LPAREN):
            cursor.advance()
            arguments = self._parse_list(cursor, TokenType.RPAREN, ctx, resolve_names=True)
            type_id = self._resolver.resolve(name.value, ctx.scope)
            comment.add_annotation(type_id, self._builder.build(type_id, arguments, ctx.placement))
        else:
            comment.add(name.value, self._parse_plain_value(cursor, ctx))

    def _parse_plain_value(self, cursor: TokenCursor, ctx: _Context) -> Union[str, bool, TagList]:
        parts: List[str] = []
        value: Optional[TagList] = None

        while not (cursor.is_at_end() or cursor.match(TokenType.AT) or cursor.current().has_newline):
            token = cursor.advance()
            if value is not None:
                if token.type is TokenType.WHITESPACE:
                    continue
                raise AnnotationSyntaxError("Unexpected data after list", token)
            if token.type is TokenType.LBRACE:
                value = self._parse_list(cursor, TokenType.RBRACE, ctx, resolve_names=False)
                continue
            parts.append(token.value)

        if value is not None:
            return value
        text = "".join(parts).strip()
        return text if text else True

    def _parse_nested(self, cursor: TokenCursor, ctx: _Context) -> Any:
        name = cursor.consume(TokenType.WORD, "Expected annotation name")
        if not cursor.match(TokenType.LPAREN):
            raise AnnotationSyntaxError("Inner annotations must be type annotations", name)
        cursor.advance()
        arguments = self._parse_list(cursor, TokenType.RPAREN, ctx, resolve_names=True)
        type_id = self._resolver.resolve(name.value, ctx.scope)
        return self._builder.build(type_id, arguments, Placement.ANNOTATION)

    # -------------------- Lists --------------------

    def _parse_list(
        self,
        cursor: TokenCursor,
        closing: TokenType,
        ctx: _Context,
        resolve_names: bool,
    ) -> TagList:
        """
        Parses list entries up to the closing delimiter (already past the opener).

        Entry := (Key ':')? Item; Item := word | string | '{' List '}' | '@' Type '(' List ')'
        """
        result = TagList()
        key: Optional[str] = None
        pending: Union[Token, _Resolved, None] = None

        while True:
            token = cursor.current()
            if token.type is TokenType.EOF:
                raise AnnotationSyntaxError("Unexpected end of comment", token)
            cursor.advance()

            if token.type is TokenType.WHITESPACE:
                continue

            if token.type is TokenType.LBRACE:
                if pending is not None:
                    raise AnnotationSyntaxError("Unexpected {", token)
                pending = _Resolved(self._parse_list(cursor, TokenType.RBRACE, ctx, resolve_names), token)

            elif token.type is TokenType.AT:
                if pending is not None:
                    raise AnnotationSyntaxError("Unexpected @", token)
                pending = _Resolved(self._parse_nested(cursor, ctx), token)

            elif token.type is TokenType.COMMA:
                if pending is None:
                    raise AnnotationSyntaxError("Unexpected ,", token)
                self._flush(result, key, pending, ctx, closing, resolve_names)
                key = pending = None

            elif token.type is TokenType.COLON:
                if not isinstance(pending, Token) or key is not None:
                    raise AnnotationSyntaxError("Unexpected :", token)
                if not pending.value.isalpha():
                    raise AnnotationSyntaxError("Keys must be alphabetic", pending)
                key = pending.value
                pending = None

            elif token.type is closing:
                if pending is not None:
                    self._flush(result, key, pending, ctx, closing, resolve_names)
                elif key is not None:
                    raise AnnotationSyntaxError(f"Missing value for key {key}", token)
                return result

            elif token.type in (TokenType.WORD, TokenType.STRING):
                if pending is not None:
                    raise AnnotationSyntaxError("Unexpected data", token)
                pending = token

            else:
                raise AnnotationSyntaxError(f"Unexpected {token.value}", token)

    def _flush(
        self,
        result: TagList,
        key: Optional[str],
        pending: Union[Token, _Resolved],
        ctx: _Context,
        closing: TokenType,
        resolve_names: bool,
    ) -> None:
        token = pending.token if isinstance(pending, _Resolved) else pending
        if key is None and closing is TokenType.RPAREN and len(result):
            raise AnnotationSyntaxError("Unnamed value must be the only one and come first", token)

        if isinstance(pending, _Resolved):
            value = pending.value
        elif resolve_names:
            value = self._argument_value(pending, ctx)
        else:
            value = self._plain_value(pending)
        result.append(value, key)

    # -------------------- Values --------------------

    def _argument_value(self, token: Token, ctx: _Context) -> Any:
        value = _literal_value(token)
        if value is not NO_MATCH:
            return value
        constant = self._resolver.lookup_constant(token.value, ctx.scope)
        if constant is not NO_MATCH:
            return constant
        return self._resolver.resolve(token.value, ctx.scope)

    def _plain_value(self, token: Token) -> Any:
        value = _literal_value(token)
        if value is not NO_MATCH:
            return value
        if _BAREWORD.match(token.value):
            return token.value
        raise AnnotationSyntaxError("Unexpected value", token)


def _literal_value(token: Token) -> Any:
    """Keywords, numbers and quoted strings; NO_MATCH for anything else."""
    raw = token.value
    if token.type is TokenType.STRING:
        return raw[1:-1]
    if "'" in raw or '"' in raw:
        raise AnnotationSyntaxError("Unterminated string", token)
    if raw in _KEYWORDS:
        return _KEYWORDS[raw]
    if INTEGER_LITERAL.fullmatch(raw):
        return int(raw)
    if NUMERIC_LITERAL.fullmatch(raw):
        return float(raw)
    return NO_MATCH


__all__ = ["AnnotationParser", "strip_decoration"]
