"""
Lox Expression Parser

Parses scanner tokens into an expression tree.

This module implements a recursive-descent parser over the Lox expression
grammar. Each precedence level is one method; binary levels fold operands
left to right so every binary operator is left-associative, while unary
operators recurse and are right-associative.

Grammar
-------
    expression     -> equality
    equality       -> comparison ( ( "!=" | "==" ) comparison )*
    comparison     -> addition ( ( ">" | ">=" | "<" | "<=" ) addition )*
    addition       -> multiplication ( ( "+" | "-" ) multiplication )*
    multiplication -> unary ( ( "*" | "/" ) unary )*
    unary          -> ( "!" | "-" ) unary | primary
    primary        -> NUMBER | STRING | "true" | "false" | "nil"
                    | "(" expression ")"

Parser Behavior
---------------
- Fail-fast: the first grammar violation is reported to the ErrorReporter and
  raised as `ParseError`; no partial tree is returned.
- The whole token stream must form a single expression followed by EOF:
  `1 2` is an error ("Expected end of expression." at `2`), not the value
  `1` with the rest ignored.
- Nesting is bounded by `RECURSION_LIMIT` frames; a deeper expression is
  reported as "Expression too deeply nested." instead of overflowing.
- `synchronize()` skips to the next likely construct boundary; it is kept for
  callers that parse several constructs from one stream.

Entry Points
------------
- `Parser.parse()`: Parse the token stream into one Expression.
- `parse(tokens, reporter)`: Convenience wrapper.

Raises
------
ParseError
    Raised when the token stream does not match the grammar.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from loxexpr.lox_ast import Binary, Expression, Grouping, Literal, Unary, deep_recursion
from loxexpr.lox_constants import SYNC_KEYWORDS, TokenType
from loxexpr.lox_errors import ErrorReporter, ParseError
from loxexpr.lox_scanner import Token

logger = logging.getLogger(__name__)


class Parser:
    """
    Lox Parser Class

    Transforms a list of tokens (terminated by EOF) into an Expression tree.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream to be parsed.
    position : int
        Index of the next token to consume.
    reporter : ErrorReporter
        Sink that receives every ParseError before it is raised.
    """

    def __init__(self, tokens: list[Token], reporter: ErrorReporter | None = None) -> None:
        if not tokens or tokens[-1].type is not TokenType.EOF:
            line = tokens[-1].line if tokens else 1
            tokens = [*tokens, Token(TokenType.EOF, "", None, line)]
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()

    def parse(self) -> Expression:
        """Parse the full token stream as a single expression."""
        try:
            with deep_recursion():
                expr = self.expression()
        except RecursionError:
            raise self.error(self.current(), "Expression too deeply nested.") from None
        if not self.is_at_end():
            raise self.error(self.current(), "Expected end of expression.")
        logger.debug("parsed %s expression", expr.kind)
        return expr

    # Cursor helpers

    def current(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        return self.current().type is TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.current().type is type_

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(self.current(), message)

    def error(self, token: Token, message: str) -> ParseError:
        """Reports a ParseError for ``token`` and returns it for the caller to raise."""
        err = ParseError(token, message)
        self.reporter.report(err)
        return err

    def synchronize(self) -> None:
        """Discards tokens until a statement boundary or a construct keyword."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.current().type in SYNC_KEYWORDS:
                return
            self.advance()

    # Grammar

    def expression(self) -> Expression:
        return self.equality()

    def binary(
        self, operand: Callable[[], Expression], *operators: TokenType
    ) -> Expression:
        """Parses ``operand ( operator operand )*`` folding to the left."""
        expr = operand()
        while self.match(*operators):
            op_tok = self.previous()
            right = operand()
            expr = Binary(expr, op_tok, right)
        return expr

    def equality(self) -> Expression:
        return self.binary(
            self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL
        )

    def comparison(self) -> Expression:
        return self.binary(
            self.addition,
            TokenType.GREATER,
            TokenType.GREATER_EQUAL,
            TokenType.LESS,
            TokenType.LESS_EQUAL,
        )

    def addition(self) -> Expression:
        return self.binary(self.multiplication, TokenType.PLUS, TokenType.MINUS)

    def multiplication(self) -> Expression:
        return self.binary(self.unary, TokenType.STAR, TokenType.SLASH)

    def unary(self) -> Expression:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op_tok = self.previous()
            right = self.unary()
            return Unary(op_tok, right)
        return self.primary()

    def primary(self) -> Expression:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expected ')' after expression.")
            return Grouping(expr)

        raise self.error(self.current(), "Expected expression.")


def parse(tokens: list[Token], reporter: ErrorReporter | None = None) -> Expression:
    return Parser(tokens, reporter).parse()


__all__ = ["Parser", "parse"]
