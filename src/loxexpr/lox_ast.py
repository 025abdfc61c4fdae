"""
Defines the abstract syntax tree (AST) for Lox expressions.

Classes:
    Expression:
        Base class of every node. Provides visitor dispatch (``accept``) and
        serialization to plain dictionaries (``to_dict``).
    Binary, Grouping, Literal, Unary:
        The closed set of expression variants built by the parser.
    ExpressionVisitor:
        Protocol implemented by tree walkers (interpreter, printer).
    ASTDict:
        TypedDict shape produced by ``to_dict``, suitable for JSON output.

Nodes are frozen: once the parser builds a tree it is never mutated, so the
same tree may be printed or evaluated any number of times.

Example:
    Binary(Literal(1.0), Token(TokenType.PLUS, "+"), Literal(2.0))
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, TypedDict, TypeVar

from loxexpr.lox_constants import RECURSION_LIMIT
from loxexpr.lox_scanner import Token

R = TypeVar("R", covariant=True)

RuntimeValue = float | str | bool | None


@contextmanager
def deep_recursion(limit: int = RECURSION_LIMIT) -> Iterator[None]:
    """Raises the recursion limit to ``limit`` for the duration of a tree walk.

    Parsing and walking are recursive, so a few hundred nesting levels would
    otherwise exhaust the default limit. The previous limit is restored on
    exit; a limit that is already higher is left alone.
    """
    previous = sys.getrecursionlimit()
    if previous >= limit:
        yield
        return
    sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class ASTDict(TypedDict, total=False):
    """
    Dictionary form of an Expression node.

    Fields:
        kind (str): Node variant ("binary", "grouping", "literal", "unary").
        operator (str): Operator lexeme for binary and unary nodes.
        line (int): Line of the operator token.
        value (Any): Stored value for literal nodes.
        left, right, expression (ASTDict): Child nodes.
    """

    kind: str
    operator: str
    line: int
    value: Any
    left: "ASTDict"
    right: "ASTDict"
    expression: "ASTDict"


class ExpressionVisitor(Protocol[R]):
    def visit_binary(self, expr: Binary) -> R: ...

    def visit_grouping(self, expr: Grouping) -> R: ...

    def visit_literal(self, expr: Literal) -> R: ...

    def visit_unary(self, expr: Unary) -> R: ...


class Expression:
    """Base class of all expression nodes.

    Subclasses set ``kind``; ``accept`` dispatches to ``visit_<kind>`` on the
    visitor, so every walker must handle every variant.
    """

    kind: ClassVar[str] = "expression"

    def accept(self, visitor: ExpressionVisitor[Any]) -> Any:
        """Invokes the visitor method matching this node's kind.

        Raises:
            NotImplementedError: If the visitor does not support the node kind.
        """
        method = getattr(visitor, f"visit_{self.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"{type(visitor).__name__} has no visitor for node kind '{self.kind}'"
            )
        return method(self)

    def to_dict(self) -> ASTDict:
        raise NotImplementedError


@dataclass(frozen=True)
class Binary(Expression):
    left: Expression
    operator: Token
    right: Expression

    kind: ClassVar[str] = "binary"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "operator": self.operator.lexeme,
            "line": self.operator.line,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class Grouping(Expression):
    expression: Expression

    kind: ClassVar[str] = "grouping"

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "expression": self.expression.to_dict()}


@dataclass(frozen=True, eq=False)
class Literal(Expression):
    value: RuntimeValue

    kind: ClassVar[str] = "literal"

    # 1.0 == True in Python, but a number literal is not a boolean literal.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))

    def to_dict(self) -> ASTDict:
        return {"kind": self.kind, "value": self.value}


@dataclass(frozen=True)
class Unary(Expression):
    operator: Token
    right: Expression

    kind: ClassVar[str] = "unary"

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "operator": self.operator.lexeme,
            "line": self.operator.line,
            "right": self.right.to_dict(),
        }


__all__ = [
    "ASTDict",
    "Binary",
    "Expression",
    "ExpressionVisitor",
    "Grouping",
    "Literal",
    "RuntimeValue",
    "Unary",
    "deep_recursion",
]
