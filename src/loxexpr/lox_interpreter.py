"""
Tree-walking evaluator for Lox expressions.

This module defines the `Interpreter`, which computes a runtime value from an
expression tree by a strict post-order walk: both operands of an operator are
evaluated before the operator is applied, and nothing short-circuits.

Semantics:
    - Arithmetic (`-`, `*`, `/`) and comparison (`<`, `<=`, `>`, `>=`) need two numbers.
    - `+` adds two numbers or concatenates two strings; nothing else is coerced.
    - Division follows IEEE-754: `1/0` is infinity and `0/0` is NaN.
    - `==` and `!=` accept any operands; different value domains are unequal.
    - `!` negates truthiness; unary `-` needs a number.
    - A tree nested deeper than `RECURSION_LIMIT` frames allow is a runtime
      error ("Expression too deeply nested."), reported at its root operator.

Raises:
    RuntimeTypeError: When an operator receives operands it does not support.
"""

import logging
import math
import operator
from collections.abc import Callable
from typing import Any

from loxexpr.lox_ast import (
    Binary,
    Expression,
    Grouping,
    Literal,
    RuntimeValue,
    Unary,
    deep_recursion,
)
from loxexpr.lox_constants import TokenType
from loxexpr.lox_errors import ErrorReporter, RuntimeTypeError
from loxexpr.lox_scanner import Token
from loxexpr.lox_values import is_equal, is_number, is_truthy

logger = logging.getLogger(__name__)


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


ARITHMETIC: dict[TokenType, Callable[[float, float], float]] = {
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
    TokenType.SLASH: _divide,
}

COMPARISON: dict[TokenType, Callable[[float, float], bool]] = {
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}


def _root_operator(expr: Expression) -> Token:
    while isinstance(expr, Grouping):
        expr = expr.expression
    if isinstance(expr, (Binary, Unary)):
        return expr.operator
    return Token(TokenType.EOF, "", None, 1)


class Interpreter:
    """Evaluates expression trees.

    The interpreter holds no state between evaluations besides its reporter,
    so one instance can evaluate any number of trees.

    Attributes:
        reporter (ErrorReporter): Receives runtime errors raised by `interpret`.
    """

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self.reporter = reporter if reporter is not None else ErrorReporter()

    def interpret(self, expr: Expression) -> RuntimeValue:
        """Evaluates ``expr``, reporting a RuntimeTypeError before re-raising it."""
        try:
            return self.evaluate_tree(expr)
        except RuntimeTypeError as err:
            self.reporter.report(err)
            raise

    def evaluate_tree(self, expr: Expression) -> RuntimeValue:
        """Evaluates a whole tree with room for deep nesting."""
        try:
            with deep_recursion():
                return self.evaluate(expr)
        except RecursionError:
            raise RuntimeTypeError(
                _root_operator(expr), "Expression too deeply nested."
            ) from None

    def evaluate(self, expr: Expression) -> Any:
        return expr.accept(self)

    def visit_literal(self, expr: Literal) -> RuntimeValue:
        return expr.value

    def visit_grouping(self, expr: Grouping) -> RuntimeValue:
        return self.evaluate(expr.expression)

    def visit_unary(self, expr: Unary) -> RuntimeValue:
        right = self.evaluate(expr.right)
        kind = expr.operator.type

        if kind is TokenType.MINUS:
            self.check_number_operand(expr.operator, right)
            return -float(right)
        if kind is TokenType.BANG:
            return not is_truthy(right)

        raise RuntimeTypeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.")

    def visit_binary(self, expr: Binary) -> RuntimeValue:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op_tok = expr.operator
        kind = op_tok.type

        if kind is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return float(left) + float(right)
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise RuntimeTypeError(op_tok, "Operands must be two numbers or two strings.")
        if kind in ARITHMETIC:
            self.check_number_operands(op_tok, left, right)
            return ARITHMETIC[kind](float(left), float(right))
        if kind in COMPARISON:
            self.check_number_operands(op_tok, left, right)
            return COMPARISON[kind](float(left), float(right))
        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        raise RuntimeTypeError(op_tok, f"Unknown binary operator '{op_tok.lexeme}'.")

    @staticmethod
    def check_number_operand(op_tok: Token, operand: Any) -> None:
        if not is_number(operand):
            raise RuntimeTypeError(op_tok, "Operand must be a number.")

    @staticmethod
    def check_number_operands(op_tok: Token, left: Any, right: Any) -> None:
        if not (is_number(left) and is_number(right)):
            raise RuntimeTypeError(op_tok, "Operands must be numbers.")


def evaluate(expr: Expression) -> RuntimeValue:
    return Interpreter().evaluate_tree(expr)


__all__ = ["Interpreter", "evaluate"]
