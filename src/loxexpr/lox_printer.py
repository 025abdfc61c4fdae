"""
Renders expression trees as fully parenthesized prefix strings.

    1 + 2 * 3   ->  (+ 1 (* 2 3))
    -(4)        ->  (- (group 4))

Used for diagnostics (``--print-ast`` and REPL verbose mode) and as a
canonical textual fixture for tree comparisons in tests.
"""

from loxexpr.lox_ast import Binary, Expression, Grouping, Literal, Unary, deep_recursion
from loxexpr.lox_values import stringify


class AstPrinter:
    def print(self, expr: Expression) -> str:
        return str(expr.accept(self))

    def visit_binary(self, expr: Binary) -> str:
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_grouping(self, expr: Grouping) -> str:
        return self.parenthesize("group", expr.expression)

    def visit_literal(self, expr: Literal) -> str:
        return stringify(expr.value)

    def visit_unary(self, expr: Unary) -> str:
        return self.parenthesize(expr.operator.lexeme, expr.right)

    def parenthesize(self, name: str, *exprs: Expression) -> str:
        parts = " ".join(e.accept(self) for e in exprs)
        return f"({name} {parts})"


def print_ast(expr: Expression) -> str:
    with deep_recursion():
        return AstPrinter().print(expr)


__all__ = ["AstPrinter", "print_ast"]
