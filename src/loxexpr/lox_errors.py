"""
Error taxonomy and error sink for the Lox expression toolchain.

Classes:
    LoxError: Base class carrying a message, a source line and a location phrase.
    LexicalError: Unscannable character or unterminated string. Reported, never raised.
    ParseError: Token stream does not match the grammar. Aborts the parse call.
    RuntimeTypeError: Operator applied to unsupported operand types. Aborts evaluation.
    ErrorReporter: Collects reported errors, renders them and tracks the
        had-error flags that gate whether the driver proceeds.

Rendering:
    Static errors:  ``[line 3] Error at ')': Expected expression.``
    Runtime errors: ``Operands must be numbers.`` followed by ``[line 3]``
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

from loxexpr.lox_constants import EX_DATAERR, EX_OK, EX_SOFTWARE, TokenType

if TYPE_CHECKING:
    from loxexpr.lox_scanner import Token

logger = logging.getLogger(__name__)


class LoxError(Exception):
    """Base exception for all Lox diagnostics.

    Attributes:
        message (str): Human readable description of the problem.
        line (int): 1-based source line the error refers to.
        where (str): Location phrase inserted after "Error" when rendered
            (e.g. " at end", " at '+'"), empty when only the line is known.
    """

    def __init__(self, message: str, line: int, where: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.where = where

    def render(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class LexicalError(LoxError):
    """Bad input found while scanning. Reported to the sink; the scan goes on."""


def _location(token: Token) -> str:
    if token.type is TokenType.EOF:
        return " at end"
    return f" at '{token.lexeme}'"


class ParseError(LoxError):
    """Raised when the token stream does not match the expression grammar.

    Attributes:
        token (Token): The offending token.
    """

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message, token.line, _location(token))
        self.token = token


class RuntimeTypeError(LoxError):
    """Raised when an operator is applied to operands of the wrong type.

    Attributes:
        token (Token): The operator token being evaluated.
    """

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message, token.line)
        self.token = token

    def render(self) -> str:
        return f"{self.message}\n[line {self.line}]"


class ErrorReporter:
    """Error sink shared by the scanner, parser and interpreter.

    A reporter is created by the driver and passed to each stage; after each
    stage the driver inspects ``had_error`` / ``had_runtime_error`` to decide
    whether to continue.

    Attributes:
        errors (list[LoxError]): Every error reported so far, in order.
        had_error (bool): True once a lexical or parse error was reported.
        had_runtime_error (bool): True once a runtime error was reported.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.errors: list[LoxError] = []
        self.had_error = False
        self.had_runtime_error = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def report(self, error: LoxError) -> None:
        """Records an error, flips the matching flag and renders it."""
        self.errors.append(error)
        if isinstance(error, RuntimeTypeError):
            self.had_runtime_error = True
        else:
            self.had_error = True
        logger.debug("reported %s on line %d", type(error).__name__, error.line)
        print(error.render(), file=self.stream)

    def error(self, line: int, message: str) -> None:
        """Reports a LexicalError found on ``line``."""
        self.report(LexicalError(message, line))

    def reset(self) -> None:
        self.errors.clear()
        self.had_error = False
        self.had_runtime_error = False

    @property
    def exit_code(self) -> int:
        if self.had_error:
            return EX_DATAERR
        if self.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK


__all__ = [
    "ErrorReporter",
    "LexicalError",
    "LoxError",
    "ParseError",
    "RuntimeTypeError",
]
