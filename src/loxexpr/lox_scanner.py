"""
Lexical scanner for Lox expressions.

This module converts raw source text into a list of tokens:

Classes:
    CharacterStream: Two-cursor window over the source with line tracking.
    Token: Immutable lexical unit (type, lexeme, literal, line).
    Scanner: Converts a CharacterStream into a list of tokens.

Features:
    - Skips spaces, tabs, carriage returns and `//` line comments
    - Maximal munch for `!=`, `==`, `<=`, `>=`
    - Recognizes:
        * Identifiers and reserved words
        * Numbers (digits with an optional fractional part)
        * Strings (double-quoted, may span lines, no escape sequences)
        * Punctuation and operators

Errors:
    Unexpected characters and unterminated strings are reported to an
    ErrorReporter as LexicalError; scanning continues with the next character.

Example:
    >>> [tok.type.name for tok in scan("1 + 2")]
    ['NUMBER', 'PLUS', 'NUMBER', 'EOF']

Exports:
    - CharacterStream
    - Token
    - Scanner
    - scan
"""

import logging
from dataclasses import dataclass

from loxexpr.lox_constants import (
    KEYWORDS,
    SINGLE_CHAR_TOKENS,
    TWO_CHAR_TOKENS,
    TokenType,
)
from loxexpr.lox_errors import ErrorReporter

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    Reads characters from a source string while tracking the current lexeme.

    The stream keeps two cursors: ``start`` marks the first character of the
    lexeme being scanned and ``position`` is the next character to read.

    Attributes:
        source (str): The input source string.
        start (int): Index where the current lexeme begins.
        position (int): Index of the next unread character.
        line (int): Current line number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1):
        self.source = source
        self.start = position
        self.position = position
        self.line = line

    def mark(self) -> None:
        """Begins a new lexeme at the current position."""
        self.start = self.position

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def match(self, expected: str) -> bool:
        """Consumes the next character only if it equals ``expected``."""
        if self.peek() != expected:
            return False
        self.position += 1
        return True

    def lexeme(self) -> str:
        return self.source[self.start : self.position]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type (TokenType): The token's kind.
        lexeme (str): The exact source text of the token.
        literal (float | str | None): Parsed value for NUMBER and STRING tokens.
        line (int): The 1-based line the token was produced on.
    """

    type: TokenType
    lexeme: str
    literal: float | str | None = None
    line: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.literal!r}, line={self.line})"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_alphanumeric(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class Scanner:
    """Lexical analyzer for Lox expressions.

    A Scanner is single use: ``scan_tokens`` walks the whole source once and
    returns the token list terminated by an ``EOF`` token.

    Attributes:
        stream (CharacterStream): The source being scanned.
        reporter (ErrorReporter): Sink for lexical errors.
        tokens (list[Token]): Tokens produced so far.
    """

    def __init__(self, source: str, reporter: ErrorReporter | None = None) -> None:
        self.stream = CharacterStream(source)
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: list[Token] = []

    def scan_tokens(self) -> list[Token]:
        """Scans the entire source and returns its tokens.

        Returns:
            list[Token]: Every token found, followed by a single EOF token.
        """
        while not self.stream.end_of_file():
            self.stream.mark()
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.stream.line))
        logger.debug("scanned %d tokens", len(self.tokens))
        return self.tokens

    def add_token(self, type_: TokenType, literal: float | str | None = None) -> None:
        self.tokens.append(
            Token(type_, self.stream.lexeme(), literal, self.stream.line)
        )

    def scan_token(self) -> None:
        """Consumes one lexeme starting at the current position."""
        ch = self.stream.next()

        if ch in " \r\t":
            return
        if ch == "\n":
            self.stream.line += 1
            return

        if ch in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[ch])
            return

        if ch in TWO_CHAR_TOKENS:
            short, long = TWO_CHAR_TOKENS[ch]
            self.add_token(long if self.stream.match("=") else short)
            return

        if ch == "/":
            if self.stream.match("/"):
                self.skip_comment()
            else:
                self.add_token(TokenType.SLASH)
            return

        if ch == '"':
            self.string()
        elif _is_digit(ch):
            self.number()
        elif _is_alpha(ch):
            self.identifier()
        else:
            self.reporter.error(self.stream.line, "Unexpected character.")

    def skip_comment(self) -> None:
        """Advances up to, but not past, the end of the current line."""
        while not self.stream.end_of_file() and self.stream.peek() != "\n":
            self.stream.next()

    def string(self) -> None:
        while not self.stream.end_of_file() and self.stream.peek() != '"':
            if self.stream.peek() == "\n":
                self.stream.line += 1
            self.stream.next()

        if self.stream.end_of_file():
            self.reporter.error(self.stream.line, "Unterminated string.")
            return

        self.stream.next()  # closing quote
        self.add_token(TokenType.STRING, self.stream.lexeme()[1:-1])

    def number(self) -> None:
        while _is_digit(self.stream.peek()):
            self.stream.next()

        # A trailing "." with no digit after it is left for the next token.
        if self.stream.peek() == "." and _is_digit(self.stream.peek(1)):
            self.stream.next()
            while _is_digit(self.stream.peek()):
                self.stream.next()

        self.add_token(TokenType.NUMBER, float(self.stream.lexeme()))

    def identifier(self) -> None:
        while _is_alphanumeric(self.stream.peek()):
            self.stream.next()

        text = self.stream.lexeme()
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def scan(source: str, reporter: ErrorReporter | None = None) -> list[Token]:
    """Scans ``source`` into tokens, reporting lexical errors to ``reporter``."""
    return Scanner(source, reporter).scan_tokens()


__all__ = ["CharacterStream", "Scanner", "Token", "scan"]
