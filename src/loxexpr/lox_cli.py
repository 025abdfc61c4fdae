"""
Lox expression CLI entrypoint.

This module provides the command-line interface for evaluating Lox
expressions from a file, an inline string, or an interactive REPL.

Features:
    - Read source from a file or an inline string (`-s`).
    - Scan, parse and evaluate, printing the resulting value.
    - Dump the token stream (`--tokens`), the parenthesized tree
      (`--print-ast`) or the tree as JSON (`--json`).
    - Launch an interactive REPL.
    - Exit with sysexits-style codes: 64 for bad usage, 65 for a lexical or
      parse error, 70 for a runtime error.

Configuration:
    `--verbose` turns on DEBUG logging; otherwise the level is read from the
    `LOXEXPR_LOG_LEVEL` environment variable (default WARNING).

Example usage:
    loxexpr script.lox
    loxexpr -s "(1 + 2) * 3"
    loxexpr -s "1 + 2 * 3" --print-ast
    loxexpr --repl --verbose
"""

import argparse
import json
import logging
import os
import sys
from typing import NoReturn

from loxexpr.lox_ast import deep_recursion
from loxexpr.lox_constants import EX_USAGE
from loxexpr.lox_errors import ErrorReporter, ParseError, RuntimeTypeError
from loxexpr.lox_interpreter import Interpreter
from loxexpr.lox_parser import Parser
from loxexpr.lox_printer import print_ast
from loxexpr.lox_scanner import Scanner
from loxexpr.lox_values import stringify

LOG_LEVEL_ENV = "LOXEXPR_LOG_LEVEL"

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Configures root logging from the `--verbose` flag or the environment."""
    if verbose:
        level = logging.DEBUG
    else:
        name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, name, logging.WARNING)
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
    )


def run_source(
    source: str,
    reporter: ErrorReporter,
    show_tokens: bool = False,
    show_ast: bool = False,
    as_json: bool = False,
) -> bool:
    """
    Run one source string through scan, parse and evaluate.

    Args:
        source (str): Lox expression source.
        reporter (ErrorReporter): Sink for every diagnostic.
        show_tokens (bool): Print each token before parsing.
        show_ast (bool): Print the parenthesized tree instead of evaluating.
        as_json (bool): Print the tree as JSON instead of evaluating.

    Returns:
        bool: True when the source evaluated (or was dumped) without error.
    """
    # 1. Scanning
    tokens = Scanner(source, reporter).scan_tokens()
    if show_tokens:
        for tok in tokens:
            print(tok)

    # 2. Parsing (still runs after lexical errors to surface more diagnostics)
    try:
        expr = Parser(tokens, reporter).parse()
    except ParseError:
        return False
    if reporter.had_error:
        return False

    # 3. Output or evaluation
    if as_json:
        with deep_recursion():
            print(json.dumps(expr.to_dict(), indent=2))
        return True
    if show_ast:
        print(print_ast(expr))
        return True

    try:
        value = Interpreter(reporter).interpret(expr)
    except RuntimeTypeError:
        return False
    print(stringify(value))
    return True


def run_lox(
    source: str,
    is_string: bool = False,
    show_tokens: bool = False,
    show_ast: bool = False,
    as_json: bool = False,
    reporter: ErrorReporter | None = None,
) -> int:
    """
    Run the Lox pipeline on a file or an inline string.

    Args:
        source (str): Path to a source file, or the source itself when `is_string`.
        is_string (bool): Treat `source` as code instead of a path.
        show_tokens, show_ast, as_json (bool): Passed through to `run_source`.
        reporter (ErrorReporter | None): Sink to use; a fresh one by default.

    Returns:
        int: The exit code (0, 64 for an unreadable file, 65 or 70 on errors).
    """
    reporter = reporter if reporter is not None else ErrorReporter()
    if not is_string:
        try:
            with open(source, encoding="utf-8") as f:
                source = f.read()
        except OSError as e:
            print(f"Could not read {source}: {e.strerror}", file=sys.stderr)
            return EX_USAGE
        except UnicodeDecodeError as e:
            print(f"Could not read {source}: not valid UTF-8 ({e.reason})", file=sys.stderr)
            return EX_USAGE

    run_source(source, reporter, show_tokens, show_ast, as_json)
    return reporter.exit_code


class LoxArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with EX_USAGE on bad invocations."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = LoxArgumentParser(prog="loxexpr")
    parser.add_argument("source", nargs="?", help="Script path or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream before parsing"
    )
    parser.add_argument(
        "--print-ast",
        dest="show_ast",
        action="store_true",
        help="Print the parenthesized tree instead of evaluating",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the tree as JSON instead of evaluating",
    )
    parser.add_argument("--repl", action="store_true", help="Launch interactive REPL")
    parser.add_argument(
        "--verbose", action="store_true", help="Debug logging and verbose REPL"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the Lox expression CLI.

    Launches the REPL when no source is given or `--repl` is passed,
    otherwise runs the source and exits with the pipeline's exit code.
    """
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.repl or args.source is None:
        from loxexpr.lox_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    code = run_lox(
        source=args.source,
        is_string=args.string,
        show_tokens=args.tokens,
        show_ast=args.show_ast,
        as_json=args.as_json,
    )
    logger.debug("exiting with code %d", code)
    sys.exit(code)


if __name__ == "__main__":
    main()
