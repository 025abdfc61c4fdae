import io
import traceback

from loxexpr.lox_cli import run_source
from loxexpr.lox_errors import ErrorReporter, ParseError
from loxexpr.lox_parser import Parser
from loxexpr.lox_printer import print_ast
from loxexpr.lox_scanner import Scanner


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def echo_ast(src: str) -> None:
    # Scan and parse with a throwaway reporter; diagnostics come from run_source.
    quiet = ErrorReporter(io.StringIO())
    tokens = Scanner(src, quiet).scan_tokens()
    try:
        expr = Parser(tokens, quiet).parse()
    except ParseError:
        return
    if not quiet.had_error:
        print(f"[ast] >>> {print_ast(expr)}")


def start_repl(verbose: bool = False, reporter: ErrorReporter | None = None) -> None:
    print("Lox expression REPL. Type 'exit' or 'quit' to leave.")
    reporter = reporter if reporter is not None else ErrorReporter()

    while True:
        try:
            src = input("> ").strip()
            if src in ("exit", "quit"):
                print("Exiting Lox REPL.")
                return
            if not src or src.startswith("//"):
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            if verbose:
                echo_ast(src)
            try:
                run_source(src, reporter)
            except Exception:
                print_traceback()
            finally:
                # A typo should not end the session.
                reporter.reset()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Lox REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
