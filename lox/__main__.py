"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] [script]
    python -m lox [-v...] --ast [script]

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where debug output goes (default: debug.txt)
  --ast         Parse the input as a single expression and print its tree
                instead of executing it

Without a script the interpreter starts an interactive prompt; variables
persist from one line to the next and an error on one line does not end
the session. Diagnostics are written to stderr. Exit codes: 0 on
success, 65 when the script has lexical or syntax errors, 66 when the
script cannot be found or read, 70 when a runtime error stopped it.
"""

import argparse
import sys
from pathlib import Path

from .ast_printer import AstPrinter
from .errors import Diagnostic, ErrorReporter
from .interpreter import Interpreter, run_program
from .parser import Parser
from .scanner import scan

EX_OK = 0
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def print_diagnostic(diagnostic: Diagnostic) -> None:
    print(diagnostic, file=sys.stderr)


def run(source: str, interpreter: Interpreter, print_ast: bool = False) -> ErrorReporter:
    reporter = interpreter.reporter
    if not print_ast:
        return run_program(source, interpreter)
    reporter.reset()
    expr = Parser(scan(source, reporter), reporter).parse_expression()
    if expr is not None and not reporter.had_error:
        print(AstPrinter().print(expr))
    return reporter


def exit_code(reporter: ErrorReporter) -> int:
    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def run_file(path: Path, interpreter: Interpreter, print_ast: bool = False) -> int:
    try:
        source = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return EX_NOINPUT
    return exit_code(run(source, interpreter, print_ast))


def run_prompt(interpreter: Interpreter, print_ast: bool = False) -> int:
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        run(line, interpreter, print_ast)
    return EX_OK


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving debug output (default: debug.txt)')
    parser.add_argument('--ast', action='store_true', help='print the parsed expression tree instead of running')
    parser.add_argument('script', nargs='?', help='Lox script to run; omit for an interactive prompt')
    args = parser.parse_args(argv)

    if args.script is not None and not Path(args.script).exists():
        print(f"Error: file {args.script} not found", file=sys.stderr)
        sys.exit(EX_NOINPUT)

    reporter = ErrorReporter(sink=print_diagnostic)
    interpreter = Interpreter(reporter, debug_level=args.v, debug_file=args.debug_file)
    try:
        if args.script is None:
            code = run_prompt(interpreter, args.ast)
        else:
            code = run_file(Path(args.script), interpreter, args.ast)
    finally:
        interpreter.close()
    sys.exit(code)


if __name__ == '__main__':
    main()
