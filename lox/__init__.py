# Lox language package
# This package provides the scanner, parser and tree-walking interpreter for Lox.
from .errors import Diagnostic, ErrorReporter, LoxRuntimeError
from .interpreter import Interpreter, run_program
from .parser import Parser, parse_program
from .scanner import Scanner

__all__ = [
    'Diagnostic',
    'ErrorReporter',
    'Interpreter',
    'LoxRuntimeError',
    'Parser',
    'Scanner',
    'parse_program',
    'run_program',
]
