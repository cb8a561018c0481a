"""Error reporting for the Lox toolchain.

The scanner, parser and interpreter never print errors themselves.
They hand each problem to an :class:`ErrorReporter`, which records it as
a :class:`Diagnostic` and optionally forwards it to a sink (the command
line driver uses stderr). Callers decide whether a run succeeded by
asking the reporter, not by consulting global state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from .tokens import Token, TokenType

LEXICAL = 'lexical'
SYNTAX = 'syntax'
RUNTIME = 'runtime'


class LoxRuntimeError(Exception):
    """Raised by the interpreter when a program misbehaves at run time."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        if self.kind == RUNTIME:
            return f"{self.message}\n[line {self.line}]"
        where = f" {self.where}" if self.where else ''
        return f"[line {self.line}] Error{where}: {self.message}"


class ErrorReporter:
    """Accumulates diagnostics for one run of the pipeline."""
    def __init__(self, sink: Optional[Callable[[Diagnostic], None]] = None):
        self.sink = sink
        self.diagnostics: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return any(d.kind != RUNTIME for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.kind == RUNTIME for d in self.diagnostics)

    def report(self, kind: str, line: int, where: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(kind, line, where, message)
        self.diagnostics.append(diagnostic)
        if self.sink is not None:
            self.sink(diagnostic)
        return diagnostic

    def error(self, line: int, message: str) -> Diagnostic:
        return self.report(LEXICAL, line, '', message)

    def token_error(self, token: Token, message: str) -> Diagnostic:
        if token.type == TokenType.EOF:
            return self.report(SYNTAX, token.line, 'at end', message)
        return self.report(SYNTAX, token.line, f"at '{token.lexeme}'", message)

    def runtime_error(self, error: LoxRuntimeError) -> Diagnostic:
        return self.report(RUNTIME, error.token.line, '', error.message)

    def reset(self) -> None:
        self.diagnostics.clear()
