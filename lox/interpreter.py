"""Tree-walking interpreter for the Lox language.

The interpreter evaluates expression nodes to Python values and executes
statement nodes for their effects. Lox values map onto Python values
directly: ``nil`` is ``None``, booleans are ``bool``, every number is a
``float`` and strings are ``str``.

Variables live in an :class:`~lox.environment.Environment` arena. The
interpreter tracks the index of the innermost active frame; a block
pushes a child frame and always restores the previous one on the way
out, including when a runtime error unwinds through it.
"""

from __future__ import annotations

import math
import operator
import sys
from typing import Any, Callable, Dict, Iterable, Optional

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStmt, Grouping, Literal,
    PrintStmt, Stmt, Unary, VarDecl, Variable,
)
from .environment import Environment
from .errors import ErrorReporter, LoxRuntimeError
from .parser import parse_program
from .tokens import Token, TokenType


def divide(a: float, b: float) -> float:
    """IEEE 754 division; Python would raise on a zero divisor."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


# Binary operators that accept only numbers.
NUMERIC_OPERATORS: Dict[TokenType, Callable[[float, float], Any]] = {
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
    TokenType.SLASH: divide,
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    # nil and false are the only falsy values.
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # No coercion: true is not 1 and "1" is not 1.
    if type(a) is not type(b):
        return False
    return a == b


def stringify(value: Any) -> str:
    """Render a value the way ``print`` shows it."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)


class Interpreter:
    """Executes Lox statements against a persistent global scope."""
    def __init__(self, reporter: Optional[ErrorReporter] = None, debug_level: int = 0,
                 debug_file: Optional[str] = 'debug.txt'):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.environment = Environment()
        self.frame = Environment.GLOBAL
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: Iterable[Stmt]) -> bool:
        """Run ``statements`` in order.

        Returns ``False`` if a runtime error stopped the run; the error has
        then been handed to the reporter and no later statement was run.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            self.debug(f"runtime error on line {error.token.line}: {error.message}")
            self.reporter.runtime_error(error)
            return False
        return True

    def execute(self, stmt: Stmt) -> None:
        if self.debug_level >= 1:
            self.debug(f"execute {type(stmt).__name__}")
        match stmt:
            case ExpressionStmt(expression):
                self.evaluate(expression)
            case PrintStmt(expression):
                print(stringify(self.evaluate(expression)))
            case VarDecl(name, initializer):
                value = None if initializer is None else self.evaluate(initializer)
                self.environment.define(self.frame, name.lexeme, value)
                if self.debug_level >= 2:
                    self.debug(f"declare {name.lexeme} = {stringify(value)} in frame {self.frame}")
            case Block(statements):
                self.execute_block(statements, self.environment.push(self.frame))
            case _:
                raise NotImplementedError(f"execute: unexpected node type {type(stmt)}")

    def execute_block(self, statements: Iterable[Stmt], frame: int) -> None:
        previous = self.frame
        if self.debug_level >= 3:
            self.debug(f"enter frame {frame} (enclosing {previous})")
        try:
            self.frame = frame
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.frame = previous
            self.environment.release(frame)
            if self.debug_level >= 3:
                self.debug(f"release frame {frame}")

    def evaluate(self, expr: Expr) -> Any:
        match expr:
            case Literal(value):
                return value
            case Grouping(expression):
                return self.evaluate(expression)
            case Unary(op, right):
                return self.unary(op, self.evaluate(right))
            case Binary(left, op, right):
                # Both operands are evaluated, left first, before any check.
                left_value = self.evaluate(left)
                right_value = self.evaluate(right)
                return self.binary(op, left_value, right_value)
            case Variable(name):
                return self.environment.get(self.frame, name)
            case Assign(name, value_expr):
                value = self.evaluate(value_expr)
                self.environment.assign(self.frame, name, value)
                if self.debug_level >= 2:
                    self.debug(f"assign {name.lexeme} = {stringify(value)}")
                return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr)}")

    def unary(self, op: Token, operand: Any) -> Any:
        if op.type == TokenType.MINUS:
            check_number_operand(op, operand)
            return -operand
        if op.type == TokenType.BANG:
            return not is_truthy(operand)
        raise LoxRuntimeError(op, f"Unknown unary operator '{op.lexeme}'.")

    def binary(self, op: Token, left: Any, right: Any) -> Any:
        if op.type == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, 'Operands must be two numbers or two strings.')
        if op.type == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op.type == TokenType.BANG_EQUAL:
            return not is_equal(left, right)
        if op.type in NUMERIC_OPERATORS:
            check_number_operands(op, left, right)
            return NUMERIC_OPERATORS[op.type](left, right)
        raise LoxRuntimeError(op, f"Unknown binary operator '{op.lexeme}'.")


def check_number_operand(op: Token, operand: Any) -> None:
    if not is_number(operand):
        raise LoxRuntimeError(op, 'Operand must be a number.')


def check_number_operands(op: Token, left: Any, right: Any) -> None:
    if not (is_number(left) and is_number(right)):
        raise LoxRuntimeError(op, 'Operands must be numbers.')


def run_program(source: str, interpreter: Optional[Interpreter] = None) -> ErrorReporter:
    """Scan, parse and, if that succeeded, execute ``source``.

    The returned reporter tells the caller how the run went: lexical or
    syntax errors (``had_error``) mean nothing was executed, a runtime
    error (``had_runtime_error``) means execution stopped early.
    Diagnostics left over from an earlier run on the same interpreter are
    cleared first.
    """
    if interpreter is None:
        interpreter = Interpreter()
    interpreter.reporter.reset()
    statements, reporter = parse_program(source, interpreter.reporter)
    if reporter.had_error:
        return reporter
    interpreter.interpret(statements)
    return reporter
