"""Debug rendering of expression trees.

:class:`AstPrinter` turns an expression into a fully parenthesised
prefix form that makes the tree shape, and therefore precedence and
associativity, visible::

    -123 * (45.67)   ->   (* (- 123) (group 45.67))
"""

from __future__ import annotations

from .ast import Assign, Binary, Expr, Grouping, Literal, Unary, Variable
from .interpreter import stringify


class AstPrinter:
    def print(self, expr: Expr) -> str:
        match expr:
            case Binary(left, op, right):
                return self.parenthesize(op.lexeme, left, right)
            case Grouping(expression):
                return self.parenthesize('group', expression)
            case Literal(value):
                if isinstance(value, str):
                    return value
                return stringify(value)
            case Unary(op, right):
                return self.parenthesize(op.lexeme, right)
            case Variable(name):
                return name.lexeme
            case Assign(name, value):
                return self.parenthesize(f"= {name.lexeme}", value)
        raise NotImplementedError(f"print: unexpected node type {type(expr)}")

    def parenthesize(self, name: str, *exprs: Expr) -> str:
        parts = [name] + [self.print(expr) for expr in exprs]
        return '(' + ' '.join(parts) + ')'
