"""Recursive-descent parser for the Lox language.

Each grammar rule is one method that calls the rules of higher
precedence::

    program     -> declaration* EOF
    declaration -> varDecl | statement
    varDecl     -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> printStmt | block | exprStmt
    printStmt   -> "print" expression ";"
    block       -> "{" declaration* "}"
    exprStmt    -> expression ";"
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | equality
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | "(" expression ")" | IDENTIFIER

Error recovery uses panic mode without exceptions: a rule that hits a
syntax error reports it and returns ``None``. Every caller passes the
``None`` straight up until it reaches :meth:`Parser.declaration`, which
owns the statement loop, discards tokens up to the next plausible
statement boundary and lets parsing continue. The statement that
failed is dropped; the reporter remembers that the parse is invalid.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStmt, Grouping, Literal,
    PrintStmt, Stmt, Unary, VarDecl, Variable,
)
from .errors import ErrorReporter
from .scanner import scan
from .tokens import Token, TokenType

# Tokens that plausibly begin a new statement; panic mode stops before them.
STATEMENT_STARTS = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0

    def parse(self) -> List[Stmt]:
        """Parse a whole program, skipping declarations that failed."""
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self) -> Optional[Expr]:
        """Parse a single expression; trailing tokens are left unread."""
        return self.expression()

    ###########################################################################
    # Statements
    ###########################################################################

    def declaration(self) -> Optional[Stmt]:
        if self.match(TokenType.VAR):
            stmt = self.var_declaration()
        else:
            stmt = self.statement()
        if stmt is None:
            self.synchronize()
        return stmt

    def var_declaration(self) -> Optional[Stmt]:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        if name is None:
            return None
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()
            if initializer is None:
                return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.") is None:
            return None
        return VarDecl(name, initializer)

    def statement(self) -> Optional[Stmt]:
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.LEFT_BRACE):
            statements = self.block()
            if statements is None:
                return None
            return Block(statements)
        return self.expression_statement()

    def print_statement(self) -> Optional[Stmt]:
        value = self.expression()
        if value is None:
            return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after value.") is None:
            return None
        return PrintStmt(value)

    def block(self) -> Optional[Tuple[Stmt, ...]]:
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            # Failed inner declarations have already synchronized.
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        if self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.") is None:
            return None
        return tuple(statements)

    def expression_statement(self) -> Optional[Stmt]:
        expr = self.expression()
        if expr is None:
            return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after expression.") is None:
            return None
        return ExpressionStmt(expr)

    ###########################################################################
    # Expressions
    ###########################################################################

    def expression(self) -> Optional[Expr]:
        return self.assignment()

    def assignment(self) -> Optional[Expr]:
        expr = self.equality()
        if expr is None:
            return None
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if value is None:
                return None
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # Reported, but the parser is not confused, so no panic.
            self.error(equals, 'Invalid assignment target.')
        return expr

    def binary_chain(self, operand: Callable[[], Optional[Expr]], *types: TokenType) -> Optional[Expr]:
        """Parse ``operand (op operand)*`` into a left-associative tree."""
        expr = operand()
        if expr is None:
            return None
        while self.match(*types):
            operator = self.previous()
            right = operand()
            if right is None:
                return None
            expr = Binary(expr, operator, right)
        return expr

    def equality(self) -> Optional[Expr]:
        return self.binary_chain(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self) -> Optional[Expr]:
        return self.binary_chain(
            self.term,
            TokenType.GREATER, TokenType.GREATER_EQUAL,
            TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def term(self) -> Optional[Expr]:
        return self.binary_chain(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self) -> Optional[Expr]:
        return self.binary_chain(self.unary, TokenType.SLASH, TokenType.STAR)

    def unary(self) -> Optional[Expr]:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            if right is None:
                return None
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Optional[Expr]:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            if expr is None:
                return None
            if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.") is None:
                return None
            return Grouping(expr)
        self.error(self.peek(), 'Expect expression.')
        return None

    ###########################################################################
    # Token cursor
    ###########################################################################

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type_

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def consume(self, type_: TokenType, message: str) -> Optional[Token]:
        if self.check(type_):
            return self.advance()
        self.error(self.peek(), message)
        return None

    def error(self, token: Token, message: str) -> None:
        self.reporter.token_error(token, message)

    def synchronize(self) -> None:
        """Discard tokens until the start of the next probable statement."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> Tuple[List[Stmt], ErrorReporter]:
    """Scan and parse ``source``.

    Returns the parsed statements together with the reporter that
    collected any lexical or syntax diagnostics. The statements must not
    be executed when ``reporter.had_error`` is set.
    """
    if reporter is None:
        reporter = ErrorReporter()
    statements = Parser(scan(source, reporter), reporter).parse()
    return statements, reporter
