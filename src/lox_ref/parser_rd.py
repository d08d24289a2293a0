"""
Recursive Descent Parser for Lox

This serves as:
1. The production parser used by the runner and the REPL
2. The error-recovering counterpart of the Lark reference grammar
   (grammar.lark), which stops at the first syntax error
3. Documentation of parsing strategy and disambiguation

Structure:
- Lexer: Token list from source (lexer_rd)
- Parser: Recursive descent, one function per precedence level
- AST: Frozen node classes from tree.py
"""

from typing import Callable, List, Optional, Tuple

from .diagnostics import Diagnostics
from .token_types import TT, Tok
from .tree import (
    Assign, Binary, Block, Call, Expr, Expression, Function, Grouping, If,
    Literal, Logical, Print, Reassign, Return, Stmt, Unary, Var, Variable, While,
)
from .types import LoxBool, LoxNil, LoxNumber, LoxString

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        super().__init__(
            f"{message} at line {token.line}" if token else message
        )

class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. assignment (=, right associative)
    2. or
    3. and
    4. equality (==, !=)
    5. comparison (<, <=, >, >=)
    6. term (+, -)
    7. factor (*, /)
    8. unary (!, -)
    9. call (f(args))
    10. primary (literals, identifiers, parens)

    Syntax errors are reported to the diagnostics sink; the parser then
    synchronizes to the next statement boundary and keeps going, so one
    pass reports every independent error in the file.
    """

    MAX_ARGS = 255
    NESTING_MESSAGE = "Too much nesting."

    # Tokens that start a declaration or statement
    SYNC_TYPES = frozenset({
        TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN,
    })

    def __init__(self, tokens: List[Tok], diagnostics: Optional[Diagnostics] = None):
        if not tokens or tokens[-1].type != TT.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Tok(TT.EOF, '', None, last_line)]

        self.tokens = tokens
        self.pos = 0
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(echo=False)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or raise error"""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Tok, message: str) -> ParseError:
        """Report an error; callers decide whether to raise the result"""
        self.diagnostics.error(token, message)
        return ParseError(message, token)

    def synchronize(self) -> None:
        """Discard tokens until a likely statement boundary"""
        self.advance()

        while not self.is_at_end():
            if self.previous().type == TT.SEMICOLON:
                return
            if self.peek().type in self.SYNC_TYPES:
                return
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Stmt]:
        """Parse entire program"""
        statements: List[Stmt] = []

        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        return statements

    def parse_expr(self) -> Expr:
        """Parse a standalone expression followed by end of input"""
        try:
            expr = self.expression()
        except RecursionError:
            raise self.error(self.peek(), self.NESTING_MESSAGE) from None
        self.expect(TT.EOF, "Expect end of expression.")
        return expr

    # ========================================================================
    # Declarations
    # ========================================================================

    def declaration(self) -> Optional[Stmt]:
        """Parse one declaration; returns None after a recovered error"""
        try:
            if self.match(TT.FUN):
                return self.function("function")
            if self.match(TT.VAR):
                return self.var_declaration()
            if self.check(TT.IDENTIFIER) and self.peek(1).type == TT.EQUAL:
                return self.reassignment()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.error(self.peek(), self.NESTING_MESSAGE)
            self.synchronize()
            return None

    def function(self, kind: str) -> Function:
        name = self.expect(TT.IDENTIFIER, f"Expect {kind} name.")
        self.expect(TT.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: List[Tok] = []

        if not self.check(TT.RIGHT_PAREN):
            params.append(self.expect(TT.IDENTIFIER, "Expect parameter name."))

            while self.match(TT.COMMA):
                if len(params) >= self.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {self.MAX_ARGS} parameters.")
                params.append(self.expect(TT.IDENTIFIER, "Expect parameter name."))

        self.expect(TT.RIGHT_PAREN, "Expect ')' after parameters.")
        self.expect(TT.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.block()

        return Function(name, tuple(params), body)

    def var_declaration(self) -> Var:
        name = self.expect(TT.IDENTIFIER, "Expect variable name.")
        initializer = None

        if self.match(TT.EQUAL):
            initializer = self.expression()

        self.expect(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def reassignment(self) -> Reassign:
        """IDENTIFIER "=" expression ";" at statement start"""
        name = self.advance()
        self.expect(TT.EQUAL, "Expect '=' after variable name.")
        value = self.expression()
        self.expect(TT.SEMICOLON, "Expect ';' after assignment.")
        return Reassign(name, value)

    # ========================================================================
    # Statements
    # ========================================================================

    def statement(self) -> Stmt:
        """
        Parse a single statement.

        Statements include:
        - Control flow (if, while, for)
        - print and return
        - Blocks
        - Expression statements
        """
        if self.match(TT.IF):
            return self.if_statement()
        if self.match(TT.FOR):
            return self.for_statement()
        if self.match(TT.WHILE):
            return self.while_statement()
        if self.match(TT.PRINT):
            return self.print_statement()
        if self.match(TT.RETURN):
            return self.return_statement()
        if self.match(TT.LEFT_BRACE):
            return Block(self.block())
        return self.expression_statement()

    def if_statement(self) -> If:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after if condition.")
        self.expect(TT.LEFT_BRACE, "Expect '{' before if body.")
        then_branch = self.block()
        else_branch = None

        if self.match(TT.ELSE):
            self.expect(TT.LEFT_BRACE, "Expect '{' before else body.")
            else_branch = self.block()

        return If(condition, then_branch, else_branch)

    def while_statement(self) -> While:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after while condition.")
        self.expect(TT.LEFT_BRACE, "Expect '{' before while body.")
        body = self.block()
        return While(condition, body)

    def for_statement(self) -> While:
        """
        Desugar `for (init; cond; incr) { body }` into a While node.

        The initializer rides on the While so it runs once inside the loop
        scope; the increment runs after the body on every iteration; a
        missing condition loops forever.
        """
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[Stmt]
        if self.match(TT.SEMICOLON):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition: Optional[Expr] = None
        if not self.check(TT.SEMICOLON):
            condition = self.expression()
        self.expect(TT.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TT.RIGHT_PAREN):
            increment = self.expression()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after for clauses.")

        self.expect(TT.LEFT_BRACE, "Expect '{' before for body.")
        body = self.block()

        return desugar_for(initializer, condition, increment, body)

    def print_statement(self) -> Print:
        value = self.expression()
        self.expect(TT.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value = None

        if not self.check(TT.SEMICOLON):
            value = self.expression()

        self.expect(TT.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def expression_statement(self) -> Expression:
        expr = self.expression()
        self.expect(TT.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    def block(self) -> Tuple[Stmt, ...]:
        """Parse declarations up to the closing brace ('{' already consumed)"""
        statements: List[Stmt] = []

        while not self.check(TT.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.expect(TT.RIGHT_BRACE, "Expect '}' after block.")
        return tuple(statements)

    # ========================================================================
    # Expressions
    # ========================================================================

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()

        if self.match(TT.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            # Reported but not raised: the statement itself is still well formed
            self.error(equals, "Invalid assignment target.")

        return expr

    def logic_or(self) -> Expr:
        return self._logical(self.logic_and, TT.OR)

    def logic_and(self) -> Expr:
        return self._logical(self.equality, TT.AND)

    def equality(self) -> Expr:
        return self._binary(self.comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self._binary(
            self.term, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL
        )

    def term(self) -> Expr:
        return self._binary(self.factor, TT.MINUS, TT.PLUS)

    def factor(self) -> Expr:
        return self._binary(self.unary, TT.SLASH, TT.STAR)

    def unary(self) -> Expr:
        if self.match(TT.BANG, TT.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)

        return self.call()

    def call(self) -> Expr:
        expr = self.primary()

        while self.match(TT.LEFT_PAREN):
            expr = self.finish_call(expr)

        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []

        if not self.check(TT.RIGHT_PAREN):
            arguments.append(self.expression())

            while self.match(TT.COMMA):
                if len(arguments) >= self.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {self.MAX_ARGS} arguments.")
                arguments.append(self.expression())

        paren = self.expect(TT.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def primary(self) -> Expr:
        if self.match(TT.FALSE):
            return Literal(LoxBool(False))
        if self.match(TT.TRUE):
            return Literal(LoxBool(True))
        if self.match(TT.NIL):
            return Literal(LoxNil())
        if self.match(TT.NUMBER):
            return Literal(LoxNumber(self.previous().literal))
        if self.match(TT.STRING):
            return Literal(LoxString(self.previous().literal))
        if self.match(TT.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TT.LEFT_PAREN):
            expr = self.expression()
            self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # ========================================================================
    # Helpers
    # ========================================================================

    def _binary(self, operand: Callable[[], Expr], *operators: TT) -> Expr:
        """Left-associative binary level"""
        expr = operand()

        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)

        return expr

    def _logical(self, operand: Callable[[], Expr], operator_type: TT) -> Expr:
        expr = operand()

        while self.match(operator_type):
            operator = self.previous()
            right = operand()
            expr = Logical(expr, operator, right)

        return expr


def desugar_for(
    initializer: Optional[Stmt],
    condition: Optional[Expr],
    increment: Optional[Expr],
    body: Tuple[Stmt, ...],
) -> While:
    """Shared by both parsers so they build identical loops"""
    if increment is not None:
        body = body + (Expression(increment),)

    if condition is None:
        condition = Literal(LoxBool(True))

    return While(condition, body, initializer)


def parse_source(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Stmt]:
    """
    Parse Lox source code to a list of statements.

    Lexical and syntax errors go to ``diagnostics``; inspect
    ``diagnostics.had_error`` before executing the result.
    """
    from .lexer_rd import tokenize

    if diagnostics is None:
        diagnostics = Diagnostics(echo=False)

    tokens = tokenize(source, diagnostics=diagnostics)
    parser = Parser(tokens, diagnostics=diagnostics)
    return parser.parse()


def parse_expr_fragment(source: str) -> Expr:
    """
    Parse a standalone expression fragment.
    Raises ParseError on the first error instead of recovering.
    """
    from .lexer_rd import tokenize

    tokens = tokenize(source)
    parser = Parser(tokens)
    expr = parser.parse_expr()

    # Recovered faults (bad assignment target, argument caps) still reject the fragment
    if parser.diagnostics.had_error:
        raise ParseError(parser.diagnostics.syntax_faults[0].message)

    return expr
