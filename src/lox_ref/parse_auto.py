"""Lark-driven reference parser.

Builds an LALR parser from grammar.lark and transforms its parse tree into
the same tree.py nodes parser_rd produces. There is no error recovery here:
the first syntax error raises ``lark.UnexpectedInput``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer

from .parser_rd import desugar_for
from .token_types import TT, Tok
from .tree import (
    Assign, Binary, Block, Call, Expression, Function, Grouping, If,
    Literal, Logical, Print, Reassign, Return, Stmt, Unary, Var, Variable, While,
)
from .types import LoxBool, LoxNil, LoxNumber, LoxString

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")


def to_tok(token: Token, type_: Optional[TT] = None) -> Tok:
    """Convert a Lark token into the lexer's token record."""
    kind = type_ if type_ is not None else TT[token.type]
    text = str(token.value)
    literal = None

    if kind == TT.NUMBER:
        literal = float(text)
    elif kind == TT.STRING:
        literal = text[1:-1]

    return Tok(kind, text, literal, token.line, token.column)


class ToAst(Transformer):
    """Lark tree -> tree.py nodes."""

    def start(self, c):
        return list(c)

    # ---------- declarations ----------

    def fun_decl(self, c):
        name, params, body = c
        return Function(to_tok(name), tuple(params or ()), body)

    def params(self, c):
        return [to_tok(tok) for tok in c]

    def var_decl(self, c):
        name, initializer = c
        return Var(to_tok(name), initializer)

    # ---------- statements ----------

    def expr_stmt(self, c):
        expr = c[0]
        # Statement-level `name = value;` is the dedicated reassignment form
        if isinstance(expr, Assign):
            return Reassign(expr.name, expr.value)
        return Expression(expr)

    def print_stmt(self, c):
        return Print(c[0])

    def return_stmt(self, c):
        keyword, value = c
        return Return(to_tok(keyword), value)

    def block(self, c):
        return tuple(c)

    def block_stmt(self, c):
        return Block(c[0])

    def if_stmt(self, c):
        condition, then_branch, else_branch = c
        return If(condition, then_branch, else_branch)

    def while_stmt(self, c):
        condition, body = c
        return While(condition, body)

    def for_stmt(self, c):
        initializer, condition, increment, body = c
        return desugar_for(initializer, condition, increment, body)

    def for_expr(self, c):
        return Expression(c[0])

    def for_empty(self, _c):
        return None

    # ---------- expressions ----------

    def assign(self, c):
        name, value = c
        return Assign(to_tok(name), value)

    def logical(self, c):
        left, op, right = c
        return Logical(left, to_tok(op), right)

    def binary(self, c):
        left, op, right = c
        return Binary(left, to_tok(op), right)

    def unary(self, c):
        op, right = c
        return Unary(to_tok(op), right)

    def call_expr(self, c):
        callee, _lpar, arguments, rpar = c
        paren = to_tok(rpar, TT.RIGHT_PAREN)
        return Call(callee, paren, tuple(arguments or ()))

    def arguments(self, c):
        return list(c)

    def true(self, _c):
        return Literal(LoxBool(True))

    def false(self, _c):
        return Literal(LoxBool(False))

    def nil(self, _c):
        return Literal(LoxNil())

    def number(self, c):
        return Literal(LoxNumber(float(c[0])))

    def string(self, c):
        return Literal(LoxString(str(c[0])[1:-1]))

    def variable(self, c):
        return Variable(to_tok(c[0]))

    def grouping(self, c):
        return Grouping(c[0])


@lru_cache(maxsize=1)
def build_parser() -> Lark:
    grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
    return Lark(grammar, parser="lalr", start="start", maybe_placeholders=True)


def parse_lark(source: str) -> List[Stmt]:
    tree = build_parser().parse(source)
    return ToAst().transform(tree)
