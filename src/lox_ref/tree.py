"""AST node classes produced by the parsers and walked by the evaluator.

Two closed families: ``Expr`` variants evaluate to a value, ``Stmt``
variants execute for effect. Nodes are frozen; child sequences are tuples.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from .token_types import Tok
from .types import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue


class Expr:
    __slots__ = ()


class Stmt:
    __slots__ = ()


# ---------- Expressions ----------

@dataclass(frozen=True)
class Literal(Expr):
    value: LoxValue

@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

@dataclass(frozen=True)
class Unary(Expr):
    operator: Tok
    right: Expr

@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Tok
    right: Expr

@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Tok
    right: Expr

@dataclass(frozen=True)
class Variable(Expr):
    name: Tok

@dataclass(frozen=True)
class Assign(Expr):
    name: Tok
    value: Expr

@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Tok                  # closing paren, for error lines
    arguments: Tuple[Expr, ...]


# ---------- Statements ----------

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr

@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

@dataclass(frozen=True)
class Var(Stmt):
    name: Tok
    initializer: Optional[Expr] = None

@dataclass(frozen=True)
class Reassign(Stmt):
    name: Tok
    value: Optional[Expr] = None

@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]

@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Tuple[Stmt, ...]
    else_branch: Optional[Tuple[Stmt, ...]] = None

@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Tuple[Stmt, ...]
    initializer: Optional[Stmt] = None   # set by `for` desugaring

@dataclass(frozen=True)
class Function(Stmt):
    name: Tok
    params: Tuple[Tok, ...]
    body: Tuple[Stmt, ...]

@dataclass(frozen=True)
class Return(Stmt):
    keyword: Tok
    value: Optional[Expr] = None


# ---------- Source rendering ----------

def render_literal(value: LoxValue) -> str:
    match value:
        case LoxNil():
            return "nil"
        case LoxBool(value=b):
            return "true" if b else "false"
        case LoxNumber(value=num):
            # Positional notation only: the lexer has no exponent syntax.
            return format(Decimal(repr(float(num))), 'f')
        case LoxString(value=s):
            return f'"{s}"'
        case _:
            raise TypeError(f"{type(value).__name__} has no literal form")

def render_expr(node: Expr) -> str:
    """Render an expression as source text that parses back to the same shape."""
    match node:
        case Literal(value=value):
            return render_literal(value)
        case Grouping(expression=inner):
            return f"({render_expr(inner)})"
        case Unary(operator=op, right=right):
            return f"{op.lexeme}{render_expr(right)}"
        case Binary(left=left, operator=op, right=right) | Logical(left=left, operator=op, right=right):
            return f"{render_expr(left)} {op.lexeme} {render_expr(right)}"
        case Variable(name=name):
            return name.lexeme
        case Assign(name=name, value=value):
            return f"{name.lexeme} = {render_expr(value)}"
        case Call(callee=callee, arguments=args):
            return f"{render_expr(callee)}({', '.join(render_expr(a) for a in args)})"
        case _:
            raise TypeError(f"Cannot render {type(node).__name__}")
