from __future__ import annotations

from typing import List, Optional, Sequence

from .diagnostics import Diagnostics
from .runtime import (
    Frame,
    LoxNil,
    LoxRuntimeError,
    LoxValue,
    init_stdlib,
)
from .token_types import Tok
from .tree import (
    Assign, Binary, Block, Call, Expr, Expression, Function, Grouping, If,
    Literal, Logical, Print, Reassign, Return, Stmt, Unary, Var, Variable, While,
)

from .eval.blocks import exec_block
from .eval.common import stringify
from .eval.control import eval_return_stmt
from .eval.expr import eval_binary, eval_logical, eval_unary
from .eval.fn import eval_call, eval_fn_def
from .eval.loops import eval_if_stmt, eval_while_stmt

# ---------------- Public API ----------------

def interpret(
    statements: Sequence[Stmt],
    frame: Optional[Frame] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Optional[LoxRuntimeError]:
    """
    Execute top-level statements in order.

    The first runtime fault is reported to ``diagnostics`` and stops the
    run; effects of the statements before it remain. Returns that fault,
    or None when every statement completed.
    """
    init_stdlib()

    if frame is None:
        frame = Frame()
    if diagnostics is None:
        diagnostics = Diagnostics()

    for stmt in statements:
        try:
            exec_stmt(stmt, frame)
        except RecursionError:
            # Deep block nesting never passes through a call's overflow check
            fault = LoxRuntimeError(first_token(stmt), "Stack overflow.")
        except LoxRuntimeError as e:
            fault = e
        else:
            continue

        diagnostics.runtime_error(fault)
        return fault

    return None

def first_token(node: Stmt | Expr) -> Optional[Tok]:
    """A token inside ``node`` that locates it; walks iteratively so deep trees are safe."""
    pending: List[Stmt | Expr] = [node]

    while pending:
        match pending.pop():
            case Var(name=tok) | Reassign(name=tok) | Function(name=tok) | Variable(name=tok) | Assign(name=tok):
                return tok
            case Return(keyword=tok) | Call(paren=tok):
                return tok
            case Unary(operator=tok) | Binary(operator=tok) | Logical(operator=tok):
                return tok
            case Expression(expression=inner) | Print(expression=inner) | Grouping(expression=inner):
                pending.append(inner)
            case If(condition=inner) | While(condition=inner):
                pending.append(inner)
            case Block(statements=stmts):
                pending.extend(reversed(stmts))

    return None

def eval_expr(expr: Expr, frame: Optional[Frame] = None) -> LoxValue:
    """Evaluate a single expression; faults propagate to the caller."""
    init_stdlib()

    if frame is None:
        frame = Frame()

    return eval_node(expr, frame)

# ---------------- Core evaluator ----------------

def eval_node(n: Expr, frame: Frame) -> LoxValue:
    match n:
        case Literal(value=value):
            return value
        case Grouping(expression=inner):
            return eval_node(inner, frame)
        case Variable(name=name):
            return frame.get(name)
        case Assign(name=name, value=value_node):
            value = eval_node(value_node, frame)
            frame.assign(name, value)
            return value
        case Logical():
            return eval_logical(n, frame, eval_node)
        case Unary():
            return eval_unary(n, frame, eval_node)
        case Binary():
            return eval_binary(n, frame, eval_node)
        case Call():
            return eval_call(n, frame, eval_node)
        case _:
            raise LoxRuntimeError(None, f"Unsupported expression node {type(n).__name__}")

def exec_stmt(s: Stmt, frame: Frame) -> None:
    match s:
        case Expression(expression=expr):
            eval_node(expr, frame)
        case Print(expression=expr):
            frame.emit(stringify(eval_node(expr, frame)))
        case Var(name=name, initializer=initializer):
            value = eval_node(initializer, frame) if initializer is not None else LoxNil()
            frame.define(name, value)
        case Reassign(name=name, value=value_node):
            value = eval_node(value_node, frame) if value_node is not None else LoxNil()
            frame.assign(name, value)
        case Block(statements=statements):
            exec_block(statements, frame, exec_stmt)
        case If():
            eval_if_stmt(s, frame, eval_node, exec_stmt)
        case While():
            eval_while_stmt(s, frame, eval_node, exec_stmt)
        case Function():
            eval_fn_def(s, frame)
        case Return():
            eval_return_stmt(s, frame, eval_node)
        case _:
            raise LoxRuntimeError(None, f"Unsupported statement node {type(s).__name__}")
