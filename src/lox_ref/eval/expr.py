from __future__ import annotations

from typing import Callable

from ..runtime import (
    Frame,
    LoxBool,
    LoxNumber,
    LoxString,
    LoxTypeError,
    LoxValue,
    LoxZeroDivisionError,
    LoxRuntimeError,
)
from ..token_types import TT, Tok
from ..tree import Binary, Expr, Logical, Unary
from ..utils import lox_equals
from .common import require_number, require_numbers, stringify
from .helpers import is_truthy

EvalFunc = Callable[[Expr, Frame], LoxValue]

def eval_unary(node: Unary, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    rhs = eval_func(node.right, frame)
    op = node.operator

    match op.type:
        case TT.MINUS:
            return LoxNumber(-require_number(op, rhs))
        case TT.BANG:
            return LoxBool(not is_truthy(rhs))
        case _:
            raise LoxRuntimeError(op, f"Unsupported unary operator '{op.lexeme}'.")

def eval_logical(node: Logical, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    """Short-circuit and/or; yields the deciding operand, not a coerced bool."""
    lhs = eval_func(node.left, frame)

    if node.operator.type == TT.OR:
        if is_truthy(lhs):
            return lhs
    elif not is_truthy(lhs):
        return lhs

    return eval_func(node.right, frame)

def eval_binary(node: Binary, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    # Both operands are always evaluated, left first
    lhs = eval_func(node.left, frame)
    rhs = eval_func(node.right, frame)

    return apply_binary_operator(node.operator, lhs, rhs)

def apply_binary_operator(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match op.type:
        case TT.PLUS:
            return _add(op, lhs, rhs)
        case TT.MINUS:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(a - b)
        case TT.STAR:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(a * b)
        case TT.SLASH:
            a, b = require_numbers(op, lhs, rhs)
            if b == 0:
                raise LoxZeroDivisionError(op, "Cannot divide by zero.")
            return LoxNumber(a / b)
        case TT.GREATER:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a > b)
        case TT.GREATER_EQUAL:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a >= b)
        case TT.LESS:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a < b)
        case TT.LESS_EQUAL:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a <= b)
        case TT.EQUAL_EQUAL:
            return LoxBool(lox_equals(lhs, rhs))
        case TT.BANG_EQUAL:
            return LoxBool(not lox_equals(lhs, rhs))
        case _:
            raise LoxRuntimeError(op, f"Unsupported binary operator '{op.lexeme}'.")

def _add(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match (lhs, rhs):
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case (LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case (LoxString(value=a), LoxNumber()):
            return LoxString(a + stringify(rhs))
        case (LoxNumber(), LoxString(value=b)):
            return LoxString(stringify(lhs) + b)
        case _:
            raise LoxTypeError(op, "Operands must be two numbers or two strings.")
