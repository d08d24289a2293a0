from __future__ import annotations

from typing import Tuple

from ..runtime import LoxNumber, LoxString, LoxTypeError, LoxValue
from ..token_types import Tok

def stringify(value: LoxValue) -> str:
    """Display form used by `print` and string concatenation."""
    if isinstance(value, LoxString):
        return value.value

    return repr(value)

def require_number(op: Tok, value: LoxValue) -> float:
    if isinstance(value, LoxNumber):
        return value.value

    raise LoxTypeError(op, "Operand must be a number.")

def require_numbers(op: Tok, lhs: LoxValue, rhs: LoxValue) -> Tuple[float, float]:
    if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
        return lhs.value, rhs.value

    raise LoxTypeError(op, "Operands must be numbers.")
