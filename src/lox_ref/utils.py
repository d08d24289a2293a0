from __future__ import annotations

import os

from .types import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue

DEBUG_PY_TRACE_ENV = "LOX_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    """Whether runtime faults should also print the Python traceback."""
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        # No coercion across types; callables compare by identity
        case _:
            return lhs is rhs
