from __future__ import annotations

from typing import Callable

from ..runtime import Frame, LoxNil, LoxReturnSignal, LoxRuntimeError, LoxValue
from ..tree import Expr, Return
from .helpers import current_function_frame as _current_function_frame

EvalFunc = Callable[[Expr, Frame], LoxValue]

def eval_return_stmt(node: Return, frame: Frame, eval_func: EvalFunc) -> None:
    if _current_function_frame(frame) is None:
        raise LoxRuntimeError(node.keyword, "Can't return from top-level code.")

    value = eval_func(node.value, frame) if node.value is not None else LoxNil()

    raise LoxReturnSignal(value)
