from __future__ import annotations

from typing import Callable, List

from ..runtime import Frame, LoxFn, LoxValue, call_value
from ..tree import Call, Expr, Function

EvalFunc = Callable[[Expr, Frame], LoxValue]

def eval_fn_def(node: Function, frame: Frame) -> None:
    # Closure is the declaring frame, so the function can see itself
    frame.define(node.name, LoxFn(declaration=node, closure=frame))

def eval_call(node: Call, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    callee = eval_func(node.callee, frame)
    args: List[LoxValue] = [eval_func(arg, frame) for arg in node.arguments]

    return call_value(callee, args, node.paren, frame)
