from __future__ import annotations

from typing import Callable

from ..runtime import Frame, LoxValue
from ..tree import Expr, If, Stmt, While
from .blocks import exec_block
from .helpers import is_truthy as _is_truthy

EvalFunc = Callable[[Expr, Frame], LoxValue]
ExecFunc = Callable[[Stmt, Frame], None]

def eval_if_stmt(node: If, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> None:
    if _is_truthy(eval_func(node.condition, frame)):
        exec_block(node.then_branch, frame, exec_func)
    elif node.else_branch is not None:
        exec_block(node.else_branch, frame, exec_func)

def eval_while_stmt(node: While, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> None:
    """
    One loop frame hosts the initializer and the condition and outlives
    every iteration, so `i = i + 1` persists and closures made in the body
    all see the same `i`. Each pass of the body gets its own child frame
    for the body's own declarations.
    """
    loop_frame = Frame(parent=frame)

    if node.initializer is not None:
        exec_func(node.initializer, loop_frame)

    while _is_truthy(eval_func(node.condition, loop_frame)):
        exec_block(node.body, loop_frame, exec_func)
