from __future__ import annotations

from typing import Callable, Sequence

from ..runtime import Frame
from ..tree import Stmt

ExecFunc = Callable[[Stmt, Frame], None]

def eval_program(statements: Sequence[Stmt], frame: Frame, exec_func: ExecFunc) -> None:
    """Run a statement list in ``frame``, in order."""
    for stmt in statements:
        exec_func(stmt, frame)

def exec_block(statements: Sequence[Stmt], frame: Frame, exec_func: ExecFunc) -> None:
    """
    Run statements in a fresh child scope of ``frame``.

    The caller keeps its own frame reference, so its scope is back in
    effect on every exit path: normal completion, a runtime fault, or a
    `return` unwinding through.
    """
    eval_program(statements, Frame(parent=frame), exec_func)
