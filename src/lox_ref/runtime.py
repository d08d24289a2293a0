from __future__ import annotations

import importlib
from typing import Callable, List

from .token_types import Tok
from .types import (
    LoxNil, LoxNumber, LoxString, LoxBool, LoxFn, LoxNativeFn,
    LoxValue, LoxCallable, Frame, NativeFn, OutputSink,
    LoxRuntimeError, LoxTypeError, LoxNameError, LoxRedeclarationError,
    LoxZeroDivisionError, LoxArityError, LoxReturnSignal,
    Builtins, is_callable, is_lox_value,
)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load native modules (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("lox_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_native(name: str, *, arity: int):
    def dec(fn: NativeFn):
        Builtins.native_functions[name] = LoxNativeFn(name=name, arity=arity, fn=fn)
        return fn

    return dec

def _ensure_lox_value(value: object) -> LoxValue:
    if value is None:
        return LoxNil()
    if is_lox_value(value):
        return value
    raise LoxTypeError(None, f"Unexpected value type {type(value).__name__}")

def call_value(callee: LoxValue, args: List[LoxValue], paren: Tok, caller_frame: Frame) -> LoxValue:
    """Invoke a callable value; ``paren`` locates arity and type faults."""
    if not is_callable(callee):
        raise LoxTypeError(paren, "Can only call functions.")

    if len(args) != callee.arity:
        raise LoxArityError(paren, f"Expected {callee.arity} arguments but got {len(args)}.")

    try:
        if isinstance(callee, LoxNativeFn):
            return _ensure_lox_value(callee.fn(caller_frame, args))

        return call_loxfn(callee, args)
    except RecursionError:
        raise LoxRuntimeError(paren, "Stack overflow.") from None

def call_loxfn(fn: LoxFn, positional: List[LoxValue]) -> LoxValue:
    """
    Call semantics:
    - fresh frame parented to the closure, not to the caller
    - params bound by position into that frame; the body runs there too
    - result is the `return` value, or nil when the body falls off the end
    """
    from .evaluator import exec_stmt  # local import to avoid cycle
    from .eval.blocks import eval_program

    callee_frame = Frame(parent=fn.closure)

    for param, val in zip(fn.declaration.params, positional):
        callee_frame.define(param, val)

    callee_frame.mark_function_frame()

    try:
        eval_program(fn.declaration.body, callee_frame, exec_stmt)
    except LoxReturnSignal as signal:
        return signal.value

    return LoxNil()
