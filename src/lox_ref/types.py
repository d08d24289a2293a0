from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from .token_types import Tok

if TYPE_CHECKING:
    from .tree import Function

# ---------- Value Model ----------

@dataclass
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        text = repr(float(self.value))
        return text[:-2] if text.endswith(".0") else text

@dataclass
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class LoxFn:
    declaration: 'Function'
    closure: 'Frame'           # Frame the declaration executed in

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    @property
    def arity(self) -> int:
        return len(self.declaration.params)

    def __repr__(self) -> str:
        return f"<fn {self.name}>"

OutputSink = Callable[[str], None]

NativeFn = Callable[['Frame', List['LoxValue']], 'LoxValue']

@dataclass(eq=False)
class LoxNativeFn:
    name: str
    arity: int
    fn: NativeFn
    def __repr__(self) -> str:
        return "<native fn>"

LoxValue: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | LoxFn
    | LoxNativeFn
)

LoxCallable: TypeAlias = LoxFn | LoxNativeFn

class Frame:
    """One lexical scope: a name->value map plus a link to the enclosing scope."""

    def __init__(
        self,
        parent: Optional['Frame']=None,
        out: Optional[OutputSink]=None,
        *,
        with_natives: bool=True,
    ):
        self.parent = parent
        self.vars: Dict[str, LoxValue] = {}
        self.out = out
        self._is_function_frame = False

        # A root frame sits under its own natives frame so globals may shadow natives
        if parent is None and with_natives and Builtins.native_functions:
            natives = Frame(with_natives=False)
            natives.vars.update(Builtins.native_functions)
            self.parent = natives

    def define(self, name: Tok, val: LoxValue) -> None:
        if name.lexeme in self.vars:
            raise LoxRedeclarationError(name, f"Variable '{name.lexeme}' already defined.")

        self.vars[name.lexeme] = val

    def get(self, name: Tok) -> LoxValue:
        if name.lexeme in self.vars:
            return self.vars[name.lexeme]

        if self.parent is not None:
            return self.parent.get(name)

        raise LoxNameError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Tok, val: LoxValue) -> None:
        if name.lexeme in self.vars:
            self.vars[name.lexeme] = val
            return

        if self.parent is not None:
            self.parent.assign(name, val)
            return

        raise LoxNameError(name, f"Undefined variable '{name.lexeme}'.")

    def emit(self, line: str) -> None:
        """Send one line of `print` output to the nearest sink up the chain."""
        if self.out is not None:
            self.out(line)
            return

        if self.parent is not None:
            self.parent.emit(line)
            return

        print(line)

    def mark_function_frame(self) -> None:
        self._is_function_frame = True

    def is_function_frame(self) -> bool:
        return self._is_function_frame

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    """Evaluation-time fault; ``token`` locates it in the source."""

    def __init__(self, token: Optional[Tok], message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> Optional[int]:
        return self.token.line if self.token is not None else None

    def __str__(self) -> str:
        if self.token is None:
            return self.message

        return f"{self.message} (line {self.token.line})"

class LoxTypeError(LoxRuntimeError):
    pass

class LoxNameError(LoxRuntimeError):
    pass

class LoxRedeclarationError(LoxRuntimeError):
    pass

class LoxZeroDivisionError(LoxRuntimeError):
    pass

class LoxArityError(LoxRuntimeError):
    pass

class LoxReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: LoxValue):
        self.value = value

_LOX_VALUE_TYPES: Tuple[type, ...] = (
    LoxNil,
    LoxNumber,
    LoxString,
    LoxBool,
    LoxFn,
    LoxNativeFn,
)

def is_lox_value(value: object) -> TypeGuard[LoxValue]:
    return isinstance(value, _LOX_VALUE_TYPES)

def is_callable(value: LoxValue) -> TypeGuard[LoxCallable]:
    return isinstance(value, (LoxFn, LoxNativeFn))

class Builtins:
    native_functions: Dict[str, LoxNativeFn] = {}
