"""Fault accumulation for the lexer, parser and interpreter.

Each run gets its own Diagnostics instance; the front end polls
``had_error``/``had_runtime_error`` to pick an exit code.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, TextIO

from .token_types import TT, Tok

if TYPE_CHECKING:
    from .types import LoxRuntimeError


@dataclass(frozen=True)
class SyntaxFault:
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        if self.where:
            return f"[line {self.line}] Error {self.where}: {self.message}"
        return f"[line {self.line}] Error: {self.message}"


@dataclass(frozen=True)
class RuntimeFault:
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.message}\n[line {self.line}]"


def token_context(token: Tok) -> str:
    if token.type == TT.EOF:
        return "at end"
    return f"at '{token.lexeme}'"


class Diagnostics:
    """Collects syntax and runtime faults and echoes them to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, echo: bool = True):
        self.stream = stream
        self.echo = echo
        self.syntax_faults: List[SyntaxFault] = []
        self.runtime_faults: List[RuntimeFault] = []
        self.last_exception: Optional[LoxRuntimeError] = None

    @property
    def had_error(self) -> bool:
        return bool(self.syntax_faults)

    @property
    def had_runtime_error(self) -> bool:
        return bool(self.runtime_faults)

    def report(self, line: int, where: str, message: str) -> None:
        fault = SyntaxFault(line, where, message)
        self.syntax_faults.append(fault)
        self._emit(str(fault))

    def error(self, token: Tok, message: str) -> None:
        self.report(token.line, token_context(token), message)

    def runtime_error(self, exc: LoxRuntimeError) -> None:
        line = exc.token.line if exc.token is not None else 0
        self.last_exception = exc
        fault = RuntimeFault(line, exc.message)
        self.runtime_faults.append(fault)
        self._emit(str(fault))

    def reset(self) -> None:
        self.syntax_faults.clear()
        self.runtime_faults.clear()
        self.last_exception = None

    def _emit(self, text: str) -> None:
        if not self.echo:
            return

        stream = self.stream if self.stream is not None else sys.stderr
        print(text, file=stream)
