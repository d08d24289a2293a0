from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lark import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from .diagnostics import Diagnostics
from .evaluator import eval_expr, first_token, interpret
from .lexer_rd import LexError
from .parse_auto import parse_lark
from .parser_rd import ParseError, parse_expr_fragment, parse_source
from .runtime import Frame, LoxRuntimeError, LoxValue, OutputSink, init_stdlib
from .tree import Stmt
from .utils import debug_py_trace_enabled

EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_SOFTWARE = 70

# Each Lox call costs about a dozen Python frames
RECURSION_LIMIT = 5000

USAGE = "Usage: lox [--lark] [script]"

@dataclass
class RunResult:
    diagnostics: Diagnostics
    frame: Frame
    output: List[str] = field(default_factory=list)
    statements: List[Stmt] = field(default_factory=list)
    fault: Optional[LoxRuntimeError] = None

    @property
    def ok(self) -> bool:
        return not (self.diagnostics.had_error or self.diagnostics.had_runtime_error)

def _lark_fault_message(exc: UnexpectedInput) -> str:
    if isinstance(exc, UnexpectedCharacters):
        return f"Unexpected character '{exc.char}'."

    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "Unexpected end of input."
        return f"Unexpected token '{exc.token}'."

    return "Invalid syntax."

def parse_with(source: str, diagnostics: Diagnostics, parser: str="rd") -> List[Stmt]:
    """Parse with the recursive-descent parser, or the Lark reference grammar."""
    if parser == "rd":
        return parse_source(source, diagnostics)

    if parser != "lark":
        raise ValueError(f"Unknown parser {parser!r}")

    try:
        return parse_lark(source)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", None)
        if not isinstance(line, int) or line < 1:
            line = 1
        diagnostics.report(line, "", _lark_fault_message(exc))
        return []
    except RecursionError:
        diagnostics.report(1, "", "Too much nesting.")
        return []

def _raise_recursion_limit() -> None:
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)

def run(
    src: str,
    frame: Optional[Frame]=None,
    diagnostics: Optional[Diagnostics]=None,
    out: Optional[OutputSink]=None,
    parser: str="rd",
) -> RunResult:
    """
    Lex, parse and interpret one program.

    `print` output is collected in ``RunResult.output`` and also passed to
    ``out`` when given. Nothing executes if any syntax fault was reported.
    """
    init_stdlib()
    _raise_recursion_limit()

    if diagnostics is None:
        diagnostics = Diagnostics()

    result = RunResult(diagnostics=diagnostics, frame=frame if frame is not None else Frame())

    def sink(line: str) -> None:
        result.output.append(line)
        if out is not None:
            out(line)

    result.frame.out = sink
    result.statements = parse_with(src, diagnostics, parser=parser)

    if diagnostics.had_error:
        return result

    result.fault = interpret(result.statements, result.frame, diagnostics)
    return result

def repl_eval(
    src: str,
    frame: Frame,
    diagnostics: Diagnostics,
    out: Optional[OutputSink]=None,
    parser: str="rd",
) -> Optional[LoxValue]:
    """
    Evaluate one REPL entry against a persistent frame.

    A bare expression (no trailing ';') yields its value for echoing;
    anything else runs as a program and yields None.
    """
    try:
        expr = parse_expr_fragment(src)
    except (LexError, ParseError):
        run(src, frame=frame, diagnostics=diagnostics, out=out, parser=parser)
        return None

    init_stdlib()
    _raise_recursion_limit()
    frame.out = out

    try:
        return eval_expr(expr, frame)
    except RecursionError:
        diagnostics.runtime_error(LoxRuntimeError(first_token(expr), "Stack overflow."))
        return None
    except LoxRuntimeError as exc:
        diagnostics.runtime_error(exc)
        return None

def _print_py_trace(exc: BaseException) -> None:
    print("\nPython traceback:", file=sys.stderr)
    print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Existing file => read its contents.
    - Otherwise treat the argument as literal source.
    """

    if arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def run_file(arg: str, parser: str="rd") -> int:
    """Run a script and map its outcome to a process exit code."""
    source = _load_source(arg)
    result = run(source, out=print, parser=parser)

    if result.fault is not None and debug_py_trace_enabled():
        _print_py_trace(result.fault)

    if result.diagnostics.had_error:
        return EXIT_DATAERR
    if result.diagnostics.had_runtime_error:
        return EXIT_SOFTWARE
    return 0

def main(argv: Optional[List[str]]=None) -> None:
    parser = "rd"
    args: List[str] = []

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--lark":
            parser = "lark"
            continue

        args.append(token)

    if len(args) > 1:
        print(USAGE)
        raise SystemExit(EXIT_USAGE)

    if not args:
        from .repl import repl
        repl(parser=parser)
        return

    code = run_file(args[0], parser=parser)
    if code:
        raise SystemExit(code)

if __name__ == "__main__":
    main()
