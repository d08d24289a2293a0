"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .diagnostics import Diagnostics
from .lexer_rd import Lexer as LoxTokenizer
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "reserved": "ansired",
}

_KEYWORDS = {
    TT.AND, TT.ELSE, TT.FOR, TT.FUN, TT.IF, TT.OR,
    TT.PRINT, TT.RETURN, TT.VAR, TT.WHILE,
}

_OPERATORS = {
    TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR,
    TT.BANG, TT.BANG_EQUAL, TT.EQUAL, TT.EQUAL_EQUAL,
    TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL,
}

_PUNCTUATION = {
    TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
    TT.COMMA, TT.DOT, TT.SEMICOLON,
}

# Token type → highlight group.
_TT_GROUP = {
    **{tt: "keyword" for tt in _KEYWORDS},
    **{tt: "operator" for tt in _OPERATORS},
    **{tt: "punctuation" for tt in _PUNCTUATION},
    # Class syntax is not supported; flag the reserved words
    TT.CLASS: "reserved",
    TT.SUPER: "reserved",
    TT.THIS: "reserved",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NIL: "constant",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENTIFIER: "identifier",
}


def token_group(tokens: list[Tok], idx: int) -> str:
    """Highlight group for tokens[idx]; names in call or `fun` position read as functions."""
    tok = tokens[idx]

    if tok.type == TT.IDENTIFIER:
        after = tokens[idx + 1] if idx + 1 < len(tokens) else None
        before = tokens[idx - 1] if idx > 0 else None
        if before is not None and before.type == TT.FUN:
            return "function"
        if after is not None and after.type == TT.LEFT_PAREN:
            return "function"

    return _TT_GROUP.get(tok.type, "")


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    # Faults (e.g. an unfinished string) just leave that span unstyled
    tokens = LoxTokenizer(text, diagnostics=Diagnostics(echo=False)).tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Columns are 1-based and the line is tokenized on its own
        idx = tok.column - 1
        if idx < pos or text[idx:idx + len(tok.lexeme)] != tok.lexeme:
            continue

        # Unstyled gap before token (whitespace, comments).
        if idx > pos:
            result.append(("", text[pos:idx]))

        style = GROUP_STYLE.get(token_group(tokens, i), "")
        result.append((style, tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
