from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest

from lox_ref.diagnostics import Diagnostics
from lox_ref.lexer_rd import LexError, TT, tokenize


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    expected_lines: Optional[Tuple[Tuple[str, int], ...]] = None
    msg: Optional[str] = None


def _significant(source: str, diagnostics: Optional[Diagnostics] = None):
    return [tok for tok in tokenize(source, diagnostics) if tok.type != TT.EOF]


BASIC_TOKEN_CASES: List[Case] = [
    Case("number-int", "123", expected=((TT.NUMBER, 123.0),)),
    Case("number-float", "3.14", expected=((TT.NUMBER, 3.14),)),
    Case("ident-single", "x", expected=((TT.IDENTIFIER, None),)),
    Case("ident-snake", "foo_bar2", expected=((TT.IDENTIFIER, None),)),
    Case("string-double", '"hello"', expected=((TT.STRING, "hello"),)),
    Case("string-empty", '""', expected=((TT.STRING, ""),)),
    Case("string-no-escapes", '"a\\n"', expected=((TT.STRING, "a\\n"),)),
    Case("bool-true", "true", expected=((TT.TRUE, None),)),
    Case("bool-false", "false", expected=((TT.FALSE, None),)),
    Case("nil-literal", "nil", expected=((TT.NIL, None),)),
]

OPERATOR_CASES: List[Case] = [
    Case("plus", "+", expected_types=(TT.PLUS,)),
    Case("minus", "-", expected_types=(TT.MINUS,)),
    Case("star", "*", expected_types=(TT.STAR,)),
    Case("slash", "/", expected_types=(TT.SLASH,)),
    Case("bang", "!", expected_types=(TT.BANG,)),
    Case("eq", "==", expected_types=(TT.EQUAL_EQUAL,)),
    Case("neq", "!=", expected_types=(TT.BANG_EQUAL,)),
    Case("assign", "=", expected_types=(TT.EQUAL,)),
    Case("lte", "<=", expected_types=(TT.LESS_EQUAL,)),
    Case("gte", ">=", expected_types=(TT.GREATER_EQUAL,)),
    Case("lt", "<", expected_types=(TT.LESS,)),
    Case("gt", ">", expected_types=(TT.GREATER,)),
    Case("punct", "(){},.;", expected_types=(
        TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
        TT.COMMA, TT.DOT, TT.SEMICOLON,
    )),
    Case("eq-chain", "===", expected_types=(TT.EQUAL_EQUAL, TT.EQUAL)),
    Case("bang-bang", "!!x", expected_types=(TT.BANG, TT.BANG, TT.IDENTIFIER)),
    Case("trailing-dot", "1.", expected_types=(TT.NUMBER, TT.DOT)),
    Case("dot-leading", ".5", expected_types=(TT.DOT, TT.NUMBER)),
    Case("minus-number", "-3", expected_types=(TT.MINUS, TT.NUMBER)),
]

KEYWORD_CASES: List[Case] = [
    Case("keywords", "and class else false fun for if nil or print return super this true var while",
         expected_types=(
             TT.AND, TT.CLASS, TT.ELSE, TT.FALSE, TT.FUN, TT.FOR, TT.IF, TT.NIL,
             TT.OR, TT.PRINT, TT.RETURN, TT.SUPER, TT.THIS, TT.TRUE, TT.VAR, TT.WHILE,
         )),
    Case("keyword-prefix-ident", "orchid variable fund", expected_types=(
        TT.IDENTIFIER, TT.IDENTIFIER, TT.IDENTIFIER,
    )),
    Case("keywords-case-sensitive", "Print NIL", expected_types=(TT.IDENTIFIER, TT.IDENTIFIER)),
]

SKIP_CASES: List[Case] = [
    Case("line-comment", "// nothing here\nx", expected_lines=(("x", 2),)),
    Case("comment-at-eof", "x // trailing", expected_lines=(("x", 1),)),
    Case("block-comment", "/* one\ntwo */ y", expected_lines=(("y", 2),)),
    Case("block-comment-inline", "a /* b */ c", expected_lines=(("a", 1), ("c", 1))),
    Case("multiline-string", '"a\nb" z', expected_lines=(('"a\nb"', 1), ("z", 2))),
    Case("tabs-and-cr", "\ta\r\n\tb", expected_lines=(("a", 1), ("b", 2))),
]

ERROR_CASES: List[Case] = [
    Case("unexpected-char", "@", msg="[line 1] Error: Unexpected character '@'."),
    Case("unterminated-string", 'print "abc', msg="[line 1] Error: Unterminated string."),
    Case("unterminated-string-multiline", '\n"abc\n', msg="[line 2] Error: Unterminated string."),
    Case("unterminated-block-comment", "/* abc", msg="[line 1] Error: Unterminated block comment."),
    Case("unexpected-char-line", "x\n\n#", msg="[line 3] Error: Unexpected character '#'."),
    Case("superscript-digit", "print \u00b2;", msg="[line 1] Error: Unexpected character '\u00b2'."),
    Case("non-ascii-digit", "1\u0663", msg="[line 1] Error: Unexpected character '\u0663'."),
]


@pytest.mark.parametrize("case", BASIC_TOKEN_CASES, ids=lambda c: c.name)
def test_literal_tokens(case: Case) -> None:
    tokens = _significant(case.source)
    assert [(tok.type, tok.literal) for tok in tokens] == list(case.expected)
    assert tokens[0].lexeme == case.source


@pytest.mark.parametrize("case", OPERATOR_CASES + KEYWORD_CASES, ids=lambda c: c.name)
def test_token_types(case: Case) -> None:
    assert tuple(tok.type for tok in _significant(case.source)) == case.expected_types


@pytest.mark.parametrize("case", SKIP_CASES, ids=lambda c: c.name)
def test_skipped_text_tracks_lines(case: Case) -> None:
    tokens = _significant(case.source)
    assert tuple((tok.lexeme, tok.line) for tok in tokens) == case.expected_lines


@pytest.mark.parametrize("case", ERROR_CASES, ids=lambda c: c.name)
def test_errors_reported_to_diagnostics(case: Case) -> None:
    diagnostics = Diagnostics(echo=False)
    tokenize(case.source, diagnostics)
    assert [str(f) for f in diagnostics.syntax_faults] == [case.msg]


@pytest.mark.parametrize("case", ERROR_CASES, ids=lambda c: c.name)
def test_errors_raise_without_diagnostics(case: Case) -> None:
    with pytest.raises(LexError):
        tokenize(case.source)


def test_scanning_continues_after_error() -> None:
    diagnostics = Diagnostics(echo=False)
    tokens = _significant("1 @ 2 $ 3", diagnostics)

    assert [tok.literal for tok in tokens] == [1.0, 2.0, 3.0]
    assert len(diagnostics.syntax_faults) == 2


def test_eof_carries_last_line() -> None:
    tokens = tokenize("a\nb\n")
    assert tokens[-1].type == TT.EOF
    assert tokens[-1].line == 3


def test_empty_source_is_just_eof() -> None:
    tokens = tokenize("")
    assert [tok.type for tok in tokens] == [TT.EOF]
    assert tokens[0].line == 1


def test_columns_are_one_based() -> None:
    tokens = _significant("var x =\n  10;")
    assert [(tok.lexeme, tok.line, tok.column) for tok in tokens] == [
        ("var", 1, 1),
        ("x", 1, 5),
        ("=", 1, 7),
        ("10", 2, 3),
        (";", 2, 5),
    ]
