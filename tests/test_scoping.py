from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    Diagnostics,
    Frame,
    LoxNameError,
    LoxNumber,
    LoxRedeclarationError,
    TT,
    Tok,
    global_value,
    run,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param(
        "var x = 1; { var x = 2; print x; } print x;",
        ("output", ["2", "1"]),
        None,
        id="shadowing",
    ),
    pytest.param(
        "var a = 1; { a = 2; } print a;",
        ("output", ["2"]),
        None,
        id="assign-reaches-outer",
    ),
    pytest.param(
        "var a = 1; { var a = 5; a = 2; } print a;",
        ("output", ["1"]),
        None,
        id="assign-hits-nearest",
    ),
    pytest.param(
        "{ var b = 1; } print b;",
        ("runtime", "Undefined variable 'b'.\n[line 1]"),
        LoxNameError,
        id="block-local-gone",
    ),
    pytest.param(
        "{ var a = 1; var a = 2; }",
        ("runtime", "Variable 'a' already defined.\n[line 1]"),
        LoxRedeclarationError,
        id="redeclare-in-block",
    ),
    pytest.param(
        "var a = 1; { var a = 2; { var a = 3; print a; } print a; } print a;",
        ("output", ["3", "2", "1"]),
        None,
        id="nested-shadowing",
    ),
    pytest.param(
        "var a = 1; { var a = a + 1; print a; } print a;",
        ("output", ["2", "1"]),
        None,
        id="initializer-sees-outer",
    ),
    pytest.param("var a; print a;", ("output", ["nil"]), None, id="default-nil"),
    pytest.param(
        dedent(
            """\
            fun makeCounter() {
              var i = 0;
              fun count() { i = i + 1; return i; }
              return count;
            }
            var c = makeCounter();
            var d = makeCounter();
            print c(); print c(); print d();
            """
        ),
        ("output", ["1", "2", "1"]),
        None,
        id="closure-counter",
    ),
    pytest.param(
        dedent(
            """\
            var x = "global";
            fun show() { print x; }
            fun other() { var x = "local"; show(); }
            other();
            """
        ),
        ("output", ["global"]),
        None,
        id="lexical-not-dynamic",
    ),
    pytest.param(
        dedent(
            """\
            var x = "before";
            fun show() { print x; }
            x = "after";
            show();
            """
        ),
        ("output", ["after"]),
        None,
        id="closure-sees-later-assignment",
    ),
    pytest.param(
        "{ fun inner() { return 1; } } print inner();",
        ("runtime", "Undefined variable 'inner'.\n[line 1]"),
        LoxNameError,
        id="block-function-gone",
    ),
    pytest.param(
        "if (true) { var t = 1; } print t;",
        ("runtime", "Undefined variable 't'.\n[line 1]"),
        LoxNameError,
        id="if-branch-scope",
    ),
    pytest.param("var clock = 1; print clock;", ("output", ["1"]), None, id="global-shadows-native"),
    pytest.param(
        "fun clock() { return 7; } print clock();",
        ("output", ["7"]),
        None,
        id="function-shadows-native",
    ),
    pytest.param(
        "var clock = 1; var clock = 2;",
        ("runtime", "Variable 'clock' already defined.\n[line 1]"),
        LoxRedeclarationError,
        id="shadowed-native-redeclared",
    ),
    pytest.param(
        "{ var clock = \"inner\"; print clock; } print clock;",
        ("output", ["inner", "<native fn>"]),
        None,
        id="native-visible-after-block",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_globals_persist_across_runs() -> None:
    frame = Frame()
    run("var total = 1;", frame=frame, diagnostics=Diagnostics(echo=False))
    result = run("total = total + 41;", frame=frame, diagnostics=Diagnostics(echo=False))

    assert global_value(result, "total") == LoxNumber(42.0)


def test_block_leaves_global_frame_untouched() -> None:
    result = run_runtime_case("var a = 1; { var b = 2; a = a + b; }", None, None)

    assert set(result.frame.vars) == {"a"}
    assert global_value(result, "a") == LoxNumber(3.0)


def test_frame_define_get_assign() -> None:
    outer = Frame()
    inner = Frame(parent=outer)
    name = Tok(TT.IDENTIFIER, "v")

    outer.define(name, LoxNumber(1.0))
    inner.assign(name, LoxNumber(2.0))

    assert outer.get(name) == LoxNumber(2.0)
    assert "v" not in inner.vars

    inner.define(name, LoxNumber(3.0))
    assert inner.get(name) == LoxNumber(3.0)
    assert outer.get(name) == LoxNumber(2.0)

    with pytest.raises(LoxRedeclarationError):
        inner.define(name, LoxNumber(4.0))
    with pytest.raises(LoxNameError):
        inner.get(Tok(TT.IDENTIFIER, "missing"))


def test_output_goes_to_nearest_sink() -> None:
    seen = []
    root = Frame(out=seen.append)
    child = Frame(parent=Frame(parent=root))

    child.emit("hello")

    assert seen == ["hello"]
