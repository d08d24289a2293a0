from __future__ import annotations

import pytest

from tests.support.harness import LoxTypeError, run_runtime_case

SCENARIOS = [
    pytest.param('print "a" + "b";', ("output", ["ab"]), None, id="concat"),
    pytest.param('print "n" + 1;', ("output", ["n1"]), None, id="string-plus-number"),
    pytest.param('print 1 + "n";', ("output", ["1n"]), None, id="number-plus-string"),
    pytest.param('print "v" + 2.5;', ("output", ["v2.5"]), None, id="fraction-stringified"),
    pytest.param('print "" + "";', ("output", [""]), None, id="empty"),
    pytest.param('print "a\nb";', ("output", ["a\nb"]), None, id="multiline-literal"),
    pytest.param('print "back\\slash";', ("output", ["back\\slash"]), None, id="no-escape-sequences"),
    pytest.param('print "x" == "x"; print "x" == "y";', ("output", ["true", "false"]), None, id="equality"),
    pytest.param('print "a" < "b";', ("runtime", "Operands must be numbers.\n[line 1]"), LoxTypeError, id="no-ordering"),
    pytest.param('print "a" + nil;', ("runtime", "Operands must be two numbers or two strings.\n[line 1]"), LoxTypeError, id="concat-nil"),
    pytest.param('print "t" + true;', ("runtime", "Operands must be two numbers or two strings.\n[line 1]"), LoxTypeError, id="concat-bool"),
    pytest.param('var s = "a"; s = s + s; s = s + s; print s;', ("output", ["aaaa"]), None, id="accumulate"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_strings(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


DISPLAY_SCENARIOS = [
    pytest.param("print nil;", ["nil"], id="nil"),
    pytest.param("print true; print false;", ["true", "false"], id="bools"),
    pytest.param('print "raw";', ["raw"], id="string-unquoted"),
    pytest.param("fun f() {} print f;", ["<fn f>"], id="function"),
    pytest.param("print clock;", ["<native fn>"], id="native"),
]


@pytest.mark.parametrize("source, lines", DISPLAY_SCENARIOS)
def test_print_display(source: str, lines: list) -> None:
    run_runtime_case(source, ("output", lines), None)
