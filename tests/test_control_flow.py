from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param("if (true) { 10 }", ("int", 10), None, id="if-true"),
    pytest.param("if (false) { 10 }", ("null", None), None, id="if-false-no-else"),
    pytest.param("if (1) { 10 }", ("int", 10), None, id="if-positive-int"),
    pytest.param("if (1 < 2) { 10 }", ("int", 10), None, id="if-comparison"),
    pytest.param("if (1 > 2) { 5 }", ("null", None), None, id="if-false-comparison"),
    pytest.param("if (1 > 2) { 10 } else { 20 }", ("int", 20), None, id="else-taken"),
    pytest.param("if (1 < 2) { 10 } else { 20 }", ("int", 10), None, id="else-skipped"),
    pytest.param("if (0) { 5 } else { 1 }", ("int", 1), None, id="zero-is-falsy"),
    pytest.param("if (-1) { 5 } else { 1 }", ("int", 1), None, id="negative-is-falsy"),
    pytest.param('if ("yes") { 5 } else { 1 }', ("int", 1), None, id="string-is-falsy"),
    pytest.param("if ([1]) { 5 } else { 1 }", ("int", 1), None, id="array-is-falsy"),
    pytest.param(
        "if (1 > 2) { 5 } else if (2 > 1) { 15 } else { 1 }",
        ("int", 15),
        None,
        id="else-if-taken",
    ),
    pytest.param(
        "if (1 > 2) { 5 } else if (2 == 1) { 15 } else if (2 > 1) { 25 } else { 1 }",
        ("int", 25),
        None,
        id="second-else-if-taken",
    ),
    pytest.param(
        "if (true) { 1 } else if (true) { 2 }",
        ("int", 1),
        None,
        id="first-truthy-branch-wins",
    ),
    pytest.param(
        "if (false) { 1 } else if (false) { 2 }",
        ("null", None),
        None,
        id="no-branch-no-else",
    ),
    pytest.param("if (true) { 1; 2; 3 }", ("int", 3), None, id="block-yields-last"),
    pytest.param("if (true) { let a = 1 }", ("null", None), None, id="block-ending-in-let"),
    pytest.param("let a = 5; if (true) { a }", ("int", 5), None, id="block-yields-identifier"),
    pytest.param("return 5", ("int", 5), None, id="top-level-return"),
    pytest.param("return 10; 5", ("int", 10), None, id="return-stops-program"),
    pytest.param("5; return 2 * 5; 5", ("int", 10), None, id="return-mid-program"),
    pytest.param("return 1; 1 / 0", ("int", 1), None, id="return-skips-rest"),
    pytest.param(
        dedent(
            """\
            if (10 > 1) {
                if (10 > 1) {
                    return 10;
                }
                return 1;
            }
            """
        ),
        ("int", 10),
        None,
        id="nested-return-unwinds",
    ),
    pytest.param(
        "if (2 > 1) { if (2 > 1) { true + false } return 1 }",
        ("error", "unknown operator: BOOLEAN + BOOLEAN"),
        None,
        id="nested-error-short-circuits",
    ),
    pytest.param(
        "if (10 > 1) { true + false; }",
        ("error", "unknown operator: BOOLEAN + BOOLEAN"),
        None,
        id="error-in-consequence",
    ),
    pytest.param(
        "if (1 + true) { 1 } else { 2 }",
        ("error", "type mismatch: INTEGER + BOOLEAN"),
        None,
        id="error-in-condition",
    ),
    pytest.param(
        "let i = 0; while (i < 5) { i = i + 1 }; i",
        ("int", 5),
        None,
        id="while-counts",
    ),
    pytest.param(
        dedent(
            """\
            let i = 0;
            let sum = 0;
            while (i < 4) {
                i = i + 1;
                sum = sum + i
            }
            sum
            """
        ),
        ("int", 10),
        None,
        id="while-accumulates",
    ),
    pytest.param("while (false) { 1 }", ("null", None), None, id="while-never-runs"),
    pytest.param(
        "let i = 0; while (i < 3) { i = i + 1 }",
        ("null", None),
        None,
        id="while-yields-null",
    ),
    pytest.param(
        "while (1) { 1 }",
        ("error", "while condition must be BOOLEAN, got INTEGER"),
        None,
        id="while-int-condition",
    ),
    pytest.param(
        "while (true) { 1 + true }",
        ("error", "type mismatch: INTEGER + BOOLEAN"),
        None,
        id="while-body-error-stops",
    ),
    pytest.param(
        dedent(
            """\
            let f = fn() {
                let i = 0;
                while (true) {
                    i = i + 1;
                    if (i > 3) { return i }
                }
            };
            f()
            """
        ),
        ("int", 4),
        None,
        id="return-escapes-while",
    ),
    pytest.param(
        dedent(
            """\
            let i = 0;
            while (i < 3) {
                let tmp = i * 10;
                i = i + 1
            }
            tmp
            """
        ),
        ("error", "identifier not found: tmp"),
        None,
        id="while-body-scope-is-local",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)
