from __future__ import annotations

from textwrap import dedent

import pytest

from monkey_ref.evaluator import eval_node
from monkey_ref.runtime import (
    FALSE,
    Frame,
    MkBound,
    MkError,
    MkIndexed,
    MkInteger,
    MkArray,
    TRUE,
    is_error,
    native_bool,
    type_name,
    unwrap,
)
from monkey_ref.tree import Identifier, Node
from tests.support.harness import ParseErrors, run_program, run_runtime_case

SCENARIOS = [
    pytest.param(
        "5; true + false; 5",
        ("error", "unknown operator: BOOLEAN + BOOLEAN"),
        None,
        id="error-halts-program",
    ),
    pytest.param(
        "let x = 1 + true; x",
        ("error", "type mismatch: INTEGER + BOOLEAN"),
        None,
        id="error-in-let",
    ),
    pytest.param(
        "return 1 + true",
        ("error", "type mismatch: INTEGER + BOOLEAN"),
        None,
        id="error-in-return",
    ),
    pytest.param("foobar", ("error", "identifier not found: foobar"), None, id="unknown-name"),
    pytest.param(
        '{"name": "Monkey"}[fn(x) { x }]',
        ("error", "keys in hash tables must be strings: got FUNCTION"),
        None,
        id="function-as-key",
    ),
    pytest.param(
        "if (false) { 1 } else if (1 / 0) { 2 }",
        ("error", "division by zero"),
        None,
        id="error-in-else-if-condition",
    ),
    pytest.param(
        "-(1 + true)",
        ("error", "type mismatch: INTEGER + BOOLEAN"),
        None,
        id="error-through-prefix",
    ),
    pytest.param(
        "!(1 / 0)",
        ("error", "division by zero"),
        None,
        id="error-through-bang",
    ),
    pytest.param(
        "(1 / 0) + nope",
        ("error", "division by zero"),
        None,
        id="left-operand-first",
    ),
    pytest.param(
        dedent(
            """\
            let check = fn(n) {
                if (n > 10) { return n + true }
                return n
            };
            check(1) + check(20)
            """
        ),
        ("error", "type mismatch: INTEGER + BOOLEAN"),
        None,
        id="error-from-second-call",
    ),
    pytest.param("let = 1;", None, ParseErrors, id="parse-error-raises"),
    pytest.param("let x = ;", None, ParseErrors, id="parse-error-missing-value"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_error_handling(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_error_stops_before_binding() -> None:
    frame = Frame()
    result = run_program("let ok = 1; let bad = 1 / 0; let after = 2;", frame)
    assert is_error(result)
    assert frame.lookup("ok") == MkInteger(1)
    assert frame.lookup("bad") is None
    assert frame.lookup("after") is None


def test_parse_errors_collects_every_message() -> None:
    with pytest.raises(ParseErrors) as excinfo:
        run_program("let = 1; let y 2;")
    errors = excinfo.value.errors
    assert [e.message for e in errors] == [
        "expected next token to be 'IDENT', got = instead",
        "expected next token to be '=', got INT instead",
    ]
    assert str(excinfo.value).count("\n") == 1


def test_eval_node_turns_runtime_failures_into_values() -> None:
    result = eval_node(Identifier("nope"), Frame())
    assert isinstance(result, MkError)
    assert result.message == "identifier not found: nope"


def test_eval_node_rejects_unknown_nodes() -> None:
    result = eval_node(Node(), Frame())
    assert isinstance(result, MkError)
    assert result.message == "Unknown node: Node"


def test_error_rendering() -> None:
    err = MkError("boom")
    assert repr(err) == "ERROR: boom"
    assert str(err) == "ERROR: boom"
    assert type_name(err) == "ERROR"


def test_unwrap_strips_wrappers() -> None:
    inner = MkInteger(3)
    arr = MkArray([inner])
    assert unwrap(MkBound("x", inner)) is inner
    assert unwrap(MkIndexed(arr, 0, inner)) is inner
    assert unwrap(inner) is inner


def test_booleans_are_singletons() -> None:
    assert native_bool(True) is TRUE
    assert native_bool(False) is FALSE
    assert run_program("1 < 2") is TRUE
    assert run_program("!true") is FALSE
