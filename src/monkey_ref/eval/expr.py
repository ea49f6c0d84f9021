from __future__ import annotations

from ..runtime import (
    Frame,
    MkInteger,
    MkString,
    MkValue,
    MonkeyRuntimeError,
    MonkeyTypeError,
    FALSE,
    TRUE,
    is_error,
    native_bool,
    type_name,
    unwrap,
    wrap_int,
)
from ..tree import InfixExpression, PrefixExpression
from .helpers import EvalFunc
from .mutation import assign_value

def eval_prefix(n: PrefixExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    rhs = eval_func(n.right, frame)
    if is_error(rhs):
        return rhs

    rhs = unwrap(rhs)

    match n.operator:
        case '!':
            # Only booleans invert; every other operand negates to false.
            return TRUE if rhs is FALSE else FALSE
        case '-':
            if not isinstance(rhs, MkInteger):
                raise MonkeyTypeError(f"unknown operator: -{type_name(rhs)}")
            return MkInteger(wrap_int(-rhs.value))
        case _:
            raise MonkeyTypeError(f"unknown operator: {n.operator}{type_name(rhs)}")

def eval_infix(n: InfixExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    lhs = eval_func(n.left, frame)
    if is_error(lhs):
        return lhs

    rhs = eval_func(n.right, frame)
    if is_error(rhs):
        return rhs

    # Assignment needs the bound name or indexed slot, so the left side stays wrapped.
    if n.operator == '=':
        return assign_value(lhs, unwrap(rhs), frame)

    return apply_binary_operator(n.operator, unwrap(lhs), unwrap(rhs))

def apply_binary_operator(op: str, lhs: MkValue, rhs: MkValue) -> MkValue:
    match lhs, rhs:
        case MkInteger(value=a), MkInteger(value=b):
            return _integer_operator(op, a, b)
        case MkString(value=a), MkString(value=b):
            return _string_operator(op, a, b)

    # Only singletons (booleans, null) can compare equal across this path
    if op == '==':
        return native_bool(lhs is rhs)
    if op == '!=':
        return native_bool(lhs is not rhs)

    if lhs.kind != rhs.kind:
        raise MonkeyTypeError(f"type mismatch: {type_name(lhs)} {op} {type_name(rhs)}")

    raise MonkeyTypeError(f"unknown operator: {type_name(lhs)} {op} {type_name(rhs)}")

def _integer_operator(op: str, a: int, b: int) -> MkValue:
    match op:
        case '+':
            return MkInteger(wrap_int(a + b))
        case '-':
            return MkInteger(wrap_int(a - b))
        case '*':
            return MkInteger(wrap_int(a * b))
        case '/':
            return MkInteger(wrap_int(_truncating_div(a, b)))
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)
    raise MonkeyTypeError(f"unknown operator: INTEGER {op} INTEGER")

def _string_operator(op: str, a: str, b: str) -> MkValue:
    match op:
        case '+':
            return MkString(a + b)
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)
    raise MonkeyTypeError(f"unknown operator: STRING {op} STRING")

def _truncating_div(a: int, b: int) -> int:
    if b == 0:
        raise MonkeyRuntimeError("division by zero")

    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
