from __future__ import annotations

from typing import Callable, Optional

from .runtime import (
    BUILTINS,
    Frame,
    MkBound,
    MkError,
    MkInteger,
    MkReturn,
    MkString,
    MkValue,
    MonkeyNameError,
    MonkeyRuntimeError,
    NULL,
    init_stdlib,
    is_error,
    native_bool,
    unwrap,
)

from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    WhileExpression,
)

from .eval.blocks import eval_program, eval_block
from .eval.expr import eval_prefix, eval_infix
from .eval.fn import eval_function_literal, eval_call
from .eval.literals import eval_array_literal, eval_hash_literal, eval_index
from .eval.loops import eval_if, eval_while

# ---------------- Public API ----------------

def eval_expr(ast: Node, frame: Optional[Frame]=None) -> MkValue:
    init_stdlib()

    if frame is None:
        frame = Frame()

    return eval_node(ast, frame)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> MkValue:
    """Evaluate one node. Runtime failures come back as MkError values."""
    try:
        return _eval_node_inner(n, frame)
    except MonkeyRuntimeError as e:
        return MkError(str(e))


def _eval_node_inner(n: Node, frame: Frame) -> MkValue:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is not None:
        return handler(n, frame)

    match n:
        case IntegerLiteral(value=v):
            return MkInteger(v)
        case StringLiteral(value=v):
            return MkString(v)
        case BooleanLiteral(value=v):
            return native_bool(v)
        case Identifier(name=name):
            return _eval_identifier(name, frame)
        case ExpressionStatement(expression=expr):
            return eval_node(expr, frame)
        case _:
            raise MonkeyRuntimeError(f"Unknown node: {type(n).__name__}")

# ---------------- Names / statements ----------------

def _eval_identifier(name: str, frame: Frame) -> MkValue:
    val = frame.lookup(name)

    if val is None:
        val = BUILTINS.get(name)

    if val is None:
        raise MonkeyNameError(f"identifier not found: {name}")

    return MkBound(name, val)

def _eval_let(n: LetStatement, frame: Frame) -> MkValue:
    val = eval_node(n.value, frame)
    if is_error(val):
        return val

    frame.define(n.name.name, unwrap(val))
    return NULL

def _eval_return(n: ReturnStatement, frame: Frame) -> MkValue:
    val = eval_node(n.value, frame)
    if is_error(val):
        return val

    return MkReturn(unwrap(val))

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[type, Callable[..., MkValue]] = {
    Program: lambda n, frame: eval_program(n.statements, frame, eval_node),
    BlockStatement: lambda n, frame: eval_block(n, frame, eval_node),
    LetStatement: _eval_let,
    ReturnStatement: _eval_return,
    PrefixExpression: lambda n, frame: eval_prefix(n, frame, eval_node),
    InfixExpression: lambda n, frame: eval_infix(n, frame, eval_node),
    IfExpression: lambda n, frame: eval_if(n, frame, eval_node),
    WhileExpression: lambda n, frame: eval_while(n, frame, eval_node),
    FunctionLiteral: eval_function_literal,
    CallExpression: lambda n, frame: eval_call(n, frame, eval_node),
    ArrayLiteral: lambda n, frame: eval_array_literal(n, frame, eval_node),
    HashLiteral: lambda n, frame: eval_hash_literal(n, frame, eval_node),
    IndexExpression: lambda n, frame: eval_index(n, frame, eval_node),
}

init_stdlib()
