from __future__ import annotations

from typing import List

from ..runtime import Frame, MkFunction, MkValue, call_function, is_error, unwrap
from ..tree import CallExpression, FunctionLiteral
from .helpers import EvalFunc

def eval_function_literal(n: FunctionLiteral, frame: Frame) -> MkFunction:
    # Closure keeps a reference to the defining frame, not a copy
    return MkFunction(tuple(p.name for p in n.parameters), n.body, frame)

def eval_call(n: CallExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    callee = eval_func(n.function, frame)
    if is_error(callee):
        return callee

    args: List[MkValue] = []

    for arg_node in n.arguments:
        arg = eval_func(arg_node, frame)
        if is_error(arg):
            return arg
        args.append(unwrap(arg))

    return call_function(unwrap(callee), args)
