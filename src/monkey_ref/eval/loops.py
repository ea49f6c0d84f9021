from __future__ import annotations

from ..runtime import Frame, MkBoolean, MkReturn, MkValue, MonkeyTypeError, NULL, is_error, type_name, unwrap
from ..tree import IfExpression, WhileExpression
from .helpers import EvalFunc, is_truthy

def eval_if(n: IfExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    """First truthy branch wins; otherwise the else block, otherwise null."""
    for cond_node, body in n.branches:
        cond = eval_func(cond_node, frame)
        if is_error(cond):
            return cond

        if is_truthy(unwrap(cond)):
            return eval_func(body, frame)

    if n.alternative is not None:
        return eval_func(n.alternative, frame)

    return NULL

def eval_while(n: WhileExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    while True:
        # Condition is re-evaluated in the enclosing scope, not the body's
        cond = eval_func(n.condition, frame)
        if is_error(cond):
            return cond

        cond = unwrap(cond)
        if not isinstance(cond, MkBoolean):
            raise MonkeyTypeError(f"while condition must be BOOLEAN, got {type_name(cond)}")

        if not cond.value:
            return NULL

        result = eval_func(n.body, frame)
        if isinstance(result, MkReturn) or is_error(result):
            return result
