from __future__ import annotations

from typing import Sequence

from ..runtime import Frame, MkReturn, MkValue, NULL, is_error, unwrap
from ..tree import BlockStatement, Statement
from .helpers import EvalFunc

def eval_program(statements: Sequence[Statement], frame: Frame, eval_func: EvalFunc) -> MkValue:
    """Run top-level statements, returning the last value.

    A `return` ends the whole program with its value; an error ends it with
    the error itself.
    """
    result: MkValue = NULL

    for stmt in statements:
        result = eval_func(stmt, frame)

        if isinstance(result, MkReturn):
            return result.value
        if is_error(result):
            return result

        result = unwrap(result)

    return result

def eval_block(block: BlockStatement, frame: Frame, eval_func: EvalFunc) -> MkValue:
    """Run a block in a fresh child scope.

    Return signals and errors are handed back untouched so enclosing blocks
    stop as well.
    """
    scope = Frame(parent=frame)
    result: MkValue = NULL

    for stmt in block.statements:
        result = eval_func(stmt, scope)

        if isinstance(result, MkReturn) or is_error(result):
            return result

    return result
