from __future__ import annotations

from typing import Dict, List

from ..runtime import (
    Frame,
    MkArray,
    MkHash,
    MkString,
    MkValue,
    MonkeyTypeError,
    is_error,
    type_name,
    unwrap,
)
from ..tree import ArrayLiteral, HashLiteral, IndexExpression, StringLiteral
from .helpers import EvalFunc
from .mutation import index_value

def eval_array_literal(n: ArrayLiteral, frame: Frame, eval_func: EvalFunc) -> MkValue:
    items: List[MkValue] = []

    for elem in n.elements:
        val = eval_func(elem, frame)
        if is_error(val):
            return val
        items.append(unwrap(val))

    return MkArray(items)

def eval_hash_literal(n: HashLiteral, frame: Frame, eval_func: EvalFunc) -> MkValue:
    """String keys are taken literally; identifier keys are looked up and must hold a string."""
    items: Dict[str, MkValue] = {}

    for key_node, value_node in n.pairs:
        if isinstance(key_node, StringLiteral):
            key = key_node.value
        else:
            key_val = eval_func(key_node, frame)
            if is_error(key_val):
                return key_val

            key_val = unwrap(key_val)
            if not isinstance(key_val, MkString):
                raise MonkeyTypeError(f"keys in hash tables must be strings: got {type_name(key_val)}")
            key = key_val.value

        val = eval_func(value_node, frame)
        if is_error(val):
            return val
        items[key] = unwrap(val)

    return MkHash(items)

def eval_index(n: IndexExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    recv = eval_func(n.left, frame)
    if is_error(recv):
        return recv

    index = eval_func(n.index, frame)
    if is_error(index):
        return index

    return index_value(unwrap(recv), unwrap(index))
