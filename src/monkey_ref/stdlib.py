"""Built-in functions (len, shift, append, log) registered via monkey_ref.runtime.

Builtins never raise: bad arity or argument types come back as MkError values.
"""

from __future__ import annotations

import logging
from typing import List

from .runtime import register_builtin, new_error, MkArray, MkInteger, MkString, MkValue, NULL, type_name

logger = logging.getLogger("monkey_ref.builtins")
logger.addHandler(logging.NullHandler())

def _arity_error(args: List[MkValue], want: str) -> MkValue:
    return new_error(f"wrong number of arguments: got={len(args)}, want={want}")

def _unsupported(value: MkValue) -> MkValue:
    return new_error(f"argument type is not supported: got {type_name(value)}")

@register_builtin("len")
def builtin_len(args: List[MkValue]) -> MkValue:
    if len(args) != 1:
        return _arity_error(args, "1")

    match args[0]:
        case MkString(value=text):
            return MkInteger(len(text))
        case MkArray(items=items):
            return MkInteger(len(items))
        case other:
            return _unsupported(other)

@register_builtin("shift")
def builtin_shift(args: List[MkValue]) -> MkValue:
    if len(args) != 1:
        return _arity_error(args, "1")

    arr = args[0]

    if not isinstance(arr, MkArray):
        return _unsupported(arr)

    # Empty arrays come back unchanged, the same object
    if not arr.items:
        return arr

    return MkArray(arr.items[1:])

@register_builtin("append")
def builtin_append(args: List[MkValue]) -> MkValue:
    if len(args) < 2:
        return _arity_error(args, ">=2")

    arr, *extra = args

    if not isinstance(arr, MkArray):
        return _unsupported(arr)

    # Appending to an empty array is a no-op, mirroring shift
    if not arr.items:
        return arr

    return MkArray(arr.items + extra)

@register_builtin("log")
def builtin_log(args: List[MkValue]) -> MkValue:
    logger.info(" ".join(str(arg) for arg in args))
    return NULL
