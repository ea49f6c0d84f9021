from __future__ import annotations

import importlib
from types import MappingProxyType
from typing import Dict, List, Mapping

from .types import (
    MkArray, MkBoolean, MkBound, MkBuiltin, MkError, MkFunction, MkHash,
    MkIndexed, MkInteger, MkNull, MkReturn, MkString, MkValue,
    BuiltinFn, Frame, ObjType, NULL, TRUE, FALSE,
    MonkeyRuntimeError, MonkeyTypeError, MonkeyNameError, MonkeyIndexError,
    native_bool, unwrap, is_error, type_name, wrap_int, INT_MIN, INT_MAX,
)

_REGISTRY: Dict[str, MkBuiltin] = {}

# Read-only view; filled once when the stdlib module is imported.
BUILTINS: Mapping[str, MkBuiltin] = MappingProxyType(_REGISTRY)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load the stdlib module (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("monkey_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_builtin(name: str):
    def dec(fn: BuiltinFn):
        if name in _REGISTRY:
            raise ValueError(f"builtin '{name}' registered twice")
        _REGISTRY[name] = MkBuiltin(name, fn)
        return fn

    return dec

def new_error(message: str) -> MkError:
    return MkError(message)

def call_function(fn: MkValue, args: List[MkValue]) -> MkValue:
    """
    Call semantics:
    - Functions run their body in a fresh frame chained to the closure frame
    - Parameters bind positionally; extra args are dropped and missing
      params stay unbound
    - A `return` inside the body yields its value, anything else yields null
    - Builtins get the argument list as-is and their result is passed through
    """
    from .evaluator import eval_node  # local import to avoid cycle

    match fn:
        case MkFunction():
            callee_frame = Frame(parent=fn.frame)

            for name, val in zip(fn.params, args):
                callee_frame.define(name, val)

            result = eval_node(fn.body, callee_frame)

            if isinstance(result, MkReturn):
                return result.value
            if is_error(result):
                return result
            return NULL
        case MkBuiltin():
            return fn.fn(args)
        case _:
            raise MonkeyTypeError(f"not a function: {type_name(fn)}")

__all__ = [
    "MkArray", "MkBoolean", "MkBound", "MkBuiltin", "MkError", "MkFunction",
    "MkHash", "MkIndexed", "MkInteger", "MkNull", "MkReturn", "MkString",
    "MkValue", "Frame", "ObjType", "NULL", "TRUE", "FALSE",
    "MonkeyRuntimeError", "MonkeyTypeError", "MonkeyNameError", "MonkeyIndexError",
    "BUILTINS", "init_stdlib", "register_builtin", "new_error", "call_function",
    "native_bool", "unwrap", "is_error", "type_name", "wrap_int", "INT_MIN", "INT_MAX",
]
