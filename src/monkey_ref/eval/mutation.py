from __future__ import annotations

from typing import Union

from ..runtime import (
    Frame,
    MkArray,
    MkBound,
    MkHash,
    MkIndexed,
    MkInteger,
    MkString,
    MkValue,
    MonkeyIndexError,
    MonkeyTypeError,
    NULL,
    type_name,
)

def assign_value(target: MkValue, value: MkValue, frame: Frame) -> MkValue:
    """Apply `target = value`. Always evaluates to null."""
    match target:
        case MkBound(name=name):
            # Rebinds the nearest existing binding; never creates one.
            frame.set(name, value)
        case MkIndexed(receiver=recv, index=index):
            set_index_value(recv, index, value)
        case _:
            raise MonkeyTypeError(f"cannot assign value to: {type_name(target)}")

    return NULL

def set_index_value(recv: Union[MkArray, MkHash], index: Union[int, str], value: MkValue) -> None:
    """Write into the collection in place so every alias observes it."""
    match recv:
        case MkArray(items=items):
            items[index] = value
        case MkHash(items=items):
            items[index] = value
        case _:
            raise MonkeyTypeError(f"access by expression is not supported for this type: got {type_name(recv)}")

def index_value(recv: MkValue, index: MkValue) -> MkIndexed:
    """Resolve `recv[index]`, keeping receiver and key for a later assignment."""
    match recv:
        case MkArray(items=items):
            if not isinstance(index, MkInteger):
                raise MonkeyTypeError(f"access expression is not integer: got {type_name(index)}")

            idx = index.value
            if idx < 0 or idx >= len(items):
                raise MonkeyIndexError(f"index out of bounds: got={idx}")

            return MkIndexed(recv, idx, items[idx])
        case MkHash(items=items):
            if not isinstance(index, MkString):
                raise MonkeyTypeError(f"keys in hash tables must be strings: got {type_name(index)}")

            # Missing keys read as null
            return MkIndexed(recv, index.value, items.get(index.value, NULL))
        case _:
            raise MonkeyTypeError(f"access by expression is not supported for this type: got {type_name(recv)}")
