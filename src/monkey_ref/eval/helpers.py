from __future__ import annotations

from typing import Callable

from ..runtime import Frame, MkBoolean, MkInteger, MkValue
from ..tree import Node

EvalFunc = Callable[[Node, Frame], MkValue]

def is_truthy(val: MkValue) -> bool:
    """Booleans as-is, integers when strictly positive. Everything else is falsy."""
    match val:
        case MkBoolean(value=b):
            return b
        case MkInteger(value=num):
            return num > 0
        case _:
            return False
