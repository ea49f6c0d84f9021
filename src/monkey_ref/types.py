from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Dict, List, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import BlockStatement

# ---------- Value Model ----------

class ObjType(Enum):
    INTEGER = "INTEGER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    RETURN = "RETURN"
    ERROR = "ERROR"
    IDENTIFIER = "IDENTIFIER"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    ARRAY = "ARRAY"
    HASHTABLE = "HASHTABLE"
    ACCESSBYEXPRESSION = "ACCESSBYEXPRESSION"

    def __str__(self) -> str:
        return self.value

@dataclass
class MkNull:
    kind: ClassVar[ObjType] = ObjType.NULL
    def __repr__(self) -> str:
        return "null"

@dataclass
class MkInteger:
    kind: ClassVar[ObjType] = ObjType.INTEGER
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class MkString:
    kind: ClassVar[ObjType] = ObjType.STRING
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'
    def __str__(self) -> str:
        return self.value

@dataclass
class MkBoolean:
    kind: ClassVar[ObjType] = ObjType.BOOLEAN
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class MkArray:
    kind: ClassVar[ObjType] = ObjType.ARRAY
    items: List['MkValue']
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass
class MkHash:
    kind: ClassVar[ObjType] = ObjType.HASHTABLE
    items: Dict[str, 'MkValue']
    def __repr__(self) -> str:
        pairs = []

        for k, v in self.items.items():
            pairs.append(f'"{k}": {repr(v)}')

        return "{" + ", ".join(pairs) + "}"

@dataclass(eq=False)
class MkFunction:
    kind: ClassVar[ObjType] = ObjType.FUNCTION
    params: Tuple[str, ...]
    body: BlockStatement
    frame: 'Frame'                   # Closure frame
    def __repr__(self) -> str:
        return f"fn({', '.join(self.params)}) {{{self.body}}}"

BuiltinFn = Callable[[List['MkValue']], 'MkValue']

@dataclass(frozen=True)
class MkBuiltin:
    kind: ClassVar[ObjType] = ObjType.BUILTIN
    name: str
    fn: BuiltinFn
    def __repr__(self) -> str:
        return f"builtin function {self.name}"

@dataclass
class MkError:
    kind: ClassVar[ObjType] = ObjType.ERROR
    message: str
    def __repr__(self) -> str:
        return f"ERROR: {self.message}"

# ---------- Wrappers ----------
# Never stored in a frame or a collection; consumers unwrap them first.

@dataclass
class MkReturn:
    """Control-flow signal carrying the value of a `return` statement."""
    kind: ClassVar[ObjType] = ObjType.RETURN
    value: 'MkValue'
    def __repr__(self) -> str:
        return repr(self.value)
    def __str__(self) -> str:
        return str(self.value)

@dataclass
class MkBound:
    """An evaluated identifier: its name plus the value it resolved to."""
    kind: ClassVar[ObjType] = ObjType.IDENTIFIER
    name: str
    value: 'MkValue'
    def __repr__(self) -> str:
        return repr(self.value)
    def __str__(self) -> str:
        return str(self.value)

@dataclass
class MkIndexed:
    """Result of `receiver[index]`, kept so that `=` can write back into receiver."""
    kind: ClassVar[ObjType] = ObjType.ACCESSBYEXPRESSION
    receiver: Union[MkArray, MkHash]
    index: Union[int, str]
    value: 'MkValue'
    def __repr__(self) -> str:
        return repr(self.value)
    def __str__(self) -> str:
        return str(self.value)

MkValue: TypeAlias = (
    MkNull
    | MkInteger
    | MkString
    | MkBoolean
    | MkArray
    | MkHash
    | MkFunction
    | MkBuiltin
    | MkError
    | MkReturn
    | MkBound
    | MkIndexed
)

NULL = MkNull()
TRUE = MkBoolean(True)
FALSE = MkBoolean(False)

INT_MIN = -(1 << 63)
INT_MAX = (1 << 63) - 1

def native_bool(value: bool) -> MkBoolean:
    return TRUE if value else FALSE

def wrap_int(value: int) -> int:
    """Reduce to signed 64-bit two's complement, the width of an INTEGER."""
    return (value - INT_MIN) % (1 << 64) + INT_MIN

def unwrap(value: MkValue) -> MkValue:
    """Strip MkBound / MkIndexed wrappers down to the underlying value."""
    while isinstance(value, (MkBound, MkIndexed)):
        value = value.value
    return value

def is_error(value: Optional[MkValue]) -> TypeGuard[MkError]:
    return isinstance(value, MkError)

def type_name(value: MkValue) -> str:
    return str(value.kind)

# ---------- Environment ----------

class Frame:
    """One lexical scope. Frames chain outward through `parent`."""

    def __init__(self, parent: Optional['Frame']=None):
        self.parent = parent
        self.vars: Dict[str, MkValue] = {}

    def define(self, name: str, val: MkValue) -> None:
        """Bind in this scope, shadowing any outer binding."""
        self.vars[name] = val

    def lookup(self, name: str) -> Optional[MkValue]:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.parent

        return None

    def get(self, name: str) -> MkValue:
        val = self.lookup(name)

        if val is None:
            raise MonkeyNameError(f"identifier not found: {name}")

        return val

    def set(self, name: str, val: MkValue) -> None:
        """Overwrite the nearest enclosing binding. Never creates one."""
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                frame.vars[name] = val
                return
            frame = frame.parent

        raise MonkeyNameError(f"cannot assign to undeclared identifier: {name}")

# ---------- Exceptions ----------
# Raised inside evaluator helpers; eval_node turns them into MkError values.

class MonkeyRuntimeError(Exception):
    pass

class MonkeyTypeError(MonkeyRuntimeError):
    pass

class MonkeyNameError(MonkeyRuntimeError):
    pass

class MonkeyIndexError(MonkeyRuntimeError):
    pass
