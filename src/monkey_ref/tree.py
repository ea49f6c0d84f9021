"""AST node classes produced by the parser and walked by the evaluator.

Every node is a frozen dataclass. `str(node)` gives a canonical source-like
rendering used in diagnostics and tests; `to_lark(node)` converts a subtree
into a `lark.Tree` so `.pretty()` can dump it.
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

from .token_types import Tok


def _tok_field():
    return field(default=None, compare=False, repr=False)


class Node:
    """Base for every AST node. Subclasses are dataclasses with a `token` field."""
    token: Optional[Tok]

    def token_literal(self) -> str:
        return str(self.token.value) if self.token is not None else ""


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Identifier(Node):
    name: str
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Node):
    value: int
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple[Expression, ...]
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class HashLiteral(Node):
    """Key nodes are always Identifier or StringLiteral."""
    pairs: Tuple[Tuple[Expression, Expression], ...]
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


@dataclass(frozen=True)
class PrefixExpression(Node):
    operator: str
    right: Expression
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f"{self.operator}{self.right}"


@dataclass(frozen=True)
class InfixExpression(Node):
    operator: str
    left: Expression
    right: Expression
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class IfExpression(Node):
    """Flattened if / else if chain: one (condition, block) pair per branch."""
    branches: Tuple[Tuple[Expression, BlockStatement], ...]
    alternative: Optional[BlockStatement] = None
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        parts = [f"if ({cond}) {{{body}}}" for cond, body in self.branches]
        out = " else ".join(parts)
        if self.alternative is not None:
            out += f" else {{{self.alternative}}}"
        return out


@dataclass(frozen=True)
class WhileExpression(Node):
    condition: Expression
    body: BlockStatement
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f"while ({self.condition}) {{{self.body}}}"


@dataclass(frozen=True)
class FunctionLiteral(Node):
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{{self.body}}}"


@dataclass(frozen=True)
class CallExpression(Node):
    function: Expression
    arguments: Tuple[Expression, ...]
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class IndexExpression(Node):
    left: Expression
    index: Expression
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f"{self.left}[{self.index}]"


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class LetStatement(Node):
    name: Identifier
    value: Expression
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f"let {self.name} = {self.value}"


@dataclass(frozen=True)
class ReturnStatement(Node):
    value: Expression
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return f"return {self.value}"


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: Expression
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Node):
    statements: Tuple[Statement, ...]
    token: Optional[Tok] = _tok_field()

    def __str__(self) -> str:
        return "; ".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...]
    token: Optional[Tok] = _tok_field()

    def token_literal(self) -> str:
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self) -> str:
        return "; ".join(str(s) for s in self.statements)


Expression: TypeAlias = Union[
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral, ArrayLiteral,
    HashLiteral, PrefixExpression, InfixExpression, IfExpression,
    WhileExpression, FunctionLiteral, CallExpression, IndexExpression,
]
Statement: TypeAlias = Union[LetStatement, ReturnStatement, ExpressionStatement]


# ============================================================================
# Lark conversion (debug dumps)
# ============================================================================

_LABELS = {
    Program: "program",
    Identifier: "identifier",
    IntegerLiteral: "integer",
    StringLiteral: "string",
    BooleanLiteral: "boolean",
    ArrayLiteral: "array",
    HashLiteral: "hash",
    PrefixExpression: "prefix",
    InfixExpression: "infix",
    IfExpression: "if_expression",
    WhileExpression: "while_expression",
    FunctionLiteral: "function",
    CallExpression: "call",
    IndexExpression: "index",
    LetStatement: "let_statement",
    ReturnStatement: "return_statement",
    ExpressionStatement: "expression_statement",
    BlockStatement: "block",
}


def _lark_token(name: str, value, tok: Optional[Tok]) -> Token:
    if tok is None:
        return Token(name, str(value))
    return Token(name, str(value), line=tok.line, column=tok.column)


def to_lark(node: Node) -> Tree:
    """Convert an AST subtree to a lark Tree. Leaf payloads become Tokens."""
    children = []

    for f in fields(node):
        if f.name == "token":
            continue
        children.extend(_lark_children(f.name, getattr(node, f.name), node.token))

    return Tree(_LABELS[type(node)], children)


def _lark_children(name: str, value, tok: Optional[Tok]) -> list:
    match value:
        case None:
            return []
        case Node():
            return [to_lark(value)]
        case tuple():
            out = []
            for item in value:
                if isinstance(item, tuple):
                    out.append(Tree("pair", [c for part in item for c in _lark_children(name, part, tok)]))
                else:
                    out.extend(_lark_children(name, item, tok))
            return out
        case bool():
            return [_lark_token(name.upper(), "true" if value else "false", tok)]
        case _:
            return [_lark_token(name.upper(), value, tok)]
