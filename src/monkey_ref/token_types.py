"""
Token Types for the Monkey lexer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum


class TT(Enum):
    """Token Types. The value is the spelling used in parse error messages."""

    # Special
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    SLASH = "/"
    STAR = "*"
    NEG = "!"

    # Comparison
    GT = ">"
    LT = "<"
    EQ = "=="
    NEQ = "!="

    # Punctuation
    COMMA = ","
    COLON = ":"
    SEMI = ";"
    LPAR = "("
    RPAR = ")"
    LBRACE = "{"
    RBRACE = "}"
    LSQB = "["
    RSQB = "]"

    # Keywords
    FN = "FUNCTION"
    LET = "LET"
    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    RETURN = "RETURN"
    TRUE = "TRUE"
    FALSE = "FALSE"

    def __str__(self) -> str:
        return self.value


KEYWORDS = {
    "fn": TT.FN,
    "let": TT.LET,
    "if": TT.IF,
    "else": TT.ELSE,
    "while": TT.WHILE,
    "return": TT.RETURN,
    "true": TT.TRUE,
    "false": TT.FALSE,
}


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
