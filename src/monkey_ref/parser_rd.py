"""
Recursive Descent Parser for Monkey

Structure:
- Lexer: lazy token stream from source, pulled one token at a time
- Parser: statements by recursive descent, expressions by Pratt parsing
- AST: frozen dataclass nodes from tree.py

Errors never abort the parse. They are collected on `Parser.errors`; the
statement that failed yields no node and the parser skips ahead to the next
statement boundary.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .lexer_rd import Lexer
from .token_types import TT, Tok
from .types import INT_MAX
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
    WhileExpression,
)

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


class ParseErrors(Exception):
    """Raised by callers that want parse failures as an exception"""
    def __init__(self, errors: List[ParseError]):
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

# ============================================================================
# Precedence
# ============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    ASSIGN = 2
    EQUALS = 3
    COMPARISON = 4
    SUM = 5
    PRODUCT = 6
    PREFIX = 7
    CALL = 8  # call and index share the top binding power


PRECEDENCES: Dict[TT, Precedence] = {
    TT.ASSIGN: Precedence.ASSIGN,
    TT.EQ: Precedence.EQUALS,
    TT.NEQ: Precedence.EQUALS,
    TT.GT: Precedence.COMPARISON,
    TT.LT: Precedence.COMPARISON,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.STAR: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
    TT.LPAR: Precedence.CALL,
    TT.LSQB: Precedence.CALL,
}

# Tokens the parser resynchronizes on after a failed statement
_SYNC = (TT.SEMI, TT.LET, TT.RETURN, TT.EOF)

PrefixFn = Callable[[], Optional[Expression]]
InfixFn = Callable[[Expression], Optional[Expression]]

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. assignment (=)
    2. equality (==, !=)
    3. comparison (<, >)
    4. sum (+, -)
    5. product (*, /)
    6. prefix (!, -)
    7. call and index (f(...), a[...])

    Each parse_* method starts with `current` on the first token of its
    construct and leaves `current` on the construct's last token.
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[ParseError] = []
        self.current = lexer.next_token()
        self.next = lexer.next_token()

        self.prefix_fns: Dict[TT, PrefixFn] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer,
            TT.STRING: self.parse_string,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.NEG: self.parse_prefix,
            TT.MINUS: self.parse_prefix,
            TT.LPAR: self.parse_group,
            TT.LSQB: self.parse_array,
            TT.LBRACE: self.parse_hash,
            TT.IF: self.parse_if,
            TT.WHILE: self.parse_while,
            TT.FN: self.parse_function,
        }

        self.infix_fns: Dict[TT, InfixFn] = {
            TT.PLUS: self.parse_infix,
            TT.MINUS: self.parse_infix,
            TT.STAR: self.parse_infix,
            TT.SLASH: self.parse_infix,
            TT.GT: self.parse_infix,
            TT.LT: self.parse_infix,
            TT.EQ: self.parse_infix,
            TT.NEQ: self.parse_infix,
            TT.ASSIGN: self.parse_infix,
            TT.LPAR: self.parse_call,
            TT.LSQB: self.parse_index,
        }

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Tok:
        """Look ahead one token"""
        return self.next

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.current = self.next
        self.next = self.lexer.next_token()
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def peek_is(self, *types: TT) -> bool:
        return self.next.type in types

    def expect_peek(self, token_type: TT) -> bool:
        """Advance onto the lookahead if it has the given type, else record an error"""
        if self.peek_is(token_type):
            self.advance()
            return True
        self.error(f"expected next token to be '{token_type}', got {self.next.type} instead", self.next)
        return False

    def error(self, message: str, token: Optional[Tok] = None) -> None:
        self.errors.append(ParseError(message, token or self.current))

    def peek_precedence(self) -> int:
        return PRECEDENCES.get(self.next.type, Precedence.LOWEST)

    def cur_precedence(self) -> int:
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    def synchronize(self) -> None:
        """Skip ahead so that the next advance() lands on a statement boundary"""
        while not self.peek_is(*_SYNC):
            self.advance()
        if self.peek_is(TT.SEMI):
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        statements: List[Statement] = []

        while not self.check(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self.synchronize()
            self.advance()

        return Program(tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        if self.check(TT.LET):
            return self.parse_let_statement()
        if self.check(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        """let NAME = expr [;]"""
        tok = self.current

        if not self.expect_peek(TT.IDENT):
            return None
        name = Identifier(self.current.value, self.current)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(TT.SEMI):
            self.advance()

        return LetStatement(name, value, tok)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        tok = self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(TT.SEMI):
            self.advance()

        return ReturnStatement(value, tok)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        tok = self.current

        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        if self.peek_is(TT.SEMI):
            self.advance()

        return ExpressionStatement(expr, tok)

    def parse_block(self) -> Optional[BlockStatement]:
        """{ stmt* }  -- current is '{' on entry, '}' on exit"""
        tok = self.advance()
        statements: List[Statement] = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                self.error(f"expected next token to be '{TT.RBRACE}', got {TT.EOF} instead")
                return None

            stmt = self.parse_statement()
            if stmt is None:
                return None
            statements.append(stmt)
            self.advance()

        return BlockStatement(tuple(statements), tok)

    # ========================================================================
    # Expressions (Pratt)
    # ========================================================================

    def parse_expression(self, precedence: int) -> Optional[Expression]:
        prefix = self.prefix_fns.get(self.current.type)
        if prefix is None:
            self.error(f"parse function for token type '{self.current.type}' is not implemented")
            return None

        left = prefix()

        while left is not None and not self.peek_is(TT.SEMI) and precedence < self.peek_precedence():
            infix = self.infix_fns[self.next.type]
            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Identifier:
        return Identifier(self.current.value, self.current)

    def parse_integer(self) -> Optional[IntegerLiteral]:
        text = self.current.value
        # Compare lengths first; int() refuses very long digit strings.
        if len(text.lstrip('0')) > len(str(INT_MAX)) or int(text) > INT_MAX:
            self.error(f'error parsing integer value: parsing "{text}": value out of range')
            return None
        return IntegerLiteral(int(text), self.current)

    def parse_string(self) -> StringLiteral:
        return StringLiteral(self.current.value, self.current)

    def parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(self.check(TT.TRUE), self.current)

    def parse_prefix(self) -> Optional[PrefixExpression]:
        tok = self.advance()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None

        return PrefixExpression(tok.value, right, tok)

    def parse_infix(self, left: Expression) -> Optional[InfixExpression]:
        tok = self.current
        precedence = self.cur_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        if right is None:
            return None

        return InfixExpression(tok.value, left, right, tok)

    def parse_group(self) -> Optional[Expression]:
        """( expr )"""
        self.advance()

        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None or not self.expect_peek(TT.RPAR):
            return None

        return expr

    def parse_if(self) -> Optional[IfExpression]:
        """
        if (c) {..} [else if (c) {..}]* [else {..}]

        else-if branches are flattened into this node rather than nested.
        """
        tok = self.current

        if not self.expect_peek(TT.LPAR):
            return None
        condition = self.parse_group()
        if condition is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None
        consequence = self.parse_block()
        if consequence is None:
            return None

        branches = [(condition, consequence)]
        alternative = None

        if self.peek_is(TT.ELSE):
            self.advance()

            if self.peek_is(TT.IF):
                self.advance()
                nested = self.parse_if()
                if nested is None:
                    return None
                branches.extend(nested.branches)
                alternative = nested.alternative
            else:
                if not self.expect_peek(TT.LBRACE):
                    return None
                alternative = self.parse_block()
                if alternative is None:
                    return None

        return IfExpression(tuple(branches), alternative, tok)

    def parse_while(self) -> Optional[WhileExpression]:
        tok = self.current

        if not self.expect_peek(TT.LPAR):
            return None
        condition = self.parse_group()
        if condition is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None
        body = self.parse_block()
        if body is None:
            return None

        return WhileExpression(condition, body, tok)

    def parse_function(self) -> Optional[FunctionLiteral]:
        tok = self.current

        if not self.expect_peek(TT.LPAR):
            return None
        params = self.parse_parameters()
        if params is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None
        body = self.parse_block()
        if body is None:
            return None

        return FunctionLiteral(tuple(params), body, tok)

    def parse_parameters(self) -> Optional[List[Identifier]]:
        """Bare identifiers separated by commas; current is '(' on entry"""
        params: List[Identifier] = []

        if self.peek_is(TT.RPAR):
            self.advance()
            return params

        if not self.expect_peek(TT.IDENT):
            return None
        params.append(Identifier(self.current.value, self.current))

        while self.peek_is(TT.COMMA):
            self.advance()
            if not self.expect_peek(TT.IDENT):
                return None
            params.append(Identifier(self.current.value, self.current))

        if not self.expect_peek(TT.RPAR):
            return None

        return params

    def parse_expression_list(self, end: TT) -> Optional[List[Expression]]:
        """Comma separated expressions up to `end`; shared by calls and arrays"""
        items: List[Expression] = []

        if self.peek_is(end):
            self.advance()
            return items

        self.advance()
        item = self.parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.peek_is(TT.COMMA):
            self.advance()
            self.advance()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None

        return items

    def parse_call(self, function: Expression) -> Optional[CallExpression]:
        tok = self.current

        args = self.parse_expression_list(TT.RPAR)
        if args is None:
            return None

        return CallExpression(function, tuple(args), tok)

    def parse_array(self) -> Optional[ArrayLiteral]:
        tok = self.current

        items = self.parse_expression_list(TT.RSQB)
        if items is None:
            return None

        return ArrayLiteral(tuple(items), tok)

    def parse_index(self, left: Expression) -> Optional[IndexExpression]:
        tok = self.advance()

        index = self.parse_expression(Precedence.LOWEST)
        if index is None or not self.expect_peek(TT.RSQB):
            return None

        return IndexExpression(left, index, tok)

    def parse_hash(self) -> Optional[HashLiteral]:
        """{ key: value, ... } where each key is a bare identifier or string token"""
        tok = self.current
        pairs = []

        while not self.peek_is(TT.RBRACE):
            self.advance()

            if self.check(TT.IDENT):
                key = Identifier(self.current.value, self.current)
            elif self.check(TT.STRING):
                key = StringLiteral(self.current.value, self.current)
            else:
                self.error(f"hash key must be an identifier or string, got {self.current.type}")
                return None

            if not self.expect_peek(TT.COLON):
                return None

            self.advance()
            value = self.parse_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self.peek_is(TT.RBRACE) and not self.expect_peek(TT.COMMA):
                return None

        self.advance()
        return HashLiteral(tuple(pairs), tok)

# ============================================================================
# Entry points
# ============================================================================

def parse_source(source: str) -> Tuple[Program, List[ParseError]]:
    """
    Parse Monkey source code to AST.

    Returns the program together with every structural error found. The
    program only holds the statements that parsed cleanly.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


if __name__ == '__main__':
    import sys

    from .tree import to_lark

    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]

    if len(args) > 0 and args[0] != '-':
        with open(args[0], 'r', encoding='utf-8') as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    program, errors = parse_source(source)
    for err in errors:
        print(f"Parse error: {err}", file=sys.stderr)
    print(to_lark(program).pretty())
    sys.exit(1 if errors else 0)
