"""
Lexer for Monkey - Recursive Descent Parser

Tokenizes Monkey source code into a lazy stream of tokens.

Features:
- Pull-based: next_token() scans exactly one token per call
- Position tracking (line, column)
- Unicode-aware whitespace and identifiers
- Never raises: unknown characters become ILLEGAL tokens
"""

from typing import Iterator, List

from .token_types import KEYWORDS, TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    Holds a cursor into the source and a single character of lookahead.
    Once the input is exhausted every further call yields EOF.
    """

    # Single-character tokens. '=' and '!' are handled separately since
    # they may start a two-character operator.
    SINGLE = {
        '+': TT.PLUS,
        '-': TT.MINUS,
        '*': TT.STAR,
        '/': TT.SLASH,
        '<': TT.LT,
        '>': TT.GT,
        '(': TT.LPAR,
        ')': TT.RPAR,
        '[': TT.LSQB,
        ']': TT.RSQB,
        '{': TT.LBRACE,
        '}': TT.RBRACE,
        ',': TT.COMMA,
        ':': TT.COLON,
        ';': TT.SEMI,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        line, column = self.line, self.column
        ch = self.peek()

        if ch == '':
            return Tok(TT.EOF, '', line, column)

        if ch == '=':
            return self.scan_pair(TT.ASSIGN, TT.EQ, line, column)

        if ch == '!':
            return self.scan_pair(TT.NEG, TT.NEQ, line, column)

        if ch == '"':
            return Tok(TT.STRING, self.scan_string(), line, column)

        if ch.isalpha() or ch == '_':
            value = self.scan_identifier()
            return Tok(KEYWORDS.get(value, TT.IDENT), value, line, column)

        if is_digit(ch):
            return Tok(TT.INT, self.scan_integer(), line, column)

        token_type = self.SINGLE.get(ch, TT.ILLEGAL)
        self.advance()
        return Tok(token_type, ch, line, column)

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_pair(self, single: TT, double: TT, line: int, column: int) -> Tok:
        """Scan '=' / '!' and their '=' suffixed forms"""
        first = self.advance()
        if self.peek() == '=':
            return Tok(double, first + self.advance(), line, column)
        return Tok(single, first, line, column)

    def scan_string(self) -> str:
        """Scan string literal. No escapes; an unterminated string runs to end of input."""
        self.advance()  # Opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            value += self.advance()

        if self.pos < len(self.source):
            self.advance()  # Closing quote

        return value

    def scan_identifier(self) -> str:
        """Scan identifier or keyword"""
        value = ''

        while self.peek().isalnum() or self.peek() == '_':
            value += self.advance()

        return value

    def scan_integer(self) -> str:
        """Scan integer literal. Kept as text; the parser converts it."""
        value = ''

        while is_digit(self.peek()):
            value += self.advance()

        return value

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self) -> str:
        """Current character, '' past the end"""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ''

    def advance(self) -> str:
        """Consume one character and return it"""
        ch = self.source[self.pos]
        self.pos += 1

        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return ch

    def skip_whitespace(self):
        while self.peek().isspace():
            self.advance()


def is_digit(ch: str) -> bool:
    """ASCII decimal digits only; str.isdigit() also admits superscripts and other scripts."""
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function: full token list, ending with EOF"""
    return list(Lexer(source))


if __name__ == '__main__':
    import sys

    for tok in tokenize(sys.stdin.read()):
        print(tok)
