"""Live syntax colouring for the REPL prompt.

Each line is run through the same lexer the parser uses, so whatever the
highlighter shows as a single token is exactly what the parser will see.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as MkLexer
from .runtime import BUILTINS, init_stdlib
from .token_types import KEYWORDS, TT, Tok

GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "builtin": "ansiyellow",
    "function": "bold ansiyellow",
    "error": "bold ansired",
}

_BOOLEANS = {TT.TRUE, TT.FALSE}

_GROUPS: Dict[TT, str] = {tt: "keyword" for tt in KEYWORDS.values() if tt not in _BOOLEANS}
_GROUPS.update({tt: "boolean" for tt in _BOOLEANS})
_GROUPS.update({TT.INT: "number", TT.STRING: "string", TT.ILLEGAL: "error"})

Span = Tuple[Tok, int, int]


def _scan_spans(text: str) -> List[Span]:
    """Tokens of one line with their [start, end) offsets into it."""
    lexer = MkLexer(text)
    spans: List[Span] = []

    for tok in iter(lexer.next_token, None):
        if tok.type == TT.EOF:
            break
        # Single line input, so the column is the offset plus one.
        spans.append((tok, tok.column - 1, lexer.pos))

    return spans


def _group_for(tok: Tok, following: Optional[Tok]) -> str:
    if tok.type != TT.IDENT:
        return _GROUPS.get(tok.type, "")
    if tok.value in BUILTINS:
        return "builtin"
    if following is not None and following.type == TT.LPAR:
        return "function"
    return ""


def _highlight_line(text: str) -> StyleAndTextTuples:
    if not text:
        return [("", "")]

    spans = _scan_spans(text)
    fragments: StyleAndTextTuples = []
    cursor = 0

    for i, (tok, start, end) in enumerate(spans):
        if start > cursor:
            fragments.append(("", text[cursor:start]))

        following = spans[i + 1][0] if i + 1 < len(spans) else None
        fragments.append((GROUP_STYLE.get(_group_for(tok, following), ""), text[start:end]))
        cursor = end

    if cursor < len(text):
        fragments.append(("", text[cursor:]))

    return fragments


class MonkeyLexer(Lexer):
    """prompt_toolkit lexer colouring Monkey source line by line."""

    def __init__(self) -> None:
        # Builtin names must be registered before the first line is coloured.
        init_stdlib()

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        rendered: Dict[int, StyleAndTextTuples] = {}

        def line_at(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(document.lines):
                return [("", "")]
            if lineno not in rendered:
                rendered[lineno] = _highlight_line(document.lines[lineno])
            return rendered[lineno]

        return line_at
