"""Interactive Monkey shell built on prompt_toolkit.

Submissions are evaluated against one persistent frame. Lines starting with
'/' are shell commands rather than Monkey source.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import Lexer
from .parser_rd import parse_source
from .repl_highlight import MonkeyLexer
from .runner import repl_eval, report_host_error
from .runtime import Frame, NULL, init_stdlib, is_error
from .token_types import TT
from .tree import to_lark
from .utils import debug_py_trace_enabled, set_debug_py_trace

PROMPT = "monkey> "
BANNER = "monkey repl. Ctrl-D to exit, / for commands"

# Pasted text often carries these; the lexer would turn them into ILLEGAL tokens.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

_BRACKET_DELTA = {
    TT.LPAR: 1, TT.LSQB: 1, TT.LBRACE: 1,
    TT.RPAR: -1, TT.RSQB: -1, TT.RBRACE: -1,
}


@dataclass
class ReplState:
    frame: Frame = field(default_factory=Frame)
    show_ast: bool = False


def _needs_continuation(text: str) -> bool:
    """True while some (, [ or { in *text* is still open."""
    depth = 0

    for tok in Lexer(text):
        depth = max(depth + _BRACKET_DELTA.get(tok.type, 0), 0)

    return depth > 0


def _parse_toggle(arg: str, current: bool) -> Optional[bool]:
    """on/off spellings set the flag, no argument flips it, anything else is None."""
    word = arg.lower()

    if word in ("on", "1", "true", "yes"):
        return True
    if word in ("off", "0", "false", "no"):
        return False
    if not word:
        return not current
    return None


# ============================================================================
# Slash commands
# ============================================================================

def _cmd_ast(arg: str, state: ReplState) -> None:
    enabled = _parse_toggle(arg, state.show_ast)
    if enabled is None:
        print("Usage: /ast [on|off]", file=sys.stderr)
        return

    state.show_ast = enabled
    print(f"AST dump: {'on' if enabled else 'off'}")


def _cmd_clear(arg: str, state: ReplState) -> None:
    clear()


def _cmd_py_traceback(arg: str, state: ReplState) -> None:
    enabled = _parse_toggle(arg, debug_py_trace_enabled())
    if enabled is None:
        print("Usage: /py-traceback [on|off]", file=sys.stderr)
        return

    set_debug_py_trace(enabled)
    print(f"Python traceback: {'on' if enabled else 'off'}")


def _cmd_reset(arg: str, state: ReplState) -> None:
    state.frame = Frame()
    print("Environment reset.")


SlashHandler = Callable[[str, ReplState], None]

# name => (handler, description)
_SLASH_CMDS: Dict[str, tuple[SlashHandler, str]] = {
    "/ast": (_cmd_ast, "Toggle printing the AST of each input"),
    "/clear": (_cmd_clear, "Clear the terminal screen"),
    "/py-traceback": (_cmd_py_traceback, "Toggle Python traceback on host errors"),
    "/reset": (_cmd_reset, "Start over with an empty environment"),
}


class _SlashCompleter(Completer):
    """Offer slash command names while the buffer starts with '/'."""

    def get_completions(self, document, complete_event):
        prefix = document.text_before_cursor
        if not prefix.startswith("/"):
            return

        for name, (_, desc) in _SLASH_CMDS.items():
            if name.startswith(prefix):
                yield Completion(name, start_position=-len(prefix), display_meta=desc)


def _run_slash(line: str, state: ReplState) -> None:
    name, _, arg = line.strip().partition(" ")
    entry = _SLASH_CMDS.get(name)

    if entry is None:
        print(f"Unknown command: {name}", file=sys.stderr)
        return

    entry[0](arg.strip(), state)


# ============================================================================
# Evaluation
# ============================================================================

def handle_line(text: str, state: ReplState) -> None:
    """Process one submission: slash command, or parse + evaluate + print."""
    text = _INVISIBLE_RE.sub("", text)
    if not text.strip():
        return

    if text.lstrip().startswith("/"):
        _run_slash(text, state)
        return

    if state.show_ast:
        program, _ = parse_source(text)
        print(to_lark(program).pretty())

    try:
        result, errors = repl_eval(text, state.frame)
    except Exception as exc:
        report_host_error(exc)
        return

    for err in errors:
        print(f"Parse error: {err}", file=sys.stderr)

    if errors or result is NULL:
        return
    print(result, file=sys.stderr if is_error(result) else sys.stdout)


def _key_bindings() -> KeyBindings:
    bindings = KeyBindings()

    @bindings.add("enter")
    def _submit_or_continue(event):
        buf = event.app.current_buffer

        if not buf.text.startswith("/") and _needs_continuation(buf.text):
            buf.insert_text("\n    ")
        else:
            buf.validate_and_handle()

    @bindings.add("backspace")
    def _erase(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        # Keep the command menu open while editing a slash command.
        if buf.text.startswith("/"):
            buf.start_completion()

    return bindings


def repl(show_ast: bool = False) -> None:
    """Read-eval-print loop until EOF (Ctrl-D)."""
    init_stdlib()
    state = ReplState(show_ast=show_ast)

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MonkeyLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation="... ",
    )

    print(BANNER)

    while True:
        try:
            line = session.prompt(PROMPT)
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue
        except EOFError:
            print()
            return

        handle_line(line, state)
