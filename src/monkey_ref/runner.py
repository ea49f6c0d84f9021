from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from .evaluator import eval_expr
from .parser_rd import ParseError, ParseErrors, parse_source
from .runtime import Frame, MkValue, NULL, init_stdlib, is_error
from .tree import to_lark
from .utils import configure_logging, debug_py_trace_enabled

def run(src: str, frame: Optional[Frame]=None) -> MkValue:
    """Parse and evaluate `src`. Raises ParseErrors when the source does not parse."""
    init_stdlib()

    program, errors = parse_source(src)
    if errors:
        raise ParseErrors(errors)

    return eval_expr(program, frame if frame is not None else Frame())

def repl_eval(text: str, frame: Frame) -> Tuple[Optional[MkValue], List[ParseError]]:
    """
    Evaluate one REPL submission against a persistent frame.
    Any parse error suppresses evaluation entirely; the errors are returned instead.
    """
    program, errors = parse_source(text)
    if errors:
        return None, errors

    return eval_expr(program, frame), []

def report_host_error(exc: BaseException) -> None:
    """Print a non-language failure (e.g. recursion overflow) to stderr."""
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)

def execute(source: str, *, show_ast: bool=False, echo: bool=False) -> int:
    """
    Run a whole program once in a fresh frame and return the exit status.
    - Parse errors are all reported and nothing is evaluated.
    - A top-level error value is reported and fails the run.
    - With echo, a non-null final value is printed to stdout.
    """
    program, errors = parse_source(source)

    if show_ast:
        print(to_lark(program).pretty())

    if errors:
        for err in errors:
            print(f"Parse error: {err}", file=sys.stderr)
        return 1

    try:
        result = eval_expr(program, Frame())
    except Exception as exc:
        report_host_error(exc)
        return 1

    if is_error(result):
        print(result, file=sys.stderr)
        return 1

    if echo and result is not NULL:
        print(result)

    return 0

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Otherwise the argument must name a readable file.
    """

    if arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    if not candidate.is_file():
        raise SystemExit(f"No such file: {arg}")

    return candidate.read_text(encoding="utf-8")

def main(argv: Optional[List[str]]=None) -> None:
    show_ast = False
    inline: Optional[str] = None
    arg: Optional[str] = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--ast":
            show_ast = True
            continue

        if token == "-e":
            try:
                inline = next(it)
            except StopIteration:
                raise SystemExit("-e flag requires source text") from None
            continue

        if arg is None and inline is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if inline is not None and arg is not None:
        raise SystemExit(f"Unexpected argument: {arg}")

    init_stdlib()
    configure_logging()

    if inline is None and arg is None:
        from .repl import repl  # local import to avoid cycle

        repl(show_ast=show_ast)
        return

    source = inline if inline is not None else _load_source(arg)
    sys.exit(execute(source, show_ast=show_ast, echo=inline is not None))

if __name__ == "__main__":
    main()
