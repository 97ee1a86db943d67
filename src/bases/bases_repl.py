"""
Interactive read-parse-print loop for bases expressions.

Each input line is parsed as one expression and printed in the current
output mode. Diagnostics are printed below the result.

Commands:
    exit, quit     leave the REPL (Ctrl-D and Ctrl-C also leave)
    source-mode    toggle fully parenthesized infix output
    json-mode      toggle JSON output
"""

import json

from bases.bases_diagnostics import line_col
from bases.bases_parser import ParseResult, parse_expression


def format_result(result: ParseResult, output: str = "render") -> str:
    """Formats a parse result the way the REPL prints it."""
    if output == "json":
        text = json.dumps(result.root.to_dict(), indent=2)
    elif output == "source":
        text = result.to_source()
    else:
        text = result.render()
    lines = [text]
    for d in result.diagnostics:
        line, col = line_col(result.source, d.offset)
        lines.append(f"[error] {line}:{col}: {d.message}")
    return "\n".join(lines)


def handle_mode_command(src: str, output: str) -> str | None:
    """Returns the new output mode if `src` is a mode toggle, else None."""
    command = src.strip().lower()
    if command == "source-mode":
        return "render" if output == "source" else "source"
    if command == "json-mode":
        return "render" if output == "json" else "json"
    return None


def start_repl(output: str = "render", pipelined: bool = False) -> None:
    print("bases REPL. Type 'exit' or 'quit' to leave.")
    while True:
        try:
            line = input(">>> ")
        except (KeyboardInterrupt, EOFError):
            print("\nExiting bases REPL.")
            return

        src = line.strip()
        if src in ("exit", "quit"):
            print("Exiting bases REPL.")
            return
        if not src or src.startswith("//"):
            continue

        mode = handle_mode_command(src, output)
        if mode is not None:
            output = mode
            print(f"[mode] >>> Output mode {output}")
            continue

        print(format_result(parse_expression(src, pipelined=pipelined), output))


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
