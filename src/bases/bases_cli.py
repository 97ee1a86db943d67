"""
bases CLI Entrypoint.

Reads one expression from the command line or a file, parses it, and prints
the expression tree.

Features:
    - Canonical S-expression output (default), fully parenthesized infix
      (`--source`) or JSON (`--json`).
    - Inline (default) or pipelined (`--pipelined`) scanning.
    - Diagnostics printed to stderr as `line:col: message`; exit status 1
      when any were recorded.
    - Launches the interactive REPL when run without arguments.

Example usage:
    bases '1 + 2 * 3'
    bases --source 'a - b - c'
    bases -f expr.txt --json
    bases --repl

Functions:
    run_bases(source, is_file=False, output="render", pipelined=False, maxsize=0) -> int
    main(argv=None) -> int
"""

import argparse
import json
import logging
import sys

from bases.bases_diagnostics import line_col
from bases.bases_log import configure_logging
from bases.bases_parser import parse_expression

OUTPUTS = ("render", "source", "json")


def run_bases(
    source: str,
    is_file: bool = False,
    output: str = "render",
    pipelined: bool = False,
    maxsize: int = 0,
) -> int:
    """
    Parse one expression and print it.

    Args:
        source (str): Expression text, or a path when `is_file` is True.
        is_file (bool): Read the expression from the file at `source`.
        output (str): One of "render", "source" or "json".
        pipelined (bool): Scan on a producer thread.
        maxsize (int): Bound of the pipelined queue; 0 is unbounded.

    Returns:
        int: 0 for a clean parse, 1 when diagnostics were recorded.

    Raises:
        ValueError: If `output` is not a known format.
        OSError: If `is_file` is True and the file cannot be read.
    """
    if output not in OUTPUTS:
        raise ValueError(f"unknown output format: {output}")
    if is_file:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    result = parse_expression(source, pipelined=pipelined, maxsize=maxsize)

    if output == "json":
        print(json.dumps(result.root.to_dict(), indent=2))
    elif output == "source":
        print(result.to_source())
    else:
        print(result.render())

    if result.diagnostics:
        for d in result.diagnostics:
            line, col = line_col(result.source, d.offset)
            print(f"{line}:{col}: {d.message}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the bases CLI.

    Launches the REPL if no arguments are passed or `--repl` is given;
    otherwise parses the expression argument (or `--file`).
    """
    args_list = sys.argv[1:] if argv is None else argv
    parser = argparse.ArgumentParser(
        prog="bases", description="Read an expression into a precedence-resolved tree."
    )
    parser.add_argument("expression", nargs="?", help="Expression text")
    parser.add_argument("-f", "--file", metavar="FILE", help="Read the expression from FILE")
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument(
        "--source",
        dest="output",
        action="store_const",
        const="source",
        help="Print fully parenthesized infix instead of an S-expression",
    )
    fmt.add_argument(
        "--json",
        dest="output",
        action="store_const",
        const="json",
        help="Print the tree as JSON",
    )
    parser.add_argument(
        "--pipelined", action="store_true", help="Scan on a separate thread"
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=0,
        metavar="N",
        help="Bound of the pipelined symbol queue (default: unbounded)",
    )
    parser.add_argument("--repl", action="store_true", help="Launch the interactive REPL")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log parser activity to stderr"
    )
    parser.set_defaults(output="render")

    args = parser.parse_args(args_list)
    if args.expression is not None and args.file is not None:
        parser.error("give either an expression or --file, not both")
    if args.queue_size < 0:
        parser.error("--queue-size must not be negative")

    configure_logging(logging.DEBUG if args.verbose else None)

    if args.repl or (args.expression is None and args.file is None):
        from bases.bases_repl import start_repl

        start_repl(output=args.output, pipelined=args.pipelined)
        return 0

    try:
        return run_bases(
            source=args.file if args.file is not None else args.expression,
            is_file=args.file is not None,
            output=args.output,
            pipelined=args.pipelined,
            maxsize=args.queue_size,
        )
    except OSError as e:
        parser.error(f"cannot read {args.file}: {e.strerror or e}")
    return 2  # pragma: no cover


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
