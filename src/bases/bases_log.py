"""
Logging configuration for the bases command line.

Library modules only create loggers (`logging.getLogger(__name__)`); handlers
are attached here, either from command-line verbosity or from environment
variables, one pair per component prefix:

    {PREFIX}_FILE     path of the log file; a leading ">" truncates (the
                      default) and ">>" appends
    {PREFIX}_FORMAT   format made of %-escaped specifiers (see below)

Prefixes:
    EXPR    the parser     (bases.bases_parser)
    STREAM  symbol streams (bases.bases_stream)
    SYM     the scanner    (bases.bases_lexer)

Format specifiers:
    %s message   %d date 2009/01/23   %t time 01:23:23
    %u time with microseconds 01:23:23.123123
    %F full file path   %f file base name   %n line number

Example:
    EXPR_FILE='>>/tmp/expr.log' EXPR_FORMAT='%t %f:%n %s' bases '1 + 2'
"""

import logging
import os
import sys
import time
from collections.abc import Mapping

DEFAULT_FORMAT = "%d %t ┆ %f:%n ┆ %s"

COMPONENTS: dict[str, str] = {
    "EXPR": "bases.bases_parser",
    "STREAM": "bases.bases_stream",
    "SYM": "bases.bases_lexer",
}


class SpecFormatter(logging.Formatter):
    """Formats records from a %-specifier string such as "%d %t ┆ %s".

    Unknown specifiers are copied through unchanged; "%%" is a literal "%".
    """

    def __init__(self, spec: str = DEFAULT_FORMAT) -> None:
        super().__init__()
        self.spec = spec

    def format(self, record: logging.LogRecord) -> str:
        local = time.localtime(record.created)
        fields = {
            "s": record.getMessage,
            "d": lambda: time.strftime("%Y/%m/%d", local),
            "t": lambda: time.strftime("%H:%M:%S", local),
            "u": lambda: time.strftime("%H:%M:%S", local)
            + f".{int(record.created % 1 * 1000000):06d}",
            "F": lambda: record.pathname,
            "f": lambda: record.filename,
            "n": lambda: str(record.lineno),
        }
        out: list[str] = []
        chars = iter(self.spec)
        for ch in chars:
            if ch != "%":
                out.append(ch)
                continue
            spec = next(chars, "")
            if spec == "%":
                out.append("%")
            elif spec in fields:
                out.append(fields[spec]())
            else:
                out.append("%" + spec)
        text = "".join(out)
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def lookup_env(
    prefix: str, environ: Mapping[str, str] | None = None
) -> tuple[str, str, str] | None:
    """Reads `{prefix}_FILE` and `{prefix}_FORMAT`.

    Returns:
        tuple[str, str, str] | None: (path, open mode, format), or None when
        `{prefix}_FILE` is unset or empty.

    Raises:
        ValueError: If `prefix` is not a valid identifier.
    """
    if prefix and not prefix.isidentifier():
        raise ValueError(f"invalid env prefix: {prefix}")
    env = os.environ if environ is None else environ
    target = env.get(prefix + "_FILE", "")
    mode = "w"
    if target.startswith(">>"):
        mode = "a"
        target = target[2:]
    elif target.startswith(">"):
        target = target[1:]
    if not target:
        return None
    return target, mode, env.get(prefix + "_FORMAT") or DEFAULT_FORMAT


def configure_logging(
    level: int | None = None, environ: Mapping[str, str] | None = None
) -> list[logging.Handler]:
    """Attaches handlers to the bases loggers.

    Args:
        level (int | None): If given, log at this level to stderr.
        environ (Mapping[str, str] | None): Environment to read; os.environ by default.

    Returns:
        list[logging.Handler]: The handlers that were attached.
    """
    handlers: list[logging.Handler] = []
    if level is not None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        console.setLevel(level)
        root = logging.getLogger("bases")
        root.addHandler(console)
        root.setLevel(level)
        handlers.append(console)

    for prefix, name in COMPONENTS.items():
        found = lookup_env(prefix, environ)
        if found is None:
            continue
        path, mode, spec = found
        handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
        handler.setFormatter(SpecFormatter(spec))
        handler.setLevel(logging.DEBUG)
        logger = logging.getLogger(name)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        handlers.append(handler)
    return handlers


__all__ = [
    "COMPONENTS",
    "DEFAULT_FORMAT",
    "SpecFormatter",
    "configure_logging",
    "lookup_env",
]
