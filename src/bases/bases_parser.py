"""
bases Expression Parser

Reads a stream of Symbols into an expression tree by precedence climbing
(Pratt parsing). There is no grammar rule per precedence level: the operator
table's binding levels decide, one comparison at a time, whether the
expression built so far becomes the left operand of the next operator or is
handed back to the caller.

Algorithm
---------
`climb(min_binding)`:

1. Pull a symbol.
2. EOF or ILLEGAL -> `Stop`; a keyword -> `Control`. Both return at once.
3. Identifier or literal -> `Terminal`.
4. Otherwise the symbol must be a prefix operator:
    * `(` climbs with UNBOUND and then requires `)`; the grouped
      expression itself (not a Rule) becomes the left operand.
    * any other prefix operator climbs with its right binding level and
      wraps the result in a one-child `Rule`.
    * anything else is an unexpected token -> `Stop`.
5. While the next symbol is a postfix or infix operator whose left binding
   level is at least `min_binding`, consume it and grow the tree: postfix
   wraps the tree so far, infix climbs with its right binding level for the
   right operand.

Associativity needs no branch of its own: it falls out of the asymmetric
left/right levels encoded in the operator table.

Error Handling
--------------
Malformed input never raises. Each fault records a diagnostic and leaves a
`Stop` marker in the tree. A `Stop` ends only the call that produced it:
enclosing calls keep their partial trees and go on growing them. Once the
stream has yielded EOF or an illegal symbol it yields only EOF, which ends
every enclosing loop and makes every pending `(` report its missing closer.

Entry Points
------------
- `Parser.parse()`: parse one expression from a stream.
- `parse_expression()`: scan, parse and close the stream for a source string.
"""

from __future__ import annotations

import logging

from bases.bases_ast import Control, Node, Rule, Stop, Terminal
from bases.bases_diagnostics import Diagnostic, Diagnostics, ParseError
from bases.bases_operator import UNBOUND, BindingLevel, OperatorTable
from bases.bases_stream import SymbolStream, open_stream
from bases.bases_symbol import Symbol, SymbolKind

logger = logging.getLogger(__name__)


class Parser:
    """
    Precedence-climbing parser over a SymbolStream.

    Attributes
    ----------
    stream : SymbolStream
        Source of symbols; owned by the caller.
    table : OperatorTable
        Prefix/infix/postfix metadata; the default C-like table if omitted.
    diagnostics : Diagnostics
        Sink for syntax complaints; shared with the stream by default.
    """

    def __init__(
        self,
        stream: SymbolStream,
        table: OperatorTable | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.stream = stream
        self.table = table if table is not None else OperatorTable.default()
        self.diagnostics = diagnostics if diagnostics is not None else stream.diagnostics

    def parse(self) -> Node:
        """Parses one expression and reports any input left over after it.

        Leftover illegal input is not reported again; the stream already
        recorded why it is illegal.
        """
        root = self.climb(UNBOUND)
        rest = self.stream.peek()
        if not (rest.is_eof() or rest.is_illegal()):
            self.unexpected(rest)
        return root

    def unexpected(self, sym: Symbol) -> None:
        self.diagnostics.add(sym.offset, f"unexpected token {sym.spelling!r}")

    def stop(self, sym: Symbol, depth: int) -> Stop:
        """Ends the current call at `sym`.

        Illegal symbols were already reported by the stream; running out of
        input is only a fault when an operand was still required.
        """
        if sym.is_eof() and depth > 0:
            self.diagnostics.add(sym.offset, "unexpected end of input")
        return Stop(sym)

    def climb(self, min_binding: BindingLevel = UNBOUND, depth: int = 0) -> Node:
        s = self.stream.next()
        logger.debug("%*s%r (min=%r)", depth * 2, "", s, min_binding)

        if s.is_illegal() or s.is_eof():
            return self.stop(s, depth)
        if s.is_keyword():
            return Control(s)

        node: Node
        if s.kind == SymbolKind.IDENT or s.is_literal():
            node = Terminal(s)
        else:
            op = self.table.prefix(s.kind)
            if op is None:
                self.unexpected(s)
                return self.stop(s, depth)
            if s.kind == SymbolKind.LPAREN:
                node = self.climb(UNBOUND, depth + 1)
                close = self.stream.next()
                if close.kind != SymbolKind.RPAREN:
                    self.diagnostics.add(
                        close.offset,
                        f"unmatched delimiter: expected ')' for '(' at {s.offset}, "
                        f"found {close.spelling!r}",
                    )
                    self.stream.undo(close)
            else:
                operand = self.climb(op.right, depth + 1)
                node = Rule(op, [operand], s.offset)

        while True:
            p = self.stream.peek()
            if p.is_eof():
                break
            post = self.table.postfix(p.kind)
            if post is not None and post.left >= min_binding:
                self.stream.next()
                node = Rule(post, [node], p.offset)
                continue
            infix = self.table.infix(p.kind)
            if infix is not None and infix.left >= min_binding:
                self.stream.next()
                rhs = self.climb(infix.right, depth + 1)
                node = Rule(infix, [node, rhs], p.offset)
                continue
            break

        logger.debug("%*s= %s", depth * 2, "", node.render())
        return node


class ParseResult:
    """The outcome of parsing one source string.

    Attributes:
        root (Node): The expression tree, possibly degraded.
        diagnostics (list[Diagnostic]): Complaints in source order.
        source (str): The parsed text.
    """

    def __init__(self, root: Node, diagnostics: list[Diagnostic], source: str = ""):
        self.root = root
        self.diagnostics = diagnostics
        self.source = source

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def render(self) -> str:
        return self.root.render()

    def to_source(self) -> str:
        return self.root.to_source()

    def raise_for_diagnostics(self) -> Node:
        """Returns the root of a clean parse.

        Raises:
            ParseError: If any diagnostic was recorded; the first one is the message.
        """
        if self.diagnostics:
            first = self.diagnostics[0]
            raise ParseError(f"{first.message} at offset {first.offset}", self.diagnostics)
        return self.root

    def __repr__(self) -> str:
        return f"ParseResult({self.render()!r}, diagnostics={self.diagnostics!r})"


def parse_expression(
    source: str,
    table: OperatorTable | None = None,
    pipelined: bool = False,
    maxsize: int = 0,
) -> ParseResult:
    """Scans and parses `source` as one expression.

    The stream is always closed afterwards, which also stops a pipelined
    scanner thread.

    Args:
        source (str): The complete input.
        table (OperatorTable | None): Operator metadata; the default table if None.
        pipelined (bool): Scan on a producer thread instead of inline.
        maxsize (int): Bound of the pipelined handoff queue; 0 is unbounded.

    Returns:
        ParseResult: The tree and its diagnostics.
    """
    diagnostics = Diagnostics()
    with open_stream(source, diagnostics, pipelined, maxsize) as stream:
        root = Parser(stream, table, diagnostics).parse()
    return ParseResult(root, diagnostics.items, source)


__all__ = ["ParseResult", "Parser", "parse_expression"]
