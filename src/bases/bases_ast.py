"""
Expression tree produced by the bases parser.

The tree is a closed family of four node classes:

    Terminal  an identifier or literal (leaf)
    Control   a keyword found where an expression was expected (leaf); the
              expression ended there and the caller may reinterpret it
    Stop      end of input or an illegal symbol (leaf); parsing terminated,
              possibly in the middle of an expression
    Rule      an applied operator with exactly `operator.arity` children

Nodes are built bottom-up during a single parse and never change afterwards.
The tree is strict: no node is shared and there are no cycles.

Renderings:
    render()     canonical S-expression, e.g. `(+ 1 (* 2 3))`
    to_source()  fully parenthesized infix text, e.g. `(1 + (2 * 3))`,
                 which parses back to the same tree
    to_dict()    JSON-friendly nested dictionaries
"""

from collections.abc import Iterator
from typing import Any, TypedDict

from bases.bases_constants import MAX_ARITY
from bases.bases_operator import Assoc, Operator
from bases.bases_symbol import Symbol


class NodeDict(TypedDict):
    """Serialized form of a Node.

    Fields:
        kind (str): "terminal", "control", "stop" or "rule".
        value (str): Symbol or operator spelling.
        symbol (str): Name of the symbol kind (e.g. "INT", "ADD").
        offset (int): Source offset of the symbol or operator.
        children (list[NodeDict]): Operands; empty for leaves.
    """

    kind: str
    value: str
    symbol: str
    offset: int
    children: list["NodeDict"]


class Node:
    """Base class of every expression tree node."""

    kind = "node"

    @property
    def offset(self) -> int:
        raise NotImplementedError

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    def render(self) -> str:
        raise NotImplementedError

    def to_source(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> NodeDict:
        raise NotImplementedError

    def walk(self) -> Iterator["Node"]:
        """Yields this node and then every descendant, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def is_degraded(self) -> bool:
        """True when a Stop or Control marker appears anywhere in the tree."""
        return any(isinstance(n, (Stop, Control)) for n in self.walk())

    def __str__(self) -> str:
        return self.render()


class Leaf(Node):
    """A node wrapping a single symbol."""

    def __init__(self, symbol: Symbol) -> None:
        self._symbol = symbol

    @property
    def symbol(self) -> Symbol:
        return self._symbol

    @property
    def offset(self) -> int:
        return self._symbol.offset

    def render(self) -> str:
        return self._symbol.spelling

    def to_source(self) -> str:
        return self._symbol.spelling

    def to_dict(self) -> NodeDict:
        return {
            "kind": self.kind,
            "value": self._symbol.spelling,
            "symbol": self._symbol.kind.name,
            "offset": self._symbol.offset,
            "children": [],
        }

    def __eq__(self, other: Any) -> bool:
        return type(other) is type(self) and other.symbol == self._symbol

    def __hash__(self) -> int:
        return hash((self.kind, self._symbol))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._symbol!r})"


class Terminal(Leaf):
    kind = "terminal"


class Control(Leaf):
    kind = "control"


class Stop(Leaf):
    kind = "stop"


class Rule(Node):
    """An operator applied to its operands.

    Args:
        operator (Operator): The operator; its arity fixes the child count.
        children (list[Node]): Operands, left to right.
        offset (int): Source offset of the operator symbol.

    Raises:
        ValueError: If the operator is unbound, or the number of children
            differs from its arity.
    """

    kind = "rule"

    def __init__(self, operator: Operator, children: list[Node], offset: int = 0):
        if not 1 <= operator.arity <= MAX_ARITY:
            raise ValueError(
                f"operator {operator.spelling!r} has arity {operator.arity}, expected 1 to {MAX_ARITY}"
            )
        if len(children) != operator.arity:
            raise ValueError(
                f"operator {operator.spelling!r} takes {operator.arity} operand(s), got {len(children)}"
            )
        self._operator = operator
        self._children = tuple(children)
        self._offset = offset

    @property
    def operator(self) -> Operator:
        return self._operator

    @property
    def children(self) -> tuple[Node, ...]:
        return self._children

    @property
    def offset(self) -> int:
        return self._offset

    def render(self) -> str:
        args = " ".join(child.render() for child in self._children)
        return f"({self._operator.spelling} {args})"

    def to_source(self) -> str:
        op = self._operator.spelling
        parts = [child.to_source() for child in self._children]
        if self._operator.assoc is Assoc.UNARY_LEFT:
            return f"({parts[0]} {op})"
        if len(parts) == 1:
            return f"({op} {parts[0]})"
        return f"({parts[0]} {op} {parts[1]})"

    def to_dict(self) -> NodeDict:
        return {
            "kind": self.kind,
            "value": self._operator.spelling,
            "symbol": self._operator.kind.name,
            "offset": self._offset,
            "children": [c.to_dict() for c in self._children],
        }

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Rule):
            return False
        return (
            self._operator == other.operator
            and self._offset == other.offset
            and self._children == other.children
        )

    def __hash__(self) -> int:
        return hash((self.kind, self._operator.kind, self._offset, self._children))

    def __repr__(self) -> str:
        preview = ", ".join(repr(c) for c in self._children)
        return f"Rule({self._operator.spelling!r}, [{preview}])"


__all__ = ["Control", "Leaf", "Node", "NodeDict", "Rule", "Stop", "Terminal"]
