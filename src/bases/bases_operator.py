"""
Operator table and binding-level encoder.

Precedence and associativity are folded together into one comparable value
per operand side, the "binding level". Every operator has two levels, one
between the operator and the operand on each side. Unary operators use
UNBOUND on the side that has no operand.

For an operator of precedence N > 0 the two levels are 2N and 2N-1. Levels
of different precedences never overlap, so the odd/even split only matters
when two operators of equal precedence compete for the same operand, which
is exactly the associativity tie-break:

    BINARY_LEFT   (2N-1, 2N)     a - b - c  ->  (- (- a b) c)
    BINARY_RIGHT  (2N,   2N-1)   a = b = c  ->  (= a (= b c))
    UNARY_LEFT    (2N-1, UNBOUND)   postfix
    UNARY_RIGHT   (UNBOUND, 2N-1)   prefix

UNBOUND compares strictly below every bound level, level 0 included.

Classes:
    Assoc, Role, BindingLevel, Operator, OperatorTable

Functions:
    encode(precedence, assoc) -> tuple[BindingLevel, BindingLevel]
"""

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Any

from bases.bases_constants import MAX_OPERATORS
from bases.bases_symbol import Symbol, SymbolKind


class Role(Enum):
    PREFIX = "prefix"
    INFIX = "infix"
    POSTFIX = "postfix"


class Assoc(Enum):
    """An operator's associativity and arity."""

    NONASSOCIATIVE = 0
    UNARY_LEFT = 1
    UNARY_RIGHT = 2
    BINARY_LEFT = 3
    BINARY_RIGHT = 4

    @property
    def arity(self) -> int:
        if self in (Assoc.UNARY_LEFT, Assoc.UNARY_RIGHT):
            return 1
        if self in (Assoc.BINARY_LEFT, Assoc.BINARY_RIGHT):
            return 2
        return 0

    @property
    def role(self) -> Role | None:
        """The table an operator of this associativity belongs in."""
        return {
            Assoc.UNARY_RIGHT: Role.PREFIX,
            Assoc.UNARY_LEFT: Role.POSTFIX,
            Assoc.BINARY_LEFT: Role.INFIX,
            Assoc.BINARY_RIGHT: Role.INFIX,
        }.get(self)


@functools.total_ordering
class BindingLevel:
    """A binding level; UNBOUND (value None) is less than every bound level."""

    __slots__ = ("value",)

    def __init__(self, value: int | None = None) -> None:
        self.value = value

    @property
    def is_bound(self) -> bool:
        return self.value is not None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BindingLevel):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, BindingLevel):
            return NotImplemented
        if other.value is None:
            return False
        if self.value is None:
            return True
        return self.value < other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return "UNBOUND" if self.value is None else f"BindingLevel({self.value})"


UNBOUND = BindingLevel()


def encode(precedence: int, assoc: Assoc) -> tuple[BindingLevel, BindingLevel]:
    """Returns the (left, right) binding levels for an operator.

    Args:
        precedence (int): Order of precedence; greater binds tighter.
        assoc (Assoc): Associativity, which also fixes the arity.

    Returns:
        tuple[BindingLevel, BindingLevel]: (UNBOUND, UNBOUND) when precedence
        is not positive or the operator is nonassociative.
    """
    if precedence > 0:
        n = 2 * precedence
        if assoc is Assoc.UNARY_LEFT:
            return BindingLevel(n - 1), UNBOUND
        if assoc is Assoc.UNARY_RIGHT:
            return UNBOUND, BindingLevel(n - 1)
        if assoc is Assoc.BINARY_LEFT:
            return BindingLevel(n - 1), BindingLevel(n)
        if assoc is Assoc.BINARY_RIGHT:
            return BindingLevel(n), BindingLevel(n - 1)
    return UNBOUND, UNBOUND


@dataclass(frozen=True)
class Operator:
    """Operator metadata for one symbol kind in one role."""

    kind: SymbolKind
    precedence: int = 0
    assoc: Assoc = Assoc.NONASSOCIATIVE
    left: BindingLevel = UNBOUND
    right: BindingLevel = UNBOUND

    @property
    def arity(self) -> int:
        return self.assoc.arity

    @property
    def bound(self) -> bool:
        return self.left.is_bound or self.right.is_bound

    @property
    def spelling(self) -> str:
        return self.kind.canonical

    def symbol(self, offset: int = 0) -> Symbol:
        return Symbol.operator(self.kind, offset)

    def __str__(self) -> str:
        return self.spelling


class OperatorTable:
    """Prefix, infix and postfix operator metadata indexed by symbol kind.

    Each role is an array of MAX_OPERATORS entries; an absent entry is an
    Operator whose two levels are both UNBOUND. Tables are filled with
    `add()` and then frozen; a frozen table never changes and may be shared
    by any number of parsers.

    Example:
        >>> table = OperatorTable().add(16, Assoc.BINARY_LEFT, SymbolKind.ADD).freeze()
        >>> table.infix(SymbolKind.ADD).left
        BindingLevel(31)
    """

    def __init__(self) -> None:
        self._tables: dict[Role, list[Operator]] = {
            role: [Operator(SymbolKind.ILLEGAL)] * MAX_OPERATORS for role in Role
        }
        self._frozen = False

    @classmethod
    def default(cls) -> "OperatorTable":
        """Builds the frozen C-like seed table (precedence 1 through 23)."""
        k = SymbolKind
        table = cls()
        table.add(23, Assoc.UNARY_RIGHT, k.LPAREN)
        table.add(22, Assoc.BINARY_RIGHT, k.PERIOD)
        table.add(21, Assoc.UNARY_LEFT, k.INC, k.DEC)
        table.add(20, Assoc.UNARY_RIGHT, k.INC, k.DEC)
        table.add(19, Assoc.UNARY_RIGHT, k.ADD, k.SUB)
        table.add(18, Assoc.UNARY_RIGHT, k.NOT, k.TILDE)
        table.add(17, Assoc.BINARY_LEFT, k.MUL, k.QUO, k.REM)
        table.add(16, Assoc.BINARY_LEFT, k.ADD, k.SUB)
        table.add(15, Assoc.BINARY_LEFT, k.SHL, k.SHR)
        table.add(14, Assoc.BINARY_LEFT, k.LSS, k.GTR, k.LEQ, k.GEQ)
        table.add(13, Assoc.BINARY_LEFT, k.EQL, k.NEQ)
        table.add(12, Assoc.BINARY_LEFT, k.AND)
        table.add(11, Assoc.BINARY_LEFT, k.AND_NOT)
        table.add(10, Assoc.BINARY_LEFT, k.XOR)
        table.add(9, Assoc.BINARY_LEFT, k.OR)
        table.add(8, Assoc.BINARY_LEFT, k.LAND)
        table.add(7, Assoc.BINARY_LEFT, k.LOR)
        table.add(6, Assoc.BINARY_RIGHT, k.DEFINE, k.ASSIGN)
        table.add(5, Assoc.BINARY_RIGHT, k.ADD_ASSIGN, k.SUB_ASSIGN)
        table.add(4, Assoc.BINARY_RIGHT, k.MUL_ASSIGN, k.QUO_ASSIGN, k.REM_ASSIGN)
        table.add(3, Assoc.BINARY_RIGHT, k.SHL_ASSIGN, k.SHR_ASSIGN)
        table.add(
            2,
            Assoc.BINARY_RIGHT,
            k.AND_ASSIGN,
            k.AND_NOT_ASSIGN,
            k.XOR_ASSIGN,
            k.OR_ASSIGN,
        )
        table.add(1, Assoc.BINARY_LEFT, k.COMMA, k.SEMICOLON)
        return table.freeze()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "OperatorTable":
        self._frozen = True
        return self

    def add(self, precedence: int, assoc: Assoc, *kinds: SymbolKind) -> "OperatorTable":
        """Registers `kinds` in the table implied by `assoc`.

        Raises:
            RuntimeError: If the table is frozen.
            ValueError: If precedence is not positive or assoc is nonassociative.
        """
        if self._frozen:
            raise RuntimeError("operator table is frozen")
        role = assoc.role
        if precedence <= 0 or role is None:
            raise ValueError(
                f"invalid operator definition: precedence={precedence}, assoc={assoc.name}"
            )
        left, right = encode(precedence, assoc)
        entries = self._tables[role]
        for kind in kinds:
            entries[kind] = Operator(kind, precedence, assoc, left, right)
        return self

    def lookup(self, kind: SymbolKind, role: Role) -> tuple[Operator, bool]:
        """Returns the entry for `kind` in `role` and whether it is bound."""
        if 0 <= kind < MAX_OPERATORS:
            op = self._tables[role][kind]
            if op.bound:
                return op, True
        return Operator(kind), False

    def prefix(self, kind: SymbolKind) -> Operator | None:
        op, found = self.lookup(kind, Role.PREFIX)
        return op if found else None

    def infix(self, kind: SymbolKind) -> Operator | None:
        op, found = self.lookup(kind, Role.INFIX)
        return op if found else None

    def postfix(self, kind: SymbolKind) -> Operator | None:
        op, found = self.lookup(kind, Role.POSTFIX)
        return op if found else None

    def operators(self, role: Role) -> list[Operator]:
        """Every bound entry in `role`, ordered by symbol kind."""
        return [op for op in self._tables[role] if op.bound]


__all__ = [
    "Assoc",
    "BindingLevel",
    "Operator",
    "OperatorTable",
    "Role",
    "UNBOUND",
    "encode",
]
