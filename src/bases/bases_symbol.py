"""
Symbol model for the bases expression reader.

A Symbol is one lexical unit produced by the scanner: its spelling, its kind,
and its offset into the source buffer.

Classes:
    SymbolKind: Closed enumeration of every lexical kind.
    Symbol: Immutable (lexeme, kind, offset) value.

Notes:
    Keywords and operator/punctuation symbols carry an empty lexeme; their
    spelling is recovered from the kind's canonical name. Identifiers and
    literals keep the exact source text (string and char literals keep
    their quotes).

Example:
    >>> Symbol.literal(SymbolKind.INT, "42", 0).spelling
    '42'
    >>> Symbol.operator(SymbolKind.ADD, 3).spelling
    '+'
"""

from dataclasses import dataclass
from enum import IntEnum


class SymbolKind(IntEnum):
    """Every kind of symbol the scanner can emit.

    Ordinals are dense and small so the operator tables can index arrays by
    kind directly.
    """

    ILLEGAL = 0
    EOF = 1
    COMMENT = 2

    IDENT = 3
    INT = 4
    FLOAT = 5
    IMAG = 6
    CHAR = 7
    STRING = 8

    ADD = 9  # +
    SUB = 10  # -
    MUL = 11  # *
    QUO = 12  # /
    REM = 13  # %

    AND = 14  # &
    OR = 15  # |
    XOR = 16  # ^
    SHL = 17  # <<
    SHR = 18  # >>
    AND_NOT = 19  # &^

    ADD_ASSIGN = 20  # +=
    SUB_ASSIGN = 21  # -=
    MUL_ASSIGN = 22  # *=
    QUO_ASSIGN = 23  # /=
    REM_ASSIGN = 24  # %=

    AND_ASSIGN = 25  # &=
    OR_ASSIGN = 26  # |=
    XOR_ASSIGN = 27  # ^=
    SHL_ASSIGN = 28  # <<=
    SHR_ASSIGN = 29  # >>=
    AND_NOT_ASSIGN = 30  # &^=

    LAND = 31  # &&
    LOR = 32  # ||
    ARROW = 33  # <-
    INC = 34  # ++
    DEC = 35  # --

    EQL = 36  # ==
    LSS = 37  # <
    GTR = 38  # >
    ASSIGN = 39  # =
    NOT = 40  # !

    NEQ = 41  # !=
    LEQ = 42  # <=
    GEQ = 43  # >=
    DEFINE = 44  # :=
    ELLIPSIS = 45  # ...

    LPAREN = 46  # (
    LBRACK = 47  # [
    LBRACE = 48  # {
    COMMA = 49  # ,
    PERIOD = 50  # .

    RPAREN = 51  # )
    RBRACK = 52  # ]
    RBRACE = 53  # }
    SEMICOLON = 54  # ;
    COLON = 55  # :
    TILDE = 56  # ~

    BREAK = 57
    CASE = 58
    CHAN = 59
    CONST = 60
    CONTINUE = 61

    DEFAULT = 62
    DEFER = 63
    ELSE = 64
    FALLTHROUGH = 65
    FOR = 66

    FUNC = 67
    GO = 68
    GOTO = 69
    IF = 70
    IMPORT = 71

    INTERFACE = 72
    MAP = 73
    PACKAGE = 74
    RANGE = 75
    RETURN = 76

    SELECT = 77
    STRUCT = 78
    SWITCH = 79
    TYPE = 80
    VAR = 81

    @property
    def canonical(self) -> str:
        """The kind's spelling: operator text, keyword word, or class name."""
        from bases.bases_constants import KIND_SPELLINGS

        return KIND_SPELLINGS.get(self, self.name)

    @property
    def is_literal(self) -> bool:
        return SymbolKind.INT <= self <= SymbolKind.STRING

    @property
    def is_operator(self) -> bool:
        return SymbolKind.ADD <= self <= SymbolKind.TILDE

    @property
    def is_keyword(self) -> bool:
        return SymbolKind.BREAK <= self <= SymbolKind.VAR


@dataclass(frozen=True)
class Symbol:
    """One lexical unit.

    Attributes:
        lexeme (str): Source text for identifiers, literals and illegal input;
            empty for keywords and operators.
        kind (SymbolKind): The symbol's kind.
        offset (int): Zero-based character offset into the source buffer.
    """

    lexeme: str
    kind: SymbolKind
    offset: int = 0

    @classmethod
    def eof(cls, offset: int = 0) -> "Symbol":
        return cls("", SymbolKind.EOF, offset)

    @classmethod
    def illegal(cls, lexeme: str = "", offset: int = 0) -> "Symbol":
        return cls(lexeme, SymbolKind.ILLEGAL, offset)

    @classmethod
    def operator(cls, kind: SymbolKind, offset: int = 0) -> "Symbol":
        if not kind.is_operator:
            raise ValueError(f"{kind.name} is not an operator kind")
        return cls("", kind, offset)

    @classmethod
    def keyword(cls, kind: SymbolKind, offset: int = 0) -> "Symbol":
        if not kind.is_keyword:
            raise ValueError(f"{kind.name} is not a keyword kind")
        return cls("", kind, offset)

    @classmethod
    def identifier(cls, name: str, offset: int = 0) -> "Symbol":
        return cls(name, SymbolKind.IDENT, offset)

    @classmethod
    def literal(cls, kind: SymbolKind, lexeme: str, offset: int = 0) -> "Symbol":
        if not kind.is_literal:
            raise ValueError(f"{kind.name} is not a literal kind")
        return cls(lexeme, kind, offset)

    def is_eof(self) -> bool:
        return self.kind == SymbolKind.EOF

    def is_illegal(self) -> bool:
        return self.kind == SymbolKind.ILLEGAL

    def is_identifier(self) -> bool:
        return self.kind == SymbolKind.IDENT and self.lexeme.isidentifier()

    def is_literal(self) -> bool:
        return self.kind.is_literal

    def is_keyword(self) -> bool:
        return self.kind.is_keyword

    @property
    def spelling(self) -> str:
        """The lexeme, or the kind's canonical name when the lexeme is empty."""
        return self.lexeme or self.kind.canonical

    def matches(self, other: "Symbol") -> bool:
        """Compares kind (and text for identifiers and literals), ignoring offset."""
        if self.kind != other.kind:
            return False
        if self.kind == SymbolKind.IDENT or self.kind.is_literal:
            return self.lexeme == other.lexeme
        return True

    def __str__(self) -> str:
        return self.spelling

    def __repr__(self) -> str:
        return f"Symbol({self.kind.name}, {self.lexeme!r}, {self.offset})"


__all__ = ["Symbol", "SymbolKind"]
