"""
Lexical vocabulary shared by the scanner, the operator table and the renderer.

Exports:
    KIND_SPELLINGS: SymbolKind -> canonical spelling for operators and keywords.
    KEYWORDS: keyword word -> SymbolKind.
    token_hashmap: operator/punctuation spelling -> SymbolKind (longest match).
    MAX_OPERATOR_LENGTH: length of the longest operator spelling.
    MAX_OPERATORS: size of every operator-table array.
    MAX_ARITY: largest number of operands any operator takes.
"""

from bases.bases_symbol import SymbolKind

# Operator tables are arrays indexed by SymbolKind ordinal.
MAX_OPERATORS = 128

MAX_ARITY = 2

OPERATOR_SPELLINGS: dict[SymbolKind, str] = {
    SymbolKind.ADD: "+",
    SymbolKind.SUB: "-",
    SymbolKind.MUL: "*",
    SymbolKind.QUO: "/",
    SymbolKind.REM: "%",
    SymbolKind.AND: "&",
    SymbolKind.OR: "|",
    SymbolKind.XOR: "^",
    SymbolKind.SHL: "<<",
    SymbolKind.SHR: ">>",
    SymbolKind.AND_NOT: "&^",
    SymbolKind.ADD_ASSIGN: "+=",
    SymbolKind.SUB_ASSIGN: "-=",
    SymbolKind.MUL_ASSIGN: "*=",
    SymbolKind.QUO_ASSIGN: "/=",
    SymbolKind.REM_ASSIGN: "%=",
    SymbolKind.AND_ASSIGN: "&=",
    SymbolKind.OR_ASSIGN: "|=",
    SymbolKind.XOR_ASSIGN: "^=",
    SymbolKind.SHL_ASSIGN: "<<=",
    SymbolKind.SHR_ASSIGN: ">>=",
    SymbolKind.AND_NOT_ASSIGN: "&^=",
    SymbolKind.LAND: "&&",
    SymbolKind.LOR: "||",
    SymbolKind.ARROW: "<-",
    SymbolKind.INC: "++",
    SymbolKind.DEC: "--",
    SymbolKind.EQL: "==",
    SymbolKind.LSS: "<",
    SymbolKind.GTR: ">",
    SymbolKind.ASSIGN: "=",
    SymbolKind.NOT: "!",
    SymbolKind.NEQ: "!=",
    SymbolKind.LEQ: "<=",
    SymbolKind.GEQ: ">=",
    SymbolKind.DEFINE: ":=",
    SymbolKind.ELLIPSIS: "...",
    SymbolKind.LPAREN: "(",
    SymbolKind.LBRACK: "[",
    SymbolKind.LBRACE: "{",
    SymbolKind.COMMA: ",",
    SymbolKind.PERIOD: ".",
    SymbolKind.RPAREN: ")",
    SymbolKind.RBRACK: "]",
    SymbolKind.RBRACE: "}",
    SymbolKind.SEMICOLON: ";",
    SymbolKind.COLON: ":",
    SymbolKind.TILDE: "~",
}

KEYWORDS: dict[str, SymbolKind] = {
    kind.name.lower(): kind
    for kind in SymbolKind
    if SymbolKind.BREAK <= kind <= SymbolKind.VAR
}

KIND_SPELLINGS: dict[SymbolKind, str] = {
    **OPERATOR_SPELLINGS,
    **{kind: word for word, kind in KEYWORDS.items()},
}

token_hashmap: dict[str, SymbolKind] = {
    spelling: kind for kind, spelling in OPERATOR_SPELLINGS.items()
}

MAX_OPERATOR_LENGTH = max(len(spelling) for spelling in token_hashmap)

__all__ = [
    "KEYWORDS",
    "KIND_SPELLINGS",
    "MAX_ARITY",
    "MAX_OPERATORS",
    "MAX_OPERATOR_LENGTH",
    "OPERATOR_SPELLINGS",
    "token_hashmap",
]
