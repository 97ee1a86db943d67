"""
Scanner for the bases expression reader.

This module turns raw source text into a sequence of Symbols for a Go-like,
C-family grammar:

Classes:
    CharacterStream: Character cursor over the source buffer.
    Scanner: Converts a CharacterStream into Symbols, one per call.

Features:
    - Skips whitespace, `//` line comments and `/* */` block comments
    - Identifiers and keywords (keywords carry an empty lexeme)
    - Integers in decimal, hexadecimal (0x), octal (0o or leading 0) and
      binary (0b) with `_` digit separators
    - Floats with fraction and exponent, hexadecimal floats (`0x1p-2`)
    - Imaginary literals (`2i`, `1.5i`)
    - Rune literals (`'a'`, `'\\n'`) and interpreted or raw string literals
    - Longest-match recognition of operators and punctuation

Malformed input never raises. It is returned as an ILLEGAL symbol whose
lexeme is the offending text, and the reason is queued until the consumer
collects it with `drain_errors()`.

Example:
    >>> scanner = Scanner(CharacterStream("x + 1"))
    >>> [s.spelling for s in scanner]
    ['x', '+', '1', 'EOF']
"""

import logging
from collections.abc import Iterator

from bases.bases_constants import KEYWORDS, MAX_OPERATOR_LENGTH, token_hashmap
from bases.bases_symbol import Symbol, SymbolKind

logger = logging.getLogger(__name__)

_SIMPLE_ESCAPES = "abfnrtv\\"
_RADIX_NAMES = {2: "binary", 8: "octal", 10: "decimal", 16: "hexadecimal"}


class CharacterStream:
    """
    A cursor over a source string.

    Attributes:
        source (str): The input source string.
        position (int): Offset of the next character to be read.
    """

    def __init__(self, source: str, position: int = 0):
        self.source = source
        self.position = position

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>"
            )
        char = self.source[self.position]
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def text(self, start: int) -> str:
        """Returns the source text consumed since `start`."""
        return self.source[start : self.position]


def _is_letter(ch: str) -> bool:
    return ch != "" and (ch.isalpha() or ch == "_")


def _is_decimal(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


def _is_hex(ch: str) -> bool:
    return ch != "" and ch in "0123456789abcdefABCDEF"


class Scanner:
    """Lexical scanner producing Symbols from a CharacterStream.

    Attributes:
        stream (CharacterStream): The source being scanned.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self._errors: list[tuple[int, str]] = []

    @classmethod
    def from_string(cls, source: str) -> "Scanner":
        return cls(CharacterStream(source))

    @property
    def end(self) -> int:
        """Offset of the end-of-input symbol."""
        return len(self.stream.source)

    def drain_errors(self) -> list[tuple[int, str]]:
        """Returns and forgets the lexical errors recorded so far."""
        errors, self._errors = self._errors, []
        return errors

    def error(self, offset: int, message: str) -> None:
        logger.debug("error (%d): %s", offset, message)
        self._errors.append((offset, message))

    def __iter__(self) -> Iterator[Symbol]:
        """Yields symbols lazily, up to and including the first EOF."""
        while True:
            sym = self.next_symbol()
            yield sym
            if sym.is_eof():
                return

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips whitespace and comments; an open block comment becomes an error."""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch in " \t\r\n":
                self.advance()
            elif ch == "/" and self.peek(1) == "/":
                while not self.stream.end_of_file() and self.peek() != "\n":
                    self.advance()
            elif ch == "/" and self.peek(1) == "*":
                if not self.skip_block_comment():
                    return
            else:
                break

    def skip_block_comment(self) -> bool:
        start = self.stream.position
        self.advance()
        self.advance()
        while not self.stream.end_of_file():
            if self.peek() == "*" and self.peek(1) == "/":
                self.advance()
                self.advance()
                return True
            self.advance()
        # Rewind so next_symbol reports the whole comment as illegal.
        self.stream.position = start
        return False

    def next_symbol(self) -> Symbol:
        """Scans and returns the next Symbol; EOF is returned forever at the end."""
        sym = self._scan()
        logger.debug("scan: %r", sym)
        return sym

    def _scan(self) -> Symbol:
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Symbol.eof(self.end)

        start = self.stream.position
        ch = self.peek()

        # 1. Identifier or keyword
        if _is_letter(ch):
            while _is_letter(self.peek()) or _is_decimal(self.peek()):
                self.advance()
            word = self.stream.text(start)
            if word in KEYWORDS:
                return Symbol.keyword(KEYWORDS[word], start)
            return Symbol.identifier(word, start)

        # 2. Number, including fractions with no integer part
        if _is_decimal(ch) or (ch == "." and _is_decimal(self.peek(1))):
            return self.scan_number(start)

        # 3. Runes and strings
        if ch == "'":
            return self.scan_rune(start)
        if ch == '"':
            return self.scan_string(start)
        if ch == "`":
            return self.scan_raw_string(start)

        # 4. Unterminated block comment left in place by skip_whitespace
        if ch == "/" and self.peek(1) == "*":
            while not self.stream.end_of_file():
                self.advance()
            return self._illegal(start, "comment not terminated")

        # 5. Operators and punctuation
        sym = self.match_operator(start)
        if sym is not None:
            return sym

        # 6. Unknown character
        self.advance()
        return self._illegal(start, f"illegal character U+{ord(ch):04X} {ch!r}")

    def _illegal(self, start: int, message: str) -> Symbol:
        self.error(start, message)
        return Symbol.illegal(self.stream.text(start), start)

    def match_operator(self, start: int) -> Symbol | None:
        """Matches the longest operator spelling at the current position."""
        kind = None
        match_len = 0
        candidate = ""
        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                kind = token_hashmap[candidate]
                match_len = i + 1
        if kind is None:
            return None
        for _ in range(match_len):
            self.advance()
        return Symbol.operator(kind, start)

    def _digits(self, base: int) -> tuple[int, str | None]:
        """Consumes digits and separators; returns (digit count, first invalid digit)."""
        count = 0
        invalid = None
        while True:
            ch = self.peek()
            if ch == "_":
                self.advance()
                continue
            if base == 16:
                if not _is_hex(ch):
                    break
            elif not _is_decimal(ch):
                break
            if base < 10 and int(ch) >= base and invalid is None:
                invalid = ch
            self.advance()
            count += 1
        return count, invalid

    def scan_number(self, start: int) -> Symbol:
        kind = SymbolKind.INT
        base = 10
        prefix = ""
        message = None
        invalid = None

        if self.peek() != ".":
            if self.peek() == "0":
                self.advance()
                lower = self.peek().lower()
                if lower in ("x", "o", "b"):
                    self.advance()
                    base = {"x": 16, "o": 8, "b": 2}[lower]
                    prefix = lower
                else:
                    # Legacy octal: a leading 0 makes the integer octal.
                    base = 8
                    prefix = "0"
            digits, invalid = self._digits(base)
            if prefix in ("x", "o", "b") and digits == 0:
                message = f"{_RADIX_NAMES[base]} literal has no digits"

        if self.peek() == ".":
            kind = SymbolKind.FLOAT
            if prefix in ("o", "b"):
                message = message or f"invalid radix point in {_RADIX_NAMES[base]} literal"
            self.advance()
            self._digits(16 if base == 16 else 10)
            if prefix == "0":
                # 0.5 and 017.5 are decimal floats.
                invalid = None

        exp = self.peek().lower()
        if exp in ("e", "p"):
            if exp == "e" and prefix in ("x", "o", "b"):
                message = message or "'e' exponent requires decimal mantissa"
            if exp == "p" and prefix != "x":
                message = message or "'p' exponent requires hexadecimal mantissa"
            self.advance()
            kind = SymbolKind.FLOAT
            if self.peek() in ("+", "-"):
                self.advance()
            digits, _ = self._digits(10)
            if digits == 0:
                message = message or "exponent has no digits"
            if prefix == "0":
                invalid = None
        elif prefix == "x" and kind == SymbolKind.FLOAT:
            message = message or "hexadecimal mantissa requires a 'p' exponent"

        if self.peek() == "i":
            self.advance()
            kind = SymbolKind.IMAG
            if prefix == "0":
                invalid = None

        if message is None and invalid is not None:
            message = f"invalid digit {invalid!r} in {_RADIX_NAMES[base]} literal"
        if message is not None:
            return self._illegal(start, message)
        return Symbol.literal(kind, self.stream.text(start), start)

    def _scan_escape(self, quote: str) -> bool:
        """Consumes one escape sequence after a backslash."""
        ch = self.peek()
        if ch == quote or (ch != "" and ch in _SIMPLE_ESCAPES):
            self.advance()
            return True
        if ch in ("x", "u", "U"):
            width = {"x": 2, "u": 4, "U": 8}[ch]
            self.advance()
            for _ in range(width):
                if not _is_hex(self.peek()):
                    return False
                self.advance()
            return True
        if ch != "" and ch in "01234567":
            for _ in range(3):
                if self.peek() == "" or self.peek() not in "01234567":
                    return False
                self.advance()
            return True
        return False

    def scan_rune(self, start: int) -> Symbol:
        self.advance()
        count = 0
        valid = True
        while True:
            ch = self.peek()
            if ch == "'":
                self.advance()
                break
            if ch in ("", "\n"):
                return self._illegal(start, "rune literal not terminated")
            self.advance()
            if ch == "\\" and not self._scan_escape("'"):
                valid = False
            count += 1
        if not valid:
            return self._illegal(start, "unknown escape sequence")
        if count != 1:
            return self._illegal(start, "illegal rune literal")
        return Symbol.literal(SymbolKind.CHAR, self.stream.text(start), start)

    def scan_string(self, start: int) -> Symbol:
        self.advance()
        valid = True
        while True:
            ch = self.peek()
            if ch == '"':
                self.advance()
                break
            if ch in ("", "\n"):
                return self._illegal(start, "string literal not terminated")
            self.advance()
            if ch == "\\" and not self._scan_escape('"'):
                valid = False
        if not valid:
            return self._illegal(start, "unknown escape sequence")
        return Symbol.literal(SymbolKind.STRING, self.stream.text(start), start)

    def scan_raw_string(self, start: int) -> Symbol:
        self.advance()
        while not self.stream.end_of_file():
            if self.advance() == "`":
                return Symbol.literal(SymbolKind.STRING, self.stream.text(start), start)
        return self._illegal(start, "raw string literal not terminated")


__all__ = ["CharacterStream", "Scanner"]
