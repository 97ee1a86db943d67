"""
Diagnostics sink for the bases expression reader.

Lexical and syntactic complaints are collected here instead of being raised,
so a single parse can report every problem it ran into and still hand back a
(degraded) expression tree.

Classes:
    Diagnostic: One (offset, message) complaint.
    Diagnostics: Ordered collection of complaints for one parse.
    ParseError: Raised on request when a strict caller rejects a degraded parse.

Functions:
    line_col(source, offset) -> tuple[int, int]
"""

import threading
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """A single complaint at a source offset."""

    offset: int
    message: str

    def __str__(self) -> str:
        return f"{self.offset}: {self.message}"


def line_col(source: str, offset: int) -> tuple[int, int]:
    """Converts a zero-based offset into a 1-based (line, column) pair.

    Args:
        source (str): The source buffer the offset refers to.
        offset (int): Character offset; clamped into the buffer.

    Returns:
        tuple[int, int]: Line and column, both starting at 1.
    """
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    start = source.rfind("\n", 0, offset) + 1
    return line, offset - start + 1


class Diagnostics:
    """Ordered list of diagnostics accumulated during one parse.

    Entries are yielded in order of source position (stable for equal
    offsets). An entry identical to the one recorded immediately before it
    is dropped; nothing else is deduplicated.

    The scanner thread of a pipelined stream never touches the sink directly,
    but the sink is still guarded by a lock so it can be shared safely.
    """

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []
        self._lock = threading.Lock()

    def add(self, offset: int, message: str) -> bool:
        """Records a complaint.

        Returns:
            bool: False when the complaint repeated the previous one and was dropped.
        """
        entry = Diagnostic(offset, message)
        with self._lock:
            if self._items and self._items[-1] == entry:
                return False
            self._items.append(entry)
        return True

    def extend(self, entries: list[tuple[int, str]]) -> None:
        for offset, message in entries:
            self.add(offset, message)

    @property
    def items(self) -> list[Diagnostic]:
        with self._lock:
            return sorted(self._items, key=lambda d: d.offset)

    def messages(self) -> list[str]:
        return [d.message for d in self.items]

    def format(self, source: str) -> str:
        """Renders every entry as `line:col: message`, one per line."""
        lines = []
        for d in self.items:
            line, col = line_col(source, d.offset)
            lines.append(f"{line}:{col}: {d.message}")
        return "\n".join(lines)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"Diagnostics({self.items!r})"


class ParseError(SyntaxError):
    """Raised when a strict caller rejects a parse that produced diagnostics.

    Attributes:
        diagnostics (list[Diagnostic]): Every complaint, in source order.
    """

    def __init__(self, message: str, diagnostics: list[Diagnostic] | None = None):
        super().__init__(message)
        self.diagnostics = diagnostics or []


__all__ = ["Diagnostic", "Diagnostics", "ParseError", "line_col"]
