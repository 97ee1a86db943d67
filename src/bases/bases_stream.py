"""
Symbol streams with unlimited pushback.

A SymbolStream is the only thing the parser reads from. It offers three
operations:

    next()       -> the most recently undone symbol, else a freshly scanned one
    undo(symbol) -> push a symbol back; undos compose (LIFO), so lookahead
                    depth is bounded only by memory
    peek()       -> next() followed by undo() of the same symbol

Two backends sit behind that interface and behave identically:

    PullSymbolStream       scans inline, step-locked with the consumer
    PipelinedSymbolStream  scans on a producer thread into a queue

Once the scanner yields EOF or an ILLEGAL symbol the stream halts: the
scanner is never asked for anything again (a pipelined producer is told to
quit) and every further pull yields EOF. Undone symbols live only on the
consumer side and are never handed back to the scanner.

Lexical errors reported by the scanner travel with the symbol that caused
them and are recorded in the Diagnostics sink when the consumer receives
that symbol, so both backends report the same diagnostics in the same order.
"""

import logging
import queue
import threading
from types import TracebackType
from typing import Any

from bases.bases_diagnostics import Diagnostics
from bases.bases_lexer import CharacterStream, Scanner
from bases.bases_symbol import Symbol

logger = logging.getLogger(__name__)

# Seconds a blocked producer waits before re-checking the quit signal.
POLL_INTERVAL = 0.05

_Item = tuple[Symbol, list[tuple[int, str]]]


class SymbolStream:
    """Consumer side of a symbol stream: undo buffer, halting, diagnostics.

    Subclasses supply `_receive()` (the next scanned symbol and its errors)
    and may override `_stop()` to release scanning resources.

    Attributes:
        diagnostics (Diagnostics): Sink for lexical errors.
    """

    def __init__(self, diagnostics: Diagnostics, end: int) -> None:
        self.diagnostics = diagnostics
        self._undone: list[Symbol] = []
        self._halted = False
        self._end = end

    @property
    def halted(self) -> bool:
        return self._halted

    def _receive(self) -> _Item:
        raise NotImplementedError

    def _stop(self) -> None:
        pass

    def next(self) -> Symbol:
        if self._undone:
            return self._undone.pop()
        if self._halted:
            return Symbol.eof(self._end)
        sym, errors = self._receive()
        self.diagnostics.extend(errors)
        if sym.is_eof() or sym.is_illegal():
            logger.debug("stop: %r", sym)
            self._halted = True
            self._stop()
        return sym

    def undo(self, sym: Symbol) -> None:
        logger.debug("undo: %r", sym)
        self._undone.append(sym)

    def peek(self) -> Symbol:
        sym = self.next()
        self.undo(sym)
        return sym

    def close(self) -> None:
        """Halts the stream and releases the scanner; safe to call repeatedly."""
        self._halted = True
        self._stop()

    def __enter__(self) -> "SymbolStream":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class PullSymbolStream(SymbolStream):
    """Single-threaded stream; each pull runs the scanner inline."""

    def __init__(self, scanner: Scanner, diagnostics: Diagnostics) -> None:
        super().__init__(diagnostics, scanner.end)
        self.scanner = scanner

    def _receive(self) -> _Item:
        sym = self.scanner.next_symbol()
        return sym, self.scanner.drain_errors()


class PipelinedSymbolStream(SymbolStream):
    """Stream whose scanner runs ahead on a producer thread.

    The producer hands (symbol, errors) pairs to the consumer through a
    queue. With `maxsize` > 0 the queue is bounded and the producer blocks
    (polling the quit signal) when it is full. `close()` raises the quit
    signal, discards anything scanned but not yet received, and joins the
    producer.
    """

    def __init__(
        self, scanner: Scanner, diagnostics: Diagnostics, maxsize: int = 0
    ) -> None:
        super().__init__(diagnostics, scanner.end)
        self.scanner = scanner
        self._channel: queue.Queue[Any] = queue.Queue(maxsize)
        self._quit = threading.Event()
        self._producer = threading.Thread(
            target=self._run, name="bases-scanner", daemon=True
        )
        self._producer.start()

    @property
    def running(self) -> bool:
        return self._producer.is_alive()

    def _run(self) -> None:
        try:
            while not self._quit.is_set():
                sym = self.scanner.next_symbol()
                if not self._send((sym, self.scanner.drain_errors())):
                    return
                logger.debug("gate: %r", sym)
                if sym.is_eof() or sym.is_illegal():
                    return
        except BaseException as exc:
            self._send(exc)

    def _send(self, item: Any) -> bool:
        while not self._quit.is_set():
            try:
                self._channel.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        logger.debug("quit: discarding %r", item)
        return False

    def _receive(self) -> _Item:
        while True:
            try:
                item = self._channel.get(timeout=POLL_INTERVAL)
                break
            except queue.Empty:
                # A finished producer puts its last item before exiting.
                if not self._producer.is_alive() and self._channel.empty():
                    raise RuntimeError("scanner thread exited before end of input") from None
        if isinstance(item, BaseException):
            raise item
        sym, errors = item
        return sym, errors

    def _stop(self) -> None:
        self._quit.set()
        while True:
            try:
                self._channel.get_nowait()
            except queue.Empty:
                break
        if self._producer is not threading.current_thread():
            self._producer.join()


def open_stream(
    source: str,
    diagnostics: Diagnostics,
    pipelined: bool = False,
    maxsize: int = 0,
) -> SymbolStream:
    """Creates a stream over `source` using the requested backend."""
    scanner = Scanner(CharacterStream(source))
    if pipelined:
        return PipelinedSymbolStream(scanner, diagnostics, maxsize)
    return PullSymbolStream(scanner, diagnostics)


__all__ = [
    "POLL_INTERVAL",
    "PipelinedSymbolStream",
    "PullSymbolStream",
    "SymbolStream",
    "open_stream",
]
