"""Character-level lexing buffer.

A thin cursor over a text source with a pushback stack, plus helpers for
consuming input by predicate. Every read either succeeds or leaves the
stream exactly as it found it, so the tokenizer can look ahead any distance
by reading and pushing back.

    lex = Lexer("some string")
    chunk = lex.consume_while(str.isalpha)      # "some"
    ws = lex.consume_until(str.isalpha)         # " "
    chunk = lex.consume_while(str.isalpha, prefix=chunk)   # "somestring"
    assert lex.eof()
"""

from __future__ import annotations

import io
import logging
from typing import Callable, Optional, TextIO, Union

from kons.errors import KonsInvalidArgument, KonsRewindError

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


class Lexer:
    """Buffered character cursor over a string or text stream."""

    __slots__ = ("input", "_buffer", "_pos", "_touched")

    def __init__(self, source: Union[str, TextIO]):
        if isinstance(source, str):
            self.input: TextIO = io.StringIO(source)
        elif isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
            raise KonsInvalidArgument(
                f"expected a text stream or string as input, but got binary {source!r}"
            )
        elif callable(getattr(source, "read", None)):
            self.input = source
        else:
            raise KonsInvalidArgument(
                f"expected a text stream or string as input, but got {source!r}"
            )
        self._buffer: list[str] = []
        self._pos = 0
        self._touched = False

    @property
    def pos(self) -> int:
        """Number of characters consumed so far (pushback counts back down)."""
        return self._pos

    def _read(self) -> Optional[str]:
        self._touched = True
        char = self.input.read(1)
        if isinstance(char, bytes):
            raise KonsInvalidArgument("expected a text stream, but read bytes")
        return char or None

    def next_char(self) -> Optional[str]:
        """Read one character; None at end of input."""
        char = self._buffer.pop() if self._buffer else self._read()
        if char is not None:
            self._pos += 1
        return char

    def eof(self) -> bool:
        if self._buffer:
            return False
        char = self._read()
        if char is None:
            return True
        self._buffer.append(char)
        return False

    def push_back(self, char: Optional[str]) -> None:
        """Push one character back; the last one pushed is read first."""
        if char is None:
            return
        self._buffer.append(char)
        self._pos -= 1

    def push_back_string(self, text: str) -> None:
        """Push back a run of characters so they are re-read in order."""
        for char in reversed(text):
            self.push_back(char)

    def consume_if(self, pred: Predicate) -> Optional[str]:
        """Read one character if `pred` accepts it, else leave it in place."""
        char = self.next_char()
        if char is None:
            return None
        if pred(char):
            return char
        self.push_back(char)
        return None

    def consume_while(self, pred: Predicate, prefix: Optional[str] = None) -> Optional[str]:
        """Read while `pred` holds; None when nothing (prefix included) matched."""
        chars = [prefix] if prefix else []
        while (char := self.next_char()) is not None and pred(char):
            chars.append(char)
        # the last char we read did not pass the check
        self.push_back(char)
        return "".join(chars) or None

    def consume_until(self, pred: Predicate, prefix: Optional[str] = None) -> Optional[str]:
        return self.consume_while(lambda c: not pred(c), prefix=prefix)

    def consume_literal(self, expected: str) -> Optional[str]:
        """Consume `expected` exactly, or nothing at all."""
        matched: list[str] = []
        for want in expected:
            char = self.consume_if(lambda c: c == want)
            if char is None:
                self.push_back_string("".join(matched))
                return None
            matched.append(char)
        return "".join(matched)

    def rewind(self) -> None:
        """Restart reading from the beginning of the input.

        Needs a seekable stream once anything has been read; strings always
        qualify.
        """
        if self._touched:
            seekable = getattr(self.input, "seekable", None)
            if not (callable(seekable) and seekable()):
                raise KonsRewindError(f"input {self.input!r} cannot be rewound")
            self.input.seek(0)
            logger.debug("rewound %r", self.input)
        self._buffer.clear()
        self._pos = 0
