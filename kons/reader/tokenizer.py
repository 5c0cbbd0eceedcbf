"""Tokenizer: classify the characters of a Lexer into Tokens.

    tokens = tokenize("(some input)")
    next(tokens)  # Token(tag=<Tag.PAREN_O>, ...)
    next(tokens)  # Token(tag=<Tag.IDENT>, value='some', ...)
    next(tokens)  # Token(tag=<Tag.WS>, ...)

Token production is lazy: each `next` does just enough reading to produce
one token. Nothing is skipped, so the slices of a complete token stream
concatenate back to the input; whitespace, newlines and comments are tokens
the parser chooses to ignore.

Recognizers run in a fixed priority order and each one either consumes
exactly the text it claims or leaves the lexer untouched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional, TextIO, Union

from kons.reader.lexer import Lexer

logger = logging.getLogger(__name__)


class Tag(str, Enum):
    IDENT = "ident"
    NUMBER = "number"
    STRING = "string"
    PAREN_O = "paren_o"
    PAREN_C = "paren_c"
    DOT = "dot"
    QUOTE = "quote"
    QUASIQUOTE = "quasiquote"
    UNQUOTE = "unquote"
    UNQUOTE_SPLICE = "unquote_splice"
    SHARP = "sharp"
    COMMA = "comma"
    COMMA_SPLICE = "comma_splice"
    WS = "ws"
    EOL = "eol"
    COMMENT = "comment"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A single token.

    tag:    the classification
    value:  the decoded value; numbers are already parsed, strings have their
            escapes decoded, invalid tokens carry a reason
    slice:  the exact source text consumed
    offset: character offset of the slice in the input
    line:   line of the first character
    column: column of the first character on that line
    """

    tag: Tag
    value: Any
    slice: str
    offset: int
    line: int
    column: int


class _Cursor:
    __slots__ = ("line", "column")

    def __init__(self, line: int, column: int):
        self.line = line
        self.column = column

    def advance(self, text: str) -> None:
        for char in text:
            if char == "\n":
                self.line += 1
                self.column = 0
            else:
                self.column += 1


DIGITS_BASE2 = "01"
DIGITS_BASE10 = "0123456789"
DIGITS_BASE16 = "0123456789abcdefABCDEF"

IDENT_START_SYMBOLS = "-!$%@&<=>?~_+\\*^"
IDENT_CONT_SYMBOLS = "/:#"

SYMBOL_TOKENS: dict[str, Tag] = {
    "(": Tag.PAREN_O,
    ")": Tag.PAREN_C,
    "`": Tag.QUASIQUOTE,
    "'": Tag.QUOTE,
    "#": Tag.SHARP,
    ".": Tag.DOT,
}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

OUT_OF_RANGE = "numeric literal out of range"

RADIX_PREFIXES: tuple[tuple[str, str, int], ...] = (
    ("#b", DIGITS_BASE2, 2),
    ("#u", DIGITS_BASE10, 10),
    ("#x", DIGITS_BASE16, 16),
)


def is_newline(char: str) -> bool:
    return char == "\n"


def is_whitespace(char: str) -> bool:
    return char != "\n" and char.isspace()


def is_digit(char: str) -> bool:
    return char in DIGITS_BASE10


def is_ident_start(char: str) -> bool:
    return char.isidentifier() or char in IDENT_START_SYMBOLS


def is_ident_cont(char: str) -> bool:
    return (
        is_ident_start(char)
        or ("_" + char).isidentifier()
        or char in IDENT_CONT_SYMBOLS
    )


# (tag, value, consumed text) or None when the recognizer does not apply
Match = Optional[tuple[Tag, Any, str]]


def _read_newline(lex: Lexer) -> Match:
    if (char := lex.consume_if(is_newline)) is not None:
        return Tag.EOL, None, char
    return None


def _read_whitespace(lex: Lexer) -> Match:
    if (run := lex.consume_while(is_whitespace)) is not None:
        return Tag.WS, None, run
    return None


def _read_comment(lex: Lexer) -> Match:
    if (semi := lex.consume_if(lambda c: c == ";")) is None:
        return None
    # comments run to the end of the line, newline excluded
    return Tag.COMMENT, None, lex.consume_until(is_newline, prefix=semi)


def _read_string(lex: Lexer) -> Match:
    if (quote := lex.consume_if(lambda c: c == '"')) is None:
        return None
    raw = [quote]
    chars: list[str] = []
    while True:
        run = lex.consume_until(lambda c: c in '"\\')
        if run:
            raw.append(run)
            chars.append(run)
        stop = lex.next_char()
        if stop is None:
            return Tag.INVALID, "eof in string", "".join(raw)
        raw.append(stop)
        if stop == '"':
            return Tag.STRING, "".join(chars), "".join(raw)
        escape = lex.next_char()
        if escape is None:
            # a trailing backslash is consumed on its own
            return Tag.INVALID, "eof in string", "".join(raw)
        raw.append(escape)
        chars.append(STRING_ESCAPES.get(escape, "\\" + escape))


def _read_radix(lex: Lexer) -> Match:
    for prefix, digits, base in RADIX_PREFIXES:
        if lex.consume_literal(prefix) is None:
            continue
        run = lex.consume_while(str.isalnum) or ""
        if run and all(c in digits for c in run):
            try:
                value = float(int(run, base))
            except (ValueError, OverflowError):
                # past the int digit limit or beyond the float range
                return Tag.INVALID, OUT_OF_RANGE, prefix + run
            return Tag.NUMBER, value, prefix + run
        return Tag.INVALID, f"expected base{base} digits", prefix + run
    return None


def _read_number(lex: Lexer) -> Match:
    sign = lex.consume_if(lambda c: c in "+-")
    integral = lex.consume_while(is_digit)
    if integral is None:
        lex.push_back(sign)
        return None
    text = (sign or "") + integral

    if (point := lex.consume_if(lambda c: c == ".")) is not None:
        fraction = lex.consume_while(is_digit)
        if fraction is None:
            return Tag.INVALID, "expected digits after decimal point", text + point
        text += point + fraction

    if (exp := lex.consume_if(lambda c: c in "eE")) is not None:
        exp_sign = lex.consume_if(lambda c: c in "+-")
        exp_digits = lex.consume_while(is_digit)
        if exp_digits is None:
            # not an exponent after all; `e` is re-read as the next token
            lex.push_back(exp_sign)
            lex.push_back(exp)
        else:
            text += exp + (exp_sign or "") + exp_digits

    value = float(text)
    if math.isinf(value):
        return Tag.INVALID, OUT_OF_RANGE, text
    return Tag.NUMBER, value, text


def _read_identifier(lex: Lexer) -> Match:
    if (start := lex.consume_if(is_ident_start)) is None:
        return None
    ident = lex.consume_while(is_ident_cont, prefix=start)
    return Tag.IDENT, ident, ident


def _read_comma(lex: Lexer) -> Match:
    if lex.consume_if(lambda c: c == ",") is None:
        return None
    if lex.consume_if(lambda c: c == "@") is not None:
        return Tag.COMMA_SPLICE, None, ",@"
    return Tag.COMMA, None, ","


def _read_symbol(lex: Lexer) -> Match:
    char = lex.next_char()
    if char is None:
        return None
    if (tag := SYMBOL_TOKENS.get(char)) is not None:
        return tag, None, char
    return Tag.INVALID, f"unexpected character {char!r}", char


RECOGNIZERS: tuple[Callable[[Lexer], Match], ...] = (
    _read_newline,
    _read_whitespace,
    _read_comment,
    _read_string,
    _read_radix,
    _read_number,
    _read_identifier,
    _read_comma,
    _read_symbol,
)


class Tokenizer:
    """Generates a stream of tokens out of an input stream.

    Iterating a Tokenizer reads its Lexer to the end; to iterate again the
    Lexer must be rewound, which needs a seekable input.
    """

    def __init__(self, source: Union[Lexer, str, TextIO], line: int = 0, column: int = 0):
        self.input: Lexer = source if isinstance(source, Lexer) else Lexer(source)
        self.line = line
        self.column = column

    def rewind(self) -> None:
        self.input.rewind()

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self, line: Optional[int] = None, column: Optional[int] = None) -> Iterator[Token]:
        cursor = _Cursor(
            self.line if line is None else line,
            self.column if column is None else column,
        )
        lex = self.input
        while not lex.eof():
            offset = lex.pos
            for recognize in RECOGNIZERS:
                match = recognize(lex)
                if match is not None:
                    break
            else:
                return
            tag, value, text = match
            token = Token(tag, value, text, offset, cursor.line, cursor.column)
            if tag is Tag.INVALID:
                logger.debug("invalid token %r at %d:%d: %s", text, token.line, token.column, value)
            cursor.advance(text)
            yield token


def tokenize(source: Union[Lexer, str, TextIO], line: int = 0, column: int = 0) -> Iterator[Token]:
    """Lazily tokenize `source`, numbering positions from (line, column)."""
    return Tokenizer(source, line, column).tokens()
