"""
  Kons Reader: tokens in, s-expression Values out.

- Streaming, lazy parsing: one top-level form per `next`
- Restartable: iterating a Parser again rewinds its Tokenizer
- Emits the Value model directly:

    - ()            -> Null
    - (a b c)       -> Cons(a, Cons(b, Cons(c, Null)))
    - (a . b)       -> Cons(a, b)
    - identifiers   -> Symbol
    - numbers       -> Number (radix forms #b #u #x included)
    - strings       -> String
    - #t / #f       -> Boolean
    - 'x `x ,x ,@x  -> (quote . x) (quasiquote . x) (unquote . x) (unquote_splice . x)
    - #x (other)    -> (sharp . x)

Malformed input never aborts the stream. The offending top-level form reads
as an Error value carrying the token where reading went wrong, the rest of
that form is skipped, and reading resumes with the next form.

Nesting is read by direct recursion. Forms nested deeper than MAX_NESTING
come back as an Error value well before the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, TextIO, Union

from kons.errors import KonsSyntaxError
from kons.reader.lexer import Lexer
from kons.reader.tokenizer import Tag, Token, Tokenizer
from kons.types.value import Boolean, Cons, Error, Null, Number, String, Symbol, Value

logger = logging.getLogger(__name__)

TRIVIA = frozenset({Tag.WS, Tag.EOL, Tag.COMMENT})

QUOTE_FORMS: dict[Tag, str] = {
    Tag.QUOTE: "quote",
    Tag.QUASIQUOTE: "quasiquote",
    Tag.UNQUOTE: "unquote",
    Tag.UNQUOTE_SPLICE: "unquote_splice",
    Tag.COMMA: "unquote",
    Tag.COMMA_SPLICE: "unquote_splice",
}

# quote sugar that puts its operand in quoted context; unquotes leave it
QUOTING_TAGS = frozenset({Tag.QUOTE, Tag.QUASIQUOTE})

# a parenthesised level costs three Python frames
MAX_NESTING = 128


class TokenStream:
    """One-token lookahead over a token iterator, plus the reading procedures."""

    def __init__(self, tokens: Iterable[Token]):
        self.tokens = iter(tokens)
        self.buffer: list[Token] = []
        self.last: Optional[Token] = None
        # open parens of the current top-level form, used to resynchronise
        self.depth = 0
        self.nesting = 0

    def peek(self) -> Optional[Token]:
        if not self.buffer:
            tok = next(self.tokens, None)
            if tok is None:
                return None
            self.buffer.append(tok)
        return self.buffer[0]

    def advance(self) -> Optional[Token]:
        tok = self.buffer.pop(0) if self.buffer else next(self.tokens, None)
        if tok is not None:
            self.last = tok
        return tok

    def skip_trivia(self) -> Optional[Token]:
        """Advance over whitespace, newlines and comments; return the next token."""
        while (tok := self.peek()) is not None and tok.tag in TRIVIA:
            self.advance()
        return tok

    def parse_top(self) -> Value:
        self.depth = 0
        self.nesting = 0
        try:
            return self.parse_expr(quoted=False)
        except KonsSyntaxError as exc:
            logger.debug("parse error: %s at %r", exc, exc.token)
            self._resync()
            return Error(str(exc), token=exc.token)
        except RecursionError:
            token = self.last
            self._resync()
            return Error("form nested too deeply", token=token)

    def _resync(self) -> None:
        """Discard the rest of a broken top-level form."""
        while self.depth > 0 and (tok := self.advance()) is not None:
            if tok.tag is Tag.PAREN_O:
                self.depth += 1
            elif tok.tag is Tag.PAREN_C:
                self.depth -= 1

    def _eof(self) -> KonsSyntaxError:
        return KonsSyntaxError("unexpected end of input", self.last)

    def parse_expr(self, quoted: bool) -> Value:
        tok = self.skip_trivia()
        if tok is None:
            raise self._eof()
        if self.nesting >= MAX_NESTING:
            raise KonsSyntaxError("form nested too deeply", tok)
        self.nesting += 1
        try:
            return self._parse_expr(tok, quoted)
        finally:
            self.nesting -= 1

    def _parse_expr(self, tok: Token, quoted: bool) -> Value:
        tag = tok.tag

        if tag is Tag.PAREN_O:
            self.advance()
            self.depth += 1
            return self.parse_cons(quoted, tok)

        if tag in QUOTE_FORMS:
            self.advance()
            value = self.parse_expr(quoted=tag in QUOTING_TAGS)
            return Cons(Symbol(QUOTE_FORMS[tag], token=tok), value, token=tok)

        if tag is Tag.SHARP:
            return self.parse_sharp(quoted, tok)

        self.advance()
        if tag is Tag.IDENT:
            return Symbol(tok.value, token=tok)
        if tag is Tag.NUMBER:
            return Number(tok.value, token=tok)
        if tag is Tag.STRING:
            return String(tok.value, token=tok)
        if tag is Tag.INVALID:
            raise KonsSyntaxError(tok.value or f"invalid token {tok.slice!r}", tok)
        if tag is Tag.PAREN_C:
            if self.depth:
                self.depth -= 1
            raise KonsSyntaxError("unexpected ')'", tok)
        raise KonsSyntaxError(f"unexpected {tok.slice!r}", tok)

    def parse_cons(self, quoted: bool, opener: Token) -> Value:
        tok = self.skip_trivia()
        if tok is None:
            raise self._eof()
        if tok.tag is Tag.PAREN_C:
            self.advance()
            self.depth -= 1
            return Null(token=tok)

        items: list[Value] = []
        while True:
            items.append(self.parse_expr(quoted))
            tok = self.skip_trivia()
            if tok is None:
                raise self._eof()

            if tok.tag is Tag.PAREN_C:
                self.advance()
                self.depth -= 1
                tail: Value = Null(token=tok)
                break

            if tok.tag is Tag.DOT:
                self.advance()
                tail = self.parse_expr(quoted)
                tok = self.skip_trivia()
                if tok is None or tok.tag is not Tag.PAREN_C:
                    raise KonsSyntaxError("expected end of dotted pair", tok or self.last)
                self.advance()
                self.depth -= 1
                break

        for item in reversed(items[1:]):
            tail = Cons(item, tail, token=item.token)
        return Cons(items[0], tail, token=opener)

    def parse_sharp(self, quoted: bool, sharp: Token) -> Value:
        self.advance()
        if not quoted:
            nxt = self.peek()
            if nxt is not None and nxt.tag is Tag.IDENT and nxt.value in ("t", "f"):
                self.advance()
                return Boolean(nxt.value == "t", token=sharp)
        # unknown reader macros stay as data
        value = self.parse_expr(quoted)
        return Cons(Symbol("sharp", token=sharp), value, token=sharp)


class Parser:
    """Lazy, restartable sequence of top-level forms."""

    def __init__(self, source: Union[Tokenizer, Lexer, str, TextIO]):
        self.source: Tokenizer = source if isinstance(source, Tokenizer) else Tokenizer(source)
        self._started = False

    def __iter__(self) -> Iterator[Value]:
        return self._forms()

    def _forms(self) -> Iterator[Value]:
        if self._started:
            self.source.rewind()
        self._started = True
        stream = TokenStream(self.source)
        while stream.skip_trivia() is not None:
            yield stream.parse_top()


def parse(source: Union[Tokenizer, Lexer, str, TextIO]) -> Parser:
    """Read `source` as a lazy sequence of top-level Values."""
    return Parser(source)
