"""Value model for Kons.

Every datum the reader produces and the evaluator returns is a `Value`:

    - Null        -> ()           terminates proper lists
    - Boolean     -> #t / #f
    - Number      -> one float type, no numeric tower
    - String      -> text, escapes already decoded
    - Symbol      -> identifiers
    - Cons        -> (car . cdr)  the only pair
    - Function    -> Primitive (host callable) or Closure (lambda + env)
    - Error       -> message + originating token, an ordinary value

Values are frozen. A `Cons` chain may share structure but can never be
cyclic. The token a value was read from rides along for diagnostics and is
excluded from equality and hashing, so two trees read from different places
compare equal when their content does.

Walking a list (equality, hashing, rendering, iteration) follows `cdr` in a
loop; only nested `car`s recurse.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from io import StringIO
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional

if TYPE_CHECKING:
    from kons.reader.tokenizer import Token
    from kons.types.environment import Environment


@dataclass(frozen=True)
class Value:
    token: Optional[Token] = field(default=None, compare=False, repr=False, kw_only=True)

    @property
    def is_pair(self) -> bool:
        return False

    @property
    def is_atom(self) -> bool:
        return not self.is_pair

    @property
    def truthy(self) -> bool:
        """Everything except boolean false selects the `then` branch."""
        return True

    def __str__(self) -> str:
        return f"#<{type(self).__name__.lower()}>"


@dataclass(frozen=True)
class Null(Value):
    def __iter__(self) -> Iterator[Value]:
        return iter(())

    def __str__(self) -> str:
        return "()"


@dataclass(frozen=True)
class Boolean(Value):
    value: bool

    @property
    def truthy(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return "#t" if self.value else "#f"


@dataclass(frozen=True)
class Number(Value):
    value: float

    def __post_init__(self):
        # callers may pass ints; keep one numeric type
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        if not math.isfinite(self.value):
            # inf and nan would read back as symbols
            return f"#<number {self.value!r}>"
        return repr(self.value)


_STRING_ESCAPES = str.maketrans({
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
})


@dataclass(frozen=True)
class String(Value):
    value: str

    def __str__(self) -> str:
        return '"' + self.value.translate(_STRING_ESCAPES) + '"'


@dataclass(frozen=True)
class Symbol(Value):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class Cons(Value):
    car: Value
    cdr: Value

    @property
    def is_pair(self) -> bool:
        return True

    def __iter__(self) -> Iterator[Value]:
        """Yield the `car` of every cell; an improper tail is not yielded."""
        node: Value = self
        while isinstance(node, Cons):
            yield node.car
            node = node.cdr

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cons):
            return NotImplemented
        a: Value = self
        b: Value = other
        while isinstance(a, Cons) and isinstance(b, Cons):
            if a is b:
                return True
            if a.car != b.car:
                return False
            a, b = a.cdr, b.cdr
        return a == b

    def __hash__(self) -> int:
        h = hash("cons")
        node: Value = self
        while isinstance(node, Cons):
            h = hash((h, node.car))
            node = node.cdr
        return hash((h, node))

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, eq=False)
class Function(Value):
    """Base for callable values. Functions compare by identity."""

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)


@dataclass(frozen=True, eq=False)
class Primitive(Function):
    name: str
    fn: Callable[[Environment, Value], Value] = field(repr=False)

    def __str__(self) -> str:
        return f"#<primitive {self.name}>"


@dataclass(frozen=True, eq=False)
class Closure(Function):
    params: Value
    body: Value
    env: Environment = field(repr=False)

    def __str__(self) -> str:
        return f"#<closure {render(self.params)}>"


@dataclass(frozen=True)
class Error(Value):
    message: str

    def __str__(self) -> str:
        if self.token is None:
            return f"#<error {self.message}>"
        return f"#<error {self.message} @{self.token.line}:{self.token.column}>"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def boolean(flag: bool, token: Optional[Token] = None) -> Boolean:
    if token is None:
        return TRUE if flag else FALSE
    return Boolean(flag, token=token)


def make_list(items: Iterable[Value], tail: Value = NULL) -> Value:
    """Build a right-associated cons chain ending in `tail`."""
    result = tail
    for item in reversed(list(items)):
        result = Cons(item, result)
    return result


def elements(value: Value) -> Iterator[Value]:
    """The `car`s of a chain; an atom, or an improper tail, contributes nothing."""
    return iter(value) if isinstance(value, Cons) else iter(())


def list_tail(value: Value) -> Value:
    """Return the final `cdr` of a chain: Null for proper lists."""
    while isinstance(value, Cons):
        value = value.cdr
    return value


def is_proper_list(value: Value) -> bool:
    return isinstance(list_tail(value), Null)


def length(value: Value) -> int:
    count = 0
    while isinstance(value, Cons):
        count += 1
        value = value.cdr
    return count


def nth(value: Value, index: int, default: Value = NULL) -> Value:
    for i, item in enumerate(value if isinstance(value, Cons) else ()):
        if i == index:
            return item
    return default


def render(value: Value) -> str:
    """Canonical text for a value; nested lists print inline."""
    with StringIO() as buffer:
        _write(value, buffer)
        return buffer.getvalue()


def _write(value: Value, buffer: StringIO) -> None:
    if not isinstance(value, Cons):
        buffer.write(str(value))
        return
    buffer.write("(")
    node = value
    while True:
        _write(node.car, buffer)
        tail = node.cdr
        if isinstance(tail, Cons):
            buffer.write(" ")
            node = tail
            continue
        if not isinstance(tail, Null):
            buffer.write(" . ")
            _write(tail, buffer)
        break
    buffer.write(")")
