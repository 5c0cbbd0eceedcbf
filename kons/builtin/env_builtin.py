"""Built-in functions for the Kons global environment.

Primitives receive the caller's environment and the evaluated argument list
(a proper list Value). They report misuse the same way the evaluator does,
by answering an Error value, never by raising.
"""
from __future__ import annotations

import operator
import sys
from typing import Callable, Optional, TextIO

from kons.evaluation import runtime_error
from kons.types.environment import Environment
from kons.types.value import (
    NULL,
    Cons,
    Error,
    Null,
    Number,
    Primitive,
    String,
    Value,
    boolean,
    length,
)


def _arity(name: str, args: Value, expected: int) -> Optional[Error]:
    if length(args) != expected:
        return runtime_error(f"{name}: wrong arity, expected {expected} got {length(args)}")
    return None


def _numbers(name: str, args: Value) -> list[float] | Error:
    values = []
    for arg in args:
        if not isinstance(arg, Number):
            return runtime_error(f"cannot {name} non-numbers: {arg}")
        values.append(arg.value)
    return values


# -------------------------------
# Pairs
# -------------------------------
def make_cxr(name: str) -> Callable[[Environment, Value], Value]:
    """Build car/cdr/cadr/...: the letters between c and r apply right to left."""
    path = name[1:-1][::-1]

    def cxr(env: Environment, args: Value) -> Value:
        if (err := _arity(name, args, 1)) is not None:
            return err
        value = args.car
        for step in path:
            if not isinstance(value, Cons):
                return runtime_error(f"{name}: not a pair: {value}")
            value = value.car if step == "a" else value.cdr
        return value

    cxr.__name__ = name
    return cxr


CXR_NAMES = (
    "car", "cdr",
    "caar", "cadr", "cdar", "cddr",
    "caaar", "caadr", "cadar", "caddr", "cdaar", "cdadr", "cddar", "cdddr",
)


def cons(env: Environment, args: Value) -> Value:
    if (err := _arity("cons", args, 2)) is not None:
        return err
    return Cons(args.car, args.cdr.car)


def list_builtin(env: Environment, args: Value) -> Value:
    """The evaluated argument list is already a fresh proper list."""
    return args


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: Value) -> Value:
    values = _numbers("+", args)
    if isinstance(values, Error):
        return values
    return Number(sum(values))


def sub(env: Environment, args: Value) -> Value:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    values = _numbers("-", args)
    if isinstance(values, Error):
        return values
    if not values:
        return Number(0)
    if len(values) == 1:
        return Number(-values[0])
    result = values[0]
    for x in values[1:]:
        result -= x
    return Number(result)


def mul(env: Environment, args: Value) -> Value:
    values = _numbers("*", args)
    if isinstance(values, Error):
        return values
    result = 1.0
    for x in values:
        result *= x
    return Number(result)


# -------------------------------
# Comparison
# -------------------------------
def make_comparison(name: str, op: Callable[[float, float], bool]) -> Callable[[Environment, Value], Value]:
    """(< a b c) holds when every adjacent pair does."""

    def compare(env: Environment, args: Value) -> Value:
        values = _numbers(f"compare ({name})", args)
        if isinstance(values, Error):
            return values
        return boolean(all(op(a, b) for a, b in zip(values, values[1:])))

    compare.__name__ = name
    return compare


COMPARISONS = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
    "=": operator.eq,
}


# -------------------------------
# Predicates
# -------------------------------
def is_null(env: Environment, args: Value) -> Value:
    if (err := _arity("null?", args, 1)) is not None:
        return err
    return boolean(isinstance(args.car, Null))


def is_pair(env: Environment, args: Value) -> Value:
    if (err := _arity("pair?", args, 1)) is not None:
        return err
    return boolean(isinstance(args.car, Cons))


def is_error(env: Environment, args: Value) -> Value:
    if (err := _arity("error?", args, 1)) is not None:
        return err
    return boolean(isinstance(args.car, Error))


# -------------------------------
# Errors and output
# -------------------------------
def _display(value: Value) -> str:
    return value.value if isinstance(value, String) else str(value)


def error_builtin(env: Environment, args: Value) -> Value:
    """(error "message" irritants...) => an Error value."""
    return Error(" ".join(_display(arg) for arg in args) or "error")


def make_print(out: Optional[TextIO]) -> Callable[[Environment, Value], Value]:
    def print_builtin(env: Environment, args: Value) -> Value:
        """Print the arguments separated by spaces; strings print bare. Answers ()."""
        print(" ".join(_display(arg) for arg in args), file=out or sys.stdout)
        return NULL

    return print_builtin


def register(env: Environment, out: Optional[TextIO] = None) -> None:
    """Register all builtin functions into the given environment."""
    fns: dict[str, Callable[[Environment, Value], Value]] = {
        "cons": cons,
        "list": list_builtin,
        "+": add,
        "-": sub,
        "*": mul,
        "null?": is_null,
        "pair?": is_pair,
        "error?": is_error,
        "error": error_builtin,
        "print": make_print(out),
    }
    fns.update({name: make_cxr(name) for name in CXR_NAMES})
    fns.update({name: make_comparison(name, op) for name, op in COMPARISONS.items()})
    env.update({name: Primitive(name, fn) for name, fn in fns.items()})
