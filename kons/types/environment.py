"""Runtime environment for Kons.

The Environment stores bindings of symbol names to evaluated values and
supports nested scopes via an `outer` link. A parent is shared, never owned:
every closure created in a frame keeps that frame (and its chain) alive.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional, Union

from kons.errors import KonsInvalidSymbol, KonsUnboundSymbol
from kons.types.value import Cons, Symbol, Value

Name = Union[Symbol, str]


def _key(name: Name) -> str:
    if isinstance(name, Symbol):
        return name.name
    if isinstance(name, str):
        return name
    raise KonsInvalidSymbol(f"Cannot bind {name} as a symbol")


class Environment:
    """Hierarchical mapping from symbol names to values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, Value] = {}
        self.outer: Optional[Environment] = outer

    def define(self, name: Name, value: Value) -> None:
        """Bind `name` to `value` in this frame, shadowing any outer binding.

        Raises KonsInvalidSymbol if `name` is neither a Symbol nor a str.
        """
        self.vars[_key(name)] = value

    def update(self, mapping: dict[Name, Value]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    def find(self, name: Name) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        key = _key(name)
        env: Optional[Environment] = self
        while env is not None:
            if key in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Name) -> Value:
        """Look up the value bound to `name`, walking outward.

        Raises KonsUnboundSymbol if no frame binds it.
        """
        env = self.find(name)
        if env is None:
            raise KonsUnboundSymbol(f"no such binding: {_key(name)}")
        return env.vars[_key(name)]

    def set(self, name: Name, value: Value) -> None:
        """Rebind `name` in the nearest frame that already defines it.

        Raises KonsUnboundSymbol if the symbol is not found.
        """
        env = self.find(name)
        if env is None:
            raise KonsUnboundSymbol(f"no such binding: {_key(name)}")
        env.vars[_key(name)] = value

    def child(self, params: Value, args: Value) -> Environment:
        """Create a frame under this one binding `params` to `args` pairwise.

        Binding stops at the shorter of the two lists. A symbol in parameter
        position (a bare symbol or a dotted tail) takes the remaining
        arguments as a list.
        """
        env = Environment(outer=self)
        while isinstance(params, Cons) and isinstance(args, Cons):
            env.define(params.car, args.car)
            params, args = params.cdr, args.cdr
        if isinstance(params, Symbol):
            env.define(params, args)
        return env

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            chain = []
            env: Optional[Environment] = self
            while env is not None:
                with StringIO() as frame:
                    env._write_vars(frame)
                    chain.append(frame.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
