"""Application engine for Kons.

Centralizes function application for the evaluator and for primitives that
call back into Lisp code:
- Closures bind their parameters in a child of the captured environment and
  run the body as an implicit begin. Arity is not checked: missing arguments
  leave parameters unbound, extra ones are dropped.
- Primitives are host callables invoked with the caller's environment and the
  evaluated argument list.
- Anything else is not a function and answers an Error value.
"""

from __future__ import annotations

from typing import Optional

from kons import EvaluatorFn
from kons.evaluation import runtime_error
from kons.evaluation.special_forms.begin_form import eval_sequence
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import Closure, Primitive, Value


def apply_closure(fn: Closure, args: Value, evaluate_fn: EvaluatorFn) -> Value:
    frame = fn.env.child(fn.params, args)
    return eval_sequence(fn.body, frame, evaluate_fn)


def apply(
    head: Value,
    args: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    """Apply a Closure or Primitive to an already-evaluated argument list."""
    if isinstance(head, Closure):
        return apply_closure(head, args, evaluate_fn)
    if isinstance(head, Primitive):
        return head.fn(env, args)
    return runtime_error(f"not a function: {head}", origin)
