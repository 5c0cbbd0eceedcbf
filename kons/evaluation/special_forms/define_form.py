from typing import Optional

from kons import EvaluatorFn
from kons.evaluation import runtime_error
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import NULL, Symbol, Value, length, nth


def define_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    """
    (define name value)
    Binds in the current frame, shadowing any outer binding, and answers ().
    """
    if length(tail) != 2:
        return runtime_error("define requires exactly 2 arguments", origin)

    name, val_expr = nth(tail, 0), nth(tail, 1)
    if not isinstance(name, Symbol):
        return runtime_error(f"define first argument must be a symbol, got {name}", origin)
    env.define(name, evaluate_fn(val_expr, env))
    return NULL
