from typing import Optional

from kons import EvaluatorFn
from kons.errors import KonsUnboundSymbol
from kons.evaluation import runtime_error
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import Symbol, Value, length, nth


def set_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    if length(tail) != 2:
        return runtime_error("set! requires exactly 2 arguments: (set! var value)", origin)
    var_sym, val_expr = nth(tail, 0), nth(tail, 1)
    if not isinstance(var_sym, Symbol):
        return runtime_error(f"set! first argument must be a symbol, got {var_sym}", origin)
    value = evaluate_fn(val_expr, env)
    try:
        env.set(var_sym, value)
    except KonsUnboundSymbol as exc:
        return runtime_error(str(exc), var_sym.token or origin)
    return value
