from typing import Optional

from kons import EvaluatorFn
from kons.evaluation import runtime_error
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import Closure, Cons, Null, Symbol, Value, list_tail


def _valid_params(params: Value) -> bool:
    # (a b c), (a b . rest), rest or ()
    if isinstance(params, Cons) and not all(isinstance(p, Symbol) for p in params):
        return False
    return isinstance(list_tail(params), (Null, Symbol))


def lambda_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    # (lambda (params) body...): the body is an implicit begin, so no forms
    # at all makes a function that answers ().
    if not isinstance(tail, Cons):
        return runtime_error("lambda requires at least a parameter list", origin)

    params = tail.car
    if not _valid_params(params):
        return runtime_error(f"malformed lambda parameter list: {params}", origin)

    return Closure(params, tail.cdr, env, token=origin)
