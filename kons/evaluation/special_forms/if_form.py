from typing import Optional

from kons import EvaluatorFn
from kons.evaluation import runtime_error
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import NULL, Cons, Value, length, nth


def if_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    if not isinstance(tail, Cons) or length(tail) < 2:
        return runtime_error("if requires a condition and a then-expression", origin)

    # only #f is false; (), 0 and "" all select the then branch
    if evaluate_fn(tail.car, env).truthy:
        return evaluate_fn(nth(tail, 1), env)
    if length(tail) > 2:
        return evaluate_fn(nth(tail, 2), env)
    return NULL
