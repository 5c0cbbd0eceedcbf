from typing import Optional

from kons import EvaluatorFn
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import Value, elements, make_list


def eval_list(tail: Value, env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """Evaluate each element left to right into a fresh proper list.

    A dotted tail, as in `(f 1 . 2)` or `(f . 2)`, is not an argument.
    """
    return make_list([evaluate_fn(expr, env) for expr in elements(tail)])


def list_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    return eval_list(tail, env, evaluate_fn)
