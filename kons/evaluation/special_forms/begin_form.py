from typing import Optional

from kons import EvaluatorFn
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import NULL, Value, elements


def eval_sequence(body: Value, env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """Evaluate forms in order for effect, answering the last value or ()."""
    result: Value = NULL
    for expr in elements(body):
        result = evaluate_fn(expr, env)
    return result


def begin_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    return eval_sequence(tail, env, evaluate_fn)
