from typing import Optional

from kons import EvaluatorFn
from kons.reader.tokenizer import Token
from kons.types.environment import Environment
from kons.types.value import Value


def quote_form(
    tail: Value,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    origin: Optional[Token] = None,
) -> Value:
    """(quote . x) => x, unevaluated. The reader turns 'x into (quote . x)."""
    return tail
