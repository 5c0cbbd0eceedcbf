from __future__ import annotations

import logging
from typing import Iterator, Literal, Optional, TextIO, Union

from kons import config
from kons.builtin.env_builtin import register
from kons.evaluation.evaluator import evaluate
from kons.reader.parser import parse
from kons.types.environment import Environment
from kons.types.value import NULL, Error, Value

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates reading and evaluating Kons code.
    Maintains a global Environment across calls; `_` is bound to the value of
    the most recent top-level form.
    """

    def __init__(
        self,
        prelude: Union[str, None, Literal['auto']] = 'auto',
        out: Optional[TextIO] = None,
    ):
        self.env: Environment = Environment()
        register(self.env, out)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            path = config.get_prelude_path()
            if path is not None:
                if path.is_file():
                    logger.info("loading prelude %s", path)
                    self.eval(path.read_text(encoding="utf-8"))
                else:
                    logger.warning("prelude %s not found, skipping", path)
        elif prelude:
            self.eval(prelude)

    def eval_iter(self, code: Union[str, TextIO]) -> Iterator[Value]:
        """Evaluate each top-level form of `code` as it is read."""
        for expr in parse(code):
            # read errors are reported as-is rather than evaluated
            value = expr if isinstance(expr, Error) else evaluate(expr, self.env)
            self.env.define("_", value)
            yield value

    def eval(self, code: Union[str, TextIO]) -> Value:
        """Evaluate all of `code`; answer the last form's value, () if none."""
        result: Value = NULL
        for result in self.eval_iter(code):
            pass
        return result
