# Core type aliases for Kons.
# Code and data share one representation: every form the reader produces and
# every result the evaluator returns is a `kons.types.value.Value`.
#
# Naming guidance:
# - EvaluatorFn: the evaluator callable handed to special forms and apply,
#   `(expr, env) -> Value`.

from typing import Any, Callable

__version__ = "0.1.0"

# Evaluator function type: Python evaluator used inside special forms
EvaluatorFn = Callable[..., Any]
