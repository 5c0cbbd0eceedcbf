"""Core evaluator for the Kons interpreter.

Dispatches on the shape of a value: symbols are looked up, self-evaluating
atoms come back unchanged, pairs headed by a special-form symbol go to the
special-form table, and every other pair is a function application.

Error values are inert. Nothing here short-circuits on them: an Error passed
as an argument reaches the callee like any other value.
"""

from __future__ import annotations

from kons.errors import KonsUnboundSymbol
from kons.evaluation import runtime_error
from kons.evaluation.apply import apply
from kons.evaluation.special_forms import SPECIAL_FORMS
from kons.evaluation.special_forms.list_form import eval_list
from kons.types.environment import Environment
from kons.types.value import Boolean, Cons, Null, Number, String, Symbol, Value


def evaluate(expr: Value, env: Environment) -> Value:
    """Evaluate `expr` under `env`.

    Evaluation recurses on the host stack; runaway recursion in the program
    comes back as an Error value rather than an exception.
    """
    try:
        return evaluate0(expr, env)
    except RecursionError:
        return runtime_error("maximum recursion depth exceeded", expr.token)


def evaluate0(expr: Value, env: Environment) -> Value:
    """Single evaluation step, recursing through evaluate0 itself."""
    match expr:
        case Symbol(name=name):
            try:
                return env.lookup(name)
            except KonsUnboundSymbol as exc:
                return runtime_error(str(exc), expr.token)

        case Null() | Boolean() | Number() | String():
            return expr

        case Cons(car=Symbol(name=name), cdr=tail) if name in SPECIAL_FORMS:
            return SPECIAL_FORMS[name](tail, env, evaluate0, expr.token)

        case Cons(car=head, cdr=tail):
            fn = evaluate0(head, env)
            args = eval_list(tail, env, evaluate0)
            return apply(fn, args, env, evaluate0, expr.token)

    return runtime_error(f"cannot evaluate: {expr}", expr.token)
