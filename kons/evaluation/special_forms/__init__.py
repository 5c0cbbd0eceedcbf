"""Registry of special forms for the Kons evaluator.

Maps head symbol names to handler functions that implement non-standard
evaluation rules. The evaluator consults this table before ordinary function
application. Handlers take `(tail, env, evaluate_fn, origin)` where `tail` is
the form's `cdr` and `origin` the token of the form, for error reporting.
"""

from kons.evaluation.special_forms.quote_form import quote_form
from kons.evaluation.special_forms.if_form import if_form
from kons.evaluation.special_forms.list_form import list_form
from kons.evaluation.special_forms.begin_form import begin_form
from kons.evaluation.special_forms.set_form import set_form
from kons.evaluation.special_forms.lambda_form import lambda_form
from kons.evaluation.special_forms.define_form import define_form

SPECIAL_FORMS = {
    "quote": quote_form,
    "if": if_form,
    "list": list_form,
    "begin": begin_form,
    "set!": set_form,
    "lambda": lambda_form,
    "define": define_form,
}
