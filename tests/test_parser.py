import io

import pytest
from hypothesis import given, strategies as st

from kons.errors import KonsRewindError
from kons.reader.parser import Parser, parse
from kons.reader.tokenizer import Tag, Tokenizer
from kons.types.value import (
    NULL,
    Boolean,
    Cons,
    Error,
    Null,
    Number,
    String,
    Symbol,
    make_list,
    render,
)


def _one(source):
    forms = list(parse(source))
    assert len(forms) == 1
    return forms[0]


def _list(*items, tail=NULL):
    return make_list(items, tail)


def test_structure_of_dotted_list():
    expr = _one("(alpha beta (1 2 3) #xff . 10)")
    assert expr == _list(
        Symbol("alpha"),
        Symbol("beta"),
        _list(Number(1), Number(2), Number(3)),
        Number(255),
        tail=Number(10),
    )
    assert render(expr) == "(alpha beta (1.0 2.0 3.0) 255.0 . 10.0)"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("()", NULL),
        ("foo", Symbol("foo")),
        ("42", Number(42)),
        ('"hi\\n"', String("hi\n")),
        ("#t", Boolean(True)),
        ("#f", Boolean(False)),
        ("(a . b)", Cons(Symbol("a"), Symbol("b"))),
        ("(())", _list(NULL)),
        ("(a (b (c)))", _list(Symbol("a"), _list(Symbol("b"), _list(Symbol("c"))))),
    ],
)
def test_parse_atoms_and_lists(source, expected):
    assert _one(source) == expected


@pytest.mark.parametrize(
    "source,head",
    [
        ("'x", "quote"),
        ("`x", "quasiquote"),
        (",x", "unquote"),
        (",@x", "unquote_splice"),
    ],
)
def test_quote_sugar_is_a_dotted_pair(source, head):
    assert _one(source) == Cons(Symbol(head), Symbol("x"))


def test_quoted_list_matches_explicit_quote():
    assert _one("'(x)") == _one("(quote x)")
    assert _one("'(1 2)") == _one("(quote 1 2)")


def test_sharp_in_quoted_context_stays_data():
    assert _one("'#t") == Cons(Symbol("quote"), Cons(Symbol("sharp"), Symbol("t")))
    assert _one("`(a #f)") == Cons(
        Symbol("quasiquote"), _list(Symbol("a"), Cons(Symbol("sharp"), Symbol("f")))
    )


def test_unquote_leaves_quoted_context():
    expr = _one("`(a ,#t)")
    assert expr == Cons(
        Symbol("quasiquote"),
        _list(Symbol("a"), Cons(Symbol("unquote"), Boolean(True))),
    )


def test_unknown_sharp_form():
    assert _one("#foo") == Cons(Symbol("sharp"), Symbol("foo"))
    assert _one("#(1 2)") == Cons(Symbol("sharp"), _list(Number(1), Number(2)))


def test_sharp_tee_must_be_whole_identifier():
    assert _one("#true") == Cons(Symbol("sharp"), Symbol("true"))


def test_multiple_forms_and_trivia():
    forms = list(parse("; leading comment\n1 (a)\n  \"s\" ; trailing"))
    assert forms == [Number(1), _list(Symbol("a")), String("s")]


def test_empty_and_blank_input():
    assert list(parse("")) == []
    assert list(parse("  ; only a comment\n\n")) == []


def test_values_carry_tokens():
    expr = _one("(f\n  x)")
    assert expr.token.tag is Tag.PAREN_O
    x = expr.cdr.car
    assert (x.token.line, x.token.column) == (1, 2)


@pytest.mark.parametrize(
    "source,message",
    [
        (")", "unexpected ')'"),
        ("(a b", "unexpected end of input"),
        ("(a . b c)", "expected end of dotted pair"),
        ("(a .)", "unexpected ')'"),
        ('"open', "eof in string"),
        ("[", "unexpected character '['"),
        ("'", "unexpected end of input"),
    ],
)
def test_errors_become_error_values(source, message):
    forms = list(parse(source))
    assert isinstance(forms[0], Error)
    assert forms[0].message == message
    assert forms[0].token is not None


def test_error_points_at_offending_token():
    err = _one("(a\n  . b c)")
    assert isinstance(err, Error)
    assert err.token.slice == "c"
    assert (err.token.line, err.token.column) == (1, 6)


def test_reading_resumes_after_broken_form():
    forms = list(parse("(a (b [ c) d) (ok)"))
    assert isinstance(forms[0], Error)
    assert forms[1:] == [_list(Symbol("ok"))]


def test_dotted_error_skips_rest_of_form():
    forms = list(parse("(a . b c d) 7"))
    assert isinstance(forms[0], Error)
    assert forms[1:] == [Number(7)]


def test_stray_close_paren_then_more():
    forms = list(parse(") 1"))
    assert isinstance(forms[0], Error)
    assert forms[1] == Number(1)


def test_deep_nesting_reads_as_error():
    depth = 5_000
    forms = list(parse("(" * depth + ")" * depth + " 5"))
    assert isinstance(forms[0], Error)
    assert forms[0].message == "form nested too deeply"
    assert forms[-1] == Number(5)


def test_long_flat_list_does_not_recurse():
    source = "(" + " ".join(["x"] * 50_000) + ")"
    expr = _one(source)
    assert sum(1 for _ in expr) == 50_000


def test_parser_is_restartable():
    p = Parser("(a) b")
    first = list(p)
    assert list(p) == first
    assert first == [_list(Symbol("a")), Symbol("b")]


def test_parser_is_lazy():
    forms = iter(parse("1 )"))
    assert next(forms) == Number(1)


def test_parser_over_tokenizer_and_stream():
    assert list(Parser(Tokenizer("x"))) == [Symbol("x")]
    assert list(parse(io.StringIO("y z"))) == [Symbol("y"), Symbol("z")]


def test_restart_unseekable_stream_raises():
    class Pipe(io.StringIO):
        def seekable(self):
            return False

    p = Parser(Pipe("a"))
    list(p)
    with pytest.raises(KonsRewindError):
        list(p)


def test_empty_list_is_null_instance():
    assert isinstance(_one("()"), Null)


@given(st.text(alphabet="()'`,@#.; \n\"\\ab1xt"))
def test_parse_never_raises(text):
    for form in parse(text):
        assert form is not None


_atoms = st.one_of(
    st.sampled_from(["a", "foo", "set!", "<=", "x2"]).map(Symbol),
    st.integers(-1000, 1000).map(Number),
    st.text(alphabet="ab \n\"\\", max_size=5).map(String),
)
_trees = st.recursive(_atoms, lambda kids: st.lists(kids, max_size=4).map(make_list), max_leaves=20)


@given(_trees)
def test_render_then_parse_gives_same_tree(tree):
    assert _one(render(tree)) == tree


def test_proper_prefix_with_dotted_tail():
    expr = _one("(alpha beta (1 2 3) . 10)")
    assert render(expr) == "(alpha beta (1.0 2.0 3.0) . 10.0)"


@pytest.mark.parametrize("literal", ["#x" + "f" * 300, "#u" + "7" * 5000, "1e999"])
def test_huge_literal_reads_as_error_and_reading_continues(literal):
    forms = list(parse(f"(a {literal}) b"))
    assert isinstance(forms[0], Error)
    assert forms[0].message == "numeric literal out of range"
    assert forms[1] == Symbol("b")
