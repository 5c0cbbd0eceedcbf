import pytest

from kons.errors import KonsInvalidSymbol, KonsUnboundSymbol
from kons.types.environment import Environment
from kons.types.value import NULL, Number, Symbol, make_list


def test_define_and_lookup():
    env = Environment()
    env.define(Symbol("x"), Number(1))
    assert env.lookup(Symbol("x")) == Number(1)
    assert env.lookup("x") == Number(1)


def test_lookup_walks_outward():
    outer = Environment()
    outer.define("x", Number(1))
    inner = Environment(outer)
    assert inner.lookup("x") == Number(1)
    assert inner.find("x") is outer


def test_shadowing():
    outer = Environment()
    outer.define("x", Number(1))
    inner = Environment(outer)
    inner.define("x", Number(2))
    assert inner.lookup("x") == Number(2)
    assert outer.lookup("x") == Number(1)


def test_unbound_lookup_raises():
    with pytest.raises(KonsUnboundSymbol, match="no such binding: nope"):
        Environment().lookup("nope")


def test_set_rebinds_nearest_frame():
    outer = Environment()
    outer.define("x", Number(1))
    inner = Environment(outer)
    inner.set("x", Number(5))
    assert outer.lookup("x") == Number(5)
    assert "x" not in inner.vars


def test_set_unbound_raises():
    with pytest.raises(KonsUnboundSymbol):
        Environment().set("x", NULL)


@pytest.mark.parametrize("bad", [42, None, Number(1)])
def test_invalid_names(bad):
    with pytest.raises(KonsInvalidSymbol):
        Environment().define(bad, NULL)


def test_update_bulk_defines():
    env = Environment()
    env.update({"a": Number(1), Symbol("b"): Number(2)})
    assert env.lookup("a") == Number(1)
    assert env.lookup("b") == Number(2)


def test_child_binds_pairwise():
    env = Environment()
    params = make_list([Symbol("a"), Symbol("b")])
    child = env.child(params, make_list([Number(1), Number(2)]))
    assert child.outer is env
    assert child.lookup("a") == Number(1)
    assert child.lookup("b") == Number(2)


def test_child_stops_at_shorter_list():
    params = make_list([Symbol("a"), Symbol("b")])
    child = Environment().child(params, make_list([Number(1)]))
    assert child.lookup("a") == Number(1)
    assert child.find("b") is None

    child = Environment().child(make_list([Symbol("a")]), make_list([Number(1), Number(2)]))
    assert child.vars == {"a": Number(1)}


def test_child_rest_parameter():
    params = make_list([Symbol("a")], Symbol("rest"))
    child = Environment().child(params, make_list([Number(1), Number(2), Number(3)]))
    assert child.lookup("rest") == make_list([Number(2), Number(3)])

    child = Environment().child(Symbol("args"), make_list([Number(1)]))
    assert child.lookup("args") == make_list([Number(1)])


def test_str_and_repr():
    outer = Environment()
    outer.define("x", Number(1))
    inner = Environment(outer)
    inner.define("y", Number(2))
    assert str(inner) == "{y: 2.0} -> ..."
    assert repr(inner) == "<Environment chain: {y: 2.0} -> {x: 1.0}>"
