import logging
from pathlib import Path

import pytest

from kons import config


def test_prelude_path_unset():
    assert config.get_prelude_path() is None


@pytest.mark.parametrize("raw", ["", "   "])
def test_prelude_path_blank(raw, monkeypatch):
    monkeypatch.setenv("KONS_PRELUDE_PATH", raw)
    assert config.get_prelude_path() is None


def test_prelude_path_set(monkeypatch):
    monkeypatch.setenv("KONS_PRELUDE_PATH", " /tmp/p.kons ")
    assert config.get_prelude_path() == Path("/tmp/p.kons")


def test_repl_address_defaults():
    assert config.get_repl_address() == ("127.0.0.1", 8765)


def test_repl_address_from_env(monkeypatch):
    monkeypatch.setenv("KONS_REPL_HOST", "0.0.0.0")
    monkeypatch.setenv("KONS_REPL_PORT", "9999")
    assert config.get_repl_address() == ("0.0.0.0", 9999)


@pytest.mark.parametrize(
    "raw,level",
    [
        (None, logging.WARNING),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("chatty", logging.WARNING),
    ],
)
def test_log_level(raw, level, monkeypatch):
    if raw is not None:
        monkeypatch.setenv("KONS_LOG_LEVEL", raw)
    assert config.get_log_level() == level
