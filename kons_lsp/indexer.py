from __future__ import annotations

"""
Document indexer for Kons source, built on the real reader.

Reading never aborts, so a half-typed buffer still yields every form before
and after the broken one. From the forms we collect:
- problems: every top-level Error value the parser produced (invalid tokens,
  unterminated strings, bad dotted pairs, unbalanced parens)
- definitions: top-level (define name ...) forms

plus the names every document can use: primitives and special forms.

Nothing is evaluated.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from kons.builtin.env_builtin import register
from kons.evaluation.special_forms import SPECIAL_FORMS
from kons.reader.parser import parse
from kons.reader.tokenizer import Token, is_ident_cont
from kons.types.environment import Environment
from kons.types.value import Cons, Error, Symbol, nth


def _builtin_names() -> List[str]:
    env = Environment()
    register(env)
    return sorted(env.vars)


BUILTIN_NAMES: List[str] = _builtin_names()
SPECIAL_FORM_NAMES: List[str] = sorted(SPECIAL_FORMS)


@dataclass
class Problem:
    message: str
    line: int
    col: int
    length: int


@dataclass
class SymbolDef:
    name: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    problems: List[Problem] = field(default_factory=list)
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)


def _span(token: Optional[Token]) -> tuple[int, int, int]:
    if token is None:
        return 0, 0, 1
    # diagnostics stay on the token's first line
    first_line = token.slice.split("\n", 1)[0]
    return token.line, token.column, max(len(first_line), 1)


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    for form in parse(text):
        if isinstance(form, Error):
            line, col, length = _span(form.token)
            idx.problems.append(Problem(form.message, line, col, length))
            continue
        if isinstance(form, Cons) and form.car == Symbol("define"):
            name = nth(form, 1)
            if isinstance(name, Symbol) and name.token is not None:
                idx.symbols[name.name] = SymbolDef(name.name, name.token.line, name.token.column)
    return idx


def word_at(text: str, line: int, character: int) -> Optional[str]:
    """The identifier touching (line, character), if any."""
    lines = text.split("\n")
    if line >= len(lines):
        return None
    row = lines[line]
    start = end = min(character, len(row))
    while start > 0 and is_ident_cont(row[start - 1]):
        start -= 1
    while end < len(row) and is_ident_cont(row[end]):
        end += 1
    return row[start:end] or None
