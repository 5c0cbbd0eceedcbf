from __future__ import annotations

"""
A minimal pygls-based Language Server for Kons.

Features:
- Text synchronization and document store
- Diagnostics: every read error (invalid tokens, unterminated strings, bad
  dotted pairs, unbalanced parens) at the token where reading went wrong
- Hover: primitives, special forms and top-level definitions
- Completion: special forms, primitives and top-level definitions
- Document Symbols: top-level (define name ...) forms

Note: We never evaluate the buffer. The index comes from the reader alone.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
)

from kons import __version__, config
from kons_lsp.indexer import BUILTIN_NAMES, SPECIAL_FORM_NAMES, DocumentIndex, build_index, word_at

logger = logging.getLogger(__name__)


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class KonsLanguageServer(LanguageServer):
    CMD_NAME = "kons-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, __version__)
        self.documents: Dict[str, DocumentState] = {}


ls = KonsLanguageServer()


def _mk_range(line: int, col: int, length: int) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def diagnostics_for(idx: DocumentIndex) -> List[Diagnostic]:
    return [
        Diagnostic(
            range=_mk_range(p.line, p.col, p.length),
            message=p.message,
            severity=DiagnosticSeverity.Error,
            source=KonsLanguageServer.CMD_NAME,
        )
        for p in idx.problems
    ]


def describe(word: str, idx: DocumentIndex) -> Optional[str]:
    if word in idx.symbols:
        sdef = idx.symbols[word]
        return f"{word}: defined at {sdef.line + 1}:{sdef.col + 1}"
    if word in SPECIAL_FORM_NAMES:
        return f"{word}: special form"
    if word in BUILTIN_NAMES:
        return f"{word}: primitive"
    return None


def completions_for(idx: Optional[DocumentIndex]) -> List[CompletionItem]:
    items = [CompletionItem(label=name, kind=CompletionItemKind.Keyword) for name in SPECIAL_FORM_NAMES]
    items += [CompletionItem(label=name, kind=CompletionItemKind.Function) for name in BUILTIN_NAMES]
    if idx is not None:
        items += [CompletionItem(label=name, kind=CompletionItemKind.Variable) for name in idx.symbols]
    return items


def _refresh(uri: str) -> None:
    text = ls.workspace.get_text_document(uri).source
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("%s: %d problems, %d definitions", uri, len(idx.problems), len(idx.symbols))
    ls.publish_diagnostics(uri, diagnostics_for(idx))


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    _refresh(params.text_document.uri)


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    _refresh(params.text_document.uri)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Hover ---
@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    word = word_at(state.text, params.position.line, params.position.character)
    contents = describe(word, state.index) if word else None
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    return CompletionList(is_incomplete=False, items=completions_for(state.index if state else None))


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(name=name, kind=SymbolKind.Variable, range=rng, selection_range=rng)
        )
    return symbols


def main() -> None:
    config.configure_logging()
    logger.info("starting %s %s over stdio", KonsLanguageServer.CMD_NAME, __version__)
    ls.start_io()


if __name__ == "__main__":
    main()
