"""Kons Language Server and REPL integration package.

This package provides:
- A pygls-based Language Server publishing reader diagnostics.
- A document indexer built on the Kons reader, without evaluation.
- A simple TCP REPL server to evaluate code via the Interpreter.
"""

__all__ = [
    "server",
    "indexer",
    "repl_server",
]
