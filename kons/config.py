from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional


_DEFAULT_REPL_HOST = "127.0.0.1"
_DEFAULT_REPL_PORT = 8765
_DEFAULT_LOG_LEVEL = "WARNING"


def path_from_env(var: str) -> Optional[Path]:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return None
    return Path(raw.strip())


def get_prelude_path() -> Optional[Path]:
    return path_from_env('KONS_PRELUDE_PATH')


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get('KONS_REPL_HOST') or _DEFAULT_REPL_HOST
    port = os.environ.get('KONS_REPL_PORT')
    return host, int(port) if port else _DEFAULT_REPL_PORT


def get_log_level() -> int:
    name = (os.environ.get('KONS_LOG_LEVEL') or _DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    # getLevelName answers "Level X" for unknown names
    return level if isinstance(level, int) else logging.WARNING


def configure_logging() -> None:
    """Entry points call this; library modules only create loggers."""
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
