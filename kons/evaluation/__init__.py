"""Tree-walking evaluation of Kons values.

Runtime failures are not exceptions: they come back as Error values and flow
through evaluation like any other datum.
"""

from __future__ import annotations

import logging
from typing import Optional

from kons.reader.tokenizer import Token
from kons.types.value import Error

logger = logging.getLogger(__name__)


def runtime_error(message: str, token: Optional[Token] = None) -> Error:
    logger.debug("runtime error: %s", message)
    return Error(message, token=token)
