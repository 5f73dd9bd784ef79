"""Command line tokenizer.

Splits the raw bytes of one command line into a bounded argument list.
"""

from __future__ import annotations

import logging
import os

from remsh.config.settings import DEFAULT_MAX_ARGS
from remsh.domain.models import ArgumentList

logger = logging.getLogger(__name__)


def tokenize(data: bytes | str, max_args: int = DEFAULT_MAX_ARGS) -> ArgumentList:
    """Split a command line on whitespace into an ArgumentList.

    Empty tokens are discarded. At most ``max_args - 1`` tokens are kept
    (one slot is reserved, matching a terminated argv array); anything
    past the limit is dropped without error. Blank input yields an empty
    list whose ``command`` is None.

    Tokens are decoded with the filesystem encoding so that bytes which
    are not valid UTF-8 reach ``execvp`` unchanged.
    """
    if max_args < 2:
        raise ValueError(f"max_args must be at least 2, got {max_args}")
    if isinstance(data, str):
        data = os.fsencode(data)

    limit = max_args - 1
    raw = data.split()
    if len(raw) > limit:
        logger.debug("Dropping %d tokens past the %d-token limit", len(raw) - limit, limit)
        raw = raw[:limit]
    return ArgumentList(tokens=tuple(os.fsdecode(token) for token in raw))
