"""Failure body normalization.

A malformed error body must never escalate into a fault of the sync layer:
it degrades to "errored, cause unknown" (`errors=None`, `parsed=False`).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from restsync.core.domain.errors import SerializationError
from restsync.core.domain.models import NormalizedError

logger = logging.getLogger(__name__)


class ErrorNormalizer:
    def __init__(self, parse: Callable[[str], Any]) -> None:
        self._parse = parse

    def normalize(self, body: str | None, status: int | None = None) -> NormalizedError:
        if body is None or not body.strip():
            return NormalizedError(status=status, raw=body, errors=None, parsed=False)
        try:
            errors = self._parse(body)
        except SerializationError as exc:
            logger.warning("unparsable error body (status=%s): %s", status, exc)
            return NormalizedError(status=status, raw=body, errors=None, parsed=False)
        return NormalizedError(status=status, raw=body, errors=errors, parsed=True)
