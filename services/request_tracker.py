# dairy_admin/services/request_tracker.py

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestToken:
    generation: int
    filters: tuple


class RequestTracker:
    """
    Tags each report fetch with a generation number so a response for an
    older filter selection can't overwrite the one the user is looking at.

    Usage:
        token = tracker.begin({"brand": "Heritage", ...})
        result = fetch(...)
        if tracker.accept(token):
            show(result)
    """

    def __init__(self):
        self._generation = 0
        self._latest: Optional[RequestToken] = None

    @staticmethod
    def _freeze(filters: Dict[str, Any]) -> tuple:
        return tuple(sorted((filters or {}).items()))

    def begin(self, filters: Dict[str, Any]) -> RequestToken:
        self._generation += 1
        self._latest = RequestToken(self._generation, self._freeze(filters))
        return self._latest

    def is_current(self, token: RequestToken) -> bool:
        return self._latest is not None and token.generation == self._latest.generation

    def accept(self, token: RequestToken) -> bool:
        if self.is_current(token):
            return True
        logger.warning(
            "Dropping stale response (generation %d, latest %d)",
            token.generation,
            self._generation,
        )
        return False

    def needs_refresh(self, filters: Dict[str, Any]) -> bool:
        """True when `filters` differ from the most recently started request."""
        return self._latest is None or self._latest.filters != self._freeze(filters)
