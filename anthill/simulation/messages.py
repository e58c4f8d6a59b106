"""MessageLog — the player-facing event feed.

Keeps the most recent messages for the UI and mirrors each one to the
``anthill.messages`` logger so a headless run still leaves a trail.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator

logger = logging.getLogger("anthill.messages")


class MessageLog:
    """Bounded, newest-last list of player messages."""

    def __init__(self, maxlen: int = 100) -> None:
        self._messages: deque[str] = deque(maxlen=maxlen)

    def post(self, message: str) -> None:
        self._messages.append(message)
        logger.info(message)

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def last(self) -> str | None:
        """Most recent message, or None if nothing was posted."""
        return self._messages[-1] if self._messages else None

    def recent(self, count: int) -> list[str]:
        """Return up to ``count`` newest messages, oldest first."""
        if count <= 0:
            return []
        return list(self._messages)[-count:]
