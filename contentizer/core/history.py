"""
Bounded, newest-first history of completed transformations.
"""

import logging
import time
import uuid
from typing import List, Optional

from ..storage.models import HISTORY_KEY, HistoryItem, history_from_value
from ..storage.store import KeyValueStore

logger = logging.getLogger(__name__)

MAX_HISTORY_LEN = 20
PREVIEW_CHARS = 80
ELLIPSIS = "…"


def make_preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """Truncate ``text`` to ``limit`` characters, marking truncation with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def make_history_item(
    category: str,
    style: str,
    original_text: str,
    optimized_text: str,
    timestamp: Optional[int] = None,
) -> HistoryItem:
    return HistoryItem(
        id=uuid.uuid4().hex,
        timestamp=int(time.time()) if timestamp is None else timestamp,
        category=category,
        style=style,
        original_preview=make_preview(original_text),
        optimized_preview=make_preview(optimized_text),
    )


class HistoryBuffer:
    """Ring buffer of at most ``max_len`` items, persisted on every change."""

    def __init__(self, store: KeyValueStore, max_len: int = MAX_HISTORY_LEN):
        self.store = store
        self.max_len = max_len

    def items(self) -> List[HistoryItem]:
        return history_from_value(self.store.get(HISTORY_KEY))

    def insert(self, item: HistoryItem) -> None:
        """Prepend ``item`` and drop the oldest entries beyond ``max_len``."""
        with self.store.lock(HISTORY_KEY):
            history = [item] + self.items()
            del history[self.max_len:]
            self.store.set(HISTORY_KEY, [entry.to_dict() for entry in history])
            self.store.save()

    def clear(self) -> None:
        with self.store.lock(HISTORY_KEY):
            self.store.set(HISTORY_KEY, [])
            self.store.save()
        logger.info("History cleared")
