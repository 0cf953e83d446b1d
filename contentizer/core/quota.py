"""
Daily request quota enforcement.

Each optimize call consumes one unit before the provider is contacted,
so a failed or slow remote call can't be retried to get around the cap.

Enforcement Order:
1. Day rollover - a new UTC day bucket resets the count to zero
2. Disabled gate - a limit of 0 always allows
3. Exhaustion - used >= limit rejects without writing anything
4. Grant - increment, persist, allow
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..errors import QuotaExceeded
from ..storage.models import DAILY_QUOTA_KEY, QuotaState
from ..storage.store import KeyValueStore

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400


def day_bucket(timestamp: float) -> int:
    """Index of the UTC calendar day containing ``timestamp``."""
    return int(timestamp) // SECONDS_PER_DAY


@dataclass(frozen=True)
class QuotaStatus:
    """Snapshot of today's quota usage."""
    limit: int
    used: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def enabled(self) -> bool:
        return self.limit > 0


class QuotaGate:
    """Per-day request counter backed by the key-value store.

    The read-check-increment-persist sequence holds the store's lock for
    the quota key, so concurrent callers can't both take the last unit.
    """

    def __init__(
        self,
        store: KeyValueStore,
        limit: int,
        clock: Callable[[], float] = time.time,
    ):
        if limit < 0:
            raise ValueError("limit must be >= 0")
        self.store = store
        self.limit = limit
        self.clock = clock

    def _load(self, today: int) -> QuotaState:
        state = QuotaState.from_dict(self.store.get(DAILY_QUOTA_KEY))
        if state.day_bucket != today:
            return QuotaState(day_bucket=today, used=0)
        return state

    def consume(self) -> QuotaState:
        """Take one unit of today's quota.

        Returns:
            The quota state after the grant

        Raises:
            QuotaExceeded: If today's quota is already used up
            StoreIOError: If the updated count can't be persisted
        """
        if self.limit == 0:
            return QuotaState(day_bucket=day_bucket(self.clock()), used=0)

        with self.store.lock(DAILY_QUOTA_KEY):
            state = self._load(day_bucket(self.clock()))

            if state.used >= self.limit:
                logger.info("Daily quota exhausted (%d/%d)", state.used, self.limit)
                raise QuotaExceeded(self.limit)

            state = QuotaState(day_bucket=state.day_bucket, used=state.used + 1)
            self.store.set(DAILY_QUOTA_KEY, state.to_dict())
            self.store.save()

        logger.info("Quota consumed: %d/%d for day %d", state.used, self.limit, state.day_bucket)
        return state

    def status(self) -> QuotaStatus:
        """Report today's usage without consuming anything."""
        if self.limit == 0:
            return QuotaStatus(limit=0, used=0)
        state = self._load(day_bucket(self.clock()))
        return QuotaStatus(limit=self.limit, used=state.used)
