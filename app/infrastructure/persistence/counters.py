"""Scoped counter value stores (read path).

A counter's value is keyed by ``ScopeKey(counter_id, channel_id, user_id)``.
The four combinations of present/absent channel and user are independent
keys; a store never aggregates across them. ``None`` means "no recorded
value for exactly this scope" and is distinct from a recorded ``0``.
"""

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Protocol

from infrastructure.logging import get_module_logger
from infrastructure.persistence.exceptions import StorageUnavailableError

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


@dataclass(frozen=True)
class ScopeKey:
    """Composite lookup key for one counter value."""

    counter_id: int
    channel_id: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.channel_id is None and self.user_id is None

    @property
    def storage_key(self) -> str:
        """Flat key for backends with a single sort key, e.g. ``c:123|u:-``."""
        return f"c:{self.channel_id or '-'}|u:{self.user_id or '-'}"


class CounterScopeStore(Protocol):
    """Read surface of a counter store."""

    async def get_current_value(
        self,
        counter_id: int,
        channel_id: Optional[str],
        user_id: Optional[str],
    ) -> Optional[int]:
        """Return the recorded value for the exact scope, or None if unset.

        Raises:
            StorageUnavailableError: If the backing storage cannot be read
        """
        ...  # pylint: disable=unnecessary-ellipsis


class InMemoryCounterStore:
    """Counter store backed by a dict, for development and tests.

    Args:
        values: Initial recorded values keyed by ScopeKey
    """

    def __init__(self, values: Optional[Mapping[ScopeKey, int]] = None):
        self._values: Dict[ScopeKey, int] = dict(values or {})
        self.available = True

    async def get_current_value(
        self,
        counter_id: int,
        channel_id: Optional[str],
        user_id: Optional[str],
    ) -> Optional[int]:
        # Yield like a real backend would
        await asyncio.sleep(0)
        if not self.available:
            raise StorageUnavailableError("In-memory counter store is unavailable")
        return self._values.get(ScopeKey(counter_id, channel_id, user_id))


def build_counter_store(settings: "Settings") -> CounterScopeStore:
    """Build the counter store selected by ``COUNTERS_STORE_BACKEND``."""
    backend = settings.counters.store_backend
    logger.info("building_counter_store", backend=backend)
    if backend == "dynamodb":
        from infrastructure.persistence.dynamodb_counters import DynamoDBCounterStore

        return DynamoDBCounterStore(
            table_name=settings.counters.dynamodb_table_name,
            region=settings.aws.AWS_REGION,
            endpoint_url=settings.aws.AWS_ENDPOINT_URL,
        )
    return InMemoryCounterStore()
