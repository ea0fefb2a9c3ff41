"""Persistence layer for counter values.

Provides the read contract of the scoped counter store and its
in-memory and DynamoDB backends.
"""

from infrastructure.persistence.counters import (
    CounterScopeStore,
    InMemoryCounterStore,
    ScopeKey,
    build_counter_store,
)
from infrastructure.persistence.exceptions import StorageUnavailableError

__all__ = [
    "CounterScopeStore",
    "InMemoryCounterStore",
    "ScopeKey",
    "StorageUnavailableError",
    "build_counter_store",
]
