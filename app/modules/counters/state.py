"""Counters plugin runtime state."""

from dataclasses import dataclass, field
from typing import Dict, Mapping

from infrastructure.persistence import CounterScopeStore


@dataclass
class CountersState:
    """Counter ids assigned by the database, and the store holding their values.

    Attributes:
        counter_ids: Counter config key -> database counter id
        store: Read surface of the counter value store
    """

    store: CounterScopeStore
    counter_ids: Dict[str, int] = field(default_factory=dict)

    def snapshot_ids(self) -> Mapping[str, int]:
        """Copy of the id table for one invocation."""
        return dict(self.counter_ids)
