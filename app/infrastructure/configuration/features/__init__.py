"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.counters import CountersSettings

__all__ = [
    "CountersSettings",
]
