"""Bot configuration.

``settings`` is built once at import time from the environment and the
``.env`` file:

    from infrastructure.configuration import settings

    prefix = settings.counters.command_prefix
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features.counters import CountersSettings

settings = Settings()

__all__ = ["settings", "Settings", "CountersSettings"]
