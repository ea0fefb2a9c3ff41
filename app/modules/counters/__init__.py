"""Counters plugin.

Public API:
    - CountersPlugin: config, state and command registry of the plugin
    - CountersState: counter id table and value store
    - generate_plugin_docs(): documentation payload for the plugin
"""

from modules.counters.docs import generate_plugin_docs
from modules.counters.plugin import CountersPlugin
from modules.counters.state import CountersState

__all__ = [
    "CountersPlugin",
    "CountersState",
    "generate_plugin_docs",
]
