"""Plugin documentation payload for the counters plugin."""

from typing import Any, Dict, List

from infrastructure.commands import Command
from infrastructure.configuration.docs_generator import format_config_schema
from modules.counters.config import CountersConfig
from modules.counters.plugin import CountersPlugin


def _describe_command(command: Command) -> Dict[str, Any]:
    return {
        "trigger": list(command.triggers),
        "permission": command.permission,
        "signature": [
            [
                {
                    "name": argument.name,
                    "type": argument.type.value,
                    "required": argument.required,
                }
                for argument in shape.arguments
            ]
            for shape in command.signatures
        ],
        "description": command.description,
        "usage": command.usage,
    }


def generate_plugin_docs(plugin: CountersPlugin) -> Dict[str, Any]:
    """Build the documentation payload shown on the plugin docs page.

    Returns:
        Dict with the plugin name, pretty name, description, rendered config
        schema, default options and message commands
    """
    commands: List[Dict[str, Any]] = [
        _describe_command(command) for command in plugin.registry.list_commands()
    ]
    return {
        "name": plugin.name,
        "info": {
            "pretty_name": plugin.pretty_name,
            "description": plugin.description,
        },
        "config_schema": format_config_schema(CountersConfig),
        "default_options": {
            "config": CountersConfig().model_dump(),
            "overrides": [],
        },
        "message_commands": commands,
    }
