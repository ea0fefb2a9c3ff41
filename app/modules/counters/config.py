"""Counters plugin configuration.

The plugin options are a base config plus a list of overrides. An override
applies to a message when every criterion it sets matches the message
(channel id, author id); matching overrides are deep-merged over the base
config in declaration order and the result is validated again.

Example options:

    {
        "config": {
            "can_view": False,
            "counters": {
                "warnings": {"per_user": True, "initial_value": 0},
                "messages": {"name": "Messages", "per_channel": True},
            },
        },
        "overrides": [
            {"channel": ["111111111111111111"], "config": {"can_view": True}},
        ],
    }
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from infrastructure.logging import get_module_logger
from infrastructure.platforms.models import Message

logger = get_module_logger()


class CounterDefinition(BaseModel):
    """Static definition of one counter."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(default="", description="Config key, injected from the counters mapping")
    name: Optional[str] = Field(default=None, description="Display name")
    per_channel: bool = Field(default=False, description="Values are kept per channel")
    per_user: bool = Field(default=False, description="Values are kept per user")
    initial_value: int = Field(default=0, description="Shown when no value is recorded")
    can_view: Optional[bool] = Field(
        default=None,
        description="Set to false to hide this counter's values from everyone",
    )

    @property
    def display_name(self) -> str:
        return self.name or self.key


class CountersConfig(BaseModel):
    """Counters plugin config, as seen by one message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    counters: Dict[str, CounterDefinition] = Field(default_factory=dict)
    can_view: bool = False

    @model_validator(mode="before")
    def inject_counter_keys(cls, values):  # pylint: disable=no-self-argument
        if not isinstance(values, dict) or not isinstance(values.get("counters"), dict):
            return values
        counters = {}
        for key, definition in values["counters"].items():
            if isinstance(definition, dict):
                definition = {**definition, "key": key}
            elif isinstance(definition, CounterDefinition):
                definition = definition.model_copy(update={"key": key})
            counters[key] = definition
        return {**values, "counters": counters}


class ConfigOverride(BaseModel):
    """Config applied on top of the base config for matching messages."""

    channel: Optional[List[str]] = None
    user: Optional[List[str]] = None
    config: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_criteria(self):
        if self.channel is None and self.user is None:
            raise ValueError("An override needs at least one of: channel, user")
        return self

    def matches(self, message: Message) -> bool:
        if self.channel is not None and message.channel_id not in self.channel:
            return False
        if self.user is not None and message.author.id not in self.user:
            return False
        return True


class CountersPluginOptions(BaseModel):
    """Raw plugin options: base config and overrides."""

    config: Dict[str, Any] = Field(default_factory=dict)
    overrides: List[ConfigOverride] = Field(default_factory=list)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested dicts merge, anything else replaces."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class CountersConfigAccessor:
    """Resolves the effective CountersConfig for a message.

    The base config and every override are validated up front, so a
    broken plugin config fails at load time rather than mid-invocation.

    Args:
        options: CountersPluginOptions, or a plain dict of the same shape
    """

    def __init__(self, options: Union[CountersPluginOptions, Mapping[str, Any]]):
        if not isinstance(options, CountersPluginOptions):
            options = CountersPluginOptions.model_validate(options)
        self.options = options
        self._base = CountersConfig.model_validate(options.config)
        for override in options.overrides:
            CountersConfig.model_validate(deep_merge(options.config, override.config))

    @property
    def base(self) -> CountersConfig:
        return self._base

    def get_for_message(self, message: Message) -> CountersConfig:
        merged: Optional[Dict[str, Any]] = None
        for index, override in enumerate(self.options.overrides):
            if not override.matches(message):
                continue
            merged = deep_merge(merged or self.options.config, override.config)
            logger.debug("config_override_applied", override_index=index)

        if merged is None:
            return self._base
        return CountersConfig.model_validate(merged)
