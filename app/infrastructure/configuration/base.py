"""Base classes for the settings sections."""

from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Settings for an external service the bot talks to."""

    model_config = SECTION_CONFIG


class FeatureSettings(BaseSettings):
    """Settings owned by a bot feature."""

    model_config = SECTION_CONFIG
