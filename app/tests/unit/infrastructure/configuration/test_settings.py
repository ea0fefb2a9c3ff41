"""Unit tests for infrastructure.configuration settings.

Tests cover:
- CountersSettings defaults, environment overrides and validation
- AwsSettings
- Settings aggregation and is_production
"""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import CountersSettings, Settings
from infrastructure.configuration.integrations import AwsSettings

COUNTERS_ENV = (
    "COUNTERS_COMMAND_PREFIX",
    "COUNTERS_PROMPT_TIMEOUT_SECONDS",
    "COUNTERS_STORE_BACKEND",
    "COUNTERS_DYNAMODB_TABLE_NAME",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in COUNTERS_ENV + ("PREFIX", "AWS_REGION", "AWS_ENDPOINT_URL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
class TestCountersSettings:
    """Test suite for CountersSettings."""

    def test_defaults(self, clean_env):
        """Defaults match the documented values."""
        counters = CountersSettings()

        assert counters.command_prefix == "!"
        assert counters.prompt_timeout_seconds == 15.0
        assert counters.store_backend == "memory"
        assert counters.dynamodb_table_name == "counters_bot_counter_values"

    def test_environment_overrides(self, clean_env):
        """Values are read from the environment."""
        clean_env.setenv("COUNTERS_COMMAND_PREFIX", "?")
        clean_env.setenv("COUNTERS_PROMPT_TIMEOUT_SECONDS", "2.5")
        clean_env.setenv("COUNTERS_STORE_BACKEND", "DynamoDB")
        clean_env.setenv("COUNTERS_DYNAMODB_TABLE_NAME", "values")

        counters = CountersSettings()

        assert counters.command_prefix == "?"
        assert counters.prompt_timeout_seconds == 2.5
        assert counters.store_backend == "dynamodb"
        assert counters.dynamodb_table_name == "values"

    def test_invalid_store_backend_rejected(self, clean_env):
        """Unknown backends fail validation."""
        clean_env.setenv("COUNTERS_STORE_BACKEND", "redis")

        with pytest.raises(ValidationError):
            CountersSettings()

    def test_timeout_must_be_positive(self, clean_env):
        """A zero timeout fails validation."""
        clean_env.setenv("COUNTERS_PROMPT_TIMEOUT_SECONDS", "0")

        with pytest.raises(ValidationError):
            CountersSettings()


@pytest.mark.unit
class TestSettings:
    """Test suite for the Settings aggregator."""

    def test_sections_instantiated(self, clean_env):
        """Every section is built when not passed in."""
        settings = Settings()

        assert isinstance(settings.counters, CountersSettings)
        assert isinstance(settings.aws, AwsSettings)
        assert settings.aws.AWS_REGION == "ca-central-1"
        assert settings.aws.AWS_ENDPOINT_URL is None

    def test_section_override(self, clean_env):
        """A section passed in is used as is."""
        counters = CountersSettings(COUNTERS_COMMAND_PREFIX="$")

        assert Settings(counters=counters).counters.command_prefix == "$"

    def test_is_production(self, clean_env):
        """An empty PREFIX means production."""
        assert Settings().is_production is True

        clean_env.setenv("PREFIX", "dev-")
        assert Settings().is_production is False
