"""Top-level Settings object for the counters bot."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.features import CountersSettings
from infrastructure.configuration.integrations import AwsSettings

SECTIONS = {
    "aws": AwsSettings,
    "counters": CountersSettings,
}


class Settings(BaseSettings):
    """All bot settings, one attribute per section.

    Sections not passed to the constructor are built from the environment,
    so tests can swap a single section:

        Settings(counters=CountersSettings(COUNTERS_COMMAND_PREFIX="?"))

    Environment Variables:
        PREFIX: Deployment prefix; empty in production
        LOG_LEVEL: Root log level (default: INFO)
        GIT_SHA: Commit the process was built from, stamped on log entries
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    aws: AwsSettings
    counters: CountersSettings

    def __init__(self, **kwargs):
        for name, section in SECTIONS.items():
            if name not in kwargs:
                kwargs[name] = section()
        super().__init__(**kwargs)

    @property
    def is_production(self) -> bool:
        return not self.PREFIX
