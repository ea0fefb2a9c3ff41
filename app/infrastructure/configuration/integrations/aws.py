"""AWS integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class AwsSettings(IntegrationSettings):
    """AWS access used by the DynamoDB counter store.

    Environment Variables:
        AWS_REGION: Region of the counter values table (default: ca-central-1)
        AWS_ENDPOINT_URL: Endpoint override, e.g. a local DynamoDB in development
    """

    AWS_REGION: str = Field(default="ca-central-1", alias="AWS_REGION")
    AWS_ENDPOINT_URL: Optional[str] = Field(default=None, alias="AWS_ENDPOINT_URL")
