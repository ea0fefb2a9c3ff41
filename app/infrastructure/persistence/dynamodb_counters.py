"""DynamoDB-backed counter value store.

Table schema:
- Partition Key: counter_id (N)
- Sort Key: scope (S) -- ``ScopeKey.storage_key``, e.g. ``c:123|u:-``
- value (N): recorded counter value for that exact scope

boto3 is synchronous, so each read runs in a worker thread to keep the
event loop free for other invocations.
"""

import asyncio
from typing import Any, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_aws_error
from infrastructure.persistence.counters import ScopeKey
from infrastructure.persistence.exceptions import StorageUnavailableError

logger = get_module_logger()


class DynamoDBCounterStore:
    """Counter store reading values from a DynamoDB table.

    Args:
        table_name: DynamoDB table holding counter values
        region: AWS region, used when no client is provided
        client: Optional preconfigured boto3 DynamoDB client
        endpoint_url: Endpoint override, used when no client is provided
    """

    def __init__(
        self,
        table_name: str,
        region: Optional[str] = None,
        client: Optional[BaseClient] = None,
        endpoint_url: Optional[str] = None,
    ):
        self._table_name = table_name
        if client is None:
            client_config = {"region_name": region}
            if endpoint_url:
                client_config["endpoint_url"] = endpoint_url
            client = boto3.client("dynamodb", **client_config)
        self._client = client

    def _get_item(self, key: ScopeKey) -> OperationResult:
        try:
            response = self._client.get_item(
                TableName=self._table_name,
                Key={
                    "counter_id": {"N": str(key.counter_id)},
                    "scope": {"S": key.storage_key},
                },
                ConsistentRead=True,
            )
        except (BotoCoreError, ClientError) as e:
            return classify_aws_error(e)
        return OperationResult.success(data=response.get("Item"))

    async def get_current_value(
        self,
        counter_id: int,
        channel_id: Optional[str],
        user_id: Optional[str],
    ) -> Optional[int]:
        key = ScopeKey(counter_id, channel_id, user_id)
        result = await asyncio.to_thread(self._get_item, key)

        if not result.is_success:
            logger.error(
                "counter_value_read_failed",
                table_name=self._table_name,
                counter_id=counter_id,
                scope=key.storage_key,
                error_message=result.message,
                error_code=result.error_code,
                retryable=result.is_retryable,
            )
            raise StorageUnavailableError(
                f"Could not read counter {counter_id}: {result.message}",
                status=result.status,
                error_code=result.error_code,
            )

        item: Optional[Dict[str, Any]] = result.data
        if not item or "value" not in item:
            return None
        return int(item["value"]["N"])
