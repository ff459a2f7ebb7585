"""DynamoDB store adapter (boto3).

boto3 is synchronous, so each call runs in a worker thread via
``asyncio.to_thread``. botocore retries are disabled (one attempt): the
gateway bounds the call with its own timeout and never retries, and a
client that retried underneath would break that budget.

Note:
    When the gateway's timeout fires, the worker thread is abandoned and
    finishes on its own; reads have no side effects, so the late result is
    simply dropped.
"""

import asyncio
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.core.result import Failure, Result, Success
from src.domain.errors import StoreError
from src.domain.value_objects import StoreOperationDescriptor, TableSchema
from src.infrastructure.store.dynamodb_codec import (
    build_request,
    map_client_error,
    map_transport_error,
    native_result,
)


class DynamoDbStore:
    """Executes store operations against DynamoDB.

    Args:
        schema: Key layout of the backing table.
        region: AWS region.
        endpoint_url: Endpoint override (DynamoDB Local), or None.
        timeout_seconds: Connect/read timeout for the HTTP client.
        client: Pre-built boto3 DynamoDB client (tests); built when omitted.
    """

    def __init__(
        self,
        *,
        schema: TableSchema,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        timeout_seconds: float = 3.0,
        client: Any | None = None,
    ) -> None:
        self._schema = schema
        if client is None:
            client = boto3.client(
                "dynamodb",
                region_name=region,
                endpoint_url=endpoint_url,
                config=Config(
                    retries={"mode": "standard", "total_max_attempts": 1},
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                ),
            )
        self._client = client

    async def execute(
        self, descriptor: StoreOperationDescriptor
    ) -> Result[dict[str, Any], StoreError]:
        """Run one operation against DynamoDB.

        Returns:
            Success(dict): Native result (see StoreProtocol).
            Failure(StoreError): Throttled, unavailable, timed out or rejected.
        """
        operation, params = build_request(descriptor, self._schema)
        call = getattr(self._client, operation)
        try:
            response = await asyncio.to_thread(call, **params)
        except ClientError as e:
            return Failure(error=map_client_error(e))
        except BotoCoreError as e:
            return Failure(error=map_transport_error(e))
        return Success(value=native_result(response))
