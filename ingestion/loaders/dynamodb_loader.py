"""
Load items into DynamoDB with bounded, exponentially backed-off retries
"""

import asyncio
from typing import Any, Dict, List
from botocore.exceptions import BotoCoreError, ClientError
from ingestion.base import KeyValueStore
from schemas.ingestion import Batch, Item, WriteReport
from core.exceptions import WriteFailure, WriteFailureReason
import logging

logger = logging.getLogger(__name__)


class DynamoDBStore(KeyValueStore):
    """
    Thin async wrapper over the low-level DynamoDB client.

    Blocking boto3 calls run in a worker thread.
    """

    def __init__(self, dynamodb_client: Any):
        self.client = dynamodb_client

    async def describe(self, table_name: str) -> Dict[str, Any]:
        response = await asyncio.to_thread(self.client.describe_table, TableName=table_name)
        return response["Table"]

    async def batch_write(self, table_name: str, items: List[Item]) -> List[Item]:
        response = await asyncio.to_thread(
            self.client.batch_write_item,
            RequestItems={
                table_name: [{"PutRequest": {"Item": item}} for item in items]
            }
        )
        unprocessed = (response.get("UnprocessedItems") or {}).get(table_name, [])
        return [request["PutRequest"]["Item"] for request in unprocessed]


def compute_backoff_delay(attempt: int, base_delay_ms: int) -> float:
    """Seconds to wait before retry number `attempt` (1-based)"""
    return base_delay_ms * (2 ** attempt) / 1000.0


class DynamoDBBatchWriter:
    """
    Write items in fixed-size batches.

    Ensures:
    - Batches never exceed batch_size
    - Batches are written strictly one after another
    - Only unprocessed items are resubmitted, at most max_retries times
    - Store errors other than unprocessed items fail immediately
    """

    def __init__(
        self,
        store: KeyValueStore,
        table_name: str,
        batch_size: int = 25,
        max_retries: int = 5,
        base_delay_ms: int = 200
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {max_retries}")

        self.store = store
        self.table_name = table_name
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms

    def partition(self, items: List[Item]) -> List[Batch]:
        """Split items, in arrival order, into batches of at most batch_size"""
        return [
            items[i:i + self.batch_size]
            for i in range(0, len(items), self.batch_size)
        ]

    async def write_all(self, items: List[Item]) -> WriteReport:
        """
        Write every item, batch by batch.

        Returns:
            WriteReport with item, batch and retry counts

        Raises:
            WriteFailure: From the first batch that could not be committed
        """
        report = WriteReport()

        for index, batch in enumerate(self.partition(items)):
            retries = await self.write_batch(batch)

            report.items_written += len(batch)
            report.batches_written += 1
            report.retries += retries

            logger.info(
                f"Batch {index + 1}: wrote {len(batch)} items to {self.table_name}"
                + (f" after {retries} retries" if retries else "")
            )

        return report

    async def write_batch(self, batch: Batch) -> int:
        """
        Write one batch, retrying unprocessed items with exponential backoff.

        Returns:
            Number of retries that were needed

        Raises:
            WriteFailure: RETRIES_EXHAUSTED if items remain after max_retries,
                STORE_ERROR if the store rejects a request
        """
        attempt = 0
        unprocessed = await self._submit(batch, attempt)

        while unprocessed and attempt < self.max_retries:
            attempt += 1
            delay = compute_backoff_delay(attempt, self.base_delay_ms)
            logger.warning(
                f"{len(unprocessed)} of {len(batch)} items unprocessed, "
                f"retry {attempt}/{self.max_retries} in {delay:.3f}s"
            )
            await asyncio.sleep(delay)
            unprocessed = await self._submit(unprocessed, attempt)

        if unprocessed:
            raise WriteFailure(
                f"{len(unprocessed)} items still unprocessed after {self.max_retries} retries",
                reason=WriteFailureReason.RETRIES_EXHAUSTED,
                remaining=len(unprocessed),
                context={"table_name": self.table_name, "batch_size": len(batch)}
            )

        return attempt

    async def _submit(self, items: Batch, attempt: int) -> List[Item]:
        try:
            return await self.store.batch_write(self.table_name, items)
        except (ClientError, BotoCoreError) as e:
            context = {"table_name": self.table_name, "attempt": attempt}
            if isinstance(e, ClientError):
                context["error_code"] = e.response.get("Error", {}).get("Code")
            raise WriteFailure(
                f"Batch write to {self.table_name} was rejected",
                reason=WriteFailureReason.STORE_ERROR,
                remaining=len(items),
                context=context,
                original_exception=e
            )
