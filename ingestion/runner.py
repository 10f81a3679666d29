# ============================================================================
# File: ingestion/runner.py
# Description: Fail-fast ingestion orchestrator
# ============================================================================
"""
Ingestion Runner - Orchestrates resolve, fetch, decode, map and write.

This module provides the run sequencing with:
- Run-scoped context instead of state held on long-lived objects
- Fail-fast error handling (no partial success)
- First failure propagated unchanged for dead-letter routing
- Detailed logging of every phase
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import logging

from ingestion.base import KeyValueStore, ObjectSource
from ingestion.extractors.csv_extractor import CSVDecoder
from ingestion.loaders.dynamodb_loader import DynamoDBBatchWriter
from ingestion.loaders.schema_resolver import SchemaResolver
from ingestion.transformers.item_mapper import ItemMapper
from schemas.ingestion import IngestionSummary, SchemaDescriptor, SourceLocator
from core.exceptions import ETLException

logger = logging.getLogger(__name__)


@dataclass
class IngestionContext:
    """State owned by exactly one run"""
    table_name: str
    locator: SourceLocator
    started_at: datetime
    schema: Optional[SchemaDescriptor] = None


class IngestionRunner:
    """
    Ingestion Orchestrator

    Responsibilities:
    - Resolve the table schema once per run
    - Fetch and decode the source object
    - Map rows against the resolved schema
    - Write items through the batch writer
    - Propagate the first failure verbatim
    """

    def __init__(
        self,
        source: ObjectSource,
        store: KeyValueStore,
        table_name: str,
        batch_size: int = 25,
        max_retries: int = 5,
        base_delay_ms: int = 200,
        encoding: str = "utf-8-sig"
    ):
        self.source = source
        self.store = store
        self.table_name = table_name
        self.resolver = SchemaResolver(store)
        self.decoder = CSVDecoder(encoding=encoding)
        self.mapper = ItemMapper()
        self.writer = DynamoDBBatchWriter(
            store,
            table_name,
            batch_size=batch_size,
            max_retries=max_retries,
            base_delay_ms=base_delay_ms
        )

    async def run(self, locator: SourceLocator) -> IngestionSummary:
        """
        Run the full pipeline for one source object.

        Pipeline phases:
        1. Resolve - Discover partition key name and type
        2. Fetch - Read the object body
        3. Decode - Parse CSV into rows
        4. Map - Convert rows to typed items
        5. Write - Batch write with bounded retries

        Returns:
            IngestionSummary of the completed run

        Raises:
            SchemaResolutionError, SourceUnavailableError, MalformedInputError,
            WriteFailure: Unchanged from the failing phase
            ETLException: Wrapping any unexpected error
        """
        ctx = IngestionContext(
            table_name=self.table_name,
            locator=locator,
            started_at=datetime.now(timezone.utc)
        )
        logger.info(f"Starting ingestion of {locator.uri} into {ctx.table_name}")

        try:
            ctx.schema = await self.resolver.resolve(ctx.table_name)

            raw = await self.source.fetch(locator)

            rows = self.decoder.decode_bytes(raw)
            logger.info(f"Decoded {len(rows)} rows from {locator.uri}")

            items = self.mapper.map_rows(rows, ctx.schema)

            report = await self.writer.write_all(items)

        except ETLException as e:
            logger.error(
                f"Ingestion of {locator.uri} failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            raise

        except Exception as e:
            logger.exception(f"Unexpected error while ingesting {locator.uri}")
            raise ETLException(
                "Unexpected error in ingestion pipeline",
                context={
                    "bucket": locator.bucket,
                    "key": locator.key,
                    "table_name": ctx.table_name
                },
                original_exception=e
            )

        completed_at = datetime.now(timezone.utc)
        summary = IngestionSummary(
            bucket=locator.bucket,
            key=locator.key,
            table_name=ctx.table_name,
            primary_key_name=ctx.schema.primary_key_name,
            primary_key_type=ctx.schema.primary_key_type,
            rows_decoded=len(rows),
            items_written=report.items_written,
            batches_written=report.batches_written,
            retries=report.retries,
            started_at=ctx.started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - ctx.started_at).total_seconds()
        )

        logger.info(
            f"Ingestion completed for {locator.uri}: "
            f"Rows: {summary.rows_decoded}, Written: {summary.items_written}, "
            f"Batches: {summary.batches_written}, Retries: {summary.retries}"
        )
        return summary
