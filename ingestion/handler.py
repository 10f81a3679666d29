"""
AWS Lambda entry point for S3 object-created notifications
"""

import asyncio
import json
from typing import Any, Dict, List, Optional
from urllib.parse import unquote_plus
from pydantic import ValidationError

from core.aws import create_client, create_session
from core.config import Settings, settings
from core.exceptions import ConfigurationError, ETLException, InvalidEventError
from core.logging import setup_logging
from ingestion.extractors.s3_extractor import S3ObjectSource
from ingestion.loaders.dynamodb_loader import DynamoDBStore
from ingestion.runner import IngestionRunner
from schemas.ingestion import IngestionSummary, SourceLocator
import logging

setup_logging()
logger = logging.getLogger(__name__)


def parse_s3_event(event: Dict[str, Any]) -> List[SourceLocator]:
    """
    Extract bucket/key pairs from an S3 notification.

    Object keys arrive URL-encoded with spaces as '+'.
    """
    records = event.get("Records") or []
    if not records:
        raise InvalidEventError("Event contains no records")

    locators = []
    for index, record in enumerate(records):
        try:
            bucket = record["s3"]["bucket"]["name"]
            key = unquote_plus(record["s3"]["object"]["key"])
        except (KeyError, TypeError) as e:
            raise InvalidEventError(
                "Record is not an S3 notification",
                context={"record_index": index},
                original_exception=e
            )
        try:
            locators.append(SourceLocator(bucket=bucket, key=key))
        except ValidationError as e:
            raise InvalidEventError(
                "Record has an empty bucket or key",
                context={"record_index": index, "bucket": bucket, "key": key},
                original_exception=e
            )

    return locators


def build_runner(config: Settings, session=None) -> IngestionRunner:
    """Wire the runner to real S3 and DynamoDB clients"""
    if not config.DYNAMO_TABLE_NAME:
        raise ConfigurationError("Environment variable DYNAMO_TABLE_NAME is not set.")

    session = session or create_session(config.AWS_REGION)
    s3_client = create_client("s3", session=session, endpoint_url=config.AWS_ENDPOINT_URL)
    dynamodb_client = create_client("dynamodb", session=session, endpoint_url=config.AWS_ENDPOINT_URL)

    return IngestionRunner(
        source=S3ObjectSource(s3_client),
        store=DynamoDBStore(dynamodb_client),
        table_name=config.DYNAMO_TABLE_NAME,
        batch_size=config.BATCH_SIZE,
        max_retries=config.MAX_RETRIES,
        base_delay_ms=config.BASE_DELAY_MS,
        encoding=config.SOURCE_ENCODING
    )


async def ingest_event(runner: IngestionRunner, event: Dict[str, Any]) -> List[IngestionSummary]:
    """Run one ingestion per record, stopping at the first failure"""
    summaries = []
    for locator in parse_s3_event(event):
        summaries.append(await runner.run(locator))
    return summaries


def forward_to_dead_letter_queue(
    event: Dict[str, Any],
    error: ETLException,
    queue_url: str,
    sqs_client: Any
) -> None:
    """Send the original event and the failure to the dead-letter queue"""
    body = {"event": event, "error": error.to_dict()}
    sqs_client.send_message(QueueUrl=queue_url, MessageBody=json.dumps(body, default=str))
    logger.info(f"Forwarded failed event to {queue_url}")


def handler(event: Dict[str, Any], context: Any = None, config: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Lambda handler.

    Any failure is re-raised so the invocation is marked failed; when
    DEAD_LETTER_QUEUE_URL is set the event is also forwarded there first.
    """
    config = config or settings
    session = None

    try:
        session = create_session(config.AWS_REGION)
        runner = build_runner(config, session=session)
        summaries = asyncio.run(ingest_event(runner, event))

    except ETLException as e:
        logger.error(f"Ingestion failed: {e}", extra={"error_context": e.to_dict()})

        if config.DEAD_LETTER_QUEUE_URL:
            try:
                sqs_client = create_client(
                    "sqs",
                    session=session,
                    region_name=config.AWS_REGION,
                    endpoint_url=config.AWS_ENDPOINT_URL
                )
                forward_to_dead_letter_queue(event, e, config.DEAD_LETTER_QUEUE_URL, sqs_client)
            except Exception:
                logger.exception("Failed to forward event to dead-letter queue")

        raise

    return {
        "status": "success",
        "runs": [s.model_dump(mode="json") for s in summaries]
    }
