"""
Script to ingest one S3 object into the configured DynamoDB table
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.handler import build_runner
from schemas.ingestion import SourceLocator

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Ingest a CSV object from S3 into DynamoDB")
    parser.add_argument("bucket", help="Source bucket name")
    parser.add_argument("key", help="Source object key")
    parser.add_argument("--table", help="Target table (defaults to DYNAMO_TABLE_NAME)")
    return parser.parse_args(argv)


async def run_ingest(args) -> int:
    """Run one ingestion and return the process exit code"""
    config = settings.model_copy(update={"DYNAMO_TABLE_NAME": args.table}) if args.table else settings

    try:
        runner = build_runner(config)
        summary = await runner.run(SourceLocator(bucket=args.bucket, key=args.key))
    except ETLException as e:
        logger.error(f"Ingestion failed: {e}")
        return 1

    logger.info(
        f"Ingested s3://{summary.bucket}/{summary.key}: "
        f"Written={summary.items_written}, Batches={summary.batches_written}, "
        f"Retries={summary.retries}"
    )
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(run_ingest(parse_args())))
