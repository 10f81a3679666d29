"""
S3 object source
"""

import asyncio
from typing import Any
from botocore.exceptions import BotoCoreError, ClientError
from ingestion.base import ObjectSource
from schemas.ingestion import SourceLocator
from core.exceptions import SourceUnavailableError
import logging

logger = logging.getLogger(__name__)


class S3ObjectSource(ObjectSource):
    """
    Fetch source objects from S3.

    The boto3 client is blocking, so each call runs in a worker thread to
    keep the event loop free.
    """

    def __init__(self, s3_client: Any):
        self.s3 = s3_client

    async def fetch(self, locator: SourceLocator) -> bytes:
        logger.info(f"Fetching {locator.uri}")

        try:
            body = await asyncio.to_thread(self._read_object, locator)
        except ClientError as e:
            raise SourceUnavailableError(
                f"Unable to read {locator.uri}",
                context={
                    "bucket": locator.bucket,
                    "key": locator.key,
                    "error_code": e.response.get("Error", {}).get("Code")
                },
                original_exception=e
            )
        except BotoCoreError as e:
            raise SourceUnavailableError(
                f"Unable to read {locator.uri}",
                context={"bucket": locator.bucket, "key": locator.key},
                original_exception=e
            )

        logger.info(f"Fetched {len(body)} bytes from {locator.uri}")
        return body

    def _read_object(self, locator: SourceLocator) -> bytes:
        response = self.s3.get_object(Bucket=locator.bucket, Key=locator.key)
        return response["Body"].read()
