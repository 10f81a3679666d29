"""
boto3 client management
"""

from typing import Any, Dict, Optional
import boto3
from botocore.exceptions import BotoCoreError
from core.exceptions import ConfigurationError
import logging

logger = logging.getLogger(__name__)


def create_session(region_name: Optional[str] = None) -> boto3.session.Session:
    """Create a boto3 session, optionally pinned to a region"""
    session_kwargs: Dict[str, str] = {}
    if region_name:
        session_kwargs["region_name"] = region_name
    try:
        return boto3.session.Session(**session_kwargs)
    except BotoCoreError as e:
        raise ConfigurationError(
            f"Unable to create AWS session: {e}",
            context={"region_name": region_name},
            original_exception=e
        )


def create_client(
    service_name: str,
    session: Optional[boto3.session.Session] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None
) -> Any:
    """
    Create a low-level boto3 client.

    Args:
        service_name: AWS service ("s3", "dynamodb", "sqs")
        session: Existing session to reuse; a new one is created otherwise
        region_name: Region for a new session
        endpoint_url: Endpoint override, e.g. for a local DynamoDB

    Returns:
        boto3 client

    Raises:
        ConfigurationError: If botocore rejects the profile, region or endpoint
    """
    session = session or create_session(region_name)
    client_kwargs: Dict[str, str] = {}
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url

    logger.debug(f"Creating {service_name} client (endpoint={endpoint_url or 'default'})")
    try:
        return session.client(service_name, **client_kwargs)
    except BotoCoreError as e:
        raise ConfigurationError(
            f"Unable to create {service_name} client: {e}",
            context={"service_name": service_name, "endpoint_url": endpoint_url},
            original_exception=e
        )
