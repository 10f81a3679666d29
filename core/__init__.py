"""
Core utilities and configuration for the ingestion pipeline.

Modules:
    config: Application configuration and environment variable management
    aws: boto3 session and client creation
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.aws import create_client
    from core.exceptions import SchemaResolutionError, WriteFailure
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Create a DynamoDB client
    dynamodb = create_client("dynamodb", region_name=settings.AWS_REGION)
"""

__all__ = [
    "config",
    "aws",
    "exceptions",
    "logging",
]
