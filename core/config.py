"""
Application configuration using Pydantic Settings
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Target table
    DYNAMO_TABLE_NAME: Optional[str] = None

    # AWS
    AWS_REGION: Optional[str] = None
    AWS_ENDPOINT_URL: Optional[str] = None

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Ingestion Configuration
    BATCH_SIZE: int = Field(25, ge=1, le=25)  # DynamoDB BatchWriteItem ceiling
    MAX_RETRIES: int = Field(5, ge=0)
    BASE_DELAY_MS: int = Field(200, ge=0)
    SOURCE_ENCODING: str = "utf-8-sig"

    # Failed events are forwarded here when set
    DEAD_LETTER_QUEUE_URL: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
