"""
Pydantic schemas and type aliases for the ingestion pipeline
"""

from pydantic import BaseModel, Field
from typing import Dict, List
from datetime import datetime
import enum
import uuid


# A decoded CSV record: column name -> trimmed string value
Row = Dict[str, str]

# A DynamoDB item in wire format, e.g. {"id": {"N": "1"}, "name": {"S": "Alice"}}
Item = Dict[str, Dict[str, str]]

Batch = List[Item]


class KeyType(str, enum.Enum):
    """Partition key types the pipeline can write (DynamoDB type codes)"""
    TEXT = "S"
    NUMERIC = "N"


class SchemaDescriptor(BaseModel):
    """Partition key name and type discovered from the target table"""

    primary_key_name: str = Field(..., min_length=1)
    primary_key_type: KeyType

    class Config:
        frozen = True


class SourceLocator(BaseModel):
    """Location of one source object"""

    bucket: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)

    class Config:
        frozen = True

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class WriteReport(BaseModel):
    """Counters produced by a completed write_all"""

    items_written: int = 0
    batches_written: int = 0
    retries: int = 0


class IngestionSummary(BaseModel):
    """
    Statistics of one fully successful ingestion run.

    A failed run never produces a summary; the error is raised instead.
    """

    run_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    bucket: str
    key: str
    table_name: str
    primary_key_name: str
    primary_key_type: KeyType
    rows_decoded: int
    items_written: int
    batches_written: int
    retries: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
