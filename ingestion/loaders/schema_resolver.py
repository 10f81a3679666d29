"""
Discover the partition key of the target table at run time
"""

from typing import Dict, Any
from botocore.exceptions import BotoCoreError, ClientError
from ingestion.base import KeyValueStore
from schemas.ingestion import KeyType, SchemaDescriptor
from core.exceptions import SchemaResolutionError
import logging

logger = logging.getLogger(__name__)


class SchemaResolver:
    """
    Resolve the table's partition (HASH) key name and type.

    Stateless: every call performs one describe against the store. The runner
    keeps the result for the duration of a run.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def resolve(self, table_name: str) -> SchemaDescriptor:
        try:
            table = await self.store.describe(table_name)
        except ClientError as e:
            raise SchemaResolutionError(
                f"Unable to describe table {table_name}",
                context={
                    "table_name": table_name,
                    "error_code": e.response.get("Error", {}).get("Code")
                },
                original_exception=e
            )
        except BotoCoreError as e:
            raise SchemaResolutionError(
                f"Unable to describe table {table_name}",
                context={"table_name": table_name},
                original_exception=e
            )

        schema = self._parse_key_schema(table_name, table)
        logger.info(
            f"Resolved partition key for {table_name}: "
            f"{schema.primary_key_name} ({schema.primary_key_type.name})"
        )
        return schema

    @staticmethod
    def _parse_key_schema(table_name: str, table: Dict[str, Any]) -> SchemaDescriptor:
        hash_keys = [
            k["AttributeName"]
            for k in table.get("KeySchema") or []
            if k.get("KeyType") == "HASH"
        ]
        if len(hash_keys) != 1:
            raise SchemaResolutionError(
                f"Expected exactly one partition key on {table_name}, found {len(hash_keys)}",
                context={"table_name": table_name, "hash_keys": hash_keys}
            )
        key_name = hash_keys[0]

        attribute_type = next(
            (
                a.get("AttributeType")
                for a in table.get("AttributeDefinitions") or []
                if a.get("AttributeName") == key_name
            ),
            None
        )
        if attribute_type is None:
            raise SchemaResolutionError(
                f"No attribute definition for partition key {key_name}",
                context={"table_name": table_name, "key_name": key_name}
            )

        try:
            key_type = KeyType(attribute_type)
        except ValueError:
            raise SchemaResolutionError(
                f"Unsupported partition key type {attribute_type} for {key_name}",
                context={
                    "table_name": table_name,
                    "key_name": key_name,
                    "attribute_type": attribute_type
                }
            )

        return SchemaDescriptor(primary_key_name=key_name, primary_key_type=key_type)
