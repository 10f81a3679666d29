"""
Map decoded rows to DynamoDB items typed against the resolved schema
"""

from decimal import Decimal, Inexact, InvalidOperation, localcontext
from typing import List, Optional
from schemas.ingestion import Item, KeyType, Row, SchemaDescriptor
import logging

logger = logging.getLogger(__name__)

# DynamoDB numbers carry at most 38 significant digits
NUMBER_PRECISION = 38
MIN_EXPONENT = -130
MAX_EXPONENT = 125


class ItemMapper:
    """
    Convert rows into store-native items.

    Rules:
    - Empty or missing values are omitted (no null attributes)
    - The partition key is typed per the schema; a NUMERIC key that does not
      parse as a finite number DynamoDB can hold (38 significant digits,
      magnitude 1E-130 to 9.99E+125) is stored as text instead of failing the run
    - Every other column is stored as text
    """

    def map(self, row: Row, schema: SchemaDescriptor) -> Item:
        item: Item = {}

        for column, value in row.items():
            if not value:
                continue

            if column == schema.primary_key_name:
                item[column] = self._map_key(value, schema.primary_key_type)
            else:
                item[column] = {KeyType.TEXT.value: value}

        return item

    def map_rows(self, rows: List[Row], schema: SchemaDescriptor) -> List[Item]:
        items = [self.map(row, schema) for row in rows]

        missing_key = sum(1 for item in items if schema.primary_key_name not in item)
        if missing_key:
            logger.warning(
                f"{missing_key} of {len(items)} items have no value for "
                f"partition key {schema.primary_key_name}"
            )

        return items

    def _map_key(self, value: str, key_type: KeyType) -> dict:
        if key_type == KeyType.NUMERIC:
            number = self._parse_number(value)
            if number is not None:
                return {KeyType.NUMERIC.value: number}
            logger.debug(f"Partition key value {value!r} is not numeric, storing as text")

        return {KeyType.TEXT.value: value}

    @staticmethod
    def _parse_number(value: str) -> Optional[str]:
        """Canonical decimal string for value, or None if it is not a finite number"""
        # Decimal accepts digit separators, DynamoDB does not
        if "_" in value:
            return None

        try:
            number = Decimal(value)
        except InvalidOperation:
            return None

        if not number.is_finite():
            return None
        if number.is_zero():
            return "0"
        if not MIN_EXPONENT <= number.adjusted() <= MAX_EXPONENT:
            return None

        # normalize() drops trailing zeros; "f" avoids exponent notation
        with localcontext() as ctx:
            ctx.prec = NUMBER_PRECISION
            ctx.traps[Inexact] = True
            try:
                normalized = number.normalize()
            except Inexact:
                return None

        return format(normalized, "f")
