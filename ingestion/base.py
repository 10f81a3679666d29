"""
Abstract collaborators consumed by the ingestion pipeline
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any
from schemas.ingestion import Item, SourceLocator


class ObjectSource(ABC):
    """Read-only access to source objects"""

    @abstractmethod
    async def fetch(self, locator: SourceLocator) -> bytes:
        """
        Read the full object body.

        Raises:
            SourceUnavailableError: If the object cannot be read
        """
        pass


class KeyValueStore(ABC):
    """
    Metadata and bulk-write access to a key-value table.

    batch_write has no transactional guarantee: any subset of the submitted
    items may come back unprocessed and must be resubmitted by the caller.
    """

    @abstractmethod
    async def describe(self, table_name: str) -> Dict[str, Any]:
        """Return the table description (KeySchema, AttributeDefinitions)"""
        pass

    @abstractmethod
    async def batch_write(self, table_name: str, items: List[Item]) -> List[Item]:
        """Put items and return the ones the store did not commit"""
        pass
