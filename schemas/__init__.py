"""
Pydantic schemas and type aliases shared by the ingestion pipeline.

Schemas:
    ingestion: Row/Item aliases, KeyType, SchemaDescriptor, SourceLocator,
        WriteReport and IngestionSummary

Usage:
    from schemas.ingestion import KeyType, SchemaDescriptor

Example:
    schema = SchemaDescriptor(primary_key_name="id", primary_key_type=KeyType.NUMERIC)

    # Descriptors are immutable for the lifetime of a run
    assert schema.primary_key_type == KeyType.NUMERIC
"""

__all__ = [
    "ingestion",
]
