"""
Ingestion pipeline components for loading CSV objects into DynamoDB.

Modules:
    base: Abstract collaborators (object source, key-value store)
    runner: Orchestrator that sequences one ingestion run
    handler: AWS Lambda entry point for S3 notifications

Subpackages:
    extractors: S3 object source and CSV decoder
    transformers: Row to DynamoDB item mapping
    loaders: Partition key discovery and batch writing with retries

Architecture:
    One S3 object produces one run:

    1. Resolve - Describe the table to find its partition key name and type
    2. Fetch - Read the object body from S3
    3. Decode - Parse CSV into rows keyed by the header
    4. Map - Convert rows to typed items
    5. Write - BatchWriteItem in chunks of at most 25, retrying unprocessed
       items with exponential backoff

    The run is fail-fast: the first error aborts it and is raised unchanged.

Usage:
    from ingestion.runner import IngestionRunner
    from ingestion.extractors.s3_extractor import S3ObjectSource
    from ingestion.loaders.dynamodb_loader import DynamoDBStore

Example:
    runner = IngestionRunner(
        source=S3ObjectSource(s3_client),
        store=DynamoDBStore(dynamodb_client),
        table_name="customers"
    )
    summary = await runner.run(SourceLocator(bucket="imports", key="customers.csv"))

    print(f"Wrote {summary.items_written} items")

Error Handling:
    All components raise exceptions from core.exceptions. Only the batch
    writer recovers locally, and only from unprocessed items.
"""

__all__ = [
    "base",
    "runner",
    "handler",
]
