"""
Pytest configuration and fixtures
"""

import pytest
from unittest.mock import AsyncMock, Mock
from schemas.ingestion import KeyType, SchemaDescriptor, SourceLocator
from tests.factories import TABLE_NAME


@pytest.fixture
def numeric_schema():
    """Table keyed by a numeric `id`"""
    return SchemaDescriptor(primary_key_name="id", primary_key_type=KeyType.NUMERIC)


@pytest.fixture
def text_schema():
    """Table keyed by a text `sku`"""
    return SchemaDescriptor(primary_key_name="sku", primary_key_type=KeyType.TEXT)


@pytest.fixture
def locator():
    return SourceLocator(bucket="import-bucket", key="uploads/customers.csv")


@pytest.fixture
def table_description():
    """DescribeTable `Table` payload with a numeric HASH key and a text RANGE key"""
    return {
        "TableName": TABLE_NAME,
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
            {"AttributeName": "created", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "N"},
            {"AttributeName": "created", "AttributeType": "S"},
        ],
    }


@pytest.fixture
def mock_store(table_description):
    """KeyValueStore that accepts every write on the first attempt"""
    store = Mock()
    store.describe = AsyncMock(return_value=table_description)
    store.batch_write = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_csv_content():
    """Mock CSV object body"""
    return (
        "id,name,email\n"
        "1,Alice,alice@example.com\n"
        "2,Bob,\n"
        ",Charlie,charlie@example.com\n"
    ).encode("utf-8")


