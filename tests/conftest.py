"""
Pytest configuration and fixtures for documentdb_connector tests.
"""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from documentdb_connector import DocumentDBConnector, DocumentDBSettings
from documentdb_connector.clients import CosmosDocumentClient, MockDocumentClient

DB_LINK = "dbs/MyDb/"
COLL_LINK = "dbs/MyDb/colls/MyColl/"


@pytest.fixture
def settings() -> DocumentDBSettings:
    """Test scaffolding settings (never used against a real account)."""
    return DocumentDBSettings(
        host="https://myhost.documents.azure.com:443/",
        master_key="MyKey",
        database_id="MyDbId",
        collection_id="MyCollId",
    )


@pytest.fixture
def mock_client() -> MagicMock:
    """Document client mock: async methods become AsyncMock via the spec."""
    client = MagicMock(spec=CosmosDocumentClient)
    client.query_databases.return_value = [{"id": "MyDbId", "_self": DB_LINK}]
    client.query_collections.return_value = [{"id": "MyCollId", "_self": COLL_LINK}]
    client.query_documents.return_value = []
    return client


@pytest_asyncio.fixture
async def connector(settings, mock_client) -> DocumentDBConnector:
    """Connector already connected against ``mock_client``."""
    conn = DocumentDBConnector(settings, client=mock_client)
    await conn.connect()
    return conn


@pytest_asyncio.fixture
async def memory_connector(settings) -> DocumentDBConnector:
    """Connector connected to an in-memory store."""
    conn = DocumentDBConnector(settings, client=MockDocumentClient(settings))
    await conn.connect()
    return conn
