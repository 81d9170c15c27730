"""
Tests for the document client registry and the in-memory client, plus an
end-to-end run of the connector verbs against the in-memory store.
"""

from unittest.mock import MagicMock

import pytest
from azure.cosmos.exceptions import CosmosResourceExistsError

from documentdb_connector import DocumentDBConnector, NotFoundError, build_query, initialize
from documentdb_connector.clients import (
    CosmosDocumentClient,
    DocumentClient,
    MockDocumentClient,
    get_document_client,
    register_document_client,
)
from documentdb_connector.clients import cosmos
from documentdb_connector.clients.cosmos import collection_link_of
from documentdb_connector.config import DocumentDBSettings
from documentdb_connector.resolver import resolve


class TestRegistry:

    def test_mock_client_from_settings(self, settings):
        client = get_document_client(settings, client_type="mock")

        assert isinstance(client, MockDocumentClient)
        assert isinstance(client, DocumentClient)

    def test_unknown_client(self, settings):
        with pytest.raises(ValueError, match="Unknown document client"):
            get_document_client(settings, client_type="nope")

    def test_register_custom_client(self, settings):
        class _Client(MockDocumentClient):
            pass

        register_document_client("custom-test", _Client)

        assert isinstance(get_document_client(settings, client_type="custom-test"), _Client)


def test_collection_link_of():
    assert collection_link_of("dbs/A/colls/B/docs/C/") == "dbs/A/colls/B/"
    with pytest.raises(ValueError):
        collection_link_of("dbs/A/colls/B/")


class TestMockClient:

    @pytest.mark.asyncio
    async def test_empty_account(self, settings):
        conn = DocumentDBConnector(settings, client=MockDocumentClient(databases={}))

        with pytest.raises(NotFoundError) as exc_info:
            await conn.connect()

        assert exc_info.value.code == "DATABASE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_database_without_collection(self, settings):
        client = MockDocumentClient(databases={"MyDbId": ["Other"]})
        conn = DocumentDBConnector(settings, client=client)

        with pytest.raises(NotFoundError) as exc_info:
            await conn.connect()

        assert exc_info.value.code == "COLLECTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_duplicate_id_is_store_error(self, memory_connector):
        await memory_connector.create("Widget", {"id": "1"})

        with pytest.raises(CosmosResourceExistsError):
            await memory_connector.create("Widget", {"id": "1"})


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_create_and_find(self, memory_connector):
        created = await memory_connector.create("Widget", {"id": "42", "x": 1})

        assert created["type"] == "Widget"
        assert created["_self"].startswith(memory_connector.collection)
        assert await memory_connector.find("Widget", "42") == [created]

    @pytest.mark.asyncio
    async def test_types_do_not_collide(self, memory_connector):
        await memory_connector.create("Widget", {"id": "1", "color": "red"})
        await memory_connector.create("Gadget", {"id": "2", "color": "red"})

        widgets = await memory_connector.all("Widget", {"where": {"color": "red"}})

        assert [w["id"] for w in widgets] == ["1"]
        assert await memory_connector.count("Gadget") == 1
        assert await memory_connector.find("Gadget", "1") == []

    @pytest.mark.asyncio
    async def test_update_attributes(self, memory_connector):
        await memory_connector.create("Widget", {"id": "42", "x": 1, "y": "keep"})

        replaced = await memory_connector.update_attributes("Widget", "42", {"x": 2})

        assert replaced["x"] == 2
        assert replaced["y"] == "keep"
        [found] = await memory_connector.find("Widget", "42")
        assert found == replaced

    @pytest.mark.asyncio
    async def test_upsert(self, memory_connector):
        created = await memory_connector.upsert("Widget", {"id": "7", "x": 1})
        updated = await memory_connector.upsert("Widget", {"id": "7", "x": 5})

        assert created["x"] == 1
        assert updated["x"] == 5
        assert updated["_self"] == created["_self"]
        assert await memory_connector.count("Widget") == 1

    @pytest.mark.asyncio
    async def test_create_assigns_missing_id(self, memory_connector):
        created = await memory_connector.create("Widget", {"x": 1})

        assert created["id"]
        assert await memory_connector.count("Widget", {"x": 1}) == 1


    @pytest.mark.asyncio
    async def test_update_cannot_retag_or_rename(self, memory_connector):
        await memory_connector.create("Widget", {"id": "42", "x": 1})

        replaced = await memory_connector.update_attributes(
            "Widget", "42", {"type": "Gadget", "id": "99", "x": 2}
        )

        assert replaced["type"] == "Widget"
        assert replaced["id"] == "42"
        assert [d["x"] for d in await memory_connector.find("Widget", "42")] == [2]
        assert await memory_connector.find("Widget", "99") == []
        assert await memory_connector.count("Gadget") == 0

    @pytest.mark.asyncio
    async def test_upsert_cannot_retag(self, memory_connector):
        await memory_connector.create("Widget", {"id": "7", "x": 1})

        updated = await memory_connector.upsert("Widget", {"id": "7", "type": "Gadget"})

        assert updated["type"] == "Widget"
        assert await memory_connector.count("Widget") == 1


class TestCosmosClient:

    @pytest.fixture
    def container(self, settings, monkeypatch):
        """CosmosDocumentClient over a mocked SDK with one discovered container."""
        sdk = MagicMock()
        sdk.query_databases.return_value = [{"id": "MyDbId", "_self": "dbs/A/"}]
        database = sdk.get_database_client.return_value
        database.query_containers.return_value = [{"id": "MyCollId", "_self": "dbs/A/colls/B/"}]
        monkeypatch.setattr(cosmos, "CosmosClient", MagicMock(return_value=sdk))
        return database.get_container_client.return_value

    @pytest.mark.asyncio
    async def test_replace_targets_document_link(self, settings, container):
        client = CosmosDocumentClient(settings)
        await resolve(client, "MyDbId", "MyCollId")

        await client.replace_document("dbs/A/colls/B/docs/R42/", {"id": "99", "x": 2})

        item, body = container.replace_item.call_args.args
        assert item == {"_self": "dbs/A/colls/B/docs/R42/"}
        assert body == {"id": "99", "x": 2}

    @pytest.mark.asyncio
    async def test_unknown_collection_link(self, settings, container):
        client = CosmosDocumentClient(settings)

        with pytest.raises(ValueError, match="Unknown collection link"):
            await client.query_documents("dbs/A/colls/B/", build_query("Widget"))


class TestInitialize:

    @pytest.mark.asyncio
    async def test_attaches_connector_to_data_source(self):
        class DataSource:
            settings = {
                "host": "MyHost",
                "masterKey": "MyKey",
                "databaseId": "MyDbId",
                "collectionId": "MyCollId",
                "client": "mock",
            }

        ds = DataSource()
        connector = initialize(ds)

        assert ds.connector is connector
        assert connector.settings == DocumentDBSettings.from_mapping(DataSource.settings)
        await connector.connect()
        assert connector.connected
        client = connector.client
        connector.close()
        assert client.closed
        assert not connector.connected
