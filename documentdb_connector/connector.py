"""
DocumentDBConnector — generic data-access verbs over a DocumentDB collection.

Every entity type shares one collection; documents are tagged with a
``type`` field on create and every read filters on it.

Lifecycle:
  connector = DocumentDBConnector(settings)
  await connector.connect()          # resolves database + collection once
  await connector.create("Widget", {"id": "42", "x": 1})
  ...
  await connector.disconnect()

Store errors propagate unchanged. Conditions the connector detects itself
are raised as ConnectorError subclasses (see errors.py).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .clients import DocumentClient, get_document_client
from .config import DocumentDBSettings
from .errors import NotConnectedError, NotFoundError, NotImplementedVerbError
from .models import Filter
from .query import Query, build_query
from .resolver import get_database, resolve

logger = logging.getLogger("documentdb-connector.connector")

CONNECTOR_NAME = "documentdb"
SUPPORTED_TYPES: tuple[str, ...] = ("db", "nosql", "documentdb")


class DocumentDBConnector:
    """Connector exposing create/find/all/count/update verbs for one collection."""

    name = CONNECTOR_NAME

    def __init__(
        self,
        settings: DocumentDBSettings | Mapping[str, Any],
        *,
        client: DocumentClient | None = None,
    ):
        if not isinstance(settings, DocumentDBSettings):
            settings = DocumentDBSettings.from_mapping(settings)
        settings.validate()
        self._settings = settings
        self._client = client
        self._owns_client = client is None
        self.database: str | None = None
        self.collection: str | None = None

    @property
    def settings(self) -> DocumentDBSettings:
        return self._settings

    @property
    def client(self) -> DocumentClient:
        """Document client, created from settings on first access."""
        if self._client is None:
            self._client = get_document_client(self._settings)
        return self._client

    @property
    def connected(self) -> bool:
        return self.collection is not None

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> str:
        """Resolve the configured database and collection.

        Returns the collection link. Raises NotFoundError when either is
        missing, leaving the connector unusable; client errors propagate.
        """
        if self.connected:
            return self.collection

        database, collection = await resolve(
            self.client,
            self._settings.database_id,
            self._settings.collection_id,
        )
        self.database = database
        self.collection = collection

        logger.info("DocumentDB connection is established! Host: %s", self._settings.host)
        logger.debug(
            "DB: %s | Collection: %s",
            self._settings.database_id,
            self._settings.collection_id,
        )
        return collection

    async def disconnect(self) -> None:
        """Nothing to release per call; the client stays usable."""

    def close(self) -> None:
        """Close the client and forget the resolved handles.

        A client built from settings is dropped and rebuilt on the next
        connect(); an injected client is closed but kept.
        """
        if self._client is not None:
            self._client.close()
        if self._owns_client:
            self._client = None
        self.database = None
        self.collection = None

    async def ping(self) -> bool:
        """Check the configured database is reachable. Does not touch handles."""
        database = await get_database(self.client, self._settings.database_id)
        if database is None:
            raise NotFoundError(
                f'Unknown "database" id "{self._settings.database_id}".',
                code="DATABASE_NOT_FOUND",
            )
        return True

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_types(self) -> tuple[str, ...]:
        return SUPPORTED_TYPES

    get_supported_types = get_types

    def get_default_id_type(self) -> type:
        return str

    def build_query(self, model: str, filter: Filter | Mapping[str, Any] | None = None) -> Query:
        return build_query(model, filter)

    # ------------------------------------------------------------------
    # CRUD verbs
    # ------------------------------------------------------------------

    async def create(self, model: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert ``data`` tagged with ``type = model``; returns the stored document."""
        collection = self._require_collection()
        document = {**data, "type": model}
        return await self.client.create_document(collection, document)

    async def find(self, model: str, id: Any) -> list[dict[str, Any]]:
        """Documents of ``model`` with the given id (a list, usually of 0 or 1)."""
        return await self._query(model, {"where": {"id": id}})

    async def all(
        self,
        model: str,
        filter: Filter | Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Documents of ``model`` matching an equality filter."""
        return await self._query(model, filter)

    async def count(self, model: str, where: Mapping[str, Any] | None = None) -> int:
        """Number of matching documents. Counted client-side."""
        results = await self._query(model, {"where": where})
        return len(results)

    async def update_attributes(
        self,
        model: str,
        id: Any,
        data: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Merge ``data`` into the stored document and replace it.

        ``id`` and ``type`` in ``data`` are ignored: the replace always targets
        the document that was found, under the same entity type.

        Raises:
            NotFoundError: code ENTITY_NOT_FOUND; nothing is written.
        """
        results = await self.find(model, id)
        if not results:
            raise NotFoundError(
                f'Unknown "{model}" id "{id}".',
                code="ENTITY_NOT_FOUND",
            )

        document = results[0]
        link = document["_self"]
        stored_id = document["id"]
        for key, value in data.items():
            document[key] = value
        # identity and type tag stay those of the looked-up document
        document["id"] = stored_id
        document["type"] = model

        return await self.client.replace_document(link, document)

    async def update_or_create(self, model: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Update the document with ``data["id"]`` if it exists, else create it."""
        id = data.get("id")
        if id is None:
            return await self.create(model, data)

        try:
            return await self.update_attributes(model, id, data)
        except NotFoundError:
            logger.debug("%s %s not found, creating", model, id)
            return await self.create(model, data)

    async def destroy_all(self, model: str, where: Mapping[str, Any] | None = None) -> int:
        logger.warning("DocumentDB.destroy_all is not implemented (model=%s)", model)
        raise NotImplementedVerbError("DocumentDB.destroy_all is not implemented")

    async def update(
        self,
        model: str,
        where: Mapping[str, Any] | None,
        data: Mapping[str, Any],
    ) -> int:
        logger.warning("DocumentDB.update is not implemented (model=%s)", model)
        raise NotImplementedVerbError("DocumentDB.update is not implemented")

    find_by_id = find
    find_all = all
    upsert = update_or_create
    delete_all = destroy_all
    bulk_update = update

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_collection(self) -> str:
        if self.collection is None:
            raise NotConnectedError(
                "DocumentDB connector is not connected; call connect() first"
            )
        return self.collection

    async def _query(
        self,
        model: str,
        filter: Filter | Mapping[str, Any] | None,
    ) -> list[dict[str, Any]]:
        collection = self._require_collection()
        query = build_query(model, filter)
        return await self.client.query_documents(collection, query)
