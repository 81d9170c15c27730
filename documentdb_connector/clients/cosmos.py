"""
CosmosDocumentClient — azure-cosmos implementation of DocumentClient.

Wraps the synchronous CosmosClient and offloads every call with
asyncio.to_thread() for non-blocking access. Database and container proxies
are cached by self-link as they are discovered, so the connector can keep
working with the opaque links returned from lookups.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from azure.cosmos import ContainerProxy, CosmosClient, DatabaseProxy

from ..config import DocumentDBSettings
from ..query import Query

logger = logging.getLogger("documentdb-connector.cosmos")


def collection_link_of(document_link: str) -> str:
    """'dbs/A/colls/B/docs/C/' -> 'dbs/A/colls/B/'."""
    head, sep, _ = document_link.partition("docs/")
    if not sep:
        raise ValueError(f"Not a document link: {document_link!r}")
    return head


class CosmosDocumentClient:
    """Cosmos NoSQL implementation of DocumentClient (master-key auth)."""

    def __init__(self, settings: DocumentDBSettings):
        self._client = CosmosClient(url=settings.host, credential=settings.master_key)
        self._databases: dict[str, DatabaseProxy] = {}
        self._containers: dict[str, ContainerProxy] = {}

    # -- lookup ------------------------------------------------------------

    async def query_databases(self, query: Query) -> list[dict[str, Any]]:
        def _query():
            results = list(self._client.query_databases(**query.to_dict()))
            for db in results:
                self._databases[db["_self"]] = self._client.get_database_client(db["id"])
            return results

        return await asyncio.to_thread(_query)

    async def query_collections(self, database_link: str, query: Query) -> list[dict[str, Any]]:
        database = self._database(database_link)

        def _query():
            results = list(database.query_containers(**query.to_dict()))
            for coll in results:
                self._containers[coll["_self"]] = database.get_container_client(coll["id"])
            return results

        return await asyncio.to_thread(_query)

    # -- documents ---------------------------------------------------------

    async def create_document(self, collection_link: str, document: dict[str, Any]) -> dict[str, Any]:
        container = self._container(collection_link)
        return await asyncio.to_thread(
            container.create_item,
            document,
            enable_automatic_id_generation="id" not in document,
        )

    async def query_documents(self, collection_link: str, query: Query) -> list[dict[str, Any]]:
        container = self._container(collection_link)
        logger.debug("query_documents %s params=%d", query.query, len(query.parameters))
        return await asyncio.to_thread(
            lambda: list(
                container.query_items(
                    **query.to_dict(),
                    enable_cross_partition_query=True,
                )
            )
        )

    async def replace_document(self, document_link: str, document: dict[str, Any]) -> dict[str, Any]:
        container = self._container(collection_link_of(document_link))
        # a mapping item is addressed by its _self link, not by the body's id
        return await asyncio.to_thread(
            container.replace_item, {"_self": document_link}, document
        )

    def close(self) -> None:
        self._client.close()

    # -- helpers -----------------------------------------------------------

    def _database(self, link: str) -> DatabaseProxy:
        try:
            return self._databases[link]
        except KeyError:
            raise ValueError(f"Unknown database link {link!r}; query_databases() first") from None

    def _container(self, link: str) -> ContainerProxy:
        try:
            return self._containers[link]
        except KeyError:
            raise ValueError(f"Unknown collection link {link!r}; query_collections() first") from None
