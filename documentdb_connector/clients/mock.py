"""
MockDocumentClient — in-memory document store for testing and offline use.

Accepts the same constructor signature as CosmosDocumentClient. Documents
get the metadata Cosmos would add (_rid, _self, _etag, _ts), and queries are
evaluated by matching every bound parameter against the field of the same
name, which is exactly what the equality-only query builder produces.

Everything handed out is a deep copy, like a round-trip over HTTP.
"""

from __future__ import annotations

import copy
import logging
import time
import uuid
from typing import Any, Iterable, Mapping

from azure.cosmos.exceptions import (
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from ..config import DocumentDBSettings
from ..query import Query
from .cosmos import collection_link_of

logger = logging.getLogger("documentdb-connector.mock")


def _matches(item: Mapping[str, Any], query: Query) -> bool:
    return all(
        item.get(p["name"].lstrip("@")) == p["value"]
        for p in query.parameters
    )


class MockDocumentClient:
    """In-memory DocumentClient.

    Args:
        settings: When given (and ``databases`` is not), the configured
            database and collection are pre-provisioned.
        databases: Explicit layout ``{database_id: [collection_id, ...]}``.
            Pass ``{}`` for an empty account.
    """

    def __init__(
        self,
        settings: DocumentDBSettings | None = None,
        *,
        databases: Mapping[str, Iterable[str]] | None = None,
    ):
        self._databases: dict[str, dict[str, Any]] = {}
        self._collections: dict[str, list[dict[str, Any]]] = {}
        self._documents: dict[str, dict[str, dict[str, Any]]] = {}
        self.closed = False

        if databases is None and settings is not None:
            databases = {settings.database_id: [settings.collection_id]}
        for db_id, coll_ids in (databases or {}).items():
            db_link = self.add_database(db_id)
            for coll_id in coll_ids:
                self.add_collection(db_link, coll_id)

    # -- provisioning --------------------------------------------------------

    def add_database(self, database_id: str) -> str:
        rid = uuid.uuid4().hex[:8]
        link = f"dbs/{rid}/"
        self._databases[link] = {"id": database_id, "_rid": rid, "_self": link}
        self._collections[link] = []
        return link

    def add_collection(self, database_link: str, collection_id: str) -> str:
        rid = uuid.uuid4().hex[:8]
        link = f"{database_link}colls/{rid}/"
        self._collections[database_link].append(
            {"id": collection_id, "_rid": rid, "_self": link}
        )
        self._documents[link] = {}
        return link

    # -- lookup ----------------------------------------------------------------

    async def query_databases(self, query: Query) -> list[dict[str, Any]]:
        return [copy.deepcopy(d) for d in self._databases.values() if _matches(d, query)]

    async def query_collections(self, database_link: str, query: Query) -> list[dict[str, Any]]:
        if database_link not in self._collections:
            raise CosmosResourceNotFoundError(status_code=404, message=f"Database {database_link} not found")
        return [copy.deepcopy(c) for c in self._collections[database_link] if _matches(c, query)]

    # -- documents -------------------------------------------------------------

    async def create_document(self, collection_link: str, document: dict[str, Any]) -> dict[str, Any]:
        docs = self._docs(collection_link)
        doc = copy.deepcopy(document)
        doc.setdefault("id", str(uuid.uuid4()))
        key = str(doc["id"])
        if key in docs:
            raise CosmosResourceExistsError(
                status_code=409, message=f"Entity with the specified id already exists: {key}"
            )
        rid = uuid.uuid4().hex[:8]
        doc["_rid"] = rid
        doc["_self"] = f"{collection_link}docs/{rid}/"
        self._stamp(doc)
        docs[key] = doc
        logger.debug("Mock created %s in %s", key, collection_link)
        return copy.deepcopy(doc)

    async def query_documents(self, collection_link: str, query: Query) -> list[dict[str, Any]]:
        return [copy.deepcopy(d) for d in self._docs(collection_link).values() if _matches(d, query)]

    async def replace_document(self, document_link: str, document: dict[str, Any]) -> dict[str, Any]:
        docs = self._docs(collection_link_of(document_link))
        for key, existing in docs.items():
            if existing["_self"] == document_link:
                doc = copy.deepcopy(document)
                doc["_rid"] = existing["_rid"]
                doc["_self"] = document_link
                self._stamp(doc)
                del docs[key]
                docs[str(doc["id"])] = doc
                return copy.deepcopy(doc)
        raise CosmosResourceNotFoundError(status_code=404, message=f"Document {document_link} not found")

    def close(self) -> None:
        self.closed = True

    # -- helpers ---------------------------------------------------------------

    def _docs(self, collection_link: str) -> dict[str, dict[str, Any]]:
        if collection_link not in self._documents:
            raise CosmosResourceNotFoundError(status_code=404, message=f"Collection {collection_link} not found")
        return self._documents[collection_link]

    @staticmethod
    def _stamp(doc: dict[str, Any]) -> None:
        doc["_etag"] = f'"{uuid.uuid4()}"'
        doc["_ts"] = int(time.time())
