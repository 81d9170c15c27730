"""
DocumentClient — the document store capabilities the connector consumes.

Provides:
  - DocumentClient Protocol (abstract interface)
  - Registry + factory function (get_document_client)
  - Auto-registers CosmosDocumentClient and MockDocumentClient on import

Usage:
    from documentdb_connector.clients import get_document_client

    client = get_document_client(settings)
    dbs = await client.query_databases(build_id_query("mydb"))

Handles are self-links: a database handle is the database's ``_self``, a
collection handle the collection's ``_self`` and a document handle the
document's ``_self``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..config import DocumentDBSettings
from ..query import Query


@runtime_checkable
class DocumentClient(Protocol):
    """Store operations used by the connector. All I/O methods are async."""

    async def create_document(
        self,
        collection_link: str,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        """Insert a document and return it as stored (with metadata)."""
        ...

    async def query_documents(
        self,
        collection_link: str,
        query: Query,
    ) -> list[dict[str, Any]]:
        """Run a parameterised query against a collection."""
        ...

    async def replace_document(
        self,
        document_link: str,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        """Replace the document at ``document_link`` and return the stored copy."""
        ...

    async def query_databases(self, query: Query) -> list[dict[str, Any]]:
        """Query database descriptors on the account."""
        ...

    async def query_collections(
        self,
        database_link: str,
        query: Query,
    ) -> list[dict[str, Any]]:
        """Query collection descriptors under a database."""
        ...

    def close(self) -> None:
        """Release connections held by the client."""
        ...


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_document_client_registry: dict[str, type] = {}


def register_document_client(name: str, cls: type) -> None:
    """Register a DocumentClient implementation by name."""
    _document_client_registry[name] = cls


def get_document_client(
    settings: DocumentDBSettings,
    *,
    client_type: str | None = None,
) -> DocumentClient:
    """Factory that returns the DocumentClient selected by ``settings.client_type``.

    Args:
        settings: Connector settings (host, master key, ...).
        client_type: Override the client type. Must match a registered name.
    """
    ct = client_type or settings.client_type
    if ct not in _document_client_registry:
        raise ValueError(
            f"Unknown document client: {ct}. "
            f"Available: {list(_document_client_registry)}"
        )
    return _document_client_registry[ct](settings)


# ---------------------------------------------------------------------------
# Auto-register at module load
# ---------------------------------------------------------------------------

from .cosmos import CosmosDocumentClient  # noqa: E402
from .mock import MockDocumentClient  # noqa: E402

register_document_client("cosmosdb-nosql", CosmosDocumentClient)
register_document_client("mock", MockDocumentClient)

__all__ = [
    "CosmosDocumentClient",
    "DocumentClient",
    "MockDocumentClient",
    "get_document_client",
    "register_document_client",
]
