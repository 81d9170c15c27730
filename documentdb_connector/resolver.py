"""
Connection resolver — database/collection ids -> self-link handles.

Two sequential lookups through the document client. A failed lookup
propagates the client's error unchanged; a lookup that succeeds with zero
results raises NotFoundError so callers can tell "absent" from "broken".
"""

from __future__ import annotations

import logging

from .clients import DocumentClient
from .errors import NotFoundError
from .query import build_id_query

logger = logging.getLogger("documentdb-connector.resolver")


async def get_database(client: DocumentClient, database_id: str) -> dict | None:
    """Return the first database descriptor with ``id == database_id``, or None."""
    results = await client.query_databases(build_id_query(database_id))
    return results[0] if results else None


async def get_collection(client: DocumentClient, database_link: str, collection_id: str) -> dict | None:
    """Return the first collection descriptor under ``database_link``, or None."""
    results = await client.query_collections(database_link, build_id_query(collection_id))
    return results[0] if results else None


async def resolve(
    client: DocumentClient,
    database_id: str,
    collection_id: str,
) -> tuple[str, str]:
    """Resolve ids to ``(database_link, collection_link)``.

    Raises:
        NotFoundError: code DATABASE_NOT_FOUND or COLLECTION_NOT_FOUND.
    """
    database = await get_database(client, database_id)
    if database is None:
        logger.debug("Cannot find database with id: %s", database_id)
        raise NotFoundError(
            f'Unknown "database" id "{database_id}".',
            code="DATABASE_NOT_FOUND",
        )

    collection = await get_collection(client, database["_self"], collection_id)
    if collection is None:
        logger.debug("Cannot find collection with id: %s", collection_id)
        raise NotFoundError(
            f'Unknown "collection" id "{collection_id}".',
            code="COLLECTION_NOT_FOUND",
        )

    return database["_self"], collection["_self"]
