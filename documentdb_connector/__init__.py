"""
documentdb_connector — DocumentDB / Cosmos DB NoSQL connector for a generic
data-access framework.

Usage:
    from documentdb_connector import initialize

    connector = initialize(data_source)   # reads data_source.settings
    await connector.connect()
"""

from __future__ import annotations

from typing import Any

from .config import DocumentDBSettings
from .connector import DocumentDBConnector
from .errors import (
    ConfigValidationError,
    ConnectorError,
    NotConnectedError,
    NotFoundError,
    NotImplementedVerbError,
    UnsupportedFilterError,
)
from .models import Filter
from .query import Query, build_query


def initialize(data_source: Any, *, client=None) -> DocumentDBConnector:
    """Create a connector from ``data_source.settings`` and attach it.

    The data source is any object with a ``settings`` mapping; the
    connector is stored on ``data_source.connector`` and returned.
    """
    settings = getattr(data_source, "settings", None) or {}
    connector = DocumentDBConnector(settings, client=client)
    data_source.connector = connector
    return connector


__all__ = [
    "ConfigValidationError",
    "ConnectorError",
    "DocumentDBConnector",
    "DocumentDBSettings",
    "Filter",
    "NotConnectedError",
    "NotFoundError",
    "NotImplementedVerbError",
    "Query",
    "UnsupportedFilterError",
    "build_query",
    "initialize",
]
