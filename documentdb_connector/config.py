"""
Configuration — connector settings and environment variable loading.

Settings are built once and frozen; the connector only ever reads them.
Two sources are supported:

  - a framework settings mapping (camelCase keys, as a datasource passes them)
  - DOCUMENTDB_* environment variables, optionally seeded from a .env file
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from dotenv import load_dotenv

from .errors import ConfigValidationError

DEFAULT_CLIENT_TYPE = "cosmosdb-nosql"

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_HOST = "DOCUMENTDB_HOST"
ENV_MASTER_KEY = "DOCUMENTDB_MASTER_KEY"
ENV_DATABASE_ID = "DOCUMENTDB_DATABASE_ID"
ENV_COLLECTION_ID = "DOCUMENTDB_COLLECTION_ID"
ENV_CLIENT_TYPE = "DOCUMENTDB_CLIENT"

REQUIRED_FIELDS: tuple[str, ...] = ("host", "master_key", "database_id", "collection_id")

# framework key -> settings field
_MAPPING_ALIASES = {
    "host": "host",
    "masterKey": "master_key",
    "master_key": "master_key",
    "databaseId": "database_id",
    "database_id": "database_id",
    "collectionId": "collection_id",
    "collection_id": "collection_id",
    "client": "client_type",
    "client_type": "client_type",
}


@dataclass(frozen=True)
class DocumentDBSettings:
    """Immutable connection settings for one connector instance."""

    host: str = ""
    master_key: str = field(default="", repr=False)
    database_id: str = ""
    collection_id: str = ""
    client_type: str = DEFAULT_CLIENT_TYPE

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any] | None) -> DocumentDBSettings:
        """Build settings from a datasource settings mapping.

        Unknown keys (connector name, debug flags, ...) are ignored.
        """
        values: dict[str, Any] = {}
        for key, value in (settings or {}).items():
            name = _MAPPING_ALIASES.get(key)
            if name is not None and value is not None:
                values[name] = value
        return cls(**values)

    @classmethod
    def from_env(cls, env_file: str | os.PathLike | None = None) -> DocumentDBSettings:
        """Build settings from DOCUMENTDB_* env vars.

        If ``env_file`` is given it is loaded first; variables already set in
        the process environment win.
        """
        if env_file is not None:
            load_dotenv(env_file)
        return cls(
            host=os.getenv(ENV_HOST, ""),
            master_key=os.getenv(ENV_MASTER_KEY, ""),
            database_id=os.getenv(ENV_DATABASE_ID, ""),
            collection_id=os.getenv(ENV_COLLECTION_ID, ""),
            client_type=os.getenv(ENV_CLIENT_TYPE, DEFAULT_CLIENT_TYPE) or DEFAULT_CLIENT_TYPE,
        )

    def validate(self) -> None:
        """Raise ConfigValidationError listing every missing required field."""
        errors = [
            f"missing required setting '{name}'"
            for name in REQUIRED_FIELDS
            if not getattr(self, name)
        ]
        if not self.client_type:
            errors.append("'client_type' must not be empty")
        if errors:
            raise ConfigValidationError(errors)
