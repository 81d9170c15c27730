"""
Query builder — filter object -> parameterised Cosmos SQL.

build_query() is pure: it never logs, performs I/O or mutates its inputs,
so it can be tested by comparing literal input and output.

Only equality is supported. Filters that ask for more are rejected with
UnsupportedFilterError rather than silently narrowed:

  - top-level keys other than "where" (limit, skip, order, fields, ...)
  - operator clauses as values ({"gt": 3}, {"inq": [...]}, ...)
  - field names that are not plain identifiers (they end up in the query text)
  - a "type" field (reserved for the entity type predicate)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import UnsupportedFilterError
from .models import Filter

BASE_QUERY = "SELECT * FROM root r"
TYPE_FIELD = "type"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Query:
    """Query text plus its ordered named parameters."""

    query: str
    parameters: tuple[dict[str, Any], ...] = ()

    @property
    def text(self) -> str:
        return self.query

    def to_dict(self) -> dict[str, Any]:
        """Shape expected by the Cosmos SDK: {"query": ..., "parameters": [...]}."""
        return {
            "query": self.query,
            "parameters": [dict(p) for p in self.parameters],
        }


def _coerce_filter(filter: Filter | Mapping[str, Any] | None) -> Filter | None:
    if filter is None or isinstance(filter, Filter):
        return filter
    if not isinstance(filter, Mapping):
        raise UnsupportedFilterError(
            f"Filter must be a mapping, got {type(filter).__name__}"
        )

    extra = [k for k, v in filter.items() if k != "where" and v is not None]
    if extra:
        raise UnsupportedFilterError(
            f"Unsupported filter keys: {', '.join(map(str, extra))}. "
            "Only equality 'where' clauses are supported."
        )
    try:
        return Filter.model_validate({"where": filter.get("where")})
    except ValidationError as e:
        raise UnsupportedFilterError(f"Invalid filter: {e}") from e


def _check_field(key: str, value: Any) -> None:
    if not isinstance(key, str) or not _IDENTIFIER.match(key):
        raise UnsupportedFilterError(f"Unsupported field name in where clause: {key!r}")
    if key == TYPE_FIELD:
        raise UnsupportedFilterError(
            "'type' is reserved for the entity type and cannot be filtered on"
        )
    if isinstance(value, Mapping):
        ops = ", ".join(map(str, value))
        raise UnsupportedFilterError(
            f"Operator clauses are not supported (field {key!r}: {ops}); "
            "only equality is"
        )


def build_query(entity_type: str, filter: Filter | Mapping[str, Any] | None = None) -> Query:
    """Build the query selecting documents of ``entity_type`` matching ``filter``.

    Example:
        build_query("Widget", {"where": {"id": 42}})
        -> Query("SELECT * FROM root r WHERE r.type = @type AND r.id = @id",
                 ({"name": "@type", "value": "Widget"},
                  {"name": "@id", "value": 42}))
    """
    predicates = [f"r.{TYPE_FIELD} = @{TYPE_FIELD}"]
    parameters: list[dict[str, Any]] = [{"name": f"@{TYPE_FIELD}", "value": entity_type}]

    parsed = _coerce_filter(filter)
    if parsed is not None and parsed.where:
        for key, value in parsed.where.items():
            _check_field(key, value)
            predicates.append(f"r.{key} = @{key}")
            parameters.append({"name": f"@{key}", "value": value})

    return Query(
        query=f"{BASE_QUERY} WHERE {' AND '.join(predicates)}",
        parameters=tuple(parameters),
    )


def build_id_query(resource_id: str) -> Query:
    """Lookup by ``id`` for databases and collections (no type predicate)."""
    return Query(
        query=f"{BASE_QUERY} WHERE r.id = @id",
        parameters=({"name": "@id", "value": resource_id},),
    )
