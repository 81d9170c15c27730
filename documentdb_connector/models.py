"""
Pydantic models for the filter shape accepted from the calling framework.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class Filter(BaseModel):
    """Equality-only filter: ``{"where": {field: value, ...}}``.

    Anything beyond ``where`` (limit, skip, order, fields, ...) is rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    where: dict[str, Any] | None = None
