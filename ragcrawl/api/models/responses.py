"""Response models for API endpoints.

Every endpoint except ``/health`` answers with an ``ApiResponse`` envelope.
Core dataclasses are rendered with camelCase keys by ``to_payload``.

Example:
    >>> ApiResponse(success=True, message="Crawl completed", data=to_payload(result))
"""

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Current health status ('healthy' or 'unhealthy')
        version: Package version
    """

    status: str
    version: str


class ApiResponse(BaseModel):
    success: bool
    message: str
    data: Any = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str
    fields: list[str] | None = None


def to_payload(value: Any) -> Any:
    """Convert core results to JSON-ready values.

    Dataclass field names become camelCase; keys of plain dicts (payload
    metadata) are kept as stored.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            to_camel(f.name): to_payload(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
