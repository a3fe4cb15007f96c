"""Error taxonomy shared by every ragcrawl component.

All failures that cross a component boundary are raised as ``RagCrawlError``
carrying an ``ErrorKind`` tag. Callers branch on ``error.kind`` rather than on
exception subclasses, and the HTTP layer maps each kind to a status code.

Example:
    >>> try:
    ...     raise not_found("Namespace 'docs' not found")
    ... except RagCrawlError as exc:
    ...     assert exc.kind is ErrorKind.NOT_FOUND
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by the core."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM = "UPSTREAM"
    INTERNAL = "INTERNAL"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.INTERNAL: 500,
}


class RagCrawlError(Exception):
    """Tagged error raised by core components.

    Attributes:
        kind: Failure category
        message: Human-readable summary, safe to show to clients
        details: Structured payload (offending fields, provider diagnostic)
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"RagCrawlError(kind={self.kind.value}, message={self.message!r})"


def validation_error(message: str, fields: list[str] | None = None) -> RagCrawlError:
    """Build a VALIDATION error naming the offending fields."""
    return RagCrawlError(ErrorKind.VALIDATION, message, {"fields": fields or []})


def not_found(message: str) -> RagCrawlError:
    return RagCrawlError(ErrorKind.NOT_FOUND, message)


def upstream_error(message: str, cause: BaseException | None = None) -> RagCrawlError:
    """Build an UPSTREAM error wrapping a provider failure.

    Args:
        message: Generic summary of the failed provider operation
        cause: Original provider exception, kept as diagnostic text

    Returns:
        RagCrawlError of kind UPSTREAM
    """
    details: dict[str, Any] = {}
    if cause is not None:
        details["diagnostic"] = f"{type(cause).__name__}: {cause}"
    return RagCrawlError(ErrorKind.UPSTREAM, message, details)


def internal_error(message: str) -> RagCrawlError:
    return RagCrawlError(ErrorKind.INTERNAL, message)
