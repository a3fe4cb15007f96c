"""Input validation shared by services, the HTTP API and the CLI."""

import re

from ragcrawl.core.errors import validation_error

INDEX_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
NAMESPACE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

MAX_INDEX_NAME_LENGTH = 45
MAX_NAMESPACE_LENGTH = 100
MAX_QUERY_LENGTH = 1000
MIN_TOP_K = 1
MAX_TOP_K = 20


def validate_index_name(index_name: str) -> str:
    if (
        not index_name
        or len(index_name) > MAX_INDEX_NAME_LENGTH
        or not INDEX_NAME_PATTERN.fullmatch(index_name)
    ):
        raise validation_error(
            "Index name must be 1-45 characters of lowercase letters, digits or hyphens",
            ["index_name"],
        )
    return index_name


def validate_namespace(namespace: str) -> str:
    if (
        not namespace
        or len(namespace) > MAX_NAMESPACE_LENGTH
        or not NAMESPACE_PATTERN.fullmatch(namespace)
    ):
        raise validation_error(
            "Namespace must be 1-100 characters of letters, digits, '_' or '-'",
            ["namespace"],
        )
    return namespace


def validate_query(query: str) -> str:
    if not query or not query.strip():
        raise validation_error("Query cannot be empty", ["query"])
    if len(query) > MAX_QUERY_LENGTH:
        raise validation_error(
            f"Query cannot exceed {MAX_QUERY_LENGTH} characters", ["query"]
        )
    return query


def validate_top_k(top_k: int) -> int:
    if not MIN_TOP_K <= top_k <= MAX_TOP_K:
        raise validation_error(
            f"top_k must be between {MIN_TOP_K} and {MAX_TOP_K}", ["top_k"]
        )
    return top_k


def validate_chunk_window(chunk_size: int, chunk_overlap: int) -> None:
    if chunk_size <= 0:
        raise validation_error("chunk_size must be positive", ["chunk_size"])
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise validation_error(
            "chunk_overlap must be non-negative and smaller than chunk_size",
            ["chunk_overlap"],
        )
