"""Configuration module for the ragcrawl service.

Provides Pydantic-based configuration management with environment variable support
and field validation.

Example:
    >>> from ragcrawl.core.config import Settings
    >>> settings = Settings()
    >>> print(settings.index_name)
    'ragcrawl'
"""

import logging
import os
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_in_docker() -> bool:
    """Detect if code is running inside a Docker container.

    Checks for Docker-specific files and environment markers.

    Returns:
        True if running inside Docker container, False otherwise.
    """
    if Path("/.dockerenv").exists():
        return True

    try:
        with Path("/proc/1/cgroup").open() as f:
            return "docker" in f.read()
    except (FileNotFoundError, PermissionError):
        pass

    return os.getenv("RUN_IN_DOCKER", "").lower() in ("true", "1", "yes")


class Settings(BaseSettings):
    """ragcrawl service configuration.

    Environment-aware configuration that automatically uses:
    - Docker network URLs when running inside containers
    - Localhost URLs when running on host machine (CLI)

    Attributes:
        environment: Deployment environment (development, production, test)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to rotating log file
        tei_endpoint: Text Embeddings Inference service endpoint
        tei_model_name: TEI embedding model name, reported in ingestion results
        embedding_dimensions: Dimension of vectors produced by the TEI model
        embedding_batch_size: Chunks per embedding request
        embedding_batch_delay: Seconds to wait between embedding requests
        qdrant_url: Qdrant vector database URL
        qdrant_api_key: Optional Qdrant API key
        index_name: Default Qdrant collection for stored vectors
        default_namespace: Namespace used when a request names none
        upsert_batch_size: Records per Qdrant upsert
        upsert_batch_delay: Seconds to wait between upserts
        metadata_content_limit: Characters of chunk text kept in the payload
        openai_api_key: API key for the completion provider
        openai_base_url: Optional base URL of an OpenAI-compatible endpoint
        completion_model: Chat model used to synthesize answers
        crawl_*: Crawler defaults applied when a request omits a value
        chunk_size: Default chunk window in whitespace tokens
        chunk_overlap: Default overlap between consecutive windows
        api_key: Optional key required by the HTTP API (X-API-Key header)

    Raises:
        ValidationError: If values are invalid

    Example:
        >>> settings = Settings(chunk_size=500, chunk_overlap=50)
        >>> print(settings.embedding_batch_size)
        100
    """

    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_file: Path = Path(".cache/ragcrawl.log")

    # Embedding provider (will be set by model_validator based on environment)
    tei_endpoint: str = ""
    tei_model_name: str = "Qwen/Qwen3-Embedding-0.6B"
    embedding_dimensions: int = 1024
    embedding_batch_size: int = 100
    embedding_batch_delay: float = 1.0

    # Vector index provider
    qdrant_url: str = ""
    qdrant_api_key: str | None = None
    index_name: str = "ragcrawl"
    default_namespace: str = "default"
    upsert_batch_size: int = 100
    upsert_batch_delay: float = 0.5
    metadata_content_limit: int = 40000

    # Completion provider
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    completion_model: str = "gpt-4o-mini"

    # Crawler defaults
    crawl_max_depth: int = 3
    crawl_max_pages: int = 50
    crawl_delay_ms: int = 1000
    crawl_timeout: float = 30.0
    crawl_max_concurrent: int = 3
    crawl_user_agent: str = "ragcrawl/0.1 (+https://github.com/ragcrawl/ragcrawl)"

    # Chunking defaults
    chunk_size: int = 1000
    chunk_overlap: int = 200

    # HTTP API
    api_key: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @model_validator(mode="after")
    def set_environment_aware_defaults(self) -> "Settings":
        """Set service URLs based on environment if not explicitly configured.

        Returns:
            Settings instance with environment-aware URLs.
        """
        in_docker = is_running_in_docker()

        if not self.qdrant_url:
            self.qdrant_url = (
                "http://ragcrawl-vectors:6333"
                if in_docker
                else "http://localhost:6333"
            )

        if not self.tei_endpoint:
            self.tei_endpoint = (
                "http://ragcrawl-embeddings:80"
                if in_docker
                else "http://localhost:8080"
            )

        return self

    @model_validator(mode="after")
    def validate_chunk_window(self) -> "Settings":
        """Validate that the default overlap is smaller than the window.

        A window step of ``chunk_size - chunk_overlap`` must stay positive or
        the chunker would never advance.

        Raises:
            ValueError: If chunk_overlap >= chunk_size
        """
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self

    @field_validator("environment")
    @classmethod
    def validate_environment(cls: type["Settings"], v: str) -> str:
        v = v.lower()
        if v not in ("development", "production", "test"):
            raise ValueError(
                "environment must be one of: development, production, test"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls: type["Settings"], v: str) -> str:
        """Validate log level is a known logging level name.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Log level name

        Returns:
            Upper-cased log level name

        Raises:
            ValueError: If the level name is unknown
        """
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator(
        "embedding_batch_size",
        "upsert_batch_size",
        "crawl_max_concurrent",
        "embedding_dimensions",
        "chunk_size",
    )
    @classmethod
    def validate_positive(cls: type["Settings"], v: int) -> int:
        """Validate batch sizes, concurrency and dimensions are positive.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Value to check

        Returns:
            Validated value

        Raises:
            ValueError: If value is not positive
        """
        # A zero batch or worker count would never make progress
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("chunk_overlap")
    @classmethod
    def validate_chunk_overlap(cls: type["Settings"], v: int) -> int:
        if v < 0:
            raise ValueError("chunk_overlap cannot be negative")
        return v
