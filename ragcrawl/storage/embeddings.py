"""HTTP client for a Text Embeddings Inference (TEI) server.

Texts are posted to ``{endpoint}/embed``; TEI answers with one vector per
input, in input order. Each request is attempted once: transport and HTTP
status failures propagate as ``httpx.HTTPError`` and malformed responses as
``ValueError``, leaving the caller to decide how to report them.

Example:
    >>> tei = TEIClient("http://ragcrawl-embeddings:80", dimensions=1024)
    >>> vector = await tei.embed_single("Hello world")
    >>> vectors = await tei.embed_batch(["first text", "second text"])
"""

from typing import Any

import httpx

# Shorter than the embed timeout; health checks should answer fast
HEALTH_CHECK_TIMEOUT = 5.0


def parse_embeddings(payload: Any, expected_count: int) -> list[list[float]]:
    """Check a TEI ``/embed`` response body and return its vectors.

    Raises:
        ValueError: If the body is not a non-empty list of non-empty vectors,
            or holds a different number of vectors than were requested
    """
    if not isinstance(payload, list) or not payload:
        raise ValueError("Invalid response structure")
    if len(payload) != expected_count:
        raise ValueError("Response count does not match request count")
    if any(not isinstance(vector, list) or not vector for vector in payload):
        raise ValueError("Invalid response structure")
    return payload


class TEIClient:
    """Embedding provider backed by a TEI server.

    Args:
        endpoint_url: Base URL of the TEI server
        dimensions: Vector size the served model produces
        timeout: Per-request timeout in seconds
        batch_size_limit: Most texts accepted by one ``embed_batch`` call
        truncate: Ask TEI to truncate inputs longer than the model window
        client: Shared HTTP client; a short-lived one is opened per request
            when omitted
    """

    def __init__(
        self,
        endpoint_url: str,
        dimensions: int = 1024,
        timeout: float = 30.0,
        batch_size_limit: int = 100,
        truncate: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not endpoint_url or not endpoint_url.startswith(("http://", "https://")):
            raise ValueError("Invalid endpoint URL")
        if batch_size_limit <= 0:
            raise ValueError("Batch size limit must be positive")

        self.endpoint_url = endpoint_url.rstrip("/")
        self.expected_dimensions = dimensions
        self.timeout = timeout
        self.batch_size_limit = batch_size_limit
        self.truncate = truncate
        self._client = client

    async def embed_single(self, text: str) -> list[float]:
        """Embed one text.

        Raises:
            ValueError: If text is empty or the response is malformed
            httpx.HTTPError: If the request fails
        """
        if not text:
            raise ValueError("Text cannot be empty")
        vectors = await self._embed([text])
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in one request, preserving input order.

        Raises:
            ValueError: If the batch is empty or over ``batch_size_limit``, or
                the response is malformed
            httpx.HTTPError: If the request fails
        """
        if not texts:
            raise ValueError("Batch cannot be empty")
        if len(texts) > self.batch_size_limit:
            raise ValueError(f"Batch size exceeds limit of {self.batch_size_limit}")
        return await self._embed(texts)

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        if self._client is not None:
            response = await self._send(self._client, texts)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._send(client, texts)

        try:
            payload = response.json()
        except ValueError as e:
            raise ValueError("Invalid JSON") from e
        return parse_embeddings(payload, len(texts))

    async def _send(self, client: httpx.AsyncClient, texts: list[str]) -> httpx.Response:
        response = await client.post(
            f"{self.endpoint_url}/embed",
            json={"inputs": texts, "truncate": self.truncate},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    async def validate_services(self) -> None:
        """Check that the TEI server answers its health endpoint.

        Raises:
            ValueError: If the health check fails
        """
        try:
            if self._client is not None:
                await self._check_health(self._client)
            else:
                async with httpx.AsyncClient() as client:
                    await self._check_health(client)
        except httpx.HTTPError as exc:
            msg = f"TEI service health check failed: {exc}"
            raise ValueError(msg) from exc

    async def _check_health(self, client: httpx.AsyncClient) -> None:
        response = await client.get(
            f"{self.endpoint_url}/health", timeout=HEALTH_CHECK_TIMEOUT
        )
        response.raise_for_status()
