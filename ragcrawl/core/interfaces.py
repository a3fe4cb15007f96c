"""Core protocol definitions for ragcrawl providers.

Components receive provider clients through their constructors. These
protocols describe the narrow surface each component relies on, so tests can
pass fakes and deployments can swap implementations.
"""

from typing import Protocol


class EmbeddingProvider(Protocol):
    """Protocol for text embedding providers.

    Implemented by TEIClient.

    Attributes:
        expected_dimensions: Length of every vector the provider returns
    """

    expected_dimensions: int

    async def embed_single(self, text: str) -> list[float]:
        """Embed one text (query path)."""
        ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts, returning vectors in input order."""
        ...

    async def validate_services(self) -> None:
        """Raise ValueError if the provider is unreachable."""
        ...


class CompletionProvider(Protocol):
    """Protocol for chat completion providers.

    Implemented by OpenAICompletionClient.
    """

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the model's reply to a system + user prompt pair."""
        ...
