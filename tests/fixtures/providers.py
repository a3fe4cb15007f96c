"""Fake provider clients for unit tests."""


class FakeEmbeddingProvider:
    """In-memory embedding provider recording every call.

    Args:
        dimensions: Dimension the provider claims to produce
        fail_on_call: 1-based batch call number that raises ValueError
        returned_dimensions: Length of the vectors actually returned
        healthy: Whether validate_services succeeds
    """

    def __init__(
        self,
        dimensions: int = 4,
        fail_on_call: int | None = None,
        returned_dimensions: int | None = None,
        healthy: bool = True,
    ) -> None:
        self.healthy = healthy
        self.expected_dimensions = dimensions
        self.fail_on_call = fail_on_call
        self.returned_dimensions = returned_dimensions or dimensions
        self.batch_calls: list[list[str]] = []
        self.single_calls: list[str] = []

    async def embed_single(self, text: str) -> list[float]:
        self.single_calls.append(text)
        return [0.5] * self.returned_dimensions

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        if self.fail_on_call == len(self.batch_calls):
            raise ValueError("Response count does not match request count")
        return [[float(i)] * self.returned_dimensions for i in range(len(texts))]

    async def validate_services(self) -> None:
        if not self.healthy:
            raise ValueError("TEI service health check failed: Connection refused")


class FakeCompletion:
    """Completion provider returning a canned answer and recording prompts."""

    def __init__(self, answer: str = "Paris is the capital of France (Source 1).") -> None:
        self.answer = answer
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        return self.answer
