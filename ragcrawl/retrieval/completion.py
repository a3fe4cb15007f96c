"""Chat completion provider backed by the OpenAI API."""

import logging

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class OpenAICompletionClient:
    """Async chat completion client.

    Works against api.openai.com or any OpenAI-compatible endpoint given via
    ``base_url``. Requests are attempted once.

    Args:
        api_key: API key for the provider
        model: Chat model name
        base_url: Optional OpenAI-compatible endpoint
        temperature: Sampling temperature
        max_tokens: Upper bound on completion length
        timeout: Request timeout in seconds
        client: Pre-built AsyncOpenAI client
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if client is None and not api_key:
            raise ValueError("OPENAI_API_KEY is required")

        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the assistant reply, or "" when the provider sent no text.

        Raises:
            openai.OpenAIError: If the request fails
        """
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.debug("Completion returned %d characters", len(content))
        return content

    async def close(self) -> None:
        await self.client.close()
