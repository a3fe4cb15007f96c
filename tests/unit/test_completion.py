"""Unit tests for the OpenAI completion client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from ragcrawl.retrieval.completion import OpenAICompletionClient


def _client(response: object) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


class TestOpenAICompletionClient:
    def test_requires_key_or_client(self) -> None:
        with pytest.raises(ValueError, match="OPENAI_API_KEY is required"):
            OpenAICompletionClient()

    @pytest.mark.asyncio
    async def test_complete_sends_system_and_user_messages(self) -> None:
        client = _client(
            SimpleNamespace(
                choices=[SimpleNamespace(message=SimpleNamespace(content="Answer (Source 1)"))]
            )
        )
        completion = OpenAICompletionClient(model="gpt-4o-mini", client=client)

        answer = await completion.complete("be precise", "Context: ...")

        assert answer == "Answer (Source 1)"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]
        assert kwargs["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_no_choices_returns_empty_text(self) -> None:
        completion = OpenAICompletionClient(client=_client(SimpleNamespace(choices=[])))

        assert await completion.complete("s", "u") == ""
