"""Answer synthesis from retrieved context.

Retrieves the top matches for a question, formats them as numbered sources,
and asks the completion provider for an answer that cites them as
``(Source N)``.
"""

import logging
import time
from typing import Any

import openai

from ragcrawl.core.errors import not_found, upstream_error
from ragcrawl.core.interfaces import CompletionProvider
from ragcrawl.core.metadata import MetadataKeys
from ragcrawl.retrieval.models import RAGAnswer
from ragcrawl.retrieval.retriever import Retriever
from ragcrawl.storage.models import RankedMatch

logger = logging.getLogger(__name__)

SOURCE_SEPARATOR = "\n\n---\n\n"

SYSTEM_PROMPT = """You are a helpful assistant that answers questions using only the provided context from a crawled knowledge base.

Instructions:
- Answer using only information found in the context below
- Cite the sources you use in the form (Source X), where X is the source number
- If the context does not contain the answer, say that you could not find it in the knowledge base
- Be accurate and concise, and do not invent facts that are not in the context"""

USER_PROMPT_TEMPLATE = """Context:
{context}

Question: {query}

Answer the question using only the context above and cite your sources."""


def format_context(sources: list[RankedMatch]) -> str:
    """Render sources as numbered context blocks.

    Each block reads ``[Source N] <title> — <section>``, then the URL and the
    content. Blocks are joined with a ``---`` separator line.
    """
    blocks: list[str] = []
    for number, source in enumerate(sources, 1):
        metadata = source.metadata
        label = f"[Source {number}] {metadata.get(MetadataKeys.TITLE, 'Untitled')}"
        section = metadata.get(MetadataKeys.SECTION)
        if section:
            label = f"{label} — {section}"
        blocks.append(
            f"{label}\n"
            f"URL: {metadata.get(MetadataKeys.URL, '')}\n"
            f"Content: {metadata.get(MetadataKeys.CONTENT, '')}"
        )
    return SOURCE_SEPARATOR.join(blocks)


def compute_confidence(sources: list[RankedMatch]) -> float:
    """Mean source score scaled to a percentage and clamped to [0, 100]."""
    if not sources:
        return 0.0
    mean_score = sum(source.score for source in sources) / len(sources)
    return max(0.0, min(100.0, mean_score * 100))


class AnswerSynthesizer:
    """Answers questions from a namespace's stored content.

    Args:
        retriever: Retriever for the knowledge base
        completion: Chat completion provider
    """

    def __init__(self, retriever: Retriever, completion: CompletionProvider) -> None:
        self.retriever = retriever
        self.completion = completion

    async def answer(
        self,
        query: str,
        namespace: str,
        top_k: int = 5,
        metadata_filter: dict[str, Any] | None = None,
        index: str | None = None,
    ) -> RAGAnswer:
        """Retrieve context and synthesize a cited answer.

        Raises:
            RagCrawlError: NOT_FOUND when nothing relevant or usable was
                retrieved, UPSTREAM when a provider fails or the completion is
                empty, VALIDATION for bad input
        """
        start_time = time.monotonic()
        result = await self.retriever.search(
            query, namespace, top_k=top_k, metadata_filter=metadata_filter, index=index
        )

        if not result.matches:
            raise not_found("No relevant information found in the knowledge base")

        sources = [m for m in result.matches if m.metadata.get(MetadataKeys.CONTENT)]
        if not sources:
            raise not_found("No usable content found in search results")

        user_prompt = USER_PROMPT_TEMPLATE.format(
            context=format_context(sources), query=query
        )

        try:
            answer = await self.completion.complete(SYSTEM_PROMPT, user_prompt)
        except openai.OpenAIError as exc:
            logger.error("Completion request failed: %s", exc)
            raise upstream_error("Failed to generate answer", exc) from exc

        if not answer or not answer.strip():
            raise upstream_error("Completion provider returned an empty answer")

        duration = time.monotonic() - start_time
        logger.info(
            "Answered query in %s from %d sources in %.2fs",
            namespace,
            len(sources),
            duration,
        )
        return RAGAnswer(
            answer=answer,
            sources=sources,
            confidence=compute_confidence(sources),
            namespace=namespace,
            query=query,
            duration=duration,
        )
