"""Optional rewrite of the guide's overview summary by a chat model.

This is strictly cosmetic: the rewrite only replaces the summary when the
model answers with usable text, and any failure keeps the original guide.
"""
from __future__ import annotations

import logging
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel

from travel_guide.core.config import ApiSettings
from travel_guide.core.schemas import TravelGuide

logger = logging.getLogger(__name__)

MIN_SOURCE_LENGTH = 20
MIN_REWRITE_LENGTH = 50
MAX_SOURCE_CHARS = 6000

overview_summary_prompt = """You are a travel writer. Based on the following data about {destination}, write a compelling 2-3 sentence overview summary that captures the essence of this destination. Be specific and evocative.

Data: {context}

Write ONLY the summary paragraph, nothing else:"""


class SummaryRewriter:
    """Rewrites ``guide.overview.summary`` with a chat model, best effort."""

    def __init__(self, llm: BaseChatModel) -> None:
        self.llm = llm

    async def rewrite(self, destination: str, summary: str) -> Optional[str]:
        """Return the rewritten summary, or ``None`` if it should be left alone."""

        if len(summary.strip()) < MIN_SOURCE_LENGTH:
            return None
        prompt = overview_summary_prompt.format(destination=destination, context=summary[:MAX_SOURCE_CHARS])
        try:
            response = await self.llm.ainvoke(prompt)
        except Exception as exc:
            logger.warning("Summary rewrite failed for %s: %s", destination, exc)
            return None

        content = getattr(response, "content", response)
        text = content.strip() if isinstance(content, str) else ""
        if len(text) < MIN_REWRITE_LENGTH:
            logger.info("Summary rewrite for %s too short, keeping original", destination)
            return None
        return text

    async def enrich(self, guide: TravelGuide) -> TravelGuide:
        """Return a copy of ``guide`` with the rewritten summary, or ``guide`` unchanged."""

        rewritten = await self.rewrite(guide.destination, guide.overview.summary)
        if rewritten is None:
            return guide
        overview = guide.overview.model_copy(update={"summary": rewritten})
        return guide.model_copy(update={"overview": overview})


def create_summary_rewriter(settings: ApiSettings) -> Optional[SummaryRewriter]:
    """Build the rewriter when a key is configured and the feature is enabled."""

    if not settings.ai_summary_available:
        return None

    from langchain_openai import ChatOpenAI

    llm = ChatOpenAI(
        model=settings.openai_model,
        temperature=0.7,
        api_key=settings.ensure("openai_api_key"),
        base_url=settings.openai_base_url,
        timeout=30,
        max_retries=1,
    )
    return SummaryRewriter(llm)
