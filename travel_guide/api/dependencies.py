from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from travel_guide.core.config import ApiSettings
from travel_guide.core.enrichment import SummaryRewriter, create_summary_rewriter
from travel_guide.tools.registry import ToolRegistry, create_tool_registry
from travel_guide.tools.research import ResearchToolkit, create_research_toolkit
from travel_guide.workflows.research import ResearchOrchestrator


class ResearchService:
    """Process-wide container for the toolkit, tool registry and orchestrator."""

    def __init__(self, settings: ApiSettings) -> None:
        self.settings = settings
        self.toolkit: ResearchToolkit = create_research_toolkit(settings)
        self.registry: ToolRegistry = create_tool_registry(self.toolkit)
        self.enricher: Optional[SummaryRewriter] = create_summary_rewriter(settings)
        self.orchestrator = ResearchOrchestrator(
            self.registry,
            enricher=self.enricher,
            step_delay_s=settings.step_delay_s,
        )

    async def close(self) -> None:
        await self.toolkit.aclose()


@lru_cache(maxsize=1)
def get_settings() -> ApiSettings:
    return ApiSettings.from_env()


@lru_cache(maxsize=1)
def get_research_service() -> ResearchService:
    return ResearchService(get_settings())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        # Only close the service if a request actually created it.
        if get_research_service.cache_info().currsize:
            await get_research_service().close()
            get_research_service.cache_clear()
