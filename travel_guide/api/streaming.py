"""Serialise research events into newline-delimited JSON for the HTTP stream."""
from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

from travel_guide.core.schemas import ResearchEvent
from travel_guide.workflows.research import CancelCheck, ResearchOrchestrator

logger = logging.getLogger(__name__)

STREAM_MEDIA_TYPE = "text/event-stream"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def stream_research(
    orchestrator: ResearchOrchestrator,
    destination: Optional[str],
    *,
    is_cancelled: Optional[CancelCheck] = None,
) -> AsyncIterator[str]:
    """Yield one JSON line per event; a failure inside the run becomes a final ``error`` line."""

    try:
        async for event in orchestrator.run(destination, is_cancelled=is_cancelled):
            yield event.to_line()
    except Exception as exc:
        logger.error("Research stream failed for %r: %s", destination, exc, exc_info=True)
        yield ResearchEvent.error(str(exc) or "Research failed").to_line()
