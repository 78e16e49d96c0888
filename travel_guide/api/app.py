"""FastAPI surface for the destination research service."""
from __future__ import annotations

import os
# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()


import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from travel_guide.api.dependencies import get_research_service, get_settings, lifespan
from travel_guide.api.schemas import ResearchRequest, ToolCatalogEntry
from travel_guide.api.streaming import STREAM_HEADERS, STREAM_MEDIA_TYPE, stream_research
from travel_guide.workflows.research import research_steps

logger = logging.getLogger(__name__)

try:  # pragma: no cover - exercised through import side effects
    import sentry_sdk
except ImportError:  # pragma: no cover - only triggers in lean environments
    sentry_sdk = None  # type: ignore[assignment]
else:  # pragma: no cover - runtime configuration
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        enable_logs=True,
        send_default_pii=False,
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
    )

app = FastAPI(title="Travel Guide Research API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/research")
async def research(payload: ResearchRequest, request: Request) -> StreamingResponse:
    """Research a destination and stream progress as newline-delimited JSON.

    Each line is ``{"type": ..., "data": {...}}`` where ``type`` is one of
    ``step``, ``tool_call``, ``progress``, ``complete`` or ``error``. The
    stream ends with a ``complete`` line carrying ``{"guide": ...}`` or with
    an ``error`` line carrying ``{"error": ...}``.

    Example JSON payload:
        ```json
        {"destination": "Japan"}
        ```
    """

    logger.info("Research request received for %r", payload.destination)
    service = get_research_service()

    async def client_gone() -> bool:
        return await request.is_disconnected()

    return StreamingResponse(
        stream_research(service.orchestrator, payload.destination, is_cancelled=client_gone),
        media_type=STREAM_MEDIA_TYPE,
        headers=STREAM_HEADERS,
    )


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness probes."""

    return {"status": "healthy", "service": "travel-guide-api"}


@app.get("/tools", response_model=List[ToolCatalogEntry])
async def list_tools() -> List[Dict[str, Any]]:
    """Describe the research tools, their step labels and input schemas."""

    return get_research_service().registry.catalog()


@app.get("/steps")
async def list_steps() -> List[Dict[str, Any]]:
    """The fixed research steps shown while a guide is being built."""

    return [step.model_dump(by_alias=True) for step in research_steps()]
