from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ResearchRequest(BaseModel):
    """Request payload used to start a research run.

    ``destination`` is optional at the schema level so a missing value is
    reported on the stream as an ``error`` event rather than as a 422.
    """

    destination: Optional[str] = Field(
        default=None,
        description="Free-text country or city name, e.g. 'Japan' or 'Lisbon'.",
    )


class ToolCatalogEntry(BaseModel):
    """One entry of the research tool catalog."""

    name: str
    label: str
    description: str
    adapters: List[str]
    input_schema: Dict[str, Any] = Field(alias="inputSchema")
