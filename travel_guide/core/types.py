"""Shared type aliases used across the guide models."""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

Lat = Annotated[float, Field(ge=-90, le=90)]
Lng = Annotated[float, Field(ge=-180, le=180)]
Progress = Annotated[int, Field(ge=0, le=100)]

SafetyRating = Literal["very-safe", "safe", "moderate", "caution", "avoid"]
NeighborhoodType = Literal["budget", "mid-range", "luxury", "local"]
AttractionType = Literal["popular", "hidden-gem", "cultural", "nature", "food", "nightlife"]
MapLocationType = Literal["city", "attraction", "neighborhood", "airport"]
StepStatus = Literal["pending", "active", "complete", "error"]
ToolCallStatus = Literal["running", "complete", "error"]
EventType = Literal["step", "tool_call", "progress", "complete", "error"]
