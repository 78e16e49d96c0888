"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_USER_AGENT = "TravelGuide/1.0 (+https://github.com/travel-guide)"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:3001")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for the external service credentials and knobs."""

    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    enable_ai_summary: bool = False
    unsplash_access_key: Optional[str] = None
    opentripmap_api_key: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    step_delay_s: float = 0.1
    cache_enabled: bool = True
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from environment variables."""

        origins = os.getenv("CORS_ORIGINS")
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            enable_ai_summary=_env_flag("ENABLE_AI_SUMMARY", False),
            unsplash_access_key=os.getenv("UNSPLASH_ACCESS_KEY"),
            opentripmap_api_key=os.getenv("OPENTRIPMAP_API_KEY"),
            user_agent=os.getenv("TRAVEL_GUIDE_USER_AGENT", DEFAULT_USER_AGENT),
            step_delay_s=max(0.0, _env_float("RESEARCH_STEP_DELAY", 0.1)),
            cache_enabled=_env_flag("HTTP_CACHE_ENABLED", True),
            cors_origins=(
                [item.strip() for item in origins.split(",") if item.strip()]
                if origins
                else list(DEFAULT_CORS_ORIGINS)
            ),
        )

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value

    @property
    def ai_summary_available(self) -> bool:
        """Whether the optional summary rewrite can run."""

        return self.enable_ai_summary and bool(self.openai_api_key)
