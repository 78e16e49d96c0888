"""Travel safety advisory integrations.

Public API:
    - TravelAdvisory: Numeric advisory score by ISO country code
    - ForeignTravelAdvice: UK FCDO travel advice (textual fallback)
"""
from travel_guide.services.advisory.client import ForeignTravelAdvice, TravelAdvisory

__all__ = [
    "ForeignTravelAdvice",
    "TravelAdvisory",
]
