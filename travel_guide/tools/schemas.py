"""Input schemas for the research tools.

Each tool validates its keyword arguments against one of these models before
touching the network, so a malformed argument set fails fast as a tool
failure instead of as an upstream error.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from travel_guide.core.types import Lat, Lng


class DestinationInput(BaseModel):
    """Parameters accepted by the destination search tool."""

    destination: str = Field(min_length=1, description="Free-text country or city name")


class CountryInfoInput(BaseModel):
    country: str = Field(min_length=1, description="English country name, or the raw destination")
    country_code: Optional[str] = Field(default=None, description="ISO 3166-1 alpha-2 code when already resolved")


class CountryScopedInput(BaseModel):
    """Destination plus an optional resolved country, shared by country-level tools."""

    destination: str = Field(min_length=1, description="Destination or resolved country name")
    country_code: Optional[str] = Field(default=None, description="ISO 3166-1 alpha-2 code when already resolved")


class CityInfoInput(CountryScopedInput):
    limit: int = Field(default=5, ge=1, le=20, description="Number of cities to enrich with summaries")


class AttractionsInput(BaseModel):
    destination: str = Field(min_length=1, description="Destination whose attractions to list")
    lat: Optional[Lat] = Field(default=None, description="Latitude of the search centre")
    lon: Optional[Lng] = Field(default=None, description="Longitude of the search centre")
    radius: int = Field(default=20000, ge=100, le=100000, description="Search radius in metres")
    category: str = Field(default="attractions", description="Place category, e.g. attractions, historic, nature")
    limit: int = Field(default=15, ge=1, le=50, description="Maximum number of attractions returned")


class NeighborhoodsInput(BaseModel):
    city: str = Field(min_length=1, description="City whose neighbourhoods to list")
    lat: Optional[Lat] = Field(default=None, description="Latitude of the city centre")
    lon: Optional[Lng] = Field(default=None, description="Longitude of the city centre")
    limit: int = Field(default=8, ge=1, le=30, description="Maximum number of neighbourhoods returned")


class BudgetInput(CountryScopedInput):
    currency: Optional[str] = Field(default=None, description="Local ISO 4217 currency code")
    base_currency: str = Field(default="USD", description="Currency the cost tiers are expressed in")

    @field_validator("currency", "base_currency")
    @classmethod
    def _upper(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value else value


class WeatherInput(BaseModel):
    destination: str = Field(min_length=1, description="Destination name, geocoded when no coordinates are given")
    lat: Optional[Lat] = None
    lon: Optional[Lng] = None


class TransportationInput(WeatherInput):
    driving_side: Optional[str] = Field(default=None, description="'left' or 'right' when known")


class ImageSearchInput(BaseModel):
    query: str = Field(min_length=1, description="Image search query")
    count: int = Field(default=15, ge=1, le=30, description="Number of images to return")
