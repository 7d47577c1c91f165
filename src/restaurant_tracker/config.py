"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_NEIGHBORHOODS = [
    "Södermalm",
    "Östermalm",
    "Vasastan",
    "Kungsholmen",
    "Gamla Stan",
    "Norrmalm",
    "Lidingö",
    "Djurgården",
    "Nacka",
    "Solna",
    "Other",
]
DEFAULT_CUISINES = [
    "Swedish",
    "Italian",
    "Japanese",
    "Thai",
    "Indian",
    "Mexican",
    "French",
    "Middle Eastern",
    "American",
    "Chinese",
    "Korean",
    "Other",
]
DEFAULT_RATING_CATEGORIES = ["Food", "Vibe", "Service", "Price"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    restaurants_table: str = "restaurants"
    realtime_channel: str = "restaurants-rt"
    notification_seconds: float = 2.5
    neighborhoods: list[str] = DEFAULT_NEIGHBORHOODS
    cuisines: list[str] = DEFAULT_CUISINES
    rating_categories: list[str] = DEFAULT_RATING_CATEGORIES
    default_lat: float = 59.3293
    default_lng: float = 18.0686
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
