"""Pydantic models for the restaurant API payloads."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from restaurant_tracker.domain.restaurants import RestaurantDraft


class RestaurantDraftPayload(BaseModel):
    """Form payload for creating or replacing a restaurant."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    neighborhood: str | None = None
    cuisine: str | None = None
    address: str = ""
    notes: str = ""
    visited: bool = False
    ratings: dict[str, int] = Field(default_factory=dict)
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    photos: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    @field_validator("ratings")
    @classmethod
    def _ratings_in_range(cls, value: dict[str, int]) -> dict[str, int]:
        for category, score in value.items():
            if not 0 <= score <= 5:
                raise ValueError(f"rating for {category} must be between 0 and 5")
        return value

    def to_draft(self) -> RestaurantDraft:
        """Convert into the domain draft; a posted ``wantToTry`` is dropped."""
        return RestaurantDraft(
            id=self.id or None,
            name=self.name,
            neighborhood=self.neighborhood,
            cuisine=self.cuisine,
            address=self.address,
            notes=self.notes,
            visited=self.visited,
            ratings=dict(self.ratings),
            lat=self.lat,
            lng=self.lng,
            photos=tuple(self.photos),
        )
