"""Care tip domain models."""

from pydantic import BaseModel, Field

from src.domain.task import Timestamp


class CareTips(BaseModel):
    """Free-text care advice per category, as returned by the image analysis (German)."""

    watering: str = Field(default="", description="Gießen")
    fertilizing: str = Field(default="", description="Düngen")
    repotting: str = Field(default="", description="Umtopfen")
    location: str = Field(default="", description="Standort")
    health: str = Field(default="", description="Gesundheit")
    spraying: str = Field(default="", description="Luftfeuchtigkeit / Besprühen")


class Tip(BaseModel):
    """Stored care tip for a plant."""

    id: str = Field(..., description="Unique tip ID from the object store")
    plant_id: str = Field(..., description="ID of the plant the tip is for")
    content: str = Field(..., description="Formatted care tip text")
    generated_at: Timestamp = Field(..., description="When the tip was generated")


class AppSettings(BaseModel):
    """User-level app settings stored under a fixed key."""

    openai_api_key: str | None = Field(default=None, description="API key entered by the user")
