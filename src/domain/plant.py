"""Plant and room domain models."""

from enum import StrEnum

from pydantic import BaseModel, Field

from src.domain.task import Timestamp


class LightDirection(StrEnum):
    """Direction the room's main window faces."""

    NORTH = "North"
    EAST = "East"
    SOUTH = "South"
    WEST = "West"


class RoomCreate(BaseModel):
    """Payload for creating a room."""

    name: str = Field(..., min_length=1, description="Room name (e.g., 'Wohnzimmer')")
    light_direction: LightDirection = Field(default=LightDirection.NORTH, description="Window orientation")
    indoor: bool = Field(default=True, description="Indoor room or balcony/garden")


class Room(RoomCreate):
    """Room data transfer object."""

    id: str = Field(..., description="Unique room ID from the object store")


class PlantCreate(BaseModel):
    """Payload for creating a plant."""

    room_id: str = Field(..., description="ID of the room the plant stands in")
    name: str = Field(..., min_length=1, description="Display name of the plant")
    species: str | None = Field(default=None, description="Recognized species / common name")
    window_distance_cm: int | None = Field(default=None, ge=0, description="Distance to the window in cm")
    near_heater: bool = Field(default=False, description="Whether the plant stands near a heater")
    size_cm: int | None = Field(default=None, ge=0, description="Plant height in cm")
    pot_size_cm: int | None = Field(default=None, ge=0, description="Pot diameter in cm")


class Plant(PlantCreate):
    """Plant data transfer object."""

    id: str = Field(..., description="Unique plant ID from the object store")
    archived: bool = Field(default=False, description="Whether the plant was moved to the cemetery")
    archived_at: Timestamp | None = Field(default=None, description="When the plant was archived")
    created_at: Timestamp | None = Field(default=None, description="Creation timestamp")


class PlantImage(BaseModel):
    """Photo of a plant stored as a data URL."""

    id: str = Field(..., description="Unique image ID from the object store")
    plant_id: str = Field(..., description="ID of the photographed plant")
    timestamp: Timestamp = Field(..., description="When the photo was taken")
    data_url: str = Field(..., description="Base64 data URL of the image")
