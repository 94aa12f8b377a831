"""Room endpoints."""

import logging

from fastapi import APIRouter, status

from src.domain.plant import Plant, Room, RoomCreate
from src.services import plant_service, room_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("")
async def list_rooms() -> list[Room]:
    """List all rooms."""
    return await room_service.get_all_rooms()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_room(room: RoomCreate) -> Room:
    """Create a room."""
    return await room_service.create_room(room=room)


@router.get("/{room_id}")
async def get_room(room_id: str) -> Room:
    """Get a single room."""
    return await room_service.get_room(room_id=room_id)


@router.put("/{room_id}")
async def update_room(room_id: str, room: RoomCreate) -> Room:
    """Replace a room's name, light direction and indoor flag."""
    await room_service.get_room(room_id=room_id)
    return await room_service.update_room(room=Room(id=room_id, **room.model_dump()))


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(room_id: str) -> None:
    """Delete a room together with all of its plants."""
    await room_service.delete_room(room_id=room_id)


@router.get("/{room_id}/plants")
async def list_room_plants(room_id: str) -> list[Plant]:
    """List the active plants standing in a room."""
    await room_service.get_room(room_id=room_id)
    return await plant_service.get_plants_by_room(room_id=room_id)
