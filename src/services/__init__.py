from src.services import (
    image_service,
    plant_service,
    room_service,
    settings_service,
    task_service,
    tip_service,
    watering_service,
)


__all__ = [
    "image_service",
    "plant_service",
    "room_service",
    "settings_service",
    "task_service",
    "tip_service",
    "watering_service",
]
