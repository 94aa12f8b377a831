"""Domain models and DTOs."""

from src.domain.plant import LightDirection, Plant, PlantCreate, PlantImage, Room, RoomCreate
from src.domain.task import (
    CompletionEntry,
    ParsedInterval,
    RecurrencePattern,
    Task,
    TaskCreate,
    TaskType,
    TimeUnit,
)
from src.domain.tip import AppSettings, CareTips, Tip


__all__ = [
    "AppSettings",
    "CareTips",
    "CompletionEntry",
    "LightDirection",
    "ParsedInterval",
    "Plant",
    "PlantCreate",
    "PlantImage",
    "RecurrencePattern",
    "Room",
    "RoomCreate",
    "Task",
    "TaskCreate",
    "TaskType",
    "TimeUnit",
    "Tip",
]
