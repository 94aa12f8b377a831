"""Watering overview derived from a plant's tasks.

Nothing here is stored separately: the last watering, the cadence and the next
watering date are all read off the Watering tasks and their completion history.
"""

import logging
import math
from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from src.core import db_client
from src.core.clock import Clock, utc_now
from src.core.config import constants
from src.core.db_client import ObjectStore
from src.core.logging import log_with_plant_context, span
from src.core.recurrence_parser import format_interval, to_days
from src.domain.plant import Plant, PlantImage
from src.domain.task import CompletionEntry, Task, TaskCreate, TaskType, TimeUnit
from src.services import task_service


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class WateringEntry(BaseModel):
    """A single watering event."""

    id: str = Field(..., description="'<task id>-<timestamp>' of the completion")
    plant_id: str
    date: datetime
    notes: str | None = None


class PlantOverview(BaseModel):
    """Card data for a plant list."""

    id: str
    name: str
    image_url: str | None = None
    next_watering: datetime | None = None
    last_watered: datetime | None = None
    watering_frequency_days: int
    watering_frequency_text: str
    watering_status: str
    last_watered_text: str


def _last_completion(task: Task) -> datetime | None:
    if not task.completion_history:
        return None
    return max(entry.date for entry in task.completion_history)


def _completed_watering_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.type == TaskType.WATERING and t.done and t.completion_history]


def get_watering_frequency_days(tasks: list[Task]) -> int:
    """Cadence of the first recurring Watering task in days, 7 if there is none."""
    for task in tasks:
        if task.type == TaskType.WATERING and task.recurring and task.recurrence_pattern is not None:
            return to_days(task.recurrence_pattern.interval, task.recurrence_pattern.unit)
    return constants.DEFAULT_WATERING_FREQUENCY_DAYS


def get_last_watering(tasks: list[Task]) -> datetime | None:
    """Most recent completion of any done Watering task."""
    completions = [entry.date for t in _completed_watering_tasks(tasks) for entry in t.completion_history]
    return max(completions, default=None)


def calculate_next_watering(plant_id: str, tasks: list[Task]) -> datetime | None:
    """Last watering of a plant plus its watering cadence, or None if it was never watered."""
    plant_tasks = [t for t in tasks if t.plant_id == plant_id]
    completed = _completed_watering_tasks(plant_tasks)
    if not completed:
        return None

    last = max(d for d in (_last_completion(t) for t in completed) if d is not None)
    frequency = get_watering_frequency_days(plant_tasks)
    if frequency <= 0:
        return None
    return last + timedelta(days=frequency)


def format_watering_status(next_watering: datetime | None, now: datetime) -> str:
    """Human-readable status such as "Water in 2 days" or "Overdue by 1 day"."""
    if next_watering is None:
        return "No watering schedule"

    diff_days = math.ceil((next_watering - now).total_seconds() / SECONDS_PER_DAY)
    if diff_days < 0:
        overdue = abs(diff_days)
        return f"Overdue by {overdue} day{'s' if overdue != 1 else ''}"
    if diff_days == 0:
        return "Water today"
    if diff_days == 1:
        return "Water in 1 day"
    return f"Water in {diff_days} days"


def format_last_watered(last_watered: datetime | None, now: datetime) -> str:
    """Human-readable age of the last watering such as "Last watered 2d ago"."""
    if last_watered is None:
        return "Never watered"

    diff_days = math.floor((now - last_watered).total_seconds() / SECONDS_PER_DAY)
    if diff_days <= 0:
        return "Last watered today"
    return f"Last watered {diff_days}d ago"


def get_watering_history(plant_id: str, tasks: list[Task]) -> list[WateringEntry]:
    """Every watering completion of a plant, newest first."""
    entries = [
        WateringEntry(
            id=f"{task.id}-{int(entry.date.timestamp() * 1000)}",
            plant_id=plant_id,
            date=entry.date,
            notes=entry.notes,
        )
        for task in _completed_watering_tasks([t for t in tasks if t.plant_id == plant_id])
        for entry in task.completion_history
    ]
    return sorted(entries, key=lambda e: e.date, reverse=True)


def build_plant_overview(plant: Plant, tasks: list[Task], images: list[PlantImage], now: datetime) -> PlantOverview:
    """Combine a plant, its tasks and photos into list-card data."""
    watering_tasks = [t for t in tasks if t.plant_id == plant.id and t.type == TaskType.WATERING]
    plant_images = sorted((i for i in images if i.plant_id == plant.id), key=lambda i: i.timestamp, reverse=True)

    last_watered = get_last_watering(watering_tasks)
    next_watering = calculate_next_watering(plant.id, watering_tasks)
    frequency = get_watering_frequency_days(watering_tasks)

    return PlantOverview(
        id=plant.id,
        name=plant.name,
        image_url=plant_images[0].data_url if plant_images else None,
        next_watering=next_watering,
        last_watered=last_watered,
        watering_frequency_days=frequency,
        watering_frequency_text=format_interval(frequency, TimeUnit.DAYS),
        watering_status=format_watering_status(next_watering, now),
        last_watered_text=format_last_watered(last_watered, now),
    )


async def add_watering_entry(
    *,
    plant_id: str,
    date: datetime | None = None,
    notes: str | None = None,
    db: ObjectStore = db_client,
    clock: Clock = utc_now,
) -> Task:
    """Record a manual watering as a done, one-off Watering task.

    Args:
        plant_id: Plant that was watered
        date: When it was watered (defaults to now)
        notes: Optional notes
        db: Object store to write to
        clock: Time source

    Returns:
        The stored task
    """
    with span("watering_service.add_watering_entry"):
        now = clock()
        watered_at = date or now
        task = TaskCreate(
            plant_id=plant_id,
            type=TaskType.WATERING,
            due_date=watered_at,
            done=True,
            notes=notes,
            recurring=False,
            created_at=now,
            completion_history=[CompletionEntry(date=watered_at, notes=notes)],
        )
        stored = await task_service.create_task(task=task, db=db)
        log_with_plant_context(logger, "info", "Recorded manual watering", plant_id=plant_id)
        return stored
