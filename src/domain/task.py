"""Care task domain models and enums."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def _assume_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored timestamps stay comparable."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


Timestamp = Annotated[datetime, AfterValidator(_assume_utc)]


class TaskType(StrEnum):
    """Kind of care task."""

    WATERING = "Watering"
    FERTILIZING = "Fertilizing"
    REPOTTING = "Repotting"
    CLEANING = "Cleaning"
    PHOTO = "Photo"


class TimeUnit(StrEnum):
    """Unit of a recurrence interval."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class RecurrencePattern(BaseModel):
    """How often a recurring task comes back."""

    interval: int = Field(..., description="Number of units between occurrences (>= 1 when valid)")
    unit: TimeUnit = Field(default=TimeUnit.DAYS, description="Unit of the interval")
    seasonal_adjustment: bool = Field(
        default=False,
        description="Whether the interval is shortened in summer and lengthened in winter",
    )

    @property
    def is_valid(self) -> bool:
        """Whether the pattern can drive scheduling."""
        return self.interval >= 1


class CompletionEntry(BaseModel):
    """One completion event of a task."""

    date: Timestamp = Field(..., description="When the task was marked done")
    notes: str | None = Field(default=None, description="Optional notes entered on completion")


class TaskCreate(BaseModel):
    """A care task that has not been stored yet."""

    plant_id: str = Field(..., description="ID of the plant this task belongs to")
    type: TaskType = Field(..., description="Kind of care task")
    due_date: Timestamp = Field(..., description="When the task becomes due")
    done: bool = Field(default=False, description="Completion flag")
    notes: str | None = Field(default=None, description="Free text, usually the originating care tip")
    recurring: bool = Field(default=False, description="Whether completion spawns a successor")
    recurrence_pattern: RecurrencePattern | None = Field(
        default=None,
        description="Recurrence settings, present iff recurring",
    )
    parent_task_id: str | None = Field(default=None, description="ID of the instance that spawned this one")
    created_at: Timestamp = Field(..., description="Creation timestamp")
    completion_history: list[CompletionEntry] = Field(
        default_factory=list,
        description="Completion events, append-only",
    )


class Task(TaskCreate):
    """A stored care task."""

    id: str = Field(..., description="Unique task ID from the object store")


class ParsedInterval(BaseModel):
    """Cadence extracted from a free-text care tip."""

    min: int
    max: int
    unit: TimeUnit
