"""Pure state transition functions for care task completion.

A recurring obligation is a chain of single-shot task instances linked by
``parent_task_id``. Completing an instance closes it and spawns the next one;
toggling a done instance back only reopens it.
"""

import logging
from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from src.core.config import constants
from src.core.recurrence_parser import to_timedelta
from src.domain.task import CompletionEntry, RecurrencePattern, Task, TaskCreate, TimeUnit
from src.services.seasonal_policy import adjust_interval


logger = logging.getLogger(__name__)


FALLBACK_PATTERN = RecurrencePattern(
    interval=constants.FALLBACK_RECURRENCE_DAYS,
    unit=TimeUnit.DAYS,
    seasonal_adjustment=False,
)


class CompletionResult(BaseModel):
    """Outcome of toggling a task's done flag."""

    updated_task: Task = Field(..., description="The toggled task, to be written back")
    spawned_task: TaskCreate | None = Field(default=None, description="Next instance of a recurring task")


def calculate_next_due_date(*, task: Task, completion_date: datetime) -> datetime:
    """Compute when the successor of a completed recurring task is due.

    Falls back to one week when the pattern is missing or has an interval below 1.
    """
    pattern = task.recurrence_pattern
    if pattern is None or not pattern.is_valid:
        logger.warning(
            "Recurring task %s has no usable recurrence pattern, falling back to %d days",
            task.id,
            constants.FALLBACK_RECURRENCE_DAYS,
            extra={"task_id": task.id, "plant_id": task.plant_id},
        )
        return completion_date + timedelta(days=constants.FALLBACK_RECURRENCE_DAYS)

    interval = adjust_interval(
        pattern.interval,
        pattern.unit,
        task.type,
        completion_date,
        pattern.seasonal_adjustment,
    )
    return completion_date + to_timedelta(interval, pattern.unit)


def _spawn_successor(*, task: Task, completion_date: datetime) -> TaskCreate:
    pattern = task.recurrence_pattern
    if pattern is None or not pattern.is_valid:
        pattern = FALLBACK_PATTERN

    return TaskCreate(
        plant_id=task.plant_id,
        type=task.type,
        due_date=calculate_next_due_date(task=task, completion_date=completion_date),
        done=False,
        notes=task.notes,
        recurring=True,
        recurrence_pattern=pattern.model_copy(),
        parent_task_id=task.id,
        created_at=completion_date,
        completion_history=[],
    )


def complete_task(task: Task, completion_date: datetime, notes: str | None = None) -> CompletionResult:
    """Toggle a task's done flag.

    - Done -> not done: reopens the task, history untouched, nothing spawned.
    - Not done -> done: appends a completion entry; recurring tasks spawn a
      successor linked via ``parent_task_id``.

    The input task is not modified.

    Args:
        task: Task being toggled
        completion_date: When the user marked the task
        notes: Optional notes stored with the completion entry

    Returns:
        CompletionResult with the updated task and the optional successor
    """
    if task.done:
        logger.info("Reopened task %s", task.id, extra={"task_id": task.id})
        return CompletionResult(updated_task=task.model_copy(update={"done": False}, deep=True))

    history = [*task.completion_history, CompletionEntry(date=completion_date, notes=notes)]
    updated = task.model_copy(update={"done": True, "completion_history": history}, deep=True)

    if not task.recurring:
        logger.info("Completed one-off task %s", task.id, extra={"task_id": task.id})
        return CompletionResult(updated_task=updated)

    successor = _spawn_successor(task=task, completion_date=completion_date)
    logger.info(
        "Completed recurring task %s, next due %s",
        task.id,
        successor.due_date.isoformat(),
        extra={"task_id": task.id, "plant_id": task.plant_id},
    )
    return CompletionResult(updated_task=updated, spawned_task=successor)
