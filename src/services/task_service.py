"""Care task service: persistence around the task generator and state machine."""

import logging

from pydantic import BaseModel, Field

from src.core import db_client
from src.core.clock import Clock, utc_now
from src.core.db_client import ObjectStore, RecordNotFoundError
from src.core.logging import log_with_plant_context, span
from src.domain.task import Task, TaskCreate
from src.domain.tip import CareTips
from src.services import task_generator, task_state_machine


logger = logging.getLogger(__name__)

COLLECTION = "tasks"


class ToggleOutcome(BaseModel):
    """Stored result of toggling a task."""

    updated_task: Task = Field(..., description="The toggled task as stored")
    spawned_task: Task | None = Field(default=None, description="The stored successor, if one was spawned")


async def create_task(*, task: TaskCreate, db: ObjectStore = db_client) -> Task:
    """Store a new task and return it with its assigned ID."""
    with span("task_service.create_task"):
        record = await db.create_record(collection=COLLECTION, data=task.model_dump(mode="json"))
        return Task.model_validate(record)


async def get_task(*, task_id: str, db: ObjectStore = db_client) -> Task:
    """Get a task by ID.

    Raises:
        RecordNotFoundError: If the task does not exist
    """
    record = await db.get_record(collection=COLLECTION, record_id=task_id)
    return Task.model_validate(record)


async def update_task(*, task: Task, db: ObjectStore = db_client) -> Task:
    """Write a task back in full."""
    with span("task_service.update_task"):
        data = task.model_dump(mode="json", exclude={"id"})
        record = await db.put_record(collection=COLLECTION, record_id=task.id, data=data)
        return Task.model_validate(record)


async def delete_task(*, task_id: str, db: ObjectStore = db_client) -> None:
    """Delete a task.

    Tasks spawned from it keep their ``parent_task_id``; lineage lookups stop there.
    """
    with span("task_service.delete_task"):
        await db.delete_record(collection=COLLECTION, record_id=task_id)
        logger.info("Deleted task %s", task_id)


async def list_tasks(*, db: ObjectStore = db_client) -> list[Task]:
    """List every task, soonest due first."""
    records = await db.list_records(collection=COLLECTION)
    return sorted((Task.model_validate(r) for r in records), key=lambda t: t.due_date)


async def list_tasks_by_plant(*, plant_id: str, db: ObjectStore = db_client) -> list[Task]:
    """List a plant's tasks, soonest due first."""
    records = await db.list_by_index(collection=COLLECTION, index="plant_id", value=plant_id)
    return sorted((Task.model_validate(r) for r in records), key=lambda t: t.due_date)


async def count_open_tasks(*, plant_ids: list[str], db: ObjectStore = db_client) -> int:
    """Count tasks that are not done across the given plants."""
    count = 0
    for plant_id in plant_ids:
        tasks = await list_tasks_by_plant(plant_id=plant_id, db=db)
        count += sum(1 for task in tasks if not task.done)
    return count


async def create_tasks_from_care_tips(
    *,
    plant_id: str,
    care_tips: CareTips,
    db: ObjectStore = db_client,
    clock: Clock = utc_now,
) -> list[Task]:
    """Generate the initial care tasks for a plant and store them.

    Args:
        plant_id: Plant the care tips belong to
        care_tips: Care tips from the image analysis
        db: Object store to write to
        clock: Time source for creation and due dates

    Returns:
        Stored tasks in generation order
    """
    with span("task_service.create_tasks_from_care_tips"):
        generated = task_generator.generate_tasks(plant_id, care_tips, clock())

        created = []
        for task in generated:
            created.append(await create_task(task=task, db=db))

        log_with_plant_context(logger, "info", "Stored generated tasks", plant_id=plant_id, task_count=len(created))
        return created


async def toggle_task(
    *,
    task_id: str,
    notes: str | None = None,
    db: ObjectStore = db_client,
    clock: Clock = utc_now,
) -> ToggleOutcome:
    """Toggle a task's done flag and store the outcome.

    Completing a recurring task also stores its successor. Calling this twice
    in a row reopens the task again, so callers must not double-submit.

    Args:
        task_id: Task to toggle
        notes: Optional notes for the completion entry
        db: Object store to read from and write to
        clock: Time source for the completion date

    Returns:
        ToggleOutcome with the stored task and the stored successor, if any

    Raises:
        RecordNotFoundError: If the task does not exist
    """
    with span("task_service.toggle_task"):
        task = await get_task(task_id=task_id, db=db)
        result = task_state_machine.complete_task(task, clock(), notes=notes)

        updated = await update_task(task=result.updated_task, db=db)
        spawned = None
        if result.spawned_task is not None:
            spawned = await create_task(task=result.spawned_task, db=db)

        logger.info(
            "Toggled task %s to done=%s",
            task_id,
            updated.done,
            extra={"task_id": task_id, "spawned_task_id": spawned.id if spawned else None},
        )
        return ToggleOutcome(updated_task=updated, spawned_task=spawned)


async def get_task_lineage(*, task_id: str, db: ObjectStore = db_client) -> list[Task]:
    """Follow ``parent_task_id`` back from a task.

    Returns the chain oldest first, ending with the requested task. The walk
    stops at a deleted parent or when an ID repeats.

    Raises:
        RecordNotFoundError: If the starting task does not exist
    """
    with span("task_service.get_task_lineage"):
        chain = [await get_task(task_id=task_id, db=db)]
        seen = {task_id}

        parent_id = chain[-1].parent_task_id
        while parent_id and parent_id not in seen:
            try:
                parent = await get_task(task_id=parent_id, db=db)
            except RecordNotFoundError:
                logger.debug("Lineage of %s ends at deleted parent %s", task_id, parent_id)
                break
            chain.append(parent)
            seen.add(parent_id)
            parent_id = parent.parent_task_id

        chain.reverse()
        return chain
