"""Care task endpoints."""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel

from src.domain.task import Task
from src.services import task_service
from src.services.task_service import ToggleOutcome


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


class ToggleRequest(BaseModel):
    """Optional notes stored with a completion."""

    notes: str | None = None


@router.get("")
async def list_tasks() -> list[Task]:
    """List every task, soonest due first."""
    return await task_service.list_tasks()


@router.get("/{task_id}")
async def get_task(task_id: str) -> Task:
    """Get a single task."""
    return await task_service.get_task(task_id=task_id)


@router.post("/{task_id}/toggle")
async def toggle_task(task_id: str, request: ToggleRequest | None = None) -> ToggleOutcome:
    """Complete or reopen a task. Completing a recurring task schedules the next one."""
    notes = request.notes if request else None
    return await task_service.toggle_task(task_id=task_id, notes=notes)


@router.get("/{task_id}/lineage")
async def get_task_lineage(task_id: str) -> list[Task]:
    """The chain of instances that led to a task, oldest first."""
    return await task_service.get_task_lineage(task_id=task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str) -> None:
    """Delete a task."""
    await task_service.delete_task(task_id=task_id)
