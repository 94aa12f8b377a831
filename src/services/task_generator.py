"""Turn AI care tips into the initial set of care tasks for a plant."""

import logging
from datetime import datetime

from src.core.config import constants
from src.core.recurrence_parser import parse_interval, to_timedelta
from src.domain.task import ParsedInterval, RecurrencePattern, TaskCreate, TaskType, TimeUnit
from src.domain.tip import CareTips


logger = logging.getLogger(__name__)


PHOTO_TASK_NOTES = "Neues Foto erstellen, um den Fortschritt zu dokumentieren."

REPOTTING_TRIGGER = "umtopfen"
REPOTTING_NEGATIONS = ("nicht umtopfen", "kein umtopfen")
CLEANING_TRIGGERS = ("schädling", "reinig", "staub")


def _needs_repotting(text: str) -> bool:
    """Substring check, so reordered or paraphrased negations are not recognized."""
    lowered = text.lower()
    return REPOTTING_TRIGGER in lowered and not any(negation in lowered for negation in REPOTTING_NEGATIONS)


def _needs_cleaning(text: str) -> bool:
    lowered = text.lower()
    return any(trigger in lowered for trigger in CLEANING_TRIGGERS)


def _recurring_from_tip(
    *,
    plant_id: str,
    task_type: TaskType,
    tip: str,
    now: datetime,
) -> TaskCreate | None:
    """Build a seasonally adjusted recurring task from a tip, or None if it names no cadence."""
    interval = parse_interval(tip)
    if interval is None or interval.min < 1:
        logger.debug("No cadence in %s tip, skipping", task_type, extra={"plant_id": plant_id})
        return None

    return TaskCreate(
        plant_id=plant_id,
        type=task_type,
        due_date=now + to_timedelta(interval.min, interval.unit),
        notes=tip,
        recurring=True,
        recurrence_pattern=RecurrencePattern(
            interval=interval.min,
            unit=interval.unit,
            seasonal_adjustment=True,
        ),
        created_at=now,
    )


def generate_tasks(plant_id: str, care_tips: CareTips, now: datetime) -> list[TaskCreate]:
    """Generate care tasks from care tips.

    Emits, in this order:
    1. Watering (recurring, seasonal) if the watering tip names a cadence
    2. Fertilizing (recurring, seasonal) if the fertilizing tip names a cadence
    3. Repotting (one-off) if the repotting tip asks for it
    4. Cleaning (every 2 weeks) if the health tip mentions pests, cleaning or dust
    5. Photo (every 4 weeks), always

    Args:
        plant_id: ID of the plant the tips are for
        care_tips: Care tips from the image analysis
        now: Creation time; all due dates are offsets from it

    Returns:
        Tasks without IDs, ready to be stored
    """
    tasks: list[TaskCreate] = []

    for task_type, tip in ((TaskType.WATERING, care_tips.watering), (TaskType.FERTILIZING, care_tips.fertilizing)):
        task = _recurring_from_tip(plant_id=plant_id, task_type=task_type, tip=tip, now=now)
        if task is not None:
            tasks.append(task)

    if _needs_repotting(care_tips.repotting):
        interval = parse_interval(care_tips.repotting)
        if interval is None or interval.min < 1:
            interval = ParsedInterval(
                min=constants.DEFAULT_REPOTTING_WEEKS,
                max=constants.DEFAULT_REPOTTING_WEEKS,
                unit=TimeUnit.WEEKS,
            )
        tasks.append(
            TaskCreate(
                plant_id=plant_id,
                type=TaskType.REPOTTING,
                due_date=now + to_timedelta(interval.min, interval.unit),
                notes=care_tips.repotting,
                recurring=False,
                created_at=now,
            )
        )

    if _needs_cleaning(care_tips.health):
        tasks.append(
            TaskCreate(
                plant_id=plant_id,
                type=TaskType.CLEANING,
                due_date=now + to_timedelta(constants.CLEANING_FIRST_DUE_DAYS, TimeUnit.DAYS),
                notes=care_tips.health,
                recurring=True,
                recurrence_pattern=RecurrencePattern(
                    interval=constants.CLEANING_INTERVAL_WEEKS,
                    unit=TimeUnit.WEEKS,
                    seasonal_adjustment=False,
                ),
                created_at=now,
            )
        )

    tasks.append(
        TaskCreate(
            plant_id=plant_id,
            type=TaskType.PHOTO,
            due_date=now + to_timedelta(constants.PHOTO_INTERVAL_WEEKS, TimeUnit.WEEKS),
            notes=PHOTO_TASK_NOTES,
            recurring=True,
            recurrence_pattern=RecurrencePattern(
                interval=constants.PHOTO_INTERVAL_WEEKS,
                unit=TimeUnit.WEEKS,
                seasonal_adjustment=False,
            ),
            created_at=now,
        )
    )

    logger.info(
        "Generated %d care tasks",
        len(tasks),
        extra={"plant_id": plant_id, "types": [task.type.value for task in tasks]},
    )
    return tasks


def format_care_tips_for_display(care_tips: CareTips) -> str:
    """Format care tips into one Markdown string with German headings."""
    sections = [
        ("Gießen", care_tips.watering),
        ("Düngen", care_tips.fertilizing),
        ("Umtopfen", care_tips.repotting),
        ("Standort", care_tips.location),
        ("Gesundheit", care_tips.health),
        ("Luftfeuchtigkeit", care_tips.spraying),
    ]
    return "\n\n".join(f"**{title}**: {text}" for title, text in sections)
