"""Pydantic AI agents that recognize plants and write care tips from photos."""

import base64
import binascii
import logging
import re
from typing import TypeVar

from pydantic import BaseModel, Field
from pydantic_ai import Agent, BinaryContent
from pydantic_ai.models.openrouter import OpenRouterModel
from pydantic_ai.providers.openrouter import OpenRouterProvider

from src.core import db_client
from src.core.clock import Clock, utc_now
from src.core.config import constants, settings
from src.core.db_client import ObjectStore
from src.core.errors import ErrorCategory, classify_analysis_error
from src.core.logging import span
from src.domain.task import Task
from src.domain.tip import CareTips, Tip
from src.services import settings_service, task_generator, task_service, tip_service


logger = logging.getLogger(__name__)

T = TypeVar("T")


RECOGNITION_INSTRUCTIONS = (
    "You are a helpful botanist. Identify the plant species in the provided image. "
    "Respond with only the common plant name."
)

CARE_TIPS_INSTRUCTIONS = (
    "Du bist eine erfahrene Botanikerin. Analysiere das Foto der Zimmerpflanze und gib "
    "kurze Pflegetipps auf Deutsch für die Kategorien Gießen, Düngen, Umtopfen, Standort, "
    "Gesundheit und Besprühen. Nenne Intervalle immer in der Form 'alle X Tage', "
    "'alle X-Y Tage', 'alle X Wochen' oder 'alle X Monate'. Schreibe 'nicht umtopfen', "
    "wenn kein Umtopfen nötig ist."
)

_DATA_URL_PATTERN = re.compile(r"^data:(?P<media_type>[\w/+.-]+);base64,(?P<payload>.+)$", re.DOTALL)


class PlantAnalysisError(Exception):
    """Raised when the analysis service fails or returns nothing usable."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN) -> None:
        super().__init__(message)
        self.category = category


class AnalysisOutcome(BaseModel):
    """Everything produced by analysing a plant photo."""

    care_tips: CareTips
    tip: Tip
    tasks: list[Task] = Field(default_factory=list)


def decode_data_url(data_url: str) -> BinaryContent:
    """Turn a base64 data URL into binary content for the model.

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    match = _DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        raise ValueError("Image must be a base64 data URL")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Image data URL is not valid base64: {e}") from e
    return BinaryContent(data=data, media_type=match.group("media_type"))


async def _resolve_api_key(db: ObjectStore) -> str:
    """Prefer the key the user saved in the app, fall back to the environment."""
    app_settings = await settings_service.get_settings(db=db)
    if app_settings and app_settings.openai_api_key:
        return app_settings.openai_api_key
    return settings.require_credential("openrouter_api_key", "OpenRouter API key")


def _create_agent(*, api_key: str, output_type: type[T], instructions: str) -> Agent[None, T]:
    provider = OpenRouterProvider(api_key=api_key)
    model = OpenRouterModel(model_name=settings.model_id, provider=provider)
    return Agent(model=model, output_type=output_type, instructions=instructions)


async def _run_agent(agent: Agent[None, T], *, prompt: str, image: BinaryContent) -> T:
    result = await agent.run([prompt, image], model_settings={"timeout": constants.API_TIMEOUT_SECONDS})
    return result.output


def _analysis_failed(operation: str, error: Exception) -> PlantAnalysisError:
    category, message = classify_analysis_error(error)
    logger.error(
        "Plant analysis failed",
        extra={"operation": operation, "error": str(error), "error_category": category.value},
    )
    return PlantAnalysisError(message, category)


async def recognize_plant_name(*, image_data_url: str, db: ObjectStore = db_client) -> str:
    """Recognize the common name of the plant in a photo.

    Raises:
        ValueError: If the image is not a base64 data URL or no API key is configured
        PlantAnalysisError: If the analysis service fails or answers with nothing
    """
    with span("plant_analysis.recognize_plant_name"):
        image = decode_data_url(image_data_url)
        api_key = await _resolve_api_key(db)
        agent = _create_agent(api_key=api_key, output_type=str, instructions=RECOGNITION_INSTRUCTIONS)

        try:
            name = await _run_agent(agent, prompt="Which plant is this?", image=image)
        except Exception as e:
            raise _analysis_failed("recognize_plant_name", e) from e

        name = name.strip()
        if not name:
            raise PlantAnalysisError("No content returned from analysis")

        logger.info("Recognized plant '%s'", name)
        return name


async def analyze_care_tips(
    *,
    image_data_url: str,
    plant_name: str | None = None,
    db: ObjectStore = db_client,
) -> CareTips:
    """Ask the analysis service for structured care tips for the plant in a photo.

    Raises:
        ValueError: If the image is not a base64 data URL or no API key is configured
        PlantAnalysisError: If the analysis service fails
    """
    with span("plant_analysis.analyze_care_tips"):
        image = decode_data_url(image_data_url)
        api_key = await _resolve_api_key(db)
        agent = _create_agent(api_key=api_key, output_type=CareTips, instructions=CARE_TIPS_INSTRUCTIONS)

        prompt = f"Pflegetipps für diese Pflanze ({plant_name})." if plant_name else "Pflegetipps für diese Pflanze."
        try:
            care_tips = await _run_agent(agent, prompt=prompt, image=image)
        except Exception as e:
            raise _analysis_failed("analyze_care_tips", e) from e

        logger.info("Received care tips", extra={"plant_name": plant_name})
        return care_tips


async def analyze_and_schedule(
    *,
    plant_id: str,
    image_data_url: str,
    plant_name: str | None = None,
    db: ObjectStore = db_client,
    clock: Clock = utc_now,
) -> AnalysisOutcome:
    """Analyse a plant photo, store the care tips and generate the care tasks.

    Args:
        plant_id: Plant the photo shows
        image_data_url: Photo as base64 data URL
        plant_name: Optional name passed to the model for context
        db: Object store to write to
        clock: Time source for the tip and tasks

    Returns:
        AnalysisOutcome with the tips, the stored tip and the stored tasks
    """
    with span("plant_analysis.analyze_and_schedule"):
        care_tips = await analyze_care_tips(image_data_url=image_data_url, plant_name=plant_name, db=db)

        tip = await tip_service.add_tip(
            plant_id=plant_id,
            content=task_generator.format_care_tips_for_display(care_tips),
            db=db,
            clock=clock,
        )
        tasks = await task_service.create_tasks_from_care_tips(
            plant_id=plant_id,
            care_tips=care_tips,
            db=db,
            clock=clock,
        )

        logger.info("Scheduled %d tasks from analysis", len(tasks), extra={"plant_id": plant_id})
        return AnalysisOutcome(care_tips=care_tips, tip=tip, tasks=tasks)
