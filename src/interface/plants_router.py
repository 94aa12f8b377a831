"""Plant endpoints: CRUD, cemetery, photos, care tips and watering."""

import logging
from datetime import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from src.agents import plant_analysis_agent
from src.agents.plant_analysis_agent import AnalysisOutcome
from src.core.clock import utc_now
from src.core.logging import log_with_plant_context
from src.domain.plant import Plant, PlantCreate, PlantImage
from src.domain.task import Task
from src.domain.tip import Tip
from src.services import image_service, plant_service, room_service, task_service, tip_service, watering_service
from src.services.watering_service import PlantOverview, WateringEntry


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plants", tags=["plants"])


class ImageUpload(BaseModel):
    """A photo sent as a base64 data URL."""

    image_data_url: str = Field(..., min_length=1, description="Base64 data URL of the photo")


class CareTipsRequest(ImageUpload):
    """Photo to analyse, optionally with the plant's name for context."""

    plant_name: str | None = Field(default=None, description="Known plant name")


class RecognitionResult(BaseModel):
    """Plant name recognized from a photo."""

    name: str


class WateringRequest(BaseModel):
    """Manual watering entry."""

    date: datetime | None = Field(default=None, description="When the plant was watered, defaults to now")
    notes: str | None = None


class WateringOverview(BaseModel):
    """Watering card of a plant together with its history."""

    overview: PlantOverview
    history: list[WateringEntry]


@router.get("")
async def list_plants() -> list[Plant]:
    """List all active plants."""
    return await plant_service.get_all_plants()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_plant(plant: PlantCreate) -> Plant:
    """Create a plant in an existing room."""
    await room_service.get_room(room_id=plant.room_id)
    return await plant_service.create_plant(plant=plant)


@router.get("/overview")
async def list_plant_overviews() -> list[PlantOverview]:
    """Watering cards for all active plants."""
    plants = await plant_service.get_all_plants()
    tasks = await task_service.list_tasks()
    images = await image_service.get_all_images()
    now = utc_now()
    return [watering_service.build_plant_overview(plant, tasks, images, now) for plant in plants]


@router.get("/archived")
async def list_archived_plants() -> list[Plant]:
    """List the plant cemetery, most recently archived first."""
    return await plant_service.get_archived_plants()


@router.post("/recognize")
async def recognize_plant(upload: ImageUpload) -> RecognitionResult:
    """Recognize a plant's name from a photo."""
    name = await plant_analysis_agent.recognize_plant_name(image_data_url=upload.image_data_url)
    return RecognitionResult(name=name)


@router.get("/{plant_id}")
async def get_plant(plant_id: str) -> Plant:
    """Get a single plant, archived or not."""
    return await plant_service.get_plant(plant_id=plant_id)


@router.put("/{plant_id}")
async def update_plant(plant_id: str, plant: PlantCreate) -> Plant:
    """Replace a plant's editable fields."""
    existing = await plant_service.get_plant(plant_id=plant_id)
    updated = existing.model_copy(update=plant.model_dump())
    return await plant_service.update_plant(plant=updated)


@router.delete("/{plant_id}")
async def delete_plant(plant_id: str) -> Plant:
    """Move a plant to the cemetery."""
    return await plant_service.delete_plant(plant_id=plant_id)


@router.post("/{plant_id}/restore")
async def restore_plant(plant_id: str) -> Plant:
    """Bring a plant back from the cemetery."""
    return await plant_service.restore_plant(plant_id=plant_id)


@router.delete("/{plant_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
async def permanently_delete_plant(plant_id: str) -> None:
    """Delete a plant with its photos, tasks and tips."""
    await plant_service.permanently_delete_plant(plant_id=plant_id)


@router.get("/{plant_id}/tasks")
async def list_plant_tasks(plant_id: str) -> list[Task]:
    """List a plant's tasks, soonest due first."""
    await plant_service.get_plant(plant_id=plant_id)
    return await task_service.list_tasks_by_plant(plant_id=plant_id)


@router.get("/{plant_id}/images")
async def list_plant_images(plant_id: str) -> list[PlantImage]:
    """List a plant's photos, newest first."""
    await plant_service.get_plant(plant_id=plant_id)
    return await image_service.get_images_by_plant(plant_id=plant_id)


@router.post("/{plant_id}/images", status_code=status.HTTP_201_CREATED)
async def add_plant_image(plant_id: str, upload: ImageUpload) -> PlantImage:
    """Store a new photo of a plant."""
    await plant_service.get_plant(plant_id=plant_id)
    return await image_service.add_image(plant_id=plant_id, data_url=upload.image_data_url)


@router.get("/{plant_id}/tips")
async def list_plant_tips(plant_id: str) -> list[Tip]:
    """List the care tips stored for a plant."""
    await plant_service.get_plant(plant_id=plant_id)
    return await tip_service.get_tips_by_plant(plant_id=plant_id)


@router.post("/{plant_id}/care-tips", status_code=status.HTTP_201_CREATED)
async def generate_care_tips(plant_id: str, request: CareTipsRequest) -> AnalysisOutcome:
    """Analyse a photo, store the care tips and schedule the care tasks."""
    plant = await plant_service.get_plant(plant_id=plant_id)
    outcome = await plant_analysis_agent.analyze_and_schedule(
        plant_id=plant_id,
        image_data_url=request.image_data_url,
        plant_name=request.plant_name or plant.species or plant.name,
    )
    log_with_plant_context(logger, "info", "Care tips generated", plant_id=plant_id, task_count=len(outcome.tasks))
    return outcome


@router.get("/{plant_id}/watering")
async def get_watering(plant_id: str) -> WateringOverview:
    """Watering status and history of a plant."""
    plant = await plant_service.get_plant(plant_id=plant_id)
    tasks = await task_service.list_tasks_by_plant(plant_id=plant_id)
    images = await image_service.get_images_by_plant(plant_id=plant_id)
    return WateringOverview(
        overview=watering_service.build_plant_overview(plant, tasks, images, utc_now()),
        history=watering_service.get_watering_history(plant_id, tasks),
    )


@router.post("/{plant_id}/watering", status_code=status.HTTP_201_CREATED)
async def add_watering(plant_id: str, request: WateringRequest) -> Task:
    """Record a manual watering."""
    await plant_service.get_plant(plant_id=plant_id)
    return await watering_service.add_watering_entry(plant_id=plant_id, date=request.date, notes=request.notes)
