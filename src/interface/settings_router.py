"""App settings endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from src.domain.tip import AppSettings
from src.services import settings_service


router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsStatus(BaseModel):
    """Settings as shown to the client. The key itself is never echoed back."""

    has_api_key: bool


@router.get("")
async def get_settings() -> SettingsStatus:
    """Whether an API key is stored."""
    app_settings = await settings_service.get_settings()
    return SettingsStatus(has_api_key=bool(app_settings and app_settings.openai_api_key))


@router.put("")
async def save_settings(app_settings: AppSettings) -> SettingsStatus:
    """Store the app settings."""
    saved = await settings_service.save_settings(app_settings=app_settings)
    return SettingsStatus(has_api_key=bool(saved.openai_api_key))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_settings() -> None:
    """Remove the stored app settings."""
    await settings_service.clear_settings()
