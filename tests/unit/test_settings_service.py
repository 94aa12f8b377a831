"""Unit tests for app settings storage."""

import pytest

from src.domain.tip import AppSettings
from src.services import settings_service


@pytest.mark.unit
class TestSettingsService:
    """Tests for get/save/clear settings."""

    async def test_missing_settings_return_none(self, in_memory_db):
        assert await settings_service.get_settings(db=in_memory_db) is None

    async def test_save_and_get(self, in_memory_db):
        await settings_service.save_settings(app_settings=AppSettings(openai_api_key="sk-test"), db=in_memory_db)

        stored = await settings_service.get_settings(db=in_memory_db)

        assert stored == AppSettings(openai_api_key="sk-test")

    async def test_save_replaces(self, in_memory_db):
        await settings_service.save_settings(app_settings=AppSettings(openai_api_key="old"), db=in_memory_db)
        await settings_service.save_settings(app_settings=AppSettings(openai_api_key="new"), db=in_memory_db)

        stored = await settings_service.get_settings(db=in_memory_db)

        assert stored is not None
        assert stored.openai_api_key == "new"

    async def test_clear_twice_is_noop(self, in_memory_db):
        await settings_service.save_settings(app_settings=AppSettings(openai_api_key="k"), db=in_memory_db)

        await settings_service.clear_settings(db=in_memory_db)
        await settings_service.clear_settings(db=in_memory_db)

        assert await settings_service.get_settings(db=in_memory_db) is None
