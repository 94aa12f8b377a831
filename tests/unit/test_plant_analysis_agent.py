"""Unit tests for the plant analysis agents with the model calls stubbed out."""

import base64

import pytest

from src.agents import plant_analysis_agent
from src.agents.plant_analysis_agent import PlantAnalysisError, decode_data_url
from src.core.errors import ErrorCategory
from src.domain.task import TaskType
from src.domain.tip import AppSettings, CareTips
from src.services import settings_service, task_service, tip_service


IMAGE = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8fake-jpeg").decode()


@pytest.fixture
def agent_calls(monkeypatch):
    """Replace agent creation and runs; returns a dict describing the calls and the canned output."""
    calls: dict = {"output": None, "error": None, "api_keys": [], "prompts": []}

    def fake_create_agent(*, api_key, output_type, instructions):
        calls["api_keys"].append(api_key)
        return {"output_type": output_type, "instructions": instructions}

    async def fake_run_agent(agent, *, prompt, image):
        calls["prompts"].append(prompt)
        calls["image"] = image
        if calls["error"] is not None:
            raise calls["error"]
        return calls["output"]

    monkeypatch.setattr(plant_analysis_agent, "_create_agent", fake_create_agent)
    monkeypatch.setattr(plant_analysis_agent, "_run_agent", fake_run_agent)
    monkeypatch.setattr(plant_analysis_agent.settings, "openrouter_api_key", "env-key")
    return calls


@pytest.mark.unit
class TestDecodeDataUrl:
    """Tests for decode_data_url."""

    def test_valid_data_url(self):
        content = decode_data_url(IMAGE)

        assert content.media_type == "image/jpeg"
        assert content.data == b"\xff\xd8fake-jpeg"

    @pytest.mark.parametrize("value", ["", "https://example.com/plant.jpg", "data:image/png;base64,***"])
    def test_invalid_data_url(self, value):
        with pytest.raises(ValueError, match="data URL"):
            decode_data_url(value)


@pytest.mark.unit
class TestRecognizePlantName:
    """Tests for recognize_plant_name."""

    async def test_returns_trimmed_name(self, in_memory_db, agent_calls):
        agent_calls["output"] = "  Monstera deliciosa\n"

        name = await plant_analysis_agent.recognize_plant_name(image_data_url=IMAGE, db=in_memory_db)

        assert name == "Monstera deliciosa"
        assert agent_calls["image"].media_type == "image/jpeg"

    async def test_prefers_stored_api_key(self, in_memory_db, agent_calls):
        agent_calls["output"] = "Ficus"
        await settings_service.save_settings(app_settings=AppSettings(openai_api_key="user-key"), db=in_memory_db)

        await plant_analysis_agent.recognize_plant_name(image_data_url=IMAGE, db=in_memory_db)

        assert agent_calls["api_keys"] == ["user-key"]

    async def test_falls_back_to_environment_key(self, in_memory_db, agent_calls):
        agent_calls["output"] = "Ficus"

        await plant_analysis_agent.recognize_plant_name(image_data_url=IMAGE, db=in_memory_db)

        assert agent_calls["api_keys"] == ["env-key"]

    async def test_missing_key_raises(self, in_memory_db, agent_calls, monkeypatch):
        monkeypatch.setattr(plant_analysis_agent.settings, "openrouter_api_key", None)

        with pytest.raises(ValueError, match="credential not configured"):
            await plant_analysis_agent.recognize_plant_name(image_data_url=IMAGE, db=in_memory_db)

    async def test_empty_output_raises(self, in_memory_db, agent_calls):
        agent_calls["output"] = "   "

        with pytest.raises(PlantAnalysisError, match="No content returned from analysis"):
            await plant_analysis_agent.recognize_plant_name(image_data_url=IMAGE, db=in_memory_db)

    async def test_provider_error_is_classified(self, in_memory_db, agent_calls):
        agent_calls["error"] = RuntimeError("Rate limit exceeded")

        with pytest.raises(PlantAnalysisError) as exc_info:
            await plant_analysis_agent.recognize_plant_name(image_data_url=IMAGE, db=in_memory_db)

        assert exc_info.value.category == ErrorCategory.RATE_LIMIT_EXCEEDED
        assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.unit
class TestAnalyzeAndSchedule:
    """Tests for analyze_and_schedule."""

    async def test_stores_tip_and_tasks(self, in_memory_db, agent_calls, fixed_clock):
        agent_calls["output"] = CareTips(
            watering="Gießen Sie alle 5 Tage",
            fertilizing="Düngen alle 2 Wochen",
            repotting="Kein Umtopfen nötig",
            health="Pflanze gesund",
        )

        outcome = await plant_analysis_agent.analyze_and_schedule(
            plant_id="plant-1",
            image_data_url=IMAGE,
            plant_name="Monstera",
            db=in_memory_db,
            clock=fixed_clock,
        )

        assert [t.type for t in outcome.tasks] == [TaskType.WATERING, TaskType.FERTILIZING, TaskType.PHOTO]
        assert "Monstera" in agent_calls["prompts"][0]
        tips = await tip_service.get_tips_by_plant(plant_id="plant-1", db=in_memory_db)
        assert [t.id for t in tips] == [outcome.tip.id]
        assert tips[0].content.startswith("**Gießen**: Gießen Sie alle 5 Tage")
        assert len(await task_service.list_tasks_by_plant(plant_id="plant-1", db=in_memory_db)) == 3

    async def test_failure_stores_nothing(self, in_memory_db, agent_calls, fixed_clock):
        agent_calls["error"] = ConnectionError("connection reset")

        with pytest.raises(PlantAnalysisError) as exc_info:
            await plant_analysis_agent.analyze_and_schedule(
                plant_id="plant-1",
                image_data_url=IMAGE,
                db=in_memory_db,
                clock=fixed_clock,
            )

        assert exc_info.value.category == ErrorCategory.NETWORK_ERROR
        assert await tip_service.get_all_tips(db=in_memory_db) == []
        assert await task_service.list_tasks(db=in_memory_db) == []
