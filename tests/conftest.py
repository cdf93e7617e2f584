"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from app.api.deps import get_plan_generator, get_plan_repository, get_plan_service, get_profile_repository
from app.core.config import Settings, get_settings
from app.main import app
from app.meal_plans.generate import StaticPlanGenerator
from app.meal_plans.repository import InMemoryPlanRepository
from app.meal_plans.service import PlanService
from app.profiles.repository import InMemoryProfileRepository
from app.schemas.profile import ProfileBase

JWT_SECRET = "test-jwt-secret"


@pytest.fixture
def profile():
    """A 30-year-old male maintaining weight on a comfortable budget."""
    return ProfileBase(
        sex="male",
        height_cm=180,
        weight_kg=80,
        birth_date="1994-01-01",
        goal="maintain",
        diet_type="classic",
        allergies=[],
        cooking_effort="medium",
        weekly_budget=200,
    )


@pytest.fixture
def settings():
    return Settings(
        PLAN_STORE="memory",
        PLAN_GENERATOR="static",
        SUPABASE_JWT_SECRET=JWT_SECRET,
        ALLOW_USER_ID_HEADER=True,
        OPENAI_API_KEY="",
        LLM_RETRY_BACKOFF_SECONDS=0,
    )


@pytest.fixture
def plan_repo():
    return InMemoryPlanRepository()


@pytest.fixture
def profile_repo():
    return InMemoryProfileRepository()


@pytest.fixture
def stepping_clock():
    """
    Clock that advances one minute per call, so records created in sequence
    have strictly increasing created_at values.
    """
    state = {"now": datetime(2025, 1, 1, tzinfo=timezone.utc)}

    def clock():
        state["now"] += timedelta(minutes=1)
        return state["now"]

    return clock


@pytest.fixture
def generator():
    return StaticPlanGenerator()


@pytest.fixture
def client(settings, plan_repo, profile_repo, generator, stepping_clock):
    """
    TestClient wired to in-memory repositories, the static generator and a
    stepping clock for plan records.

    Usage in tests:
        def test_something(client):
            client.get("/api/plans/latest", headers={"x-user-id": "u1"})
    """
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_plan_repository] = lambda: plan_repo
    app.dependency_overrides[get_profile_repository] = lambda: profile_repo
    app.dependency_overrides[get_plan_generator] = lambda: generator

    def plan_service(plan_generator=Depends(get_plan_generator)):
        return PlanService(plan_repo, plan_generator, clock=stepping_clock)

    app.dependency_overrides[get_plan_service] = plan_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class FakeCompletions:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if not isinstance(item, str):
            return item
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=item))])


class FakeOpenAI:
    """
    Stands in for openai.OpenAI. Strings are replayed as completion contents,
    exceptions are raised, anything else is returned as the raw response.
    """

    def __init__(self, responses):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_openai():
    return FakeOpenAI


@pytest.fixture
def llm_plan_json():
    """Build a model-style JSON plan where every meal has one ingredient at ``price``."""

    slots_by_count = {2: ["lunch", "dinner"], 3: ["breakfast", "lunch", "dinner"], 4: ["breakfast", "lunch", "dinner", "snack"]}

    def build(duration_days=7, meals_per_day=3, price=1.0, days=None, reported_cost=999.0):
        slots = slots_by_count[meals_per_day]
        return json.dumps({
            "meta": {
                "duration_days": duration_days,
                "meals_per_day": meals_per_day,
                "target_calories": 2000,
                "weekly_budget": 50,
                "estimated_total_cost": reported_cost,
                "notes": [],
            },
            "days": [
                {
                    "day_index": d,
                    "meals": [
                        {
                            "meal_slot": slot,
                            "title": f"Meal {d}-{slot}",
                            "description": "Simple and cheap",
                            "calories": 666.7,
                            "macros": {"protein_g": 30, "carbs_g": 60, "fat_g": 20},
                            "steps": ["Cook", "Serve"],
                            "ingredients": [
                                {"name": "Rice", "quantity": 100, "unit": "g", "category": "pantry", "est_price": price}
                            ],
                        }
                        for slot in slots
                    ],
                }
                for d in range(duration_days if days is None else days)
            ],
        })

    return build
