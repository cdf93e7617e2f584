from functools import lru_cache
from fastapi import Depends

from app.core.config import Settings, get_settings
from app.db.database import get_supabase
from app.meal_plans.ai_service import LLMPlanGenerator
from app.meal_plans.generate import StaticPlanGenerator
from app.meal_plans.repository import InMemoryPlanRepository, PlanRepository, SupabasePlanRepository
from app.meal_plans.service import PlanGenerator, PlanService
from app.profiles.repository import InMemoryProfileRepository, ProfileRepository, SupabaseProfileRepository

STORES = ("memory", "supabase")


@lru_cache
def _plan_repository(store: str) -> PlanRepository:
    if store == "memory":
        return InMemoryPlanRepository()
    if store == "supabase":
        return SupabasePlanRepository(get_supabase())
    raise ValueError(f"Unknown PLAN_STORE {store!r}; expected one of {STORES}")


@lru_cache
def _profile_repository(store: str) -> ProfileRepository:
    if store == "memory":
        return InMemoryProfileRepository()
    if store == "supabase":
        return SupabaseProfileRepository(get_supabase())
    raise ValueError(f"Unknown PLAN_STORE {store!r}; expected one of {STORES}")


def get_plan_repository(settings: Settings = Depends(get_settings)) -> PlanRepository:
    return _plan_repository(settings.PLAN_STORE)


def get_profile_repository(settings: Settings = Depends(get_settings)) -> ProfileRepository:
    return _profile_repository(settings.PLAN_STORE)


def get_plan_generator(settings: Settings = Depends(get_settings)) -> PlanGenerator:
    if settings.PLAN_GENERATOR == "static":
        return StaticPlanGenerator()
    if settings.PLAN_GENERATOR == "llm":
        return LLMPlanGenerator(settings)
    raise ValueError(f"Unknown PLAN_GENERATOR {settings.PLAN_GENERATOR!r}; expected 'static' or 'llm'")


def get_plan_service(
    repository: PlanRepository = Depends(get_plan_repository),
    generator: PlanGenerator = Depends(get_plan_generator),
) -> PlanService:
    return PlanService(repository, generator)
