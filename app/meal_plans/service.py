import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from app.meal_plans.errors import FAILED_PLAN_NOTICE, PlanFailedError
from app.meal_plans.repository import PlanRepository
from app.schemas.meal_plan import GeneratedPlan, PlanRecord
from app.schemas.profile import ProfileBase
from app.utils.nutrition import compute_target_calories

logger = logging.getLogger(__name__)


class PlanGenerator(Protocol):
    def generate(self, profile: ProfileBase, duration_days: int, meals_per_day: int, target_calories: int) -> GeneratedPlan:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanService:
    """Runs a generator and tracks its record through generating -> ready | failed."""

    def __init__(self, repository: PlanRepository, generator: PlanGenerator, clock: Callable[[], datetime] = _utcnow):
        self.repository = repository
        self.generator = generator
        self.clock = clock

    def generate(self, user_id: str, profile: ProfileBase, duration_weeks: int, meals_per_day: int) -> PlanRecord:
        duration_days = duration_weeks * 7
        target_calories = compute_target_calories(
            profile.sex, profile.height_cm, profile.weight_kg, profile.birth_date, profile.goal
        )
        logger.info(
            "[plan] Generating for user=%s days=%d meals_per_day=%d target_calories=%d",
            user_id, duration_days, meals_per_day, target_calories,
        )

        record = PlanRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            duration_days=duration_days,
            meals_per_day=meals_per_day,
            target_calories=target_calories,
            weekly_budget=profile.weekly_budget,
            status="generating",
            created_at=self.clock(),
        )
        self.repository.create(record)

        try:
            plan = self.generator.generate(profile, duration_days, meals_per_day, target_calories)
        except Exception as e:
            logger.exception("[plan] Generation failed for plan %s", record.id)
            raise self._mark_failed(record, e) from e

        record.days = plan.days
        record.estimated_total_cost = plan.meta.estimated_total_cost
        record.generation_notes = list(plan.meta.notes)
        record.status = "ready"
        try:
            self.repository.update(record)
        except Exception as e:
            logger.exception("[plan] Saving plan %s failed", record.id)
            raise self._mark_failed(record, e) from e
        logger.info("[plan] Plan saved successfully, id: %s", record.id)
        return record

    def _mark_failed(self, record: PlanRecord, cause: Exception) -> PlanFailedError:
        """Store the record as failed with no meals; returns the error to raise."""
        record.status = "failed"
        record.days = []
        record.estimated_total_cost = 0.0
        record.generation_notes = [FAILED_PLAN_NOTICE]
        self.repository.update(record)
        return PlanFailedError(record, cause)

    def get(self, plan_id: str) -> Optional[PlanRecord]:
        return self.repository.get(plan_id)

    def get_latest(self, user_id: str) -> Optional[PlanRecord]:
        plan = self.repository.get_latest_for_user(user_id)
        logger.info("[plan] Latest plan for user %s: %s", user_id, plan.id if plan else "not found")
        return plan

    def delete(self, plan_id: str) -> bool:
        deleted = self.repository.delete(plan_id)
        logger.info("[plan] Deleted plan %s: %s", plan_id, deleted)
        return deleted
