import json
import logging
import re
import time
from typing import Any, Callable, Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from app.core.config import Settings
from app.meal_plans.errors import InvalidPlanError, LLMUnavailableError
from app.meal_plans.generate import budget_note, exceeds_budget, meal_slots_for_count, plan_cost
from app.meal_plans.prompts import build_system_prompt, build_user_prompt
from app.schemas.meal_plan import GeneratedPlan
from app.schemas.profile import ProfileBase

logger = logging.getLogger(__name__)


def _extract_json(text: str) -> str:
    m = re.search(r"```json\s*({.*})\s*```", text, re.DOTALL | re.IGNORECASE)
    if m:
        return m.group(1)
    start = text.find("{")
    end = text.rfind("}") + 1
    return text[start:end] if start != -1 and end > start else text


def _response_content(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise InvalidPlanError(f"Malformed model response: {e}") from e
    if not content:
        raise InvalidPlanError("No content in model response")
    return content


def parse_plan(raw: str) -> GeneratedPlan:
    try:
        data = json.loads(_extract_json(raw))
    except json.JSONDecodeError as e:
        raise InvalidPlanError(f"Model returned invalid JSON: {e}") from e
    try:
        return GeneratedPlan.model_validate(data)
    except ValidationError as e:
        raise InvalidPlanError(f"Plan does not match schema ({e.error_count()} errors)") from e


def validate_plan_shape(plan: GeneratedPlan, duration_days: int, meals_per_day: int) -> None:
    if len(plan.days) != duration_days:
        raise InvalidPlanError(f"Expected {duration_days} days, got {len(plan.days)}")
    for day in plan.days:
        if len(day.meals) != meals_per_day:
            raise InvalidPlanError(f"Day {day.day_index} has incorrect number of meals")
        for meal in day.meals:
            if not meal.ingredients:
                raise InvalidPlanError(f"Meal {meal.title} has no ingredients")


class LLMPlanGenerator:
    """
    Generates plans through an OpenAI chat completion.

    Retry policy: a plan over the budget envelope triggers one regeneration
    with a cheaper-ingredients directive; a failed attempt triggers one plain
    retry after a backoff, provided no retry has happened yet. Anything beyond
    that propagates to the caller.
    """

    def __init__(self, settings: Settings, client: Optional[Any] = None, sleep: Callable[[float], None] = time.sleep):
        self.settings = settings
        self._client = client
        self._sleep = sleep

    @property
    def client(self):
        if self._client is None:
            if not self.settings.OPENAI_API_KEY:
                raise LLMUnavailableError("OPENAI_API_KEY not configured")
            self._client = OpenAI(api_key=self.settings.OPENAI_API_KEY)
        return self._client

    def request_plan(
        self,
        profile: ProfileBase,
        duration_days: int,
        meals_per_day: int,
        target_calories: int,
        cheaper: bool = False,
    ) -> GeneratedPlan:
        slots = meal_slots_for_count(meals_per_day)
        system_prompt = build_system_prompt(profile, duration_days, meals_per_day, target_calories, slots, cheaper)
        try:
            response = self.client.chat.completions.create(
                model=self.settings.MODEL_NAME,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": build_user_prompt(duration_days, meals_per_day)},
                ],
                temperature=self.settings.TEMPERATURE,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise LLMUnavailableError(f"OpenAI API error: {e}") from e

        plan = parse_plan(_response_content(response))
        validate_plan_shape(plan, duration_days, meals_per_day)
        # the model's own cost figure is not trusted
        plan.meta.estimated_total_cost = round(plan_cost(plan.days), 2)
        plan.meta.duration_days = duration_days
        plan.meta.meals_per_day = meals_per_day
        plan.meta.target_calories = target_calories
        plan.meta.weekly_budget = profile.weekly_budget
        return plan

    def generate(self, profile: ProfileBase, duration_days: int, meals_per_day: int, target_calories: int) -> GeneratedPlan:
        retried = False
        try:
            plan = self.request_plan(profile, duration_days, meals_per_day, target_calories)
            if exceeds_budget(plan.meta.estimated_total_cost, profile.weekly_budget, duration_days):
                logger.info("[llm] Over budget (%.2f), retrying with cheaper meals", plan.meta.estimated_total_cost)
                retried = True
                plan = self.request_plan(profile, duration_days, meals_per_day, target_calories, cheaper=True)
        except Exception as e:
            if retried:
                raise
            logger.warning("[llm] Generation error: %s; retrying in %.1fs", e, self.settings.LLM_RETRY_BACKOFF_SECONDS)
            self._sleep(self.settings.LLM_RETRY_BACKOFF_SECONDS)
            plan = self.request_plan(profile, duration_days, meals_per_day, target_calories)

        note = budget_note(plan.meta.estimated_total_cost, profile.weekly_budget, duration_days)
        if note:
            plan.meta.notes.append(note)
        return plan
