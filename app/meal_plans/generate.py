import logging
from typing import Iterable, List, Optional

from app.meal_plans.catalog import DEFAULT_CATALOG, MealCatalog
from app.schemas.meal_plan import Day, GeneratedPlan, Ingredient, Macros, Meal, PlanMeta
from app.schemas.profile import ProfileBase
from app.utils.nutrition import round_half_up

logger = logging.getLogger(__name__)

SLOTS_BY_COUNT = {
    2: ["lunch", "dinner"],
    3: ["breakfast", "lunch", "dinner"],
    4: ["breakfast", "lunch", "dinner", "snack"],
}
FALLBACK_STEPS = ["Prepare ingredients", "Cook according to recipe", "Serve and enjoy"]
FALLBACK_INGREDIENT = Ingredient(name="Mixed ingredients", quantity=200, unit="g", category="other", est_price=3.00)
LOW_EFFORT_MAX_STEPS = 3
BUDGET_TOLERANCE = 1.15


def meal_slots_for_count(count: int) -> List[str]:
    return list(SLOTS_BY_COUNT.get(count, SLOTS_BY_COUNT[3]))


def steps_for_meal(title: str, effort: Optional[str], catalog: MealCatalog = DEFAULT_CATALOG) -> List[str]:
    steps = list(catalog.steps_for(title) or FALLBACK_STEPS)
    if effort == "low":
        return steps[:LOW_EFFORT_MAX_STEPS]
    return steps


def ingredients_for_meal(title: str, catalog: MealCatalog = DEFAULT_CATALOG) -> List[Ingredient]:
    # fresh objects per meal; grocery aggregation must never alias them
    templates = catalog.ingredients_for(title)
    if not templates:
        return [FALLBACK_INGREDIENT.model_copy()]
    return [
        Ingredient(name=t.name, quantity=t.quantity, unit=t.unit, category=t.category, est_price=t.est_price)
        for t in templates
    ]


def plan_cost(days: Iterable[Day]) -> float:
    return sum(ing.est_price for day in days for meal in day.meals for ing in meal.ingredients)


def meals_for_day(days: Iterable[Day], day_index: int) -> List[Meal]:
    for day in days:
        if day.day_index == day_index:
            return list(day.meals)
    return []


def prorated_budget(weekly_budget: float, duration_days: int) -> float:
    return weekly_budget * (duration_days / 7)


def exceeds_budget(total_cost: float, weekly_budget: float, duration_days: int) -> bool:
    return total_cost > prorated_budget(weekly_budget, duration_days) * BUDGET_TOLERANCE


def budget_note(total_cost: float, weekly_budget: float, duration_days: int) -> Optional[str]:
    """Advisory note when the plan costs more than the budget envelope, else None."""
    if not exceeds_budget(total_cost, weekly_budget, duration_days):
        return None
    budget = prorated_budget(weekly_budget, duration_days)
    if budget <= 0:
        return f"Estimated cost (${total_cost:.2f}) exceeds budget. Consider cheaper substitutions."
    overage = round_half_up((total_cost / budget - 1) * 100)
    return f"Estimated cost (${total_cost:.2f}) exceeds budget by {overage}%. Consider cheaper substitutions."


def generate_plan(
    duration_days: int,
    meals_per_day: int,
    target_calories: int,
    weekly_budget: float,
    diet_type: Optional[str] = None,
    allergies: Optional[List[str]] = None,
    cooking_effort: Optional[str] = None,
    catalog: MealCatalog = DEFAULT_CATALOG,
) -> GeneratedPlan:
    """
    Assemble a plan from catalog templates.

    Selection is a pure rotation: day ``d``, slot position ``i`` takes template
    ``(d + i) % len(templates)``, so identical inputs give identical plans.
    Every non-snack meal gets an equal share of ``target_calories``; snacks keep
    their template calories. ``diet_type`` and ``allergies`` are accepted for
    signature parity with the LLM generator but do not filter templates.
    """
    slots = meal_slots_for_count(meals_per_day)
    calories_per_meal = round_half_up(target_calories / len(slots))
    days: List[Day] = []
    total_cost = 0.0

    for day_index in range(duration_days):
        meals: List[Meal] = []
        for position, slot in enumerate(slots):
            templates = catalog.templates_for_slot(slot)
            template = templates[(day_index + position) % len(templates)]
            ingredients = ingredients_for_meal(template.title, catalog)
            total_cost += sum(ing.est_price for ing in ingredients)
            meals.append(Meal(
                slot=slot,
                title=template.title,
                description=template.description,
                calories=template.base_calories if slot == "snack" else calories_per_meal,
                macros=Macros(protein_g=template.protein_g, carbs_g=template.carbs_g, fat_g=template.fat_g),
                steps=steps_for_meal(template.title, cooking_effort, catalog),
                ingredients=ingredients,
            ))
        days.append(Day(day_index=day_index, meals=meals))

    notes: List[str] = []
    note = budget_note(total_cost, weekly_budget, duration_days)
    if note:
        logger.info("[plan] Over budget: cost=%.2f weekly_budget=%.2f days=%d", total_cost, weekly_budget, duration_days)
        notes.append(note)

    return GeneratedPlan(
        meta=PlanMeta(
            duration_days=duration_days,
            meals_per_day=len(slots),
            target_calories=target_calories,
            weekly_budget=weekly_budget,
            estimated_total_cost=round(total_cost, 2),
            notes=notes,
        ),
        days=days,
    )


class StaticPlanGenerator:
    """Deterministic generator over a template catalog."""

    def __init__(self, catalog: MealCatalog = DEFAULT_CATALOG):
        self.catalog = catalog

    def generate(self, profile: ProfileBase, duration_days: int, meals_per_day: int, target_calories: int) -> GeneratedPlan:
        return generate_plan(
            duration_days,
            meals_per_day,
            target_calories,
            profile.weekly_budget,
            diet_type=profile.diet_type,
            allergies=profile.allergies,
            cooking_effort=profile.cooking_effort,
            catalog=self.catalog,
        )
