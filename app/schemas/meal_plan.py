from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import AliasChoices, Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.profile import ProfileBase

MealSlot = Literal["breakfast", "lunch", "dinner", "snack"]
IngredientCategory = Literal["produce", "protein", "dairy", "pantry", "frozen", "other"]
PlanStatus = Literal["generating", "ready", "failed"]


class Ingredient(CamelModel):
    name: str
    quantity: float
    unit: str
    category: IngredientCategory = "other"
    est_price: float


class Macros(CamelModel):
    protein_g: float
    carbs_g: float
    fat_g: float


class Meal(CamelModel):
    slot: MealSlot = Field(validation_alias=AliasChoices("slot", "meal_slot", "mealSlot"))
    title: str
    description: str = ""
    calories: int
    macros: Macros
    steps: List[str] = []
    ingredients: List[Ingredient]

    @field_validator("calories", mode="before")
    @classmethod
    def _round_calories(cls, v):
        if isinstance(v, float):
            return round(v)
        return v


class Day(CamelModel):
    day_index: int
    meals: List[Meal]


class PlanMeta(CamelModel):
    duration_days: int
    meals_per_day: int
    target_calories: int
    weekly_budget: float
    estimated_total_cost: float
    notes: List[str] = []


class GeneratedPlan(CamelModel):
    meta: PlanMeta
    days: List[Day]


class PlanRecord(CamelModel):
    id: str
    user_id: str
    duration_days: int
    meals_per_day: int
    target_calories: int
    weekly_budget: float
    estimated_total_cost: float = 0.0
    status: PlanStatus = "generating"
    generation_notes: List[str] = []
    created_at: datetime
    days: List[Day] = []


class GeneratePlanRequest(CamelModel):
    duration_weeks: Literal[1, 2] = 1
    meals_per_day: Literal[2, 3, 4] = 3
    # falls back to the stored profile when omitted
    profile: Optional[ProfileBase] = None


class GroceryItem(CamelModel):
    name: str
    category: IngredientCategory
    quantity: float
    unit: str
    est_price: float


class GroceryListResponse(CamelModel):
    items: List[GroceryItem]
    total_cost: float


class GroceryCategoriesResponse(CamelModel):
    categories: Dict[str, List[GroceryItem]]
    total_cost: float


class DayMealsResponse(CamelModel):
    day_index: int
    meals: List[Meal]
