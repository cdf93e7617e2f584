import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.schemas.meal_plan import Day, Ingredient, Macros, Meal, PlanRecord

logger = logging.getLogger(__name__)

PLAN_TABLE = "plans"
MEAL_TABLE = "plan_meals"
INGREDIENT_TABLE = "meal_ingredients"
SLOT_RANK = {"breakfast": 0, "lunch": 1, "dinner": 2, "snack": 3}


class PlanRepository(ABC):
    """Storage for plan records. Implementations own their own lifetime and locking."""

    @abstractmethod
    def create(self, record: PlanRecord) -> PlanRecord:
        ...

    @abstractmethod
    def update(self, record: PlanRecord) -> PlanRecord:
        ...

    @abstractmethod
    def get(self, plan_id: str) -> Optional[PlanRecord]:
        ...

    @abstractmethod
    def get_latest_for_user(self, user_id: str) -> Optional[PlanRecord]:
        """Most recent plan in status ``ready`` for the user."""

    @abstractmethod
    def delete(self, plan_id: str) -> bool:
        ...


class InMemoryPlanRepository(PlanRepository):
    def __init__(self):
        self._plans: Dict[str, PlanRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: PlanRecord) -> PlanRecord:
        with self._lock:
            self._plans[record.id] = record.model_copy(deep=True)
        return record

    def update(self, record: PlanRecord) -> PlanRecord:
        with self._lock:
            if record.id not in self._plans:
                raise KeyError(record.id)
            self._plans[record.id] = record.model_copy(deep=True)
        return record

    def get(self, plan_id: str) -> Optional[PlanRecord]:
        with self._lock:
            stored = self._plans.get(plan_id)
        return stored.model_copy(deep=True) if stored else None

    def get_latest_for_user(self, user_id: str) -> Optional[PlanRecord]:
        with self._lock:
            plans = [p for p in self._plans.values() if p.user_id == user_id and p.status == "ready"]
        if not plans:
            return None
        latest = max(plans, key=lambda p: p.created_at)
        return latest.model_copy(deep=True)

    def delete(self, plan_id: str) -> bool:
        with self._lock:
            return self._plans.pop(plan_id, None) is not None


class SupabasePlanRepository(PlanRepository):
    """
    Plans live in three tables:

      plans(id, user_id, duration_days, meals_per_day, target_calories, weekly_budget,
            estimated_total_cost, status, generation_notes jsonb, created_at)
      plan_meals(id, plan_id, day_index, meal_slot, title, description, calories,
                 protein_g, carbs_g, fat_g, steps jsonb)
      meal_ingredients(id, meal_id, name, quantity, unit, category, est_price)

    Each update rewrites the plan's meals and ingredients before the plan row,
    so a failed write leaves the previous status in place.
    """

    def __init__(self, client):
        self.sb = client

    def _plan_row(self, record: PlanRecord) -> Dict[str, Any]:
        return {
            "id": record.id,
            "user_id": record.user_id,
            "duration_days": record.duration_days,
            "meals_per_day": record.meals_per_day,
            "target_calories": record.target_calories,
            "weekly_budget": record.weekly_budget,
            "estimated_total_cost": record.estimated_total_cost,
            "status": record.status,
            "generation_notes": list(record.generation_notes),
            "created_at": record.created_at.isoformat(),
        }

    def create(self, record: PlanRecord) -> PlanRecord:
        self.sb.table(PLAN_TABLE).insert(self._plan_row(record)).execute()
        logger.info("[db] Plan record created: %s", record.id)
        return record

    def update(self, record: PlanRecord) -> PlanRecord:
        # meals first; the plan row and its status go last
        self._replace_meals(record.id, record.days)
        row = self._plan_row(record)
        row.pop("id")
        row.pop("created_at")
        self.sb.table(PLAN_TABLE).update(row).eq("id", record.id).execute()
        return record

    def _replace_meals(self, plan_id: str, days: List[Day]) -> None:
        self._delete_meals(plan_id)
        for day in days:
            for meal in day.meals:
                res = self.sb.table(MEAL_TABLE).insert({
                    "plan_id": plan_id,
                    "day_index": day.day_index,
                    "meal_slot": meal.slot,
                    "title": meal.title,
                    "description": meal.description,
                    "calories": meal.calories,
                    "protein_g": meal.macros.protein_g,
                    "carbs_g": meal.macros.carbs_g,
                    "fat_g": meal.macros.fat_g,
                    "steps": meal.steps,
                }).execute()
                rows = getattr(res, "data", []) or []
                if not rows:
                    raise RuntimeError(f"Meal insert returned no row for plan {plan_id}")
                meal_id = rows[0]["id"]
                self.sb.table(INGREDIENT_TABLE).insert([
                    {
                        "meal_id": meal_id,
                        "name": ing.name,
                        "quantity": ing.quantity,
                        "unit": ing.unit,
                        "category": ing.category,
                        "est_price": ing.est_price,
                    }
                    for ing in meal.ingredients
                ]).execute()

    def _delete_meals(self, plan_id: str) -> None:
        res = self.sb.table(MEAL_TABLE).select("id").eq("plan_id", plan_id).execute()
        meal_ids = [r["id"] for r in (getattr(res, "data", []) or [])]
        if meal_ids:
            self.sb.table(INGREDIENT_TABLE).delete().in_("meal_id", meal_ids).execute()
            self.sb.table(MEAL_TABLE).delete().eq("plan_id", plan_id).execute()

    def _load_days(self, plan_id: str) -> List[Day]:
        res = self.sb.table(MEAL_TABLE).select("*").eq("plan_id", plan_id).order("day_index", desc=False).execute()
        meal_rows = getattr(res, "data", []) or []
        if not meal_rows:
            return []
        res = self.sb.table(INGREDIENT_TABLE).select("*").in_("meal_id", [r["id"] for r in meal_rows]).order("id", desc=False).execute()
        ingredients_by_meal: Dict[Any, List[Ingredient]] = {}
        for r in getattr(res, "data", []) or []:
            ingredients_by_meal.setdefault(r["meal_id"], []).append(Ingredient(
                name=r.get("name"),
                quantity=float(r.get("quantity") or 0),
                unit=r.get("unit") or "",
                category=r.get("category") or "other",
                est_price=float(r.get("est_price") or 0),
            ))

        grouped: Dict[int, List[Meal]] = {}
        for r in sorted(meal_rows, key=lambda r: (r["day_index"], SLOT_RANK.get(r["meal_slot"], 99))):
            grouped.setdefault(int(r["day_index"]), []).append(Meal(
                slot=r["meal_slot"],
                title=r.get("title") or "",
                description=r.get("description") or "",
                calories=int(r.get("calories") or 0),
                macros=Macros(
                    protein_g=float(r.get("protein_g") or 0),
                    carbs_g=float(r.get("carbs_g") or 0),
                    fat_g=float(r.get("fat_g") or 0),
                ),
                steps=r.get("steps") or [],
                ingredients=ingredients_by_meal.get(r["id"], []),
            ))
        return [Day(day_index=i, meals=meals) for i, meals in sorted(grouped.items())]

    def _to_record(self, row: Dict[str, Any]) -> PlanRecord:
        notes = row.get("generation_notes") or []
        return PlanRecord(
            id=str(row["id"]),
            user_id=row["user_id"],
            duration_days=int(row.get("duration_days") or 0),
            meals_per_day=int(row.get("meals_per_day") or 0),
            target_calories=int(row.get("target_calories") or 0),
            weekly_budget=float(row.get("weekly_budget") or 0),
            estimated_total_cost=float(row.get("estimated_total_cost") or 0),
            status=row.get("status") or "generating",
            generation_notes=list(notes),
            created_at=row["created_at"],
            days=self._load_days(str(row["id"])),
        )

    def get(self, plan_id: str) -> Optional[PlanRecord]:
        res = self.sb.table(PLAN_TABLE).select("*").eq("id", plan_id).limit(1).execute()
        rows = getattr(res, "data", []) or []
        return self._to_record(rows[0]) if rows else None

    def get_latest_for_user(self, user_id: str) -> Optional[PlanRecord]:
        res = (
            self.sb.table(PLAN_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("status", "ready")
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        rows = getattr(res, "data", []) or []
        return self._to_record(rows[0]) if rows else None

    def delete(self, plan_id: str) -> bool:
        self._delete_meals(plan_id)
        res = self.sb.table(PLAN_TABLE).delete().eq("id", plan_id).execute()
        return bool(getattr(res, "data", []) or [])
