import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.api.deps import get_plan_service, get_profile_repository
from app.core.security import get_current_user_id
from app.meal_plans.errors import PlanFailedError
from app.meal_plans.generate import meals_for_day
from app.meal_plans.grocery import aggregate_groceries, groceries_by_category, grocery_total
from app.meal_plans.service import PlanService
from app.profiles.repository import ProfileRepository
from app.schemas.meal_plan import (
    DayMealsResponse,
    GeneratePlanRequest,
    GroceryCategoriesResponse,
    GroceryListResponse,
    PlanRecord,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _owned_plan(plan_id: str, user_id: str, service: PlanService) -> PlanRecord:
    plan = service.get(plan_id)
    # another user's plan is reported as missing
    if not plan or plan.user_id != user_id:
        raise HTTPException(status_code=404, detail="Plan not found")
    return plan


@router.post("/generate", response_model=PlanRecord, status_code=status.HTTP_201_CREATED)
def generate_plan(
    body: GeneratePlanRequest,
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    profile = body.profile or profiles.get(user_id)
    if profile is None:
        # Block generation until a profile exists
        raise HTTPException(status_code=status.HTTP_412_PRECONDITION_FAILED, detail="Profile required")
    try:
        return service.generate(user_id, profile, body.duration_weeks, body.meals_per_day)
    except PlanFailedError as e:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "id": e.record.id,
                "status": e.record.status,
                "generationNotes": e.record.generation_notes,
                "error": str(e),
            },
        )


@router.get("/latest", response_model=PlanRecord)
def get_latest_plan(
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
):
    plan = service.get_latest(user_id)
    if not plan:
        raise HTTPException(status_code=404, detail="No generated plan saved")
    return plan


@router.get("/{plan_id}", response_model=PlanRecord)
def get_plan(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
):
    return _owned_plan(plan_id, user_id, service)


@router.delete("/{plan_id}")
def delete_plan(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
):
    _owned_plan(plan_id, user_id, service)
    service.delete(plan_id)
    return {"success": True}


@router.get("/{plan_id}/days/{day_index}", response_model=DayMealsResponse)
def get_day_meals(
    plan_id: str,
    day_index: int,
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
):
    plan = _owned_plan(plan_id, user_id, service)
    return DayMealsResponse(day_index=day_index, meals=meals_for_day(plan.days, day_index))


@router.get("/{plan_id}/groceries", response_model=GroceryListResponse)
def get_groceries(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
):
    items = aggregate_groceries(_owned_plan(plan_id, user_id, service).days)
    return GroceryListResponse(items=items, total_cost=round(grocery_total(items), 2))


@router.get("/{plan_id}/groceries/by-category", response_model=GroceryCategoriesResponse)
def get_groceries_by_category(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PlanService = Depends(get_plan_service),
):
    items = aggregate_groceries(_owned_plan(plan_id, user_id, service).days)
    return GroceryCategoriesResponse(
        categories=groceries_by_category(items),
        total_cost=round(grocery_total(items), 2),
    )
