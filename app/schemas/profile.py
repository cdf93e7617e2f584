from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import AliasChoices, Field

from app.schemas.base import CamelModel

Sex = Literal["male", "female", "other"]
Goal = Literal["lose", "maintain", "gain"]
DietType = Literal["classic", "vegetarian", "vegan", "pescatarian", "keto"]
CookingEffort = Literal["low", "medium", "high"]
MeasurementUnit = Literal["metric", "imperial"]


class ProfileBase(CamelModel):
    # the onboarding wizard sends "gender"
    sex: Optional[Sex] = Field(None, validation_alias=AliasChoices("sex", "gender"))
    height_cm: float = Field(170, gt=0)
    weight_kg: float = Field(70, gt=0)
    birth_date: Optional[date] = None
    goal: Optional[Goal] = None
    diet_type: Optional[DietType] = None
    allergies: List[str] = []
    cooking_effort: Optional[CookingEffort] = None
    weekly_budget: float = Field(50, ge=0)


class ProfileUpsert(ProfileBase):
    measurement_unit: MeasurementUnit = "metric"
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class UserProfile(ProfileUpsert):
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
