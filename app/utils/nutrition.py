import math
from datetime import date, datetime
from typing import Optional, Union

# Used when the profile has no birth date
DEFAULT_AGE = 25
ACTIVITY_FACTOR = 1.4
MIN_DAILY_CALORIES = 1200
GOAL_ADJUSTMENTS = {"lose": -400, "gain": 300}
DAYS_PER_YEAR = 365.25


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def age_in_years(birth_date: Optional[Union[date, datetime, str]], today: Optional[date] = None) -> int:
    if not birth_date:
        return DEFAULT_AGE
    today = today or date.today()
    days = (today - _as_date(birth_date)).days
    return int(days // DAYS_PER_YEAR)


def basal_metabolic_rate(sex: Optional[str], height_cm: float, weight_kg: float, age: int) -> float:
    # Mifflin-St Jeor; "other" and unknown share the female constant
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == "male":
        return base + 5
    return base - 161


def compute_target_calories(
    sex: Optional[str],
    height_cm: float,
    weight_kg: float,
    birth_date: Optional[Union[date, datetime, str]],
    goal: Optional[str],
    today: Optional[date] = None,
) -> int:
    """
    Daily calorie target: BMR scaled by a fixed activity factor, shifted by
    the goal adjustment and clamped to MIN_DAILY_CALORIES.
    """
    age = age_in_years(birth_date, today)
    tdee = basal_metabolic_rate(sex, height_cm, weight_kg, age) * ACTIVITY_FACTOR
    tdee += GOAL_ADJUSTMENTS.get(goal or "", 0)
    return max(MIN_DAILY_CALORIES, round_half_up(tdee))
