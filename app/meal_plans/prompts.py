from typing import List

from app.schemas.profile import ProfileBase

CHEAPER_DIRECTIVE = (
    "IMPORTANT: The previous plan exceeded budget. Use ONLY cheap, budget-friendly ingredients. "
    "Focus on beans, rice, eggs, seasonal vegetables, and affordable proteins."
)

SYSTEM_PROMPT = """
You are a professional nutritionist and meal planner. Generate a detailed meal plan in strict JSON format.
The user has the following profile:
- Sex: {sex}
- Goal: {goal}
- Diet type: {diet_type}
- Allergies to avoid: {allergies}
- Cooking effort preference: {cooking_effort}
- Weekly budget: ${weekly_budget}
{cheaper}
Target daily calories: {target_calories}
Duration: {duration_days} days
Meals per day: {meals_per_day} ({slots})

Return ONLY valid JSON matching this exact schema with no additional text:
{{
  "meta": {{
    "duration_days": {duration_days},
    "meals_per_day": {meals_per_day},
    "target_calories": {target_calories},
    "weekly_budget": {weekly_budget},
    "estimated_total_cost": <number>,
    "notes": [<any warnings or notes as strings>]
  }},
  "days": [
    {{
      "day_index": <0 to {last_day}>,
      "meals": [
        {{
          "meal_slot": "<breakfast|lunch|dinner|snack>",
          "title": "<meal name>",
          "description": "<brief description>",
          "calories": <number>,
          "macros": {{"protein_g": <number>, "carbs_g": <number>, "fat_g": <number>}},
          "steps": ["<step 1>", "<step 2>", ...],
          "ingredients": [
            {{"name": "<ingredient>", "quantity": <number>, "unit": "<g|ml|pcs|tbsp|tsp|cup>", "category": "<produce|protein|dairy|pantry|frozen|other>", "est_price": <number in USD>}}
          ]
        }}
      ]
    }}
  ]
}}

Requirements:
1. Each day must have exactly {meals_per_day} meals with slots: {slots}
2. Daily calories should total approximately {target_calories}
3. Include variety - don't repeat meals within 3 days
4. Respect dietary restrictions and allergies
5. Estimate realistic ingredient prices
6. Keep total cost within ${plan_budget:.2f} for the plan duration
""".strip()


def build_system_prompt(
    profile: ProfileBase,
    duration_days: int,
    meals_per_day: int,
    target_calories: int,
    slots: List[str],
    cheaper: bool = False,
) -> str:
    return SYSTEM_PROMPT.format(
        sex=profile.sex or "not specified",
        goal=profile.goal or "maintain weight",
        diet_type=profile.diet_type or "classic",
        allergies=", ".join(profile.allergies) or "none",
        cooking_effort=profile.cooking_effort or "medium",
        weekly_budget=profile.weekly_budget,
        cheaper=f"\n{CHEAPER_DIRECTIVE}\n" if cheaper else "",
        target_calories=target_calories,
        duration_days=duration_days,
        meals_per_day=meals_per_day,
        slots=", ".join(slots),
        last_day=duration_days - 1,
        plan_budget=profile.weekly_budget * (duration_days / 7),
    )


def build_user_prompt(duration_days: int, meals_per_day: int) -> str:
    return f"Generate a {duration_days}-day meal plan with {meals_per_day} meals per day."
