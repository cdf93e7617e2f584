"""
Unit tests for grocery list aggregation.
"""

import pytest

from app.meal_plans.generate import generate_plan, plan_cost
from app.meal_plans.grocery import aggregate_groceries, groceries_by_category, grocery_key, grocery_total
from app.schemas.meal_plan import Day, Ingredient, Macros, Meal


def _meal(slot, *ingredients):
    return Meal(
        slot=slot,
        title=f"{slot} meal",
        calories=500,
        macros=Macros(protein_g=10, carbs_g=10, fat_g=10),
        ingredients=list(ingredients),
    )


def _ing(name, quantity, unit, price, category="other"):
    return Ingredient(name=name, quantity=quantity, unit=unit, category=category, est_price=price)


@pytest.fixture
def days():
    return [
        Day(day_index=0, meals=[
            _meal("lunch", _ing("Rice", 100, "g", 0.5, "pantry"), _ing("Eggs", 2, "pieces", 0.6, "protein")),
            _meal("dinner", _ing("rice", 150, "g", 0.75, "other"), _ing("Milk", 200, "ml", 0.4, "dairy")),
        ]),
        Day(day_index=1, meals=[
            _meal("lunch", _ing("Eggs", 3, "pieces", 0.9, "protein"), _ing("Milk", 1, "cup", 0.3, "dairy")),
        ]),
    ]


class TestAggregateGroceries:
    def test_same_name_and_unit_merge(self, days):
        items = aggregate_groceries(days)
        eggs = [i for i in items if i.name == "Eggs"]
        assert len(eggs) == 1
        assert eggs[0].quantity == 5
        assert eggs[0].est_price == pytest.approx(1.5)

    def test_name_match_is_case_insensitive(self, days):
        """First spelling and first category win."""
        rice = [i for i in aggregate_groceries(days) if i.name.lower() == "rice"]
        assert len(rice) == 1
        assert rice[0].name == "Rice"
        assert rice[0].category == "pantry"
        assert rice[0].quantity == 250

    def test_different_units_stay_separate(self, days):
        milk = [i for i in aggregate_groceries(days) if i.name == "Milk"]
        assert [(m.quantity, m.unit) for m in milk] == [(200, "ml"), (1, "cup")]

    def test_first_seen_order(self, days):
        items = aggregate_groceries(days)
        assert [(i.name, i.unit) for i in items] == [
            ("Rice", "g"), ("Eggs", "pieces"), ("Milk", "ml"), ("Milk", "cup"),
        ]

    def test_source_ingredients_untouched(self, days):
        aggregate_groceries(days)
        assert days[0].meals[0].ingredients[0].quantity == 100

    def test_empty_plan(self):
        assert aggregate_groceries([]) == []
        assert grocery_total([]) == 0

    def test_total_matches_plan_cost(self):
        plan = generate_plan(14, 4, 2000, 50)
        items = aggregate_groceries(plan.days)
        assert grocery_total(items) == pytest.approx(plan_cost(plan.days))
        assert len({grocery_key(i.name, i.unit) for i in items}) == len(items)


class TestGroceriesByCategory:
    def test_groups_preserve_order(self, days):
        grouped = groceries_by_category(aggregate_groceries(days))
        assert list(grouped) == ["pantry", "protein", "dairy"]
        assert [i.unit for i in grouped["dairy"]] == ["ml", "cup"]

    def test_every_item_lands_in_one_group(self):
        plan = generate_plan(7, 3, 2000, 50)
        items = aggregate_groceries(plan.days)
        grouped = groceries_by_category(items)
        assert sum(len(v) for v in grouped.values()) == len(items)
        for category, members in grouped.items():
            assert all(i.category == category for i in members)
