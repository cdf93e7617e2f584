from typing import Dict, Iterable, List

from app.schemas.meal_plan import Day, GroceryItem


def grocery_key(name: str, unit: str) -> str:
    return f"{name.lower()}-{unit or ''}"


def aggregate_groceries(days: Iterable[Day]) -> List[GroceryItem]:
    """
    One grocery line per (lowercased name, unit), quantities and prices summed
    across every meal in plan order. Category and spelling come from the first
    occurrence; the same name under two units stays on two lines. Output keeps
    first-seen order.
    """
    items: Dict[str, GroceryItem] = {}
    for day in days:
        for meal in day.meals:
            for ing in meal.ingredients:
                key = grocery_key(ing.name, ing.unit)
                existing = items.get(key)
                if existing:
                    existing.quantity += ing.quantity or 0
                    existing.est_price += ing.est_price or 0
                else:
                    items[key] = GroceryItem(
                        name=ing.name,
                        category=ing.category or "other",
                        quantity=ing.quantity or 0,
                        unit=ing.unit or "",
                        est_price=ing.est_price or 0,
                    )
    return list(items.values())


def groceries_by_category(items: Iterable[GroceryItem]) -> Dict[str, List[GroceryItem]]:
    grouped: Dict[str, List[GroceryItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def grocery_total(items: Iterable[GroceryItem]) -> float:
    return sum(item.est_price for item in items)

