from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


@dataclass(frozen=True)
class MealTemplate:
    slot: str
    title: str
    description: str
    base_calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class IngredientTemplate:
    name: str
    quantity: float
    unit: str
    category: str
    est_price: float


class MealCatalog(ABC):
    """Read-only source of meal templates, their ingredients and preparation steps."""

    @abstractmethod
    def templates_for_slot(self, slot: str) -> Sequence[MealTemplate]:
        ...

    @abstractmethod
    def ingredients_for(self, title: str) -> Optional[Sequence[IngredientTemplate]]:
        """None when the title has no ingredient mapping."""

    @abstractmethod
    def steps_for(self, title: str) -> Optional[Sequence[str]]:
        """None when the title has no step list."""


def _t(slot, title, description, kcal, p, c, f) -> MealTemplate:
    return MealTemplate(slot, title, description, kcal, p, c, f)


def _i(name, quantity, unit, category, price) -> IngredientTemplate:
    return IngredientTemplate(name, quantity, unit, category, price)


MEAL_TEMPLATES: Dict[str, List[MealTemplate]] = {
    "breakfast": [
        _t("breakfast", "Greek Yogurt Parfait", "Creamy yogurt layered with granola and fresh berries", 350, 20, 45, 10),
        _t("breakfast", "Avocado Toast", "Whole grain toast topped with mashed avocado and poached egg", 380, 15, 35, 22),
        _t("breakfast", "Overnight Oats", "Oats soaked in milk with chia seeds, honey, and banana", 400, 12, 65, 10),
        _t("breakfast", "Veggie Scramble", "Fluffy scrambled eggs with spinach, tomatoes, and cheese", 320, 22, 8, 24),
        _t("breakfast", "Banana Pancakes", "Light and fluffy pancakes made with ripe bananas", 420, 10, 70, 12),
    ],
    "lunch": [
        _t("lunch", "Chicken Caesar Wrap", "Grilled chicken with romaine lettuce and caesar dressing in a tortilla", 520, 35, 40, 25),
        _t("lunch", "Quinoa Buddha Bowl", "Nutritious quinoa with roasted vegetables and tahini dressing", 480, 18, 60, 20),
        _t("lunch", "Turkey Club Sandwich", "Classic club with turkey, bacon, lettuce, and tomato", 550, 32, 45, 28),
        _t("lunch", "Mediterranean Salad", "Fresh greens with feta, olives, cucumber, and grilled chicken", 450, 30, 25, 28),
        _t("lunch", "Black Bean Tacos", "Seasoned black beans with fresh salsa and guacamole", 480, 16, 58, 22),
    ],
    "dinner": [
        _t("dinner", "Baked Salmon", "Herb-crusted salmon fillet with roasted asparagus", 520, 42, 15, 32),
        _t("dinner", "Chicken Stir Fry", "Tender chicken with mixed vegetables in savory sauce", 480, 38, 35, 20),
        _t("dinner", "Pasta Primavera", "Penne pasta with seasonal vegetables in light garlic sauce", 550, 18, 75, 18),
        _t("dinner", "Beef Tacos", "Seasoned ground beef with fresh toppings in corn tortillas", 580, 32, 45, 30),
        _t("dinner", "Vegetable Curry", "Aromatic curry with chickpeas and mixed vegetables", 450, 15, 55, 18),
    ],
    "snack": [
        _t("snack", "Hummus & Veggies", "Creamy hummus with carrot and celery sticks", 180, 6, 20, 8),
        _t("snack", "Apple & Peanut Butter", "Sliced apple with natural peanut butter", 220, 6, 28, 12),
        _t("snack", "Trail Mix", "Mixed nuts, seeds, and dried fruit", 200, 5, 22, 12),
        _t("snack", "Greek Yogurt Cup", "Plain Greek yogurt with a drizzle of honey", 150, 15, 12, 4),
        _t("snack", "Cheese & Crackers", "Whole grain crackers with cheddar cheese", 190, 8, 18, 10),
    ],
}

INGREDIENT_TEMPLATES: Dict[str, List[IngredientTemplate]] = {
    "Greek Yogurt Parfait": [
        _i("Greek yogurt", 200, "g", "dairy", 1.50),
        _i("Granola", 50, "g", "pantry", 0.80),
        _i("Mixed berries", 100, "g", "produce", 2.00),
        _i("Honey", 15, "ml", "pantry", 0.30),
    ],
    "Avocado Toast": [
        _i("Whole grain bread", 2, "pcs", "pantry", 0.60),
        _i("Avocado", 1, "pcs", "produce", 1.50),
        _i("Eggs", 2, "pcs", "protein", 0.60),
        _i("Salt", 1, "pinch", "pantry", 0.05),
    ],
    "Overnight Oats": [
        _i("Rolled oats", 80, "g", "pantry", 0.40),
        _i("Milk", 200, "ml", "dairy", 0.50),
        _i("Chia seeds", 15, "g", "pantry", 0.60),
        _i("Banana", 1, "pcs", "produce", 0.30),
    ],
    "Veggie Scramble": [
        _i("Eggs", 3, "pcs", "protein", 0.90),
        _i("Spinach", 50, "g", "produce", 0.80),
        _i("Cherry tomatoes", 100, "g", "produce", 1.00),
        _i("Cheddar cheese", 30, "g", "dairy", 0.70),
    ],
    "Banana Pancakes": [
        _i("Flour", 150, "g", "pantry", 0.30),
        _i("Bananas", 2, "pcs", "produce", 0.50),
        _i("Eggs", 2, "pcs", "protein", 0.60),
        _i("Maple syrup", 30, "ml", "pantry", 0.80),
    ],
    "Chicken Caesar Wrap": [
        _i("Chicken breast", 150, "g", "protein", 2.50),
        _i("Romaine lettuce", 100, "g", "produce", 0.80),
        _i("Tortilla wrap", 1, "pcs", "pantry", 0.50),
        _i("Caesar dressing", 30, "ml", "pantry", 0.60),
        _i("Parmesan cheese", 20, "g", "dairy", 0.80),
    ],
    "Quinoa Buddha Bowl": [
        _i("Quinoa", 100, "g", "pantry", 1.00),
        _i("Sweet potato", 150, "g", "produce", 0.80),
        _i("Chickpeas", 100, "g", "pantry", 0.60),
        _i("Tahini", 30, "ml", "pantry", 0.70),
        _i("Kale", 50, "g", "produce", 0.90),
    ],
    "Turkey Club Sandwich": [
        _i("Turkey slices", 100, "g", "protein", 2.00),
        _i("Bacon", 50, "g", "protein", 1.50),
        _i("Bread", 3, "pcs", "pantry", 0.60),
        _i("Lettuce", 30, "g", "produce", 0.40),
        _i("Tomato", 1, "pcs", "produce", 0.50),
    ],
    "Mediterranean Salad": [
        _i("Mixed greens", 150, "g", "produce", 1.50),
        _i("Feta cheese", 50, "g", "dairy", 1.20),
        _i("Olives", 50, "g", "pantry", 0.80),
        _i("Cucumber", 100, "g", "produce", 0.60),
        _i("Chicken breast", 120, "g", "protein", 2.00),
    ],
    "Black Bean Tacos": [
        _i("Black beans", 200, "g", "pantry", 0.80),
        _i("Corn tortillas", 4, "pcs", "pantry", 0.80),
        _i("Avocado", 1, "pcs", "produce", 1.50),
        _i("Salsa", 60, "ml", "pantry", 0.60),
        _i("Lime", 1, "pcs", "produce", 0.30),
    ],
    "Baked Salmon": [
        _i("Salmon fillet", 180, "g", "protein", 4.50),
        _i("Asparagus", 150, "g", "produce", 2.00),
        _i("Lemon", 1, "pcs", "produce", 0.40),
        _i("Olive oil", 15, "ml", "pantry", 0.30),
        _i("Garlic", 2, "cloves", "produce", 0.20),
    ],
    "Chicken Stir Fry": [
        _i("Chicken breast", 180, "g", "protein", 3.00),
        _i("Bell peppers", 150, "g", "produce", 1.50),
        _i("Broccoli", 150, "g", "produce", 1.20),
        _i("Soy sauce", 30, "ml", "pantry", 0.40),
        _i("Rice", 100, "g", "pantry", 0.30),
    ],
    "Pasta Primavera": [
        _i("Penne pasta", 120, "g", "pantry", 0.60),
        _i("Zucchini", 100, "g", "produce", 0.80),
        _i("Cherry tomatoes", 100, "g", "produce", 1.00),
        _i("Garlic", 3, "cloves", "produce", 0.30),
        _i("Parmesan", 30, "g", "dairy", 1.00),
    ],
    "Beef Tacos": [
        _i("Ground beef", 150, "g", "protein", 2.50),
        _i("Corn tortillas", 4, "pcs", "pantry", 0.80),
        _i("Cheddar cheese", 50, "g", "dairy", 0.90),
        _i("Lettuce", 50, "g", "produce", 0.50),
        _i("Sour cream", 30, "ml", "dairy", 0.50),
    ],
    "Vegetable Curry": [
        _i("Chickpeas", 200, "g", "pantry", 0.80),
        _i("Coconut milk", 200, "ml", "pantry", 1.20),
        _i("Mixed vegetables", 200, "g", "produce", 1.50),
        _i("Curry paste", 30, "g", "pantry", 0.70),
        _i("Rice", 100, "g", "pantry", 0.30),
    ],
    "Hummus & Veggies": [
        _i("Hummus", 100, "g", "pantry", 1.20),
        _i("Carrots", 100, "g", "produce", 0.50),
        _i("Celery", 100, "g", "produce", 0.60),
    ],
    "Apple & Peanut Butter": [
        _i("Apple", 1, "pcs", "produce", 0.80),
        _i("Peanut butter", 30, "g", "pantry", 0.50),
    ],
    "Trail Mix": [
        _i("Mixed nuts", 40, "g", "pantry", 1.00),
        _i("Dried fruit", 30, "g", "pantry", 0.80),
    ],
    "Greek Yogurt Cup": [
        _i("Greek yogurt", 150, "g", "dairy", 1.20),
        _i("Honey", 10, "ml", "pantry", 0.20),
    ],
    "Cheese & Crackers": [
        _i("Cheddar cheese", 50, "g", "dairy", 1.00),
        _i("Whole grain crackers", 40, "g", "pantry", 0.80),
    ],
}

STEP_TEMPLATES: Dict[str, List[str]] = {
    "Greek Yogurt Parfait": ["Layer yogurt in a bowl", "Add granola on top", "Top with fresh berries", "Drizzle with honey"],
    "Avocado Toast": ["Toast the bread until golden", "Mash avocado with salt", "Spread avocado on toast", "Top with poached egg"],
    "Overnight Oats": ["Mix oats with milk and chia seeds", "Refrigerate overnight", "Top with sliced banana", "Drizzle with honey"],
    "Veggie Scramble": ["Beat eggs in a bowl", "Sauté spinach and tomatoes", "Add eggs and scramble", "Top with cheese"],
    "Banana Pancakes": ["Mash bananas and mix with eggs", "Add flour to make batter", "Cook on medium heat", "Serve with maple syrup"],
    "Chicken Caesar Wrap": ["Season and grill chicken", "Chop romaine lettuce", "Assemble in tortilla with dressing", "Roll and serve"],
    "Quinoa Buddha Bowl": ["Cook quinoa according to package", "Roast sweet potato and chickpeas", "Arrange over quinoa with kale", "Drizzle with tahini"],
    "Turkey Club Sandwich": ["Toast bread slices", "Cook bacon until crispy", "Layer turkey, bacon, lettuce, tomato", "Stack and slice diagonally"],
    "Mediterranean Salad": ["Grill chicken breast", "Chop vegetables and greens", "Combine all ingredients", "Top with feta and olives"],
    "Black Bean Tacos": ["Warm and season black beans", "Heat tortillas", "Prepare guacamole", "Assemble tacos with toppings"],
    "Baked Salmon": ["Preheat oven to 400°F", "Season salmon with herbs", "Arrange asparagus around salmon", "Bake for 15-18 minutes"],
    "Chicken Stir Fry": ["Slice chicken into strips", "Stir fry vegetables", "Add chicken and sauce", "Serve over rice"],
    "Pasta Primavera": ["Cook pasta al dente", "Sauté garlic and vegetables", "Toss pasta with vegetables", "Top with parmesan"],
    "Beef Tacos": ["Brown ground beef with seasoning", "Warm tortillas", "Prepare toppings", "Assemble and serve"],
    "Vegetable Curry": ["Sauté vegetables with curry paste", "Add coconut milk and chickpeas", "Simmer for 15 minutes", "Serve over rice"],
    "Hummus & Veggies": ["Cut vegetables into sticks", "Arrange on plate with hummus"],
    "Apple & Peanut Butter": ["Slice apple", "Serve with peanut butter for dipping"],
    "Trail Mix": ["Combine nuts and dried fruit", "Portion into serving size"],
    "Greek Yogurt Cup": ["Spoon yogurt into bowl", "Drizzle with honey"],
    "Cheese & Crackers": ["Slice cheese", "Arrange with crackers on plate"],
}


class StaticMealCatalog(MealCatalog):
    """Catalog backed by in-process tables; defaults to the built-in ones."""

    def __init__(
        self,
        templates: Optional[Dict[str, List[MealTemplate]]] = None,
        ingredients: Optional[Dict[str, List[IngredientTemplate]]] = None,
        steps: Optional[Dict[str, List[str]]] = None,
    ):
        self._templates = MEAL_TEMPLATES if templates is None else templates
        self._ingredients = INGREDIENT_TEMPLATES if ingredients is None else ingredients
        self._steps = STEP_TEMPLATES if steps is None else steps

    def templates_for_slot(self, slot: str) -> Sequence[MealTemplate]:
        return self._templates[slot]

    def ingredients_for(self, title: str) -> Optional[Sequence[IngredientTemplate]]:
        return self._ingredients.get(title)

    def steps_for(self, title: str) -> Optional[Sequence[str]]:
        return self._steps.get(title)


DEFAULT_CATALOG = StaticMealCatalog()
