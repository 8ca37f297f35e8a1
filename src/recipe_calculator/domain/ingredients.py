"""Domain models for ingredients and dish totals."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IngredientRecord:
    """A named food item with nutrition values per 100 grams."""

    name: str
    calories: float
    proteins: float
    fats: float
    carbs: float


@dataclass
class SelectedIngredient:
    """An ingredient bound to a gram quantity within one recipe.

    ``grams`` is ``None`` while the quantity field is left empty.
    """

    ingredient: IngredientRecord
    grams: float | None = 0.0


@dataclass(frozen=True)
class DishTotals:
    """Nutrition totals for the current recipe."""

    total_grams: float
    calories: float
    proteins: float
    fats: float
    carbs: float
