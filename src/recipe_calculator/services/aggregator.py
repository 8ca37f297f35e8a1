"""Nutrition aggregation for a recipe."""

from collections.abc import Iterable

from recipe_calculator.domain.ingredients import DishTotals, SelectedIngredient

ZERO_TOTALS = DishTotals(
    total_grams=0.0, calories=0.0, proteins=0.0, fats=0.0, carbs=0.0
)


def aggregate(items: Iterable[SelectedIngredient]) -> DishTotals:
    """Sum grams and scaled per-100g nutrition over the selected ingredients.

    Unset quantities count as zero grams. Values are not validated or rounded.
    """
    totals = ZERO_TOTALS
    for item in items:
        grams = item.grams or 0.0
        factor = grams / 100
        ingredient = item.ingredient
        totals = DishTotals(
            total_grams=totals.total_grams + grams,
            calories=totals.calories + ingredient.calories * factor,
            proteins=totals.proteins + ingredient.proteins * factor,
            fats=totals.fats + ingredient.fats * factor,
            carbs=totals.carbs + ingredient.carbs * factor,
        )
    return totals
