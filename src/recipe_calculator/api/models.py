"""Pydantic models for the calculator API."""

from pydantic import BaseModel, Field, field_validator

from recipe_calculator.domain.ingredients import (
    DishTotals,
    IngredientRecord,
    SelectedIngredient,
)


class Ingredient(BaseModel):
    """Ingredient with nutrition per 100 grams."""

    name: str
    calories: float
    proteins: float
    fats: float
    carbs: float

    @classmethod
    def from_record(cls, record: IngredientRecord) -> "Ingredient":
        return cls(
            name=record.name,
            calories=record.calories,
            proteins=record.proteins,
            fats=record.fats,
            carbs=record.carbs,
        )

    def to_record(self) -> IngredientRecord:
        return IngredientRecord(
            name=self.name,
            calories=self.calories,
            proteins=self.proteins,
            fats=self.fats,
            carbs=self.carbs,
        )


class NewIngredientForm(BaseModel):
    """Raw values from the "new ingredient" form."""

    name: str = ""
    calories: str | float | None = None
    proteins: str | float | None = None
    fats: str | float | None = None
    carbs: str | float | None = None


class SelectIngredientRequest(BaseModel):
    """Select a catalog entry by position or pass an ingredient inline."""

    catalog_index: int | None = Field(default=None, ge=0)
    ingredient: Ingredient | None = None


class GramsUpdate(BaseModel):
    """New quantity for a selected ingredient; null or empty clears it."""

    grams: float | None = Field(default=None, allow_inf_nan=False)

    @field_validator("grams", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TextUpdate(BaseModel):
    """Single text value update."""

    value: str = ""


class SelectedItem(BaseModel):
    """Selected ingredient with its quantity."""

    ingredient: Ingredient
    grams: float | None

    @classmethod
    def from_domain(cls, item: SelectedIngredient) -> "SelectedItem":
        return cls(ingredient=Ingredient.from_record(item.ingredient), grams=item.grams)


class Totals(BaseModel):
    """Dish totals plus one-decimal display strings."""

    total_grams: float
    calories: float
    proteins: float
    fats: float
    carbs: float
    display: dict[str, str]

    @classmethod
    def from_domain(cls, totals: DishTotals) -> "Totals":
        return cls(
            total_grams=totals.total_grams,
            calories=totals.calories,
            proteins=totals.proteins,
            fats=totals.fats,
            carbs=totals.carbs,
            display={
                "total_grams": f"{totals.total_grams:.1f} g",
                "calories": f"{totals.calories:.1f} kcal",
                "proteins": f"{totals.proteins:.1f} g",
                "fats": f"{totals.fats:.1f} g",
                "carbs": f"{totals.carbs:.1f} g",
            },
        )


class SessionState(BaseModel):
    """Full state of a calculator session."""

    id: str
    recipe_name: str
    search_term: str
    loading: bool
    catalog: list[Ingredient]
    selected: list[SelectedItem]
    totals: Totals
