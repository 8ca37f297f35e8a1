"""Ingredient catalog backed by the spreadsheet service."""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from recipe_calculator.adapters.sheets_client import SheetsClient
from recipe_calculator.domain.errors import SubmissionError, UnavailableError
from recipe_calculator.domain.ingredients import IngredientRecord

FALLBACK_INGREDIENTS: tuple[IngredientRecord, ...] = (
    IngredientRecord(
        name="Ржаная мука", calories=298, proteins=9, fats=1.7, carbs=61.5
    ),
)

_NUMERIC_FIELDS = ("calories", "proteins", "fats", "carbs")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_logger = logging.getLogger(__name__)


@dataclass
class IngredientService:
    """Reads the shared ingredient list and submits new ingredients.

    Reads never fail: an unreachable or unreadable source is replaced with
    ``FALLBACK_INGREDIENTS`` so the calculator stays usable. Submissions
    always surface failures to the caller as ``SubmissionError``.
    """

    client: SheetsClient

    async def fetch_all(self) -> list[IngredientRecord]:
        """Return the ingredient catalog, or the fallback list on failure."""
        try:
            return await self._load()
        except UnavailableError as exc:
            _logger.warning("Ingredient source unavailable, using fallback: %s", exc)
            return list(FALLBACK_INGREDIENTS)

    async def add(self, record: IngredientRecord) -> bool:
        """Submit a new ingredient to the spreadsheet service."""
        if not record.name.strip() or record.calories is None:
            raise SubmissionError("Name and calories are required")
        payload = ingredient_payload(record)
        try:
            result = await self.client.submit_ingredient(payload)
        except Exception as exc:
            _logger.warning("Ingredient submission failed: %s", exc)
            raise SubmissionError(str(exc) or "Failed to add ingredient") from exc
        if not result.get("success"):
            message = result.get("error") or "Failed to add ingredient"
            _logger.warning("Ingredient service rejected %s: %s", record.name, message)
            raise SubmissionError(str(message))
        _logger.info("Ingredient added: %s", record.name)
        return True

    async def _load(self) -> list[IngredientRecord]:
        try:
            text = await self.client.fetch_csv()
        except Exception as exc:
            raise UnavailableError(f"fetch failed: {exc!r}") from exc
        try:
            return parse_ingredients_csv(text)
        except Exception as exc:
            raise UnavailableError(f"parse failed: {exc!r}") from exc


def parse_ingredients_csv(text: str) -> list[IngredientRecord]:
    """Parse ``name,calories,proteins,fats,carbs`` rows after a header line.

    Fields are split on bare commas; quoted names are not supported.
    """
    records: list[IngredientRecord] = []
    for row in text.split("\n")[1:]:
        fields = row.split(",")
        name = fields[0].strip()
        if not name:
            continue
        values = [_parse_leading_number(_field(fields, index)) for index in range(1, 5)]
        records.append(IngredientRecord(name, *values))
    return records


def build_ingredient(form: Mapping[str, object]) -> IngredientRecord:
    """Build a record from raw "new ingredient" form values."""
    name = str(form.get("name") or "").strip()
    calories = form.get("calories")
    if not name or calories is None or str(calories).strip() == "":
        raise SubmissionError("Name and calories are required")
    values = {field: _parse_number(form.get(field)) for field in _NUMERIC_FIELDS}
    return IngredientRecord(name=name, **values)


def ingredient_payload(record: IngredientRecord) -> dict[str, object]:
    """Serialize a record for the submission endpoint.

    Missing or non-numeric proteins, fats and carbs are sent as 0.
    """
    return {
        "name": record.name,
        "calories": record.calories,
        "proteins": _parse_number(record.proteins),
        "fats": _parse_number(record.fats),
        "carbs": _parse_number(record.carbs),
    }


def filter_ingredients(
    records: Iterable[IngredientRecord], term: str | None
) -> list[IngredientRecord]:
    """Return records whose name contains ``term``, ignoring case."""
    needle = (term or "").casefold()
    return [record for record in records if needle in record.name.casefold()]


def _field(fields: list[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def _parse_leading_number(raw: str) -> float:
    """Parse the numeric prefix of a CSV cell, or 0."""
    match = _LEADING_NUMBER.match(raw.strip())
    if match is None:
        return 0.0
    return _finite_or_zero(float(match.group()))


def _parse_number(raw: object) -> float:
    """Parse a whole form value as a number, or 0."""
    if isinstance(raw, bool) or raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        return _finite_or_zero(float(raw))
    text = str(raw).strip()
    if not text:
        return 0.0
    try:
        return _finite_or_zero(float(text))
    except ValueError:
        return 0.0


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0
