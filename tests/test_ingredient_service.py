"""Tests for the ingredient catalog service."""

import asyncio

import httpx
import pytest

from recipe_calculator.domain.errors import SubmissionError
from recipe_calculator.domain.ingredients import IngredientRecord
from recipe_calculator.services.ingredients import (
    FALLBACK_INGREDIENTS,
    IngredientService,
    build_ingredient,
    filter_ingredients,
    parse_ingredients_csv,
)
from tests.conftest import FakeSheetsClient

HEADER = "name,calories,proteins,fats,carbs\n"


def test_parse_single_row_after_header() -> None:
    records = parse_ingredients_csv(HEADER + "Name,100,10,5,20")

    assert records == [
        IngredientRecord(name="Name", calories=100, proteins=10, fats=5, carbs=20)
    ]


def test_parse_drops_rows_with_blank_name() -> None:
    records = parse_ingredients_csv(HEADER + " ,10,1,1,1\nOats,389,16.9,6.9,66.3\n\n")

    assert [record.name for record in records] == ["Oats"]


def test_parse_non_numeric_field_defaults_to_zero() -> None:
    records = parse_ingredients_csv(HEADER + "Name,abc,1,1,1")

    assert records[0].calories == 0
    assert records[0].proteins == 1


def test_parse_missing_fields_and_crlf() -> None:
    records = parse_ingredients_csv(HEADER + "Salt,0\r\nSugar,399,0,0,99.8\r\n")

    assert records == [
        IngredientRecord(name="Salt", calories=0, proteins=0, fats=0, carbs=0),
        IngredientRecord(name="Sugar", calories=399, proteins=0, fats=0, carbs=99.8),
    ]


def test_parse_reads_numeric_prefix() -> None:
    records = parse_ingredients_csv(HEADER + "Butter,748 kcal,0.5g,82.5,0.8")

    assert records[0].calories == 748
    assert records[0].proteins == 0.5


def test_parse_keeps_order_and_duplicates() -> None:
    records = parse_ingredients_csv(
        HEADER + "Rice,130,2.7,0.3,28\nEgg,155,13,11,1.1\nRice,130,2.7,0.3,28"
    )

    assert [record.name for record in records] == ["Rice", "Egg", "Rice"]


def test_parse_header_only() -> None:
    assert parse_ingredients_csv(HEADER) == []
    assert parse_ingredients_csv("") == []


def test_fetch_all_parses_source(ingredient_service: IngredientService) -> None:
    records = asyncio.run(ingredient_service.fetch_all())

    assert [record.name for record in records] == [
        "Яблоко",
        "Банан",
        "Курица (грудка)",
    ]
    assert records[2].proteins == 31


def test_fetch_all_falls_back_on_network_failure() -> None:
    client = FakeSheetsClient(fetch_error=httpx.ConnectError("offline"))
    service = IngredientService(client)

    records = asyncio.run(service.fetch_all())

    assert records == list(FALLBACK_INGREDIENTS)
    assert len(records) == 1
    assert records[0].name == "Ржаная мука"
    assert records[0].calories == 298


def test_fetch_all_falls_back_on_unreadable_body() -> None:
    client = FakeSheetsClient(csv_text=None)  # type: ignore[arg-type]
    service = IngredientService(client)

    assert asyncio.run(service.fetch_all()) == list(FALLBACK_INGREDIENTS)


def test_add_posts_payload(
    ingredient_service: IngredientService, sheets_client: FakeSheetsClient
) -> None:
    record = IngredientRecord(
        name="Oats", calories=389, proteins=16.9, fats=6.9, carbs=66.3
    )

    assert asyncio.run(ingredient_service.add(record)) is True
    assert sheets_client.submitted == [
        {"name": "Oats", "calories": 389, "proteins": 16.9, "fats": 6.9, "carbs": 66.3}
    ]


def test_add_surfaces_service_error() -> None:
    client = FakeSheetsClient(submit_response={"success": False, "error": "duplicate"})
    service = IngredientService(client)
    record = IngredientRecord(name="Oats", calories=389, proteins=0, fats=0, carbs=0)

    with pytest.raises(SubmissionError) as excinfo:
        asyncio.run(service.add(record))

    assert excinfo.value.message == "duplicate"
    assert str(excinfo.value) == "duplicate"


def test_add_missing_success_flag_uses_generic_message() -> None:
    service = IngredientService(FakeSheetsClient(submit_response={}))
    record = IngredientRecord(name="Oats", calories=389, proteins=0, fats=0, carbs=0)

    with pytest.raises(SubmissionError, match="Failed to add ingredient"):
        asyncio.run(service.add(record))


def test_add_wraps_transport_failure() -> None:
    client = FakeSheetsClient(submit_error=httpx.ConnectError("offline"))
    service = IngredientService(client)
    record = IngredientRecord(name="Oats", calories=389, proteins=0, fats=0, carbs=0)

    with pytest.raises(SubmissionError, match="offline"):
        asyncio.run(service.add(record))


def test_add_requires_name(sheets_client: FakeSheetsClient) -> None:
    service = IngredientService(sheets_client)
    record = IngredientRecord(name="  ", calories=10, proteins=0, fats=0, carbs=0)

    with pytest.raises(SubmissionError):
        asyncio.run(service.add(record))
    assert sheets_client.submitted == []


def test_build_ingredient_coerces_numbers() -> None:
    record = build_ingredient(
        {
            "name": " Oats ",
            "calories": "389",
            "proteins": "16.9",
            "fats": "",
            "carbs": "x",
        }
    )

    assert record == IngredientRecord(
        name="Oats", calories=389, proteins=16.9, fats=0, carbs=0
    )


@pytest.mark.parametrize(
    "form",
    [
        {"name": "", "calories": "100"},
        {"name": "Oats", "calories": ""},
        {"name": "Oats"},
    ],
)
def test_build_ingredient_requires_name_and_calories(form) -> None:
    with pytest.raises(SubmissionError, match="required"):
        build_ingredient(form)


def test_filter_ingredients_ignores_case() -> None:
    records = parse_ingredients_csv(
        HEADER + "Rice,130,2.7,0.3,28\nWild rice,101,4,0.3,21\nEgg,155,13,11,1.1"
    )

    assert [record.name for record in filter_ingredients(records, "RICE")] == [
        "Rice",
        "Wild rice",
    ]
    assert len(filter_ingredients(records, "")) == 3
    assert len(filter_ingredients(records, None)) == 3


def test_add_sends_zero_for_missing_macros(
    ingredient_service: IngredientService, sheets_client: FakeSheetsClient
) -> None:
    record = IngredientRecord(
        name="Honey",
        calories=304,
        proteins=None,  # type: ignore[arg-type]
        fats="n/a",  # type: ignore[arg-type]
        carbs="82.4",  # type: ignore[arg-type]
    )

    asyncio.run(ingredient_service.add(record))

    assert sheets_client.submitted == [
        {"name": "Honey", "calories": 304, "proteins": 0, "fats": 0, "carbs": 82.4}
    ]
