"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from recipe_calculator.adapters.sheets_client import SheetsClient
from recipe_calculator.config import Settings
from recipe_calculator.containers import AppContainer
from recipe_calculator.services.calculator import SessionStore
from recipe_calculator.services.ingredients import IngredientService

SAMPLE_CSV = (
    "Название,Калории,Белки,Жиры,Углеводы\n"
    "Яблоко,52,0.3,0.2,14\n"
    "Банан,89,1.1,0.3,22.8\n"
    "Курица (грудка),165,31,3.6,0\n"
)


@dataclass
class FakeSheetsClient(SheetsClient):
    """Fake spreadsheet client that records submissions."""

    csv_text: str = SAMPLE_CSV
    submit_response: dict[str, object] = field(
        default_factory=lambda: {"success": True}
    )
    fetch_error: Exception | None = None
    submit_error: Exception | None = None
    fetch_calls: int = 0
    submitted: list[dict[str, object]] = field(default_factory=list)

    async def fetch_csv(self) -> str:
        self.fetch_calls += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.csv_text

    async def submit_ingredient(self, payload: dict[str, object]) -> dict[str, object]:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(payload)
        return self.submit_response


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ingredients_csv_url="https://sheets.test/pub?output=csv",
        ingredients_submit_url="https://script.test/exec",
        http_timeout_seconds=5,
    )


@pytest.fixture
def sheets_client() -> FakeSheetsClient:
    return FakeSheetsClient()


@pytest.fixture
def ingredient_service(sheets_client: FakeSheetsClient) -> IngredientService:
    return IngredientService(sheets_client)


@pytest.fixture
def container(
    settings: Settings, ingredient_service: IngredientService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ingredient_service=ingredient_service,
        session_store=SessionStore(),
        close_resources=close_resources,
    )
