"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from recipe_calculator.adapters.sheets_client import HttpxSheetsClient
from recipe_calculator.config import Settings
from recipe_calculator.services.calculator import SessionStore
from recipe_calculator.services.ingredients import IngredientService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ingredient_service: IngredientService
    session_store: SessionStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    sheets_client = HttpxSheetsClient.create(
        csv_url=resolved_settings.ingredients_csv_url,
        submit_url=resolved_settings.ingredients_submit_url,
        timeout=resolved_settings.http_timeout_seconds,
    )

    async def close_resources() -> None:
        await sheets_client.close()

    return AppContainer(
        settings=resolved_settings,
        ingredient_service=IngredientService(sheets_client),
        session_store=SessionStore(resolved_settings.session_ttl_seconds),
        close_resources=close_resources,
    )
