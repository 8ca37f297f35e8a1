"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from recipe_calculator.api.models import (
    GramsUpdate,
    Ingredient,
    NewIngredientForm,
    SelectedItem,
    SelectIngredientRequest,
    SessionState,
    TextUpdate,
    Totals,
)
from recipe_calculator.app_logging import configure_logging
from recipe_calculator.containers import AppContainer
from recipe_calculator.domain.errors import SubmissionError
from recipe_calculator.services.calculator import CalculatorSession
from recipe_calculator.services.ingredients import build_ingredient, filter_ingredients


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SubmissionError)
    async def submission_error(request: Request, exc: SubmissionError) -> JSONResponse:
        logger.info("Submission rejected: %s", exc.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/ingredients")
    async def list_ingredients(
        request: Request, search: str | None = None
    ) -> dict[str, list[Ingredient]]:
        """Return the shared ingredient catalog."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.ingredient_service.fetch_all()
        return {
            "ingredients": [
                Ingredient.from_record(record)
                for record in filter_ingredients(records, search)
            ]
        }

    @app.post("/ingredients", status_code=status.HTTP_201_CREATED)
    async def add_ingredient(form: NewIngredientForm, request: Request) -> Ingredient:
        """Submit a new ingredient to the shared catalog."""
        state_container: AppContainer = request.app.state.container
        record = build_ingredient(form.model_dump())
        await state_container.ingredient_service.add(record)
        return Ingredient.from_record(record)

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(request: Request) -> SessionState:
        """Start a recipe session with a freshly loaded catalog."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.create()
        await session.load_catalog(state_container.ingredient_service)
        return _session_state(session)

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> SessionState:
        """Return the current state of a session."""
        return _session_state(_get_session(request, session_id))

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_session(session_id: UUID, request: Request) -> None:
        """Dispose of a session."""
        state_container: AppContainer = request.app.state.container
        _get_session(request, session_id)
        state_container.session_store.dispose(session_id)

    @app.put("/sessions/{session_id}/name")
    async def set_recipe_name(
        session_id: UUID, update: TextUpdate, request: Request
    ) -> SessionState:
        """Set the recipe title."""
        session = _get_session(request, session_id)
        session.set_recipe_name(update.value)
        return _session_state(session)

    @app.put("/sessions/{session_id}/search")
    async def set_search_term(
        session_id: UUID, update: TextUpdate, request: Request
    ) -> SessionState:
        """Filter the session catalog by name."""
        session = _get_session(request, session_id)
        session.set_search_term(update.value)
        return _session_state(session)

    @app.post("/sessions/{session_id}/items", status_code=status.HTTP_201_CREATED)
    async def select_ingredient(
        session_id: UUID, body: SelectIngredientRequest, request: Request
    ) -> SessionState:
        """Add an ingredient to the recipe."""
        session = _get_session(request, session_id)
        if body.ingredient is not None:
            session.select(body.ingredient.to_record())
        elif body.catalog_index is not None:
            visible = session.visible_catalog()
            if body.catalog_index >= len(visible):
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Unknown catalog entry",
                )
            session.select(visible[body.catalog_index])
        else:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Provide catalog_index or ingredient",
            )
        return _session_state(session)

    @app.patch("/sessions/{session_id}/items/{index}")
    async def update_grams(
        session_id: UUID, index: int, update: GramsUpdate, request: Request
    ) -> SessionState:
        """Change the quantity of a selected ingredient."""
        session = _get_session(request, session_id)
        try:
            session.set_grams(index, update.grams)
        except IndexError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return _session_state(session)

    @app.delete("/sessions/{session_id}/items/{index}")
    async def remove_ingredient(
        session_id: UUID, index: int, request: Request
    ) -> SessionState:
        """Remove a selected ingredient."""
        session = _get_session(request, session_id)
        try:
            session.remove(index)
        except IndexError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return _session_state(session)

    @app.get("/sessions/{session_id}/totals")
    async def get_totals(session_id: UUID, request: Request) -> Totals:
        """Return the dish totals for a session."""
        return Totals.from_domain(_get_session(request, session_id).totals)

    @app.post("/sessions/{session_id}/reset")
    async def reset_session(session_id: UUID, request: Request) -> SessionState:
        """Clear the recipe while keeping the catalog."""
        session = _get_session(request, session_id)
        session.reset()
        return _session_state(session)

    @app.post("/sessions/{session_id}/refresh")
    async def refresh_catalog(session_id: UUID, request: Request) -> SessionState:
        """Reload the catalog from the spreadsheet."""
        state_container: AppContainer = request.app.state.container
        session = _get_session(request, session_id)
        await session.load_catalog(state_container.ingredient_service)
        return _session_state(session)

    @app.post(
        "/sessions/{session_id}/ingredients", status_code=status.HTTP_201_CREATED
    )
    async def add_session_ingredient(
        session_id: UUID, form: NewIngredientForm, request: Request
    ) -> SessionState:
        """Submit a new ingredient and reload the session catalog."""
        state_container: AppContainer = request.app.state.container
        session = _get_session(request, session_id)
        record = build_ingredient(form.model_dump())
        await session.add_ingredient(state_container.ingredient_service, record)
        return _session_state(session)

    return app


def _get_session(request: Request, session_id: UUID) -> CalculatorSession:
    """Look up a live session or raise 404."""
    container: AppContainer = request.app.state.container
    session = container.session_store.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return session


def _session_state(session: CalculatorSession) -> SessionState:
    return SessionState(
        id=str(session.id),
        recipe_name=session.recipe_name,
        search_term=session.search_term,
        loading=session.loading,
        catalog=[
            Ingredient.from_record(record) for record in session.visible_catalog()
        ],
        selected=[SelectedItem.from_domain(item) for item in session.selected],
        totals=Totals.from_domain(session.totals),
    )
