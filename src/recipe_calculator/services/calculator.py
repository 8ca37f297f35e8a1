"""Recipe editing sessions."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from recipe_calculator.domain.ingredients import (
    DishTotals,
    IngredientRecord,
    SelectedIngredient,
)
from recipe_calculator.services.aggregator import aggregate
from recipe_calculator.services.ingredients import IngredientService, filter_ingredients

_logger = logging.getLogger(__name__)


@dataclass
class CalculatorSession:
    """State of one recipe being composed.

    Totals are derived from ``selected`` on every read and never stored.
    """

    id: UUID = field(default_factory=uuid4)
    catalog: list[IngredientRecord] = field(default_factory=list)
    selected: list[SelectedIngredient] = field(default_factory=list)
    recipe_name: str = ""
    search_term: str = ""
    loading: bool = False
    disposed: bool = False
    last_used_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def totals(self) -> DishTotals:
        """Current dish totals."""
        return aggregate(self.selected)

    def visible_catalog(self) -> list[IngredientRecord]:
        """Catalog entries matching the current search term."""
        return filter_ingredients(self.catalog, self.search_term)

    async def load_catalog(self, service: IngredientService) -> bool:
        """Fetch the catalog; returns False if the session went away meanwhile."""
        self.loading = True
        try:
            records = await service.fetch_all()
        finally:
            self.loading = False
        if self.disposed:
            _logger.info("Discarding catalog for disposed session %s", self.id)
            return False
        self.catalog = records
        return True

    async def add_ingredient(
        self, service: IngredientService, record: IngredientRecord
    ) -> None:
        """Submit a new ingredient and refresh the catalog."""
        await service.add(record)
        await self.load_catalog(service)

    def select(self, record: IngredientRecord) -> SelectedIngredient:
        """Add an ingredient to the recipe with zero grams."""
        item = SelectedIngredient(ingredient=record, grams=0.0)
        self.selected.append(item)
        return item

    def set_grams(self, index: int, grams: float | str | None) -> SelectedIngredient:
        """Set the quantity of a selected ingredient; empty input unsets it."""
        item = self._item(index)
        if grams is None or (isinstance(grams, str) and not grams.strip()):
            item.grams = None
        else:
            item.grams = float(grams)
        return item

    def remove(self, index: int) -> SelectedIngredient:
        """Remove a selected ingredient by position."""
        self._item(index)
        return self.selected.pop(index)

    def set_recipe_name(self, name: str) -> None:
        """Set the recipe title."""
        self.recipe_name = name.strip()

    def set_search_term(self, term: str) -> None:
        """Set the catalog search term."""
        self.search_term = term

    def reset(self) -> None:
        """Start a new recipe, keeping the loaded catalog."""
        self.selected = []
        self.recipe_name = ""
        self.search_term = ""

    def dispose(self) -> None:
        """Mark the session as torn down."""
        self.disposed = True

    def _item(self, index: int) -> SelectedIngredient:
        if index < 0 or index >= len(self.selected):
            raise IndexError(f"No selected ingredient at position {index}")
        return self.selected[index]


@dataclass
class SessionStore:
    """In-memory registry of calculator sessions.

    Sessions unused for ``ttl_seconds`` are evicted and disposed on the next
    ``get`` or ``create``.
    """

    ttl_seconds: int
    _sessions: dict[UUID, CalculatorSession]

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self.ttl_seconds = ttl_seconds
        self._sessions = {}

    def create(self) -> CalculatorSession:
        """Create and register a new session."""
        self._evict_expired()
        session = CalculatorSession()
        self._sessions[session.id] = session
        return session

    def get(self, session_id: UUID) -> CalculatorSession | None:
        """Return a live session by id and mark it used."""
        self._evict_expired()
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_used_at = datetime.now(tz=UTC)
        return session

    def dispose(self, session_id: UUID) -> None:
        """Drop a session; late results for it are ignored."""
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.dispose()

    def _evict_expired(self) -> None:
        cutoff = datetime.now(tz=UTC) - timedelta(seconds=self.ttl_seconds)
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.last_used_at <= cutoff
        ]
        for session_id in expired:
            _logger.info("Expiring idle session %s", session_id)
            self.dispose(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
