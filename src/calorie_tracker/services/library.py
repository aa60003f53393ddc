"""Services for managing the food library."""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from calorie_tracker.domain.errors import ResolutionError, ResolutionKind
from calorie_tracker.domain.foods import LibraryItem
from calorie_tracker.services.lookup import classify_failure
from calorie_tracker.services.storage import StateSlot, encode_library_item

DEFAULT_FOODS: tuple[LibraryItem, ...] = (
    LibraryItem(name="Pan-fried Bun", calories_per_unit=65, unit="piece"),
    LibraryItem(name="Noodles", calories_per_unit=350, unit="bowl"),
    LibraryItem(name="Yogurt", calories_per_unit=120, unit="cup"),
    LibraryItem(name="Cola", calories_per_unit=42, unit="100ml"),
    LibraryItem(name="Oatmeal (dry)", calories_per_unit=3.7, unit="g"),
    LibraryItem(name="Fried Rice", calories_per_unit=450, unit="bowl"),
    LibraryItem(name="White Rice", calories_per_unit=200, unit="bowl"),
    LibraryItem(name="Boiled Egg", calories_per_unit=70, unit="piece"),
    LibraryItem(name="Apple", calories_per_unit=95, unit="piece"),
    LibraryItem(name="Hamburger", calories_per_unit=500, unit="piece"),
)

_logger = logging.getLogger(__name__)


@dataclass
class FoodLibrary:
    """Append-only set of resolved foods keyed by name."""

    items: dict[str, LibraryItem] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    slot: StateSlot | None = None
    pending: dict[str, "asyncio.Future[LibraryItem]"] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    @classmethod
    def from_items(
        cls, items: list[LibraryItem], slot: StateSlot | None = None
    ) -> "FoodLibrary":
        """Build a library, keeping the first item seen for each name."""
        library = cls(slot=slot)
        for item in items:
            library.items.setdefault(item.name, item)
        return library

    def get(self, name: str) -> LibraryItem | None:
        """Return a stored item by name or remembered alias."""
        item = self.items.get(name)
        if item is not None:
            return item
        alias_target = self.aliases.get(name)
        if alias_target is None:
            return None
        return self.items.get(alias_target)

    async def lookup_or_insert(
        self, name: str, resolver: Callable[[], Awaitable[LibraryItem]]
    ) -> LibraryItem:
        """Return the cached item for a name, resolving and storing it if absent.

        Concurrent lookups of the same name share a single resolver call.
        """
        cached = self.get(name)
        if cached is not None:
            return cached

        pending = self.pending.get(name)
        if pending is None:
            pending = asyncio.ensure_future(self._resolve(name, resolver))
            self.pending[name] = pending
            pending.add_done_callback(lambda _: self.pending.pop(name, None))
        return await pending

    def add_manual(
        self, name: str, calories_per_unit: float, unit: str
    ) -> LibraryItem:
        """Store a user-entered item, keeping any existing item with that name."""
        item = _validate(
            LibraryItem(name=name, calories_per_unit=calories_per_unit, unit=unit)
        )
        return self._insert(item)

    def suggest(self, query: str) -> list[LibraryItem]:
        """Return items whose name contains the query (case-sensitive)."""
        return [item for item in self.items.values() if query in item.name]

    async def _resolve(
        self, name: str, resolver: Callable[[], Awaitable[LibraryItem]]
    ) -> LibraryItem:
        try:
            resolved = await resolver()
        except Exception as exc:
            raise classify_failure(exc) from exc
        stored = self._insert(_validate(resolved))
        if stored.name != name:
            self.aliases[name] = stored.name
        _logger.info("Library lookup: query=%s stored=%s", name, stored.name)
        return stored

    def _insert(self, item: LibraryItem) -> LibraryItem:
        existing = self.items.get(item.name)
        if existing is not None:
            return existing
        self.items[item.name] = item
        if self.slot is not None:
            self.slot.write(
                [encode_library_item(stored) for stored in self.items.values()]
            )
        return item


def _validate(item: object) -> LibraryItem:
    """Check a resolved item has a name, a unit and non-negative calories."""
    if not isinstance(item, LibraryItem):
        raise ResolutionError(ResolutionKind.MALFORMED, "Resolver returned no item")
    name = item.name.strip() if isinstance(item.name, str) else ""
    unit = item.unit.strip() if isinstance(item.unit, str) else ""
    calories = item.calories_per_unit
    if not name or not unit:
        raise ResolutionError(ResolutionKind.MALFORMED, "Item is missing name or unit")
    if (
        isinstance(calories, bool)
        or not isinstance(calories, int | float)
        or not math.isfinite(calories)
        or calories < 0
    ):
        raise ResolutionError(
            ResolutionKind.MALFORMED, f"Invalid calories for {name}: {calories!r}"
        )
    return LibraryItem(name=name, calories_per_unit=float(calories), unit=unit)
