import json
from typing import Iterable, List, Tuple, get_args

import structlog
from pydantic import TypeAdapter

from ..schemas.clothing import ClothingCategory, ClothingItem


logger = structlog.get_logger("tryon.catalog")

CATEGORIES: Tuple[str, ...] = get_args(ClothingCategory)

_items_adapter = TypeAdapter(List[ClothingItem])


class InvalidCategory(ValueError):
    pass


class ClothingItemNotFound(LookupError):
    pass


def is_valid_category(category: str | None) -> bool:
    return category in CATEGORIES


class Catalog:
    """Read-only clothing catalog. Built once at startup and handed out via a dependency."""

    def __init__(self, items: Iterable[ClothingItem] = ()) -> None:
        self._items: Tuple[ClothingItem, ...] = tuple(items)

    @classmethod
    def from_file(cls, path: str) -> "Catalog":
        """Load items from a JSON array. A missing or broken file gives an empty catalog."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                items = _items_adapter.validate_python(json.load(f))
        except (OSError, ValueError) as e:
            logger.error("catalog_load_failed", path=path, error=str(e))
            return cls()
        logger.info("catalog_loaded", path=path, items=len(items))
        return cls(items)

    def __len__(self) -> int:
        return len(self._items)

    def all(self) -> List[ClothingItem]:
        return list(self._items)

    def by_category(self, category: str) -> List[ClothingItem]:
        if not is_valid_category(category):
            raise InvalidCategory(f"Invalid category: {category}")
        return [item for item in self._items if item.category == category]

    def get(self, item_id: str) -> ClothingItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise ClothingItemNotFound(f"Clothing item not found: {item_id}")

    def search(self, category: str | None = None, query: str | None = None) -> List[ClothingItem]:
        """Filter by category (ignored when unknown) and by keywords.

        Every keyword must appear, case-insensitively, in the item's name,
        description or brand name.
        """
        results = list(self._items)
        if category and is_valid_category(category):
            results = [item for item in results if item.category == category]
        if query:
            terms = query.lower().split()
            results = [
                item for item in results
                if all(t in f"{item.name} {item.description} {item.brand_name}".lower() for t in terms)
            ]
        return results
