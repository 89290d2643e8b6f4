from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from config import DISH, ITEM_CATEGORIES, ITEMS_FILE, PREPPED, RAW

ITEM_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class ItemDefinition:
    """One entry of the item catalog.

    Raw ingredients are bought and never spoil; prepped intermediates and
    finished dishes carry a shelf life in milliseconds.
    """

    key: str
    display_name: str
    category: str
    cost: int | None = None
    shelf_life_ms: int | None = None

    def to_runtime_dict(self) -> Dict[str, str | int | None]:
        return {
            "display_name": self.display_name,
            "category": self.category,
            "cost": self.cost,
            "shelf_life_ms": self.shelf_life_ms,
        }


def _raw(key: str, display_name: str, cost: int) -> ItemDefinition:
    return ItemDefinition(key, display_name, RAW, cost=cost)


def _prepped(key: str, display_name: str, shelf_life_ms: int) -> ItemDefinition:
    return ItemDefinition(key, display_name, PREPPED, shelf_life_ms=shelf_life_ms)


def _dish(key: str, display_name: str, shelf_life_ms: int) -> ItemDefinition:
    return ItemDefinition(key, display_name, DISH, shelf_life_ms=shelf_life_ms)


_DEFAULT_ITEMS: List[ItemDefinition] = [
    # Raw, shared
    _raw("bun", "Bun", 1),
    _raw("ground_beef", "Ground Beef", 2),
    _raw("onion", "Onion", 1),
    # Raw, burger
    _raw("lettuce", "Lettuce", 1),
    _raw("tomato", "Tomato", 1),
    _raw("cheese", "Cheese", 1),
    _raw("bacon", "Bacon", 2),
    _raw("chicken_breast", "Chicken Breast", 2),
    _raw("potato", "Potato", 1),
    # Raw, bbq
    _raw("pork_shoulder", "Pork Shoulder", 3),
    _raw("ribs", "Ribs", 3),
    _raw("brisket", "Brisket", 3),
    _raw("chicken", "Chicken", 2),
    _raw("corn", "Corn", 1),
    _raw("cabbage", "Cabbage", 1),
    _raw("pickle", "Pickle", 1),
    _raw("bbq_sauce", "BBQ Sauce", 1),
    # Raw, sushi
    _raw("rice", "Rice", 1),
    _raw("rice_vinegar", "Rice Vinegar", 1),
    _raw("nori", "Nori", 1),
    _raw("salmon", "Salmon", 3),
    _raw("tuna", "Tuna", 3),
    _raw("shrimp", "Shrimp", 2),
    _raw("cucumber", "Cucumber", 1),
    _raw("avocado", "Avocado", 2),
    _raw("crab", "Crab", 2),
    _raw("tofu", "Tofu", 1),
    _raw("miso_paste", "Miso Paste", 1),
    # Prepped, burger
    _prepped("shredded_lettuce", "Shredded Lettuce", 120_000),
    _prepped("sliced_tomato", "Sliced Tomato", 90_000),
    _prepped("sliced_onion", "Sliced Onion", 120_000),
    _prepped("beef_patty", "Beef Patty", 120_000),
    _prepped("grilled_patty", "Grilled Patty", 60_000),
    _prepped("cut_fries", "Cut Fries", 120_000),
    _prepped("french_fries", "French Fries", 45_000),
    _prepped("crispy_bacon", "Crispy Bacon", 60_000),
    _prepped("grilled_chicken", "Grilled Chicken", 60_000),
    # Prepped, bbq
    _prepped("coleslaw", "Coleslaw", 120_000),
    _prepped("onion_rings", "Onion Rings", 45_000),
    _prepped("smoked_patty", "Smoked Patty", 90_000),
    _prepped("seasoned_pork", "Seasoned Pork", 120_000),
    _prepped("smoked_pork", "Smoked Pork", 120_000),
    _prepped("pulled_pork", "Pulled Pork", 90_000),
    _prepped("seasoned_ribs", "Seasoned Ribs", 120_000),
    _prepped("smoked_ribs", "Smoked Ribs", 120_000),
    _prepped("seasoned_brisket", "Seasoned Brisket", 120_000),
    _prepped("smoked_brisket", "Smoked Brisket", 120_000),
    _prepped("sliced_brisket", "Sliced Brisket", 90_000),
    _prepped("seasoned_chicken", "Seasoned Chicken", 120_000),
    _prepped("smoked_chicken", "Smoked Chicken", 90_000),
    _prepped("grilled_corn", "Grilled Corn", 60_000),
    # Prepped, sushi
    _prepped("sushi_rice", "Sushi Rice", 90_000),
    _prepped("rice_ball", "Rice Ball", 60_000),
    _prepped("sliced_salmon", "Sliced Salmon", 45_000),
    _prepped("sliced_tuna", "Sliced Tuna", 45_000),
    _prepped("sliced_cucumber", "Sliced Cucumber", 120_000),
    _prepped("sliced_avocado", "Sliced Avocado", 60_000),
    _prepped("cubed_tofu", "Cubed Tofu", 120_000),
    _prepped("tempura_shrimp", "Tempura Shrimp", 30_000),
    _prepped("miso_broth", "Miso Broth", 90_000),
    # Dishes
    _dish("classic_burger", "Classic Burger", 45_000),
    _dish("cheeseburger", "Cheeseburger", 45_000),
    _dish("bacon_cheeseburger", "Bacon Cheeseburger", 40_000),
    _dish("chicken_sandwich", "Chicken Sandwich", 45_000),
    _dish("loaded_fries", "Loaded Fries", 30_000),
    _dish("pulled_pork_sandwich", "Pulled Pork Sandwich", 60_000),
    _dish("smoked_ribs_plate", "Smoked Ribs Plate", 60_000),
    _dish("brisket_sandwich", "Brisket Sandwich", 60_000),
    _dish("bbq_burger", "BBQ Burger", 50_000),
    _dish("smoked_chicken_plate", "Smoked Chicken Plate", 60_000),
    _dish("salmon_nigiri", "Salmon Nigiri", 30_000),
    _dish("tuna_roll", "Tuna Roll", 30_000),
    _dish("california_roll", "California Roll", 30_000),
    _dish("tempura_shrimp_roll", "Tempura Shrimp Roll", 30_000),
    _dish("miso_soup", "Miso Soup", 60_000),
]

DEFAULT_ITEMS: Dict[str, ItemDefinition] = {item.key: item for item in _DEFAULT_ITEMS}


def _is_valid_item_id(value: str) -> bool:
    return bool(ITEM_ID_RE.fullmatch(value))


def _coerce_positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        return None
    return value


def _parse_item_entry(key: str, entry: Dict[str, Any]) -> ItemDefinition | None:
    if not _is_valid_item_id(key):
        return None

    display_name = entry.get("display_name")
    category = entry.get("category")

    if not isinstance(display_name, str) or not display_name.strip():
        return None
    if category not in ITEM_CATEGORIES:
        return None

    if category == RAW:
        cost = _coerce_positive_int(entry.get("cost"))
        if cost is None:
            return None
        return ItemDefinition(key, display_name.strip(), RAW, cost=cost)

    shelf_life_ms = _coerce_positive_int(entry.get("shelf_life_ms"))
    if shelf_life_ms is None:
        return None
    return ItemDefinition(key, display_name.strip(), category, shelf_life_ms=shelf_life_ms)


def _runtime_catalog(items: Iterable[ItemDefinition]) -> Dict[str, Dict[str, str | int | None]]:
    return {item.key: item.to_runtime_dict() for item in items}


def load_item_catalog(path: Path = ITEMS_FILE) -> Dict[str, Dict[str, str | int | None]]:
    defaults = _runtime_catalog(DEFAULT_ITEMS.values())
    if not path.exists():
        return defaults

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return defaults

    if not isinstance(raw, dict):
        return defaults

    items: Dict[str, ItemDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        item = _parse_item_entry(key, entry)
        if item is None:
            continue
        items[key] = item

    if not items:
        return defaults

    return _runtime_catalog(items.values())


def items_in_category(catalog: Dict[str, Dict[str, str | int | None]], category: str) -> List[str]:
    return [key for key, item in catalog.items() if item["category"] == category]
