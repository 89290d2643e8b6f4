from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from config import MENUS_FILE
from recipe_catalog import DishEconomics, dish_economics

RESTAURANT_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")
MAX_MENU_DISHES = 8


@dataclass(frozen=True)
class MenuDefinition:
    """Dishes a restaurant type sells, in unlock order (the first is the starter)."""

    key: str
    display_name: str
    dishes: Tuple[Tuple[str, int], ...]

    def to_runtime_dict(self) -> Dict[str, str | List[Dict[str, str | int]]]:
        return {
            "display_name": self.display_name,
            "dishes": [{"dish": dish, "sell_price": price} for dish, price in self.dishes],
        }


DEFAULT_MENUS: Dict[str, MenuDefinition] = {
    "burger": MenuDefinition(
        key="burger",
        display_name="Burger Joint",
        dishes=(
            ("classic_burger", 8),
            ("cheeseburger", 8),
            ("chicken_sandwich", 8),
            ("loaded_fries", 8),
            ("bacon_cheeseburger", 12),
        ),
    ),
    "bbq": MenuDefinition(
        key="bbq",
        display_name="BBQ Smokehouse",
        dishes=(
            ("smoked_ribs_plate", 9),
            ("smoked_chicken_plate", 7),
            ("pulled_pork_sandwich", 9),
            ("brisket_sandwich", 9),
            ("bbq_burger", 8),
        ),
    ),
    "sushi": MenuDefinition(
        key="sushi",
        display_name="Sushi Bar",
        dishes=(
            ("salmon_nigiri", 8),
            ("miso_soup", 5),
            ("tuna_roll", 10),
            ("california_roll", 12),
            ("tempura_shrimp_roll", 10),
        ),
    ),
}


def _coerce_dishes(value: Any) -> Tuple[Tuple[str, int], ...] | None:
    if not isinstance(value, list) or not value or len(value) > MAX_MENU_DISHES:
        return None
    parsed: List[Tuple[str, int]] = []
    for entry in value:
        if not isinstance(entry, dict):
            return None
        dish = entry.get("dish")
        price = entry.get("sell_price")
        if not isinstance(dish, str) or not RESTAURANT_ID_RE.fullmatch(dish):
            return None
        if isinstance(price, bool) or not isinstance(price, int) or price < 1:
            return None
        parsed.append((dish, price))
    if len({dish for dish, _ in parsed}) != len(parsed):
        return None
    return tuple(parsed)


def _parse_menu_entry(key: str, entry: Dict[str, Any]) -> MenuDefinition | None:
    if not RESTAURANT_ID_RE.fullmatch(key):
        return None

    display_name = entry.get("display_name")
    if not isinstance(display_name, str) or not display_name.strip():
        return None

    dishes = _coerce_dishes(entry.get("dishes"))
    if dishes is None:
        return None

    return MenuDefinition(key=key, display_name=display_name.strip(), dishes=dishes)


def _runtime_catalog(menus: Iterable[MenuDefinition]) -> Dict[str, Dict[str, str | List[Dict[str, str | int]]]]:
    return {menu.key: menu.to_runtime_dict() for menu in menus}


def load_menu_catalog(path: Path = MENUS_FILE) -> Dict[str, Dict[str, str | List[Dict[str, str | int]]]]:
    defaults = _runtime_catalog(DEFAULT_MENUS.values())
    if not path.exists():
        return defaults

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return defaults

    if not isinstance(raw, dict):
        return defaults

    menus: Dict[str, MenuDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        menu = _parse_menu_entry(key, entry)
        if menu is None:
            continue
        menus[key] = menu

    if not menus:
        return defaults

    return _runtime_catalog(menus.values())


# ---------------------------------------------------------------------------
# Menu queries
# ---------------------------------------------------------------------------


def unlocked_dishes(menu: Dict, count: int) -> List[Dict[str, str | int]]:
    """The first ``count`` dishes of a menu, never fewer than one."""
    dishes = list(menu["dishes"])
    clamped = max(1, min(count, len(dishes)))
    return dishes[:clamped]


def sell_price(menu: Dict, dish_id: str) -> int:
    for entry in menu["dishes"]:
        if entry["dish"] == dish_id:
            return int(entry["sell_price"])
    return 0


def pick_dish(menu: Dict, random_value: float, unlocked_count: int | None = None) -> Dict[str, str | int]:
    dishes = unlocked_dishes(menu, unlocked_count) if unlocked_count is not None else list(menu["dishes"])
    index = min(int(random_value * len(dishes)), len(dishes) - 1)
    return dishes[index]


def next_unlock_count(customers_lost: int, coins: int, current: int, menu: Dict) -> int:
    """A clean day (nobody walked out, money in the till) unlocks the next dish."""
    if customers_lost == 0 and coins > 0 and current < len(menu["dishes"]):
        return current + 1
    return current


def menu_economics(menu: Dict, recipes: Dict[str, Dict], items: Dict[str, Dict]) -> List[DishEconomics]:
    """Economics of every menu dish in unlock order, skipping dishes with no recipe."""
    analysed: List[DishEconomics] = []
    for entry in menu["dishes"]:
        economics = dish_economics(str(entry["dish"]), int(entry["sell_price"]), recipes, items)
        if economics is not None:
            analysed.append(economics)
    return analysed
