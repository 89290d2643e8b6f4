from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from config import CUTTING_BOARD, OVEN, RAW, RECIPES_FILE, STOVE

ITEM_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")
MAX_INPUTS = 6

PREP = "prep"
COOK = "cook"
ASSEMBLE = "assemble"
RECIPE_METHODS = (PREP, COOK, ASSEMBLE)

# Zones each method may run in; assembly happens at the pass, not in a zone.
METHOD_ZONES: Dict[str, Tuple[str, ...]] = {
    PREP: (CUTTING_BOARD,),
    COOK: (STOVE, OVEN),
    ASSEMBLE: ("",),
}


@dataclass(frozen=True)
class RecipeDefinition:
    """A single recipe step; its output item id is its key."""

    key: str
    display_name: str
    inputs: Tuple[Tuple[str, int], ...]
    method: str
    time_ms: int = 0
    zone: str = ""

    def to_runtime_dict(self) -> Dict[str, str | int | List[Dict[str, str | int]]]:
        return {
            "display_name": self.display_name,
            "inputs": [{"item": item, "quantity": quantity} for item, quantity in self.inputs],
            "method": self.method,
            "time_ms": self.time_ms,
            "zone": self.zone,
        }


def _prep(key: str, display_name: str, inputs: Tuple[str, ...], time_ms: int) -> RecipeDefinition:
    return RecipeDefinition(key, display_name, tuple((i, 1) for i in inputs), PREP, time_ms, CUTTING_BOARD)


def _cook(key: str, display_name: str, inputs: Tuple[str, ...], time_ms: int, zone: str = STOVE) -> RecipeDefinition:
    return RecipeDefinition(key, display_name, tuple((i, 1) for i in inputs), COOK, time_ms, zone)


def _assemble(key: str, display_name: str, inputs: Tuple[str, ...]) -> RecipeDefinition:
    return RecipeDefinition(key, display_name, tuple((i, 1) for i in inputs), ASSEMBLE)


_DEFAULT_RECIPES: List[RecipeDefinition] = [
    # Burger intermediates
    _prep("shredded_lettuce", "Shredded Lettuce", ("lettuce",), 2_000),
    _prep("sliced_tomato", "Sliced Tomato", ("tomato",), 2_000),
    _prep("sliced_onion", "Sliced Onion", ("onion",), 2_000),
    _prep("beef_patty", "Beef Patty", ("ground_beef",), 3_000),
    _cook("grilled_patty", "Grilled Patty", ("beef_patty",), 5_000),
    _prep("cut_fries", "Cut Fries", ("potato",), 3_000),
    _cook("french_fries", "French Fries", ("cut_fries",), 4_000),
    _cook("crispy_bacon", "Crispy Bacon", ("bacon",), 4_000),
    _cook("grilled_chicken", "Grilled Chicken", ("chicken_breast",), 5_000),
    # BBQ intermediates
    _prep("coleslaw", "Coleslaw", ("cabbage",), 4_000),
    _prep("seasoned_pork", "Seasoned Pork", ("pork_shoulder",), 3_000),
    _cook("smoked_pork", "Smoked Pork", ("seasoned_pork",), 8_000, OVEN),
    _prep("pulled_pork", "Pulled Pork", ("smoked_pork",), 3_000),
    _prep("seasoned_ribs", "Seasoned Ribs", ("ribs",), 4_000),
    _cook("smoked_ribs", "Smoked Ribs", ("seasoned_ribs",), 8_000, OVEN),
    _prep("seasoned_brisket", "Seasoned Brisket", ("brisket",), 4_000),
    _cook("smoked_brisket", "Smoked Brisket", ("seasoned_brisket",), 10_000, OVEN),
    _prep("sliced_brisket", "Sliced Brisket", ("smoked_brisket",), 3_000),
    _prep("seasoned_chicken", "Seasoned Chicken", ("chicken",), 3_000),
    _cook("smoked_chicken", "Smoked Chicken", ("seasoned_chicken",), 6_000, OVEN),
    _cook("grilled_corn", "Grilled Corn", ("corn",), 4_000),
    _cook("smoked_patty", "Smoked Patty", ("beef_patty",), 6_000, OVEN),
    _cook("onion_rings", "Onion Rings", ("sliced_onion",), 5_000),
    # Sushi intermediates
    _cook("sushi_rice", "Sushi Rice", ("rice", "rice_vinegar"), 5_000, OVEN),
    _prep("rice_ball", "Rice Ball", ("sushi_rice",), 2_000),
    _prep("sliced_salmon", "Sliced Salmon", ("salmon",), 3_000),
    _prep("sliced_tuna", "Sliced Tuna", ("tuna",), 3_000),
    _prep("sliced_cucumber", "Sliced Cucumber", ("cucumber",), 2_000),
    _prep("sliced_avocado", "Sliced Avocado", ("avocado",), 2_000),
    _prep("cubed_tofu", "Cubed Tofu", ("tofu",), 2_000),
    _cook("tempura_shrimp", "Tempura Shrimp", ("shrimp",), 4_000),
    _cook("miso_broth", "Miso Broth", ("miso_paste",), 5_000, OVEN),
    # Burger dishes
    _assemble("classic_burger", "Classic Burger", ("bun", "grilled_patty", "shredded_lettuce", "sliced_tomato")),
    _assemble("cheeseburger", "Cheeseburger", ("bun", "grilled_patty", "cheese", "shredded_lettuce")),
    _assemble(
        "bacon_cheeseburger",
        "Bacon Cheeseburger",
        ("bun", "grilled_patty", "crispy_bacon", "cheese", "shredded_lettuce"),
    ),
    _assemble("chicken_sandwich", "Chicken Sandwich", ("bun", "grilled_chicken", "shredded_lettuce", "sliced_tomato")),
    _assemble("loaded_fries", "Loaded Fries", ("french_fries", "cheese", "crispy_bacon", "sliced_onion")),
    # BBQ dishes
    _assemble("pulled_pork_sandwich", "Pulled Pork Sandwich", ("bun", "pulled_pork", "coleslaw")),
    _assemble("smoked_ribs_plate", "Smoked Ribs Plate", ("smoked_ribs", "bbq_sauce", "pickle")),
    _assemble("brisket_sandwich", "Brisket Sandwich", ("bun", "sliced_brisket", "pickle")),
    _assemble("bbq_burger", "BBQ Burger", ("bun", "smoked_patty", "onion_rings", "bbq_sauce")),
    _assemble("smoked_chicken_plate", "Smoked Chicken Plate", ("smoked_chicken", "grilled_corn", "bbq_sauce")),
    # Sushi dishes
    _assemble("salmon_nigiri", "Salmon Nigiri", ("rice_ball", "sliced_salmon")),
    _assemble("tuna_roll", "Tuna Roll", ("sushi_rice", "nori", "sliced_tuna", "sliced_cucumber")),
    _assemble(
        "california_roll",
        "California Roll",
        ("sushi_rice", "nori", "crab", "sliced_avocado", "sliced_cucumber"),
    ),
    _assemble("tempura_shrimp_roll", "Tempura Shrimp Roll", ("sushi_rice", "nori", "tempura_shrimp", "sliced_avocado")),
    _assemble("miso_soup", "Miso Soup", ("miso_broth", "cubed_tofu")),
]

DEFAULT_RECIPE_DEFINITIONS: Dict[str, RecipeDefinition] = {recipe.key: recipe for recipe in _DEFAULT_RECIPES}


def _is_valid_item_id(value: Any) -> bool:
    return isinstance(value, str) and bool(ITEM_ID_RE.fullmatch(value))


def _coerce_int(value: Any, *, minimum: int | None = None) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    else:
        return None

    if minimum is not None and result < minimum:
        return None
    return result


def _coerce_inputs(value: Any) -> Tuple[Tuple[str, int], ...] | None:
    if not isinstance(value, list) or not value or len(value) > MAX_INPUTS:
        return None
    parsed: List[Tuple[str, int]] = []
    for entry in value:
        if not isinstance(entry, dict):
            return None
        item = entry.get("item")
        quantity = _coerce_int(entry.get("quantity", 1), minimum=1)
        if not _is_valid_item_id(item) or quantity is None:
            return None
        parsed.append((item, quantity))
    if len({item for item, _ in parsed}) != len(parsed):
        return None
    return tuple(parsed)


def _parse_recipe_entry(key: str, entry: Dict[str, Any]) -> RecipeDefinition | None:
    if not _is_valid_item_id(key):
        return None

    display_name = entry.get("display_name")
    method = entry.get("method")
    time_ms = _coerce_int(entry.get("time_ms", 0), minimum=0)
    zone = entry.get("zone", "")
    inputs = _coerce_inputs(entry.get("inputs"))

    if not isinstance(display_name, str) or not display_name.strip():
        return None
    if method not in RECIPE_METHODS:
        return None
    if time_ms is None or inputs is None:
        return None
    if method != ASSEMBLE and time_ms <= 0:
        return None
    if zone not in METHOD_ZONES[method]:
        return None
    if any(item == key for item, _ in inputs):
        return None

    return RecipeDefinition(
        key=key,
        display_name=display_name.strip(),
        inputs=inputs,
        method=method,
        time_ms=time_ms if method != ASSEMBLE else 0,
        zone=zone,
    )


def _ordered_runtime_catalog(
    recipes: Iterable[RecipeDefinition],
) -> Dict[str, Dict[str, str | int | List[Dict[str, str | int]]]]:
    ordered = sorted(recipes, key=lambda recipe: (RECIPE_METHODS.index(recipe.method), recipe.key))
    return {recipe.key: recipe.to_runtime_dict() for recipe in ordered}


def load_recipe_catalog(path: Path = RECIPES_FILE) -> Dict[str, Dict[str, str | int | List[Dict[str, str | int]]]]:
    if not path.exists():
        return _ordered_runtime_catalog(DEFAULT_RECIPE_DEFINITIONS.values())

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return _ordered_runtime_catalog(DEFAULT_RECIPE_DEFINITIONS.values())

    if not isinstance(raw, dict):
        return _ordered_runtime_catalog(DEFAULT_RECIPE_DEFINITIONS.values())

    recipes: Dict[str, RecipeDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        recipe = _parse_recipe_entry(key, entry)
        if recipe is None:
            continue
        recipes[key] = recipe

    if not recipes:
        return _ordered_runtime_catalog(DEFAULT_RECIPE_DEFINITIONS.values())

    return _ordered_runtime_catalog(recipes.values())


# ---------------------------------------------------------------------------
# Recipe chains
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecipeNode:
    step: str
    children: Tuple["RecipeNode", ...] = ()


def resolve_recipe_chain(item_id: str, recipes: Dict[str, Dict], _seen: frozenset = frozenset()) -> RecipeNode | None:
    """Build the tree of steps that produces ``item_id``.

    Items without a recipe (raw ingredients) are leaves and do not appear in
    the tree. Returns ``None`` when ``item_id`` itself has no recipe.
    """
    if item_id not in recipes or item_id in _seen:
        return None
    seen = _seen | {item_id}
    children = []
    for entry in recipes[item_id]["inputs"]:
        child = resolve_recipe_chain(str(entry["item"]), recipes, seen)
        if child is not None:
            children.append(child)
    return RecipeNode(step=item_id, children=tuple(children))


def flatten_recipe_chain(node: RecipeNode) -> List[str]:
    """Steps in dependency order (inputs before the steps that use them), deduplicated."""
    ordered: List[str] = []

    def visit(current: RecipeNode) -> None:
        if current.step in ordered:
            return
        for child in current.children:
            visit(child)
        if current.step not in ordered:
            ordered.append(current.step)

    visit(node)
    return ordered


def total_raw_ingredients(node: RecipeNode, recipes: Dict[str, Dict], items: Dict[str, Dict]) -> Dict[str, int]:
    totals: Dict[str, int] = {}

    def visit(current: RecipeNode, multiplier: int) -> None:
        children = {child.step: child for child in current.children}
        for entry in recipes[current.step]["inputs"]:
            item = str(entry["item"])
            quantity = int(entry["quantity"]) * multiplier
            if item in children:
                visit(children[item], quantity)
            elif items.get(item, {}).get("category") == RAW:
                totals[item] = totals.get(item, 0) + quantity

    visit(node, 1)
    return totals


def total_recipe_time(node: RecipeNode, recipes: Dict[str, Dict]) -> int:
    return int(recipes[node.step]["time_ms"]) + sum(total_recipe_time(child, recipes) for child in node.children)


# ---------------------------------------------------------------------------
# Dish economics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DishEconomics:
    dish_id: str
    sell_price: int
    raw_cost: int
    raw_ingredients: Tuple[Tuple[str, int], ...]
    prep_time_ms: int

    @property
    def profit(self) -> int:
        return self.sell_price - self.raw_cost


def dish_economics(
    dish_id: str, sell_price: int, recipes: Dict[str, Dict], items: Dict[str, Dict]
) -> DishEconomics | None:
    """Grocery cost, margin and total step time of one portion; ``None`` without a recipe."""
    chain = resolve_recipe_chain(dish_id, recipes)
    if chain is None:
        return None
    raws = total_raw_ingredients(chain, recipes, items)
    raw_cost = sum(int(items.get(item, {}).get("cost") or 0) * quantity for item, quantity in raws.items())
    return DishEconomics(
        dish_id=dish_id,
        sell_price=sell_price,
        raw_cost=raw_cost,
        raw_ingredients=tuple(sorted(raws.items())),
        prep_time_ms=total_recipe_time(chain, recipes),
    )
