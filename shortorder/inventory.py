"""Perishable item multiset.

Every stored unit remembers when it was created so shelf life can be
enforced. Removal always takes the oldest matching units first.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from shortorder.catalogs import ITEMS, RECIPES


@dataclass(frozen=True)
class InventoryItem:
    item_id: str
    created_at: int


@dataclass(frozen=True)
class Inventory:
    items: Tuple[InventoryItem, ...] = ()


def create_inventory() -> Inventory:
    return Inventory()


def add_item(inventory: Inventory, item_id: str, created_at: int) -> Inventory:
    return Inventory(items=inventory.items + (InventoryItem(item_id, created_at),))


def add_items(inventory: Inventory, item_id: str, quantity: int, created_at: int) -> Inventory:
    added = tuple(InventoryItem(item_id, created_at) for _ in range(max(0, quantity)))
    return Inventory(items=inventory.items + added)


def count_item(inventory: Inventory, item_id: str) -> int:
    return sum(1 for item in inventory.items if item.item_id == item_id)


def item_counts(inventory: Inventory) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for item in inventory.items:
        counts[item.item_id] = counts.get(item.item_id, 0) + 1
    return counts


def remove_items(inventory: Inventory, item_id: str, quantity: int) -> Optional[Inventory]:
    """Remove ``quantity`` units of ``item_id``, oldest first.

    Returns ``None`` (and leaves nothing removed) when fewer are in stock.
    """
    matching = [(item.created_at, idx) for idx, item in enumerate(inventory.items) if item.item_id == item_id]
    if len(matching) < quantity:
        return None
    doomed = {idx for _, idx in sorted(matching)[:quantity]}
    return Inventory(items=tuple(item for idx, item in enumerate(inventory.items) if idx not in doomed))


def remove_item_set(inventory: Inventory, requirements: Iterable[Tuple[str, int]]) -> Optional[Inventory]:
    current = inventory
    for item_id, quantity in requirements:
        updated = remove_items(current, item_id, quantity)
        if updated is None:
            return None
        current = updated
    return current


def remove_expired(inventory: Inventory, now_ms: int, items: Dict[str, Dict] = ITEMS) -> Inventory:
    kept: List[InventoryItem] = []
    for item in inventory.items:
        shelf_life = items.get(item.item_id, {}).get("shelf_life_ms")
        if shelf_life is None or item.created_at + int(shelf_life) > now_ms:
            kept.append(item)
    if len(kept) == len(inventory.items):
        return inventory
    return Inventory(items=tuple(kept))


def item_freshness(inventory: Inventory, now_ms: int, items: Dict[str, Dict] = ITEMS) -> Dict[str, float]:
    """Freshness of the stalest unit of each item, 1.0 fresh down to 0.0 spoiled."""
    freshness: Dict[str, float] = {}
    for item in inventory.items:
        shelf_life = items.get(item.item_id, {}).get("shelf_life_ms")
        if shelf_life is None:
            value = 1.0
        else:
            value = max(0.0, (item.created_at + int(shelf_life) - now_ms) / int(shelf_life))
        freshness[item.item_id] = min(value, freshness.get(item.item_id, 1.0))
    return freshness


def _step_inputs(step_key: str, recipes: Dict[str, Dict]) -> List[Tuple[str, int]]:
    return [(str(entry["item"]), int(entry["quantity"])) for entry in recipes[step_key]["inputs"]]


def has_ingredients_for(inventory: Inventory, step_key: str, recipes: Dict[str, Dict] = RECIPES) -> bool:
    if step_key not in recipes:
        return False
    return all(count_item(inventory, item_id) >= quantity for item_id, quantity in _step_inputs(step_key, recipes))


def execute_recipe_step(
    inventory: Inventory, step_key: str, now_ms: int, recipes: Dict[str, Dict] = RECIPES
) -> Optional[Inventory]:
    """Turn a step's inputs into its output instantly (kitchen prep, off the clock)."""
    if step_key not in recipes:
        return None
    remaining = remove_item_set(inventory, _step_inputs(step_key, recipes))
    if remaining is None:
        return None
    return add_item(remaining, step_key, now_ms)
