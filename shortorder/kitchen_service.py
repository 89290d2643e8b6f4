"""Back-of-house state during dinner service.

Orders arrive in ``pending_orders``, intermediates are cooked in the zones,
and :func:`assemble_order` combines ready intermediates with raw stock into a
finished order on the ``order_up`` pass, where the dining room picks it up.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from config import RAW, ZONE_INTERACTIONS
from recipe_catalog import ASSEMBLE
from shortorder.catalogs import ITEMS, RECIPES
from shortorder.inventory import Inventory, remove_item_set, remove_items
from shortorder.kitchen_zones import (
    KitchenZoneState,
    activate_cutting_board_slot,
    create_kitchen_zone_state,
    flip_stove_slot,
    has_active_slots,
    place_item_in_zone,
    tick_kitchen_zones,
    zone_has_capacity,
)


@dataclass(frozen=True)
class KitchenOrder:
    id: str
    customer_id: str
    dish_id: str


@dataclass(frozen=True)
class KitchenServiceState:
    pending_orders: Tuple[KitchenOrder, ...] = ()
    zones: KitchenZoneState = field(default_factory=create_kitchen_zone_state)
    order_up: Tuple[KitchenOrder, ...] = ()


KitchenResult = Tuple[KitchenServiceState, Inventory]


def create_kitchen_service_state() -> KitchenServiceState:
    return KitchenServiceState()


# ---------------------------------------------------------------------------
# Order management
# ---------------------------------------------------------------------------


def add_order_to_kitchen(kitchen: KitchenServiceState, order: KitchenOrder) -> KitchenServiceState:
    return replace(kitchen, pending_orders=kitchen.pending_orders + (order,))


def pickup_from_order_up(kitchen: KitchenServiceState, order_id: str) -> KitchenServiceState:
    if not any(order.id == order_id for order in kitchen.order_up):
        return kitchen
    return replace(kitchen, order_up=tuple(order for order in kitchen.order_up if order.id != order_id))


def remove_pending_order(kitchen: KitchenServiceState, order_id: str) -> KitchenServiceState:
    if not any(order.id == order_id for order in kitchen.pending_orders):
        return kitchen
    return replace(kitchen, pending_orders=tuple(order for order in kitchen.pending_orders if order.id != order_id))


def find_pending_order(kitchen: KitchenServiceState, order_id: str) -> Optional[KitchenOrder]:
    for order in kitchen.pending_orders:
        if order.id == order_id:
            return order
    return None


# ---------------------------------------------------------------------------
# Zone interactions
# ---------------------------------------------------------------------------


def place_ingredient_in_zone(
    kitchen: KitchenServiceState,
    inventory: Inventory,
    input_item_id: str,
    output_item_id: str,
    zone: str,
    duration_ms: float,
    interaction: str,
) -> Optional[KitchenResult]:
    """Consume one ``input_item_id`` from stock and start ``output_item_id`` in ``zone``.

    Capacity is checked before anything is consumed, so a full zone never
    eats the ingredient.
    """
    if not zone_has_capacity(kitchen.zones, zone):
        return None
    remaining = remove_items(inventory, input_item_id, 1)
    if remaining is None:
        return None
    zones = place_item_in_zone(kitchen.zones, zone, output_item_id, duration_ms, interaction)
    if zones is None:
        return None
    return replace(kitchen, zones=zones), remaining


def _take_from_ready(ready: Tuple[str, ...], item_id: str, quantity: int) -> Optional[Tuple[str, ...]]:
    remaining: List[str] = []
    taken = 0
    for ready_item in ready:
        if ready_item == item_id and taken < quantity:
            taken += 1
        else:
            remaining.append(ready_item)
    if taken < quantity:
        return None
    return tuple(remaining)


def _consume_inputs(
    kitchen: KitchenServiceState,
    inventory: Inventory,
    inputs: List[Tuple[str, int]],
    items: Dict[str, Dict],
) -> Optional[Tuple[Tuple[str, ...], Inventory]]:
    """Raw inputs come out of inventory, everything else out of the ready pool.

    Works on copies, so a missing component leaves both sources untouched.
    """
    raw_inputs = [(item_id, qty) for item_id, qty in inputs if items.get(item_id, {}).get("category") == RAW]
    prepped_inputs = [(item_id, qty) for item_id, qty in inputs if items.get(item_id, {}).get("category") != RAW]

    new_inventory = remove_item_set(inventory, raw_inputs)
    if new_inventory is None:
        return None

    ready = kitchen.zones.ready
    for item_id, quantity in prepped_inputs:
        taken = _take_from_ready(ready, item_id, quantity)
        if taken is None:
            return None
        ready = taken
    return ready, new_inventory


def _recipe_inputs(step_key: str, recipes: Dict[str, Dict]) -> List[Tuple[str, int]]:
    return [(str(entry["item"]), int(entry["quantity"])) for entry in recipes[step_key]["inputs"]]


def start_recipe_step(
    kitchen: KitchenServiceState,
    inventory: Inventory,
    step_key: str,
    recipes: Dict[str, Dict] = RECIPES,
    items: Dict[str, Dict] = ITEMS,
) -> Optional[KitchenResult]:
    """Put a prep or cook step to work in the zone its recipe names."""
    recipe = recipes.get(step_key)
    if recipe is None or recipe["method"] == ASSEMBLE:
        return None
    zone = str(recipe["zone"])
    if not zone_has_capacity(kitchen.zones, zone):
        return None

    consumed = _consume_inputs(kitchen, inventory, _recipe_inputs(step_key, recipes), items)
    if consumed is None:
        return None
    ready, new_inventory = consumed

    zones = place_item_in_zone(
        replace(kitchen.zones, ready=ready),
        zone,
        step_key,
        int(recipe["time_ms"]),
        ZONE_INTERACTIONS[zone],
    )
    if zones is None:
        return None
    return replace(kitchen, zones=zones), new_inventory


def activate_cutting_board(kitchen: KitchenServiceState, slot_index: int, is_active: bool) -> KitchenServiceState:
    zones = activate_cutting_board_slot(kitchen.zones, slot_index, is_active)
    if zones is kitchen.zones:
        return kitchen
    return replace(kitchen, zones=zones)


def flip_stove(kitchen: KitchenServiceState, slot_index: int) -> KitchenServiceState:
    zones = flip_stove_slot(kitchen.zones, slot_index)
    if zones is kitchen.zones:
        return kitchen
    return replace(kitchen, zones=zones)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def assemble_order(
    kitchen: KitchenServiceState,
    inventory: Inventory,
    order_id: str,
    recipes: Dict[str, Dict] = RECIPES,
    items: Dict[str, Dict] = ITEMS,
) -> Optional[KitchenResult]:
    """Build a pending order from ready intermediates and raw stock.

    All or nothing: either every component is consumed and the order moves
    to ``order_up``, or ``None`` is returned and nothing changes.
    """
    order = find_pending_order(kitchen, order_id)
    if order is None:
        return None
    if order.dish_id not in recipes:
        return None

    consumed = _consume_inputs(kitchen, inventory, _recipe_inputs(order.dish_id, recipes), items)
    if consumed is None:
        return None
    ready, new_inventory = consumed

    assembled = KitchenServiceState(
        pending_orders=tuple(o for o in kitchen.pending_orders if o.id != order_id),
        zones=replace(kitchen.zones, ready=ready),
        order_up=kitchen.order_up + (order,),
    )
    return assembled, new_inventory


def missing_components(
    kitchen: KitchenServiceState,
    inventory: Inventory,
    dish_id: str,
    recipes: Dict[str, Dict] = RECIPES,
    items: Dict[str, Dict] = ITEMS,
) -> Dict[str, int]:
    """What is still short for one ``dish_id``, by item id and count."""
    if dish_id not in recipes:
        return {}
    missing: Dict[str, int] = {}
    for item_id, quantity in _recipe_inputs(dish_id, recipes):
        if items.get(item_id, {}).get("category") == RAW:
            have = sum(1 for unit in inventory.items if unit.item_id == item_id)
        else:
            have = kitchen.zones.ready.count(item_id)
        if have < quantity:
            missing[item_id] = quantity - have
    return missing


# ---------------------------------------------------------------------------
# Ticking and queries
# ---------------------------------------------------------------------------


def tick_kitchen_service(kitchen: KitchenServiceState, elapsed_ms: float) -> KitchenServiceState:
    return replace(kitchen, zones=tick_kitchen_zones(kitchen.zones, elapsed_ms))


def is_kitchen_idle(kitchen: KitchenServiceState) -> bool:
    return (
        not kitchen.pending_orders
        and not has_active_slots(kitchen.zones)
        and not kitchen.zones.ready
        and not kitchen.order_up
    )
