"""Scripted player used by the headless runner and the balance tests."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Optional

from config import FLOOR, KITCHEN, RAW
from menu_catalog import menu_economics
from recipe_catalog import ASSEMBLE
from shortorder.catalogs import ITEMS, RECIPES
from shortorder.entities import (
    CustomerWaiting,
    DayEndPhase,
    GroceryPhase,
    KitchenPrepPhase,
    OrderPending,
    ReadyToServe,
    ServicePhase,
)
from shortorder.kitchen_zones import EmptySlot, NeedsFlipSlot, WorkingSlot
from shortorder.simulation import RestaurantSim


class Autopilot:
    """Plays a :class:`RestaurantSim` with a simple cook-to-order strategy.

    Grocery buys the raw ingredients for as many unlocked dishes as the
    coins allow (round robin, at most one per expected customer); kitchen
    prep is skipped; service takes every order and cooks it, starting the
    deepest recipe step it can and keeping the cutting board and stove
    attended.
    """

    def __init__(self, sim: RestaurantSim) -> None:
        self.sim = sim

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def shop(self) -> int:
        """Buy ingredients for whole dishes; returns the number of portions bought."""
        sim = self.sim
        unlocked = set(sim.unlocked_dish_ids)
        baskets = [dish for dish in menu_economics(sim.menu, RECIPES, ITEMS) if dish.dish_id in unlocked]
        if not baskets:
            return 0

        portions = 0
        target = sim.difficulty.max_customers_per_day
        while portions < target:
            basket = baskets[portions % len(baskets)]
            if basket.raw_cost > sim.coins:
                break
            for item_id, qty in basket.raw_ingredients:
                sim.buy_item(item_id, qty)
            portions += 1
        return portions

    def step(self) -> None:
        phase = self.sim.phase
        if isinstance(phase, GroceryPhase):
            self.shop()
            self.sim.advance_phase()
        elif isinstance(phase, KitchenPrepPhase):
            self.sim.advance_phase()
        elif isinstance(phase, ServicePhase):
            self._work_service(phase)

    def run_day(self, dt_ms: float) -> DayEndPhase:
        """Play until the current day closes and return its summary."""
        if dt_ms <= 0:
            raise ValueError("dt_ms must be positive")
        sim = self.sim
        if isinstance(sim.phase, DayEndPhase):
            sim.advance_phase()
        while not isinstance(sim.phase, DayEndPhase):
            self.step()
            sim.tick(dt_ms)
        return sim.phase

    # ------------------------------------------------------------------
    # Service
    # ------------------------------------------------------------------

    def _work_service(self, phase: ServicePhase) -> None:
        sim = self.sim
        for table_id, table in enumerate(phase.tables):
            if isinstance(table, ReadyToServe):
                sim.serve(table_id)
            elif isinstance(table, (CustomerWaiting, OrderPending)):
                if sim.serve_from_stock(table_id):
                    continue
                if isinstance(table, CustomerWaiting):
                    sim.take_order(table_id)
                sim.send_order(table_id)

        phase = sim.phase
        if not isinstance(phase, ServicePhase):
            return
        sim.move_player(KITCHEN if phase.kitchen.pending_orders else FLOOR)

        for order in phase.kitchen.pending_orders:
            sim.assemble(order.id)
        self._tend_stations()
        self.start_next_step()

    def _tend_stations(self) -> None:
        phase = self.sim.phase
        if not isinstance(phase, ServicePhase):
            return
        for index, slot in enumerate(phase.kitchen.zones.cutting_board):
            if isinstance(slot, WorkingSlot) and not slot.is_active:
                self.sim.hold_cutting_board(index)
        for index, slot in enumerate(phase.kitchen.zones.stove):
            if isinstance(slot, NeedsFlipSlot):
                self.sim.flip_stove(index)

    def _supply(self, phase: ServicePhase) -> Counter:
        """Intermediates on hand or on the way: the ready pool plus occupied slots."""
        supply = Counter(phase.kitchen.zones.ready)
        for slot in phase.kitchen.zones.all_slots():
            if not isinstance(slot, EmptySlot):
                supply[slot.output_item_id] += 1
        return supply

    def start_next_step(self) -> Optional[str]:
        phase = self.sim.phase
        if not isinstance(phase, ServicePhase):
            return None
        supply = self._supply(phase)
        stock: Dict[str, int] = {}
        for unit in self.sim.inventory.items:
            stock[unit.item_id] = stock.get(unit.item_id, 0) + 1

        for order in phase.kitchen.pending_orders:
            step = self._plan(order.dish_id, supply, stock)
            if step is not None and self.sim.start_step(step):
                return step
        return None

    def _plan(self, item_id: str, supply: Counter, stock: Dict[str, int]) -> Optional[str]:
        """Deepest startable step still missing for one ``item_id``.

        Draws down ``supply`` and ``stock`` as components are claimed so
        later orders do not count on the same units.
        """
        recipe = RECIPES.get(item_id)
        if recipe is None:
            return None
        blocked = False
        candidate: Optional[str] = None
        for entry in recipe["inputs"]:
            input_id, quantity = str(entry["item"]), int(entry["quantity"])
            if ITEMS.get(input_id, {}).get("category") == RAW:
                if stock.get(input_id, 0) < quantity:
                    return None
                stock[input_id] -= quantity
                continue
            have = min(supply[input_id], quantity)
            supply[input_id] -= have
            for _ in range(quantity - have):
                blocked = True
                if candidate is None:
                    candidate = self._plan(input_id, supply, stock)
        if blocked:
            return candidate
        return None if recipe["method"] == ASSEMBLE else item_id
