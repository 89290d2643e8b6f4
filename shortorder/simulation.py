"""RestaurantSim: deterministic, headless-compatible service-day driver.

The pure state functions live in the sibling modules; this class owns the
things they deliberately leave out: the random source, the coin balance, the
inventory, the clock, id generation, customer arrivals and the event log.
It has no pygame dependency and is safe to import in headless / test
contexts.
"""
from __future__ import annotations

import random
from dataclasses import replace
from typing import Dict, List, Optional

from config import (
    DEFAULT_RESTAURANT_TYPE,
    DEFAULT_TABLE_COUNT,
    EVENT_LOG_LIMIT,
    FIRST_CUSTOMER_DELAY_MS,
    RAW,
    STARTER_DISH_COUNT,
    STARTING_COINS,
)
from menu_catalog import next_unlock_count, pick_dish, sell_price, unlocked_dishes
from shortorder.catalogs import ITEMS, MENUS, RECIPES
from shortorder.day_cycle import (
    advance_to_day_end,
    advance_to_kitchen_prep,
    advance_to_next_day,
    advance_to_service,
    create_day_cycle,
    is_phase_timer_expired,
    tick_timer,
)
from shortorder.difficulty import DayDifficulty, difficulty_for_day
from shortorder.entities import (
    DEFAULT_DURATIONS,
    Customer,
    CustomerWaiting,
    DayCycle,
    DayEndPhase,
    GroceryPhase,
    KitchenPrepPhase,
    OrderPending,
    Phase,
    PhaseDurations,
    ReadyToServe,
    ServicePhase,
    create_customer,
)
from shortorder.inventory import (
    Inventory,
    add_items,
    count_item,
    create_inventory,
    execute_recipe_step,
    remove_expired,
    remove_items,
)
from shortorder.kitchen_service import (
    activate_cutting_board,
    assemble_order,
    find_pending_order,
    pickup_from_order_up,
    remove_pending_order,
    start_recipe_step,
)
from shortorder.kitchen_service import flip_stove as flip_stove_slot
from shortorder.leaderboard import Leaderboard, create_leaderboard, record_day_result
from shortorder import tables


class RestaurantSim:
    """One restaurant, played day after day.

    Player intents are plain methods returning whether they did anything.
    Time only moves in :meth:`tick`; phases also move on :meth:`advance_phase`.
    """

    def __init__(
        self,
        seed: int = 7,
        restaurant: str = DEFAULT_RESTAURANT_TYPE,
        durations: PhaseDurations = DEFAULT_DURATIONS,
        table_count: int = DEFAULT_TABLE_COUNT,
    ) -> None:
        if restaurant not in MENUS:
            raise ValueError(f"unknown restaurant type: {restaurant!r} (choose from {', '.join(sorted(MENUS))})")
        self.rng = random.Random(seed)
        self.restaurant = restaurant
        self.menu: Dict = MENUS[restaurant]
        self.durations = durations
        self.table_count = table_count
        self.cycle: DayCycle = create_day_cycle(1, durations)
        self.coins: int = STARTING_COINS
        self.inventory: Inventory = create_inventory()
        self.clock_ms: float = 0.0
        self.unlocked_count: int = STARTER_DISH_COUNT
        self.customers_spawned: int = 0
        self.next_customer_ms: float = FIRST_CUSTOMER_DELAY_MS
        self.history: List[DayEndPhase] = []
        self.leaderboard: Leaderboard = create_leaderboard()
        self.event_log: List[str] = []
        self._customer_seq = 0
        self._order_seq = 0
        self._log_event(f"Day 1 at the {self.menu['display_name']}")

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def day(self) -> int:
        return self.cycle.day

    @property
    def phase(self) -> Phase:
        return self.cycle.phase

    @property
    def difficulty(self) -> DayDifficulty:
        return difficulty_for_day(self.cycle.day)

    @property
    def unlocked_dish_ids(self) -> List[str]:
        return [str(entry["dish"]) for entry in unlocked_dishes(self.menu, self.unlocked_count)]

    def _service(self) -> Optional[ServicePhase]:
        phase = self.cycle.phase
        return phase if isinstance(phase, ServicePhase) else None

    def _set_service(self, phase: ServicePhase) -> None:
        self.cycle = replace(self.cycle, phase=phase)

    def _log_event(self, message: str) -> None:
        self.event_log.append(message)
        self.event_log = self.event_log[-EVENT_LOG_LIMIT:]

    def _now(self) -> int:
        return int(self.clock_ms)

    # ------------------------------------------------------------------
    # Grocery and kitchen prep
    # ------------------------------------------------------------------

    def buy_item(self, item_id: str, quantity: int = 1) -> bool:
        if not isinstance(self.cycle.phase, GroceryPhase) or quantity <= 0:
            return False
        item = ITEMS.get(item_id)
        if item is None or item["category"] != RAW or item["cost"] is None:
            return False
        total = int(item["cost"]) * quantity
        if total > self.coins:
            self._log_event(f"Cannot afford {quantity}x {item['display_name']} (need {total})")
            return False
        self.coins -= total
        self.inventory = add_items(self.inventory, item_id, quantity, self._now())
        self._log_event(f"Bought {quantity}x {item['display_name']} (-{total})")
        return True

    def prep_item(self, step_key: str) -> bool:
        if not isinstance(self.cycle.phase, KitchenPrepPhase):
            return False
        updated = execute_recipe_step(self.inventory, step_key, self._now(), RECIPES)
        if updated is None:
            return False
        self.inventory = updated
        return True

    # ------------------------------------------------------------------
    # Service: dining room
    # ------------------------------------------------------------------

    def take_order(self, table_id: int) -> bool:
        phase = self._service()
        if phase is None:
            return False
        updated = tables.take_order(phase, table_id)
        self._set_service(updated)
        return updated is not phase

    def send_order(self, table_id: int) -> Optional[str]:
        phase = self._service()
        if phase is None or not 0 <= table_id < len(phase.tables):
            return None
        if not isinstance(phase.tables[table_id], OrderPending):
            return None
        self._order_seq += 1
        order_id = f"o{self._order_seq}"
        self._set_service(tables.send_order_to_kitchen(phase, table_id, order_id))
        return order_id

    def serve(self, table_id: int) -> bool:
        phase = self._service()
        if phase is None or not 0 <= table_id < len(phase.tables):
            return False
        table = phase.tables[table_id]
        if not isinstance(table, ReadyToServe):
            return False
        price = sell_price(self.menu, table.customer.dish_id)
        self._set_service(tables.serve_order(phase, table_id, price))
        self.coins += price
        self._log_event(f"Served table {table_id + 1} (+{price})")
        return True

    def serve_from_stock(self, table_id: int) -> bool:
        """Serve a seated customer a finished dish already in the inventory."""
        phase = self._service()
        if phase is None or not 0 <= table_id < len(phase.tables):
            return False
        table = phase.tables[table_id]
        if not isinstance(table, (CustomerWaiting, OrderPending)):
            return False
        remaining = remove_items(self.inventory, table.customer.dish_id, 1)
        if remaining is None:
            return False
        price = sell_price(self.menu, table.customer.dish_id)
        self.inventory = remaining
        self._set_service(tables.serve_from_inventory(phase, table_id, price))
        self.coins += price
        self._log_event(f"Served table {table_id + 1} from stock (+{price})")
        return True

    def move_player(self, location: str) -> bool:
        phase = self._service()
        if phase is None:
            return False
        updated = tables.move_player(phase, location)
        self._set_service(updated)
        return updated is not phase

    # ------------------------------------------------------------------
    # Service: kitchen
    # ------------------------------------------------------------------

    def start_step(self, step_key: str) -> bool:
        phase = self._service()
        if phase is None:
            return False
        result = start_recipe_step(phase.kitchen, self.inventory, step_key, RECIPES, ITEMS)
        if result is None:
            return False
        kitchen, self.inventory = result
        self._set_service(replace(phase, kitchen=kitchen))
        return True

    def hold_cutting_board(self, slot_index: int, active: bool = True) -> bool:
        phase = self._service()
        if phase is None:
            return False
        kitchen = activate_cutting_board(phase.kitchen, slot_index, active)
        if kitchen is phase.kitchen:
            return False
        self._set_service(replace(phase, kitchen=kitchen))
        return True

    def flip_stove(self, slot_index: int) -> bool:
        phase = self._service()
        if phase is None:
            return False
        kitchen = flip_stove_slot(phase.kitchen, slot_index)
        if kitchen is phase.kitchen:
            return False
        self._set_service(replace(phase, kitchen=kitchen))
        return True

    def assemble(self, order_id: str) -> bool:
        phase = self._service()
        if phase is None:
            return False
        order = find_pending_order(phase.kitchen, order_id)
        if order is None or tables.find_table_for_order(phase, order_id) is None:
            return False
        result = assemble_order(phase.kitchen, self.inventory, order_id, RECIPES, ITEMS)
        if result is None:
            return False
        kitchen, self.inventory = result
        self._set_service(tables.notify_order_ready(replace(phase, kitchen=kitchen), order_id))
        self._log_event(f"Order {order_id} up: {ITEMS.get(order.dish_id, {}).get('display_name', order.dish_id)}")
        return True

    # ------------------------------------------------------------------
    # Phase flow
    # ------------------------------------------------------------------

    def advance_phase(self) -> None:
        phase = self.cycle.phase
        if isinstance(phase, GroceryPhase):
            self.cycle = advance_to_kitchen_prep(self.cycle, self.durations.kitchen_prep_ms)
        elif isinstance(phase, KitchenPrepPhase):
            self._start_service()
        elif isinstance(phase, ServicePhase):
            self._end_day()
        else:
            self.cycle = advance_to_next_day(self.cycle, self.durations)
            self._log_event(f"Day {self.cycle.day} begins")

    def _start_service(self) -> None:
        self.cycle = advance_to_service(self.cycle, self.durations.service_ms, self.table_count)
        self.customers_spawned = 0
        self.next_customer_ms = FIRST_CUSTOMER_DELAY_MS
        self._log_event("Doors open")

    def _end_day(self) -> None:
        self.cycle = advance_to_day_end(self.cycle)
        summary = self.cycle.phase
        self.history.append(summary)
        self.leaderboard = record_day_result(self.leaderboard, summary.customers_served, summary.earnings)
        unlocked = next_unlock_count(summary.customers_lost, self.coins, self.unlocked_count, self.menu)
        if unlocked > self.unlocked_count:
            dish = unlocked_dishes(self.menu, unlocked)[-1]["dish"]
            self._log_event(f"New dish unlocked: {ITEMS.get(dish, {}).get('display_name', dish)}")
        self.unlocked_count = unlocked
        self._log_event(
            f"Day {self.cycle.day} closed: served={summary.customers_served} "
            f"lost={summary.customers_lost} earned={summary.earnings}"
        )

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def _new_customer(self) -> Customer:
        difficulty = self.difficulty
        self._customer_seq += 1
        dish = pick_dish(self.menu, self.rng.random(), self.unlocked_count)
        patience = self.rng.randint(difficulty.customer_patience_min_ms, difficulty.customer_patience_max_ms)
        return create_customer(f"c{self._customer_seq}", str(dish["dish"]), patience)

    def _spawn_delay(self) -> float:
        difficulty = self.difficulty
        return float(self.rng.randint(difficulty.customer_spawn_min_ms, difficulty.customer_spawn_max_ms))

    def all_customers_arrived(self) -> bool:
        return self.customers_spawned >= self.difficulty.max_customers_per_day

    # ------------------------------------------------------------------
    # Main tick
    # ------------------------------------------------------------------

    def tick(self, elapsed_ms: float) -> None:
        if elapsed_ms <= 0:
            return
        self.clock_ms += elapsed_ms

        fresh = remove_expired(self.inventory, self._now(), ITEMS)
        if fresh is not self.inventory:
            spoiled = len(self.inventory.items) - len(fresh.items)
            self._log_event("An item expired" if spoiled == 1 else f"{spoiled} items expired")
            self.inventory = fresh

        if isinstance(self.cycle.phase, DayEndPhase):
            return
        self.cycle = tick_timer(self.cycle, elapsed_ms)

        phase = self._service()
        if phase is not None:
            self._tick_service(phase, elapsed_ms)

        if is_phase_timer_expired(self.cycle):
            self.advance_phase()
            return

        phase = self._service()
        if phase is not None and self.all_customers_arrived() and tables.is_restaurant_idle(phase):
            self._log_event("Last customer gone, closing early")
            self._end_day()

    def _tick_service(self, phase: ServicePhase, elapsed_ms: float) -> None:
        lost_before = phase.customers_lost
        phase = tables.tick_service_phase(phase, elapsed_ms)
        lost = phase.customers_lost - lost_before
        if lost:
            self._log_event("A customer left" if lost == 1 else f"{lost} customers left")
            phase = self._drop_orphaned_orders(phase)

        self.next_customer_ms -= elapsed_ms
        if self.next_customer_ms <= 0 and not self.all_customers_arrived():
            phase = tables.enqueue_customer(phase, self._new_customer())
            self.customers_spawned += 1
            self.next_customer_ms = self._spawn_delay()
        self._set_service(phase)

    def _drop_orphaned_orders(self, phase: ServicePhase) -> ServicePhase:
        """Cancel pending and plated orders whose table has walked out."""
        kitchen = phase.kitchen
        for order in phase.kitchen.pending_orders:
            if tables.find_table_for_order(phase, order.id) is None:
                kitchen = remove_pending_order(kitchen, order.id)
                self._log_event(f"Order {order.id} cancelled")
        for order in phase.kitchen.order_up:
            if tables.find_table_for_order(phase, order.id) is None:
                kitchen = pickup_from_order_up(kitchen, order.id)
                self._log_event(f"Order {order.id} cancelled")
        if kitchen is phase.kitchen:
            return phase
        return replace(phase, kitchen=kitchen)

    def stock_of(self, item_id: str) -> int:
        return count_item(self.inventory, item_id)

    def summary_line(self) -> str:
        last = self.history[-1] if self.history else DayEndPhase()
        return (
            f"day={self.day} restaurant={self.restaurant} served={last.customers_served} "
            f"lost={last.customers_lost} earned={last.earnings} coins={self.coins} "
            f"dishes={len(self.unlocked_dish_ids)}"
        )
