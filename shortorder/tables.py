"""Dining room: per-table state machines, the overflow queue and patience.

Every transition checks its own precondition and hands back the phase it was
given, unchanged, when the precondition does not hold. Callers can fire
commands optimistically without guarding first.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple

from config import DEFAULT_TABLE_COUNT, PLAYER_LOCATIONS
from shortorder.entities import (
    WAITING_TABLE_STATES,
    Customer,
    CustomerWaiting,
    EmptyTable,
    InKitchen,
    OrderPending,
    ReadyToServe,
    ServicePhase,
    TableState,
)
from shortorder.kitchen_service import (
    KitchenOrder,
    add_order_to_kitchen,
    create_kitchen_service_state,
    is_kitchen_idle,
    pickup_from_order_up,
    tick_kitchen_service,
)


def create_service_phase(duration_ms: float, table_count: int = DEFAULT_TABLE_COUNT) -> ServicePhase:
    return ServicePhase(
        remaining_ms=duration_ms,
        duration_ms=duration_ms,
        tables=tuple(EmptyTable() for _ in range(max(0, table_count))),
        customer_queue=(),
        kitchen=create_kitchen_service_state(),
    )


def _with_table(tables: Tuple[TableState, ...], table_id: int, state: TableState) -> Tuple[TableState, ...]:
    return tables[:table_id] + (state,) + tables[table_id + 1:]


def _table(phase: ServicePhase, table_id: int) -> Optional[TableState]:
    if 0 <= table_id < len(phase.tables):
        return phase.tables[table_id]
    return None


def _first_empty(tables: Tuple[TableState, ...]) -> Optional[int]:
    for idx, table in enumerate(tables):
        if isinstance(table, EmptyTable):
            return idx
    return None


def _reseat(tables: Tuple[TableState, ...], queue: Tuple[Customer, ...], table_id: int):
    """Move the head of the queue into the (empty) table ``table_id``."""
    if not queue:
        return tables, queue
    return _with_table(tables, table_id, CustomerWaiting(queue[0])), queue[1:]


# ---------------------------------------------------------------------------
# Arrivals
# ---------------------------------------------------------------------------


def enqueue_customer(phase: ServicePhase, customer: Customer) -> ServicePhase:
    """Seat at the first empty table, or join the back of the queue."""
    idx = _first_empty(phase.tables)
    if idx is None:
        return replace(phase, customer_queue=phase.customer_queue + (customer,))
    return replace(phase, tables=_with_table(phase.tables, idx, CustomerWaiting(customer)))


def seat_next_customer(phase: ServicePhase) -> Optional[ServicePhase]:
    """Seat the head of the queue; ``None`` if nobody waits or every table is taken."""
    if not phase.customer_queue:
        return None
    idx = _first_empty(phase.tables)
    if idx is None:
        return None
    tables, queue = _reseat(phase.tables, phase.customer_queue, idx)
    return replace(phase, tables=tables, customer_queue=queue)


# ---------------------------------------------------------------------------
# Table transitions
# ---------------------------------------------------------------------------


def take_order(phase: ServicePhase, table_id: int) -> ServicePhase:
    table = _table(phase, table_id)
    if not isinstance(table, CustomerWaiting):
        return phase
    return replace(phase, tables=_with_table(phase.tables, table_id, OrderPending(table.customer)))


def send_order_to_kitchen(phase: ServicePhase, table_id: int, order_id: str) -> ServicePhase:
    table = _table(phase, table_id)
    if not isinstance(table, OrderPending):
        return phase
    customer = table.customer
    order = KitchenOrder(id=order_id, customer_id=customer.id, dish_id=customer.dish_id)
    return replace(
        phase,
        tables=_with_table(phase.tables, table_id, InKitchen(customer, order_id)),
        kitchen=add_order_to_kitchen(phase.kitchen, order),
    )


def find_table_for_order(phase: ServicePhase, order_id: str) -> Optional[int]:
    for idx, table in enumerate(phase.tables):
        if isinstance(table, (InKitchen, ReadyToServe)) and table.order_id == order_id:
            return idx
    return None


def notify_order_ready(phase: ServicePhase, order_id: str) -> ServicePhase:
    for idx, table in enumerate(phase.tables):
        if isinstance(table, InKitchen) and table.order_id == order_id:
            ready = ReadyToServe(table.customer, table.order_id)
            return replace(phase, tables=_with_table(phase.tables, idx, ready))
    return phase


def _close_table(phase: ServicePhase, table_id: int, price: int) -> ServicePhase:
    tables, queue = _reseat(_with_table(phase.tables, table_id, EmptyTable()), phase.customer_queue, table_id)
    return replace(
        phase,
        tables=tables,
        customer_queue=queue,
        customers_served=phase.customers_served + 1,
        earnings=phase.earnings + price,
    )


def serve_order(phase: ServicePhase, table_id: int, price: int) -> ServicePhase:
    """Hand a finished order from the pass to its table."""
    table = _table(phase, table_id)
    if not isinstance(table, ReadyToServe):
        return phase
    served = _close_table(phase, table_id, price)
    return replace(served, kitchen=pickup_from_order_up(served.kitchen, table.order_id))


def serve_from_inventory(phase: ServicePhase, table_id: int, price: int) -> ServicePhase:
    """Serve a waiting table straight from pre-made stock.

    The caller removes the dish from the inventory.
    """
    table = _table(phase, table_id)
    if not isinstance(table, (CustomerWaiting, OrderPending)):
        return phase
    return _close_table(phase, table_id, price)


def move_player(phase: ServicePhase, location: str) -> ServicePhase:
    if location not in PLAYER_LOCATIONS or location == phase.player_location:
        return phase
    return replace(phase, player_location=location)


# ---------------------------------------------------------------------------
# Ticking
# ---------------------------------------------------------------------------


def _decay(customer: Customer, elapsed_ms: float) -> Customer:
    return replace(customer, patience_ms=max(0, customer.patience_ms - elapsed_ms))


def _decay_table(table: TableState, elapsed_ms: float) -> TableState:
    if isinstance(table, WAITING_TABLE_STATES):
        return replace(table, customer=_decay(table.customer, elapsed_ms))
    return table


def tick_service_phase(phase: ServicePhase, elapsed_ms: float) -> ServicePhase:
    """Advance the dining room and the kitchen by one frame.

    Order of work: patience decays for every waiting customer (seated or
    queued), the kitchen advances by the same delta, then customers out of
    patience leave. A table freed this way seats the next queued customer.
    """
    tables = tuple(_decay_table(table, elapsed_ms) for table in phase.tables)
    queue = tuple(_decay(customer, elapsed_ms) for customer in phase.customer_queue)
    kitchen = tick_kitchen_service(phase.kitchen, elapsed_ms)

    lost = 0
    still_queued = tuple(customer for customer in queue if customer.patience_ms > 0)
    lost += len(queue) - len(still_queued)
    queue = still_queued

    for idx, table in enumerate(tables):
        if isinstance(table, WAITING_TABLE_STATES) and table.customer.patience_ms <= 0:
            lost += 1
            tables, queue = _reseat(_with_table(tables, idx, EmptyTable()), queue, idx)

    return replace(
        phase,
        tables=tables,
        customer_queue=queue,
        kitchen=kitchen,
        customers_lost=phase.customers_lost + lost,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def empty_table_ids(phase: ServicePhase) -> List[int]:
    return [idx for idx, table in enumerate(phase.tables) if isinstance(table, EmptyTable)]


def occupied_table_count(phase: ServicePhase) -> int:
    return sum(1 for table in phase.tables if not isinstance(table, EmptyTable))


def active_customer_count(phase: ServicePhase) -> int:
    """Customers currently in the building: seated plus queued."""
    return occupied_table_count(phase) + len(phase.customer_queue)


def tables_in_state(phase: ServicePhase, state: type) -> List[int]:
    return [idx for idx, table in enumerate(phase.tables) if isinstance(table, state)]


def is_restaurant_idle(phase: ServicePhase) -> bool:
    return occupied_table_count(phase) == 0 and not phase.customer_queue and is_kitchen_idle(phase.kitchen)
