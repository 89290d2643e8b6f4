"""Core value types for the Short Order simulation.

Every type is a frozen dataclass. State machines (tables, phases) are
modelled as one class per state, each carrying a ``tag`` constant, and are
matched with ``isinstance``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Tuple, Union

from config import (
    DAY_END,
    DEFAULT_PATIENCE_MS,
    FLOOR,
    GROCERY,
    GROCERY_DURATION_MS,
    KITCHEN_PREP,
    KITCHEN_PREP_DURATION_MS,
    SERVICE,
    SERVICE_DURATION_MS,
)
from shortorder.kitchen_service import KitchenServiceState


@dataclass(frozen=True)
class PhaseDurations:
    grocery_ms: int = GROCERY_DURATION_MS
    kitchen_prep_ms: int = KITCHEN_PREP_DURATION_MS
    service_ms: int = SERVICE_DURATION_MS

    def __post_init__(self) -> None:
        for name in ("grocery_ms", "kitchen_prep_ms", "service_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


DEFAULT_DURATIONS = PhaseDurations()


# ---------------------------------------------------------------------------
# Customers and tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Customer:
    """A diner. ``patience_ms`` counts down; ``max_patience_ms`` never changes."""

    id: str
    dish_id: str
    patience_ms: float
    max_patience_ms: float


def create_customer(customer_id: str, dish_id: str, patience_ms: float = DEFAULT_PATIENCE_MS) -> Customer:
    return Customer(id=customer_id, dish_id=dish_id, patience_ms=patience_ms, max_patience_ms=patience_ms)


@dataclass(frozen=True)
class EmptyTable:
    tag: ClassVar[str] = "empty"


@dataclass(frozen=True)
class CustomerWaiting:
    tag: ClassVar[str] = "customer_waiting"

    customer: Customer


@dataclass(frozen=True)
class OrderPending:
    tag: ClassVar[str] = "order_pending"

    customer: Customer


@dataclass(frozen=True)
class InKitchen:
    tag: ClassVar[str] = "in_kitchen"

    customer: Customer
    order_id: str


@dataclass(frozen=True)
class ReadyToServe:
    tag: ClassVar[str] = "ready_to_serve"

    customer: Customer
    order_id: str


TableState = Union[EmptyTable, CustomerWaiting, OrderPending, InKitchen, ReadyToServe]

# Table states whose customer is still waiting and losing patience.
WAITING_TABLE_STATES = (CustomerWaiting, OrderPending, InKitchen)


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GroceryPhase:
    tag: ClassVar[str] = GROCERY

    remaining_ms: float
    duration_ms: float


@dataclass(frozen=True)
class KitchenPrepPhase:
    tag: ClassVar[str] = KITCHEN_PREP

    remaining_ms: float
    duration_ms: float


@dataclass(frozen=True)
class ServicePhase:
    """Dinner service: the dining room, its overflow queue and the kitchen."""

    tag: ClassVar[str] = SERVICE

    remaining_ms: float
    duration_ms: float
    tables: Tuple[TableState, ...] = ()
    customer_queue: Tuple[Customer, ...] = ()
    kitchen: KitchenServiceState = field(default_factory=KitchenServiceState)
    customers_served: int = 0
    customers_lost: int = 0
    earnings: int = 0
    player_location: str = FLOOR


@dataclass(frozen=True)
class DayEndPhase:
    tag: ClassVar[str] = DAY_END

    customers_served: int = 0
    customers_lost: int = 0
    earnings: int = 0


Phase = Union[GroceryPhase, KitchenPrepPhase, ServicePhase, DayEndPhase]
TimedPhase = Union[GroceryPhase, KitchenPrepPhase, ServicePhase]


@dataclass(frozen=True)
class DayCycle:
    day: int
    phase: Phase
