"""Top-level day state machine: grocery, kitchen prep, service, day end.

Transitions run one way and build the next phase fresh. The only values
carried across are the day-end summary (copied out of service) and the day
counter (bumped by :func:`advance_to_next_day`).
"""
from __future__ import annotations

from dataclasses import replace

from config import DEFAULT_TABLE_COUNT, KITCHEN
from shortorder.entities import (
    DEFAULT_DURATIONS,
    DayCycle,
    DayEndPhase,
    GroceryPhase,
    KitchenPrepPhase,
    Phase,
    PhaseDurations,
    ServicePhase,
)
from shortorder.tables import create_service_phase


def create_day_cycle(day: int = 1, durations: PhaseDurations = DEFAULT_DURATIONS) -> DayCycle:
    return DayCycle(
        day=day,
        phase=GroceryPhase(remaining_ms=durations.grocery_ms, duration_ms=durations.grocery_ms),
    )


def is_timed_phase(phase: Phase) -> bool:
    return not isinstance(phase, DayEndPhase)


def phase_name(phase: Phase) -> str:
    return phase.tag


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------


def tick_timer(cycle: DayCycle, elapsed_ms: float) -> DayCycle:
    phase = cycle.phase
    if isinstance(phase, DayEndPhase):
        return cycle
    return replace(cycle, phase=replace(phase, remaining_ms=max(0, phase.remaining_ms - elapsed_ms)))


def is_phase_timer_expired(cycle: DayCycle) -> bool:
    phase = cycle.phase
    if isinstance(phase, DayEndPhase):
        return False
    return phase.remaining_ms <= 0


def timer_fraction(phase: Phase) -> float:
    if isinstance(phase, DayEndPhase) or phase.duration_ms <= 0:
        return 0.0
    return max(0.0, min(1.0, phase.remaining_ms / phase.duration_ms))


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def advance_to_kitchen_prep(cycle: DayCycle, duration_ms: float) -> DayCycle:
    return replace(cycle, phase=KitchenPrepPhase(remaining_ms=duration_ms, duration_ms=duration_ms))


def advance_to_service(cycle: DayCycle, duration_ms: float, tables: int = DEFAULT_TABLE_COUNT) -> DayCycle:
    return replace(cycle, phase=create_service_phase(duration_ms, tables))


def advance_to_day_end(cycle: DayCycle) -> DayCycle:
    phase = cycle.phase
    if isinstance(phase, ServicePhase):
        summary = DayEndPhase(
            customers_served=phase.customers_served,
            customers_lost=phase.customers_lost,
            earnings=phase.earnings,
        )
    else:
        summary = DayEndPhase()
    return replace(cycle, phase=summary)


def advance_to_next_day(cycle: DayCycle, durations: PhaseDurations = DEFAULT_DURATIONS) -> DayCycle:
    return create_day_cycle(cycle.day + 1, durations)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def active_view_for_phase(phase: Phase) -> str:
    """Which screen a front end should show for ``phase``."""
    if isinstance(phase, GroceryPhase):
        return "grocery"
    if isinstance(phase, KitchenPrepPhase):
        return "kitchen"
    if isinstance(phase, ServicePhase):
        return "kitchen" if phase.player_location == KITCHEN else "restaurant"
    if isinstance(phase, DayEndPhase):
        return "day_end"
    raise TypeError(f"unknown phase: {phase!r}")
