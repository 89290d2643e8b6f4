"""Per-day difficulty: faster arrivals, shorter patience, bigger crowds."""
from __future__ import annotations

from dataclasses import dataclass

from config import (
    CUSTOMERS_CAP,
    CUSTOMERS_DAY_ONE,
    CUSTOMERS_STEP,
    PATIENCE_MAX_FLOOR_MS,
    PATIENCE_MAX_MS,
    PATIENCE_MIN_FLOOR_MS,
    PATIENCE_MIN_MS,
    PATIENCE_STEP_MS,
    SPAWN_MAX_FLOOR_MS,
    SPAWN_MAX_MS,
    SPAWN_MIN_FLOOR_MS,
    SPAWN_MIN_MS,
    SPAWN_STEP_MS,
)


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass(frozen=True)
class DayDifficulty:
    customer_spawn_min_ms: int
    customer_spawn_max_ms: int
    customer_patience_min_ms: int
    customer_patience_max_ms: int
    max_customers_per_day: int


def difficulty_for_day(day: int) -> DayDifficulty:
    level = max(0, day - 1)
    return DayDifficulty(
        customer_spawn_min_ms=int(clamp(SPAWN_MIN_MS - level * SPAWN_STEP_MS, SPAWN_MIN_FLOOR_MS, SPAWN_MIN_MS)),
        customer_spawn_max_ms=int(clamp(SPAWN_MAX_MS - level * SPAWN_STEP_MS, SPAWN_MAX_FLOOR_MS, SPAWN_MAX_MS)),
        customer_patience_min_ms=int(
            clamp(PATIENCE_MIN_MS - level * PATIENCE_STEP_MS, PATIENCE_MIN_FLOOR_MS, PATIENCE_MIN_MS)
        ),
        customer_patience_max_ms=int(
            clamp(PATIENCE_MAX_MS - level * PATIENCE_STEP_MS, PATIENCE_MAX_FLOOR_MS, PATIENCE_MAX_MS)
        ),
        max_customers_per_day=int(clamp(CUSTOMERS_DAY_ONE + level * CUSTOMERS_STEP, CUSTOMERS_DAY_ONE, CUSTOMERS_CAP)),
    )
