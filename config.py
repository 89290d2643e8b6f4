"""Centralised configuration constants for Short Order."""
from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths (optional JSON overrides for the built-in catalogs)
# ---------------------------------------------------------------------------
ITEMS_FILE: Path = Path("data/items.json")
RECIPES_FILE: Path = Path("data/recipes.json")
MENUS_FILE: Path = Path("data/menus.json")

# ---------------------------------------------------------------------------
# Phase tags
# ---------------------------------------------------------------------------
GROCERY: str = "grocery"
KITCHEN_PREP: str = "kitchen_prep"
SERVICE: str = "service"
DAY_END: str = "day_end"


# ---------------------------------------------------------------------------
# Phase timing (milliseconds)
# ---------------------------------------------------------------------------
GROCERY_DURATION_MS: int = 30_000
KITCHEN_PREP_DURATION_MS: int = 30_000
SERVICE_DURATION_MS: int = 120_000

# ---------------------------------------------------------------------------
# Dining room
# ---------------------------------------------------------------------------
DEFAULT_TABLE_COUNT: int = 4
DEFAULT_PATIENCE_MS: int = 60_000

FLOOR: str = "floor"
KITCHEN: str = "kitchen"
PLAYER_LOCATIONS: tuple[str, ...] = (FLOOR, KITCHEN)

# ---------------------------------------------------------------------------
# Kitchen zones
# ---------------------------------------------------------------------------
CUTTING_BOARD: str = "cutting_board"
STOVE: str = "stove"
OVEN: str = "oven"

HOLD: str = "hold"
FLIP: str = "flip"
AUTO: str = "auto"
INTERACTIONS: tuple[str, ...] = (HOLD, FLIP, AUTO)

# Parallel work slots per station kind
ZONE_CAPACITIES: dict[str, int] = {
    CUTTING_BOARD: 1,
    STOVE: 3,
    OVEN: 2,
}

# How the player engages each station
ZONE_INTERACTIONS: dict[str, str] = {
    CUTTING_BOARD: HOLD,
    STOVE: FLIP,
    OVEN: AUTO,
}

FLIP_GATE_FRACTION: float = 0.5  # stove items pause here until flipped

# ---------------------------------------------------------------------------
# Item categories
# ---------------------------------------------------------------------------
RAW: str = "raw"
PREPPED: str = "prepped"
DISH: str = "dish"
ITEM_CATEGORIES: tuple[str, ...] = (RAW, PREPPED, DISH)

# ---------------------------------------------------------------------------
# Economy
# ---------------------------------------------------------------------------
STARTING_COINS: int = 20

# ---------------------------------------------------------------------------
# Difficulty curve (day 1 values, per-day step, and bounds)
# ---------------------------------------------------------------------------
SPAWN_MIN_MS: int = 10_000
SPAWN_MAX_MS: int = 15_000
SPAWN_STEP_MS: int = 700
SPAWN_MIN_FLOOR_MS: int = 3_000
SPAWN_MAX_FLOOR_MS: int = 5_000

PATIENCE_MIN_MS: int = 45_000
PATIENCE_MAX_MS: int = 75_000
PATIENCE_STEP_MS: int = 3_000
PATIENCE_MIN_FLOOR_MS: int = 15_000
PATIENCE_MAX_FLOOR_MS: int = 30_000

CUSTOMERS_DAY_ONE: int = 8
CUSTOMERS_STEP: int = 2
CUSTOMERS_CAP: int = 30

FIRST_CUSTOMER_DELAY_MS: int = 2_000  # first arrival of a service comes early

# ---------------------------------------------------------------------------
# Menu progression
# ---------------------------------------------------------------------------
STARTER_DISH_COUNT: int = 1
DEFAULT_RESTAURANT_TYPE: str = "burger"

# ---------------------------------------------------------------------------
# Runtime
# ---------------------------------------------------------------------------
EVENT_LOG_LIMIT: int = 12
