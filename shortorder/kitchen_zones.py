"""Cooking stations as fixed-size slot arrays.

Each zone kind (cutting board, stove, oven) has a fixed number of slots. A
slot holds one item in progress and follows one of three interaction
disciplines:

``hold``
    progress only advances while the player keeps the slot active;
``flip``
    progress advances on its own but stops at the flip gate until flipped;
``auto``
    progress always advances.

Finished items land in the shared ``ready`` pool and the slot frees up.
All functions return new values; nothing is mutated in place.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Dict, List, Optional, Tuple, Union

from config import CUTTING_BOARD, FLIP, FLIP_GATE_FRACTION, HOLD, INTERACTIONS, OVEN, STOVE, ZONE_CAPACITIES


@dataclass(frozen=True)
class EmptySlot:
    tag: ClassVar[str] = "empty"


@dataclass(frozen=True)
class WorkingSlot:
    tag: ClassVar[str] = "working"

    output_item_id: str
    progress_ms: float
    duration_ms: float
    interaction: str
    is_active: bool = False


@dataclass(frozen=True)
class NeedsFlipSlot:
    tag: ClassVar[str] = "needs_flip"

    output_item_id: str
    progress_ms: float
    duration_ms: float


@dataclass(frozen=True)
class DoneSlot:
    tag: ClassVar[str] = "done"

    output_item_id: str


ZoneSlot = Union[EmptySlot, WorkingSlot, NeedsFlipSlot, DoneSlot]

ZONES: Tuple[str, ...] = (CUTTING_BOARD, STOVE, OVEN)


@dataclass(frozen=True)
class KitchenZoneState:
    cutting_board: Tuple[ZoneSlot, ...]
    stove: Tuple[ZoneSlot, ...]
    oven: Tuple[ZoneSlot, ...]
    ready: Tuple[str, ...] = ()

    def slots(self, zone: str) -> Tuple[ZoneSlot, ...]:
        return getattr(self, zone)

    def all_slots(self) -> Tuple[ZoneSlot, ...]:
        return self.cutting_board + self.stove + self.oven


def create_kitchen_zone_state(capacities: Dict[str, int] = ZONE_CAPACITIES) -> KitchenZoneState:
    return KitchenZoneState(
        cutting_board=tuple(EmptySlot() for _ in range(capacities[CUTTING_BOARD])),
        stove=tuple(EmptySlot() for _ in range(capacities[STOVE])),
        oven=tuple(EmptySlot() for _ in range(capacities[OVEN])),
    )


def _replace_slot(zones: KitchenZoneState, zone: str, index: int, slot: ZoneSlot) -> KitchenZoneState:
    slots = zones.slots(zone)
    return replace(zones, **{zone: slots[:index] + (slot,) + slots[index + 1:]})


def zone_has_capacity(zones: KitchenZoneState, zone: str) -> bool:
    if zone not in ZONES:
        return False
    return any(isinstance(slot, EmptySlot) for slot in zones.slots(zone))


def has_active_slots(zones: KitchenZoneState) -> bool:
    return any(not isinstance(slot, EmptySlot) for slot in zones.all_slots())


# ---------------------------------------------------------------------------
# Placement and player interactions
# ---------------------------------------------------------------------------


def place_item_in_zone(
    zones: KitchenZoneState,
    zone: str,
    output_item_id: str,
    duration_ms: float,
    interaction: str,
) -> Optional[KitchenZoneState]:
    """Start work in the first empty slot of ``zone``; ``None`` when the zone is full or unknown."""
    if zone not in ZONES or interaction not in INTERACTIONS:
        return None
    for index, slot in enumerate(zones.slots(zone)):
        if isinstance(slot, EmptySlot):
            working = WorkingSlot(
                output_item_id=output_item_id,
                progress_ms=0,
                duration_ms=duration_ms,
                interaction=interaction,
                is_active=False,
            )
            return _replace_slot(zones, zone, index, working)
    return None


def activate_cutting_board_slot(zones: KitchenZoneState, slot_index: int, is_active: bool) -> KitchenZoneState:
    if not 0 <= slot_index < len(zones.cutting_board):
        return zones
    slot = zones.cutting_board[slot_index]
    if not isinstance(slot, WorkingSlot) or slot.is_active == is_active:
        return zones
    return _replace_slot(zones, CUTTING_BOARD, slot_index, replace(slot, is_active=is_active))


def flip_stove_slot(zones: KitchenZoneState, slot_index: int) -> KitchenZoneState:
    if not 0 <= slot_index < len(zones.stove):
        return zones
    slot = zones.stove[slot_index]
    if not isinstance(slot, NeedsFlipSlot):
        return zones
    resumed = WorkingSlot(
        output_item_id=slot.output_item_id,
        progress_ms=slot.progress_ms,
        duration_ms=slot.duration_ms,
        interaction=FLIP,
        is_active=True,
    )
    return _replace_slot(zones, STOVE, slot_index, resumed)


def retrieve_ready_item(zones: KitchenZoneState, item_id: str) -> Optional[KitchenZoneState]:
    if item_id not in zones.ready:
        return None
    idx = zones.ready.index(item_id)
    return replace(zones, ready=zones.ready[:idx] + zones.ready[idx + 1:])


# ---------------------------------------------------------------------------
# Ticking
# ---------------------------------------------------------------------------


def _tick_slot(slot: ZoneSlot, elapsed_ms: float, flip_gate: float) -> Tuple[ZoneSlot, Optional[str]]:
    if isinstance(slot, DoneSlot):
        return EmptySlot(), slot.output_item_id
    if not isinstance(slot, WorkingSlot):
        # Empty slots idle; needs_flip slots wait for the player.
        return slot, None
    if slot.interaction == HOLD and not slot.is_active:
        return slot, None

    progress = slot.progress_ms + elapsed_ms
    if slot.interaction == FLIP:
        gate = slot.duration_ms * flip_gate
        if slot.progress_ms < gate <= progress:
            return NeedsFlipSlot(slot.output_item_id, gate, slot.duration_ms), None

    if progress >= slot.duration_ms:
        return EmptySlot(), slot.output_item_id
    return replace(slot, progress_ms=progress), None


def _tick_zone(
    slots: Tuple[ZoneSlot, ...], elapsed_ms: float, flip_gate: float
) -> Tuple[Tuple[ZoneSlot, ...], List[str]]:
    ticked: List[ZoneSlot] = []
    completed: List[str] = []
    for slot in slots:
        new_slot, output = _tick_slot(slot, elapsed_ms, flip_gate)
        ticked.append(new_slot)
        if output is not None:
            completed.append(output)
    return tuple(ticked), completed


def tick_kitchen_zones(
    zones: KitchenZoneState, elapsed_ms: float, flip_gate: float = FLIP_GATE_FRACTION
) -> KitchenZoneState:
    cutting_board, cb_done = _tick_zone(zones.cutting_board, elapsed_ms, flip_gate)
    stove, stove_done = _tick_zone(zones.stove, elapsed_ms, flip_gate)
    oven, oven_done = _tick_zone(zones.oven, elapsed_ms, flip_gate)
    return KitchenZoneState(
        cutting_board=cutting_board,
        stove=stove,
        oven=oven,
        ready=zones.ready + tuple(cb_done) + tuple(stove_done) + tuple(oven_done),
    )
