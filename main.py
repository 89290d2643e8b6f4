from __future__ import annotations

import argparse
import sys
from typing import List, Tuple

try:
    import pygame  # type: ignore
except Exception:
    pygame = None

from config import CUTTING_BOARD, DEFAULT_RESTAURANT_TYPE, FLOOR, KITCHEN, OVEN, STOVE
from menu_catalog import sell_price
from recipe_catalog import dish_economics
from shortorder import Autopilot, RestaurantSim
from shortorder.catalogs import ITEMS, MENUS, RECIPES
from shortorder.day_cycle import active_view_for_phase, timer_fraction
from shortorder.difficulty import clamp
from shortorder.entities import (
    CustomerWaiting,
    DayEndPhase,
    EmptyTable,
    GroceryPhase,
    InKitchen,
    KitchenPrepPhase,
    OrderPending,
    ReadyToServe,
    ServicePhase,
)
from shortorder.kitchen_zones import DoneSlot, EmptySlot, NeedsFlipSlot, WorkingSlot

WIDTH = 960
HEIGHT = 640
FPS = 60


def run_headless(days: int, dt_ms: float, seed: int, restaurant: str) -> List[DayEndPhase]:
    sim = RestaurantSim(seed=seed, restaurant=restaurant)
    pilot = Autopilot(sim)
    summaries: List[DayEndPhase] = []
    for _ in range(days):
        summaries.append(pilot.run_day(dt_ms))
        print(sim.summary_line())
    total_served = sum(s.customers_served for s in summaries)
    total_lost = sum(s.customers_lost for s in summaries)
    board = sim.leaderboard
    print(
        f"headless_done days={len(summaries)} served={total_served} lost={total_lost} coins={sim.coins} "
        f"best_day_served={board.best_day_served} best_day_earned={board.best_day_earnings} "
        f"total_earned={board.total_earnings}"
    )
    return summaries


def _display_name(item_id: str) -> str:
    return str(ITEMS.get(item_id, {}).get("display_name", item_id))


class GameUI:
    """pygame front end: one screen per phase, keys mapped to player intents.

    1-9     grocery: buy a basket for the n-th dish; service: work table n
    TAB     walk between the floor and the kitchen
    C       hold the cutting board (release to stop)
    F       flip whatever is waiting on the stove
    A       assemble the oldest order that can be built
    H       let the sous-chef start the next recipe step
    SPACE   next phase
    """

    def __init__(self, sim: RestaurantSim):
        if pygame is None:
            raise RuntimeError("pygame is required for graphical mode; install it or relaunch with --headless")
        try:
            pygame.init()
            pygame.display.init()
        except pygame.error as exc:
            raise RuntimeError(f"Display subsystem failed to start ({exc}). Relaunch with --headless.") from exc
        if not pygame.display.get_init():
            raise RuntimeError("Display subsystem is unavailable. Relaunch with --headless.")

        self.sim = sim
        self.helper = Autopilot(sim)
        try:
            self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        except pygame.error as exc:
            raise RuntimeError(f"Could not open a window ({exc}). Relaunch with --headless.") from exc
        pygame.display.set_caption(f"Short Order: {sim.menu['display_name']}")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("arial", 22)
        self.small = pygame.font.SysFont("arial", 16)
        self.running = True

        self.palette = {
            "bg": (18, 16, 22),
            "panel": (32, 28, 40),
            "panel_border": (70, 60, 88),
            "text": (240, 234, 226),
            "muted": (176, 164, 150),
            "timer": (236, 170, 72),
        }

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_input(self) -> None:
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                self.running = False
            elif ev.type == pygame.KEYDOWN:
                self._on_key(ev.key)
            elif ev.type == pygame.KEYUP and ev.key == pygame.K_c:
                for index in range(len(self._cutting_board())):
                    self.sim.hold_cutting_board(index, False)

    def _cutting_board(self) -> Tuple:
        phase = self.sim.phase
        return phase.kitchen.zones.cutting_board if isinstance(phase, ServicePhase) else ()

    def _on_key(self, key: int) -> None:
        sim = self.sim
        phase = sim.phase
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            sim.advance_phase()
        elif pygame.K_1 <= key <= pygame.K_9:
            self._on_number(key - pygame.K_1, phase)
        elif not isinstance(phase, ServicePhase):
            return
        elif key == pygame.K_TAB:
            sim.move_player(FLOOR if phase.player_location == KITCHEN else KITCHEN)
        elif key == pygame.K_c:
            for index, slot in enumerate(phase.kitchen.zones.cutting_board):
                if isinstance(slot, WorkingSlot):
                    sim.hold_cutting_board(index, True)
        elif key == pygame.K_f:
            for index, slot in enumerate(phase.kitchen.zones.stove):
                if isinstance(slot, NeedsFlipSlot):
                    sim.flip_stove(index)
                    break
        elif key == pygame.K_a:
            for order in phase.kitchen.pending_orders:
                if sim.assemble(order.id):
                    break
        elif key == pygame.K_h:
            self.helper.start_next_step()

    def _on_number(self, index: int, phase) -> None:
        sim = self.sim
        if isinstance(phase, GroceryPhase):
            dishes = sim.unlocked_dish_ids
            if index < len(dishes):
                economics = dish_economics(dishes[index], sell_price(sim.menu, dishes[index]), RECIPES, ITEMS)
                if economics is not None and economics.raw_cost <= sim.coins:
                    for item_id, qty in economics.raw_ingredients:
                        sim.buy_item(item_id, qty)
        elif isinstance(phase, ServicePhase) and index < len(phase.tables):
            table = phase.tables[index]
            if isinstance(table, ReadyToServe):
                sim.serve(index)
            elif isinstance(table, (CustomerWaiting, OrderPending)):
                if not sim.serve_from_stock(index):
                    sim.take_order(index)
                    sim.send_order(index)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _text(self, text: str, x: int, y: int, color=None, big: bool = False) -> None:
        font = self.font if big else self.small
        self.screen.blit(font.render(text, True, color or self.palette["text"]), (x, y))

    def _draw_timer(self) -> None:
        phase = self.sim.phase
        bar = pygame.Rect(20, 20, WIDTH - 40, 22)
        pygame.draw.rect(self.screen, self.palette["panel"], bar, border_radius=8)
        fill = pygame.Rect(bar.x, bar.y, int(bar.w * timer_fraction(phase)), bar.h)
        pygame.draw.rect(self.screen, self.palette["timer"], fill, border_radius=8)
        label = f"DAY {self.sim.day} - {phase.tag.replace('_', ' ').upper()} | coins {self.sim.coins}"
        self._text(label, bar.x + 10, bar.y + 2)

    def _table_color(self, table) -> Tuple[int, int, int]:
        colors = {
            EmptyTable: (60, 56, 70),
            CustomerWaiting: (96, 150, 220),
            OrderPending: (226, 196, 90),
            InKitchen: (230, 130, 70),
            ReadyToServe: (110, 200, 120),
        }
        return colors[type(table)]

    def _draw_floor(self, phase: ServicePhase) -> None:
        for idx, table in enumerate(phase.tables):
            rect = pygame.Rect(40 + idx * 220, 110, 190, 150)
            pygame.draw.rect(self.screen, self._table_color(table), rect, border_radius=14)
            self._text(f"{idx + 1}. {table.tag.replace('_', ' ')}", rect.x + 10, rect.y + 10)
            if not isinstance(table, EmptyTable):
                customer = table.customer
                self._text(_display_name(customer.dish_id), rect.x + 10, rect.y + 40)
                patience = clamp(customer.patience_ms / max(1.0, customer.max_patience_ms), 0.0, 1.0)
                meter = pygame.Rect(rect.x + 10, rect.bottom - 30, int((rect.w - 20) * patience), 12)
                pygame.draw.rect(self.screen, (250, 240, 230), meter, border_radius=6)
        self._text(f"Queue: {len(phase.customer_queue)}", 40, 280, big=True)
        self._text(
            f"Served {phase.customers_served}  Lost {phase.customers_lost}  Earned {phase.earnings}",
            40,
            312,
        )

    def _draw_slot(self, slot, rect) -> None:
        pygame.draw.rect(self.screen, self.palette["panel"], rect, border_radius=10)
        pygame.draw.rect(self.screen, self.palette["panel_border"], rect, width=1, border_radius=10)
        if isinstance(slot, EmptySlot):
            return
        name = _display_name(slot.output_item_id)
        if isinstance(slot, DoneSlot):
            self._text(f"{name} done", rect.x + 8, rect.y + 8)
            return
        fraction = clamp(slot.progress_ms / max(1.0, slot.duration_ms), 0.0, 1.0)
        fill = pygame.Rect(rect.x + 8, rect.bottom - 18, int((rect.w - 16) * fraction), 10)
        pygame.draw.rect(self.screen, self.palette["timer"], fill, border_radius=5)
        state = "FLIP!" if isinstance(slot, NeedsFlipSlot) else ("active" if slot.is_active else slot.interaction)
        self._text(f"{name} ({state})", rect.x + 8, rect.y + 8)

    def _draw_kitchen(self, phase: ServicePhase) -> None:
        zones = phase.kitchen.zones
        for row, zone in enumerate((CUTTING_BOARD, STOVE, OVEN)):
            y = 100 + row * 90
            self._text(zone.replace("_", " ").title(), 40, y + 24, big=True)
            for col, slot in enumerate(zones.slots(zone)):
                self._draw_slot(slot, pygame.Rect(220 + col * 240, y, 220, 70))
        ready = ", ".join(_display_name(item) for item in zones.ready) or "-"
        self._text(f"Ready: {ready}", 40, 380)
        pending = ", ".join(f"{o.id} {_display_name(o.dish_id)}" for o in phase.kitchen.pending_orders) or "-"
        self._text(f"Orders: {pending}", 40, 404)

    def _draw_inventory(self) -> None:
        counts = {}
        for unit in self.sim.inventory.items:
            counts[unit.item_id] = counts.get(unit.item_id, 0) + 1
        text = "  ".join(f"{_display_name(k)} x{v}" for k, v in sorted(counts.items())) or "empty"
        self._text(f"Stock: {text}", 20, HEIGHT - 70, self.palette["muted"])

    def draw(self) -> None:
        self.screen.fill(self.palette["bg"])
        phase = self.sim.phase
        self._draw_timer()
        view = active_view_for_phase(phase)
        if isinstance(phase, ServicePhase):
            if view == "kitchen":
                self._draw_kitchen(phase)
            else:
                self._draw_floor(phase)
        elif isinstance(phase, GroceryPhase):
            for idx, dish in enumerate(self.sim.unlocked_dish_ids):
                self._text(f"{idx + 1}. buy a basket for {_display_name(dish)}", 40, 110 + idx * 30, big=True)
        elif isinstance(phase, KitchenPrepPhase):
            self._text("Kitchen prep: press SPACE to open the doors", 40, 110, big=True)
        elif isinstance(phase, DayEndPhase):
            self._text(
                f"Day over. Served {phase.customers_served}, lost {phase.customers_lost}, "
                f"earned {phase.earnings}. SPACE for the next day.",
                40,
                110,
                big=True,
            )
        self._draw_inventory()
        for idx, event in enumerate(self.sim.event_log[-3:]):
            self._text(event, 20, HEIGHT - 48 + idx * 15, self.palette["muted"])
        pygame.display.flip()

    def run(self) -> None:
        while self.running:
            dt_ms = self.clock.tick(FPS)
            self.handle_input()
            self.sim.tick(dt_ms)
            self.draw()
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Short Order restaurant prototype")
    parser.add_argument("--headless", action="store_true", help="run the autopilot without graphics")
    parser.add_argument("--days", type=int, default=3, help="headless days to play")
    parser.add_argument("--dt", type=float, default=100.0, help="headless timestep in milliseconds")
    parser.add_argument("--seed", type=int, default=7, help="random seed")
    parser.add_argument(
        "--restaurant",
        choices=sorted(MENUS),
        default=DEFAULT_RESTAURANT_TYPE,
        help="which menu to run",
    )
    args = parser.parse_args()

    if args.headless:
        if args.days < 1 or args.dt <= 0:
            parser.error("--days must be at least 1 and --dt must be positive")
        run_headless(args.days, args.dt, args.seed, args.restaurant)
        return

    sim = RestaurantSim(seed=args.seed, restaurant=args.restaurant)
    try:
        ui = GameUI(sim)
    except RuntimeError as exc:
        print(f"Startup error: {exc}", file=sys.stderr)
        sys.exit(1)
    ui.run()


if __name__ == "__main__":
    main()
