"""Tests for the dining room: seating, queueing, patience and serving."""
from __future__ import annotations

import unittest
from dataclasses import replace

from config import FLOOR, KITCHEN
from shortorder.entities import (
    Customer,
    CustomerWaiting,
    EmptyTable,
    InKitchen,
    OrderPending,
    ReadyToServe,
    create_customer,
)
from shortorder.inventory import add_item, create_inventory
from shortorder.kitchen_service import assemble_order
from shortorder.tables import (
    active_customer_count,
    create_service_phase,
    empty_table_ids,
    enqueue_customer,
    find_table_for_order,
    is_restaurant_idle,
    move_player,
    notify_order_ready,
    seat_next_customer,
    send_order_to_kitchen,
    serve_from_inventory,
    serve_order,
    take_order,
    tables_in_state,
    tick_service_phase,
)


def _customer(n: int, patience: float = 60_000) -> Customer:
    return create_customer(f"c{n}", "classic_burger", patience)


class TestSeating(unittest.TestCase):
    def test_service_phase_starts_empty(self):
        phase = create_service_phase(120_000, 4)
        self.assertEqual(4, len(phase.tables))
        self.assertEqual([0, 1, 2, 3], empty_table_ids(phase))
        self.assertEqual(FLOOR, phase.player_location)
        self.assertTrue(is_restaurant_idle(phase))

    def test_enqueue_seats_first_empty_then_queues(self):
        phase = create_service_phase(120_000, 2)
        for n in range(3):
            phase = enqueue_customer(phase, _customer(n))

        self.assertEqual("c0", phase.tables[0].customer.id)
        self.assertEqual("c1", phase.tables[1].customer.id)
        self.assertEqual(("c2",), tuple(c.id for c in phase.customer_queue))
        self.assertEqual(3, active_customer_count(phase))

    def test_seat_next_customer_requires_queue_and_table(self):
        phase = create_service_phase(120_000, 1)
        self.assertIsNone(seat_next_customer(phase))

        phase = enqueue_customer(enqueue_customer(phase, _customer(0)), _customer(1))
        self.assertIsNone(seat_next_customer(phase))

        freed = replace(phase, tables=(EmptyTable(),))
        seated = seat_next_customer(freed)
        self.assertEqual("c1", seated.tables[0].customer.id)
        self.assertEqual((), seated.customer_queue)


class TestTableFlow(unittest.TestCase):
    def setUp(self):
        self.phase = enqueue_customer(create_service_phase(120_000, 2), _customer(0))

    def test_full_order_lifecycle(self):
        phase = take_order(self.phase, 0)
        self.assertIsInstance(phase.tables[0], OrderPending)

        phase = send_order_to_kitchen(phase, 0, "o1")
        self.assertIsInstance(phase.tables[0], InKitchen)
        self.assertEqual("o1", phase.kitchen.pending_orders[0].id)
        self.assertEqual(0, find_table_for_order(phase, "o1"))

        kitchen = replace(
            phase.kitchen,
            zones=replace(phase.kitchen.zones, ready=("grilled_patty", "shredded_lettuce", "sliced_tomato")),
        )
        kitchen, _ = assemble_order(kitchen, add_item(create_inventory(), "bun", 0), "o1")
        phase = notify_order_ready(replace(phase, kitchen=kitchen), "o1")
        self.assertIsInstance(phase.tables[0], ReadyToServe)

        phase = serve_order(phase, 0, 8)
        self.assertIsInstance(phase.tables[0], EmptyTable)
        self.assertEqual(1, phase.customers_served)
        self.assertEqual(8, phase.earnings)
        self.assertEqual((), phase.kitchen.order_up)
        self.assertTrue(is_restaurant_idle(phase))

    def test_transitions_on_wrong_state_are_no_ops(self):
        phase = self.phase
        self.assertIs(phase, send_order_to_kitchen(phase, 0, "o1"))
        self.assertIs(phase, take_order(phase, 1))
        self.assertIs(phase, take_order(phase, 9))
        self.assertIs(phase, notify_order_ready(phase, "o1"))
        self.assertIsNone(find_table_for_order(phase, "o1"))

    def test_serve_is_idempotent_on_invalid_state(self):
        phase = self.phase
        self.assertIs(phase, serve_order(phase, 0, 8))
        self.assertIs(phase, serve_order(phase, 1, 8))
        self.assertIs(phase, serve_order(phase, -1, 8))

    def test_serve_from_inventory_closes_waiting_table(self):
        phase = enqueue_customer(self.phase, _customer(1))
        phase = enqueue_customer(phase, _customer(2))

        served = serve_from_inventory(phase, 0, 8)

        self.assertEqual("c2", served.tables[0].customer.id)
        self.assertEqual(1, served.customers_served)
        self.assertEqual((), served.customer_queue)

    def test_serve_from_inventory_ignores_table_in_kitchen(self):
        phase = send_order_to_kitchen(take_order(self.phase, 0), 0, "o1")
        self.assertIs(phase, serve_from_inventory(phase, 0, 8))

    def test_move_player(self):
        moved = move_player(self.phase, KITCHEN)
        self.assertEqual(KITCHEN, moved.player_location)
        self.assertIs(moved, move_player(moved, KITCHEN))
        self.assertIs(moved, move_player(moved, "patio"))


class TestPatience(unittest.TestCase):
    def test_four_tables_five_customers_scenario(self):
        phase = create_service_phase(120_000, 4)
        for n in range(5):
            phase = enqueue_customer(phase, _customer(n))
        self.assertEqual(4, len(tables_in_state(phase, CustomerWaiting)))
        self.assertEqual(1, len(phase.customer_queue))

        fourth = phase.tables[3]
        expiring = CustomerWaiting(replace(fourth.customer, patience_ms=0))
        phase = replace(phase, tables=phase.tables[:3] + (expiring,))

        phase = tick_service_phase(phase, 16)

        self.assertIsInstance(phase.tables[3], CustomerWaiting)
        self.assertEqual("c4", phase.tables[3].customer.id)
        self.assertEqual(1, phase.customers_lost)
        self.assertEqual(0, len(phase.customer_queue))

    def test_patience_never_goes_negative(self):
        phase = enqueue_customer(create_service_phase(120_000, 1), _customer(0, patience=100))
        phase = enqueue_customer(phase, _customer(1, patience=50_000))

        phase = tick_service_phase(phase, 10_000)

        self.assertEqual(1, phase.customers_lost)
        self.assertEqual("c1", phase.tables[0].customer.id)
        self.assertEqual(40_000, phase.tables[0].customer.patience_ms)
        self.assertEqual(50_000, phase.tables[0].customer.max_patience_ms)

    def test_queued_customers_lose_patience_and_leave(self):
        phase = enqueue_customer(create_service_phase(120_000, 1), _customer(0))
        phase = enqueue_customer(phase, _customer(1, patience=1_000))

        phase = tick_service_phase(phase, 1_000)

        self.assertEqual((), phase.customer_queue)
        self.assertEqual(1, phase.customers_lost)
        self.assertEqual(59_000, phase.tables[0].customer.patience_ms)

    def test_ready_to_serve_customer_keeps_patience(self):
        phase = enqueue_customer(create_service_phase(120_000, 1), _customer(0, patience=1_000))
        waiting = phase.tables[0]
        phase = replace(phase, tables=(ReadyToServe(waiting.customer, "o1"),))

        phase = tick_service_phase(phase, 5_000)

        self.assertIsInstance(phase.tables[0], ReadyToServe)
        self.assertEqual(1_000, phase.tables[0].customer.patience_ms)
        self.assertEqual(0, phase.customers_lost)

    def test_customer_conservation(self):
        phase = create_service_phase(120_000, 2)
        arrived = 0
        for n in range(6):
            phase = enqueue_customer(phase, _customer(n, patience=1_000 * (n + 1)))
            arrived += 1
        phase = serve_from_inventory(take_order(phase, 0), 0, 8)

        for _ in range(4):
            phase = tick_service_phase(phase, 1_500)
            self.assertEqual(
                arrived,
                phase.customers_served + phase.customers_lost + active_customer_count(phase),
            )
            for table in phase.tables:
                if not isinstance(table, EmptyTable):
                    self.assertGreaterEqual(table.customer.patience_ms, 0)


if __name__ == "__main__":
    unittest.main()
