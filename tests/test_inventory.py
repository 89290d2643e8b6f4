"""Tests for the perishable inventory multiset."""
from __future__ import annotations

import unittest

from shortorder.catalogs import ITEMS
from shortorder.inventory import (
    Inventory,
    add_item,
    add_items,
    count_item,
    create_inventory,
    execute_recipe_step,
    has_ingredients_for,
    item_counts,
    item_freshness,
    remove_expired,
    remove_item_set,
    remove_items,
)


class TestInventoryBasics(unittest.TestCase):
    def test_create_inventory_is_empty(self):
        self.assertEqual((), create_inventory().items)

    def test_add_and_count(self):
        inv = add_items(create_inventory(), "bun", 3, created_at=0)
        inv = add_item(inv, "cheese", created_at=5)
        self.assertEqual(3, count_item(inv, "bun"))
        self.assertEqual({"bun": 3, "cheese": 1}, item_counts(inv))

    def test_add_items_ignores_non_positive_quantity(self):
        inv = add_items(create_inventory(), "bun", -2, created_at=0)
        self.assertEqual(0, count_item(inv, "bun"))

    def test_add_does_not_mutate_original(self):
        inv = create_inventory()
        add_item(inv, "bun", created_at=0)
        self.assertEqual((), inv.items)


class TestRemoval(unittest.TestCase):
    def test_remove_takes_oldest_first(self):
        inv = Inventory()
        inv = add_item(inv, "bun", created_at=300)
        inv = add_item(inv, "bun", created_at=100)
        inv = add_item(inv, "bun", created_at=200)

        remaining = remove_items(inv, "bun", 2)

        self.assertIsNotNone(remaining)
        self.assertEqual([300], [unit.created_at for unit in remaining.items])

    def test_remove_short_returns_none(self):
        inv = add_items(create_inventory(), "bun", 1, created_at=0)
        self.assertIsNone(remove_items(inv, "bun", 2))
        self.assertEqual(1, count_item(inv, "bun"))

    def test_remove_item_set_is_all_or_nothing(self):
        inv = add_items(create_inventory(), "bun", 2, created_at=0)
        inv = add_items(inv, "cheese", 1, created_at=0)

        self.assertIsNone(remove_item_set(inv, [("bun", 1), ("cheese", 2)]))
        remaining = remove_item_set(inv, [("bun", 1), ("cheese", 1)])
        self.assertEqual({"bun": 1}, item_counts(remaining))


class TestShelfLife(unittest.TestCase):
    def test_raw_items_never_expire(self):
        inv = add_items(create_inventory(), "bun", 2, created_at=0)
        self.assertIs(inv, remove_expired(inv, now_ms=10**9))

    def test_prepped_items_expire_after_shelf_life(self):
        shelf = ITEMS["grilled_patty"]["shelf_life_ms"]
        inv = add_item(create_inventory(), "grilled_patty", created_at=1_000)
        inv = add_item(inv, "bun", created_at=1_000)

        self.assertIs(inv, remove_expired(inv, now_ms=1_000 + shelf - 1))
        expired = remove_expired(inv, now_ms=1_000 + shelf)
        self.assertEqual({"bun": 1}, item_counts(expired))

    def test_freshness_reports_stalest_unit(self):
        shelf = ITEMS["grilled_patty"]["shelf_life_ms"]
        inv = add_item(create_inventory(), "grilled_patty", created_at=0)
        inv = add_item(inv, "grilled_patty", created_at=shelf // 2)
        inv = add_item(inv, "bun", created_at=0)

        freshness = item_freshness(inv, now_ms=shelf // 2)

        self.assertAlmostEqual(0.5, freshness["grilled_patty"], places=2)
        self.assertEqual(1.0, freshness["bun"])


class TestRecipeSteps(unittest.TestCase):
    def test_has_ingredients_for(self):
        inv = add_item(create_inventory(), "ground_beef", created_at=0)
        self.assertTrue(has_ingredients_for(inv, "beef_patty"))
        self.assertFalse(has_ingredients_for(inv, "sliced_tomato"))
        self.assertFalse(has_ingredients_for(inv, "not_a_step"))

    def test_execute_recipe_step_converts_inputs(self):
        inv = add_item(create_inventory(), "ground_beef", created_at=0)
        result = execute_recipe_step(inv, "beef_patty", now_ms=500)

        self.assertEqual({"beef_patty": 1}, item_counts(result))
        self.assertEqual(500, result.items[0].created_at)

    def test_execute_recipe_step_without_inputs_fails(self):
        self.assertIsNone(execute_recipe_step(create_inventory(), "beef_patty", now_ms=0))

    def test_execute_assembly_step_makes_dish(self):
        inv = create_inventory()
        for item_id in ("bun", "grilled_patty", "shredded_lettuce", "sliced_tomato"):
            inv = add_item(inv, item_id, created_at=0)
        result = execute_recipe_step(inv, "classic_burger", now_ms=0)
        self.assertEqual({"classic_burger": 1}, item_counts(result))


if __name__ == "__main__":
    unittest.main()
