import json
import tempfile
import unittest
from pathlib import Path

from config import CUTTING_BOARD, OVEN, RAW, STOVE
from item_catalog import load_item_catalog
from recipe_catalog import (
    ASSEMBLE,
    COOK,
    PREP,
    dish_economics,
    flatten_recipe_chain,
    load_recipe_catalog,
    resolve_recipe_chain,
    total_raw_ingredients,
    total_recipe_time,
)


class RecipeCatalogTests(unittest.TestCase):
    def test_default_catalog_covers_every_dish_and_step(self):
        catalog = load_recipe_catalog(Path("does_not_exist.json"))
        items = load_item_catalog(Path("does_not_exist.json"))

        self.assertIn("classic_burger", catalog)
        self.assertIn("grilled_patty", catalog)
        for key, recipe in catalog.items():
            self.assertIn(key, items, f"{key} has no item definition")
            for entry in recipe["inputs"]:
                self.assertIn(entry["item"], items, f"{key} uses unknown input {entry['item']}")

    def test_methods_map_to_zones(self):
        catalog = load_recipe_catalog(Path("does_not_exist.json"))
        for recipe in catalog.values():
            if recipe["method"] == PREP:
                self.assertEqual(CUTTING_BOARD, recipe["zone"])
            elif recipe["method"] == COOK:
                self.assertIn(recipe["zone"], (STOVE, OVEN))
            else:
                self.assertEqual(ASSEMBLE, recipe["method"])
                self.assertEqual(0, recipe["time_ms"])

    def test_catalog_is_ordered_prep_cook_assemble(self):
        catalog = load_recipe_catalog(Path("does_not_exist.json"))
        methods = [recipe["method"] for recipe in catalog.values()]
        self.assertEqual(sorted(methods, key=[PREP, COOK, ASSEMBLE].index), methods)

    def test_filters_invalid_entries(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text(
                json.dumps(
                    {
                        "sliced_onion": {
                            "display_name": "Sliced Onion",
                            "inputs": [{"item": "onion", "quantity": 1}],
                            "method": "prep",
                            "time_ms": 2000,
                            "zone": "cutting_board",
                        },
                        "wrong_zone": {
                            "display_name": "Wrong Zone",
                            "inputs": [{"item": "onion"}],
                            "method": "prep",
                            "time_ms": 2000,
                            "zone": "oven",
                        },
                        "no_time": {
                            "display_name": "No Time",
                            "inputs": [{"item": "onion"}],
                            "method": "cook",
                            "time_ms": 0,
                            "zone": "stove",
                        },
                        "self_loop": {
                            "display_name": "Loop",
                            "inputs": [{"item": "self_loop"}],
                            "method": "assemble",
                        },
                        "Bad Key": {
                            "display_name": "Bad",
                            "inputs": [{"item": "onion"}],
                            "method": "assemble",
                        },
                    }
                )
            )
            catalog = load_recipe_catalog(path)

        self.assertEqual(["sliced_onion"], list(catalog))
        self.assertEqual([{"item": "onion", "quantity": 1}], catalog["sliced_onion"]["inputs"])

    def test_duplicate_inputs_are_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text(
                json.dumps(
                    {
                        "double": {
                            "display_name": "Double",
                            "inputs": [{"item": "bun"}, {"item": "bun"}],
                            "method": "assemble",
                        }
                    }
                )
            )
            catalog = load_recipe_catalog(path)

        self.assertNotIn("double", catalog)
        self.assertIn("classic_burger", catalog)

    def test_malformed_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text("{not json")
            catalog = load_recipe_catalog(path)

        self.assertIn("classic_burger", catalog)


class RecipeChainTests(unittest.TestCase):
    def setUp(self):
        self.recipes = load_recipe_catalog(Path("does_not_exist.json"))
        self.items = load_item_catalog(Path("does_not_exist.json"))

    def test_raw_item_has_no_chain(self):
        self.assertIsNone(resolve_recipe_chain("bun", self.recipes))

    def test_classic_burger_chain(self):
        chain = resolve_recipe_chain("classic_burger", self.recipes)
        self.assertIsNotNone(chain)
        steps = flatten_recipe_chain(chain)

        self.assertEqual("classic_burger", steps[-1])
        self.assertLess(steps.index("beef_patty"), steps.index("grilled_patty"))
        self.assertIn("shredded_lettuce", steps)
        self.assertIn("sliced_tomato", steps)
        self.assertNotIn("bun", steps)

    def test_total_raw_ingredients_reach_the_leaves(self):
        chain = resolve_recipe_chain("classic_burger", self.recipes)
        totals = total_raw_ingredients(chain, self.recipes, self.items)

        self.assertEqual({"bun": 1, "ground_beef": 1, "lettuce": 1, "tomato": 1}, totals)
        for item_id in totals:
            self.assertEqual(RAW, self.items[item_id]["category"])

    def test_total_recipe_time_sums_every_step(self):
        chain = resolve_recipe_chain("pulled_pork_sandwich", self.recipes)
        expected = sum(self.recipes[step]["time_ms"] for step in flatten_recipe_chain(chain))
        self.assertEqual(expected, total_recipe_time(chain, self.recipes))

    def test_every_dish_resolves_to_raw_ingredients(self):
        for key, item in self.items.items():
            if item["category"] != "dish":
                continue
            chain = resolve_recipe_chain(key, self.recipes)
            self.assertIsNotNone(chain, key)
            self.assertTrue(total_raw_ingredients(chain, self.recipes, self.items), key)

    def test_dish_economics_prices_one_portion(self):
        economics = dish_economics("classic_burger", 8, self.recipes, self.items)

        self.assertEqual(5, economics.raw_cost)
        self.assertEqual(3, economics.profit)
        self.assertEqual((("bun", 1), ("ground_beef", 1), ("lettuce", 1), ("tomato", 1)), economics.raw_ingredients)
        self.assertEqual(12_000, economics.prep_time_ms)

    def test_dish_economics_without_recipe(self):
        self.assertIsNone(dish_economics("bun", 1, self.recipes, self.items))


if __name__ == "__main__":
    unittest.main()
