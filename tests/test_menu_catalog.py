from __future__ import annotations

import json
from pathlib import Path

from item_catalog import load_item_catalog
from menu_catalog import load_menu_catalog, menu_economics, next_unlock_count, pick_dish, sell_price, unlocked_dishes
from recipe_catalog import load_recipe_catalog


def _menus():
    return load_menu_catalog(Path("does_not_exist.json"))


def test_default_menus_cover_three_restaurants():
    menus = _menus()
    assert set(menus) == {"burger", "bbq", "sushi"}
    assert menus["burger"]["dishes"][0] == {"dish": "classic_burger", "sell_price": 8}


def test_every_menu_dish_is_a_catalog_dish():
    items = load_item_catalog(Path("does_not_exist.json"))
    for menu in _menus().values():
        for entry in menu["dishes"]:
            assert items[entry["dish"]]["category"] == "dish"


def test_unlocked_dishes_clamps_to_menu_size():
    burger = _menus()["burger"]
    assert [d["dish"] for d in unlocked_dishes(burger, 0)] == ["classic_burger"]
    assert len(unlocked_dishes(burger, 2)) == 2
    assert len(unlocked_dishes(burger, 99)) == len(burger["dishes"])


def test_sell_price_of_unknown_dish_is_zero():
    sushi = _menus()["sushi"]
    assert sell_price(sushi, "miso_soup") == 5
    assert sell_price(sushi, "classic_burger") == 0


def test_pick_dish_spans_unlocked_range():
    bbq = _menus()["bbq"]
    assert pick_dish(bbq, 0.0, 2)["dish"] == "smoked_ribs_plate"
    assert pick_dish(bbq, 0.99, 2)["dish"] == "smoked_chicken_plate"
    assert pick_dish(bbq, 1.0)["dish"] == "bbq_burger"


def test_next_unlock_count_needs_a_clean_profitable_day():
    burger = _menus()["burger"]
    assert next_unlock_count(0, 10, 1, burger) == 2
    assert next_unlock_count(1, 10, 1, burger) == 1
    assert next_unlock_count(0, 0, 1, burger) == 1
    assert next_unlock_count(0, 10, len(burger["dishes"]), burger) == len(burger["dishes"])


def test_load_menu_catalog_filters_invalid_entries(tmp_path):
    path = tmp_path / "menus.json"
    path.write_text(
        json.dumps(
            {
                "tacos": {"display_name": "Taco Stand", "dishes": [{"dish": "taco", "sell_price": 4}]},
                "free": {"display_name": "Free Food", "dishes": [{"dish": "taco", "sell_price": 0}]},
                "empty": {"display_name": "Empty", "dishes": []},
            }
        )
    )

    menus = load_menu_catalog(path)

    assert list(menus) == ["tacos"]
    assert menus["tacos"]["display_name"] == "Taco Stand"


def test_load_menu_catalog_falls_back_on_bad_json(tmp_path):
    path = tmp_path / "menus.json"
    path.write_text("[")
    assert "burger" in load_menu_catalog(path)


def test_menu_economics_follow_unlock_order_and_stay_profitable():
    menu = _menus()["burger"]
    items = load_item_catalog(Path("does_not_exist.json"))
    recipes = load_recipe_catalog(Path("does_not_exist.json"))

    economics = menu_economics(menu, recipes, items)

    assert [entry.dish_id for entry in economics] == [entry["dish"] for entry in menu["dishes"]]
    assert economics[0].sell_price == 8
    assert economics[0].raw_cost == 5
    assert all(entry.profit > 0 for entry in economics)


def test_menu_economics_skips_dishes_without_recipe():
    menu = {"display_name": "Test", "dishes": [{"dish": "mystery_stew", "sell_price": 4}]}
    items = load_item_catalog(Path("does_not_exist.json"))
    recipes = load_recipe_catalog(Path("does_not_exist.json"))

    assert menu_economics(menu, recipes, items) == []
