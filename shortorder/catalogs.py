"""Catalogs shared by the kitchen, the inventory and the simulation driver.

Loaded once at import time; each falls back to its built-in defaults when
the JSON override file is missing or invalid.
"""
from __future__ import annotations

from config import ITEMS_FILE, MENUS_FILE, RECIPES_FILE
from item_catalog import load_item_catalog
from menu_catalog import load_menu_catalog
from recipe_catalog import load_recipe_catalog

ITEMS = load_item_catalog(ITEMS_FILE)
RECIPES = load_recipe_catalog(RECIPES_FILE)
MENUS = load_menu_catalog(MENUS_FILE)
