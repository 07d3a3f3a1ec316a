"""
Cross-reference indexer: numbers the recipes and builds the item/recipe graph.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Sequence

from recipe_models import SENTINEL_ITEM_ID, Dataset, Item, Recipe

logger = logging.getLogger(__name__)


def assign_recipe_ids(recipes: Sequence[Recipe]) -> List[Recipe]:
    """Dense 1-based ids in input order"""
    return [replace(recipe, id=position + 1) for position, recipe in enumerate(recipes)]


def build_dataset(recipes: Sequence[Recipe], items_by_id: Dict[int, Item]) -> Dataset:
    """
    Index the recipes against the item catalog

    Args:
        recipes: All recipes in workstation then page order
        items_by_id: Global item catalog

    Returns:
        Dataset holding only items referenced directly by some recipe
    """
    numbered = assign_recipe_ids(recipes)

    item_index: Dict[int, Item] = {}
    recipe_index: Dict[int, Recipe] = {}
    relations: Dict[int, List[int]] = {}

    for recipe in numbered:
        recipe_index[recipe.id] = recipe
        for item_id in recipe.item_ids():
            if item_id not in item_index:
                item_index[item_id] = _catalog_item(item_id, items_by_id)
            relations.setdefault(item_id, []).append(recipe.id)

    # Drop all dangling placeholder references
    item_index.pop(SENTINEL_ITEM_ID, None)
    relations.pop(SENTINEL_ITEM_ID, None)

    items = [item_index[item_id] for item_id in sorted(item_index)]
    logger.info(f"Indexed {len(numbered)} recipes over {len(items)} items")

    return Dataset(items=items, recipes=numbered, item_index=item_index,
                   recipe_index=recipe_index, relations=relations)


def _catalog_item(item_id: int, items_by_id: Dict[int, Item]) -> Item:
    item = items_by_id.get(item_id)
    if item is None:
        if item_id != SENTINEL_ITEM_ID:
            logger.warning(f"Item {item_id} is referenced by a recipe but missing from the catalog")
        item = Item(id=item_id, name='', image_ref='')
    return item
