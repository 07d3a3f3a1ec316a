import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from recipe_indexer import assign_recipe_ids, build_dataset
from recipe_models import SENTINEL_ITEM_ID, Ingredient, Item, Recipe, Workstation

CATALOG = {
    1: Item(1, "Wood", "img/Wood.png"),
    2: Item(2, "Torch", "img/Torch.png"),
    3: Item(3, "Gel", "img/Gel.png"),
    4: Item(4, "Work Bench", "img/Work_Bench.png"),
    5: Item(5, "Platinum Coin", "img/Platinum_Coin.png"),
}
BY_HAND = (Workstation.for_label("By Hand"),)
WORK_BENCH = (Workstation.for_item(4),)


def recipe(product, *ingredients, workstations=BY_HAND):
    return Recipe(workstations=workstations,
                  ingredients=tuple(Ingredient(i) for i in ingredients),
                  product=Ingredient(product))


def test_torch_scenario():
    dataset = build_dataset([recipe(2, 1, 3)], CATALOG)

    assert dataset.relations == {1: [1], 2: [1], 3: [1]}
    assert dataset.recipe_index[1].product == Ingredient(2, 1)
    assert dataset.items == [CATALOG[1], CATALOG[2], CATALOG[3]]


def test_recipe_ids_are_dense_and_follow_input_order():
    recipes = [recipe(2, 1, 3), recipe(4, 1), recipe(2, 3)]
    dataset = build_dataset(recipes, CATALOG)

    assert [r.id for r in dataset.recipes] == [1, 2, 3]
    assert sorted(dataset.recipe_index) == [1, 2, 3]
    assert dataset.recipe_index[2].product.item_id == 4
    # Input recipes are left untouched
    assert [r.id for r in recipes] == [0, 0, 0]


def test_every_reference_is_indexed_and_related():
    dataset = build_dataset([recipe(2, 1, 3), recipe(4, 1, workstations=WORK_BENCH)], CATALOG)

    for r in dataset.recipes:
        assert r.product.item_id in dataset.item_index
        assert r.id in dataset.relations[r.product.item_id]
        for ingredient in r.ingredients:
            assert r.id in dataset.relations[ingredient.item_id]
    assert dataset.relations[1] == [1, 2]


def test_dangling_items_and_workstations_are_not_indexed():
    dataset = build_dataset([recipe(2, 1, 3, workstations=WORK_BENCH)], CATALOG)

    assert 5 not in dataset.item_index
    # A workstation item is not a product or ingredient
    assert 4 not in dataset.item_index


def test_sentinel_is_dropped():
    dataset = build_dataset([recipe(SENTINEL_ITEM_ID, 1), recipe(2, SENTINEL_ITEM_ID)], CATALOG)

    assert SENTINEL_ITEM_ID not in dataset.item_index
    assert SENTINEL_ITEM_ID not in dataset.relations
    assert dataset.relations == {1: [1], 2: [2]}


def test_self_referencing_recipe_relates_twice():
    dataset = build_dataset([recipe(1, 1)], CATALOG)
    assert dataset.relations[1] == [1, 1]


def test_indexing_is_idempotent():
    recipes = [recipe(2, 1, 3), recipe(4, 1)]
    first = build_dataset(recipes, CATALOG)
    second = build_dataset(recipes, CATALOG)
    again = build_dataset(first.recipes, CATALOG)

    assert first == second
    assert first == again


def test_item_missing_from_catalog_gets_placeholder():
    dataset = build_dataset([recipe(2, 99)], CATALOG)
    assert dataset.item_index[99] == Item(99, '', '')


def test_assign_ids_on_empty_list():
    assert assign_recipe_ids([]) == []
    assert build_dataset([], CATALOG).items == []
