"""
Value types shared by the extractors, the indexer and the SQLite store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Reserved item id meaning "no item"
SENTINEL_ITEM_ID = 0


@dataclass(frozen=True)
class Item:
    id: int
    name: str
    image_ref: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'label': self.name, 'image': self.image_ref}


@dataclass(frozen=True)
class Ingredient:
    item_id: int
    count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {'item': self.item_id, 'count': self.count}


@dataclass(frozen=True)
class Workstation:
    """A crafting station: either a known item or a free-text label"""

    item_id: Optional[int] = None
    label: Optional[str] = None

    def __post_init__(self):
        if (self.item_id is None) == (self.label is None):
            raise ValueError("Workstation needs exactly one of item_id or label")

    @classmethod
    def for_item(cls, item_id: int) -> 'Workstation':
        return cls(item_id=item_id)

    @classmethod
    def for_label(cls, label: str) -> 'Workstation':
        return cls(label=label)

    @property
    def is_resolved(self) -> bool:
        return self.item_id is not None

    def to_dict(self) -> Dict[str, Any]:
        # Export keeps the flat {item, other} shape with zero values for the unused side
        return {'item': self.item_id or 0, 'other': self.label or ''}


@dataclass(frozen=True)
class Recipe:
    workstations: Tuple[Workstation, ...]
    ingredients: Tuple[Ingredient, ...]
    product: Ingredient
    id: int = 0

    def __post_init__(self):
        if not self.workstations:
            raise ValueError("Recipe needs at least one workstation")

    def item_ids(self) -> List[int]:
        """Product first, then ingredients in table order"""
        return [self.product.item_id] + [ingredient.item_id for ingredient in self.ingredients]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'workstations': [ws.to_dict() for ws in self.workstations],
            'ingredients': [ingredient.to_dict() for ingredient in self.ingredients],
            'product': self.product.to_dict()
        }


@dataclass(frozen=True)
class Dataset:
    items: List[Item]
    recipes: List[Recipe]
    item_index: Dict[int, Item] = field(default_factory=dict)
    recipe_index: Dict[int, Recipe] = field(default_factory=dict)
    relations: Dict[int, List[int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Plain structure for the JSON export (mapping keys become strings)"""
        return {
            'items': [item.to_dict() for item in self.items],
            'recipes': [recipe.to_dict() for recipe in self.recipes],
            'itemindex': {str(item_id): item.to_dict() for item_id, item in self.item_index.items()},
            'recipeindex': {str(recipe_id): recipe.to_dict() for recipe_id, recipe in self.recipe_index.items()},
            'relations': {str(item_id): list(recipe_ids) for item_id, recipe_ids in self.relations.items()}
        }
