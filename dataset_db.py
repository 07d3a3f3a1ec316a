"""
SQLite storage for the indexed Terraria dataset.
"""

import logging
import sqlite3
from typing import Dict, List

from recipe_indexer import build_dataset
from recipe_models import Dataset, Ingredient, Item, Recipe, Workstation

logger = logging.getLogger(__name__)


def init_database(db_path: str):
    """Initialize SQLite database with required tables"""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    # Create items table
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS items (
            id INTEGER PRIMARY KEY,
            label TEXT NOT NULL,
            image TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # Create recipes table
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS recipes (
            id INTEGER PRIMARY KEY,
            product_item_id INTEGER NOT NULL,
            product_count INTEGER NOT NULL DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # Create recipe workstations table (item_id or label is set)
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS recipe_workstations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            recipe_id INTEGER,
            position INTEGER,
            item_id INTEGER,
            label TEXT,
            FOREIGN KEY (recipe_id) REFERENCES recipes (id)
        )
    ''')

    # Create recipe ingredients table
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS recipe_ingredients (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            recipe_id INTEGER,
            position INTEGER,
            item_id INTEGER,
            count INTEGER,
            FOREIGN KEY (recipe_id) REFERENCES recipes (id)
        )
    ''')

    # Create indexes for faster lookups
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_label ON items(label)')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_recipe_product ON recipes(product_item_id)')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_workstation_recipe ON recipe_workstations(recipe_id)')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_ingredient_recipe ON recipe_ingredients(recipe_id)')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_ingredient_item ON recipe_ingredients(item_id)')

    conn.commit()
    conn.close()
    logger.info(f"Database initialized: {db_path}")


def save_dataset(db_path: str, dataset: Dataset):
    """Replace the stored dataset with this one in a single transaction"""
    init_database(db_path)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        for table in ('recipe_ingredients', 'recipe_workstations', 'recipes', 'items'):
            cursor.execute(f'DELETE FROM {table}')

        cursor.executemany('INSERT INTO items (id, label, image) VALUES (?, ?, ?)',
                           [(item.id, item.name, item.image_ref) for item in dataset.items])

        for recipe in dataset.recipes:
            cursor.execute('''
                INSERT INTO recipes (id, product_item_id, product_count)
                VALUES (?, ?, ?)
            ''', (recipe.id, recipe.product.item_id, recipe.product.count))

            cursor.executemany('''
                INSERT INTO recipe_workstations (recipe_id, position, item_id, label)
                VALUES (?, ?, ?, ?)
            ''', [(recipe.id, i, ws.item_id, ws.label) for i, ws in enumerate(recipe.workstations)])

            cursor.executemany('''
                INSERT INTO recipe_ingredients (recipe_id, position, item_id, count)
                VALUES (?, ?, ?, ?)
            ''', [(recipe.id, i, ing.item_id, ing.count) for i, ing in enumerate(recipe.ingredients)])

        conn.commit()
        logger.info(f"Saved {len(dataset.items)} items and {len(dataset.recipes)} recipes to {db_path}")
    except sqlite3.Error as e:
        conn.rollback()
        logger.error(f"Database error saving dataset: {e}")
        raise
    finally:
        conn.close()


def load_dataset(db_path: str) -> Dataset:
    """Read the stored items and recipes back and rebuild the indexes"""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute('SELECT id, label, image FROM items ORDER BY id')
        items_by_id = {row[0]: Item(id=row[0], name=row[1], image_ref=row[2] or '') for row in cursor.fetchall()}

        workstations: Dict[int, List[Workstation]] = {}
        cursor.execute('SELECT recipe_id, item_id, label FROM recipe_workstations ORDER BY recipe_id, position')
        for recipe_id, item_id, label in cursor.fetchall():
            ws = Workstation.for_item(item_id) if item_id is not None else Workstation.for_label(label)
            workstations.setdefault(recipe_id, []).append(ws)

        ingredients: Dict[int, List[Ingredient]] = {}
        cursor.execute('SELECT recipe_id, item_id, count FROM recipe_ingredients ORDER BY recipe_id, position')
        for recipe_id, item_id, count in cursor.fetchall():
            ingredients.setdefault(recipe_id, []).append(Ingredient(item_id=item_id, count=count))

        cursor.execute('SELECT id, product_item_id, product_count FROM recipes ORDER BY id')
        recipes = [
            Recipe(
                workstations=tuple(workstations.get(row[0], [])),
                ingredients=tuple(ingredients.get(row[0], [])),
                product=Ingredient(item_id=row[1], count=row[2])
            )
            for row in cursor.fetchall()
        ]
    finally:
        conn.close()

    # Stored ids are dense and ordered, so re-indexing reproduces them
    return build_dataset(recipes, items_by_id)


def dataset_summary(db_path: str) -> Dict[str, int]:
    """Row counts per table"""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    summary = {}
    try:
        for table in ('items', 'recipes', 'recipe_workstations', 'recipe_ingredients'):
            cursor.execute(f'SELECT COUNT(*) FROM {table}')
            summary[table] = cursor.fetchone()[0]
    finally:
        conn.close()
    return summary
