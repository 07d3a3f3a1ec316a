#!/usr/bin/env python3
"""
Item Catalog Extractor for the Terraria Wiki

Extracts the global item table (id, name, image) from the paginated
Item_IDs listing pages.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from extractors.line_cursor import LineCursor
from extractors.markup import (INTEGER_PATTERN, SRC_PATTERN, TITLE_PATTERN, next_line, normalize_text,
                               require_match)
from recipe_models import Item

logger = logging.getLogger(__name__)

# Every item row of the listing opens with this span
CATALOG_MARKER = '<span style="white-space:nowrap">'


def parse_item_listing(cursor: LineCursor) -> List[Item]:
    """
    Parse one Item_IDs listing page

    Args:
        cursor: Lines of the listing page

    Returns:
        Items in page order

    Raises:
        PatternNotFound: if a marker line lacks its name or image, or the
            following line carries no numeric id
    """
    items = []

    while cursor.has_next():
        # Skip everything that is not an item row
        line = cursor.advance()
        if CATALOG_MARKER not in line:
            continue

        name = normalize_text(require_match(TITLE_PATTERN, line, 'item name (title attribute)', cursor))
        image = normalize_text(require_match(SRC_PATTERN, line, 'item image (src attribute)', cursor))

        # The numeric id sits on the next line
        id_line = next_line(cursor, 'item id')
        item_id = int(require_match(INTEGER_PATTERN, id_line, 'item id', cursor))

        items.append(Item(id=item_id, name=name, image_ref=image))

    logger.debug(f"Parsed {len(items)} items from {cursor.source}")
    return items


def parse_item_pages(pages: Iterable[LineCursor]) -> List[Item]:
    """Parse every listing page, keeping encounter order and duplicates"""
    items = []
    for page in pages:
        items.extend(parse_item_listing(page))
    return items


def build_lookup_tables(items: Iterable[Item]) -> Tuple[Dict[int, Item], Dict[str, int]]:
    """Index the catalog by id and by display name (later entries win)"""
    items_by_id, ids_by_name = {}, {}
    for item in items:
        items_by_id[item.id] = item
        ids_by_name[item.name] = item.id
    return items_by_id, ids_by_name
