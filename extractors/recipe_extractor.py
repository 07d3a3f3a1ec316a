#!/usr/bin/env python3
"""
Recipe Table Extractor for the Terraria Wiki

Extracts the recipes listed on one workstation's recipe sub-page. Each recipe
is a table record: a centered icon cell opens the record, the product cell
carries a rowspan telling how many ingredient rows follow, and every
ingredient row spans two physical lines.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from extractors.line_cursor import LineCursor
from extractors.markup import (ROWSPAN_PATTERN, TITLE_PATTERN, next_line, normalize_text, optional_count,
                               require_match)
from parse_errors import ParseError, UnresolvedReference
from recipe_models import SENTINEL_ITEM_ID, Ingredient, Recipe, Workstation

logger = logging.getLogger(__name__)

RECORD_MARKER = 'style="text-align:center;width:1%">'
# Lines without this are formatting lines inside a cell
CELL_MARKER = 'title'
# Zero-width position before a <tr> preceded by markup on the same line
ROW_START = re.compile(r'(?<=\S)(?=<tr[\s>])')


class Phase(Enum):
    RECORD_START = 'record start'
    PRODUCT_CELL = 'product cell'
    INGREDIENT_CELL = 'ingredient cell'
    DONE = 'done'


@dataclass
class PageResult:
    """Recipes read from one page plus the error that stopped it, if any"""
    page: Optional[str]
    recipes: List[Recipe] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def split_rows(raw: str) -> str:
    """Put every table row on its own line"""
    return ROW_START.sub('\n', raw)


class RecipeTableParser:
    """Parses the recipe table of one workstation sub-page"""

    def __init__(self, ids_by_name: Dict[str, int], workstations: Sequence[Workstation], strict: bool = True):
        self.ids_by_name = ids_by_name
        self.workstations = tuple(workstations)
        self.strict = strict

    def parse_page(self, raw: str, source: Optional[str] = None) -> PageResult:
        return self.parse(LineCursor.from_text(split_rows(raw), source))

    def parse(self, cursor: LineCursor) -> PageResult:
        """
        Run the record state machine until the page is exhausted

        The first parse error stops the page. Recipes completed before it are
        kept in the result.
        """
        result = PageResult(page=cursor.source)
        phase = Phase.RECORD_START
        product, rows, ingredients = None, 0, []

        try:
            while phase is not Phase.DONE:
                if phase is Phase.RECORD_START:
                    phase = Phase.PRODUCT_CELL if self._seek_record(cursor) else Phase.DONE

                elif phase is Phase.PRODUCT_CELL:
                    line = self._next_cell(cursor, 'product cell')
                    product = self._read_ingredient(line, cursor, 'product name (title attribute)')
                    rows = int(require_match(ROWSPAN_PATTERN, line, 'ingredient row count (rowspan attribute)', cursor))
                    ingredients = []
                    phase = Phase.INGREDIENT_CELL

                elif phase is Phase.INGREDIENT_CELL:
                    if len(ingredients) < rows:
                        # Icon line first, then the named cell
                        self._next_cell(cursor, 'ingredient icon cell')
                        line = self._next_cell(cursor, 'ingredient cell')
                        ingredients.append(self._read_ingredient(line, cursor, 'ingredient name (title attribute)'))
                    else:
                        result.recipes.append(Recipe(
                            workstations=self.workstations,
                            ingredients=tuple(ingredients),
                            product=product
                        ))
                        phase = Phase.RECORD_START

        except ParseError as e:
            logger.warning(f"Stopped parsing {cursor.source} after {len(result.recipes)} recipes: {e}")
            result.errors.append(e)

        return result

    def _seek_record(self, cursor: LineCursor) -> bool:
        while cursor.has_next():
            if RECORD_MARKER in cursor.advance():
                return True
        return False

    def _next_cell(self, cursor: LineCursor, description: str) -> str:
        line = next_line(cursor, description)
        if CELL_MARKER not in line:
            line = next_line(cursor, description)
        return line

    def _read_ingredient(self, line: str, cursor: LineCursor, description: str) -> Ingredient:
        name = normalize_text(require_match(TITLE_PATTERN, line, description, cursor))
        return Ingredient(item_id=self._resolve(name, cursor), count=optional_count(line, cursor))

    def _resolve(self, name: str, cursor: LineCursor) -> int:
        if name in self.ids_by_name:
            return self.ids_by_name[name]
        if self.strict:
            raise UnresolvedReference(name, cursor.source, cursor.line_number)

        logger.warning(f"No ID found for item: {name}, using placeholder {SENTINEL_ITEM_ID}")
        return SENTINEL_ITEM_ID
