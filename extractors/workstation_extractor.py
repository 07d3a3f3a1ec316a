#!/usr/bin/env python3
"""
Workstation Directory Extractor for the Terraria Wiki

Reads the Recipes overview page: the table of contents lists the workstation
groups, the body links each group's recipe sub-page in the same order.
"""

import logging
import re
from enum import Enum
from typing import Dict, List, Tuple

from extractors.line_cursor import LineCursor
from extractors.markup import TOC_LABEL_PATTERN, require_match
from parse_errors import StructuralMismatch
from recipe_models import Workstation

logger = logging.getLogger(__name__)

TOC_ENTRY_MARKER = '<li class="toclevel-1 tocsection-'
DETAIL_LINK_MARKER = '<a href="/Recipes/'
DETAIL_LINK_PATTERN = re.compile(r'<a href="(/Recipes/[^"]+)"')

WorkstationGroup = Tuple[Workstation, ...]


class Phase(Enum):
    LISTING = 'listing'
    DETAIL = 'detail'


class WorkstationDirectoryParser:
    """Pairs table-of-contents workstation groups with their sub-page links"""

    def __init__(self, ids_by_name: Dict[str, int]):
        self.ids_by_name = ids_by_name

    def resolve(self, label: str) -> Workstation:
        item_id = self.ids_by_name.get(label)
        if item_id is None:
            logger.debug(f"Workstation '{label}' is not an item, keeping label")
            return Workstation.for_label(label)
        return Workstation.for_item(item_id)

    def read_groups(self, cursor: LineCursor) -> List[WorkstationGroup]:
        """
        Listing phase: one group per table-of-contents line

        Leading lines before the first entry are noise. The phase ends on the
        first non-entry line after at least one group was read; that line is
        consumed.
        """
        groups = []
        phase = Phase.LISTING

        while phase is Phase.LISTING and cursor.has_next():
            line = cursor.advance()
            if TOC_ENTRY_MARKER not in line:
                if groups:
                    phase = Phase.DETAIL
                continue

            group = tuple(self.resolve(label.strip()) for label in TOC_LABEL_PATTERN.findall(line))
            if not group:
                logger.warning(f"Table of contents entry without workstation labels: {line.strip()}")
                continue
            groups.append(group)

        logger.debug(f"Read {len(groups)} workstation groups from {cursor.source}")
        return groups

    def read_links(self, cursor: LineCursor) -> List[str]:
        """Detail phase: every recipe sub-page link in the rest of the page"""
        links = []
        while cursor.has_next():
            line = cursor.advance()
            if DETAIL_LINK_MARKER not in line:
                continue
            links.append(require_match(DETAIL_LINK_PATTERN, line, 'recipe sub-page link', cursor).strip())
        return links

    def parse(self, cursor: LineCursor) -> List[Tuple[WorkstationGroup, str]]:
        """
        Parse the overview page into (workstation group, sub-page URL) pairs

        Raises:
            StructuralMismatch: if the directory and the detail links differ in count
        """
        groups = self.read_groups(cursor)
        links = self.read_links(cursor)

        if len(groups) != len(links):
            raise StructuralMismatch('workstation groups vs recipe sub-page links',
                                     expected=len(groups), found=len(links), page=cursor.source)

        return list(zip(groups, links))
