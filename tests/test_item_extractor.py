import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from extractors.item_extractor import build_lookup_tables, parse_item_listing, parse_item_pages
from extractors.line_cursor import LineCursor
from parse_errors import PatternNotFound
from recipe_models import Item
from wiki_pages import item_listing


def test_parse_listing_reads_name_image_and_next_line_id():
    page = item_listing(("Wood", 9), ("Gel", 23))
    items = parse_item_listing(LineCursor.from_text(page, "/Item_IDs_Part1"))

    assert items == [
        Item(id=9, name="Wood", image_ref="https://images.example/Wood.png?version=abc"),
        Item(id=23, name="Gel", image_ref="https://images.example/Gel.png?version=abc"),
    ]


def test_parse_listing_normalizes_apostrophes():
    page = item_listing(("Angler&#39;s Hat", 2367, "https://images.example/Angler%27s_Hat.png"))
    item, = parse_item_listing(LineCursor.from_text(page))

    assert item.name == "Angler's Hat"
    assert item.image_ref == "https://images.example/Angler's_Hat.png"


def test_parse_pages_keeps_order_and_duplicates():
    pages = [
        LineCursor.from_text(item_listing(("Wood", 9), ("Torch", 8)), "/Item_IDs_Part1"),
        LineCursor.from_text(item_listing(("Wood", 9)), "/Item_IDs_Part2"),
    ]
    assert [item.id for item in parse_item_pages(pages)] == [9, 8, 9]


def test_missing_id_line_is_pattern_not_found():
    page = '\n'.join(item_listing(("Wood", 9)).splitlines()[:4] + ['</td><td>', '</td></tr>'])

    with pytest.raises(PatternNotFound) as err:
        parse_item_listing(LineCursor.from_text(page, "/Item_IDs_Part1"))
    assert err.value.description == 'item id'
    assert err.value.page == "/Item_IDs_Part1"
    assert err.value.line_number == 5


def test_marker_on_last_line_is_pattern_not_found():
    marker = item_listing(("Wood", 9)).splitlines()[3]
    with pytest.raises(PatternNotFound) as err:
        parse_item_listing(LineCursor.from_text(marker))
    assert err.value.line == ''


def test_marker_without_image_is_pattern_not_found():
    line = '<td><span style="white-space:nowrap"><a href="/Wood" title="Wood">Wood</a></span>'
    with pytest.raises(PatternNotFound) as err:
        parse_item_listing(LineCursor.from_text(line + '\n</td><td>9'))
    assert 'src' in err.value.description
    assert err.value.line == line


def test_lookup_tables():
    items = [Item(9, "Wood", "w.png"), Item(23, "Gel", "g.png")]
    items_by_id, ids_by_name = build_lookup_tables(items)

    assert items_by_id[23].name == "Gel"
    assert ids_by_name == {"Wood": 9, "Gel": 23}


def test_unicode_line_separator_inside_marker_line():
    page = item_listing(("Wood", 9)).replace('<img alt', '<img \u2028alt')
    items = parse_item_listing(LineCursor.from_text(page))

    assert [item.id for item in items] == [9]
    assert items[0].name == "Wood"
