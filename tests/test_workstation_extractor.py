import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from extractors.line_cursor import LineCursor
from extractors.workstation_extractor import WorkstationDirectoryParser
from parse_errors import StructuralMismatch
from recipe_models import Workstation
from wiki_pages import overview

IDS = {"Work Bench": 36, "Iron Anvil": 35, "Lead Anvil": 716}


def parse(page):
    return WorkstationDirectoryParser(IDS).parse(LineCursor.from_text(page, "/Recipes"))


def test_groups_are_paired_with_links_in_order():
    page = overview(
        [["By Hand"], ["Work Bench"], ["Iron Anvil", "Lead Anvil"]],
        ["/Recipes/By_Hand", "/Recipes/Work_Bench", "/Recipes/Iron_Anvil"],
    )

    assert parse(page) == [
        ((Workstation.for_label("By Hand"),), "/Recipes/By_Hand"),
        ((Workstation.for_item(36),), "/Recipes/Work_Bench"),
        ((Workstation.for_item(35), Workstation.for_item(716)), "/Recipes/Iron_Anvil"),
    ]


def test_unknown_label_is_kept_verbatim():
    page = overview([["Placed Bottle "]], ["/Recipes/Placed_Bottle"])
    (group, _), = parse(page)

    assert group == (Workstation.for_label("Placed Bottle"),)
    assert not group[0].is_resolved


def test_noise_before_listing_is_skipped():
    page = "<p>intro</p>\n<p>more intro</p>\n" + overview([["Work Bench"]], ["/Recipes/Work_Bench"])
    assert parse(page) == [((Workstation.for_item(36),), "/Recipes/Work_Bench")]


def test_missing_link_is_structural_mismatch():
    page = overview([["By Hand"], ["Work Bench"]], ["/Recipes/By_Hand"])

    with pytest.raises(StructuralMismatch) as err:
        parse(page)
    assert (err.value.expected, err.value.found) == (2, 1)
    assert err.value.page == "/Recipes"


def test_extra_link_is_structural_mismatch():
    page = overview([["By Hand"]], ["/Recipes/By_Hand", "/Recipes/Work_Bench"])

    with pytest.raises(StructuralMismatch):
        parse(page)


def test_table_of_contents_lines_after_listing_are_not_groups():
    page = overview([["By Hand"]], ["/Recipes/By_Hand"])
    page += '\n<li class="toclevel-1 tocsection-9"><span class="toctext">Late Entry</span></li>'

    assert len(parse(page)) == 1


def test_resolve_prefers_catalog_item():
    parser = WorkstationDirectoryParser(IDS)

    assert parser.resolve("Work Bench") == Workstation.for_item(36)
    assert parser.resolve("By Hand") == Workstation.for_label("By Hand")
