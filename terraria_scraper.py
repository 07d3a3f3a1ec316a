#!/usr/bin/env python3
"""
Terraria Wiki Recipe Scraper

Scrapes the item catalog and every workstation's recipe table from the
Terraria wiki, cross-references them into an item/recipe graph and stores
the result in a SQLite database.
"""

import argparse
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from dataset_db import save_dataset
from extractors.item_extractor import build_lookup_tables, parse_item_listing
from extractors.line_cursor import LineCursor
from extractors.recipe_extractor import RecipeTableParser
from extractors.workstation_extractor import WorkstationDirectoryParser
from parse_errors import ParseError, StructuralMismatch
from recipe_indexer import build_dataset
from recipe_models import Dataset, Item, Recipe

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

ITEM_LISTING_PATH = "/Item_IDs_Part{page}"
RECIPES_PATH = "/Recipes"


@dataclass
class ScrapeReport:
    """Outcome of one run: the dataset plus every page that failed to parse"""
    dataset: Dataset
    errors: List[ParseError] = field(default_factory=list)
    skipped_pages: List[str] = field(default_factory=list)


class TerrariaWikiScraper:
    """Scraper for Terraria wiki recipe data"""

    def __init__(self, base_url: str = "http://terraria.gamepedia.com", db_path: str = "terraria.db",
                 image_dir: Optional[str] = "img", delay: float = 0.5, workers: int = 4,
                 timeout: float = 30.0, item_pages: int = 13, strict_names: bool = True,
                 fail_fast: bool = False):
        self.base_url = base_url.rstrip('/')
        self.db_path = db_path
        self.image_dir = image_dir
        self.delay = delay
        self.workers = max(1, workers)
        self.timeout = timeout
        self.item_pages = item_pages
        self.strict_names = strict_names
        self.fail_fast = fail_fast

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'TerrariaRecipeScraper/1.0 (https://github.com/user/terraria-recipe-scraper)'
        })
        retries = Retry(total=3, backoff_factor=1.0, status_forcelist=[429, 500, 502, 503, 504])
        adapter = HTTPAdapter(max_retries=retries)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    def get_page_html(self, path: str) -> Optional[str]:
        """
        Get the rendered HTML of a wiki page

        Args:
            path: Page path relative to the wiki root (e.g. "/Recipes")

        Returns:
            Page HTML or None if error
        """
        try:
            response = self.session.get(urljoin(self.base_url + '/', path.lstrip('/')), timeout=self.timeout)
            response.raise_for_status()
            return response.text

        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching {path}: {e}")
            return None

        finally:
            # Rate limiting
            if self.delay > 0:
                time.sleep(self.delay)

    def fetch_pages(self, paths: Sequence[str]) -> List[Optional[str]]:
        """Fetch pages with a bounded worker pool, results in input order"""
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(self.get_page_html, paths))

    def list_items(self, report: ScrapeReport) -> List[Item]:
        """Retrieve all known items from the Item_IDs listing pages"""
        items = []
        for page in range(1, self.item_pages + 1):
            path = ITEM_LISTING_PATH.format(page=page)
            logger.debug(f"Parsing item listing page {page}/{self.item_pages}")

            html = self.get_page_html(path)
            if html is None:
                logger.warning(f"Failed to get item listing: {path}")
                report.skipped_pages.append(path)
                continue

            try:
                items.extend(parse_item_listing(LineCursor.from_text(html, path)))
            except ParseError as e:
                logger.warning(f"Skipping item listing {path}: {e}")
                report.errors.append(e)
                if self.fail_fast:
                    raise

        logger.info(f"Retrieved {len(items)} items")
        return items

    def list_recipes(self, ids_by_name: Dict[str, int], report: ScrapeReport) -> List[Recipe]:
        """
        Retrieve the recipes of every workstation listed on the Recipes page

        Args:
            ids_by_name: Item name to id table
            report: Collects page errors and skipped pages

        Returns:
            Recipes in workstation then page order

        Raises:
            StructuralMismatch: if the directory and its detail links disagree
            ParseError: the first page error when fail_fast is set
        """
        logger.debug("Parsing workstation listing")
        html = self.get_page_html(RECIPES_PATH)
        if html is None:
            logger.error("Failed to get the workstation listing, no recipes scraped")
            report.skipped_pages.append(RECIPES_PATH)
            return []

        directory = WorkstationDirectoryParser(ids_by_name).parse(LineCursor.from_text(html, RECIPES_PATH))
        logger.info(f"Found {len(directory)} workstation recipe pages")

        pages = self.fetch_pages([url for _, url in directory])

        recipes = []
        for i, ((workstations, url), page_html) in enumerate(zip(directory, pages)):
            logger.debug(f"Parsing workstation recipes {i+1}/{len(directory)}: {url}")
            if page_html is None:
                logger.warning(f"Failed to get content for: {url}")
                report.skipped_pages.append(url)
                continue

            parser = RecipeTableParser(ids_by_name, workstations, strict=self.strict_names)
            result = parser.parse_page(page_html, url)
            recipes.extend(result.recipes)
            report.errors.extend(result.errors)

            if result.errors and self.fail_fast:
                raise result.errors[0]

        return recipes

    def image_cache_path(self, image_ref: str) -> str:
        """Local file for an image URL: its basename without the query string"""
        return os.path.join(self.image_dir, os.path.basename(urlparse(image_ref).path))

    def download_image(self, image_ref: str) -> Optional[bytes]:
        try:
            response = self.session.get(urljoin(self.base_url + '/', image_ref), timeout=self.timeout)
            response.raise_for_status()
            return response.content

        except requests.exceptions.RequestException as e:
            logger.error(f"Error downloading image {image_ref}: {e}")
            return None

    def cache_item_images(self, items: List[Item]) -> List[Item]:
        """
        Download item images that are not cached yet

        Returns:
            Items pointing at their local image file (or the remote one if the
            download failed)
        """
        os.makedirs(self.image_dir, exist_ok=True)

        cached = []
        for i, item in enumerate(items):
            path = self.image_cache_path(item.image_ref)

            # Only download the image if not yet cached
            if not os.path.exists(path):
                logger.debug(f"Downloading image {i+1}/{len(items)}: {item.name}")
                content = self.download_image(item.image_ref)
                if content is None:
                    cached.append(item)
                    continue
                with open(path, 'wb') as f:
                    f.write(content)
            else:
                logger.debug(f"Skipping cached image {i+1}/{len(items)}: {item.name}")

            cached.append(replace(item, image_ref=path))

        return cached

    def scrape(self) -> ScrapeReport:
        """Run the full pipeline: items, images, recipes, index"""
        report = ScrapeReport(dataset=Dataset(items=[], recipes=[]))

        logger.info("Retrieving item list")
        items = self.list_items(report)

        if self.image_dir:
            logger.info("Downloading item images")
            items = self.cache_item_images(items)

        logger.info("Retrieving recipe list")
        items_by_id, ids_by_name = build_lookup_tables(items)
        recipes = self.list_recipes(ids_by_name, report)

        logger.info("Indexing dataset")
        report.dataset = build_dataset(recipes, items_by_id)
        return report


def main():
    """Main function with command line interface"""
    parser = argparse.ArgumentParser(description='Terraria Wiki Recipe Scraper - Scrapes to SQLite database')

    parser.add_argument('--base-url', default='http://terraria.gamepedia.com',
                       help='Wiki root URL (default: http://terraria.gamepedia.com)')
    parser.add_argument('--database', default='terraria.db',
                       help='SQLite database path (default: terraria.db)')
    parser.add_argument('--image-dir', default='img',
                       help='Directory for cached item images (default: img)')
    parser.add_argument('--skip-images', action='store_true',
                       help='Keep remote image URLs instead of downloading them')
    parser.add_argument('--delay', type=float, default=0.5,
                       help='Delay after each request in seconds (default: 0.5)')
    parser.add_argument('--workers', type=int, default=4,
                       help='Concurrent recipe page downloads (default: 4)')
    parser.add_argument('--timeout', type=float, default=30.0,
                       help='Request timeout in seconds (default: 30)')
    parser.add_argument('--item-pages', type=int, default=13,
                       help='Number of Item_IDs listing pages (default: 13)')
    parser.add_argument('--lenient-names', action='store_true',
                       help='Map unknown recipe item names to placeholder id 0 instead of failing the page')
    parser.add_argument('--fail-fast', action='store_true',
                       help='Abort on the first page that fails to parse')
    parser.add_argument('--verbose', action='store_true',
                       help='Enable debug logging')

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    scraper = TerrariaWikiScraper(
        base_url=args.base_url,
        db_path=args.database,
        image_dir=None if args.skip_images else args.image_dir,
        delay=args.delay,
        workers=args.workers,
        timeout=args.timeout,
        item_pages=args.item_pages,
        strict_names=not args.lenient_names,
        fail_fast=args.fail_fast
    )

    print(f"🗃️  Database: {args.database}")
    print(f"⚙️  Settings: delay={args.delay}s, workers={args.workers}, item pages={args.item_pages}")
    print("=" * 60)

    try:
        report = scraper.scrape()
    except StructuralMismatch as e:
        print(f"\n❌ Workstation directory is out of sync: {e}")
        return 1
    except ParseError as e:
        print(f"\n❌ Parse error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n⏹️ Interrupted by user. Nothing was saved.")
        return 1

    save_dataset(scraper.db_path, report.dataset)

    print(f"\n📊 SUMMARY:")
    print("=" * 50)
    print(f"{'Items':20} → {len(report.dataset.items):5d}")
    print(f"{'Recipes':20} → {len(report.dataset.recipes):5d}")
    print(f"{'Page errors':20} → {len(report.errors):5d}")
    print(f"{'Skipped pages':20} → {len(report.skipped_pages):5d}")
    for error in report.errors:
        print(f"   ⚠️  {error}")
    print(f"\n🗃️  Saved to database: {args.database}")
    print("    💡 Run terraria-export to generate data.json")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
