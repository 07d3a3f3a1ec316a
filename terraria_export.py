#!/usr/bin/env python3
"""
Terraria Data Exporter

Exports the indexed dataset from the SQLite database to an importable
JavaScript/JSON file (var data = {...};).
"""

import argparse
import json
import logging
import os

from dataset_db import dataset_summary, load_dataset

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def export_dataset(db_path: str, output_file: str = "data.json") -> int:
    """
    Export the stored dataset to a JavaScript data file

    Args:
        db_path: Path to SQLite database
        output_file: File to write

    Returns:
        Number of exported recipes
    """
    if not os.path.exists(db_path):
        raise FileNotFoundError(f"Database not found: {db_path}")

    dataset = load_dataset(db_path)

    output_dir = os.path.dirname(output_file)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(f"var data = {json.dumps(dataset.to_dict(), ensure_ascii=False)};")

    logger.info(f"Exported {len(dataset.items)} items and {len(dataset.recipes)} recipes to {output_file}")
    return len(dataset.recipes)


def print_summary(db_path: str):
    """List row counts of the stored dataset"""
    if not os.path.exists(db_path):
        print(f"❌ Database not found: {db_path}")
        return

    print("📁 Stored dataset:")
    print("=" * 40)
    for table, count in dataset_summary(db_path).items():
        print(f"{table:20} → {count:5d} rows")


def main():
    """Main function with command line interface"""
    parser = argparse.ArgumentParser(description='Terraria Data Exporter - Export from SQLite to data.json')

    parser.add_argument('--database', default='terraria.db',
                       help='SQLite database path (default: terraria.db)')
    parser.add_argument('--output', default='data.json',
                       help='Output file (default: data.json)')
    parser.add_argument('--summary', action='store_true',
                       help='Show stored row counts and exit')

    args = parser.parse_args()

    if args.summary:
        print_summary(args.database)
        return 0

    try:
        print(f"📤 Exporting data from {args.database} to {args.output}")
        count = export_dataset(args.database, args.output)
        print(f"✅ Exported {count} recipes")
    except FileNotFoundError as e:
        print(f"❌ {e}")
        print("   Run the scraper first to create the database")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
