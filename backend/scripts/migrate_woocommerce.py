#!/usr/bin/env python3
"""
WooCommerce -> Jingo Jump migration

Copies categories, products (with parsed specifications) and product
images from the legacy WooCommerce store. Existing SKUs are skipped, so the
script can be re-run.

Usage:
    python scripts/migrate_woocommerce.py --test             # 5 products
    python scripts/migrate_woocommerce.py --full             # everything
    python scripts/migrate_woocommerce.py --categories-only  # categories only

Requires WC_URL, WC_CONSUMER_KEY, WC_CONSUMER_SECRET, DATABASE_URL,
SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.
"""
import argparse
import asyncio
import logging
import sys

from jingo.services.woocommerce_import_service import TEST_PRODUCT_LIMIT, WooCommerceImporter

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Migrate catalog data from WooCommerce')
    parser.add_argument('--test', action='store_true', help=f'Migrate only {TEST_PRODUCT_LIMIT} products')
    parser.add_argument('--full', action='store_true', help='Full migration')
    parser.add_argument('--categories-only', action='store_true', help='Only migrate categories')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.test or args.full or args.categories_only):
        parser.print_usage()
        return 1

    mode = f"TEST ({TEST_PRODUCT_LIMIT} products)" if args.test else "FULL" if args.full else "CATEGORIES ONLY"
    logger.info(f"WooCommerce migration - mode: {mode}")

    try:
        summary = asyncio.run(WooCommerceImporter().run(test=args.test, categories_only=args.categories_only))
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return 1

    logger.info(f"Summary: {summary}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
