"""
WooCommerce Import Service
One-off migration of categories, products and images from the legacy
WooCommerce store into the catalog

Products that already exist (by SKU) are skipped, so the import can be
re-run safely.
"""
import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from jingo.connectors.woocommerce_connector import WooCommerceConnector
from jingo.repositories.category_repository import CategoryRepository
from jingo.repositories.product_repository import ProductRepository
from jingo.services.spec_parser import generate_sku, generate_slug, parse_specs, strip_html
from jingo.services.storage_service import StorageService

logger = logging.getLogger(__name__)

TEST_PRODUCT_LIMIT = 5


def _meta_value(wc_product: Dict[str, Any], key: str) -> Optional[str]:
    for meta in wc_product.get('meta_data') or []:
        if meta.get('key') == key and isinstance(meta.get('value'), str):
            return meta['value']
    return None


def _parse_price(value: Optional[str]) -> Optional[float]:
    try:
        return float(value) if value else None
    except ValueError:
        return None


def image_extension(url: str) -> str:
    path = urlparse(url).path
    ext = path.rsplit(".", 1)[-1].lower() if "." in path.rsplit("/", 1)[-1] else ""
    return ext or "jpg"


def image_content_type(ext: str) -> str:
    return f"image/{'jpeg' if ext == 'jpg' else ext}"


def map_product(
    wc_product: Dict[str, Any],
    slug: str,
    sku: str,
    category_id: Optional[int]
) -> Dict[str, Any]:
    """
    Build product column values from a WooCommerce product

    Specs come from short_description (or description when it is empty).
    """
    specs = parse_specs(wc_product.get('short_description') or wc_product.get('description'))
    categories = wc_product.get('categories') or []
    primary_category = categories[0] if categories else None

    badge = None
    if wc_product.get('on_sale'):
        badge = "SALE"
    elif wc_product.get('featured'):
        badge = "POPULAR"

    stock_quantity = wc_product.get('stock_quantity')
    if stock_quantity is None:
        stock_quantity = 10 if wc_product.get('stock_status') == "instock" else 0

    dimensions = wc_product.get('dimensions') or {}
    length, width, height = dimensions.get('length'), dimensions.get('width'), dimensions.get('height')

    date_created = wc_product.get('date_created')

    return {
        "name": wc_product['name'],
        "slug": slug,
        "sku": sku,
        "description": (
            specs.get('clean_description')
            or strip_html(wc_product.get('description') or wc_product.get('short_description'))
            or None
        ),
        "price": _parse_price(wc_product.get('regular_price')) or 0,
        "sale_price": _parse_price(wc_product.get('sale_price')),
        "category_id": category_id,
        "category": primary_category['name'].replace("&amp;", "&") if primary_category else None,
        "stock_quantity": stock_quantity,
        "track_inventory": wc_product.get('stock_quantity') is not None,

        "model_number": specs.get('model_number'),
        "size": specs.get('size'),
        # Table weight is the unit weight; the WC field is shipping weight
        "weight": specs.get('weight') or _parse_price(wc_product.get('weight')),
        "warranty": specs.get('warranty'),
        "pieces": specs.get('pieces') or None,
        "blowers": specs.get('blowers') or None,
        "operators": specs.get('operators') or None,
        "riders": specs.get('riders'),
        "indoor": specs.get('indoor'),
        "outdoor": specs.get('outdoor'),
        "power": specs.get('power'),
        "voltage": specs.get('voltage'),
        "frequency": specs.get('frequency'),
        "phase": specs.get('phase'),
        "rpm": specs.get('rpm') or None,
        "amps": specs.get('amps') or None,
        "age_range": f"{specs['riders']} riders" if specs.get('riders') else None,
        "dimensions": f"{length}x{width}x{height}" if length and width and height else None,

        "status": "ARCHIVED" if wc_product.get('stock_status') == "outofstock" else "ACTIVE",
        "badge": badge,
        "featured": bool(wc_product.get('featured')),
        "meta_title": _meta_value(wc_product, "_yoast_wpseo_title"),
        "meta_description": _meta_value(wc_product, "_yoast_wpseo_metadesc"),
        "published_at": datetime.fromisoformat(date_created) if date_created else None,
    }


class WooCommerceImporter:

    def __init__(
        self,
        connector: WooCommerceConnector = None,
        category_repo: CategoryRepository = None,
        product_repo: ProductRepository = None,
        storage: StorageService = None
    ):
        self.connector = connector or WooCommerceConnector()
        self.category_repo = category_repo or CategoryRepository()
        self.product_repo = product_repo or ProductRepository()
        self.storage = storage or StorageService()

    async def import_categories(self) -> Dict[int, int]:
        """
        Import categories

        Returns:
            Mapping of WooCommerce category id -> local category id
        """
        logger.info("=== Migrating Categories ===")

        wc_categories = await self.connector.get_categories(per_page=100)
        existing_slugs = {category.slug for category in self.category_repo.find_all()}
        category_map: Dict[int, int] = {}

        for wc_category in wc_categories:
            if wc_category.get('slug') == "uncategorized":
                continue

            clean_name = wc_category['name'].replace("&amp;", "&")

            try:
                existing = self.category_repo.find_by_names([wc_category['name'], clean_name])
                if existing:
                    category_map[wc_category['id']] = existing.id
                    logger.info(f"Category exists: {clean_name}")
                    continue

                image = wc_category.get('image') or {}
                category = self.category_repo.create({
                    "name": clean_name,
                    "slug": generate_slug(clean_name, existing_slugs),
                    "description": strip_html(wc_category.get('description')) or None,
                    "image": image.get('src'),
                    "position": 0,
                    "featured": False,
                })
                category_map[wc_category['id']] = category.id
                logger.info(f"Created category: {clean_name}")

            except Exception as e:
                logger.error(f"Failed to create category {wc_category['name']}: {str(e)}")

        logger.info(f"Migrated {len(category_map)} categories")
        return category_map

    async def import_images(self, product_id: int, images: List[Dict[str, Any]]) -> int:
        """Copy images into storage at positions 0..n-1; failures are skipped"""
        uploaded = 0

        for index, wc_image in enumerate(images):
            src = wc_image.get('src')
            if not src:
                continue

            try:
                content = await self.connector.download(src)
                if content is None:
                    continue

                ext = image_extension(src)
                path = f"{product_id}/{index}-{int(time.time() * 1000)}.{ext}"
                url = self.storage.upload(path, content, image_content_type(ext))

                self.product_repo.add_image(
                    product_id,
                    url,
                    alt=wc_image.get('alt') or wc_image.get('name') or None,
                    position=index,
                )
                uploaded += 1

            except Exception as e:
                logger.error(f"Error migrating image {src}: {str(e)}")

        return uploaded

    async def import_products(self, category_map: Dict[int, int], limit: Optional[int] = None) -> Dict[str, int]:
        """
        Import published products with their images

        Args:
            category_map: Result of import_categories
            limit: Stop after this many products (test runs)

        Returns:
            {"migrated": int, "failed": int, "skipped": int}
        """
        logger.info("=== Migrating Products ===")

        existing_slugs = self.product_repo.find_existing_slugs()
        existing_skus = self.product_repo.find_existing_skus()

        per_page = min(limit, 100) if limit else 100
        total_pages = 1 if limit else await self.connector.get_total_pages("products", per_page)

        results = {"migrated": 0, "failed": 0, "skipped": 0}

        for page in range(1, total_pages + 1):
            logger.info(f"Fetching page {page}/{total_pages}...")
            wc_products = await self.connector.get_products(page=page, per_page=per_page)
            if limit:
                wc_products = wc_products[:limit - results['migrated']]

            for wc_product in wc_products:
                logger.info(f"Processing: {wc_product.get('name')}")

                try:
                    wc_sku = wc_product.get('sku')
                    if wc_sku and wc_sku in existing_skus:
                        logger.info(f"Skipping (SKU exists): {wc_sku}")
                        results['skipped'] += 1
                        continue

                    categories = wc_product.get('categories') or []
                    category_id = category_map.get(categories[0]['id']) if categories else None

                    product = self.product_repo.create(map_product(
                        wc_product,
                        slug=generate_slug(wc_product['name'], existing_slugs),
                        sku=generate_sku(wc_sku, existing_skus),
                        category_id=category_id,
                    ))
                    logger.info(f"Created product: {product.id}")

                    images = wc_product.get('images') or []
                    if images:
                        uploaded = await self.import_images(product.id, images)
                        logger.info(f"Uploaded {uploaded}/{len(images)} images")

                    results['migrated'] += 1

                except Exception as e:
                    logger.error(f"Failed to migrate product {wc_product.get('name')}: {str(e)}")
                    results['failed'] += 1

                if limit and results['migrated'] >= limit:
                    break

            if limit and results['migrated'] >= limit:
                break

        logger.info(f"Migration complete: {results['migrated']} migrated, {results['failed']} failed")
        return results

    async def run(self, test: bool = False, categories_only: bool = False) -> Dict[str, Any]:
        category_map = await self.import_categories()
        summary: Dict[str, Any] = {"categories": len(category_map)}

        if not categories_only:
            summary["products"] = await self.import_products(
                category_map,
                limit=TEST_PRODUCT_LIMIT if test else None,
            )
        return summary
