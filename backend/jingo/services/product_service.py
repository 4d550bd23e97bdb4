"""
Product Service
Back-office product rules: uniqueness, publishing, deletion guards and bulk import
"""
import logging
from typing import Any, Dict, List, Optional

from jingo.core.exceptions import ConflictError, NotFoundError, PreconditionFailedError, ValidationError
from jingo.domain.product import Product, ProductCreate, ProductImage, ProductUpdate
from jingo.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:

    def __init__(self, product_repo: ProductRepository = None):
        self.product_repo = product_repo or ProductRepository()

    def _check_conflict(self, sku: Optional[str], slug: Optional[str], exclude_id: Optional[int] = None) -> None:
        conflict = self.product_repo.find_conflict(sku=sku, slug=slug, exclude_id=exclude_id)
        if not conflict:
            return
        if sku and conflict['sku'] == sku:
            raise ConflictError("A product with this SKU already exists")
        raise ConflictError("A product with this slug already exists")

    def get_detail(self, product_id: int) -> Dict[str, Any]:
        """Product with all images and its 10 most recent order lines"""
        product = self.product_repo.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        data = product.to_dict()
        data['order_items'] = self.product_repo.find_recent_order_lines(product_id, limit=10)
        return data

    def create(self, data: ProductCreate) -> Product:
        self._check_conflict(data.sku, data.slug)

        product = self.product_repo.create(data.model_dump(), published=data.status == "ACTIVE")
        logger.info(f"Created product {product.id} ({product.sku})")
        return product

    def update(self, product_id: int, data: ProductUpdate) -> Product:
        existing = self.product_repo.find_by_id(product_id)
        if existing is None:
            raise NotFoundError("Product not found")

        changes = data.model_dump(exclude_unset=True)

        sku = changes.get('sku') if changes.get('sku') != existing.sku else None
        slug = changes.get('slug') if changes.get('slug') != existing.slug else None
        if sku or slug:
            self._check_conflict(sku, slug, exclude_id=product_id)

        # First activation stamps published_at; later ones keep it
        publish = changes.get('status') == "ACTIVE" and existing.published_at is None

        return self.product_repo.update(product_id, changes, publish=publish)

    def delete(self, product_id: int) -> None:
        if self.product_repo.find_by_id(product_id) is None:
            raise NotFoundError("Product not found")

        if self.product_repo.count_order_items(product_id) > 0:
            raise PreconditionFailedError("Cannot delete product with existing orders. Archive it instead.")

        self.product_repo.delete(product_id)
        logger.info(f"Deleted product {product_id}")

    def bulk_update_status(self, product_ids: List[int], status: str) -> int:
        if not product_ids:
            raise ValidationError("No products selected")
        count = self.product_repo.bulk_update_status(product_ids, status)
        logger.info(f"Set status {status} on {count} products")
        return count

    def bulk_import(self, rows: List[ProductCreate]) -> Dict[str, Any]:
        """
        Upsert products by SKU

        A failing row is recorded in `errors` and the rest continue.

        Returns:
            {"created": int, "updated": int, "errors": [{"sku", "error"}]}
        """
        results = {"created": 0, "updated": 0, "errors": []}

        for row in rows:
            try:
                existing = self.product_repo.find_by_sku(row.sku)
                if existing:
                    publish = row.status == "ACTIVE" and existing.published_at is None
                    self.product_repo.update(existing.id, row.model_dump(), publish=publish)
                    results['updated'] += 1
                else:
                    self.product_repo.create(row.model_dump(), published=row.status == "ACTIVE")
                    results['created'] += 1

            except Exception as e:
                logger.warning(f"Import failed for SKU {row.sku}: {str(e)}")
                results['errors'].append({"sku": row.sku, "error": str(e)})

        logger.info(
            f"Product import: {results['created']} created, "
            f"{results['updated']} updated, {len(results['errors'])} errors"
        )
        return results

    def update_stock(self, product_id: int, stock_quantity: int) -> Product:
        if stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")

        product = self.product_repo.update_stock(product_id, stock_quantity)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def add_image(
        self,
        product_id: int,
        url: str,
        alt: Optional[str] = None,
        position: Optional[int] = None
    ) -> ProductImage:
        if self.product_repo.find_by_id(product_id) is None:
            raise NotFoundError("Product not found")
        return self.product_repo.add_image(product_id, url, alt=alt, position=position)

    def delete_image(self, image_id: int) -> None:
        if not self.product_repo.delete_image(image_id):
            raise NotFoundError("Image not found")
