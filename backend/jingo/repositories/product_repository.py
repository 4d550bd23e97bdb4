"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and product images and returns
Product domain models.
"""
from typing import Any, Dict, List, Optional, Tuple

from jingo.core.database import contains_pattern, get_db_connection_dict
from jingo.domain.product import (
    CategoryRef,
    Product,
    ProductImage,
    PRODUCT_WRITABLE_FIELDS,
)


PRODUCT_COLUMNS = ("id",) + PRODUCT_WRITABLE_FIELDS + ("published_at", "created_at", "updated_at")

PRODUCT_SELECT = ", ".join(f"p.{column}" for column in PRODUCT_COLUMNS)

# First image by position plus the linked category
LISTING_JOINS = """
    LEFT JOIN LATERAL (
        SELECT id, url, alt, position
        FROM product_images
        WHERE product_id = p.id
        ORDER BY position ASC, id ASC
        LIMIT 1
    ) img ON TRUE
    LEFT JOIN categories c ON c.id = p.category_id
"""

LISTING_EXTRA_COLUMNS = """
    img.id AS image_id, img.url AS image_url, img.alt AS image_alt, img.position AS image_position,
    c.name AS cat_name, c.slug AS cat_slug
"""

PUBLIC_SORTS = {
    "featured": "p.featured DESC, p.created_at DESC",
    "price-asc": "p.price ASC",
    "price-desc": "p.price DESC",
    "newest": "p.created_at DESC",
    "name": "p.name ASC",
}

ADMIN_SORT_COLUMNS = {
    "name": "p.name",
    "price": "p.price",
    "created_at": "p.created_at",
    "stock_quantity": "p.stock_quantity",
    "sku": "p.sku",
}


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict, images: Optional[List[ProductImage]] = None) -> Product:
        """
        Map a database row to a Product.

        Listing queries add `image_*` columns (first image) and `cat_*`
        columns (linked category); admin queries add `order_item_count`.
        """
        data = {column: row[column] for column in PRODUCT_COLUMNS if column in row}

        if images is None:
            images = []
            if row.get('image_id'):
                images.append(ProductImage(
                    id=row['image_id'],
                    product_id=row['id'],
                    url=row['image_url'],
                    alt=row.get('image_alt'),
                    position=row.get('image_position') or 0,
                ))

        category_ref = None
        if row.get('cat_slug') and row.get('category_id'):
            category_ref = CategoryRef(id=row['category_id'], name=row['cat_name'], slug=row['cat_slug'])

        return Product(
            **data,
            images=images,
            category_ref=category_ref,
            order_item_count=row.get('order_item_count'),
        )

    # ============================================
    # Public catalog
    # ============================================

    def find_active(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        size: Optional[str] = None,
        age_range: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort_by: str = "featured",
        limit: int = 12,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find ACTIVE products for the storefront

        Returns:
            Tuple of (list of products with first image, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = ["p.status = 'ACTIVE'"]
            params: List[Any] = []

            if search:
                conditions.append("(p.name ILIKE %s OR p.description ILIKE %s)")
                search_term = contains_pattern(search)
                params.extend([search_term, search_term])

            if category_id:
                conditions.append("p.category_id = %s")
                params.append(category_id)

            if size:
                conditions.append("p.size = %s")
                params.append(size)

            if age_range:
                conditions.append("p.age_range = %s")
                params.append(age_range)

            if min_price is not None:
                conditions.append("p.price >= %s")
                params.append(min_price)

            if max_price is not None:
                conditions.append("p.price <= %s")
                params.append(max_price)

            where_clause = " AND ".join(conditions)
            order_clause = PUBLIC_SORTS.get(sort_by, PUBLIC_SORTS["featured"])

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products p
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}, {LISTING_EXTRA_COLUMNS}
                FROM products p
                {LISTING_JOINS}
                WHERE {where_clause}
                ORDER BY {order_clause}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            products = [self._map_row_to_product(row) for row in cursor.fetchall()]
            return products, total

        finally:
            cursor.close()
            conn.close()

    def find_active_by_slug(self, slug: str) -> Optional[Product]:
        """ACTIVE product by slug with all images"""
        return self._find_one_with_images("p.slug = %s AND p.status = 'ACTIVE'", (slug,))

    def find_active_by_id(self, product_id: int) -> Optional[Product]:
        """ACTIVE product by id with all images"""
        return self._find_one_with_images("p.id = %s AND p.status = 'ACTIVE'", (product_id,))

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """Any product by id with all images (admin)"""
        return self._find_one_with_images("p.id = %s", (product_id,))

    def _find_one_with_images(self, condition: str, params: tuple) -> Optional[Product]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}, c.name AS cat_name, c.slug AS cat_slug
                FROM products p
                LEFT JOIN categories c ON c.id = p.category_id
                WHERE {condition}
                LIMIT 1
            """, params)

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute("""
                SELECT id, product_id, url, alt, position, created_at
                FROM product_images
                WHERE product_id = %s
                ORDER BY position ASC, id ASC
            """, (row['id'],))
            images = [ProductImage(**image) for image in cursor.fetchall()]

            return self._map_row_to_product(row, images=images)

        finally:
            cursor.close()
            conn.close()

    def find_related(self, product_id: int, limit: int = 4) -> List[Product]:
        """
        ACTIVE products from the same category, featured first

        When the source product has no category, any ACTIVE product qualifies.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT category_id FROM products WHERE id = %s", (product_id,))
            source = cursor.fetchone()
            category_id = source['category_id'] if source else None

            conditions = ["p.status = 'ACTIVE'", "p.id <> %s"]
            params: List[Any] = [product_id]
            if category_id:
                conditions.append("p.category_id = %s")
                params.append(category_id)

            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}, {LISTING_EXTRA_COLUMNS}
                FROM products p
                {LISTING_JOINS}
                WHERE {" AND ".join(conditions)}
                ORDER BY p.featured DESC
                LIMIT %s
            """, params + [limit])

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_featured(self, limit: int = 8) -> List[Product]:
        """ACTIVE featured products, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}, {LISTING_EXTRA_COLUMNS}
                FROM products p
                {LISTING_JOINS}
                WHERE p.status = 'ACTIVE' AND p.featured = TRUE
                ORDER BY p.created_at DESC
                LIMIT %s
            """, (limit,))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_sitemap_entries(self) -> List[Dict[str, Any]]:
        """Id, slug and updated_at of every ACTIVE product, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, slug, updated_at
                FROM products
                WHERE status = 'ACTIVE'
                ORDER BY updated_at DESC
            """)
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def get_filter_options(self) -> Dict[str, Any]:
        """
        Storefront filter options

        Returns:
            sizes and age_ranges with product counts, plus the ACTIVE price range
            (defaults to 0..10000 when there are no products)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT size AS name, COUNT(*) AS count
                FROM products
                WHERE status = 'ACTIVE' AND size IS NOT NULL AND size <> ''
                GROUP BY size
                ORDER BY size
            """)
            sizes = [dict(row) for row in cursor.fetchall()]

            cursor.execute("""
                SELECT age_range AS name, COUNT(*) AS count
                FROM products
                WHERE status = 'ACTIVE' AND age_range IS NOT NULL AND age_range <> ''
                GROUP BY age_range
                ORDER BY age_range
            """)
            age_ranges = [dict(row) for row in cursor.fetchall()]

            cursor.execute("""
                SELECT MIN(price) AS min_price, MAX(price) AS max_price
                FROM products
                WHERE status = 'ACTIVE'
            """)
            price_row = cursor.fetchone() or {}

            min_price = price_row.get('min_price')
            max_price = price_row.get('max_price')

            return {
                "sizes": sizes,
                "age_ranges": age_ranges,
                "price_range": {
                    "min": float(min_price) if min_price is not None else 0,
                    "max": float(max_price) if max_price is not None else 10000,
                },
            }

        finally:
            cursor.close()
            conn.close()

    def find_by_ids(self, product_ids: List[int]) -> Dict[int, Product]:
        """Products keyed by id (missing ids are simply absent)"""
        if not product_ids:
            return {}

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}
                FROM products p
                WHERE p.id = ANY(%s)
            """, (list(product_ids),))

            return {row['id']: self._map_row_to_product(row) for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Back office
    # ============================================

    def find_all(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters (any status)

        Each product carries its first image and the number of order lines
        that reference it.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params: List[Any] = []

            if search:
                conditions.append("(p.name ILIKE %s OR p.sku ILIKE %s OR p.description ILIKE %s)")
                search_term = contains_pattern(search)
                params.extend([search_term, search_term, search_term])

            if category:
                conditions.append("p.category = %s")
                params.append(category)

            if status:
                conditions.append("p.status = %s")
                params.append(status)

            where_clause = " AND ".join(conditions) if conditions else "1=1"
            sort_column = ADMIN_SORT_COLUMNS.get(sort_by, "p.created_at")
            direction = "ASC" if sort_order == "asc" else "DESC"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products p
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}, {LISTING_EXTRA_COLUMNS},
                    (SELECT COUNT(*) FROM order_items oi WHERE oi.product_id = p.id) AS order_item_count
                FROM products p
                {LISTING_JOINS}
                WHERE {where_clause}
                ORDER BY {sort_column} {direction}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            products = [self._map_row_to_product(row) for row in cursor.fetchall()]
            return products, total

        finally:
            cursor.close()
            conn.close()

    def find_by_sku(self, sku: str) -> Optional[Product]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}
                FROM products p
                WHERE p.sku = %s
            """, (sku,))

            row = cursor.fetchone()
            return self._map_row_to_product(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_existing_skus(self) -> set:
        """All SKUs currently in the catalog"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT sku FROM products")
            return {row['sku'] for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    def find_existing_slugs(self) -> set:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT slug FROM products")
            return {row['slug'] for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    def find_conflict(
        self,
        sku: Optional[str] = None,
        slug: Optional[str] = None,
        exclude_id: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find another product that already uses the SKU or slug

        Returns:
            {"id", "sku", "slug"} of the conflicting product, or None
        """
        clauses = []
        params: List[Any] = []
        if sku:
            clauses.append("sku = %s")
            params.append(sku)
        if slug:
            clauses.append("slug = %s")
            params.append(slug)
        if not clauses:
            return None

        query = f"SELECT id, sku, slug FROM products WHERE ({' OR '.join(clauses)})"
        if exclude_id is not None:
            query += " AND id <> %s"
            params.append(exclude_id)
        query += " LIMIT 1"

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_recent_order_lines(self, product_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent order lines for a product with their order summary"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    oi.id, oi.quantity, oi.price, oi.total_price,
                    o.id AS order_id, o.order_number, o.created_at, o.status
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                WHERE oi.product_id = %s
                ORDER BY o.created_at DESC
                LIMIT %s
            """, (product_id, limit))

            lines = []
            for row in cursor.fetchall():
                lines.append({
                    "id": row['id'],
                    "quantity": row['quantity'],
                    "price": float(row['price']),
                    "total_price": float(row['total_price']),
                    "order": {
                        "id": row['order_id'],
                        "order_number": row['order_number'],
                        "created_at": row['created_at'],
                        "status": row['status'],
                    },
                })
            return lines

        finally:
            cursor.close()
            conn.close()

    def count_order_items(self, product_id: int) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COUNT(*) AS total FROM order_items WHERE product_id = %s
            """, (product_id,))
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def create(self, data: Dict[str, Any], published: bool = False) -> Product:
        """
        Insert a product

        Args:
            data: Column values (keys outside PRODUCT_WRITABLE_FIELDS are ignored)
            published: Set published_at to now (an explicit data['published_at'] wins)
        """
        columns = [column for column in PRODUCT_WRITABLE_FIELDS if column in data]
        values = [data[column] for column in columns]
        placeholders = ", ".join(["%s"] * len(columns))
        published_sql = "NOW()" if published else "NULL"
        if data.get('published_at') is not None:
            published_sql = "%s"
            values.append(data['published_at'])

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO products ({", ".join(columns)}, published_at, created_at, updated_at)
                VALUES ({placeholders}, {published_sql}, NOW(), NOW())
                RETURNING {", ".join(PRODUCT_COLUMNS)}
            """, values)

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update(self, product_id: int, data: Dict[str, Any], publish: bool = False) -> Optional[Product]:
        """
        Update the provided columns of a product

        Args:
            publish: Also set published_at to now
        """
        columns = [column for column in PRODUCT_WRITABLE_FIELDS if column in data]
        assignments = [f"{column} = %s" for column in columns]
        values: List[Any] = [data[column] for column in columns]
        if publish:
            assignments.append("published_at = NOW()")
        assignments.append("updated_at = NOW()")

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {", ".join(PRODUCT_COLUMNS)}
            """, values + [product_id])

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row) if row else None

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete(self, product_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM products WHERE id = %s RETURNING id", (product_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def bulk_update_status(self, product_ids: List[int], status: str) -> int:
        """Set status on many products; ACTIVE also stamps published_at"""
        publish_sql = ", published_at = NOW()" if status == "ACTIVE" else ""

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products SET status = %s{publish_sql}, updated_at = NOW()
                WHERE id = ANY(%s)
            """, (status, list(product_ids)))

            count = cursor.rowcount
            conn.commit()
            return count

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update_stock(self, product_id: int, stock_quantity: int) -> Optional[Product]:
        return self.update(product_id, {"stock_quantity": stock_quantity})

    def find_for_export(self, status: Optional[str] = None, category: Optional[str] = None) -> List[Product]:
        """All matching products with every image, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params: List[Any] = []
            if status:
                conditions.append("p.status = %s")
                params.append(status)
            if category:
                conditions.append("p.category = %s")
                params.append(category)
            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}
                FROM products p
                WHERE {where_clause}
                ORDER BY p.created_at DESC
            """, params)
            rows = cursor.fetchall()

            images_by_product: Dict[int, List[ProductImage]] = {}
            product_ids = [row['id'] for row in rows]
            if product_ids:
                cursor.execute("""
                    SELECT id, product_id, url, alt, position, created_at
                    FROM product_images
                    WHERE product_id = ANY(%s)
                    ORDER BY position ASC, id ASC
                """, (product_ids,))
                for image in cursor.fetchall():
                    images_by_product.setdefault(image['product_id'], []).append(ProductImage(**image))

            return [
                self._map_row_to_product(row, images=images_by_product.get(row['id'], []))
                for row in rows
            ]

        finally:
            cursor.close()
            conn.close()

    def find_distinct_categories(self) -> List[str]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT DISTINCT category
                FROM products
                WHERE category IS NOT NULL
                ORDER BY category
            """)
            return [row['category'] for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_low_stock(self, limit: int = 20, active_only: bool = False) -> List[Product]:
        """
        Tracked products at or below their own low-stock threshold

        Ordered by stock ascending.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            status_sql = "AND p.status = 'ACTIVE'" if active_only else ""
            cursor.execute(f"""
                SELECT {PRODUCT_SELECT}, {LISTING_EXTRA_COLUMNS}
                FROM products p
                {LISTING_JOINS}
                WHERE p.track_inventory = TRUE
                  AND p.stock_quantity <= p.low_stock_threshold
                  {status_sql}
                ORDER BY p.stock_quantity ASC
                LIMIT %s
            """, (limit,))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Images
    # ============================================

    def add_image(
        self,
        product_id: int,
        url: str,
        alt: Optional[str] = None,
        position: Optional[int] = None
    ) -> ProductImage:
        """
        Attach an image to a product

        Without an explicit position the image goes after the current last one.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if position is None:
                cursor.execute("""
                    SELECT COALESCE(MAX(position), 0) AS max_position
                    FROM product_images
                    WHERE product_id = %s
                """, (product_id,))
                position = cursor.fetchone()['max_position'] + 1

            cursor.execute("""
                INSERT INTO product_images (product_id, url, alt, position, created_at)
                VALUES (%s, %s, %s, %s, NOW())
                RETURNING id, product_id, url, alt, position, created_at
            """, (product_id, url, alt, position))

            image = ProductImage(**cursor.fetchone())
            conn.commit()
            return image

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete_image(self, image_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM product_images WHERE id = %s RETURNING id", (image_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()
