"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and order items and returns Order
domain models.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from jingo.core.database import contains_pattern, get_db_connection_dict
from jingo.domain.order import Order, OrderCustomer, OrderItem


ORDER_COLUMNS = (
    "id", "order_number", "customer_id",
    "subtotal", "tax_amount", "shipping_amount", "total_amount",
    "shipping_address", "billing_address",
    "status", "payment_status", "fulfillment_status", "payment_method",
    "shipping_method", "tracking_number", "tracking_carrier", "tracking_url",
    "customer_notes", "internal_notes",
    "paid_at", "shipped_at", "delivered_at", "cancelled_at",
    "created_at", "updated_at",
)

ORDER_SELECT = ", ".join(f"o.{column}" for column in ORDER_COLUMNS)

CUSTOMER_JOIN_COLUMNS = """
    cu.email AS customer_email, cu.first_name AS customer_first_name,
    cu.last_name AS customer_last_name, cu.phone AS customer_phone
"""

# Columns an update may touch
ORDER_UPDATABLE_FIELDS = (
    "status", "payment_status", "fulfillment_status",
    "tracking_number", "tracking_carrier", "tracking_url",
    "shipping_method", "internal_notes",
    "paid_at", "shipped_at", "delivered_at", "cancelled_at",
)

ORDER_INSERT_FIELDS = (
    "order_number", "customer_id",
    "subtotal", "tax_amount", "shipping_amount", "total_amount",
    "shipping_address", "billing_address",
    "status", "payment_status", "fulfillment_status", "payment_method",
    "shipping_method", "customer_notes", "internal_notes", "paid_at",
)

SORT_COLUMNS = {
    "created_at": "o.created_at",
    "total_amount": "o.total_amount",
    "order_number": "o.order_number",
}


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_order(row: dict, items: Optional[List[OrderItem]] = None) -> Order:
        data = {column: row[column] for column in ORDER_COLUMNS if column in row}

        customer = None
        if row.get('customer_email'):
            customer = OrderCustomer(
                id=row['customer_id'],
                email=row['customer_email'],
                first_name=row.get('customer_first_name'),
                last_name=row.get('customer_last_name'),
                phone=row.get('customer_phone'),
            )

        return Order(**data, customer=customer, items=items or [])

    @staticmethod
    def _load_items(cursor, order_ids: List[int], with_product: bool = False) -> Dict[int, List[OrderItem]]:
        """Order items grouped by order id, optionally with product slug and first image"""
        if not order_ids:
            return {}

        if with_product:
            cursor.execute("""
                SELECT
                    oi.id, oi.order_id, oi.product_id, oi.sku, oi.name,
                    oi.price, oi.quantity, oi.total_price,
                    p.slug AS product_slug,
                    (
                        SELECT url FROM product_images pi
                        WHERE pi.product_id = oi.product_id
                        ORDER BY pi.position ASC, pi.id ASC
                        LIMIT 1
                    ) AS product_image
                FROM order_items oi
                LEFT JOIN products p ON p.id = oi.product_id
                WHERE oi.order_id = ANY(%s)
                ORDER BY oi.id
            """, (list(order_ids),))
        else:
            cursor.execute("""
                SELECT id, order_id, product_id, sku, name, price, quantity, total_price
                FROM order_items
                WHERE order_id = ANY(%s)
                ORDER BY id
            """, (list(order_ids),))

        items: Dict[int, List[OrderItem]] = {}
        for row in cursor.fetchall():
            items.setdefault(row['order_id'], []).append(OrderItem(**row))
        return items

    # ============================================
    # Lookups
    # ============================================

    def find_by_id(self, order_id: int, with_product: bool = False) -> Optional[Order]:
        """Order with its customer summary and items"""
        return self._find_one("o.id = %s", (order_id,), with_product=with_product)

    def find_by_number(self, order_number: str) -> Optional[Order]:
        return self._find_one("o.order_number = %s", (order_number,))

    def find_for_customer(self, order_id: int, customer_id: int) -> Optional[Order]:
        """Order only when it belongs to the customer; items carry product slug and image"""
        return self._find_one(
            "o.id = %s AND o.customer_id = %s",
            (order_id, customer_id),
            with_product=True,
        )

    def _find_one(self, condition: str, params: tuple, with_product: bool = False) -> Optional[Order]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_SELECT}, {CUSTOMER_JOIN_COLUMNS}
                FROM orders o
                LEFT JOIN customers cu ON cu.id = o.customer_id
                WHERE {condition}
                LIMIT 1
            """, params)

            row = cursor.fetchone()
            if not row:
                return None

            items = self._load_items(cursor, [row['id']], with_product=with_product)
            return self._map_row_to_order(row, items.get(row['id'], []))

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        fulfillment_status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters

        Search matches the order number and the customer's email and names.

        Returns:
            Tuple of (list of orders with customer and items, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(
                search=search,
                status=status,
                payment_status=payment_status,
                fulfillment_status=fulfillment_status,
                date_from=date_from,
                date_to=date_to,
            )
            sort_column = SORT_COLUMNS.get(sort_by, "o.created_at")
            direction = "ASC" if sort_order == "asc" else "DESC"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders o
                LEFT JOIN customers cu ON cu.id = o.customer_id
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_SELECT}, {CUSTOMER_JOIN_COLUMNS}
                FROM orders o
                LEFT JOIN customers cu ON cu.id = o.customer_id
                WHERE {where_clause}
                ORDER BY {sort_column} {direction}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])
            rows = cursor.fetchall()

            items = self._load_items(cursor, [row['id'] for row in rows])
            orders = [self._map_row_to_order(row, items.get(row['id'], [])) for row in rows]
            return orders, total

        finally:
            cursor.close()
            conn.close()

    @staticmethod
    def _build_filters(
        search: Optional[str] = None,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        fulfillment_status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        customer_id: Optional[int] = None
    ) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []

        if search:
            conditions.append("""(
                o.order_number ILIKE %s OR cu.email ILIKE %s
                OR cu.first_name ILIKE %s OR cu.last_name ILIKE %s
            )""")
            params.extend([contains_pattern(search)] * 4)

        if status:
            conditions.append("o.status = %s")
            params.append(status)

        if payment_status:
            conditions.append("o.payment_status = %s")
            params.append(payment_status)

        if fulfillment_status:
            conditions.append("o.fulfillment_status = %s")
            params.append(fulfillment_status)

        if date_from:
            conditions.append("o.created_at >= %s")
            params.append(date_from)

        if date_to:
            conditions.append("o.created_at <= %s")
            params.append(date_to)

        if customer_id is not None:
            conditions.append("o.customer_id = %s")
            params.append(customer_id)

        where_clause = " AND ".join(conditions) if conditions else "1=1"
        return where_clause, params

    def find_by_customer(self, customer_id: int, limit: int = 10, offset: int = 0) -> Tuple[List[Order], int]:
        """A customer's orders, newest first, with items"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COUNT(*) as total FROM orders WHERE customer_id = %s
            """, (customer_id,))
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_SELECT}
                FROM orders o
                WHERE o.customer_id = %s
                ORDER BY o.created_at DESC
                LIMIT %s OFFSET %s
            """, (customer_id, limit, offset))
            rows = cursor.fetchall()

            items = self._load_items(cursor, [row['id'] for row in rows])
            orders = [self._map_row_to_order(row, items.get(row['id'], [])) for row in rows]
            return orders, total

        finally:
            cursor.close()
            conn.close()

    def find_recent(self, limit: int = 5) -> List[Order]:
        """Latest orders with customer summary and items"""
        orders, _ = self.find_all(limit=limit)
        return orders

    def find_for_export(
        self,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> List[Order]:
        """All matching orders, newest first, with customers and items"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(status=status, date_from=date_from, date_to=date_to)

            cursor.execute(f"""
                SELECT {ORDER_SELECT}, {CUSTOMER_JOIN_COLUMNS}
                FROM orders o
                LEFT JOIN customers cu ON cu.id = o.customer_id
                WHERE {where_clause}
                ORDER BY o.created_at DESC
            """, params)
            rows = cursor.fetchall()

            items = self._load_items(cursor, [row['id'] for row in rows])
            return [self._map_row_to_order(row, items.get(row['id'], [])) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def get_stats(self, start_of_day: datetime, start_of_month: datetime) -> Dict[str, Any]:
        """Order counts and this month's PAID revenue"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) AS total_orders,
                    COUNT(*) FILTER (WHERE created_at >= %s) AS today_orders,
                    COUNT(*) FILTER (WHERE created_at >= %s) AS month_orders,
                    COUNT(*) FILTER (WHERE status = 'PENDING') AS pending_orders,
                    COUNT(*) FILTER (WHERE status = 'PROCESSING') AS processing_orders,
                    COALESCE(SUM(total_amount) FILTER (
                        WHERE created_at >= %s AND payment_status = 'PAID'
                    ), 0) AS month_revenue
                FROM orders
            """, (start_of_day, start_of_month, start_of_month))

            row = dict(cursor.fetchone())
            row['month_revenue'] = float(row['month_revenue'])
            return row

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Writes
    # ============================================

    def create(self, data: Dict[str, Any], items: List[Dict[str, Any]], conn=None) -> Order:
        """
        Insert an order and its items

        Args:
            data: Order column values (see ORDER_INSERT_FIELDS)
            items: [{"product_id", "sku", "name", "price", "quantity", "total_price"}, ...]
            conn: Connection of an enclosing transaction (optional)
        """
        columns = [column for column in ORDER_INSERT_FIELDS if column in data]
        values = [data[column] for column in columns]
        placeholders = ", ".join(["%s"] * len(columns))

        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO orders ({", ".join(columns)}, created_at, updated_at)
                VALUES ({placeholders}, NOW(), NOW())
                RETURNING {", ".join(ORDER_COLUMNS)}
            """, values)
            order_row = cursor.fetchone()

            order_items = []
            for item in items:
                cursor.execute("""
                    INSERT INTO order_items (order_id, product_id, sku, name, price, quantity, total_price, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, NOW())
                    RETURNING id, order_id, product_id, sku, name, price, quantity, total_price
                """, (
                    order_row['id'],
                    item['product_id'],
                    item.get('sku'),
                    item['name'],
                    item['price'],
                    item['quantity'],
                    item['total_price'],
                ))
                order_items.append(OrderItem(**cursor.fetchone()))

            if should_close:
                conn.commit()
            return self._map_row_to_order(order_row, order_items)

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def update(self, order_id: int, data: Dict[str, Any]) -> Optional[Order]:
        """Update the provided columns of an order; returns it reloaded with customer and items"""
        columns = [column for column in ORDER_UPDATABLE_FIELDS if column in data]
        assignments = [f"{column} = %s" for column in columns] + ["updated_at = NOW()"]
        values = [data[column] for column in columns]

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE orders SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING id
            """, values + [order_id])

            row = cursor.fetchone()
            conn.commit()

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

        return self.find_by_id(order_id) if row else None
