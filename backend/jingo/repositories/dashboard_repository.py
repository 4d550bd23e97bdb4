"""
Dashboard Repository - aggregate queries for the back-office dashboard
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from jingo.core.database import get_db_connection_dict


class DashboardRepository:
    """
    Read-only aggregate queries across orders, products, customers and
    subscribers. Date boundaries are computed by the caller.
    """

    def get_counts(
        self,
        start_of_day: datetime,
        start_of_month: datetime,
        start_of_last_month: datetime
    ) -> Dict[str, Any]:
        """All headline numbers in one round trip"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    (SELECT COUNT(*) FROM orders) AS orders_total,
                    (SELECT COUNT(*) FROM orders WHERE created_at >= %(day)s) AS orders_today,
                    (SELECT COUNT(*) FROM orders WHERE created_at >= %(month)s) AS orders_this_month,
                    (SELECT COUNT(*) FROM orders WHERE status = 'PENDING') AS orders_pending,

                    (SELECT COALESCE(SUM(total_amount), 0) FROM orders
                        WHERE payment_status = 'PAID') AS revenue_total,
                    (SELECT COALESCE(SUM(total_amount), 0) FROM orders
                        WHERE payment_status = 'PAID' AND created_at >= %(month)s) AS revenue_this_month,
                    (SELECT COALESCE(SUM(total_amount), 0) FROM orders
                        WHERE payment_status = 'PAID'
                          AND created_at >= %(last_month)s AND created_at < %(month)s) AS revenue_last_month,
                    (SELECT COALESCE(SUM(total_amount), 0) FROM orders
                        WHERE payment_status = 'PAID' AND created_at >= %(day)s) AS revenue_today,

                    (SELECT COUNT(*) FROM products) AS products_total,
                    (SELECT COUNT(*) FROM products WHERE status = 'ACTIVE') AS products_active,
                    (SELECT COUNT(*) FROM products
                        WHERE track_inventory = TRUE AND stock_quantity <= 5) AS products_low_stock,

                    (SELECT COUNT(*) FROM customers) AS customers_total,
                    (SELECT COUNT(*) FROM customers WHERE created_at >= %(month)s) AS customers_new_this_month,

                    (SELECT COUNT(*) FROM subscribers) AS subscribers_total,
                    (SELECT COUNT(*) FROM subscribers WHERE email_subscribed = TRUE) AS subscribers_active_email
            """, {"day": start_of_day, "month": start_of_month, "last_month": start_of_last_month})

            return dict(cursor.fetchone())

        finally:
            cursor.close()
            conn.close()

    def find_paid_orders_since(self, start_date: datetime) -> List[Dict[str, Any]]:
        """created_at and total_amount of PAID orders, oldest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT created_at, total_amount
                FROM orders
                WHERE payment_status = 'PAID' AND created_at >= %s
                ORDER BY created_at ASC
            """, (start_date,))
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_top_products(self, limit: int = 5, start_date: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Units and revenue per product, best sellers first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            date_sql = "WHERE o.created_at >= %s" if start_date else ""
            params: List[Any] = [start_date] if start_date else []

            cursor.execute(f"""
                SELECT
                    p.id, p.name, p.sku, p.price,
                    (
                        SELECT url FROM product_images pi
                        WHERE pi.product_id = p.id
                        ORDER BY pi.position ASC, pi.id ASC
                        LIMIT 1
                    ) AS image_url,
                    SUM(oi.quantity) AS total_sold,
                    SUM(oi.total_price) AS total_revenue
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                JOIN products p ON p.id = oi.product_id
                {date_sql}
                GROUP BY p.id, p.name, p.sku, p.price
                ORDER BY total_sold DESC
                LIMIT %s
            """, params + [limit])
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def get_order_status_breakdown(self) -> List[Dict[str, Any]]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT status, COUNT(*) AS count
                FROM orders
                GROUP BY status
                ORDER BY status
            """)
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def get_customer_activity(self, start_date: datetime) -> Dict[str, int]:
        """New customers and returning customers (2+ orders, ordered recently)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) FILTER (WHERE created_at >= %s) AS new_customers,
                    COUNT(*) FILTER (WHERE total_orders > 1 AND last_order_at >= %s) AS returning_customers
                FROM customers
            """, (start_date, start_date))
            return dict(cursor.fetchone())

        finally:
            cursor.close()
            conn.close()
