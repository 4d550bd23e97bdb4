"""
Dashboard Service
Headline numbers and chart data for the back office
"""
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, List

from jingo.repositories.dashboard_repository import DashboardRepository
from jingo.repositories.order_repository import OrderRepository
from jingo.repositories.product_repository import ProductRepository
from jingo.services.date_ranges import period_start, start_of_day, start_of_last_month, start_of_month, utc_now


def growth_percent(current: float, previous: float) -> float:
    if not previous:
        return 0
    return round((current - previous) / previous * 100, 2)


def group_revenue(orders: List[Dict[str, Any]], period: str) -> List[Dict[str, Any]]:
    """
    Bucket PAID orders for the revenue chart

    `year` groups by month (YYYY-MM), anything shorter by day (YYYY-MM-DD).
    Buckets keep the order of the input rows.
    """
    key_format = "%Y-%m" if period == "year" else "%Y-%m-%d"
    buckets: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    for order in orders:
        key = order['created_at'].strftime(key_format)
        bucket = buckets.setdefault(key, {"date": key, "revenue": Decimal("0"), "orders": 0})
        bucket['revenue'] += Decimal(order['total_amount'])
        bucket['orders'] += 1

    return [
        {"date": bucket['date'], "revenue": float(bucket['revenue']), "orders": bucket['orders']}
        for bucket in buckets.values()
    ]


class DashboardService:

    def __init__(
        self,
        dashboard_repo: DashboardRepository = None,
        order_repo: OrderRepository = None,
        product_repo: ProductRepository = None
    ):
        self.dashboard_repo = dashboard_repo or DashboardRepository()
        self.order_repo = order_repo or OrderRepository()
        self.product_repo = product_repo or ProductRepository()

    def get_stats(self) -> Dict[str, Any]:
        now = utc_now()
        counts = self.dashboard_repo.get_counts(start_of_day(now), start_of_month(now), start_of_last_month(now))

        revenue_this_month = float(counts['revenue_this_month'])
        revenue_last_month = float(counts['revenue_last_month'])

        return {
            "orders": {
                "total": counts['orders_total'],
                "today": counts['orders_today'],
                "this_month": counts['orders_this_month'],
                "pending": counts['orders_pending'],
            },
            "revenue": {
                "total": float(counts['revenue_total']),
                "this_month": revenue_this_month,
                "last_month": revenue_last_month,
                "today": float(counts['revenue_today']),
                "growth_percent": growth_percent(revenue_this_month, revenue_last_month),
            },
            "products": {
                "total": counts['products_total'],
                "active": counts['products_active'],
                "low_stock": counts['products_low_stock'],
            },
            "customers": {
                "total": counts['customers_total'],
                "new_this_month": counts['customers_new_this_month'],
            },
            "subscribers": {
                "total": counts['subscribers_total'],
                "active_email": counts['subscribers_active_email'],
            },
        }

    def get_revenue_chart(self, period: str = "month") -> List[Dict[str, Any]]:
        orders = self.dashboard_repo.find_paid_orders_since(period_start(period))
        return group_revenue(orders, period)

    def get_recent_orders(self, limit: int = 5) -> List[Dict[str, Any]]:
        return [order.to_dict() for order in self.order_repo.find_recent(limit)]

    def get_top_products(self, limit: int = 5, period: str = "month") -> List[Dict[str, Any]]:
        rows = self.dashboard_repo.find_top_products(limit=limit, start_date=period_start(period))
        for row in rows:
            row['price'] = float(row['price'])
            row['total_sold'] = int(row['total_sold'] or 0)
            row['total_revenue'] = float(row['total_revenue'] or 0)
        return rows

    def get_low_stock_products(self, limit: int = 10) -> List[Dict[str, Any]]:
        products = self.product_repo.find_low_stock(limit=limit, active_only=True)
        return [product.to_dict() for product in products]

    def get_order_status_breakdown(self) -> List[Dict[str, Any]]:
        return self.dashboard_repo.get_order_status_breakdown()

    def get_customer_activity(self, period: str = "month") -> Dict[str, Any]:
        activity = self.dashboard_repo.get_customer_activity(period_start(period))
        activity['period'] = period
        return activity
