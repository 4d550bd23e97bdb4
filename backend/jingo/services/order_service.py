"""
Order Service
Back-office order workflow: status transitions, payment, tracking, notes
and manually entered orders
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from jingo.core.database import db_transaction
from jingo.core.exceptions import NotFoundError
from jingo.domain.order import ManualOrderCreate, Order
from jingo.repositories.customer_repository import CustomerRepository
from jingo.repositories.order_repository import OrderRepository
from jingo.repositories.product_repository import ProductRepository
from jingo.services.checkout_service import CENT
from jingo.services.date_ranges import start_of_day, start_of_month, utc_now
from jingo.services.notes import append_note
from jingo.services.order_numbers import generate_order_number

logger = logging.getLogger(__name__)


def status_changes(status: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Columns to write when an order moves to `status`

    SHIPPED also stamps shipped_at and marks the order FULFILLED;
    DELIVERED and CANCELLED stamp their own timestamps.
    """
    now = now or datetime.now(timezone.utc)
    changes: Dict[str, Any] = {"status": status}

    if status == "SHIPPED":
        changes["shipped_at"] = now
        changes["fulfillment_status"] = "FULFILLED"
    elif status == "DELIVERED":
        changes["delivered_at"] = now
    elif status == "CANCELLED":
        changes["cancelled_at"] = now

    return changes


def payment_changes(payment_status: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """PAID also stamps paid_at and confirms the order"""
    changes: Dict[str, Any] = {"payment_status": payment_status}
    if payment_status == "PAID":
        changes["paid_at"] = now or datetime.now(timezone.utc)
        changes["status"] = "CONFIRMED"
    return changes


class OrderService:

    def __init__(
        self,
        order_repo: OrderRepository = None,
        customer_repo: CustomerRepository = None,
        product_repo: ProductRepository = None
    ):
        self.order_repo = order_repo or OrderRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.product_repo = product_repo or ProductRepository()

    def get(self, order_id: int) -> Order:
        order = self.order_repo.find_by_id(order_id, with_product=True)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def _update(self, order_id: int, changes: Dict[str, Any]) -> Order:
        order = self.order_repo.update(order_id, changes)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def update_status(self, order_id: int, status: str) -> Order:
        order = self._update(order_id, status_changes(status))
        logger.info(f"Order {order.order_number} status -> {status}")
        return order

    def update_payment_status(self, order_id: int, payment_status: str) -> Order:
        order = self._update(order_id, payment_changes(payment_status))
        logger.info(f"Order {order.order_number} payment -> {payment_status}")
        return order

    def add_tracking(
        self,
        order_id: int,
        tracking_number: str,
        tracking_carrier: Optional[str] = None,
        tracking_url: Optional[str] = None
    ) -> Order:
        return self._update(order_id, {
            "tracking_number": tracking_number,
            "tracking_carrier": tracking_carrier,
            "tracking_url": tracking_url,
            "status": "SHIPPED",
            "fulfillment_status": "FULFILLED",
            "shipped_at": datetime.now(timezone.utc),
        })

    def add_note(self, order_id: int, note: str) -> Order:
        order = self.order_repo.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return self._update(order_id, {"internal_notes": append_note(order.internal_notes, note)})

    def get_stats(self) -> Dict[str, Any]:
        now = utc_now()
        return self.order_repo.get_stats(start_of_day(now), start_of_month(now))

    def create_manual(self, data: ManualOrderCreate) -> Order:
        """
        Create an order entered by staff

        Lines are priced from the catalog. Raises NotFoundError for an
        unknown customer or product.
        """
        if self.customer_repo.find_by_id(data.customer_id) is None:
            raise NotFoundError("Customer not found")

        products = self.product_repo.find_by_ids([item.product_id for item in data.items])

        item_rows = []
        subtotal = Decimal("0")
        for item in data.items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundError(f"Product {item.product_id} not found")

            price = product.price.quantize(CENT)
            total_price = (price * item.quantity).quantize(CENT)
            subtotal += total_price
            item_rows.append({
                "product_id": product.id,
                "sku": product.sku,
                "name": product.name,
                "price": price,
                "quantity": item.quantity,
                "total_price": total_price,
            })

        subtotal = subtotal.quantize(CENT)

        with db_transaction() as conn:
            order = self.order_repo.create({
                "order_number": generate_order_number(),
                "customer_id": data.customer_id,
                "subtotal": subtotal,
                "tax_amount": Decimal("0.00"),
                "shipping_amount": Decimal("0.00"),
                "total_amount": subtotal,
                "shipping_address": data.shipping_address,
                "billing_address": data.billing_address,
                "shipping_method": data.shipping_method,
                "customer_notes": data.customer_notes,
                "internal_notes": data.internal_notes,
                "status": "PENDING",
                "payment_status": "PENDING",
                "fulfillment_status": "UNFULFILLED",
            }, item_rows, conn=conn)

            self.customer_repo.record_order(data.customer_id, conn=conn)

        logger.info(f"Manual order {order.order_number} created for customer {data.customer_id}")
        return order
