"""
Checkout Service
Turns a storefront cart into a persisted order

Handles:
- Customer lookup / creation (guest or signed-in)
- Totals (no tax or shipping yet)
- Order + items creation
- Customer lifetime stats
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from jingo.core.database import db_transaction
from jingo.domain.order import CheckoutItem, CheckoutRequest
from jingo.repositories.customer_repository import CustomerRepository
from jingo.repositories.order_repository import OrderRepository
from jingo.services.order_numbers import generate_order_number

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def calculate_totals(items: List[CheckoutItem]) -> Tuple[List[Dict], Dict[str, Decimal]]:
    """
    Price order lines

    Returns:
        (order item rows, {"subtotal", "tax_amount", "shipping_amount", "total_amount"})
    """
    rows = []
    subtotal = Decimal("0")

    for item in items:
        total_price = (item.price * item.quantity).quantize(CENT)
        subtotal += total_price
        rows.append({
            "product_id": item.product_id,
            "sku": item.sku or str(item.product_id),
            "name": item.name,
            "price": item.price.quantize(CENT),
            "quantity": item.quantity,
            "total_price": total_price,
        })

    tax_amount = Decimal("0.00")
    shipping_amount = Decimal("0.00")
    subtotal = subtotal.quantize(CENT)

    return rows, {
        "subtotal": subtotal,
        "tax_amount": tax_amount,
        "shipping_amount": shipping_amount,
        "total_amount": subtotal + tax_amount + shipping_amount,
    }


def initial_statuses(payment_method: str, now: Optional[datetime] = None) -> Dict:
    """The test method settles immediately; real gateways start pending"""
    if payment_method == "test":
        return {
            "status": "CONFIRMED",
            "payment_status": "PAID",
            "paid_at": now or datetime.now(timezone.utc),
        }
    return {"status": "PENDING", "payment_status": "PENDING", "paid_at": None}


class CheckoutService:

    def __init__(
        self,
        customer_repo: CustomerRepository = None,
        order_repo: OrderRepository = None
    ):
        self.customer_repo = customer_repo or CustomerRepository()
        self.order_repo = order_repo or OrderRepository()

    def create_order(self, request: CheckoutRequest, user_id: Optional[int] = None) -> Dict:
        """
        Create an order from a checkout request in a single transaction

        Args:
            request: Validated checkout payload
            user_id: Signed-in user, if any (guests pass None)

        Returns:
            {"success", "order_id", "order_number", "total_amount"}
        """
        shipping = request.shipping_address
        billing = request.resolved_billing_address()
        item_rows, totals = calculate_totals(request.items)

        with db_transaction() as conn:
            customer = self.customer_repo.find_by_email(request.email, conn=conn)

            if customer is None:
                customer = self.customer_repo.create({
                    "email": request.email,
                    "phone": request.phone or shipping.phone,
                    "first_name": shipping.first_name,
                    "last_name": shipping.last_name,
                    "user_id": user_id,
                }, conn=conn)

                self.customer_repo.create_address(customer.id, {
                    "type": "SHIPPING",
                    "is_default": True,
                    **shipping.model_dump(),
                }, conn=conn)
                logger.info(f"Created customer {customer.id} for {request.email}")

            elif user_id and not customer.user_id:
                self.customer_repo.update(customer.id, {"user_id": user_id}, conn=conn)
                logger.info(f"Linked customer {customer.id} to user {user_id}")

            order = self.order_repo.create({
                "order_number": generate_order_number(),
                "customer_id": customer.id,
                **totals,
                "shipping_address": shipping.model_dump_json(),
                "billing_address": billing.model_dump_json(),
                "customer_notes": request.customer_notes,
                "payment_method": request.payment_method,
                "fulfillment_status": "UNFULFILLED",
                **initial_statuses(request.payment_method),
            }, item_rows, conn=conn)

            self.customer_repo.record_order(customer.id, totals["total_amount"], conn=conn)

        logger.info(
            f"Order {order.order_number} created: {len(item_rows)} line(s), "
            f"total {totals['total_amount']}, method {request.payment_method}"
        )

        return {
            "success": True,
            "order_id": order.id,
            "order_number": order.order_number,
            "total_amount": float(order.total_amount),
        }
