"""
Order Domain Models

Represents orders, their line items, and the payloads used to create them.
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional, List, Literal
from datetime import datetime
from decimal import Decimal

from jingo.domain.address import AddressFields, parse_address_json


OrderStatus = Literal[
    "PENDING", "CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED", "REFUNDED"
]
PaymentStatus = Literal["PENDING", "PAID", "FAILED", "REFUNDED", "PARTIALLY_REFUNDED"]
FulfillmentStatus = Literal["UNFULFILLED", "PARTIALLY_FULFILLED", "FULFILLED"]
PaymentMethod = Literal["test", "stripe", "paypal"]


class OrderItem(BaseModel):
    """
    Order line - product data is snapshotted at order time

    Fields:
        product_id: Catalog product
        sku / name / price: Snapshot at order time
        quantity: Units ordered
        total_price: price * quantity

        # From product catalog (optional, from JOIN)
        product_slug: Current product slug
        product_image: First product image URL
    """

    id: int = Field(..., description="Order item ID")
    order_id: int = Field(..., description="Parent order ID")
    product_id: int = Field(..., description="Product catalog ID")
    sku: Optional[str] = Field(None, description="SKU at order time")
    name: str = Field(..., description="Product name at order time")
    price: Decimal = Field(..., description="Unit price", ge=0)
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    total_price: Decimal = Field(..., description="Line total", ge=0)

    product_slug: Optional[str] = None
    product_image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()

        for field in ['price', 'total_price']:
            if data.get(field) is not None:
                data[field] = float(data[field])

        return data


class OrderCustomer(BaseModel):
    """Customer summary embedded in order responses"""
    id: Optional[int] = None
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class Order(BaseModel):
    """
    Order domain model

    Shipping and billing addresses are JSON text snapshots; `to_dict`
    returns them parsed.
    """

    id: int = Field(..., description="Internal order ID")
    order_number: str = Field(..., description="Human-readable order number (JJ-YYYY-XXXXXX)")
    customer_id: int = Field(..., description="Customer ID")

    # Amounts
    subtotal: Decimal = Field(..., ge=0)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    shipping_amount: Decimal = Field(Decimal("0"), ge=0)
    total_amount: Decimal = Field(..., ge=0)

    # Address snapshots (JSON text)
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None

    # Statuses
    status: OrderStatus = "PENDING"
    payment_status: PaymentStatus = "PENDING"
    fulfillment_status: FulfillmentStatus = "UNFULFILLED"
    payment_method: Optional[str] = None

    # Shipping
    shipping_method: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_carrier: Optional[str] = None
    tracking_url: Optional[str] = None

    customer_notes: Optional[str] = None
    internal_notes: Optional[str] = None

    paid_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Related data (optional)
    customer: Optional[OrderCustomer] = None
    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat()
        }
    )

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "PAID"

    def to_dict(self) -> dict:
        data = self.model_dump()

        data['items'] = [item.to_dict() for item in self.items]
        data['total_quantity'] = self.total_quantity
        data['is_paid'] = self.is_paid

        for field in ['shipping_address', 'billing_address']:
            if data.get(field) is not None:
                data[field] = parse_address_json(data[field]).model_dump()

        for field in ['subtotal', 'tax_amount', 'shipping_amount', 'total_amount']:
            if data.get(field) is not None:
                data[field] = float(data[field])

        return data


# ============================================================================
# Input payloads
# ============================================================================

class CheckoutItem(BaseModel):
    product_id: int
    name: str
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    sku: Optional[str] = None


class CheckoutRequest(BaseModel):
    """Storefront checkout (guest or signed-in)"""
    email: EmailStr
    phone: Optional[str] = None

    shipping_address: AddressFields
    billing_address: Optional[AddressFields] = None
    same_as_shipping: bool = True

    items: List[CheckoutItem] = Field(..., min_length=1, description="Cart cannot be empty")

    customer_notes: Optional[str] = None
    payment_method: PaymentMethod = "test"

    def resolved_billing_address(self) -> AddressFields:
        if self.same_as_shipping:
            return self.shipping_address
        return self.billing_address or self.shipping_address


class ManualOrderItem(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class ManualOrderCreate(BaseModel):
    """Order entered by staff; lines are priced from the catalog"""
    customer_id: int
    items: List[ManualOrderItem] = Field(..., min_length=1)
    shipping_address: str
    billing_address: str
    shipping_method: Optional[str] = None
    customer_notes: Optional[str] = None
    internal_notes: Optional[str] = None
