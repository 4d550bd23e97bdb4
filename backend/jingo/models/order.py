"""
Orders and order line items
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jingo.core.database import Base


class Order(Base):
    """
    Customer order

    Shipping and billing addresses are stored as JSON text snapshots.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(50), nullable=False, unique=True, index=True)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    # Amounts
    subtotal = Column(DECIMAL(12, 2), nullable=False)
    tax_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    shipping_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_amount = Column(DECIMAL(12, 2), nullable=False)

    # Address snapshots
    shipping_address = Column(Text, nullable=False)
    billing_address = Column(Text, nullable=False)

    # Statuses
    status = Column(String(30), nullable=False, default="PENDING", index=True)
    payment_status = Column(String(30), nullable=False, default="PENDING", index=True)
    fulfillment_status = Column(String(30), nullable=False, default="UNFULFILLED", index=True)
    payment_method = Column(String(30))

    # Shipping
    shipping_method = Column(String(100))
    tracking_number = Column(String(255))
    tracking_carrier = Column(String(100))
    tracking_url = Column(String(1024))

    # Notes
    customer_notes = Column(Text)
    internal_notes = Column(Text)

    # Lifecycle dates
    paid_at = Column(DateTime(timezone=True))
    shipped_at = Column(DateTime(timezone=True))
    delivered_at = Column(DateTime(timezone=True))
    cancelled_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    # Snapshot at order time
    sku = Column(String(100))
    name = Column(String(255), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_price = Column(DECIMAL(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")
