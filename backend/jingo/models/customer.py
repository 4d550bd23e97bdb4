"""
Customers and their saved addresses
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jingo.core.database import Base


class Customer(Base):
    """
    Customer profile - one per email, optionally linked to a user account
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50))
    company = Column(String(255))

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), unique=True, index=True)

    # Marketing consent
    email_marketing = Column(Boolean, default=False)
    sms_marketing = Column(Boolean, default=False)

    # Lifetime stats
    total_orders = Column(Integer, default=0, nullable=False)
    total_spent = Column(DECIMAL(12, 2), default=0, nullable=False)
    last_order_at = Column(DateTime(timezone=True))

    notes = Column(Text)
    tags = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="customer")
    addresses = relationship("Address", back_populates="customer", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="customer")


class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    # SHIPPING or BILLING
    type = Column(String(20), nullable=False, default="SHIPPING")
    is_default = Column(Boolean, default=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(255))
    address1 = Column(String(255), nullable=False)
    address2 = Column(String(255))
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="US")
    phone = Column(String(50))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="addresses")
