"""
Customer Domain Model
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from jingo.domain.address import Address


class Customer(BaseModel):
    """
    Customer profile - one per email

    A customer may exist without a user account (guest checkout) and is
    linked to a user once they sign in and place an order.
    """

    id: int = Field(..., description="Customer ID")
    email: str = Field(..., description="Unique email")
    first_name: str
    last_name: str
    phone: Optional[str] = None
    company: Optional[str] = None
    user_id: Optional[int] = Field(None, description="Linked user account")

    email_marketing: bool = False
    sms_marketing: bool = False

    total_orders: int = 0
    total_spent: Decimal = Decimal("0")
    last_order_at: Optional[datetime] = None

    notes: Optional[str] = None
    tags: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Related data (optional)
    order_count: Optional[int] = None
    addresses: List[Address] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['full_name'] = self.full_name
        if data.get('total_spent') is not None:
            data['total_spent'] = float(data['total_spent'])
        return data


class CustomerCreate(BaseModel):
    email: EmailStr
    phone: Optional[str] = None
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    company: Optional[str] = None
    email_marketing: bool = False
    sms_marketing: bool = False
    notes: Optional[str] = None
    tags: Optional[str] = None


class CustomerUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    email_marketing: Optional[bool] = None
    sms_marketing: Optional[bool] = None
    notes: Optional[str] = None
    tags: Optional[str] = None
