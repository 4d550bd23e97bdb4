"""
Address Domain Models

Addresses exist in two forms: saved customer addresses (rows in `addresses`)
and snapshots stored on orders as JSON text.
"""
import json
import logging
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

AddressType = Literal["SHIPPING", "BILLING"]


class AddressFields(BaseModel):
    """Core postal address fields shared by checkout, account and admin forms"""
    first_name: str = Field(..., min_length=1, description="First name is required")
    last_name: str = Field(..., min_length=1, description="Last name is required")
    company: Optional[str] = None
    address1: str = Field(..., min_length=1, description="Address is required")
    address2: Optional[str] = None
    city: str = Field(..., min_length=1, description="City is required")
    state: str = Field(..., min_length=1, description="State is required")
    postal_code: str = Field(..., min_length=1, description="Postal code is required")
    country: str = "US"
    phone: Optional[str] = None


class FallbackAddress(BaseModel):
    """Empty address returned when a stored snapshot cannot be read"""
    first_name: str = ""
    last_name: str = ""
    company: Optional[str] = None
    address1: str = ""
    address2: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "US"
    phone: Optional[str] = None


def parse_address_json(text: Optional[str]):
    """
    Parse an address snapshot stored on an order.

    Returns an AddressFields when the JSON is valid, otherwise a
    FallbackAddress with empty fields and country "US".
    """
    try:
        data = json.loads(text)
        return AddressFields.model_validate(data)
    except (TypeError, ValueError, ValidationError) as e:
        logger.warning(f"Unreadable address snapshot, using fallback: {str(e)[:100]}")
        return FallbackAddress()


class Address(BaseModel):
    """Saved customer address"""
    id: int
    customer_id: int
    type: AddressType = "SHIPPING"
    is_default: bool = False
    first_name: str
    last_name: str
    company: Optional[str] = None
    address1: str
    address2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str = "US"
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class AccountAddressCreate(AddressFields):
    """Address added by a customer from their account"""
    type: AddressType
    is_default: bool = False


class AddressUpdate(BaseModel):
    """Partial address update"""
    type: Optional[AddressType] = None
    is_default: Optional[bool] = None
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    address1: Optional[str] = Field(None, min_length=1)
    address2: Optional[str] = None
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    postal_code: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = None
    phone: Optional[str] = None

    @field_validator(
        "type", "is_default", "first_name", "last_name", "address1", "city", "state", "postal_code", "country",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v):
        # Omit a field to keep it; these columns are NOT NULL
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class AdminAddressCreate(AddressFields):
    """Address added by staff on behalf of a customer"""
    customer_id: int
    type: AddressType = "SHIPPING"
    is_default: bool = False


class AdminAddressUpdate(AddressUpdate):
    customer_id: Optional[int] = None
