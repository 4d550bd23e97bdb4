"""
Subscriber Domain Model (newsletter and SMS list)
"""
from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, Literal
from datetime import datetime


UnsubscribeType = Literal["email", "sms", "both"]


class Subscriber(BaseModel):
    id: int
    email: str
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_subscribed: bool = True
    sms_subscribed: bool = False
    source: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    unsubscribed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class SubscriberCreate(BaseModel):
    email: EmailStr
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_subscribed: bool = True
    sms_subscribed: bool = False
    source: Optional[str] = None


class SubscriberUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_subscribed: Optional[bool] = None
    sms_subscribed: Optional[bool] = None
    source: Optional[str] = None


class SubscriberImportRow(BaseModel):
    """One row of a bulk import; the source comes from the request"""
    email: EmailStr
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_subscribed: bool = True
    sms_subscribed: bool = False
