"""
User Domain Models (accounts and auth payloads)
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from jingo.core.auth import validate_password_strength


class User(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str = "CUSTOMER"
    password_hash: Optional[str] = Field(None, exclude=True)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str = Field(..., min_length=2)
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)

    def customer_names(self):
        """
        First/last name for the linked customer profile.

        Explicit names win; otherwise the first word of `name` is the first
        name and the remaining words the last name (or the first word again).
        """
        parts = self.name.split(" ")
        first = self.first_name or parts[0]
        rest = " ".join(parts[1:])
        last = self.last_name or rest or parts[0]
        return first, last


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    email_marketing: Optional[bool] = None
    sms_marketing: Optional[bool] = None


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v: str) -> str:
        return validate_password_strength(v)
