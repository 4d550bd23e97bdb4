"""
Category Domain Model
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class Category(BaseModel):
    """Catalog category, ordered by position"""
    id: int = Field(..., description="Category ID")
    name: str = Field(..., description="Unique display name")
    slug: str = Field(..., description="Unique URL slug")
    description: Optional[str] = None
    image: Optional[str] = None
    position: int = 0
    featured: bool = False
    product_count: int = Field(0, description="Products linked to this category")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    # 0 means "append after the last category"
    position: int = Field(0, ge=0)
    featured: bool = False


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    position: Optional[int] = Field(None, ge=0)
    featured: Optional[bool] = None


class CategoryPosition(BaseModel):
    id: int
    position: int = Field(..., ge=0)
