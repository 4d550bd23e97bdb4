"""
Product Domain Model

Represents a commercial inflatable in the Jingo Jump catalog.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime
from decimal import Decimal


ProductStatus = Literal["DRAFT", "ACTIVE", "ARCHIVED"]

# Columns a client may write; repositories build INSERT/UPDATE from these
PRODUCT_WRITABLE_FIELDS = (
    "sku", "name", "slug", "description",
    "price", "sale_price", "cost_price",
    "category", "category_id", "subcategory",
    "stock_quantity", "low_stock_threshold", "track_inventory",
    "gradient", "badge", "featured",
    "size", "age_range", "weight", "dimensions", "model_number", "warranty",
    "pieces", "blowers", "operators", "riders", "indoor", "outdoor",
    "power", "voltage", "frequency", "phase", "rpm", "amps",
    "status", "meta_title", "meta_description",
)

MONEY_FIELDS = ("price", "sale_price", "cost_price")


class ProductImage(BaseModel):
    """Image attached to a product, ordered by position"""
    id: int
    product_id: int
    url: str
    alt: Optional[str] = None
    position: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryRef(BaseModel):
    """Lightweight category embedded in product listings"""
    id: int
    name: str
    slug: str


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        sku / name / slug: identity (sku and slug are unique)
        price / sale_price / cost_price: pricing in USD
        category: display name, category_id: catalog link
        stock_quantity / low_stock_threshold / track_inventory: inventory
        size ... amps: specifications scraped from the legacy store
        status: DRAFT, ACTIVE or ARCHIVED (only ACTIVE is public)

        # Related data (optional, from JOINs)
        images: product images ordered by position
        category_ref: linked category
        order_item_count: number of order lines referencing this product
    """

    id: int = Field(..., description="Internal product ID")
    sku: str = Field(..., description="Stock Keeping Unit")
    name: str = Field(..., description="Product name")
    slug: str = Field(..., description="URL slug")
    description: Optional[str] = Field(None, description="Product description")

    # Pricing
    price: Decimal = Field(..., description="List price", ge=0)
    sale_price: Optional[Decimal] = Field(None, description="Sale price", ge=0)
    cost_price: Optional[Decimal] = Field(None, description="Cost price", ge=0)

    # Categorization
    category: Optional[str] = Field(None, description="Category display name")
    category_id: Optional[int] = Field(None, description="Category ID")
    subcategory: Optional[str] = None

    # Inventory
    stock_quantity: int = Field(0, description="Units in stock")
    low_stock_threshold: int = Field(5, description="Low stock alert threshold", ge=0)
    track_inventory: bool = Field(True, description="Whether stock is tracked")

    # Display
    gradient: Optional[str] = None
    badge: Optional[str] = None
    featured: bool = False

    # Specifications
    size: Optional[str] = None
    age_range: Optional[str] = None
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    model_number: Optional[str] = None
    warranty: Optional[str] = None
    pieces: Optional[int] = None
    blowers: Optional[int] = None
    operators: Optional[int] = None
    riders: Optional[str] = None
    indoor: Optional[bool] = None
    outdoor: Optional[bool] = None
    power: Optional[str] = None
    voltage: Optional[str] = None
    frequency: Optional[str] = None
    phase: Optional[str] = None
    rpm: Optional[int] = None
    amps: Optional[float] = None

    status: ProductStatus = Field("DRAFT", description="Publication status")

    # SEO
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None

    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Related data
    images: List[ProductImage] = Field(default_factory=list)
    category_ref: Optional[CategoryRef] = None
    order_item_count: Optional[int] = None

    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat()
        }
    )

    @property
    def is_low_stock(self) -> bool:
        """Tracked and at or below the threshold"""
        return self.track_inventory and self.stock_quantity <= self.low_stock_threshold

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['is_low_stock'] = self.is_low_stock

        for field in MONEY_FIELDS:
            if data.get(field) is not None:
                data[field] = float(data[field])

        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    category: str = Field(..., min_length=1)
    category_id: Optional[int] = None
    subcategory: Optional[str] = None
    stock_quantity: int = Field(0, ge=0)
    low_stock_threshold: int = Field(5, ge=0)
    track_inventory: bool = True
    gradient: Optional[str] = None
    badge: Optional[str] = None
    featured: bool = False
    size: Optional[str] = None
    age_range: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Optional[str] = None
    model_number: Optional[str] = None
    warranty: Optional[str] = None
    pieces: Optional[int] = None
    blowers: Optional[int] = None
    operators: Optional[int] = None
    riders: Optional[str] = None
    indoor: Optional[bool] = None
    outdoor: Optional[bool] = None
    power: Optional[str] = None
    voltage: Optional[str] = None
    frequency: Optional[str] = None
    phase: Optional[str] = None
    rpm: Optional[int] = None
    amps: Optional[float] = None
    status: ProductStatus = "DRAFT"
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class ProductUpdate(BaseModel):
    """Schema for updating an existing product (only provided fields change)"""
    sku: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = None
    subcategory: Optional[str] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    track_inventory: Optional[bool] = None
    gradient: Optional[str] = None
    badge: Optional[str] = None
    featured: Optional[bool] = None
    size: Optional[str] = None
    age_range: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Optional[str] = None
    model_number: Optional[str] = None
    warranty: Optional[str] = None
    pieces: Optional[int] = None
    blowers: Optional[int] = None
    operators: Optional[int] = None
    riders: Optional[str] = None
    indoor: Optional[bool] = None
    outdoor: Optional[bool] = None
    power: Optional[str] = None
    voltage: Optional[str] = None
    frequency: Optional[str] = None
    phase: Optional[str] = None
    rpm: Optional[int] = None
    amps: Optional[float] = None
    status: Optional[ProductStatus] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
