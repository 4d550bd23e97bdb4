"""
Catalog models: categories, products and product images
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, DECIMAL, Float, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jingo.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)
    image = Column(String(1024))
    position = Column(Integer, default=0, nullable=False)
    featured = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    products = relationship("Product", back_populates="category_ref")


class Product(Base):
    """
    Commercial inflatable product

    `category` keeps the display name; `category_id` is the catalog link.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    # Identity
    sku = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)

    # Pricing
    price = Column(DECIMAL(10, 2), nullable=False)
    sale_price = Column(DECIMAL(10, 2))
    cost_price = Column(DECIMAL(10, 2))

    # Categorization
    category = Column(String(255))
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True)
    subcategory = Column(String(255))

    # Inventory
    stock_quantity = Column(Integer, default=0, nullable=False)
    low_stock_threshold = Column(Integer, default=5, nullable=False)
    track_inventory = Column(Boolean, default=True)

    # Display
    gradient = Column(String(255))
    badge = Column(String(50))
    featured = Column(Boolean, default=False, index=True)

    # Specifications
    size = Column(String(255))
    age_range = Column(String(100))
    weight = Column(Float)
    dimensions = Column(String(255))
    model_number = Column(String(100))
    warranty = Column(String(255))
    pieces = Column(Integer)
    blowers = Column(Integer)
    operators = Column(Integer)
    riders = Column(String(100))
    indoor = Column(Boolean)
    outdoor = Column(Boolean)
    power = Column(String(100))
    voltage = Column(String(100))
    frequency = Column(String(100))
    phase = Column(String(100))
    rpm = Column(Integer)
    amps = Column(Float)

    # DRAFT, ACTIVE, ARCHIVED
    status = Column(String(20), nullable=False, default="DRAFT", index=True)

    # SEO
    meta_title = Column(String(255))
    meta_description = Column(Text)

    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category_ref = relationship("Category", back_populates="products")
    images = relationship("ProductImage", back_populates="product", cascade="all, delete-orphan")
    order_items = relationship("OrderItem", back_populates="product")


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(1024), nullable=False)
    alt = Column(String(255))
    position = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="images")
