"""
Database models (schema definition)

Importing this package registers every table on `Base.metadata`.
"""
from .user import User
from .customer import Customer, Address
from .product import Category, Product, ProductImage
from .order import Order, OrderItem
from .subscriber import Subscriber

__all__ = [
    "User",
    "Customer",
    "Address",
    "Category",
    "Product",
    "ProductImage",
    "Order",
    "OrderItem",
    "Subscriber",
]
