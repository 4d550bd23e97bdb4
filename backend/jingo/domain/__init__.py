"""
Domain Layer - Business Entities

Pydantic models for catalog, customer, order and cart data. Repositories
return these models and routers serialize them with `to_dict()`.
"""
from jingo.domain.product import Product, ProductImage, ProductCreate, ProductUpdate
from jingo.domain.category import Category, CategoryCreate, CategoryUpdate
from jingo.domain.address import Address, AddressFields, parse_address_json
from jingo.domain.customer import Customer, CustomerCreate, CustomerUpdate
from jingo.domain.order import Order, OrderItem, CheckoutRequest, ManualOrderCreate
from jingo.domain.subscriber import Subscriber, SubscriberCreate, SubscriberUpdate
from jingo.domain.user import User
from jingo.domain.cart import Cart, CartItem

__all__ = [
    'Product', 'ProductImage', 'ProductCreate', 'ProductUpdate',
    'Category', 'CategoryCreate', 'CategoryUpdate',
    'Address', 'AddressFields', 'parse_address_json',
    'Customer', 'CustomerCreate', 'CustomerUpdate',
    'Order', 'OrderItem', 'CheckoutRequest', 'ManualOrderCreate',
    'Subscriber', 'SubscriberCreate', 'SubscriberUpdate',
    'User',
    'Cart', 'CartItem',
]
