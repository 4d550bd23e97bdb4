"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from jingo.repositories.product_repository import ProductRepository
from jingo.repositories.category_repository import CategoryRepository
from jingo.repositories.order_repository import OrderRepository
from jingo.repositories.customer_repository import CustomerRepository
from jingo.repositories.subscriber_repository import SubscriberRepository
from jingo.repositories.user_repository import UserRepository
from jingo.repositories.dashboard_repository import DashboardRepository

__all__ = [
    'ProductRepository',
    'CategoryRepository',
    'OrderRepository',
    'CustomerRepository',
    'SubscriberRepository',
    'UserRepository',
    'DashboardRepository',
]
