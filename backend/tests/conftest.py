"""
Pytest fixtures and configuration for Jingo Jump backend tests

Repository tests patch the psycopg2 connection factory; API tests use
TestClient with dependency overrides, so no database is needed.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from jingo.core.auth import TokenUser, get_current_user, get_current_user_optional
from jingo.core.rate_limit import rate_limiter
from jingo.main import app


@pytest.fixture
def product_row():
    """
    A products row as returned by RealDictCursor
    """
    return {
        'id': 1,
        'sku': 'JJ-BH-001',
        'name': 'Tropical Bounce House',
        'slug': 'tropical-bounce-house',
        'description': 'Commercial grade bounce house',
        'price': Decimal('1899.00'),
        'sale_price': None,
        'cost_price': Decimal('950.00'),
        'category': 'Bounce Houses',
        'category_id': 3,
        'subcategory': None,
        'stock_quantity': 4,
        'low_stock_threshold': 5,
        'track_inventory': True,
        'gradient': None,
        'badge': 'POPULAR',
        'featured': True,
        'size': "13' x 13'",
        'age_range': '6-8 riders',
        'weight': 210.0,
        'dimensions': None,
        'model_number': 'BH-001',
        'warranty': '1 year',
        'pieces': 1,
        'blowers': 1,
        'operators': 1,
        'riders': '6-8',
        'indoor': True,
        'outdoor': True,
        'power': None,
        'voltage': None,
        'frequency': None,
        'phase': None,
        'rpm': None,
        'amps': None,
        'status': 'ACTIVE',
        'meta_title': None,
        'meta_description': None,
        'published_at': datetime(2025, 1, 10, tzinfo=timezone.utc),
        'created_at': datetime(2025, 1, 10, tzinfo=timezone.utc),
        'updated_at': None,
    }


@pytest.fixture
def order_row():
    return {
        'id': 10,
        'order_number': 'JJ-2025-ABC234',
        'customer_id': 7,
        'subtotal': Decimal('3798.00'),
        'tax_amount': Decimal('0.00'),
        'shipping_amount': Decimal('0.00'),
        'total_amount': Decimal('3798.00'),
        'shipping_address': '{"first_name": "Ana", "last_name": "Lopez", "address1": "1 Main St", '
                            '"city": "Miami", "state": "FL", "postal_code": "33101", "country": "US"}',
        'billing_address': 'not json',
        'status': 'CONFIRMED',
        'payment_status': 'PAID',
        'fulfillment_status': 'UNFULFILLED',
        'payment_method': 'test',
        'shipping_method': None,
        'tracking_number': None,
        'tracking_carrier': None,
        'tracking_url': None,
        'customer_notes': None,
        'internal_notes': None,
        'paid_at': datetime(2025, 2, 1, tzinfo=timezone.utc),
        'shipped_at': None,
        'delivered_at': None,
        'cancelled_at': None,
        'created_at': datetime(2025, 2, 1, tzinfo=timezone.utc),
        'updated_at': None,
    }


@pytest.fixture
def shipping_address():
    return {
        "first_name": "Ana",
        "last_name": "Lopez",
        "address1": "1 Main St",
        "city": "Miami",
        "state": "FL",
        "postal_code": "33101",
    }


@pytest.fixture
def client():
    """TestClient with a clean rate limiter and no dependency overrides left behind"""
    rate_limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    rate_limiter.reset()


def _override_user(role: str, user_id: int = 1):
    user = TokenUser(id=user_id, email=f"{role.lower()}@jingojump.com", name=role.title(), role=role)

    async def current_user():
        return user

    app.dependency_overrides[get_current_user] = current_user
    app.dependency_overrides[get_current_user_optional] = current_user
    return user


@pytest.fixture
def as_customer(client):
    return _override_user("CUSTOMER", user_id=42)


@pytest.fixture
def as_staff(client):
    return _override_user("STAFF", user_id=2)


@pytest.fixture
def as_manager(client):
    return _override_user("MANAGER", user_id=3)
