"""
Live database and storage checks

Run against a real environment configured in backend/.env:
    JINGO_INTEGRATION=1 pytest backend/tests/test_integration
"""
import os

import pytest
from dotenv import load_dotenv
from sqlalchemy import create_engine, text

from jingo.services.storage_service import StorageService

load_dotenv()

pytestmark = pytest.mark.skipif(
    not os.getenv("JINGO_INTEGRATION"),
    reason="JINGO_INTEGRATION not set"
)

EXPECTED_TABLES = [
    "addresses",
    "categories",
    "customers",
    "order_items",
    "orders",
    "product_images",
    "products",
    "subscribers",
    "users",
]


@pytest.fixture(scope="module")
def engine():
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not configured")
    return create_engine(database_url, pool_pre_ping=True)


def test_select_one(engine):
    with engine.connect() as conn:
        assert conn.execute(text("SELECT 1")).scalar() == 1


def test_schema_tables_exist(engine):
    with engine.connect() as conn:
        result = conn.execute(text("""
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'public'
            AND table_type = 'BASE TABLE'
        """))
        existing_tables = {row[0] for row in result}

    missing_tables = [table for table in EXPECTED_TABLES if table not in existing_tables]
    assert missing_tables == [], f"Run scripts/init_db.py; missing tables: {missing_tables}"


def test_storage_bucket_listable():
    if not os.getenv("SUPABASE_URL") or not os.getenv("SUPABASE_SERVICE_ROLE_KEY"):
        pytest.skip("Supabase credentials not configured")

    assert isinstance(StorageService().list_product_images(0), list)
