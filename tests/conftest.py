import pytest

from tablequery.query_builder import define_table
from tablequery.settings import TableQuerySettings


@pytest.fixture
def settings():
    """Default settings, isolated from the environment and any .env file."""
    return TableQuerySettings(_env_file=None, escape_literals=False, legacy_full_join=False)


@pytest.fixture
def orders(settings):
    return define_table(
        "orders",
        ["id", "customer_id", "address_id", "order_status", "created_at"],
        primary_key="id",
        settings=settings,
    )


@pytest.fixture
def customers(settings):
    return define_table(
        "customers",
        ["id", "first_name", "last_name", "mobile_number"],
        primary_key="id",
        settings=settings,
    )


@pytest.fixture
def audit_log(settings):
    """A table without a primary key."""
    return define_table("audit_log", ["event", "created_at"], settings=settings)
