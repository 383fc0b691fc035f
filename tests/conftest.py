import pytest
from fastapi.testclient import TestClient

from main import app, COUPON_DB


@pytest.fixture(autouse=True)
def _empty_store():
    """Every test starts with an empty coupon store."""
    COUPON_DB.clear()
    yield
    COUPON_DB.clear()


@pytest.fixture
def client():
    return TestClient(app)
