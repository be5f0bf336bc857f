import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from rentshop.core.db import close_db, init_db
from rentshop.services.customer_service import create_customer
from rentshop.services.inventory_service import create_item


@pytest_asyncio.fixture
async def db(tmp_path):
    """A fresh SQLite store per test."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'rentshop-test.db'}")
    yield
    await close_db()


@pytest.fixture
def client():
    """Client without lifespan: no database, services are patched per test."""
    from rentshop.main import app
    return TestClient(app)


@pytest.fixture
def live_client(tmp_path, monkeypatch):
    """Client running the real lifespan against a throwaway SQLite file."""
    from rentshop import main
    monkeypatch.setattr(main, "DB_URL", f"sqlite+aiosqlite:///{tmp_path / 'rentshop-api.db'}")
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def make_customer():
    async def _make(name="John Doe", phone="01700000000", **extra):
        return await create_customer(name=name, phone=phone, **extra)
    return _make


@pytest.fixture
def make_item():
    async def _make(name="LED Par Light", daily_rent_price="100", total_quantity=10, selling_price=None, **extra):
        return await create_item(
            name=name,
            daily_rent_price=daily_rent_price,
            total_quantity=total_quantity,
            selling_price=selling_price,
            **extra,
        )
    return _make
