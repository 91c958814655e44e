import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from decimal import Decimal
from pathlib import Path

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import textile_orders.data.models  # noqa: F401
from textile_orders.data import database
from textile_orders.domain.line_item import ProductType
from textile_orders.domain.schemas import CatalogProduct


class FakeCatalogClient:
    def __init__(self):
        self.products = {}
        self.down = False

    def put(self, product_type: ProductType, product_id: int, available: int, price: str, name: str = "", inventory=None):
        self.products[(product_type, product_id)] = CatalogProduct(
            id=product_id,
            product_type=product_type,
            display_name=name or f"{product_type.value.title()} {product_id}",
            available_quantity=available,
            unit_price=Decimal(price),
            inventory_reference=inventory,
        )

    def fetch_product(self, product_type, product_id):
        if self.down:
            raise requests.ConnectionError("catalog-service unreachable")
        try:
            return self.products[(product_type, product_id)]
        except KeyError:
            raise LookupError(f"{product_type.value} product {product_id} not found in catalog")


class FakeLockService:
    def __init__(self):
        self.held = {}
        self.released = []

    def acquire_submit_lock(self, draft_id, ttl):
        if draft_id in self.held:
            return None
        token = f"token-{draft_id}"
        self.held[draft_id] = token
        return token

    def release_submit_lock(self, draft_id, token):
        if self.held.get(draft_id) == token:
            del self.held[draft_id]
            self.released.append(draft_id)
            return True
        return False

    def force_release(self, draft_id):
        self.released.append(draft_id)
        return self.held.pop(draft_id, None) is not None


class FakeNotificationService:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, order_id, order_number, customer_name):
        self.sent.append((order_id, order_number, customer_name))


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite"


@pytest.fixture(scope="session", autouse=True)
def configure_test_engine(test_db_path: Path):
    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        connect_args={"check_same_thread": False},
    )
    database.engine = engine
    database.SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    database.Base.metadata.drop_all(bind=engine)
    database.Base.metadata.create_all(bind=engine)
    yield engine
    database.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables(configure_test_engine):
    yield
    with configure_test_engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def catalog():
    fake = FakeCatalogClient()
    fake.put(ProductType.THREAD, 1, available=5, price="100.00", name="Cotton 20/1", inventory=11)
    fake.put(ProductType.FABRIC, 2, available=50, price="185.75", name="Grey Lawn", inventory=21)
    return fake


@pytest.fixture()
def locks():
    return FakeLockService()


@pytest.fixture()
def notifications():
    return FakeNotificationService()


@pytest.fixture()
def client(catalog, locks, notifications):
    from textile_orders.api.dependencies import (
        get_catalog_client,
        get_lock_service,
        get_notification_service,
    )
    from textile_orders.main import app

    app.dependency_overrides[get_catalog_client] = lambda: catalog
    app.dependency_overrides[get_lock_service] = lambda: locks
    app.dependency_overrides[get_notification_service] = lambda: notifications
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
