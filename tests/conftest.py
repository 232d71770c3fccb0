"""
Shared fixtures.

Each test gets its own SQLite file database; the app's get_db dependency is
overridden to use it. Transactions there begin IMMEDIATE, so a test session
left open blocks every other session until it commits or closes. Identity
tokens are minted with the same secret the app verifies against.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="emart-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'app.db')}"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ.pop("AUTH_JWT_AUDIENCE", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker

from config.database import Base, build_engine, get_db
from common.security import create_token
from modules.catalog.models import Product
from modules.catalog.service import catalog_service
from modules.cart.models import CartItem
from main import app


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def unlocked_session_factory(engine):
    """
    Sessions on a stock pysqlite engine: the transaction starts at the first
    write, so reads hold no lock and another writer can slip in between a
    read and the write that depends on it.
    """
    eng = create_engine(engine.url, connect_args={"check_same_thread": False, "timeout": 5})
    yield sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=eng)
    eng.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(db):
    def _make(name="Office Furniture", description=None):
        category = catalog_service.create_category(db, name, description)
        db.commit()
        return category
    return _make


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(stock=5, price="10.00", name=None, category_id=None, description=None):
        counter["n"] += 1
        product = catalog_service.create_product(
            db,
            name=name or f"Product {counter['n']}",
            sku=f"SKU-{counter['n']:04d}",
            price=price,
            stock_quantity=stock,
            category_id=category_id,
            description=description,
        )
        db.commit()
        return product
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user_id="user-1"):
        return {"Authorization": f"Bearer {create_token(user_id)}"}
    return _headers


@pytest.fixture
def stock_of(db, session_factory):
    """
    Read stock through a fresh session (what another request would see).
    The test's own session is committed first so it no longer holds the
    SQLite write lock.
    """
    def _stock(product_id):
        db.commit()
        session = session_factory()
        try:
            return session.query(Product.stock_quantity).filter(Product.id == product_id).scalar()
        finally:
            session.close()
    return _stock


@pytest.fixture
def reserved_of(db, session_factory):
    """Total units of a product held across all carts."""
    def _reserved(product_id):
        db.commit()
        session = session_factory()
        try:
            return session.query(func.coalesce(func.sum(CartItem.quantity), 0)).filter(
                CartItem.product_id == product_id,
            ).scalar()
        finally:
            session.close()
    return _reserved
