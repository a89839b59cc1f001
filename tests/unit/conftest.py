"""Pytest fixtures for unit tests."""
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from orderbench import crud, models, schemas
from orderbench.database import build_engine
from orderbench.models import Base


@pytest.fixture(scope="function")
def db():
    """Create an in-memory SQLite database for unit testing."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def user(db):
    return crud.create_user(db, schemas.UserCreate(name="Benchmark User", email="benchmark@example.com", password="password"))


@pytest.fixture
def make_product(db):
    """Factory for products; skus are numbered per test."""
    counter = {"n": 0}

    def _make(price="10.00", stock=10, name=None):
        counter["n"] += 1
        n = counter["n"]
        db_product = models.Product(
            sku=f"SKU-{n:06d}", name=name or f"Product {n}", price=Decimal(price), stock=stock
        )
        db.add(db_product)
        db.commit()
        return db_product

    return _make
