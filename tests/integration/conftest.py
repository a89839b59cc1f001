"""Pytest fixtures for integration tests."""
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from orderbench import crud, models, schemas
from orderbench.database import build_engine
from orderbench.models import Base
from orderbench.main import app


@pytest.fixture(scope="function")
def db():
    """Create an in-memory SQLite database for integration testing."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with a test database session."""
    def override_get_db():
        yield db

    from orderbench import database
    app.dependency_overrides[database.get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    return crud.create_user(db, schemas.UserCreate(name="Benchmark User", email="benchmark@example.com", password="password"))


@pytest.fixture
def product(db):
    db_product = models.Product(sku="SKU-000001", name="Widget", price=Decimal("19.99"), stock=10)
    db.add(db_product)
    db.commit()
    return db_product
