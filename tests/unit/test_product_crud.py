"""Unit tests for CRUD helpers on users and products."""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from orderbench import models, schemas, crud


def add_product(db, sku, name, price, created_at, stock=10):
    db_product = models.Product(sku=sku, name=name, price=Decimal(price), stock=stock, created_at=created_at)
    db.add(db_product)
    db.commit()
    return db_product


@pytest.fixture
def catalog(db):
    now = datetime(2024, 1, 1, 12, 0, 0)
    add_product(db, "SKU-000001", "Red Widget", "5.00", now - timedelta(days=3))
    add_product(db, "SKU-000002", "Blue Widget", "25.50", now - timedelta(days=2), stock=0)
    add_product(db, "SKU-000003", "Green Gadget", "99.99", now - timedelta(days=1))
    add_product(db, "SKU-000004", "Widget Deluxe", "250.00", now)


class TestUserCRUD:
    """Tests for user helpers."""

    def test_create_user_hashes_password(self, db):
        user = crud.create_user(db, schemas.UserCreate(name="Ada", email="ada@example.org", password="secret"))
        assert user.id is not None
        assert user.password != "secret"
        assert user.password.startswith("pbkdf2_sha256$")

    def test_create_user_duplicate_email_raises_integrityerror(self, db):
        data = schemas.UserCreate(name="Ada", email="ada@example.org", password="secret")
        crud.create_user(db, data)
        with pytest.raises(IntegrityError):
            crud.create_user(db, data)

    def test_user_exists(self, db, user):
        assert crud.user_exists(db, user.id) is True
        assert crud.user_exists(db, 999) is False

    def test_hash_password_is_salted(self):
        assert crud.hash_password("pw") != crud.hash_password("pw")
        assert crud.hash_password("pw", salt=b"0" * 16) == crud.hash_password("pw", salt=b"0" * 16)


class TestProductCRUD:
    """Tests for Product CRUD functions."""

    def test_get_product(self, db, catalog):
        product = crud.get_product(db, 3)
        assert product.sku == "SKU-000003"
        assert product.price == Decimal("99.99")
        assert crud.get_product_stock(db, 2) == 0

    def test_duplicate_sku_raises_integrityerror(self, db, catalog):
        with pytest.raises(IntegrityError):
            add_product(db, "SKU-000001", "Copy", "1.00", datetime(2024, 1, 2))

    def test_negative_stock_rejected_by_schema(self):
        with pytest.raises(ValueError):
            schemas.ProductBase(sku="SKU-001", name="Widget", price=Decimal("9.99"), stock=-1)

    def test_get_product_not_found(self, db):
        assert crud.get_product(db, 999) is None
        assert crud.get_product_stock(db, 999) is None


class TestProductListing:
    """Tests for filtered, sorted, paged product reads."""

    def test_default_sort_is_most_recent_first(self, db, catalog):
        result = crud.get_products(db)
        assert [p.sku for p in result] == ["SKU-000004", "SKU-000003", "SKU-000002", "SKU-000001"]

    def test_unknown_sort_falls_back_to_recent(self, db, catalog):
        result = crud.get_products(db, sort="name")
        assert result[0].sku == "SKU-000004"

    def test_sort_by_price(self, db, catalog):
        asc = [p.price for p in crud.get_products(db, sort="price_asc")]
        desc = [p.price for p in crud.get_products(db, sort="price_desc")]
        assert asc == sorted(asc)
        assert desc == sorted(desc, reverse=True)

    def test_search_matches_name_substring(self, db, catalog):
        result = crud.get_products(db, search="Widget")
        assert {p.sku for p in result} == {"SKU-000001", "SKU-000002", "SKU-000004"}
        assert crud.count_products(db, search="Widget") == 3

    def test_price_range_is_inclusive(self, db, catalog):
        result = crud.get_products(db, min_price=Decimal("25.50"), max_price=Decimal("99.99"))
        assert {p.sku for p in result} == {"SKU-000002", "SKU-000003"}

    def test_filters_combine(self, db, catalog):
        assert crud.count_products(db, search="Widget", min_price=Decimal("10")) == 2

    def test_pagination(self, db, catalog):
        page1 = crud.get_products(db, skip=0, limit=3)
        page2 = crud.get_products(db, skip=3, limit=3)
        assert len(page1) == 3
        assert len(page2) == 1
        assert crud.count_products(db) == 4


class TestDatabaseInfo:
    """Tests for the status helpers."""

    def test_database_stats(self, db, catalog, user):
        stats = crud.database_stats(db)
        assert stats == {"users": 1, "products": 4, "orders": 0, "products_in_stock": 3}

    def test_database_version_on_sqlite(self, db):
        version = crud.database_version(db)
        assert version.count(".") >= 1

    def test_reset_database(self, db, catalog, user):
        crud.reset_database(db)
        assert crud.database_stats(db) == {"users": 0, "products": 0, "orders": 0, "products_in_stock": 0}
