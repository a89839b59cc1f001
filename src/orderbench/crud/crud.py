from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, select, text
from decimal import Decimal
from typing import Optional
from .. import models, schemas
import hashlib
import os

PRODUCT_SORTS = {
    "recent": (models.Product.created_at.desc(), models.Product.id.desc()),
    "price_asc": (models.Product.price.asc(), models.Product.id.asc()),
    "price_desc": (models.Product.price.desc(), models.Product.id.desc()),
}

PBKDF2_ITERATIONS = 260000


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Return a `pbkdf2_sha256$<iterations>$<salt>$<hash>` string."""
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def user_exists(db: Session, user_id: int) -> bool:
    return db.query(models.User.id).filter(models.User.id == user_id).first() is not None


def create_user(db: Session, user: schemas.UserCreate):
    db_user = models.User(name=user.name, email=user.email, password=hash_password(user.password))
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_user)
    return db_user


def get_product(db: Session, product_id: int):
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def get_product_stock(db: Session, product_id: int) -> Optional[int]:
    return db.execute(
        select(models.Product.stock).where(models.Product.id == product_id)
    ).scalar_one_or_none()


def _filtered_products(
    db: Session,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
):
    query = db.query(models.Product)
    if search:
        # leading wildcard cannot use the name index
        query = query.filter(models.Product.name.like(f"%{search}%"))
    if min_price is not None:
        query = query.filter(models.Product.price >= min_price)
    if max_price is not None:
        query = query.filter(models.Product.price <= max_price)
    return query


def get_products(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sort: str = "recent",
):
    order_by = PRODUCT_SORTS.get(sort, PRODUCT_SORTS["recent"])
    return (
        _filtered_products(db, search, min_price, max_price)
        .order_by(*order_by)
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_products(
    db: Session,
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
) -> int:
    return _filtered_products(db, search, min_price, max_price).count()


def get_order(db: Session, order_id: int):
    return db.query(models.Order).filter(models.Order.id == order_id).first()


def database_version(db: Session) -> str:
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        # "PostgreSQL 16.2 on x86_64-pc-linux-gnu, ..."
        raw = db.execute(text("SELECT version()")).scalar_one()
        parts = raw.split(" ")
        return parts[1] if len(parts) > 1 else "Unknown"
    if dialect == "sqlite":
        return db.execute(text("SELECT sqlite_version()")).scalar_one()
    return db.execute(text("SELECT VERSION()")).scalar_one()


def database_stats(db: Session) -> dict:
    return {
        "users": db.query(func.count(models.User.id)).scalar(),
        "products": db.query(func.count(models.Product.id)).scalar(),
        "orders": db.query(func.count(models.Order.id)).scalar(),
        "products_in_stock": db.query(func.count(models.Product.id)).filter(models.Product.stock > 0).scalar(),
    }


def reset_database(db: Session):
    # order matters due to foreign key constraints
    db.query(models.Order).delete()
    db.query(models.Product).delete()
    db.query(models.User).delete()
    db.commit()
