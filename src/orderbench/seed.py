"""Deterministic benchmark data.

Every seeder uses its own fixed `random.Random` seed so two engines seeded
separately end up with identical rows. Rows go in with bulk INSERTs of
`BATCH_SIZE`. Seed into an empty database (pass ``--reset`` to clear one).

Usage::

    DATABASE_URL=postgresql+psycopg2://... orderbench-seed --reset
"""
import argparse
import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from . import crud, database, models, schemas
from .logging_config import configure_logging

logger = logging.getLogger(__name__)

BATCH_SIZE = 500
USER_SEED = 12345
PRODUCT_SEED = 54321
ORDER_SEED = 99999

KNOWN_USER_EMAIL = "benchmark@example.com"
KNOWN_USER_NAME = "Benchmark User"
DEFAULT_PASSWORD = "password"

FIRST_NAMES = [
    "Ada", "Alan", "Barbara", "Brian", "Carla", "Dennis", "Edsger", "Frances",
    "Grace", "Guido", "Hedy", "Ivan", "Joan", "Ken", "Linus", "Margaret",
    "Niklaus", "Radia", "Shafi", "Tim",
]
LAST_NAMES = [
    "Allen", "Backus", "Cerf", "Dijkstra", "Goldwasser", "Hamilton", "Hopper",
    "Kay", "Knuth", "Lamport", "Liskov", "Lovelace", "McCarthy", "Perlman",
    "Ritchie", "Stroustrup", "Thompson", "Torvalds", "Turing", "Wirth",
]
WORDS = [
    "alpha", "bolt", "carbon", "delta", "engine", "flux", "gear", "hinge",
    "ion", "jet", "kit", "lamp", "module", "nano", "optic", "panel", "quartz",
    "relay", "sensor", "turbo", "unit", "valve", "widget", "xenon", "yoke", "zinc",
]


def _between(rng: random.Random, start: datetime, end: datetime) -> datetime:
    span = (end - start).total_seconds()
    return start + timedelta(seconds=rng.uniform(0, span))


def _sentence(rng: random.Random, words: int) -> str:
    return " ".join(rng.choice(WORDS) for _ in range(words)).capitalize() + "."


def _insert_batches(db: Session, model, rows: list) -> None:
    for start in range(0, len(rows), BATCH_SIZE):
        db.execute(insert(model), rows[start:start + BATCH_SIZE])


def seed_users(db: Session, count: int = 1000, password: str = DEFAULT_PASSWORD) -> int:
    """Upsert the known benchmark user, then bulk insert `count` users."""
    rng = random.Random(USER_SEED)
    now = datetime.now()
    # hashing is slow; every seeded user shares one hash
    hashed = crud.hash_password(password)

    known = db.query(models.User).filter(models.User.email == KNOWN_USER_EMAIL).first()
    if known:
        known.name = KNOWN_USER_NAME
        known.password = hashed
        db.flush()
    else:
        crud.create_user(db, schemas.UserCreate(name=KNOWN_USER_NAME, email=KNOWN_USER_EMAIL, password=password))

    rows = []
    for i in range(count):
        first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
        rows.append({
            "name": f"{first} {last}",
            "email": f"{first.lower()}.{last.lower()}.{i + 1}@example.org",
            "password": hashed,
            "created_at": _between(rng, now - timedelta(days=182), now),
            "updated_at": now,
        })
    _insert_batches(db, models.User, rows)
    db.commit()
    logger.info("created %d users", count)
    return count


def seed_products(db: Session, count: int = 2000) -> int:
    rng = random.Random(PRODUCT_SEED)
    now = datetime.now()
    rows = []
    for i in range(count):
        rows.append({
            "sku": f"SKU-{i + 1:06d}",
            "name": _sentence(rng, 3),
            "description": " ".join(_sentence(rng, rng.randint(6, 12)) for _ in range(3)),
            "price": Decimal(f"{rng.uniform(5, 500):.2f}"),
            "stock": rng.randint(0, 500),
            "created_at": _between(rng, now - timedelta(days=182), now),
            "updated_at": now,
        })
    _insert_batches(db, models.Product, rows)
    db.commit()
    logger.info("created %d products", count)
    return count


def seed_orders(db: Session, count: int = 1000) -> int:
    """Insert historical paid orders priced from the catalog.

    These rows do not touch stock: they stand for orders placed before the
    benchmark started.
    """
    rng = random.Random(ORDER_SEED)
    user_ids = db.scalars(select(models.User.id).order_by(models.User.id)).all()
    prices = dict(db.execute(select(models.Product.id, models.Product.price).order_by(models.Product.id)).all())
    if not user_ids or not prices:
        logger.warning("users or products not seeded, skipping orders")
        return 0

    product_ids = list(prices)
    now = datetime.now()
    rows = []
    for _ in range(count):
        product_id = rng.choice(product_ids)
        quantity = rng.randint(1, 5)
        unit_price = Decimal(prices[product_id]).quantize(Decimal("0.01"))
        rows.append({
            "user_id": rng.choice(user_ids),
            "product_id": product_id,
            "quantity": quantity,
            "unit_price": unit_price,
            "total_price": unit_price * quantity,
            "status": models.OrderStatus.PAID.value,
            "created_at": _between(rng, now - timedelta(days=91), now),
            "updated_at": now,
        })
    _insert_batches(db, models.Order, rows)
    db.commit()
    logger.info("created %d orders", count)
    return count


def seed_all(db: Session, users: int = 1000, products: int = 2000, orders: int = 1000) -> dict:
    # dependency order: orders need users and products
    return {
        "users": seed_users(db, users),
        "products": seed_products(db, products),
        "orders": seed_orders(db, orders),
    }


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed the benchmark database.")
    parser.add_argument("--users", type=int, default=1000)
    parser.add_argument("--products", type=int, default=2000)
    parser.add_argument("--orders", type=int, default=1000)
    parser.add_argument("--reset", action="store_true", help="delete existing rows first")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    models.Base.metadata.create_all(bind=database.engine)
    with database.SessionLocal() as db:
        if args.reset:
            crud.reset_database(db)
            logger.info("database reset")
        seed_all(db, users=args.users, products=args.products, orders=args.orders)


if __name__ == "__main__":
    main()
