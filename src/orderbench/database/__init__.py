from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool, QueuePool

import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./database.db")


def build_engine(url: str = DATABASE_URL, echo: bool = False):
    """Create an engine tuned for the backend named in `url`.

    SQLite gets WAL and a busy timeout so concurrent writers queue up instead
    of failing; server databases (PostgreSQL, MariaDB/MySQL) get a connection
    pool and an explicit isolation level.
    """
    if url.startswith("sqlite"):
        in_memory = url in ("sqlite://", "sqlite:///:memory:")
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            # a memory database only lives as long as its single connection
            poolclass=StaticPool if in_memory else None,
            pool_pre_ping=True,
            echo=echo,
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.close()

        return engine

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
        pool_pre_ping=True,
        pool_recycle=3600,
        isolation_level=os.getenv("DB_ISOLATION_LEVEL", "READ COMMITTED"),
        echo=echo,
    )


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for getting database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
