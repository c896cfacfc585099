"""
SQLAlchemy ORM Database Configuration
Lets SQLAlchemy manage connections internally with built-in pooling.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool
from typing import Generator
from contextlib import contextmanager


# Logger
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("database")

# Settings
from coupon_service.config.settings import CouponConfigs
configs = CouponConfigs()

# Convert postgresql:// to postgresql+psycopg:// for psycopg3 driver
DATABASE_URL = configs.DATABASE_URL
if DATABASE_URL and DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)

# Base class for ORM models
Base = declarative_base()


def build_engine(url: str):
    if url.startswith("sqlite"):
        # SQLite connections are shared across FastAPI's threadpool
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=configs.DB_POOL_SIZE,       # Number of connections to maintain in pool
        max_overflow=configs.DB_MAX_OVERFLOW, # Additional connections beyond pool_size
        pool_pre_ping=True,                   # Validate connections before use
        pool_recycle=3600,                    # Recycle connections after 1 hour
        echo=False,
        connect_args={
            "keepalives_idle": 600,
            "keepalives_interval": 30,
            "keepalives_count": 3
        }
    )


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# FastAPI dependency for database sessions
def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.
    SQLAlchemy automatically manages connection pooling and lifecycle.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

logger.info(f"database_engine_initialized | dialect={engine.dialect.name}")

@contextmanager
def get_db_session():
    """
    Get database session for scripts and other non-request code, with
    transaction management.

    Yields:
        SQLAlchemy session object
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def create_tables():
    # Imported for its side effect of registering the ORM tables on Base
    from coupon_service.models import coupons  # noqa: F401
    Base.metadata.create_all(bind=engine)

def close_db_pool():
    engine.dispose()
