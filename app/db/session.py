"""Database engine setup.

For test runs (ENV=test) we fall back to a shared in-memory SQLite database
when DATABASE_URL is unset or points at memory, so logic tests need no server.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

raw_url = settings.DATABASE_URL

use_sqlite_memory = settings.ENV.lower() == "test" and (not raw_url or raw_url == "sqlite:///:memory:")

if use_sqlite_memory:
    raw_url = "sqlite:///file:test_db?mode=memory&cache=shared&uri=true"  # shared cache enables multiple connections
    engine = create_engine(raw_url, future=True, connect_args={"check_same_thread": False})
elif raw_url and raw_url.startswith("postgresql"):
    engine = create_engine(
        raw_url,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Verify connection health before use
    )
else:
    engine = create_engine(raw_url, future=True, connect_args={"check_same_thread": False})

SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

