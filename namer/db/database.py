# /namer/db/database.py

from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from ..core.config import DATABASE_URL

# The 'check_same_thread' argument is only needed for SQLite.
engine_args = {"connect_args": {"check_same_thread": False}} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, **engine_args)

# Each instance of this class is a database session.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# All model classes inherit from this.
Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column in the schema stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Dependency to get a DB session for the API routers.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
