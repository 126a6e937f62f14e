"""
Database configuration and session management
"""
from datetime import datetime, timezone
from typing import Generator, Optional

from sqlalchemy import DateTime, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from curtaincall.core.config import get_settings
from curtaincall.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

# Lazy initialization - don't create engine at module level
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

# Base class for models
Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """DateTime column that always round-trips timezone-aware UTC values.

    SQLite drops tzinfo on the way back, so values are normalised to naive UTC
    when written and re-tagged with UTC when read.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def get_engine() -> Engine:
    """Get or create database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url, echo=settings.log_sqlalchemy)
    return _engine


def get_session_local() -> sessionmaker:
    """Get or create session factory (lazy initialization)"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db(seed: Optional[bool] = None) -> None:
    """Create all tables and optionally fill them with demo data"""
    import curtaincall.models  # noqa: F401  (register models on Base.metadata)
    from curtaincall.services.seed import DemoDataSeeder

    settings = get_settings()
    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    if seed is None:
        seed = settings.seed_demo_data
    if not seed:
        return

    db = get_session_local()()
    try:
        seeder = DemoDataSeeder(db, random_seed=settings.seed_random_seed)
        if seeder.is_empty():
            seeder.seed_all()
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
