"""
Pytest configuration and fixtures
"""
import os
import sys
from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Tests build their own data; keep startup from seeding or sleeping
os.environ.setdefault("CURTAINCALL_SEED_DEMO_DATA", "false")
os.environ.setdefault("CURTAINCALL_SIMULATED_LATENCY_MS", "0")

from curtaincall.core.database import Base, build_engine, get_db
from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.user import User, UserRole, UserStatus
from curtaincall.services.seed import DemoDataSeeder
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database per test"""
    import curtaincall.models  # noqa: F401

    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    """Create a database session for testing"""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """Database filled with the reproducible demo data set"""
    DemoDataSeeder(db, random_seed=42).seed_all()
    return db


@pytest.fixture
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient

    from curtaincall.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the lifespan (table creation and seeding) stays off
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def future_schedule():
    """An evening performance three days from now"""
    return (utc_now() + timedelta(days=3)).replace(hour=19, minute=30, second=0, microsecond=0)


@pytest.fixture
def user(db: Session) -> User:
    """The demo user every request acts as"""
    user = User(
        id="user1",
        name="Alice",
        email="alice@example.com",
        role=UserRole.USER.value,
        status=UserStatus.ACTIVE.value,
        booking_count=0,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def active_show(db: Session, future_schedule) -> Show:
    """Bookable show with a single future performance"""
    show = Show(
        id="show_900",
        title="Hamlet",
        cast=["Alice Ray", "Bob Smith"],
        genre="Drama",
        rating=4.5,
        description="A prince hesitates.",
        status=ShowStatus.ACTIVE.value,
        schedule=[to_iso_z(future_schedule)],
        venue="Main Hall",
    )
    db.add(show)
    db.commit()
    return show


@pytest.fixture
def upcoming_show(db: Session, future_schedule) -> Show:
    show = Show(
        id="show_901",
        title="The Tempest",
        cast=["Diana Fox"],
        genre="Comedy",
        rating=3.5,
        description="Shipwreck and magic on a remote island.",
        status=ShowStatus.UPCOMING.value,
        schedule=[to_iso_z(future_schedule + timedelta(days=30))],
        venue="Studio B",
    )
    db.add(show)
    db.commit()
    return show
