"""Shared fixtures: an in-memory SQLite database and a small exercise catalog."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import traincycle.models  # noqa: F401
from traincycle.db.database import Base, configure_sqlite
from traincycle.models import (
    Exercise,
    User,
    UserSettings,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_db_session(async_engine) -> AsyncSession:
    session_maker = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_user(async_db_session: AsyncSession) -> User:
    user = User(name="Test Lifter", email="lifter@example.com")
    async_db_session.add(user)
    await async_db_session.flush()
    async_db_session.add(UserSettings(
        user_id=user.id,
        fitness_goal="Build muscle mass",
        preferences={},
    ))
    await async_db_session.flush()
    return user


@pytest_asyncio.fixture
async def exercises(async_db_session: AsyncSession) -> dict[str, Exercise]:
    catalog = {
        "bench": Exercise(
            name="Barbell Bench Press",
            compound=True,
            equipment_required=["Barbell", "Bench"],
            primary_muscle="chest",
            secondary_muscles=["triceps", "shoulders"],
        ),
        "curl": Exercise(
            name="Dumbbell Curl",
            compound=False,
            equipment_required=["Dumbbells"],
            primary_muscle="biceps",
            secondary_muscles=["forearms"],
        ),
        "leg_press": Exercise(
            name="Leg Press",
            compound=True,
            equipment_required=["Machine"],
            primary_muscle="quadriceps",
            secondary_muscles=["hamstrings"],
        ),
        "plank": Exercise(
            name="Plank",
            compound=False,
            equipment_required=[],
            primary_muscle="abs",
            secondary_muscles=[],
        ),
        "pushup": Exercise(
            name="Push-up",
            compound=True,
            equipment_required=[],
            primary_muscle="chest",
            secondary_muscles=["triceps"],
        ),
        "run": Exercise(
            name="Treadmill Run",
            compound=False,
            equipment_required=["Treadmill"],
            primary_muscle="cardio",
            secondary_muscles=[],
        ),
    }
    async_db_session.add_all(catalog.values())
    await async_db_session.flush()
    return catalog
