from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from finance_tracker.database import Base, get_db
from finance_tracker.main import app
from finance_tracker.models import Budget, Transaction


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_tx(
    type_: str,
    amount: float,
    category: str = "Other",
    date: str = "2024-01-15",
    created_at: datetime = datetime(2024, 1, 1, 12, 0, 0),
    id_: int = None,
) -> Transaction:
    """Unsaved Transaction for exercising the pure analytics functions."""
    return Transaction(
        id=id_,
        type=type_,
        amount_cents=round(amount * 100),
        category=category,
        date=date,
        description=f"{category} {type_}",
        created_at=created_at,
    )


def make_budget(category: str, month: str, amount: float) -> Budget:
    return Budget(category=category, month=month, amount_cents=round(amount * 100))
