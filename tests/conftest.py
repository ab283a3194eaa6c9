"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Two stores, their staff, time cards and records on an in-memory ledger
database, plus bearer headers for each staff member.

==============================================================================
"""

import os

# Settings are cached on first use, so the test configuration must be in
# the environment before anything from storeledger is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RETENTION_ENABLED"] = "false"
os.environ["TIMEZONE"] = "Asia/Seoul"
os.environ["RETENTION_DAYS"] = "60"

import pytest
from typing import Generator, Dict
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from storeledger.main import app
from storeledger.db.database import Base, get_db
from storeledger.db.models import (
    Category,
    InventoryUpdateRecord,
    Role,
    Store,
    TimeCard,
    User,
)
from storeledger.core.security import get_security_manager


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# One shared connection so every session sees the same in-memory ledger
ledger_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

LedgerSession = sessionmaker(bind=ledger_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Empty ledger schema for each test."""
    Base.metadata.create_all(bind=ledger_engine)
    session = LedgerSession()
    yield session
    session.close()
    Base.metadata.drop_all(bind=ledger_engine)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client whose requests share the test's session."""
    app.dependency_overrides[get_db] = lambda: db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# STORE & USER FIXTURES
# ============================================================================

@pytest.fixture
def store(db: Session) -> Store:
    """The store most tests work in."""
    store = Store(store_name="gs25-gangnam", store_location="Seoul Gangnam-gu")
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


@pytest.fixture
def other_store(db: Session) -> Store:
    """A second store whose data must stay invisible."""
    store = Store(store_name="cu-mapo", store_location="Seoul Mapo-gu")
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


def _make_user(db: Session, store: Store, email: str, name: str, role: Role, profile: int) -> User:
    user = User(
        kakao_email=email,
        user_name=name,
        user_profile_code=profile,
        role=role,
        phone_number="010-1234-5678",
        work_time="09:00~18:00",
        work_place=store.store_name if store else None,
        store_id=store.id if store else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def worker(db: Session, store: Store) -> User:
    """A worker at the main store."""
    return _make_user(db, store, "worker@kakao.com", "Jiyoon", Role.WORKER, 2)


@pytest.fixture
def manager(db: Session, store: Store) -> User:
    """A manager at the main store."""
    return _make_user(db, store, "manager@kakao.com", "Woojin", Role.MANAGER, 3)


@pytest.fixture
def outsider(db: Session, other_store: Store) -> User:
    """A worker at the other store."""
    return _make_user(db, other_store, "outsider@kakao.com", "Minsu", Role.WORKER, 4)


# ============================================================================
# DATA HELPERS
# ============================================================================

@pytest.fixture
def make_time_card(db: Session):
    """Factory creating a time card for a user."""
    def _make(user: User, year: str, month: str, day: str, work_time: str) -> TimeCard:
        time_card = TimeCard(
            year=year,
            month=month,
            day=day,
            work_time=work_time,
            work_hour=None,
            user_code=user.user_code,
        )
        db.add(time_card)
        db.commit()
        db.refresh(time_card)
        return time_card
    return _make


@pytest.fixture
def make_record(db: Session):
    """Factory creating an inventory record on a time card."""
    def _make(
        time_card: TimeCard,
        user: User,
        inventory_name: str,
        category: Category = Category.CIGARETTE,
        created_at=None,
        change_count: int = -1,
    ) -> InventoryUpdateRecord:
        record = InventoryUpdateRecord(
            inventory_name=inventory_name,
            category=category,
            prev_count=10,
            change_count=change_count,
            user_name=user.user_name,
            user_profile_code=user.user_profile_code,
            store_id=user.store_id,
            time_card_id=time_card.id,
        )
        if created_at is not None:
            record.created_at = created_at
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    return _make


# ============================================================================
# TOKEN & HEADER FIXTURES
# ============================================================================

def _headers_for(email: str) -> Dict[str, str]:
    token = get_security_manager().create_access_token(email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def worker_headers(worker: User) -> Dict[str, str]:
    """Authorization headers for the worker."""
    return _headers_for(worker.kakao_email)


@pytest.fixture
def manager_headers(manager: User) -> Dict[str, str]:
    """Authorization headers for the manager."""
    return _headers_for(manager.kakao_email)


@pytest.fixture
def unknown_headers() -> Dict[str, str]:
    """Valid token whose subject has no account."""
    return _headers_for("nobody@kakao.com")
