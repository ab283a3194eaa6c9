"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for stores, their staff, shifts and inventory logs.

This module defines:
- Role: Enum for user roles
- Category: Enum for inventory categories
- Store: A retail store
- User: A store employee
- TimeCard: One scheduled work shift of a user
- InventoryUpdateRecord: An inventory change logged during a shift

Database Schema:
---------------

    ┌──────────────────────────────┐
    │            stores            │
    ├──────────────────────────────┤
    │ id (INTEGER, PK)             │
    │ store_name (UNIQUE)          │
    │ store_location               │
    └──────────────┬───────────────┘
                   │ 1:N
                   ▼
    ┌──────────────────────────────┐
    │            users             │
    ├──────────────────────────────┤
    │ user_code (INTEGER, PK)      │
    │ kakao_email (UNIQUE)         │
    │ user_name, user_profile_code │
    │ role (WORKER / MANAGER)      │
    │ phone_number, work_time,     │
    │ work_place                   │
    │ store_id (FK → stores.id)    │
    └──────────────┬───────────────┘
                   │ 1:N
                   ▼
    ┌──────────────────────────────┐
    │          time_cards          │
    ├──────────────────────────────┤
    │ id (INTEGER, PK)             │
    │ year, month, day (VARCHAR)   │
    │ work_time ("HH:MM~HH:MM")    │
    │ work_hour (FLOAT)            │
    │ user_code (FK → users)       │
    └──────────────┬───────────────┘
                   │ 1:N (CASCADE DELETE)
                   ▼
    ┌──────────────────────────────┐
    │   inventory_update_records   │
    ├──────────────────────────────┤
    │ id (INTEGER, PK)             │
    │ inventory_name, category     │
    │ prev_count, change_count     │
    │ user_name, user_profile_code │
    │ store_id (FK → stores.id)    │
    │ time_card_id (FK)            │
    │ created_at (DATETIME, local) │
    └──────────────────────────────┘

=============================================================================
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, relationship

from storeledger.db.database import Base
from storeledger.utils.clock import now_local


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, enum.Enum):
    """
    User role enumeration.

    - WORKER: Logs inventory changes during their own shifts
    - MANAGER: Everything a worker can do, plus maintenance operations
    """

    WORKER = "worker"
    MANAGER = "manager"

    def __str__(self) -> str:
        return self.value


class Category(str, enum.Enum):
    """Inventory categories tracked per store."""

    CIGARETTE = "cigarette"
    GARBAGE_BAG = "garbage_bag"
    GIFT_CARD = "gift_card"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# STORE MODEL
# =============================================================================

class Store(Base):
    """A retail store. Users, and through them time cards, belong to a store."""

    __tablename__ = "stores"

    id: int = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Store identifier"
    )

    store_name: str = Column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique store name"
    )

    store_location: Optional[str] = Column(
        String(255),
        nullable=True,
        doc="Street address"
    )

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="store",
        doc="Employees of this store"
    )

    def __repr__(self) -> str:
        return f"Store(id={self.id!r}, store_name={self.store_name!r})"


# =============================================================================
# USER MODEL
# =============================================================================

class User(Base):
    """
    Store employee.

    Users are identified by their Kakao e-mail, which is also the subject of
    the access tokens the API accepts.
    """

    __tablename__ = "users"

    user_code: int = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="User identifier"
    )

    kakao_email: str = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Kakao account e-mail (token subject)"
    )

    user_name: str = Column(
        String(50),
        nullable=False,
        doc="Display name"
    )

    user_profile_code: int = Column(
        Integer,
        default=1,
        nullable=False,
        doc="Avatar code shown next to the user's records"
    )

    role: Role = Column(
        Enum(Role),
        default=Role.WORKER,
        nullable=False,
        doc="User role"
    )

    phone_number: Optional[str] = Column(String(20), nullable=True)

    work_time: Optional[str] = Column(
        String(50),
        nullable=True,
        doc="Usual work time, free text"
    )

    work_place: Optional[str] = Column(
        String(100),
        nullable=True,
        doc="Usual work place, free text"
    )

    store_id: Optional[int] = Column(
        Integer,
        ForeignKey("stores.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Store the user works at"
    )

    store: Mapped[Optional["Store"]] = relationship(
        "Store",
        back_populates="users",
    )

    time_cards: Mapped[List["TimeCard"]] = relationship(
        "TimeCard",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_manager(self) -> bool:
        """Check if user has the manager role."""
        return self.role == Role.MANAGER

    def __repr__(self) -> str:
        return (
            f"User(user_code={self.user_code!r}, "
            f"kakao_email={self.kakao_email!r}, "
            f"role={self.role.value if self.role else None!r})"
        )


# =============================================================================
# TIME CARD MODEL
# =============================================================================

class TimeCard(Base):
    """
    One scheduled shift.

    Date parts are stored as the strings the client sends ("2023", "3", "1")
    and ``work_time`` as "HH:MM~HH:MM", where an hour of 24 means midnight.
    """

    __tablename__ = "time_cards"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    year: str = Column(String(4), nullable=False)

    month: str = Column(String(2), nullable=False)

    day: str = Column(String(2), nullable=False)

    work_time: str = Column(
        String(20),
        nullable=False,
        doc="Shift span, e.g. '09:00~18:00' or '22:00~24:00'"
    )

    work_hour: Optional[float] = Column(Float, nullable=True)

    user_code: int = Column(
        Integer,
        ForeignKey("users.user_code", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="time_cards")

    records: Mapped[List["InventoryUpdateRecord"]] = relationship(
        "InventoryUpdateRecord",
        back_populates="time_card",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"TimeCard(id={self.id!r}, "
            f"date={self.year}-{self.month}-{self.day}, "
            f"work_time={self.work_time!r})"
        )


# =============================================================================
# INVENTORY UPDATE RECORD MODEL
# =============================================================================

class InventoryUpdateRecord(Base):
    """
    An inventory change logged by a user during a shift.

    The author's name and profile code are copied onto the record so the
    history still renders after the user changes or leaves.
    """

    __tablename__ = "inventory_update_records"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    inventory_name: str = Column(
        String(100),
        nullable=False,
        doc="Name of the inventory item"
    )

    category: Category = Column(
        Enum(Category),
        nullable=False,
        index=True,
    )

    prev_count: int = Column(Integer, default=0, nullable=False)

    change_count: int = Column(
        Integer,
        default=0,
        nullable=False,
        doc="Signed change applied to prev_count"
    )

    user_name: str = Column(String(50), nullable=False)

    user_profile_code: int = Column(Integer, default=1, nullable=False)

    store_id: int = Column(
        Integer,
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    time_card_id: int = Column(
        Integer,
        ForeignKey("time_cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: datetime = Column(
        DateTime,
        default=now_local,
        nullable=False,
        index=True,
        doc="Store-local time the change was logged"
    )

    store: Mapped["Store"] = relationship("Store")

    time_card: Mapped["TimeCard"] = relationship(
        "TimeCard",
        back_populates="records",
    )

    def __repr__(self) -> str:
        return (
            f"InventoryUpdateRecord(id={self.id!r}, "
            f"inventory_name={self.inventory_name!r}, "
            f"category={self.category.value if self.category else None!r}, "
            f"change_count={self.change_count!r})"
        )
