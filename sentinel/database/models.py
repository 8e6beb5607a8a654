"""
sentinel.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- greeted_members — members who already received the one-time greeting
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Sentinel ORM models."""


# ---------------------------------------------------------------------------
# Greeting ledger
# ---------------------------------------------------------------------------
class GreetedMember(Base):
    """One row per member id that has been greeted (or grandfathered in)."""

    __tablename__ = "greeted_members"

    member_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    greeted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<GreetedMember member_id={self.member_id}>"
