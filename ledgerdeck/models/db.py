"""
SQLAlchemy ORM models for the SQL-backed ledger.

The ledger is append-only: every write adds a row, nothing is updated or
deleted. The current value of a key is its newest row.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class LedgerEntryDB(Base):
    """
    One write to the ledger.

    ``id`` doubles as the revision number returned in write receipts.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), index=True)
    value: Mapped[bytes] = mapped_column(LargeBinary)
    written_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<LedgerEntryDB(id={self.id}, key={self.key})>"
