"""SQLAlchemy ORM models for tenants and the transaction ledger."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class BusinessModel(Base):
    """Registered business and its Daraja credentials."""

    __tablename__ = "businesses"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    shortcode: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    consumer_key: Mapped[str] = mapped_column(Text, nullable=False)
    consumer_secret: Mapped[str] = mapped_column(Text, nullable=False)
    passkey: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class TransactionModel(Base):
    """Append-only record of a successful payment."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    business_shortcode: Mapped[str] = mapped_column(
        String(32), nullable=False, index=True
    )
    receipt: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[str] = mapped_column(String(32), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="SUCCESS",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
