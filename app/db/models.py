from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

# SQLite only autoincrements INTEGER PRIMARY KEY
PK = BigInteger().with_variant(Integer(), "sqlite")
# Unscaled so a stored total always equals quantity * price as written
Money = Numeric(asdecimal=False)
Quantity = Numeric(asdecimal=False)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Quotation(Base):
    __tablename__ = "quotations"

    id: Mapped[int] = mapped_column(PK, primary_key=True, autoincrement=True)
    quotation_number: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    date: Mapped[str] = mapped_column(String, nullable=False)
    company_info: Mapped[Optional[dict]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    client_name: Mapped[str] = mapped_column(Text, nullable=False)
    client_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subtotal: Mapped[float] = mapped_column(Money, nullable=False)
    grand_total: Mapped[float] = mapped_column(Money, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), index=True
    )

    items: Mapped[List[QuotationItem]] = relationship(
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.position",
    )  # type: ignore[name-defined]


class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id: Mapped[int] = mapped_column(PK, primary_key=True, autoincrement=True)
    quotation_id: Mapped[int] = mapped_column(ForeignKey("quotations.id", ondelete="CASCADE"))
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantity: Mapped[float] = mapped_column(Quantity, nullable=False)
    price: Mapped[float] = mapped_column(Money, nullable=False)
    total: Mapped[float] = mapped_column(Money, nullable=False)

    quotation: Mapped[Quotation] = relationship(back_populates="items")
