from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Float, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, CreatedAtMixin, TimestampMixin, UUIDPkMixin


class Load(UUIDPkMixin, TimestampMixin, Base):
    """A freight load posted for transport."""
    __tablename__ = "loads"

    current_location: Mapped[str] = mapped_column(Text, nullable=False)
    destination_location: Mapped[str] = mapped_column(Text, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    weight_unit: Mapped[str] = mapped_column(Text, nullable=False)
    truck_length: Mapped[float] = mapped_column(Float, nullable=False)
    length_unit: Mapped[str] = mapped_column(Text, nullable=False)
    contact_number: Mapped[str] = mapped_column(Text, nullable=False)
    staff_contact_number: Mapped[str] = mapped_column(Text, nullable=False)
    # Canonical storage reference of the attached receipt blob
    receipt_storage_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("weight_unit IN ('kg', 'ton')", name="weight_unit"),
        CheckConstraint("length_unit IN ('m', 'ft')", name="length_unit"),
        Index("ix_loads_receipt_storage_id", "receipt_storage_id"),
        Index("ix_loads_created_at", "created_at"),
    )


class Receipt(UUIDPkMixin, CreatedAtMixin, Base):
    """A receipt uploaded without a load (standalone ledger entry)."""
    __tablename__ = "receipts"

    storage_reference: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    kind: Mapped[str] = mapped_column(Text, nullable=False, default="standalone", server_default="standalone")
