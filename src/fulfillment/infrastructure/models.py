"""
Fulfillment Infrastructure Models
=================================

SQLAlchemy ORM models for the tables the fulfillment module reads.

These are the database representations of our domain entities.
They belong in the infrastructure layer, not the domain layer.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, DateTime, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from config import OrderStatus, PaymentStatus, DEFAULT_MAX_REVISIONS
from fulfillment.domain import DesignOrder, DesignPackage
from infrastructure.database import Base


class DesignPackageModel(Base):
    """
    Database model for catalog packages.

    Maps to the 'design_packages' table.
    """
    __tablename__ = "design_packages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    category_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    estimated_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def to_domain(self) -> DesignPackage:
        return DesignPackage(
            id=self.id,
            name=self.name or "",
            category_id=self.category_id,
            price=self.price if self.price is not None else Decimal("0"),
            estimated_days=self.estimated_days
        )


class DesignOrderModel(Base):
    """
    Database model for design orders.

    Maps to the 'design_orders' table. status is a plain string column;
    values outside the known lifecycle are passed through untouched.
    """
    __tablename__ = "design_orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    client_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    package_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    status: Mapped[str] = mapped_column(String(50), nullable=False, default=OrderStatus.PENDING, index=True)
    payment_status: Mapped[str] = mapped_column(String(50), nullable=False, default=PaymentStatus.PENDING)

    revisions_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_revisions: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_REVISIONS)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def to_domain(self) -> DesignOrder:
        return DesignOrder(
            id=self.id,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
            package_id=self.package_id,
            payment_status=self.payment_status,
            revisions_used=self.revisions_used or 0,
            max_revisions=self.max_revisions or DEFAULT_MAX_REVISIONS,
            client_id=self.client_id
        )
