"""
Fulfillment Domain Entities
===========================

Pure Python domain entities for design-order fulfillment.

Orders and packages are read-only snapshots handed to the engine by the
order repository and package catalog. Deadline, urgency and completion are
derived from them on demand and never written back.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from config import PaymentStatus, UrgencyTier, DEFAULT_MAX_REVISIONS


@dataclass(frozen=True)
class DesignPackage:
    """
    Catalog package an order was bought from.

    estimated_days may be absent; the calculator falls back to a default.
    """
    id: str
    name: str = ""
    category_id: Optional[str] = None
    price: Decimal = Decimal("0")
    estimated_days: Optional[int] = None


@dataclass(frozen=True)
class DesignOrder:
    """
    Snapshot of a design-production order.

    status is kept as the raw stored string so unknown values survive the
    trip from the database and can be reported instead of crashing.
    """

    id: str
    status: str
    created_at: datetime
    updated_at: datetime
    package_id: Optional[str] = None
    payment_status: str = PaymentStatus.PENDING
    revisions_used: int = 0
    max_revisions: int = DEFAULT_MAX_REVISIONS
    client_id: Optional[str] = None


@dataclass(frozen=True)
class DeadlineWindow:
    """
    Target completion deadline and the total window it closes.

    window is the denominator for urgency classification.
    """
    deadline: datetime
    window: timedelta
    is_revision_cycle: bool = False

    @property
    def window_ms(self) -> int:
        return int(self.window.total_seconds() * 1000)

    @property
    def starts_at(self) -> datetime:
        return self.deadline - self.window


@dataclass(frozen=True)
class UrgencyAssessment:
    """Urgency tier plus the signed time left until the deadline."""
    tier: UrgencyTier
    remaining: timedelta

    @property
    def remaining_seconds(self) -> float:
        return self.remaining.total_seconds()

    @property
    def is_overdue(self) -> bool:
        return self.tier == UrgencyTier.OVERDUE


@dataclass(frozen=True)
class OrderAssessment:
    """
    Everything the operator queue and the customer page show for one order.

    Built by the same pure functions for both consumers so the two views
    cannot disagree.
    """
    order: DesignOrder
    package: Optional[DesignPackage]
    display_status: str
    is_complete: bool
    deadline: Optional[DeadlineWindow] = None
    urgency: Optional[UrgencyAssessment] = None
