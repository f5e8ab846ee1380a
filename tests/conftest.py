# ==== SHARED TEST FIXTURES AND CONFIGURATION ==== #

"""
Shared fixtures for the fulfillment test suites.

Every test works from a fixed base_time; nothing reads the wall clock.
Repositories are in-memory fakes of the application interfaces.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

import pytest

# Set environment variables BEFORE importing any app modules
os.environ.update({
    "ENVIRONMENT": "development",
    "LOG_LEVEL": "WARNING",
    "WATCH_SLA_CONFIG": "false",
})

from config import OrderStatus, PaymentStatus  # noqa: E402
from fulfillment.application import (  # noqa: E402
    FulfillmentService, IOrderRepository, IPackageCatalog, ISLAConfigProvider
)
from fulfillment.domain import DesignOrder, DesignPackage, SLAConfig  # noqa: E402


# ==== IN-MEMORY COLLABORATORS ==== #


class InMemoryOrderRepository(IOrderRepository):
    def __init__(self, orders: Iterable[DesignOrder] = ()):
        self.orders: List[DesignOrder] = list(orders)
        self.list_calls = 0

    async def get_by_id(self, order_id: str) -> Optional[DesignOrder]:
        return next((o for o in self.orders if o.id == order_id), None)

    async def list_orders(self) -> List[DesignOrder]:
        self.list_calls += 1
        return list(self.orders)


class InMemoryPackageCatalog(IPackageCatalog):
    def __init__(self, packages: Iterable[DesignPackage] = ()):
        self.packages: Dict[str, DesignPackage] = {p.id: p for p in packages}

    async def get_packages(self, package_ids: Iterable[str]) -> Dict[str, DesignPackage]:
        return {pid: self.packages[pid] for pid in package_ids if pid in self.packages}


class StaticConfigProvider(ISLAConfigProvider):
    def __init__(self, config: Optional[SLAConfig] = None):
        self.config = config or SLAConfig()

    def get_config(self) -> SLAConfig:
        return self.config


# ==== TIME AND FACTORY FIXTURES ==== #


@pytest.fixture
def base_time() -> datetime:
    """Fixed evaluation anchor shared by all time-based tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_package():
    def _make(id: str = "pkg-logo", estimated_days: Optional[int] = 10, **kwargs) -> DesignPackage:
        kwargs.setdefault("name", "Logo Essentials")
        kwargs.setdefault("category_id", "cat-brand")
        return DesignPackage(id=id, estimated_days=estimated_days, **kwargs)
    return _make


@pytest.fixture
def make_order(base_time):
    def _make(
        id: str = "ord-1",
        status: str = OrderStatus.PENDING,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        **kwargs
    ) -> DesignOrder:
        created_at = created_at or base_time
        kwargs.setdefault("package_id", "pkg-logo")
        kwargs.setdefault("payment_status", PaymentStatus.PAID)
        return DesignOrder(
            id=id,
            status=status,
            created_at=created_at,
            updated_at=updated_at or created_at,
            **kwargs
        )
    return _make


@pytest.fixture
def default_config() -> SLAConfig:
    return SLAConfig()


@pytest.fixture
def sample_orders(make_order, base_time) -> List[DesignOrder]:
    """
    A small studio queue, evaluated at base_time + 8 days with the
    10-day logo package:

    - ord-pending:   created 9 days ago        -> urgent
    - ord-progress:  created 12 days ago       -> overdue
    - ord-revision:  revision requested today  -> normal
    - ord-done:      delivered, revisions used -> completed
    - ord-approved:  approved                  -> completed
    - ord-cancelled: cancelled                 -> no deadline
    - ord-weird:     unknown stored status     -> no deadline
    """
    now = base_time + timedelta(days=8)
    return [
        make_order("ord-pending", OrderStatus.PENDING, created_at=now - timedelta(days=9)),
        make_order("ord-progress", OrderStatus.IN_PROGRESS, created_at=now - timedelta(days=12)),
        make_order(
            "ord-revision", OrderStatus.REVISION_REQUESTED,
            created_at=now - timedelta(days=20), updated_at=now, revisions_used=1
        ),
        make_order(
            "ord-done", OrderStatus.DELIVERED,
            created_at=now - timedelta(days=30), revisions_used=2, max_revisions=2
        ),
        make_order("ord-approved", OrderStatus.APPROVED, created_at=now - timedelta(days=40)),
        make_order("ord-cancelled", OrderStatus.CANCELLED, created_at=now - timedelta(days=2)),
        make_order("ord-weird", "on_hold", created_at=now - timedelta(days=3), package_id="pkg-poster"),
    ]


@pytest.fixture
def sample_packages(make_package) -> List[DesignPackage]:
    return [
        make_package("pkg-logo", 10),
        make_package("pkg-poster", 3, name="Poster", category_id="cat-print"),
    ]


@pytest.fixture
def service(sample_orders, sample_packages) -> FulfillmentService:
    return FulfillmentService(
        InMemoryOrderRepository(sample_orders),
        InMemoryPackageCatalog(sample_packages),
        StaticConfigProvider()
    )
