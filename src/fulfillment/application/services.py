"""
Fulfillment Application Services
================================

Application services orchestrate the pure fulfillment rules over a
snapshot fetched from the repositories.

Following SOLID principles:
- Single Responsibility: FulfillmentService only composes read views
- Dependency Inversion: Depend on abstractions (repositories), not concrete implementations
"""

from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from config import OrderStatus, DisplayStatus, QueueTab, UrgencyTier
from core import ResourceNotFoundException
from fulfillment.application.dto import (
    OrderStatusResponse, QueueResponse, QueueSummary
)
from fulfillment.domain import (
    DesignOrder, DesignPackage, OrderAssessment,
    SLACalculator, SLAConfig, lifecycle
)
from shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IOrderRepository(ABC):
    """Read-only access to design orders."""

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[DesignOrder]:
        """Get order by ID."""

    @abstractmethod
    async def list_orders(self) -> List[DesignOrder]:
        """Snapshot of every design order."""


class IPackageCatalog(ABC):
    """Read-only access to catalog packages."""

    @abstractmethod
    async def get_packages(self, package_ids: Iterable[str]) -> Dict[str, DesignPackage]:
        """Packages keyed by ID; unknown IDs are simply absent."""


class ISLAConfigProvider(ABC):
    """Interface for SLA configuration access."""

    @abstractmethod
    def get_config(self) -> SLAConfig:
        """Get current SLA configuration."""


# ========== Application Services ==========

_TAB_STATUS = {
    QueueTab.PENDING: OrderStatus.PENDING,
    QueueTab.IN_PROGRESS: OrderStatus.IN_PROGRESS,
    QueueTab.DELIVERED: OrderStatus.DELIVERED,
    QueueTab.REVISION: OrderStatus.REVISION_REQUESTED,
    QueueTab.COMPLETED: DisplayStatus.COMPLETED,
    QueueTab.CANCELLED: OrderStatus.CANCELLED,
}


class FulfillmentService:
    """
    Builds the operator queue and the customer status view.

    Both views go through assess(), so for the same snapshot and `now`
    they always agree on completion, deadline and urgency.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        package_catalog: IPackageCatalog,
        config_provider: ISLAConfigProvider
    ):
        self._order_repo = order_repository
        self._package_catalog = package_catalog
        self._config_provider = config_provider

    @staticmethod
    def assess(
        order: DesignOrder,
        package: Optional[DesignPackage],
        config: SLAConfig,
        now: datetime
    ) -> OrderAssessment:
        """Run completion, deadline and urgency for one order."""
        if not lifecycle.is_known_status(order.status):
            logger.warning(
                "Design order has unknown status, skipping SLA",
                extra={"order_id": order.id, "status": order.status}
            )
        elif order.status == OrderStatus.REVISION_REQUESTED and lifecycle.revisions_exhausted(order):
            logger.warning(
                "Revision requested with no revisions remaining",
                extra={
                    "order_id": order.id,
                    "revisions_used": order.revisions_used,
                    "max_revisions": order.max_revisions
                }
            )

        deadline = SLACalculator.compute_deadline(order, package, config, now)
        urgency = None
        if deadline is not None:
            urgency = SLACalculator.classify_urgency(deadline.deadline, deadline.window, now)

        return OrderAssessment(
            order=order,
            package=package,
            display_status=lifecycle.display_status(order),
            is_complete=lifecycle.is_complete(order),
            deadline=deadline,
            urgency=urgency
        )

    async def get_order_status(self, order_id: str, now: datetime) -> OrderStatusResponse:
        """
        Customer status view for a single order.

        Raises:
            ResourceNotFoundException: If the order does not exist
        """
        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundException("Design order", order_id)

        packages = await self._package_catalog.get_packages(
            [order.package_id] if order.package_id else []
        )
        assessment = self.assess(
            order,
            packages.get(order.package_id) if order.package_id else None,
            self._config_provider.get_config(),
            now
        )
        return OrderStatusResponse.from_assessment(assessment)

    async def build_queue(
        self,
        now: datetime,
        tab: str = QueueTab.ALL,
        category_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> QueueResponse:
        """
        Operator queue: sorted, filtered, paginated, with summary counts.

        Args:
            now: Evaluation instant shared by every order in the response
            tab: Queue tab (see config.QueueTab)
            category_id: Only orders whose package is in this category
            limit: Page size
            offset: Page offset
        """
        config = self._config_provider.get_config()
        orders = await self._order_repo.list_orders()
        packages = await self._package_catalog.get_packages(
            {o.package_id for o in orders if o.package_id}
        )

        assessments = [
            self.assess(order, packages.get(order.package_id), config, now)
            for order in SLACalculator.sort_queue(orders)
        ]

        summary = self._summarize(assessments)

        matching = [
            a for a in assessments
            if self._matches_tab(a, tab)
            and (category_id is None or (a.package is not None and a.package.category_id == category_id))
        ]
        page = matching[offset:offset + limit]

        logger.info(
            "Operator queue built",
            extra={
                "tab": tab,
                "category_id": category_id,
                "total_orders": summary.total_orders,
                "matching": len(matching),
                "overdue": summary.overdue_count,
                "urgent": summary.urgent_count
            }
        )

        return QueueResponse(
            orders=[OrderStatusResponse.from_assessment(a) for a in page],
            total_count=len(matching),
            summary=summary,
            evaluated_at=now
        )

    @staticmethod
    def _matches_tab(assessment: OrderAssessment, tab: str) -> bool:
        if tab == QueueTab.ALL:
            return True
        if tab == QueueTab.APPROVED:
            return assessment.order.status == OrderStatus.APPROVED
        return assessment.display_status == _TAB_STATUS.get(tab)

    @staticmethod
    def _summarize(assessments: List[OrderAssessment]) -> QueueSummary:
        by_display = Counter(a.display_status for a in assessments)
        by_urgency = Counter(a.urgency.tier for a in assessments if a.urgency)
        unknown = sum(1 for a in assessments if not lifecycle.is_known_status(a.order.status))

        return QueueSummary(
            total_orders=len(assessments),
            pending_count=by_display[OrderStatus.PENDING],
            in_progress_count=by_display[OrderStatus.IN_PROGRESS],
            delivered_count=by_display[OrderStatus.DELIVERED],
            revision_count=by_display[OrderStatus.REVISION_REQUESTED],
            completed_count=by_display[DisplayStatus.COMPLETED],
            cancelled_count=by_display[OrderStatus.CANCELLED],
            overdue_count=by_urgency[UrgencyTier.OVERDUE],
            urgent_count=by_urgency[UrgencyTier.URGENT],
            unknown_status_count=unknown
        )
