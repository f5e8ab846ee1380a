"""
Fulfillment Value Objects
=========================

Immutable value objects for the fulfillment domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from config import OrderStatus, UrgencyTier, TERMINAL_STATUSES, DEFAULT_ESTIMATED_DAYS
from fulfillment.domain import lifecycle
from fulfillment.domain.entities import (
    DesignOrder, DesignPackage, DeadlineWindow, UrgencyAssessment
)

logger = logging.getLogger(__name__)

URGENT_WINDOW_FRACTION = 0.25


# ========== SLA Configuration ==========

class _Policy(BaseModel):
    """
    Base for SLA policy sections.

    Each field falls back to its default when the stored value is missing
    or invalid, so an admin typo never takes the calculator down.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("*", mode="wrap")
    @classmethod
    def _fallback_to_default(cls, value: Any, handler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            default = cls.model_fields[info.field_name].get_default(call_default_factory=True)
            logger.warning(
                "Invalid SLA policy value, using default",
                extra={
                    "policy": cls.__name__,
                    "field": info.field_name,
                    "value": repr(value),
                    "default": repr(default),
                }
            )
            return default


class DesignNewPolicy(_Policy):
    """Production window for new design orders."""
    # Admin form toggle; deadlines are computed either way.
    enabled: bool = True
    use_package_estimate: bool = Field(default=True, alias="usePackageEstimate")
    default_days: float = Field(default=5, alias="defaultDays", gt=0)


class DesignRevisionPolicy(_Policy):
    """Window granted for one client revision cycle."""
    enabled: bool = True
    percent_of_original: float = Field(default=50, alias="percentOfOriginal", ge=0, le=100)
    min_hours: float = Field(default=24, alias="minHours", gt=0)


class NotificationPolicy(_Policy):
    """
    Alert threshold for deadline notifications, in percent of the window.

    Parsed and exposed for the notification sender; queue urgency tiers
    always use the fixed last quarter.
    """
    warning_percent: float = Field(default=25, alias="warningPercent", ge=0, le=100)


class SLAConfig(_Policy):
    """
    SLA configuration for design orders.

    Supplied fresh on every computation; the engine never caches it.
    Keys the engine does not use (ticket, migration, ...) are ignored.
    """
    design_new: DesignNewPolicy = Field(default_factory=DesignNewPolicy)
    design_revision: DesignRevisionPolicy = Field(default_factory=DesignRevisionPolicy)
    notifications: NotificationPolicy = Field(default_factory=NotificationPolicy)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SLAConfig":
        """
        Build a config from a stored mapping.

        None, partial or camelCase mappings are all accepted; anything that
        is not a mapping yields the all-defaults config.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            logger.warning(
                "SLA configuration is not a mapping, using defaults",
                extra={"config_type": type(data).__name__}
            )
            return cls()
        return cls.model_validate(dict(data))


# ========== Calculations ==========

def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SLACalculator:
    """
    Pure functions for design-order SLA calculations.

    Stateless utility class - the operator queue and the customer status
    page both call these with the same snapshot and get the same answer.
    """

    @staticmethod
    def is_complete(order: DesignOrder) -> bool:
        """See lifecycle.is_complete."""
        return lifecycle.is_complete(order)

    @staticmethod
    def estimated_days(package: Optional[DesignPackage], config: SLAConfig) -> float:
        """
        Production estimate in days for an order's package.

        Missing or non-positive package estimates use the product default.
        """
        policy = config.design_new
        if not policy.use_package_estimate:
            return policy.default_days
        if package is None or not package.estimated_days or package.estimated_days <= 0:
            return DEFAULT_ESTIMATED_DAYS
        return package.estimated_days

    @staticmethod
    def revision_days(estimated_days: float, config: SLAConfig) -> float:
        """
        Length of a revision cycle in days.

        A percentage of the original estimate, floored at min_hours.

        Example:
            estimated 10 days, 50%, min 24h -> max(5, 1) = 5 days
            estimated 1 day, 10%, min 48h   -> max(0.1, 2) = 2 days
        """
        policy = config.design_revision
        revision_days = estimated_days * policy.percent_of_original / 100
        min_days = policy.min_hours / 24
        return max(revision_days, min_days)

    @staticmethod
    def compute_deadline(
        order: DesignOrder,
        package: Optional[DesignPackage],
        config: Optional[SLAConfig],
        now: datetime
    ) -> Optional[DeadlineWindow]:
        """
        Calculate the target deadline and window for an open order.

        Args:
            order: Order snapshot
            package: The order's package (None if not found in the catalog)
            config: SLA configuration (None means all defaults)
            now: Evaluation instant, injected by the caller

        Returns:
            DeadlineWindow, or None when the order is complete, terminal
            or has an unrecognised status. The policy `enabled` flags are
            admin-form state only and never change eligibility.
        """
        if config is None:
            config = SLAConfig()

        status = order.status
        if not lifecycle.is_known_status(status):
            return None
        if status in TERMINAL_STATUSES or lifecycle.is_complete(order):
            return None

        estimated_days = SLACalculator.estimated_days(package, config)

        if status == OrderStatus.REVISION_REQUESTED:
            days = SLACalculator.revision_days(estimated_days, config)
            anchor = order.updated_at
            is_revision_cycle = True
        else:
            days = estimated_days
            anchor = order.created_at
            is_revision_cycle = False

        # Anchors in the future (clock skew) count as zero elapsed time.
        now = _as_utc(now)
        anchor = min(_as_utc(anchor), now)

        window = timedelta(days=days)
        return DeadlineWindow(
            deadline=anchor + window,
            window=window,
            is_revision_cycle=is_revision_cycle
        )

    @staticmethod
    def classify_urgency(
        deadline: datetime,
        window: timedelta,
        now: datetime
    ) -> UrgencyAssessment:
        """
        Classify how urgent an open order is.

        - overdue: deadline has passed (remaining < 0)
        - urgent:  inside the last quarter of the window
        - normal:  otherwise

        The urgent threshold is strict: exactly 25% remaining is normal.
        It is fixed; notifications.warning_percent only drives alerts.
        """
        remaining = _as_utc(deadline) - _as_utc(now)

        if remaining < timedelta(0):
            tier = UrgencyTier.OVERDUE
        elif remaining < window * URGENT_WINDOW_FRACTION:
            tier = UrgencyTier.URGENT
        else:
            tier = UrgencyTier.NORMAL

        return UrgencyAssessment(tier=tier, remaining=remaining)

    @staticmethod
    def sort_queue(orders: Iterable[DesignOrder]) -> List[DesignOrder]:
        """
        Order the operator work queue, most pressing first.

        1. Open orders before complete ones
        2. Open: revision_requested, then pending, then every other status
        3. Open orders oldest first; complete orders newest first
        Ties keep their input order.
        """
        return sorted(orders, key=_queue_key)


_OPEN_STATUS_RANK = {
    OrderStatus.REVISION_REQUESTED: 0,
    OrderStatus.PENDING: 1,
}
_OTHER_OPEN_RANK = 2


def _queue_key(order: DesignOrder) -> tuple:
    created = _as_utc(order.created_at).timestamp()
    if lifecycle.is_complete(order):
        return (1, 0, -created)
    return (0, _OPEN_STATUS_RANK.get(order.status, _OTHER_OPEN_RANK), created)
