"""
Fulfillment Domain Layer
========================

Domain layer for the design-order fulfillment module.

Contains:
- Entities: Order/package snapshots and derived assessments
- Lifecycle: The fixed status state machine and completion predicate
- Value Objects: SLA configuration (SLAConfig and its policies)
- Domain Services: Stateless calculations (SLACalculator)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from fulfillment.domain.entities import (
    DesignOrder,
    DesignPackage,
    DeadlineWindow,
    UrgencyAssessment,
    OrderAssessment,
)
from fulfillment.domain import lifecycle
from fulfillment.domain.value_objects import (
    SLACalculator,
    SLAConfig,
    DesignNewPolicy,
    DesignRevisionPolicy,
    NotificationPolicy,
)

# Plain-function entry points for consumers
is_complete = SLACalculator.is_complete
compute_deadline = SLACalculator.compute_deadline
classify_urgency = SLACalculator.classify_urgency
sort_queue = SLACalculator.sort_queue

__all__ = [
    # Entities
    "DesignOrder",
    "DesignPackage",
    "DeadlineWindow",
    "UrgencyAssessment",
    "OrderAssessment",
    # Lifecycle
    "lifecycle",
    # Value Objects & Services
    "SLACalculator",
    "SLAConfig",
    "DesignNewPolicy",
    "DesignRevisionPolicy",
    "NotificationPolicy",
    # Operations
    "is_complete",
    "compute_deadline",
    "classify_urgency",
    "sort_queue",
]
