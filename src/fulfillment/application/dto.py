"""
Fulfillment Application DTOs
============================

Data Transfer Objects for the fulfillment API layer.

These Pydantic models handle serialization/deserialization and validation
for API requests and responses.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from fulfillment.domain import OrderAssessment, lifecycle


# ========== Type Aliases for Literals ==========
UrgencyTierStr = Literal["overdue", "urgent", "normal"]
QueueTabStr = Literal[
    "all", "pending", "in_progress", "delivered",
    "revision", "completed", "approved", "cancelled"
]


# ========== Response DTOs ==========

class OrderStatusResponse(BaseModel):
    """Derived status of a single order, shared by both views."""
    order_id: str
    status: str = Field(..., description="Stored lifecycle status")
    display_status: str = Field(..., description="Stored status, or 'completed'")
    is_complete: bool
    payment_status: str
    package_id: Optional[str] = None
    package_name: Optional[str] = None
    category_id: Optional[str] = None
    revisions_used: int
    max_revisions: int
    revisions_remaining: int
    can_request_revision: bool
    can_approve: bool
    created_at: datetime
    updated_at: datetime

    # SLA information (absent when the order is not deadline-eligible)
    deadline: Optional[datetime] = Field(None, description="Target completion deadline")
    window_seconds: Optional[float] = Field(None, description="Total SLA window")
    is_revision_cycle: bool = False
    urgency: Optional[UrgencyTierStr] = None
    remaining_seconds: Optional[float] = Field(
        None,
        description="Time until the deadline (negative when overdue)"
    )

    @classmethod
    def from_assessment(cls, assessment: OrderAssessment) -> "OrderStatusResponse":
        order = assessment.order
        package = assessment.package
        deadline = assessment.deadline
        urgency = assessment.urgency
        return cls(
            order_id=order.id,
            status=order.status,
            display_status=assessment.display_status,
            is_complete=assessment.is_complete,
            payment_status=order.payment_status,
            package_id=order.package_id,
            package_name=package.name if package else None,
            category_id=package.category_id if package else None,
            revisions_used=order.revisions_used,
            max_revisions=order.max_revisions,
            revisions_remaining=lifecycle.revisions_remaining(order),
            can_request_revision=lifecycle.can_request_revision(order),
            can_approve=lifecycle.can_approve(order),
            created_at=order.created_at,
            updated_at=order.updated_at,
            deadline=deadline.deadline if deadline else None,
            window_seconds=deadline.window.total_seconds() if deadline else None,
            is_revision_cycle=deadline.is_revision_cycle if deadline else False,
            urgency=urgency.tier if urgency else None,
            remaining_seconds=urgency.remaining_seconds if urgency else None,
        )


class QueueSummary(BaseModel):
    """Counts across the whole snapshot, independent of tab and paging."""
    total_orders: int
    pending_count: int
    in_progress_count: int
    delivered_count: int = Field(..., description="Delivered and still awaiting the client")
    revision_count: int
    completed_count: int
    cancelled_count: int
    overdue_count: int
    urgent_count: int
    unknown_status_count: int = 0


class QueueResponse(BaseModel):
    """Operator queue, most pressing work first."""
    orders: List[OrderStatusResponse]
    total_count: int = Field(..., description="Orders matching the tab and category")
    summary: QueueSummary
    evaluated_at: datetime = Field(..., description="Instant used for every urgency calculation")
