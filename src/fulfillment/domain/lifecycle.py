"""
Design Order Lifecycle
======================

The fixed state machine for design orders and the completion predicate
derived from it.

Transitions are applied by the persistence layer (with an atomic
compare-and-set on the stored status). This module only describes which
moves are legal and how a stored status is interpreted for display.
"""

from typing import Dict, FrozenSet, Protocol

from config import (
    OrderStatus, DisplayStatus,
    VALID_STATUSES, TERMINAL_STATUSES, DEFAULT_MAX_REVISIONS
)
from core import InvalidTransitionException


class LifecycleFields(Protocol):
    """The three order fields the lifecycle rules read."""
    status: str
    revisions_used: int
    max_revisions: int


TRANSITIONS: Dict[str, FrozenSet[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.IN_PROGRESS}),
    OrderStatus.IN_PROGRESS: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REVISION_REQUESTED, OrderStatus.APPROVED}),
    OrderStatus.REVISION_REQUESTED: frozenset({OrderStatus.IN_PROGRESS}),
    OrderStatus.APPROVED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def is_known_status(status: str) -> bool:
    return status in VALID_STATUSES


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def revisions_exhausted(order: LifecycleFields) -> bool:
    """
    True once no revision cycles remain.

    Counts above the maximum are treated the same as reaching it.
    A missing or zero maximum falls back to the product default.
    """
    used = order.revisions_used or 0
    allowed = order.max_revisions or DEFAULT_MAX_REVISIONS
    return used >= allowed


def revisions_remaining(order: LifecycleFields) -> int:
    used = order.revisions_used or 0
    allowed = order.max_revisions or DEFAULT_MAX_REVISIONS
    return max(0, allowed - used)


def is_complete(order: LifecycleFields) -> bool:
    """
    Decide whether an order is finished for queue and status display.

    An order is complete when it was approved, or when it was delivered
    with no revision cycles left. Cancelled orders are closed but never
    complete; use is_closed() for the combined flag.
    """
    if order.status == OrderStatus.APPROVED:
        return True
    return order.status == OrderStatus.DELIVERED and revisions_exhausted(order)


def is_closed(order: LifecycleFields) -> bool:
    """Complete or cancelled: nothing left for the studio to do."""
    return is_complete(order) or order.status == OrderStatus.CANCELLED


def display_status(order: LifecycleFields) -> str:
    """Stored status, or "completed" when the order is complete."""
    if is_complete(order):
        return DisplayStatus.COMPLETED
    return order.status


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def validate_transition(current: str, target: str) -> None:
    """
    Raise InvalidTransitionException unless current -> target is legal.

    Intended for the persistence collaborator before it performs the
    compare-and-set write.
    """
    if not can_transition(current, target):
        raise InvalidTransitionException(current, target)


def can_request_revision(order: LifecycleFields) -> bool:
    return order.status == OrderStatus.DELIVERED and not revisions_exhausted(order)


def can_approve(order: LifecycleFields) -> bool:
    return order.status == OrderStatus.DELIVERED and not is_complete(order)
