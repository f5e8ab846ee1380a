"""
Fulfillment Controllers (API Routes)
====================================

FastAPI routes for the operator queue and the customer status view.

Controllers are thin - they read the clock once per request and delegate
to FulfillmentService.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fulfillment.application import (
    FulfillmentService, ISLAConfigProvider,
    OrderStatusResponse, QueueResponse
)
from fulfillment.application.dto import QueueTabStr
from fulfillment.infrastructure import SQLAlchemyOrderRepository, SQLAlchemyPackageCatalog
from infrastructure.database import get_session
from shared.infrastructure.logging import get_context_logger, log_latency

router = APIRouter(prefix="/fulfillment", tags=["Design Order Fulfillment"])


# ========== Example payloads for Swagger ==========

ORDER_STATUS_EXAMPLE = {
    "order_id": "ord-1042",
    "status": "revision_requested",
    "display_status": "revision_requested",
    "is_complete": False,
    "payment_status": "paid",
    "package_id": "pkg-logo",
    "package_name": "Logo Essentials",
    "category_id": "cat-brand",
    "revisions_used": 1,
    "max_revisions": 2,
    "revisions_remaining": 1,
    "can_request_revision": False,
    "can_approve": False,
    "created_at": "2024-03-01T12:00:00Z",
    "updated_at": "2024-03-11T09:00:00Z",
    "deadline": "2024-03-16T09:00:00Z",
    "window_seconds": 432000.0,
    "is_revision_cycle": True,
    "urgency": "normal",
    "remaining_seconds": 259200.0
}


# ========== Dependencies ==========

def get_clock() -> datetime:
    """Single evaluation instant for the whole request."""
    return datetime.now(timezone.utc)


def get_config_provider(request: Request) -> ISLAConfigProvider:
    return request.app.state.sla_config_manager


async def get_fulfillment_service(
    session: AsyncSession = Depends(get_session),
    config_provider: ISLAConfigProvider = Depends(get_config_provider)
) -> FulfillmentService:
    """Get fulfillment service instance."""
    return FulfillmentService(
        SQLAlchemyOrderRepository(session),
        SQLAlchemyPackageCatalog(session),
        config_provider
    )


# ========== Route Handlers ==========

@router.get(
    "/queue",
    response_model=QueueResponse,
    summary="Operator work queue",
    description="""
    Design orders sorted for the operator, most pressing first.

    **Ordering**:
    1. Open orders before completed ones
    2. `revision_requested`, then `pending`, then other open statuses
    3. Open orders oldest first; completed orders newest first

    **Tabs**: `all`, `pending`, `in_progress`, `delivered`, `revision`,
    `completed`, `approved`, `cancelled`

    Every urgency in the response is computed against `evaluated_at`.
    """
)
async def get_queue(
    request: Request,
    tab: QueueTabStr = Query("all", description="Queue tab"),
    category_id: Optional[str] = Query(None, description="Filter by package category"),
    limit: int = Query(20, ge=1, le=500, description="Results per page"),
    offset: int = Query(0, ge=0, description="Page offset"),
    now: datetime = Depends(get_clock),
    service: FulfillmentService = Depends(get_fulfillment_service)
):
    logger = get_context_logger(__name__, getattr(request.state, "correlation_id", None))
    with log_latency(logger, "build_queue", tab=tab):
        return await service.build_queue(
            now, tab=tab, category_id=category_id, limit=limit, offset=offset
        )


@router.get(
    "/orders/{order_id}",
    response_model=OrderStatusResponse,
    summary="Customer order status",
    description="""
    Derived status of a single design order as shown to the customer:
    display status, remaining revisions, deadline and urgency.
    """,
    responses={
        200: {
            "description": "Order status",
            "content": {"application/json": {"example": ORDER_STATUS_EXAMPLE}}
        },
        404: {"description": "Design order not found"}
    }
)
async def get_order_status(
    order_id: str,
    now: datetime = Depends(get_clock),
    service: FulfillmentService = Depends(get_fulfillment_service)
):
    return await service.get_order_status(order_id, now)


@router.get(
    "/config",
    summary="Effective SLA configuration",
    description="SLA policy currently in force, with defaults filled in."
)
async def get_sla_config(
    config_provider: ISLAConfigProvider = Depends(get_config_provider)
):
    return config_provider.get_config().model_dump()


# Export router for inclusion in main app
fulfillment_router = router
