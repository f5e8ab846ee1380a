"""
Fulfillment Application Layer
=============================

Application layer for the design-order fulfillment module.

Contains:
- Services: Compose the pure domain rules over repository snapshots
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from fulfillment.application.dto import (
    OrderStatusResponse,
    QueueSummary,
    QueueResponse,
)
from fulfillment.application.services import (
    FulfillmentService,
    IOrderRepository,
    IPackageCatalog,
    ISLAConfigProvider,
)

__all__ = [
    # DTOs
    "OrderStatusResponse",
    "QueueSummary",
    "QueueResponse",
    # Services
    "FulfillmentService",
    # Repository Interfaces
    "IOrderRepository",
    "IPackageCatalog",
    "ISLAConfigProvider",
]
