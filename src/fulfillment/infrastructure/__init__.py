"""
Fulfillment Infrastructure Layer
================================

Infrastructure implementations for design-order fulfillment:
- Models: SQLAlchemy ORM models
- Repositories: Read-only data access
- External: SLA policy file loading and hot reload
"""

from fulfillment.infrastructure.models import DesignOrderModel, DesignPackageModel
from fulfillment.infrastructure.repositories import (
    SQLAlchemyOrderRepository,
    SQLAlchemyPackageCatalog,
)
from fulfillment.infrastructure.external import SLAConfigManager

__all__ = [
    "DesignOrderModel",
    "DesignPackageModel",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyPackageCatalog",
    "SLAConfigManager",
]
