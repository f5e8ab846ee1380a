"""
Fulfillment Infrastructure Repositories
=======================================

Read-only implementations of the repository interfaces using SQLAlchemy.

Every call returns immutable domain snapshots; ORM objects never leave
this module.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core import RepositoryException
from fulfillment.application import IOrderRepository, IPackageCatalog
from fulfillment.domain import DesignOrder, DesignPackage
from fulfillment.infrastructure.models import DesignOrderModel, DesignPackageModel


class SQLAlchemyOrderRepository(IOrderRepository):
    """SQLAlchemy implementation of the order repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, order_id: str) -> Optional[DesignOrder]:
        """Get order by ID."""
        stmt = select(DesignOrderModel).where(DesignOrderModel.id == order_id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to load design order {order_id}: {e}") from e

        model = result.scalar_one_or_none()
        return model.to_domain() if model else None

    async def list_orders(self) -> List[DesignOrder]:
        """Snapshot of every design order, newest first."""
        stmt = select(DesignOrderModel).order_by(DesignOrderModel.created_at.desc())
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to list design orders: {e}") from e

        return [model.to_domain() for model in result.scalars().all()]


class SQLAlchemyPackageCatalog(IPackageCatalog):
    """SQLAlchemy implementation of the package catalog."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_packages(self, package_ids: Iterable[str]) -> Dict[str, DesignPackage]:
        """Packages keyed by ID; unknown IDs are simply absent."""
        ids = {package_id for package_id in package_ids if package_id}
        if not ids:
            return {}

        stmt = select(DesignPackageModel).where(DesignPackageModel.id.in_(ids))
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to load design packages: {e}") from e

        return {model.id: model.to_domain() for model in result.scalars().all()}
