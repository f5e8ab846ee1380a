# ==== FULFILLMENT API INTEGRATION TESTS ==== #

"""
Route tests for the fulfillment API.

The app is driven through TestClient without entering its lifespan, so no
database or config file is touched; the service, clock and config provider
are swapped in through dependency overrides.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from core import ConfigurationException, RepositoryException
from fulfillment.application import FulfillmentService
from fulfillment.domain import SLAConfig
from fulfillment.interfaces.controllers import (
    get_clock, get_config_provider, get_fulfillment_service
)
from main import app

from tests.conftest import InMemoryOrderRepository, InMemoryPackageCatalog, StaticConfigProvider


@pytest.fixture
def now(base_time):
    return base_time + timedelta(days=8)


@pytest.fixture
def config_provider():
    return StaticConfigProvider(SLAConfig.from_mapping({"design_revision": {"minHours": 36}}))


@pytest.fixture
def client(sample_orders, sample_packages, config_provider, now):
    service = FulfillmentService(
        InMemoryOrderRepository(sample_orders),
        InMemoryPackageCatalog(sample_packages),
        config_provider
    )
    app.dependency_overrides[get_fulfillment_service] = lambda: service
    app.dependency_overrides[get_config_provider] = lambda: config_provider
    app.dependency_overrides[get_clock] = lambda: now
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.mark.integration
class TestQueueEndpoint:

    def test_queue_returns_sorted_orders(self, client):
        response = client.get("/fulfillment/queue", params={"limit": 3})

        assert response.status_code == 200
        data = response.json()
        assert [o["order_id"] for o in data["orders"]] == ["ord-revision", "ord-pending", "ord-progress"]
        assert data["total_count"] == 7
        assert data["summary"]["overdue_count"] == 1
        assert data["summary"]["urgent_count"] == 1

    def test_queue_tab_filter(self, client):
        response = client.get("/fulfillment/queue", params={"tab": "completed"})

        assert response.status_code == 200
        assert [o["order_id"] for o in response.json()["orders"]] == ["ord-done", "ord-approved"]

    def test_unknown_tab_rejected(self, client):
        response = client.get("/fulfillment/queue", params={"tab": "archived"})

        assert response.status_code == 422

    def test_limit_bounds_validated(self, client):
        assert client.get("/fulfillment/queue", params={"limit": 0}).status_code == 422

    def test_correlation_id_echoed(self, client):
        response = client.get("/fulfillment/queue", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"
        assert "X-Response-Time" in response.headers


@pytest.mark.integration
class TestOrderStatusEndpoint:

    def test_order_status(self, client, now):
        response = client.get("/fulfillment/orders/ord-pending")

        assert response.status_code == 200
        data = response.json()
        assert data["display_status"] == "pending"
        assert data["urgency"] == "urgent"
        assert data["remaining_seconds"] == timedelta(days=1).total_seconds()

    def test_completed_order_has_no_deadline(self, client):
        data = client.get("/fulfillment/orders/ord-done").json()

        assert data["display_status"] == "completed"
        assert data["deadline"] is None
        assert data["urgency"] is None

    def test_missing_order_is_404(self, client):
        response = client.get("/fulfillment/orders/ord-missing")

        assert response.status_code == 404
        body = response.json()
        assert "ord-missing" in body["detail"]
        assert "correlation_id" in body


@pytest.mark.integration
class TestConfigAndHealth:

    def test_config_shows_effective_policy(self, client):
        response = client.get("/fulfillment/config")

        assert response.status_code == 200
        data = response.json()
        assert data["design_revision"]["min_hours"] == 36
        assert data["design_revision"]["percent_of_original"] == 50
        assert data["notifications"]["warning_percent"] == 25

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_lists_endpoints(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "fulfillment" in response.json()["modules"]


class _FailingOrderRepository(InMemoryOrderRepository):
    async def get_by_id(self, order_id):
        raise RepositoryException(f"Failed to load design order {order_id}: connection refused")

    async def list_orders(self):
        raise RepositoryException("Failed to list design orders: connection refused")


class _UnloadedConfigProvider(StaticConfigProvider):
    def get_config(self):
        raise ConfigurationException("SLA configuration not loaded")


@pytest.mark.integration
class TestBackingServiceFailures:

    @pytest.fixture
    def override(self, now):
        def _override(order_repository, config_provider):
            service = FulfillmentService(order_repository, InMemoryPackageCatalog(), config_provider)
            app.dependency_overrides[get_fulfillment_service] = lambda: service
            app.dependency_overrides[get_config_provider] = lambda: config_provider
            app.dependency_overrides[get_clock] = lambda: now
            return TestClient(app, raise_server_exceptions=False)
        try:
            yield _override
        finally:
            app.dependency_overrides.clear()

    def test_database_failure_on_queue_is_503(self, override):
        client = override(_FailingOrderRepository(), StaticConfigProvider())

        response = client.get("/fulfillment/queue")

        assert response.status_code == 503
        body = response.json()
        assert body["detail"] == "Service temporarily unavailable"
        assert "connection refused" not in body["detail"]
        assert "correlation_id" in body

    def test_database_failure_on_order_status_is_503(self, override):
        client = override(_FailingOrderRepository(), StaticConfigProvider())

        assert client.get("/fulfillment/orders/ord-1").status_code == 503

    def test_unloaded_config_is_503(self, override):
        client = override(InMemoryOrderRepository(), _UnloadedConfigProvider())

        assert client.get("/fulfillment/queue").status_code == 503
        assert client.get("/fulfillment/config").status_code == 503
