# ==== DEADLINE CALCULATOR TESTS ==== #

"""Tests for SLA deadline computation."""

from datetime import datetime, timedelta

import pytest

from config import OrderStatus
from fulfillment.domain import SLACalculator, SLAConfig, compute_deadline


def _config(**sections) -> SLAConfig:
    return SLAConfig.from_mapping(sections)


@pytest.mark.unit
class TestNewOrderDeadline:

    def test_pending_uses_package_estimate(self, make_order, make_package, default_config, base_time):
        order = make_order(status=OrderStatus.PENDING, created_at=base_time)

        window = compute_deadline(order, make_package(estimated_days=10), default_config, base_time)

        assert window.deadline == base_time + timedelta(days=10)
        assert window.window == timedelta(days=10)
        assert window.window_ms == 10 * 24 * 3600 * 1000
        assert not window.is_revision_cycle

    def test_deadline_does_not_move_with_now(self, make_order, make_package, default_config, base_time):
        order = make_order(status=OrderStatus.IN_PROGRESS, created_at=base_time)

        later = compute_deadline(order, make_package(estimated_days=10), default_config, base_time + timedelta(days=30))

        assert later.deadline == base_time + timedelta(days=10)

    def test_delivered_with_revisions_left_is_tracked(self, make_order, make_package, default_config, base_time):
        order = make_order(status=OrderStatus.DELIVERED, revisions_used=1)

        window = compute_deadline(order, make_package(estimated_days=4), default_config, base_time)

        assert window.deadline == base_time + timedelta(days=4)

    @pytest.mark.parametrize("estimated_days", [None, 0, -3])
    def test_missing_estimate_falls_back_to_five_days(
        self, make_order, make_package, default_config, base_time, estimated_days
    ):
        order = make_order()

        window = compute_deadline(order, make_package(estimated_days=estimated_days), default_config, base_time)

        assert window.window == timedelta(days=5)

    def test_missing_package_falls_back_to_five_days(self, make_order, default_config, base_time):
        window = compute_deadline(make_order(), None, default_config, base_time)

        assert window.deadline == base_time + timedelta(days=5)

    def test_default_days_when_package_estimate_disabled(self, make_order, make_package, base_time):
        config = _config(design_new={"usePackageEstimate": False, "defaultDays": 7})

        window = compute_deadline(make_order(), make_package(estimated_days=10), config, base_time)

        assert window.window == timedelta(days=7)

    def test_missing_config_uses_defaults(self, make_order, make_package, base_time):
        window = compute_deadline(make_order(), make_package(estimated_days=10), None, base_time)

        assert window.deadline == base_time + timedelta(days=10)

    def test_disabled_new_policy_keeps_deadline(self, make_order, make_package, base_time):
        config = _config(design_new={"enabled": False})

        window = compute_deadline(make_order(), make_package(estimated_days=10), config, base_time)

        assert window is not None
        assert window.deadline == base_time + timedelta(days=10)


@pytest.mark.unit
class TestRevisionDeadline:

    def test_revision_window_is_percent_of_estimate(self, make_order, make_package, default_config, base_time):
        requested_at = base_time + timedelta(days=12)
        order = make_order(
            status=OrderStatus.REVISION_REQUESTED,
            created_at=base_time,
            updated_at=requested_at,
            revisions_used=1
        )

        window = compute_deadline(order, make_package(estimated_days=10), default_config, requested_at)

        assert window.deadline == requested_at + timedelta(days=5)
        assert window.window == timedelta(days=5)
        assert window.is_revision_cycle
        assert window.starts_at == requested_at

    def test_revision_window_floored_at_min_hours(self, make_order, make_package, base_time):
        config = _config(design_revision={"percentOfOriginal": 10, "minHours": 48})
        order = make_order(status=OrderStatus.REVISION_REQUESTED, updated_at=base_time, revisions_used=1)

        window = compute_deadline(order, make_package(estimated_days=1), config, base_time)

        assert window.window == timedelta(days=2)

    def test_revision_floor_and_percent_equal(self, make_order, make_package, default_config, base_time):
        order = make_order(status=OrderStatus.REVISION_REQUESTED, updated_at=base_time, revisions_used=1)

        window = compute_deadline(order, make_package(estimated_days=2), default_config, base_time)

        assert window.window == timedelta(days=1)

    def test_revision_days_formula(self, default_config):
        assert SLACalculator.revision_days(10, default_config) == 5
        assert SLACalculator.revision_days(1, default_config) == 1

    def test_disabled_revision_policy_keeps_revision_window(self, make_order, make_package, base_time):
        config = _config(design_revision={"enabled": False})
        order = make_order(
            status=OrderStatus.REVISION_REQUESTED,
            created_at=base_time,
            updated_at=base_time + timedelta(days=12),
            revisions_used=1
        )

        window = compute_deadline(order, make_package(estimated_days=10), config, base_time + timedelta(days=12))

        assert window.deadline == base_time + timedelta(days=17)
        assert window.is_revision_cycle

    def test_revision_with_exhausted_revisions_still_tracked(self, make_order, make_package, default_config, base_time):
        order = make_order(
            status=OrderStatus.REVISION_REQUESTED,
            updated_at=base_time,
            revisions_used=2,
            max_revisions=2
        )

        window = compute_deadline(order, make_package(estimated_days=10), default_config, base_time)

        assert window.deadline == base_time + timedelta(days=5)


@pytest.mark.unit
class TestIneligibleOrders:

    @pytest.mark.parametrize("status", [OrderStatus.APPROVED, OrderStatus.CANCELLED, "on_hold", "completed"])
    def test_terminal_and_unknown_statuses_have_no_deadline(
        self, make_order, make_package, default_config, base_time, status
    ):
        assert compute_deadline(make_order(status=status), make_package(), default_config, base_time) is None

    def test_final_delivery_has_no_deadline(self, make_order, make_package, default_config, base_time):
        order = make_order(status=OrderStatus.DELIVERED, revisions_used=2, max_revisions=2)

        assert compute_deadline(order, make_package(), default_config, base_time) is None


@pytest.mark.unit
class TestTimeHandling:

    def test_future_anchor_is_clamped_to_now(self, make_order, make_package, default_config, base_time):
        order = make_order(created_at=base_time + timedelta(hours=6))

        window = compute_deadline(order, make_package(estimated_days=10), default_config, base_time)

        assert window.deadline == base_time + timedelta(days=10)

    def test_naive_timestamps_are_treated_as_utc(self, make_order, make_package, default_config, base_time):
        naive = datetime(2024, 3, 1, 12, 0)
        order = make_order(created_at=naive)

        window = compute_deadline(order, make_package(estimated_days=10), default_config, base_time)

        assert window.deadline == base_time + timedelta(days=10)
        assert window.deadline.tzinfo is not None

    def test_repeated_calls_are_identical(self, make_order, make_package, default_config, base_time):
        order = make_order(status=OrderStatus.REVISION_REQUESTED, updated_at=base_time, revisions_used=1)
        package = make_package()

        first = compute_deadline(order, package, default_config, base_time)
        second = compute_deadline(order, package, default_config, base_time)

        assert first == second
