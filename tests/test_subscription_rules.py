"""Unit tests for the subscription state machine and date arithmetic."""

from datetime import datetime, timedelta, timezone

import pytest

from src.domain.entities import InvalidStateTransition
from src.domain.enums import SubscriptionStatus
from src.domain.errors import ValidationError
from src.domain.subscription import (
    as_utc,
    check_transition,
    is_active,
    renewal_end,
    trial_days_remaining,
    trial_window,
    validate_payment,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class TestTransitions:
    @pytest.mark.parametrize(
        "current,new",
        [
            ("trial", "active"),
            ("trial", "inactive"),
            ("active", "active"),
            ("active", "inactive"),
            ("inactive", "active"),
        ],
    )
    def test_valid(self, current, new):
        check_transition(current, new)

    @pytest.mark.parametrize(
        "current,new",
        [
            ("active", "trial"),
            ("inactive", "trial"),
            ("inactive", "inactive"),
            ("trial", "trial"),
        ],
    )
    def test_invalid(self, current, new):
        with pytest.raises(InvalidStateTransition):
            check_transition(current, new)

    def test_accepts_enum_members(self):
        check_transition(SubscriptionStatus.TRIAL, SubscriptionStatus.ACTIVE)


class TestTrialWindow:
    def test_three_calendar_months(self):
        window = trial_window(NOW)
        assert window.start_date == NOW
        assert window.end_date == datetime(2026, 4, 15, 12, 0, tzinfo=timezone.utc)
        assert window.trial_end_date == window.end_date

    def test_month_end_is_clamped(self):
        window = trial_window(datetime(2025, 11, 30, tzinfo=timezone.utc))
        assert window.end_date == datetime(2026, 2, 28, tzinfo=timezone.utc)

    def test_naive_start_treated_as_utc(self):
        window = trial_window(datetime(2026, 1, 15, 12, 0))
        assert window.start_date == NOW

    def test_renewal_is_one_month_from_now(self):
        assert renewal_end(NOW) == datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)


class TestActive:
    def test_trial_before_end(self):
        assert is_active("trial", NOW + timedelta(days=1), NOW)

    def test_end_in_past_is_inactive_even_with_stale_status(self):
        assert not is_active("active", NOW - timedelta(seconds=1), NOW)

    def test_end_equal_to_now_is_not_active(self):
        assert not is_active("trial", NOW, NOW)

    def test_inactive_status_is_never_active(self):
        assert not is_active("inactive", NOW + timedelta(days=30), NOW)

    def test_naive_end_date_compared_as_utc(self):
        assert is_active("active", datetime(2026, 1, 16), NOW)


class TestTrialDays:
    def test_full_trial(self):
        window = trial_window(NOW)
        assert trial_days_remaining(window.trial_end_date, NOW) == 90

    def test_partial_day_rounds_up(self):
        assert trial_days_remaining(NOW + timedelta(hours=1), NOW) == 1

    def test_zero_at_end(self):
        assert trial_days_remaining(NOW, NOW) == 0

    def test_zero_after_end(self):
        assert trial_days_remaining(NOW - timedelta(days=3), NOW) == 0

    def test_non_increasing_over_time(self):
        end = trial_window(NOW).trial_end_date
        days = [trial_days_remaining(end, NOW + timedelta(hours=h)) for h in range(0, 2400, 7)]
        assert all(a >= b for a, b in zip(days, days[1:]))

    def test_strictly_decreasing_day_by_day(self):
        end = trial_window(NOW).trial_end_date
        days = [trial_days_remaining(end, NOW + timedelta(days=d)) for d in range(95)]
        positive = [d for d in days if d > 0]
        assert all(a > b for a, b in zip(days, days[1:]) if a > 0)
        assert positive == list(range(90, 0, -1))


class TestPaymentValidation:
    def test_accepts_positive_amount_and_txn(self):
        validate_payment(79, "txn_123")

    @pytest.mark.parametrize("amount", [0, -1])
    def test_rejects_non_positive_amount(self, amount):
        with pytest.raises(ValidationError):
            validate_payment(amount, "txn_123")

    @pytest.mark.parametrize("txn", [None, "", "   "])
    def test_rejects_missing_transaction_id(self, txn):
        with pytest.raises(ValidationError):
            validate_payment(79, txn)


def test_as_utc_converts_offsets():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert as_utc(datetime(2026, 1, 15, 17, 30, tzinfo=ist)) == NOW
