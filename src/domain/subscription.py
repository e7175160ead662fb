"""
Subscription lifecycle rules
============================

States: ``trial`` -> ``active`` <-> ``inactive`` (see ``SUBSCRIPTION_TRANSITIONS``).

* A new subscription starts a trial lasting ``trial_months`` calendar months.
* A renewal payment moves any state to ``active`` for ``renewal_months``
  counted from the payment instant (not from the previous end date).
* Expiry is applied lazily by a periodic sweep, so the stored status can be
  stale.  ``is_active`` is the real-time answer and only trusts ``end_date``.

All helpers take ``now`` explicitly; naive datetimes are treated as UTC.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from .entities import InvalidStateTransition
from .enums import SUBSCRIPTION_TRANSITIONS, USABLE_STATUSES, SubscriptionStatus
from .errors import ValidationError

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class TrialWindow:
    start_date: datetime
    end_date: datetime
    trial_end_date: datetime


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def trial_window(start: datetime, months: int = 3) -> TrialWindow:
    start = as_utc(start)
    end = start + relativedelta(months=months)
    return TrialWindow(start_date=start, end_date=end, trial_end_date=end)


def renewal_end(now: datetime, months: int = 1) -> datetime:
    return as_utc(now) + relativedelta(months=months)


def check_transition(
    current: SubscriptionStatus | str, new: SubscriptionStatus | str
) -> None:
    """Raise ``InvalidStateTransition`` unless *current* -> *new* is legal."""
    current, new = SubscriptionStatus(current), SubscriptionStatus(new)
    if new not in SUBSCRIPTION_TRANSITIONS.get(current, set()):
        raise InvalidStateTransition(
            f"Cannot transition subscription from {current.value} to {new.value}"
        )


def validate_payment(amount: float, transaction_id: Optional[str]) -> None:
    if amount is None or amount <= 0:
        raise ValidationError(
            "Renewal amount must be greater than zero",
            suggestion="Please provide the amount that was charged",
        )
    if not transaction_id or not transaction_id.strip():
        raise ValidationError(
            "Transaction id is required",
            suggestion="Please provide the payment provider's transaction id",
        )


def is_active(
    status: SubscriptionStatus | str, end_date: datetime, now: datetime
) -> bool:
    return SubscriptionStatus(status) in USABLE_STATUSES and as_utc(end_date) > as_utc(now)


def trial_days_remaining(trial_end_date: datetime, now: datetime) -> int:
    remaining = as_utc(trial_end_date) - as_utc(now)
    if remaining <= timedelta(0):
        return 0
    return math.ceil(remaining / ONE_DAY)
