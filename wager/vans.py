"""Van hire lifecycle helpers and pro-rata van costs."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional
from dateutil.relativedelta import relativedelta

from .exceptions import NegativeValueError
from .models import VanHire, VanWeekCost
from .money import round_pence
from .validation import validate_van_hire

logger = logging.getLogger(__name__)

DEPOSIT_HOLD_WEEKS = 6


def days_active_in_period(van_hire: VanHire, start_date: date, end_date: date) -> int:
    """Days (inclusive) the van was on hire between ``start_date`` and ``end_date``."""
    van_end = van_hire.off_hire_date or end_date
    overlap_start = max(van_hire.on_hire_date, start_date)
    overlap_end = min(van_end, end_date)
    return max(0, (overlap_end - overlap_start).days + 1)


def van_pro_rata(weekly_rate: int, days: int) -> int:
    """weekly_rate / 7 per day on hire, rounded to the nearest penny."""
    return round_pence(Decimal(weekly_rate) * days / 7)


def vans_for_period(van_hires: Iterable[VanHire], start_date: date,
                    end_date: date) -> List[VanHire]:
    """Vans on hire at any point in the period, oldest first."""
    return sorted(
        (van for van in van_hires if days_active_in_period(van, start_date, end_date) > 0),
        key=lambda van: van.on_hire_date
    )


def weekly_van_costs(van_hires: Iterable[VanHire], start_date: date,
                     end_date: date) -> List[VanWeekCost]:
    """Pro-rata cost of every van that covered part of the week.

    Switching vans mid-week yields one entry per van.
    """
    costs = []

    for van in vans_for_period(van_hires, start_date, end_date):
        days = days_active_in_period(van, start_date, end_date)
        costs.append(VanWeekCost(
            registration=van.registration,
            van_id=van.id,
            days=days,
            van_cost=van_pro_rata(van.weekly_rate, days)
        ))

    return costs


def active_van(van_hires: Iterable[VanHire]) -> Optional[VanHire]:
    return next((van for van in van_hires if van.is_active), None)


def van_for_date(van_hires: Iterable[VanHire], day: date) -> Optional[VanHire]:
    vans = vans_for_period(van_hires, day, day)
    return vans[-1] if vans else None


def deposit_hold_until(off_hire_date: date) -> date:
    return off_hire_date + relativedelta(weeks=DEPOSIT_HOLD_WEEKS)


def off_hire(van_hire: VanHire, off_hire_date: date) -> VanHire:
    """Return the van off-hired on ``off_hire_date`` with its deposit held for 6 weeks."""
    updated = van_hire.model_copy(update={
        "off_hire_date": off_hire_date,
        "deposit_hold_until": deposit_hold_until(off_hire_date)
    })
    validate_van_hire(updated)
    logger.debug(f"Off-hired {van_hire.registration} on {off_hire_date}")
    return updated


def refund_deposit(van_hire: VanHire, refund_amount: int) -> VanHire:
    if refund_amount < 0:
        raise NegativeValueError(
            f"Refund amount cannot be negative: {refund_amount}",
            field="deposit_refund_amount", value=refund_amount
        )
    return van_hire.model_copy(update={
        "deposit_refunded": True,
        "deposit_refund_amount": refund_amount
    })
