"""Validation rules for work days, weeks, van hires and deposit adjustments.

Every rule raises a specific ``InvalidInputError`` subclass. Nothing here
clamps or corrects a value.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .exceptions import (
    DuplicateWorkDayError,
    InvalidDepositAdjustmentError,
    InvalidHirePeriodError,
    MultipleActiveVansError,
    NegativeValueError,
    SweepLimitExceededError,
    TooManyWorkDaysError,
    WorkDayOutsideWeekError,
)
from .models import VanHire, WeekInfo, WorkDay

logger = logging.getLogger(__name__)

MAX_DAYS_PER_WEEK = 6  # 7 consecutive days is over the legal driving limit
MAX_SWEEPS_PER_DAY = 200  # stops given + stops taken
MAX_DEPOSIT = 50000  # £500
SIGNIFICANT_DISCREPANCY_PERCENT = 10


def validate_work_day(work_day: WorkDay) -> WorkDay:
    """Check a single day's stops and mileage."""
    if work_day.stops_given < 0:
        raise NegativeValueError(
            f"Stops given cannot be negative ({work_day.date})",
            field="stops_given", value=work_day.stops_given
        )
    if work_day.stops_taken < 0:
        raise NegativeValueError(
            f"Stops taken cannot be negative ({work_day.date})",
            field="stops_taken", value=work_day.stops_taken
        )

    total_sweeps = work_day.stops_given + work_day.stops_taken
    if total_sweeps > MAX_SWEEPS_PER_DAY:
        raise SweepLimitExceededError(
            f"Total sweeps ({total_sweeps}) on {work_day.date} exceeds daily "
            f"limit of {MAX_SWEEPS_PER_DAY}",
            total=total_sweeps, limit=MAX_SWEEPS_PER_DAY
        )

    for field in ("amazon_paid_miles", "van_logged_miles"):
        miles = getattr(work_day, field)
        if miles is not None and miles < 0:
            raise NegativeValueError(
                f"{field.replace('_', ' ').capitalize()} cannot be negative ({work_day.date})",
                field=field, value=miles
            )

    return work_day


def validate_week_work_days(work_days: Sequence[WorkDay],
                            week_info: Optional[WeekInfo] = None) -> Sequence[WorkDay]:
    """Check the days logged for one work week."""
    if len(work_days) > MAX_DAYS_PER_WEEK:
        raise TooManyWorkDaysError(
            f"Cannot work {len(work_days)} days in a week. "
            f"Maximum is {MAX_DAYS_PER_WEEK} days.",
            days=len(work_days), limit=MAX_DAYS_PER_WEEK
        )

    seen = set()
    for work_day in work_days:
        if work_day.date in seen:
            raise DuplicateWorkDayError(
                f"More than one work day logged for {work_day.date}",
                date=work_day.date
            )
        seen.add(work_day.date)

        if week_info and not week_info.start_date <= work_day.date <= week_info.end_date:
            raise WorkDayOutsideWeekError(
                f"Work day {work_day.date} is not in week {week_info.week}, {week_info.year}",
                date=work_day.date, week=week_info.week, year=week_info.year
            )

        validate_work_day(work_day)

    return work_days


def validate_van_hire(van_hire: VanHire) -> VanHire:
    if van_hire.off_hire_date and van_hire.off_hire_date < van_hire.on_hire_date:
        raise InvalidHirePeriodError(
            f"Off-hire date {van_hire.off_hire_date} is before on-hire date "
            f"{van_hire.on_hire_date} for {van_hire.registration}",
            registration=van_hire.registration
        )
    if van_hire.weekly_rate < 0:
        raise NegativeValueError(
            f"Weekly rate cannot be negative for {van_hire.registration}",
            field="weekly_rate", value=van_hire.weekly_rate
        )
    return van_hire


def validate_van_hires(van_hires: Iterable[VanHire]) -> List[VanHire]:
    """Check each van and that at most one is currently on hire."""
    van_hires = [validate_van_hire(van) for van in van_hires]

    active = [van.registration for van in van_hires if van.is_active]
    if len(active) > 1:
        raise MultipleActiveVansError(
            f"Only one van can be on hire at a time, found {len(active)}: "
            f"{', '.join(active)}",
            registrations=active
        )

    return van_hires


def validate_deposit_adjustment(amount: int) -> int:
    if not 0 <= amount <= MAX_DEPOSIT:
        raise InvalidDepositAdjustmentError(
            f"Deposit adjustment {amount} must be between 0 and {MAX_DEPOSIT}",
            amount=amount, limit=MAX_DEPOSIT
        )
    return amount


def is_discrepancy_significant(amazon_miles: float, van_miles: float) -> bool:
    """True when van miles exceed paid miles by more than 10%."""
    if not amazon_miles:
        return False
    percentage = (van_miles - amazon_miles) / amazon_miles * 100
    return percentage > SIGNIFICANT_DISCREPANCY_PERCENT


def mileage_warnings(work_days: Sequence[WorkDay]) -> List[str]:
    """Human-readable warnings for days with significant unpaid mileage."""
    warnings = []

    for work_day in sorted(work_days, key=lambda d: d.date):
        amazon_miles = work_day.amazon_paid_miles or 0
        van_miles = work_day.van_logged_miles or 0

        if is_discrepancy_significant(amazon_miles, van_miles):
            percentage = (van_miles - amazon_miles) / amazon_miles * 100
            warnings.append(
                f"{work_day.date}: Van mileage is {percentage:.1f}% higher than "
                f"Amazon paid ({van_miles - amazon_miles:.2f} unpaid miles)"
            )

    return warnings
