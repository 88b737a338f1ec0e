"""Pay engine: weekly pay and payment-week summaries for one driver."""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .deposits import DepositCalculator
from .models import (
    PaymentSummary,
    Settings,
    VanHire,
    Week,
    WeekInfo,
    WeeklyPayBreakdown,
    WorkDay,
)
from .pay_calculator import PayCalculator
from .validation import validate_deposit_adjustment, validate_van_hires
from .week_calendar import STANDARD_PAY_DELAY, WeekCalendar, default_calendar

logger = logging.getLogger(__name__)

WeekKey = Tuple[int, int]


def group_work_days_by_week(work_days: Iterable[WorkDay],
                            calendar: WeekCalendar = default_calendar) -> Dict[WeekKey, List[WorkDay]]:
    """Work days keyed by (week, work year), each list in date order."""
    grouped = defaultdict(list)
    for day in work_days:
        info = calendar.date_to_week(day.date)
        grouped[(info.week, info.year)].append(day)

    for days in grouped.values():
        days.sort(key=lambda d: d.date)
    return dict(grouped)


class PayEngine:
    """Composes the pay and deposit calculators over a snapshot of records."""

    def __init__(self, settings: Settings, van_hires: Sequence[VanHire] = (),
                 manual_deposit_seed: int = 0, calendar: WeekCalendar = default_calendar,
                 payment_lag_weeks: int = STANDARD_PAY_DELAY):
        self.settings = settings
        self.calendar = calendar
        self.van_hires = validate_van_hires(van_hires)
        self.manual_deposit_seed = validate_deposit_adjustment(manual_deposit_seed)
        self.pay = PayCalculator(settings, calendar)
        self.deposits = DepositCalculator(calendar, payment_lag_weeks)

    def weekly_pay(self, week_info: WeekInfo, work_days: Sequence[WorkDay],
                   week: Optional[Week] = None, include_deposit: bool = True) -> WeeklyPayBreakdown:
        """Breakdown for one work week.

        The deposit instalment is only included when ``include_deposit`` is
        set, i.e. when the breakdown is shown for the week it is paid in.
        """
        deposit_payment = 0
        if include_deposit:
            deposit_payment = self.deposits.deposit_due_for_week(
                self.van_hires, week_info, self.manual_deposit_seed
            )

        return self.pay.weekly_breakdown(
            week_info,
            work_days,
            van_hires=self.van_hires,
            deposit_payment=deposit_payment,
            week=week
        )

    def payment_for_week(self, week: int, year: int, work_days: Iterable[WorkDay],
                         weeks: Iterable[Week] = ()) -> PaymentSummary:
        """What lands in payment week N.

        Standard pay for work week N-2 plus the performance bonus for N-6.
        """
        payment_week = self.calendar.week_info(week, year)
        standard_week = self.calendar.standard_pay_work_week(week, year)
        bonus_week = self.calendar.bonus_work_week(week, year)

        days_by_week = group_work_days_by_week(work_days, self.calendar)
        weeks_by_key = {(w.week_number, w.year): w for w in weeks}

        standard_days = days_by_week.get((standard_week.week, standard_week.year), [])
        standard_pay = None
        if standard_days:
            standard_pay = self.weekly_pay(
                standard_week,
                standard_days,
                week=weeks_by_key.get((standard_week.week, standard_week.year))
            )

        bonus_days = days_by_week.get((bonus_week.week, bonus_week.year), [])
        bonus_record = weeks_by_key.get((bonus_week.week, bonus_week.year))
        bonus_payment = self.pay.bonus_for_week(bonus_record, bonus_days)
        rankings_missing = bool(bonus_days) and not (bonus_record and bonus_record.has_rankings)

        total = (standard_pay.standard_pay if standard_pay else 0) + bonus_payment
        logger.debug(
            f"Payment for week {week}/{year}: {total}p "
            f"(standard from {standard_week.week}/{standard_week.year}, "
            f"bonus from {bonus_week.week}/{bonus_week.year})"
        )

        return PaymentSummary(
            payment_week=payment_week,
            standard_pay_week=standard_week,
            bonus_week=bonus_week,
            standard_pay=standard_pay,
            bonus_payment=bonus_payment,
            total_payment=total,
            rankings_missing=rankings_missing
        )
