"""Courier pay calculations.

Daily rates (Normal/DRS), the 6-day bonus, sweep adjustments, mileage pay and
discrepancies, performance bonuses, invoicing costs and the weekly standard
pay breakdown. Everything works in integer pence.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from .exceptions import NegativeValueError
from .models import (
    InvoicingService,
    MileageDiscrepancy,
    MileageSummary,
    PerformanceLevel,
    RouteType,
    Settings,
    Week,
    WeekInfo,
    WeeklyPayBreakdown,
    WorkDay,
)
from .money import round_pence, to_decimal
from .validation import validate_week_work_days
from .vans import weekly_van_costs
from .week_calendar import WeekCalendar, default_calendar

logger = logging.getLogger(__name__)

SIX_DAY_BONUS = 3000  # £30 flat, exactly 6 days worked
SWEEP_VALUE = 100  # £1 per stop
MILEAGE_RATE_DIVISOR = 100  # rate is hundredths of a penny per mile

BONUS_BOTH_FANTASTIC_PLUS = 1600  # £16/day
BONUS_MIXED_FANTASTIC = 800  # £8/day

INVOICING_COSTS = {
    InvoicingService.SELF_INVOICING: 0,
    InvoicingService.VERSO_BASIC: 1000,  # invoicing + public liability
    InvoicingService.VERSO_FULL: 3000,  # plus accounting and tax returns
}

_BONUS_LEVELS = {PerformanceLevel.FANTASTIC, PerformanceLevel.FANTASTIC_PLUS}


def _bonus_rate(individual: PerformanceLevel, company: PerformanceLevel) -> int:
    if individual not in _BONUS_LEVELS or company not in _BONUS_LEVELS:
        return 0
    if individual == company == PerformanceLevel.FANTASTIC_PLUS:
        return BONUS_BOTH_FANTASTIC_PLUS
    return BONUS_MIXED_FANTASTIC


DAILY_BONUS_RATES = {
    (individual, company): _bonus_rate(individual, company)
    for individual in PerformanceLevel
    for company in PerformanceLevel
}


def daily_bonus_rate(individual_level: Optional[PerformanceLevel],
                     company_level: Optional[PerformanceLevel]) -> int:
    """Per-day performance bonus in pence for a pair of rankings."""
    if individual_level is None or company_level is None:
        return 0
    return DAILY_BONUS_RATES[(PerformanceLevel(individual_level), PerformanceLevel(company_level))]


def invoicing_cost(invoicing_service: InvoicingService) -> int:
    """Flat weekly deduction for the invoicing service."""
    return INVOICING_COSTS[InvoicingService(invoicing_service)]


class PayCalculator:
    """Daily and weekly pay figures for one driver's settings."""

    def __init__(self, settings: Settings, calendar: WeekCalendar = default_calendar):
        self.settings = settings
        self.calendar = calendar

    def rate_for_route(self, route_type: RouteType) -> int:
        if RouteType(route_type) == RouteType.DRS:
            return self.settings.drs_rate
        return self.settings.normal_rate

    def new_work_day(self, day, route_type: RouteType = RouteType.NORMAL, **fields) -> WorkDay:
        """Work day with today's rates snapshotted onto it."""
        fields.setdefault("daily_rate", self.rate_for_route(route_type))
        fields.setdefault("mileage_rate", self.settings.mileage_rate)
        return WorkDay(date=day, route_type=route_type, **fields)

    # Daily figures

    @staticmethod
    def daily_pay(work_day: WorkDay) -> int:
        return work_day.daily_rate

    @staticmethod
    def daily_sweeps(work_day: WorkDay) -> int:
        """(stops given - stops taken) x £1."""
        return (work_day.stops_given - work_day.stops_taken) * SWEEP_VALUE

    @staticmethod
    def daily_mileage_pay(work_day: WorkDay) -> int:
        """Amazon-paid miles x rate, rounded to the penny per day.

        100 miles at 1988 -> 100 x 19.88p = 1988p.
        """
        miles = to_decimal(work_day.amazon_paid_miles or 0)
        return round_pence(miles * work_day.mileage_rate / MILEAGE_RATE_DIVISOR)

    @staticmethod
    def mileage_discrepancy(work_day: WorkDay) -> MileageDiscrepancy:
        """Van-logged miles Amazon did not pay for, and their value."""
        amazon_miles = to_decimal(work_day.amazon_paid_miles or 0)
        van_miles = to_decimal(work_day.van_logged_miles or 0)
        unpaid_miles = van_miles - amazon_miles

        if unpaid_miles <= 0:
            return MileageDiscrepancy()

        return MileageDiscrepancy(
            miles=float(unpaid_miles),
            value=round_pence(unpaid_miles * work_day.mileage_rate / MILEAGE_RATE_DIVISOR)
        )

    def daily_total(self, work_day: WorkDay) -> int:
        return (self.daily_pay(work_day)
                + self.daily_sweeps(work_day)
                + self.daily_mileage_pay(work_day))

    # Weekly figures

    def weekly_base_pay(self, work_days: Iterable[WorkDay]) -> int:
        return sum(self.daily_pay(day) for day in work_days)

    @staticmethod
    def six_day_bonus(work_days: Sequence[WorkDay]) -> int:
        return SIX_DAY_BONUS if len(work_days) == 6 else 0

    def weekly_sweeps(self, work_days: Iterable[WorkDay]) -> int:
        return sum(self.daily_sweeps(day) for day in work_days)

    def weekly_mileage_pay(self, work_days: Iterable[WorkDay]) -> int:
        return sum(self.daily_mileage_pay(day) for day in work_days)

    def weekly_mileage(self, work_days: Iterable[WorkDay]) -> MileageSummary:
        summary = MileageSummary()

        for day in work_days:
            summary.total_amazon_miles += day.amazon_paid_miles or 0
            summary.total_van_miles += day.van_logged_miles or 0
            summary.mileage_pay += self.daily_mileage_pay(day)
            summary.discrepancy_value += self.mileage_discrepancy(day).value

        summary.discrepancy_miles = summary.total_van_miles - summary.total_amazon_miles
        return summary

    @staticmethod
    def with_week_mileage_rate(week: Optional[Week], work_days: Sequence[WorkDay]) -> Sequence[WorkDay]:
        """Reprice the days at the week's mileage rate override, if it has one."""
        if week is None or week.mileage_rate is None:
            return work_days
        return [day.model_copy(update={"mileage_rate": week.mileage_rate}) for day in work_days]

    # Performance bonus

    @staticmethod
    def performance_bonus(week: Week, work_days: Sequence[WorkDay]) -> int:
        """Daily bonus rate x days worked in the week the work was done."""
        return daily_bonus_rate(week.individual_level, week.company_level) * len(work_days)

    def apply_rankings(self, week: Week, individual_level: PerformanceLevel,
                       company_level: PerformanceLevel, work_days: Sequence[WorkDay],
                       entered_at: Optional[datetime] = None) -> Week:
        """Week with rankings recorded and the bonus amount cached."""
        ranked = week.model_copy(update={
            "individual_level": PerformanceLevel(individual_level),
            "company_level": PerformanceLevel(company_level),
            "rankings_entered_at": entered_at or datetime.now()
        })
        ranked.bonus_amount = self.performance_bonus(ranked, work_days)
        return ranked

    def bonus_for_week(self, week: Optional[Week], work_days: Sequence[WorkDay]) -> int:
        if week is None:
            return 0
        if week.has_rankings:
            return self.performance_bonus(week, work_days)
        return week.bonus_amount

    # Breakdown

    def weekly_breakdown(self, week_info: WeekInfo, work_days: Sequence[WorkDay],
                         van_hires: Sequence = (), invoicing_service: Optional[InvoicingService] = None,
                         deposit_payment: int = 0, week: Optional[Week] = None) -> WeeklyPayBreakdown:
        """Full standard-pay breakdown for one work week.

        Standard pay = base + 6-day bonus + sweeps + mileage
                       - van hire - deposit - invoicing
        and is reported as-is when negative.
        """
        validate_week_work_days(work_days, week_info)
        if deposit_payment < 0:
            raise NegativeValueError(
                f"Deposit payment cannot be negative: {deposit_payment}",
                field="deposit_payment", value=deposit_payment
            )

        work_days = self.with_week_mileage_rate(week, work_days)

        if invoicing_service is None:
            invoicing_service = (week.invoicing_service if week and week.invoicing_service
                                 else self.settings.invoicing_service)

        base_pay = self.weekly_base_pay(work_days)
        six_day_bonus = self.six_day_bonus(work_days)
        sweep_adjustment = self.weekly_sweeps(work_days)
        mileage = self.weekly_mileage(work_days)

        van_breakdown = weekly_van_costs(van_hires, week_info.start_date, week_info.end_date)
        van_deduction = sum(cost.van_cost for cost in van_breakdown)
        invoicing = invoicing_cost(invoicing_service)

        standard_pay = (base_pay
                        + six_day_bonus
                        + sweep_adjustment
                        + mileage.mileage_pay
                        - van_deduction
                        - deposit_payment
                        - invoicing)

        logger.debug(
            f"Week {week_info.week}/{week_info.year}: {len(work_days)} days, "
            f"standard pay {standard_pay}p"
        )

        return WeeklyPayBreakdown(
            week_info=week_info,
            days_worked=len(work_days),
            base_pay=base_pay,
            six_day_bonus=six_day_bonus,
            sweep_adjustment=sweep_adjustment,
            stops_given=sum(day.stops_given for day in work_days),
            stops_taken=sum(day.stops_taken for day in work_days),
            mileage_payment=mileage.mileage_pay,
            total_amazon_miles=mileage.total_amazon_miles,
            total_van_miles=mileage.total_van_miles,
            mileage_discrepancy=mileage.discrepancy_value,
            mileage_discrepancy_miles=mileage.discrepancy_miles,
            van_deduction=van_deduction,
            deposit_payment=deposit_payment,
            invoicing_cost=invoicing,
            standard_pay=standard_pay,
            performance_bonus=self.bonus_for_week(week, work_days),
            van_breakdown=van_breakdown,
            standard_payment_week=self.calendar.standard_payment_week(week_info.week, week_info.year),
            bonus_payment_week=self.calendar.bonus_payment_week(week_info.week, week_info.year)
        )
