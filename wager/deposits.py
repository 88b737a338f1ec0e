"""Van deposit accrual.

A refundable £500 deposit is built up from weekly instalments taken from
standard pay: £25 for each of the first two weeks with any van, then £50 a
week until the cap is reached. The week count runs across the driver's whole
van history, not per van, so allocations depend on processing vans in
on-hire order and are always recomputed from the full list.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from .models import DepositRecalculation, VanDepositAllocation, VanHire, WeekInfo
from .validation import MAX_DEPOSIT, validate_deposit_adjustment, validate_van_hires
from .vans import days_active_in_period
from .week_calendar import DAYS_PER_WEEK, STANDARD_PAY_DELAY, WeekCalendar, default_calendar

logger = logging.getLogger(__name__)

DEPOSIT_RATE_FIRST_TWO_WEEKS = 2500  # £25/week
DEPOSIT_RATE_AFTER_TWO_WEEKS = 5000  # £50/week
FIRST_TIER_WEEKS = 2


def deposit_rate(ordinal: int) -> int:
    """Instalment for the ``ordinal``-th week with a van (1-based)."""
    if ordinal <= FIRST_TIER_WEEKS:
        return DEPOSIT_RATE_FIRST_TWO_WEEKS
    return DEPOSIT_RATE_AFTER_TWO_WEEKS


def deposit_instalment(ordinal: int, paid_so_far: int) -> int:
    """Instalment for a week, clipped so the running total stops at the cap."""
    if paid_so_far >= MAX_DEPOSIT:
        return 0
    return min(deposit_rate(ordinal), MAX_DEPOSIT - paid_so_far)


def tier_offset(manual_deposit_seed: int) -> int:
    """First-tier weeks already covered by a deposit paid before tracking began.

    A seed of £50 or more counts as having completed both £25 weeks.
    """
    if manual_deposit_seed >= DEPOSIT_RATE_AFTER_TWO_WEEKS:
        return min(FIRST_TIER_WEEKS, manual_deposit_seed // DEPOSIT_RATE_FIRST_TWO_WEEKS)
    return 0


def total_deposit_paid(van_hires: Iterable[VanHire], manual_deposit_seed: int = 0) -> int:
    """Deposit paid so far according to the cached ``deposit_paid`` values."""
    return manual_deposit_seed + sum(van.deposit_paid for van in van_hires)


class DepositCalculator:
    """Derives deposit allocations from a snapshot of a driver's van hires."""

    def __init__(self, calendar: WeekCalendar = default_calendar,
                 payment_lag_weeks: int = STANDARD_PAY_DELAY):
        self.calendar = calendar
        self.payment_lag_weeks = payment_lag_weeks

    def counting_end_date(self, van_hire: VanHire, as_of: date) -> date:
        """Last day whose deposit has been taken from pay that has landed.

        Vans still on hire only count up to ``payment_lag_weeks`` before
        ``as_of``.
        """
        if van_hire.off_hire_date:
            return van_hire.off_hire_date
        return as_of - timedelta(weeks=self.payment_lag_weeks)

    def counted_weeks(self, van_hire: VanHire, as_of: date) -> List[date]:
        """Start dates of the work weeks the van covers up to its counting end date.

        Any part of a Sunday-Saturday week counts as the whole week.
        """
        end_date = self.counting_end_date(van_hire, as_of)
        if end_date < van_hire.on_hire_date:
            return []

        week_start = self.calendar.date_to_week(van_hire.on_hire_date).start_date
        last_start = self.calendar.date_to_week(end_date).start_date

        weeks = []
        while week_start <= last_start:
            weeks.append(week_start)
            week_start += timedelta(weeks=1)
        return weeks

    def weeks_counted(self, van_hire: VanHire, as_of: date) -> int:
        return len(self.counted_weeks(van_hire, as_of))

    def recalculate(self, van_hires: Sequence[VanHire], manual_deposit_seed: int = 0,
                    as_of: Optional[date] = None) -> DepositRecalculation:
        """Re-run the deposit allocation over the whole van history."""
        validate_deposit_adjustment(manual_deposit_seed)
        vans = sorted(validate_van_hires(van_hires), key=lambda van: van.on_hire_date)
        as_of = as_of or date.today()

        offset = tier_offset(manual_deposit_seed)
        paid_so_far = manual_deposit_seed
        ordinal = 0
        allocations = []
        claimed = set()

        for van in vans:
            # A week shared by two vans belongs to the one hired first
            new_weeks = [week for week in self.counted_weeks(van, as_of) if week not in claimed]
            claimed.update(new_weeks)
            weeks = len(new_weeks)
            deposit_for_van = 0

            for _ in new_weeks:
                ordinal += 1
                instalment = deposit_instalment(ordinal + offset, paid_so_far)
                if instalment == 0:
                    break
                deposit_for_van += instalment
                paid_so_far += instalment

            logger.debug(
                f"Deposit for {van.registration}: {weeks} weeks counted, {deposit_for_van}p"
            )
            allocations.append(VanDepositAllocation(
                registration=van.registration,
                van_id=van.id,
                on_hire_date=van.on_hire_date,
                weeks_counted=weeks,
                deposit_paid=deposit_for_van,
                deposit_complete=paid_so_far >= MAX_DEPOSIT
            ))

        return DepositRecalculation(
            as_of=as_of,
            manual_deposit_seed=manual_deposit_seed,
            allocations=allocations,
            total_paid=paid_so_far,
            complete=paid_so_far >= MAX_DEPOSIT
        )

    @staticmethod
    def _van_key(van_id: Optional[str], registration: str, on_hire_date: date):
        return van_id if van_id is not None else (registration, on_hire_date)

    def apply(self, van_hires: Sequence[VanHire],
              recalculation: DepositRecalculation) -> List[VanHire]:
        """Copies of the vans with the recalculated deposits written onto them."""
        by_key: Dict = {
            self._van_key(a.van_id, a.registration, a.on_hire_date): a
            for a in recalculation.allocations
        }

        updated = []
        for van in van_hires:
            allocation = by_key.get(self._van_key(van.id, van.registration, van.on_hire_date))
            if allocation is None:
                updated.append(van)
                continue
            updated.append(van.model_copy(update={
                "deposit_paid": allocation.deposit_paid,
                "deposit_complete": allocation.deposit_complete
            }))

        return updated

    def weeks_with_van_through(self, van_hires: Sequence[VanHire], week_info: WeekInfo) -> int:
        """Work weeks with any van from the first hire up to and including ``week_info``."""
        if not van_hires:
            return 0

        first_hire = min(van.on_hire_date for van in van_hires)
        week_start = self.calendar.date_to_week(first_hire).start_date
        count = 0

        while week_start <= week_info.start_date:
            week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
            if any(days_active_in_period(van, week_start, week_end) for van in van_hires):
                count += 1
            week_start += timedelta(weeks=1)

        return count

    def deposit_due_for_week(self, van_hires: Sequence[VanHire], week_info: WeekInfo,
                             manual_deposit_seed: int = 0) -> int:
        """Single deposit instalment attributed to one work week.

        Zero when no van covered any day of the week or the cap is reached.
        """
        validate_deposit_adjustment(manual_deposit_seed)
        vans = validate_van_hires(van_hires)

        if not any(days_active_in_period(van, week_info.start_date, week_info.end_date)
                   for van in vans):
            return 0

        ordinal = self.weeks_with_van_through(vans, week_info)
        offset = tier_offset(manual_deposit_seed)

        paid_before = manual_deposit_seed
        for earlier in range(1, ordinal):
            paid_before += deposit_instalment(earlier + offset, paid_before)

        return deposit_instalment(ordinal + offset, paid_before)
