"""Work-week calendar.

Weeks run Sunday to Saturday. Week 1 of work year Y starts on the last
Sunday on or before 31 December of Y-1, except that after the seed year the
anchor is chained: Week 1 starts the day after the previous work year's last
week ends. A work year has a 53rd week only when Week 52 ends in December on
or before the 24th and a further full week still ends by 31 December.

Examples:
    2025: Week 1 starts Sun 2024-12-29, Week 52 ends 2025-12-27, 52 weeks.
    2028: Week 1 starts Sun 2027-12-26, Week 53 runs 2028-12-24 to 2028-12-30.
"""

import logging
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple, Union
from dateutil.relativedelta import relativedelta, SU

from .exceptions import InvalidWeekNumberError, InvalidWorkYearError, NegativeValueError
from .models import WeekInfo

logger = logging.getLogger(__name__)

SEED_YEAR = 2024
MIN_WORK_YEAR = 2
MAX_WORK_YEAR = 9999

DAYS_PER_WEEK = 7
WEEKS_PER_YEAR = 52
STANDARD_PAY_DELAY = 2  # weeks (N+2)
BONUS_PAY_DELAY = 6  # weeks (N+6)

DateLike = Union[date, datetime]


class WeekCalendar:
    """Converts between calendar dates and (week, work year) coordinates."""

    def __init__(self, seed_year: int = SEED_YEAR):
        self.seed_year = seed_year
        # Chained anchors for years after the seed, filled forward in order.
        self._week1_starts: Dict[int, date] = OrderedDict()

    def _check_year(self, work_year: int):
        if not MIN_WORK_YEAR <= work_year <= MAX_WORK_YEAR:
            raise InvalidWorkYearError(
                f"Work year {work_year} is outside the supported range "
                f"{MIN_WORK_YEAR}-{MAX_WORK_YEAR}",
                work_year=work_year
            )

    @staticmethod
    def _seed_week1_start(work_year: int) -> date:
        """Last Sunday on or before 31 December of the previous calendar year."""
        return date(work_year - 1, 12, 31) + relativedelta(weekday=SU(-1))

    @staticmethod
    def _has_week_53(week1_start: date) -> bool:
        week52_end = week1_start + timedelta(days=WEEKS_PER_YEAR * DAYS_PER_WEEK - 1)
        if week52_end.month != 12 or week52_end.day > 24:
            return False
        week53_end = week52_end + timedelta(days=DAYS_PER_WEEK)
        return week53_end <= date(week52_end.year, 12, 31)

    def week1_start_date(self, work_year: int) -> date:
        """Return the Sunday on which Week 1 of ``work_year`` starts."""
        self._check_year(work_year)

        if work_year <= self.seed_year:
            return self._seed_week1_start(work_year)

        cached = self._week1_starts.get(work_year)
        if cached is not None:
            return cached

        # Anchors are filled contiguously, so the newest entry is below work_year
        last_year = next(reversed(self._week1_starts), self.seed_year)
        start = self._week1_starts.get(last_year) or self._seed_week1_start(last_year)

        for year in range(last_year + 1, work_year + 1):
            weeks = WEEKS_PER_YEAR + 1 if self._has_week_53(start) else WEEKS_PER_YEAR
            start = start + timedelta(weeks=weeks)
            self._week1_starts[year] = start

        logger.debug(f"Resolved Week 1 anchors up to {work_year}")
        return start

    def weeks_in_year(self, work_year: int) -> int:
        """Number of weeks (52 or 53) in ``work_year``."""
        start = self.week1_start_date(work_year)

        if work_year < self.seed_year:
            # Unchained seed anchors: the year ends where the next one begins
            return (self.week1_start_date(work_year + 1) - start).days // DAYS_PER_WEEK

        return WEEKS_PER_YEAR + 1 if self._has_week_53(start) else WEEKS_PER_YEAR

    def week_date_range(self, week: int, work_year: int) -> Tuple[date, date]:
        """Sunday and Saturday bounding ``week`` of ``work_year``."""
        total_weeks = self.weeks_in_year(work_year)

        if week < 1 or week > total_weeks:
            raise InvalidWeekNumberError(
                f"Invalid week number {week} for work year {work_year}. "
                f"Valid range: 1-{total_weeks}",
                week=week,
                work_year=work_year
            )

        start_date = self.week1_start_date(work_year) + timedelta(weeks=week - 1)
        end_date = start_date + timedelta(days=DAYS_PER_WEEK - 1)
        return start_date, end_date

    def week_info(self, week: int, work_year: int) -> WeekInfo:
        start_date, end_date = self.week_date_range(week, work_year)
        return WeekInfo(week=week, year=work_year, start_date=start_date, end_date=end_date)

    def date_to_week(self, day: DateLike) -> WeekInfo:
        """Work week containing ``day``.

        Late-December dates may already belong to the next work year and early
        January dates may still belong to the previous one.
        """
        if isinstance(day, datetime):
            day = day.date()

        work_year = day.year
        week1_start = self.week1_start_date(work_year)

        if day < week1_start:
            work_year -= 1
            week1_start = self.week1_start_date(work_year)
        elif day.month == 12 and day.day >= 24:
            # Anchors never fall before 25 December
            if work_year < MAX_WORK_YEAR:
                next_start = self.week1_start_date(work_year + 1)
                if day >= next_start:
                    work_year += 1
                    week1_start = next_start
            elif (day - week1_start).days // DAYS_PER_WEEK >= self.weeks_in_year(work_year):
                raise InvalidWorkYearError(
                    f"{day} falls after the last supported work year {MAX_WORK_YEAR}",
                    work_year=MAX_WORK_YEAR + 1
                )

        week = (day - week1_start).days // DAYS_PER_WEEK + 1
        return self.week_info(week, work_year)

    def current_week(self, today: Optional[date] = None) -> WeekInfo:
        return self.date_to_week(today or date.today())

    def previous_week(self, week: int, work_year: int, weeks_back: int = 1) -> WeekInfo:
        """Step back ``weeks_back`` weeks, crossing work years as needed."""
        if weeks_back < 0:
            raise NegativeValueError(
                f"weeks_back cannot be negative: {weeks_back}", weeks_back=weeks_back
            )
        start_date, _ = self.week_date_range(week, work_year)
        return self.date_to_week(start_date - timedelta(weeks=weeks_back))

    def next_week(self, week: int, work_year: int, weeks_forward: int = 1) -> WeekInfo:
        """Step forward ``weeks_forward`` weeks, crossing work years as needed."""
        if weeks_forward < 0:
            raise NegativeValueError(
                f"weeks_forward cannot be negative: {weeks_forward}",
                weeks_forward=weeks_forward
            )
        start_date, _ = self.week_date_range(week, work_year)
        return self.date_to_week(start_date + timedelta(weeks=weeks_forward))

    def standard_payment_week(self, week: int, work_year: int) -> WeekInfo:
        """Week in which standard pay for the given work week lands."""
        return self.next_week(week, work_year, STANDARD_PAY_DELAY)

    def bonus_payment_week(self, week: int, work_year: int) -> WeekInfo:
        """Week in which the performance bonus for the given work week lands."""
        return self.next_week(week, work_year, BONUS_PAY_DELAY)

    def standard_pay_work_week(self, payment_week: int, work_year: int) -> WeekInfo:
        """Work week whose standard pay is received in ``payment_week``."""
        return self.previous_week(payment_week, work_year, STANDARD_PAY_DELAY)

    def bonus_work_week(self, payment_week: int, work_year: int) -> WeekInfo:
        """Work week whose performance bonus is received in ``payment_week``."""
        return self.previous_week(payment_week, work_year, BONUS_PAY_DELAY)

    def is_date_in_week(self, day: DateLike, week: int, work_year: int) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        start_date, end_date = self.week_date_range(week, work_year)
        return start_date <= day <= end_date

    def week_dates(self, week: int, work_year: int) -> List[date]:
        """All seven dates of the week, Sunday first."""
        start_date, _ = self.week_date_range(week, work_year)
        return [start_date + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]

    @staticmethod
    def format_week(week: int, work_year: int) -> str:
        return f"Week {week}, {work_year}"

    def format_week_range(self, week: int, work_year: int) -> str:
        """e.g. "Oct 5 - 11, 2025" or "Sep 28 - Oct 4, 2025"."""
        start_date, end_date = self.week_date_range(week, work_year)
        start_label = f"{start_date:%b} {start_date.day}"

        if start_date.month == end_date.month:
            return f"{start_label} - {end_date.day}, {end_date.year}"

        return f"{start_label} - {end_date:%b} {end_date.day}, {end_date.year}"


default_calendar = WeekCalendar()
