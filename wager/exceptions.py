"""Error types raised by the pay engine."""


class WagerError(Exception):
    """Base class for all pay engine errors."""


class InvalidInputError(WagerError, ValueError):
    """An argument or record breaks one of the pay rules."""

    constraint = "invalid_input"

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.details = details


class InvalidWorkYearError(InvalidInputError):
    constraint = "work_year_range"


class InvalidWeekNumberError(InvalidInputError):
    constraint = "week_number_range"


class NegativeValueError(InvalidInputError):
    constraint = "non_negative"


class SweepLimitExceededError(InvalidInputError):
    constraint = "max_sweeps_per_day"


class TooManyWorkDaysError(InvalidInputError):
    constraint = "max_days_per_week"


class DuplicateWorkDayError(InvalidInputError):
    constraint = "one_work_day_per_date"


class WorkDayOutsideWeekError(InvalidInputError):
    constraint = "work_day_in_week"


class InvalidHirePeriodError(InvalidInputError):
    constraint = "off_hire_after_on_hire"


class MultipleActiveVansError(InvalidInputError):
    constraint = "single_active_van"


class InvalidDepositAdjustmentError(InvalidInputError):
    constraint = "deposit_adjustment_range"
