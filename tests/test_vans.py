"""Tests for van hire helpers."""

import pytest
from datetime import date

from wager.exceptions import InvalidHirePeriodError, NegativeValueError
from wager.vans import (
    active_van,
    days_active_in_period,
    deposit_hold_until,
    off_hire,
    refund_deposit,
    van_for_date,
    van_pro_rata,
    vans_for_period,
    weekly_van_costs,
)


def test_van_pro_rata():
    """Test weekly rate / 7 per day, rounded to the penny."""
    assert van_pro_rata(25000, 7) == 25000
    assert van_pro_rata(25000, 3) == 10714
    assert van_pro_rata(21000, 4) == 12000
    assert van_pro_rata(25000, 0) == 0


def test_days_active_in_period(make_van_hire):
    """Test inclusive overlap with a Sunday-Saturday week."""
    week_start, week_end = date(2025, 1, 12), date(2025, 1, 18)

    all_week = make_van_hire(on_hire_date=date(2025, 1, 5))
    assert days_active_in_period(all_week, week_start, week_end) == 7

    from_wednesday = make_van_hire(on_hire_date=date(2025, 1, 15))
    assert days_active_in_period(from_wednesday, week_start, week_end) == 4

    returned_monday = make_van_hire(on_hire_date=date(2025, 1, 5), off_hire_date=date(2025, 1, 13))
    assert days_active_in_period(returned_monday, week_start, week_end) == 2

    later = make_van_hire(on_hire_date=date(2025, 1, 19))
    assert days_active_in_period(later, week_start, week_end) == 0


def test_mid_week_van_change(make_van_hire):
    """Test switching vans mid-week charges each van for its own days."""
    first = make_van_hire(
        on_hire_date=date(2025, 1, 5), off_hire_date=date(2025, 1, 14),
        registration="AB12 CDE", weekly_rate=25000
    )
    second = make_van_hire(
        on_hire_date=date(2025, 1, 15), registration="XY34 ZZZ", weekly_rate=21000
    )

    costs = weekly_van_costs([second, first], date(2025, 1, 12), date(2025, 1, 18))

    assert [cost.registration for cost in costs] == ["AB12 CDE", "XY34 ZZZ"]
    assert [cost.days for cost in costs] == [3, 4]
    assert [cost.van_cost for cost in costs] == [10714, 12000]


def test_vans_for_period_and_lookups(make_van_hire):
    first = make_van_hire(
        on_hire_date=date(2025, 1, 5), off_hire_date=date(2025, 1, 14), registration="AB12 CDE"
    )
    second = make_van_hire(on_hire_date=date(2025, 1, 15), registration="XY34 ZZZ")

    assert vans_for_period([first, second], date(2025, 1, 5), date(2025, 1, 11)) == [first]
    assert active_van([first, second]) == second
    assert active_van([first]) is None
    assert van_for_date([first, second], date(2025, 1, 13)) == first
    assert van_for_date([first, second], date(2025, 1, 20)) == second
    assert van_for_date([first, second], date(2025, 1, 1)) is None


def test_off_hire_holds_deposit(make_van_hire):
    """Test off-hiring sets the six-week deposit hold."""
    van = make_van_hire(on_hire_date=date(2025, 1, 5))
    returned = off_hire(van, date(2025, 3, 1))

    assert returned.off_hire_date == date(2025, 3, 1)
    assert returned.deposit_hold_until == date(2025, 4, 12)
    assert deposit_hold_until(date(2025, 3, 1)) == date(2025, 4, 12)
    assert not returned.is_active
    assert van.is_active


def test_off_hire_before_on_hire(make_van_hire):
    van = make_van_hire(on_hire_date=date(2025, 1, 5))
    with pytest.raises(InvalidHirePeriodError):
        off_hire(van, date(2025, 1, 4))


def test_refund_deposit(make_van_hire):
    van = make_van_hire(deposit_paid=50000, deposit_complete=True)
    refunded = refund_deposit(van, 45000)

    assert refunded.deposit_refunded
    assert refunded.deposit_refund_amount == 45000

    with pytest.raises(NegativeValueError):
        refund_deposit(van, -100)
