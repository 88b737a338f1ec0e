"""Tests for the pay engine."""

import pytest
from datetime import date

from wager.engine import PayEngine, group_work_days_by_week
from wager.exceptions import InvalidDepositAdjustmentError, MultipleActiveVansError
from wager.models import PerformanceLevel, Week


@pytest.fixture
def engine(sample_settings, calendar):
    return PayEngine(sample_settings, calendar=calendar)


@pytest.fixture
def bonus_week_days(make_work_day):
    """Two days in week 51 of 2024 (Sun 15 Dec - Sat 21 Dec)."""
    return [make_work_day(date(2024, 12, 16)), make_work_day(date(2024, 12, 17))]


def test_engine_validates_inputs(sample_settings, calendar, make_van_hire):
    with pytest.raises(InvalidDepositAdjustmentError):
        PayEngine(sample_settings, manual_deposit_seed=60000, calendar=calendar)

    vans = [
        make_van_hire(registration="AB12 CDE"),
        make_van_hire(registration="XY34 ZZZ", on_hire_date=date(2025, 2, 1)),
    ]
    with pytest.raises(MultipleActiveVansError):
        PayEngine(sample_settings, van_hires=vans, calendar=calendar)


def test_group_work_days_by_week(calendar, make_work_day, week_six_days):
    days = [make_work_day(date(2025, 1, 3))] + list(reversed(week_six_days))
    grouped = group_work_days_by_week(days, calendar)

    assert set(grouped) == {(1, 2025), (3, 2025)}
    assert len(grouped[(3, 2025)]) == 6
    assert grouped[(3, 2025)][0].date == date(2025, 1, 12)


def test_weekly_pay_includes_deposit(sample_settings, calendar, week_six_days, make_van_hire):
    """Test the deposit instalment comes out of standard pay."""
    van = make_van_hire(on_hire_date=date(2025, 1, 5), weekly_rate=25000)
    engine = PayEngine(sample_settings, van_hires=[van], calendar=calendar)
    week_info = calendar.week_info(3, 2025)

    breakdown = engine.weekly_pay(week_info, week_six_days)
    assert breakdown.deposit_payment == 2500
    assert breakdown.standard_pay == 96000 + 3000 - 25000 - 2500

    without_deposit = engine.weekly_pay(week_info, week_six_days, include_deposit=False)
    assert without_deposit.deposit_payment == 0
    assert without_deposit.standard_pay == 96000 + 3000 - 25000


def test_payment_for_week(engine, week_six_days, bonus_week_days):
    """Test payment week N gets standard pay from N-2 and bonus from N-6."""
    ranked = Week(
        week_number=51, year=2024,
        individual_level=PerformanceLevel.FANTASTIC_PLUS,
        company_level=PerformanceLevel.FANTASTIC_PLUS
    )

    summary = engine.payment_for_week(5, 2025, week_six_days + bonus_week_days, [ranked])

    assert (summary.standard_pay_week.week, summary.standard_pay_week.year) == (3, 2025)
    assert (summary.bonus_week.week, summary.bonus_week.year) == (51, 2024)
    assert summary.standard_pay.standard_pay == 99000
    assert summary.bonus_payment == 3200
    assert summary.total_payment == 102200
    assert not summary.rankings_missing


def test_payment_for_week_missing_rankings(engine, week_six_days, bonus_week_days):
    summary = engine.payment_for_week(5, 2025, week_six_days + bonus_week_days)

    assert summary.bonus_payment == 0
    assert summary.rankings_missing
    assert summary.total_payment == 99000


def test_payment_for_week_without_work(engine, week_six_days):
    summary = engine.payment_for_week(10, 2025, week_six_days)

    assert summary.standard_pay is None
    assert summary.bonus_payment == 0
    assert summary.total_payment == 0
    assert not summary.rankings_missing
