"""Test configuration and shared fixtures."""

import pytest
import tempfile
import shutil
from pathlib import Path
from datetime import date

from wager.config import Config, RatesConfig, CalendarConfig, DepositConfig, OutputConfig
from wager.models import (
    InvoicingService, RouteType, Settings, VanHire, VanType, Week, WorkDay
)
from wager.pay_calculator import PayCalculator
from wager.week_calendar import WeekCalendar


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_config():
    """Create a sample configuration for testing."""
    return Config(
        rates=RatesConfig(
            normal_rate=16000,
            drs_rate=10000,
            mileage_rate=1988,
            invoicing_service="Self-Invoicing"
        ),
        calendar=CalendarConfig(seed_year=2024),
        deposits=DepositConfig(payment_lag_weeks=2),
        output=OutputConfig(
            log_level="INFO",
            json_indent=2,
            console_summary=True
        )
    )


@pytest.fixture
def sample_settings():
    """Default driver settings."""
    return Settings(
        normal_rate=16000,
        drs_rate=10000,
        mileage_rate=1988,
        invoicing_service=InvoicingService.SELF_INVOICING
    )


@pytest.fixture
def calendar():
    """A fresh calendar so anchor caching starts empty in every test."""
    return WeekCalendar()


@pytest.fixture
def calculator(sample_settings, calendar):
    return PayCalculator(sample_settings, calendar)


@pytest.fixture
def make_work_day():
    """Factory for work days with sensible defaults."""
    def _make(day=date(2025, 1, 13), **overrides):
        fields = dict(
            date=day,
            route_type=RouteType.NORMAL,
            route_number="R123",
            daily_rate=16000,
            stops_given=0,
            stops_taken=0,
            amazon_paid_miles=0,
            van_logged_miles=0,
            mileage_rate=1988
        )
        fields.update(overrides)
        return WorkDay(**fields)
    return _make


@pytest.fixture
def make_van_hire():
    """Factory for van hires with sensible defaults."""
    def _make(on_hire_date=date(2025, 1, 5), off_hire_date=None, **overrides):
        fields = dict(
            registration="AB12 CDE",
            van_type=VanType.FLEET,
            on_hire_date=on_hire_date,
            off_hire_date=off_hire_date,
            weekly_rate=25000
        )
        fields.update(overrides)
        return VanHire(**fields)
    return _make


@pytest.fixture
def week_six_days(make_work_day):
    """Six Normal-route days in week 3 of 2025 (Sun 12 Jan - Sat 18 Jan)."""
    return [make_work_day(date(2025, 1, day)) for day in range(12, 18)]


@pytest.fixture
def sample_week():
    """Week 3 of 2025 without rankings."""
    return Week(week_number=3, year=2025)
