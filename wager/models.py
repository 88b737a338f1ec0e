"""Data models for the Wager pay engine.

All money is held as integer pence. Mileage rates are integers scaled by
10,000 per pound (1988 = 19.88p per mile).
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class RouteType(str, Enum):
    NORMAL = "Normal"
    DRS = "DRS"


class PerformanceLevel(str, Enum):
    POOR = "Poor"
    FAIR = "Fair"
    GREAT = "Great"
    FANTASTIC = "Fantastic"
    FANTASTIC_PLUS = "Fantastic+"


class InvoicingService(str, Enum):
    SELF_INVOICING = "Self-Invoicing"
    VERSO_BASIC = "Verso-Basic"
    VERSO_FULL = "Verso-Full"


class VanType(str, Enum):
    FLEET = "Fleet"
    FLEXI = "Flexi"


class Settings(BaseModel):
    normal_rate: int = Field(default=16000, ge=0)
    drs_rate: int = Field(default=10000, ge=0)
    mileage_rate: int = Field(default=1988, ge=0)
    invoicing_service: InvoicingService = InvoicingService.SELF_INVOICING


class WorkDay(BaseModel):
    id: Optional[str] = None
    date: date
    route_type: RouteType = RouteType.NORMAL
    route_number: Optional[str] = None
    daily_rate: int = Field(ge=0)
    stops_given: int = 0
    stops_taken: int = 0
    amazon_paid_miles: Optional[float] = None
    van_logged_miles: Optional[float] = None
    mileage_rate: int = Field(default=1988, ge=0)
    notes: Optional[str] = None


class Week(BaseModel):
    id: Optional[str] = None
    week_number: int = Field(ge=1, le=53)
    year: int
    individual_level: Optional[PerformanceLevel] = None
    company_level: Optional[PerformanceLevel] = None
    bonus_amount: int = 0
    mileage_rate: Optional[int] = Field(default=None, ge=0)
    invoicing_service: Optional[InvoicingService] = None
    rankings_entered_at: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def has_rankings(self) -> bool:
        return self.individual_level is not None and self.company_level is not None


class VanHire(BaseModel):
    id: Optional[str] = None
    registration: str
    van_type: Optional[VanType] = None
    on_hire_date: date
    off_hire_date: Optional[date] = None
    weekly_rate: int = Field(ge=0)
    deposit_paid: int = 0
    deposit_complete: bool = False
    deposit_refunded: bool = False
    deposit_refund_amount: Optional[int] = None
    deposit_hold_until: Optional[date] = None
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.off_hire_date is None


class WeekInfo(BaseModel):
    week: int
    year: int
    start_date: date
    end_date: date


class MileageSummary(BaseModel):
    total_amazon_miles: float = 0.0
    total_van_miles: float = 0.0
    discrepancy_miles: float = 0.0
    discrepancy_value: int = 0
    mileage_pay: int = 0


class MileageDiscrepancy(BaseModel):
    miles: float = 0.0
    value: int = 0


class VanWeekCost(BaseModel):
    registration: str
    van_id: Optional[str] = None
    days: int
    van_cost: int


class WeeklyPayBreakdown(BaseModel):
    week_info: WeekInfo
    days_worked: int
    base_pay: int
    six_day_bonus: int
    sweep_adjustment: int
    stops_given: int
    stops_taken: int
    mileage_payment: int
    total_amazon_miles: float
    total_van_miles: float
    mileage_discrepancy: int
    mileage_discrepancy_miles: float
    van_deduction: int
    deposit_payment: int
    invoicing_cost: int
    standard_pay: int
    performance_bonus: int = 0
    van_breakdown: List[VanWeekCost] = Field(default_factory=list)
    standard_payment_week: Optional[WeekInfo] = None
    bonus_payment_week: Optional[WeekInfo] = None


class PaymentSummary(BaseModel):
    payment_week: WeekInfo
    standard_pay_week: WeekInfo
    bonus_week: WeekInfo
    standard_pay: Optional[WeeklyPayBreakdown] = None
    bonus_payment: int = 0
    total_payment: int = 0
    rankings_missing: bool = False


class VanDepositAllocation(BaseModel):
    registration: str
    van_id: Optional[str] = None
    on_hire_date: date
    weeks_counted: int
    deposit_paid: int
    deposit_complete: bool = False


class DepositRecalculation(BaseModel):
    as_of: date
    manual_deposit_seed: int = 0
    allocations: List[VanDepositAllocation] = Field(default_factory=list)
    total_paid: int = 0
    complete: bool = False


class WeekValidation(BaseModel):
    week_info: Optional[WeekInfo] = None
    days_worked: int = 0
    warnings: List[str] = Field(default_factory=list)
