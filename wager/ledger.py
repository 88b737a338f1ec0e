"""Driver ledger files: the plain records the pay engine works from."""

import json
import logging
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field

from .models import Settings, VanHire, Week, WeekInfo, WorkDay
from .week_calendar import WeekCalendar, default_calendar

logger = logging.getLogger(__name__)


class DriverLedger(BaseModel):
    settings: Settings = Field(default_factory=Settings)
    work_days: List[WorkDay] = Field(default_factory=list)
    weeks: List[Week] = Field(default_factory=list)
    van_hires: List[VanHire] = Field(default_factory=list)
    manual_deposit_seed: int = 0

    def work_days_for_week(self, week_info: WeekInfo) -> List[WorkDay]:
        return sorted(
            (day for day in self.work_days
             if week_info.start_date <= day.date <= week_info.end_date),
            key=lambda day: day.date
        )

    def week_record(self, week: int, year: int) -> Optional[Week]:
        return next(
            (w for w in self.weeks if w.week_number == week and w.year == year), None
        )

    def weeks_worked(self, calendar: WeekCalendar = default_calendar) -> List[WeekInfo]:
        """Distinct work weeks that have at least one work day, oldest first."""
        seen = {}
        for day in sorted(self.work_days, key=lambda d: d.date):
            info = calendar.date_to_week(day.date)
            seen.setdefault((info.year, info.week), info)
        return list(seen.values())


class LedgerLoader:
    """Reads and writes ledger JSON files."""

    def __init__(self, json_indent: int = 2):
        self.json_indent = json_indent

    def load(self, ledger_path: str) -> DriverLedger:
        path = Path(ledger_path)
        if not path.exists():
            raise FileNotFoundError(f"Ledger file not found: {ledger_path}")

        ledger = DriverLedger.model_validate_json(path.read_text())
        logger.info(
            f"Loaded ledger {path.name}: {len(ledger.work_days)} work days, "
            f"{len(ledger.van_hires)} van hires"
        )
        return ledger

    def save(self, ledger: DriverLedger, ledger_path: str) -> Path:
        path = Path(ledger_path)
        with open(path, 'w') as f:
            json.dump(
                ledger.model_dump(mode="json"),
                f,
                indent=self.json_indent
            )
        logger.info(f"Ledger saved to {path}")
        return path
