"""Orchestration and console reporting for the Wager pay engine."""

import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from .config import Config
from .deposits import total_deposit_paid
from .engine import PayEngine
from .ledger import DriverLedger, LedgerLoader
from .models import (
    DepositRecalculation,
    PaymentSummary,
    Settings,
    WeekInfo,
    WeeklyPayBreakdown,
    WeekValidation,
)
from .money import format_currency, format_mileage
from .validation import mileage_warnings, validate_van_hires, validate_week_work_days
from .week_calendar import WeekCalendar

logger = logging.getLogger(__name__)


class PayProcessor:
    """Loads a driver ledger, runs the engine and reports the results."""

    def __init__(self, config_path: str = "config.toml", config: Optional[Config] = None):
        self.config = config or Config.load(config_path)
        self.console = Console()
        self.calendar = WeekCalendar(self.config.calendar.seed_year)
        self.loader = LedgerLoader(self.config.output.json_indent)

        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.output.log_level.upper())
        handlers = [logging.StreamHandler()]
        if self.config.output.log_file:
            handlers.append(logging.FileHandler(self.config.output.log_file))

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )

    def load_ledger(self, ledger_path: str) -> DriverLedger:
        return self.loader.load(ledger_path)

    def settings_for(self, ledger: DriverLedger) -> Settings:
        """The ledger's own settings, or the configured defaults when it has none."""
        if "settings" in ledger.model_fields_set:
            return ledger.settings
        return self.config.settings()

    def engine_for(self, ledger: DriverLedger) -> PayEngine:
        return PayEngine(
            self.settings_for(ledger),
            van_hires=ledger.van_hires,
            manual_deposit_seed=ledger.manual_deposit_seed,
            calendar=self.calendar,
            payment_lag_weeks=self.config.deposits.payment_lag_weeks
        )

    def weekly_report(self, ledger: DriverLedger, week: int, year: int,
                      include_deposit: bool = True) -> Optional[WeeklyPayBreakdown]:
        """Breakdown for a work week, or None when no work was logged."""
        week_info = self.calendar.week_info(week, year)
        work_days = ledger.work_days_for_week(week_info)
        if not work_days:
            logger.info(f"No work logged for week {week}, {year}")
            return None

        return self.engine_for(ledger).weekly_pay(
            week_info,
            work_days,
            week=ledger.week_record(week, year),
            include_deposit=include_deposit
        )

    def payment_report(self, ledger: DriverLedger, week: int, year: int) -> PaymentSummary:
        return self.engine_for(ledger).payment_for_week(
            week, year, ledger.work_days, ledger.weeks
        )

    def recalculate_deposits(self, ledger: DriverLedger,
                             as_of: Optional[date] = None) -> Tuple[DepositRecalculation, DriverLedger]:
        """Full deposit recalculation and a ledger copy carrying the new snapshot."""
        engine = self.engine_for(ledger)
        recalculation = engine.deposits.recalculate(
            ledger.van_hires, ledger.manual_deposit_seed, as_of
        )
        updated = ledger.model_copy(update={
            "van_hires": engine.deposits.apply(ledger.van_hires, recalculation)
        })

        logger.info(
            f"Recalculated deposits for {len(recalculation.allocations)} vans: "
            f"{format_currency(recalculation.total_paid)} paid"
        )
        return recalculation, updated

    def validate_ledger(self, ledger: DriverLedger) -> List[WeekValidation]:
        """Validate every logged week; raises on the first broken rule."""
        validate_van_hires(ledger.van_hires)
        self.engine_for(ledger)

        results = []
        for week_info in ledger.weeks_worked(self.calendar):
            work_days = ledger.work_days_for_week(week_info)
            validate_week_work_days(work_days, week_info)
            results.append(WeekValidation(
                week_info=week_info,
                days_worked=len(work_days),
                warnings=mileage_warnings(work_days)
            ))

        logger.info(f"Validated {len(results)} work weeks")
        return results

    def save_results(self, result: BaseModel, output_path: str = "output",
                     name: str = "result") -> Path:
        """Save a computed result as JSON."""
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        file_path = output_dir / f"{name}.json"
        with open(file_path, 'w') as f:
            json.dump(
                result.model_dump(mode="json"),
                f,
                indent=self.config.output.json_indent
            )

        logger.info(f"Results saved to {file_path}")
        return file_path

    def display_week_info(self, week_info: WeekInfo):
        table = Table(title=self.calendar.format_week(week_info.week, week_info.year))
        table.add_column("Item", style="cyan")
        table.add_column("Value", style="green")

        standard = self.calendar.standard_payment_week(week_info.week, week_info.year)
        bonus = self.calendar.bonus_payment_week(week_info.week, week_info.year)

        table.add_row("Dates", self.calendar.format_week_range(week_info.week, week_info.year))
        table.add_row("Weeks in year", str(self.calendar.weeks_in_year(week_info.year)))
        table.add_row("Standard pay received", self.calendar.format_week(standard.week, standard.year))
        table.add_row("Bonus received", self.calendar.format_week(bonus.week, bonus.year))

        self.console.print(table)

    def display_breakdown(self, breakdown: WeeklyPayBreakdown):
        if not self.config.output.console_summary:
            return

        info = breakdown.week_info
        table = Table(title=f"{self.calendar.format_week(info.week, info.year)} "
                            f"({self.calendar.format_week_range(info.week, info.year)})")
        table.add_column("Component", style="cyan")
        table.add_column("Amount", style="green", justify="right")

        table.add_row(f"Base pay ({breakdown.days_worked} days)", format_currency(breakdown.base_pay))
        table.add_row("6-day bonus", format_currency(breakdown.six_day_bonus))
        table.add_row(
            f"Sweeps (+{breakdown.stops_given} / -{breakdown.stops_taken})",
            format_currency(breakdown.sweep_adjustment)
        )
        table.add_row(
            f"Mileage ({format_mileage(breakdown.total_amazon_miles)})",
            format_currency(breakdown.mileage_payment)
        )
        for van in breakdown.van_breakdown:
            table.add_row(f"Van {van.registration} ({van.days} days)", format_currency(-van.van_cost))
        table.add_row("Deposit", format_currency(-breakdown.deposit_payment))
        table.add_row("Invoicing", format_currency(-breakdown.invoicing_cost))

        style = "bold red" if breakdown.standard_pay < 0 else "bold green"
        table.add_row("[bold]Standard pay[/bold]", f"[{style}]{format_currency(breakdown.standard_pay)}[/{style}]")

        self.console.print(table)

        if breakdown.mileage_discrepancy:
            self.console.print(
                f"[yellow]Unpaid mileage:[/yellow] "
                f"{format_mileage(breakdown.mileage_discrepancy_miles)} "
                f"(about {format_currency(breakdown.mileage_discrepancy)} in fuel)"
            )
        if breakdown.standard_payment_week:
            paid = breakdown.standard_payment_week
            self.console.print(f"[bold]Paid in:[/bold] {self.calendar.format_week(paid.week, paid.year)}")

    def display_payment(self, summary: PaymentSummary):
        week = summary.payment_week
        self.console.print(
            f"\n[bold cyan]Payment for {self.calendar.format_week(week.week, week.year)}[/bold cyan]"
        )

        if summary.standard_pay:
            self.display_breakdown(summary.standard_pay)
        else:
            standard = summary.standard_pay_week
            self.console.print(
                f"No standard pay (no work in {self.calendar.format_week(standard.week, standard.year)})"
            )

        bonus = summary.bonus_week
        self.console.print(
            f"[bold]Performance bonus[/bold] ({self.calendar.format_week(bonus.week, bonus.year)}): "
            f"{format_currency(summary.bonus_payment)}"
        )
        if summary.rankings_missing:
            self.console.print("[yellow]Rankings have not been entered for the bonus week[/yellow]")

        style = "bold red" if summary.total_payment < 0 else "bold green"
        self.console.print(f"[{style}]Total payment: {format_currency(summary.total_payment)}[/{style}]")

    def display_deposits(self, recalculation: DepositRecalculation):
        table = Table(title=f"Van Deposits (as of {recalculation.as_of})")
        table.add_column("Van", style="cyan")
        table.add_column("On hire", style="blue")
        table.add_column("Weeks", style="magenta", justify="right")
        table.add_column("Deposit", style="green", justify="right")

        if recalculation.manual_deposit_seed:
            table.add_row("Paid before tracking", "", "", format_currency(recalculation.manual_deposit_seed))

        for allocation in recalculation.allocations:
            table.add_row(
                allocation.registration,
                str(allocation.on_hire_date),
                str(allocation.weeks_counted),
                format_currency(allocation.deposit_paid)
            )

        self.console.print(table)
        status = "complete" if recalculation.complete else "in progress"
        self.console.print(f"[bold]Total paid:[/bold] {format_currency(recalculation.total_paid)} ({status})")

    def cached_deposit_total(self, ledger: DriverLedger) -> int:
        return total_deposit_paid(ledger.van_hires, ledger.manual_deposit_seed)
