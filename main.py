#!/usr/bin/env python3
"""
Wager - CLI Entry Point

Courier pay and van deposit tracking for delivery drivers working a
Sunday-Saturday week with pay landing two weeks (standard pay) and six weeks
(performance bonus) after the work is done.
"""

import click
import sys
import logging
from datetime import date
from pathlib import Path

from wager.config import Config
from wager.exceptions import WagerError
from wager.money import format_currency
from wager.processor import PayProcessor

logger = logging.getLogger(__name__)


def _processor(config: str) -> PayProcessor:
    """Processor from the config file, or built-in defaults when it is absent."""
    if Path(config).exists():
        return PayProcessor(config)
    return PayProcessor(config=Config.default())


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected a YYYY-MM-DD date, got {value!r}")


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Wager - courier pay and van deposit calculator."""
    pass


@cli.command()
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
@click.option('--date', '-d', 'day', default=None, help='Date to look up (YYYY-MM-DD), default today')
def week(config: str, day: str):
    """Show the work week a date falls in and when it is paid."""
    try:
        processor = _processor(config)
        target = _parse_date(day) if day else date.today()
        processor.display_week_info(processor.calendar.date_to_week(target))
    except WagerError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('ledger', type=click.Path())
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
@click.option('--week', '-w', 'week_number', type=int, required=True, help='Work week number')
@click.option('--year', '-y', type=int, required=True, help='Work year')
@click.option('--no-deposit', is_flag=True, help='Leave the deposit instalment out')
@click.option('--output', '-o', default=None, help='Also save the breakdown as JSON here')
def pay(ledger: str, config: str, week_number: int, year: int, no_deposit: bool, output: str):
    """Show the standard pay breakdown for a work week."""
    try:
        processor = _processor(config)
        driver_ledger = processor.load_ledger(ledger)
        breakdown = processor.weekly_report(
            driver_ledger, week_number, year, include_deposit=not no_deposit
        )

        if breakdown is None:
            click.echo(f"No work logged for week {week_number}, {year}")
            return

        processor.display_breakdown(breakdown)
        if output:
            path = processor.save_results(breakdown, output, f"week_{year}_{week_number:02d}")
            click.echo(f"📄 Saved to {path}")

    except (WagerError, ValueError, FileNotFoundError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('ledger', type=click.Path())
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
@click.option('--week', '-w', 'week_number', type=int, default=None, help='Payment week number')
@click.option('--year', '-y', type=int, default=None, help='Work year of the payment week')
def payment(ledger: str, config: str, week_number: int, year: int):
    """Show everything received in a payment week (default: this week)."""
    try:
        processor = _processor(config)
        driver_ledger = processor.load_ledger(ledger)

        if week_number is None or year is None:
            current = processor.calendar.current_week()
            week_number, year = current.week, current.year

        summary = processor.payment_report(driver_ledger, week_number, year)
        processor.display_payment(summary)

    except (WagerError, ValueError, FileNotFoundError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('ledger', type=click.Path())
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
@click.option('--as-of', default=None, help='Reference date (YYYY-MM-DD), default today')
@click.option('--write', is_flag=True, help='Write recalculated deposits back to the ledger')
def deposits(ledger: str, config: str, as_of: str, write: bool):
    """Recalculate van deposits across the whole van history."""
    try:
        processor = _processor(config)
        driver_ledger = processor.load_ledger(ledger)
        reference = _parse_date(as_of) if as_of else None

        recalculation, updated = processor.recalculate_deposits(driver_ledger, reference)
        processor.display_deposits(recalculation)

        if write:
            processor.loader.save(updated, ledger)
            click.echo(f"✅ Deposits written to {ledger}")

    except (WagerError, ValueError, FileNotFoundError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('ledger', type=click.Path())
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
def validate(ledger: str, config: str):
    """Check a ledger against the pay rules."""
    try:
        processor = _processor(config)
        driver_ledger = processor.load_ledger(ledger)
        results = processor.validate_ledger(driver_ledger)

        warning_count = 0
        for result in results:
            for warning in result.warnings:
                click.echo(f"⚠️  {warning}")
                warning_count += 1

        click.echo(f"✅ {len(results)} weeks valid ({warning_count} mileage warnings)")

    except (WagerError, ValueError, FileNotFoundError) as e:
        click.echo(f"❌ Validation failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('ledger', type=click.Path())
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
def status(ledger: str, config: str):
    """Show ledger statistics."""
    try:
        processor = _processor(config)
        driver_ledger = processor.load_ledger(ledger)
        settings = processor.settings_for(driver_ledger)

        click.echo("📊 Ledger Status")
        click.echo("=" * 50)
        click.echo(f"Ledger file: {ledger}")
        click.echo(f"Work days logged: {len(driver_ledger.work_days)}")
        click.echo(f"Weeks worked: {len(driver_ledger.weeks_worked(processor.calendar))}")
        click.echo(f"Van hires: {len(driver_ledger.van_hires)}")
        click.echo(f"Invoicing service: {settings.invoicing_service.value}")
        click.echo(f"Deposit paid (cached): {format_currency(processor.cached_deposit_total(driver_ledger))}")

    except (WagerError, ValueError, FileNotFoundError) as e:
        click.echo(f"❌ Failed to get status: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option('--config', '-c', default='config.toml', help='Path to configuration file')
def validate_config(config: str):
    """Validate configuration file."""
    try:
        click.echo("🔍 Validating configuration...")

        cfg = Config.load(config)
        click.echo(f"✅ Configuration loaded: {config}")

        settings = cfg.settings()
        click.echo(
            f"✅ Rates: Normal £{settings.normal_rate / 100:.2f}, DRS £{settings.drs_rate / 100:.2f}, "
            f"mileage {settings.mileage_rate / 100:.2f}p/mile"
        )
        click.echo(f"✅ Invoicing service: {settings.invoicing_service.value}")

        if not hasattr(logging, cfg.output.log_level.upper()):
            click.echo(f"❌ Unknown log level: {cfg.output.log_level}", err=True)
            sys.exit(1)

        click.echo("🎉 Configuration validation successful!")

    except (FileNotFoundError, ValueError, TypeError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
