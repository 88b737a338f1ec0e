"""Configuration management for the Wager pay engine."""

import toml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .models import InvoicingService, Settings


@dataclass
class RatesConfig:
    normal_rate: int = 16000
    drs_rate: int = 10000
    mileage_rate: int = 1988
    invoicing_service: str = InvoicingService.SELF_INVOICING.value


@dataclass
class CalendarConfig:
    seed_year: int = 2024


@dataclass
class DepositConfig:
    payment_lag_weeks: int = 2


@dataclass
class OutputConfig:
    log_level: str = "INFO"
    json_indent: int = 2
    console_summary: bool = True
    log_file: Optional[str] = None


@dataclass
class Config:
    rates: RatesConfig = field(default_factory=RatesConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    deposits: DepositConfig = field(default_factory=DepositConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(cls, config_path: str = "config.toml") -> "Config":
        """Load configuration from TOML file."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        data = toml.load(config_file)

        return cls(
            rates=RatesConfig(**data.get("rates", {})),
            calendar=CalendarConfig(**data.get("calendar", {})),
            deposits=DepositConfig(**data.get("deposits", {})),
            output=OutputConfig(**data.get("output", {}))
        )

    @classmethod
    def default(cls) -> "Config":
        """Build the built-in defaults without touching the filesystem."""
        return cls()

    def settings(self) -> Settings:
        """Driver settings record built from the configured rates."""
        return Settings(
            normal_rate=self.rates.normal_rate,
            drs_rate=self.rates.drs_rate,
            mileage_rate=self.rates.mileage_rate,
            invoicing_service=InvoicingService(self.rates.invoicing_service)
        )
