"""Backtest-specific configuration.

Independent of app/config.py: defaults for the CLI, overridable via
BACKTEST_* environment variables or a .env file.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models.config import ArenaConfig


class BacktestSettings(BaseSettings):
    """Backtest configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BACKTEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Directory of <SYMBOL>.csv daily bar files
    data_dir: str = "data"

    # Arena
    initial_balance: float = 10_000.0
    risk_percent: float = 0.02
    max_pos_percent: float = 0.10
    buy_threshold: float = 50.0
    allow_short: bool = False

    # Portfolio
    initial_capital: float = 10_000.0
    period_days: int = 252
    commission_rate: float = 0.0

    def arena_config(self, **overrides) -> ArenaConfig:
        """Build an ArenaConfig from these settings plus explicit overrides."""
        values = {
            "initial_balance": self.initial_balance,
            "risk_percent": self.risk_percent,
            "max_pos_percent": self.max_pos_percent,
            "buy_threshold": self.buy_threshold,
            "allow_short": self.allow_short,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ArenaConfig(**values)


_settings: BacktestSettings | None = None


def get_backtest_settings() -> BacktestSettings:
    """Get cached backtest settings instance."""
    global _settings
    if _settings is None:
        _settings = BacktestSettings()
    return _settings
