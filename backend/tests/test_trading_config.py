"""Tests for trading_config.py and the settings models."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from app.trading_config import RiskEntry, TradingConfig, load_trading_config
from backtest.config import BacktestSettings
from core.models.config import ArenaConfig, CircuitBreakerConfig, CouncilConfig


# ── TradingConfig model tests ─────────────────────────────────────────────


class TestTradingConfig:
    def test_defaults(self):
        config = TradingConfig()

        assert config.symbols == []
        assert config.auto_trade is False
        assert config.confidence_threshold == 60
        assert config.circuit_breaker == CircuitBreakerConfig()
        assert config.council == CouncilConfig()

    def test_unknown_role_weight_rejected(self):
        with pytest.raises(ValidationError, match="unknown roles"):
            TradingConfig(council={"role_weights": {"oracle": 2.0}})

    def test_role_weights_case_insensitive(self):
        config = TradingConfig(council={"role_weights": {"chairman": 3.0}})
        assert config.council.role_weights == {"chairman": 3.0}

    def test_unknown_agent_rejected(self):
        with pytest.raises(ValidationError, match="unknown agents"):
            TradingConfig(council={"agents": ["trend", "oracle"]})

    def test_council_agents_from_list(self):
        config = TradingConfig(council={"agents": ["trend", "reversal"]})
        assert config.council.agents == ("trend", "reversal")

    def test_threshold_bounds(self):
        with pytest.raises(ValidationError):
            TradingConfig(confidence_threshold=150)


class TestRiskEntry:
    def test_to_risk_parameters(self):
        params = RiskEntry(risk_per_trade_percent=0.01).to_risk_parameters(50_000)

        assert params.account_equity == 50_000
        assert params.risk_per_trade_percent == 0.01
        assert params.max_position_size_percent == 0.20

    @pytest.mark.parametrize("value", [0, -0.1, 1.5])
    def test_fraction_out_of_range(self, value):
        with pytest.raises(ValidationError, match="fraction"):
            RiskEntry(risk_per_trade_percent=value)


class TestConfigModels:
    def test_breaker_fraction_validation(self):
        with pytest.raises(ValidationError):
            CircuitBreakerConfig(max_daily_loss_percent=5)

    def test_negative_cooldown_rejected(self):
        with pytest.raises(ValidationError):
            CircuitBreakerConfig(cooldown_ms=-1)

    def test_arena_defaults(self):
        config = ArenaConfig()

        assert config.initial_balance == 10_000
        assert config.buy_threshold == 50
        assert config.stop_loss_percent == 0.05
        assert config.take_profit_percent == 0.10
        assert config.warmup_bars == 50
        assert config.allow_short is False


# ── load_trading_config tests ─────────────────────────────────────────────


class TestLoadTradingConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_trading_config(tmp_path / "trading.yaml")
        assert config == TradingConfig()

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "trading.yaml"
        path.write_text("")
        assert load_trading_config(path) == TradingConfig()

    def test_full_file(self, tmp_path: Path):
        path = tmp_path / "trading.yaml"
        path.write_text(textwrap.dedent("""
            symbols: [AAPL, MSFT]
            auto_trade: true
            confidence_threshold: 70
            risk:
              risk_per_trade_percent: 0.01
              max_position_size_percent: 0.15
            circuit_breaker:
              max_daily_loss_percent: 0.03
              cooldown_ms: 120000
            council:
              deadband: 15
              role_weights:
                CHAIRMAN: 3.0
        """))
        config = load_trading_config(path)

        assert config.symbols == ["AAPL", "MSFT"]
        assert config.auto_trade is True
        assert config.confidence_threshold == 70
        assert config.risk.max_position_size_percent == 0.15
        assert config.circuit_breaker.max_daily_loss_percent == 0.03
        assert config.circuit_breaker.cooldown_ms == 120_000
        assert config.circuit_breaker.max_position_size_percent == 0.20
        assert config.council.deadband == 15
        assert config.council.role_weights == {"CHAIRMAN": 3.0}

    def test_invalid_file_raises(self, tmp_path: Path):
        path = tmp_path / "trading.yaml"
        path.write_text("risk:\n  risk_per_trade_percent: 2\n")

        with pytest.raises(ValidationError):
            load_trading_config(path)


# ── BacktestSettings tests ────────────────────────────────────────────────


class TestBacktestSettings:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BACKTEST_BUY_THRESHOLD", "65")
        monkeypatch.setenv("BACKTEST_ALLOW_SHORT", "true")
        settings = BacktestSettings(_env_file=None)

        assert settings.buy_threshold == 65
        assert settings.allow_short is True

    def test_arena_config_overrides(self):
        settings = BacktestSettings(_env_file=None)
        config = settings.arena_config(initial_balance=50_000, buy_threshold=None)

        assert config.initial_balance == 50_000
        assert config.buy_threshold == settings.buy_threshold
