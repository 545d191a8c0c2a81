"""Report formatting for backtest results.

Outputs results to console (formatted tables) and JSON files.
"""

from __future__ import annotations

import json

from pydantic import BaseModel

from backtest.stats import BacktestReport, PortfolioBacktestResult


class ReportFormatter:
    """Format backtest results for display and export."""

    @staticmethod
    def print_console(report: BacktestReport) -> None:
        """Print a single-asset Arena report."""
        print("\n" + "=" * 70)
        print(f"  ARENA BACKTEST — {report.symbol}")
        print("=" * 70)
        print(f"  Bars:           {report.total_days}")
        print(f"  Initial:        {report.initial_balance:,.2f}")
        print(f"  Final:          {report.final_balance:,.2f}")
        print(f"  Profit:         {report.profit:+,.2f} ({report.profit_percent:+.2f}%)")
        print(f"  Trades:         {report.trade_count}")
        print(f"  Win rate:       {report.win_rate:.1f}%")
        print(f"  Max drawdown:   {report.max_drawdown:.2f}%")
        print(f"  Profit factor:  {report.profit_factor:.2f}")

        if report.trades:
            print("\n" + "-" * 70)
            print("  TRADES")
            print("-" * 70)
            print(
                f"  {'Side':<6} {'Entry':<11} {'Price':>10} {'Exit':<11} "
                f"{'Price':>10} {'Qty':>6} {'PnL':>10}  Reason"
            )
            for t in report.trades:
                exit_date = f"{t.exit_date:%Y-%m-%d}" if t.exit_date else "-"
                exit_price = f"{t.exit_price:>10.2f}" if t.exit_price is not None else f"{'-':>10}"
                print(
                    f"  {t.side.value:<6} {t.entry_date:%Y-%m-%d}  {t.entry_price:>10.2f} "
                    f"{exit_date:<11} {exit_price} {t.quantity:>6} {t.pnl:>+10.2f}  {t.reason}"
                )
        print("=" * 70 + "\n")

    @staticmethod
    def print_portfolio(result: PortfolioBacktestResult) -> None:
        """Print a portfolio backtest report."""
        print("\n" + "=" * 70)
        print("  PORTFOLIO BACKTEST")
        print("=" * 70)
        if result.portfolio_history:
            start = result.portfolio_history[0].time
            end = result.portfolio_history[-1].time
            print(f"  Period:         {start:%Y-%m-%d} → {end:%Y-%m-%d} ({result.period_days} days)")
        print(f"  Initial:        {result.initial_capital:,.2f}")
        print(f"  Final:          {result.final_value:,.2f}")
        print(f"  Total return:   {result.total_return_percent:+.2f}%")
        print(f"  CAGR:           {result.annualized_return:+.2f}%")
        print(f"  Volatility:     {result.volatility:.2f}%")
        print(f"  Sharpe:         {result.sharpe_ratio:.2f}")
        print(f"  Max drawdown:   {result.max_drawdown:.2f}%")
        print(f"  Commission:     {result.total_commission:,.2f}")

        print("\n" + "-" * 70)
        print("  BY ASSET")
        print("-" * 70)
        print(f"  {'Symbol':<10} {'Weight':>8} {'Initial':>12} {'Final':>12} {'Return':>9}")
        for a in result.asset_results:
            print(
                f"  {a.symbol:<10} {a.weight:>7.2f}% {a.initial_value:>12,.2f} "
                f"{a.final_value:>12,.2f} {a.return_percent:>+8.2f}%"
            )
        print("=" * 70 + "\n")

    @staticmethod
    def to_dict(result: BaseModel) -> dict:
        """Convert a result to a JSON-serializable dict."""
        return result.model_dump(mode="json")

    @staticmethod
    def save_json(result: BaseModel, filepath: str) -> None:
        """Save results to JSON file."""
        data = ReportFormatter.to_dict(result)
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)
        print(f"\nResults saved to {filepath}")
