"""CLI entry point for the backtesting system.

Reads daily bars from ``<data-dir>/<SYMBOL>.csv``.

Usage:
    python -m backtest arena AAPL
    python -m backtest arena AAPL --buy-threshold 60 --allow-short -o aapl.json
    python -m backtest portfolio SPY:60 AGG:40 --commission 0.001
    python -m backtest analyze AAPL
"""

from __future__ import annotations

import argparse
import logging
import sys

from core.consensus import Council

from backtest.arena import Arena
from backtest.config import get_backtest_settings
from backtest.errors import BacktestError
from backtest.portfolio import PortfolioAssetConfig, run_portfolio_backtest
from backtest.report import ReportFormatter
from backtest.storage.bar_source import CsvBarSource, load_many

logger = logging.getLogger(__name__)


def parse_asset(spec: str) -> PortfolioAssetConfig:
    """Parse SYMBOL:WEIGHT (weight in percent)."""
    symbol, sep, weight = spec.partition(":")
    if not sep or not symbol:
        raise argparse.ArgumentTypeError(
            f"Invalid asset: {spec} (expected SYMBOL:WEIGHT, e.g. SPY:60)"
        )
    try:
        return PortfolioAssetConfig(symbol=symbol.strip().upper(), weight=float(weight))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid weight in {spec}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_backtest_settings()
    parser = argparse.ArgumentParser(
        description="Backtest the council decision engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m backtest arena AAPL
  python -m backtest arena TSLA --initial-balance 50000 --buy-threshold 60
  python -m backtest portfolio SPY:60 AGG:40 --period-days 504
  python -m backtest analyze NVDA --headline "NVDA beats estimates"
        """,
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=settings.data_dir,
        help=f"Directory of <SYMBOL>.csv files (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    arena = sub.add_parser("arena", help="Single-asset council backtest")
    arena.add_argument("symbol", type=str.upper)
    arena.add_argument("--initial-balance", type=float, default=None)
    arena.add_argument("--buy-threshold", type=float, default=None)
    arena.add_argument("--risk-percent", type=float, default=None)
    arena.add_argument("--max-pos-percent", type=float, default=None)
    arena.add_argument(
        "--allow-short",
        action="store_true",
        default=None,
        help="Open shorts on bearish consensus",
    )
    arena.add_argument("--output", "-o", type=str, default=None, help="JSON output path")

    portfolio = sub.add_parser("portfolio", help="Weighted buy-and-drift backtest")
    portfolio.add_argument("assets", nargs="+", type=parse_asset, help="SYMBOL:WEIGHT ...")
    portfolio.add_argument("--capital", type=float, default=settings.initial_capital)
    portfolio.add_argument("--period-days", type=int, default=settings.period_days)
    portfolio.add_argument("--commission", type=float, default=settings.commission_rate)
    portfolio.add_argument("--output", "-o", type=str, default=None, help="JSON output path")

    analyze = sub.add_parser("analyze", help="Council consensus on the latest bar")
    analyze.add_argument("symbol", type=str.upper)
    analyze.add_argument(
        "--headline",
        action="append",
        default=None,
        help="News headline for the sentiment agent (repeatable)",
    )

    return parser.parse_args(argv)


def cmd_arena(args: argparse.Namespace) -> None:
    """Run a single-asset backtest."""
    config = get_backtest_settings().arena_config(
        initial_balance=args.initial_balance,
        buy_threshold=args.buy_threshold,
        risk_percent=args.risk_percent,
        max_pos_percent=args.max_pos_percent,
        allow_short=args.allow_short,
    )
    bars = CsvBarSource(args.data_dir).load(args.symbol)
    if not bars:
        raise BacktestError(f"No data for {args.symbol} in {args.data_dir}")

    report = Arena(config).run(args.symbol, bars)
    ReportFormatter.print_console(report)
    if args.output:
        ReportFormatter.save_json(report, args.output)


def cmd_portfolio(args: argparse.Namespace) -> None:
    """Run a portfolio backtest."""
    data = load_many(CsvBarSource(args.data_dir), [a.symbol for a in args.assets])
    result = run_portfolio_backtest(
        args.assets,
        data,
        initial_capital=args.capital,
        period_days=args.period_days,
        commission_rate=args.commission,
    )
    ReportFormatter.print_portfolio(result)
    if args.output:
        ReportFormatter.save_json(result, args.output)


def cmd_analyze(args: argparse.Namespace) -> None:
    """Print the council's view of the latest bar."""
    bars = CsvBarSource(args.data_dir).load(args.symbol)
    if not bars:
        raise BacktestError(f"No data for {args.symbol} in {args.data_dir}")

    result = Council().analyze(bars, headlines=args.headline)
    print(f"\n{args.symbol} @ {bars[-1].time:%Y-%m-%d} close={bars[-1].close:.2f}")
    print(
        f"  {result.signal.value} {result.sentiment.value} "
        f"conf={result.confidence:.1f} regime={result.regime.value} "
        f"rsi={result.rsi} adx={result.adx}"
    )
    for vote in result.votes:
        print(f"  - {vote.name:<26} {vote.signal.value:<5} {vote.confidence:>5.1f}  {vote.reason}")
    print()


COMMANDS = {
    "arena": cmd_arena,
    "portfolio": cmd_portfolio,
    "analyze": cmd_analyze,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        COMMANDS[args.command](args)
    except (BacktestError, ValueError) as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
