"""Core decision logic: indicators, regime, agents, consensus, sizing and risk.

This package contains pure business logic with no I/O dependencies
(no files or network access). It is shared between the live paper
trading path (app/) and the backtesting system (backtest/).
"""
