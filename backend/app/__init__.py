"""Live path: settings, trading.yaml, paper ledger and auto trader."""
