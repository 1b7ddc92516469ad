"""TILIN Ops - stock forecasting, kitchen load and profitability analytics."""

__version__ = "1.0.0"
