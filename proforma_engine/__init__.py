"""Development proforma engine: cost aggregation, metrics and cash flow simulation."""

__version__ = "0.1.0"
