"""Export module for cash flow reports."""

from .cashflow_report import (
    CashFlowReportConfig,
    cash_flow_to_dataframe,
    loan_schedule_to_dataframe,
    generate_cash_flow_excel,
)

__all__ = [
    "CashFlowReportConfig",
    "cash_flow_to_dataframe",
    "loan_schedule_to_dataframe",
    "generate_cash_flow_excel",
]
