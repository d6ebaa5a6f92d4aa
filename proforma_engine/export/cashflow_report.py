"""Cash flow report export.

Turns a proforma analysis into a pandas DataFrame (one row per month) or an
Excel workbook with a summary sheet and the monthly cash flow table.
"""

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.analysis import ProformaAnalysis
from ..calculations.cashflow import CashFlowResult


@dataclass
class CashFlowReportConfig:
    """Configuration for cash flow report generation."""
    include_summary: bool = True
    include_cash_flows: bool = True
    include_loan_schedule: bool = True
    trim_trailing_empty_months: bool = True


CASH_FLOW_COLUMNS = [
    "Month",
    "Units",
    "Other Income",
    "Total Revenue",
    "Land Costs",
    "Hard Costs",
    "Soft Costs",
    "Total Expenses",
    "Debt Draw",
    "Equity Contribution",
    "Interest Payment",
    "Total Expenses incl. Interest",
    "Net Cash Flow",
    "Cumulative Cash Flow",
]


def cash_flow_to_dataframe(result: CashFlowResult, trim_trailing_empty_months: bool = False) -> pd.DataFrame:
    """Convert a cash flow result to a DataFrame, one row per month.

    Args:
        result: Simulated cash flow.
        trim_trailing_empty_months: Drop months after the last month with
            any revenue, expense or interest.

    Returns:
        DataFrame with the CASH_FLOW_COLUMNS columns.
    """
    rows = []
    for m in result.months:
        rows.append({
            "Month": m.month,
            "Units": m.revenue_by_category.units,
            "Other Income": m.revenue_by_category.other_income,
            "Total Revenue": m.revenue,
            "Land Costs": m.expense_by_category.land_costs,
            "Hard Costs": m.expense_by_category.hard_costs,
            "Soft Costs": m.expense_by_category.soft_costs,
            "Total Expenses": m.expenses,
            "Debt Draw": m.debt_draw,
            "Equity Contribution": m.equity_contribution,
            "Interest Payment": m.interest_payment,
            "Total Expenses incl. Interest": m.total_expenses_including_interest,
            "Net Cash Flow": m.net_cash_flow,
            "Cumulative Cash Flow": m.cumulative_cash_flow,
        })
    df = pd.DataFrame(rows, columns=CASH_FLOW_COLUMNS)

    if trim_trailing_empty_months and not df.empty:
        activity = df[["Total Revenue", "Total Expenses", "Interest Payment"]].abs().sum(axis=1)
        active = activity[activity > 0]
        last = int(df.loc[active.index[-1], "Month"]) if not active.empty else 0
        df = df[df["Month"] <= last]

    return df


def loan_schedule_to_dataframe(result: CashFlowResult) -> pd.DataFrame:
    """Convert the construction loan schedule to a DataFrame."""
    return pd.DataFrame([
        {
            "Month": p.month,
            "Active": "Yes" if p.is_active else "No",
            "Balance BOP": p.balance_bop,
            "Draw": p.draw,
            "Interest Basis": p.interest_basis,
            "Interest Accrued": p.interest_accrued,
            "Interest Paid": p.interest_paid,
            "Accrued Unpaid": p.accrued_unpaid,
            "Balance EOP": p.balance_eop,
        }
        for p in result.loan.periods
    ])


def _add_header_style(ws, row: int, cols: int) -> None:
    """Apply header styling to a row."""
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")


def _write_dataframe(ws, df: pd.DataFrame, title: str) -> None:
    ws.cell(row=1, column=1, value=title).font = Font(bold=True, size=14)
    start_row = 3
    for r_offset, values in enumerate(dataframe_to_rows(df, index=False, header=True)):
        for c_idx, value in enumerate(values, 1):
            cell = ws.cell(row=start_row + r_offset, column=c_idx, value=value)
            if r_offset > 0 and isinstance(value, float):
                cell.number_format = "#,##0"
    _add_header_style(ws, start_row, len(df.columns))

    for col in range(1, len(df.columns) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 16


def _create_summary_sheet(ws, analysis: ProformaAnalysis) -> None:
    """Create the summary sheet."""
    proforma = analysis.proforma
    metrics = proforma.metrics
    cf_metrics = analysis.cash_flow_metrics
    loan = analysis.cash_flow.loan

    ws.cell(row=1, column=1, value=f"Proforma: {proforma.name or proforma.id}").font = Font(bold=True, size=16)
    ws.cell(row=2, column=1, value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    lines = [
        ("Total Revenue", f"${proforma.total_revenue:,.0f}"),
        ("Land Costs", f"${analysis.costs.land_costs:,.0f}"),
        ("Hard Costs", f"${analysis.costs.hard_costs:,.0f}"),
        ("Soft Costs", f"${analysis.costs.soft_costs:,.0f}"),
        ("Total Expenses", f"${proforma.total_expenses:,.0f}"),
        ("", ""),
        ("Interest Cost", f"${analysis.financing.interest_cost:,.0f}"),
        ("Broker Fee", f"${analysis.financing.broker_fee:,.0f}"),
        ("Total Financing Cost", f"${analysis.financing.total_financing_cost:,.0f}"),
        ("Total Project Cost incl. Financing", f"${proforma.total_project_cost_incl_financing:,.0f}"),
        ("", ""),
        ("Gross Profit", f"${metrics.gross_profit:,.0f}"),
        ("ROI", f"{metrics.roi:.1f}%"),
        ("Annualized ROI", f"{metrics.annualized_roi:.1f}%"),
        ("Levered EMx", f"{metrics.levered_emx:.2f}x"),
        ("Unlevered IRR", f"{cf_metrics.unlevered_irr:.2%}"),
        ("Levered IRR", f"{cf_metrics.levered_irr:.2%}"),
        ("", ""),
        ("Loan Start Month", loan.loan_start_month if loan.loan_start_month is not None else "-"),
        ("Loan End Month", loan.loan_end_month if loan.loan_end_month is not None else "-"),
        ("Interest Basis", loan.interest_on_basis.value),
        ("Payout Type", loan.payout_type.value),
    ]

    row = 4
    for label, value in lines:
        if label:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
        row += 1

    if analysis.cash_flow.exceeds_horizon:
        ws.cell(row=row + 1, column=1, value=(
            f"Warning: ${analysis.cash_flow.unscheduled_amount:,.0f} falls after month "
            f"{analysis.cash_flow.horizon_months}"
        )).font = Font(bold=True, color="C00000")

    ws.column_dimensions['A'].width = 36
    ws.column_dimensions['B'].width = 20


def generate_cash_flow_excel(
    analysis: ProformaAnalysis,
    config: Optional[CashFlowReportConfig] = None,
) -> bytes:
    """Generate an Excel workbook for a proforma analysis.

    Args:
        analysis: Result of analyze_proforma().
        config: Optional configuration for the report.

    Returns:
        Excel file as bytes.
    """
    if config is None:
        config = CashFlowReportConfig()

    wb = Workbook()
    wb.remove(wb.active)

    if config.include_summary:
        _create_summary_sheet(wb.create_sheet("Summary"), analysis)

    if config.include_cash_flows:
        df = cash_flow_to_dataframe(analysis.cash_flow, config.trim_trailing_empty_months)
        _write_dataframe(wb.create_sheet("Cash Flow"), df, "Monthly Cash Flow")

    if config.include_loan_schedule:
        df = loan_schedule_to_dataframe(analysis.cash_flow)
        _write_dataframe(wb.create_sheet("Construction Loan"), df, "Construction Loan Schedule")

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()
