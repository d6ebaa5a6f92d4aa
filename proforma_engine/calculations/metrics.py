"""Investment metrics: profit, ROI, equity multiples and IRR."""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import numpy_financial as npf

from ..models.numeric import coerce_number, safe_divide
from ..models.proforma import ProformaMetrics
from .cashflow import CashFlowResult

logger = logging.getLogger(__name__)


@dataclass
class CashFlowMetrics:
    """Metrics derived from the monthly cash flow series.

    IRRs are annualized decimals (0.12 = 12%); 0.0 when undefined.
    """

    unlevered_irr: float
    levered_irr: float
    unlevered_emx: float
    levered_emx: float


def calculate_metrics(
    total_revenue: float,
    total_expenses: float,
    equity_pct: float,
    project_length: int,
    total_financing_cost: float = 0.0,
) -> ProformaMetrics:
    """Calculate summary investment metrics.

    ROI is measured on the equity share of total expenses:

        roi = gross_profit / (equity% × total_expenses) × 100
        annualized_roi = roi / (project_length / 12)

    Every ratio with a zero denominator is reported as 0.

    Args:
        total_revenue: Total project revenue.
        total_expenses: Total land, hard and soft costs.
        equity_pct: Equity share of the capital stack (percent).
        project_length: Project duration in months.
        total_financing_cost: Interest and fees, used for the unlevered multiple.

    Returns:
        ProformaMetrics with percentage ROI values.

    Example:
        >>> m = calculate_metrics(1_300_000, 1_000_000, 30, 24)
        >>> m.roi, m.annualized_roi
        (100.0, 50.0)
    """
    revenue = coerce_number(total_revenue)
    expenses = coerce_number(total_expenses)
    equity = max(0.0, coerce_number(equity_pct))
    months = coerce_number(project_length)
    financing = max(0.0, coerce_number(total_financing_cost))

    gross_profit = revenue - expenses
    levered_emx = safe_divide(revenue, expenses) if expenses > 0 else 0.0

    if equity > 0 and expenses > 0:
        roi_fraction = safe_divide(gross_profit, (equity / 100) * expenses)
    else:
        roi_fraction = 0.0

    if roi_fraction > 0 and months > 0:
        annualized_roi = safe_divide(roi_fraction, months / 12) * 100
    else:
        annualized_roi = 0.0

    all_in_cost = expenses + financing
    unlevered_emx = safe_divide(revenue, all_in_cost) if all_in_cost > 0 else 0.0

    return ProformaMetrics(
        gross_profit=gross_profit,
        roi=roi_fraction * 100,
        annualized_roi=annualized_roi,
        levered_emx=levered_emx,
        unlevered_emx=unlevered_emx,
    )


def calculate_irr(cash_flows: Sequence[float]) -> float:
    """Annualized IRR of a monthly cash flow series.

    Returns 0.0 when the series has no sign change or the solver fails.
    """
    flows = np.asarray(cash_flows, dtype=float)
    if not (np.any(flows > 0) and np.any(flows < 0)):
        return 0.0

    monthly_irr = npf.irr(flows)
    if monthly_irr is None or np.isnan(monthly_irr) or monthly_irr <= -1:
        logger.debug("IRR did not converge for %d-month series", len(flows))
        return 0.0
    return float((1 + monthly_irr) ** 12 - 1)


def calculate_equity_multiple(cash_flows: Sequence[float]) -> float:
    """Sum of inflows divided by the magnitude of outflows (0 if no outflows)."""
    flows = np.asarray(cash_flows, dtype=float)
    inflows = flows[flows > 0].sum()
    outflows = flows[flows < 0].sum()
    if outflows == 0:
        return 0.0
    return float(inflows / abs(outflows))


def calculate_cash_flow_metrics(result: CashFlowResult) -> CashFlowMetrics:
    """Calculate IRR and equity multiples from a simulated cash flow.

    The unlevered series is revenue less costs before financing; the
    levered series is the equity view (revenue less equity contributions
    and interest payments).
    """
    unlevered = [m.revenue - m.expenses for m in result.months]
    levered = [m.levered_cash_flow for m in result.months]

    return CashFlowMetrics(
        unlevered_irr=calculate_irr(unlevered),
        levered_irr=calculate_irr(levered),
        unlevered_emx=calculate_equity_multiple(unlevered),
        levered_emx=calculate_equity_multiple(levered),
    )
