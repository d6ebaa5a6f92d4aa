"""Unified entry point: aggregate, simulate and recompute a proforma.

``analyze_proforma`` runs both engines on one input record. ``recompute``
returns a copy of the proforma with every derived field refreshed and is
applied at the persistence boundary before each write.
"""

import copy
import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..models.defaults import EngineConfig
from ..models.proforma import Proforma
from .cashflow import CashFlowResult, generate_cash_flow
from .costs import CostsResult, calculate_costs
from .financing import FinancingSummary, calculate_financing
from .metrics import CashFlowMetrics, calculate_cash_flow_metrics, calculate_metrics
from .revenue import RevenueResult, calculate_revenue

logger = logging.getLogger(__name__)


@dataclass
class ProformaAnalysis:
    """Complete analysis of one proforma."""

    proforma: Proforma  # Recomputed copy of the input
    revenue: RevenueResult
    costs: CostsResult
    cash_flow: CashFlowResult
    financing: FinancingSummary
    cash_flow_metrics: CashFlowMetrics

    @property
    def metrics(self):
        return self.proforma.metrics

    @property
    def total_project_cost_incl_financing(self) -> float:
        return self.proforma.total_project_cost_incl_financing


def analyze_proforma(proforma: Proforma, config: Optional[EngineConfig] = None) -> ProformaAnalysis:
    """Run the aggregation engine and cash flow simulator on a proforma.

    The input is never mutated and derived fields it carries are ignored;
    every total is rebuilt from the line items.

    Args:
        proforma: Proforma to analyze.
        config: Engine configuration (horizon, default timings).

    Returns:
        ProformaAnalysis bundling the recomputed proforma and engine outputs.
    """
    config = config or EngineConfig()
    source = copy.deepcopy(proforma)

    revenue = calculate_revenue(source)
    costs = calculate_costs(source)
    cash_flow = generate_cash_flow(source, config)
    financing = calculate_financing(costs.total_expenses, source.sources, cash_flow.total_interest)

    metrics = calculate_metrics(
        total_revenue=revenue.total_revenue,
        total_expenses=costs.total_expenses,
        equity_pct=source.sources.equity_pct,
        project_length=source.project_length,
        total_financing_cost=financing.total_financing_cost,
    )

    financing_costs = replace(
        source.sources.financing_costs,
        interest_cost=financing.interest_cost,
        broker_fee=financing.broker_fee,
        total_financing_cost=financing.total_financing_cost,
    )
    recomputed = replace(
        source,
        sources=replace(source.sources, financing_costs=financing_costs),
        total_revenue=revenue.total_revenue,
        total_expenses=costs.total_expenses,
        total_project_cost_incl_financing=costs.total_expenses + financing.total_financing_cost,
        metrics=metrics,
    )

    logger.debug(
        "Analyzed proforma %s: revenue=%.2f expenses=%.2f interest=%.2f",
        source.id, revenue.total_revenue, costs.total_expenses, financing.interest_cost,
    )

    return ProformaAnalysis(
        proforma=recomputed,
        revenue=revenue,
        costs=costs,
        cash_flow=cash_flow,
        financing=financing,
        cash_flow_metrics=calculate_cash_flow_metrics(cash_flow),
    )


def recompute(proforma: Proforma, config: Optional[EngineConfig] = None) -> Proforma:
    """Return a copy of the proforma with all derived fields refreshed."""
    return analyze_proforma(proforma, config).proforma
