"""Batch analysis of independent proforma scenarios.

Uses the unified calculation engine (analyze_proforma) for every scenario.
"""

import concurrent.futures
import logging
import multiprocessing
from typing import List, Optional, Sequence

from .calculations.analysis import ProformaAnalysis, analyze_proforma
from .models.defaults import EngineConfig
from .models.proforma import Proforma

logger = logging.getLogger(__name__)


def analyze_scenarios(
    proformas: Sequence[Proforma],
    config: Optional[EngineConfig] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> List[ProformaAnalysis]:
    """Analyze several proformas, optionally in parallel.

    Each analysis is a pure function of its proforma, so scenarios can run
    concurrently without coordination.

    Args:
        proformas: Scenarios to analyze.
        config: Engine configuration shared by all scenarios.
        parallel: Run on a thread pool.
        max_workers: Max parallel workers (None = CPU count, capped at 8).

    Returns:
        One ProformaAnalysis per input, in input order.
    """
    config = config or EngineConfig()

    if not parallel or len(proformas) < 2:
        return [analyze_proforma(p, config) for p in proformas]

    max_workers = max_workers or min(multiprocessing.cpu_count(), 8)
    logger.debug("Analyzing %d scenarios on %d workers", len(proformas), max_workers)

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(analyze_proforma, p, config) for p in proformas]
        return [future.result() for future in futures]


def format_scenario_table(analyses: Sequence[ProformaAnalysis]) -> str:
    """Format a side-by-side comparison of scenarios as a text table."""
    width = 16
    names = [a.proforma.name or a.proforma.id for a in analyses]
    total_width = 28 + (width + 1) * len(analyses)

    def row(label: str, values: List[str]) -> str:
        return f"{label:<28}" + "".join(f" {v:>{width}}" for v in values)

    lines = [
        "=" * total_width,
        "SCENARIO COMPARISON",
        "=" * total_width,
        row("Metric", [n[:width] for n in names]),
        "-" * total_width,
        row("Total Revenue", [f"${a.proforma.total_revenue:,.0f}" for a in analyses]),
        row("Total Expenses", [f"${a.proforma.total_expenses:,.0f}" for a in analyses]),
        row("Financing Costs", [f"${a.financing.total_financing_cost:,.0f}" for a in analyses]),
        row("Total Cost incl. Financing",
            [f"${a.total_project_cost_incl_financing:,.0f}" for a in analyses]),
        "",
        row("Gross Profit", [f"${a.metrics.gross_profit:,.0f}" for a in analyses]),
        row("ROI", [f"{a.metrics.roi:.1f}%" for a in analyses]),
        row("Annualized ROI", [f"{a.metrics.annualized_roi:.1f}%" for a in analyses]),
        row("Levered EMx", [f"{a.metrics.levered_emx:.2f}x" for a in analyses]),
        row("Unlevered IRR", [f"{a.cash_flow_metrics.unlevered_irr:.2%}" for a in analyses]),
        row("Levered IRR", [f"{a.cash_flow_metrics.levered_irr:.2%}" for a in analyses]),
        "=" * total_width,
    ]
    return "\n".join(lines)
