"""Calculation modules for the development proforma engine."""

from .revenue import (
    RevenueResult,
    calculate_total_revenue,
    calculate_revenue,
    upsert_other_income,
    remove_other_income,
)
from .costs import (
    CostSection,
    CostsResult,
    calculate_contingency,
    calculate_section_total,
    calculate_total_expenses,
    calculate_costs,
    update_section,
    upsert_additional_cost,
    remove_additional_cost,
    apply_closing_pct,
)
from .units import (
    UnitGroup,
    unit_group_key,
    group_units,
    add_units,
    replace_unit_group,
    delete_unit_group,
    update_unit_type,
)
from .draw_schedule import (
    LoanPeriod,
    ConstructionLoanSchedule,
    find_loan_start_month,
    simulate_construction_loan,
)
from .cashflow import (
    CashFlowItem,
    CategoryTotals,
    MonthlyCashFlow,
    CashFlowResult,
    build_cash_flow_items,
    schedule_from_items,
    update_item_timing,
    generate_cash_flow,
)
from .financing import (
    FinancingSummary,
    calculate_financing,
    set_equity_pct,
    set_debt_pct,
)
from .metrics import (
    CashFlowMetrics,
    calculate_metrics,
    calculate_irr,
    calculate_equity_multiple,
    calculate_cash_flow_metrics,
)

# Unified entry point
from .analysis import (
    ProformaAnalysis,
    analyze_proforma,
    recompute,
)

__all__ = [
    "RevenueResult",
    "calculate_total_revenue",
    "calculate_revenue",
    "upsert_other_income",
    "remove_other_income",
    "CostSection",
    "CostsResult",
    "calculate_contingency",
    "calculate_section_total",
    "calculate_total_expenses",
    "calculate_costs",
    "update_section",
    "upsert_additional_cost",
    "remove_additional_cost",
    "apply_closing_pct",
    "UnitGroup",
    "unit_group_key",
    "group_units",
    "add_units",
    "replace_unit_group",
    "delete_unit_group",
    "update_unit_type",
    "LoanPeriod",
    "ConstructionLoanSchedule",
    "find_loan_start_month",
    "simulate_construction_loan",
    "CashFlowItem",
    "CategoryTotals",
    "MonthlyCashFlow",
    "CashFlowResult",
    "build_cash_flow_items",
    "schedule_from_items",
    "update_item_timing",
    "generate_cash_flow",
    "FinancingSummary",
    "calculate_financing",
    "set_equity_pct",
    "set_debt_pct",
    "CashFlowMetrics",
    "calculate_metrics",
    "calculate_irr",
    "calculate_equity_multiple",
    "calculate_cash_flow_metrics",
    # Unified entry point
    "ProformaAnalysis",
    "analyze_proforma",
    "recompute",
]
