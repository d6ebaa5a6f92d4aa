"""Monthly cash flow engine.

Every revenue and cost line becomes a timed item spread straight-line over
its window ``[start, start + length)``. Items are summed by category per
month and the expense schedule drives the construction loan simulation.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from ..models.defaults import COST_LINE_LABELS, EngineConfig
from ..models.numeric import coerce_int, coerce_number
from ..models.proforma import (
    AdditionalCost,
    CashFlowCategory,
    CashFlowSchedule,
    ItemTiming,
    Proforma,
)
from .costs import calculate_contingency, calculate_total_expenses
from .draw_schedule import ConstructionLoanSchedule, simulate_construction_loan

logger = logging.getLogger(__name__)


@dataclass
class CashFlowItem:
    """A single line item spread evenly over its window of months."""
    key: str  # Identifier used for persisted timing overrides
    label: str
    category: CashFlowCategory
    amount: float
    start: int = 1  # 1-indexed first month
    length: int = 1  # Number of months

    def __post_init__(self):
        self.amount = coerce_number(self.amount)
        self.start = max(1, coerce_int(self.start, 1))
        self.length = max(1, coerce_int(self.length, 1))

    @property
    def end(self) -> int:
        """Last month (inclusive) of the window."""
        return self.start + self.length - 1

    def monthly_value(self, month: int) -> float:
        """Amount falling in ``month``: amount / length inside the window, else 0."""
        if self.start <= month < self.start + self.length:
            return self.amount / self.length
        return 0.0

    def amount_beyond(self, horizon: int) -> float:
        """Portion of the amount scheduled after the last simulated month."""
        months_beyond = max(0, self.end - max(horizon, self.start - 1))
        return self.amount * min(months_beyond, self.length) / self.length


@dataclass
class CategoryTotals:
    """Per-month totals by category."""
    units: float = 0.0
    other_income: float = 0.0
    land_costs: float = 0.0
    hard_costs: float = 0.0
    soft_costs: float = 0.0

    @property
    def revenue(self) -> float:
        return self.units + self.other_income

    @property
    def expenses(self) -> float:
        return self.land_costs + self.hard_costs + self.soft_costs


_CATEGORY_FIELDS: Dict[CashFlowCategory, str] = {
    CashFlowCategory.UNITS: "units",
    CashFlowCategory.OTHER_INCOME: "other_income",
    CashFlowCategory.LAND_COSTS: "land_costs",
    CashFlowCategory.HARD_COSTS: "hard_costs",
    CashFlowCategory.SOFT_COSTS: "soft_costs",
}


@dataclass
class MonthlyCashFlow:
    """Cash flow for a single month."""
    month: int
    revenue_by_category: CategoryTotals
    expense_by_category: CategoryTotals

    # Financing
    debt_draw: float = 0.0
    equity_contribution: float = 0.0
    interest_payment: float = 0.0

    # Cash flows
    net_cash_flow: float = 0.0  # Revenue - expenses - interest
    cumulative_cash_flow: float = 0.0
    levered_cash_flow: float = 0.0  # Revenue - equity contribution - interest

    @property
    def revenue(self) -> float:
        return self.revenue_by_category.revenue

    @property
    def expenses(self) -> float:
        return self.expense_by_category.expenses

    @property
    def total_expenses_including_interest(self) -> float:
        return self.expenses + self.interest_payment


@dataclass
class CashFlowResult:
    """Complete monthly cash flow for a proforma."""
    months: List[MonthlyCashFlow]
    items: List[CashFlowItem]
    loan: ConstructionLoanSchedule
    horizon_months: int

    # Key totals
    total_revenue: float
    total_expenses: float
    total_interest: float
    total_debt_drawn: float
    total_equity_contributed: float

    # Horizon overrun
    exceeds_horizon: bool = False
    unscheduled_amount: float = 0.0

    @property
    def loan_start_month(self) -> Optional[int]:
        return self.loan.loan_start_month

    @property
    def loan_end_month(self) -> Optional[int]:
        return self.loan.loan_end_month

    def get_month(self, month: int) -> MonthlyCashFlow:
        """Get cash flow for a specific month (1-indexed)."""
        if month < 1 or month > len(self.months):
            raise IndexError(f"Month {month} out of range [1, {len(self.months)}]")
        return self.months[month - 1]

    def items_for(self, category: CashFlowCategory) -> List[CashFlowItem]:
        return [item for item in self.items if item.category == category]


def _timed_item(
    schedule: CashFlowSchedule,
    config: EngineConfig,
    category: CashFlowCategory,
    key: str,
    label: str,
    amount: float,
    default_key: Optional[str] = None,
) -> CashFlowItem:
    start, length = config.default_timing(category.value, default_key or key)
    saved = schedule.get(category, key)
    if saved is not None:
        start, length = saved.start, saved.length
    return CashFlowItem(key=key, label=label, category=category, amount=amount, start=start, length=length)


def _additional_items(
    schedule: CashFlowSchedule,
    config: EngineConfig,
    category: CashFlowCategory,
    costs: List[AdditionalCost],
) -> List[CashFlowItem]:
    items = []
    for index, cost in enumerate(costs):
        if cost.amount > 0:
            items.append(_timed_item(
                schedule, config, category,
                key=f"additional_{index}",
                label=cost.name or f"Additional Cost {index + 1}",
                amount=cost.amount,
                default_key="*",
            ))
    return items


def build_cash_flow_items(proforma: Proforma, config: Optional[EngineConfig] = None) -> List[CashFlowItem]:
    """Derive the timed line items for a proforma.

    Revenue items are one per unit type and one per other income item.
    Cost lines with a zero amount are skipped. Contingencies are scheduled
    as their own items alongside the section's base, so the expense
    schedule sums to the proforma's total expenses.

    Args:
        proforma: Proforma with unit mix, other income and uses.
        config: Engine configuration supplying default timings.

    Returns:
        List of CashFlowItem in category order.
    """
    config = config or EngineConfig()
    schedule = proforma.cash_flow_schedule
    items: List[CashFlowItem] = []

    for unit_type in proforma.unit_mix:
        items.append(_timed_item(
            schedule, config, CashFlowCategory.UNITS,
            key=unit_type.id, label=unit_type.name,
            amount=unit_type.total_revenue, default_key="*",
        ))

    for income in proforma.other_income:
        items.append(_timed_item(
            schedule, config, CashFlowCategory.OTHER_INCOME,
            key=income.id, label=income.name,
            amount=income.total, default_key="*",
        ))

    # Land
    land = proforma.uses.land_costs
    category = CashFlowCategory.LAND_COSTS
    if land.base_cost > 0:
        items.append(_timed_item(schedule, config, category, "baseCost",
                                 COST_LINE_LABELS["baseCost.landCosts"], land.base_cost))
    if land.closing_cost > 0:
        items.append(_timed_item(schedule, config, category, "closingCost",
                                 COST_LINE_LABELS["closingCost"], land.closing_cost))
    items.extend(_additional_items(schedule, config, category, land.additional_costs))

    # Hard
    hard = proforma.uses.hard_costs
    category = CashFlowCategory.HARD_COSTS
    hard_contingency = calculate_contingency(hard.base_cost, hard.contingency_pct)
    if hard.base_cost > 0:
        items.append(_timed_item(schedule, config, category, "baseCost",
                                 COST_LINE_LABELS["baseCost.hardCosts"], hard.base_cost))
    if hard_contingency > 0:
        items.append(_timed_item(schedule, config, category, "contingency",
                                 COST_LINE_LABELS["contingency.hardCosts"], hard_contingency))
    items.extend(_additional_items(schedule, config, category, hard.additional_costs))

    # Soft
    soft = proforma.uses.soft_costs
    category = CashFlowCategory.SOFT_COSTS
    soft_contingency = calculate_contingency(soft.base_total, soft.contingency_pct)
    for key, amount in (
        ("development", soft.development),
        ("consultants", soft.consultants),
        ("adminMarketing", soft.admin_marketing),
    ):
        if amount > 0:
            items.append(_timed_item(schedule, config, category, key, COST_LINE_LABELS[key], amount))
    if soft_contingency > 0:
        items.append(_timed_item(schedule, config, category, "contingency",
                                 COST_LINE_LABELS["contingency.softCosts"], soft_contingency))
    items.extend(_additional_items(schedule, config, category, soft.additional_costs))

    return items


def schedule_from_items(items: List[CashFlowItem]) -> CashFlowSchedule:
    """Build a persistable timing schedule from the current items."""
    schedule = CashFlowSchedule()
    for item in items:
        schedule.timings[item.category][item.key] = ItemTiming(start=item.start, length=item.length)
    return schedule


def update_item_timing(
    proforma: Proforma,
    category: CashFlowCategory,
    key: str,
    start: Optional[int] = None,
    length: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> Proforma:
    """Return a copy of the proforma with one item's timing overridden.

    Fields left as None keep the item's current (saved or default) value.
    The other items' current timings are persisted alongside.
    """
    items = build_cash_flow_items(proforma, config)
    schedule = schedule_from_items(items)
    # Keep overrides for items that currently have no amount
    for cat, entries in proforma.cash_flow_schedule.timings.items():
        for item_key, timing in entries.items():
            schedule.timings[cat].setdefault(item_key, ItemTiming(timing.start, timing.length))

    current = schedule.get(category, key)
    if current is None:
        default_start, default_length = (config or EngineConfig()).default_timing(category.value, key)
        current = ItemTiming(default_start, default_length)
    schedule.timings[category][key] = ItemTiming(
        start=max(1, coerce_int(start, current.start)) if start is not None else current.start,
        length=max(1, coerce_int(length, current.length)) if length is not None else current.length,
    )
    return replace(proforma, cash_flow_schedule=schedule)


def _category_totals(items: List[CashFlowItem], month: int) -> CategoryTotals:
    totals = CategoryTotals()
    for item in items:
        name = _CATEGORY_FIELDS[item.category]
        setattr(totals, name, getattr(totals, name) + item.monthly_value(month))
    return totals


def generate_cash_flow(proforma: Proforma, config: Optional[EngineConfig] = None) -> CashFlowResult:
    """Generate the monthly cash flow for a proforma.

    Revenue and cost items are distributed across months 1..horizon, the
    construction loan is simulated on the resulting expense schedule, and
    interest payments are folded into net and cumulative cash flow.

    Args:
        proforma: Proforma to simulate.
        config: Engine configuration (horizon, default timings).

    Returns:
        CashFlowResult with one MonthlyCashFlow per month of the horizon.
    """
    config = config or EngineConfig()
    horizon = max(1, coerce_int(config.horizon_months, 1))
    items = build_cash_flow_items(proforma, config)

    revenue_items = [item for item in items if item.category.is_revenue]
    cost_items = [item for item in items if not item.category.is_revenue]

    revenue_rows = [_category_totals(revenue_items, m) for m in range(1, horizon + 1)]
    expense_rows = [_category_totals(cost_items, m) for m in range(1, horizon + 1)]
    monthly_expenses = [row.expenses for row in expense_rows]

    sources = proforma.sources
    loan_term = coerce_int(sources.loan_term) or proforma.project_length
    loan = simulate_construction_loan(
        monthly_expenses=monthly_expenses,
        debt_pct=sources.debt_pct,
        interest_pct=sources.financing_costs.interest_pct,
        loan_term=loan_term,
        interest_on_basis=sources.interest_on_basis,
        payout_type=sources.payout_type,
        total_expenses=calculate_total_expenses(proforma),
    )

    months: List[MonthlyCashFlow] = []
    cumulative = 0.0
    for idx in range(horizon):
        loan_period = loan.periods[idx]
        revenue = revenue_rows[idx].revenue
        expenses = expense_rows[idx].expenses
        interest = loan_period.interest_paid
        equity = expenses - loan_period.draw

        net = revenue - (expenses + interest)
        cumulative += net

        months.append(MonthlyCashFlow(
            month=idx + 1,
            revenue_by_category=revenue_rows[idx],
            expense_by_category=expense_rows[idx],
            debt_draw=loan_period.draw,
            equity_contribution=equity,
            interest_payment=interest,
            net_cash_flow=net,
            cumulative_cash_flow=cumulative,
            levered_cash_flow=revenue - equity - interest,
        ))

    unscheduled = sum(item.amount_beyond(horizon) for item in items)
    exceeds = unscheduled > 0 or proforma.project_length > horizon
    if exceeds:
        logger.warning(
            "Proforma %s runs past the %d-month horizon (project length %d, "
            "unscheduled amount %.2f)",
            proforma.id, horizon, proforma.project_length, unscheduled,
        )

    return CashFlowResult(
        months=months,
        items=items,
        loan=loan,
        horizon_months=horizon,
        total_revenue=sum(m.revenue for m in months),
        total_expenses=sum(m.expenses for m in months),
        total_interest=loan.total_interest,
        total_debt_drawn=loan.total_drawn,
        total_equity_contributed=sum(m.equity_contribution for m in months),
        exceeds_horizon=exceeds,
        unscheduled_amount=unscheduled,
    )
