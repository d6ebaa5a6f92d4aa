"""Financing summary: capital split, interest and broker fee."""

from dataclasses import dataclass, replace

from ..models.numeric import coerce_non_negative, coerce_number, round_dollars
from ..models.proforma import Sources


@dataclass
class FinancingSummary:
    """Capital stack amounts and total financing cost."""

    debt_amount: float  # debt% × total expenses
    equity_amount: float  # equity% × total expenses
    interest_cost: float  # Total interest paid per the draw schedule
    broker_fee: float  # broker fee% × debt amount
    total_financing_cost: float


def calculate_financing(
    total_expenses: float,
    sources: Sources,
    total_interest: float,
) -> FinancingSummary:
    """Calculate the financing summary.

    Args:
        total_expenses: Total land, hard and soft costs.
        sources: Financing split and rates.
        total_interest: Interest paid across the simulated horizon.

    Returns:
        FinancingSummary with dollar-rounded debt, equity and broker fee.
    """
    expenses = coerce_number(total_expenses)
    debt_amount = round_dollars(coerce_non_negative(sources.debt_pct) / 100 * expenses)
    equity_amount = round_dollars(coerce_non_negative(sources.equity_pct) / 100 * expenses)
    broker_fee = round_dollars(
        coerce_non_negative(sources.financing_costs.broker_fee_pct) / 100 * debt_amount
    )
    interest_cost = coerce_number(total_interest)

    return FinancingSummary(
        debt_amount=debt_amount,
        equity_amount=equity_amount,
        interest_cost=interest_cost,
        broker_fee=broker_fee,
        total_financing_cost=interest_cost + broker_fee,
    )


def set_equity_pct(sources: Sources, equity_pct: float) -> Sources:
    """Set the equity share and its complement (debt = 100 - equity)."""
    equity = coerce_number(equity_pct)
    return replace(sources, equity_pct=equity, debt_pct=100 - equity)


def set_debt_pct(sources: Sources, debt_pct: float) -> Sources:
    """Set the debt share and its complement (equity = 100 - debt)."""
    debt = coerce_number(debt_pct)
    return replace(sources, debt_pct=debt, equity_pct=100 - debt)
