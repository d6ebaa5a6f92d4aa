"""Construction loan draw schedule with interest accrual and payout policies."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models.numeric import coerce_int, coerce_non_negative, coerce_number, round_dollars
from ..models.proforma import InterestBasis, PayoutType

logger = logging.getLogger(__name__)


@dataclass
class LoanPeriod:
    """Single month of the construction loan.

    Tracks draws, interest basis, accrual and payment for one month.
    """
    month: int  # 1-indexed
    is_active: bool  # Inside [loan_start_month, loan_end_month]

    # Principal tracking
    balance_bop: float  # Principal outstanding at beginning of month
    draw: float  # Principal drawn this month
    balance_eop: float  # Principal outstanding at end of month

    # Interest
    interest_basis: float  # Balance interest accrues on this month
    interest_accrued: float  # Interest accrued this month
    interest_paid: float  # Cash interest paid this month
    accrued_unpaid: float  # Rolled-up interest carried at end of month


@dataclass
class ConstructionLoanSchedule:
    """Complete month-by-month construction loan schedule."""
    periods: List[LoanPeriod]
    horizon_months: int

    # Terms
    debt_pct: float
    monthly_rate: float
    loan_term: int
    interest_on_basis: InterestBasis
    payout_type: PayoutType
    facility_amount: float  # Committed facility (debt% × total expenses)

    # Window (None when the loan never activates)
    loan_start_month: Optional[int]
    loan_end_month: Optional[int]

    # Summary totals
    total_drawn: float
    total_interest_accrued: float
    total_interest: float  # Total interest paid across the horizon

    @property
    def is_active(self) -> bool:
        return self.loan_start_month is not None

    @property
    def payment_month(self) -> Optional[int]:
        """Last active month, capped at the horizon."""
        if self.loan_end_month is None:
            return None
        return min(self.loan_end_month, self.horizon_months)

    @property
    def interest_payments(self) -> List[float]:
        return [p.interest_paid for p in self.periods]

    def get_period(self, month: int) -> LoanPeriod:
        """Get loan info for a specific month (1-indexed)."""
        if month < 1 or month > len(self.periods):
            raise IndexError(f"Month {month} out of range [1, {len(self.periods)}]")
        return self.periods[month - 1]


def find_loan_start_month(monthly_expenses: Sequence[float]) -> Optional[int]:
    """First month (1-based) with strictly positive expenses, or None."""
    for i, expenses in enumerate(monthly_expenses):
        if coerce_number(expenses) > 0:
            return i + 1
    return None


def simulate_construction_loan(
    monthly_expenses: Sequence[float],
    debt_pct: float,
    interest_pct: float,
    loan_term: int,
    interest_on_basis: InterestBasis = InterestBasis.DRAWN_BALANCE,
    payout_type: PayoutType = PayoutType.ROLLED_UP,
    total_expenses: Optional[float] = None,
) -> ConstructionLoanSchedule:
    """Simulate a construction loan over the expense schedule.

    Key logic:
    1. The loan activates in the first month with positive expenses and
       runs for ``loan_term`` months, clipped to the horizon.
    2. Each active month draws debt% of that month's expenses.
    3. Interest accrues on the full facility (entire loan) or on the
       outstanding principal plus half of the month's draw (drawn balance,
       mid-month convention).
    4. Serviced loans pay each month's accrual; rolled-up loans pay the
       whole accrual as one lump in the last active month.
    5. Principal is never repaid inside the horizon.

    Args:
        monthly_expenses: Pre-interest expenses per month; the length is
            the simulation horizon.
        debt_pct: Debt share of costs (percent).
        interest_pct: Annual nominal interest rate (percent).
        loan_term: Loan term in months; 0 or less means the loan never
            activates.
        interest_on_basis: Balance interest accrues on.
        payout_type: Serviced or rolled up.
        total_expenses: Total project expenses used to size the facility;
            defaults to the sum of ``monthly_expenses``.

    Returns:
        ConstructionLoanSchedule with month-by-month rows.
    """
    expenses = [coerce_number(e) for e in monthly_expenses]
    horizon = len(expenses)
    debt_fraction = coerce_non_negative(debt_pct) / 100
    monthly_rate = coerce_non_negative(interest_pct) / 100 / 12
    term = max(0, coerce_int(loan_term))
    interest_on_basis = InterestBasis.parse(interest_on_basis)
    payout_type = PayoutType.parse(payout_type)

    if total_expenses is None:
        total_expenses = sum(expenses)
    facility_amount = round_dollars(debt_fraction * coerce_number(total_expenses))

    loan_start = find_loan_start_month(expenses) if term > 0 else None
    loan_end = loan_start + term - 1 if loan_start is not None else None

    if loan_start is None:
        logger.debug("Construction loan never activates (term=%d, horizon=%d)", term, horizon)
    else:
        logger.debug(
            "Construction loan active months %d-%d (horizon %d, %s, %s)",
            loan_start, loan_end, horizon, interest_on_basis.value, payout_type.value,
        )

    periods: List[LoanPeriod] = []
    outstanding = 0.0
    accrued_unpaid = 0.0
    total_drawn = 0.0
    total_accrued = 0.0

    for idx in range(horizon):
        month = idx + 1
        is_active = loan_start is not None and loan_start <= month <= loan_end

        draw = debt_fraction * expenses[idx] if is_active else 0.0

        if not is_active:
            basis = 0.0
        elif interest_on_basis == InterestBasis.ENTIRE_LOAN:
            basis = facility_amount
        else:
            basis = outstanding + draw / 2

        accrual = basis * monthly_rate
        total_accrued += accrual

        if payout_type == PayoutType.SERVICED:
            paid = accrual
        else:
            accrued_unpaid += accrual
            paid = 0.0

        balance_bop = outstanding
        outstanding += draw
        total_drawn += draw

        periods.append(LoanPeriod(
            month=month,
            is_active=is_active,
            balance_bop=balance_bop,
            draw=draw,
            balance_eop=outstanding,
            interest_basis=basis,
            interest_accrued=accrual,
            interest_paid=paid,
            accrued_unpaid=accrued_unpaid,
        ))

    # Rolled-up interest is posted as one lump at the last active month
    if payout_type == PayoutType.ROLLED_UP and loan_start is not None:
        pay_month = min(loan_end, horizon)
        lump = sum(p.interest_accrued for p in periods[loan_start - 1:pay_month])
        periods[pay_month - 1].interest_paid = lump
        for p in periods[pay_month - 1:]:
            p.accrued_unpaid = 0.0

    total_interest = sum(p.interest_paid for p in periods)

    return ConstructionLoanSchedule(
        periods=periods,
        horizon_months=horizon,
        debt_pct=debt_fraction * 100,
        monthly_rate=monthly_rate,
        loan_term=term,
        interest_on_basis=interest_on_basis,
        payout_type=payout_type,
        facility_amount=facility_amount,
        loan_start_month=loan_start,
        loan_end_month=loan_end,
        total_drawn=total_drawn,
        total_interest_accrued=total_accrued,
        total_interest=total_interest,
    )
