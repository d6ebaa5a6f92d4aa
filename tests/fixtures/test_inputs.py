"""Sample proformas used across the test suite."""

from proforma_engine.models import (
    AdditionalCost,
    CashFlowCategory,
    CashFlowSchedule,
    FinancingCosts,
    HardCosts,
    InterestBasis,
    ItemTiming,
    LandCosts,
    OtherIncomeItem,
    PayoutType,
    Proforma,
    SoftCosts,
    Sources,
    Unit,
    UnitType,
    Uses,
)


def get_loan_scenario_inputs(payout_type: PayoutType = PayoutType.ROLLED_UP) -> Proforma:
    """Single hard-cost item of $1.2M spread over months 1-12.

    Expenses are $100,000 per month, 70% debt at 6% annual over a 12-month
    term, so outstanding principal grows by $70,000 each month.
    """
    schedule = CashFlowSchedule()
    schedule.timings[CashFlowCategory.HARD_COSTS]["baseCost"] = ItemTiming(start=1, length=12)

    return Proforma(
        id="loan-scenario",
        project_id="project-1",
        name="Loan Scenario",
        project_length=12,
        uses=Uses(
            land_costs=LandCosts(),
            hard_costs=HardCosts(base_cost=1_200_000, contingency_pct=0),
            soft_costs=SoftCosts(contingency_pct=0),
        ),
        sources=Sources(
            equity_pct=30,
            debt_pct=70,
            financing_costs=FinancingCosts(interest_pct=6),
            loan_term=12,
            interest_on_basis=InterestBasis.DRAWN_BALANCE,
            payout_type=payout_type,
        ),
        cash_flow_schedule=schedule,
    )


def get_metrics_scenario_inputs() -> Proforma:
    """$1.3M revenue on $1.0M expenses, 30% equity over 24 months.

    These inputs should produce:
    - Gross profit: $300,000
    - ROI: 100%
    - Annualized ROI: 50%
    """
    return Proforma(
        id="metrics-scenario",
        project_id="project-1",
        name="Metrics Scenario",
        project_length=24,
        unit_mix=[
            UnitType(
                id="ut-1",
                name="Two Bedroom",
                units=[Unit(id=f"u-{i}", name="2BR", area=1_000, value=650) for i in range(2)],
            ),
        ],
        uses=Uses(
            land_costs=LandCosts(base_cost=1_000_000),
            hard_costs=HardCosts(contingency_pct=0),
            soft_costs=SoftCosts(contingency_pct=0),
        ),
        sources=Sources(equity_pct=30, debt_pct=70),
    )


def get_full_proforma_inputs() -> Proforma:
    """A fully populated proforma touching every section."""
    schedule = CashFlowSchedule()
    schedule.timings[CashFlowCategory.UNITS]["ut-1br"] = ItemTiming(start=22, length=6)
    schedule.timings[CashFlowCategory.UNITS]["ut-2br"] = ItemTiming(start=22, length=6)
    schedule.timings[CashFlowCategory.OTHER_INCOME]["parking"] = ItemTiming(start=24, length=1)

    return Proforma(
        id="full-scenario",
        project_id="project-1",
        name="Base Case",
        gba=24_000,
        stories=4,
        project_length=24,
        absorption_period=6,
        unit_mix=[
            UnitType(
                id="ut-1br",
                name="One Bedroom",
                units=[Unit(id=f"1br-{i}", name="1BR", area=650, value=1_200) for i in range(10)],
            ),
            UnitType(
                id="ut-2br",
                name="Two Bedroom",
                units=[Unit(id=f"2br-{i}", name="2BR", area=950, value=1_100) for i in range(8)],
            ),
        ],
        other_income=[
            OtherIncomeItem(
                id="parking",
                name="Parking Stalls",
                unit_type="parking",
                number_of_units=20,
                value_per_unit=35_000,
            ),
        ],
        uses=Uses(
            land_costs=LandCosts(
                base_cost=2_000_000,
                closing_pct=2,
                closing_cost=40_000,
                additional_costs=[AdditionalCost("Rezoning", 60_000)],
            ),
            hard_costs=HardCosts(
                base_cost=9_000_000,
                contingency_pct=10,
                additional_costs=[AdditionalCost("Site Servicing", 250_000)],
            ),
            soft_costs=SoftCosts(
                development=600_000,
                consultants=400_000,
                admin_marketing=300_000,
                contingency_pct=5,
                additional_costs=[AdditionalCost("Permits", 80_000)],
            ),
        ),
        sources=Sources(
            equity_pct=30,
            debt_pct=70,
            financing_costs=FinancingCosts(interest_pct=5.5, broker_fee_pct=1),
            loan_term=24,
            interest_on_basis=InterestBasis.DRAWN_BALANCE,
            payout_type=PayoutType.ROLLED_UP,
        ),
        cash_flow_schedule=schedule,
    )


def get_empty_proforma_inputs() -> Proforma:
    """A proforma with no units and no costs."""
    return Proforma(id="empty", project_id="project-1", name="Empty")
