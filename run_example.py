#!/usr/bin/env python3
"""Example script to run the development proforma engine on a sample project."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from proforma_engine.calculations import (
    CostSection,
    add_units,
    analyze_proforma,
    apply_closing_pct,
    update_item_timing,
    update_section,
    upsert_additional_cost,
    upsert_other_income,
    update_unit_type,
)
from proforma_engine.export import cash_flow_to_dataframe, generate_cash_flow_excel
from proforma_engine.models import (
    CashFlowCategory,
    InterestBasis,
    OtherIncomeItem,
    PayoutType,
    Proforma,
    UnitType,
    create_proforma,
)
from proforma_engine.scenarios import analyze_scenarios, format_scenario_table


def get_sample_proforma() -> Proforma:
    """Build a 24-month, 18-unit condo project through the editing helpers."""
    proforma = create_proforma(
        project_id="sample-project",
        name="Base Case",
        land_cost=2_000_000,
        project_length=24,
        absorption_period=6,
        gba=24_000,
        stories=4,
    )

    one_bed = add_units(UnitType(id="ut-1br", name="One Bedroom"), "1BR", 650, 1_200, quantity=10)
    two_bed = add_units(UnitType(id="ut-2br", name="Two Bedroom"), "2BR", 950, 1_100, quantity=8)
    proforma = update_unit_type(proforma, one_bed)
    proforma = update_unit_type(proforma, two_bed)
    proforma = upsert_other_income(proforma, OtherIncomeItem(
        id="parking", name="Parking Stalls", unit_type="parking",
        number_of_units=20, value_per_unit=35_000,
    ))

    uses = replace(proforma.uses, land_costs=apply_closing_pct(proforma.uses.land_costs, 2))
    uses = update_section(uses, CostSection.HARD, base_cost=9_000_000)
    uses = upsert_additional_cost(uses, CostSection.HARD, "Site Servicing", 250_000)
    uses = update_section(uses, CostSection.SOFT, development=600_000, consultants=400_000,
                          admin_marketing=300_000)
    proforma.uses = uses

    proforma.sources.loan_term = 24
    proforma.sources.financing_costs.broker_fee_pct = 1.0

    # Sales close over the last months of the project
    for unit_type in proforma.unit_mix:
        proforma = update_item_timing(proforma, CashFlowCategory.UNITS, unit_type.id, start=22, length=6)
    proforma = update_item_timing(proforma, CashFlowCategory.OTHER_INCOME, "parking", start=24, length=1)

    return proforma


def run_single_analysis():
    """Analyze the sample proforma and print its monthly cash flow."""
    print("\n" + "=" * 60)
    print("DEVELOPMENT PROFORMA")
    print("=" * 60 + "\n")

    analysis = analyze_proforma(get_sample_proforma())
    proforma = analysis.proforma

    print(f"{'Total Revenue':<35} ${proforma.total_revenue:>15,.0f}")
    print(f"{'Total Expenses':<35} ${proforma.total_expenses:>15,.0f}")
    print(f"{'Interest Cost':<35} ${analysis.financing.interest_cost:>15,.0f}")
    print(f"{'Broker Fee':<35} ${analysis.financing.broker_fee:>15,.0f}")
    print(f"{'Total Cost incl. Financing':<35} ${proforma.total_project_cost_incl_financing:>15,.0f}")
    print(f"{'Gross Profit':<35} ${proforma.metrics.gross_profit:>15,.0f}")
    print(f"{'ROI':<35} {proforma.metrics.roi:>15.1f}%")
    print(f"{'Annualized ROI':<35} {proforma.metrics.annualized_roi:>15.1f}%")
    print(f"{'Levered EMx':<35} {proforma.metrics.levered_emx:>15.2f}x")
    print(f"{'Levered IRR':<35} {analysis.cash_flow_metrics.levered_irr:>15.1%}")

    loan = analysis.cash_flow.loan
    print(f"\nConstruction loan active months {loan.loan_start_month}-{loan.loan_end_month}, "
          f"interest paid month {loan.payment_month}")

    df = cash_flow_to_dataframe(analysis.cash_flow, trim_trailing_empty_months=True)
    print("\n" + df[["Month", "Total Revenue", "Total Expenses", "Interest Payment",
                     "Net Cash Flow", "Cumulative Cash Flow"]].to_string(index=False))
    return analysis


def run_financing_comparison():
    """Compare interest basis and payout policies side by side."""
    base = get_sample_proforma()
    scenarios = []
    for basis in InterestBasis:
        for payout in PayoutType:
            proforma = Proforma.from_dict(base.to_dict())
            proforma.name = f"{basis.value}/{payout.value}"
            proforma.sources.interest_on_basis = basis
            proforma.sources.payout_type = payout
            scenarios.append(proforma)

    print("\n" + format_scenario_table(analyze_scenarios(scenarios, parallel=True)))


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Development Proforma Engine")
    parser.add_argument(
        "--excel",
        metavar="PATH",
        help="Write the cash flow workbook to PATH",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    analysis = run_single_analysis()
    run_financing_comparison()

    if args.excel:
        Path(args.excel).write_bytes(generate_cash_flow_excel(analysis))
        print(f"\nWrote {args.excel}")

    print("\nDone.")


if __name__ == "__main__":
    main()
