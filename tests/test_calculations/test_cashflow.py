"""Tests for the monthly cash flow engine."""

import copy
import logging

import pytest

from proforma_engine.calculations.cashflow import (
    CashFlowItem,
    build_cash_flow_items,
    generate_cash_flow,
    schedule_from_items,
    update_item_timing,
)
from proforma_engine.calculations.costs import calculate_total_expenses
from proforma_engine.calculations.revenue import calculate_total_revenue
from proforma_engine.models import CashFlowCategory, EngineConfig


class TestCashFlowItem:
    """Tests for straight-line distribution of a single item."""

    @pytest.mark.parametrize("start,length", [(1, 1), (3, 7), (1, 120), (50, 13)])
    def test_distribution_sums_to_amount(self, start, length):
        item = CashFlowItem("k", "Item", CashFlowCategory.HARD_COSTS, 1_000_000, start, length)

        total = sum(item.monthly_value(m) for m in range(1, 121))
        assert total == pytest.approx(1_000_000)

    def test_zero_outside_window(self):
        item = CashFlowItem("k", "Item", CashFlowCategory.SOFT_COSTS, 900, start=4, length=3)

        assert item.monthly_value(3) == 0
        assert item.monthly_value(4) == 300
        assert item.monthly_value(6) == 300
        assert item.monthly_value(7) == 0
        assert item.end == 6

    def test_start_and_length_clamped(self):
        item = CashFlowItem("k", "Item", CashFlowCategory.LAND_COSTS, "$500", start=0, length=-2)

        assert (item.start, item.length, item.amount) == (1, 1, 500)

    def test_amount_beyond_horizon(self):
        item = CashFlowItem("k", "Item", CashFlowCategory.HARD_COSTS, 1_200, start=10, length=6)

        assert item.amount_beyond(120) == 0
        assert item.amount_beyond(12) == pytest.approx(600)
        assert item.amount_beyond(5) == pytest.approx(1_200)


class TestBuildItems:
    """Tests for deriving timed items from a proforma."""

    def test_default_timings(self, full_proforma):
        items = {(i.category, i.key): i for i in build_cash_flow_items(full_proforma)}

        hard = items[(CashFlowCategory.HARD_COSTS, "baseCost")]
        assert (hard.start, hard.length) == (3, 18)
        consultants = items[(CashFlowCategory.SOFT_COSTS, "consultants")]
        assert (consultants.start, consultants.length) == (1, 6)
        permits = items[(CashFlowCategory.SOFT_COSTS, "additional_0")]
        assert (permits.label, permits.start, permits.length) == ("Permits", 2, 12)

    def test_saved_timings_override_defaults(self, full_proforma):
        items = {(i.category, i.key): i for i in build_cash_flow_items(full_proforma)}

        units = items[(CashFlowCategory.UNITS, "ut-1br")]
        assert (units.start, units.length, units.amount) == (22, 6, 7_800_000)

    def test_contingency_scheduled_as_own_item(self, full_proforma):
        items = {(i.category, i.key): i for i in build_cash_flow_items(full_proforma)}

        assert items[(CashFlowCategory.HARD_COSTS, "contingency")].amount == 900_000
        assert items[(CashFlowCategory.SOFT_COSTS, "contingency")].amount == 65_000

    def test_item_amounts_match_totals(self, full_proforma):
        items = build_cash_flow_items(full_proforma)

        assert sum(i.amount for i in items if i.category.is_revenue) == calculate_total_revenue(full_proforma)
        assert sum(i.amount for i in items if not i.category.is_revenue) == calculate_total_expenses(full_proforma)

    def test_zero_cost_lines_skipped(self, loan_scenario):
        items = build_cash_flow_items(loan_scenario)

        assert [(i.category, i.key) for i in items] == [(CashFlowCategory.HARD_COSTS, "baseCost")]


class TestGenerateCashFlow:
    """Tests for the monthly cash flow."""

    def test_one_row_per_horizon_month(self, full_proforma):
        result = generate_cash_flow(full_proforma)

        assert len(result.months) == 120
        assert result.horizon_months == 120
        assert [m.month for m in result.months[:3]] == [1, 2, 3]

    def test_monthly_totals_match_aggregates(self, full_proforma):
        result = generate_cash_flow(full_proforma)

        assert result.total_revenue == pytest.approx(16_860_000)
        assert result.total_expenses == pytest.approx(13_695_000)
        assert not result.exceeds_horizon
        assert result.unscheduled_amount == 0

    def test_net_and_cumulative(self, loan_scenario):
        result = generate_cash_flow(loan_scenario)

        month_12 = result.get_month(12)
        assert month_12.expenses == pytest.approx(100_000)
        assert month_12.interest_payment == pytest.approx(25_200)
        assert month_12.total_expenses_including_interest == pytest.approx(125_200)
        assert month_12.net_cash_flow == pytest.approx(-125_200)
        assert month_12.cumulative_cash_flow == pytest.approx(-1_225_200)
        assert result.months[-1].cumulative_cash_flow == pytest.approx(-1_225_200)

    def test_loan_driven_by_expense_schedule(self, loan_scenario):
        result = generate_cash_flow(loan_scenario)

        assert result.loan_start_month == 1
        assert result.loan_end_month == 12
        assert result.total_debt_drawn == pytest.approx(840_000)
        assert result.total_equity_contributed == pytest.approx(360_000)
        assert result.get_month(1).debt_draw == pytest.approx(70_000)
        assert result.get_month(1).equity_contribution == pytest.approx(30_000)

    def test_serviced_interest(self, serviced_loan_scenario):
        result = generate_cash_flow(serviced_loan_scenario)

        assert result.get_month(1).interest_payment == pytest.approx(175)
        assert result.total_interest == pytest.approx(25_200)

    def test_loan_term_defaults_to_project_length(self, loan_scenario):
        loan_scenario.sources.loan_term = 0
        loan_scenario.project_length = 6

        result = generate_cash_flow(loan_scenario)

        assert result.loan_end_month == 6

    @pytest.mark.parametrize("term", [-5, "-12"])
    def test_negative_loan_term_never_activates(self, loan_scenario, term):
        """Only a zero term falls back to the project length."""
        loan_scenario.sources.loan_term = term
        loan_scenario.project_length = 24

        result = generate_cash_flow(loan_scenario)

        assert result.loan_start_month is None
        assert result.total_interest == 0
        assert not any(p.is_active for p in result.loan.periods)

    def test_category_breakdown(self, full_proforma):
        month_1 = generate_cash_flow(full_proforma).get_month(1)

        assert month_1.expense_by_category.land_costs == pytest.approx(2_100_000)
        assert month_1.expense_by_category.hard_costs == 0
        assert month_1.revenue == 0

    def test_empty_proforma(self, empty_proforma):
        result = generate_cash_flow(empty_proforma)

        assert result.total_revenue == 0
        assert result.total_expenses == 0
        assert result.total_interest == 0
        assert result.loan_start_month is None
        assert all(m.net_cash_flow == 0 for m in result.months)

    def test_idempotent(self, full_proforma):
        """Running twice on the same input yields identical output."""
        snapshot = copy.deepcopy(full_proforma)

        first = generate_cash_flow(full_proforma)
        second = generate_cash_flow(full_proforma)

        assert first == second
        assert full_proforma == snapshot

    def test_get_month_out_of_range(self, full_proforma):
        with pytest.raises(IndexError):
            generate_cash_flow(full_proforma).get_month(121)


class TestHorizon:
    """Tests for projects running past the simulation horizon."""

    def test_overrun_flagged(self, full_proforma, caplog):
        with caplog.at_level(logging.WARNING, logger="proforma_engine.calculations.cashflow"):
            result = generate_cash_flow(full_proforma, EngineConfig(horizon_months=12))

        assert result.exceeds_horizon
        assert len(result.months) == 12
        assert "horizon" in caplog.text

    def test_unscheduled_amount_accounts_for_remainder(self, full_proforma):
        result = generate_cash_flow(full_proforma, EngineConfig(horizon_months=12))

        scheduled = result.total_revenue + result.total_expenses
        assert scheduled + result.unscheduled_amount == pytest.approx(16_860_000 + 13_695_000)
        assert result.unscheduled_amount > 0


class TestTimingEdits:
    """Tests for overriding item timing."""

    def test_update_item_timing(self, full_proforma):
        updated = update_item_timing(full_proforma, CashFlowCategory.HARD_COSTS, "baseCost", start=5)

        timing = updated.cash_flow_schedule.get(CashFlowCategory.HARD_COSTS, "baseCost")
        assert (timing.start, timing.length) == (5, 18)
        # Other items' current timings are persisted
        consultants = updated.cash_flow_schedule.get(CashFlowCategory.SOFT_COSTS, "consultants")
        assert (consultants.start, consultants.length) == (1, 6)
        # Input untouched
        assert full_proforma.cash_flow_schedule.get(CashFlowCategory.HARD_COSTS, "baseCost") is None

    def test_updated_timing_moves_cash(self, loan_scenario):
        updated = update_item_timing(loan_scenario, CashFlowCategory.HARD_COSTS, "baseCost", start=3, length=6)

        result = generate_cash_flow(updated)
        assert result.get_month(2).expenses == 0
        assert result.get_month(3).expenses == pytest.approx(200_000)
        assert result.loan_start_month == 3

    def test_schedule_from_items(self, loan_scenario):
        schedule = schedule_from_items(build_cash_flow_items(loan_scenario))

        timing = schedule.get(CashFlowCategory.HARD_COSTS, "baseCost")
        assert (timing.start, timing.length) == (1, 12)
