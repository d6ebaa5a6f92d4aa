"""Tests for cost section totals and section editing."""

import pytest

from proforma_engine.calculations.costs import (
    CostSection,
    apply_closing_pct,
    calculate_contingency,
    calculate_costs,
    calculate_section_total,
    calculate_total_expenses,
    remove_additional_cost,
    update_section,
    upsert_additional_cost,
)
from proforma_engine.models import AdditionalCost, HardCosts, LandCosts, SoftCosts, Uses
from proforma_engine.models.numeric import round_dollars


class TestSectionTotals:
    """Tests for per-section totals."""

    @pytest.mark.parametrize("pct", [0, 5, 10, 33.333])
    def test_hard_total_is_base_plus_rounded_contingency(self, pct):
        base = 1_234_567
        hard = HardCosts(base_cost=base, contingency_pct=pct,
                         additional_costs=[AdditionalCost("A", 1_000), AdditionalCost("B", 2_500)])

        assert calculate_section_total(hard) == base + round_dollars(base * pct / 100) + 3_500

    @pytest.mark.parametrize("pct", [0, 5, 10, 33.333])
    def test_soft_total_uses_summed_bases(self, pct):
        soft = SoftCosts(development=100_001, consultants=50_000, admin_marketing=25_000,
                         contingency_pct=pct, additional_costs=[AdditionalCost("Permits", 7_000)])
        base = 175_001

        assert calculate_section_total(soft) == base + round_dollars(base * pct / 100) + 7_000

    def test_land_total_uses_stored_closing_cost(self):
        """Closing cost is taken as stored, not re-derived from the percentage."""
        land = LandCosts(base_cost=1_000_000, closing_pct=50, closing_cost=15_000,
                         additional_costs=[AdditionalCost("Survey", 5_000)])

        assert calculate_section_total(land) == 1_020_000

    def test_unknown_section_type(self):
        with pytest.raises(TypeError):
            calculate_section_total(object())

    def test_contingency_rounds_half_away_from_zero(self):
        # 5% of 10 = 0.5 -> 1
        assert calculate_contingency(10, 5) == 1.0
        assert calculate_contingency(1_000, 0) == 0.0


class TestTotalExpenses:
    """Tests for the cost roll-up."""

    def test_full_proforma(self, full_proforma):
        assert calculate_total_expenses(full_proforma) == 2_100_000 + 10_150_000 + 1_445_000

    def test_costs_breakdown(self, full_proforma):
        result = calculate_costs(full_proforma)

        assert result.land_costs == 2_100_000
        assert result.closing_cost == 40_000
        assert result.hard_costs == 10_150_000
        assert result.hard_cost_contingency == 900_000
        assert result.soft_costs == 1_445_000
        assert result.soft_cost_contingency == 65_000
        assert result.total_expenses == 13_695_000

    def test_empty_proforma(self, empty_proforma):
        assert calculate_total_expenses(empty_proforma) == 0


class TestSectionEditing:
    """Tests for editing sections through CostSection."""

    def test_update_section_returns_new_uses(self):
        uses = Uses()
        updated = update_section(uses, CostSection.HARD, base_cost=500_000)

        assert updated.hard_costs.base_cost == 500_000
        assert uses.hard_costs.base_cost == 0

    def test_upsert_appends(self):
        uses = upsert_additional_cost(Uses(), CostSection.SOFT, "Legal", "$12,000")

        assert uses.soft_costs.additional_costs == [AdditionalCost("Legal", 12_000)]

    def test_upsert_replaces_named_cost(self):
        uses = upsert_additional_cost(Uses(), CostSection.LAND, "Survey", 5_000)
        uses = upsert_additional_cost(uses, CostSection.LAND, "Topo Survey", 6_000, replacing="Survey")

        assert uses.land_costs.additional_costs == [AdditionalCost("Topo Survey", 6_000)]

    def test_upsert_with_missing_replacing_appends(self):
        uses = upsert_additional_cost(Uses(), CostSection.HARD, "Crane", 30_000, replacing="Nope")

        assert len(uses.hard_costs.additional_costs) == 1

    def test_remove(self):
        uses = upsert_additional_cost(Uses(), CostSection.HARD, "Crane", 30_000)
        uses = upsert_additional_cost(uses, CostSection.HARD, "Hoarding", 10_000)
        uses = remove_additional_cost(uses, CostSection.HARD, "Crane")

        assert [c.name for c in uses.hard_costs.additional_costs] == ["Hoarding"]

    def test_apply_closing_pct(self):
        land = apply_closing_pct(LandCosts(base_cost=1_234_567), 1.5)

        assert land.closing_pct == 1.5
        assert land.closing_cost == round_dollars(1_234_567 * 1.5 / 100)
        assert calculate_section_total(land) == 1_234_567 + land.closing_cost


class TestInvalidNumbers:
    """Tests for section totals fed missing, NaN and currency-string inputs."""

    def test_missing_base_cost(self):
        assert calculate_section_total(HardCosts(base_cost=None, contingency_pct=10)) == 0

    def test_currency_strings(self):
        hard = HardCosts(base_cost="$500,000", contingency_pct="10",
                         additional_costs=[AdditionalCost("Permit", "$1,000")])

        assert calculate_section_total(hard) == 551_000

    def test_nan_fields_read_as_zero(self):
        soft = SoftCosts(development=float("nan"), consultants="$1,000", admin_marketing=None,
                         contingency_pct=float("nan"))

        assert calculate_section_total(soft) == 1_000

    def test_update_section_coerces_changes(self):
        uses = update_section(Uses(), CostSection.HARD, base_cost=float("nan"), contingency_pct="$5")
        uses = update_section(uses, CostSection.LAND, base_cost="$1,000", closing_cost=None)

        assert uses.hard_costs.base_cost == 0
        assert uses.hard_costs.contingency_pct == 5
        assert uses.land_costs.base_cost == 1_000
        assert uses.land_costs.closing_cost == 0

    def test_fields_assigned_after_construction(self):
        """Totals stay finite when fields are overwritten with raw input."""
        land = LandCosts(base_cost=1_000)
        land.base_cost = "abc"
        land.closing_cost = "$250"
        hard = HardCosts(base_cost=100)
        hard.base_cost = float("nan")

        assert calculate_section_total(land) == 250
        assert calculate_section_total(hard) == 0
        assert calculate_contingency(None, "10") == 0
        assert calculate_contingency("$1,000", float("inf")) == 0
