"""Cost section totals and section editing.

Each section total is its base amount(s), a contingency (or, for land, the
stored closing cost) and the sum of named additional costs:

    hard = base + round(base × contingency% / 100) + Σ additional
    soft = bases + round(bases × contingency% / 100) + Σ additional
    land = base + closing cost + Σ additional
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Union

from ..models.numeric import coerce_number, round_dollars
from ..models.proforma import AdditionalCost, HardCosts, LandCosts, Proforma, SoftCosts, Uses


CostSectionData = Union[LandCosts, HardCosts, SoftCosts]


class CostSection(Enum):
    """The three cost sections of a proforma's uses."""

    LAND = "land_costs"
    HARD = "hard_costs"
    SOFT = "soft_costs"

    def get(self, uses: Uses) -> CostSectionData:
        """Select this section from a Uses record."""
        return getattr(uses, self.value)


@dataclass
class CostsResult:
    """Results of the cost roll-up."""

    land_costs: float
    closing_cost: float
    hard_costs: float
    hard_cost_contingency: float
    soft_costs: float
    soft_cost_contingency: float
    total_expenses: float


def calculate_contingency(base: float, contingency_pct: float) -> float:
    """Contingency on a base amount, rounded to the dollar."""
    return round_dollars(coerce_number(base) * coerce_number(contingency_pct) / 100)


def _additional_total(costs: List[AdditionalCost]) -> float:
    return sum(coerce_number(cost.amount) for cost in costs)


def calculate_section_total(section: CostSectionData) -> float:
    """Calculate the total for one cost section.

    Args:
        section: LandCosts, HardCosts or SoftCosts.

    Returns:
        Base amount(s) + contingency or closing cost + additional costs.
    """
    if isinstance(section, LandCosts):
        return (
            coerce_number(section.base_cost)
            + coerce_number(section.closing_cost)
            + _additional_total(section.additional_costs)
        )
    if isinstance(section, HardCosts):
        return (
            coerce_number(section.base_cost)
            + calculate_contingency(section.base_cost, section.contingency_pct)
            + _additional_total(section.additional_costs)
        )
    if isinstance(section, SoftCosts):
        base = coerce_number(section.base_total)
        return (
            base
            + calculate_contingency(base, section.contingency_pct)
            + _additional_total(section.additional_costs)
        )
    raise TypeError(f"Unknown cost section: {type(section).__name__}")


def calculate_total_expenses(proforma: Proforma) -> float:
    """Sum of the land, hard and soft section totals (excludes financing)."""
    return sum(calculate_section_total(section.get(proforma.uses)) for section in CostSection)


def calculate_costs(proforma: Proforma) -> CostsResult:
    """Roll up all cost sections of a proforma."""
    uses = proforma.uses
    land = calculate_section_total(uses.land_costs)
    hard = calculate_section_total(uses.hard_costs)
    soft = calculate_section_total(uses.soft_costs)

    return CostsResult(
        land_costs=land,
        closing_cost=uses.land_costs.closing_cost,
        hard_costs=hard,
        hard_cost_contingency=calculate_contingency(
            uses.hard_costs.base_cost, uses.hard_costs.contingency_pct
        ),
        soft_costs=soft,
        soft_cost_contingency=calculate_contingency(
            uses.soft_costs.base_total, uses.soft_costs.contingency_pct
        ),
        total_expenses=land + hard + soft,
    )


def update_section(uses: Uses, section: CostSection, **changes) -> Uses:
    """Apply field changes to one section, returning a new Uses.

    Args:
        uses: Current uses.
        section: Which section to change.
        **changes: Field values for the section's dataclass
            (e.g. ``base_cost=1_000_000``).

    Returns:
        Uses with the selected section replaced.
    """
    updated = replace(section.get(uses), **changes)
    return replace(uses, **{section.value: updated})


def upsert_additional_cost(
    uses: Uses,
    section: CostSection,
    name: str,
    amount: float,
    replacing: Optional[str] = None,
) -> Uses:
    """Add a named cost to a section, or edit the one named ``replacing``.

    When ``replacing`` names an existing cost it is renamed/re-valued in
    place; otherwise the cost is appended.
    """
    new_cost = AdditionalCost(name=name, amount=coerce_number(amount))
    costs = list(section.get(uses).additional_costs)

    if replacing is not None and any(c.name == replacing for c in costs):
        costs = [new_cost if c.name == replacing else c for c in costs]
    else:
        costs.append(new_cost)

    return update_section(uses, section, additional_costs=costs)


def remove_additional_cost(uses: Uses, section: CostSection, name: str) -> Uses:
    """Remove every additional cost called ``name`` from a section."""
    costs = [c for c in section.get(uses).additional_costs if c.name != name]
    return update_section(uses, section, additional_costs=costs)


def apply_closing_pct(land_costs: LandCosts, closing_pct: float) -> LandCosts:
    """Set the closing percentage and the matching stored closing cost."""
    pct = coerce_number(closing_pct)
    return replace(
        land_costs,
        closing_pct=pct,
        closing_cost=round_dollars(land_costs.base_cost * pct / 100),
    )
