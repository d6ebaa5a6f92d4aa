"""Revenue calculations for unit sales and other income."""

from dataclasses import dataclass, replace
from typing import List

from ..models.proforma import OtherIncomeItem, Proforma


@dataclass
class RevenueResult:
    """Breakdown of total project revenue."""

    unit_revenue: float
    other_income: float
    total_revenue: float
    total_units: int
    total_unit_area: float

    @property
    def average_price_psf(self) -> float:
        """Blended sale price per square foot across all units."""
        if self.total_unit_area <= 0:
            return 0.0
        return self.unit_revenue / self.total_unit_area


def calculate_unit_revenue(proforma: Proforma) -> float:
    """Sum of area × price per SF over every unit in the mix."""
    return sum(unit_type.total_revenue for unit_type in proforma.unit_mix)


def calculate_other_income(proforma: Proforma) -> float:
    """Sum of number of units × value per unit over other income items."""
    return sum(item.total for item in proforma.other_income)


def calculate_total_revenue(proforma: Proforma) -> float:
    """Calculate total project revenue.

    No rounding is applied; display layers round for presentation.

    Args:
        proforma: Proforma with unit mix and other income.

    Returns:
        Unit sales plus other income.
    """
    return calculate_unit_revenue(proforma) + calculate_other_income(proforma)


def calculate_revenue(proforma: Proforma) -> RevenueResult:
    """Calculate the full revenue breakdown for a proforma."""
    unit_revenue = calculate_unit_revenue(proforma)
    other_income = calculate_other_income(proforma)

    return RevenueResult(
        unit_revenue=unit_revenue,
        other_income=other_income,
        total_revenue=unit_revenue + other_income,
        total_units=proforma.total_units,
        total_unit_area=sum(ut.total_area for ut in proforma.unit_mix),
    )


def upsert_other_income(proforma: Proforma, item: OtherIncomeItem) -> Proforma:
    """Return a copy with ``item`` added, or replacing the item with the same id."""
    items: List[OtherIncomeItem] = list(proforma.other_income)
    for i, existing in enumerate(items):
        if existing.id == item.id:
            items[i] = item
            break
    else:
        items.append(item)
    return replace(proforma, other_income=items)


def remove_other_income(proforma: Proforma, item_id: str) -> Proforma:
    """Return a copy without the other income item ``item_id``."""
    return replace(
        proforma,
        other_income=[item for item in proforma.other_income if item.id != item_id],
    )
