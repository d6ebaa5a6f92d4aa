"""Default assumptions and engine configuration."""

from dataclasses import dataclass, field
from typing import Dict, Tuple


# Financing defaults applied to a freshly created proforma
DEFAULT_EQUITY_PCT = 30.0
DEFAULT_DEBT_PCT = 70.0
DEFAULT_INTEREST_PCT = 5.5
DEFAULT_BROKER_FEE_PCT = 0.0

# Contingency defaults (percent of base cost)
DEFAULT_HARD_COST_CONTINGENCY_PCT = 10.0
DEFAULT_SOFT_COST_CONTINGENCY_PCT = 5.0

# Cash flow simulation horizon (months)
DEFAULT_HORIZON_MONTHS = 120

# Default (start, length) for each scheduled line when no override is saved.
# Keyed by category, then item key; "*" covers units, other income and
# additional_<n> lines.
DEFAULT_ITEM_TIMINGS: Dict[str, Dict[str, Tuple[int, int]]] = {
    "units": {"*": (1, 1)},
    "otherIncome": {"*": (1, 1)},
    "landCosts": {
        "baseCost": (1, 1),
        "closingCost": (1, 1),
        "*": (1, 1),
    },
    "hardCosts": {
        "baseCost": (3, 18),
        "contingency": (3, 18),
        "*": (3, 18),
    },
    "softCosts": {
        "development": (2, 12),
        "consultants": (1, 6),
        "adminMarketing": (1, 24),
        "contingency": (2, 12),
        "*": (2, 12),
    },
}

# Display labels for the fixed cost lines
COST_LINE_LABELS: Dict[str, str] = {
    "baseCost.landCosts": "Land Purchase",
    "closingCost": "Closing Costs",
    "baseCost.hardCosts": "Construction",
    "contingency.hardCosts": "Hard Cost Contingency",
    "development": "Development",
    "consultants": "Consultants",
    "adminMarketing": "Admin & Marketing",
    "contingency.softCosts": "Soft Cost Contingency",
}


@dataclass
class EngineConfig:
    """Configuration for the cash flow simulator.

    The horizon bounds the month-by-month simulation. Projects or line items
    running past it are flagged on the result, not silently dropped.
    """
    horizon_months: int = DEFAULT_HORIZON_MONTHS
    item_timings: Dict[str, Dict[str, Tuple[int, int]]] = field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_ITEM_TIMINGS.items()}
    )

    def default_timing(self, category: str, key: str) -> Tuple[int, int]:
        """Get the default (start, length) for an item in a category."""
        timings = self.item_timings.get(category, {})
        return timings.get(key, timings.get("*", (1, 1)))
