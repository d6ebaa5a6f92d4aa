"""Proforma data model: the root financial record for one scenario.

Records are built from the collaborator's camelCase dictionaries with
``from_dict`` and written back with ``to_dict``. Missing numbers are read as
0 and missing lists as empty, so a partially filled form still evaluates.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from .defaults import (
    DEFAULT_BROKER_FEE_PCT,
    DEFAULT_DEBT_PCT,
    DEFAULT_EQUITY_PCT,
    DEFAULT_HARD_COST_CONTINGENCY_PCT,
    DEFAULT_INTEREST_PCT,
    DEFAULT_SOFT_COST_CONTINGENCY_PCT,
)
from .numeric import coerce_int, coerce_number


class InterestBasis(str, Enum):
    """Balance on which construction interest accrues."""
    DRAWN_BALANCE = "drawnBalance"  # Outstanding principal + half of the month's draw
    ENTIRE_LOAN = "entireLoan"  # Full committed facility from the first active month

    @classmethod
    def parse(cls, value: Any) -> "InterestBasis":
        try:
            return cls(value)
        except ValueError:
            return cls.DRAWN_BALANCE


class PayoutType(str, Enum):
    """How accrued construction interest is paid."""
    SERVICED = "serviced"  # Paid monthly as it accrues
    ROLLED_UP = "rolledUp"  # Paid as one lump in the loan's final active month

    @classmethod
    def parse(cls, value: Any) -> "PayoutType":
        try:
            return cls(value)
        except ValueError:
            return cls.ROLLED_UP


class CashFlowCategory(str, Enum):
    """Groups of timed line items in the cash flow schedule."""
    UNITS = "units"
    OTHER_INCOME = "otherIncome"
    LAND_COSTS = "landCosts"
    HARD_COSTS = "hardCosts"
    SOFT_COSTS = "softCosts"

    @property
    def is_revenue(self) -> bool:
        return self in (CashFlowCategory.UNITS, CashFlowCategory.OTHER_INCOME)


def new_id() -> str:
    """Generate a short unique identifier for a new record."""
    return uuid.uuid4().hex[:12]


@dataclass
class Unit:
    """A single sellable unit. ``value`` is the price per square foot."""
    id: str
    name: str
    area: float
    value: float

    def __post_init__(self):
        self.area = coerce_number(self.area)
        self.value = coerce_number(self.value)

    @property
    def revenue(self) -> float:
        return coerce_number(self.area) * coerce_number(self.value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Unit":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            area=coerce_number(data.get("area")),
            value=coerce_number(data.get("value")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "area": self.area, "value": self.value}


@dataclass
class UnitType:
    """A named group of units (e.g. "Two Bedroom")."""
    id: str
    name: str
    description: str = ""
    units: List[Unit] = field(default_factory=list)

    @property
    def total_revenue(self) -> float:
        return sum(unit.revenue for unit in self.units)

    @property
    def total_area(self) -> float:
        return sum(coerce_number(unit.area) for unit in self.units)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnitType":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            description=str(data.get("description", "") or ""),
            units=[Unit.from_dict(u) for u in data.get("units") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "units": [u.to_dict() for u in self.units],
        }


@dataclass
class OtherIncomeItem:
    """Non-unit revenue such as parking stalls or storage lockers."""
    id: str
    name: str
    description: str = ""
    unit_type: str = ""  # "parking", "storage", "retail" or a custom tag
    number_of_units: float = 0.0
    value_per_unit: float = 0.0

    def __post_init__(self):
        self.number_of_units = coerce_number(self.number_of_units)
        self.value_per_unit = coerce_number(self.value_per_unit)

    @property
    def total(self) -> float:
        return coerce_number(self.number_of_units) * coerce_number(self.value_per_unit)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OtherIncomeItem":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            description=str(data.get("description", "") or ""),
            unit_type=str(data.get("unitType", "") or ""),
            number_of_units=coerce_number(data.get("numberOfUnits")),
            value_per_unit=coerce_number(data.get("valuePerUnit")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "unitType": self.unit_type,
            "numberOfUnits": self.number_of_units,
            "valuePerUnit": self.value_per_unit,
            "value": self.total,
        }


@dataclass
class AdditionalCost:
    """Named cost line added to a section."""
    name: str
    amount: float

    def __post_init__(self):
        self.amount = coerce_number(self.amount)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalCost":
        return cls(name=str(data.get("name", "")), amount=coerce_number(data.get("amount")))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "amount": self.amount}


def _additional_from(data: Dict[str, Any]) -> List[AdditionalCost]:
    return [AdditionalCost.from_dict(c) for c in data.get("additionalCosts") or []]


@dataclass
class LandCosts:
    """Land acquisition costs.

    ``closing_cost`` is stored, not derived; callers keep it consistent with
    ``closing_pct`` (see ``costs.apply_closing_pct``).
    """
    base_cost: float = 0.0
    closing_pct: float = 0.0
    closing_cost: float = 0.0
    additional_costs: List[AdditionalCost] = field(default_factory=list)

    def __post_init__(self):
        self.base_cost = coerce_number(self.base_cost)
        self.closing_pct = coerce_number(self.closing_pct)
        self.closing_cost = coerce_number(self.closing_cost)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LandCosts":
        return cls(
            base_cost=coerce_number(data.get("baseCost")),
            closing_pct=coerce_number(data.get("closingPct")),
            closing_cost=coerce_number(data.get("closingCost")),
            additional_costs=_additional_from(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseCost": self.base_cost,
            "closingPct": self.closing_pct,
            "closingCost": self.closing_cost,
            "additionalCosts": [c.to_dict() for c in self.additional_costs],
        }


@dataclass
class HardCosts:
    """Direct construction costs."""
    base_cost: float = 0.0
    contingency_pct: float = DEFAULT_HARD_COST_CONTINGENCY_PCT
    additional_costs: List[AdditionalCost] = field(default_factory=list)

    def __post_init__(self):
        self.base_cost = coerce_number(self.base_cost)
        self.contingency_pct = coerce_number(self.contingency_pct)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HardCosts":
        return cls(
            base_cost=coerce_number(data.get("baseCost")),
            contingency_pct=coerce_number(data.get("contingencyPct")),
            additional_costs=_additional_from(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseCost": self.base_cost,
            "contingencyPct": self.contingency_pct,
            "additionalCosts": [c.to_dict() for c in self.additional_costs],
        }


@dataclass
class SoftCosts:
    """Non-construction costs with three base categories."""
    development: float = 0.0
    consultants: float = 0.0
    admin_marketing: float = 0.0
    contingency_pct: float = DEFAULT_SOFT_COST_CONTINGENCY_PCT
    additional_costs: List[AdditionalCost] = field(default_factory=list)

    def __post_init__(self):
        self.development = coerce_number(self.development)
        self.consultants = coerce_number(self.consultants)
        self.admin_marketing = coerce_number(self.admin_marketing)
        self.contingency_pct = coerce_number(self.contingency_pct)

    @property
    def base_total(self) -> float:
        return (
            coerce_number(self.development)
            + coerce_number(self.consultants)
            + coerce_number(self.admin_marketing)
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SoftCosts":
        return cls(
            development=coerce_number(data.get("development")),
            consultants=coerce_number(data.get("consultants")),
            admin_marketing=coerce_number(data.get("adminMarketing")),
            contingency_pct=coerce_number(data.get("contingencyPct")),
            additional_costs=_additional_from(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "development": self.development,
            "consultants": self.consultants,
            "adminMarketing": self.admin_marketing,
            "contingencyPct": self.contingency_pct,
            "additionalCosts": [c.to_dict() for c in self.additional_costs],
        }


@dataclass
class Uses:
    """Structured cost sections."""
    land_costs: LandCosts = field(default_factory=LandCosts)
    hard_costs: HardCosts = field(default_factory=HardCosts)
    soft_costs: SoftCosts = field(default_factory=SoftCosts)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Uses":
        return cls(
            land_costs=LandCosts.from_dict(data.get("landCosts") or {}),
            hard_costs=HardCosts.from_dict(data.get("hardCosts") or {}),
            soft_costs=SoftCosts.from_dict(data.get("softCosts") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "landCosts": self.land_costs.to_dict(),
            "hardCosts": self.hard_costs.to_dict(),
            "softCosts": self.soft_costs.to_dict(),
        }


@dataclass
class FinancingCosts:
    """Financing rates plus the derived financing cost amounts."""
    interest_pct: float = DEFAULT_INTEREST_PCT  # Annual nominal rate
    broker_fee_pct: float = DEFAULT_BROKER_FEE_PCT  # Percent of the debt amount

    # Derived
    interest_cost: float = 0.0
    broker_fee: float = 0.0
    total_financing_cost: float = 0.0

    def __post_init__(self):
        self.interest_pct = coerce_number(self.interest_pct)
        self.broker_fee_pct = coerce_number(self.broker_fee_pct)
        self.interest_cost = coerce_number(self.interest_cost)
        self.broker_fee = coerce_number(self.broker_fee)
        self.total_financing_cost = coerce_number(self.total_financing_cost)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinancingCosts":
        return cls(
            interest_pct=coerce_number(data.get("interestPct")),
            broker_fee_pct=coerce_number(data.get("brokerFeePct")),
            interest_cost=coerce_number(data.get("interestCost")),
            broker_fee=coerce_number(data.get("brokerFee")),
            total_financing_cost=coerce_number(data.get("totalFinancingCost")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interestPct": self.interest_pct,
            "brokerFeePct": self.broker_fee_pct,
            "interestCost": self.interest_cost,
            "brokerFee": self.broker_fee,
            "totalFinancingCost": self.total_financing_cost,
        }


@dataclass
class Sources:
    """Financing split and construction loan terms.

    ``equity_pct`` and ``debt_pct`` are expected to sum to 100; the engine
    trusts the pair as given.
    """
    equity_pct: float = DEFAULT_EQUITY_PCT
    debt_pct: float = DEFAULT_DEBT_PCT
    financing_costs: FinancingCosts = field(default_factory=FinancingCosts)
    loan_term: int = 0  # Months; 0 = project length
    interest_on_basis: InterestBasis = InterestBasis.DRAWN_BALANCE
    payout_type: PayoutType = PayoutType.ROLLED_UP

    def __post_init__(self):
        self.equity_pct = coerce_number(self.equity_pct)
        self.debt_pct = coerce_number(self.debt_pct)
        self.loan_term = coerce_int(self.loan_term)
        self.interest_on_basis = InterestBasis.parse(self.interest_on_basis)
        self.payout_type = PayoutType.parse(self.payout_type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sources":
        return cls(
            equity_pct=coerce_number(data.get("equityPct")),
            debt_pct=coerce_number(data.get("debtPct")),
            financing_costs=FinancingCosts.from_dict(data.get("financingCosts") or {}),
            loan_term=coerce_int(data.get("loanTerms", data.get("loanTerm"))),
            interest_on_basis=InterestBasis.parse(data.get("interestOnBasis")),
            payout_type=PayoutType.parse(data.get("payoutType")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "equityPct": self.equity_pct,
            "debtPct": self.debt_pct,
            "financingCosts": self.financing_costs.to_dict(),
            "loanTerms": self.loan_term,
            "interestOnBasis": self.interest_on_basis.value,
            "payoutType": self.payout_type.value,
        }


@dataclass
class ProformaMetrics:
    """Summary investment metrics. ROI values are percentages (33.3 = 33.3%)."""
    gross_profit: float = 0.0
    roi: float = 0.0
    annualized_roi: float = 0.0
    levered_emx: float = 0.0
    unlevered_emx: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProformaMetrics":
        return cls(
            gross_profit=coerce_number(data.get("grossProfit")),
            roi=coerce_number(data.get("roi")),
            annualized_roi=coerce_number(data.get("annualizedRoi")),
            levered_emx=coerce_number(data.get("leveredEmx")),
            unlevered_emx=coerce_number(data.get("unleveredEmx")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grossProfit": self.gross_profit,
            "roi": self.roi,
            "annualizedRoi": self.annualized_roi,
            "leveredEmx": self.levered_emx,
            "unleveredEmx": self.unlevered_emx,
        }


@dataclass
class ItemTiming:
    """Persisted start month (1-based) and duration for one scheduled item."""
    start: int = 1
    length: int = 1

    def __post_init__(self):
        self.start = coerce_int(self.start, 1)
        self.length = coerce_int(self.length, 1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemTiming":
        return cls(
            start=coerce_int(data.get("start"), 1),
            length=coerce_int(data.get("length"), 1),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "length": self.length}


@dataclass
class CashFlowSchedule:
    """Timing overrides keyed by item identifier, grouped by category."""
    timings: Dict[CashFlowCategory, Dict[str, ItemTiming]] = field(
        default_factory=lambda: {c: {} for c in CashFlowCategory}
    )

    def get(self, category: CashFlowCategory, key: str) -> Optional[ItemTiming]:
        return self.timings.get(category, {}).get(key)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CashFlowSchedule":
        schedule = cls()
        for category in CashFlowCategory:
            entries = data.get(category.value) or {}
            schedule.timings[category] = {
                str(key): ItemTiming.from_dict(value or {}) for key, value in entries.items()
            }
        return schedule

    def to_dict(self) -> Dict[str, Any]:
        return {
            category.value: {key: t.to_dict() for key, t in self.timings.get(category, {}).items()}
            for category in CashFlowCategory
        }


@dataclass
class Proforma:
    """Complete financial scenario for a development project.

    The derived fields (``total_revenue``, ``total_expenses``,
    ``total_project_cost_incl_financing``, ``metrics`` and the derived
    financing cost amounts) are only trustworthy after
    ``calculations.analysis.recompute``.
    """
    id: str
    project_id: str
    name: str = ""

    # Physical scope
    gba: float = 0.0  # Gross building area (SF)
    stories: int = 0
    project_length: int = 0  # Months
    absorption_period: int = 0  # Months

    unit_mix: List[UnitType] = field(default_factory=list)
    other_income: List[OtherIncomeItem] = field(default_factory=list)
    uses: Uses = field(default_factory=Uses)
    sources: Sources = field(default_factory=Sources)

    # Derived
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    total_project_cost_incl_financing: float = 0.0
    metrics: ProformaMetrics = field(default_factory=ProformaMetrics)

    cash_flow_schedule: CashFlowSchedule = field(default_factory=CashFlowSchedule)
    last_updated: str = ""

    def __post_init__(self):
        self.gba = coerce_number(self.gba)
        self.stories = coerce_int(self.stories)
        self.project_length = coerce_int(self.project_length)
        self.absorption_period = coerce_int(self.absorption_period)

    @property
    def total_units(self) -> int:
        return sum(len(ut.units) for ut in self.unit_mix)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proforma":
        """Build a proforma from the collaborator's camelCase record."""
        return cls(
            id=str(data.get("id", "")),
            project_id=str(data.get("projectId", "")),
            name=str(data.get("name", "") or ""),
            gba=coerce_number(data.get("gba")),
            stories=coerce_int(data.get("stories")),
            project_length=coerce_int(data.get("projectLength")),
            absorption_period=coerce_int(data.get("absorptionPeriod")),
            unit_mix=[UnitType.from_dict(ut) for ut in data.get("unitMix") or []],
            other_income=[OtherIncomeItem.from_dict(i) for i in data.get("otherIncome") or []],
            uses=Uses.from_dict(data.get("uses") or {}),
            sources=Sources.from_dict(data.get("sources") or {}),
            total_revenue=coerce_number(data.get("totalRevenue")),
            total_expenses=coerce_number(data.get("totalExpenses")),
            total_project_cost_incl_financing=coerce_number(
                data.get("totalProjectCostInclFinancing")
            ),
            metrics=ProformaMetrics.from_dict(data.get("metrics") or {}),
            cash_flow_schedule=CashFlowSchedule.from_dict(data.get("cashFlowSchedule") or {}),
            last_updated=str(data.get("lastUpdated", "") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "name": self.name,
            "lastUpdated": self.last_updated,
            "gba": self.gba,
            "stories": self.stories,
            "projectLength": self.project_length,
            "absorptionPeriod": self.absorption_period,
            "unitMix": [ut.to_dict() for ut in self.unit_mix],
            "otherIncome": [i.to_dict() for i in self.other_income],
            "uses": self.uses.to_dict(),
            "sources": self.sources.to_dict(),
            "totalRevenue": self.total_revenue,
            "totalExpenses": self.total_expenses,
            "totalProjectCostInclFinancing": self.total_project_cost_incl_financing,
            "metrics": self.metrics.to_dict(),
            "cashFlowSchedule": self.cash_flow_schedule.to_dict(),
        }


def create_proforma(
    project_id: str,
    name: str,
    land_cost: float = 0.0,
    project_length: int = 0,
    absorption_period: int = 0,
    gba: float = 0.0,
    stories: int = 0,
    proforma_id: Optional[str] = None,
) -> Proforma:
    """Create a new proforma for a project with default financing terms.

    Everything numeric starts at zero except the financing split (30/70),
    the 5.5% interest rate, the contingencies (10% hard, 5% soft) and the
    land base cost, which is seeded from the parent project.

    Args:
        project_id: Parent project identifier.
        name: Scenario name (e.g. "Base Case").
        land_cost: Parent project's land cost.
        project_length: Project duration in months.
        absorption_period: Sales absorption period in months.
        gba: Gross building area in square feet.
        stories: Number of stories.
        proforma_id: Explicit id; generated when omitted.

    Returns:
        A new Proforma.
    """
    return Proforma(
        id=proforma_id or new_id(),
        project_id=project_id,
        name=name,
        gba=coerce_number(gba),
        stories=coerce_int(stories),
        project_length=coerce_int(project_length),
        absorption_period=coerce_int(absorption_period),
        uses=Uses(land_costs=LandCosts(base_cost=coerce_number(land_cost))),
        sources=Sources(),
        last_updated=date.today().isoformat(),
    )
