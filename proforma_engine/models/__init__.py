"""Data models for the development proforma engine."""

from .defaults import (
    DEFAULT_EQUITY_PCT,
    DEFAULT_DEBT_PCT,
    DEFAULT_INTEREST_PCT,
    DEFAULT_HARD_COST_CONTINGENCY_PCT,
    DEFAULT_SOFT_COST_CONTINGENCY_PCT,
    DEFAULT_HORIZON_MONTHS,
    EngineConfig,
)
from .proforma import (
    InterestBasis,
    PayoutType,
    CashFlowCategory,
    Unit,
    UnitType,
    OtherIncomeItem,
    AdditionalCost,
    LandCosts,
    HardCosts,
    SoftCosts,
    Uses,
    FinancingCosts,
    Sources,
    ProformaMetrics,
    ItemTiming,
    CashFlowSchedule,
    Proforma,
    create_proforma,
    new_id,
)

__all__ = [
    "DEFAULT_EQUITY_PCT",
    "DEFAULT_DEBT_PCT",
    "DEFAULT_INTEREST_PCT",
    "DEFAULT_HARD_COST_CONTINGENCY_PCT",
    "DEFAULT_SOFT_COST_CONTINGENCY_PCT",
    "DEFAULT_HORIZON_MONTHS",
    "EngineConfig",
    "InterestBasis",
    "PayoutType",
    "CashFlowCategory",
    "Unit",
    "UnitType",
    "OtherIncomeItem",
    "AdditionalCost",
    "LandCosts",
    "HardCosts",
    "SoftCosts",
    "Uses",
    "FinancingCosts",
    "Sources",
    "ProformaMetrics",
    "ItemTiming",
    "CashFlowSchedule",
    "Proforma",
    "create_proforma",
    "new_id",
]
