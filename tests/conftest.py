"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from proforma_engine.models import PayoutType
from tests.fixtures.test_inputs import (
    get_empty_proforma_inputs,
    get_full_proforma_inputs,
    get_loan_scenario_inputs,
    get_metrics_scenario_inputs,
)


@pytest.fixture
def loan_scenario():
    """Rolled-up $1.2M hard-cost loan scenario."""
    return get_loan_scenario_inputs()


@pytest.fixture
def serviced_loan_scenario():
    """Same loan scenario with interest serviced monthly."""
    return get_loan_scenario_inputs(PayoutType.SERVICED)


@pytest.fixture
def metrics_scenario():
    """$1.3M revenue / $1.0M expenses / 30% equity / 24 months."""
    return get_metrics_scenario_inputs()


@pytest.fixture
def full_proforma():
    """Fully populated proforma."""
    return get_full_proforma_inputs()


@pytest.fixture
def empty_proforma():
    """Proforma with no units and no costs."""
    return get_empty_proforma_inputs()
