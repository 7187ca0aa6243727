"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from propfolio.main import app
from propfolio.calculations.assumptions import sample_assumptions_data


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sample_data():
    """Sample $2M deal as a flat input-sheet mapping."""
    return sample_assumptions_data()


@pytest.fixture
def cash_deal():
    """Small all-cash residential deal with itemized expenses."""
    return {
        "purchase_price": 500000,
        "acquisition_costs": 10000,
        "acquisition_cost_type": "dollar",
        "potential_rental_income": [60000, 61800, 63654, 65564, 67531],
        "vacancy_rates": [0.05] * 5,
        "property_taxes": [6000] * 5,
        "insurance": [2000] * 5,
        "maintenance": [3000] * 5,
        "operating_expense_type": "dollar",
        "financing_type": "cash",
        "property_type": "residential",
        "land_percentage": 0.25,
        "improvements_percentage": 0.75,
        "acquisition_month": 1,
        "ordinary_income_tax_rate": 0.30,
        "capital_gains_tax_rate": 0.15,
        "depreciation_recapture_rate": 0.25,
        "hold_period_years": 5,
        "disposition_price_type": "caprate",
        "disposition_cap_rate": 0.07,
        "cost_of_sale_type": "percentage",
        "cost_of_sale_percentage": 0.05,
    }
