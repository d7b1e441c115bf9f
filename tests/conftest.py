"""Pytest configuration and fixtures."""

import os
from decimal import Decimal

import pytest

# Set test environment variables before importing settings
os.environ.setdefault("GOOGLE_API_KEY", "test-key")

from working_paper_agent.config import get_settings  # noqa: E402
from working_paper_agent.models import Adjustment, AdjustmentType  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def current_tb():
    """Current year trial balance rows."""
    return [
        {"Account": "Cash", "Balance": 1000},
        {"Account": "Meals and Entertainment", "Balance": 1000},
        {"Account": "Fines and Penalties", "Balance": 250},
    ]


@pytest.fixture
def prior_tb():
    """Prior year trial balance rows."""
    return [
        {"Account": "Cash", "Balance": 800},
        {"Account": "Meals and Entertainment", "Balance": 600},
    ]


@pytest.fixture
def adjustments():
    """Two adjustments, one with the optional references filled in."""
    return [
        Adjustment(
            account="Meals and Entertainment",
            type=AdjustmentType.PERMANENT,
            amount=Decimal("500"),
            explanation="50% of meals disallowed",
            irs_rule_ref="IRC §274(n)",
            m1_line="5c",
        ),
        Adjustment(
            account="Fines and Penalties",
            type=AdjustmentType.PERMANENT,
            amount=Decimal("250"),
            explanation="Fines and penalties are not deductible",
        ),
    ]


@pytest.fixture
def tool_arguments():
    """A generate_xlsx_working_paper payload as the model sends it."""
    return {
        "adjustments": [
            {
                "account": "Meals",
                "type": "Permanent",
                "amount": 500,
                "explanation": "50% disallowed",
            }
        ],
        "currentTB": [{"Account": "Cash", "Balance": 1000}],
        "currentYear": "2023",
        "lastYear": "2022",
    }
