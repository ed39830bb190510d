"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.test_inputs import (
    get_scenario_deal,
    get_rental_deal,
    get_post_handover_deal,
    get_mortgage,
)


@pytest.fixture
def scenario_deal():
    """Get the reference 20/30 deal with a January handover."""
    return get_scenario_deal()


@pytest.fixture
def rental_deal():
    """Get the mid-year handover deal with both rental strategies."""
    return get_rental_deal()


@pytest.fixture
def post_handover_deal():
    """Get the 40/60 post-handover plan deal."""
    return get_post_handover_deal()


@pytest.fixture
def mortgage():
    """Get the default enabled mortgage."""
    return get_mortgage()
