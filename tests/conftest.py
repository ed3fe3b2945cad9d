# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from dealcheck.api.http import app  # ensures imports resolve; run tests from repo root
from dealcheck.domain.deal import DealInput

from fixtures.deals import SCENARIO_FIGURES, overpriced_deal as _overpriced_deal, scenario_deal as _scenario_deal


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def scenario_figures() -> dict:
    return dict(SCENARIO_FIGURES)


@pytest.fixture
def scenario_deal() -> DealInput:
    return _scenario_deal()


@pytest.fixture
def overpriced_deal() -> DealInput:
    return _overpriced_deal()


@pytest.fixture
def make_deal():
    """
    Scenario deal with some figures swapped out.
    """
    def _make(**overrides) -> DealInput:
        figures = dict(SCENARIO_FIGURES)
        figures.update(overrides)
        return DealInput.create(**figures)

    return _make
