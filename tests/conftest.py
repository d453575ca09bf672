import pytest

from seedfund_ledger.models import FundConfig
from seedfund_ledger.scenario import build_simulation


def fixed_clock() -> str:
    return "2026-01-01T00:00:00+00:00"


@pytest.fixture
def make_sim():
    """Factory for an in-memory fund; keyword overrides go straight into FundConfig."""

    def _make(**overrides):
        params = {"admin": "0xadmin", "fee_sink": "0xfeesink", "max_supply": 200, "fee_bps": 100}
        params.update(overrides)
        return build_simulation(FundConfig(**params), time_provider=fixed_clock)

    return _make


@pytest.fixture
def sim(make_sim):
    return make_sim()


@pytest.fixture
def seed_inflow():
    """Vest `amount` of `asset` at the custodian and pull it into the fund."""

    def _seed(sim, asset: str, amount: int):
        sim.custodian.vest(asset, amount)
        return sim.fund.pull(asset)

    return _seed
