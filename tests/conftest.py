"""Pytest configuration and shared fixtures."""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from optcycle.data.models import (
    ContractChain, MarketSnapshot, OptionContract, OptionRight, PositionView, Symbol
)
from optcycle.data.providers import StaticChainProvider


AS_OF = datetime(2015, 12, 23, tzinfo=timezone.utc)
EXPIRIES = [date(2015, 12, 24), date(2016, 1, 15), date(2016, 2, 19)]


def make_contracts():
    """Puts 700/800/900 and calls 500/600/700 listed at three expiries."""
    contracts = []
    for expiry in EXPIRIES:
        for strike in (700, 800, 900):
            contracts.append(OptionContract("GOOG", OptionRight.PUT, Decimal(strike), expiry))
        for strike in (500, 600, 700):
            contracts.append(OptionContract("GOOG", OptionRight.CALL, Decimal(strike), expiry))
    return contracts


@pytest.fixture
def goog_contracts():
    return make_contracts()


@pytest.fixture
def goog_chain(goog_contracts) -> ContractChain:
    return ContractChain.from_contracts("GOOG", AS_OF, goog_contracts)


@pytest.fixture
def chain_provider(goog_contracts) -> StaticChainProvider:
    return StaticChainProvider(goog_contracts)


@pytest.fixture
def stock() -> Symbol:
    return Symbol.equity("GOOG")


@pytest.fixture
def put_800() -> Symbol:
    return Symbol.option("GOOG", OptionRight.PUT, 800, EXPIRIES[0])


@pytest.fixture
def call_600() -> Symbol:
    return Symbol.option("GOOG", OptionRight.CALL, 600, EXPIRIES[0])


@pytest.fixture
def snapshot_at():
    """Factory for snapshots at a given minute of the session."""
    def _make(minute: int, prices: dict) -> MarketSnapshot:
        ts = datetime(2015, 12, 23, 14, 30, tzinfo=timezone.utc).replace(minute=minute)
        return MarketSnapshot(timestamp=ts, prices=prices)
    return _make


@pytest.fixture
def flat_positions() -> PositionView:
    return PositionView()


@pytest.fixture
def assignment_config() -> dict:
    """Merged-style configuration for the short put / short call run."""
    return {
        "run": {
            "underlying": "GOOG",
            "resolution": "minute",
            "start_date": "2015-12-23",
            "end_date": "2015-12-24",
            "cash": 100000,
            "underlying_quantity": 0,
        },
        "legs": [
            {"right": "put", "strike": 800, "quantity": -1},
            {"right": "call", "strike": 600, "quantity": -1},
        ],
        "controller": {"confirmation_timeout_snapshots": 2},
        "bridge": {"module": "numpy"},
        "auxiliary": [],
    }
