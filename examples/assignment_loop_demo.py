#!/usr/bin/env python3
"""
Assignment Loop Example - optcycle

Replays a short session for the option_assignment run with a toy execution
side that fills every order on the next snapshot and assigns legs at fixed
minutes. It shows how to:
- Set up a run from a named configuration
- Feed snapshots and confirmed positions to the engine
- Watch the short put / short call legs being re-established after assignment

Run: python examples/assignment_loop_demo.py
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from optcycle.data.models import MarketSnapshot, OptionContract, OptionRight, PositionView
from optcycle.data.providers import StaticChainProvider
from optcycle.engine import OptionLifecycleEngine
from optcycle.execution.base import OrderIntentSink


class NextSnapshotFills(OrderIntentSink):
    """Fills every intent when the next snapshot is delivered."""

    def __init__(self):
        super().__init__("demo-fills")
        self.pending = []
        self.holdings = {}

    def submit(self, intent):
        self.pending.append(intent)

    def settle(self):
        for intent in self.pending:
            self.holdings[intent.symbol] = self.holdings.get(intent.symbol, 0) + intent.quantity
        self.pending.clear()
        return PositionView(dict(self.holdings))


def build_provider() -> StaticChainProvider:
    contracts = []
    for expiry in (date(2015, 12, 24), date(2016, 1, 15)):
        for strike in (700, 800, 900):
            contracts.append(OptionContract("GOOG", OptionRight.PUT, strike, expiry))
        for strike in (500, 600, 700):
            contracts.append(OptionContract("GOOG", OptionRight.CALL, strike, expiry))
    return StaticChainProvider(contracts)


def main():
    execution = NextSnapshotFills()
    engine = OptionLifecycleEngine(chain_provider=build_provider(), sink=execution)
    engine.setup_from_config("option_assignment")

    stock = engine.leg_symbols["underlying"]
    put = engine.leg_symbols["put_0"]
    call = engine.leg_symbols["call_1"]
    session_open = datetime(2015, 12, 23, 14, 30, tzinfo=timezone.utc)

    for minute in range(30):
        positions = execution.settle()

        # Assign both legs every ten minutes
        if minute and minute % 10 == 0:
            execution.holdings[put] = 0
            execution.holdings[call] = 0
            positions = PositionView(dict(execution.holdings))

        stock_price = Decimal("0") if minute == 0 else Decimal("748.5")
        snapshot = MarketSnapshot(
            session_open + timedelta(minutes=minute),
            {stock: stock_price, put: Decimal("52.1"), call: Decimal("149.8")}
        )
        intents = engine.on_snapshot(snapshot, positions)
        for intent in intents:
            print(f"{snapshot.timestamp:%H:%M} {intent.symbol.value} {intent.quantity:+d}")

    print(engine.summary())


if __name__ == "__main__":
    main()
