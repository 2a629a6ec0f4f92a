"""Contract chain provider interface and an in-memory implementation."""

from datetime import datetime
from typing import Iterable, Protocol

from .models import ContractChain, OptionContract


class ContractChainProvider(Protocol):
    """Supplies the listed contracts for an underlying at a point in time."""

    def get_contract_list(self, underlying: str, as_of: datetime) -> ContractChain:
        ...


class StaticChainProvider:
    """Serves fixed contract lists, keyed by underlying ticker."""

    def __init__(self, contracts: Iterable[OptionContract] = ()):
        self._contracts: dict[str, list[OptionContract]] = {}
        for contract in contracts:
            self.add(contract)

    def add(self, contract: OptionContract) -> None:
        self._contracts.setdefault(contract.underlying, []).append(contract)

    def get_contract_list(self, underlying: str, as_of: datetime) -> ContractChain:
        listed = [
            contract for contract in self._contracts.get(underlying.upper(), [])
            if contract.expiry >= as_of.date()
        ]
        return ContractChain.from_contracts(underlying, as_of, listed)
