"""
Option contract selection over a contract chain.

Selection keeps the contracts of the requested right, orders them by
expiry (earliest first) and returns the first one whose strike equals the
target exactly. Nearest-strike matching is deliberately not supported.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from ..errors import NoMatchingContractError
from ..logging.config import get_selection_logger
from ..data.models import ContractChain, OptionContract, OptionRight, Symbol, as_decimal

selection_logger = get_selection_logger(__name__)


def _expiry_order(contract: OptionContract) -> tuple:
    # Symbol value breaks ties between duplicate listings
    return (contract.expiry, contract.symbol.value)


def select_contract(chain: ContractChain, right: Any, target_strike: Any) -> Symbol:
    """
    Select the earliest-expiring contract with the given right and strike.

    Args:
        chain: Contract chain for one underlying
        right: OptionRight (or 'call'/'put'/'C'/'P')
        target_strike: Exact strike to match

    Returns:
        Symbol of the selected contract

    Raises:
        NoMatchingContractError: If no contract matches right and strike
    """
    right = OptionRight.parse(right)
    strike = as_decimal(target_strike)

    candidates = sorted(
        (contract for contract in chain if contract.right == right),
        key=_expiry_order
    )

    for contract in candidates:
        if contract.strike == strike:
            selection_logger.info(
                "Contract selected",
                underlying=chain.underlying,
                right=right.value,
                strike=str(strike),
                expiry=contract.expiry.isoformat(),
                symbol=contract.symbol.value,
                candidates=len(candidates)
            )
            return contract.symbol

    selection_logger.error(
        "No contract matches selection criteria",
        underlying=chain.underlying,
        right=right.value,
        strike=str(strike),
        candidates=len(candidates)
    )
    raise NoMatchingContractError(right, strike, chain.underlying, len(candidates))


class ContractSelector:
    """Runs contract selection at most once per (underlying, right, strike).

    Results are kept for the lifetime of the run; later requests for the same
    criteria return the cached Symbol without touching the chain again.
    """

    def __init__(self):
        self._selections: dict[tuple[str, OptionRight, Decimal], Symbol] = {}

    def select(self, chain: ContractChain, right: Any, target_strike: Any) -> Symbol:
        key = (chain.underlying, OptionRight.parse(right), as_decimal(target_strike))
        cached = self._selections.get(key)
        if cached is not None:
            selection_logger.debug(
                "Using cached contract selection",
                underlying=key[0],
                right=key[1].value,
                strike=str(key[2]),
                symbol=cached.value
            )
            return cached

        symbol = select_contract(chain, key[1], key[2])
        self._selections[key] = symbol
        return symbol

    @property
    def selections(self) -> Mapping[tuple[str, OptionRight, Decimal], Symbol]:
        return MappingProxyType(dict(self._selections))

    def __len__(self) -> int:
        return len(self._selections)
