"""
Canonical domain models for contracts, snapshots, positions and orders.

This module defines immutable data structures shared by contract selection,
the lifecycle controller and the engine. None of these objects is mutated by
the core once constructed.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

ZERO = Decimal("0")


class Resolution(str, Enum):
    """Observation resolution of the underlying."""
    TICK = "tick"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


class OptionRight(str, Enum):
    """Option right."""
    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: Any) -> "OptionRight":
        """Parse 'call'/'put'/'C'/'P' (any case) or an OptionRight."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("c", "call"):
            return cls.CALL
        if text in ("p", "put"):
            return cls.PUT
        raise ValueError(f"Unknown option right: {value!r}")


class SecurityType(str, Enum):
    """Kind of tradable instrument a Symbol identifies."""
    EQUITY = "equity"
    OPTION = "option"


def as_decimal(value: Any) -> Decimal:
    """Convert int/str/float/Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to Decimal")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Cannot convert {value!r} to Decimal") from e


@dataclass(frozen=True)
class Symbol:
    """Identity of an underlying equity or an option contract."""
    ticker: str
    security_type: SecurityType = SecurityType.EQUITY
    right: Optional[OptionRight] = None
    strike: Optional[Decimal] = None
    expiry: Optional[date] = None

    @classmethod
    def equity(cls, ticker: str) -> "Symbol":
        return cls(ticker=ticker.upper())

    @classmethod
    def option(cls, ticker: str, right: OptionRight, strike: Any, expiry: date) -> "Symbol":
        return cls(
            ticker=ticker.upper(),
            security_type=SecurityType.OPTION,
            right=OptionRight.parse(right),
            strike=as_decimal(strike),
            expiry=expiry,
        )

    @property
    def is_option(self) -> bool:
        return self.security_type == SecurityType.OPTION

    @property
    def value(self) -> str:
        """Readable identifier, e.g. ``GOOG 151224P00800000`` for options."""
        if not self.is_option:
            return self.ticker
        code = "C" if self.right == OptionRight.CALL else "P"
        strike_code = int(self.strike * 1000)
        return f"{self.ticker} {self.expiry:%y%m%d}{code}{strike_code:08d}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OptionContract:
    """Listed option contract; its terms never change after listing."""
    underlying: str
    right: OptionRight
    strike: Decimal
    expiry: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "underlying", self.underlying.upper())
        object.__setattr__(self, "right", OptionRight.parse(self.right))
        object.__setattr__(self, "strike", as_decimal(self.strike))
        if not self.strike.is_finite() or self.strike <= ZERO:
            raise ValueError(f"Strike must be positive, got {self.strike}")

    @property
    def symbol(self) -> Symbol:
        return Symbol.option(self.underlying, self.right, self.strike, self.expiry)


@dataclass(frozen=True)
class ContractChain:
    """All contracts listed for one underlying at one point in time."""
    underlying: str
    as_of: datetime
    contracts: tuple[OptionContract, ...] = ()

    @classmethod
    def from_contracts(
        cls,
        underlying: str,
        as_of: datetime,
        contracts: Iterable[OptionContract]
    ) -> "ContractChain":
        return cls(underlying=underlying.upper(), as_of=as_of, contracts=tuple(contracts))

    def __len__(self) -> int:
        return len(self.contracts)

    def __iter__(self):
        return iter(self.contracts)


@dataclass(frozen=True)
class Underlying:
    """Underlying instrument registered for a run."""
    ticker: str
    resolution: Resolution = Resolution.MINUTE
    price: Decimal = ZERO

    @property
    def symbol(self) -> Symbol:
        return Symbol.equity(self.ticker)

    def with_price(self, price: Decimal) -> "Underlying":
        return replace(self, price=as_decimal(price))


@dataclass(frozen=True)
class MarketSnapshot:
    """Timestamped prices keyed by Symbol.

    A symbol without a quote reads as zero. Zero and non-finite prices both
    mean no valid quote yet.
    """
    timestamp: datetime
    prices: Mapping[Symbol, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {symbol: as_decimal(price) for symbol, price in self.prices.items()}
        object.__setattr__(self, "prices", MappingProxyType(frozen))

    def price(self, symbol: Symbol) -> Decimal:
        return self.prices.get(symbol, ZERO)

    def has_quote(self, symbol: Symbol) -> bool:
        """A quote is valid when its price is finite and non-zero."""
        price = self.price(symbol)
        return price.is_finite() and price != ZERO

    def has_valid_quotes(self, symbols: Iterable[Symbol]) -> bool:
        return all(self.has_quote(symbol) for symbol in symbols)

    def stale_symbols(self, symbols: Iterable[Symbol]) -> list[Symbol]:
        return [symbol for symbol in symbols if not self.has_quote(symbol)]


@dataclass(frozen=True)
class PositionView:
    """Read-only view of confirmed holdings, owned by the execution side."""
    holdings: Mapping[Symbol, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "holdings", MappingProxyType(dict(self.holdings)))

    def quantity(self, symbol: Symbol) -> int:
        return self.holdings.get(symbol, 0)

    def is_flat(self, symbols: Iterable[Symbol]) -> bool:
        return all(self.quantity(symbol) == 0 for symbol in symbols)

    def open_symbols(self, symbols: Iterable[Symbol]) -> list[Symbol]:
        return [symbol for symbol in symbols if self.quantity(symbol) != 0]


@dataclass(frozen=True)
class OrderIntent:
    """Request to trade; confirmation arrives later as a position change."""
    symbol: Symbol
    quantity: int
    timestamp: datetime
    tag: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quantity == 0:
            raise ValueError("Order intent quantity must be non-zero")

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol.value,
            "quantity": self.quantity,
            "timestamp": self.timestamp.isoformat(),
            "tag": self.tag,
        }
