"""Asynchronous, cached currency rate resolution."""

import asyncio
import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Awaitable, Callable, Iterable, Mapping, Union

from lineform.domain.errors import RateLookupError
from lineform.domain.store import normalize_currency
from lineform.utils.amount_parser import parse_field_number

logger = logging.getLogger(__name__)

ONE = Decimal("1")

RateValue = Union[Decimal, int, float, str]
RateLookup = Callable[[str], Awaitable[RateValue]]


def _to_multiplier(currency: str, value: RateValue) -> Decimal:
    try:
        multiplier = parse_field_number(value)
    except ValueError as e:
        raise RateLookupError(f"Invalid rate for {currency}: {e}")
    if multiplier <= 0:
        raise RateLookupError(f"Rate for {currency} must be positive, got {multiplier}")
    return multiplier


class RateResolver:
    """Per-session cache of currency multipliers against the base currency.

    The base currency is seeded at 1 and never looked up. Each distinct
    currency is looked up at most once; concurrent requests for the same code
    share one lookup. A failed lookup caches 1 for that code, marks it as
    degraded and is not retried until ``retry`` is called.
    """

    def __init__(self, lookup: RateLookup, base_currency: str = "TRY"):
        """Initialize rate resolver.

        Args:
            lookup: Async callable returning the multiplier for a currency code
            base_currency: Currency with multiplier fixed at 1
        """
        self.lookup = lookup
        self.base_currency = normalize_currency(base_currency)
        self._table: dict[str, Decimal] = {self.base_currency: ONE}
        self._degraded: set[str] = set()
        self._inflight: dict[str, asyncio.Future] = {}

    @property
    def table(self) -> Mapping[str, Decimal]:
        """Read-only view of the resolved rates."""
        return MappingProxyType(self._table)

    @property
    def degraded(self) -> frozenset[str]:
        """Currencies whose lookup failed and fell back to 1."""
        return frozenset(self._degraded)

    def is_resolved(self, currency: str) -> bool:
        return normalize_currency(currency) in self._table

    async def resolve(self, currency: str) -> Decimal:
        """Return the multiplier for a currency, looking it up on first use."""
        code = normalize_currency(currency)
        if code in self._table:
            return self._table[code]

        pending = self._inflight.get(code)
        if pending is None:
            pending = asyncio.ensure_future(self._lookup_and_cache(code))
            self._inflight[code] = pending
        return await pending

    async def refresh(self, currencies: Iterable[str]) -> bool:
        """Resolve every currency not yet in the table, concurrently.

        Returns:
            True if any new currency was added to the table
        """
        missing = sorted({normalize_currency(c) for c in currencies} - set(self._table))
        if not missing:
            return False
        await asyncio.gather(*(self.resolve(code) for code in missing))
        return True

    async def retry(self, currency: str) -> Decimal:
        """Forget a cached rate and look it up again."""
        code = normalize_currency(currency)
        if code == self.base_currency:
            return ONE
        self._table.pop(code, None)
        self._degraded.discard(code)
        return await self.resolve(code)

    async def _lookup_and_cache(self, code: str) -> Decimal:
        try:
            try:
                multiplier = _to_multiplier(code, await self.lookup(code))
            except Exception as e:
                logger.warning(
                    "Rate lookup for %s failed, using multiplier 1 for this session: %s", code, e
                )
                self._degraded.add(code)
                multiplier = ONE
            else:
                logger.debug("Resolved rate %s -> %s %s", code, multiplier, self.base_currency)
            self._table[code] = multiplier
            return multiplier
        finally:
            self._inflight.pop(code, None)
