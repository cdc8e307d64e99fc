"""Rate book domain service and the rate source built on it."""

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from lineform.domain import errors
from lineform.domain.entities import ExchangeRate
from lineform.domain.errors import NotFoundError, RateLookupError, ValidationError
from lineform.domain.store import normalize_currency

if TYPE_CHECKING:
    from lineform.database.base import Database

logger = logging.getLogger(__name__)


class RateBookService:
    """Service for managing stored currency rates."""

    def __init__(self, db: "Database", base_currency: str = "TRY"):
        """Initialize rate book service.

        Args:
            db: Database instance
            base_currency: Currency every stored multiplier converts into
        """
        self.db = db
        self.base_currency = normalize_currency(base_currency)

    def set_rate(
        self, currency: str, multiplier: Decimal, effective_date: Optional[date] = None
    ) -> int:
        """Store the rate of a currency, replacing any rate for the same date.

        Args:
            currency: Currency code
            multiplier: Units of base currency per unit of ``currency``
            effective_date: First day the rate applies (defaults to today)

        Returns:
            Rate ID

        Raises:
            ValidationError: If the code is empty or the base currency, or the
                multiplier is not positive
        """
        code = normalize_currency(currency)
        if not code:
            raise ValidationError("Currency code is required")
        if code == self.base_currency:
            raise ValidationError(
                f"{code} is the base currency; its multiplier is always 1"
            )
        if multiplier <= 0:
            raise ValidationError(f"Rate multiplier must be greater than 0, got {multiplier}")

        rate_id = self.db.upsert_exchange_rate(
            currency=code, multiplier=multiplier, effective_date=effective_date or date.today()
        )
        logger.debug("Stored rate %s = %s %s", code, multiplier, self.base_currency)
        return rate_id

    def get_rate(self, rate_id: int) -> Optional[ExchangeRate]:
        return self.db.get_exchange_rate(rate_id)

    def list_rates(self, currency: Optional[str] = None) -> list[ExchangeRate]:
        """List stored rates, optionally for one currency."""
        code = normalize_currency(currency) if currency else None
        return self.db.list_exchange_rates(currency=code)

    def delete_rate(self, rate_id: int) -> None:
        """Delete a stored rate.

        Raises:
            NotFoundError: If the rate does not exist
        """
        if self.db.get_exchange_rate(rate_id) is None:
            raise NotFoundError(errors.rate_not_found_by_id(rate_id))
        self.db.delete_exchange_rate(rate_id)

    def get_effective_rate(self, currency: str, as_of: Optional[date] = None) -> Decimal:
        """Return the multiplier in effect for a currency on a date.

        Raises:
            RateLookupError: If no rate is stored on or before that date
        """
        code = normalize_currency(currency)
        if code == self.base_currency:
            return Decimal("1")
        rate = self.db.get_effective_rate(code, as_of or date.today())
        if rate is None:
            raise RateLookupError(errors.rate_not_found(code))
        return rate.multiplier


class RateBookSource:
    """Async rate lookup backed by the rate book, for use with RateResolver."""

    def __init__(self, service: RateBookService, as_of: Optional[date] = None):
        self.service = service
        self.as_of = as_of

    async def __call__(self, currency: str) -> Decimal:
        return self.service.get_effective_rate(currency, self.as_of)
