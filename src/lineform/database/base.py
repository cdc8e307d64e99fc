"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from lineform.domain.entities import ExchangeRate


class Database(ABC):
    """Abstract database interface for the lineform rate book."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def upsert_exchange_rate(self, currency: str, multiplier: Decimal, effective_date: date) -> int:
        """Create or replace the rate of a currency for a date. Returns rate ID."""
        pass

    @abstractmethod
    def get_exchange_rate(self, rate_id: int) -> Optional[ExchangeRate]:
        """Get rate by ID."""
        pass

    @abstractmethod
    def get_effective_rate(self, currency: str, as_of: date) -> Optional[ExchangeRate]:
        """Get the latest rate of a currency effective on or before a date."""
        pass

    @abstractmethod
    def list_exchange_rates(self, currency: Optional[str] = None) -> list[ExchangeRate]:
        """List rates, optionally filtered by currency, newest first."""
        pass

    @abstractmethod
    def delete_exchange_rate(self, rate_id: int) -> None:
        """Delete a rate."""
        pass
