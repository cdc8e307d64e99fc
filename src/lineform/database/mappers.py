"""Mapper functions to convert between domain models and SQLAlchemy models."""

from lineform.domain import entities as domain
from lineform.database.models import ExchangeRate as ORMExchangeRate


def exchange_rate_to_domain(orm_rate: ORMExchangeRate) -> domain.ExchangeRate:
    """Convert SQLAlchemy ExchangeRate model to domain ExchangeRate entity."""
    return domain.ExchangeRate(
        id=orm_rate.id,
        currency=orm_rate.currency,
        multiplier=orm_rate.multiplier,
        effective_date=orm_rate.effective_date,
        created_at=orm_rate.created_at,
    )
