"""Shared pytest fixtures for lineform tests."""

import json
import tempfile
import os
from decimal import Decimal
import pytest

from lineform.database.factories import create_sqlite_database
from lineform.domain.profiles import SALE_LINE, STOCK_ADJUST, STOCK_RECEIVE
from lineform.domain.rate_book import RateBookService
from lineform.domain.store import EntryStore


@pytest.fixture
def make_lookup():
    """Build async rate lookups over a dict, recording every call.

    Codes missing from the dict fail the way an unreachable rate source would.
    """

    def _make(rates):
        calls = []

        async def lookup(currency):
            calls.append(currency)
            if currency not in rates:
                raise LookupError(f"no rate for {currency}")
            return rates[currency]

        lookup.calls = calls
        return lookup

    return _make


@pytest.fixture
def temp_db():
    """Create a temporary rate book database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def rate_book_service(temp_db):
    """Create a RateBookService with a temporary database."""
    return RateBookService(temp_db, base_currency="TRY")


@pytest.fixture
def rate_table():
    """Resolved rates for a TRY-based session."""
    return {"TRY": Decimal("1"), "USD": Decimal("30"), "EUR": Decimal("35")}


@pytest.fixture
def receive_store():
    """Stock receive store with two variants, the first with two store rows."""
    store = EntryStore(STOCK_RECEIVE, base_currency="TRY")
    store.add_group("v1", "Red / M")
    store.add_entry("v1")
    store.add_group("v2", "Blue / L")
    return store


@pytest.fixture
def adjust_store():
    """Stock adjust store with one variant."""
    store = EntryStore(STOCK_ADJUST, base_currency="TRY")
    store.add_group("v1", "Red / M")
    return store


@pytest.fixture
def sale_store():
    """Sale line store with one sale."""
    store = EntryStore(SALE_LINE, base_currency="TRY")
    store.add_group("sale-1", "Walk-in customer")
    return store


@pytest.fixture
def write_document(tmp_path):
    """Write a form document to a temporary JSON file and return its path."""

    def _write(data, name="form.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
