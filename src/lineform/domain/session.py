"""Form session service tying the store, rates and submission together."""

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from lineform.domain import calculator, propagation
from lineform.domain.classifier import classify
from lineform.domain.entities import EngineProfile, EntryStatus, LineBreakdown, SubmissionResult
from lineform.domain.errors import ConflictError
from lineform.domain.rates import RateLookup, RateResolver
from lineform.domain.store import EntryStore, normalize_currency
from lineform.domain.submission import validate_and_map

logger = logging.getLogger(__name__)


class FormSession:
    """One open entry form.

    The session owns its entry store for as long as the form is open. When
    the set of subjects changes from outside (another record is opened),
    ``rebuild`` replaces the store; ``close`` discards it. Rates resolved so
    far stay cached for the whole session.
    """

    def __init__(
        self,
        profile: EngineProfile,
        rate_lookup: RateLookup,
        base_currency: str = "TRY",
    ):
        """Initialize form session.

        Args:
            profile: Engine profile for this form
            rate_lookup: Async callable returning a currency's multiplier
            base_currency: Currency all totals are reported in
        """
        self.profile = profile
        self.base_currency = normalize_currency(base_currency)
        self.resolver = RateResolver(rate_lookup, self.base_currency)
        self._store: Optional[EntryStore] = EntryStore(profile, self.base_currency)
        self._synced_currencies: frozenset[str] = frozenset({self.base_currency})

    @property
    def store(self) -> EntryStore:
        if self._store is None:
            raise ConflictError("Form session is closed")
        return self._store

    @property
    def closed(self) -> bool:
        return self._store is None

    @property
    def rate_table(self) -> Mapping[str, Decimal]:
        return self.resolver.table

    def rebuild(
        self,
        subjects: Iterable[tuple[str, str]],
        initial_entries: Optional[Mapping[str, Iterable[Mapping[str, Any]]]] = None,
    ) -> EntryStore:
        """Discard the current store and start a new one for the given subjects.

        Args:
            subjects: (group_id, label) pairs in display order
            initial_entries: Optional prefilled entries keyed by group ID

        Returns:
            The new store
        """
        initial_entries = initial_entries or {}
        store = EntryStore(self.profile, self.base_currency)
        for group_id, label in subjects:
            store.add_group(group_id, label, initial_entries.get(group_id))
        self._store = store
        logger.debug("Rebuilt form store with %d groups", len(store.groups))
        return store

    def close(self) -> None:
        """Discard the store. The session cannot be used afterwards."""
        self._store = None

    # Rates
    def active_currencies(self) -> frozenset[str]:
        """Currencies whose rates affect totals."""
        if not self.profile.require_price:
            return frozenset({self.base_currency})
        return self.store.currencies() | {self.base_currency}

    async def sync_rates(self) -> bool:
        """Resolve rates when the set of currencies in use has changed.

        Returns:
            True if new rates were added and displayed totals should be
            recomputed
        """
        currencies = self.active_currencies()
        if currencies == self._synced_currencies:
            return False
        self._synced_currencies = currencies
        return await self.resolver.refresh(currencies)

    async def retry_rate(self, currency: str) -> Decimal:
        """Manually re-trigger a rate lookup, e.g. after a failure."""
        return await self.resolver.retry(currency)

    @property
    def degraded_currencies(self) -> frozenset[str]:
        return self.resolver.degraded

    # Totals
    def status(self, entry_id: str) -> EntryStatus:
        return classify(
            self.store.get_entry(entry_id), self.profile.require_price, self.profile.require_target
        )

    def breakdown(self, entry_id: str) -> LineBreakdown:
        return calculator.calc_breakdown(
            self.store.get_entry(entry_id), self.rate_table, self.profile.require_price
        )

    def entry_total(self, entry_id: str) -> Decimal:
        return self.breakdown(entry_id).total

    def group_total(self, group_id: str) -> Decimal:
        return calculator.group_total(
            self.store.get_group(group_id), self.rate_table, self.profile.require_price
        )

    def grand_total(self) -> Decimal:
        return calculator.grand_total(
            self.store.groups, self.rate_table, self.profile.require_price
        )

    # Propagation
    def apply_to_siblings(self, group_id: str) -> int:
        return propagation.apply_to_siblings(self.store, group_id, self.profile.require_price)

    def apply_to_all_groups(self) -> int:
        return propagation.apply_to_all_groups(self.store, self.profile.require_price)

    # Submission
    def submit(self) -> SubmissionResult:
        """Validate the whole store and map filled entries to records.

        Errors are recorded on the store so they can be shown next to each
        entry; they are dropped as soon as the entry is edited.
        """
        store = self.store
        result = validate_and_map(
            store.groups,
            self.rate_table,
            require_price=self.profile.require_price,
            require_target=self.profile.require_target,
            fixed_target=self.profile.fixed_target,
            adjust_currency=store.default_currency,
        )
        store.record_errors(result.errors_by_entry_id)
        if result.ok:
            logger.info("Submission mapped %d entries", len(result.payloads))
        else:
            logger.info("Submission blocked by errors on %d entries", len(result.errors_by_entry_id))
        return result
