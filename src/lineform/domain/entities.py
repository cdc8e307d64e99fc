"""Domain model entities for lineform.

These are pure data classes. Entries and groups are immutable; the entry
store replaces them on every mutation, so a reference held by a caller is a
consistent snapshot of the row at that moment.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class AmountMode(str, Enum):
    """How a tax or discount value is expressed."""

    PERCENT = "percent"
    AMOUNT = "amount"


class EntryStatus(str, Enum):
    """Completeness of an entry, which decides its part in submission."""

    EMPTY = "empty"
    PARTIAL = "partial"
    FILLED = "filled"


@dataclass(frozen=True)
class Entry:
    """One editable line within a group.

    Numeric fields hold the text as entered and are parsed on demand.
    """

    id: str
    group_id: str
    target_id: str = ""
    quantity: str = ""
    unit_price: str = ""
    currency: str = "TRY"
    tax_mode: AmountMode = AmountMode.PERCENT
    tax_percent: str = ""
    tax_amount: str = ""
    discount_mode: AmountMode = AmountMode.PERCENT
    discount_percent: str = ""
    discount_amount: str = ""
    reason: str = ""
    note: str = ""
    campaign_code: str = ""

    @property
    def active_tax(self) -> str:
        """Tax value matching the tax mode."""
        if self.tax_mode == AmountMode.PERCENT:
            return self.tax_percent
        return self.tax_amount

    @property
    def active_discount(self) -> str:
        """Discount value matching the discount mode."""
        if self.discount_mode == AmountMode.PERCENT:
            return self.discount_percent
        return self.discount_amount


@dataclass(frozen=True)
class Group:
    """A subject (variant or sale) owning one or more entries."""

    group_id: str
    label: str
    entries: tuple[Entry, ...]


@dataclass(frozen=True)
class EngineProfile:
    """Configuration of the entry engine for one form flow."""

    name: str
    require_price: bool
    require_target: bool
    default_quantity: str = ""
    default_currency: Optional[str] = None
    fixed_target: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class LineBreakdown:
    """Intermediate values of a line total calculation, in base currency."""

    rate: Decimal
    subtotal: Decimal
    tax: Decimal
    subtotal_with_tax: Decimal
    discount: Decimal
    total: Decimal


@dataclass(frozen=True)
class EntryMeta:
    """Free-text annotations carried with a submitted entry."""

    reason: Optional[str] = None
    note: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        data = {}
        if self.reason:
            data["reason"] = self.reason
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class SubmissionRecord:
    """Normalized payload for one filled entry, ready for the save collaborator."""

    target_id: str
    group_id: str
    quantity: Decimal
    currency: str
    unit_price: Decimal
    line_total: Decimal
    tax_percent: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    discount_percent: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    campaign_code: Optional[str] = None
    meta: Optional[EntryMeta] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a camelCase dict with JSON-ready numbers."""
        data: dict[str, Any] = {
            "targetId": self.target_id,
            "groupId": self.group_id,
            "quantity": float(self.quantity),
            "currency": self.currency,
            "unitPrice": float(self.unit_price),
            "lineTotal": float(self.line_total),
        }
        optional_numbers = {
            "taxPercent": self.tax_percent,
            "taxAmount": self.tax_amount,
            "discountPercent": self.discount_percent,
            "discountAmount": self.discount_amount,
        }
        for key, value in optional_numbers.items():
            if value is not None:
                data[key] = float(value)
        if self.campaign_code:
            data["campaignCode"] = self.campaign_code
        if self.meta is not None:
            data["meta"] = self.meta.to_dict()
        return data


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of validating and mapping a whole store.

    Either ``ok`` with payloads (possibly none) or not ``ok`` with messages
    keyed by entry ID. Never both.
    """

    ok: bool
    payloads: tuple[SubmissionRecord, ...] = ()
    errors_by_entry_id: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class ExchangeRate:
    """Stored conversion multiplier from a currency to the base currency."""

    id: int
    currency: str
    multiplier: Decimal
    effective_date: date
    created_at: datetime
