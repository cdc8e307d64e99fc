"""Validation of a store and mapping of filled entries to submission records."""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, Optional

from lineform.domain import errors
from lineform.domain.calculator import RateTable, calc_total
from lineform.domain.classifier import classify
from lineform.domain.entities import (
    AmountMode,
    Entry,
    EntryMeta,
    EntryStatus,
    Group,
    SubmissionRecord,
    SubmissionResult,
)
from lineform.utils.amount_parser import parse_field_number, parse_or_zero

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    """Round a base-currency amount to 2 decimals, half up.

    The precision is raised as needed so large totals keep every integer
    digit instead of failing to quantize.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _positive_field_error(value: str, label: str, message: str) -> Optional[str]:
    if not value.strip():
        return message
    try:
        parsed = parse_field_number(value)
    except ValueError:
        return errors.invalid_number(label, value)
    if parsed <= ZERO:
        return message
    return None


def entry_errors(entry: Entry, require_price: bool, require_target: bool) -> list[str]:
    """Return one message per missing or invalid required field."""
    messages = []
    if require_target and not entry.target_id:
        messages.append(errors.TARGET_REQUIRED)

    message = _positive_field_error(entry.quantity, "Quantity", errors.QUANTITY_NOT_POSITIVE)
    if message:
        messages.append(message)

    if require_price:
        message = _positive_field_error(
            entry.unit_price, "Unit price", errors.UNIT_PRICE_NOT_POSITIVE
        )
        if message:
            messages.append(message)
    return messages


def _optional_number(value: str) -> Optional[Decimal]:
    parsed = parse_or_zero(value)
    return parsed if parsed != ZERO else None


def map_entry(
    entry: Entry,
    rate_table: RateTable,
    require_price: bool,
    fixed_target: Optional[str] = None,
    adjust_currency: Optional[str] = None,
) -> SubmissionRecord:
    """Map a filled entry to its submission record.

    In adjust mode (price not required) the unit price and line total are 0,
    tax and discount are omitted, and the currency is ``adjust_currency``
    when one is given.
    """
    total = calc_total(entry, rate_table, require_price)
    record = SubmissionRecord(
        target_id=entry.target_id or fixed_target or "",
        group_id=entry.group_id,
        quantity=parse_field_number(entry.quantity),
        currency=entry.currency if require_price else (adjust_currency or entry.currency),
        unit_price=parse_field_number(entry.unit_price) if require_price else ZERO,
        line_total=round_money(total),
        campaign_code=entry.campaign_code or None,
    )

    if require_price:
        tax = _optional_number(entry.active_tax)
        discount = _optional_number(entry.active_discount)
        tax_is_percent = entry.tax_mode == AmountMode.PERCENT
        discount_is_percent = entry.discount_mode == AmountMode.PERCENT
        record = replace(
            record,
            tax_percent=tax if tax_is_percent else None,
            tax_amount=None if tax_is_percent else tax,
            discount_percent=discount if discount_is_percent else None,
            discount_amount=None if discount_is_percent else discount,
        )

    reason = entry.reason.strip()
    note = entry.note.strip()
    if reason or note:
        record = replace(record, meta=EntryMeta(reason=reason or None, note=note or None))
    return record


def validate_and_map(
    groups: Iterable[Group],
    rate_table: RateTable,
    require_price: bool,
    require_target: bool,
    fixed_target: Optional[str] = None,
    adjust_currency: Optional[str] = None,
) -> SubmissionResult:
    """Validate every entry and map the filled ones to submission records.

    Empty entries are ignored. If nothing is filled or partial the result is
    a success with no payloads; whether that is acceptable is the caller's
    decision. Any error on any entry fails the whole submission.

    Args:
        groups: Groups to submit, in display order
        rate_table: Resolved currency multipliers
        require_price: Whether entries must carry a unit price
        require_target: Whether entries must carry a target
        fixed_target: Target used for entries without their own
        adjust_currency: Currency reported for records in adjust mode

    Returns:
        SubmissionResult with payloads or errors keyed by entry ID
    """
    filled: list[Entry] = []
    partial: list[Entry] = []
    for group in groups:
        for entry in group.entries:
            status = classify(entry, require_price, require_target)
            if status == EntryStatus.FILLED:
                filled.append(entry)
            elif status == EntryStatus.PARTIAL:
                partial.append(entry)

    if not filled and not partial:
        return SubmissionResult(ok=True)

    # Filled entries are checked again in case classification and the
    # strict parser disagree on a value.
    errors_by_entry_id: dict[str, tuple[str, ...]] = {}
    for entry in partial + filled:
        messages = entry_errors(entry, require_price, require_target)
        if messages:
            errors_by_entry_id[entry.id] = tuple(messages)

    if errors_by_entry_id:
        return SubmissionResult(ok=False, errors_by_entry_id=errors_by_entry_id)

    payloads = tuple(
        map_entry(entry, rate_table, require_price, fixed_target, adjust_currency)
        for entry in filled
    )
    return SubmissionResult(ok=True, payloads=payloads)
