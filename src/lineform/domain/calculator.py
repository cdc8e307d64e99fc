"""Monetary line calculator.

Totals are computed in the base currency with the following fixed order:

1. subtotal = quantity * unit price * rate(currency)
2. tax is a percent of the subtotal, or a fixed amount
3. subtotal with tax = subtotal + tax
4. discount is a percent of the subtotal *with tax*, or a fixed amount
5. total = max(0, subtotal with tax - discount)

Unparsable fields count as 0 here; rejecting them is the validator's job.
Nothing is rounded; rounding happens once, when a record is submitted.
"""

from decimal import Decimal
from typing import Iterable, Mapping

from lineform.domain.entities import AmountMode, Entry, Group, LineBreakdown
from lineform.utils.amount_parser import parse_or_zero

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

RateTable = Mapping[str, Decimal]


def rate_for(currency: str, rate_table: RateTable) -> Decimal:
    """Return the multiplier for a currency, 1 if it is not resolved yet."""
    return rate_table.get(currency, ONE)


def _moded_value(mode: AmountMode, percent: str, amount: str, base: Decimal) -> Decimal:
    if mode == AmountMode.PERCENT:
        return base * (parse_or_zero(percent) / HUNDRED)
    return parse_or_zero(amount)


def calc_breakdown(
    entry: Entry, rate_table: RateTable, price_required: bool = True
) -> LineBreakdown:
    """Compute every intermediate value of an entry's total.

    Args:
        entry: Entry to price
        rate_table: Currency code to base-currency multiplier
        price_required: False in adjust mode, where every amount is 0

    Returns:
        LineBreakdown with the final total clamped at 0
    """
    rate = rate_for(entry.currency, rate_table)
    if not price_required:
        return LineBreakdown(
            rate=rate, subtotal=ZERO, tax=ZERO, subtotal_with_tax=ZERO, discount=ZERO, total=ZERO
        )

    subtotal = parse_or_zero(entry.quantity) * parse_or_zero(entry.unit_price) * rate
    tax = _moded_value(entry.tax_mode, entry.tax_percent, entry.tax_amount, subtotal)
    subtotal_with_tax = subtotal + tax
    discount = _moded_value(
        entry.discount_mode, entry.discount_percent, entry.discount_amount, subtotal_with_tax
    )
    total = max(ZERO, subtotal_with_tax - discount)

    return LineBreakdown(
        rate=rate,
        subtotal=subtotal,
        tax=tax,
        subtotal_with_tax=subtotal_with_tax,
        discount=discount,
        total=total,
    )


def calc_total(entry: Entry, rate_table: RateTable, price_required: bool = True) -> Decimal:
    """Compute an entry's total in the base currency."""
    return calc_breakdown(entry, rate_table, price_required).total


def group_total(group: Group, rate_table: RateTable, price_required: bool = True) -> Decimal:
    """Sum of a group's entry totals."""
    return sum(
        (calc_total(entry, rate_table, price_required) for entry in group.entries), ZERO
    )


def grand_total(
    groups: Iterable[Group], rate_table: RateTable, price_required: bool = True
) -> Decimal:
    """Sum of every group total."""
    return sum((group_total(group, rate_table, price_required) for group in groups), ZERO)
