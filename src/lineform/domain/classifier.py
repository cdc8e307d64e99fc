"""Entry completeness classification."""

from lineform.domain.entities import Entry, EntryStatus
from lineform.utils.amount_parser import is_positive


def required_checks(entry: Entry, require_price: bool, require_target: bool = True) -> list[bool]:
    """Return one boolean per required field, True when the field is satisfied."""
    checks = []
    if require_target:
        checks.append(bool(entry.target_id))
    checks.append(is_positive(entry.quantity))
    if require_price:
        checks.append(is_positive(entry.unit_price))
    return checks


def classify(entry: Entry, require_price: bool, require_target: bool = True) -> EntryStatus:
    """Classify how complete an entry is.

    An entry with none of its required fields is EMPTY and takes no part in
    submission. One with some but not all is PARTIAL and blocks submission.
    One with all of them is FILLED.

    Args:
        entry: Entry to classify
        require_price: Whether a unit price above 0 is required
        require_target: Whether a selected target is required

    Returns:
        EntryStatus
    """
    checks = required_checks(entry, require_price, require_target)
    satisfied = sum(checks)
    if satisfied == 0:
        return EntryStatus.EMPTY
    if satisfied == len(checks):
        return EntryStatus.FILLED
    return EntryStatus.PARTIAL
