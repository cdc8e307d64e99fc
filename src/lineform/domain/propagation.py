"""Propagation of shared fields from a source entry to other entries."""

from lineform.domain.entities import Entry
from lineform.domain.store import EntryStore

PRICED_SHARED_FIELDS = (
    "unit_price",
    "currency",
    "tax_mode",
    "tax_percent",
    "tax_amount",
    "discount_mode",
    "discount_percent",
    "discount_amount",
    "reason",
    "note",
    "campaign_code",
)
ADJUST_SHARED_FIELDS = ("reason", "note")


def shared_fields(source: Entry, price_required: bool) -> dict[str, object]:
    """Return the source entry's fields that may be copied to other rows.

    Quantity and target identify a row and are never part of this set.
    """
    names = PRICED_SHARED_FIELDS if price_required else ADJUST_SHARED_FIELDS
    return {name: getattr(source, name) for name in names}


def apply_to_siblings(store: EntryStore, group_id: str, price_required: bool) -> int:
    """Copy the group's first entry onto every other entry of the group.

    Returns:
        Number of entries overwritten
    """
    group = store.get_group(group_id)
    source, *siblings = group.entries
    fields = shared_fields(source, price_required)
    for entry in siblings:
        store.update_entry(entry.id, **fields)
    return len(siblings)


def apply_to_all_groups(store: EntryStore, price_required: bool) -> int:
    """Copy the first group's first entry onto every entry of every group.

    Does nothing when the store has fewer than two groups.

    Returns:
        Number of entries overwritten
    """
    groups = store.groups
    if len(groups) < 2:
        return 0

    source = groups[0].entries[0]
    fields = shared_fields(source, price_required)
    count = 0
    for entry in list(store.entries()):
        if entry.id == source.id:
            continue
        store.update_entry(entry.id, **fields)
        count += 1
    return count
