"""Entry/group store for one form session."""

import itertools
from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping, Optional

from lineform.domain import errors
from lineform.domain.entities import AmountMode, EngineProfile, Entry, Group
from lineform.domain.errors import ConflictError, NotFoundError, ValidationError
from lineform.utils.amount_parser import to_field_text

TEXT_FIELDS = (
    "target_id",
    "quantity",
    "unit_price",
    "tax_percent",
    "tax_amount",
    "discount_percent",
    "discount_amount",
    "reason",
    "note",
    "campaign_code",
)
MODE_FIELDS = ("tax_mode", "discount_mode")
EDITABLE_FIELDS = frozenset(TEXT_FIELDS + MODE_FIELDS + ("currency",))

# Fields cleared when the matching mode changes.
MODE_PAIRS = {
    "tax_mode": ("tax_percent", "tax_amount"),
    "discount_mode": ("discount_percent", "discount_amount"),
}


def coerce_mode(value: Any) -> AmountMode:
    """Convert a mode value to AmountMode."""
    if isinstance(value, AmountMode):
        return value
    try:
        return AmountMode(str(value).strip().lower())
    except ValueError:
        raise ValidationError(errors.invalid_amount_mode(value))


def normalize_currency(code: Any) -> str:
    """Normalize a currency code to its upper-case form."""
    return str(code or "").strip().upper()


def _is_set(value: Any) -> bool:
    return value is not None and value != ""


def initial_entry_fields(initial: Mapping[str, Any]) -> dict[str, Any]:
    """Build entry fields from a prefilled initial entry.

    Values may be numbers or strings. A missing tax or discount mode is
    inferred as AMOUNT when only the amount value is present, and PERCENT
    otherwise.
    """
    fields = {name: initial[name] for name in EDITABLE_FIELDS if name in initial}
    for mode_field, (percent_field, amount_field) in MODE_PAIRS.items():
        if _is_set(fields.get(mode_field)):
            continue
        if _is_set(initial.get(amount_field)) and not _is_set(initial.get(percent_field)):
            fields[mode_field] = AmountMode.AMOUNT
        else:
            fields[mode_field] = AmountMode.PERCENT
    return fields


class EntryStore:
    """Nested groups of entries edited during one form session.

    The store is the single owner of its groups and entries. Entry IDs come
    from a per-store counter and are never reused, even after removal.
    Validation errors recorded at submission are kept per entry and dropped
    as soon as that entry is edited.
    """

    def __init__(self, profile: EngineProfile, base_currency: str = "TRY"):
        """Initialize an empty store.

        Args:
            profile: Engine profile providing entry defaults
            base_currency: Currency whose multiplier is fixed at 1
        """
        self.profile = profile
        self.base_currency = normalize_currency(base_currency)
        self.default_currency = normalize_currency(profile.default_currency or self.base_currency)
        self._groups: dict[str, Group] = {}
        self._entry_groups: dict[str, str] = {}
        self._errors: dict[str, tuple[str, ...]] = {}
        self._ids = itertools.count(1)

    # Reads
    @property
    def groups(self) -> tuple[Group, ...]:
        """Groups in insertion order."""
        return tuple(self._groups.values())

    def entries(self) -> Iterator[Entry]:
        """Iterate over every entry of every group, in display order."""
        for group in self._groups.values():
            yield from group.entries

    def get_group(self, group_id: str) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise NotFoundError(errors.group_not_found(group_id))
        return group

    def get_entry(self, entry_id: str) -> Entry:
        group_id = self._entry_groups.get(entry_id)
        if group_id is None:
            raise NotFoundError(errors.entry_not_found(entry_id))
        for entry in self._groups[group_id].entries:
            if entry.id == entry_id:
                return entry
        raise NotFoundError(errors.entry_not_found(entry_id))

    def currencies(self) -> frozenset[str]:
        """Distinct currencies used by any entry."""
        return frozenset(entry.currency for entry in self.entries())

    # Group operations
    def add_group(
        self,
        group_id: str,
        label: str = "",
        initial_entries: Optional[Iterable[Mapping[str, Any]]] = None,
    ) -> Group:
        """Add a group with its first entries.

        Args:
            group_id: Subject reference (variant or sale ID)
            label: Display label
            initial_entries: Optional prefilled entries; one empty entry is
                created when none are given

        Returns:
            The new group

        Raises:
            ConflictError: If the group already exists
        """
        if group_id in self._groups:
            raise ConflictError(errors.duplicate_group(group_id))

        initial = list(initial_entries or [])
        entries = tuple(self._new_entry(group_id, initial_entry_fields(data)) for data in initial)
        if not entries:
            entries = (self._new_entry(group_id, {}),)

        group = Group(group_id=group_id, label=label or group_id, entries=entries)
        self._groups[group_id] = group
        for entry in entries:
            self._entry_groups[entry.id] = group_id
        return group

    def remove_group(self, group_id: str) -> None:
        """Remove a group and all of its entries."""
        group = self.get_group(group_id)
        for entry in group.entries:
            self._entry_groups.pop(entry.id, None)
            self._errors.pop(entry.id, None)
        del self._groups[group_id]

    # Entry operations
    def add_entry(self, group_id: str, **fields: Any) -> Entry:
        """Append a new entry to a group.

        Unspecified fields take the profile defaults.
        """
        group = self.get_group(group_id)
        entry = self._new_entry(group_id, fields)
        self._groups[group_id] = replace(group, entries=group.entries + (entry,))
        self._entry_groups[entry.id] = group_id
        return entry

    def update_entry(self, entry_id: str, **changes: Any) -> Entry:
        """Apply field changes to an entry.

        Changing a tax or discount mode clears both stored values of that
        pair before any values passed in the same call are applied, so a
        value hidden by the previous mode can never leak into totals.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If a field is unknown or a mode is invalid
        """
        entry = self.get_entry(entry_id)
        values = self._normalize_fields(changes)

        for mode_field, pair in MODE_PAIRS.items():
            if mode_field in values and values[mode_field] != getattr(entry, mode_field):
                entry = replace(entry, **{name: "" for name in pair})

        updated = replace(entry, **values)
        self._replace_entry(updated)
        self._errors.pop(entry_id, None)
        return updated

    def set_tax_mode(self, entry_id: str, mode: Any) -> Entry:
        return self.update_entry(entry_id, tax_mode=mode)

    def set_discount_mode(self, entry_id: str, mode: Any) -> Entry:
        return self.update_entry(entry_id, discount_mode=mode)

    def remove_entry(self, entry_id: str) -> bool:
        """Remove an entry.

        Returns:
            True if removed, False if it is the last entry of its group
        """
        entry = self.get_entry(entry_id)
        group = self._groups[entry.group_id]
        if len(group.entries) <= 1:
            return False

        self._groups[group.group_id] = replace(
            group, entries=tuple(e for e in group.entries if e.id != entry_id)
        )
        del self._entry_groups[entry_id]
        self._errors.pop(entry_id, None)
        return True

    # Validation errors
    def record_errors(self, errors_by_entry_id: Mapping[str, Iterable[str]]) -> None:
        """Replace the recorded validation errors."""
        self._errors = {
            entry_id: tuple(messages)
            for entry_id, messages in errors_by_entry_id.items()
            if entry_id in self._entry_groups
        }

    def errors_for(self, entry_id: str) -> tuple[str, ...]:
        return self._errors.get(entry_id, ())

    def clear_errors(self) -> None:
        self._errors = {}

    # Internals
    def _new_entry(self, group_id: str, fields: Mapping[str, Any]) -> Entry:
        entry = Entry(
            id=f"entry-{next(self._ids)}",
            group_id=group_id,
            target_id=self.profile.fixed_target or "",
            quantity=self.profile.default_quantity,
            currency=self.default_currency,
        )
        values = self._normalize_fields(fields)
        return replace(entry, **values)

    def _normalize_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, value in fields.items():
            if name not in EDITABLE_FIELDS:
                raise ValidationError(errors.unknown_entry_field(name))
            if name in MODE_FIELDS:
                values[name] = coerce_mode(value)
            elif name == "currency":
                values[name] = normalize_currency(value) or self.default_currency
            else:
                values[name] = to_field_text(value)
        return values

    def _replace_entry(self, updated: Entry) -> None:
        group = self._groups[updated.group_id]
        self._groups[group.group_id] = replace(
            group,
            entries=tuple(updated if e.id == updated.id else e for e in group.entries),
        )
