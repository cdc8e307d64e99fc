"""Reading and writing form sessions as JSON documents.

A form document describes the subjects of one form and their entries::

    {
        "profile": "stock-receive",
        "baseCurrency": "TRY",
        "fixedTarget": null,
        "defaultCurrency": null,
        "groups": [
            {"groupId": "v1", "label": "Red / M",
             "entries": [{"targetId": "s1", "quantity": "2", "unitPrice": "100"}]}
        ]
    }
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from lineform.domain.entities import AmountMode, Entry
from lineform.domain.errors import NotFoundError, ValidationError
from lineform.domain.profiles import configure_profile, get_profile
from lineform.domain.rates import RateLookup
from lineform.domain.session import FormSession

DEFAULT_PROFILE = "stock-receive"

ENTRY_KEYS = {
    "targetId": "target_id",
    "quantity": "quantity",
    "unitPrice": "unit_price",
    "currency": "currency",
    "taxMode": "tax_mode",
    "taxPercent": "tax_percent",
    "taxAmount": "tax_amount",
    "discountMode": "discount_mode",
    "discountPercent": "discount_percent",
    "discountAmount": "discount_amount",
    "reason": "reason",
    "note": "note",
    "campaignCode": "campaign_code",
}


@dataclass(frozen=True)
class DocumentGroup:
    """A subject and its initial entries, with entry keys in snake_case."""

    group_id: str
    label: str
    entries: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class FormDocument:
    """Parsed form document."""

    groups: tuple[DocumentGroup, ...]
    profile: Optional[str] = None
    base_currency: Optional[str] = None
    fixed_target: Optional[str] = None
    default_currency: Optional[str] = None


def _entry_fields(raw: Any, where: str) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{where}: entry must be an object")
    unknown = sorted(set(raw) - set(ENTRY_KEYS))
    if unknown:
        raise ValidationError(f"{where}: unknown entry keys: {', '.join(unknown)}")
    return {ENTRY_KEYS[key]: value for key, value in raw.items()}


def parse_form_document(data: Any) -> FormDocument:
    """Validate the structure of a decoded form document.

    Raises:
        ValidationError: If the document is malformed
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Form document must be a JSON object")

    raw_groups = data.get("groups")
    if not isinstance(raw_groups, list):
        raise ValidationError("Form document must contain a 'groups' list")

    groups = []
    for index, raw in enumerate(raw_groups):
        if not isinstance(raw, Mapping) or not raw.get("groupId"):
            raise ValidationError(f"Group #{index + 1} must be an object with a 'groupId'")
        group_id = str(raw["groupId"])
        raw_entries = raw.get("entries")
        if raw_entries is None:
            raw_entries = []
        elif not isinstance(raw_entries, list):
            raise ValidationError(f"Group '{group_id}': 'entries' must be a list")
        entries = tuple(
            _entry_fields(entry, f"Group '{group_id}' entry #{i + 1}")
            for i, entry in enumerate(raw_entries)
        )
        groups.append(
            DocumentGroup(group_id=group_id, label=str(raw.get("label") or group_id), entries=entries)
        )

    return FormDocument(
        groups=tuple(groups),
        profile=data.get("profile"),
        base_currency=data.get("baseCurrency"),
        fixed_target=data.get("fixedTarget"),
        default_currency=data.get("defaultCurrency"),
    )


def read_form_document(path: str) -> FormDocument:
    """Read and parse a form document from a JSON file.

    Raises:
        NotFoundError: If the file does not exist
        ValidationError: If the file is not valid JSON or is malformed
    """
    doc_path = Path(path)
    if not doc_path.exists():
        raise NotFoundError(f"Form document not found: {path}")
    try:
        with open(doc_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Form document {path} is not valid JSON: {e}")
    return parse_form_document(data)


def open_session(
    document: FormDocument,
    rate_lookup: RateLookup,
    profile_name: Optional[str] = None,
    base_currency: Optional[str] = None,
) -> FormSession:
    """Open a form session populated from a document.

    The explicit profile and base currency take precedence over the ones
    named in the document.
    """
    profile = get_profile(profile_name or document.profile or DEFAULT_PROFILE)
    profile = configure_profile(
        profile,
        fixed_target=document.fixed_target,
        default_currency=document.default_currency,
    )
    session = FormSession(profile, rate_lookup, base_currency or document.base_currency or "TRY")
    session.rebuild(
        [(group.group_id, group.label) for group in document.groups],
        {group.group_id: group.entries for group in document.groups},
    )
    return session


def entry_to_document(entry: Entry) -> dict[str, Any]:
    """Return an entry in document form, keeping numeric fields as text."""
    return {key: _plain(getattr(entry, field)) for key, field in ENTRY_KEYS.items()}


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, AmountMode) else value


def session_to_document(session: FormSession) -> dict[str, Any]:
    """Serialize a session's profile and store back to document form."""
    profile = session.profile
    return {
        "profile": profile.name,
        "baseCurrency": session.base_currency,
        "fixedTarget": profile.fixed_target,
        "defaultCurrency": profile.default_currency,
        "groups": [
            {
                "groupId": group.group_id,
                "label": group.label,
                "entries": [entry_to_document(entry) for entry in group.entries],
            }
            for group in session.store.groups
        ],
    }


def write_form_document(data: Mapping[str, Any], path: str) -> None:
    """Write a document to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
