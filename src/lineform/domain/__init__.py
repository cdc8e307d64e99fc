"""Domain layer for lineform application."""

from lineform.domain.calculator import calc_breakdown, calc_total, group_total, grand_total
from lineform.domain.classifier import classify
from lineform.domain.store import EntryStore
from lineform.domain.propagation import apply_to_siblings, apply_to_all_groups
from lineform.domain.rates import RateResolver
from lineform.domain.submission import validate_and_map
from lineform.domain.session import FormSession
from lineform.domain.rate_book import RateBookService, RateBookSource

__all__ = [
    "calc_breakdown",
    "calc_total",
    "group_total",
    "grand_total",
    "classify",
    "EntryStore",
    "apply_to_siblings",
    "apply_to_all_groups",
    "RateResolver",
    "validate_and_map",
    "FormSession",
    "RateBookService",
    "RateBookSource",
]
