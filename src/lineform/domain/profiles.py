"""Engine profiles for the stock entry and sale line flows.

All flows share one engine; a profile only decides which fields are
required and how new entries start out.
"""

from dataclasses import replace
from typing import Optional

from lineform.domain import errors
from lineform.domain.entities import EngineProfile
from lineform.domain.errors import NotFoundError

STOCK_RECEIVE = EngineProfile(
    name="stock-receive",
    require_price=True,
    require_target=True,
    description="Receive stock per variant into one or more stores, with purchase pricing",
)

STOCK_ADJUST = EngineProfile(
    name="stock-adjust",
    require_price=False,
    require_target=True,
    description="Adjust stock quantities per variant and store, without pricing",
)

SALE_LINE = EngineProfile(
    name="sale",
    require_price=True,
    require_target=True,
    default_quantity="1",
    description="Sale lines, each selling one product variant",
)

PROFILES = {profile.name: profile for profile in (STOCK_RECEIVE, STOCK_ADJUST, SALE_LINE)}


def get_profile(name: str) -> EngineProfile:
    """Look up a profile by name.

    Raises:
        NotFoundError: If no profile has that name
    """
    profile = PROFILES.get(name)
    if profile is None:
        raise NotFoundError(errors.profile_not_found(name, sorted(PROFILES)))
    return profile


def configure_profile(
    profile: EngineProfile,
    fixed_target: Optional[str] = None,
    default_currency: Optional[str] = None,
) -> EngineProfile:
    """Return a copy of a profile bound to a fixed target and/or currency.

    With a fixed target every entry belongs to that target, so the target is
    no longer something the user has to select.
    """
    if fixed_target:
        profile = replace(profile, fixed_target=fixed_target, require_target=False)
    if default_currency:
        profile = replace(profile, default_currency=default_currency.strip().upper())
    return profile
