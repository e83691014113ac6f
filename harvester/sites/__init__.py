"""
Site profiles and profile selection.

Profiles are matched against the target URL in registration order; the
generic inventory profile matches every host and comes last.
"""

from typing import Dict, List, Optional

from harvester.core.exceptions import ConfigurationError
from harvester.extraction.dom import extract_link_inventory
from harvester.records.models import FieldSpec, RecordSchema
from harvester.sites.base import DetailSpec, SiteProfile, RECAPTCHA_MARKER
from harvester.sites.ibba import IBBA_API, IBBA_DIRECTORY
from harvester.sites.igdb import IGDB

INVENTORY_SCHEMA = RecordSchema(fields=(
    FieldSpec("kind"),
    FieldSpec("value"),
))

GENERIC = SiteProfile(
    name="generic",
    domains=(),
    schema=INVENTORY_SCHEMA,
    extract_html=extract_link_inventory,
)

# Most specific first: ibba-api and ibba-directory share a domain
PROFILES: List[SiteProfile] = [IBBA_API, IBBA_DIRECTORY, IGDB, GENERIC]

PROFILES_BY_NAME: Dict[str, SiteProfile] = {p.name: p for p in PROFILES}


def pick_profile(url: str, name: Optional[str] = None) -> SiteProfile:
    """
    Select the profile for a target URL.

    Args:
        url: Validated target URL
        name: Explicit profile name; overrides URL matching

    Returns:
        Matching SiteProfile (generic when nothing more specific matches)

    Raises:
        ConfigurationError: If an explicit name is not registered

    Example:
        >>> pick_profile("https://www.ibba.org/wp-json/brokers/all").name
        'ibba-api'
    """
    if name:
        try:
            return PROFILES_BY_NAME[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown site profile '{name}' (known: {', '.join(PROFILES_BY_NAME)})"
            )

    for profile in PROFILES:
        if profile.matches(url):
            return profile
    return GENERIC


__all__ = [
    "SiteProfile",
    "DetailSpec",
    "RECAPTCHA_MARKER",
    "PROFILES",
    "PROFILES_BY_NAME",
    "GENERIC",
    "IBBA_API",
    "IBBA_DIRECTORY",
    "IGDB",
    "pick_profile",
]
