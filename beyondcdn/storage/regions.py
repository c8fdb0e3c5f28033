"""Storage API regions and their endpoints."""

from __future__ import annotations

from enum import Enum

DEFAULT_BASE_URL = "https://storage.beyondcdn.com/"


class Region(str, Enum):
    FALKENSTEIN = "de"
    NEW_YORK = "ny"
    LOS_ANGELES = "la"
    SINGAPORE = "sg"
    SYDNEY = "syd"
    UNITED_KINGDOM = "uk"
    STOCKHOLM = "se"


_REGION_BASE_URLS = {
    Region.NEW_YORK: "https://ny.storage.beyondcdn.com/",
    Region.LOS_ANGELES: "https://la.storage.beyondcdn.com/",
    Region.SINGAPORE: "https://sg.storage.beyondcdn.com/",
    Region.SYDNEY: "https://syd.storage.beyondcdn.com/",
    Region.UNITED_KINGDOM: "https://uk.storage.beyondcdn.com/",
    Region.STOCKHOLM: "https://se.storage.beyondcdn.com/",
}


def parse_region(value: Region | str | None) -> Region | None:
    """
    Resolve a region from an enum member, a region code ("ny") or a member name ("NEW_YORK").

    Returns None for empty or unknown values.
    """
    if value is None or isinstance(value, Region):
        return value
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return Region(cleaned.lower())
    except ValueError:
        return Region.__members__.get(cleaned.upper())


def get_base_url(region: Region | str | None) -> str:
    """Base URL of the storage API; Falkenstein and unknown regions use the default host."""
    return _REGION_BASE_URLS.get(parse_region(region), DEFAULT_BASE_URL)
