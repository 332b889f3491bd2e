"""
Airport Profile Registry - static tier tables and per-airport overrides
Resolves codes, "other" sentinels and free-text names into friction profiles
"""

import logging
from typing import Dict, List, Optional, Tuple

from jetsweep.models.airport import AirportProfile, Tier, TimeRange

logger = logging.getLogger(__name__)


# Top US airports by tier
AIRPORT_TIER_MAP: Dict[str, Tier] = {
    # MEGA
    "ATL": Tier.MEGA, "LAX": Tier.MEGA, "ORD": Tier.MEGA, "DFW": Tier.MEGA,
    "DEN": Tier.MEGA, "JFK": Tier.MEGA,

    # LARGE
    "CLT": Tier.LARGE, "LAS": Tier.LARGE, "MCO": Tier.LARGE, "MIA": Tier.LARGE,
    "PHX": Tier.LARGE, "SEA": Tier.LARGE, "IAH": Tier.LARGE, "EWR": Tier.LARGE,
    "SFO": Tier.LARGE, "BOS": Tier.LARGE, "DTW": Tier.LARGE, "MSP": Tier.LARGE,
    "LGA": Tier.LARGE, "FLL": Tier.LARGE, "BWI": Tier.LARGE, "IAD": Tier.LARGE,
    "SLC": Tier.LARGE, "MDW": Tier.LARGE, "TPA": Tier.LARGE, "SAN": Tier.LARGE,
    "HNL": Tier.LARGE, "PDX": Tier.LARGE, "BNA": Tier.LARGE, "AUS": Tier.LARGE,
    "RDU": Tier.LARGE,

    # MEDIUM
    "SJC": Tier.MEDIUM, "MCI": Tier.MEDIUM, "CLE": Tier.MEDIUM, "SMF": Tier.MEDIUM,
    "PIT": Tier.MEDIUM, "OAK": Tier.MEDIUM, "CVG": Tier.MEDIUM, "IND": Tier.MEDIUM,
    "CMH": Tier.MEDIUM, "HOU": Tier.MEDIUM, "MKE": Tier.MEDIUM, "SAT": Tier.MEDIUM,
    "DAL": Tier.MEDIUM, "JAX": Tier.MEDIUM, "RSW": Tier.MEDIUM, "ONT": Tier.MEDIUM,
    "PBI": Tier.MEDIUM, "MSY": Tier.MEDIUM, "SNA": Tier.MEDIUM, "BUR": Tier.MEDIUM,
    "RNO": Tier.MEDIUM, "OGG": Tier.MEDIUM, "SDF": Tier.MEDIUM, "CHS": Tier.MEDIUM,
    "PNS": Tier.MEDIUM,

    # GENERIC
    "TUS": Tier.GENERIC, "OKC": Tier.GENERIC, "ABQ": Tier.GENERIC, "DSM": Tier.GENERIC,
    "LGB": Tier.GENERIC, "GEG": Tier.GENERIC, "ELP": Tier.GENERIC, "TUL": Tier.GENERIC,
    "BOI": Tier.GENERIC, "RIC": Tier.GENERIC, "PSP": Tier.GENERIC, "ORF": Tier.GENERIC,
    "ALB": Tier.GENERIC, "SAV": Tier.GENERIC, "GSP": Tier.GENERIC, "ROC": Tier.GENERIC,
    "BUF": Tier.GENERIC, "OMA": Tier.GENERIC, "SYR": Tier.GENERIC, "BHM": Tier.GENERIC,
    "LIT": Tier.GENERIC, "DAY": Tier.GENERIC, "ICT": Tier.GENERIC, "COS": Tier.GENERIC,
    "PWM": Tier.GENERIC,
}

RANGE_FIELDS = ("walk", "curb", "parking", "rideshare", "security_add", "baggage_add")

# (min, max) minutes per stage field; must grow from GENERIC to MEGA
TIER_DEFAULTS: Dict[Tier, Dict[str, object]] = {
    Tier.MEGA: {
        "walk": (15, 25),
        "curb": (20, 30),
        "parking": (20, 30),
        "rideshare": (25, 40),
        "security_add": (20, 30),
        "baggage_add": (20, 30),
        "typical_drive_time": 35,
    },
    Tier.LARGE: {
        "walk": (10, 20),
        "curb": (15, 25),
        "parking": (15, 25),
        "rideshare": (15, 30),
        "security_add": (15, 25),
        "baggage_add": (15, 25),
        "typical_drive_time": 25,
    },
    Tier.MEDIUM: {
        "walk": (8, 15),
        "curb": (10, 20),
        "parking": (10, 20),
        "rideshare": (10, 20),
        "security_add": (10, 20),
        "baggage_add": (10, 20),
        "typical_drive_time": 20,
    },
    Tier.GENERIC: {
        "walk": (5, 12),
        "curb": (5, 15),
        "parking": (5, 15),
        "rideshare": (5, 15),
        "security_add": (5, 15),
        "baggage_add": (5, 15),
        "typical_drive_time": 15,
    },
}

# Applied on top of the tier defaults; anything not listed falls through
AIRPORT_OVERRIDES: Dict[str, Dict[str, object]] = {
    "LAX": {
        "curb": (25, 40),
        "rideshare": (30, 45),
        "pain_point": "Curb and rideshare congestion dominate; security is rarely the bottleneck.",
    },
    "JFK": {
        "curb": (25, 40),
        "rideshare": (30, 45),
        "security_add": (25, 35),
        "pain_point": "Traffic variability and terminal differences make timing unreliable.",
    },
    "EWR": {
        "curb": (25, 40),
        "rideshare": (30, 45),
        "security_add": (25, 35),
        "pain_point": "Road access failures cause cascading delays.",
    },
    "DEN": {
        "security_add": (25, 40),
        "walk": (20, 30),
        "pain_point": "Early-morning security surges are severe and sudden.",
    },
    "SEA": {
        "security_add": (25, 35),
        "pain_point": "Security bottlenecks form abruptly with little warning.",
    },
    "ATL": {
        "walk": (20, 30),
        "security_add": (20, 30),
        "pain_point": "Train waits and sheer distance quietly add time.",
    },
    "MCO": {
        "baggage_add": (25, 35),
        "security_add": (25, 35),
        "pain_point": "Family travel and checked bags compound delays.",
    },
    "LAS": {
        "security_add": (20, 30),
        "pain_point": "Convention peaks overwhelm security unpredictably.",
    },
    "BOS": {
        "curb": (20, 30),
        "pain_point": "Road layout becomes confusing under pressure.",
    },
    "ORD": {
        "walk": (15, 30),
        "pain_point": "Construction and terminal sprawl introduce hidden delays.",
    },
}

# Order matters: fuzzy name matching takes the first hit
AIRPORT_NAMES: Dict[str, str] = {
    "ATL": "Atlanta Hartsfield-Jackson", "LAX": "Los Angeles International",
    "ORD": "Chicago O'Hare", "DFW": "Dallas/Fort Worth", "DEN": "Denver International",
    "JFK": "New York JFK", "CLT": "Charlotte Douglas", "LAS": "Las Vegas Harry Reid",
    "MCO": "Orlando International", "MIA": "Miami International",
    "PHX": "Phoenix Sky Harbor", "SEA": "Seattle-Tacoma", "IAH": "Houston George Bush",
    "EWR": "Newark Liberty", "SFO": "San Francisco International", "BOS": "Boston Logan",
    "DTW": "Detroit Metro", "MSP": "Minneapolis-St. Paul", "LGA": "New York LaGuardia",
    "FLL": "Fort Lauderdale-Hollywood", "BWI": "Baltimore-Washington",
    "IAD": "Washington Dulles", "SLC": "Salt Lake City", "MDW": "Chicago Midway",
    "TPA": "Tampa International", "SAN": "San Diego International",
    "HNL": "Honolulu International", "PDX": "Portland International",
    "BNA": "Nashville International", "AUS": "Austin-Bergstrom", "RDU": "Raleigh-Durham",
    "SJC": "San Jose International", "MCI": "Kansas City International",
    "CLE": "Cleveland Hopkins", "SMF": "Sacramento International",
    "PIT": "Pittsburgh International", "OAK": "Oakland International",
    "CVG": "Cincinnati/Northern Kentucky", "IND": "Indianapolis International",
    "CMH": "Columbus John Glenn", "HOU": "Houston Hobby", "MKE": "Milwaukee Mitchell",
    "SAT": "San Antonio International", "DAL": "Dallas Love Field",
    "JAX": "Jacksonville International", "RSW": "Fort Myers Southwest Florida",
    "ONT": "Ontario International", "PBI": "Palm Beach International",
    "MSY": "New Orleans Louis Armstrong", "SNA": "Orange County John Wayne",
    "BUR": "Burbank Hollywood", "RNO": "Reno-Tahoe", "OGG": "Maui Kahului",
    "SDF": "Louisville International", "CHS": "Charleston International",
    "PNS": "Pensacola International", "TUS": "Tucson International",
    "OKC": "Oklahoma City Will Rogers", "ABQ": "Albuquerque Sunport",
    "DSM": "Des Moines International", "LGB": "Long Beach Airport",
    "GEG": "Spokane International", "ELP": "El Paso International",
    "TUL": "Tulsa International", "BOI": "Boise Airport", "RIC": "Richmond International",
    "PSP": "Palm Springs International", "ORF": "Norfolk International",
    "ALB": "Albany International", "SAV": "Savannah/Hilton Head",
    "GSP": "Greenville-Spartanburg", "ROC": "Rochester Greater", "BUF": "Buffalo Niagara",
    "OMA": "Omaha Eppley Airfield", "SYR": "Syracuse Hancock",
    "BHM": "Birmingham-Shuttlesworth", "LIT": "Little Rock National",
    "DAY": "Dayton International", "ICT": "Wichita Dwight D. Eisenhower",
    "COS": "Colorado Springs", "PWM": "Portland International Jetport",
}

OTHER_LARGE = "OTHER_LARGE"
OTHER_REGIONAL = "OTHER_REGIONAL"

OTHER_AIRPORT_OPTIONS: List[Dict[str, object]] = [
    {"code": OTHER_LARGE, "name": "Other (Large / International)", "tier": Tier.LARGE},
    {"code": OTHER_REGIONAL, "name": "Other (Regional / Small)", "tier": Tier.MEDIUM},
]

# sentinel -> (profile code, profile name, tier)
_SENTINEL_PROFILES: Dict[str, Tuple[str, str, Tier]] = {
    OTHER_LARGE: ("OTH", "Other Large Airport", Tier.LARGE),
    OTHER_REGIONAL: ("REG", "Regional Airport", Tier.MEDIUM),
}


def _tier_profile(
    code: str,
    name: str,
    tier: Tier,
    overrides: Optional[Dict[str, object]] = None,
) -> AirportProfile:
    defaults = TIER_DEFAULTS[tier]
    overrides = overrides or {}
    ranges = {
        field: TimeRange.from_pair(overrides.get(field, defaults[field]))
        for field in RANGE_FIELDS
    }
    return AirportProfile(
        code=code,
        name=name,
        tier=tier,
        pain_point=overrides.get("pain_point") or None,
        typical_drive_time=defaults["typical_drive_time"],
        **ranges,
    )


def build_airport_profile(code: str) -> AirportProfile:
    """Build a known airport's profile from its tier plus any overrides"""
    tier = AIRPORT_TIER_MAP.get(code, Tier.GENERIC)
    return _tier_profile(code, AIRPORT_NAMES.get(code, code), tier, AIRPORT_OVERRIDES.get(code))


def generic_airport_profile() -> AirportProfile:
    """Profile used when the traveler did not name an airport at all"""
    return _tier_profile("GEN", "Generic Airport", Tier.GENERIC)


def infer_airport_profile(query: str) -> AirportProfile:
    """
    Synthesize a GENERIC-tier profile for an unrecognized airport

    Args:
        query: Whatever the traveler typed

    Returns:
        AirportProfile with a 3-letter code derived from the query
    """
    cleaned = (query or "").strip()
    return _tier_profile(
        cleaned.upper()[:3] or "UNK",
        cleaned or "Unknown Airport",
        Tier.GENERIC,
    )


def find_airport(query: Optional[str]) -> Optional[AirportProfile]:
    """
    Find a known airport by exact code or fuzzy name match

    Returns:
        AirportProfile, or None when nothing matches
    """
    if not query:
        return None
    normalized = query.strip().upper()
    if not normalized:
        return None

    if normalized in AIRPORT_TIER_MAP:
        return build_airport_profile(normalized)

    for code, name in AIRPORT_NAMES.items():
        if normalized in name.upper() or code in normalized:
            return build_airport_profile(code)

    return None


def resolve_airport_profile(query: Optional[str]) -> Tuple[AirportProfile, bool]:
    """
    Resolve a traveler's airport entry into a profile

    Args:
        query: IATA code, OTHER_LARGE / OTHER_REGIONAL, free-text name, or None

    Returns:
        Tuple of (profile, is_estimate). Real airports are not estimates;
        sentinels, unknown entries and a missing airport are.
    """
    if query is None or not query.strip():
        return generic_airport_profile(), True

    normalized = query.strip().upper()
    if normalized in _SENTINEL_PROFILES:
        code, name, tier = _SENTINEL_PROFILES[normalized]
        return _tier_profile(code, name, tier), True

    found = find_airport(normalized)
    if found:
        return found, False

    logger.debug("No airport match for %r, using generic estimate", query)
    return infer_airport_profile(query), True


def get_all_airports() -> List[AirportProfile]:
    """All known airports sorted by code (for pickers)"""
    return [build_airport_profile(code) for code in sorted(AIRPORT_TIER_MAP)]
