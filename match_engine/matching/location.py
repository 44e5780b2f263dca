"""Location classification for property/wanted-ad pairs.

Target addresses are checked before target locations, and within each
address the direct-address test runs before the suburb/city test. The
first hit wins.
"""

from enum import Enum

from match_engine.models import LocationType, Property, TargetAddress, TargetLocation, WantedAd


class LocationClass(str, Enum):
    NO_MATCH = "NO_MATCH"
    AREA_MATCH = "AREA_MATCH"
    DIRECT_MATCH = "DIRECT_MATCH"


def _fold(value: str | None) -> str:
    return value.strip().lower() if value else ""


def _same(a: str | None, b: str | None) -> bool:
    """Case-insensitive equality; unset values never match."""
    fa, fb = _fold(a), _fold(b)
    return bool(fa) and fa == fb


def is_direct_address(
    target: TargetAddress,
    prop: Property,
    min_length: int = 5,
) -> bool:
    """Check whether a target address names the property's address.

    True when the target contains the property address, or the property
    address contains a target longer than ``min_length`` characters.
    """
    target_address = target.address.lower() if target.address else ""
    property_address = prop.address.lower() if prop.address else ""
    if not target_address or not property_address:
        return False
    if property_address in target_address:
        return True
    return target_address in property_address and len(target.address) > min_length


def _address_area_match(target: TargetAddress, prop: Property) -> bool:
    return _same(target.suburb, prop.suburb) or _same(target.city, prop.city)


def _location_match(location: TargetLocation, prop: Property) -> bool:
    try:
        location_type = LocationType(location.location_type)
    except ValueError:
        return False
    if location_type == LocationType.SUBURB:
        return _same(location.name, prop.suburb)
    if location_type == LocationType.CITY:
        return _same(location.name, prop.city)
    if location_type == LocationType.REGION:
        return _same(location.name, prop.region)
    return False


def classify_location(
    prop: Property,
    ad: WantedAd,
    min_direct_address_length: int = 5,
) -> LocationClass:
    """Classify how a property relates to a wanted ad's location constraints.

    Parameters
    ----------
    prop : Property
        Candidate property.
    ad : WantedAd
        Wanted ad with target addresses and locations loaded.
    min_direct_address_length : int
        Length a target address must exceed to match as a substring
        of the property address.

    Returns
    -------
    LocationClass
        ``DIRECT_MATCH``, ``AREA_MATCH`` or ``NO_MATCH``.
    """
    for target in ad.target_addresses:
        if is_direct_address(target, prop, min_direct_address_length):
            return LocationClass.DIRECT_MATCH
        if _address_area_match(target, prop):
            return LocationClass.AREA_MATCH

    for location in ad.target_locations:
        if _location_match(location, prop):
            return LocationClass.AREA_MATCH

    return LocationClass.NO_MATCH
