"""Enumeration types for matching domain entities."""

from enum import Enum


class PropertyType(str, Enum):
    HOUSE = "HOUSE"
    APARTMENT = "APARTMENT"
    TOWNHOUSE = "TOWNHOUSE"
    UNIT = "UNIT"
    LIFESTYLE = "LIFESTYLE"
    SECTION = "SECTION"
    FARM = "FARM"
    COMMERCIAL = "COMMERCIAL"


class PropertyFeature(str, Enum):
    GARAGE = "GARAGE"
    POOL = "POOL"
    DECK = "DECK"
    GARDEN = "GARDEN"
    SEA_VIEW = "SEA_VIEW"
    MOUNTAIN_VIEW = "MOUNTAIN_VIEW"
    OFF_STREET_PARKING = "OFF_STREET_PARKING"
    ENSUITE = "ENSUITE"
    HEAT_PUMP = "HEAT_PUMP"
    FIREPLACE = "FIREPLACE"
    NEW_BUILD = "NEW_BUILD"
    RENOVATED = "RENOVATED"
    FENCED = "FENCED"
    PET_FRIENDLY = "PET_FRIENDLY"


class LocationType(str, Enum):
    SUBURB = "SUBURB"
    CITY = "CITY"
    DISTRICT = "DISTRICT"  # accepted on input, never matched
    REGION = "REGION"


class MatchType(str, Enum):
    DIRECT = "DIRECT"
    CRITERIA = "CRITERIA"


class NotificationType(str, Enum):
    NEW_MATCH = "NEW_MATCH"


class NotificationChannel(str, Enum):
    IN_APP = "in_app"
    EMAIL = "email"


class ReconcileOutcome(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    UNCHANGED = "UNCHANGED"
