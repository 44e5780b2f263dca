"""Criteria normalization for stored tag lists.

Property types and features are stored as loosely-typed values: JSON
array text, Python lists, or nothing at all. Everything here degrades to
an empty set instead of raising, so one bad row never stops a batch.
"""

import json
import logging
from typing import Any

from match_engine.models import Property, WantedAd

logger = logging.getLogger(__name__)

EMPTY: frozenset[str] = frozenset()


def normalize_tag(tag: Any) -> str | None:
    """Return the comparable form of a single tag, or ``None`` if unusable."""
    if hasattr(tag, "value") and isinstance(tag.value, str):
        tag = tag.value  # str-valued enums
    if not isinstance(tag, str):
        return None
    tag = tag.strip().upper()
    return tag or None


def normalize_tags(raw: Any) -> frozenset[str]:
    """Normalize a stored tag list into a set of upper-cased tags.

    Parameters
    ----------
    raw : Any
        JSON array text, an iterable of strings, or ``None``.

    Returns
    -------
    frozenset[str]
        Normalized tags; empty for absent or malformed input.
    """
    if raw is None:
        return EMPTY

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")

    if isinstance(raw, str):
        if not raw.strip():
            return EMPTY
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.debug("Unparseable tag list %r, treating as empty", raw)
            return EMPTY

    if isinstance(raw, (str, dict)) or not hasattr(raw, "__iter__"):
        logger.debug("Tag list is not an array: %r, treating as empty", raw)
        return EMPTY

    tags = set()
    for item in raw:
        tag = normalize_tag(item)
        if tag is None:
            logger.debug("Dropping non-string tag %r", item)
            continue
        tags.add(tag)
    return frozenset(tags)


def wanted_ad_criteria(ad: WantedAd) -> tuple[frozenset[str], frozenset[str]]:
    """Return the ad's normalized ``(property_types, features)``."""
    return normalize_tags(ad.property_types), normalize_tags(ad.features)


def property_features(prop: Property) -> frozenset[str]:
    """Return the property's normalized feature set."""
    return normalize_tags(prop.features)
