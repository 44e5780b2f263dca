"""Score composition for classified property/wanted-ad pairs."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from match_engine.config import ScoringWeights
from match_engine.matching.location import LocationClass
from match_engine.matching.normalize import normalize_tag
from match_engine.models import MatchType, Property, WantedAd

# matched_on tags
DIRECT_ADDRESS = "direct_address"
LOCATION = "location"
BUDGET = "budget"
BUDGET_PARTIAL = "budget_partial"
PROPERTY_TYPE = "propertyType"
BEDROOMS = "bedrooms"
FEATURES = "features"

DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class Score:
    """Composed score for one pair."""

    score: int
    match_type: MatchType
    matched_on: tuple[str, ...]


def budget_points(
    estimated_value: Decimal | None,
    budget: Decimal,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> tuple[int, str | None]:
    """Score how close the ad's budget is to the property's estimated value."""
    if not estimated_value:
        return 0, None
    value = Decimal(estimated_value)
    diff = abs(value - Decimal(budget))
    tolerance = value * weights.budget_tolerance
    if diff <= tolerance:
        return weights.budget, BUDGET
    if diff <= tolerance * 2:
        return weights.budget_partial, BUDGET_PARTIAL
    return 0, None


def bedrooms_match(bedrooms: int | None, bedrooms_min: int | None, bedrooms_max: int | None) -> bool:
    """True when bedrooms fall within the bounds and at least one bound is set."""
    if bedrooms is None:
        return False
    if bedrooms_min is None and bedrooms_max is None:
        return False
    if bedrooms_min is not None and bedrooms < bedrooms_min:
        return False
    if bedrooms_max is not None and bedrooms > bedrooms_max:
        return False
    return True


def feature_points(
    prop_features: frozenset[str],
    wanted_features: frozenset[str],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> tuple[int, str | None]:
    """Fraction of wanted features the property has, scaled to the feature weight.

    The tag is reported for any overlap, even one that rounds to zero points.
    """
    if not prop_features or not wanted_features:
        return 0, None
    matching = len(prop_features & wanted_features)
    raw = min(
        Decimal(weights.features),
        Decimal(matching) / Decimal(len(wanted_features)) * weights.features,
    )
    if raw <= 0:
        return 0, None
    return int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP)), FEATURES


def compose_score(
    location: LocationClass,
    prop: Property,
    ad: WantedAd,
    wanted_types: frozenset[str],
    wanted_features: frozenset[str],
    prop_features: frozenset[str],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Score | None:
    """Compute the score for a classified pair.

    Parameters
    ----------
    location : LocationClass
        Result of ``classify_location``.
    prop : Property
        Candidate property.
    ad : WantedAd
        Wanted ad (budget and bedroom bounds are read from it).
    wanted_types, wanted_features : frozenset[str]
        The ad's normalized criteria.
    prop_features : frozenset[str]
        The property's normalized features.
    weights : ScoringWeights
        Weight configuration.

    Returns
    -------
    Score | None
        ``None`` when the pair does not match or scores below threshold.
    """
    if location == LocationClass.NO_MATCH:
        return None

    if location == LocationClass.DIRECT_MATCH:
        return Score(weights.direct_address, MatchType.DIRECT, (DIRECT_ADDRESS,))

    score = weights.location
    matched_on = [LOCATION]

    points, tag = budget_points(prop.estimated_value, ad.budget, weights)
    if tag:
        score += points
        matched_on.append(tag)

    prop_type = normalize_tag(prop.property_type)
    if prop_type and prop_type in wanted_types:
        score += weights.property_type
        matched_on.append(PROPERTY_TYPE)

    if bedrooms_match(prop.bedrooms, ad.bedrooms_min, ad.bedrooms_max):
        score += weights.bedrooms
        matched_on.append(BEDROOMS)

    points, tag = feature_points(prop_features, wanted_features, weights)
    if tag:
        score += points
        matched_on.append(tag)

    score = max(0, min(weights.max_score, score))
    if score < weights.threshold:
        return None

    return Score(score, MatchType.CRITERIA, tuple(matched_on))
