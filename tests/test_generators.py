"""Tests for sample data generators."""

import json
from decimal import Decimal

from match_engine.generators import (
    BuyerGenerator,
    OwnerGenerator,
    PropertyGenerator,
    WantedAdGenerator,
)
from match_engine.generators.listing import NZ_LOCATIONS
from match_engine.matching.location import LocationClass, classify_location
from match_engine.matching.normalize import normalize_tags
from match_engine.models import LocationType, PropertyType


class TestPeopleGenerators:
    """Tests for OwnerGenerator and BuyerGenerator."""

    def test_generate_owner(self, seed: int) -> None:
        """Test owner generation."""
        owner = OwnerGenerator(seed=seed).generate()

        assert owner.owner_id
        assert owner.user_id != owner.owner_id
        assert "@" in owner.email

    def test_unique_buyers(self, seed: int) -> None:
        """Test buyer ids are unique."""
        gen = BuyerGenerator(seed=seed)
        ids = {gen.generate().buyer_id for _ in range(5)}

        assert len(ids) == 5

    def test_seed_reproducible(self, seed: int) -> None:
        """Test the same seed gives the same owner."""
        assert OwnerGenerator(seed=seed).generate() == OwnerGenerator(seed=seed).generate()


class TestPropertyGenerator:
    """Tests for PropertyGenerator."""

    def test_generate_property(self, seed: int) -> None:
        """Test property fields come from the location table."""
        prop = PropertyGenerator(seed=seed).generate("owner-001")

        assert prop.owner_id == "owner-001"
        assert prop.region in NZ_LOCATIONS
        assert prop.city in NZ_LOCATIONS[prop.region]
        assert prop.suburb in NZ_LOCATIONS[prop.region][prop.city]
        assert prop.address.endswith(f", {prop.suburb}")
        assert PropertyType(prop.property_type)
        assert 1 <= prop.bedrooms <= 6

    def test_features_are_json_tags(self, seed: int) -> None:
        """Test features are JSON arrays of distinct tags."""
        gen = PropertyGenerator(seed=seed)

        for _ in range(20):
            prop = gen.generate("owner-001")
            assert isinstance(json.loads(prop.features), list)
            assert len(normalize_tags(prop.features)) == len(json.loads(prop.features))

    def test_estimated_values_in_thousands(self, seed: int) -> None:
        """Test estimated values are rounded to thousands."""
        gen = PropertyGenerator(seed=seed)

        values = [gen.generate("owner-001").estimated_value for _ in range(50)]

        assert all(v is None or v % 1000 == 0 for v in values)
        assert any(v is not None for v in values)


class TestWantedAdGenerator:
    """Tests for WantedAdGenerator."""

    def test_generate_wanted_ad(self, seed: int) -> None:
        """Test wanted ad generation."""
        ad = WantedAdGenerator(seed=seed).generate("buyer-001")

        assert ad.buyer_id == "buyer-001"
        assert ad.is_active
        assert ad.budget > 0
        assert len(ad.target_locations) == 1
        assert ad.target_locations[0].location_type in (
            LocationType.SUBURB,
            LocationType.CITY,
            LocationType.REGION,
        )
        assert normalize_tags(ad.property_types)

    def test_bedroom_bounds_ordered(self, seed: int) -> None:
        """Test bedroom bounds are never inverted."""
        gen = WantedAdGenerator(seed=seed)

        for _ in range(30):
            ad = gen.generate("buyer-001")
            if ad.bedrooms_max is not None:
                assert ad.bedrooms_min is not None
                assert ad.bedrooms_min <= ad.bedrooms_max

    def test_generate_near_is_area_match(self, seed: int) -> None:
        """Test generate_near produces an area match."""
        prop = PropertyGenerator(seed=seed).generate("owner-001")

        ad = WantedAdGenerator(seed=seed).generate_near("buyer-001", prop)

        assert classify_location(prop, ad) == LocationClass.AREA_MATCH
        assert ad.budget % 1000 == 0

    def test_generate_near_direct(self, seed: int) -> None:
        """Test generate_near with direct produces a direct match."""
        prop = PropertyGenerator(seed=seed).generate("owner-001")

        ad = WantedAdGenerator(seed=seed).generate_near("buyer-001", prop, direct=True)

        assert classify_location(prop, ad) == LocationClass.DIRECT_MATCH

    def test_generate_near_unvalued_property(self, seed: int) -> None:
        """Test generate_near falls back to a budget range for unvalued properties."""
        prop = PropertyGenerator(seed=seed).generate("owner-001")
        prop.estimated_value = None

        ad = WantedAdGenerator(seed=seed).generate_near("buyer-001", prop)

        assert ad.budget >= Decimal("280000")
