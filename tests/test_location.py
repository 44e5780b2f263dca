"""Tests for location classification."""

from match_engine.matching.location import LocationClass, classify_location, is_direct_address
from match_engine.models import LocationType, TargetAddress, TargetLocation


class TestDirectAddress:
    """Tests for the direct-address containment test."""

    def test_target_contains_property_address(self, make_property) -> None:
        """Test a target containing the property address."""
        prop = make_property(address="12 Example Street")
        target = TargetAddress(address="12 Example Street, Ponsonby, Auckland")

        assert is_direct_address(target, prop)

    def test_property_contains_target_address(self, make_property) -> None:
        """Test a property address containing the target."""
        prop = make_property(address="12 Example Street, Ponsonby")
        target = TargetAddress(address="12 Example Street")

        assert is_direct_address(target, prop)

    def test_case_insensitive(self, make_property) -> None:
        """Test address comparison ignores case."""
        prop = make_property(address="12 EXAMPLE STREET, PONSONBY")
        target = TargetAddress(address="12 example street")

        assert is_direct_address(target, prop)

    def test_short_target_not_contained(self, make_property) -> None:
        """Test a target below the minimum length is not a containment match."""
        prop = make_property(address="12 Example Street, Ponsonby")

        assert not is_direct_address(TargetAddress(address="12"), prop)
        # exactly five characters is still too short
        assert not is_direct_address(TargetAddress(address="12 Ex"), prop)
        assert is_direct_address(TargetAddress(address="12 Exa"), prop)

    def test_unrelated_addresses(self, make_property) -> None:
        """Test unrelated addresses do not match."""
        prop = make_property(address="12 Example Street")

        assert not is_direct_address(TargetAddress(address="99 Other Road"), prop)

    def test_empty_addresses_never_match(self, make_property) -> None:
        """Test empty addresses never direct-match."""
        assert not is_direct_address(TargetAddress(address="12 Example Street"), make_property(address=""))
        assert not is_direct_address(TargetAddress(address=""), make_property())


class TestClassifyLocation:
    """Tests for classify_location ordering and tiers."""

    def test_direct_match(self, make_property, make_wanted_ad, direct_target) -> None:
        """Test classification of a direct address match."""
        ad = make_wanted_ad(target_addresses=[direct_target], target_locations=[])

        assert classify_location(make_property(), ad) == LocationClass.DIRECT_MATCH

    def test_target_address_suburb_is_area_match(self, make_property, make_wanted_ad) -> None:
        """Test a target address suburb gives an area match."""
        ad = make_wanted_ad(
            target_addresses=[TargetAddress(address="1 Somewhere Else", suburb="ponsonby")],
            target_locations=[],
        )

        assert classify_location(make_property(), ad) == LocationClass.AREA_MATCH

    def test_target_address_city_is_area_match(self, make_property, make_wanted_ad) -> None:
        """Test a target address city gives an area match."""
        ad = make_wanted_ad(
            target_addresses=[TargetAddress(address="1 Somewhere Else", city="AUCKLAND")],
            target_locations=[],
        )

        assert classify_location(make_property(), ad) == LocationClass.AREA_MATCH

    def test_first_address_area_match_stops_scan(self, make_property, make_wanted_ad, direct_target) -> None:
        """An earlier suburb overlap wins over a later direct address."""
        ad = make_wanted_ad(
            target_addresses=[
                TargetAddress(address="1 Somewhere Else", suburb="Ponsonby"),
                direct_target,
            ],
            target_locations=[],
        )

        assert classify_location(make_property(), ad) == LocationClass.AREA_MATCH

    def test_direct_checked_before_suburb_within_address(self, make_property, make_wanted_ad) -> None:
        """Test the direct check runs before the suburb check."""
        ad = make_wanted_ad(
            target_addresses=[TargetAddress(address="12 Example Street", suburb="Ponsonby")],
        )

        assert classify_location(make_property(), ad) == LocationClass.DIRECT_MATCH

    def test_addresses_before_locations(self, make_property, make_wanted_ad, direct_target) -> None:
        """Test target addresses are scanned before target locations."""
        ad = make_wanted_ad(
            target_addresses=[direct_target],
            target_locations=[TargetLocation(LocationType.SUBURB, "Ponsonby")],
        )

        assert classify_location(make_property(), ad) == LocationClass.DIRECT_MATCH

    def test_target_locations(self, make_property, make_wanted_ad) -> None:
        """Test each location level matches regardless of case."""
        prop = make_property()
        for location_type, name in [
            (LocationType.SUBURB, "ponsonby"),
            (LocationType.CITY, "Auckland"),
            (LocationType.REGION, "AUCKLAND"),
        ]:
            ad = make_wanted_ad(target_locations=[TargetLocation(location_type, name)])
            assert classify_location(prop, ad) == LocationClass.AREA_MATCH

    def test_location_type_must_line_up(self, make_property, make_wanted_ad) -> None:
        """A suburb name given as a city does not match."""
        ad = make_wanted_ad(target_locations=[TargetLocation(LocationType.CITY, "Ponsonby")])

        assert classify_location(make_property(), ad) == LocationClass.NO_MATCH

    def test_district_never_matches(self, make_property, make_wanted_ad) -> None:
        """Test DISTRICT locations never match."""
        ad = make_wanted_ad(target_locations=[TargetLocation(LocationType.DISTRICT, "Ponsonby")])

        assert classify_location(make_property(), ad) == LocationClass.NO_MATCH

    def test_unknown_location_type_ignored(self, make_property, make_wanted_ad) -> None:
        """Test unknown location types are ignored."""
        ad = make_wanted_ad(
            target_locations=[TargetLocation("POSTCODE", "1011"), TargetLocation("SUBURB", "Ponsonby")]
        )

        assert classify_location(make_property(), ad) == LocationClass.AREA_MATCH

    def test_unset_property_fields_never_match(self, make_property, make_wanted_ad) -> None:
        """Test unset property fields never match a location."""
        prop = make_property(suburb=None, city=None, region=None)
        ad = make_wanted_ad(
            target_addresses=[TargetAddress(address="1 Somewhere Else", suburb="", city=None)],
            target_locations=[TargetLocation(LocationType.SUBURB, "")],
        )

        assert classify_location(prop, ad) == LocationClass.NO_MATCH

    def test_no_match(self, make_property, make_wanted_ad) -> None:
        """Test no targets in common gives no match."""
        ad = make_wanted_ad(target_locations=[TargetLocation(LocationType.SUBURB, "Remuera")])

        assert classify_location(make_property(), ad) == LocationClass.NO_MATCH

    def test_custom_min_length(self, make_property, make_wanted_ad) -> None:
        """Test a custom minimum address length."""
        ad = make_wanted_ad(target_addresses=[TargetAddress(address="12 Ex")], target_locations=[])

        assert classify_location(make_property(), ad, min_direct_address_length=3) == LocationClass.DIRECT_MATCH
