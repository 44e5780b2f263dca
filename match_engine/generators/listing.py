"""Generators for owners, buyers, properties and wanted ads."""

import json
import random
from decimal import Decimal

from match_engine.generators.base import BaseGenerator
from match_engine.models import (
    Buyer,
    LocationType,
    Owner,
    Property,
    PropertyFeature,
    PropertyType,
    TargetAddress,
    TargetLocation,
    WantedAd,
)

# region -> city -> suburbs
NZ_LOCATIONS: dict[str, dict[str, list[str]]] = {
    "Auckland": {
        "Auckland": ["Ponsonby", "Grey Lynn", "Remuera", "Mt Eden", "Devonport", "Parnell"],
        "Manukau": ["Howick", "Papatoetoe", "Flat Bush"],
    },
    "Wellington": {
        "Wellington": ["Kelburn", "Thorndon", "Island Bay", "Karori"],
        "Lower Hutt": ["Petone", "Eastbourne"],
    },
    "Canterbury": {
        "Christchurch": ["Fendalton", "Merivale", "Sumner", "Riccarton"],
    },
    "Otago": {
        "Dunedin": ["Roslyn", "St Clair", "Maori Hill"],
        "Queenstown": ["Frankton", "Arthurs Point"],
    },
}

STREET_SUFFIXES = ["Street", "Road", "Avenue", "Terrace", "Crescent", "Place", "Lane"]

AD_TITLES = [
    "Family home wanted",
    "First home buyer looking",
    "Downsizing couple seeking",
    "Investor wants rental",
    "Room for the kids",
]


class OwnerGenerator(BaseGenerator):
    """Generate synthetic property owners."""

    def generate(self) -> Owner:
        return Owner(
            owner_id=self.fake.uuid4(),
            user_id=self.fake.uuid4(),
            name=self.fake.name(),
            email=self.fake.email(),
        )


class BuyerGenerator(BaseGenerator):
    """Generate synthetic buyers."""

    def generate(self) -> Buyer:
        return Buyer(
            buyer_id=self.fake.uuid4(),
            user_id=self.fake.uuid4(),
            name=self.fake.name(),
            email=self.fake.email(),
        )


class PropertyGenerator(BaseGenerator):
    """Generate synthetic properties in New Zealand locations."""

    def street_address(self) -> str:
        return f"{random.randint(1, 300)} {self.fake.last_name()} {random.choice(STREET_SUFFIXES)}"

    def generate(self, owner_id: str) -> Property:
        """Generate a property.

        Parameters
        ----------
        owner_id : str
            Owner of the generated property.

        Returns
        -------
        Property
            Generated property; about one in ten has no estimated value.
        """
        region = random.choice(list(NZ_LOCATIONS))
        city = random.choice(list(NZ_LOCATIONS[region]))
        suburb = random.choice(NZ_LOCATIONS[region][city])

        estimated_value = None
        if random.random() > 0.1:
            estimated_value = Decimal(random.randint(400, 3000) * 1000)

        features = random.sample(list(PropertyFeature), k=random.randint(0, 5))

        return Property(
            property_id=self.fake.uuid4(),
            owner_id=owner_id,
            address=f"{self.street_address()}, {suburb}",
            suburb=suburb,
            city=city,
            region=region,
            property_type=random.choice(list(PropertyType)).value,
            bedrooms=random.randint(1, 6),
            bathrooms=random.randint(1, 3),
            estimated_value=estimated_value,
            features=json.dumps([f.value for f in features]),
        )


class WantedAdGenerator(BaseGenerator):
    """Generate synthetic wanted ads.

    Ads can be generated around an existing property so sample runs
    produce area and direct matches.
    """

    def _criteria(self) -> dict:
        bedrooms_min = random.choice([None, 1, 2, 3])
        bedrooms_max = random.choice([None, 4, 5]) if bedrooms_min is not None else None
        types = random.sample(list(PropertyType), k=random.randint(1, 3))
        features = random.sample(list(PropertyFeature), k=random.randint(0, 4))
        return {
            "property_types": json.dumps([t.value for t in types]),
            "features": json.dumps([f.value for f in features]),
            "bedrooms_min": bedrooms_min,
            "bedrooms_max": bedrooms_max,
        }

    def generate(self, buyer_id: str) -> WantedAd:
        """Generate a wanted ad targeting a random area."""
        region = random.choice(list(NZ_LOCATIONS))
        city = random.choice(list(NZ_LOCATIONS[region]))
        location_type = random.choice([LocationType.SUBURB, LocationType.CITY, LocationType.REGION])
        if location_type == LocationType.SUBURB:
            name = random.choice(NZ_LOCATIONS[region][city])
        elif location_type == LocationType.CITY:
            name = city
        else:
            name = region

        return WantedAd(
            wanted_ad_id=self.fake.uuid4(),
            buyer_id=buyer_id,
            title=random.choice(AD_TITLES),
            budget=Decimal(random.randint(400, 3000) * 1000),
            target_locations=[TargetLocation(location_type=location_type, name=name)],
            **self._criteria(),
        )

    def generate_near(self, buyer_id: str, prop: Property, direct: bool = False) -> WantedAd:
        """Generate a wanted ad aimed at a specific property.

        Parameters
        ----------
        buyer_id : str
            Buyer placing the ad.
        prop : Property
            Property the ad should match.
        direct : bool
            Name the property's street address instead of its suburb.

        Returns
        -------
        WantedAd
            Generated wanted ad.
        """
        base = prop.estimated_value or Decimal(random.randint(400, 3000) * 1000)
        budget = (base * Decimal(str(random.uniform(0.7, 1.4))) / 1000).quantize(Decimal(1)) * 1000

        if direct:
            street = prop.address.split(",")[0]
            targets = {"target_addresses": [TargetAddress(address=street, suburb=prop.suburb, city=prop.city)]}
        else:
            targets = {"target_locations": [TargetLocation(LocationType.SUBURB, prop.suburb or "")]}

        return WantedAd(
            wanted_ad_id=self.fake.uuid4(),
            buyer_id=buyer_id,
            title=random.choice(AD_TITLES),
            budget=budget,
            **targets,
            **self._criteria(),
        )
