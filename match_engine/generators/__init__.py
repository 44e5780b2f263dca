"""Sample data generators."""

from match_engine.generators.listing import (
    BuyerGenerator,
    OwnerGenerator,
    PropertyGenerator,
    WantedAdGenerator,
)

__all__ = ["BuyerGenerator", "OwnerGenerator", "PropertyGenerator", "WantedAdGenerator"]
