#!/usr/bin/env python3
"""Generate a sample world of properties and wanted ads and match them.

Properties are matched first (as if each had just been registered), then
every wanted ad is recalculated. The second pass shows idempotence: pairs
already stored are reported as unchanged and trigger no notifications.
"""

import argparse
import logging
import random
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from match_engine.config import EngineConfig, KafkaConfig, MatchEngineConfig
from match_engine.generators import (
    BuyerGenerator,
    OwnerGenerator,
    PropertyGenerator,
    WantedAdGenerator,
)
from match_engine.logging import setup_logging
from match_engine.matching import MatchingEngine, Notifier
from match_engine.sinks import ConsoleNotificationSink, KafkaNotificationSink
from match_engine.store import MatchDataStore, MatchStore, PostgresMatchStore

logger = logging.getLogger("match_engine.scripts.run_matching")


def build_world(store: MatchDataStore, num_properties: int, num_ads: int, seed: int) -> None:
    """Populate the store with owners, properties, buyers and wanted ads."""
    owner_gen = OwnerGenerator(seed=seed)
    buyer_gen = BuyerGenerator(seed=seed + 1)
    property_gen = PropertyGenerator(seed=seed + 2)
    ad_gen = WantedAdGenerator(seed=seed + 3)

    t0 = time.perf_counter()
    for _ in range(num_properties):
        owner = owner_gen.generate()
        store.add_owner(owner)
        store.add_property(property_gen.generate(owner.owner_id))
    logger.info("Generated %d properties in %.2fs", num_properties, time.perf_counter() - t0)

    t0 = time.perf_counter()
    properties = list(store.properties.values())
    for i in range(num_ads):
        buyer = buyer_gen.generate()
        store.add_buyer(buyer)
        # A third of ads aim at an existing property, a few of those by street address
        if properties and i % 3 == 0:
            prop = random.choice(properties)
            ad = ad_gen.generate_near(buyer.buyer_id, prop, direct=(i % 9 == 0))
        else:
            ad = ad_gen.generate(buyer.buyer_id)
        store.add_wanted_ad(ad)
    logger.info("Generated %d wanted ads in %.2fs", num_ads, time.perf_counter() - t0)


def make_sink(kind: str, kafka: KafkaConfig) -> ConsoleNotificationSink | KafkaNotificationSink | None:
    if kind == "console":
        return ConsoleNotificationSink(pretty=False)
    if kind == "kafka":
        return KafkaNotificationSink(kafka)
    return None


def main() -> None:
    parser = argparse.ArgumentParser(description="Run property/wanted-ad matching on sample data")
    parser.add_argument("--properties", type=int, default=50, help="Number of properties")
    parser.add_argument("--ads", type=int, default=100, help="Number of wanted ads")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--store",
        choices=["memory", "postgres"],
        default="memory",
        help="memory: generate a sample world; postgres: match existing rows (POSTGRES_*)",
    )
    parser.add_argument("--sink", choices=["console", "kafka", "none"], default="none")
    parser.add_argument("--prefilter", action="store_true", help="Pre-filter candidates by budget")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--log-format", choices=["standard", "json"], default=None)
    args = parser.parse_args()

    config = MatchEngineConfig.from_env()
    setup_logging(
        level=args.log_level or config.log_level,
        format_type=args.log_format or config.log_format,
    )

    engine_config = EngineConfig(
        weights=config.engine.weights,
        prefilter_by_budget=args.prefilter or config.engine.prefilter_by_budget,
        prefilter_tolerance=config.engine.prefilter_tolerance,
    )

    store: MatchStore
    if args.store == "postgres":
        store = PostgresMatchStore(config.postgres.connection_string)
        store.create_schema()
    else:
        store = MatchDataStore()
        build_world(store, args.properties, args.ads, args.seed)

    sink = make_sink(args.sink, config.kafka)
    notifier = Notifier(sink) if sink is not None else None
    engine = MatchingEngine(store, notifier=notifier, config=engine_config)

    t0 = time.perf_counter()
    property_ids = [p.property_id for p in store.list_properties()]
    ad_ids = [a.wanted_ad_id for a in store.list_active_wanted_ads()]
    created_by_property = sum(engine.recalculate_property(pid) for pid in property_ids)
    created_by_ad = sum(engine.recalculate_wanted_ad(aid) for aid in ad_ids)
    elapsed = time.perf_counter() - t0

    if sink is not None:
        sink.close()

    print("\n" + "=" * 60)
    print("Matching Summary")
    print("=" * 60)
    if isinstance(store, MatchDataStore):
        for key, value in store.summary().items():
            print(f"  {key}: {value}")
    else:
        print(f"  properties: {len(property_ids)}")
        print(f"  active wanted ads: {len(ad_ids)}")
        store.close()
    print(f"  created (property pass): {created_by_property}")
    print(f"  created (wanted ad pass): {created_by_ad}")
    print(f"  elapsed: {elapsed:.2f}s")


if __name__ == "__main__":
    main()
