#!/usr/bin/env python3
"""
Seed the record store with synthetic batches for an area
Useful for demos without a traffic provider key
"""
import argparse
import asyncio
import random
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from traffictrack.database import connect_to_mongo, close_mongo_connection, get_database
from traffictrack.config import settings
from traffictrack.models.records import BoundingBox
from traffictrack.services.synthetic import SyntheticGenerator
from traffictrack.store import MongoRecordStore


async def seed(box: BoundingBox, batches: int, seed_value: int):
    """Insert batches of synthetic flows and incidents inside box"""
    await connect_to_mongo()
    db = get_database()
    if db is None:
        print("❌ MongoDB not reachable, nothing seeded")
        return

    store = MongoRecordStore(db)
    generator = SyntheticGenerator(random.Random(seed_value))

    print(f"Seeding area {box.min_lat},{box.min_lon} to {box.max_lat},{box.max_lon}")
    print(f"Batches: {batches}")
    print()

    flows_created = 0
    events_created = 0
    try:
        for _ in range(batches):
            flows = await store.insert_flows(generator.generate_flows(box, settings.synthetic_flow_count))
            events = await store.insert_events(generator.generate_incidents(box, settings.synthetic_incident_count))
            flows_created += len(flows)
            events_created += len(events)

        print(f"✓ Generated {flows_created} flow records")
        print(f"✓ Generated {events_created} incident events")

        print(f"\n✓ Total traffic_flows records in database: {await db.traffic_flows.count_documents({})}")
        print(f"✓ Total traffic_events records in database: {await db.traffic_events.count_documents({})}")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed synthetic traffic data")
    parser.add_argument("--lat1", type=float, default=45.0)
    parser.add_argument("--lon1", type=float, default=9.0)
    parser.add_argument("--lat2", type=float, default=45.1)
    parser.add_argument("--lon2", type=float, default=9.1)
    parser.add_argument("--batches", type=int, default=1)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    area = BoundingBox.from_corners(args.lat1, args.lon1, args.lat2, args.lon2)
    asyncio.run(seed(area, args.batches, args.seed))
