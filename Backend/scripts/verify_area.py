#!/usr/bin/env python3
"""
Run an area query end to end against the configured store and provider
Shows: freshness decision -> refresh source -> aggregates
"""
import argparse
import asyncio
import sys
import os
import logging

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from traffictrack.database import connect_to_mongo, close_mongo_connection, get_database
from traffictrack.config import settings
from traffictrack.main import create_traffic_service
from traffictrack.models.records import BoundingBox

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def verify_area(box: BoundingBox):
    print("=" * 80)
    print("AREA QUERY VERIFICATION")
    print("=" * 80)
    print(f"Area: {box.min_lat},{box.min_lon} to {box.max_lat},{box.max_lon}")
    print(f"Synthetic mode: {settings.use_synthetic_data}\n")

    try:
        await connect_to_mongo()
        service = create_traffic_service(settings, get_database())

        traffic = await service.get_traffic_in_area(box, caller_id="verify_area")
        last = service.orchestrator.last_refresh
        print(f"Refresh:            {last.source if last else 'not needed (fresh)'}")
        print(f"Flow records:       {traffic.total_flow_records:>6}")
        print(f"Average speed:      {traffic.average_speed:>6.1f} km/h")
        print(f"Average congestion: {traffic.average_congestion:>6.1f} %")
        for road, speed in sorted(traffic.average_speed_by_road.items()):
            print(f"  {road:24} {speed:>6.1f} km/h")
        print()

        events = await service.get_events_in_area(box, caller_id="verify_area")
        print(f"Incidents:          {events.total_events:>6}")
        for event_type, count in sorted(events.events_by_type.items()):
            print(f"  {event_type:24} {count:>6}")
        print()

    except Exception as e:
        logger.error(f"Area verification error: {e}", exc_info=True)
        print(f"\n❌ Error during verification: {e}\n")

    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Verify an area query")
    parser.add_argument("lat1", type=float)
    parser.add_argument("lon1", type=float)
    parser.add_argument("lat2", type=float)
    parser.add_argument("lon2", type=float)
    args = parser.parse_args()

    asyncio.run(verify_area(BoundingBox.from_corners(args.lat1, args.lon1, args.lat2, args.lon2)))
