"""
Synthetic generator tests
"""
import random

from traffictrack.models.records import BoundingBox, EventType, Severity
from traffictrack.services.synthetic import FLOW_ROAD_NAMES, INCIDENT_ROAD_NAMES, SyntheticGenerator
from conftest import NOW, fixed_clock


def test_default_batch_sizes(box, generator):
    assert len(generator.generate_flows(box)) == 15
    assert len(generator.generate_incidents(box)) == 8


def test_flows_are_plausible_and_inside_box(box, generator):
    for flow in generator.generate_flows(box, 50):
        assert box.contains(flow.latitude, flow.longitude)
        assert 50 <= flow.free_flow_speed < 100
        assert 0.3 * flow.free_flow_speed <= flow.current_speed <= flow.free_flow_speed
        assert 0.8 <= flow.confidence <= 1.0
        assert flow.current_travel_time >= flow.free_flow_travel_time > 0
        assert flow.road_name in FLOW_ROAD_NAMES
        assert flow.recorded_at == NOW
        assert flow.id is None


def test_incidents_are_plausible_and_inside_box(box, generator):
    events = generator.generate_incidents(box, 50)
    for event in events:
        assert box.contains(event.latitude, event.longitude)
        assert event.type in [t.value for t in EventType]
        assert event.severity in [s.value for s in Severity]
        assert event.road_name in INCIDENT_ROAD_NAMES
        assert event.start_time < NOW
        if event.end_time is not None:
            assert event.end_time > event.start_time
        assert event.recorded_at == NOW
    assert len({e.external_event_id for e in events}) == len(events)


def test_same_seed_same_output(box):
    first = SyntheticGenerator(random.Random(7), clock=fixed_clock)
    second = SyntheticGenerator(random.Random(7), clock=fixed_clock)

    assert first.generate_flows(box) == second.generate_flows(box)
    assert first.generate_incidents(box) == second.generate_incidents(box)


def test_degenerate_box(generator):
    point = BoundingBox.from_corners(45.0, 9.0, 45.0, 9.0)
    flows = generator.generate_flows(point, 5)
    assert all(f.latitude == 45.0 and f.longitude == 9.0 for f in flows)
