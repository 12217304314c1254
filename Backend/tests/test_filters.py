"""
Incident filter, grouping and display label tests
"""
import random
from datetime import timedelta

from traffictrack.models.records import (
    EventType,
    Severity,
    display_name_for_severity,
    display_name_for_type,
)
from traffictrack.models.schemas import EventFilter
from traffictrack.services.filters import filter_events, group_by_type, to_event_info
from traffictrack.services.synthetic import SyntheticGenerator
from conftest import NOW, fixed_clock, make_event


def synthetic_events(box, count=60):
    generator = SyntheticGenerator(random.Random(99), clock=fixed_clock)
    return generator.generate_incidents(box, count)


class TestFilterEvents:

    def test_no_filters_keeps_everything(self, box):
        events = synthetic_events(box)
        assert filter_events(events, None) == events
        assert filter_events(events, EventFilter()) == events

    def test_type_and_severity_compose(self, box):
        events = synthetic_events(box)
        filters = EventFilter(event_type=EventType.ACCIDENT, severity=Severity.CRITICAL)

        result = filter_events(events, filters)

        expected = [e for e in events if e.type == "Accident" and e.severity == "Critical"]
        assert result == expected
        assert sum(group_by_type(result).values()) == len(result)

    def test_date_range_is_inclusive(self):
        older = make_event(started=timedelta(hours=10))
        middle = make_event(started=timedelta(hours=5))
        newer = make_event(started=timedelta(hours=1))

        filters = EventFilter(from_date=NOW - timedelta(hours=10), to_date=NOW - timedelta(hours=5))
        assert filter_events([older, middle, newer], filters) == [older, middle]

    def test_reversed_date_range_matches_nothing(self):
        events = [make_event(started=timedelta(hours=h)) for h in range(1, 5)]
        filters = EventFilter(from_date=NOW, to_date=NOW - timedelta(days=1))
        assert filter_events(events, filters) == []


class TestGrouping:

    def test_counts_only_present_types(self):
        events = [
            make_event("Accident"),
            make_event("Accident", started=timedelta(hours=3)),
            make_event("Weather"),
        ]
        assert group_by_type(events) == {"Accident": 2, "Weather": 1}

    def test_grouping_sums_to_total(self, box):
        events = synthetic_events(box)
        assert sum(group_by_type(events).values()) == len(events)


class TestDisplayNames:

    def test_known_values(self):
        assert display_name_for_type("TrafficJam") == "Traffic Jam"
        assert display_name_for_severity("Major") == "High"

    def test_unknown_values_label_themselves(self):
        assert display_name_for_type("Flooding") == "Flooding"
        assert display_name_for_severity("Extreme") == "Extreme"

    def test_event_info_carries_labels(self):
        info = to_event_info(make_event("Construction", "Moderate"))
        assert info.type_display_name == "Roadworks"
        assert info.severity_display_name == "Moderate"
