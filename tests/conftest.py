"""Shared fixtures: flight offers ranked for a traveler."""

import pytest

from tico import SchemaEntry, distances


@pytest.fixture
def traveler():
    """Traveler preferences (the target item)."""
    return {
        "label": "Traveler 1",
        "features": {
            "expensiveness": 0,
            "trip": 1,
            "seat": [1, 1, 1],
            "ife": True,
            "meal": [1, 2, 3, 4, 5],
            "time": 0,
        },
    }


@pytest.fixture
def offers():
    """Flight offers (the candidate items)."""

    def offer(label, expensiveness, trip, seat, ife, meal, time):
        return {
            "label": label,
            "features": {
                # 0 cheap ... 1 luxury
                "expensiveness": expensiveness,
                # 0 really slow ... 1 super fast
                "trip": trip,
                # Amenities
                "seat": seat,
                # In-flight entertainment
                "ife": ife,
                # Meal rank vector
                "meal": meal,
                # Unnormalized
                "time": time,
            },
        }

    return [
        offer("Flight 1", 0.2, 0, [0, 0, 0], False, [1, 2, 3, 4, 5], 10),
        offer("Flight 2", 0.2, 0.8, [0, 1, 1], True, [3, 1, 2, 5, 4], 2),
        offer("Flight 3", 0.5, 0.91, [0, 0, 1], False, [4, 5, 1, 3, 2], 1.75),
        offer("Flight 4", 0.3, 0, [1, 1, 0], True, [5, 4, 3, 2, 1], 5),
        offer("Flight 5", 0.2, 0.87, [1, 1, 1], True, [3, 1, 2, 5, 4], 1.9),
        offer("Flight (exact)", 0, 1, [1, 1, 1], True, [1, 2, 3, 4, 5], 0),
    ]


@pytest.fixture
def travel_schema():
    """Mixed-type schema for the flight offers."""
    return [
        SchemaEntry(distances.abs_diff, normalized=True, weight=1),
        SchemaEntry(distances.abs_diff, normalized=True, weight=1),
        SchemaEntry(distances.smd, normalized=True, weight=1),
        SchemaEntry(distances.hamming, normalized=True, weight=1),
        SchemaEntry(distances.canberra, normalized=False, weight=1),
        SchemaEntry(distances.abs_diff, normalized=False, weight=1),
    ]
