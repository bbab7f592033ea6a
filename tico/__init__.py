"""
tico - Tiny Content-Based Recommender.

Ranks candidate items against a target item by a weighted average of
per-feature distances.

Basic usage:
    >>> from tico import Recommender
    >>>
    >>> rec = (Recommender()
    ...     .feature("abs_diff", normalized=True)
    ...     .feature("smd")
    ...     .feature("abs_diff", normalized=False, weight=2.0))
    >>> results = rec.recommend(traveler, offers)
    >>> results[0].label, results[0].score

Functional usage:
    >>> from tico import recommend, distances
    >>> recommend(target, items, schema=[
    ...     {"distance": distances.abs_diff, "normalized": True, "weight": 1},
    ...     {"distance": "hamming", "normalized": False},
    ... ])

Items are ``Item(label, features)`` instances or mappings with ``label`` and
``features`` keys. Feature order must be the same for every item.
"""

from tico import distances
from tico.base import (
    CallableDistance,
    Distance,
    DistanceShapeError,
    FeatureTypeError,
    Item,
    RecommenderError,
    Result,
    SchemaEntry,
    SchemaMismatchError,
    UnknownDistanceError,
)
from tico.config import ScoringConfig
from tico.core import Recommender, recommend
from tico.distances import (
    AbsoluteDifference,
    Canberra,
    Hamming,
    JaccardDistance,
    Manhattan,
    SimpleMatching,
    available_distances,
    get_distance,
    register_distance,
)
from tico.extractors import FeatureKind, FeatureVector, extract

__version__ = "0.4.0"
__all__ = [
    # Core
    "Recommender",
    "recommend",
    "ScoringConfig",
    # Base classes
    "Distance",
    "CallableDistance",
    "SchemaEntry",
    "Item",
    "Result",
    "FeatureKind",
    "FeatureVector",
    "extract",
    # Distances
    "distances",
    "AbsoluteDifference",
    "Manhattan",
    "Canberra",
    "Hamming",
    "SimpleMatching",
    "JaccardDistance",
    "register_distance",
    "get_distance",
    "available_distances",
    # Errors
    "RecommenderError",
    "SchemaMismatchError",
    "DistanceShapeError",
    "FeatureTypeError",
    "UnknownDistanceError",
]
