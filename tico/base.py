"""Base classes for the ranking engine.

This module defines the core abstractions:
- Distance: Computes a non-negative dissimilarity between two feature values
- SchemaEntry: Combines a distance with a weight and a normalization flag
- Item / Result: What goes into and comes out of a recommendation
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Mapping, Optional, Tuple, TypeVar

from tico.extractors import FeatureKind, feature_kind

T = TypeVar("T")


class RecommenderError(Exception):
    """Base error for the ranking engine."""


class SchemaMismatchError(RecommenderError, ValueError):
    """Schema does not line up with the feature vectors it is applied to."""


class DistanceShapeError(RecommenderError, ValueError):
    """Two feature values do not have matching shapes."""


class FeatureTypeError(RecommenderError, TypeError):
    """A feature value has a kind the distance does not accept."""


class UnknownDistanceError(RecommenderError, KeyError):
    """No distance is registered under the requested name."""


class Distance(ABC, Generic[T]):
    """Computes the distance between two feature values.

    Distances are stateless strategies. Every score must be a non-negative
    real number where 0 means identical.

    Subclasses set ``accepts`` to the feature kinds they understand; values of
    any other kind are rejected with FeatureTypeError before ``distance`` runs.
    ``normalized`` is a hint telling whether results already lie on a common
    [0, 1] scale.

    Examples:
        - AbsoluteDifference: |a - b| for numbers
        - Manhattan: sum of elementwise absolute differences
        - Hamming: count of mismatching positions
        - SimpleMatching: fraction of mismatching positions
    """

    name: str = "distance"
    accepts: Optional[Tuple[FeatureKind, ...]] = None
    normalized: bool = False

    @abstractmethod
    def distance(self, value1: T, value2: T) -> float:
        """Compute distance between two values.

        Args:
            value1: First value
            value2: Second value

        Returns:
            Non-negative distance
        """
        pass

    def check(self, value: Any) -> FeatureKind:
        """Classify a value and make sure this distance accepts it.

        Args:
            value: Feature value

        Returns:
            Kind of the value

        Raises:
            FeatureTypeError: If the kind is not in ``accepts``
        """
        kind = feature_kind(value)
        if self.accepts is not None and kind not in self.accepts:
            allowed = ", ".join(k.value for k in self.accepts)
            raise FeatureTypeError(
                f"{self.name} cannot compare {kind.value} values (expects {allowed}): {value!r}"
            )
        return kind

    def __call__(self, value1: T, value2: T) -> float:
        self.check(value1)
        self.check(value2)
        return self.distance(value1, value2)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class CallableDistance(Distance):
    """Adapts a plain two-argument function to the Distance interface."""

    def __init__(
        self,
        func: Callable[[Any, Any], float],
        name: Optional[str] = None,
        normalized: bool = False,
    ):
        self.func = func
        self.name = name or getattr(func, "__name__", "custom")
        self.normalized = normalized

    def distance(self, value1, value2) -> float:
        return self.func(value1, value2)

    def __repr__(self) -> str:
        return f"CallableDistance({self.name})"


def as_distance(distance: Any) -> Distance:
    """Coerce a Distance, registry name, or callable into a Distance.

    Args:
        distance: Distance instance, registered name, or two-argument callable

    Returns:
        Distance instance

    Raises:
        UnknownDistanceError: If a name is not registered
        TypeError: If the value cannot be used as a distance
    """
    if isinstance(distance, Distance):
        return distance
    if isinstance(distance, str):
        from tico.distances import get_distance

        return get_distance(distance)
    if callable(distance):
        return CallableDistance(distance)
    raise TypeError(f"Not a distance: {distance!r}")


class SchemaEntry:
    """Combines a distance with a weight and a normalization flag.

    A SchemaEntry describes one feature position of the feature vector.

    Attributes:
        distance: Distance strategy for this position
        normalized: True if the distance is already on a comparable scale,
            False if it must be min-max rescaled across the candidates
        weight: Contribution of this position to the final score
        name: Optional name for this position
    """

    def __init__(
        self,
        distance: Any,
        normalized: Optional[bool] = None,
        weight: Optional[float] = 1.0,
        name: Optional[str] = None,
    ):
        """Initialize a schema entry.

        Args:
            distance: Distance, registered distance name, or callable
            normalized: Normalization flag (default: the distance's own hint)
            weight: Weight for this position (default 1.0)
            name: Optional name for this position

        Raises:
            SchemaMismatchError: If the weight is negative or not finite
        """
        self.distance = as_distance(distance)
        self.normalized = self.distance.normalized if normalized is None else bool(normalized)
        self.weight = 1.0 if weight is None else float(weight)
        if not math.isfinite(self.weight) or self.weight < 0:
            raise SchemaMismatchError(f"Weight must be finite and non-negative, got {weight}")
        self.name = name or self.distance.name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaEntry":
        """Create from a mapping with distance/normalized/weight/name keys."""
        if "distance" not in data:
            raise SchemaMismatchError(f"Schema entry has no distance: {dict(data)!r}")
        return cls(
            distance=data["distance"],
            normalized=data.get("normalized"),
            weight=data.get("weight", 1.0),
            name=data.get("name"),
        )

    def measure(self, value1: Any, value2: Any) -> float:
        """Raw distance between two values at this position."""
        return self.distance(value1, value2)

    def __repr__(self) -> str:
        return (
            f"SchemaEntry(name={self.name!r}, distance={self.distance!r}, "
            f"normalized={self.normalized}, weight={self.weight})"
        )


@dataclass
class Item:
    """A label plus an ordered mapping of feature name to value."""

    label: Any
    features: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """Create from ``{"label": ..., "features": {...}}``."""
        return cls(label=data.get("label"), features=data.get("features") or {})


@dataclass
class Result:
    """Ranked candidate: label, score, and the raw distances behind the score."""

    label: Any
    score: float = 0.0
    distance_vector: List[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "label": self.label,
            "score": self.score,
            "distance_vector": list(self.distance_vector),
        }
