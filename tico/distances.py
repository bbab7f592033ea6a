"""Concrete distance implementations and the distance registry."""

import logging
from typing import Any, Callable, Dict, List, Sequence, Set, Union

import numpy as np

from tico.base import (
    CallableDistance,
    Distance,
    DistanceShapeError,
    FeatureTypeError,
    UnknownDistanceError,
)
from tico.extractors import FeatureKind, feature_kind

logger = logging.getLogger(__name__)

NUMERIC = (FeatureKind.NUMBER, FeatureKind.BOOLEAN)


def _check_lengths(name: str, value1: Sequence, value2: Sequence) -> None:
    if len(value1) != len(value2):
        raise DistanceShapeError(
            f"{name} needs equal lengths, got {len(value1)} and {len(value2)}"
        )


def _as_vectors(name: str, value1, value2):
    try:
        x = np.asarray(value1, dtype=float)
        y = np.asarray(value2, dtype=float)
    except (TypeError, ValueError) as e:
        raise FeatureTypeError(f"{name} needs numeric sequences: {e}") from e
    if x.ndim != 1 or y.ndim != 1:
        raise DistanceShapeError(f"{name} needs flat sequences, got shapes {x.shape} and {y.shape}")
    _check_lengths(name, x, y)
    return x, y


class AbsoluteDifference(Distance[float]):
    """Absolute difference for quantitative values.

    Computes |a - b|
    """

    name = "abs_diff"
    accepts = NUMERIC

    def distance(self, value1: float, value2: float) -> float:
        return abs(float(value1) - float(value2))


class Manhattan(Distance[Sequence[float]]):
    """City block distance for quantitative vectors.

    Computes sum(|a_i - b_i|)
    """

    name = "manhattan"
    accepts = (FeatureKind.SEQUENCE,)

    def distance(self, value1: Sequence[float], value2: Sequence[float]) -> float:
        x, y = _as_vectors(self.name, value1, value2)
        return float(np.abs(x - y).sum())


class Canberra(Distance[Sequence[float]]):
    """Canberra distance, useful for comparing ranked lists.

    Computes sum(|a_i - b_i| / (|a_i| + |b_i|))

    A term whose operands are both zero has no defined value; it contributes
    ``zero_term`` instead.

    Attributes:
        zero_term: Value of a 0/0 term (default 0.0)
    """

    name = "canberra"
    accepts = (FeatureKind.SEQUENCE,)

    def __init__(self, zero_term: float = 0.0):
        self.zero_term = zero_term

    def distance(self, value1: Sequence[float], value2: Sequence[float]) -> float:
        x, y = _as_vectors(self.name, value1, value2)
        numerator = np.abs(x - y)
        denominator = np.abs(x) + np.abs(y)
        terms = np.full_like(numerator, self.zero_term)
        np.divide(numerator, denominator, out=terms, where=denominator != 0)
        return float(terms.sum())


def _hamming(value1: Any, value2: Any) -> int:
    kind1, kind2 = feature_kind(value1), feature_kind(value2)

    if kind1 is FeatureKind.STRING and kind2 is FeatureKind.STRING:
        _check_lengths("hamming", value1, value2)
        return sum(1 for c1, c2 in zip(value1, value2) if c1 != c2)

    if kind1 is FeatureKind.SEQUENCE or kind2 is FeatureKind.SEQUENCE:
        if kind1 is not kind2:
            raise DistanceShapeError(
                f"hamming cannot compare {kind1.value} with {kind2.value}"
            )
        _check_lengths("hamming", value1, value2)
        return sum(_hamming(v1, v2) for v1, v2 in zip(value1, value2))

    return 0 if value1 == value2 else 1


class Hamming(Distance):
    """Hamming distance for binary, nominal values and strings.

    Scalars: 0 if equal, 1 otherwise.
    Strings: number of differing character positions.
    Sequences: sum of elementwise Hamming distances (nested allowed).
    """

    name = "hamming"
    accepts = (
        FeatureKind.NUMBER,
        FeatureKind.BOOLEAN,
        FeatureKind.STRING,
        FeatureKind.SEQUENCE,
    )

    def distance(self, value1, value2) -> int:
        return _hamming(value1, value2)


class SimpleMatching(Distance[Sequence]):
    """Simple matching distance.

    Fraction of mismatching positions, for vectors where positive and
    negative values carry equal information. Elements are compared as
    whole scalars; nested sequences are rejected.

    Returns:
        0.0 if all positions match
        1.0 if no position matches
    """

    name = "smd"
    accepts = (FeatureKind.SEQUENCE, FeatureKind.STRING)
    normalized = True

    def distance(self, value1: Sequence, value2: Sequence) -> float:
        _check_lengths(self.name, value1, value2)
        if len(value1) == 0:
            return 0.0
        mismatches = 0
        for v1, v2 in zip(value1, value2):
            for v in (v1, v2):
                if feature_kind(v) in (FeatureKind.SEQUENCE, FeatureKind.SET):
                    raise FeatureTypeError(f"{self.name} needs flat sequences of scalars, got {v!r}")
            mismatches += 0 if v1 == v2 else 1
        return mismatches / len(value1)


class JaccardDistance(Distance[Set]):
    """Jaccard distance for sets.

    Computes 1 - |A ∩ B| / |A ∪ B|

    Returns:
        0.0 if sets are identical (or both empty)
        1.0 if sets have no overlap
    """

    name = "jaccard"
    accepts = (FeatureKind.SET, FeatureKind.SEQUENCE)
    normalized = True

    def distance(self, value1, value2) -> float:
        set1, set2 = set(value1), set(value2)

        if not set1 and not set2:
            return 0.0

        return 1.0 - len(set1 & set2) / len(set1 | set2)


abs_diff = AbsoluteDifference()
manhattan = Manhattan()
canberra = Canberra()
hamming = Hamming()
smd = SimpleMatching()
jaccard = JaccardDistance()

_REGISTRY: Dict[str, Distance] = {
    "abs_diff": abs_diff,
    "manhattan": manhattan,
    "canberra": canberra,
    "hamming": hamming,
    "smd": smd,
    "simple_matching": smd,
    "jaccard": jaccard,
}


def register_distance(
    name: str,
    distance: Union[Distance, Callable[[Any, Any], float]],
    replace: bool = False,
    normalized: bool = False,
) -> Distance:
    """Register a custom distance under a name.

    Args:
        name: Registry key
        distance: Distance instance or two-argument callable
        replace: Allow overwriting an existing name (default False)
        normalized: Normalization hint for wrapped callables

    Returns:
        The registered Distance

    Raises:
        ValueError: If the name is taken and replace is False
    """
    if name in _REGISTRY and not replace:
        raise ValueError(f"Distance already registered: {name}")

    if not isinstance(distance, Distance):
        if not callable(distance):
            raise TypeError(f"Not a distance: {distance!r}")
        distance = CallableDistance(distance, name=name, normalized=normalized)

    _REGISTRY[name] = distance
    logger.debug(f"Registered distance {name}: {distance!r}")
    return distance


def unregister_distance(name: str) -> None:
    """Remove a distance from the registry.

    Raises:
        UnknownDistanceError: If no distance has that name
    """
    if name not in _REGISTRY:
        raise UnknownDistanceError(name)
    del _REGISTRY[name]


def get_distance(name: str) -> Distance:
    """Look up a registered distance.

    Raises:
        UnknownDistanceError: If no distance has that name
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnknownDistanceError(
            f"Unknown distance {name!r}. Available: {', '.join(available_distances())}"
        ) from None


def available_distances() -> List[str]:
    """Sorted names of all registered distances."""
    return sorted(_REGISTRY)
