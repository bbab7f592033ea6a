"""Feature vector extraction and feature kind classification."""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Tuple

import numpy as np


class FeatureKind(Enum):
    """Tagged kind of a single feature value."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    SEQUENCE = "sequence"
    SET = "set"
    OTHER = "other"


def feature_kind(value: Any) -> FeatureKind:
    """Classify a feature value.

    Booleans are checked before numbers since bool is an int subclass.
    numpy scalars count as numbers or booleans, numpy arrays as sequences.

    Args:
        value: Feature value

    Returns:
        Kind of the value
    """
    if isinstance(value, (bool, np.bool_)):
        return FeatureKind.BOOLEAN
    if isinstance(value, numbers.Number):
        return FeatureKind.NUMBER
    if isinstance(value, str):
        return FeatureKind.STRING
    if isinstance(value, (set, frozenset)):
        return FeatureKind.SET
    if isinstance(value, (list, tuple, np.ndarray)):
        return FeatureKind.SEQUENCE
    return FeatureKind.OTHER


@dataclass(frozen=True)
class FeatureVector:
    """Label plus position-ordered feature values."""

    label: Any
    values: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.values)


def extract(item: Any) -> FeatureVector:
    """Flatten an item's feature mapping into a feature vector.

    Values are taken in the mapping's iteration order; feature names are
    dropped.

    Args:
        item: Item instance or mapping with ``label`` and ``features`` keys

    Returns:
        FeatureVector for the item
    """
    if isinstance(item, Mapping):
        label = item.get("label")
        features = item.get("features")
    else:
        label = getattr(item, "label", None)
        features = getattr(item, "features", None)

    if not isinstance(features, Mapping):
        raise TypeError(f"Item {label!r} has no feature mapping")

    return FeatureVector(label, tuple(features.values()))


def is_single_item(items: Any) -> bool:
    """True if ``items`` is one item rather than a collection of items."""
    if isinstance(items, Mapping):
        return "features" in items
    return hasattr(items, "features")
