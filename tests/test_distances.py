"""Tests for the distance functions and the distance registry."""

import math

import numpy as np
import pytest

from tico import distances
from tico.base import (
    CallableDistance,
    DistanceShapeError,
    FeatureTypeError,
    UnknownDistanceError,
)
from tico.distances import (
    Canberra,
    available_distances,
    get_distance,
    register_distance,
    unregister_distance,
)
from tico.extractors import FeatureKind, feature_kind


# ============================================================================
# Absolute Difference
# ============================================================================


def test_abs_diff():
    """Test absolute differences."""
    assert distances.abs_diff(0, 0) == 0
    assert distances.abs_diff(-1, -1) == 0
    assert distances.abs_diff(-1, 0) == 1
    assert distances.abs_diff(-1, 1) == 2
    assert distances.abs_diff(2, -3) == 5
    assert distances.abs_diff(2, 3) == 1
    assert distances.abs_diff(-4, -3) == 1
    assert distances.abs_diff(3, 7) == 4


def test_abs_diff_symmetric():
    """Test that absolute difference does not depend on argument order."""
    for a, b in [(0.2, 0.9), (-3, 4), (10, 1.75), (True, False)]:
        assert distances.abs_diff(a, b) == distances.abs_diff(b, a)


def test_abs_diff_accepts_numpy_scalars():
    """numpy scalars count as numbers."""
    assert distances.abs_diff(np.float64(1.5), np.int64(3)) == pytest.approx(1.5)


def test_abs_diff_rejects_sequences():
    """Sequences are not numbers."""
    with pytest.raises(FeatureTypeError):
        distances.abs_diff([1, 2], [3, 4])

    with pytest.raises(FeatureTypeError):
        distances.abs_diff("a", "b")


# ============================================================================
# Manhattan
# ============================================================================


def test_manhattan():
    """Test manhattan distance."""
    assert distances.manhattan([0, 3, 4, 5], [7, 6, 3, -1]) == 17


def test_manhattan_reflexive():
    """A vector has distance 0 to itself."""
    assert distances.manhattan([0, 3, 4, 5], [0, 3, 4, 5]) == 0
    assert distances.manhattan(np.array([1.5, -2.0]), np.array([1.5, -2.0])) == 0


def test_manhattan_length_mismatch():
    """Vectors must have the same length."""
    with pytest.raises(DistanceShapeError):
        distances.manhattan([1, 2, 3], [1, 2])


def test_manhattan_non_numeric():
    """Sequences of strings are not numeric vectors."""
    with pytest.raises(FeatureTypeError):
        distances.manhattan(["a", "b"], ["c", "d"])


def test_manhattan_does_not_mutate_inputs():
    """Inputs are left untouched."""
    a, b = [0, 3, 4, 5], [7, 6, 3, -1]
    distances.manhattan(a, b)
    assert a == [0, 3, 4, 5]
    assert b == [7, 6, 3, -1]


# ============================================================================
# Canberra
# ============================================================================


def test_canberra():
    """Test canberra distance."""
    assert distances.canberra([0, 3, 4, 5], [7, 6, 3, -1]) == pytest.approx(2.476, abs=0.1)


def test_canberra_identical_vectors():
    """Identical non-zero vectors have distance 0."""
    assert distances.canberra([1, 2, 3, 4, 5], [1, 2, 3, 4, 5]) == 0


def test_canberra_zero_terms():
    """A term with both operands zero contributes zero_term instead of NaN."""
    result = distances.canberra([0, 1], [0, 3])
    assert not math.isnan(result)
    assert result == pytest.approx(0.5)

    assert distances.canberra([0, 0], [0, 0]) == 0
    assert Canberra(zero_term=1.0).distance([0, 1], [0, 1]) == 1.0


# ============================================================================
# Hamming
# ============================================================================


def test_hamming_scalars():
    """Test hamming distance on booleans and numbers."""
    assert distances.hamming(True, True) == 0
    assert distances.hamming(False, True) == 1
    assert distances.hamming(False, False) == 0
    assert distances.hamming(True, False) == 1
    assert distances.hamming(2, 2) == 0
    assert distances.hamming(2, 2000) == 1


def test_hamming_strings():
    """Strings are compared character by character."""
    assert distances.hamming("karolin", "karolin") == 0
    assert distances.hamming("karolin", "kathrin") == 3
    assert distances.hamming("2173896", "2233796") == 3


def test_hamming_sequences():
    """Sequences sum elementwise distances, recursing into nested values."""
    assert distances.hamming([1, 0, 1], [1, 1, 1]) == 1
    assert distances.hamming([[1, 0], [0, 0]], [[1, 1], [1, 1]]) == 3
    assert distances.hamming(["ab", "cd"], ["ab", "ce"]) == 1


def test_hamming_length_mismatch():
    """Strings and sequences must have equal lengths."""
    with pytest.raises(DistanceShapeError):
        distances.hamming("abc", "ab")

    with pytest.raises(DistanceShapeError):
        distances.hamming([1, 2], [1])


def test_hamming_sequence_against_scalar():
    """A sequence cannot be compared with a scalar."""
    with pytest.raises(DistanceShapeError):
        distances.hamming([1, 2], 1)


# ============================================================================
# Simple Matching
# ============================================================================


def test_smd():
    """Test simple matching distance."""
    assert distances.smd([1, 1, 1, 1], [0, 1, 0, 0]) == 0.75
    assert distances.smd([1, 1, 1, 1], [0, 1, 0, 1]) == 0.5


def test_smd_reflexive_and_bounded():
    """SMD is 0 for equal vectors and at most 1."""
    assert distances.smd([1, 0, 1], [1, 0, 1]) == 0
    assert distances.smd([1, 1, 1], [0, 0, 0]) == 1.0
    assert distances.smd([], []) == 0.0


def test_smd_length_mismatch():
    """Vectors must have equal lengths."""
    with pytest.raises(DistanceShapeError):
        distances.smd([1, 1], [1])


def test_smd_rejects_nested_sequences():
    """Elements must be scalars so the result stays within [0, 1]."""
    with pytest.raises(FeatureTypeError):
        distances.smd([[1, 2]], [[3, 4]])

    with pytest.raises(FeatureTypeError):
        distances.smd([1, {2}], [1, {3}])


# ============================================================================
# Jaccard
# ============================================================================


def test_jaccard():
    """Test Jaccard distance on sets."""
    assert distances.jaccard({"a", "b"}, {"a", "b"}) == 0.0
    assert distances.jaccard({"a"}, {"b"}) == 1.0
    assert distances.jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(2 / 3)
    assert distances.jaccard(set(), set()) == 0.0
    assert distances.jaccard(["a", "a", "b"], ["b", "a"]) == 0.0


# ============================================================================
# Feature Kinds
# ============================================================================


def test_feature_kind():
    """Test classification of feature values."""
    assert feature_kind(True) is FeatureKind.BOOLEAN
    assert feature_kind(np.bool_(False)) is FeatureKind.BOOLEAN
    assert feature_kind(3) is FeatureKind.NUMBER
    assert feature_kind(2.5) is FeatureKind.NUMBER
    assert feature_kind("abc") is FeatureKind.STRING
    assert feature_kind([1, 2]) is FeatureKind.SEQUENCE
    assert feature_kind((1, 2)) is FeatureKind.SEQUENCE
    assert feature_kind(np.zeros(3)) is FeatureKind.SEQUENCE
    assert feature_kind({"a"}) is FeatureKind.SET
    assert feature_kind(None) is FeatureKind.OTHER
    assert feature_kind({"a": 1}) is FeatureKind.OTHER


# ============================================================================
# Registry
# ============================================================================


def test_builtin_distances_registered():
    """All built-in distances are available by name."""
    names = available_distances()
    for name in ["abs_diff", "manhattan", "canberra", "hamming", "smd", "jaccard"]:
        assert name in names

    assert get_distance("simple_matching") is distances.smd


def test_unknown_distance():
    """Unknown names raise a KeyError."""
    with pytest.raises(UnknownDistanceError):
        get_distance("no-such-distance")

    with pytest.raises(KeyError):
        get_distance("no-such-distance")


def test_register_callable():
    """Plain functions are wrapped into CallableDistance."""
    try:
        registered = register_distance("squared", lambda a, b: (a - b) ** 2)
        assert isinstance(registered, CallableDistance)
        assert get_distance("squared")(1, 4) == 9
        assert "squared" in available_distances()
    finally:
        unregister_distance("squared")

    assert "squared" not in available_distances()


def test_register_duplicate():
    """Existing names are protected unless replace=True."""
    with pytest.raises(ValueError):
        register_distance("manhattan", lambda a, b: 0)

    original = get_distance("manhattan")
    try:
        register_distance("manhattan", lambda a, b: 0, replace=True)
        assert get_distance("manhattan")([1], [5]) == 0
    finally:
        register_distance("manhattan", original, replace=True)

    assert get_distance("manhattan") is original
