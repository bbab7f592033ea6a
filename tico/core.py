"""Core Recommender class with fluent API."""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from tico.base import (
    RecommenderError,
    Result,
    SchemaEntry,
    SchemaMismatchError,
)
from tico.config import ScoringConfig
from tico.extractors import FeatureVector, extract, is_single_item

logger = logging.getLogger(__name__)


class Recommender:
    """Rank candidate items against a target item.

    This class uses a fluent API for configuration:

    Example:
        >>> rec = (Recommender()
        ...     .feature("abs_diff", weight=2.0, normalized=True)
        ...     .feature("smd")
        ...     .feature("abs_diff", normalized=False))
        >>> results = rec.recommend(traveler, offers)

    Each method adds one schema entry (distance + weight + normalization flag)
    for the next feature position. The score of a candidate is the weighted
    average of its per-position distances to the target, after min-max
    rescaling of the positions whose distance is not already normalized.
    Lower scores are more similar.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """Initialize an empty schema.

        Args:
            config: Scoring settings (default ScoringConfig())
        """
        self.schema: List[SchemaEntry] = []
        self.config = config or ScoringConfig()

    # ===== Schema Configuration =====

    def feature(
        self,
        distance: Any,
        weight: float = 1.0,
        normalized: Optional[bool] = None,
        name: Optional[str] = None,
    ) -> "Recommender":
        """Add a schema entry for the next feature position.

        Args:
            distance: Distance, registered distance name, or callable
            weight: Weight for this position (default 1.0)
            normalized: Whether the distance is already normalized
                (default: the distance's own hint)
            name: Optional name for this position

        Returns:
            Self for chaining
        """
        self.schema.append(SchemaEntry(distance, normalized, weight, name))
        return self

    def custom(self, entry: SchemaEntry, name: Optional[str] = None) -> "Recommender":
        """Add a prebuilt schema entry.

        Args:
            entry: Schema entry
            name: Optional name for this position

        Returns:
            Self for chaining
        """
        if name:
            entry.name = name
        self.schema.append(entry)
        return self

    # ===== Core Functionality =====

    def recommend(
        self,
        target: Any,
        items: Any,
        schema: Optional[Sequence[Any]] = None,
    ) -> List[Result]:
        """Compute the weighted average distance of each item to the target.

        Args:
            target: Target item
            items: One item or a sequence of items
            schema: Schema entries, one per feature position
                (default: the schema configured on this recommender)

        Returns:
            One Result per item, sorted by score ascending. Items with equal
            scores keep their input order.

        Raises:
            SchemaMismatchError: If the schema does not fit the feature vectors
            ValueError: If target or items is missing
        """
        entries = self._resolve_schema(schema)

        if target is None:
            raise ValueError("A target item is required")
        if items is None:
            raise ValueError("Candidate items are required")

        target_vector = extract(target)
        space = self._load(items)
        self._validate(entries, target_vector, space)

        if not space:
            return []

        logger.debug(f"Ranking {len(space)} items against {target_vector.label!r}")

        raw = self._distance_matrix(entries, target_vector, space)
        values = self._normalize(entries, raw)

        weights = np.array([entry.weight for entry in entries], dtype=float)
        scores = values @ weights / weights.sum()

        results = [
            Result(label=vector.label, score=float(score), distance_vector=row.tolist())
            for vector, score, row in zip(space, scores, raw)
        ]

        # sorted() is stable
        return sorted(results, key=lambda result: result.score)

    async def recommend_async(
        self,
        target: Any,
        items: Any,
        schema: Optional[Sequence[Any]] = None,
    ) -> List[Result]:
        """Awaitable wrapper for recommend().

        Errors are raised when the coroutine is awaited.
        """
        return self.recommend(target, items, schema)

    # ===== Internals =====

    def _resolve_schema(self, schema: Optional[Sequence[Any]]) -> List[SchemaEntry]:
        if schema is None:
            entries = list(self.schema)
        else:
            entries = [self._as_entry(entry) for entry in schema]

        if not entries:
            raise SchemaMismatchError("Schema is empty. Use .feature() or pass a schema")

        return entries

    @staticmethod
    def _as_entry(entry: Any) -> SchemaEntry:
        if isinstance(entry, SchemaEntry):
            return entry
        if isinstance(entry, Mapping):
            return SchemaEntry.from_dict(entry)
        return SchemaEntry(entry)

    @staticmethod
    def _load(items: Any) -> List[FeatureVector]:
        if is_single_item(items):
            items = [items]
        return [extract(item) for item in items]

    @staticmethod
    def _validate(
        entries: List[SchemaEntry],
        target: FeatureVector,
        space: Iterable[FeatureVector],
    ) -> None:
        if sum(entry.weight for entry in entries) <= 0:
            raise SchemaMismatchError("Schema weights sum to zero")

        for vector in [target, *space]:
            if len(vector) != len(entries):
                raise SchemaMismatchError(
                    f"Item {vector.label!r} has {len(vector)} features "
                    f"but the schema has {len(entries)} entries"
                )

    @staticmethod
    def _distance_matrix(
        entries: List[SchemaEntry],
        target: FeatureVector,
        space: List[FeatureVector],
    ) -> np.ndarray:
        raw = np.empty((len(space), len(entries)), dtype=float)

        for row, vector in enumerate(space):
            for col, entry in enumerate(entries):
                value = float(entry.measure(target.values[col], vector.values[col]))
                if not np.isfinite(value) or value < 0:
                    raise RecommenderError(
                        f"{entry.name} returned {value} for item {vector.label!r}; "
                        "distances must be finite and non-negative"
                    )
                raw[row, col] = value

        return raw

    def _normalize(self, entries: List[SchemaEntry], raw: np.ndarray) -> np.ndarray:
        """Min-max rescale the columns whose distance is not normalized.

        The range of each column is taken over all candidates of this call.
        """
        values = raw.copy()
        flagged = np.array([not entry.normalized for entry in entries])
        if not flagged.any():
            return values

        columns = raw[:, flagged]
        low = columns.min(axis=0)
        high = columns.max(axis=0)
        span = high - low
        degenerate = span == 0

        scaled = columns.copy()
        scaled[:, ~degenerate] = (columns[:, ~degenerate] - low[~degenerate]) / span[~degenerate]

        if degenerate.any():
            names = [e.name for e, f in zip(entries, flagged) if f]
            logger.debug(
                f"Degenerate range for {[n for n, d in zip(names, degenerate) if d]}, "
                f"policy={self.config.degenerate_range}"
            )
            if self.config.degenerate_range == "zero":
                scaled[:, degenerate] = 0.0

        values[:, flagged] = scaled
        return values


def recommend(
    target: Any,
    items: Any,
    schema: Sequence[Any],
    config: Optional[ScoringConfig] = None,
) -> List[Result]:
    """Rank items against target with the given schema.

    Shortcut for ``Recommender(config).recommend(target, items, schema)``.
    """
    return Recommender(config).recommend(target, items, schema)
