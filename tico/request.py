"""
Ranking request documents.

A request is a YAML (or JSON) document of the form:

    target:
      label: Traveler 1
      features: {expensiveness: 0, trip: 1, seat: [1, 1, 1]}
    items:
      - label: Flight 1
        features: {expensiveness: 0.2, trip: 0, seat: [0, 0, 0]}
    schema:
      - {distance: abs_diff, normalized: true, weight: 1}
      - {distance: abs_diff, normalized: true}
      - {distance: smd, weight: 2}

Distances are referenced by registry name.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from tico.base import Item, RecommenderError, SchemaEntry

logger = logging.getLogger(__name__)


class RequestError(RecommenderError, ValueError):
    """Malformed request document."""


@dataclass
class RankRequest:
    """Parsed request: target, candidates and schema."""
    target: Item
    items: List[Item] = field(default_factory=list)
    schema: List[SchemaEntry] = field(default_factory=list)


def _parse_item(data: Any, where: str) -> Item:
    if not isinstance(data, dict) or not isinstance(data.get("features"), dict):
        raise RequestError(f"{where} must be a mapping with a 'features' mapping")
    return Item.from_dict(data)


def parse_request(data: Dict[str, Any]) -> RankRequest:
    """
    Build a RankRequest from already-loaded data.

    Args:
        data: Mapping with target, items and schema keys

    Returns:
        RankRequest

    Raises:
        RequestError: If a section is missing or malformed
    """
    if not isinstance(data, dict):
        raise RequestError("Request must be a mapping")

    for key in ("target", "items", "schema"):
        if key not in data:
            raise RequestError(f"Request has no '{key}' section")

    target = _parse_item(data["target"], "target")

    raw_items = data["items"] or []
    if isinstance(raw_items, dict):
        raw_items = [raw_items]
    items = [_parse_item(item, f"items[{i}]") for i, item in enumerate(raw_items)]

    raw_schema = data["schema"]
    if not isinstance(raw_schema, list) or not raw_schema:
        raise RequestError("'schema' must be a non-empty list")

    schema = []
    for i, entry in enumerate(raw_schema):
        if isinstance(entry, str):
            entry = {"distance": entry}
        if not isinstance(entry, dict):
            raise RequestError(f"schema[{i}] must be a mapping or a distance name")
        schema.append(SchemaEntry.from_dict(entry))

    return RankRequest(target=target, items=items, schema=schema)


def load_request(path: Union[str, Path]) -> RankRequest:
    """
    Load a request document from disk.

    YAML is a superset of JSON, so both formats are accepted.

    Args:
        path: Path to the request file

    Returns:
        RankRequest
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RequestError(f"Could not parse {path}: {e}") from e

    logger.debug(f"Loaded request from {path}")
    return parse_request(data)
